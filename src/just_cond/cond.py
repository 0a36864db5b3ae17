"""Main Conditional class - the primary API for just-cond.

Example usage:
    from just_cond import Conditional

    # Synchronous usage (for REPL, scripts)
    cond = Conditional(files={"/tmp/x": "data"})
    result = cond.run(["[[", "-f", "/tmp/x", "&&", "3", "-lt", "5", "]]"])
    print(result.exit_code)  # 0

    # Async usage (for async applications)
    result = await cond.exec(["test", "-d", "/tmp"])

    # Evaluate a tree built by an external parser
    truth = await cond.evaluate(UnaryTest(UnaryOperator.DIRECTORY, WordLeaf("/tmp")))
    print(repr(truth))  # '1'

    # Against the real filesystem
    cond = Conditional(fs=OsFs(), cwd=os.getcwd())
"""

import asyncio
from typing import Optional, Sequence

import nest_asyncio  # type: ignore[import-untyped]

from .ast.types import TestExpr, WordLeaf
from .fs import InMemoryFs
from .interpreter import (
    FatalError,
    InterpreterContext,
    InterpreterState,
    ShellOptions,
    VariableStore,
    evaluate_conditional,
)
from .interpreter.builtins import BUILTINS
from .types import ExecResult, IFileSystem


class Conditional:
    """Evaluates test / [ / [[ expressions against a host environment.

    Defaults to an in-memory virtual filesystem; pass ``fs=OsFs()`` to
    probe the real disk.
    """

    def __init__(
        self,
        *,
        fs: Optional[IFileSystem] = None,
        files: Optional[dict[str, str | bytes]] = None,
        cwd: str = "/home/user",
        env: Optional[dict[str, str]] = None,
        errexit: bool = False,
    ):
        """Initialize the evaluator.

        Args:
            fs: Filesystem to use. If not provided, creates an InMemoryFs.
            files: Initial files to create (requires default InMemoryFs).
            cwd: Working directory relative paths are resolved against.
            env: Initial variables.
            errexit: Whether ``-o errexit`` reports the option as set.
        """
        if fs is not None:
            self._fs = fs
        else:
            self._fs = InMemoryFs(initial_files=files or {})

        default_env = VariableStore({
            "PATH": "/usr/local/bin:/usr/bin:/bin",
            "HOME": "/home/user",
            "PWD": cwd,
        })
        if env:
            default_env.update(env)

        self._initial_state = InterpreterState(
            env=default_env,
            cwd=cwd,
            options=ShellOptions(errexit=errexit),
        )
        self._ctx = self._new_context()

    def _new_context(self) -> InterpreterContext:
        state = InterpreterState(
            env=self._initial_state.env.copy(),
            cwd=self._initial_state.cwd,
            options=ShellOptions(errexit=self._initial_state.options.errexit),
        )
        return InterpreterContext(state=state, fs=self._fs)

    @property
    def fs(self) -> IFileSystem:
        """Get the filesystem."""
        return self._fs

    @property
    def state(self) -> InterpreterState:
        """Get the mutable interpreter state."""
        return self._ctx.state

    @property
    def env(self) -> VariableStore:
        """Get the variable table."""
        return self._ctx.state.env

    @property
    def cwd(self) -> str:
        """Get the current working directory."""
        return self._ctx.state.cwd

    async def evaluate(self, expr: TestExpr) -> str:
        """Evaluate a test-expression tree to its truth string ("" or "1").

        Raises FatalError if the tree is malformed.
        """
        return await evaluate_conditional(self._ctx, expr)

    async def exec(self, argv: Sequence[str | WordLeaf]) -> ExecResult:
        """Run ``test``, ``[`` or ``[[`` with already-expanded words.

        Args:
            argv: The command name followed by its words, e.g.
                ``["[", "-f", "x", "]"]``.

        Returns:
            ExecResult with exit_code 0 (true), 1 (false) or 2 (error).
        """
        if not argv:
            return ExecResult(stdout="", stderr="", exit_code=0,
                              env=self.env.to_env_dict())
        name = argv[0].value if isinstance(argv[0], WordLeaf) else argv[0]
        handler = BUILTINS.get(name)
        if handler is None:
            return ExecResult(stdout="", stderr=f"bash: {name}: command not found\n",
                              exit_code=127, env=self.env.to_env_dict())
        try:
            return await handler(self._ctx, list(argv[1:]))
        except FatalError as e:
            return ExecResult(stdout="", stderr=f"bash: {e.message}\n",
                              exit_code=e.exit_code, env=self.env.to_env_dict())

    def run(self, argv: Sequence[str | WordLeaf]) -> ExecResult:
        """Run ``test``, ``[`` or ``[[`` synchronously.

        This is a convenience wrapper around exec() that works in any context,
        including Jupyter notebooks and async frameworks.
        """
        try:
            asyncio.get_running_loop()
            # We're in an existing event loop (Jupyter, async framework, etc.)
            # Apply nest_asyncio to allow nested event loops
            nest_asyncio.apply()
        except RuntimeError:
            # No running event loop, asyncio.run() will work fine
            pass
        return asyncio.run(self.exec(argv))

    def reset(self) -> None:
        """Reset variables, cwd and options to their initial values."""
        self._ctx = self._new_context()
