"""Interpreter types for just-cond."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Awaitable, Callable, Optional

from .errors import FatalError

if TYPE_CHECKING:
    from ..ast.types import WordLeaf
    from ..types import IFileSystem


@dataclass
class VariableMetadata:
    """Per-variable metadata that can't be represented in the flat env dict."""

    attributes: set[str] = field(default_factory=set)
    """Variable attributes; "n" marks a nameref."""


class VariableStore(dict):
    """Variable table: a dict of name -> value plus per-name metadata.

    A name is *set* when it has a key, even if the value is empty. A
    nameref stores its target name as its value and carries the "n"
    attribute.
    """

    _metadata: dict[str, VariableMetadata]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._metadata = {}

    def get_metadata(self, name: str) -> VariableMetadata:
        """Get or create metadata for a variable."""
        if name not in self._metadata:
            self._metadata[name] = VariableMetadata()
        return self._metadata[name]

    def is_nameref(self, name: str) -> bool:
        """Check if a variable is a nameref."""
        meta = self._metadata.get(name)
        return meta is not None and "n" in meta.attributes

    def set_nameref(self, name: str, target: str) -> None:
        """Bind name as a nameref pointing to target."""
        meta = self.get_metadata(name)
        meta.attributes.add("n")
        self[name] = target

    def unset(self, name: str) -> None:
        """Remove a binding and its metadata."""
        self.pop(name, None)
        self._metadata.pop(name, None)

    def copy(self) -> VariableStore:
        """Create a shallow copy that includes metadata."""
        new = VariableStore(super().copy())
        new._metadata = {
            k: VariableMetadata(attributes=set(v.attributes))
            for k, v in self._metadata.items()
        }
        return new

    def to_env_dict(self) -> dict[str, str]:
        """Return a plain dict copy (for ExecResult)."""
        return dict(self)


@dataclass
class ShellOptions:
    """Shell options visible to ``-o``."""

    errexit: bool = False
    """set -e: Exit immediately if a command exits with non-zero status."""


@dataclass
class InterpreterState:
    """Mutable state the evaluator reads and, for exit status, writes."""

    env: VariableStore = field(default_factory=VariableStore)
    """Variable table."""

    cwd: str = "/home/user"
    """Current working directory, used to resolve relative paths."""

    options: ShellOptions = field(default_factory=ShellOptions)
    """Shell options."""

    last_exit_code: int = 0
    """Exit status signalled during evaluation (2 after an invalid regex)."""


async def _literal_word(word: "WordLeaf") -> str:
    from .expansion import expand_word

    return expand_word(word)


async def _literal_pattern(word: "WordLeaf") -> str:
    from .expansion import expand_word_for_pattern

    return expand_word_for_pattern(word)


@dataclass
class InterpreterContext:
    """Capabilities the evaluator uses from its host interpreter.

    A context belongs to one evaluation at a time; independent
    evaluations may run concurrently with their own contexts.
    """

    state: InterpreterState
    """Variables, cwd, options and exit status."""

    fs: "IFileSystem"
    """Filesystem view."""

    expand_word: Callable[["WordLeaf"], Awaitable[str]] = _literal_word
    """Word expansion collaborator."""

    expand_pattern: Callable[["WordLeaf"], Awaitable[str]] = _literal_pattern
    """Expands a word for use as a glob pattern."""

    def resolve_path(self, path: str) -> str:
        """Resolve path against the virtual working directory."""
        return self.fs.resolve_path(self.state.cwd, path)

    async def look_path(self, name: str) -> Optional[str]:
        """Find an executable the way command lookup does.

        A name containing "/" must itself be a non-directory with an
        execute bit; a bare name is searched for in $PATH.
        """
        if "/" in name:
            candidates = [name]
        else:
            dirs = self.state.env.get("PATH", "").split(":")
            candidates = [posixpath.join(d or ".", name) for d in dirs]
        for candidate in candidates:
            try:
                info = await self.fs.stat(self.resolve_path(candidate))
            except OSError:
                continue
            if not info.is_directory and info.mode.is_executable:
                return candidate
        return None

    def lookup_var(self, name: str) -> Optional[str]:
        """Return a variable's value, or None when unbound."""
        return self.state.env.get(name)

    @property
    def stop_on_cmd_err(self) -> bool:
        """Whether errexit is on."""
        return self.state.options.errexit

    def set_exit_status(self, code: int) -> None:
        self.state.last_exit_code = code

    def fatal(self, message: str) -> None:
        """Report a defect in the expression tree. Does not return."""
        raise FatalError(message)
