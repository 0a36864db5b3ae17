"""Core types for just-cond."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, AsyncContextManager, Literal, Protocol

if TYPE_CHECKING:
    from .fs.mode import FileMode


@dataclass
class ExecResult:
    """Result of running a test builtin."""

    stdout: str = ""
    """Standard output."""

    stderr: str = ""
    """Standard error (diagnostics are reported here)."""

    exit_code: int = 0
    """Exit status: 0 true, 1 false, 2 usage error or invalid regex."""

    env: dict[str, str] = field(default_factory=dict)
    """Variables after execution."""


@dataclass(frozen=True)
class FsStat:
    """Metadata returned by a filesystem probe."""

    mode: "FileMode"
    """Type and permission bits."""

    size: int = 0
    """Size in bytes."""

    mtime: float = 0.0
    """Modification time (seconds since the epoch)."""

    dev: int = 0
    """Device identifier."""

    ino: int = 0
    """Inode number."""

    @property
    def is_file(self) -> bool:
        return self.mode.is_regular

    @property
    def is_directory(self) -> bool:
        return self.mode.is_dir

    @property
    def is_symbolic_link(self) -> bool:
        return self.mode.is_symlink


ProbeMode = Literal["r", "w"]


class IFileSystem(Protocol):
    """Filesystem view used by the conditional evaluator.

    Probe methods raise ``OSError`` subclasses (``FileNotFoundError``,
    ``PermissionError``, ...) on failure.
    """

    def resolve_path(self, base: str, path: str) -> str:
        """Resolve path relative to base. An empty path stays empty."""
        ...

    async def stat(self, path: str) -> FsStat:
        """Probe metadata, following symlinks."""
        ...

    async def lstat(self, path: str) -> FsStat:
        """Probe metadata without following a final symlink."""
        ...

    def open_probe(self, path: str, mode: ProbeMode) -> AsyncContextManager[None]:
        """Open path read-only ("r") or write-only ("w") for a permission probe.

        The handle is released when the context exits.
        """
        ...

    def isatty(self, fd: int) -> bool:
        """Whether descriptor fd is attached to a terminal."""
        ...

    async def exists(self, path: str) -> bool:
        ...

    async def write_file(self, path: str, content: str | bytes) -> None:
        ...

    async def mkdir(self, path: str, recursive: bool = False) -> None:
        ...

    async def symlink(self, target: str, link_path: str) -> None:
        ...

    async def rm(self, path: str, recursive: bool = False) -> None:
        ...

    async def chmod(self, path: str, mode: int) -> None:
        ...

    async def utimes(self, path: str, atime: float, mtime: float) -> None:
        ...
