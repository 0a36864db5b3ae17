"""In-memory filesystem.

A deterministic stand-in for the real disk: every probe the conditional
evaluator makes (stat, lstat, open-for-probe, isatty) is answered from a
dict of entries, so tests never touch real files or descriptors.
"""

from __future__ import annotations

import errno
import posixpath
import stat
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Literal, Optional, Union

from ..types import FsStat, ProbeMode
from .mode import FileMode

_MAX_SYMLINKS = 40

NodeKind = Literal["char", "block", "fifo", "socket"]

_NODE_TYPES: dict[str, int] = {
    "char": stat.S_IFCHR,
    "block": stat.S_IFBLK,
    "fifo": stat.S_IFIFO,
    "socket": stat.S_IFSOCK,
}


@dataclass
class FileEntry:
    """A regular file."""

    content: bytes = b""
    mode: FileMode = field(default_factory=lambda: FileMode.of(stat.S_IFREG, 0o644))
    mtime: float = field(default_factory=time.time)
    ino: int = 0


@dataclass
class DirectoryEntry:
    """A directory."""

    mode: FileMode = field(default_factory=lambda: FileMode.of(stat.S_IFDIR, 0o755))
    mtime: float = field(default_factory=time.time)
    ino: int = 0


@dataclass
class SymlinkEntry:
    """A symbolic link."""

    target: str = ""
    mode: FileMode = field(default_factory=lambda: FileMode.of(stat.S_IFLNK, 0o777))
    mtime: float = field(default_factory=time.time)
    ino: int = 0


@dataclass
class NodeEntry:
    """A device, FIFO or socket node."""

    mode: FileMode = field(default_factory=lambda: FileMode.of(stat.S_IFIFO, 0o644))
    mtime: float = field(default_factory=time.time)
    ino: int = 0


FsEntry = Union[FileEntry, DirectoryEntry, SymlinkEntry, NodeEntry]


def _normalize(path: str) -> str:
    if not path.startswith("/"):
        path = "/" + path
    normalized = posixpath.normpath(path)
    # normpath keeps a leading "//"
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    return normalized


class InMemoryFs:
    """In-memory implementation of IFileSystem.

    The sandbox user owns every entry, so permission checks look at the
    owner bits only.
    """

    DEV = 1

    def __init__(
        self,
        initial_files: Optional[dict[str, str | bytes]] = None,
        terminal_fds: Optional[set[int]] = None,
    ):
        self._entries: dict[str, FsEntry] = {}
        self._next_ino = 1
        self.terminal_fds: set[int] = set(terminal_fds or ())
        """Descriptors reported as attached to a terminal."""
        self.open_handles = 0
        """Number of probe handles currently open."""

        self._add("/", DirectoryEntry())
        for directory in ("/bin", "/usr/bin", "/tmp", "/home/user"):
            self._mkdir_sync(directory, recursive=True)
        for path, content in (initial_files or {}).items():
            self._write_sync(path, content)

    # -- path handling ---------------------------------------------------

    def resolve_path(self, base: str, path: str) -> str:
        """Resolve path relative to base."""
        if path == "":
            return ""
        if path.startswith("/"):
            return _normalize(path)
        return _normalize(posixpath.join(base, path))

    def _add(self, path: str, entry: FsEntry) -> FsEntry:
        entry.ino = self._next_ino
        self._next_ino += 1
        self._entries[path] = entry
        return entry

    def _lookup(self, path: str, follow_last: bool = True) -> str:
        """Walk path component by component, following symlinks.

        Returns the canonical key of the final entry.
        """
        if not path:
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", path)
        parts = [p for p in path.split("/") if p]
        resolved = "/"
        hops = 0
        i = 0
        while i < len(parts):
            part = parts[i]
            if part == ".":
                i += 1
                continue
            if part == "..":
                resolved = posixpath.dirname(resolved)
                i += 1
                continue
            candidate = posixpath.join(resolved, part)
            entry = self._entries.get(candidate)
            is_last = i == len(parts) - 1
            if isinstance(entry, SymlinkEntry) and (follow_last or not is_last):
                hops += 1
                if hops > _MAX_SYMLINKS:
                    raise OSError(errno.ELOOP, "Too many levels of symbolic links", path)
                if entry.target.startswith("/"):
                    resolved = "/"
                parts = [p for p in entry.target.split("/") if p] + parts[i + 1:]
                i = 0
                continue
            if entry is None:
                raise FileNotFoundError(errno.ENOENT, "No such file or directory", path)
            if not is_last and not isinstance(entry, DirectoryEntry):
                raise NotADirectoryError(errno.ENOTDIR, "Not a directory", path)
            resolved = candidate
            i += 1
        return resolved

    def _to_stat(self, entry: FsEntry) -> FsStat:
        if isinstance(entry, FileEntry):
            size = len(entry.content)
        elif isinstance(entry, SymlinkEntry):
            size = len(entry.target)
        elif isinstance(entry, DirectoryEntry):
            size = 4096
        else:
            size = 0
        return FsStat(mode=entry.mode, size=size, mtime=entry.mtime, dev=self.DEV, ino=entry.ino)

    # -- probes ----------------------------------------------------------

    async def stat(self, path: str) -> FsStat:
        return self._to_stat(self._entries[self._lookup(path)])

    async def lstat(self, path: str) -> FsStat:
        return self._to_stat(self._entries[self._lookup(path, follow_last=False)])

    @asynccontextmanager
    async def open_probe(self, path: str, mode: ProbeMode) -> AsyncIterator[None]:
        entry = self._entries[self._lookup(path)]
        if mode == "w" and isinstance(entry, DirectoryEntry):
            raise IsADirectoryError(errno.EISDIR, "Is a directory", path)
        required = 0o400 if mode == "r" else 0o200
        if not entry.mode & required:
            raise PermissionError(errno.EACCES, "Permission denied", path)
        self.open_handles += 1
        try:
            yield
        finally:
            self.open_handles -= 1

    def isatty(self, fd: int) -> bool:
        return fd in self.terminal_fds

    async def exists(self, path: str) -> bool:
        try:
            self._lookup(path)
        except OSError:
            return False
        return True

    # -- mutation --------------------------------------------------------

    def _parent_key(self, path: str) -> tuple[str, str]:
        path = _normalize(path)
        parent, name = posixpath.split(path)
        return self._lookup(parent), name

    def _is_directory(self, path: str) -> bool:
        try:
            return isinstance(self._entries[self._lookup(path)], DirectoryEntry)
        except OSError:
            return False

    def _mkdir_sync(self, path: str, recursive: bool = False) -> None:
        path = _normalize(path)
        if path == "/":
            if recursive:
                return
            raise FileExistsError(errno.EEXIST, "File exists", path)
        try:
            parent, name = self._parent_key(path)
        except FileNotFoundError:
            if not recursive:
                raise
            self._mkdir_sync(posixpath.dirname(path), recursive=True)
            parent, name = self._parent_key(path)
        key = posixpath.join(parent, name)
        if key in self._entries:
            # mkdir -p accepts an existing directory, or a link to one
            if recursive and self._is_directory(key):
                return
            raise FileExistsError(errno.EEXIST, "File exists", path)
        self._add(key, DirectoryEntry())

    def _write_sync(self, path: str, content: str | bytes) -> None:
        data = content.encode() if isinstance(content, str) else content
        try:
            key = self._lookup(path)
        except FileNotFoundError:
            path = _normalize(path)
            self._mkdir_sync(posixpath.dirname(path), recursive=True)
            parent, name = self._parent_key(path)
            key = posixpath.join(parent, name)
            if key in self._entries:
                # dangling symlink
                raise
            self._add(key, FileEntry(content=data))
            return
        entry = self._entries[key]
        if isinstance(entry, DirectoryEntry):
            raise IsADirectoryError(errno.EISDIR, "Is a directory", path)
        if not isinstance(entry, FileEntry):
            raise OSError(errno.EINVAL, "Not a regular file", path)
        entry.content = data
        entry.mtime = time.time()

    async def write_file(self, path: str, content: str | bytes) -> None:
        self._write_sync(path, content)

    async def read_file(self, path: str) -> str:
        entry = self._entries[self._lookup(path)]
        if not isinstance(entry, FileEntry):
            raise IsADirectoryError(errno.EISDIR, "Is a directory", path)
        return entry.content.decode(errors="replace")

    async def mkdir(self, path: str, recursive: bool = False) -> None:
        self._mkdir_sync(path, recursive=recursive)

    async def symlink(self, target: str, link_path: str) -> None:
        parent, name = self._parent_key(link_path)
        key = posixpath.join(parent, name)
        if key in self._entries:
            raise FileExistsError(errno.EEXIST, "File exists", link_path)
        self._add(key, SymlinkEntry(target=target))

    async def mknod(self, path: str, kind: NodeKind, perm: int = 0o644) -> None:
        """Create a device, FIFO or socket node."""
        parent, name = self._parent_key(path)
        key = posixpath.join(parent, name)
        if key in self._entries:
            raise FileExistsError(errno.EEXIST, "File exists", path)
        self._add(key, NodeEntry(mode=FileMode.of(_NODE_TYPES[kind], perm)))

    async def rm(self, path: str, recursive: bool = False) -> None:
        key = self._lookup(path, follow_last=False)
        if key == "/":
            raise PermissionError(errno.EPERM, "Operation not permitted", path)
        children = [k for k in self._entries if k.startswith(key + "/")]
        if children and not recursive:
            raise OSError(errno.ENOTEMPTY, "Directory not empty", path)
        for child in children:
            del self._entries[child]
        del self._entries[key]

    async def chmod(self, path: str, mode: int) -> None:
        entry = self._entries[self._lookup(path)]
        entry.mode = FileMode.of(entry.mode.file_type, mode & 0o7777)

    async def utimes(self, path: str, atime: float, mtime: float) -> None:
        self._entries[self._lookup(path)].mtime = mtime
