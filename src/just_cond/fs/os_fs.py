"""Filesystem backed by the real disk."""

from __future__ import annotations

import os
import posixpath
import shutil
from contextlib import asynccontextmanager
from typing import AsyncIterator

from ..types import FsStat, ProbeMode
from .mode import FileMode


def _to_stat(st: os.stat_result) -> FsStat:
    return FsStat(
        mode=FileMode(st.st_mode),
        size=st.st_size,
        mtime=st.st_mtime,
        dev=st.st_dev,
        ino=st.st_ino,
    )


class OsFs:
    """IFileSystem implementation that probes the host's real filesystem.

    Calls block; there is no timeout or cancellation.
    """

    def resolve_path(self, base: str, path: str) -> str:
        if path == "":
            return ""
        if os.path.isabs(path):
            return os.path.normpath(path)
        return os.path.normpath(os.path.join(base, path))

    async def stat(self, path: str) -> FsStat:
        return _to_stat(os.stat(path))

    async def lstat(self, path: str) -> FsStat:
        return _to_stat(os.lstat(path))

    @asynccontextmanager
    async def open_probe(self, path: str, mode: ProbeMode) -> AsyncIterator[None]:
        flags = os.O_RDONLY if mode == "r" else os.O_WRONLY
        # Non-blocking so a FIFO without a peer cannot hang the probe.
        fd = os.open(path, flags | os.O_NONBLOCK | os.O_NOCTTY)
        try:
            yield
        finally:
            os.close(fd)

    def isatty(self, fd: int) -> bool:
        try:
            return os.isatty(fd)
        except (OSError, OverflowError):
            return False

    async def exists(self, path: str) -> bool:
        return os.path.exists(path)

    async def write_file(self, path: str, content: str | bytes) -> None:
        data = content.encode() if isinstance(content, str) else content
        os.makedirs(posixpath.dirname(path) or ".", exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)

    async def mkdir(self, path: str, recursive: bool = False) -> None:
        if recursive:
            os.makedirs(path, exist_ok=True)
        else:
            os.mkdir(path)

    async def symlink(self, target: str, link_path: str) -> None:
        os.symlink(target, link_path)

    async def rm(self, path: str, recursive: bool = False) -> None:
        if os.path.isdir(path) and not os.path.islink(path):
            if recursive:
                shutil.rmtree(path)
            else:
                os.rmdir(path)
        else:
            os.unlink(path)

    async def chmod(self, path: str, mode: int) -> None:
        os.chmod(path, mode)

    async def utimes(self, path: str, atime: float, mtime: float) -> None:
        os.utime(path, (atime, mtime))
