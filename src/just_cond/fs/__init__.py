"""Filesystem implementations for just-cond."""

from .in_memory_fs import (
    InMemoryFs,
    FileEntry,
    DirectoryEntry,
    SymlinkEntry,
    NodeEntry,
    FsEntry,
)
from .mode import FileMode
from .os_fs import OsFs

__all__ = [
    "InMemoryFs",
    "OsFs",
    "FileMode",
    "FileEntry",
    "DirectoryEntry",
    "SymlinkEntry",
    "NodeEntry",
    "FsEntry",
]
