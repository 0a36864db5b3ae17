"""File mode bits with predicate accessors."""

import stat


class FileMode(int):
    """An ``st_mode`` value.

    Wraps the raw integer so call sites ask ``mode.is_dir`` instead of
    re-deriving masks from the ``stat`` module.
    """

    @classmethod
    def of(cls, file_type: int, perm: int = 0) -> "FileMode":
        return cls(file_type | perm)

    @property
    def file_type(self) -> int:
        return stat.S_IFMT(self)

    @property
    def perm(self) -> int:
        """Permission bits including setuid, setgid and sticky."""
        return stat.S_IMODE(self)

    @property
    def is_regular(self) -> bool:
        return stat.S_ISREG(self)

    @property
    def is_dir(self) -> bool:
        return stat.S_ISDIR(self)

    @property
    def is_symlink(self) -> bool:
        return stat.S_ISLNK(self)

    @property
    def is_char_device(self) -> bool:
        return stat.S_ISCHR(self)

    @property
    def is_block_device(self) -> bool:
        # Device node that is not a character device.
        return stat.S_ISBLK(self) and not stat.S_ISCHR(self)

    @property
    def is_named_pipe(self) -> bool:
        return stat.S_ISFIFO(self)

    @property
    def is_socket(self) -> bool:
        return stat.S_ISSOCK(self)

    @property
    def is_sticky(self) -> bool:
        return bool(self & stat.S_ISVTX)

    @property
    def is_setuid(self) -> bool:
        return bool(self & stat.S_ISUID)

    @property
    def is_setgid(self) -> bool:
        return bool(self & stat.S_ISGID)

    @property
    def is_executable(self) -> bool:
        """True if any execute bit is set."""
        return bool(self & 0o111)

    def __repr__(self) -> str:
        return f"FileMode({stat.filemode(self)!r})"
