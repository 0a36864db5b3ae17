"""Tests for the real-disk filesystem and conditionals evaluated against it."""

import os
import socket
import sys

import pytest

from just_cond import Conditional, OsFs


pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="POSIX filesystem semantics")


class TestOsFs:
    """Probes against tmp_path."""

    @pytest.mark.asyncio
    async def test_stat_regular_and_directory(self, tmp_path):
        fs = OsFs()
        f = tmp_path / "f.txt"
        f.write_text("abc")
        info = await fs.stat(str(f))
        assert info.is_file
        assert info.size == 3
        assert (await fs.stat(str(tmp_path))).is_directory

    @pytest.mark.asyncio
    async def test_lstat_symlink(self, tmp_path):
        fs = OsFs()
        target = tmp_path / "t"
        target.write_text("")
        link = tmp_path / "l"
        link.symlink_to(target)
        assert (await fs.lstat(str(link))).is_symbolic_link
        assert (await fs.stat(str(link))).is_file

    @pytest.mark.asyncio
    async def test_open_probe(self, tmp_path):
        fs = OsFs()
        f = tmp_path / "f"
        f.write_text("")
        async with fs.open_probe(str(f), "r"):
            pass
        with pytest.raises(FileNotFoundError):
            async with fs.open_probe(str(tmp_path / "missing"), "r"):
                pass

    def test_resolve_path(self):
        fs = OsFs()
        assert fs.resolve_path("/a/b", "../c") == "/a/c"
        assert fs.resolve_path("/a/b", "/x/./y") == "/x/y"
        assert fs.resolve_path("/a/b", "") == ""

    def test_isatty_bad_descriptor(self):
        fs = OsFs()
        assert fs.isatty(99999) is False


class TestConditionalOnDisk:
    """End-to-end tests with the production filesystem."""

    @pytest.mark.asyncio
    async def test_regular_file_lifecycle(self, tmp_path):
        cond = Conditional(fs=OsFs(), cwd=str(tmp_path))
        (tmp_path / "x").write_text("data")
        argv = ["[[", "-f", "x", "&&", "3", "-lt", "5", "]]"]
        assert (await cond.exec(argv)).exit_code == 0
        assert (await cond.exec(["[", "-d", "x", "]"])).exit_code == 1
        os.unlink(tmp_path / "x")
        assert (await cond.exec(argv)).exit_code == 1

    @pytest.mark.asyncio
    async def test_same_file(self, tmp_path):
        cond = Conditional(fs=OsFs(), cwd=str(tmp_path))
        (tmp_path / "p").write_text("")
        (tmp_path / "q").write_text("")
        assert (await cond.exec(["test", "p", "-ef", "p"])).exit_code == 0
        assert (await cond.exec(["test", "p", "-ef", "q"])).exit_code == 1
        os.link(tmp_path / "p", tmp_path / "hard")
        assert (await cond.exec(["test", "p", "-ef", "hard"])).exit_code == 0

    @pytest.mark.asyncio
    async def test_newer(self, tmp_path):
        cond = Conditional(fs=OsFs(), cwd=str(tmp_path))
        (tmp_path / "old").write_text("")
        (tmp_path / "new").write_text("")
        os.utime(tmp_path / "old", (1000, 1000))
        os.utime(tmp_path / "new", (2000, 2000))
        assert (await cond.exec(["test", "new", "-nt", "old"])).exit_code == 0
        assert (await cond.exec(["test", "new", "-ot", "old"])).exit_code == 1

    @pytest.mark.asyncio
    async def test_executable(self, tmp_path):
        cond = Conditional(fs=OsFs(), cwd=str(tmp_path))
        script = tmp_path / "run.sh"
        script.write_text("#!/bin/sh\n")
        script.chmod(0o644)
        assert (await cond.exec(["test", "-x", "run.sh"])).exit_code == 1
        script.chmod(0o755)
        assert (await cond.exec(["test", "-x", "run.sh"])).exit_code == 0
        assert (await cond.exec(["test", "-x", "."])).exit_code == 1

    @pytest.mark.asyncio
    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="requires mkfifo")
    async def test_fifo_probe_does_not_block(self, tmp_path):
        cond = Conditional(fs=OsFs(), cwd=str(tmp_path))
        os.mkfifo(tmp_path / "pipe")
        assert (await cond.exec(["test", "-p", "pipe"])).exit_code == 0
        assert (await cond.exec(["test", "-r", "pipe"])).exit_code == 0
        # no reader on the other end
        assert (await cond.exec(["test", "-w", "pipe"])).exit_code == 1

    @pytest.mark.asyncio
    async def test_socket(self, tmp_path):
        path = tmp_path / "s"
        if len(str(path)) > 100:
            pytest.skip("socket path too long")
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.bind(str(path))
            cond = Conditional(fs=OsFs(), cwd=str(tmp_path))
            assert (await cond.exec(["test", "-S", "s"])).exit_code == 0
            assert (await cond.exec(["test", "-f", "s"])).exit_code == 1
        finally:
            sock.close()

    @pytest.mark.asyncio
    async def test_char_device(self):
        if not os.path.exists("/dev/null"):
            pytest.skip("no /dev/null")
        cond = Conditional(fs=OsFs(), cwd="/")
        assert (await cond.exec(["test", "-c", "/dev/null"])).exit_code == 0
        assert (await cond.exec(["test", "-b", "/dev/null"])).exit_code == 1
        assert (await cond.exec(["test", "-w", "/dev/null"])).exit_code == 0
