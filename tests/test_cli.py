import hashlib
import io
import types

import pytest

from hashpipe.__main__ import COMMANDS, command_name, copy, main, sum_, tee


def test_commands_registered():
    assert [command_name(cmd) for cmd in COMMANDS] == ["sum", "copy", "tee"]


class TestSum:
    def test_prints_digest_per_file(self, tmp_path, capsys):
        a = tmp_path / "a.txt"
        b = tmp_path / "b.txt"
        a.write_bytes(b"foo")
        b.write_bytes(b"")

        assert sum_(["-q", str(a), str(b)]) == 0

        out = capsys.readouterr().out.splitlines()
        assert out == [
            f"{hashlib.sha256(b'foo').hexdigest()}  {a}",
            f"{hashlib.sha256(b'').hexdigest()}  {b}",
        ]

    def test_algorithm(self, tmp_path, capsys):
        a = tmp_path / "a.txt"
        a.write_bytes(b"foo")

        assert sum_(["-q", "--algorithm", "md5", str(a)]) == 0
        assert capsys.readouterr().out.startswith(hashlib.md5(b"foo").hexdigest())

    def test_missing_file(self, tmp_path, capsys):
        assert sum_(["-q", str(tmp_path / "missing")]) == 2
        assert "missing" in capsys.readouterr().err


class TestCopy:
    def test_copies_and_hashes(self, tmp_path, capsys):
        src = tmp_path / "src.bin"
        dest = tmp_path / "dest.bin"
        data = bytes(range(256)) * 1000
        src.write_bytes(data)

        assert copy(["-q", str(src), str(dest)]) == 0

        assert dest.read_bytes() == data
        digest = hashlib.sha256(data).hexdigest()
        assert capsys.readouterr().out == f"{digest}  {dest}\n"

    def test_expect_match(self, tmp_path):
        src = tmp_path / "src.bin"
        src.write_bytes(b"foo")
        digest = hashlib.sha256(b"foo").hexdigest()

        assert copy(["-q", str(src), str(tmp_path / "dest"), "--expect", digest.upper()]) == 0

    def test_expect_mismatch(self, tmp_path, capsys):
        src = tmp_path / "src.bin"
        src.write_bytes(b"foo")

        assert copy(["-q", str(src), str(tmp_path / "dest"), "--expect", "00"]) == 1
        assert "mismatch" in capsys.readouterr().err

    def test_missing_source(self, tmp_path, capsys):
        assert copy(["-q", str(tmp_path / "nope"), str(tmp_path / "dest")]) == 2
        assert "nope" in capsys.readouterr().err


def test_tee(monkeypatch, capsys):
    stdin = types.SimpleNamespace(buffer=io.BytesIO(b"streamed"))
    stdout = types.SimpleNamespace(buffer=io.BytesIO())
    monkeypatch.setattr("sys.stdin", stdin)
    monkeypatch.setattr("sys.stdout", stdout)

    assert tee(["--algorithm", "sha1"]) == 0

    assert stdout.buffer.getvalue() == b"streamed"
    assert capsys.readouterr().err == f"{hashlib.sha1(b'streamed').hexdigest()}  -\n"


def test_main_exits_with_command_result(tmp_path):
    a = tmp_path / "a.txt"
    a.write_bytes(b"foo")

    with pytest.raises(SystemExit) as exc_info:
        main(["sum", "-q", str(a)])
    assert exc_info.value.code == 0


def test_sum_leaves_builtin_alone():
    import hashpipe.__main__ as cli
    assert "sum" not in vars(cli)
