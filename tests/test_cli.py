"""Tests for the hatunpack command-line interface."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from hatunpack.cli import main

from builders import simple_container


def _run(*argv):
    with patch("sys.argv", ["hatunpack", *argv]):
        main()


@pytest.fixture(autouse=True)
def _no_output_dir_env(monkeypatch):
    monkeypatch.delenv("HATUNPACK_OUTPUT_DIR", raising=False)


class TestDecodeCommand:

    def test_writes_png_next_to_input(self, hat_file, png_bytes, capsys):
        _run("decode", str(hat_file))
        out_path = hat_file.with_suffix(".png")
        assert out_path.read_bytes() == png_bytes
        out = capsys.readouterr().out
        assert "team: Ducks" in out

    def test_explicit_output(self, hat_file, tmp_path, png_bytes):
        target = tmp_path / "out" / "image.png"
        _run("decode", str(hat_file), "-o", str(target))
        assert target.read_bytes() == png_bytes

    def test_output_dir_env(self, hat_file, tmp_path, png_bytes, monkeypatch):
        out_dir = tmp_path / "unpacked"
        monkeypatch.setenv("HATUNPACK_OUTPUT_DIR", str(out_dir))
        _run("decode", str(hat_file))
        assert (out_dir / "team.png").read_bytes() == png_bytes

    def test_simple_container(self, tmp_path, capsys):
        path = tmp_path / "old.hat"
        path.write_bytes(simple_container("Legacy", b"\x01\x02"))
        _run("decode", str(path))
        assert (tmp_path / "old.png").read_bytes() == b"\x01\x02"

    def test_corrupted_file_exits(self, tmp_path, capsys):
        path = tmp_path / "bad.hat"
        path.write_bytes(b"\x10\x00\x00\x00" + b"\x00" * 16 + b"\x01" * 32)
        with pytest.raises(SystemExit) as exc:
            _run("decode", str(path))
        assert exc.value.code == 1
        assert "Error:" in capsys.readouterr().err
        assert not (tmp_path / "bad.png").exists()

    def test_unwritable_output_exits(self, hat_file, tmp_path, capsys):
        target = tmp_path / "taken"
        target.mkdir()
        with pytest.raises(SystemExit) as exc:
            _run("decode", str(hat_file), "-o", str(target))
        assert exc.value.code == 1
        assert "Error: Writing" in capsys.readouterr().err
        assert not list(tmp_path.glob("*.tmp"))

    def test_missing_file_exits(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            _run("decode", str(tmp_path / "nope.hat"))
        assert exc.value.code == 1
        assert "File not found" in capsys.readouterr().err


class TestBaseCommand:

    def test_writes_base_section(self, hat_file):
        _run("base", str(hat_file))
        base = hat_file.with_suffix(".base").read_bytes()
        assert base[:8] == (402965919293045).to_bytes(8, "little")

    def test_simple_container_rejected(self, tmp_path, capsys):
        path = tmp_path / "old.hat"
        path.write_bytes(simple_container("Legacy", b"\x01"))
        with pytest.raises(SystemExit) as exc:
            _run("base", str(path))
        assert exc.value.code == 1
        assert "no encrypted base section" in capsys.readouterr().err


    def test_unwritable_output_exits(self, hat_file, tmp_path, capsys):
        target = tmp_path / "taken"
        target.mkdir()
        with pytest.raises(SystemExit) as exc:
            _run("base", str(hat_file), "-o", str(target))
        assert exc.value.code == 1
        assert "Error: Writing" in capsys.readouterr().err


class TestInfoCommand:

    def test_prints_summary(self, hat_file, png_bytes, capsys):
        _run("info", str(hat_file))
        out = capsys.readouterr().out
        assert "Variant:  complex" in out
        assert "Team:     Ducks" in out
        assert f"Image:    {len(png_bytes)} bytes" in out
        assert "Base key: 402965919293045" in out


class TestUsage:

    def test_no_command_prints_usage(self, capsys):
        with pytest.raises(SystemExit) as exc:
            _run()
        assert exc.value.code == 0
        assert "hatunpack decode" in capsys.readouterr().out

    def test_version(self, capsys):
        from hatunpack import __version__

        with pytest.raises(SystemExit):
            _run("--version")
        assert __version__ in capsys.readouterr().out
