"""
Tests for the srecimg command-line tool.
"""

from pathlib import Path

import pytest
from click.testing import CliRunner

from srec_image import __version__
from srec_image.cli.errors import ExitCode
from srec_image.cli.srecimg import format_hex_dump, main

UNCHECKED_LINE = "S1130000214601360021470136007EFE09D2190140"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("SREC_IMAGE_FILL_BYTE", "SREC_IMAGE_STRICT_BOUNDS",
                 "SREC_IMAGE_VERIFY_CHECKSUMS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def gapped_file(tmp_path: Path, srec_line) -> Path:
    """Two records at 0x2000 and 0x2004 with a 2-byte gap."""
    path = tmp_path / "gapped.s19"
    path.write_text("\n".join([
        srec_line("S1", 0x2000, b"\x01\x02"),
        srec_line("S1", 0x2004, b"\x03\x04"),
        srec_line("S9", 0x2000),
    ]) + "\n")
    return path


@pytest.fixture
def unchecked_file(tmp_path: Path) -> Path:
    path = tmp_path / "unchecked.s19"
    path.write_text(UNCHECKED_LINE + "\n")
    return path


class TestMain:
    """Tests for the command group and global options."""

    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ("info", "dump", "extract", "patch", "verify"):
            assert command in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(main, ["info", str(tmp_path / "missing.s19")])
        assert result.exit_code == ExitCode.INVALID_ARGS

    @pytest.mark.parametrize("fill", ["0x100", "0x1FF", "256", "zz"])
    def test_invalid_fill_byte(self, runner, sample_file, fill):
        result = runner.invoke(main, ["--fill", fill, "info", str(sample_file)])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "--fill" in result.output

    def test_format_error(self, runner, tmp_path):
        path = tmp_path / "bad.s19"
        path.write_text("Q1030000FC\n")
        result = runner.invoke(main, ["info", str(path)])
        assert result.exit_code == ExitCode.SREC_ERROR
        assert "line 1: error:" in result.output
        assert "not a valid record type" in result.output

    def test_ordering_error(self, runner, tmp_path, srec_line):
        path = tmp_path / "order.s19"
        path.write_text(
            srec_line("S1", 0x100, b"\x01") + "\n"
            + srec_line("S1", 0x050, b"\x02") + "\n"
        )
        result = runner.invoke(main, ["info", str(path)])
        assert result.exit_code == ExitCode.SREC_ERROR
        assert "not ascending" in result.output


class TestInfo:
    """Tests for the info command."""

    def test_info(self, runner, sample_file):
        result = runner.invoke(main, ["info", str(sample_file)])
        assert result.exit_code == 0, result.output
        assert "Header:        hello" in result.output
        assert "Record types:  S1 (16-bit)" in result.output
        assert "Data records:  3" in result.output
        assert "Start address: 0x00000000" in result.output
        assert "End address:   0x00000038" in result.output
        assert "Image size:    70 bytes" in result.output
        assert "Entry point:   0x00000000" in result.output

    def test_info_no_header(self, runner, unchecked_file):
        result = runner.invoke(main, ["info", str(unchecked_file)])
        assert result.exit_code == 0
        assert "Header:        (none)" in result.output
        assert "Entry point:   (none)" in result.output

    def test_verify_checksums_option(self, runner, unchecked_file):
        result = runner.invoke(main, ["--verify-checksums", "info", str(unchecked_file)])
        assert result.exit_code == ExitCode.SREC_ERROR
        assert "checksum mismatch" in result.output

    def test_verify_checksums_from_env(self, runner, unchecked_file):
        result = runner.invoke(
            main, ["info", str(unchecked_file)],
            env={"SREC_IMAGE_VERIFY_CHECKSUMS": "1"},
        )
        assert result.exit_code == ExitCode.SREC_ERROR

    def test_option_overrides_env(self, runner, unchecked_file):
        result = runner.invoke(
            main, ["--no-verify-checksums", "info", str(unchecked_file)],
            env={"SREC_IMAGE_VERIFY_CHECKSUMS": "1"},
        )
        assert result.exit_code == 0


class TestDump:
    """Tests for the dump command and hex formatting."""

    def test_format_hex_dump(self):
        lines = format_hex_dump(b"Hello", 0x100)
        assert lines == [
            "00000100  48 65 6C 6C 6F" + " " * 33 + "  |Hello|"
        ]

    def test_format_hex_dump_wraps(self):
        lines = format_hex_dump(bytes(range(20)), 0x0, width=16)
        assert len(lines) == 2
        assert lines[1].startswith("00000010  10 11 12 13")

    def test_dump_range(self, runner, sample_file):
        result = runner.invoke(main, ["dump", str(sample_file), "-a", "0x38", "-n", "14"])
        assert result.exit_code == 0, result.output
        assert result.output.startswith("00000038  48 65 6C 6C 6F")
        assert "|Hello world...|" in result.output

    def test_dump_whole_image(self, runner, gapped_file):
        result = runner.invoke(main, ["dump", str(gapped_file)])
        assert result.exit_code == 0
        assert "00002000  01 02 FF FF 03 04" in result.output

    def test_dump_outside_image(self, runner, gapped_file):
        result = runner.invoke(main, ["dump", str(gapped_file), "-a", "0x1000"])
        assert result.exit_code == ExitCode.SREC_ERROR

    def test_dump_empty_image(self, runner, tmp_path, srec_line):
        path = tmp_path / "empty.s19"
        path.write_text(srec_line("S1", 0x100) + "\n")
        result = runner.invoke(main, ["dump", str(path)])
        assert result.exit_code == 0, result.output
        assert result.output == ""


class TestExtract:
    """Tests for the extract command."""

    def test_extract(self, runner, sample_file, sample_payload, tmp_path):
        output = tmp_path / "out.bin"
        result = runner.invoke(main, ["extract", str(sample_file), "-o", str(output)])
        assert result.exit_code == 0, result.output
        assert output.read_bytes() == sample_payload
        assert "70 bytes from 0x00000000" in result.output

    def test_extract_fill(self, runner, gapped_file, tmp_path):
        output = tmp_path / "out.bin"
        result = runner.invoke(
            main, ["--fill", "0x00", "extract", str(gapped_file), "-o", str(output)]
        )
        assert result.exit_code == 0
        assert output.read_bytes() == b"\x01\x02\x00\x00\x03\x04"

    def test_extract_requires_output(self, runner, sample_file):
        result = runner.invoke(main, ["extract", str(sample_file)])
        assert result.exit_code == 2


class TestPatch:
    """Tests for the patch command."""

    def test_patch(self, runner, gapped_file, tmp_path):
        output = tmp_path / "patched.bin"
        result = runner.invoke(
            main, ["patch", str(gapped_file), "0x2002", "EA EA", "-o", str(output)]
        )
        assert result.exit_code == 0, result.output
        assert output.read_bytes() == b"\x01\x02\xEA\xEA\x03\x04"
        assert "Patched 2 bytes at 0x00002002" in result.output

    def test_patch_out_of_range(self, runner, gapped_file, tmp_path):
        output = tmp_path / "patched.bin"
        result = runner.invoke(
            main, ["patch", str(gapped_file), "0x1FFF", "00", "-o", str(output)]
        )
        assert result.exit_code == ExitCode.SREC_ERROR
        assert "Patch error:" in result.output
        assert "out of srec range" in result.output
        assert not output.exists()

    def test_patch_past_end_address(self, runner, gapped_file, tmp_path):
        output = tmp_path / "patched.bin"
        args = ["patch", str(gapped_file), "0x2004", "AABB", "-o", str(output)]

        result = runner.invoke(main, args)
        assert result.exit_code == 0
        assert output.read_bytes() == b"\x01\x02\xFF\xFF\xAA\xBB"

        output.unlink()
        result = runner.invoke(main, ["--strict-bounds"] + args)
        assert result.exit_code == ExitCode.SREC_ERROR
        assert not output.exists()

    def test_patch_overrun(self, runner, gapped_file, tmp_path):
        output = tmp_path / "patched.bin"
        result = runner.invoke(
            main, ["patch", str(gapped_file), "0x2004", "AABBCC", "-o", str(output)]
        )
        assert result.exit_code == ExitCode.SREC_ERROR
        assert "overruns" in result.output

    @pytest.mark.parametrize("address,data", [
        ("0xZZ", "00"),
        ("0x100000000", "00"),
        ("0x2000", "XYZ"),
        ("0x2000", ""),
    ])
    def test_patch_bad_arguments(self, runner, gapped_file, tmp_path, address, data):
        output = tmp_path / "patched.bin"
        result = runner.invoke(
            main, ["patch", str(gapped_file), address, data, "-o", str(output)]
        )
        assert result.exit_code == 2


class TestVerify:
    """Tests for the verify command."""

    def test_verify_ok(self, runner, sample_file):
        result = runner.invoke(main, ["verify", str(sample_file)])
        assert result.exit_code == 0, result.output
        assert "Checksums OK" in result.output
        assert "(5 records)" in result.output

    def test_verify_mismatch(self, runner, unchecked_file):
        result = runner.invoke(main, ["verify", str(unchecked_file)])
        assert result.exit_code == ExitCode.SREC_ERROR
        assert "Verification error:" in result.output
        assert "stored 0x40, calculated 0x3E" in result.output
