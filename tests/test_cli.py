"""
gbfix CLI Tests
===============

Tests for the `gbfix` command-line tool using click's CliRunner.
"""

import pytest
from click.testing import CliRunner

from gbfix.cli.errors import ExitCode
from gbfix.cli.gbfix import main
from gbfix.rom import MIN_ROM_SIZE, HeaderOffset, ImageBuffer, read_header


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestGeneral:
    """Tests for help and version output."""

    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Game Boy ROM header fixer" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "1.0.0" in result.output

    def test_fix_help(self, runner):
        result = runner.invoke(main, ["fix", "--help"])
        assert result.exit_code == 0
        assert "--gbc-only" in result.output


class TestFixCommand:
    """Tests for `gbfix fix`."""

    def test_validate(self, runner, rom_file):
        """--validate repairs the checksums and writes the file."""
        result = runner.invoke(main, ["fix", "-V", str(rom_file)])

        assert result.exit_code == 0, result.output
        assert "Header repaired" in result.output
        assert f"Wrote {rom_file}" in result.output
        assert read_header(ImageBuffer.from_file(rom_file)).is_valid

    def test_validate_twice(self, runner, rom_file):
        """A repaired image validates clean."""
        runner.invoke(main, ["fix", "-V", str(rom_file)])
        result = runner.invoke(main, ["fix", "--validate", str(rom_file)])

        assert result.exit_code == 0
        assert "Header is valid" in result.output

    def test_pad_and_edit(self, runner, tmp_path):
        """Pad, set fields and validate in one run."""
        path = tmp_path / "game.gb"
        path.write_bytes(bytes(0x150))

        result = runner.invoke(main, [
            "fix", str(path),
            "-V", "--title", "GAME", "-m", "0x1B", "-r", "$03", "-c",
            "--pad", "--pad-value", "0",
        ])

        assert result.exit_code == 0, result.output
        data = path.read_bytes()
        assert len(data) == MIN_ROM_SIZE
        assert data[MIN_ROM_SIZE - 1] == 0x00
        info = read_header(ImageBuffer(data))
        assert info.title == "GAME"
        assert info.cartridge_type == 0x1B
        assert info.ram_size == 0x03
        assert info.cgb_flag == 0x80
        assert info.is_valid

    def test_truncate(self, runner, tmp_path):
        path = tmp_path / "big.gb"
        path.write_bytes(bytes(48 * 1024))

        result = runner.invoke(main, ["fix", "-t", str(path)])
        assert result.exit_code == 0, result.output
        assert len(path.read_bytes()) == MIN_ROM_SIZE

    def test_dry_run(self, runner, rom_file, rom_32k_data):
        """--dry-run leaves the file untouched."""
        result = runner.invoke(main, ["fix", "-V", "-n", str(rom_file)])

        assert result.exit_code == 0
        assert "Dry run" in result.output
        assert rom_file.read_bytes() == rom_32k_data

    def test_dry_run_from_env(self, runner, rom_file, rom_32k_data):
        result = runner.invoke(main, ["fix", "-V", str(rom_file)],
                               env={"GBFIX_DRY_RUN": "1"})
        assert result.exit_code == 0
        assert rom_file.read_bytes() == rom_32k_data

    def test_pad_value_from_env(self, runner, tmp_path):
        path = tmp_path / "game.gb"
        path.write_bytes(bytes(0x150))

        result = runner.invoke(main, ["fix", "-p", str(path)],
                               env={"GBFIX_PAD_VALUE": "0x42"})
        assert result.exit_code == 0, result.output
        assert path.read_bytes()[-1] == 0x42

    def test_no_operation(self, runner, rom_file):
        result = runner.invoke(main, ["fix", str(rom_file)])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "No operation requested" in result.output

    def test_conflicting_cgb_modes(self, runner, rom_file):
        result = runner.invoke(main, ["fix", "-c", "-o", str(rom_file)])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_bad_byte_value(self, runner, rom_file):
        result = runner.invoke(main, ["fix", "-m", "0x1FF", str(rom_file)])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "not a byte value" in result.output

    def test_title_too_long(self, runner, rom_file, rom_32k_data):
        result = runner.invoke(main, ["fix", "--title", "A" * 17, str(rom_file)])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert rom_file.read_bytes() == rom_32k_data

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(main, ["fix", "-V", str(tmp_path / "missing.gb")])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_image_too_small(self, runner, tmp_path):
        """A file shorter than the header is an image error."""
        path = tmp_path / "tiny.gb"
        path.write_bytes(bytes(16))

        result = runner.invoke(main, ["fix", "-V", str(path)])
        assert result.exit_code == ExitCode.IMAGE_ERROR
        assert "Image error" in result.output
        assert path.read_bytes() == bytes(16)


class TestInfoCommand:
    """Tests for `gbfix info`."""

    def test_info(self, runner, rom_file):
        result = runner.invoke(main, ["info", str(rom_file)])

        assert result.exit_code == 0, result.output
        assert "Title:          HELLO" in result.output
        assert "No MBC -- ROM only" in result.output
        assert "Nintendo logo:   OK" in result.output
        assert "INVALID" in result.output

    def test_info_after_fix(self, runner, rom_file):
        runner.invoke(main, ["fix", "-V", str(rom_file)])
        result = runner.invoke(main, ["info", str(rom_file)])

        assert result.exit_code == 0
        assert "INVALID" not in result.output

    def test_info_cgb(self, runner, rom_file):
        runner.invoke(main, ["fix", "-o", str(rom_file)])
        result = runner.invoke(main, ["info", str(rom_file)])
        assert "Colour Game Boy only" in result.output

    def test_info_garbage_rom_size(self, runner, tmp_path, rom_32k_data):
        """A garbage size byte is shown as invalid rather than a size."""
        data = bytearray(rom_32k_data)
        data[HeaderOffset.ROM_SIZE] = 0xFF
        path = tmp_path / "garbage.gb"
        path.write_bytes(bytes(data))

        result = runner.invoke(main, ["info", str(path)])
        assert result.exit_code == 0, result.output
        assert "ROM size:       0xFF (invalid)" in result.output
        assert "Entry point:    00 00 00 00" in result.output

    def test_info_does_not_write(self, runner, rom_file, rom_32k_data):
        runner.invoke(main, ["info", str(rom_file)])
        assert rom_file.read_bytes() == rom_32k_data

    def test_info_too_small(self, runner, tmp_path):
        path = tmp_path / "tiny.gb"
        path.write_bytes(bytes(HeaderOffset.LOGO))
        result = runner.invoke(main, ["info", str(path)])
        assert result.exit_code == ExitCode.IMAGE_ERROR
