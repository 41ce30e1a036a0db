"""Tests for the command line entry point."""

import pytest
from PIL import Image
from chip8jax.cli import build_parser, main, overrides_from_args, parse_args
from conftest import program


@pytest.fixture
def rom(tmp_path):
    """Draws glyph 0 at (0, 0) then spins."""
    path = tmp_path / "glyph.ch8"
    path.write_bytes(program(0x00E0, 0xA000, 0xD005, 0x1206))
    return str(path)


class TestParser:

    def test_missing_rom_prints_usage(self, capsys):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])
        assert "usage" in capsys.readouterr().err

    def test_options_become_overrides(self):
        args = parse_args(
            ["game.ch8", "volume=0.5", "--scale", "10", "--clock-rate", "900", "--no-outline", "--seed", "3"]
        )
        assert overrides_from_args(args) == [
            "volume=0.5", "scale_factor=10", "clock_rate=900", "pixel_outline=false", "seed=3",
        ]

    def test_overrides_after_options(self):
        args = parse_args(["game.ch8", "--scale", "10", "clock_rate=900", "--seed", "3", "tone_hz=500"])

        assert args.rom == "game.ch8"
        assert args.overrides == ["clock_rate=900", "tone_hz=500"]
        assert overrides_from_args(args) == ["clock_rate=900", "tone_hz=500", "scale_factor=10", "seed=3"]


class TestMain:

    def test_headless_run(self, rom):
        assert main([rom, "--headless", "--frames", "3"]) == 0

    def test_headless_snapshot(self, rom, tmp_path):
        snapshot = tmp_path / "out.png"

        assert main([rom, "--headless", "--frames", "2", "--scale", "2", "--no-outline", "--snapshot", str(snapshot)]) == 0

        with Image.open(snapshot) as image:
            assert image.size == (128, 64)
            assert image.getpixel((0, 0)) == (255, 255, 255)

    def test_headless_trace(self, rom, capsys):
        assert main([rom, "--headless", "--frames", "1", "--trace"]) == 0
        assert "Address: 0x0200, Opcode: 0x00E0 Desc: Clear screen" in capsys.readouterr().out

    def test_missing_rom_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.ch8"), "--headless"]) == 1
        assert "is invalid or does not exist" in capsys.readouterr().out

    def test_rom_too_large(self, tmp_path):
        path = tmp_path / "huge.ch8"
        path.write_bytes(bytes(5000))
        assert main([str(path), "--headless"]) == 1

    @pytest.mark.parametrize("extra", [["clock_rate=0"], ["--color-scheme", "neon"], ["turbo=1"]])
    def test_invalid_config(self, rom, extra):
        assert main([rom, "--headless", *extra]) == 2

    def test_override_after_options(self, rom, tmp_path):
        snapshot = tmp_path / "out.png"

        assert main([rom, "--headless", "--frames", "1", "--snapshot", str(snapshot), "scale_factor=1"]) == 0

        with Image.open(snapshot) as image:
            assert image.size == (64, 32)
