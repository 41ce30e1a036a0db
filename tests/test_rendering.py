"""Tests for rendering utilities."""

import numpy as np
import pytest
from PIL import Image
from chip8jax import execute, framebuffer
from chip8jax.rendering import create_color_scheme, framebuffer_to_rgb, record_video, save_snapshot


def single_pixel(x, y, width=64, height=32):
    pixels = np.zeros(width * height, dtype=bool)
    pixels[y * width + x] = True
    return pixels


class TestFramebufferToRgb:

    def test_shape_and_scale(self):
        rgb = framebuffer_to_rgb(single_pixel(0, 0), scale=4)
        assert rgb.shape == (128, 256, 3)
        assert rgb.dtype == np.uint8

    def test_no_scale(self):
        rgb = framebuffer_to_rgb(single_pixel(5, 2), scale=1)
        assert rgb.shape == (32, 64, 3)
        assert tuple(rgb[2, 5]) == (255, 255, 255)
        assert tuple(rgb[5, 2]) == (0, 0, 0)

    def test_row_major_layout(self):
        rgb = framebuffer_to_rgb(single_pixel(3, 1), scale=2)
        assert rgb[2:4, 6:8].all()
        assert rgb.sum() == 4 * 3 * 255

    def test_colors(self):
        rgb = framebuffer_to_rgb(single_pixel(0, 0), scale=1, on_color=(1, 2, 3), off_color=(9, 8, 7))
        assert tuple(rgb[0, 0]) == (1, 2, 3)
        assert tuple(rgb[0, 1]) == (9, 8, 7)

    def test_pixel_outline(self):
        rgb = framebuffer_to_rgb(single_pixel(1, 1), scale=4, pixel_outline=True)
        cell = rgb[4:8, 4:8, 0]

        assert cell[1:3, 1:3].all()
        assert not cell[0].any()
        assert not cell[3].any()
        assert not cell[:, 0].any()
        assert not cell[:, 3].any()

    def test_accepts_display_state(self, fresh_state):
        state = execute(fresh_state, 0xD005)  # glyph 0 at (0, 0)
        rgb = framebuffer_to_rgb(framebuffer(state), scale=1)
        assert tuple(rgb[0, 0]) == (255, 255, 255)
        assert tuple(rgb[1, 1]) == (0, 0, 0)

    def test_custom_dimensions(self):
        rgb = framebuffer_to_rgb(np.ones((16, 32), dtype=bool), width=32, height=16, scale=2)
        assert rgb.shape == (32, 64, 3)
        assert rgb.min() == 255


class TestColorSchemes:

    def test_known_scheme(self):
        assert create_color_scheme("classic") == ((0, 255, 0), (0, 0, 0))

    def test_unknown_scheme(self):
        with pytest.raises(ValueError, match="Unknown color scheme"):
            create_color_scheme("neon")


class TestOutputs:

    def test_save_snapshot(self, tmp_path):
        path = tmp_path / "frame.png"
        save_snapshot(single_pixel(0, 0), str(path), scale=2)

        with Image.open(path) as image:
            assert image.size == (128, 64)
            assert image.getpixel((0, 0)) == (255, 255, 255)
            assert image.getpixel((2, 0)) == (0, 0, 0)

    def test_record_video_counts_frames(self, tmp_path):
        frames = [single_pixel(i, 0) for i in range(5)]
        written = record_video(frames, str(tmp_path / "run.mp4"), scale=2)
        assert written == 5
