"""CHIP-8 rendering utilities for visualization."""

from typing import Sequence, Tuple

import cv2
import numpy as np
from PIL import Image

from chip8jax.constants import SCREEN_WIDTH, SCREEN_HEIGHT


def framebuffer_to_rgb(
    framebuffer,
    width: int = SCREEN_WIDTH,
    height: int = SCREEN_HEIGHT,
    scale: int = 8,
    on_color: Tuple[int, int, int] = (255, 255, 255),
    off_color: Tuple[int, int, int] = (0, 0, 0),
    pixel_outline: bool = False,
) -> np.ndarray:
    """Convert a CHIP-8 framebuffer to an RGB array with optional upscaling.

    Args:
        framebuffer: Row-major booleans, flat ``(width*height,)`` or ``(height, width)``
        width: Display width in CHIP-8 pixels
        height: Display height in CHIP-8 pixels
        scale: Upscaling factor for better visibility (default: 8x)
        on_color: RGB color for "on" pixels (default: white)
        off_color: RGB color for "off" pixels (default: black)
        pixel_outline: Draw each lit pixel with an ``off_color`` border

    Returns:
        RGB array of shape (height*scale, width*scale, 3) with uint8 values
    """
    pixels = np.asarray(framebuffer, dtype=np.bool_).reshape(height, width)

    # Apply upscaling using nearest neighbor interpolation
    if scale > 1:
        pixels = np.repeat(np.repeat(pixels, scale, axis=0), scale, axis=1)

    if pixel_outline and scale > 1:
        rows = np.arange(height * scale) % scale
        cols = np.arange(width * scale) % scale
        edge = ((rows == 0) | (rows == scale - 1))[:, None] | ((cols == 0) | (cols == scale - 1))[None, :]
        pixels = pixels & ~edge

    rgb_frame = np.empty((*pixels.shape, 3), dtype=np.uint8)
    rgb_frame[pixels] = on_color
    rgb_frame[~pixels] = off_color
    return rgb_frame


def create_color_scheme(
    scheme: str = "mono",
) -> Tuple[Tuple[int, int, int], Tuple[int, int, int]]:
    """Get predefined color schemes for CHIP-8 rendering.

    Args:
        scheme: Color scheme name ("mono", "octo", "classic", "amber", "blue", "retro")

    Returns:
        Tuple of (on_color, off_color) as RGB tuples
    """
    schemes = {
        "mono": ((255, 255, 255), (0, 0, 0)),  # White on black
        "octo": ((179, 102, 184), (45, 25, 61)),
        "classic": ((0, 255, 0), (0, 0, 0)),  # Green on black
        "amber": ((255, 176, 0), (0, 0, 0)),  # Amber on black
        "blue": ((0, 255, 255), (0, 0, 64)),  # Cyan on dark blue
        "retro": ((255, 255, 0), (64, 0, 64)),  # Yellow on purple
    }

    if scheme not in schemes:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(schemes.keys())}"
        )

    return schemes[scheme]


def save_snapshot(framebuffer, filename: str, **render_kwargs) -> None:
    """Write one frame as an image (format from the file extension)."""
    Image.fromarray(framebuffer_to_rgb(framebuffer, **render_kwargs)).save(filename)


def record_video(
    framebuffers: Sequence,
    filename: str,
    fps: float = 60.0,
    width: int = SCREEN_WIDTH,
    height: int = SCREEN_HEIGHT,
    scale: int = 8,
    on_color: Tuple[int, int, int] = (255, 255, 255),
    off_color: Tuple[int, int, int] = (0, 0, 0),
    pixel_outline: bool = False,
) -> int:
    """Save a sequence of framebuffers as an MP4 video.

    Returns:
        Number of frames written
    """
    writer = cv2.VideoWriter(
        filename, cv2.VideoWriter_fourcc(*'mp4v'), fps, (width * scale, height * scale)
    )
    written = 0
    try:
        for framebuffer in framebuffers:
            frame = framebuffer_to_rgb(
                framebuffer, width, height, scale, on_color, off_color, pixel_outline
            )
            writer.write(cv2.cvtColor(frame, cv2.COLOR_RGB2BGR))
            written += 1
    finally:
        writer.release()
    return written
