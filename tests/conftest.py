"""Shared synthetic-image builders for the test suite."""

from __future__ import annotations

from io import BytesIO
from typing import List, Tuple

import numpy as np
import pytest
from PIL import Image as PILImage

from emoji_sheet.models.image import Image

WHITE = (255, 255, 255, 255)


def blank(width: int, height: int, color=WHITE) -> np.ndarray:
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:, :] = color
    return pixels


def distinct_colors(count: int) -> List[Tuple[int, int, int, int]]:
    """Opaque, clearly non-white colours that differ from each other."""
    colors = []
    for i in range(count):
        colors.append(((37 * i) % 200, (91 * i + 40) % 200, (53 * i + 80) % 200, 255))
    assert len(set(colors)) == count
    return colors


def grid_pixels(rows: int, cols: int, cell_w: int, cell_h: int, margin: int = 0):
    """
    White canvas with a rows x cols grid of solid cells starting at (margin, margin).
    Returns (pixels, colours in row-major order).
    """
    colors = distinct_colors(rows * cols)
    pixels = blank(cols * cell_w + 2 * margin, rows * cell_h + 2 * margin)
    for r in range(rows):
        for c in range(cols):
            y0 = margin + r * cell_h
            x0 = margin + c * cell_w
            pixels[y0:y0 + cell_h, x0:x0 + cell_w] = colors[r * cols + c]
    return pixels, colors


def dominant_color(img: Image) -> Tuple[int, ...]:
    flat = img.pixels.reshape(-1, 4)
    values, counts = np.unique(flat, axis=0, return_counts=True)
    return tuple(int(v) for v in values[counts.argmax()])


def png_bytes(pixels: np.ndarray) -> bytes:
    buffer = BytesIO()
    PILImage.fromarray(pixels).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def ring_with_enclosed_white() -> Image:
    """
    60x60 white canvas, red disc of radius 20 in the middle, one white pixel
    at the disc centre.
    """
    pixels = blank(60, 60)
    yy, xx = np.mgrid[0:60, 0:60]
    disc = (yy - 30) ** 2 + (xx - 30) ** 2 <= 20 ** 2
    pixels[disc] = (200, 20, 20, 255)
    pixels[30, 30] = WHITE
    return Image(pixels=pixels)
