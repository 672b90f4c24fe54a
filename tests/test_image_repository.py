"""Tests for decoding, encoding and buffer ownership."""

from __future__ import annotations

from io import BytesIO

import numpy as np
import pytest
from PIL import Image as PILImage

from emoji_sheet.models.errors import AllocationFailure, DecodeError
from emoji_sheet.models.image import Image
from emoji_sheet.repositories.image_repository import ImageRepository
from emoji_sheet.services.image_service import ImageService

from tests.conftest import blank, png_bytes


def _encode(mode: str, size=(4, 3), color=None, fmt: str = "PNG") -> bytes:
    buffer = BytesIO()
    PILImage.new(mode, size, color).save(buffer, format=fmt)
    return buffer.getvalue()


def test_decode_rgba_png_keeps_channel_order() -> None:
    pixels = blank(5, 4, color=(10, 20, 30, 40))

    img = ImageRepository().decode(png_bytes(pixels))

    assert img.pixels.shape == (4, 5, 4)
    assert tuple(img.pixels[0, 0]) == (10, 20, 30, 40)


def test_decode_rgb_png_gets_opaque_alpha() -> None:
    img = ImageRepository().decode(_encode("RGB", color=(200, 100, 50)))

    assert img.pixels.shape == (3, 4, 4)
    assert tuple(img.pixels[1, 1]) == (200, 100, 50, 255)


def test_decode_grayscale_png() -> None:
    img = ImageRepository().decode(_encode("L", color=77))

    assert tuple(img.pixels[0, 0]) == (77, 77, 77, 255)


def test_decode_jpeg() -> None:
    img = ImageRepository().decode(_encode("RGB", size=(16, 16), color=(255, 255, 255), fmt="JPEG"))

    assert img.pixels.shape == (16, 16, 4)
    assert img.pixels[:, :, 3].min() == 255


@pytest.mark.parametrize("data", [b"", b"not an image", b"\x89PNG\r\n\x1a\n" + b"\x00" * 20])
def test_decode_rejects_malformed_bytes(data: bytes) -> None:
    with pytest.raises(DecodeError):
        ImageRepository().decode(data)


def test_encode_png_round_trip() -> None:
    repo = ImageRepository()
    pixels = blank(6, 2, color=(1, 2, 3, 0))

    decoded = repo.decode(repo.encode_png(repo.create_image(pixels)))

    assert np.array_equal(decoded.pixels, pixels)


def test_create_image_copies_and_adds_alpha() -> None:
    rgb = np.zeros((2, 3, 3), dtype=np.uint8)

    img = ImageRepository.create_image(rgb)
    rgb[:] = 9

    assert img.pixels.shape == (2, 3, 4)
    assert img.pixels[..., :3].max() == 0
    assert img.pixels[..., 3].min() == 255


@pytest.mark.parametrize("pixels", [
    np.zeros((2, 2), dtype=np.uint8),
    np.zeros((2, 2, 4), dtype=np.float32),
    np.zeros((0, 2, 4), dtype=np.uint8),
])
def test_create_image_rejects_bad_buffers(pixels: np.ndarray) -> None:
    with pytest.raises(DecodeError):
        ImageRepository.create_image(pixels)


def test_save_and_load(tmp_path) -> None:
    service = ImageService()
    img = service.create_image(blank(3, 3, color=(5, 6, 7, 8)), tmp_path / "nested" / "tile.png")

    service.save(img)
    loaded = service.load(tmp_path / "nested" / "tile.png")

    assert np.array_equal(loaded.pixels, img.pixels)
    assert loaded.path == tmp_path / "nested" / "tile.png"


def test_load_missing_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        ImageService().load(tmp_path / "missing.png")


def test_crop_pixels_clamps_origin() -> None:
    service = ImageService()
    img = service.create_image(np.arange(5 * 4 * 4, dtype=np.uint8).reshape(4, 5, 4))

    block = service.crop_pixels(img, left=4, top=3, width=2, height=2)

    assert block.shape == (2, 2, 4)
    assert np.array_equal(block, img.pixels[2:4, 3:5])


def test_to_data_url_prefix() -> None:
    service = ImageService()

    url = service.to_data_url(service.create_image(blank(1, 1)))

    assert url.startswith("data:image/png;base64,")


class _UncopyablePixels:
    shape = (4, 4, 4)

    def copy(self):
        raise MemoryError("cannot allocate copy")


def test_copy_out_of_memory_raises_allocation_failure() -> None:
    with pytest.raises(AllocationFailure):
        ImageRepository.copy(Image(pixels=_UncopyablePixels()))
