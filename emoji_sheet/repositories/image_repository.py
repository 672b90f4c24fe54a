from io import BytesIO
from pathlib import Path
from typing import Union
import logging
import numpy as np
import cv2
from PIL import Image as PILImage

from ..models.errors import AllocationFailure, DecodeError
from ..models.image import Image

logger = logging.getLogger(__name__)


class ImageRepository:
    """
    Handles decoding, encoding, file I/O and buffer ownership for Image entities.
    Pixels always leave this layer as C-contiguous (H, W, 4) uint8 RGBA.
    """

    @staticmethod
    def _to_rgba(arr: np.ndarray) -> np.ndarray:
        # 16-bit PNGs come back as uint16 with IMREAD_UNCHANGED
        if arr.dtype == np.uint16:
            arr = (arr >> 8).astype(np.uint8)
        if arr.dtype != np.uint8:
            raise DecodeError(f"Unsupported pixel dtype: {arr.dtype}")

        if arr.ndim == 2:
            return cv2.cvtColor(arr, cv2.COLOR_GRAY2RGBA)
        if arr.ndim == 3 and arr.shape[2] == 3:
            return cv2.cvtColor(arr, cv2.COLOR_BGR2RGBA)
        if arr.ndim == 3 and arr.shape[2] == 4:
            return cv2.cvtColor(arr, cv2.COLOR_BGRA2RGBA)
        raise DecodeError(f"Unsupported pixel layout: shape={arr.shape}")

    @staticmethod
    def create_image(pixels: np.ndarray, path: Union[str, Path] = None) -> Image:
        """
        Wrap an RGB or RGBA uint8 array. RGB input gets an opaque alpha channel.
        The array is copied, so the caller keeps sole ownership of its buffer.
        """
        if not isinstance(pixels, np.ndarray) or pixels.dtype != np.uint8:
            raise DecodeError("Pixels must be a uint8 numpy array")
        if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
            raise DecodeError(f"Pixels must have shape (H, W, 3|4), got {pixels.shape}")
        if pixels.shape[0] < 1 or pixels.shape[1] < 1:
            raise DecodeError(f"Image must be at least 1x1, got {pixels.shape[1]}x{pixels.shape[0]}")

        if pixels.shape[2] == 3:
            alpha = np.full(pixels.shape[:2] + (1,), 255, dtype=np.uint8)
            rgba = np.concatenate([pixels, alpha], axis=2)
        else:
            rgba = np.array(pixels, dtype=np.uint8, order="C", copy=True)

        return Image(pixels=rgba, path=Path(path) if path is not None else None)

    @staticmethod
    def copy(image: Image) -> Image:
        try:
            pixels = image.pixels.copy()
        except MemoryError as err:
            raise AllocationFailure(f"Could not copy {image.pixels.shape} buffer") from err
        return Image(pixels=pixels, path=image.path)

    @staticmethod
    def retrieve_image_dimensions(img: Image):
        return img.pixels.shape[:2]

    def decode(self, data: bytes, path: Union[str, Path] = None) -> Image:
        """Decode an encoded image (PNG, JPEG, WebP, ...) into RGBA pixels."""
        if not data:
            raise DecodeError("Empty image buffer")
        buf = np.frombuffer(data, dtype=np.uint8)
        try:
            arr = cv2.imdecode(buf, cv2.IMREAD_UNCHANGED)
        except cv2.error as err:
            raise DecodeError(f"Could not decode image: {err}") from err
        if arr is None:
            raise DecodeError("Could not decode image: unrecognised or corrupt encoding")

        return Image(pixels=np.ascontiguousarray(self._to_rgba(arr)),
                     path=Path(path) if path is not None else None)

    def load(self, path: Union[str, Path]) -> Image:
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Image not found: {path}")
        return self.decode(path.read_bytes(), path=path)

    @staticmethod
    def encode_png(image: Image) -> bytes:
        buffer = BytesIO()
        PILImage.fromarray(np.ascontiguousarray(image.pixels)).save(buffer, format="PNG")
        return buffer.getvalue()

    def save(self, image: Image) -> None:
        if image.path is None:
            raise ValueError("Image has no path to save to")
        image.path.parent.mkdir(parents=True, exist_ok=True)
        image.path.write_bytes(self.encode_png(image))
        logger.debug(f"Saved {image.path}")
