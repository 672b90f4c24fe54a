from pathlib import Path
from typing import Union
import base64
import os
import numpy as np
from dotenv import load_dotenv

from ..models.image import Image
from ..repositories.image_repository import ImageRepository

# Load environment variables
load_dotenv()

# A channel counts as "white" only when strictly above this value (~98 %).
WHITE_THRESHOLD = int(os.getenv("WHITE_THRESHOLD", "250"))


class ImageService:
    """Pixel-level helpers shared by the slicer and the matte.  No grid logic."""
    def __init__(self):
        self.image_repository = ImageRepository()

    def create_image(self, pixels: np.ndarray, path: Union[str, Path] = None) -> Image:
        return self.image_repository.create_image(pixels, path)

    def copy(self, image: Image) -> Image:
        return self.image_repository.copy(image)

    def decode(self, data: bytes) -> Image:
        return self.image_repository.decode(data)

    def load(self, path: str | Path) -> Image:
        """Load a single image from disk into an Image object."""
        return self.image_repository.load(path)

    def encode_png(self, image: Image) -> bytes:
        return self.image_repository.encode_png(image)

    def save(self, image: Image) -> None:
        """
        Business-level method to save the image to its path as PNG.
        """
        self.image_repository.save(image)

    def to_data_url(self, image: Image) -> str:
        encoded = base64.b64encode(self.encode_png(image)).decode("utf-8")
        return f"data:image/png;base64,{encoded}"

    def get_image_dimensions(self, img: Image):
        """(height, width)"""
        return self.image_repository.retrieve_image_dimensions(img)

    @staticmethod
    def near_white_mask(img: Image, threshold: int = WHITE_THRESHOLD) -> np.ndarray:
        """
        Boolean (H, W) mask, True where R, G and B are all above `threshold`.
        Alpha is ignored.
        """
        return (img.pixels[:, :, :3] > threshold).all(axis=2)

    def crop_pixels(self, img: Image, left: int, top: int, width: int, height: int) -> np.ndarray:
        """
        Copy a width x height block out of `img`. The origin is clamped so the
        block always fits inside the image; the size is never reduced unless it
        exceeds the image itself.
        """
        if width < 1 or height < 1:
            raise ValueError(f"Invalid crop size {width}x{height}")

        img_h, img_w = self.get_image_dimensions(img)
        width = min(width, img_w)
        height = min(height, img_h)
        left = max(0, min(left, img_w - width))
        top = max(0, min(top, img_h - height))

        return img.pixels[top:top + height, left:left + width].copy()
