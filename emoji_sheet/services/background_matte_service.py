import logging
import numpy as np

from ..models.image import Image
from .image_service import ImageService, WHITE_THRESHOLD

logger = logging.getLogger(__name__)


class BackgroundMatteService:
    """
    Business-level helper for transparent backgrounds.

    • Only white that is 4-connected to the image border is removed, so white
      details enclosed by an outline (eyes, teeth, shirts) stay opaque.
    • Returns a **new** Image; RGB values are never touched, only alpha.
    • Best effort: if the fill fails the input comes back unchanged.
    """

    def __init__(self):
        self.image_service = ImageService()

    @staticmethod
    def _border_connected(white: np.ndarray) -> np.ndarray:
        """
        Iterative flood fill over a boolean (H, W) white mask, seeded from
        every white border pixel.

        Returns:
            Boolean (H, W) mask of white pixels reachable from the border.
        """
        height, width = white.shape
        # one byte per pixel for both the mask and the visited set
        is_white = np.ascontiguousarray(white, dtype=np.uint8).tobytes()
        visited = bytearray(width * height)
        stack = []

        def push(pos: int) -> None:
            if not visited[pos] and is_white[pos]:
                visited[pos] = 1
                stack.append(pos)

        last_row = (height - 1) * width
        for x in range(width):
            push(x)
            push(last_row + x)
        for y in range(height):
            push(y * width)
            push(y * width + width - 1)

        while stack:
            pos = stack.pop()
            x = pos % width
            if x + 1 < width:
                push(pos + 1)
            if x > 0:
                push(pos - 1)
            if pos + width < width * height:
                push(pos + width)
            if pos >= width:
                push(pos - width)

        return np.frombuffer(visited, dtype=np.uint8).reshape(height, width).astype(bool)

    def _apply_matte(self, img: Image, threshold: int) -> Image:
        white = self.image_service.near_white_mask(img, threshold)
        background = self._border_connected(white)

        out = self.image_service.copy(img)
        out.pixels[background, 3] = 0
        logger.debug(f"Matte cleared {int(background.sum())} of {background.size} pixels")
        return out

    def matte(self, img: Image, threshold: int = WHITE_THRESHOLD) -> Image:
        """
        Make border-reachable near-white pixels fully transparent.

        Args:
            img: Tile (or any image) to matte. Never modified.
            threshold: Near-white channel threshold, same as the slicer's.

        Returns:
            A new Image of the same size. On any failure during the fill,
            an unmodified copy of `img`.
        """
        try:
            return self._apply_matte(img, threshold)
        except Exception as err:  # noqa: BLE001
            logger.warning(f"Background matte failed, returning image unchanged: {err}")
            return Image(pixels=img.pixels.copy(), path=img.path)

    def matte_bytes(self, data: bytes, threshold: int = WHITE_THRESHOLD) -> bytes:
        """
        Encoded-image variant. Decode errors propagate; any later failure
        returns `data` as given.
        """
        img = self.image_service.decode(data)
        try:
            matted = self._apply_matte(img, threshold)
            return self.image_service.encode_png(matted)
        except Exception as err:  # noqa: BLE001
            logger.warning(f"Background matte failed, returning input bytes: {err}")
            return data

    @staticmethod
    def matte_changed(before: Image, after: Image) -> bool:
        """True when the matte actually cleared some alpha."""
        return not np.array_equal(before.pixels, after.pixels)
