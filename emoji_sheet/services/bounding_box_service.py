import logging
import os
import numpy as np
from dotenv import load_dotenv

from ..models.bounding_box import BoundingBox
from ..models.image import Image
from .image_service import ImageService, WHITE_THRESHOLD

# Load environment variables
load_dotenv()

# Margin added around the detected content. Too small and the outer gap of
# the edge cells is cut off; too large and the white margin comes back.
CONTENT_PADDING_PX = int(os.getenv("CONTENT_PADDING_PX", "20"))

logger = logging.getLogger(__name__)


class BoundingBoxService:
    """
    Locates the non-white content region of a composite.
    """

    def __init__(self):
        self.image_service = ImageService()

    def content_bounding_box(
        self,
        img: Image,
        threshold: int = WHITE_THRESHOLD,
        padding: int = CONTENT_PADDING_PX,
    ) -> BoundingBox:
        """
        Smallest rectangle holding every non-near-white pixel, grown by
        `padding` on each side and clamped to the image.

        An image with no content at all maps to the full extent rather than
        an empty box.
        """
        if padding < 0:
            raise ValueError(f"padding must be >= 0, got {padding}")

        height, width = self.image_service.get_image_dimensions(img)
        content = ~self.image_service.near_white_mask(img, threshold)

        cols_with_content = np.flatnonzero(content.any(axis=0))
        if cols_with_content.size == 0:
            logger.debug(f"No content found in {width}x{height} image, using full extent")
            return BoundingBox.full(width, height)
        rows_with_content = np.flatnonzero(content.any(axis=1))

        # max edges are exclusive
        x0 = max(0, int(cols_with_content[0]) - padding)
        y0 = max(0, int(rows_with_content[0]) - padding)
        x1 = min(width, int(cols_with_content[-1]) + 1 + padding)
        y1 = min(height, int(rows_with_content[-1]) + 1 + padding)

        box = BoundingBox(x=x0, y=y0, w=x1 - x0, h=y1 - y0)
        logger.debug(f"Content box for {width}x{height} image: {box}")
        return box
