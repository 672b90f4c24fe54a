import logging
import math
from typing import List

from ..models.bounding_box import BoundingBox
from ..models.errors import AllocationFailure
from ..models.grid_spec import GridSpec
from ..models.image import Image
from ..models.tile import Tile
from .bounding_box_service import BoundingBoxService, CONTENT_PADDING_PX
from .image_service import ImageService, WHITE_THRESHOLD

logger = logging.getLogger(__name__)


class GridSlicerService:
    """
    Cuts a composite into rows x cols equal tiles after discounting its margin.

    • Uses BoundingBoxService to find the padded content area.
    • Returns **new** Image buffers; the composite is never written to.
    • Errors propagate: a wrong slice must never look like a plausible one.
    """

    def __init__(self):
        self.image_service = ImageService()
        self.bounding_box_service = BoundingBoxService()

    @staticmethod
    def _cell_rect(box: BoundingBox, grid: GridSpec, row: int, col: int):
        """
        Integer (left, top, width, height) of one cell. Origin and size are
        both floored, and the origin comes straight from the box origin, so
        every cell is rounded the same way and seams do not drift.
        """
        cell_w, cell_h = grid.cell_size(box)
        origin_x, origin_y = grid.cell_origin(box, row, col)
        width = max(1, math.floor(cell_w))
        height = max(1, math.floor(cell_h))
        return math.floor(origin_x), math.floor(origin_y), width, height

    def slice_box(self, img: Image, box: BoundingBox, grid: GridSpec) -> List[Tile]:
        """Partition an already-known box. Row-major order."""
        tiles = []
        try:
            for row in range(grid.rows):
                for col in range(grid.cols):
                    left, top, width, height = self._cell_rect(box, grid, row, col)
                    pixels = self.image_service.crop_pixels(img, left, top, width, height)
                    tiles.append(Tile(image=Image(pixels=pixels),
                                      index=row * grid.cols + col, row=row, col=col))
        except MemoryError as err:
            raise AllocationFailure(
                f"Could not allocate {grid.cell_count} tiles from {box}") from err
        return tiles

    def slice(
        self,
        img: Image,
        rows: int,
        cols: int,
        threshold: int = WHITE_THRESHOLD,
        padding: int = CONTENT_PADDING_PX,
    ) -> List[Tile]:
        """
        Args:
            img: Composite image.
            rows, cols: Grid shape, both >= 1.
            threshold: Near-white channel threshold for margin detection.
            padding: Pixels kept around the detected content.

        Returns:
            rows*cols tiles, top-to-bottom then left-to-right.
        """
        grid = GridSpec(rows=rows, cols=cols)
        box = self.bounding_box_service.content_bounding_box(img, threshold=threshold, padding=padding)

        cell_w, cell_h = grid.cell_size(box)
        logger.debug(f"Slicing {box} into {rows}x{cols} cells of {cell_w:.2f}x{cell_h:.2f}px")

        return self.slice_box(img, box, grid)
