# pipeline/grid_slicer.py
import logging
import os
from typing import List, Sequence, Union

from dotenv import load_dotenv

from ..models.emoji_labels import EMOJI_LABELS, EmojiTemplate
from ..models.errors import InvalidDimensions
from ..models.image import Image
from ..models.tile import Tile
from ..services.bounding_box_service import CONTENT_PADDING_PX
from ..services.grid_slicer_service import GridSlicerService
from ..services.image_service import ImageService, WHITE_THRESHOLD

# ------------------------------------------------------------------
# env-vars
load_dotenv()
GRID_ROWS = int(os.getenv("GRID_ROWS", "4"))
GRID_COLS = int(os.getenv("GRID_COLS", "6"))

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
def slice_composite(
    composite: Union[Image, bytes],
    rows: int = GRID_ROWS,
    cols: int = GRID_COLS,
    *,
    labels: Sequence[EmojiTemplate] | None = None,
    threshold: int = WHITE_THRESHOLD,
    padding: int = CONTENT_PADDING_PX,
    grid_slicer_service: GridSlicerService = GridSlicerService(),
    image_service: ImageService = ImageService(),
) -> List[Tile]:
    """
    Turn the generator's raw composite into labelled tiles:
        • decode (when given encoded bytes)
        • locate content, partition into rows x cols, crop
        • attach labels 1:1 in row-major order
    The built-in 24 labels are used when the grid has exactly 24 cells and
    no explicit `labels` are given; otherwise tiles stay unlabelled.
    """
    if isinstance(composite, (bytes, bytearray, memoryview)):
        composite = image_service.decode(bytes(composite))

    tiles = grid_slicer_service.slice(composite, rows, cols, threshold=threshold, padding=padding)

    if labels is None and len(tiles) == len(EMOJI_LABELS):
        labels = EMOJI_LABELS
    if labels is not None:
        if len(labels) != len(tiles):
            raise InvalidDimensions(
                f"Got {len(labels)} labels for a {rows}x{cols} grid ({len(tiles)} tiles)")
        for tile, template in zip(tiles, labels):
            tile.template = template

    logger.info(f"Sliced composite into {len(tiles)} tiles ({rows}x{cols})")
    return tiles
