# pipeline/background_remover.py
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence

from dotenv import load_dotenv

from ..models.tile import Tile
from ..services.background_matte_service import BackgroundMatteService
from ..services.image_service import WHITE_THRESHOLD

# ------------------------------------------------------------------
# env-vars
load_dotenv()
_workers = os.getenv("MATTE_MAX_WORKERS")
MATTE_MAX_WORKERS = int(_workers) if _workers else None

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
def remove_backgrounds(
    tiles: Sequence[Tile],
    *,
    threshold: int = WHITE_THRESHOLD,
    max_workers: int | None = MATTE_MAX_WORKERS,
    matte_service: BackgroundMatteService = BackgroundMatteService(),
) -> List[Tile]:
    """
    For every Tile in *tiles*:
        • matte its image (border-connected white → transparent)
        • wrap the result in a new Tile with the same position and label
    Tiles are independent, so they are processed on a thread pool.
    Input tiles are left untouched; output order matches input order.
    """
    if not tiles:
        return []

    def _matte(tile: Tile) -> Tile:
        return Tile(image=matte_service.matte(tile.image, threshold=threshold),
                    index=tile.index, row=tile.row, col=tile.col, template=tile.template)

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        matted = list(pool.map(_matte, tiles))

    unchanged = sum(
        1 for before, after in zip(tiles, matted)
        if not matte_service.matte_changed(before.image, after.image)
    )
    logger.info(f"Removed backgrounds from {len(matted)} tiles ({unchanged} unchanged)")
    return matted
