import argparse
import logging
import os
import sys
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from ..models.errors import DecodeError, InvalidDimensions
from ..pipeline.grid_slicer import slice_composite, GRID_ROWS, GRID_COLS
from ..pipeline.background_remover import remove_backgrounds, MATTE_MAX_WORKERS
from ..services.bounding_box_service import CONTENT_PADDING_PX
from ..services.image_service import ImageService, WHITE_THRESHOLD

TILES_DIR = os.getenv("TILES_DIR_PATH", "data/tiles")

logger = logging.getLogger(__name__)


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="emoji-sheet",
        description="Slice a generated emoji sheet into tiles, optionally with transparent backgrounds.",
    )
    parser.add_argument("composite", type=Path, help="Composite image produced by the generator")
    parser.add_argument("--out", type=Path, default=Path(TILES_DIR), help="Output folder")
    parser.add_argument("--rows", type=int, default=GRID_ROWS)
    parser.add_argument("--cols", type=int, default=GRID_COLS)
    parser.add_argument("--threshold", type=int, default=WHITE_THRESHOLD,
                        help="Channel value above which a pixel counts as white")
    parser.add_argument("--padding", type=int, default=CONTENT_PADDING_PX,
                        help="Pixels kept around the detected content")
    parser.add_argument("--transparent", action="store_true",
                        help="Also write a transparent-background variant of every tile")
    parser.add_argument("--workers", type=positive_int, default=MATTE_MAX_WORKERS,
                        help="Threads used for background removal")
    return parser


def main(argv=None) -> int:
    # --- Centralized Logging Configuration ---
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )
    parser = build_parser()
    args = parser.parse_args(argv)
    # defaults come from MATTE_MAX_WORKERS and bypass the argument type
    if args.workers is not None and args.workers < 1:
        parser.error(f"--workers must be >= 1, got {args.workers}")
    image_service = ImageService()

    try:
        composite = image_service.load(args.composite)
        tiles = slice_composite(composite, args.rows, args.cols,
                                threshold=args.threshold, padding=args.padding)
    except (FileNotFoundError, DecodeError, InvalidDimensions) as err:
        logger.error(f"Could not generate tiles from {args.composite}: {err}")
        return 1

    outputs = [(tile, tile.filename()) for tile in tiles]
    if args.transparent:
        matted = remove_backgrounds(tiles, threshold=args.threshold, max_workers=args.workers)
        outputs += [(tile, tile.filename(transparent=True)) for tile in matted]

    try:
        for tile, filename in outputs:
            tile.image.path = args.out / filename
            image_service.save(tile.image)
            logger.info(f"Wrote {tile.image.path} ({tile.key or f'r{tile.row}c{tile.col}'})")
    except OSError as err:
        logger.error(f"Could not write tiles to {args.out}: {err}")
        return 1

    logger.info(f"Done: {len(outputs)} files in {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
