#!/usr/bin/env python3
"""
Emoji Sheet API Server
Stateless endpoints around the slicing and background-removal pipeline.
Nothing is stored between requests; every response carries the images inline.
"""

import os
import logging
from typing import Any, Dict, List
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from flask import Flask, request, jsonify
from flask_cors import CORS

# --- Centralized Logging Configuration ---
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
    datefmt='%H:%M:%S'
)

from emoji_sheet.models.errors import DecodeError, InvalidDimensions
from emoji_sheet.models.tile import Tile
from emoji_sheet.pipeline.grid_slicer import slice_composite, GRID_ROWS, GRID_COLS
from emoji_sheet.pipeline.background_remover import remove_backgrounds
from emoji_sheet.services.background_matte_service import BackgroundMatteService
from emoji_sheet.services.bounding_box_service import CONTENT_PADDING_PX
from emoji_sheet.services.image_service import ImageService, WHITE_THRESHOLD

app = Flask(__name__)
CORS(app)  # Enable CORS for frontend communication

# Configuration
ALLOWED_EXTENSIONS = set(os.getenv("ALLOWED_EXTENSIONS", "png,jpg,jpeg,webp,bmp").split(","))
MAX_CONTENT_LENGTH = int(os.getenv("MAX_UPLOAD_SIZE_MB", "50")) * 1024 * 1024

app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH

# Initialize services
image_service = ImageService()
matte_service = BackgroundMatteService()

logger = logging.getLogger(__name__)

TRUE_VALUES = {"1", "true", "yes", "on"}


def allowed_file(filename: str) -> bool:
    """Check if file extension is allowed."""
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def read_upload(field: str) -> bytes:
    """Return the bytes of an uploaded file, or raise ValueError with a user-facing message."""
    if field not in request.files:
        raise ValueError(f"No {field} image provided")
    file = request.files[field]
    if file.filename == '':
        raise ValueError('No file selected')
    if not allowed_file(file.filename):
        raise ValueError(f"Unsupported file type: {file.filename}")
    return file.read()


def int_field(name: str, default: int) -> int:
    value = request.form.get(name)
    if value is None or value == '':
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


def tile_to_json(tile: Tile, transparent: bool = False) -> Dict[str, Any]:
    height, width = image_service.get_image_dimensions(tile.image)
    return {
        'index': tile.index,
        'row': tile.row,
        'col': tile.col,
        'key': tile.key,
        'label': tile.label,
        'filename': tile.filename(transparent=transparent),
        'width': int(width),
        'height': int(height),
        'image': image_service.to_data_url(tile.image),
    }


@app.route('/api/slice', methods=['POST'])
def slice_sheet():
    """Slice an uploaded composite into grid tiles."""
    try:
        data = read_upload('composite')
        rows = int_field('rows', GRID_ROWS)
        cols = int_field('cols', GRID_COLS)
        threshold = int_field('threshold', WHITE_THRESHOLD)
        padding = int_field('padding', CONTENT_PADDING_PX)
        transparent = request.form.get('transparent', '').lower() in TRUE_VALUES

        tiles = slice_composite(data, rows, cols, threshold=threshold, padding=padding)
        logger.info(f"Sliced upload into {len(tiles)} tiles ({rows}x{cols})")

        response: Dict[str, Any] = {
            'success': True,
            'rows': rows,
            'cols': cols,
            'tiles': [tile_to_json(tile) for tile in tiles],
        }
        if transparent:
            matted: List[Tile] = remove_backgrounds(tiles, threshold=threshold, matte_service=matte_service)
            response['transparent_tiles'] = [tile_to_json(tile, transparent=True) for tile in matted]

        return jsonify(response)

    except (ValueError, DecodeError, InvalidDimensions) as e:
        logger.warning(f"Rejected slice request: {e}")
        return jsonify({'success': False, 'message': str(e)}), 400
    except Exception as e:
        logger.error(f"Slicing error: {e}")
        return jsonify({'success': False, 'message': 'Could not generate tiles'}), 500


@app.route('/api/remove-background', methods=['POST'])
def remove_background():
    """Make the border-connected white background of one tile transparent."""
    try:
        data = read_upload('tile')
        threshold = int_field('threshold', WHITE_THRESHOLD)

        tile_image = image_service.decode(data)
        matted = matte_service.matte(tile_image, threshold=threshold)
        changed = matte_service.matte_changed(tile_image, matted)
        if not changed:
            logger.info("Background removal left the tile unchanged")

        return jsonify({
            'success': True,
            'changed': changed,
            'image': image_service.to_data_url(matted),
        })

    except (ValueError, DecodeError) as e:
        logger.warning(f"Rejected background removal request: {e}")
        return jsonify({'success': False, 'message': str(e)}), 400
    except Exception as e:
        logger.error(f"Background removal error: {e}")
        return jsonify({'success': False, 'message': 'Transparency unavailable for this tile'}), 500


@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'healthy',
        'message': 'Emoji Sheet API is running',
    })


@app.errorhandler(413)
def too_large(e):
    """Handle file too large error."""
    return jsonify({'error': f'File too large. Maximum size is {MAX_CONTENT_LENGTH // (1024 * 1024)}MB.'}), 413


@app.errorhandler(500)
def internal_error(e):
    """Handle internal server error."""
    logger.error(f"Internal server error: {e}")
    return jsonify({'error': 'Internal server error'}), 500


if __name__ == '__main__':
    print("🚀 Starting Emoji Sheet API Server...")
    print(f"🔧 Max upload size: {MAX_CONTENT_LENGTH // (1024*1024)}MB")
    print(f"🔲 Default grid: {GRID_ROWS}x{GRID_COLS}")
    print("🌐 CORS enabled for frontend communication")
    print("📋 Endpoints:")
    print("   1. /api/slice")
    print("   2. /api/remove-background")
    print("="*60)

    app.run(debug=False, host="0.0.0.0", port=int(os.getenv("API_SERVER_PORT", "5002")))
