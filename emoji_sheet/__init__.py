"""
Emoji sheet pipeline: slice an AI-generated composite into a grid of tiles
and strip the border-connected white background from individual tiles.
"""
from .models.errors import AllocationFailure, DecodeError, InvalidDimensions
from .pipeline.grid_slicer import slice_composite
from .pipeline.background_remover import remove_backgrounds

__all__ = [
    "AllocationFailure",
    "DecodeError",
    "InvalidDimensions",
    "slice_composite",
    "remove_backgrounds",
]

__version__ = "1.0.0"
