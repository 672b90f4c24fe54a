class InvalidDimensions(ValueError):
    """Grid rows/cols (or a label list) that cannot describe a valid grid."""


class DecodeError(ValueError):
    """Bytes or a buffer that cannot be interpreted as a raster image."""


class AllocationFailure(MemoryError):
    """An output buffer could not be allocated."""
