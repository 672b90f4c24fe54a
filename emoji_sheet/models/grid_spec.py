from __future__ import annotations
from dataclasses import dataclass
import operator
from typing import Tuple

from .bounding_box import BoundingBox
from .errors import InvalidDimensions


@dataclass(frozen=True)
class GridSpec:
    """
    Row/column partition of a bounding box into equal-area cells.
    Cell sizes are real-valued; they need not land on pixel boundaries.
    """
    rows: int
    cols: int

    def __post_init__(self):
        for name in ("rows", "cols"):
            value = getattr(self, name)
            try:
                # accepts numpy integers; bool is an int subclass, so it is rejected explicitly
                count = operator.index(value) if not isinstance(value, bool) else None
            except TypeError:
                count = None
            if count is None or count < 1:
                raise InvalidDimensions(f"{name} must be an integer >= 1, got {value!r}")
            object.__setattr__(self, name, count)

    @property
    def cell_count(self) -> int:
        return self.rows * self.cols

    def cell_size(self, box: BoundingBox) -> Tuple[float, float]:
        """(cell_w, cell_h) as floats."""
        return box.w / self.cols, box.h / self.rows

    def cell_origin(self, box: BoundingBox, row: int, col: int) -> Tuple[float, float]:
        """
        Top-left of cell (row, col), computed from the box origin every time
        so rounding never accumulates from one cell to the next.
        """
        cell_w, cell_h = self.cell_size(box)
        return box.x + col * cell_w, box.y + row * cell_h
