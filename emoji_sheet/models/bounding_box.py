from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class BoundingBox:
    """
    Rectangle inside a source image, in pixels.
    Invariant: x + w <= image width, y + h <= image height.
    """
    x: int
    y: int
    w: int
    h: int

    @property
    def right(self) -> int:
        return self.x + self.w

    @property
    def bottom(self) -> int:
        return self.y + self.h

    @classmethod
    def full(cls, width: int, height: int) -> "BoundingBox":
        return cls(0, 0, width, height)
