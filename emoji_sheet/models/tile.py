from __future__ import annotations
from dataclasses import dataclass

from .emoji_labels import EmojiTemplate
from .image import Image


@dataclass
class Tile:
    """
    One cropped grid cell. `index` is the row-major position in the sheet.
    """
    image: Image
    index: int
    row: int
    col: int
    template: EmojiTemplate | None = None  # Attached by the pipeline when labels are known.

    @property
    def key(self) -> str | None:
        return self.template.key if self.template else None

    @property
    def label(self) -> str | None:
        return self.template.label if self.template else None

    def filename(self, transparent: bool = False) -> str:
        suffix = "_transparent" if transparent else ""
        return f"emoji_{self.index + 1}{suffix}.png"
