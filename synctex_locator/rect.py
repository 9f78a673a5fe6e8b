# synctex_locator/rect.py
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Iterable, Union

from .model import Block, Element


@dataclass(frozen=True)
class Rect:
    """Axis-aligned box in SyncTeX space (y grows downward, so top <= bottom)."""
    top: float
    bottom: float
    left: float
    right: float

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom

    def outside_distance(self, x: float, y: float) -> float:
        """Largest per-axis overshoot; <= 0 on an axis iff the point is inside on it."""
        return max(self.top - y, y - self.bottom, self.left - x, x - self.right)


def covering_rectangle(items: Iterable[Union[Block, Element]]) -> Rect:
    """
    Union box of blocks or elements.

    Items without a width still extend top, bottom and left but are left out
    of the right edge; if none has a width, right stays at -inf.
    """
    top = left = math.inf
    bottom = right = -math.inf
    seen = False
    for b in items:
        seen = True
        bottom = max(bottom, b.bottom)
        top = min(top, b.bottom - b.height)
        left = min(left, b.left)
        if b.width is not None:
            right = max(right, b.left + b.width)
    if not seen:
        raise ValueError("covering_rectangle() needs at least one block")
    return Rect(top=top, bottom=bottom, left=left, right=right)
