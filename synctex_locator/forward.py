# synctex_locator/forward.py
from __future__ import annotations
from bisect import bisect_left
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Tuple

from .errors import SyncTexNotFound
from .model import Element, SyncTexModel
from .rect import Rect, covering_rectangle


@dataclass(frozen=True)
class ForwardResult:
    page: int
    x: float
    y: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _first_bucket(by_page: Dict[int, List[Element]]) -> Tuple[int, Rect]:
    # Only the first page recorded for a line is used; later pages are ignored.
    page, elements = next(iter(by_page.items()))
    return page, covering_rectangle(elements)


def forward_search(model: SyncTexModel, line: int, file_path: str) -> ForwardResult:
    """
    Map a source line of `file_path` to a (page, x, y) position in the output.

    Lines that produced no typeset material are placed by linear
    interpolation of the bottoms of the nearest recorded lines around them.
    x and page are then taken from the following recorded line, so the
    estimate is poor when the two lines sit on different pages.
    """
    by_line = model.line_index.get(file_path)
    if not by_line:
        raise SyncTexNotFound(f"no synctex records for input {file_path!r}")
    off = model.offset

    line_nums = sorted(by_line)
    i = bisect_left(line_nums, line)
    if i == len(line_nums):
        # past the last recorded line: snap to it, no extrapolation
        i -= 1
        line = line_nums[i]
    if i == 0 or line_nums[i] == line:
        page, c = _first_bucket(by_line[line_nums[i]])
        return ForwardResult(page=page, x=c.left + off.x, y=c.bottom + off.y)

    line0, line1 = line_nums[i - 1], line_nums[i]
    _, c0 = _first_bucket(by_line[line0])
    page1, c1 = _first_bucket(by_line[line1])
    span = line1 - line0
    bottom = c0.bottom * (line1 - line) / span + c1.bottom * (line - line0) / span
    return ForwardResult(page=page1, x=c1.left + off.x, y=bottom + off.y)
