# synctex_locator/backward.py
from __future__ import annotations
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple

from .errors import SyncTexNotFound
from .model import SyncTexModel
from .rect import covering_rectangle


@dataclass(frozen=True)
class BackwardResult:
    input: str
    line: int
    column: int = 0  # SyncTeX carries no column information

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def backward_search(model: SyncTexModel, page: int, x: float, y: float) -> BackwardResult:
    """
    Map a point on `page` (offset-adjusted output coordinates) to a source line.

    Every (input, line) bucket on that page is compared in index order. The
    first bucket whose covering rectangle contains the point wins outright;
    otherwise the bucket with the smallest outside distance is returned, the
    earliest one on ties.

    Raises:
        SyncTexNotFound: no input files, or nothing recorded on `page`.
    """
    if not model.files:
        raise SyncTexNotFound("no input files declared in the synctex data")

    x0 = x - model.offset.x
    y0 = y - model.offset.y

    best: Optional[Tuple[str, int]] = None
    best_dist = 0.0
    for path, by_line in model.line_index.items():
        for line_num, by_page in by_line.items():
            for page_num, elements in by_page.items():
                if page_num != page:
                    continue
                box = covering_rectangle(elements)
                if box.contains(x0, y0):
                    return BackwardResult(input=path, line=line_num)
                dist = box.outside_distance(x0, y0)
                if best is None or dist < best_dist:
                    best = (path, line_num)
                    best_dist = dist

    if best is None:
        raise SyncTexNotFound(f"no synctex records on page {page}")
    return BackwardResult(input=best[0], line=best[1])
