# synctex_locator/model.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple

# SyncTeX stores lengths in TeX scaled points; dividing by this gives big points.
UNIT = 65781.76

VERTICAL = "vertical"
HORIZONTAL = "horizontal"

# line_index[path][line][page] -> elements, in record order
LineIndex = Dict[str, Dict[int, Dict[int, List["Element"]]]]


class NodeRef(NamedTuple):
    """
    Tagged reference to a node of the page/block tree.

    kind == "page":  index is the page number.
    kind == "block": index is the position of the block in the block arena.
    """
    kind: str
    index: int


@dataclass(frozen=True)
class InputFile:
    id: int
    path: str


@dataclass(frozen=True)
class Offset:
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Element:
    """
    Leaf record: one typeset unit attributed to a source line.

    Attributes:
        kind (str): record tag character (x, k, g, $, v, h, ...).
        width (float | None): None when the record carries no width. This is
            not the same as a zero width; see rect.covering_rectangle.
        height (float): copied from the enclosing block.
        seq (int): position of the record among all elements of the file.
    """
    kind: str
    file_id: int
    path: str
    line: int
    left: float
    bottom: float
    width: Optional[float]
    height: float
    page: int
    seq: int


@dataclass
class Block:
    kind: str
    file_id: int
    line: int
    left: float
    bottom: float
    width: Optional[float]
    height: float
    depth: Optional[float]
    page: int
    parent: NodeRef
    blocks: List["Block"] = field(default_factory=list)
    elements: List[Element] = field(default_factory=list)


@dataclass
class Page:
    number: int
    blocks: List[Block] = field(default_factory=list)


@dataclass(frozen=True)
class SyncTexModel:
    """
    Everything decoded from one SyncTeX file.

    `blocks` is the arena every Block.parent of kind "block" points into.
    `hblocks` keeps the horizontal blocks in creation order; queries only
    read `line_index`, `files` and `offset`.
    """
    version: str
    offset: Offset
    files: Dict[int, InputFile]
    pages: Dict[int, Page]
    page_count: int
    hblocks: Tuple[Block, ...]
    blocks: Tuple[Block, ...]
    line_index: LineIndex


def index_element(index: LineIndex, elem: Element) -> None:
    """Insert one element under (path, line, page), creating buckets as needed."""
    by_line = index.setdefault(elem.path, {})
    by_page = by_line.setdefault(elem.line, {})
    by_page.setdefault(elem.page, []).append(elem)


def build_line_index(blocks: Iterable[Block]) -> LineIndex:
    """
    Rebuild the (path -> line -> page -> elements) index from parsed blocks.

    Elements are re-inserted in record order, so the result is equal to the
    index the parser builds on the fly, including dict ordering.
    """
    elements = [e for b in blocks for e in b.elements]
    elements.sort(key=lambda e: e.seq)
    index: LineIndex = {}
    for e in elements:
        index_element(index, e)
    return index
