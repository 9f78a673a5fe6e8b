# synctex_locator/parse.py
"""
Decode the text of a SyncTeX file into a SyncTexModel.

The grammar handled here is deliberately partial: only the records needed
for forward and backward search are recognised, every other line is skipped.
Records are classified by an ordered list of (pattern, handler) pairs and the
first pattern that matches wins. The patterns overlap in form (a block close
`)` could also end an input path), so the order below is significant.
"""
from __future__ import annotations
import logging
import re
from typing import Callable, Dict, List, Optional, Tuple

from .errors import FormatError
from .model import (
    HORIZONTAL,
    UNIT,
    VERTICAL,
    Block,
    Element,
    InputFile,
    LineIndex,
    NodeRef,
    Offset,
    Page,
    SyncTexModel,
    index_element,
)

logger = logging.getLogger(__name__)

VERSION_PREFIX = "SyncTeX Version:"

INPUT_RE = re.compile(r"Input:([0-9]+):(.+)")
OFFSET_RE = re.compile(r"(X|Y) Offset:(-?[0-9]+)")
OPEN_PAGE_RE = re.compile(r"\{([0-9]+)$")
CLOSE_PAGE_RE = re.compile(r"\}([0-9]+)$")
_BOX_FIELDS = r"([0-9]+),([0-9]+):(-?[0-9]+),(-?[0-9]+):(-?[0-9]+),(-?[0-9]+),(-?[0-9]+)"
OPEN_VBOX_RE = re.compile(r"\[" + _BOX_FIELDS)
CLOSE_VBOX_RE = re.compile(r"\]$")
OPEN_HBOX_RE = re.compile(r"\(" + _BOX_FIELDS)
CLOSE_HBOX_RE = re.compile(r"\)$")
ELEMENT_RE = re.compile(r"(.)([0-9]+),([0-9]+):(-?[0-9]+),(-?[0-9]+)(?::(-?[0-9]+))?")

PAGE = "page"
BLOCK = "block"


class _Parser:
    """Single-pass state machine; one instance per parse."""

    def __init__(self):
        self.offset_x = 0.0
        self.offset_y = 0.0
        self.files: Dict[int, InputFile] = {}
        self.pages: Dict[int, Page] = {}
        self.page_count = 0
        self.page: Optional[Page] = None
        # None, NodeRef(PAGE, page number) or NodeRef(BLOCK, arena index)
        self.context: Optional[NodeRef] = None
        self.arena: List[Block] = []
        self.hblocks: List[Block] = []
        self.index: LineIndex = {}
        self.n_elements = 0
        self.lineno = 0
        self.rules: List[Tuple[re.Pattern, Callable[[re.Match], None]]] = [
            (INPUT_RE, self._input),
            (OFFSET_RE, self._offset),
            (OPEN_PAGE_RE, self._open_page),
            (CLOSE_PAGE_RE, self._close_page),
            (OPEN_VBOX_RE, self._open_vbox),
            (CLOSE_VBOX_RE, self._close_block),
            (OPEN_HBOX_RE, self._open_hbox),
            (CLOSE_HBOX_RE, self._close_block),
            (ELEMENT_RE, self._element),
        ]

    def feed(self, line: str) -> None:
        for pattern, handler in self.rules:
            m = pattern.search(line)
            if m:
                handler(m)
                return

    def _error(self, message: str) -> FormatError:
        return FormatError(message, lineno=self.lineno)

    # --- handlers -------------------------------------------------------

    def _input(self, m: re.Match) -> None:
        file_id = int(m.group(1))
        self.files[file_id] = InputFile(id=file_id, path=m.group(2))

    def _offset(self, m: re.Match) -> None:
        axis, raw = m.group(1), int(m.group(2))
        if axis.lower() == "x":
            self.offset_x = raw / UNIT
        elif axis.lower() == "y":
            self.offset_y = raw / UNIT
        else:
            # OFFSET_RE only admits X or Y
            raise self._error(f"unknown offset axis {axis!r}")

    def _open_page(self, m: re.Match) -> None:
        if self.page is not None:
            raise self._error(f"page opened before page {self.page.number} was closed")
        self.page = Page(number=int(m.group(1)))
        self.page_count = max(self.page_count, self.page.number)
        self.context = NodeRef(PAGE, self.page.number)

    def _close_page(self, m: re.Match) -> None:
        if self.page is None:
            raise self._error("page close without an open page")
        if self.context is not None and self.context.kind == BLOCK:
            raise self._error(f"page {self.page.number} closed while a block is still open")
        self.pages[int(m.group(1))] = self.page
        self.page = None
        self.context = None

    def _open_vbox(self, m: re.Match) -> None:
        self._open_block(m, VERTICAL)

    def _open_hbox(self, m: re.Match) -> None:
        self.hblocks.append(self._open_block(m, HORIZONTAL))

    def _open_block(self, m: re.Match, kind: str) -> Block:
        if self.page is None or self.context is None:
            raise self._error(f"{kind} block opened outside of a page")
        left, bottom, width, height, depth = (int(g) / UNIT for g in m.group(3, 4, 5, 6, 7))
        block = Block(
            kind=kind,
            file_id=int(m.group(1)),
            line=int(m.group(2)),
            left=left,
            bottom=bottom,
            width=width,
            height=height,
            depth=depth if kind == VERTICAL else None,
            page=self.page.number,
            parent=self.context,
        )
        self.arena.append(block)
        self.context = NodeRef(BLOCK, len(self.arena) - 1)
        return block

    def _close_block(self, m: re.Match) -> None:
        ctx = self.context
        if ctx is None or ctx.kind != BLOCK:
            raise self._error("block close without an open block")
        block = self.arena[ctx.index]
        parent = block.parent
        if parent.kind == PAGE:
            if self.page is None or self.page.number != parent.index:
                raise self._error(f"block closed after its page {parent.index}")
            self.page.blocks.append(block)
        elif parent.kind == BLOCK:
            self.arena[parent.index].blocks.append(block)
        else:
            raise self._error(f"unknown parent kind {parent.kind!r}")
        self.context = parent

    def _element(self, m: re.Match) -> None:
        ctx = self.context
        if self.page is None or ctx is None or ctx.kind != BLOCK:
            raise self._error("element outside of a block")
        block = self.arena[ctx.index]
        file_id = int(m.group(2))
        input_file = self.files.get(file_id)
        if input_file is None:
            raise self._error(f"element refers to undeclared input {file_id}")
        width = m.group(6)
        elem = Element(
            kind=m.group(1),
            file_id=file_id,
            path=input_file.path,
            line=int(m.group(3)),
            left=int(m.group(4)) / UNIT,
            bottom=int(m.group(5)) / UNIT,
            width=int(width) / UNIT if width is not None else None,
            height=block.height,
            page=self.page.number,
            seq=self.n_elements,
        )
        self.n_elements += 1
        index_element(self.index, elem)
        block.elements.append(elem)


def parse_synctex(text: str) -> SyncTexModel:
    """
    Parse decompressed SyncTeX text.

    Returns:
        SyncTexModel
    Raises:
        FormatError: a page, block or element record appears where its
            enclosing context is missing. Nothing is returned in that case.
    """
    lines = text.split("\n")
    version = lines[0].rstrip("\r").replace(VERSION_PREFIX, "", 1).strip()

    p = _Parser()
    for i in range(1, len(lines)):
        p.lineno = i + 1
        p.feed(lines[i].rstrip("\r"))

    logger.debug(
        "parsed synctex v%s: %d inputs, %d pages, %d blocks, %d elements",
        version, len(p.files), len(p.pages), len(p.arena), p.n_elements,
    )
    return SyncTexModel(
        version=version,
        offset=Offset(p.offset_x, p.offset_y),
        files=p.files,
        pages=p.pages,
        page_count=p.page_count,
        hblocks=tuple(p.hblocks),
        blocks=tuple(p.arena),
        line_index=p.index,
    )
