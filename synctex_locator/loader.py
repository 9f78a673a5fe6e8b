# synctex_locator/loader.py
"""
Locate, read and cache the SyncTeX file that belongs to a PDF.

The TeX engine writes `<stem>.synctex.gz` (or `<stem>.synctex` when run with
-synctex=-1) next to `<stem>.pdf`. The uncompressed variant wins when both
exist.
"""
from __future__ import annotations
import gzip
import logging
import os
import threading
from pathlib import Path
from typing import Dict, Optional, Tuple

import portalocker

from .backward import BackwardResult, backward_search
from .forward import ForwardResult, forward_search
from .model import SyncTexModel
from .parse import parse_synctex

logger = logging.getLogger(__name__)

SYNCTEX_SUFFIX = ".synctex"
GZ_SUFFIX = ".gz"


def find_synctex(pdf_path: str | Path) -> Path:
    """
    Return the sync file for `pdf_path`.
    Raises:
        FileNotFoundError: if neither <stem>.synctex nor <stem>.synctex.gz exists.
    """
    pdf = Path(pdf_path)
    plain = pdf.with_name(pdf.stem + SYNCTEX_SUFFIX)
    if plain.exists():
        return plain
    gz = plain.with_name(plain.name + GZ_SUFFIX)
    if gz.exists():
        return gz
    raise FileNotFoundError(f"SyncTeX file not found for {pdf}: tried {plain.name} and {gz.name}")


def read_synctex_text(path: Path) -> str:
    # Shared lock: the engine may be rewriting the file while we read it.
    with path.open("rb") as fh:
        portalocker.lock(fh, portalocker.LOCK_SH)
        try:
            raw = fh.read()
        finally:
            portalocker.unlock(fh)
    if path.name.endswith(GZ_SUFFIX):
        raw = gzip.decompress(raw)
        logger.debug("read %s (%d bytes decompressed)", path, len(raw))
    else:
        logger.debug("read %s (%d bytes)", path, len(raw))
    return raw.decode("utf-8", errors="replace")


def _change_token(path: Path) -> Tuple[int, int]:
    st = path.stat()
    return st.st_mtime_ns, st.st_size


class ModelCache:
    """
    Parsed models keyed by sync-file path.

    An entry is reused while the file's (mtime, size) is unchanged and
    replaced otherwise. Published models are shared between callers and must
    not be modified.
    """

    def __init__(self):
        self._entries: Dict[Path, Tuple[Tuple[int, int], SyncTexModel]] = {}
        self._lock = threading.Lock()

    def get(self, path: Path) -> SyncTexModel:
        key = path.resolve()
        token = _change_token(key)
        with self._lock:
            entry = self._entries.get(key)
        if entry is not None and entry[0] == token:
            logger.debug("synctex cache hit: %s", key)
            return entry[1]

        logger.debug("synctex cache miss: %s", key)
        model = parse_synctex(read_synctex_text(key))
        with self._lock:
            self._entries[key] = (token, model)
        return model

    def invalidate(self, path: Optional[Path] = None) -> None:
        with self._lock:
            if path is None:
                self._entries.clear()
            else:
                self._entries.pop(Path(path).resolve(), None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def load_model(pdf_path: str | Path, cache: Optional[ModelCache] = None) -> SyncTexModel:
    path = find_synctex(pdf_path)
    if cache is not None:
        return cache.get(path)
    return parse_synctex(read_synctex_text(path))


def resolve_input_path(model: SyncTexModel, path: str) -> str:
    """
    Match `path` against the input paths recorded by TeX.

    TeX records paths as it opened them (often with `./` segments), so an
    exact miss falls back to comparing normalised paths. Ambiguous or missing
    matches return `path` unchanged.
    """
    if path in model.line_index:
        return path
    wanted = os.path.normpath(path)
    hits = [p for p in model.line_index if os.path.normpath(p) == wanted]
    if len(hits) == 1:
        return hits[0]
    return path


def forward_for_pdf(
    line: int,
    tex_path: str,
    pdf_path: str | Path,
    cache: Optional[ModelCache] = None,
) -> ForwardResult:
    model = load_model(pdf_path, cache)
    return forward_search(model, line, resolve_input_path(model, str(tex_path)))


def backward_for_pdf(
    page: int,
    x: float,
    y: float,
    pdf_path: str | Path,
    cache: Optional[ModelCache] = None,
) -> BackwardResult:
    return backward_search(load_model(pdf_path, cache), page, x, y)
