# synctex_locator/pdf_ingest.py
"""
PDF page geometry needed to talk to SyncTeX coordinates.

SyncTeX positions are PDF points (1/72 in) measured from the top-left corner
of the page, while PDF user space has its origin at the bottom-left and
viewers usually report raster pixels at some DPI.
"""
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import fitz  # PyMuPDF
import pdfplumber

PT_PER_INCH = 72.0  # PDF coordinate system: 72 points per inch


@dataclass
class PdfDoc:
    """
    The compiled PDF a SyncTeX file describes.

    Attributes:
        path (Path): PDF beside which the .synctex(.gz) lives.
        num_pages (int): Page count, used to reject out-of-range search pages.
        dpi (int): Raster resolution pixel coordinates refer to.
    """
    path: Path
    num_pages: int
    dpi: int = 72

    def check_page(self, page: int) -> None:
        """SyncTeX pages are 1-based."""
        if not (1 <= page <= self.num_pages):
            raise IndexError(f"page {page} out of range 1..{self.num_pages}")


def load_pdf(path: str | Path, dpi: int = 72) -> PdfDoc:
    """
    Count the pages of the PDF a search will run against.
    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the PDF has zero pages.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"PDF not found: {p}")
    with pdfplumber.open(str(p)) as pdf:
        n = len(pdf.pages)
    if n == 0:
        raise ValueError("PDF has zero pages")
    return PdfDoc(path=p, num_pages=n, dpi=dpi)


def page_size_points(doc: PdfDoc, page: int) -> Tuple[float, float]:
    """
    Return (width, height) of 1-based `page` in PDF points.
    """
    doc.check_page(page)
    with fitz.open(str(doc.path)) as pdf:
        rect = pdf[page - 1].rect
        return float(rect.width), float(rect.height)


def px_to_points(x_px: float, y_px: float, dpi: float) -> Tuple[float, float]:
    # both spaces have a top-left origin, only the scale differs
    scale = PT_PER_INCH / dpi
    return x_px * scale, y_px * scale


def points_to_px(x_pt: float, y_pt: float, dpi: float) -> Tuple[int, int]:
    scale = dpi / PT_PER_INCH
    return int(round(x_pt * scale)), int(round(y_pt * scale))


def pdf_to_synctex_y(y_pdf: float, page_height: float) -> float:
    """Flip a PDF user-space y (bottom-left origin) to SyncTeX's top-left origin."""
    return page_height - y_pdf


def pdf_point_to_synctex(doc: PdfDoc, page: int, x_pdf: float, y_pdf: float,
                         page_height: Optional[float] = None) -> Tuple[float, float]:
    if page_height is None:
        _, page_height = page_size_points(doc, page)
    return x_pdf, pdf_to_synctex_y(y_pdf, page_height)
