#!/usr/bin/env python3
"""
synctex_locator/cli.py

Forward and backward search against the SyncTeX data of a compiled PDF,
without calling the `synctex` binary.

Usage:
  synctex-locator view --line 42 --input paper/main.tex --pdf paper/main.pdf
  synctex-locator edit --page 3 -x 120.5 -y 480 --pdf paper/main.pdf
  synctex-locator edit --page 3 -x 502 -y 2000 --dpi 300 --pdf paper/main.pdf

Results are printed as one JSON object on stdout. Coordinates are PDF points
from the top-left corner of the page unless --dpi (raster pixels) or
--pdf-origin (PDF user space, bottom-left origin) is given.

Environment:
  SYNCTEX_LOCATOR_LOG_LEVEL  default for --log-level (WARNING)
"""
from __future__ import annotations
import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .errors import SyncTexError
from .loader import backward_for_pdf, forward_for_pdf
from .pdf_ingest import load_pdf, pdf_point_to_synctex, points_to_px, px_to_points

logger = logging.getLogger("synctex_locator")

LOG_LEVEL_ENV = "SYNCTEX_LOCATOR_LOG_LEVEL"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _setup_logging(level: str) -> None:
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        ch = logging.StreamHandler(sys.stderr)
        ch.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(ch)
    logger.setLevel(level)


def _cmd_view(args: argparse.Namespace) -> dict:
    res = forward_for_pdf(args.line, args.input, args.pdf)
    out = res.to_dict()
    if args.dpi:
        out["x_px"], out["y_px"] = points_to_px(res.x, res.y, args.dpi)
        out["dpi"] = args.dpi
    return out


def _cmd_edit(args: argparse.Namespace) -> dict:
    x, y = args.x, args.y
    pdf = Path(args.pdf)
    if args.pdf_origin or pdf.exists():
        doc = load_pdf(pdf)
        doc.check_page(args.page)
        if args.pdf_origin:
            x, y = pdf_point_to_synctex(doc, args.page, x, y)
    if args.dpi:
        x, y = px_to_points(x, y, args.dpi)
    logger.debug("backward search on page %d at (%.2f, %.2f) pt", args.page, x, y)
    return backward_for_pdf(args.page, x, y, pdf).to_dict()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="synctex-locator", description="SyncTeX forward/backward search")
    p.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS,
                   default=os.environ.get(LOG_LEVEL_ENV, "WARNING"),
                   help=f"Logging level (env: {LOG_LEVEL_ENV})")
    sub = p.add_subparsers(dest="command", required=True)

    v = sub.add_parser("view", help="source line -> PDF position")
    v.add_argument("--line", type=int, required=True, help="1-based source line")
    v.add_argument("--input", required=True, help="Source path as recorded by TeX")
    v.add_argument("--pdf", required=True, help="Compiled PDF; the .synctex(.gz) is looked up beside it")
    v.add_argument("--dpi", type=float, default=None, help="Also report pixel coordinates at this DPI")
    v.set_defaults(func=_cmd_view)

    e = sub.add_parser("edit", help="PDF position -> source line")
    e.add_argument("--page", type=int, required=True, help="1-based page number")
    e.add_argument("-x", type=float, required=True)
    e.add_argument("-y", type=float, required=True)
    e.add_argument("--pdf", required=True, help="Compiled PDF; the .synctex(.gz) is looked up beside it")
    units = e.add_mutually_exclusive_group()
    units.add_argument("--dpi", type=float, default=None, help="x/y are raster pixels at this DPI")
    units.add_argument("--pdf-origin", action="store_true",
                       help="x/y are PDF user-space points (origin bottom-left)")
    e.set_defaults(func=_cmd_edit)
    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    # argparse does not check choices against a default taken from the environment
    if args.log_level not in LOG_LEVELS:
        parser.error(f"invalid log level {args.log_level!r} from {LOG_LEVEL_ENV}; choose from {', '.join(LOG_LEVELS)}")
    _setup_logging(args.log_level)
    try:
        out = args.func(args)
    except (SyncTexError, OSError, ValueError, IndexError) as e:
        print(f"synctex-locator: {e}", file=sys.stderr)
        return 1
    print(json.dumps(out, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
