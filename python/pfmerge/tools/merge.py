#!/usr/bin/env python3
"""
Merge partial PF renders into one sample-weighted image.

Each input's ``#>`` iteration count is used as its weight, so renders from
several devices or progressive passes combine into the image a single longer
run would have produced. Unreadable inputs are reported and skipped.

Usage:
    python -m pfmerge.tools.merge [-o OUTPUT] [--preview PNG] files...

RELEVANT FILES: python/pfmerge/accumulate.py, python/pfmerge/config.py
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from ..accumulate import accumulate_file
from ..config import configure_logging, load_config
from ..errors import GeometryMismatch, NotFound, PfmError, TruncatedPayload
from ..image import Image, save_image
from ..preview import save_preview

logger = logging.getLogger("pfmerge.merge")


def describe_error(exc: PfmError, path: Path) -> str:
    """One-line warning for an input that could not be merged."""
    path = exc.path or path
    if isinstance(exc, NotFound):
        return f"warn: file '{path}' does not exist"
    if isinstance(exc, GeometryMismatch):
        w, h = exc.expected
        return f"warn: file '{path}' has mismatched size (expected {w} x {h})"
    if isinstance(exc, TruncatedPayload):
        return f"warn: file '{path}' is truncated"
    return f"warn: file '{path}' is not a PF file"


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pfmerge-merge",
        description="Average PF renders weighted by their iteration counts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Merge three device renders into output.pfm
  python -m pfmerge.tools.merge gpu0.pfm gpu1.pfm cpu.pfm

  # Custom output plus a tone-mapped preview
  python -m pfmerge.tools.merge -o merged.pfm --preview merged.png pass_*.pfm
        """,
    )
    parser.add_argument("files", nargs="*", type=Path, help="PF files to merge, in order")
    parser.add_argument("-o", "--output", default=None, help="Set custom output filename")
    parser.add_argument("--config", type=Path, default=None, help="JSON settings file")
    parser.add_argument(
        "--lenient",
        dest="strict_payload",
        action="store_const",
        const=False,
        default=None,
        help="Zero-fill truncated payloads instead of skipping those files",
    )
    parser.add_argument("--preview", type=Path, default=None, help="Also write a tone-mapped PNG")
    parser.add_argument("--exposure", type=float, default=None, help="Preview exposure factor")
    parser.add_argument("--tonemap", default=None, help="Preview tone curve: linear, reinhard or aces")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log codec details")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point; returns the process exit code."""
    args = _parse_args(argv)
    cfg = load_config(
        args.config,
        overrides={
            "output": args.output,
            "strict_payload": args.strict_payload,
            "exposure": args.exposure,
            "tonemap": args.tonemap,
            "log_level": "DEBUG" if args.verbose else None,
        },
    )
    configure_logging(cfg)

    image = Image.new()
    for path in args.files:
        try:
            incoming = accumulate_file(image, path, strict=cfg.strict_payload)
        except PfmError as exc:
            logger.warning(describe_error(exc, path))
            continue
        logger.info("reading: %s %s", path, incoming.describe())

    if image.is_empty():
        logger.warning("warn: no input could be read, nothing written")
        return 1

    output = Path(cfg.output)
    logger.info("writing: %s %s", output, image.describe())
    try:
        save_image(image, output, byte_order=cfg.resolved_byte_order())
        if args.preview is not None:
            save_preview(image, args.preview, cfg.tonemap, cfg.exposure)
            logger.info("preview: %s", args.preview)
    except PfmError as exc:
        logger.error("error: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
