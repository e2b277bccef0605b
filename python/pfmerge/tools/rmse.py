#!/usr/bin/env python3
"""
Luminance RMSE of PF renders against a reference.

Usage:
    python -m pfmerge.tools.rmse [-v] [--json OUT] [--diff DIR] REF IMG [IMG ...]

Prints ``IMG: RMSE = value`` per candidate, or ``IMG -> message`` when the
candidate cannot be scored.

RELEVANT FILES: python/pfmerge/quality.py, python/pfmerge/preview.py
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, Optional, Sequence

from .. import __version__
from ..config import configure_logging, load_config
from ..errors import EmptyImage, GeometryMismatch, IoError, NotFound, PfmError, TruncatedPayload
from ..image import Image, open_image
from ..preview import save_error_map
from ..quality import compare

logger = logging.getLogger("pfmerge.rmse")


def describe_error(exc: PfmError, path: Path) -> str:
    path = exc.path or path
    if isinstance(exc, NotFound):
        return f"warn: file '{path}' does not exist"
    if isinstance(exc, GeometryMismatch):
        return f"error: image size {exc.actual[0]} x {exc.actual[1]} differs from reference {exc.expected[0]} x {exc.expected[1]}"
    if isinstance(exc, EmptyImage):
        return f"error: file '{path}' holds no pixels"
    if isinstance(exc, TruncatedPayload):
        return f"warn: file '{path}' is truncated"
    if isinstance(exc, IoError):
        return f"error: cannot write '{path}' ({exc.message})"
    return f"warn: file '{path}' is not a PF file"


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pfmerge-rmse",
        description="Compare PF images against a reference by luminance RMSE",
    )
    parser.add_argument("files", nargs="*", type=Path, help="Reference image followed by candidates")
    parser.add_argument("-v", "--version", action="store_true", help="Show app version")
    parser.add_argument("--json", type=Path, default=None, help="Save metrics as JSON to PATH")
    parser.add_argument("--diff", type=Path, default=None, help="Directory for luminance error PNGs")
    parser.add_argument("--config", type=Path, default=None, help="JSON settings file")
    parser.add_argument(
        "--lenient",
        dest="strict_payload",
        action="store_const",
        const=False,
        default=None,
        help="Zero-fill truncated payloads instead of rejecting those files",
    )
    return parser.parse_args(argv)


def score(reference: Image, path: Path, *, strict: bool = True, diff_dir: Optional[Path] = None) -> Dict[str, float]:
    """Open ``path`` and compare it against ``reference``."""
    candidate = open_image(path, strict=strict)
    report = compare(candidate, reference)
    if diff_dir is not None:
        try:
            diff_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise IoError(f"cannot create directory ({exc.strerror or exc})", diff_dir) from exc
        save_error_map(candidate, reference, diff_dir / f"{path.stem}_diff.png")
    return report.to_dict()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point; returns the process exit code."""
    args = _parse_args(argv)
    if args.version:
        print(f"pfmerge v{__version__}")
        return 0

    cfg = load_config(args.config, overrides={"strict_payload": args.strict_payload})
    configure_logging(cfg)

    if len(args.files) < 2:
        print("error: Wrong number or arguments!")
        return 1

    ref_path = args.files[0]
    try:
        reference = open_image(ref_path, strict=cfg.strict_payload)
    except PfmError as exc:
        print(f"{ref_path} -> {describe_error(exc, ref_path)}")
        return 1

    results: Dict[str, Dict[str, float]] = {}
    failures = 0
    for path in args.files[1:]:
        try:
            metrics = score(reference, path, strict=cfg.strict_payload, diff_dir=args.diff)
        except PfmError as exc:
            print(f"{path} -> {describe_error(exc, path)}")
            failures += 1
            continue
        results[str(path)] = metrics
        print(f"{path}: RMSE = {metrics['rmse']}")

    if args.json is not None:
        payload = {"reference": str(ref_path), "results": results}
        try:
            args.json.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as exc:
            err = IoError(f"write failed ({exc.strerror or exc})", args.json)
            print(f"{args.json} -> {describe_error(err, args.json)}")
            return 1
        logger.debug("wrote metrics to %s", args.json)

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
