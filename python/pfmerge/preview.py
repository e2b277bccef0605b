# python/pfmerge/preview.py
# PNG writers for tone-mapped previews and luminance error maps
# RELEVANT FILES: python/pfmerge/tonemap.py, python/pfmerge/quality.py, python/pfmerge/tools/merge.py, python/pfmerge/tools/rmse.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np
from PIL import Image as PILImage

from .errors import IoError
from .image import Image
from .quality import luminance_error_map
from .tonemap import TONEMAP_REINHARD, apply_tonemap, to_srgb8

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _write_png(arr: np.ndarray, path: Path) -> None:
    try:
        PILImage.fromarray(arr).save(str(path), format="PNG")
    except OSError as exc:
        raise IoError(f"write failed ({exc})", path) from exc


def render_preview(
    image: Image,
    mode: str = TONEMAP_REINHARD,
    exposure: float = 1.0,
    gamma: float = 2.2,
) -> np.ndarray:
    """Tone map ``image`` to an ``(height, width, 3)`` uint8 array."""
    return to_srgb8(apply_tonemap(image.rgb, mode, exposure), gamma)


def save_preview(
    image: Image,
    path: PathLike,
    mode: str = TONEMAP_REINHARD,
    exposure: float = 1.0,
    gamma: float = 2.2,
) -> Path:
    """Write a tone-mapped 8-bit PNG of ``image``; returns the output path."""
    path = Path(path)
    _write_png(render_preview(image, mode, exposure, gamma), path)
    logger.debug("wrote preview %s (%s, exposure=%g)", path, mode, exposure)
    return path


def save_error_map(
    candidate: Image,
    reference: Image,
    path: PathLike,
    scale: Optional[float] = None,
) -> Path:
    """Write the absolute luminance error as a grayscale PNG.

    Errors are divided by ``scale`` (the largest error by default) so the
    worst pixel is white. Identical images produce a black map.
    """
    path = Path(path)
    err = luminance_error_map(candidate, reference)
    peak = float(scale) if scale is not None else float(np.max(err))
    if peak > 0.0:
        norm = np.clip(err / peak, 0.0, 1.0)
    else:
        norm = np.zeros_like(err)
    _write_png(np.round(norm * 255.0).astype(np.uint8), path)
    logger.debug("wrote error map %s (peak=%g)", path, peak)
    return path


__all__ = ["render_preview", "save_preview", "save_error_map"]
