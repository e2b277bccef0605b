# python/pfmerge/quality.py
# Luminance-based error metrics for scoring a render against a reference
# Exists to give a single convergence number (RMSE) for Monte-Carlo render comparisons
# RELEVANT FILES: python/pfmerge/image.py, python/pfmerge/tools/rmse.py, tests/test_quality.py

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Optional, Union

import numpy as np

from .errors import EmptyImage, GeometryMismatch, TruncatedPayload
from .image import Image

logger = logging.getLogger(__name__)

# ITU-R BT.709 relative luminance weights
LUMINANCE_WEIGHTS = np.array([0.2126, 0.7152, 0.0722], dtype=np.float64)


def luminance(rgb: Union[np.ndarray, Iterable[float]]) -> Union[float, np.ndarray]:
    """BT.709 relative luminance of an RGB triple or an array of shape ``(..., 3)``.

    Returns a float for a single triple and an array otherwise.
    """
    arr = np.asarray(rgb, dtype=np.float64)
    if arr.shape[-1:] != (3,):
        raise ValueError(f"Expected RGB data with shape (..., 3); got {arr.shape}")
    y = arr @ LUMINANCE_WEIGHTS
    if arr.ndim == 1:
        return float(y)
    return y


def _luminance_pair(candidate: Image, reference: Image):
    if candidate.size != reference.size:
        raise GeometryMismatch(reference.size, candidate.size, candidate.path)
    for img in (candidate, reference):
        if img.is_empty():
            raise EmptyImage("cannot compare an empty image", img.path)
        if not img.is_complete():
            raise TruncatedPayload(
                f"pixel buffer holds {img.pixels.size} of {img.expected_len} floats",
                img.path,
                expected=img.expected_len,
                actual=int(img.pixels.size),
            )
    y_cand = luminance(candidate.pixels.reshape(-1, 3))
    y_ref = luminance(reference.pixels.reshape(-1, 3))
    return y_cand, y_ref


@dataclass(frozen=True)
class QualityReport:
    """Result of :func:`compare`.

    Attributes
    ----------
    rmse : float
        Root-mean-square luminance error.
    mse : float
        Mean squared luminance error.
    max_reference_luminance : float
        Brightest reference pixel luminance.
    relative_rmse : Optional[float]
        ``rmse / max_reference_luminance``; ``None`` when that maximum is not positive.
    """
    rmse: float
    mse: float
    max_reference_luminance: float
    relative_rmse: Optional[float]

    def to_dict(self) -> dict:
        return {
            "rmse": self.rmse,
            "mse": self.mse,
            "max_reference_luminance": self.max_reference_luminance,
            "relative_rmse": self.relative_rmse,
        }


def compare(candidate: Image, reference: Image) -> QualityReport:
    """Score ``candidate`` against ``reference``. Neither image is modified.

    Raises
    ------
    GeometryMismatch
        If the image sizes differ.
    EmptyImage
        If either image has no pixels.
    """
    y_cand, y_ref = _luminance_pair(candidate, reference)
    diff = y_cand - y_ref
    mse = float(np.sum(diff * diff) / candidate.pixel_count)
    value = math.sqrt(mse)
    peak = float(np.max(y_ref))
    relative = value / peak if peak > 0.0 else None
    logger.debug("rmse=%g mse=%g max_ref_luminance=%g", value, mse, peak)
    return QualityReport(rmse=value, mse=mse, max_reference_luminance=peak, relative_rmse=relative)


def rmse(candidate: Image, reference: Image) -> float:
    """Root-mean-square error between the luminance of two equally sized images."""
    return compare(candidate, reference).rmse


def luminance_error_map(candidate: Image, reference: Image) -> np.ndarray:
    """Per-pixel absolute luminance difference with shape ``(height, width)``."""
    y_cand, y_ref = _luminance_pair(candidate, reference)
    return np.abs(y_cand - y_ref).reshape(candidate.height, candidate.width)


__all__ = [
    "LUMINANCE_WEIGHTS",
    "luminance",
    "QualityReport",
    "compare",
    "rmse",
    "luminance_error_map",
]
