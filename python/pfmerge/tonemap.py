# python/pfmerge/tonemap.py
# Tone curves for turning linear PF radiance into displayable 8-bit previews
# Exists so merged renders can be eyeballed without an HDR viewer
# RELEVANT FILES: python/pfmerge/preview.py, python/pfmerge/config.py, tests/test_preview.py

from __future__ import annotations

from typing import Iterable

import numpy as np

TONEMAP_LINEAR = "linear"
TONEMAP_REINHARD = "reinhard"
TONEMAP_ACES = "aces"

TONEMAP_MODES = (TONEMAP_LINEAR, TONEMAP_REINHARD, TONEMAP_ACES)

_ACES_INPUT = np.array(
    [
        [0.59719, 0.35458, 0.04823],
        [0.07600, 0.90834, 0.01566],
        [0.02840, 0.13383, 0.83777],
    ],
    dtype=np.float32,
)

_ACES_OUTPUT = np.array(
    [
        [1.60475, -0.53108, -0.07367],
        [-0.10208, 1.10813, -0.00605],
        [-0.00327, -0.07276, 1.07602],
    ],
    dtype=np.float32,
)


def _as_rgb(color: np.ndarray | Iterable[float]) -> np.ndarray:
    arr = np.asarray(color, dtype=np.float32)
    if arr.shape[-1] != 3:
        raise ValueError(f"Expected RGB data with shape (..., 3); got {arr.shape}")
    # diverged samples (NaN/inf) render black
    return np.clip(np.nan_to_num(arr, nan=0.0, posinf=0.0, neginf=0.0), 0.0, None)


def _rrt_odt_fit(v: np.ndarray) -> np.ndarray:
    a = v * (v + 0.0245786) - 0.000090537
    b = v * (0.983729 * v + 0.4329510) + 0.238081
    return a / np.where(np.abs(b) < 1e-8, 1.0, b)


def tonemap_linear(color: np.ndarray | Iterable[float]) -> np.ndarray:
    return np.clip(_as_rgb(color), 0.0, 1.0)


def tonemap_reinhard(color: np.ndarray | Iterable[float]) -> np.ndarray:
    arr = _as_rgb(color)
    return arr / (arr + 1.0)


def tonemap_aces(color: np.ndarray | Iterable[float]) -> np.ndarray:
    """ACES filmic curve (Narkowicz/Hill RRT+ODT fit)."""
    arr = _as_rgb(color)
    flat = arr.reshape(-1, 3) @ _ACES_INPUT.T
    out = _rrt_odt_fit(flat) @ _ACES_OUTPUT.T
    return np.clip(out.reshape(arr.shape), 0.0, 1.0)


def apply_tonemap(color: np.ndarray | Iterable[float], mode: str, exposure: float = 1.0) -> np.ndarray:
    """Scale by ``exposure`` then apply the named curve; output lies in [0, 1]."""
    normalized = str(mode).lower()
    if normalized not in TONEMAP_MODES:
        raise ValueError(f"Unsupported tone mapping mode '{mode}'. Expected one of {TONEMAP_MODES}.")
    if exposure <= 0:
        raise ValueError(f"Exposure must be positive: {exposure}")
    exposed = _as_rgb(color) * np.float32(exposure)
    if normalized == TONEMAP_LINEAR:
        return tonemap_linear(exposed)
    if normalized == TONEMAP_REINHARD:
        return tonemap_reinhard(exposed)
    return tonemap_aces(exposed)


def to_srgb8(ldr: np.ndarray, gamma: float = 2.2) -> np.ndarray:
    """Gamma-encode [0, 1] values to uint8."""
    if gamma <= 0:
        raise ValueError(f"Gamma must be positive: {gamma}")
    encoded = np.power(np.clip(ldr, 0.0, 1.0), 1.0 / gamma)
    return np.round(encoded * 255.0).astype(np.uint8)


__all__ = [
    "TONEMAP_LINEAR",
    "TONEMAP_REINHARD",
    "TONEMAP_ACES",
    "TONEMAP_MODES",
    "tonemap_linear",
    "tonemap_reinhard",
    "tonemap_aces",
    "apply_tonemap",
    "to_srgb8",
]
