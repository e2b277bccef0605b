# Ensure `import pfmerge` works from a fresh clone:
# put repo/python on sys.path so the package is importable without prior install.
import sys
from pathlib import Path

import numpy as np
import pytest


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def _ensure_python_path():
    pkg_dir = _repo_root() / "python"
    if str(pkg_dir) not in sys.path:
        sys.path.insert(0, str(pkg_dir))


_ensure_python_path()

from pfmerge import Image  # noqa: E402


def write_raw_pf(path: Path, header: bytes, values, dtype: str = "<f4") -> Path:
    """Write a PF file byte by byte, bypassing the encoder."""
    payload = np.asarray(values, dtype=dtype).tobytes()
    path.write_bytes(header + payload)
    return path


@pytest.fixture
def make_image():
    """Factory for small images filled with a constant or given RGB data."""
    def _make(width=2, height=2, value=0.5, iterations=None, scale=1.0):
        if np.ndim(value) == 0:
            rgb = np.full((height, width, 3), value, dtype=np.float32)
        else:
            rgb = np.asarray(value, dtype=np.float32).reshape(height, width, 3)
        return Image.from_array(rgb, iterations=iterations, scale=scale)
    return _make


@pytest.fixture
def gradient_image():
    """4x3 image with distinct values in every channel."""
    rgb = np.arange(4 * 3 * 3, dtype=np.float32).reshape(3, 4, 3) / 10.0
    return Image.from_array(rgb, iterations=5, scale=2.5)


@pytest.fixture
def raw_pf():
    return write_raw_pf
