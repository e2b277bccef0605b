# python/pfmerge/byteorder.py
# Byte order capability used by the PF header and pixel codecs
# Exists so the encode path takes the host order as a parameter instead of reading a global
# RELEVANT FILES: python/pfmerge/header.py, python/pfmerge/pixels.py, tests/test_byteorder.py

from __future__ import annotations

import math
import sys
from enum import Enum
from typing import Optional, Union

import numpy as np


class ByteOrder(Enum):
    """Byte order of a PF pixel payload.

    The PF header stores the order in the sign of its scale field:
    negative for little-endian, positive for big-endian.
    """
    LITTLE = "little"
    BIG = "big"

    @classmethod
    def detect(cls) -> "ByteOrder":
        """Return the byte order of the running host."""
        return cls(sys.byteorder)

    @classmethod
    def from_scale(cls, scale: float) -> "ByteOrder":
        """Byte order encoded by the sign of ``scale`` (``-0.0`` reads as little-endian)."""
        return cls.LITTLE if math.copysign(1.0, float(scale)) < 0.0 else cls.BIG

    @property
    def is_little(self) -> bool:
        return self is ByteOrder.LITTLE

    @property
    def sign(self) -> float:
        return -1.0 if self is ByteOrder.LITTLE else 1.0

    @property
    def float32(self) -> np.dtype:
        """NumPy dtype of a float32 in this byte order."""
        return np.dtype("<f4") if self is ByteOrder.LITTLE else np.dtype(">f4")

    def sign_scale(self, scale: float) -> float:
        """Return ``scale`` with its magnitude kept and its sign set for this order."""
        return math.copysign(abs(float(scale)), self.sign)


ByteOrderLike = Union[ByteOrder, str, None]

_ALIASES = {
    "little": ByteOrder.LITTLE,
    "le": ByteOrder.LITTLE,
    "<": ByteOrder.LITTLE,
    "big": ByteOrder.BIG,
    "be": ByteOrder.BIG,
    ">": ByteOrder.BIG,
}


def resolve_byte_order(value: ByteOrderLike = None) -> ByteOrder:
    """Coerce ``value`` to a :class:`ByteOrder`; ``None`` and ``"native"`` mean the host order."""
    if isinstance(value, ByteOrder):
        return value
    if value is None:
        return ByteOrder.detect()
    key = str(value).strip().lower()
    if key in {"native", "host", "="}:
        return ByteOrder.detect()
    order: Optional[ByteOrder] = _ALIASES.get(key)
    if order is None:
        raise ValueError(f"Unknown byte order: {value!r}")
    return order


__all__ = ["ByteOrder", "ByteOrderLike", "resolve_byte_order"]
