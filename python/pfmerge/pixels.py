# python/pfmerge/pixels.py
# Binary payload codec for PF images: packed float32 RGB triples in a fixed byte order
# Exists so header parsing and payload decoding can be tested independently
# RELEVANT FILES: python/pfmerge/header.py, python/pfmerge/byteorder.py, tests/test_pixels.py

from __future__ import annotations

import logging
from typing import Iterable, Union

import numpy as np

from .byteorder import ByteOrder, ByteOrderLike, resolve_byte_order
from .errors import TruncatedPayload

logger = logging.getLogger(__name__)

CHANNELS = 3
FLOAT_BYTES = 4


def decode_pixels(
    payload: bytes,
    width: int,
    height: int,
    little_endian: bool,
    *,
    strict: bool = True,
) -> np.ndarray:
    """Decode ``width * height * 3`` float32 values from ``payload``.

    Bytes past the expected count are ignored. A short payload raises
    :class:`TruncatedPayload` when ``strict`` is set; otherwise the complete
    floats that are present are returned and the caller owns the mismatch.

    Returns
    -------
    np.ndarray
        Flat float32 array in host byte order, writable and owned.
    """
    expected = int(width) * int(height) * CHANNELS
    available = len(payload) // FLOAT_BYTES
    count = min(expected, available)
    if count < expected:
        if strict:
            raise TruncatedPayload(
                f"truncated payload: {available} of {expected} floats present",
                expected=expected,
                actual=available,
            )
        logger.debug("lenient decode of truncated payload: %d of %d floats", count, expected)

    if count == 0:
        return np.empty(0, dtype=np.float32)
    order = ByteOrder.LITTLE if little_endian else ByteOrder.BIG
    raw = np.frombuffer(payload, dtype=order.float32, count=count)
    return raw.astype(np.float32)


def encode_pixels(
    pixels: Union[np.ndarray, Iterable[float]],
    byte_order: ByteOrderLike = None,
) -> bytes:
    """Pack ``pixels`` as float32 values in ``byte_order`` (host order by default)."""
    order = resolve_byte_order(byte_order)
    arr = np.asarray(pixels, dtype=np.float32).reshape(-1)
    return arr.astype(order.float32, copy=False).tobytes()


__all__ = ["CHANNELS", "decode_pixels", "encode_pixels"]
