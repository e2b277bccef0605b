# python/pfmerge/header.py
# Text header codec for PF float images (magic, iteration tag, dimensions, scale)
# Exists to keep header grammar separate from the binary pixel payload
# RELEVANT FILES: python/pfmerge/pixels.py, python/pfmerge/image.py, tests/test_header.py

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from .byteorder import ByteOrder, ByteOrderLike, resolve_byte_order
from .errors import FormatError

logger = logging.getLogger(__name__)

MAGIC = b"PF"
COMMENT = b"#"
ITERATIONS_TAG = b"#>"


@dataclass(frozen=True)
class PfmHeader:
    """Decoded PF header.

    Attributes
    ----------
    width, height : int
        Image dimensions in pixels.
    scale : float
        Scale field as stored; its sign gives the payload byte order.
    iterations : Optional[int]
        Sample passes annotated with ``#>``; ``None`` when the tag is absent.
    """
    width: int
    height: int
    scale: float
    iterations: Optional[int] = None

    @property
    def byte_order(self) -> ByteOrder:
        return ByteOrder.from_scale(self.scale)

    @property
    def payload_floats(self) -> int:
        return self.width * self.height * 3


def _parse_iterations(line: bytes) -> int:
    text = line[len(ITERATIONS_TAG):].strip()
    try:
        value = int(text)
    except ValueError:
        raise FormatError("bad iteration count") from None
    if value < 0:
        raise FormatError("bad iteration count")
    return value


def _parse_dimensions(line: bytes) -> Tuple[int, int, float]:
    tokens = line.split()
    if len(tokens) < 3:
        raise FormatError("missing metadata")
    try:
        width = int(tokens[0])
        height = int(tokens[1])
        scale = float(tokens[2])
    except ValueError:
        raise FormatError("missing metadata") from None
    if width <= 0 or height <= 0 or not math.isfinite(scale):
        raise FormatError("missing metadata")
    return width, height, scale


def decode_header(data: bytes) -> Tuple[PfmHeader, int]:
    """Parse the header at the start of ``data``.

    Parameters
    ----------
    data : bytes
        File contents, or at least every byte up to the end of the dimension line.

    Returns
    -------
    (PfmHeader, int)
        The header and the byte offset where the pixel payload starts.

    Raises
    ------
    FormatError
        If the magic token is wrong or the dimension line is missing or malformed.
    """
    newline = data.find(b"\n")
    first = data if newline < 0 else data[:newline]
    if first.rstrip() != MAGIC:
        raise FormatError("bad magic")

    iterations: Optional[int] = None
    pos = len(data) if newline < 0 else newline + 1
    while pos < len(data):
        end = data.find(b"\n", pos)
        stop = len(data) if end < 0 else end + 1
        line = data[pos:stop].rstrip(b"\r\n")
        pos = stop

        if line.startswith(ITERATIONS_TAG):
            iterations = _parse_iterations(line)
            continue
        if line.startswith(COMMENT) or not line.strip():
            continue

        width, height, scale = _parse_dimensions(line)
        header = PfmHeader(width=width, height=height, scale=scale, iterations=iterations)
        logger.debug(
            "decoded PF header: %dx%d scale=%r iterations=%s payload@%d",
            width, height, scale, iterations, pos,
        )
        return header, pos

    raise FormatError("missing metadata")


def encode_header(
    width: int,
    height: int,
    scale: float,
    iterations: Optional[int] = None,
    byte_order: ByteOrderLike = None,
) -> bytes:
    """Serialize a PF header.

    The sign of ``scale`` is rewritten to describe ``byte_order`` (the host
    order by default) while its magnitude is kept, so the file always
    describes the payload written after it.
    """
    order = resolve_byte_order(byte_order)
    lines = [MAGIC]
    if iterations is not None:
        lines.append(ITERATIONS_TAG + b" " + str(int(iterations)).encode("ascii"))
    signed = order.sign_scale(scale)
    lines.append(f"{int(width)} {int(height)} {signed!r}".encode("ascii"))
    return b"\n".join(lines) + b"\n"


__all__ = ["MAGIC", "ITERATIONS_TAG", "PfmHeader", "decode_header", "encode_header"]
