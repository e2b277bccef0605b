# python/pfmerge/image.py
# In-memory PF image (dimensions, iteration count, signed scale, flat float32 pixels)
# Exists to compose the header and pixel codecs into open/save and to own the pixel buffer
# RELEVANT FILES: python/pfmerge/header.py, python/pfmerge/pixels.py, python/pfmerge/accumulate.py, tests/test_image.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np

from .byteorder import ByteOrderLike, resolve_byte_order
from .errors import EmptyImage, FormatError, IoError, NotFound, TruncatedPayload
from .header import decode_header, encode_header
from .pixels import CHANNELS, decode_pixels, encode_pixels

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _empty_pixels() -> np.ndarray:
    return np.empty(0, dtype=np.float32)


@dataclass(eq=False)
class Image:
    """A PF image held fully in memory.

    Attributes
    ----------
    width, height : int
        Dimensions in pixels; both 0 for a new, empty image.
    scale : float
        Scale field from the header. Only its sign carries meaning (payload
        byte order when the file was read); the magnitude is passed through.
    iterations : Optional[int]
        Number of sample passes the pixel values average over, or ``None``
        when the file carried no ``#>`` annotation.
    pixels : np.ndarray
        Flat float32 buffer of RGB triples in row-major order.
    path : Optional[Path]
        Source file, for bookkeeping only.
    """
    width: int = 0
    height: int = 0
    scale: float = 1.0
    iterations: Optional[int] = None
    pixels: np.ndarray = field(default_factory=_empty_pixels)
    path: Optional[Path] = None

    @classmethod
    def new(cls) -> "Image":
        return cls()

    @classmethod
    def from_array(
        cls,
        rgb: np.ndarray,
        *,
        iterations: Optional[int] = None,
        scale: float = 1.0,
    ) -> "Image":
        """Build an image from an ``(height, width, 3)`` array."""
        arr = np.asarray(rgb, dtype=np.float32)
        if arr.ndim != 3 or arr.shape[2] != CHANNELS:
            raise ValueError(f"Expected RGB data with shape (H, W, 3); got {arr.shape}")
        height, width = arr.shape[:2]
        return cls(
            width=int(width),
            height=int(height),
            scale=float(scale),
            iterations=iterations,
            pixels=np.array(arr, dtype=np.float32).reshape(-1),
        )

    @classmethod
    def open(cls, path: PathLike, *, strict: bool = True) -> "Image":
        return open_image(path, strict=strict)

    def save(self, path: PathLike, *, byte_order: ByteOrderLike = None) -> None:
        save_image(self, path, byte_order=byte_order)

    def is_empty(self) -> bool:
        return self.pixels.size == 0

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def expected_len(self) -> int:
        return self.pixel_count * CHANNELS

    def is_complete(self) -> bool:
        """True when the pixel buffer holds exactly ``width * height * 3`` floats."""
        return self.pixels.size == self.expected_len and self.pixels.size > 0

    @property
    def weight(self) -> int:
        """Sample weight used when accumulating.

        This is the one place an unspecified or zero iteration count becomes 1.
        """
        if self.iterations is None or self.iterations < 1:
            return 1
        return int(self.iterations)

    @property
    def rgb(self) -> np.ndarray:
        """``(height, width, 3)`` view of the pixel buffer."""
        if self.is_empty():
            raise EmptyImage("image has no pixels", self.path)
        if not self.is_complete():
            raise TruncatedPayload(
                f"pixel buffer holds {self.pixels.size} of {self.expected_len} floats",
                self.path,
                expected=self.expected_len,
                actual=int(self.pixels.size),
            )
        return self.pixels.reshape(self.height, self.width, CHANNELS)

    def copy(self) -> "Image":
        return Image(
            width=self.width,
            height=self.height,
            scale=self.scale,
            iterations=self.iterations,
            pixels=self.pixels.copy(),
            path=self.path,
        )

    def describe(self) -> str:
        iters = "-" if self.iterations is None else str(self.iterations)
        return f"[ {self.width} x {self.height} ] iters = {iters}"


def open_image(path: PathLike, *, strict: bool = True) -> Image:
    """Read a PF image from ``path``.

    Parameters
    ----------
    path : str or Path
        File to read.
    strict : bool, default True
        Raise :class:`TruncatedPayload` when the payload is short. When
        false, the missing floats are filled with zeros and a warning is
        logged, so the returned image is always complete.

    Raises
    ------
    NotFound
        If the file cannot be opened.
    FormatError
        If the header is malformed (or the payload is short in strict mode).
    """
    path = Path(path)
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as exc:
        raise NotFound(f"cannot open file ({exc.strerror or exc})", path) from exc

    try:
        header, offset = decode_header(data)
        pixels = decode_pixels(
            data[offset:],
            header.width,
            header.height,
            header.byte_order.is_little,
            strict=strict,
        )
    except FormatError as exc:
        exc.path = path
        raise

    expected = header.payload_floats
    if pixels.size < expected:
        logger.warning("%s: payload holds %d of %d floats, zero-filling the rest", path, pixels.size, expected)
        pixels = np.concatenate([pixels, np.zeros(expected - pixels.size, dtype=np.float32)])

    logger.debug("opened %s: %dx%d iterations=%s", path, header.width, header.height, header.iterations)
    return Image(
        width=header.width,
        height=header.height,
        scale=header.scale,
        iterations=header.iterations,
        pixels=pixels,
        path=path,
    )


def save_image(image: Image, path: PathLike, *, byte_order: ByteOrderLike = None) -> None:
    """Write ``image`` to ``path``.

    The header's scale sign and the payload both follow ``byte_order``
    (host order by default). A failed write may leave a partial file behind.

    Raises
    ------
    EmptyImage
        If the image has no pixels.
    TruncatedPayload
        If the pixel buffer does not match the image dimensions.
    IoError
        If the file cannot be written.
    """
    path = Path(path)
    if image.is_empty():
        raise EmptyImage("cannot save an empty image", path)
    if not image.is_complete():
        raise TruncatedPayload(
            f"pixel buffer holds {image.pixels.size} of {image.expected_len} floats",
            path,
            expected=image.expected_len,
            actual=int(image.pixels.size),
        )

    order = resolve_byte_order(byte_order)
    header = encode_header(image.width, image.height, image.scale, image.iterations, order)
    payload = encode_pixels(image.pixels, order)
    try:
        with open(path, "wb") as f:
            f.write(header)
            f.write(payload)
    except OSError as exc:
        raise IoError(f"write failed ({exc.strerror or exc})", path) from exc
    logger.debug("saved %s: %dx%d %s-endian", path, image.width, image.height, order.value)


__all__ = ["Image", "open_image", "save_image"]
