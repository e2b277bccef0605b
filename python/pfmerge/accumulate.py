# python/pfmerge/accumulate.py
# Sample-weighted merge of PF images produced by independent render passes
# Exists to fold partial renders (devices, progressive iterations) into one averaged image
# RELEVANT FILES: python/pfmerge/image.py, python/pfmerge/tools/merge.py, tests/test_accumulate.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

import numpy as np

from .errors import GeometryMismatch, PfmError, TruncatedPayload
from .image import Image, open_image

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
ErrorHandler = Callable[[Path, PfmError], None]


def _check_complete(img: Image) -> None:
    if not img.is_complete():
        raise TruncatedPayload(
            f"pixel buffer holds {img.pixels.size} of {img.expected_len} floats",
            img.path,
            expected=img.expected_len,
            actual=int(img.pixels.size),
        )


def _check_compatible(target: Image, incoming: Image) -> None:
    if target.size != incoming.size:
        raise GeometryMismatch(target.size, incoming.size, incoming.path)
    _check_complete(target)
    _check_complete(incoming)


def accumulate(target: Image, incoming: Union[Image, PathLike]) -> Image:
    """Fold ``incoming`` into ``target`` as a sample-weighted mean.

    ``target`` is modified in place and returned. When it is empty it adopts
    a copy of ``incoming``. Otherwise each channel becomes::

        (old * w1 + new * w2) / (w1 + w2)

    with ``w1 = target.weight`` and ``w2 = incoming.weight``, and the
    iteration count becomes ``w1 + w2``. Pixel values are per-sample
    averages, so they are blended rather than summed.

    Parameters
    ----------
    target : Image
        Running result; may be empty.
    incoming : Image or path
        Image to fold in. A path is opened with strict payload checking.

    Raises
    ------
    GeometryMismatch
        If both images are non-empty and their sizes differ. Neither image
        is modified.
    TruncatedPayload
        If either pixel buffer is shorter than its dimensions require,
        including an incomplete image offered as the seed.
    """
    if not isinstance(incoming, Image):
        incoming = open_image(incoming)

    if target.is_empty():
        if not incoming.is_empty():
            _check_complete(incoming)
        target.width = incoming.width
        target.height = incoming.height
        target.scale = incoming.scale
        target.iterations = incoming.iterations
        target.pixels = incoming.pixels.copy()
        target.path = incoming.path
        logger.debug("seeded accumulation from %s", incoming.path or "<memory>")
        return target

    _check_compatible(target, incoming)

    w1 = target.weight
    w2 = incoming.weight
    total = w1 + w2
    blended = (target.pixels.astype(np.float64) * w1 + incoming.pixels.astype(np.float64) * w2) / total
    target.pixels = blended.astype(np.float32)
    target.iterations = total
    logger.debug("accumulated %s: weights %d + %d -> %d", incoming.path or "<memory>", w1, w2, total)
    return target


def accumulate_file(target: Image, path: PathLike, *, strict: bool = True) -> Image:
    """Open ``path`` and fold it into ``target``; returns the image that was read."""
    incoming = open_image(path, strict=strict)
    accumulate(target, incoming)
    return incoming


def merge_images(images: Iterable[Image]) -> Image:
    """Fold ``images`` left to right into a new image."""
    result = Image.new()
    for img in images:
        accumulate(result, img)
    return result


def merge_files(
    paths: Iterable[PathLike],
    *,
    on_error: Optional[ErrorHandler] = None,
    strict: bool = True,
) -> Image:
    """Open and fold every file in ``paths``.

    Parameters
    ----------
    paths : iterable of str or Path
        Input files, folded in order.
    on_error : callable, optional
        Called as ``on_error(path, exc)`` for inputs that cannot be read or
        merged; those inputs are skipped. Without it the first error propagates.
    strict : bool, default True
        Passed to :func:`open_image`.

    Returns
    -------
    Image
        The merged image; empty if no input could be used.
    """
    result = Image.new()
    for raw in paths:
        path = Path(raw)
        try:
            accumulate_file(result, path, strict=strict)
        except PfmError as exc:
            if on_error is None:
                raise
            on_error(path, exc)
    return result


__all__ = ["accumulate", "accumulate_file", "merge_images", "merge_files"]
