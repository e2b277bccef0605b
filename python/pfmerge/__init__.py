# python/pfmerge/__init__.py
# Public API for reading, merging, writing and scoring PF float images
# RELEVANT FILES: python/pfmerge/image.py, python/pfmerge/accumulate.py, python/pfmerge/quality.py, tests/test_api.py
"""pfmerge: PF float-image codec, render accumulator and luminance RMSE.

Typical use::

    import pfmerge

    merged = pfmerge.Image.new()
    for path in ("gpu0.pfm", "gpu1.pfm"):
        pfmerge.accumulate(merged, path)
    pfmerge.save(merged, "merged.pfm")
    print(pfmerge.rmse(merged, pfmerge.open("reference.pfm")))
"""

from .accumulate import accumulate, accumulate_file, merge_files, merge_images
from .byteorder import ByteOrder, resolve_byte_order
from .config import PfmConfig, load_config
from .errors import (
    EmptyImage,
    FormatError,
    GeometryMismatch,
    IoError,
    NotFound,
    PfmError,
    TruncatedPayload,
)
from .header import PfmHeader, decode_header, encode_header
from .image import Image, open_image, save_image
from .pixels import decode_pixels, encode_pixels
from .quality import QualityReport, compare, luminance, luminance_error_map, rmse

__version__ = "0.3.0"

# Short names matching the library surface used by the tools
open = open_image  # noqa: A001
save = save_image

__all__ = [
    "__version__",
    "Image",
    "open",
    "open_image",
    "save",
    "save_image",
    "accumulate",
    "accumulate_file",
    "merge_files",
    "merge_images",
    "luminance",
    "luminance_error_map",
    "rmse",
    "compare",
    "QualityReport",
    "ByteOrder",
    "resolve_byte_order",
    "PfmHeader",
    "decode_header",
    "encode_header",
    "decode_pixels",
    "encode_pixels",
    "PfmConfig",
    "load_config",
    "PfmError",
    "NotFound",
    "FormatError",
    "TruncatedPayload",
    "GeometryMismatch",
    "IoError",
    "EmptyImage",
]
