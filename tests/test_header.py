# tests/test_header.py
# Header grammar: magic token, #> iteration tag, dimension line and payload offset
# RELEVANT FILES: python/pfmerge/header.py, python/pfmerge/errors.py

from __future__ import annotations

import pytest

from pfmerge.byteorder import ByteOrder
from pfmerge.errors import FormatError
from pfmerge.header import PfmHeader, decode_header, encode_header


class TestDecodeHeader:

    def test_minimal_header(self):
        data = b"PF\n3 2 -1.0\n" + b"\x00" * 72
        header, offset = decode_header(data)
        assert header == PfmHeader(width=3, height=2, scale=-1.0, iterations=None)
        assert offset == len(b"PF\n3 2 -1.0\n")
        assert header.byte_order is ByteOrder.LITTLE
        assert header.payload_floats == 18

    def test_iteration_tag(self):
        header, _ = decode_header(b"PF\n#> 16\n4 4 1.0\n")
        assert header.iterations == 16
        assert header.byte_order is ByteOrder.BIG

    def test_plain_comments_are_skipped(self):
        data = b"PF\n# rendered by device 0\n#> 3\n# another note\n2 1 -0.5\nXYZ"
        header, offset = decode_header(data)
        assert (header.width, header.height, header.iterations) == (2, 1, 3)
        assert data[offset:] == b"XYZ"

    def test_tag_after_dimension_line_is_payload(self):
        data = b"PF\n1 1 -1.0\n#> 9\n"
        header, offset = decode_header(data)
        assert header.iterations is None
        assert data[offset:] == b"#> 9\n"

    def test_offset_does_not_rescan_binary_newlines(self):
        payload = b"\n\n#> 7\n\x0a\x00\x00\x00" * 3
        data = b"PF\n1 1 -1\n" + payload
        _, offset = decode_header(data)
        assert data[offset:] == payload

    def test_crlf_line_endings(self):
        header, offset = decode_header(b"PF\r\n#> 2\r\n5 6 -1.0\r\nrest")
        assert (header.width, header.height, header.iterations) == (5, 6, 2)
        assert offset == len(b"PF\r\n#> 2\r\n5 6 -1.0\r\n")

    def test_dimension_line_without_newline(self):
        data = b"PF\n2 2 -1.0"
        header, offset = decode_header(data)
        assert header.width == 2
        assert offset == len(data)

    @pytest.mark.parametrize("magic", [b"P3", b"Pf", b"PF2", b"", b"pf"])
    def test_bad_magic(self, magic):
        with pytest.raises(FormatError, match="bad magic"):
            decode_header(magic + b"\n2 2 -1.0\n")

    @pytest.mark.parametrize(
        "line",
        [b"2 2", b"2", b"a 2 -1.0", b"2 b -1.0", b"2 2 scale", b"0 2 -1.0", b"2 -2 -1.0", b"2 2 nan"],
    )
    def test_missing_metadata(self, line):
        with pytest.raises(FormatError, match="missing metadata"):
            decode_header(b"PF\n" + line + b"\n")

    def test_no_dimension_line(self):
        with pytest.raises(FormatError, match="missing metadata"):
            decode_header(b"PF\n#> 4\n# only comments\n")

    @pytest.mark.parametrize("tag", [b"#> many", b"#> -3", b"#>"])
    def test_bad_iteration_count(self, tag):
        with pytest.raises(FormatError, match="bad iteration count"):
            decode_header(b"PF\n" + tag + b"\n2 2 -1.0\n")

    def test_format_error_is_value_error(self):
        with pytest.raises(ValueError):
            decode_header(b"P6\n")


class TestEncodeHeader:

    def test_little_endian_forces_negative_scale(self):
        out = encode_header(2, 3, 1.0, None, ByteOrder.LITTLE)
        assert out == b"PF\n2 3 -1.0\n"

    def test_big_endian_forces_positive_scale(self):
        out = encode_header(2, 3, -4.5, 12, ByteOrder.BIG)
        assert out == b"PF\n#> 12\n2 3 4.5\n"

    def test_default_uses_host_order(self):
        out = encode_header(1, 1, 1.0)
        header, _ = decode_header(out)
        assert header.byte_order is ByteOrder.detect()

    def test_iterations_zero_is_written(self):
        assert b"#> 0\n" in encode_header(1, 1, 1.0, 0, "little")

    def test_scale_magnitude_survives(self):
        for order in ByteOrder:
            header, _ = decode_header(encode_header(7, 9, 0.123456789, 3, order))
            assert abs(header.scale) == 0.123456789
            assert header.byte_order is order
            assert header.iterations == 3
