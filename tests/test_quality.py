# tests/test_quality.py
# Luminance extraction and RMSE scoring
# RELEVANT FILES: python/pfmerge/quality.py

from __future__ import annotations

import math

import numpy as np
import pytest

from pfmerge import Image, compare, luminance, luminance_error_map, rmse
from pfmerge.errors import EmptyImage, GeometryMismatch


def test_luminance_weights():
    assert luminance((1.0, 0.0, 0.0)) == pytest.approx(0.2126)
    assert luminance((0.0, 1.0, 0.0)) == pytest.approx(0.7152)
    assert luminance((0.0, 0.0, 1.0)) == pytest.approx(0.0722)
    assert luminance((1.0, 1.0, 1.0)) == pytest.approx(1.0)


def test_luminance_array():
    rgb = np.array([[[1.0, 0.0, 0.0], [0.0, 2.0, 0.0]]], dtype=np.float32)
    y = luminance(rgb)
    assert y.shape == (1, 2)
    np.testing.assert_allclose(y, [[0.2126, 1.4304]])


def test_luminance_requires_rgb():
    with pytest.raises(ValueError):
        luminance([1.0, 2.0])


def test_rmse_identical_is_zero(gradient_image):
    assert rmse(gradient_image, gradient_image) == 0.0


def test_rmse_red_vs_blue(make_image):
    candidate = make_image(1, 1, value=[1.0, 0.0, 0.0])
    reference = make_image(1, 1, value=[0.0, 0.0, 1.0])
    assert rmse(candidate, reference) == pytest.approx(0.1404, abs=1e-6)


def test_rmse_averages_over_pixels(make_image):
    # one pixel off by 1.0 in luminance, three exact
    reference = make_image(2, 2, value=0.0)
    candidate = make_image(2, 2, value=0.0)
    candidate.pixels[0:3] = 1.0
    assert rmse(candidate, reference) == pytest.approx(math.sqrt(1.0 / 4))


def test_rmse_is_symmetric(make_image, gradient_image):
    other = make_image(4, 3, value=0.3)
    assert rmse(other, gradient_image) == pytest.approx(rmse(gradient_image, other))


def test_geometry_mismatch(make_image):
    with pytest.raises(GeometryMismatch):
        rmse(make_image(2, 2), make_image(2, 3))


def test_operands_not_mutated(make_image):
    a = make_image(value=0.1, iterations=2)
    b = make_image(value=0.9, iterations=3)
    compare(a, b)
    np.testing.assert_array_equal(a.pixels, np.float32(0.1))
    np.testing.assert_array_equal(b.pixels, np.float32(0.9))
    assert (a.iterations, b.iterations) == (2, 3)


def test_empty_images_rejected():
    with pytest.raises(EmptyImage):
        rmse(Image.new(), Image.new())


class TestCompare:

    def test_report_fields(self, make_image):
        reference = make_image(2, 1, value=[0.0, 0.0, 0.0, 2.0, 2.0, 2.0])
        candidate = make_image(2, 1, value=[1.0, 1.0, 1.0, 2.0, 2.0, 2.0])
        report = compare(candidate, reference)
        assert report.mse == pytest.approx(0.5)
        assert report.rmse == pytest.approx(math.sqrt(0.5))
        assert report.max_reference_luminance == pytest.approx(2.0)
        assert report.relative_rmse == pytest.approx(math.sqrt(0.5) / 2.0)

    def test_relative_undefined_for_black_reference(self, make_image):
        report = compare(make_image(value=1.0), make_image(value=0.0))
        assert report.relative_rmse is None
        assert report.to_dict()["relative_rmse"] is None


def test_error_map(make_image):
    reference = make_image(2, 1, value=0.0)
    candidate = make_image(2, 1, value=[0.0, 0.0, 0.0, 0.0, 1.0, 0.0])
    err = luminance_error_map(candidate, reference)
    assert err.shape == (1, 2)
    np.testing.assert_allclose(err, [[0.0, 0.7152]])
