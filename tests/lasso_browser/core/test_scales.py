from __future__ import annotations

import math

import numpy as np
import pytest

from lasso_browser.core.scales import DEFAULT_PALETTE, LinearScale, OrdinalColorScale


def test_linear_scale_maps_domain_onto_range():
    scale = LinearScale((0.0, 10.0), (50.0, 550.0))

    assert scale(0) == 50.0
    assert scale(5) == 300.0
    assert scale(10) == 550.0


def test_inverted_range_puts_large_values_on_top():
    scale = LinearScale((0.0, 10.0), (350.0, 50.0))

    assert scale(10) < scale(0)
    assert scale.invert(50.0) == pytest.approx(10.0)


def test_fit_ignores_non_finite_values():
    scale = LinearScale.fit([3.0, math.nan, -1.0, 8.0], (0.0, 1.0))

    assert scale.domain == (-1.0, 8.0)


def test_fit_without_finite_values_uses_unit_domain():
    assert LinearScale.fit([math.nan], (0.0, 1.0)).domain == (0.0, 1.0)


def test_degenerate_domain_maps_to_range_midpoint():
    scale = LinearScale.fit([4.0, 4.0], (50.0, 550.0))

    assert scale.is_degenerate
    assert scale(4.0) == 300.0
    assert scale.ticks() == [4.0]


def test_scale_is_vectorised_and_propagates_nan():
    out = LinearScale((0.0, 2.0), (0.0, 100.0))(np.array([0.0, 1.0, math.nan]))

    assert out[:2].tolist() == [0.0, 50.0]
    assert math.isnan(out[2])


def test_ticks_are_round_and_inside_domain():
    assert LinearScale((0.0, 10.0), (0.0, 1.0)).ticks() == [float(i) for i in range(11)]

    ticks = LinearScale((3.2, 58.9), (0.0, 1.0)).ticks()
    assert ticks == [5.0, 10.0, 15.0, 20.0, 25.0, 30.0, 35.0, 40.0, 45.0, 50.0, 55.0]


def test_color_scale_assigns_in_first_encountered_order():
    scale = OrdinalColorScale.fit(["b", "a", "b", "c"])

    assert scale.domain == ["b", "a", "c"]
    assert scale("b") == DEFAULT_PALETTE[0]
    assert scale("a") == DEFAULT_PALETTE[1]


def test_color_scale_cycles_after_palette_is_exhausted():
    scale = OrdinalColorScale.fit([f"c{i}" for i in range(len(DEFAULT_PALETTE) + 1)])

    assert len(DEFAULT_PALETTE) == 10
    assert scale(f"c{len(DEFAULT_PALETTE)}") == DEFAULT_PALETTE[0]


def test_unbounded_domain_has_no_ticks():
    assert LinearScale((1.0, math.inf), (0.0, 1.0)).ticks() == []
    assert LinearScale((-math.inf, 1.0), (0.0, 1.0)).ticks() == []
