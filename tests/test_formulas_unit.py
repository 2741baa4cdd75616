"""Tests for the closed-form root formulas (degree 1 through 4)."""

import math

import pytest

from mde.formulas import collect_factors, solve_closed_form
from mde.factors import RootFactor
from mde.polynomial import Polynomial


@pytest.mark.parametrize(
    "coefficients",
    [
        [2, -4],
        [1, -3, 2],
        [1, 0, 1],
        [1, -6, 11, -6],
        [1, 0, 0, -1],
        [1, -10, 35, -50, 24],
        [1, 0, -5, 0, 4],
        [1, 2, 3, 4, 5],
    ],
)
def test_factors_rebuild_the_polynomial(coefficients) -> None:
    result = solve_closed_form(Polynomial(coefficients))
    assert result.error < 1e-6


def test_cubic_with_three_real_roots() -> None:
    result = solve_closed_form(Polynomial([1, 0, -3, -1]))
    assert len(result.factors) == 3
    assert all(f.degree == 1 and f.multiplicity == 1 for f in result.factors)
    roots = [f.root for f in result.factors]
    assert len(set(round(r, 9) for r in roots)) == 3
    assert sum(roots) == pytest.approx(0.0, abs=1e-9)
    assert math.prod(roots) == pytest.approx(1.0)


def test_quartic_roots_one_to_four() -> None:
    result = solve_closed_form(Polynomial([1, -10, 35, -50, 24]))
    assert list(result.reals) == pytest.approx([1.0, 2.0, 3.0, 4.0])


def test_double_root_is_merged() -> None:
    result = solve_closed_form(Polynomial([1, -2, 1]))
    assert len(result.factors) == 1
    assert result.factors[0].root == pytest.approx(1.0)
    assert result.factors[0].multiplicity == 2


def test_triple_root_cubic() -> None:
    result = solve_closed_form(Polynomial([1, -3, 3, -1]))
    assert len(result.factors) == 1
    assert result.factors[0].multiplicity == 3
    assert result.factors[0].root == pytest.approx(1.0)


def test_complex_pair_kept_as_quadratic() -> None:
    result = solve_closed_form(Polynomial([1, 0, 1]))
    assert result.reals == ()
    (factor,) = result.factors
    assert factor.degree == 2
    assert not factor.is_real
    assert factor.root_values == pytest.approx((0.0, 1.0))


@pytest.mark.parametrize(
    "coefficients,message",
    [([5], "trivial"), ([1, 0, 0, 0, 0, 1], "less than 5")],
)
def test_degree_outside_range_raises(coefficients, message) -> None:
    with pytest.raises(ValueError, match=message):
        solve_closed_form(Polynomial(coefficients))


def test_collect_factors_merges_close_real_roots() -> None:
    factors, reals = collect_factors([RootFactor.linear(1.0), RootFactor.linear(1.0 + 1e-12),
                                      RootFactor.linear(-2.0)])
    assert [f.multiplicity for f in factors] == [1, 2]
    assert reals[0] == -2.0
