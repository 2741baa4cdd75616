"""Tests for Bairstow root extraction, root factors and real zeros."""

import logging

import pytest

from mde.config import Tolerances
from mde.factors import RealZero, RootFactor, Signature
from mde.polynomial import Polynomial
from mde.roots import (
    FactorResult, extract_roots, real_roots, real_roots_with_multiplicities, real_zeros,
)


def _from_roots(*roots) -> Polynomial:
    p = Polynomial([1.0])
    for r in roots:
        p = p.product(Polynomial([1.0, -r]))
    return p


# ── RootFactor / RealZero ───────────────────────────────────────────────

class TestRootFactor:
    def test_linear(self):
        f = RootFactor.linear(3.0, 2)
        assert f.coefficients == (-3.0,)
        assert f.root == 3.0
        assert f.polynomial().coefficients == (1.0, -6.0, 9.0)

    def test_real_quadratic_sorted_roots(self):
        f = RootFactor.quadratic(-2.0, 1.0)  # x^2 + x - 2
        assert f.is_real
        assert f.real_roots() == pytest.approx([-2.0, 1.0])

    def test_complex_quadratic(self):
        f = RootFactor.from_coefficients((5.0, 2.0))  # x^2 + 2x + 5
        assert not f.is_real
        assert f.root_values == pytest.approx((-1.0, 2.0))
        assert f.real_roots() == []
        assert "±" in str(f)

    def test_bad_coefficient_count(self):
        with pytest.raises(ValueError, match="must be 1 or 2"):
            RootFactor.from_coefficients((1.0, 2.0, 3.0))

    def test_multiplicity_must_be_positive(self):
        with pytest.raises(ValueError, match="multiplicity"):
            RootFactor.linear(1.0, 0)

    def test_factor_is_immutable(self):
        f = RootFactor.linear(1.0)
        with pytest.raises(AttributeError):
            f.multiplicity = 2
        assert f.with_multiplicity(2).multiplicity == 2


def test_signature_flips_under_negative_factor() -> None:
    zero = RealZero(1.0, Signature.MINUS_PLUS)
    assert zero.signature_with(Polynomial([-1.0])) == Signature.PLUS_MINUS
    assert zero.signature_with(Polynomial([2.0])) == Signature.MINUS_PLUS
    assert zero.signature_with(Polynomial([1.0, -1.0])) == Signature.UNDEFINED


# ── Extraction ──────────────────────────────────────────────────────────

def test_degree_seven_with_complex_pair() -> None:
    p = _from_roots(1.75, 1.0, 0.5, -1.5, -2.0).product(Polynomial([1.0, 1.0, 1.0]))
    assert p.degree == 7

    result = extract_roots(p)
    assert result.converged

    reals = real_roots_with_multiplicities(p)
    assert [f.multiplicity for f in reals] == [1, 1, 1, 1, 1]
    assert [f.root for f in reals] == pytest.approx([-2.0, -1.5, 0.5, 1.0, 1.75], rel=1e-6)
    assert sum(f.degree for f in result.factors if not f.is_real) == 2


def test_repeated_zero_root_multiplicity() -> None:
    (zero, one) = real_roots_with_multiplicities(Polynomial([1.0, -1.0, 0.0, 0.0]))
    assert (zero.root, zero.multiplicity) == (0.0, 2)
    assert one.root == pytest.approx(1.0)


def test_triple_root_multiplicity_from_derivatives() -> None:
    p = _from_roots(2.0, 2.0, 2.0, -1.0, 3.0).product(Polynomial([1.0, 0.0, 1.0]))
    assert p.degree == 7

    result = extract_roots(p)
    assert result.converged is True
    assert "x = 2 (multiplicity 3)" in [str(f) for f in result.factors]
    simple = [f.root for f in result.real_factors() if f.multiplicity == 1]
    assert simple == pytest.approx([-1.0, 3.0], rel=1e-6)


def test_failed_quadratic_search_keeps_earlier_factors(caplog) -> None:
    # x^2 (x^2 + 1)(x^2 + 4)(x^2 + 9): the zero root is split off before searching
    p = Polynomial([1.0, 0.0, 14.0, 0.0, 49.0, 0.0, 36.0, 0.0, 0.0])
    impatient = Tolerances(max_iterations=1, quad_accept=1e-300)
    with caplog.at_level(logging.WARNING, logger="mde.roots"):
        result = extract_roots(p, impatient)
    assert result.converged is False
    assert [(f.root, f.multiplicity) for f in result.factors] == [(0.0, 2)]
    assert "No convergence" in caplog.text


def test_degree_six_all_simple_real_roots() -> None:
    roots = [-1.5, -1.0, -0.25, 0.5, 1.25, 1.75]
    assert real_roots(_from_roots(*roots)) == pytest.approx(roots, rel=1e-6)


def test_zero_roots_are_split_off() -> None:
    assert real_roots(Polynomial([1.0, 0.0, -1.0, 0.0])) == pytest.approx([-1.0, 0.0, 1.0])


def test_constant_has_no_factors() -> None:
    assert extract_roots(Polynomial([4.0])) == FactorResult(())


def test_real_factors_split_real_quadratics() -> None:
    result = FactorResult((RootFactor.quadratic(-1.0, 0.0), RootFactor.linear(5.0)))
    assert [f.root for f in result.real_factors()] == pytest.approx([-1.0, 1.0, 5.0])


class TestRealZeros:
    def test_simple_roots_alternate(self):
        zeros = real_zeros(Polynomial([1.0, 0.0, -1.0]))
        assert [z.x for z in zeros] == pytest.approx([-1.0, 1.0])
        assert [z.signature for z in zeros] == [Signature.PLUS_MINUS, Signature.MINUS_PLUS]

    def test_double_root_keeps_sign(self):
        (zero,) = real_zeros(Polynomial([1.0, 0.0, 0.0]))
        assert zero.x == pytest.approx(0.0)
        assert zero.signature == Signature.PLUS_PLUS

    def test_no_real_zeros(self):
        assert real_zeros(Polynomial([1.0, 0.0, 4.0])) == []
