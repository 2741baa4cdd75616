"""Tests for single-variable polynomial algebra."""

import math

import pytest

from mde.polynomial import Polynomial, gcd


def _close(p: Polynomial, q: Polynomial, tol: float = 1e-9) -> bool:
    a, b = p.coefficients, q.coefficients
    if len(a) != len(b):
        return False
    return all(abs(x - y) <= tol * max(1.0, abs(y)) for x, y in zip(a, b))


class TestConstruction:
    def test_leading_zeros_trimmed(self):
        p = Polynomial([0.0, 0.0, 1.0, 2.0])
        assert p.coefficients == (1.0, 2.0)
        assert p.degree == 1

    def test_trivial_polynomial(self):
        p = Polynomial([])
        assert p.is_trivial()
        assert p.degree == -1
        assert str(p) == "0"

    def test_scalar_constructor(self):
        assert Polynomial(3).coefficients == (3.0,)

    def test_string_form(self):
        assert str(Polynomial([1, 0, -3, -1])) == "x^3 - 3x - 1"
        assert str(Polynomial([-2, 1])) == "-2x + 1"


class TestArithmetic:
    @pytest.mark.parametrize("coefficients", [[1, 0, -3, -1], [2.5, -1], [7], [1e-3, 4, 0, 2]])
    def test_sum_with_negative_is_trivial(self, coefficients):
        p = Polynomial(coefficients)
        assert p.sum(p.negative()).is_trivial()

    @pytest.mark.parametrize(
        "dividend,divisor",
        [
            ([1, 0, -3, -1], [1, -2]),
            ([2, 3, 0, 5, -1], [1, 0, 1]),
            ([1, 1], [3, 0, 1]),
        ],
    )
    def test_quotient_reproduces_dividend(self, dividend, divisor):
        p, q = Polynomial(dividend), Polynomial(divisor)
        quot, rem = p.quotient(q)
        assert _close(quot.product(q).sum(rem), p)

    def test_exact_division_leaves_trivial_remainder(self):
        p = Polynomial([1, -3, 2])  # (x - 1)(x - 2)
        quot, rem = p.quotient(Polynomial([1, -1]))
        assert rem.is_trivial()
        assert _close(quot, Polynomial([1, -2]))

    def test_remainder_trimmed_against_quotient_epsilon(self):
        # quotient epsilon ~3.3e-3 sits above the dividend's ~2.5e-3
        p = Polynomial([1e6, 0, 3e-3])
        quot, rem = p.quotient(Polynomial([1, 0]))
        assert quot.coefficients == (1e6, 0.0)
        assert rem.is_trivial()

    def test_quotient_by_trivial_raises(self):
        with pytest.raises(ValueError, match="trivial"):
            Polynomial([1, 2]).quotient(Polynomial([]))

    def test_scalar_product(self):
        assert Polynomial([1, -2]).product(3).coefficients == (3.0, -6.0)

    def test_derivative_and_monic(self):
        p = Polynomial([2, 0, -6, 4])
        assert p.derivative().coefficients == (6.0, 0.0, -6.0)
        assert p.monic().coefficients == (1.0, 0.0, -3.0, 2.0)


class TestEvaluation:
    def test_eval_finite(self):
        p = Polynomial([1, 0, -3, -1])
        assert p.eval(2.0) == pytest.approx(1.0)
        assert p(0.0) == pytest.approx(-1.0)

    def test_eval_at_infinity_follows_leading_term(self):
        cubic = Polynomial([1, 0, -3, -1])
        square = Polynomial([-1, 0, 4])
        assert cubic.eval(math.inf) == math.inf
        assert cubic.eval(-math.inf) == -math.inf
        assert square.eval(-math.inf) == -math.inf
        assert Polynomial([5]).eval(math.inf) == 5.0


def test_gcd_finds_common_factor() -> None:
    p = Polynomial([1, 1, -2])  # (x - 1)(x + 2)
    q = Polynomial([1, -4, 3])  # (x - 1)(x - 3)
    g = gcd(p, q).monic()
    assert g.degree == 1
    assert g.coefficients[1] == pytest.approx(-1.0)


def test_gcd_with_trivial_returns_other() -> None:
    p = Polynomial([1, 2])
    assert gcd(Polynomial([]), p) is p
