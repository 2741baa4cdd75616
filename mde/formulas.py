"""Closed-form roots for polynomials of degree 1 through 4.

Cubics go through the depressed-cubic substitution with Cardano radicals or
the trigonometric form; quartics through a resolvent cubic and a split into
two quadratic factors.  After extraction, real roots closer than
``double_root_tol`` are merged into one factor with combined multiplicity
and the product of all factors is compared to the input as a diagnostic.
"""

import logging
import math
from dataclasses import dataclass, field

from mde.config import DEFAULT_TOLERANCES, Tolerances
from mde.factors import RootFactor
from mde.polynomial import Polynomial

logger = logging.getLogger(__name__)

_ONE_THIRD = 1.0 / 3.0


@dataclass(frozen=True)
class FormulaResult:
    factors: tuple
    reals: tuple = field(default=())
    error: float = 0.0


def _cube_root(x: float) -> float:
    return math.copysign(abs(x) ** _ONE_THIRD, x)


def _translate(factor: RootFactor, h: float) -> RootFactor:
    """Shift the roots of *factor* by ``+h``."""
    if factor.degree == 1:
        return RootFactor.linear(factor.root + h, factor.multiplicity)
    if factor.is_real:
        r0, r1 = factor.root_values
        return RootFactor.quadratic(
            (r0 + h) * (r1 + h), factor.coefficients[1] - 2.0 * h, factor.multiplicity
        )
    re, im = factor.root_values
    re += h
    return RootFactor.quadratic(re * re + im * im, factor.coefficients[1] - 2.0 * h,
                                factor.multiplicity)


# ── Degree-specific solvers ─────────────────────────────────────────────

def _solve_cubic(c: list, p: Polynomial, tol: Tolerances) -> list:
    h = _ONE_THIRD * c[1]
    a = c[2] + 3.0 * h * h - 2.0 * c[1] * h
    b = h * h * h - h * h * c[1] + h * c[2] - c[3]
    c1 = _ONE_THIRD * a
    cc = -c1 * c1 * c1
    b2 = b * b
    d2 = b2 - 4.0 * cc
    d3 = b2 + abs(4.0 * cc)

    if d3 <= tol.formula_eps:
        return [RootFactor.linear(-h, 3)]

    if abs(d2) <= tol.formula_eps * d3:
        r = _cube_root(4.0 * b)
        return [RootFactor.linear(r - h), RootFactor.linear(-h - 0.5 * r, 2)]

    if d2 > 0.0:
        d = math.sqrt(d2)
        r = _cube_root(0.5 * (d + b)) - _cube_root(0.5 * (d - b)) - h
        q = p.quotient(Polynomial([1.0, -r]))[0].coefficients
        return [RootFactor.linear(r), RootFactor.quadratic(q[2] / q[0], q[1] / q[0])]

    k = 2.0 * math.sqrt(-c1)
    cos_arg = max(-1.0, min(1.0, 4.0 * b / (k * k * k)))
    theta = _ONE_THIRD * math.acos(cos_arg)
    return [
        RootFactor.linear(k * math.cos(theta + 2.0 * math.pi * i / 3.0) - h)
        for i in range(3)
    ]


def _solve_quartic(c: list, tol: Tolerances) -> list:
    h = 0.25 * c[1]
    h2 = h * h
    h3 = h * h2
    h4 = h2 * h2
    e = c[2] + 6.0 * h2 - 3.0 * c[1] * h
    f = c[3] - 4.0 * h3 + 3.0 * c[1] * h2 - 2.0 * c[2] * h
    g = c[4] + h4 - c[1] * h3 + c[2] * h2 - c[3] * h

    if abs(g) <= tol.formula_eps:
        # y * (y^3 + e*y + f)
        inner = solve_closed_form(Polynomial([1.0, 0.0, e, f], tol), tol)
        return [_translate(rf, -h) for rf in inner.factors] + [RootFactor.linear(-h)]

    resolvent = [1.0, 2.0 * e, e * e - 4.0 * g, -f * f]
    if abs(resolvent[3]) <= tol.formula_eps * tol.formula_eps:
        disc = resolvent[2]
        if abs(disc) <= tol.formula_eps:
            return [_translate(RootFactor.quadratic(0.5 * e, 0.0, 2), -h)]
        if disc >= 0.0:
            root = math.sqrt(disc)
            return [
                _translate(RootFactor.quadratic(0.5 * (e - root), 0.0), -h),
                _translate(RootFactor.quadratic(0.5 * (e + root), 0.0), -h),
            ]

    k2 = solve_closed_form(Polynomial(resolvent, tol), tol).reals[-1]
    if k2 <= 0.0:
        raise ValueError("Resolvent cubic has no positive root.")
    k = math.sqrt(k2)
    j = 0.5 * (e + k2 - f / k)
    return [
        _translate(RootFactor.quadratic(j, k), -h),
        _translate(RootFactor.quadratic(g / j, -k), -h),
    ]


# ── Post-processing ─────────────────────────────────────────────────────

def _split_real(factor: RootFactor, tol: Tolerances) -> list:
    """Real roots of *factor*, repeated by multiplicity; empty if complex."""
    if factor.is_real:
        return [r for r in factor.root_values for _ in range(factor.multiplicity)]
    if abs(factor.root_values[1]) < tol.double_root_tol:
        return [factor.root_values[0]] * (2 * factor.multiplicity)
    return []


def collect_factors(factors: list, tol: Tolerances = DEFAULT_TOLERANCES) -> tuple:
    """Merge near-equal real roots and near-equal complex pairs.

    Returns ``(factors, reals)`` where ``reals`` lists every real root,
    repeated by multiplicity and sorted ascending.
    """
    reals, complexes = [], []
    for rf in factors:
        split = _split_real(rf, tol)
        if split:
            reals.extend(split)
        else:
            complexes.append(rf)
    reals.sort()

    merged = []
    group = []
    for r in reals:
        if group and r > group[-1] + tol.double_root_tol:
            merged.append(RootFactor.linear(sum(group) / len(group), len(group)))
            group = []
        group.append(r)
    if group:
        merged.append(RootFactor.linear(sum(group) / len(group), len(group)))

    if len(complexes) == 2:
        a, b = complexes
        dx = a.root_values[0] - b.root_values[0]
        dy = a.root_values[1] - b.root_values[1]
        if math.hypot(dx, dy) < tol.double_root_tol:
            re = 0.5 * (a.root_values[0] + b.root_values[0])
            im = 0.5 * (a.root_values[1] + b.root_values[1])
            complexes = [RootFactor.quadratic(re * re + im * im, -2.0 * re,
                                              a.multiplicity + b.multiplicity)]
    return merged + complexes, tuple(reals)


def solve_closed_form(p: Polynomial, tol: Tolerances = DEFAULT_TOLERANCES) -> FormulaResult:
    """Factor a polynomial of degree 1..4 into real linear and quadratic factors.

    Raises ValueError for a constant polynomial or degree above 4.
    """
    n = p.degree
    if n <= 0:
        raise ValueError("Polynomial is trivial.")
    if n > 4:
        raise ValueError("Closed-form roots only exist for degree less than 5.")

    lead = p.coefficients[0]
    c = [coef / lead for coef in p.coefficients]
    c[0] = 1.0

    if n == 1:
        factors = [RootFactor.linear(-c[1])]
    elif n == 2:
        factors = [RootFactor.quadratic(c[2], c[1])]
    elif n == 3:
        factors = _solve_cubic(c, p, tol)
    else:
        factors = _solve_quartic(c, tol)

    factors, reals = collect_factors(factors, tol)

    product = Polynomial([1.0], tol)
    for rf in factors:
        product = product.product(rf.polynomial())
    rebuilt = product.coefficients
    rebuilt = (0.0,) * (len(c) - len(rebuilt)) + rebuilt
    error = sum(abs(x - y) for x, y in zip(rebuilt, c))
    if error > 1e-6:
        logger.debug("closed-form factors of %s rebuild with error %g", p, error)
    return FormulaResult(tuple(factors), reals, error)
