"""Iterative factorisation of real polynomials of any degree.

Linear factors are located by Newton's method on synthetic division, and
quadratic factors by Bairstow's method.  Each factor's multiplicity is found
by re-running the same search on the chain of derivatives, after which the
factor is deflated out.  Once the reduced polynomial drops below degree 5
the remainder goes to the closed-form solver.
"""

import logging
import math
from dataclasses import dataclass

from mde.config import DEFAULT_TOLERANCES, Tolerances
from mde.factors import RealZero, RootFactor, Signature
from mde.formulas import collect_factors, solve_closed_form
from mde.polynomial import Polynomial

logger = logging.getLogger(__name__)

_LINEAR_START = -math.pi / 10.0
_QUADRATIC_START = (-math.e * 0.1, math.pi * 0.1)  # (c1, c0) of x^2 + c1*x + c0


@dataclass(frozen=True)
class FactorResult:
    """Factors found by :func:`extract_roots`.

    ``converged`` is false when a quadratic search failed.  ``factors`` then
    holds only what was deflated before the failure, and the remaining
    portion of the polynomial is unfactored.
    """

    factors: tuple
    converged: bool = True

    def real_factors(self) -> list:
        """Linear factors for every real root, sorted ascending."""
        out = []
        for rf in self.factors:
            if rf.degree == 1:
                out.append(rf)
            elif rf.is_real:
                r0, r1 = rf.root_values
                if r0 == r1:
                    out.append(RootFactor.linear(r0, 2 * rf.multiplicity))
                else:
                    out.append(RootFactor.linear(r0, rf.multiplicity))
                    out.append(RootFactor.linear(r1, rf.multiplicity))
        out.sort(key=lambda rf: rf.root)
        return out


# ── Newton and Bairstow searches ────────────────────────────────────────

def _find_linear(a: list, x: float, tol: Tolerances) -> tuple:
    """Newton iteration from *x*; returns ``(root, residual)``."""
    n = len(a) - 1
    residual = math.inf
    dx = 1.0
    iterations = 0
    while abs(dx) > tol.newton_eps:
        b = a[0]
        c = a[0]
        for i in range(1, n):
            b = a[i] + x * b
            c = b + x * c
        b = a[n] + x * b
        residual = abs(b)
        if residual < tol.newton_residual:
            break
        iterations += 1
        if c == 0.0:
            x += 1.0
            continue
        dx = b / c
        x -= dx
        if iterations > tol.max_iterations:
            break
    return x, residual


def _find_quadratic(a: list, start: tuple, tol: Tolerances) -> tuple:
    """Bairstow iteration for ``x^2 + c1*x + c0``; returns ``((c1, c0), err)``."""
    n = len(a) - 1
    if n == 2:
        return (a[1], a[2]), 0.0
    if n < 2:
        raise ValueError("A quadratic factor needs a polynomial of degree at least 2.")

    r, s = start
    b = [0.0] * (n + 1)
    c = [0.0] * (n + 1)
    b[0] = c[0] = 1.0
    dr, ds = 1.0, 0.0
    eps = tol.newton_eps
    iteration = 1
    while abs(dr) + abs(ds) > eps:
        if iteration > tol.max_iterations:
            break
        if iteration % tol.loosen_every == 0:
            eps *= 10.0
        b[1] = a[1] - r
        c[1] = b[1] - r
        for i in range(2, n + 1):
            b[i] = a[i] - r * b[i - 1] - s * b[i - 2]
            c[i] = b[i] - r * c[i - 1] - s * c[i - 2]
        dn = c[n - 1] * c[n - 3] - c[n - 2] * c[n - 2]
        drn = b[n] * c[n - 3] - b[n - 1] * c[n - 2]
        dsn = b[n - 1] * c[n - 1] - b[n] * c[n - 2]
        if abs(dn) < tol.singular_slope:
            dn = math.copysign(tol.singular_replacement, dn)
        dr = drn / dn
        ds = dsn / dn
        r += dr
        s += ds
        iteration += 1
    return (r, s), abs(dr) + abs(ds)


# ── Multiplicity ────────────────────────────────────────────────────────

def _monic_derivative(a: list, tol: Tolerances) -> list:
    """Derivative of a monic polynomial, rescaled to stay monic."""
    n = len(a) - 1
    d = [1.0] + [a[i] * (n - i) / n for i in range(1, n)]
    while len(d) > 1 and abs(d[-1]) < tol.vanishing_coefficient:
        d.pop()
    return d


def _linear_multiplicity(a: list, root: float, tol: Tolerances) -> tuple:
    """Count how many derivatives share *root*; returns ``(multiplicity, root)``.

    The returned root is polished on the deepest derivative in which it is
    still simple.
    """
    multiplicity = 1
    while len(a) > 2:
        d = _monic_derivative(a, tol)
        if len(d) == 1:
            break
        if len(d) == 2:
            candidate = -d[1]
        else:
            candidate, _ = _find_linear(d, root, tol)
        if abs(candidate - root) > tol.linear_multiplicity_tol:
            break
        root = candidate
        multiplicity += 1
        a = d
    return multiplicity, root


def _quadratic_multiplicity(a: list, quad: tuple, tol: Tolerances) -> tuple:
    multiplicity = 1
    if len(a) - 1 < 4:
        return multiplicity, quad
    while len(a) > 3:
        d = _monic_derivative(a, tol)
        m = len(d) - 1
        if m > 2:
            candidate, _ = _find_quadratic(d, quad, tol)
        elif m == 2:
            candidate = (d[1], d[2])
        elif m == 1:
            candidate = (d[1], 0.0)
        else:
            candidate = (0.0, 0.0)
        if abs(quad[0] - candidate[0]) + abs(quad[1] - candidate[1]) > tol.quad_multiplicity_tol:
            break
        quad = candidate
        multiplicity += 1
        a = d
    return multiplicity, quad


def _deflate(a: list, divisor: list) -> list:
    return list(Polynomial(a).quotient(Polynomial(divisor))[0].coefficients)


# ── Public entry points ─────────────────────────────────────────────────

def extract_roots(p: Polynomial, tol: Tolerances = DEFAULT_TOLERANCES) -> FactorResult:
    """Factor *p* into real linear and quadratic :class:`RootFactor` values.

    Near-equal real roots are merged into one factor with combined
    multiplicity.  Non-convergence is reported through
    ``FactorResult.converged`` and never raised.
    """
    if p.degree <= 0:
        return FactorResult(())

    a = list(p.monic().coefficients)
    factors = []
    zeros = 0
    while len(a) > 1 and abs(a[-1]) <= tol.vanishing_coefficient:
        a.pop()
        zeros += 1
    if zeros:
        factors.append(RootFactor.linear(0.0, zeros))

    while len(a) - 1 >= 5:
        root, residual = _find_linear(a, _LINEAR_START, tol)
        if residual < tol.linear_accept:
            multiplicity, root = _linear_multiplicity(a, root, tol)
            factors.append(RootFactor.linear(root, multiplicity))
            for _ in range(multiplicity):
                a = _deflate(a, [1.0, -root])
            continue

        quad, err = _find_quadratic(a, _QUADRATIC_START, tol)
        if err >= tol.quad_accept:
            logger.warning("No convergence factoring degree %d polynomial (err=%g)",
                           len(a) - 1, err)
            merged, _ = collect_factors(factors, tol)
            return FactorResult(tuple(merged), converged=False)
        multiplicity, quad = _quadratic_multiplicity(a, quad, tol)
        factors.append(RootFactor.quadratic(quad[1], quad[0], multiplicity))
        for _ in range(multiplicity):
            a = _deflate(a, [1.0, quad[0], quad[1]])

    if len(a) > 1:
        factors.extend(solve_closed_form(Polynomial(a, tol), tol).factors)

    merged, _ = collect_factors(factors, tol)
    return FactorResult(tuple(merged))


def real_roots_with_multiplicities(p: Polynomial, tol: Tolerances = DEFAULT_TOLERANCES) -> list:
    """Linear factors for each distinct real root, sorted ascending."""
    return extract_roots(p, tol).real_factors()


def real_roots(p: Polynomial, tol: Tolerances = DEFAULT_TOLERANCES) -> list:
    """Every real root repeated by multiplicity, sorted ascending."""
    return [rf.root for rf in real_roots_with_multiplicities(p, tol)
            for _ in range(rf.multiplicity)]


def real_zeros(p: Polynomial, tol: Tolerances = DEFAULT_TOLERANCES) -> list:
    """Distinct real zeros of *p* with the sign of *p* on either side."""
    factors = real_roots_with_multiplicities(p, tol)
    if not factors:
        return []
    previous = 2 if p.eval(factors[0].root - 1.0) > 0.0 else 0
    zeros = []
    for rf in factors:
        if rf.multiplicity % 2 == 0:
            following = previous >> 1
        else:
            following = 1 - (previous >> 1)
        zeros.append(RealZero(rf.root, Signature(previous | following)))
        previous = following << 1
    return zeros
