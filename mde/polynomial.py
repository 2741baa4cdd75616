"""Single-variable polynomial algebra on real coefficients.

Coefficients are stored highest power first, so ``Polynomial([1, 0, -3, -1])``
is ``x^3 - 3x - 1``.  Instances are immutable: every operation returns a new
polynomial.
"""

import math
import sys

from mde.config import DEFAULT_TOLERANCES, Tolerances


class Polynomial:
    """Immutable real polynomial with a per-instance trimming epsilon.

    The epsilon is ``poly_relative_eps`` times the mean absolute coefficient.
    Leading coefficients at or below it are dropped on construction, and
    :meth:`quotient` trims a remainder against the quotient's epsilon.
    The zero polynomial has degree ``-1`` and no coefficients.
    """

    __slots__ = ("_coefficients", "_epsilon", "_tol")

    def __init__(self, coefficients=(), tol: Tolerances = DEFAULT_TOLERANCES):
        if isinstance(coefficients, (int, float)):
            coefficients = (coefficients,)
        values = [float(c) for c in coefficients]
        n = len(values)
        self._tol = tol
        self._epsilon = (
            tol.poly_relative_eps * sum(abs(c) for c in values) / (n + 1)
            + sys.float_info.min
        )
        first = 0
        while first < n and abs(values[first]) <= self._epsilon:
            first += 1
        self._coefficients = tuple(values[first:])

    # ── Accessors ───────────────────────────────────────────────────────

    @property
    def coefficients(self) -> tuple:
        return self._coefficients

    @property
    def degree(self) -> int:
        return len(self._coefficients) - 1

    @property
    def epsilon(self) -> float:
        return self._epsilon

    @property
    def leading_coefficient(self) -> float:
        return self._coefficients[0] if self._coefficients else 0.0

    def is_trivial(self) -> bool:
        return not self._coefficients

    def is_constant(self) -> bool:
        return self.degree <= 0

    def __len__(self) -> int:
        return len(self._coefficients)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Polynomial):
            return NotImplemented
        return self._coefficients == other._coefficients

    def __hash__(self) -> int:
        return hash(self._coefficients)

    def __repr__(self) -> str:
        return f"Polynomial({list(self._coefficients)!r})"

    def __str__(self) -> str:
        if self.is_trivial():
            return "0"
        terms = []
        n = self.degree
        for i, c in enumerate(self._coefficients):
            if c == 0.0:
                continue
            power = n - i
            mag = abs(c)
            if power == 0 or mag != 1.0:
                body = f"{mag:g}"
            else:
                body = ""
            if power >= 1:
                body += "x" if power == 1 else f"x^{power}"
            sign = "-" if c < 0 else "+"
            if not terms:
                terms.append(body if sign == "+" else f"-{body}")
            else:
                terms.append(f"{sign} {body}")
        return " ".join(terms)

    # ── Arithmetic ──────────────────────────────────────────────────────

    def _new(self, coefficients) -> "Polynomial":
        return Polynomial(coefficients, self._tol)

    def sum(self, other: "Polynomial") -> "Polynomial":
        a, b = self._coefficients, other._coefficients
        size = max(len(a), len(b))
        a = (0.0,) * (size - len(a)) + a
        b = (0.0,) * (size - len(b)) + b
        return self._new([x + y for x, y in zip(a, b)])

    def negative(self) -> "Polynomial":
        return self._new([-c for c in self._coefficients])

    def difference(self, other: "Polynomial") -> "Polynomial":
        return self.sum(other.negative())

    def product(self, other) -> "Polynomial":
        """Multiply by another polynomial or by a scalar."""
        if isinstance(other, (int, float)):
            return self._new([other * c for c in self._coefficients])
        if self.is_trivial() or other.is_trivial():
            return self._new(())
        a, b = self._coefficients, other._coefficients
        out = [0.0] * (len(a) + len(b) - 1)
        for i, x in enumerate(a):
            for j, y in enumerate(b):
                out[i + j] += x * y
        return self._new(out)

    def quotient(self, divisor: "Polynomial") -> tuple:
        """Synthetic division: return ``(quotient, remainder)``.

        Raises ValueError when *divisor* is the zero polynomial.
        """
        if divisor.is_trivial():
            raise ValueError("Cannot divide by the trivial polynomial.")
        n, m = self.degree, divisor.degree
        if n < m:
            return self._new(()), self
        d = divisor._coefficients
        work = list(self._coefficients)
        q = [0.0] * (n - m + 1)
        for i in range(n - m + 1):
            q[i] = work[i] / d[0]
            for j in range(m + 1):
                work[i + j] -= q[i] * d[j]
        quot = self._new(q)
        rest = work[n - m + 1:]
        # the quotient's epsilon decides when the remainder has vanished
        first = 0
        while first < len(rest) and abs(rest[first]) <= quot.epsilon:
            first += 1
        return quot, self._new(rest[first:])

    def derivative(self) -> "Polynomial":
        n = self.degree
        return self._new([c * (n - i) for i, c in enumerate(self._coefficients[:-1])])

    def monic(self) -> "Polynomial":
        if self.is_trivial():
            return self
        lead = self._coefficients[0]
        return self._new([c / lead for c in self._coefficients])

    # ── Evaluation ──────────────────────────────────────────────────────

    def eval(self, x: float) -> float:
        """Evaluate at *x*; ``±inf`` returns the signed limit."""
        if self.is_trivial():
            return 0.0
        if math.isinf(x):
            if self.degree == 0:
                return self._coefficients[0]
            lead = math.copysign(1.0, self._coefficients[0])
            if self.degree % 2 == 0:
                return lead * math.inf
            return lead * math.copysign(1.0, x) * math.inf
        value = 0.0
        for c in self._coefficients:
            value = value * x + c
        return value

    __call__ = eval


def gcd(p: Polynomial, q: Polynomial) -> Polynomial:
    """Greatest common divisor by Euclid's algorithm on remainders."""
    if p.is_trivial():
        return q
    if q.is_trivial():
        return p
    if p.degree < q.degree:
        p, q = q, p
    while not q.is_trivial():
        p, q = q, p.quotient(q)[1]
    return p
