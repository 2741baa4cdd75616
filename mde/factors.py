"""Irreducible real factors and located real zeros."""

import math
from dataclasses import dataclass, replace
from enum import IntEnum

from mde.polynomial import Polynomial


@dataclass(frozen=True)
class RootFactor:
    """A monic linear or quadratic factor raised to ``multiplicity``.

    A linear factor ``x + c`` stores ``coefficients == (c,)``.  A quadratic
    factor ``x^2 + c1*x + c0`` stores ``(c0, c1)``; its ``root_values`` hold
    the two real roots in ascending order, or ``(real part, imaginary
    magnitude)`` when ``is_real`` is false.
    """

    degree: int
    coefficients: tuple
    root_values: tuple
    is_real: bool = True
    multiplicity: int = 1

    def __post_init__(self):
        if self.multiplicity < 1:
            raise ValueError("RootFactor multiplicity must be at least 1.")
        if self.degree not in (1, 2):
            raise ValueError("RootFactor degree must be 1 or 2.")

    # ── Constructors ────────────────────────────────────────────────────

    @classmethod
    def linear(cls, root: float, multiplicity: int = 1) -> "RootFactor":
        """Factor ``x - root``."""
        return cls(1, (-root,), (root,), True, multiplicity)

    @classmethod
    def quadratic(cls, c0: float, c1: float, multiplicity: int = 1) -> "RootFactor":
        """Factor ``x^2 + c1*x + c0``."""
        b2 = -0.5 * c1
        d2 = b2 * b2 - c0
        if d2 >= 0.0:
            d = math.sqrt(d2)
            return cls(2, (c0, c1), (b2 - d, b2 + d), True, multiplicity)
        return cls(2, (c0, c1), (b2, math.sqrt(-d2)), False, multiplicity)

    @classmethod
    def from_coefficients(cls, coefficients, multiplicity: int = 1) -> "RootFactor":
        coefficients = tuple(coefficients)
        if len(coefficients) == 1:
            return cls.linear(-coefficients[0], multiplicity)
        if len(coefficients) == 2:
            return cls.quadratic(coefficients[0], coefficients[1], multiplicity)
        raise ValueError("Number of coefficients for RootFactor must be 1 or 2.")

    def with_multiplicity(self, multiplicity: int) -> "RootFactor":
        return replace(self, multiplicity=multiplicity)

    # ── Views ───────────────────────────────────────────────────────────

    @property
    def root(self) -> float:
        """The root of a linear factor."""
        return self.root_values[0]

    def real_roots(self) -> list:
        if not self.is_real:
            return []
        return list(self.root_values)

    def polynomial(self) -> Polynomial:
        """Monic polynomial of this factor raised to its multiplicity."""
        if self.degree == 1:
            base = Polynomial([1.0, self.coefficients[0]])
        else:
            base = Polynomial([1.0, self.coefficients[1], self.coefficients[0]])
        p = base
        for _ in range(1, self.multiplicity):
            p = p.product(base)
        return p

    def __str__(self) -> str:
        if self.degree == 1:
            text = f"x = {self.root:g}"
        elif self.is_real:
            text = f"x = {self.root_values[0]:g}, {self.root_values[1]:g}"
        else:
            re, im = self.root_values
            text = f"x = {re:g} ± {im:g}i"
        if self.multiplicity > 1:
            text += f" (multiplicity {self.multiplicity})"
        return text


class Signature(IntEnum):
    """Sign just below and just above a zero."""

    MINUS_MINUS = 0
    MINUS_PLUS = 1
    PLUS_MINUS = 2
    PLUS_PLUS = 3
    UNDEFINED = 4


@dataclass(frozen=True)
class RealZero:
    x: float
    signature: Signature

    def signature_with(self, factor: Polynomial) -> Signature:
        """Signature of this zero after multiplying by *factor*."""
        value = factor.eval(self.x)
        if value == 0.0:
            return Signature.UNDEFINED
        if value < 0.0:
            return Signature((-1 - self.signature) & 3)
        return self.signature
