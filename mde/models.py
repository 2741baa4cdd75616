"""Least-squares shape models fitted through the SVD.

A builder accumulates one row of basis-function values per sample point.
``build_model(signature)`` keeps the columns named by the signature and
returns the right singular vector of the smallest singular value as the
model.  The fit is ``log10(smallest / largest)``, so an exact fit is
``-inf`` and too few usable rows give ``+inf``.
"""

import logging
import math
from typing import NamedTuple

import numpy as np

from mde.config import DEFAULT_TOLERANCES, Tolerances
from mde.features import fmt_num, make_integer
from mde.matrix import svd
from mde.polynomial import Polynomial

logger = logging.getLogger(__name__)


class ModelFit(NamedTuple):
    fit: float
    vector: np.ndarray


class DataModelBuilder:
    """Rows of basis values plus the SVD fit of any column subset."""

    def __init__(self, tol: Tolerances = DEFAULT_TOLERANCES):
        self.tol = tol
        self._rows: list = []

    def __len__(self) -> int:
        return len(self._rows)

    def add_row(self, row) -> None:
        self._rows.append(np.asarray(row, dtype=float))

    def build_model(self, signature) -> ModelFit:
        signature = list(signature)
        degree = len(signature)
        if not self._rows or degree == 0:
            return ModelFit(math.inf, np.zeros(degree))
        data = np.vstack(self._rows)[:, signature]
        with np.errstate(invalid="ignore"):
            keep = ~np.isnan(data).any(axis=1) & (np.abs(data).max(axis=1) <= self.tol.max_data)
        data = data[keep]
        if data.shape[0] < self.tol.rows_per_term * degree:
            return ModelFit(math.inf, np.zeros(degree))
        result = svd(data, self.tol)
        s = result.values
        ratio = s[degree - 1] / s[0] if s[0] != 0.0 else 0.0
        fit = -math.inf if ratio == 0.0 else math.log10(ratio)
        return ModelFit(fit, result.right[:, degree - 1].copy())


class PolynomialModelBuilder(DataModelBuilder):
    """Monomials ``x^j * y^i``; column ``i * (x_degree + 1) + j``."""

    def __init__(self, x_degree: int, y_degree: int, tol: Tolerances = DEFAULT_TOLERANCES):
        super().__init__(tol)
        self.x_degree = x_degree
        self.y_degree = y_degree

    def add_point(self, x: float, y: float) -> None:
        xs = x ** np.arange(self.x_degree + 1)
        ys = y ** np.arange(self.y_degree + 1)
        self.add_row(np.outer(ys, xs).ravel())

    def add_points(self, x: float, ys) -> None:
        for y in ys:
            self.add_point(x, y)


class PolarModelBuilder(DataModelBuilder):
    """Generators ``1, r, 1/r, r^2`` then ``cos(k*theta), sin(k*theta)`` for k = 1..4."""

    NUM_GENERATORS = 12

    def add_point(self, r: float, theta: float) -> None:
        row = np.empty(self.NUM_GENERATORS)
        row[0] = 1.0
        row[1] = r
        row[2] = 1.0 / r if r != 0.0 else math.inf
        row[3] = r * r
        k = np.arange(1, 5)
        row[4::2] = np.cos(k * theta)
        row[5::2] = np.sin(k * theta)
        self.add_row(row)

    def add_points(self, theta: float, rs) -> None:
        for r in rs:
            self.add_point(r, theta)


# ── Candidate models ────────────────────────────────────────────────────

class CandidateModel:
    """Best of several signatures on one builder."""

    name = "model"
    signatures: tuple = ()

    def __init__(self):
        self.fit = math.inf
        self.model_vector = np.zeros(0)
        self.model_signature: tuple = ()
        self.which_signature = 0
        self.complexity = math.inf
        self.tol = DEFAULT_TOLERANCES

    def evaluate(self, builder: DataModelBuilder, signatures) -> None:
        self.tol = builder.tol
        for i, signature in enumerate(signatures):
            result = builder.build_model(signature)
            if result.fit <= self.fit:
                self.fit = result.fit
                self.model_vector = result.vector
                self.model_signature = tuple(signature)
                self.which_signature = i

    def _prune(self) -> int:
        """Zero coefficients below ``prune_ratio`` of the largest; return the count."""
        if self.model_vector.size == 0:
            return 0
        threshold = np.abs(self.model_vector).max() * self.tol.prune_ratio
        small = np.abs(self.model_vector) < threshold
        self.model_vector[small] = 0.0
        return int(small.sum())

    def __str__(self) -> str:
        return self.name


class PolynomialModel(CandidateModel):
    name = "polynomial"

    def evaluate(self, builder, signatures) -> None:
        super().evaluate(builder, signatures)
        if self.fit < math.inf:
            n = len(self.model_vector)
            self.complexity = len(self.model_signature) - self._prune() / n
        else:
            self.complexity = math.inf


class QuadraticModel(PolynomialModel):
    """General conic ``c0 + c1*x + c2*x^2 + c3*y + c4*x*y + c5*y^2 = 0``."""

    name = "quadratic"

    def __init__(self, builder: PolynomialModelBuilder):
        super().__init__()
        signature = [
            i * (builder.x_degree + 1) + j
            for i in range(builder.y_degree + 1)
            for j in range(builder.x_degree + 1)
            if i + j <= 2
        ]
        self.evaluate(builder, [signature])
        self.complexity = 0.0

    def integer_coefficients(self) -> list:
        return make_integer(self.model_vector, 100)

    def conic_coefficients(self) -> tuple:
        """``(A, B, C, D, E, F)`` of ``Ax^2 + Bxy + Cy^2 + Dx + Ey + F = 0``."""
        c = self.integer_coefficients()
        return c[2], c[4], c[5], c[1], c[3], c[0]

    def equation(self) -> str:
        c = self.integer_coefficients()
        terms = ("", "*x", "*x^2", "*y", "*x*y", "*y^2")
        parts = [f"({fmt_num(v)}){t}" for v, t in zip(c, terms) if v != 0.0]
        return f"{' + '.join(parts) or '0'} = 0"

    def __str__(self) -> str:
        return self.equation()


class RationalModel(PolynomialModel):
    """``y = N(x) / D(x)`` as ``N(x) + y*D(x) = 0`` on a ``(7, 1)`` builder."""

    name = "rational"

    def __init__(self, builder: PolynomialModelBuilder, numerator_degree: int,
                 denominator_degree: int):
        super().__init__()
        if builder.y_degree < 1:
            raise ValueError("Need a PolynomialModelBuilder with larger y degree.")
        x_size = builder.x_degree + 1
        self.numerator_degree = min(numerator_degree, builder.x_degree)
        self.denominator_degree = min(denominator_degree, builder.x_degree)
        signature = (list(range(self.numerator_degree + 1))
                     + [x_size + i for i in range(self.denominator_degree + 1)])
        self.evaluate(builder, [signature])

    def numerator(self) -> Polynomial:
        # numerator and denominator share one scale so their ratio survives
        mv = make_integer(self.model_vector, 100)
        n = self.numerator_degree
        return Polynomial([-mv[n - i] for i in range(n + 1)])

    def denominator(self) -> Polynomial:
        mv = make_integer(self.model_vector, 100)
        n, d = self.numerator_degree, self.denominator_degree
        c = [0.0] * (d + 1)
        for i in range(d + 1):
            c[d - i] = mv[1 + i + n]
        return Polynomial(c)

    def __str__(self) -> str:
        return f"Numerator = {self.numerator()}\nDenominator = {self.denominator()}"


# ── Polar families ──────────────────────────────────────────────────────

def amplitude(a: float, b: float) -> float:
    return math.sqrt(a * a + b * b)


def phase(a: float, b: float) -> float:
    return math.atan2(b, a)


class PolarModel(CandidateModel):
    identity = "unknown"

    def __init__(self, builder: PolarModelBuilder):
        super().__init__()
        self.degree = 0
        self.evaluate(builder, self.signatures)
        if self.fit < math.inf:
            self._prune()
            n = len(self.signatures)
            self.degree = len(self.model_signature)
            self.complexity = self.degree + (n - 1.0) / n


class PolarEnchiladaModel(PolarModel):
    name = identity = "enchilada"
    signatures = (tuple(range(12)),)


class PolarTrochoidModel(PolarModel):
    name = identity = "trochoid"
    signatures = ((0, 1, 4, 5), (0, 1, 6, 7), (0, 1, 8, 9), (0, 1, 10, 11))


class PolarRoseModel(PolarModel):
    name = identity = "rose"
    signatures = ((1, 4, 5), (1, 6, 7), (1, 8, 9), (1, 10, 11))


class PolarLineModel(PolarModel):
    name = identity = "line"
    signatures = ((2, 4, 5),)


class PolarLemniscateModel(PolarModel):
    name = identity = "lemniscate"
    signatures = ((3, 6, 7),)


class PolarConicModel(PolarModel):
    """Focus-directrix conic ``m0*r + m2*r*cos + m3*r*sin = -m1`` or a circle."""

    name = identity = "conic"
    signatures = ((0, 2, 4, 5), (0, 1))

    def __init__(self, builder: PolarModelBuilder):
        super().__init__(builder)
        self.eccentricity = 0.0
        self.conic_identity = "Ellipse"
        if self.fit == math.inf or self.which_signature != 0:
            return
        mv = self.model_vector
        if mv[0] == 0.0:
            # no r term survives pruning, so the curve is a straight line
            self.eccentricity = math.inf
            self.conic_identity = "Hyperbola"
            return
        self.eccentricity = amplitude(mv[2], mv[3]) / abs(mv[0])
        if abs(self.eccentricity - 1.0) < builder.tol.parabola_eccentricity_tol:
            mv[0] /= self.eccentricity
            self.eccentricity = 1.0
            self.conic_identity = "Parabola"
        elif self.eccentricity < 1.0:
            self.conic_identity = "Ellipse"
        else:
            self.conic_identity = "Hyperbola"

    def cartesian_equation(self) -> str:
        mv = self.model_vector
        if self.which_signature == 0:
            return (f"({fmt_num(mv[0], 12)})^2*(x^2+y^2) = (({fmt_num(mv[1], 12)})"
                    f"+({fmt_num(mv[2], 12)})*x+({fmt_num(mv[3], 12)})*y)^2")
        return f"({fmt_num(mv[1], 12)})^2*(x^2+y^2) = ({fmt_num(mv[0], 12)})^2"


POLAR_FAMILIES = (
    PolarEnchiladaModel,
    PolarTrochoidModel,
    PolarConicModel,
    PolarRoseModel,
    PolarLineModel,
    PolarLemniscateModel,
)


def ranked_polar_models(builder: PolarModelBuilder) -> list:
    """Every polar family fitted on *builder*, best fit first."""
    return sorted((family(builder) for family in POLAR_FAMILIES), key=lambda m: m.fit)


def best_guess(models, worst_fit: float):
    """Lowest-complexity model among those with ``fit <= worst_fit``.

    *models* must be sorted by fit; ties in complexity keep the better fit.
    """
    finalists = []
    for model in models:
        if model.fit > worst_fit:
            break
        finalists.append(model)
    if not finalists:
        return None
    guess = finalists[0]
    for model in finalists[1:]:
        if model.complexity < guess.complexity:
            guess = model
    logger.debug("best guess %s (fit=%g, complexity=%g)", guess.name, guess.fit,
                 guess.complexity)
    return guess
