"""Classification of ``Ax^2 + Bxy + Cy^2 + Dx + Ey + F = 0``.

The conic is rotated onto its principal axes, translated by completing the
square and scaled so the constant is -1 (or 0).  The identity is then read
off an ordered rule table on which of the five normalized coefficients
``a u^2 + b v^2 + c u + d v + e`` survive.
"""

import logging
import math
from enum import Enum

from mde.classifiers.base import (
    Classifier, ClassifierKind, add_graph_boundaries, generic_features,
)
from mde.config import DEFAULT_TOLERANCES, Tolerances
from mde.features import ClassificationResult, fmt_num

logger = logging.getLogger(__name__)


class QuadraticType(str, Enum):
    UNKNOWN = "Unknown"
    NULL_SET = "NullSet"
    ALL_POINTS = "AllPoints"
    HORIZONTAL_LINE = "HorizontalLine"
    VERTICAL_LINE = "VerticalLine"
    SLOPING_LINE = "SlopingLine"
    TWO_HORIZONTAL_LINES = "TwoHorizontalLines"
    TWO_VERTICAL_LINES = "TwoVerticalLines"
    PARABOLA = "Parabola"
    HYPERBOLA = "Hyperbola"
    CROSS = "Cross"
    SINGLE_POINT = "SinglePoint"
    ELLIPSE = "Ellipse"


class FailureReason(str, Enum):
    NONE = "NoReason"
    DEGREE_GREATER_THAN_2 = "DegreeGreaterThan2"
    TOO_MANY_VARIABLES = "TooManyVariables"
    NON_POLYNOMIAL = "NonPolynomial"
    POLAR = "Polar"
    NON_FINITE_COEFFICIENTS = "NonFiniteCoefficients"


LINES = (QuadraticType.HORIZONTAL_LINE, QuadraticType.VERTICAL_LINE, QuadraticType.SLOPING_LINE)

_TRANSFORM_NAMES = (("u", "v"), ("r", "s"), ("x", "y"))


# ── Decision table ──────────────────────────────────────────────────────

def _disc_vertical(n) -> float:
    a, b, c, d, e = n
    return c * c - 4.0 * a * e


def _disc_horizontal(n) -> float:
    a, b, c, d, e = n
    return d * d - 4.0 * b * e


def _by_discriminant(disc: float, single, double) -> QuadraticType:
    if disc == 0.0:
        return single
    return double if disc > 0.0 else QuadraticType.NULL_SET


# (predicate, outcome) pairs checked in order; coefficients are already
# zeroed where negligible.
RULES = (
    (lambda n: not (n[0] or n[1] or n[2] or n[3]),
     lambda n: QuadraticType.NULL_SET if n[4] else QuadraticType.ALL_POINTS),
    (lambda n: not (n[0] or n[1]),
     lambda n: (QuadraticType.HORIZONTAL_LINE if not n[2]
                else QuadraticType.VERTICAL_LINE if not n[3]
                else QuadraticType.SLOPING_LINE)),
    (lambda n: not (n[1] or n[3]),
     lambda n: _by_discriminant(_disc_vertical(n), QuadraticType.VERTICAL_LINE,
                                QuadraticType.TWO_VERTICAL_LINES)),
    (lambda n: not (n[0] or n[2]),
     lambda n: _by_discriminant(_disc_horizontal(n), QuadraticType.HORIZONTAL_LINE,
                                QuadraticType.TWO_HORIZONTAL_LINES)),
    (lambda n: not (n[0] and n[1]),
     lambda n: QuadraticType.PARABOLA),
    (lambda n: n[0] * n[1] < 0.0,
     lambda n: QuadraticType.HYPERBOLA if n[4] else QuadraticType.CROSS),
    (lambda n: not n[4],
     lambda n: QuadraticType.SINGLE_POINT),
    (lambda n: n[0] * n[4] > 0.0,
     lambda n: QuadraticType.NULL_SET),
    (lambda n: True,
     lambda n: QuadraticType.ELLIPSE),
)


def identify(normalized) -> QuadraticType:
    for predicate, outcome in RULES:
        if predicate(normalized):
            return outcome(normalized)
    return QuadraticType.UNKNOWN


def make_coefficient(value: float, leading: bool) -> str:
    text = fmt_num(abs(value))
    if leading:
        return text if value >= 0.0 else f"-{text}"
    return f"+ {text}" if value >= 0.0 else f"- {text}"


# ── Classifier ──────────────────────────────────────────────────────────

class QuadraticClassifier(Classifier):
    """Rotation, translation and identity of a second-degree relation."""

    kind = ClassifierKind.QUADRATIC

    def __init__(self, polynomial=None, tol: Tolerances = DEFAULT_TOLERANCES):
        self.tol = tol
        self.identity = QuadraticType.UNKNOWN
        self.reasons = []
        self.variables = ["x", "y"]
        self.transform_variables = ("u", "v")
        self.coefficients = (0.0,) * 6
        self.normalized = [0.0] * 5
        self.norm = 0.0
        self.rotation = 0.0
        self.axes = ((1.0, 0.0), (0.0, 1.0))
        self.u0 = 0.0
        self.v0 = 0.0
        if polynomial is not None:
            self._from_polynomial(polynomial)

    @classmethod
    def from_coefficients(cls, a, b, c, d, e, f, variables=("x", "y"),
                          tol: Tolerances = DEFAULT_TOLERANCES) -> "QuadraticClassifier":
        """Classify ``a x^2 + b xy + c y^2 + d x + e y + f = 0`` directly."""
        qc = cls(tol=tol)
        qc.variables = list(variables)
        qc._set_transform_variables()
        qc._classify([float(v) for v in (a, b, c, d, e, f)])
        return qc

    @property
    def reason(self) -> FailureReason:
        return self.reasons[0] if self.reasons else FailureReason.NONE

    def _from_polynomial(self, polynomial) -> None:
        names = polynomial.variables()
        if polynomial.degree() > 2:
            self.reasons.append(FailureReason.DEGREE_GREATER_THAN_2)
        if len(names) > 2:
            self.reasons.append(FailureReason.TOO_MANY_VARIABLES)
            return
        if not polynomial.has_constant_coefficients():
            self.reasons.append(FailureReason.NON_POLYNOMIAL)
        if "r" in names or "theta" in names:
            self.reasons.append(FailureReason.POLAR)
        if self.reasons:
            logger.debug("quadratic classifier declined: %s",
                         ", ".join(r.value for r in self.reasons))
            return

        if len(names) == 1:
            names = ["x", "y"] if names[0] == "y" else [names[0], "y"]
        elif not names:
            names = ["x", "y"]
        self.variables = list(names)
        self._set_transform_variables()

        def coefficient(px, py):
            return polynomial.coefficient(self.variables, [px, py]).evaluate({})

        self._classify([
            coefficient(2, 0), coefficient(1, 1), coefficient(0, 2),
            coefficient(1, 0), coefficient(0, 1), coefficient(0, 0),
        ])

    def _set_transform_variables(self) -> None:
        for pair in _TRANSFORM_NAMES:
            if not set(pair) & set(self.variables):
                self.transform_variables = pair
                return

    # ── Reduction ───────────────────────────────────────────────────────

    def _negligible(self, value: float) -> bool:
        return abs(value) <= self.tol.quadratic_zero * self.norm

    def _classify(self, coefficients) -> None:
        bad = [i for i, v in enumerate(coefficients) if not math.isfinite(v)]
        if len(bad) > 1:
            self.reasons.append(FailureReason.NON_FINITE_COEFFICIENTS)
            logger.debug("quadratic classifier: %d non-finite coefficients", len(bad))
            return
        if bad:
            coefficients = [1.0 if i == bad[0] else 0.0 for i in range(6)]
            self.norm = 1.0
        else:
            self.norm = 0.17 * math.sqrt(sum(v * v for v in coefficients))
        self.coefficients = tuple(coefficients)

        self._normalize_rotation()
        self._complete_square()
        self._normalize_constant()
        self.identity = identify(self.normalized)
        logger.debug("quadratic %s: normalized=%s rotation=%g", self.identity.value,
                     self.normalized, self.rotation)

    def _normalize_rotation(self) -> None:
        A, B, C, D, E, F = self.coefficients
        if self._negligible(B):
            self.normalized = [A, C, D, E, F]
            return
        sigma, delta = A + C, A - C
        root = math.sqrt(delta * delta + B * B)
        lam = (0.5 * (sigma - root), 0.5 * (sigma + root))
        vectors = []
        for vx, vy in ((0.5 * B, lam[0] - A), (lam[1] - C, 0.5 * B)):
            length = math.hypot(vx, vy)
            vectors.append((vx / length, vy / length))
        i_max = 0 if abs(vectors[0][0]) >= abs(vectors[1][0]) else 1
        xi = vectors[i_max]
        if xi[0] < 0.0:
            xi = (-xi[0], -xi[1])
        self.axes = (xi, (-xi[1], xi[0]))
        self.normalized = [
            lam[i_max],
            lam[1 - i_max],
            self.axes[0][0] * D + self.axes[0][1] * E,
            self.axes[1][0] * D + self.axes[1][1] * E,
            F,
        ]
        self.rotation = math.degrees(math.atan2(xi[1], xi[0]))

    def _complete_square(self) -> None:
        a, b, c, d, e = self.normalized
        if not self._negligible(a):
            self.u0 = -0.5 * c / a
            e -= 0.25 * c * c / a
            c = 0.0
        if not self._negligible(b):
            self.v0 = -0.5 * d / b
            e -= 0.25 * d * d / b
            d = 0.0
        self.normalized = [a, b, c, d, e]

    def _normalize_constant(self) -> None:
        n = self.normalized
        if self._negligible(n[4]):
            n[4] = 0.0
        else:
            scale = -1.0 / n[4]
            n = [v * scale for v in n]
        self.norm = math.sqrt(0.2 * sum(v * v for v in n))
        self.normalized = [0.0 if self._negligible(v) else v for v in n]

    # ── Transforms ──────────────────────────────────────────────────────

    @property
    def translation(self) -> tuple:
        """Centre of the reduced conic in the original coordinates."""
        return self.uv_to_xy((self.u0, self.v0))

    def uv_to_xy(self, point) -> tuple:
        if len(point) != 2:
            raise ValueError("Point must have exactly two coordinates.")
        u, v = point
        (a00, a01), (a10, a11) = self.axes
        return (u * a00 + v * a10, u * a01 + v * a11)

    def xy_to_uv(self, point) -> tuple:
        if len(point) != 2:
            raise ValueError("Point must have exactly two coordinates.")
        x, y = point
        (a00, a01), (a10, a11) = self.axes
        return (x * a00 + y * a01, x * a10 + y * a11)

    def normalized_equation(self):
        """``a*(u-u0)^2 + b*(v-v0)^2 + c*u + d*v = -e`` or None when empty."""
        u, v = self.transform_variables
        a, b, c, d, e = self.normalized
        terms = []
        for value, text in ((a, f"*({u}-{fmt_num(self.u0)})^2"),
                            (b, f"*({v}-{fmt_num(self.v0)})^2"),
                            (c, f"*{u}"), (d, f"*{v}")):
            if value:
                terms.append(make_coefficient(value, not terms) + text)
        if not terms:
            return None
        return f"{' '.join(terms)} = {fmt_num(-e)}"

    def rotation_transform(self) -> str:
        if self.rotation == 0.0:
            return "There was no rotation, so the transform is the identity."
        u, v = self.transform_variables
        x, y = self.variables
        (a00, a01), (a10, a11) = self.axes
        return (f"{u} = {make_coefficient(a00, True)}*{x} {make_coefficient(a01, False)}*{y}\n"
                f"{v} = {make_coefficient(a10, True)}*{x} {make_coefficient(a11, False)}*{y}")

    # ── Features ────────────────────────────────────────────────────────

    def classify(self, item) -> ClassificationResult:
        from mde.shapes.conics import conic_features

        result = ClassificationResult(self.identity.value, self.reason.value, self.kind.value)
        result.rotation = self.rotation
        result.translation = self.translation
        result.normalized_coefficients = tuple(self.normalized)
        if self.reasons:
            generic_features(item, result, self)
            result.identity = QuadraticType.UNKNOWN.value
            result.reason = self.reason.value
        else:
            conic_features(result, item, self)
        add_graph_boundaries(item, result)
        return result

    def __str__(self) -> str:
        if self.reasons:
            return f"Unclassified quadratic: {', '.join(r.value for r in self.reasons)}"
        lines = [f"Identity: {self.identity.value}",
                 f"Rotation: {fmt_num(self.rotation)} degrees",
                 self.rotation_transform()]
        equation = self.normalized_equation()
        if equation:
            lines.append(f"Normalized equation: {equation}")
        return "\n".join(lines)
