"""Feature paths for the polar model families."""

import math

from mde.classifiers.base import Shape
from mde.features import fmt_num, normalize_angle_degrees
from mde.models import amplitude, phase
from mde.shapes.graph import compass_direction

EPSILON = 1.0e-8


def _polar_basics(result, item) -> None:
    result.set_feature("coordinateSystem", "Polar")
    result.set_feature("equationPrint", item.print_equation())
    result.set_feature("abscissaSymbol", "theta")
    result.set_feature("ordinateSymbol", "r")


def _degrees(rad: float) -> float:
    return normalize_angle_degrees(math.degrees(rad))


# ── Rose and lemniscate ─────────────────────────────────────────────────

def rose_features(result, item, model) -> None:
    mv = model.model_vector
    n = model.which_signature + 1
    petals = 2 * n if n % 2 == 0 else n
    a, b = -mv[1] / mv[0], -mv[2] / mv[0]
    length = amplitude(a, b)
    theta = phase(a, b) / n

    result.identity = Shape.POLAR_ROSE.value
    _polar_basics(result, item)
    result.set_feature("graphName", "polar rose")
    result.set_feature("numPetals", str(petals))
    result.set_feature("petalLength", length)
    for i in range(petals):
        angle = theta + 2.0 * math.pi * i / petals
        result.put_feature("petalInclinations", _degrees(angle))
        result.put_feature("petalTips", (length * math.cos(angle), length * math.sin(angle)))


def lemniscate_features(result, item, model) -> None:
    mv = model.model_vector
    a, b = -mv[1] / mv[0], -mv[2] / mv[0]
    result.identity = Shape.POLAR_LEMNISCATE.value
    _polar_basics(result, item)
    result.set_feature("graphName", "polar lemniscate")
    result.set_feature("bladeLength", math.sqrt(amplitude(a, b)))
    result.set_feature("inclination", _degrees(0.5 * phase(a, b)))


# ── Trochoids ───────────────────────────────────────────────────────────

def _angle_group(name: str, angles) -> dict:
    return {"graphObject": name, "angleInfo": [_degrees(a) for a in angles]}


def _axis(result, angle: float) -> None:
    degrees = _degrees(angle)
    result.set_feature("axis", f"{compass_direction(180.0 + degrees)} to {compass_direction(degrees)}")
    result.set_feature("axisInclination", degrees)


def trochoid_features(result, item, model) -> None:
    """``r = A*cos(n*(theta - phi)) + B``: cardioids, limacons and their n-fold kin."""
    mv = list(model.model_vector)
    n = model.which_signature + 1
    result.identity = Shape.POLAR_TROCHOID.value
    _polar_basics(result, item)
    if mv[1] == 0.0:
        result.set_feature("graphName", "collection of radial lines through the origin")
        return

    mv = [v / mv[1] for v in mv]
    a, b = -mv[2], -mv[3]
    big_a = amplitude(a, b)
    phi = phase(a, b) / n
    big_b = -mv[0]
    if big_b < 0.0:
        big_b = -big_b
        phi += math.pi * ((n & 1) - 1.0 / n)

    result.set_feature("maxLength", big_a + big_b)
    result.set_feature("thetaMultiple", str(n))
    result.set_feature("oddMultiple", n % 2 == 1)
    bulges = [phi + 2.0 * i * math.pi / n for i in range(n)]
    dents = [phi + (2.0 * i - 1.0) * math.pi / n for i in range(n)]

    if abs(big_a - big_b) < EPSILON * (abs(big_a) + abs(big_b)):
        if n == 1:
            _axis(result, phi)
            result.set_feature("graphName", "cardioid")
        else:
            result.set_feature("graphName", "pinchedLoops")
            result.put_feature("loopAngles", _angle_group("loops", bulges))
        return

    if big_a > big_b:
        result.set_feature("hasLoops", True)
        result.set_feature("minLength", big_a - big_b)
        if n == 1:
            _axis(result, phi)
            result.set_feature("graphName", "loopWithinALoop")
            return
        result.put_feature("loopAngles", _angle_group("longer loops", bulges))
        if n % 2 == 0:
            result.set_feature("graphName", "alternatingLoops")
            result.put_feature("loopAngles", _angle_group("shorter loops", dents))
        else:
            result.set_feature("graphName", "nestedLoops")
        return

    convex = big_b >= (n * n + 1.0) * big_a
    result.set_feature("hasLoops", False)
    result.set_feature("isConvex", convex)
    result.set_feature("minLength", big_b - big_a)
    if n == 1:
        _axis(result, phi + math.pi)
        result.set_feature("graphName", "eccentricCircle")
        return
    result.set_feature("graphName", "lumpyCircle")
    result.put_feature("loopAngles", _angle_group("bulges", bulges))
    if not convex:
        result.put_feature("loopAngles", _angle_group("dents", dents))


# ── Re-expressed as Cartesian conics ────────────────────────────────────

def _cartesian_features(result, item, equation: str):
    from mde.analyzed import AnalyzedEquation
    from mde.classifiers.quadratic import QuadraticClassifier

    cartesian = AnalyzedEquation(equation, item.tol)
    qc = QuadraticClassifier(cartesian.polynomial, item.tol)
    result.merge(qc.classify(cartesian))
    result.set_feature("equationPrint", item.print_equation())
    result.set_feature("cartesianEquation", equation)
    result.set_feature("coordinateSystem", "Polar")
    return qc


def line_features(result, item, model) -> None:
    mv = model.model_vector
    equation = f"({fmt_num(mv[1], 12)})*x+({fmt_num(mv[2], 12)})*y+({fmt_num(mv[0], 12)})=0"
    _cartesian_features(result, item, equation)
    result.identity = Shape.POLAR_LINE.value
    result.set_feature("equationType", "polar form of a line")


def conic_features(result, item, model) -> None:
    qc = _cartesian_features(result, item, model.cartesian_equation())
    result.identity = Shape.POLAR_CONIC.value
    result.set_feature("conicIdentity", qc.identity.value)
    result.set_feature("eccentricity", model.eccentricity)
    result.set_feature("equationType", "polar form of a conic section")


POLAR_PATHS = {
    "rose": rose_features,
    "lemniscate": lemniscate_features,
    "trochoid": trochoid_features,
    "line": line_features,
    "conic": conic_features,
}
