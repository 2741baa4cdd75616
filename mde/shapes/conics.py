"""Feature paths for every quadratic identity.

Each path reads the reduced form held by a
:class:`~mde.classifiers.quadratic.QuadraticClassifier`: normalized
coefficients ``a u^2 + b v^2 + c u + d v + e`` about the centre
``(u0, v0)`` in axes rotated by ``rotation`` degrees.
"""

import math

from mde.classifiers.quadratic import QuadraticType
from mde.features import (
    equation_of_line, fmt_interval, format_linear_equation, is_within_tolerance, make_integer,
    normalize_angle_degrees,
)
from mde.shapes.graph import ALL_REALS, xy_graph_features


def _direction(degrees: float) -> tuple:
    rad = math.radians(degrees)
    return math.cos(rad), math.sin(rad)


def _offset(point, degrees: float, distance: float) -> tuple:
    cx, cy = _direction(degrees)
    return point[0] + distance * cx, point[1] + distance * cy


def _angle(degrees: float) -> float:
    return normalize_angle_degrees(degrees)


def _unrotated(qc) -> bool:
    return qc.rotation == 0.0


def _union(*intervals) -> str:
    return " U ".join(fmt_interval(lo, hi) for lo, hi in intervals)


# ── Lines ───────────────────────────────────────────────────────────────

def line_coefficients(qc) -> tuple:
    """``(a, b, c)`` of ``a x + b y + c = 0`` for any line identity."""
    a, b, c, d, e = qc.normalized
    if a:
        cu, dv, e = 1.0, 0.0, -qc.u0
    elif b:
        cu, dv, e = 0.0, 1.0, -qc.v0
    else:
        cu, dv = c, d
    (a00, a01), (a10, a11) = qc.axes
    return cu * a00 + dv * a10, cu * a01 + dv * a11, e


def line_features(result, item, qc) -> None:
    a, b, c = make_integer(line_coefficients(qc))
    scale = math.sqrt((a * a + b * b + c * c) / 3.0)
    result.set_feature("equationType", "linear equation")
    result.set_feature("graphClosure", False)
    result.set_feature("reducedEquation", format_linear_equation([a, b, c], qc.variables, scale))

    if is_within_tolerance(b, scale):
        x0 = -c / a
        result.set_feature("graphName", "vertical line")
        result.set_feature("slopeDefined", False)
        result.set_feature("inclination", 90.0)
        result.set_feature("domain", fmt_interval(x0, x0))
        result.set_feature("range", ALL_REALS)
        return

    slope = 0.0 if is_within_tolerance(a, scale) else -a / b
    result.set_feature("slopeDefined", True)
    result.set_feature("slope", slope)
    result.set_feature("inclination", math.degrees(math.atan(slope)))
    result.set_feature("domain", ALL_REALS)
    if slope == 0.0:
        y0 = -c / b
        result.set_feature("graphName", "horizontal line")
        result.set_feature("range", fmt_interval(y0, y0))
        return
    result.set_feature("graphName", "line")
    result.set_feature("range", ALL_REALS)
    result.set_feature("ascendingRegions" if slope > 0.0 else "descendingRegions", ALL_REALS)


def two_lines_features(result, item, qc) -> None:
    a, b, c, d, e = qc.normalized
    result.set_feature("graphName", "two lines")
    result.set_feature("equationType", "degenerate parabola")
    result.set_feature("graphClosure", False)
    if qc.identity == QuadraticType.TWO_VERTICAL_LINES:
        half = math.sqrt(-e / a)
        inclination = _angle(qc.rotation + 90.0)
        points = [qc.uv_to_xy((qc.u0 + s * half, 0.0)) for s in (-1.0, 1.0)]
    else:
        half = math.sqrt(-e / b)
        inclination = _angle(qc.rotation)
        points = [qc.uv_to_xy((0.0, qc.v0 + s * half)) for s in (-1.0, 1.0)]
    result.set_feature("inclination", inclination)
    result.set_feature("separation", 2.0 * half)
    for point in points:
        result.put_feature("equationStrings", equation_of_line(point, inclination, qc.variables))


def cross_features(result, item, qc) -> None:
    a, b = qc.normalized[0], qc.normalized[1]
    center = qc.translation
    phi = math.degrees(math.atan2(math.sqrt(abs(a)), math.sqrt(abs(b))))
    result.set_feature("graphName", "two intersecting lines")
    result.set_feature("equationType", "degenerate hyperbola")
    result.set_feature("graphClosure", False)
    result.set_feature("intersectionPoint", center)
    for inclination in (_angle(qc.rotation + phi), _angle(qc.rotation - phi)):
        result.put_feature("inclinations", inclination)
        result.put_feature("equationStrings", equation_of_line(center, inclination, qc.variables))


# ── Parabola ────────────────────────────────────────────────────────────

def parabola_features(result, item, qc) -> None:
    a, b, c, d, e = qc.normalized
    if abs(a) > abs(b):
        k = -a / d
        vertex_uv = (qc.u0, -e / d)
        opens = "upwards" if k > 0.0 else "downwards"
        axis = qc.rotation + (90.0 if k > 0.0 else -90.0)
    else:
        k = -b / c
        vertex_uv = (-e / c, qc.v0)
        opens = "to the right" if k > 0.0 else "to the left"
        axis = qc.rotation + (0.0 if k > 0.0 else 180.0)
    axis = _angle(axis)
    directrix_inclination = _angle(axis - 90.0)
    focal = abs(0.25 / k)
    vertex = qc.uv_to_xy(vertex_uv)
    focus = _offset(vertex, axis, focal)
    directrix_point = _offset(vertex, axis, -focal)

    result.set_feature("graphName", "parabola")
    result.set_feature("equationType", "conic section")
    result.set_feature("graphClosure", False)
    result.set_feature("vertex", vertex)
    result.set_feature("axis", "line given by " + equation_of_line(vertex, axis, qc.variables))
    result.set_feature("axisInclination", axis)
    result.set_feature("directrixInclination", directrix_inclination)
    result.set_feature("focalLength", focal)
    result.set_feature("focus", focus)
    result.set_feature("directrix",
                       equation_of_line(directrix_point, directrix_inclination, qc.variables))
    result.set_feature("openDirection", opens)

    if not _unrotated(qc):
        return
    vx, vy = vertex
    if opens == "upwards":
        result.set_feature("domain", ALL_REALS)
        result.set_feature("range", fmt_interval(vy, math.inf))
        result.set_feature("descendingRegions", fmt_interval(-math.inf, vx))
        result.set_feature("ascendingRegions", fmt_interval(vx, math.inf))
    elif opens == "downwards":
        result.set_feature("domain", ALL_REALS)
        result.set_feature("range", fmt_interval(-math.inf, vy))
        result.set_feature("ascendingRegions", fmt_interval(-math.inf, vx))
        result.set_feature("descendingRegions", fmt_interval(vx, math.inf))
    elif opens == "to the right":
        result.set_feature("domain", fmt_interval(vx, math.inf))
        result.set_feature("range", ALL_REALS)
    else:
        result.set_feature("domain", fmt_interval(-math.inf, vx))
        result.set_feature("range", ALL_REALS)


# ── Ellipse ─────────────────────────────────────────────────────────────

def single_point_features(result, item, qc) -> None:
    result.set_feature("graphName", "single point")
    result.set_feature("equationType", "degenerate ellipse")
    result.set_feature("graphClosure", True)
    result.set_feature("center", qc.translation)


def ellipse_features(result, item, qc) -> None:
    a, b, c, d, e = qc.normalized
    half_u = 1.0 / math.sqrt(-a / e)
    half_v = 1.0 / math.sqrt(-b / e)
    center = qc.translation
    cx, cy = center
    result.set_feature("equationType", "conic section")
    result.set_feature("graphClosure", True)
    result.set_feature("center", center)

    if is_within_tolerance(half_u - half_v, half_u):
        result.set_feature("graphName", "circle")
        result.set_feature("radius", half_u)
        result.set_feature("domain", fmt_interval(cx - half_u, cx + half_u))
        result.set_feature("range", fmt_interval(cy - half_u, cy + half_u))
        return

    if half_u >= half_v:
        major, minor, inclination = half_u, half_v, qc.rotation
    else:
        major, minor, inclination = half_v, half_u, qc.rotation + 90.0
    inclination = _angle(inclination)
    minor_inclination = _angle(inclination + 90.0)
    focal = math.sqrt(major * major - minor * minor)

    result.set_feature("graphName", "ellipse")
    result.set_feature("semiMajorAxis", major)
    result.set_feature("semiMinorAxis", minor)
    result.set_feature("majorAxisInclination", inclination)
    result.set_feature("minorAxisInclination", minor_inclination)
    result.set_feature("focalLength", focal)
    result.set_feature("eccentricity", focal / major)
    result.put_feature("focus", _offset(center, inclination, focal))
    result.put_feature("focus", _offset(center, inclination, -focal))
    result.set_feature("majorAxis", equation_of_line(center, inclination, qc.variables))
    result.set_feature("minorAxis", equation_of_line(center, minor_inclination, qc.variables))
    if _unrotated(qc):
        result.set_feature("domain", fmt_interval(cx - half_u, cx + half_u))
        result.set_feature("range", fmt_interval(cy - half_v, cy + half_v))


# ── Hyperbola ───────────────────────────────────────────────────────────

def hyperbola_features(result, item, qc) -> None:
    a, b, c, d, e = qc.normalized
    ka, kb = -a / e, -b / e
    horizontal = ka > 0.0
    if horizontal:
        semi_t, semi_c, inclination = 1.0 / math.sqrt(ka), 1.0 / math.sqrt(-kb), qc.rotation
    else:
        semi_t, semi_c, inclination = 1.0 / math.sqrt(kb), 1.0 / math.sqrt(-ka), qc.rotation + 90.0
    inclination = _angle(inclination)
    conjugate_inclination = _angle(inclination + 90.0)
    phi = math.degrees(math.atan(semi_c / semi_t))
    focal = math.hypot(semi_t, semi_c)
    center = qc.translation
    cx, cy = center

    result.set_feature("graphName", "hyperbola")
    result.set_feature("equationType", "conic section")
    result.set_feature("graphClosure", False)
    result.set_feature("center", center)
    result.set_feature("semiTransverseAxis", semi_t)
    result.set_feature("semiConjugateAxis", semi_c)
    result.set_feature("transverseAxisInclination", inclination)
    result.set_feature("conjugateAxisInclination", conjugate_inclination)
    result.set_feature("transverseAxis", equation_of_line(center, inclination, qc.variables))
    result.set_feature("conjugateAxis",
                       equation_of_line(center, conjugate_inclination, qc.variables))
    result.set_feature("focalLength", focal)
    result.set_feature("eccentricity", focal / semi_t)
    for sign in (1.0, -1.0):
        result.put_feature("focus", _offset(center, inclination, sign * focal))
        result.put_feature("vertex", _offset(center, inclination, sign * semi_t))
    for angle in (_angle(inclination + phi), _angle(inclination - phi)):
        result.put_feature("asymptoteInclinations", angle)
        result.put_feature("asymptotes", equation_of_line(center, angle, qc.variables))

    if not _unrotated(qc):
        return
    if horizontal:
        result.set_feature("domain", _union((-math.inf, cx - semi_t), (cx + semi_t, math.inf)))
        result.set_feature("range", ALL_REALS)
    else:
        result.set_feature("domain", ALL_REALS)
        result.set_feature("range", _union((-math.inf, cy - semi_t), (cy + semi_t, math.inf)))


# ── Degenerate sets ─────────────────────────────────────────────────────

def null_set_features(result, item, qc) -> None:
    result.set_feature("graphName", "null set")
    result.set_feature("equationType", "degenerate conic")


def all_points_features(result, item, qc) -> None:
    result.set_feature("graphName", "all points")
    result.set_feature("equationType", "degenerate conic")


CONIC_PATHS = {
    QuadraticType.NULL_SET: null_set_features,
    QuadraticType.ALL_POINTS: all_points_features,
    QuadraticType.HORIZONTAL_LINE: line_features,
    QuadraticType.VERTICAL_LINE: line_features,
    QuadraticType.SLOPING_LINE: line_features,
    QuadraticType.TWO_HORIZONTAL_LINES: two_lines_features,
    QuadraticType.TWO_VERTICAL_LINES: two_lines_features,
    QuadraticType.PARABOLA: parabola_features,
    QuadraticType.HYPERBOLA: hyperbola_features,
    QuadraticType.CROSS: cross_features,
    QuadraticType.SINGLE_POINT: single_point_features,
    QuadraticType.ELLIPSE: ellipse_features,
}


def conic_features(result, item, qc) -> None:
    """Cartesian basics plus the path for ``qc.identity``."""
    degenerate = qc.identity in (QuadraticType.NULL_SET, QuadraticType.ALL_POINTS)
    xy_graph_features(result, item, intercepts=not degenerate)
    equation = qc.normalized_equation()
    if equation:
        result.set_feature("normalizedEquation", equation)
    if qc.rotation:
        result.set_feature("rotation", qc.rotation)
        result.set_feature("rotationTransform", qc.rotation_transform())
    CONIC_PATHS[qc.identity](result, item, qc)
