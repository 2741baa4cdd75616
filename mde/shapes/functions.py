"""Feature paths for explicit functions ``y = f(x)`` and sampled data."""

import logging
import math

import sympy

from mde.classifiers.base import Shape
from mde.factors import Signature
from mde.features import fmt_interval
from mde.models import QuadraticModel
from mde.polynomial import Polynomial, gcd
from mde.roots import real_zeros
from mde.shapes import intervals
from mde.shapes.graph import ALL_REALS, xy_graph_features
from mde.symbolic import affine_parameters

logger = logging.getLogger(__name__)

_CRITICAL_KINDS = {
    Signature.MINUS_MINUS: intervals.INFLECTION,
    Signature.PLUS_PLUS: intervals.INFLECTION,
    Signature.MINUS_PLUS: intervals.LOCAL_MIN,
    Signature.PLUS_MINUS: intervals.LOCAL_MAX,
}

_KIND_FEATURES = {
    intervals.LOCAL_MAX: "localMaxima",
    intervals.LOCAL_MIN: "localMinima",
    intervals.INFLECTION: "inflectionPoints",
}


# ── Rational functions ──────────────────────────────────────────────────

def _as_polynomial(expr, variable: str, tol) -> Polynomial:
    coefficients = sympy.Poly(expr, sympy.Symbol(variable)).all_coeffs()
    return Polynomial([float(c) for c in coefficients], tol)


def _reduce(p: Polynomial, q: Polynomial) -> tuple:
    g = gcd(p, q)
    if g.degree > 0:
        p, q = p.quotient(g)[0], q.quotient(g)[0]
    return p, q


def function_polynomials(item) -> tuple:
    """Numerator and denominator of ``f`` with common factors removed."""
    num, den = sympy.fraction(sympy.together(item.function_expression()))
    variable = item.independent_variable
    return _reduce(_as_polynomial(num, variable, item.tol), _as_polynomial(den, variable, item.tol))


def _limit_at(sign: float, n: Polynomial, d: Polynomial, quotient: Polynomial) -> float:
    if n.degree < d.degree:
        return 0.0
    if n.degree == d.degree:
        return n.leading_coefficient / d.leading_coefficient
    return quotient.eval(sign * math.inf)


def _sample_between(a: float, b: float) -> float:
    if math.isinf(a) and math.isinf(b):
        return 0.0
    if math.isinf(a):
        return b - 1.0
    if math.isinf(b):
        return a + 1.0
    return 0.5 * (a + b)


def _trend(dn: Polynomial, dd: Polynomial, x: float) -> str:
    slope = dn.eval(x) / dd.eval(x) if dd.eval(x) else 0.0
    if slope > 0.0:
        return "increases"
    if slope < 0.0:
        return "decreases"
    return "remains constant"


def _rational_endpoints(n: Polynomial, d: Polynomial, tol) -> tuple:
    quotient, _ = n.quotient(d)
    dn, dd = _reduce(d.product(n.derivative()).difference(n.product(d.derivative())),
                     d.product(d))
    endpoints = []
    for zero in real_zeros(dn, tol):
        dx = d.eval(zero.x)
        if dx == 0.0:
            continue
        kind = _CRITICAL_KINDS.get(zero.signature_with(dd))
        if kind is None:
            continue
        y = n.eval(zero.x) / dx
        endpoints.append(intervals.IntervalEndpoint(zero.x, y, y, kind))
    for zero in real_zeros(d, tol):
        signature = zero.signature_with(n)
        if signature == Signature.UNDEFINED:
            continue
        left = math.inf if signature & 2 else -math.inf
        right = math.inf if signature & 1 else -math.inf
        endpoints.append(intervals.IntervalEndpoint(zero.x, left, right, intervals.ASYMPTOTE))
    endpoints.sort(key=lambda e: e.x)

    low = _limit_at(-1.0, n, d, quotient)
    high = _limit_at(1.0, n, d, quotient)
    endpoints.insert(0, intervals.IntervalEndpoint(-math.inf, low, low))
    endpoints.append(intervals.IntervalEndpoint(math.inf, high, high))
    trends = [_trend(dn, dd, _sample_between(a.x, b.x))
              for a, b in zip(endpoints, endpoints[1:])]
    return endpoints, trends


def rational_function_features(result, item) -> None:
    n, d = function_polynomials(item)
    quotient, remainder = n.quotient(d)
    variable = item.independent_variable
    polynomial = remainder.is_trivial()

    xy_graph_features(result, item)
    if polynomial:
        result.identity = Shape.POLYNOMIAL.value
        result.set_feature("graphName", "polynomial")
        result.set_feature("equationType", "polynomial function")
        result.set_feature("degree", str(quotient.degree))
    else:
        result.identity = Shape.RATIONAL_FUNCTION.value
        result.set_feature("graphName", "rational function")
        result.set_feature("equationType", "rational function")
        result.set_feature("degree", str(max(n.degree, d.degree)))
    result.set_feature("numerator", str(n).replace("x", variable))
    result.set_feature("denominator", str(d).replace("x", variable))

    endpoints, trends = _rational_endpoints(n, d, item.tol)
    for endpoint in endpoints[1:-1]:
        if endpoint.kind == intervals.ASYMPTOTE:
            result.put_feature("verticalAsymptotes", endpoint.x)
        else:
            result.put_feature(_KIND_FEATURES[endpoint.kind], (endpoint.x, endpoint.left_y))
    if not polynomial and math.isfinite(endpoints[-1].left_y):
        result.set_feature("horizontalAsymptote", endpoints[-1].left_y)
    result.set_feature("FunctionAnalysisData",
                       intervals.function_analysis_node(endpoints, trends))


def is_cubic(item) -> bool:
    """True for a polynomial function of degree three in the independent variable."""
    n, d = function_polynomials(item)
    return d.degree == 0 and n.degree == 3


def cubic_features(result, item) -> None:
    rational_function_features(result, item)
    result.identity = Shape.CUBIC.value
    result.set_feature("graphName", "cubic polynomial")
    result.set_feature("domain", ALL_REALS)
    result.set_feature("range", ALL_REALS)


# ── Absolute value and square root ──────────────────────────────────────

def absolute_value_features(result, item, classifier=None) -> None:
    params = affine_parameters(item.function_expression(), item.independent_variable, "abs")
    if params is None or params[1] == 0.0:
        logger.debug("no A*abs(Bx+C)+D form in %r", item.text)
        equation_data_features(result, item, classifier)
        return
    a, b, c, d = params
    result.identity = Shape.ABSOLUTE_VALUE.value
    xy_graph_features(result, item)
    result.set_feature("graphName", "absolute value")
    result.set_feature("equationType", "absolute value function")
    result.set_feature("vertex", (-c / b, d))
    result.set_feature("openDirection", "upwards" if a > 0.0 else "downwards")
    result.set_feature("slope", abs(a * b))
    result.set_feature("domain", ALL_REALS)
    result.set_feature("range", fmt_interval(d, math.inf) if a > 0.0 else fmt_interval(-math.inf, d))


def _quadrant(a: float, b: float) -> str:
    if b > 0.0:
        return "I" if a > 0.0 else "IV"
    return "II" if a > 0.0 else "III"


def square_root_features(result, item, classifier=None) -> None:
    params = affine_parameters(item.function_expression(), item.independent_variable, "sqrt")
    if params is None or params[1] == 0.0 or params[0] == 0.0:
        logger.debug("no A*sqrt(Bx+C)+D form in %r", item.text)
        equation_data_features(result, item, classifier)
        return
    a, b, c, d = params
    x0 = -c / b
    result.identity = Shape.SQUARE_ROOT.value
    xy_graph_features(result, item)
    result.set_feature("graphName", "square root")
    result.set_feature("equationType", "square root function")
    result.set_feature("vertex", (x0, d))
    result.set_feature("orientation", _quadrant(a, b))
    result.set_feature("domain", fmt_interval(x0, math.inf) if b > 0.0 else fmt_interval(-math.inf, x0))
    result.set_feature("range", fmt_interval(d, math.inf) if a > 0.0 else fmt_interval(-math.inf, d))


# ── Sampled functions ───────────────────────────────────────────────────

def equation_data_features(result, item, classifier=None) -> None:
    """Segment-by-segment monotone intervals of the sampled graph."""
    result.identity = Shape.EQUATION_DATA.value
    if item.is_equation:
        xy_graph_features(result, item)
    else:
        xy_graph_features(result, item, intercepts=False)
        result.set_feature("DataID", item.name)
    result.set_feature("graphName", "FunctionOverInterval")

    trails = item.graph_trails or []
    node = {"NumSegments": str(len(trails))}
    guess = getattr(classifier, "best_guess", None)
    if isinstance(guess, QuadraticModel):
        node["AlternateEquation"] = guess.equation()
    node["FunctionAnalysisData"] = [
        intervals.function_analysis_node(intervals.find_endpoints(trail)) for trail in trails
    ]
    result.set_feature("ComputedFunctionData", node)
