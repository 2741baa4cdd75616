"""Sinusoid and tangent features for ``y = A*f(B*x + C) + D``."""

import logging
import math

from mde.classifiers.base import Shape
from mde.features import fmt_interval, fmt_num
from mde.shapes import functions
from mde.shapes.graph import ALL_REALS, xy_graph_features
from mde.symbolic import affine_parameters

logger = logging.getLogger(__name__)


def _parameters(item, name: str):
    if not item.is_function:
        return None
    params = affine_parameters(item.function_expression(), item.independent_variable, name)
    if params is None or params[0] == 0.0 or params[1] == 0.0:
        logger.debug("no A*%s(Bx+C)+D form in %r", name, item.text)
        return None
    return params


def trig_function_features(result, item) -> None:
    """Mixed or unmatched trigonometric relation."""
    if item.is_function:
        functions.equation_data_features(result, item)
    else:
        xy_graph_features(result, item)
    result.identity = Shape.TRIG_FUNCTION.value
    result.set_feature("graphName", "trigonometric function")
    result.set_feature("equationType", "trigonometric equation")


def sinusoid_features(result, item, name: str) -> None:
    params = _parameters(item, name)
    if params is None:
        trig_function_features(result, item)
        return
    a, b, c, d = params
    amplitude = abs(a)
    result.identity = (Shape.SINE if name == "sin" else Shape.COSINE).value
    xy_graph_features(result, item)
    result.set_feature("graphName", "sine" if name == "sin" else "cosine")
    result.set_feature("equationType", "trigonometric function")
    result.set_feature("amplitude", amplitude)
    result.set_feature("period", 2.0 * math.pi / abs(b))
    result.set_feature("frequency", abs(b) / (2.0 * math.pi))
    result.set_feature("phase", -c / b)
    result.set_feature("offset", d)
    result.set_feature("reflected", a < 0.0)
    result.set_feature("domain", ALL_REALS)
    result.set_feature("range", fmt_interval(d - amplitude, d + amplitude))


def tangent_features(result, item) -> None:
    params = _parameters(item, "tan")
    if params is None:
        trig_function_features(result, item)
        return
    a, b, c, d = params
    period = math.pi / abs(b)
    phase = -c / b
    first = phase + 0.5 * period
    variable = item.independent_variable

    result.identity = Shape.TANGENT.value
    xy_graph_features(result, item)
    result.set_feature("graphName", "tangent")
    result.set_feature("equationType", "trigonometric function")
    result.set_feature("period", period)
    result.set_feature("phase", phase)
    result.set_feature("offset", d)
    result.set_feature("rate", a)
    result.set_feature("orientation", "increasing" if a * b > 0.0 else "decreasing")
    bounds = item.preferred_bounds
    k = math.ceil((bounds.left - first) / period)
    x = first + k * period
    while x <= bounds.right:
        result.put_feature("asymptotes", f"{variable} = {fmt_num(x)}")
        x += period
    result.set_feature("domain",
                       f"all real numbers except {variable} = {fmt_num(first)} + "
                       f"k*{fmt_num(period)}")
    result.set_feature("range", ALL_REALS)
