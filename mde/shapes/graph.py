"""Features shared by every Cartesian graph."""

import math

from mde.features import fmt_interval

ALL_REALS = fmt_interval(-math.inf, math.inf)

COMPASS_DIRECTIONS = (
    "East", "ENE", "NE", "NNE", "North", "NNW", "NW", "WNW",
    "West", "WSW", "SW", "SSW", "South", "SSE", "SE", "ESE",
)


def compass_direction(degrees: float) -> str:
    """Nearest of the sixteen compass points, East at zero, counter-clockwise."""
    turns = (degrees + 11.25) / 360.0
    phi = 360.0 * (turns - math.floor(turns))
    return COMPASS_DIRECTIONS[int(phi // 22.5) % 16]


def rounded_unique(values, decimals: int = 6) -> list:
    out = []
    for v in sorted(values):
        r = round(v, decimals) + 0.0
        if not out or out[-1] != r:
            out.append(r)
    return out


def xy_graph_features(result, item, intercepts: bool = True) -> None:
    """Coordinate system, symbols, equation text and the axis intercepts."""
    result.set_feature("coordinateSystem", "Cartesian")
    if item.is_equation:
        result.set_feature("equationPrint", item.print_equation())
    result.set_feature("abscissaSymbol", item.abscissa_symbol)
    result.set_feature("ordinateSymbol", item.ordinate_symbol)
    if not result.has_feature("graphName"):
        result.set_feature("graphName", "graph")
    if intercepts and item.is_equation:
        result.put_features("xIntercepts", rounded_unique(item.x_intercepts()))
        result.put_features("yIntercepts", rounded_unique(item.y_intercepts()))
