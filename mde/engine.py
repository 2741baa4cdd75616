"""One-call classification of an equation or a data set.

Wraps a single-item :class:`~mde.solver.Solver` run and flattens the
resulting :class:`~mde.features.ClassificationResult` into a plain dict
that the HTTP API and the command line both serialise.
"""

import logging
import time
from datetime import datetime

import sympy

from mde.analyzed import AnalyzedData, AnalyzedEquation
from mde.bounds import Bounds
from mde.config import DEFAULT_TOLERANCES, Tolerances
from mde.solver import Solver

logger = logging.getLogger(__name__)


def _as_bounds(bounds):
    if bounds is None or isinstance(bounds, Bounds):
        return bounds
    if isinstance(bounds, dict):
        return Bounds(bounds["left"], bounds["right"], bounds["top"], bounds["bottom"])
    values = list(bounds)
    if len(values) != 4:
        raise ValueError("Bounds need four values: left, right, top, bottom.")
    return Bounds(*(float(v) for v in values))


def _summary(t_start: float) -> dict:
    t_end = time.perf_counter()
    return {
        "runtime_ms": round((t_end - t_start) * 1000, 2),
        "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        "library": f"SymPy {sympy.__version__}",
    }


def _result_dict(label: str, item, solver: Solver, t_start: float) -> dict:
    result = item.features
    return {
        "equation": label,
        "identity": result.identity,
        "classifier": result.classifier,
        "reason": result.reason,
        "features": result.as_dict(),
        "xml": result.to_xml(),
        "bounds": solver.bounds.as_dict(),
        "summary": _summary(t_start),
    }


def classify_equation(equation_str: str, bounds=None,
                      tol: Tolerances = DEFAULT_TOLERANCES) -> dict:
    """Classify one equation such as ``"x^2 + y^2 = 1"`` or ``"r = 2cos(3theta)"``.

    *bounds* is an optional window (a :class:`Bounds`, a
    ``left/right/top/bottom`` dict or a four-item sequence).

    Raises ValueError for empty or unparsable text and for equations with
    no variable or more than two.
    """
    t_start = time.perf_counter()
    equation = (equation_str or "").strip()
    if not equation:
        raise ValueError("Equation cannot be empty.")

    item = AnalyzedEquation(equation, tol)
    if item.is_bad:
        raise ValueError("No variable found. Include a letter like x, y, r or theta.")
    if item.has_more_than_two_variables:
        raise ValueError(
            f"Too many variables ({', '.join(item.actual_variables)}). "
            "Use at most two."
        )

    solver = Solver(tol)
    solver.add(item)
    solver.solve(_as_bounds(bounds))
    logger.debug("%r -> %s (%s)", equation, item.features.identity, item.features.classifier)
    return _result_dict(item.print_equation(), item, solver, t_start)


def classify_data(points, name: str = "data", tol: Tolerances = DEFAULT_TOLERANCES) -> dict:
    """Classify sampled ``(x, y)`` or ``(x, [y, ...])`` points.

    Raises ValueError when *points* is empty.
    """
    t_start = time.perf_counter()
    item = AnalyzedData(points, name, tol)
    solver = Solver(tol)
    solver.add(item)
    solver.solve()
    logger.debug("data %r (%d points) -> %s", name, len(item), item.features.identity)
    return _result_dict(name, item, solver, t_start)
