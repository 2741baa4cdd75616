"""Items held by the solver: a parsed equation or a set of data samples.

An item samples itself over a window (``compute_points``), splits the
samples into drawable trails, picks the classifier that fits it and caches
the resulting :class:`~mde.features.ClassificationResult`.
"""

import bisect
import logging
import math
import sys

import numpy as np

from mde.bounds import Bounds, default_bounds
from mde.config import DEFAULT_BOUND_VALUE, DEFAULT_TOLERANCES, NUM_POINTS, Tolerances
from mde.points import MultiPoint, graph_trails
from mde.polynomial import Polynomial
from mde.roots import real_roots
from mde.symbolic import parse_equation

logger = logging.getLogger(__name__)

POLAR_VARIABLES = ("r", "theta")

# Bisection stops once the bracket is narrower than this.
_BOUNDARY_WIDTH = 1e-8


def solve_for_dependent(coefficients, tol: Tolerances = DEFAULT_TOLERANCES) -> list:
    """Real roots, ascending, of ``sum(c[i] * y^(n-i))`` (highest power first).

    Leading coefficients negligible against the coefficient sum are dropped
    first.  Any NaN coefficient means the relation is undefined there.
    """
    c = [float(v) for v in coefficients]
    if not c or any(math.isnan(v) for v in c):
        return []
    et = sum(abs(v) for v in c) * 1e-8 + sys.float_info.min
    et2 = sum(v * v for v in c) * 1e-16 + sys.float_info.min
    start = 0
    while start < len(c) and abs(c[start]) <= et:
        start += 1
    c = c[start:]
    degree = len(c) - 1
    if degree < 1:
        return []
    if degree == 1:
        return [-c[1] / c[0]]
    if degree == 2:
        t0 = -0.5 * c[1] / c[0]
        t1 = c[2] / c[0]
        d2 = t0 * t0 - t1
        if abs(d2) <= et2:
            return [t0, t0]
        if d2 < 0.0:
            return []
        d = math.sqrt(d2)
        return [t0 - d, t0 + d]
    return real_roots(Polynomial(c, tol), tol)


def _unique(values, decimals: int = 6) -> list:
    out = []
    for v in sorted(values):
        if not out or round(v, decimals) != round(out[-1], decimals):
            out.append(v)
    return out


# ── Base item ───────────────────────────────────────────────────────────

class AnalyzedItem:
    """Common state of anything the solver can graph and describe."""

    is_equation = False

    def __init__(self, name: str, tol: Tolerances = DEFAULT_TOLERANCES):
        self.name = name
        self.tol = tol
        self.points = None
        self.graph_trails = None
        self.features = None
        self.preferred_bounds = default_bounds(DEFAULT_BOUND_VALUE)
        self.is_function_over_interval = False

    @property
    def abscissa_symbol(self) -> str:
        return "x"

    @property
    def ordinate_symbol(self) -> str:
        return "y"

    def compute_points(self, bounds: Bounds) -> None:
        raise NotImplementedError

    def classifier(self):
        raise NotImplementedError

    def update_features(self):
        """Classify and cache the feature result."""
        classifier = self.classifier()
        logger.debug("%s classified by %s", self.name, classifier.kind.value)
        self.features = classifier.classify(self)
        return self.features

    def function_test(self) -> bool:
        """True when no sample has ordinates further apart than the tolerance."""
        points = self.points or []
        self.is_function_over_interval = bool(points) and all(
            not p.ys or max(p.ys) - min(p.ys) <= self.tol.function_test_tol for p in points
        )
        return self.is_function_over_interval

    @property
    def is_describable(self) -> bool:
        return self.features is not None

    @property
    def is_graphable(self) -> bool:
        return self.graph_trails is not None

    @property
    def is_sonifiable(self) -> bool:
        return self.points is not None

    def dispose(self) -> None:
        self.points = None
        self.graph_trails = None
        self.features = None


# ── Equations ───────────────────────────────────────────────────────────

class AnalyzedEquation(AnalyzedItem):
    """A parsed equation, reduced to ``relation = 0``.

    Raises ValueError when the text cannot be parsed.
    """

    is_equation = True

    def __init__(self, text: str, tol: Tolerances = DEFAULT_TOLERANCES):
        super().__init__(text.strip(), tol)
        self.text = text.strip()
        self.parsed = parse_equation(text)
        self.polynomial = self.parsed.polynomial
        self.actual_variables = self.polynomial.variables()
        self.has_more_than_two_variables = len(self.actual_variables) > 2
        self.is_bad = not self.actual_variables
        self.is_polar = bool(self.actual_variables) and set(self.actual_variables) <= set(POLAR_VARIABLES)
        self.variables = self._check_variables()
        self.degree = self.polynomial.degree()
        self._saved_range = None

        self.is_polynomial = False
        self.is_quadratic = False
        self.is_solvable = False
        self.dvp_coefficients = None
        if self.is_bad or self.has_more_than_two_variables:
            return

        self.is_polynomial = self.polynomial.has_constant_coefficients()
        self.is_quadratic = self.is_polynomial and self.degree <= 2 and not self.is_polar
        self.dvp_coefficients = self.polynomial.coefficients_in(self.dependent_variable)
        if self.dvp_coefficients is not None:
            self.is_solvable = all(
                set(c.variables) <= {self.independent_variable} for c in self.dvp_coefficients
            )
        logger.debug("analyzed %r: variables=%s polynomial=%s solvable=%s",
                     self.text, self.variables, self.is_polynomial, self.is_solvable)

    def _check_variables(self) -> list:
        names = self.actual_variables
        if self.is_polar:
            return ["theta", "r"]
        if len(names) == 1:
            return ["x", "y"] if names[0] == "y" else [names[0], "y"]
        if len(names) == 2:
            return list(names)
        return ["x", "y"]

    # ── Flags ───────────────────────────────────────────────────────────

    @property
    def independent_variable(self) -> str:
        return self.variables[0]

    @property
    def dependent_variable(self) -> str:
        return self.variables[1]

    @property
    def abscissa_symbol(self) -> str:
        return "x" if self.is_polar else self.independent_variable

    @property
    def ordinate_symbol(self) -> str:
        return "y" if self.is_polar else self.dependent_variable

    @property
    def dvp_degree(self) -> int:
        return -1 if self.dvp_coefficients is None else len(self.dvp_coefficients) - 1

    @property
    def is_undefined(self) -> bool:
        """No dependent variable at all: the graph is a set of vertical lines."""
        return self.is_solvable and self.dvp_degree == 0

    @property
    def is_function(self) -> bool:
        return self.is_solvable and self.dvp_degree == 1

    is_solvable_function = is_function

    @property
    def is_constant(self) -> bool:
        return self.dvp_coefficients is not None and all(
            c.is_constant() for c in self.dvp_coefficients
        )

    @property
    def relation_text(self) -> str:
        return str(self.polynomial.expr)

    def print_equation(self) -> str:
        return self.text

    def function_expression(self):
        """``f`` in ``dependent = f(independent)``, or None when not a function."""
        if not self.is_function:
            return None
        c1, c0 = self.dvp_coefficients
        return -c0.expr / c1.expr

    # ── Sampling ────────────────────────────────────────────────────────

    def solve_at(self, x: float) -> list:
        """Real values of the dependent variable at one independent value."""
        if not self.is_solvable:
            return []
        bindings = {self.independent_variable: x}
        coefficients = [c.evaluate(bindings) for c in self.dvp_coefficients]
        return solve_for_dependent(coefficients, self.tol)

    def solve_for_points(self, low: float, high: float, count: int = NUM_POINTS) -> list:
        """``count`` evenly spaced samples over ``[low, high]``."""
        if not self.is_solvable or self.dvp_degree < 1:
            return []
        xs = np.linspace(low, high, count)
        table = [c.evaluate_many(self.independent_variable, xs) for c in self.dvp_coefficients]
        points = []
        for j, x in enumerate(xs):
            ys = solve_for_dependent([row[j] for row in table], self.tol)
            points.append(MultiPoint(float(x), ys))
        self._saved_range = (low, high)
        return self._refine_boundaries(points)

    def _refine_boundaries(self, points) -> list:
        """Insert a bisected sample wherever the branch count changes."""
        refined = []
        for i, point in enumerate(points):
            if i and len(points[i - 1]) != len(point):
                extra = self._find_boundary(points[i - 1], point)
                if extra is not None:
                    refined.append(extra)
            refined.append(point)
        return refined

    def _find_boundary(self, a: MultiPoint, b: MultiPoint):
        lo, hi = a, b
        while hi.x - lo.x >= _BOUNDARY_WIDTH:
            mid_x = 0.5 * (lo.x + hi.x)
            mid = MultiPoint(mid_x, self.solve_at(mid_x))
            if len(mid) == len(lo):
                lo = mid
            else:
                hi = mid
        # keep the side of the boundary that still has the extra branches
        edge = lo if len(lo) > len(hi) else hi
        return edge if len(edge) else None

    def _vertical_lines(self, bounds: Bounds) -> list:
        roots = self.x_intercepts()
        return [[(x, bounds.bottom), (x, bounds.top)]
                for x in roots if bounds.left <= x <= bounds.right]

    def compute_points(self, bounds: Bounds) -> None:
        left, right, top, bottom = bounds.left, bounds.right, bounds.top, bounds.bottom
        max_jump = abs(top - bottom)
        if self.is_polar:
            polar = self.solve_for_points(0.0, 2.0 * math.pi)
            trails = []
            points = []
            extent = 0.0
            for trail in graph_trails(polar, max_jump):
                cartesian = [(r * math.cos(t), r * math.sin(t)) for t, r in trail]
                for x, y in cartesian:
                    extent = max(extent, abs(x), abs(y))
                    points.append(MultiPoint(x, [y]))
                trails.append(cartesian)
            right = min(extent, DEFAULT_BOUND_VALUE) if trails else DEFAULT_BOUND_VALUE
            left, top, bottom = -right, right, -right
            self.polar_points = polar
            self.points = points
            self.graph_trails = trails
        elif self.is_undefined:
            self.graph_trails = self._vertical_lines(bounds)
            self.points = [MultiPoint(x0, [bottom, top]) for (x0, _), _ in self.graph_trails]
        else:
            self.points = self.solve_for_points(left, right)
            self.graph_trails = graph_trails(self.points, max_jump)
        self.preferred_bounds.set_bounds(left, right, top, bottom)
        self.function_test()

    # ── Intercepts ──────────────────────────────────────────────────────

    def x_intercepts(self) -> list:
        """Independent-variable values where the dependent variable is zero."""
        if self.is_polar or self.is_bad or self.has_more_than_two_variables:
            return []
        reduced = self.polynomial.substitute({self.dependent_variable: 0})
        coefficients = reduced.coefficients_in(self.independent_variable)
        if coefficients is not None and all(c.is_constant() for c in coefficients):
            return _unique(solve_for_dependent([c.evaluate({}) for c in coefficients], self.tol))
        return self._crossings()

    def y_intercepts(self) -> list:
        if self.is_polar or not self.is_solvable:
            return []
        return _unique(self.solve_at(0.0))

    def _crossings(self) -> list:
        """Sign changes along the sampled trails, linearly interpolated."""
        out = []
        for trail in self.graph_trails or []:
            for (x0, y0), (x1, y1) in zip(trail, trail[1:]):
                if y0 == 0.0:
                    out.append(x0)
                elif y0 * y1 < 0.0:
                    out.append(x0 - y0 * (x1 - x0) / (y1 - y0))
        return _unique(out)

    # ── Classification ──────────────────────────────────────────────────

    def classifier(self):
        from mde.classifiers import (
            DefaultClassifier, PolarClassifier, PolynomialClassifier, QuadraticClassifier,
            TrigClassifier,
        )
        from mde.models import QuadraticModel

        if self.is_quadratic:
            return QuadraticClassifier(self.polynomial, self.tol)
        if self.is_polar:
            polar = getattr(self, "polar_points", None)
            if polar is None:
                polar = self.solve_for_points(0.0, 2.0 * math.pi)
            return PolarClassifier(polar, tol=self.tol)
        relation = self.relation_text
        if "sin" in relation or "cos" in relation or "tan" in relation:
            return TrigClassifier()

        if self._saved_range and self._saved_range[0] < self._saved_range[1]:
            low, high = self._saved_range
        else:
            low, high = -DEFAULT_BOUND_VALUE, DEFAULT_BOUND_VALUE
        pc = PolynomialClassifier(self.solve_for_points(low, high), tol=self.tol)
        guess = pc.best_guess
        if guess is None:
            return pc if pc.has_special_form(self) else DefaultClassifier()
        if isinstance(guess, QuadraticModel):
            fitted = AnalyzedEquation(guess.equation(), self.tol)
            if fitted.is_function and fitted.is_quadratic:
                return QuadraticClassifier(fitted.polynomial, self.tol)
        return pc


# ── Data ────────────────────────────────────────────────────────────────

class AnalyzedData(AnalyzedItem):
    """Ascending ``(x, ys)`` samples, typically from a data file.

    Raises ValueError for empty input.
    """

    def __init__(self, points, name: str = "data", tol: Tolerances = DEFAULT_TOLERANCES):
        super().__init__(name, tol)
        data = []
        for x, ys in points:
            if isinstance(ys, (int, float)):
                ys = [ys]
            data.append(MultiPoint(float(x), sorted(float(y) for y in ys)))
        if not data:
            raise ValueError("No data points.")
        data.sort(key=lambda p: p.x)
        self.data = data
        self._xs = [p.x for p in data]
        stats = self.statistics()
        self.preferred_bounds.set_bounds(stats["x_min"], stats["x_max"],
                                         stats["y_max"], stats["y_min"])

    @classmethod
    def from_columns(cls, xs, ys, name: str = "data", tol: Tolerances = DEFAULT_TOLERANCES):
        if len(xs) != len(ys):
            raise ValueError(f"Column lengths differ: {len(xs)} x values, {len(ys)} y values.")
        return cls(zip(xs, ys), name, tol)

    def __len__(self) -> int:
        return len(self.data)

    def statistics(self) -> dict:
        ys = [y for p in self.data for y in p.ys]
        return {
            "count": len(self.data),
            "x_min": self.data[0].x,
            "x_max": self.data[-1].x,
            "y_min": min(ys) if ys else 0.0,
            "y_max": max(ys) if ys else 0.0,
            "y_mean": sum(ys) / len(ys) if ys else 0.0,
        }

    def point_index_near(self, x: float) -> int:
        i = bisect.bisect_left(self._xs, x)
        if i >= len(self._xs):
            return len(self._xs) - 1
        if i > 0 and x - self._xs[i - 1] < self._xs[i] - x:
            return i - 1
        return i

    def _window(self, left: float, right: float) -> list:
        lo = bisect.bisect_left(self._xs, left)
        hi = bisect.bisect_right(self._xs, right)
        return self.data[lo:hi]

    def _resample(self, window) -> list:
        n = len(window)
        if n == NUM_POINTS or n < 2:
            return list(window)
        if n > NUM_POINTS:
            step = (n - 1) / (NUM_POINTS - 1)
            return [window[int(round(i * step))] for i in range(NUM_POINTS)]
        if any(len(p) != len(window[0]) for p in window):
            return list(window)
        xs = np.array([p.x for p in window])
        grid = np.linspace(xs[0], xs[-1], NUM_POINTS)
        branches = [np.interp(grid, xs, [p.ys[k] for p in window])
                    for k in range(len(window[0]))]
        return [MultiPoint(float(x), [float(b[i]) for b in branches])
                for i, x in enumerate(grid)]

    def compute_points(self, bounds: Bounds) -> None:
        self.points = self._resample(self._window(bounds.left, bounds.right))
        self.graph_trails = graph_trails(self.points, abs(bounds.top - bounds.bottom))
        self.function_test()

    def classifier(self):
        from mde.classifiers import PolynomialClassifier
        return PolynomialClassifier(self.data, tol=self.tol)
