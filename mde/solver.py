"""Container of analyzed items and the bounds they are graphed in.

The :class:`Solver` holds one :class:`Solution` per added equation or data
set.  ``solve()`` samples and classifies every shown item, then grows the
shared window until it covers each item's preferred bounds.
"""

import logging

from mde.analyzed import AnalyzedData, AnalyzedEquation
from mde.bounds import Bounds, default_bounds
from mde.config import DEFAULT_BOUND_VALUE, DEFAULT_TOLERANCES, MAX_SOLVE_ITERATIONS, Tolerances

logger = logging.getLogger(__name__)

DEFAULT_BOUNDS = default_bounds(DEFAULT_BOUND_VALUE)


class Solution:
    """One analyzed item plus its show / sonify flags.

    A graph can only be sonified while it is shown; hiding it also turns
    sonification off.
    """

    def __init__(self, item, show_graph: bool = True, sonify_graph: bool = True):
        if item is None:
            raise ValueError("Solution needs an analyzed item.")
        self.item = item
        self._show_graph = True
        self._sonify_graph = True
        self.show_graph = show_graph
        self.sonify_graph = sonify_graph and show_graph

    @property
    def show_graph(self) -> bool:
        return self._show_graph

    @show_graph.setter
    def show_graph(self, visible: bool) -> None:
        if not visible:
            self._sonify_graph = False
        self._show_graph = bool(visible)

    @property
    def sonify_graph(self) -> bool:
        return self._sonify_graph

    @sonify_graph.setter
    def sonify_graph(self, sonify: bool) -> None:
        if sonify and not self._show_graph:
            raise ValueError("Graph can not be sonified if it is not shown.")
        self._sonify_graph = bool(sonify)

    @property
    def input_equation(self):
        return self.item.print_equation() if self.is_equation else None

    @property
    def is_equation(self) -> bool:
        return isinstance(self.item, AnalyzedEquation)

    @property
    def is_polar(self) -> bool:
        return self.is_equation and self.item.is_polar

    @property
    def is_bad_equation(self) -> bool:
        if self.item is None:
            return True
        return self.is_equation and (self.item.is_bad or self.item.has_more_than_two_variables)

    @property
    def features(self):
        return self.item.features if self.item is not None else None

    @property
    def is_describable(self) -> bool:
        return self.item is not None and self.item.is_describable

    @property
    def is_graphable(self) -> bool:
        return self.item is not None and self.item.is_graphable

    @property
    def is_sonifiable(self) -> bool:
        return self.item is not None and self.item.is_sonifiable

    def point_near(self, x: float):
        """Sample closest to *x*, or None outside the item's window."""
        if self.item is None or not self.item.points:
            return None
        if isinstance(self.item, AnalyzedData):
            return self.item.data[self.item.point_index_near(x)]
        b = self.item.preferred_bounds
        if x < b.left or x > b.right or b.width <= 0.0:
            return None
        points = self.item.points
        index = int(round((x - b.left) / b.width * (len(points) - 1)))
        return points[index]

    def dispose(self) -> None:
        if self.item is not None:
            self.item.dispose()
            self.item = None
        self._show_graph = False
        self._sonify_graph = False

    def __repr__(self) -> str:
        kind = type(self.item).__name__ if self.item is not None else None
        return (f"Solution({kind}, show_graph={self._show_graph}, "
                f"sonify_graph={self._sonify_graph})")


class Solver:
    """Ordered collection of solutions sharing one graphing window."""

    def __init__(self, tol: Tolerances = DEFAULT_TOLERANCES):
        self.tol = tol
        self._solutions = []
        self.bounds = DEFAULT_BOUNDS.copy()
        self.preferred_bounds = DEFAULT_BOUNDS.copy()
        self._listeners = []

    # ── Collection ──────────────────────────────────────────────────────

    def add(self, item, enable_graph: bool = True, enable_sonify: bool = True):
        """Append an equation (text or analyzed) or a data set.

        Equations without variables or with more than two are skipped and
        ``None`` is returned.  Unparsable text raises ValueError.
        """
        if isinstance(item, str):
            item = AnalyzedEquation(item, self.tol)
        if isinstance(item, AnalyzedEquation) and (item.is_bad or item.has_more_than_two_variables):
            logger.info("skipping equation %r: %s", item.text,
                        "no variables" if item.is_bad else "more than two variables")
            self._fire_state_changed()
            return None
        solution = Solution(item, enable_graph, enable_graph and enable_sonify)
        self._solutions.append(solution)
        self._apply_show_sonify_rule()
        return item

    def _apply_show_sonify_rule(self) -> None:
        """A polar graph is only sonified when it is the only thing being sonified."""
        for solution in reversed(self._solutions):
            if (solution.is_polar and solution.sonify_graph
                    and (self.show_cartesian_count > 0 or self.sonify_polar_count > 1)):
                solution.sonify_graph = False

    def __len__(self) -> int:
        return len(self._solutions)

    def __iter__(self):
        return iter(self._solutions)

    def is_empty(self) -> bool:
        return not self._solutions

    def get(self, key):
        """Look up by index, by item name (list of matches) or by item."""
        if isinstance(key, int):
            return self._solutions[key]
        if isinstance(key, str):
            return [s for s in self._solutions if s.item is not None and s.item.name == key]
        return next((s for s in self._solutions if s.item is key), None)

    def contains(self, item) -> bool:
        return self.get(item) is not None

    __contains__ = contains

    def remove_all(self) -> None:
        for solution in self._solutions:
            solution.dispose()
        self._solutions.clear()

    # ── Counts ──────────────────────────────────────────────────────────

    def _count(self, polar: bool, flag: str) -> int:
        return sum(1 for s in self._solutions if s.is_polar == polar and getattr(s, flag))

    @property
    def show_polar_count(self) -> int:
        return self._count(True, "show_graph")

    @property
    def show_cartesian_count(self) -> int:
        return self._count(False, "show_graph")

    @property
    def sonify_polar_count(self) -> int:
        return self._count(True, "sonify_graph")

    @property
    def sonify_cartesian_count(self) -> int:
        return self._count(False, "sonify_graph")

    # ── Solving ─────────────────────────────────────────────────────────

    def solve(self, left=None, right=None, top=None, bottom=None) -> None:
        """Sample and classify every shown item.

        With no argument the current window is used; a :class:`Bounds` is
        adopted first.  Four explicit edges only move the window and leave
        the items as they are.
        """
        if left is not None and not isinstance(left, Bounds):
            self.bounds.set_bounds(left, right, top, bottom)
            logger.debug("bounds set to %s", self.bounds)
            self._fire_state_changed()
            return
        if left is not None:
            self.bounds.set_bounds(left)
        if not self._solutions:
            return

        iteration = 0
        while True:
            recompute = False
            for index, solution in enumerate(self._solutions):
                if not (solution.show_graph or solution.sonify_graph):
                    continue
                item = solution.item
                if iteration == 0 or self.bounds != item.preferred_bounds:
                    item.compute_points(self.bounds)
                    if iteration == 0 and index == 0 and self.bounds != item.preferred_bounds:
                        # trails and data windows follow the window, so resample in it
                        logger.debug("adopting preferred bounds of %s: %s",
                                     item.name, item.preferred_bounds)
                        self.bounds.set_bounds(item.preferred_bounds)
                        item.compute_points(self.bounds)
                    item.update_features()
                if not item.is_graphable:
                    continue
                if self.bounds.maximize(item.preferred_bounds):
                    logger.debug("bounds grown to %s by %s", self.bounds, item.name)
                    recompute = True
            iteration += 1
            if not recompute or iteration >= MAX_SOLVE_ITERATIONS:
                break
        self._fire_state_changed()

    def set_bounds(self, left, right=None, top=None, bottom=None) -> None:
        self.bounds.set_bounds(left, right, top, bottom)

    def set_preferred_bounds(self, left, right=None, top=None, bottom=None) -> None:
        self.preferred_bounds.set_bounds(left, right, top, bottom)

    @property
    def left(self) -> float:
        return self.bounds.left

    @property
    def right(self) -> float:
        return self.bounds.right

    @property
    def top(self) -> float:
        return self.bounds.top

    @property
    def bottom(self) -> float:
        return self.bounds.bottom

    # ── Readiness ───────────────────────────────────────────────────────

    def any_analyzed_data(self) -> bool:
        return any(isinstance(s.item, AnalyzedData) for s in self._solutions)

    def any_bad_equations(self) -> bool:
        if not self._solutions:
            return True
        return any(s.is_bad_equation for s in self._solutions)

    def any_describable(self) -> bool:
        return any(s.is_describable for s in self._solutions)

    def any_graphable(self) -> bool:
        return any(s.is_graphable for s in self._solutions)

    def any_sonifiable(self) -> bool:
        return any(s.is_sonifiable for s in self._solutions)

    # ── Listeners ───────────────────────────────────────────────────────

    def add_change_listener(self, callback) -> None:
        """*callback(solver)* runs after every ``solve`` and skipped ``add``."""
        self._listeners.append(callback)

    def remove_change_listener(self, callback) -> None:
        self._listeners.remove(callback)

    def _fire_state_changed(self) -> None:
        for callback in list(self._listeners):
            callback(self)
