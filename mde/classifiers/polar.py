"""Polar curve families fitted over ``(theta, r)`` samples."""

import logging

from mde.classifiers.base import NO_MODEL_FIT, Classifier, ClassifierKind, generic_features
from mde.config import DEFAULT_TOLERANCES, Tolerances
from mde.features import UNKNOWN
from mde.models import PolarModelBuilder, best_guess, ranked_polar_models

logger = logging.getLogger(__name__)


class PolarClassifier(Classifier):
    kind = ClassifierKind.POLAR

    def __init__(self, polar_points, worst_fit=None, tol: Tolerances = DEFAULT_TOLERANCES):
        self.tol = tol
        self.worst_fit = tol.polar_worst_fit if worst_fit is None else worst_fit
        builder = PolarModelBuilder(tol)
        for point in polar_points:
            builder.add_points(point.x, point.ys)
        self.models = ranked_polar_models(builder)
        self.best_guess = best_guess(self.models, self.worst_fit)

    def _features(self, item, result) -> None:
        from mde.shapes import polar

        path = polar.POLAR_PATHS.get(self.best_guess.identity) if self.best_guess else None
        if path is None:
            logger.debug("no polar feature path for %s", self.best_guess)
            generic_features(item, result, self)
            result.identity = UNKNOWN
            result.reason = NO_MODEL_FIT
            return
        path(result, item, self.best_guess)

    def __str__(self) -> str:
        if self.best_guess is None:
            return "No acceptable polar model."
        return f"{self.best_guess.name} (fit {self.best_guess.fit:g})"
