"""Best-fit polynomial and rational models over sampled points."""

import logging

from mde.classifiers.base import Classifier, ClassifierKind, generic_features
from mde.config import DEFAULT_TOLERANCES, Tolerances
from mde.models import PolynomialModelBuilder, QuadraticModel, RationalModel, best_guess

logger = logging.getLogger(__name__)

SIZE = 8
DEGREE = SIZE - 1


class PolynomialClassifier(Classifier):
    """Quadratic plus every ``N/D`` rational model up to degree 7 each.

    Models are stably sorted by fit; the best guess is the lowest-complexity
    model with ``fit <= worst_fit``.
    """

    kind = ClassifierKind.POLYNOMIAL

    def __init__(self, points, worst_fit=None, tol: Tolerances = DEFAULT_TOLERANCES):
        self.tol = tol
        self.worst_fit = tol.polynomial_worst_fit if worst_fit is None else worst_fit
        q_builder = PolynomialModelBuilder(2, 2, tol)
        r_builder = PolynomialModelBuilder(DEGREE, 1, tol)
        for point in points:
            q_builder.add_points(point.x, point.ys)
            r_builder.add_points(point.x, point.ys)

        models = [QuadraticModel(q_builder)]
        models.extend(RationalModel(r_builder, i // SIZE, i % SIZE) for i in range(SIZE * SIZE))
        self.models = sorted(models, key=lambda m: m.fit)
        self.best_guess = best_guess(self.models, self.worst_fit)
        if self.best_guess is None:
            logger.debug("no polynomial model within fit %g", self.worst_fit)

    @staticmethod
    def has_special_form(item) -> bool:
        relation = item.relation_text.lower()
        return "abs(" in relation or "sqrt(" in relation

    def _features(self, item, result) -> None:
        from mde.shapes import functions

        if self.best_guess is not None:
            result.put_feature("bestFitModel", self.best_guess.name)
        if not item.is_equation:
            functions.equation_data_features(result, item, self)
            return
        if item.is_solvable_function:
            relation = item.relation_text.lower()
            if not item.is_polynomial:
                if "abs(" in relation:
                    functions.absolute_value_features(result, item, self)
                elif "sqrt(" in relation:
                    functions.square_root_features(result, item, self)
                else:
                    functions.equation_data_features(result, item, self)
            elif functions.is_cubic(item):
                functions.cubic_features(result, item)
            else:
                functions.rational_function_features(result, item)
            return
        generic_features(item, result, self)

    def __str__(self) -> str:
        if self.best_guess is None:
            return "No acceptable model."
        return f"{self.best_guess.name} (fit {self.best_guess.fit:g})\n{self.best_guess}"

