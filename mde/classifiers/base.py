"""Shared classifier contract.

The classifier family is closed: every variant is one :class:`ClassifierKind`
and answers ``classify(item)`` with a
:class:`~mde.features.ClassificationResult`.  Failure is reported through
the result's ``reason``, never raised.
"""

from enum import Enum

from mde.features import NO_REASON, UNKNOWN, ClassificationResult


class ClassifierKind(Enum):
    DEFAULT = "default"
    QUADRATIC = "quadratic"
    POLYNOMIAL = "polynomial"
    POLAR = "polar"
    TRIG = "trig"


class Shape(str, Enum):
    """Identities produced by the non-quadratic feature paths."""

    RATIONAL_FUNCTION = "RationalFunction"
    POLYNOMIAL = "Polynomial"
    CUBIC = "CubicPolynomial"
    ABSOLUTE_VALUE = "AbsoluteValue"
    SQUARE_ROOT = "SquareRoot"
    EQUATION_DATA = "EquationData"
    SINE = "Sine"
    COSINE = "Cosine"
    TANGENT = "Tangent"
    TRIG_FUNCTION = "TrigFunction"
    POLAR_ROSE = "PolarRose"
    POLAR_LEMNISCATE = "PolarLemniscate"
    POLAR_TROCHOID = "PolarTrochoid"
    POLAR_LINE = "PolarLine"
    POLAR_CONIC = "PolarConic"


NOT_A_FUNCTION = "NotAFunction"
NO_MODEL_FIT = "NoModelFit"


def add_graph_boundaries(item, result: ClassificationResult) -> None:
    """Attach ``x = <left> to <right> and y = <bottom> to <top>``."""
    result.set_feature(
        "graphBoundaries",
        item.preferred_bounds.describe(item.abscissa_symbol, item.ordinate_symbol),
    )


def generic_features(item, result: ClassificationResult, classifier=None) -> ClassificationResult:
    """Fallback path: equation data, rational function or a plain XY graph."""
    from mde.shapes import functions, graph

    if not item.is_equation:
        functions.equation_data_features(result, item, classifier)
    elif item.is_solvable_function:
        if not item.is_polynomial:
            functions.equation_data_features(result, item, classifier)
        else:
            functions.rational_function_features(result, item)
    else:
        graph.xy_graph_features(result, item)
        result.reason = NOT_A_FUNCTION
    return result


class Classifier:
    kind = ClassifierKind.DEFAULT

    def classify(self, item) -> ClassificationResult:
        result = ClassificationResult(UNKNOWN, NO_REASON, self.kind.value)
        self._features(item, result)
        add_graph_boundaries(item, result)
        return result

    def _features(self, item, result: ClassificationResult) -> None:
        generic_features(item, result, self)


class DefaultClassifier(Classifier):
    """Used when no model family fits the samples."""
