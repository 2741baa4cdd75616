from mde.classifiers.base import (
    ClassifierKind, Classifier, DefaultClassifier, Shape, add_graph_boundaries,
)
from mde.classifiers.quadratic import QuadraticClassifier, QuadraticType, FailureReason
from mde.classifiers.polynomial import PolynomialClassifier
from mde.classifiers.polar import PolarClassifier
from mde.classifiers.trig import TrigClassifier
