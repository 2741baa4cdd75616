"""Sine, cosine and tangent recognised by name in the relation text.

Detection is a plain substring test, so ``sinh`` counts as ``sin``.
"""

from mde.classifiers.base import Classifier, ClassifierKind

TRIG_NAMES = ("sin", "cos", "tan")


def trig_names_in(text: str) -> list:
    return [name for name in TRIG_NAMES if name in text]


class TrigClassifier(Classifier):
    kind = ClassifierKind.TRIG

    def _features(self, item, result) -> None:
        from mde.shapes import trig

        names = trig_names_in(item.relation_text)
        if len(names) != 1:
            trig.trig_function_features(result, item)
        elif names[0] == "tan":
            trig.tangent_features(result, item)
        else:
            trig.sinusoid_features(result, item, names[0])
