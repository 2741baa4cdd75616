"""Classification results and the number formatting used in feature values.

A :class:`ClassificationResult` is an ordered, multi-valued feature bag
(key -> list of values) that serialises to XML for downstream describers.
"""

import math
import sys
import xml.etree.ElementTree as ET
from typing import Optional

ROOT_TAG = "MDE"
GRAPH_DATA_TAG = "GraphData"

UNKNOWN = "Unknown"
NO_REASON = "NoReason"


# ── Number formatting ───────────────────────────────────────────────────

def fmt_num(value: float, max_decimals: int = 6) -> str:
    """Format a float into a clean decimal string.

    - Removes trailing zeros after the decimal point.
    - Uses up to *max_decimals* digits of precision.
    - Returns integers without a decimal point (e.g. ``7`` not ``7.0``).
    - Infinite values become ``infinity`` / ``-infinity``.
    """
    if math.isnan(value):
        return "undefined"
    if math.isinf(value):
        return "infinity" if value > 0 else "-infinity"
    if abs(value - round(value)) < 10.0 ** -max_decimals:
        return str(int(round(value)))
    formatted = f"{value:.{max_decimals}f}".rstrip("0").rstrip(".")
    if formatted in ("-0", ""):
        return "0"
    return formatted


def fmt_point(x: float, y: float) -> str:
    return f"({fmt_num(x)}, {fmt_num(y)})"


def fmt_interval(low: float, high: float) -> str:
    """Interval text with open ends at infinity, e.g. ``(-infinity, 3]``."""
    left = "(" if math.isinf(low) else "["
    right = ")" if math.isinf(high) else "]"
    return f"{left}{fmt_num(low)}, {fmt_num(high)}{right}"


def is_within_tolerance(value: float, tolerance: float) -> bool:
    return abs(value) <= 1.0e-6 * tolerance


def is_nearly_integer(x: float) -> bool:
    return is_within_tolerance(x - round(x), abs(x))


def make_integer(values, limit: int = 100) -> list:
    """Rescale *values* to small integers when a multiplier up to *limit* does it.

    The vector is first divided by its leading significant entry.  If no
    multiplier makes every entry nearly integral, the divided vector is
    returned unrounded.
    """
    x = [float(v) for v in values]
    largest = max((abs(v) for v in x), default=0.0)
    lead = next((v for v in x if not is_within_tolerance(v, largest + sys.float_info.min)),
                None)
    if lead is None:
        return x
    x = [v / lead for v in x]
    for multiplier in range(1, limit + 1):
        if all(is_nearly_integer(multiplier * v) for v in x):
            return [float(round(multiplier * v)) for v in x]
    return x


def normalize_angle_degrees(angle: float) -> float:
    """Map *angle* into ``(-180, 180]``."""
    turns = 0.5 + angle / 360.0
    fractional = 1.0 + turns - math.ceil(turns)
    return 360.0 * (fractional - 0.5)


def format_linear_equation(coefficients, variables, scale: float) -> str:
    """``a*x + b*y + c = 0`` dropping terms negligible against *scale*."""
    parts = []
    for value, suffix in zip(coefficients, (f"*{variables[0]}", f"*{variables[1]}", "")):
        if is_within_tolerance(value, scale):
            continue
        text = fmt_num(abs(value))
        if suffix and text == "1":
            text = suffix[1:]
        else:
            text += suffix
        if not parts:
            parts.append(text if value > 0 else f"-{text}")
        else:
            parts.append(f"{'+' if value > 0 else '-'} {text}")
    return f"{' '.join(parts) or '0'} = 0"


def equation_of_line(point, inclination: float, variables=("x", "y")) -> str:
    """Equation of the line through *point* at *inclination* degrees."""
    x0, y0 = point
    if is_within_tolerance(abs(inclination) - 90.0, 1.0e-2):
        return equation_of_vertical_line(x0, variables)
    slope = math.tan(math.radians(inclination))
    coefficients = [slope, -1.0, y0 - slope * x0]
    scale = math.sqrt(0.33 * sum(c * c for c in coefficients))
    return format_linear_equation(make_integer(coefficients), variables, scale)


def equation_of_vertical_line(x0: float, variables=("x", "y")) -> str:
    scale = math.sqrt(0.5 * (1.0 + x0 * x0))
    return format_linear_equation(make_integer([1.0, 0.0, -x0]), variables, scale)


# ── Feature bag ─────────────────────────────────────────────────────────

def _as_feature_value(value):
    if isinstance(value, (dict, str)):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return fmt_num(float(value))
    if isinstance(value, tuple) and len(value) == 2:
        return fmt_point(*value)
    return str(value)


class ClassificationResult:
    """Shape decision for one analyzed item plus its feature bag."""

    def __init__(self, identity: str = UNKNOWN, reason: str = NO_REASON,
                 classifier: str = "default"):
        self.identity = identity
        self.reason = reason
        self.classifier = classifier
        self.rotation = 0.0
        self.translation = (0.0, 0.0)
        self.normalized_coefficients: Optional[tuple] = None
        self._features: dict = {}

    @property
    def is_unknown(self) -> bool:
        return self.identity == UNKNOWN

    # ── Feature access ──────────────────────────────────────────────────

    def put_feature(self, key: str, value) -> None:
        """Append *value* to *key*; numbers, points and booleans become strings."""
        self._features.setdefault(key, []).append(_as_feature_value(value))

    def set_feature(self, key: str, value) -> None:
        self._features[key] = [_as_feature_value(value)]

    def put_features(self, key: str, values) -> None:
        for value in values:
            self.put_feature(key, value)

    def has_feature(self, key: str) -> bool:
        return key in self._features

    def get(self, key: str, default=None):
        values = self._features.get(key)
        return values[0] if values else default

    def get_values(self, key: str) -> list:
        return list(self._features.get(key, []))

    def __contains__(self, key: str) -> bool:
        return key in self._features

    def merge(self, other: "ClassificationResult") -> None:
        """Take over *other*'s features and reduced-form parameters."""
        for key, values in other._features.items():
            self._features[key] = list(values)
        self.rotation = other.rotation
        self.translation = other.translation
        self.normalized_coefficients = other.normalized_coefficients

    def as_dict(self) -> dict:
        """Single values unwrapped, repeated keys kept as lists."""
        return {k: v[0] if len(v) == 1 else list(v) for k, v in self._features.items()}

    # ── Serialisation ───────────────────────────────────────────────────

    def to_xml(self) -> str:
        root = ET.Element(ROOT_TAG)
        data = ET.SubElement(root, GRAPH_DATA_TAG)
        for key, values in self._features.items():
            for value in values:
                _append_xml(data, key, value)
        return ET.tostring(root, encoding="unicode")

    def __str__(self) -> str:
        return self.to_xml()

    def __repr__(self) -> str:
        return (f"ClassificationResult(identity={self.identity!r}, "
                f"reason={self.reason!r}, features={len(self._features)})")


def _append_xml(parent, key: str, value) -> None:
    element = ET.SubElement(parent, key)
    if isinstance(value, dict):
        for child_key, child_value in value.items():
            if isinstance(child_value, list):
                for item in child_value:
                    _append_xml(element, child_key, _as_feature_value(item))
            else:
                _append_xml(element, child_key, _as_feature_value(child_value))
    else:
        element.text = value
