"""Tests for number formatting, the feature bag and its XML form."""

import math
import xml.etree.ElementTree as ET

import numpy as np
import pytest

from mde.features import (
    ClassificationResult, equation_of_line, fmt_interval, fmt_num, make_integer,
    normalize_angle_degrees,
)
from mde.shapes import intervals
from mde.shapes.graph import compass_direction


@pytest.mark.parametrize(
    "value,expected",
    [
        (2.0, "2"),
        (0.5, "0.5"),
        (-3.25, "-3.25"),
        (1.0 / 3.0, "0.333333"),
        (1e-9, "0"),
        (math.nan, "undefined"),
        (math.inf, "infinity"),
        (-math.inf, "-infinity"),
    ],
)
def test_fmt_num(value: float, expected: str) -> None:
    assert fmt_num(value) == expected


def test_fmt_interval_open_at_infinity() -> None:
    assert fmt_interval(-math.inf, 3.0) == "(-infinity, 3]"
    assert fmt_interval(1.0, 2.5) == "[1, 2.5]"


@pytest.mark.parametrize("angle,expected", [(270.0, -90.0), (-180.0, 180.0), (45.0, 45.0),
                                            (540.0, 180.0)])
def test_normalize_angle_degrees(angle: float, expected: float) -> None:
    assert normalize_angle_degrees(angle) == pytest.approx(expected)


def test_make_integer() -> None:
    assert make_integer([0.5, 1.0]) == [1.0, 2.0]
    assert make_integer([0.0, 0.0]) == [0.0, 0.0]
    assert make_integer([1.0, math.pi]) == pytest.approx([1.0, math.pi])


def test_equation_of_line() -> None:
    assert equation_of_line((0.0, 0.0), 45.0) == "x - y = 0"
    assert equation_of_line((2.0, 5.0), 90.0) == "x - 2 = 0"
    assert equation_of_line((0.0, 3.0), 0.0) == "y - 3 = 0"


@pytest.mark.parametrize(
    "degrees,expected",
    [(0.0, "East"), (90.0, "North"), (180.0, "West"), (-90.0, "South"), (45.0, "NE"),
     (350.0, "East")],
)
def test_compass_direction(degrees: float, expected: str) -> None:
    assert compass_direction(degrees) == expected


class TestClassificationResult:
    def test_put_and_set(self):
        result = ClassificationResult("Parabola", classifier="quadratic")
        result.put_feature("xIntercepts", -1.0)
        result.put_feature("xIntercepts", 1.0)
        result.set_feature("vertex", (0.0, -1.0))
        result.set_feature("graphClosure", False)
        assert result.get_values("xIntercepts") == ["-1", "1"]
        assert result.get("vertex") == "(0, -1)"
        assert result.get("graphClosure") == "false"
        assert "vertex" in result
        assert not result.is_unknown

    def test_as_dict_unwraps_single_values(self):
        result = ClassificationResult()
        result.set_feature("radius", 2.0)
        result.put_features("focus", [(1.0, 0.0), (-1.0, 0.0)])
        assert result.as_dict() == {"radius": "2", "focus": ["(1, 0)", "(-1, 0)"]}
        assert result.is_unknown

    def test_to_xml_nests_dicts(self):
        result = ClassificationResult()
        result.set_feature("graphName", "circle")
        result.set_feature("loopAngles", {"graphObject": "loops", "angleInfo": [0.0, 90.0]})
        root = ET.fromstring(result.to_xml())
        assert root.tag == "MDE"
        data = root.find("GraphData")
        assert data.find("graphName").text == "circle"
        assert [e.text for e in data.find("loopAngles").findall("angleInfo")] == ["0", "90"]

    def test_merge_copies_features_and_transform(self):
        source = ClassificationResult("Ellipse")
        source.set_feature("radius", 2.0)
        source.rotation = 30.0
        source.translation = (1.0, 2.0)
        target = ClassificationResult("PolarConic")
        target.set_feature("graphName", "conic")
        target.merge(source)
        assert target.identity == "PolarConic"
        assert target.get("radius") == "2"
        assert target.get("graphName") == "conic"
        assert (target.rotation, target.translation) == (30.0, (1.0, 2.0))


def test_endpoints_of_v_shaped_trail() -> None:
    trail = [(float(x), abs(float(x))) for x in np.linspace(-2.0, 2.0, 41)]
    endpoints = intervals.find_endpoints(trail)
    assert [e.x for e in endpoints] == pytest.approx([-2.0, 0.0, 2.0], abs=1e-12)
    assert endpoints[1].kind == intervals.LOCAL_MIN
    node = intervals.function_analysis_node(endpoints)
    assert node["NumEndpoints"] == "3"
    assert [d["direction"] for d in node["IntervalDescription"]] == ["decreases", "increases"]
