import pytest

from mde.bounds import Bounds
from mde.engine import classify_data, classify_equation

RESULT_KEYS = {"equation", "identity", "classifier", "reason", "features", "xml", "bounds",
               "summary"}


def test_result_shape() -> None:
    result = classify_equation("x^2 + y^2 = 1")
    assert set(result) == RESULT_KEYS
    assert result["equation"] == "x^2 + y^2 = 1"
    assert result["identity"] == "Ellipse"
    assert result["classifier"] == "quadratic"
    assert result["reason"] == "NoReason"
    assert result["xml"].startswith("<MDE><GraphData>")
    assert result["bounds"] == {"left": -10.0, "right": 10.0, "top": 10.0, "bottom": -10.0}


def test_summary_fields() -> None:
    summary = classify_equation("y = x")["summary"]
    assert isinstance(summary["runtime_ms"], float)
    assert summary["runtime_ms"] >= 0
    assert summary["library"].startswith("SymPy ")
    assert len(summary["timestamp"]) == 19


@pytest.mark.parametrize(
    "bounds",
    [
        Bounds(-3.0, 3.0, 3.0, -3.0),
        {"left": -3.0, "right": 3.0, "top": 3.0, "bottom": -3.0},
        (-3.0, 3.0, 3.0, -3.0),
    ],
)
def test_bounds_forms(bounds) -> None:
    result = classify_equation("y = x", bounds=bounds)
    assert result["bounds"] == {"left": -3.0, "right": 3.0, "top": 3.0, "bottom": -3.0}


@pytest.mark.parametrize(
    "equation,message",
    [
        ("", "cannot be empty"),
        ("   ", "cannot be empty"),
        ("x - x = 1", "No variable found"),
        ("x + y + z = 1", "Too many variables"),
        ("x $ 2", "Invalid character"),
    ],
)
def test_equation_errors(equation: str, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        classify_equation(equation)


def test_bad_bounds_sequence() -> None:
    with pytest.raises(ValueError, match="four values"):
        classify_equation("y = x", bounds=(0.0, 1.0))


def test_classifier_names() -> None:
    assert classify_equation("y = sin(x)")["classifier"] == "trig"
    assert classify_equation("r = 2cos(3theta)")["classifier"] == "polar"
    assert classify_equation("y = x^3")["classifier"] == "polynomial"
    assert classify_equation("r = 2sec(theta)")["classifier"] == "polar"


def test_classify_data() -> None:
    result = classify_data([(0.0, 0.0), (1.0, 1.0), (2.0, 4.0)], name="samples")
    assert result["equation"] == "samples"
    assert result["identity"] == "EquationData"
    assert result["bounds"] == {"left": 0.0, "right": 2.0, "top": 4.0, "bottom": 0.0}


def test_classify_data_empty() -> None:
    with pytest.raises(ValueError, match="No data points"):
        classify_data([])
