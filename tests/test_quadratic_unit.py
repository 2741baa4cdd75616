"""Tests for conic classification by rotation and completing the square."""

import pytest

from mde.classifiers.quadratic import (
    FailureReason, QuadraticClassifier, QuadraticType, identify,
)
from mde.symbolic import parse_equation


@pytest.mark.parametrize(
    "coefficients,expected",
    [
        ((1, 0, 1, 0, 0, -4), QuadraticType.ELLIPSE),
        ((1, 0, -1, 0, 0, 0), QuadraticType.CROSS),
        ((0, 0, 0, 1, 0, 0), QuadraticType.VERTICAL_LINE),
        ((0, 0, 0, 0, 1, -2), QuadraticType.HORIZONTAL_LINE),
        ((0, 0, 0, -2, 1, -1), QuadraticType.SLOPING_LINE),
        ((0, 1, 0, 0, 0, -1), QuadraticType.HYPERBOLA),
        ((1, 0, 0, 0, -1, 0), QuadraticType.PARABOLA),
        ((1, 0, 0, 0, 0, -4), QuadraticType.TWO_VERTICAL_LINES),
        ((0, 0, 1, 0, 0, -9), QuadraticType.TWO_HORIZONTAL_LINES),
        ((1, 0, 0, 0, 0, 0), QuadraticType.VERTICAL_LINE),
        ((1, 0, 1, 0, 0, 0), QuadraticType.SINGLE_POINT),
        ((1, 0, 1, 0, 0, 1), QuadraticType.NULL_SET),
        ((0, 0, 0, 0, 0, 0), QuadraticType.ALL_POINTS),
        ((0, 0, 0, 0, 0, 3), QuadraticType.NULL_SET),
    ],
)
def test_identities(coefficients, expected) -> None:
    assert QuadraticClassifier.from_coefficients(*coefficients).identity == expected


class TestReduction:
    def test_circle_is_centred_and_unrotated(self):
        qc = QuadraticClassifier.from_coefficients(1, 0, 1, 0, 0, -4)
        assert qc.rotation == 0.0
        assert qc.translation == pytest.approx((0.0, 0.0))
        assert qc.normalized == pytest.approx([0.25, 0.25, 0.0, 0.0, -1.0])

    def test_shifted_circle_translation(self):
        # (x - 1)^2 + (y - 2)^2 = 1
        qc = QuadraticClassifier.from_coefficients(1, 0, 1, -2, -4, 4)
        assert qc.identity == QuadraticType.ELLIPSE
        assert qc.translation == pytest.approx((1.0, 2.0))

    def test_rectangular_hyperbola_rotates_by_45(self):
        qc = QuadraticClassifier.from_coefficients(0, 1, 0, 0, 0, -1)
        assert qc.rotation == pytest.approx(-45.0)
        assert qc.normalized == pytest.approx([-0.5, 0.5, 0.0, 0.0, -1.0])
        assert "u = " in qc.rotation_transform()

    def test_normalized_equation_text(self):
        qc = QuadraticClassifier.from_coefficients(1, 0, 1, -2, -4, 4)
        assert qc.normalized_equation() == "1*(u-1)^2 + 1*(v-2)^2 = 1"

    def test_transform_names_avoid_variables(self):
        qc = QuadraticClassifier.from_coefficients(1, 0, 1, 0, 0, -1, variables=("u", "v"))
        assert qc.transform_variables == ("r", "s")

    def test_points_need_two_coordinates(self):
        qc = QuadraticClassifier.from_coefficients(1, 0, 1, 0, 0, -1)
        with pytest.raises(ValueError, match="exactly two"):
            qc.uv_to_xy((1.0,))
        with pytest.raises(ValueError, match="exactly two"):
            qc.xy_to_uv((1.0, 2.0, 3.0))

    def test_uv_round_trip_under_rotation(self):
        qc = QuadraticClassifier.from_coefficients(0, 1, 0, 0, 0, -1)
        assert qc.uv_to_xy(qc.xy_to_uv((0.3, -1.7))) == pytest.approx((0.3, -1.7))


class TestFromPolynomial:
    def test_parsed_circle(self):
        qc = QuadraticClassifier(parse_equation("x^2 + y^2 = 4").polynomial)
        assert qc.identity == QuadraticType.ELLIPSE
        assert qc.reason == FailureReason.NONE

    def test_single_variable_uses_y_as_second_axis(self):
        qc = QuadraticClassifier(parse_equation("x = 3").polynomial)
        assert qc.variables == ["x", "y"]
        assert qc.identity == QuadraticType.VERTICAL_LINE

    @pytest.mark.parametrize(
        "text,reason",
        [
            ("y = x^3", FailureReason.DEGREE_GREATER_THAN_2),
            ("x + y + z = 1", FailureReason.TOO_MANY_VARIABLES),
            ("y = sin(x)", FailureReason.NON_POLYNOMIAL),
            ("r = theta", FailureReason.POLAR),
        ],
    )
    def test_declined_relations(self, text, reason):
        qc = QuadraticClassifier(parse_equation(text).polynomial)
        assert qc.reason == reason
        assert qc.identity == QuadraticType.UNKNOWN

    def test_non_finite_coefficients(self):
        qc = QuadraticClassifier.from_coefficients(float("inf"), 0, float("nan"), 0, 0, 1)
        assert qc.reason == FailureReason.NON_FINITE_COEFFICIENTS

    def test_single_non_finite_coefficient_is_replaced(self):
        qc = QuadraticClassifier.from_coefficients(float("inf"), 0, 1, 0, 0, -1)
        assert qc.reason == FailureReason.NONE
        assert qc.coefficients == (1.0, 0.0, 0.0, 0.0, 0.0, 0.0)
        assert qc.identity == QuadraticType.VERTICAL_LINE


def test_identify_rule_order() -> None:
    assert identify([0.0, 0.0, 0.0, 0.0, -1.0]) == QuadraticType.NULL_SET
    assert identify([1.0, -1.0, 0.0, 0.0, -1.0]) == QuadraticType.HYPERBOLA
    assert identify([1.0, 2.0, 0.0, 0.0, -1.0]) == QuadraticType.ELLIPSE
