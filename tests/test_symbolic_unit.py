"""Tests for equation parsing and coefficient extraction."""

import math

import pytest
import sympy

from mde.symbolic import (
    SymbolicExpression, SymbolicPolynomial, affine_parameters, detect_variables, parse_equation,
)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("xy + theta = 1", ["theta", "x", "y"]),
        ("sinx + 2 = 0", ["x"]),
        ("as + in = 1", ["a", "i", "n", "s"]),
        ("r = 2cos(3θ)", ["r", "theta"]),
        ("r = 2sec(theta)", ["r", "theta"]),
        ("y = cotx + cscx", ["x", "y"]),
    ],
)
def test_detect_variables(text: str, expected: list) -> None:
    assert detect_variables(text) == expected


def test_detect_variables_needs_a_letter() -> None:
    with pytest.raises(ValueError, match="No variable found"):
        detect_variables("2 + 3 = 5")


@pytest.mark.parametrize(
    "text,message",
    [
        ("x @ y = 1", "Invalid character"),
        ("x = 1 = 2", "at most one"),
        ("= 3", "Both sides"),
        ("   ", "empty"),
        ("x + * = 2", "Could not parse"),
    ],
)
def test_parse_errors(text: str, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        parse_equation(text)


class TestParseEquation:
    def test_reciprocal_becomes_polynomial(self):
        parsed = parse_equation("y = 1/x")
        assert str(parsed.polynomial) == "x*y - 1 = 0"
        assert parsed.polynomial.degree() == 2
        assert parsed.lhs_text == "y"
        assert parsed.rhs_text == "1/x"

    def test_bare_expression_means_equals_zero(self):
        parsed = parse_equation("x^2 + y^2 - 4")
        assert parsed.rhs_text == "0"
        assert parsed.polynomial.degree() == 2

    def test_implicit_multiplication(self):
        assert parse_equation("2x + 3 = 7").polynomial.expr == sympy.sympify("2*x - 4")
        assert parse_equation("as + in = 1").polynomial.variables() == ["a", "i", "n", "s"]

    def test_reciprocal_trig_names_stay_functions(self):
        parsed = parse_equation("r = 2sec(theta)")
        theta = sympy.Symbol("theta")
        assert parsed.rhs == 2 * sympy.sec(theta)
        assert parsed.polynomial.variables() == ["r", "theta"]


class TestSymbolicPolynomial:
    def test_coefficients_in_one_variable(self):
        p = parse_equation("y^2 + xy + 1 = 0").polynomial
        assert [str(c) for c in p.coefficients_in("y")] == ["1", "x", "1"]
        assert p.degree_in("y") == 2

    def test_monomial_coefficient(self):
        p = SymbolicPolynomial(sympy.sympify("3*x*y + x - 2"))
        assert p.coefficient(["x", "y"], [1, 1]).evaluate() == pytest.approx(3.0)
        assert p.constant_term().evaluate() == pytest.approx(-2.0)

    def test_transcendental_relation_is_not_polynomial(self):
        p = parse_equation("y = sin(x)").polynomial
        assert not p.is_polynomial()
        assert not p.has_constant_coefficients()
        assert p.degree() == -1
        assert p.degree_in("y") == 1

    def test_substitute(self):
        p = parse_equation("y = x^2 - 4").polynomial.substitute({"y": 0})
        assert p.variables() == ["x"]


class TestSymbolicExpression:
    def test_evaluate_with_bindings(self):
        expr = SymbolicExpression(sympy.sympify("x**2 + 1"))
        assert expr.evaluate({"x": 3.0}) == pytest.approx(10.0)

    def test_unbound_variable_raises(self):
        with pytest.raises(ValueError, match="No value given"):
            SymbolicExpression(sympy.sympify("x + y")).evaluate({"x": 1.0})

    def test_non_real_value_is_nan(self):
        assert math.isnan(SymbolicExpression(sympy.sympify("sqrt(x)")).evaluate({"x": -1.0}))

    def test_evaluate_many(self):
        values = SymbolicExpression(sympy.sympify("2*x")).evaluate_many("x", [0.0, 1.0, 2.0])
        assert values.tolist() == [0.0, 2.0, 4.0]
        constant = SymbolicExpression(sympy.Integer(5)).evaluate_many("x", [0.0, 1.0])
        assert constant.tolist() == [5.0, 5.0]


@pytest.mark.parametrize(
    "text,name,expected",
    [
        ("2*sin(3*x + 1) - 4", "sin", (2.0, 3.0, 1.0, -4.0)),
        ("-cos(x/2)", "cos", (-1.0, 0.5, 0.0, 0.0)),
        ("sqrt(x - 1) + 2", "sqrt", (1.0, 1.0, -1.0, 2.0)),
        ("sqrt(4*x) + 1", "sqrt", (2.0, 1.0, 0.0, 1.0)),
        ("2*sec(3*x) + 1", "sec", (2.0, 3.0, 0.0, 1.0)),
    ],
)
def test_affine_parameters(text: str, name: str, expected: tuple) -> None:
    assert affine_parameters(sympy.sympify(text), "x", name) == pytest.approx(expected)


@pytest.mark.parametrize("text", ["sin(x)**2", "sin(x) + sin(2*x)", "sin(x**2)"])
def test_affine_parameters_rejects_other_shapes(text: str) -> None:
    assert affine_parameters(sympy.sympify(text), "x", "sin") is None
