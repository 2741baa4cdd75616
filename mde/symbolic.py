"""Equation parsing and coefficient extraction on top of SymPy.

An equation ``lhs = rhs`` is reduced to the single relation
``numerator(together(lhs - rhs)) = 0`` and expanded, so ``y = 1/x`` becomes
``x*y - 1 = 0``.  :class:`SymbolicPolynomial` answers the questions the
classifiers ask of that relation (degree, per-monomial coefficients,
variables) and :class:`SymbolicExpression` evaluates a coefficient once the
remaining variables are bound.
"""

import re

import numpy as np
import sympy
from sympy import Symbol, expand, fraction, together
from sympy.parsing.sympy_parser import (
    parse_expr, standard_transformations, implicit_multiplication_application,
    convert_xor, rationalize,
)

TRANSFORMATIONS = standard_transformations + (
    implicit_multiplication_application,
    convert_xor,
    rationalize,
)

# Function and constant names that are never split into variable letters.
RESERVED = {
    'sin', 'cos', 'tan', 'sec', 'csc', 'cot', 'sinh', 'cosh', 'tanh',
    'log', 'ln', 'exp', 'sqrt', 'abs', 'pi', 'PI', 'Pi', 'E',
}
_FUNCTIONS = ('sinh', 'cosh', 'tanh', 'sin', 'cos', 'tan', 'sec', 'csc', 'cot',
              'sqrt', 'abs', 'exp', 'log', 'ln')

# Multi-letter variable names kept whole.
NAMED_VARIABLES = {'theta'}

_ALLOWED_CHARACTERS = set(
    "abcdefghijklmnopqrstuvwxyz"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "0123456789"
    " \t+-*/^=()[]{}.π√θ"
)


def _validate_characters(equation_str: str) -> None:
    """Reject equations containing characters outside the allowed set."""
    bad = {ch for ch in equation_str if ch not in _ALLOWED_CHARACTERS}
    if bad:
        raise ValueError(
            f"Invalid character(s): {' '.join(sorted(bad))}\n"
            f"Only letters, numbers, and math symbols (+ - * / ^ = ( ) .) are allowed."
        )


def _normalize(equation_str: str) -> str:
    s = equation_str.replace('√', 'sqrt')
    s = s.replace('π', '(pi)')
    s = s.replace('θ', 'theta')
    s = s.replace('[', '(').replace(']', ')')
    return s.replace('{', '(').replace('}', ')')


def _split_token(tok: str) -> list:
    """Break a letter run into names: reserved words and ``theta`` stay whole.

    A leading function name is peeled off (``sinx`` -> ``sin``, ``x``) and
    the remaining letters are single-letter variables.
    """
    if tok in RESERVED or tok in NAMED_VARIABLES:
        return [tok]
    for name in _FUNCTIONS:
        if tok.startswith(name) and len(tok) > len(name):
            return [name] + _split_token(tok[len(name):])
    if tok.startswith('theta'):
        return ['theta'] + _split_token(tok[5:])
    return list(tok)


def detect_variables(equation_str: str) -> list:
    """Return the sorted variable names found in *equation_str*.

    Letter runs that are not reserved names are implicit products of their
    letters (``xy`` -> x*y); ``theta`` is kept as one variable.

    Raises ValueError when no variable is found.
    """
    tokens = re.findall(r'[A-Za-z]+', _normalize(equation_str))
    candidates = set()
    for tok in tokens:
        for name in _split_token(tok):
            if name not in RESERVED:
                candidates.add(name)
    if not candidates:
        raise ValueError("No variable found. Include a letter like x, y, or z.")
    return sorted(candidates)


def _expand_implicit_vars(s: str) -> str:
    """Rewrite letter runs as explicit products so Python keywords such as
    ``as`` or ``in`` never reach the parser, and ``sinx`` reads ``sin x``."""
    def _repl(m):
        names = _split_token(m.group(0))
        out = []
        for i, name in enumerate(names):
            out.append(name)
            if i + 1 < len(names):
                out.append(' ' if name in _FUNCTIONS else '*')
        return ''.join(out)
    return re.sub(r'[A-Za-z]+', _repl, s)


def _parse_side(expr_str: str, var_symbols: list):
    """Parse one side of the equation into a SymPy expression."""
    s = expr_str.strip().replace('^', '**')
    local = {sym.name: sym for sym in var_symbols}
    s = _expand_implicit_vars(s)
    try:
        return parse_expr(s, local_dict=local, transformations=TRANSFORMATIONS)
    except Exception as e:
        raise ValueError(f"Could not parse expression: '{expr_str}'. Error: {e}")


# ── Expressions ─────────────────────────────────────────────────────────

class SymbolicExpression:
    """A SymPy expression that can be evaluated once its variables are bound."""

    def __init__(self, expr):
        self.expr = sympy.sympify(expr)
        self._variables = sorted(s.name for s in self.expr.free_symbols)
        self._fn = None

    @property
    def variables(self) -> list:
        return list(self._variables)

    def is_constant(self) -> bool:
        return not self._variables

    def _compiled(self):
        if self._fn is None:
            self._fn = sympy.lambdify([Symbol(v) for v in self._variables], self.expr, "numpy")
        return self._fn

    def evaluate(self, bindings=None) -> float:
        """Value with each variable taken from *bindings*; NaN when not real.

        Raises ValueError when a variable is unbound.
        """
        bindings = bindings or {}
        missing = [v for v in self._variables if v not in bindings]
        if missing:
            raise ValueError(f"No value given for variable(s): {', '.join(missing)}")
        with np.errstate(all="ignore"):
            value = self._compiled()(*(bindings[v] for v in self._variables))
        return _real(value)

    def evaluate_many(self, name: str, values) -> np.ndarray:
        """Vectorised :meth:`evaluate` over one variable; others must be absent."""
        values = np.asarray(values, dtype=float)
        if self.is_constant():
            return np.full(values.shape, _real(self.expr))
        if self._variables != [name]:
            raise ValueError(f"Expression depends on more than '{name}': {self.expr}")
        with np.errstate(all="ignore"):
            out = self._compiled()(values)
        out = np.asarray(out)
        if np.iscomplexobj(out):
            out = np.where(np.abs(out.imag) > 1e-12, np.nan, out.real)
        return np.broadcast_to(out.astype(float), values.shape).copy()

    def __str__(self) -> str:
        return str(self.expr)

    def __repr__(self) -> str:
        return f"SymbolicExpression({self.expr!s})"


def _real(value) -> float:
    try:
        c = complex(value)
    except (TypeError, ValueError):
        return float("nan")
    if abs(c.imag) > 1e-12:
        return float("nan")
    return c.real


# ── Relations ───────────────────────────────────────────────────────────

class SymbolicPolynomial:
    """The relation ``expr = 0`` viewed as a polynomial in its variables.

    ``is_polynomial()`` is false when a variable appears inside a function,
    a radical or a fractional power; coefficient extraction still works,
    term by term.
    """

    def __init__(self, expr, variables=None):
        self.expr = expand(sympy.sympify(expr))
        names = variables if variables is not None else [s.name for s in self.expr.free_symbols]
        self._variables = sorted(set(names) & {s.name for s in self.expr.free_symbols})
        self._symbols = [Symbol(v) for v in self._variables]
        self._poly = None
        if self._symbols:
            try:
                self._poly = sympy.Poly(self.expr, *self._symbols)
            except sympy.PolynomialError:
                self._poly = None

    def variables(self) -> list:
        return list(self._variables)

    def is_polynomial(self) -> bool:
        return not self._symbols or self._poly is not None

    def is_constant(self) -> bool:
        return not self._symbols

    def degree(self) -> int:
        """Total degree; ``-1`` for a relation that is not a polynomial."""
        if not self._symbols:
            return 0
        if self._poly is None:
            return -1
        return self._poly.total_degree()

    def degree_in(self, name: str) -> int:
        """Degree in one variable; ``-1`` when it is not polynomial in it."""
        poly = self._poly_in(name)
        return -1 if poly is None else poly.degree()

    def has_constant_coefficients(self) -> bool:
        if not self.is_polynomial():
            return False
        if self._poly is None:
            return True
        return all(c.is_number for c in self._poly.coeffs())

    def coefficient(self, variables, powers) -> SymbolicExpression:
        """Coefficient of the monomial ``prod(v^p)`` over *variables*."""
        term = self.expr
        for name, power in zip(variables, powers):
            term = expand(term).coeff(Symbol(name), power)
        return SymbolicExpression(term)

    def constant_term(self) -> SymbolicExpression:
        return self.coefficient(self._variables, [0] * len(self._variables))

    def _poly_in(self, name: str):
        try:
            return sympy.Poly(self.expr, Symbol(name))
        except sympy.PolynomialError:
            return None

    def coefficients_in(self, name: str):
        """Coefficients in *name*, highest power first, or None if not polynomial."""
        poly = self._poly_in(name)
        if poly is None:
            return None
        return [SymbolicExpression(c) for c in poly.all_coeffs()]

    def substitute(self, bindings: dict) -> "SymbolicPolynomial":
        return SymbolicPolynomial(self.expr.subs({Symbol(k): v for k, v in bindings.items()}))

    def __str__(self) -> str:
        return f"{self.expr} = 0"

    def __repr__(self) -> str:
        return f"SymbolicPolynomial({self.expr!s})"


class ParsedEquation:
    """Both sides of ``lhs = rhs`` plus the reduced polynomial relation."""

    def __init__(self, text: str, lhs, rhs, variables: list):
        self.text = text
        self.lhs = lhs
        self.rhs = rhs
        numerator, _ = fraction(together(lhs - rhs))
        self.polynomial = SymbolicPolynomial(numerator, variables)

    @property
    def lhs_text(self) -> str:
        return self.text.split('=')[0].strip()

    @property
    def rhs_text(self) -> str:
        parts = self.text.split('=')
        return parts[1].strip() if len(parts) > 1 else "0"


def parse_equation(equation_str: str) -> ParsedEquation:
    """Parse ``lhs = rhs`` (or a bare expression meaning ``expr = 0``).

    Raises ValueError on invalid characters, more than one ``=``, an empty
    side, no variables, or text SymPy cannot parse.
    """
    if not equation_str or not equation_str.strip():
        raise ValueError("Equation is empty.")
    _validate_characters(equation_str)
    text = _normalize(equation_str.strip())
    parts = text.split('=')
    if len(parts) > 2:
        raise ValueError("Equation must contain at most one '=' sign.")
    if len(parts) == 1:
        parts.append('0')
    lhs_str, rhs_str = parts[0].strip(), parts[1].strip()
    if not lhs_str or not rhs_str:
        raise ValueError("Both sides of the equation must have expressions.")

    var_names = detect_variables(text)
    var_symbols = [Symbol(v) for v in var_names]
    lhs = _parse_side(lhs_str, var_symbols)
    rhs = _parse_side(rhs_str, var_symbols)
    return ParsedEquation(equation_str.strip(), lhs, rhs, var_names)


# ── Affine forms ────────────────────────────────────────────────────────

_OUTER_FUNCTIONS = {
    "abs": sympy.Abs,
    "sin": sympy.sin,
    "cos": sympy.cos,
    "tan": sympy.tan,
    "sec": sympy.sec,
    "csc": sympy.csc,
    "cot": sympy.cot,
}


def _outer_atoms(expr, name: str, x):
    if name == "sqrt":
        return [a for a in expr.atoms(sympy.Pow) if a.exp == sympy.S.Half and a.has(x)]
    return [a for a in expr.atoms(_OUTER_FUNCTIONS[name]) if a.has(x)]


def _linear_parts(expr, symbol):
    """``(slope, intercept)`` when *expr* is linear in *symbol*, else None."""
    expr = expand(expr)
    if not expr.is_polynomial(symbol) or sympy.degree(expr, symbol) != 1:
        return None
    return expr.coeff(symbol, 1), expr.coeff(symbol, 0)


def affine_parameters(expr, variable: str, name: str):
    """Match ``A*f(B*x + C) + D`` for one outer function *name*.

    *name* is ``abs``, ``sqrt`` or a trig name such as ``sin``.  Returns the
    floats ``(A, B, C, D)``, or None when *expr* holds a different shape.
    SymPy's own canonical form is matched, so ``sqrt(4*x)`` reads as
    ``2*sqrt(x)``.
    """
    x = Symbol(variable)
    expr = sympy.sympify(expr)
    atoms = _outer_atoms(expr, name, x)
    if len(atoms) != 1:
        return None
    atom = atoms[0]
    inner = _linear_parts(atom.args[0], x)
    if inner is None:
        return None
    u = sympy.Dummy("u")
    outer_expr = expr.subs(atom, u)
    if outer_expr.has(x):
        return None
    outer = _linear_parts(outer_expr, u)
    if outer is None:
        return None
    try:
        a, d = (float(v) for v in outer)
        b, c = (float(v) for v in inner)
    except TypeError:
        return None
    return a, b, c, d
