"""Numeric tolerances and sampling constants shared by the MDE engine.

Every root finder, fitter and classifier takes a :class:`Tolerances`
instance (``DEFAULT_TOLERANCES`` when omitted) so the thresholds that drive
branch decisions can be inspected and overridden in one place.
"""

from dataclasses import dataclass


# ── Sampling ────────────────────────────────────────────────────────────

NUM_POINTS = 600
DEFAULT_BOUND_VALUE = 10.0
MAX_SOLVE_ITERATIONS = 10


@dataclass(frozen=True)
class Tolerances:
    # Polynomial algebra
    poly_relative_eps: float = 1e-8

    # Closed-form formulas
    formula_eps: float = 1e-10
    double_root_tol: float = 1e-8

    # Bairstow / Newton
    newton_eps: float = 1e-15
    newton_residual: float = 1e-16
    linear_accept: float = 1e-12
    quad_accept: float = 1e-4
    max_iterations: int = 500
    loosen_every: int = 200
    singular_slope: float = 1e-10
    singular_replacement: float = 1e-8
    quad_multiplicity_tol: float = 1e-2
    linear_multiplicity_tol: float = 1e-3
    vanishing_coefficient: float = 1e-15

    # SVD
    svd_max_sweeps: int = 30

    # Model building
    max_data: float = 200.0
    rows_per_term: int = 10
    prune_ratio: float = 1e-8
    polynomial_worst_fit: float = -12.0
    polar_worst_fit: float = -10.0
    parabola_eccentricity_tol: float = 1e-6

    # Quadratic classification
    quadratic_zero: float = 1e-10
    line_angle_tol: float = 1e-8

    # Function test over sampled points
    function_test_tol: float = 1e-3


DEFAULT_TOLERANCES = Tolerances()
