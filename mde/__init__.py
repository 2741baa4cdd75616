"""MDE: shape classification and feature extraction for equations and data."""

from mde.engine import classify_data, classify_equation
from mde.solver import Solution, Solver
