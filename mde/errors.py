"""Exceptions raised by the MDE numeric core."""


class ConvergenceError(ArithmeticError):
    """An iterative decomposition did not converge within its sweep cap."""
