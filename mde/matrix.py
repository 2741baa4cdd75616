"""Dense matrices and a Golub-Reinsch singular value decomposition.

The decomposition is a pure function: :func:`svd` takes a matrix and
returns an :class:`SVDResult` that owns its arrays.  :class:`Matrix` caches
the result of its first decomposition.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from mde.config import DEFAULT_TOLERANCES, Tolerances
from mde.errors import ConvergenceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SVDResult:
    """``A == left @ diag(values) @ right.T`` with ``values`` descending."""

    left: np.ndarray
    values: np.ndarray
    right: np.ndarray


def _sign(a: float, b: float) -> float:
    return abs(a) if b >= 0.0 else -abs(a)


def _rotate(m: np.ndarray, j: int, i: int, c: float, s: float) -> None:
    y = m[:, j].copy()
    z = m[:, i].copy()
    m[:, j] = y * c + z * s
    m[:, i] = z * c - y * s


def _golub_reinsch(a: np.ndarray, max_sweeps: int) -> tuple:
    """Decompose a tall (rows >= cols) array; returns unsorted ``(u, w, v)``."""
    nr, nc = a.shape
    u = np.array(a, dtype=float)
    w = np.zeros(nc)
    v = np.zeros((nc, nc))
    rv1 = np.zeros(nc)
    g = scale = anorm = 0.0
    l = 0

    # Householder reduction to bidiagonal form
    for i in range(nc):
        l = i + 1
        rv1[i] = scale * g
        g = s = scale = 0.0
        if i < nr:
            scale = float(np.abs(u[i:, i]).sum())
            if scale != 0.0:
                u[i:, i] /= scale
                s = float(u[i:, i] @ u[i:, i])
                f = u[i, i]
                g = -_sign(math.sqrt(s), f)
                h = f * g - s
                u[i, i] = f - g
                if l < nc:
                    factors = (u[i:, i] @ u[i:, l:]) / h
                    u[i:, l:] += np.outer(u[i:, i], factors)
                u[i:, i] *= scale
        w[i] = scale * g
        g = s = scale = 0.0
        if i < nr and i != nc - 1:
            scale = float(np.abs(u[i, l:]).sum())
            if scale != 0.0:
                u[i, l:] /= scale
                s = float(u[i, l:] @ u[i, l:])
                f = u[i, l]
                g = -_sign(math.sqrt(s), f)
                h = f * g - s
                u[i, l] = f - g
                rv1[l:] = u[i, l:] / h
                if l < nr:
                    sums = u[l:, l:] @ u[i, l:]
                    u[l:, l:] += np.outer(sums, rv1[l:])
                u[i, l:] *= scale
        anorm = max(anorm, abs(w[i]) + abs(rv1[i]))

    # Accumulate right-hand transformations
    for i in range(nc - 1, -1, -1):
        if i < nc - 1:
            if g != 0.0:
                v[l:, i] = (u[i, l:] / u[i, l]) / g
                sums = u[i, l:] @ v[l:, l:]
                v[l:, l:] += np.outer(v[l:, i], sums)
            v[i, l:] = 0.0
            v[l:, i] = 0.0
        v[i, i] = 1.0
        g = rv1[i]
        l = i

    # Accumulate left-hand transformations
    for i in range(nc - 1, -1, -1):
        l = i + 1
        g = w[i]
        u[i, l:] = 0.0
        if g != 0.0:
            g = 1.0 / g
            if l < nc:
                sums = u[l:, i] @ u[l:, l:]
                factors = (sums / u[i, i]) * g
                u[i:, l:] += np.outer(u[i:, i], factors)
            u[i:, i] *= g
        else:
            u[i:, i] = 0.0
        u[i, i] += 1.0

    # Diagonalisation of the bidiagonal form
    for k in range(nc - 1, -1, -1):
        for its in range(1, max_sweeps + 1):
            flag = True
            nm = k - 1
            for l in range(k, -1, -1):
                nm = l - 1
                if abs(rv1[l]) + anorm == anorm:
                    flag = False
                    break
                if abs(w[nm]) + anorm == anorm:
                    break
            if flag:
                c, s = 0.0, 1.0
                for i in range(l, k + 1):
                    f = s * rv1[i]
                    rv1[i] = c * rv1[i]
                    if abs(f) + anorm == anorm:
                        break
                    g = w[i]
                    h = math.hypot(f, g)
                    w[i] = h
                    h = 1.0 / h
                    c = g * h
                    s = -f * h
                    _rotate(u, nm, i, c, s)
            z = w[k]
            if l == k:
                if z < 0.0:
                    w[k] = -z
                    v[:, k] = -v[:, k]
                break
            if its == max_sweeps:
                logger.error("SVD did not converge after %d sweeps", max_sweeps)
                raise ConvergenceError(f"SVD did not converge after {max_sweeps} iterations.")
            x = w[l]
            nm = k - 1
            y = w[nm]
            g = rv1[nm]
            h = rv1[k]
            f = ((y - z) * (y + z) + (g - h) * (g + h)) / (2.0 * h * y)
            g = math.hypot(f, 1.0)
            f = ((x - z) * (x + z) + h * ((y / (f + _sign(g, f))) - h)) / x
            c = s = 1.0
            for j in range(l, nm + 1):
                i = j + 1
                g = rv1[i]
                y = w[i]
                h = s * g
                g = c * g
                z = math.hypot(f, h)
                rv1[j] = z
                c = f / z
                s = h / z
                f = x * c + g * s
                g = g * c - x * s
                h = y * s
                y *= c
                _rotate(v, j, i, c, s)
                z = math.hypot(f, h)
                w[j] = z
                if z != 0.0:
                    z = 1.0 / z
                    c = f * z
                    s = h * z
                f = c * g + s * y
                x = c * y - s * g
                _rotate(u, j, i, c, s)
            rv1[l] = 0.0
            rv1[k] = f
            w[k] = x

    return u, w, v


def svd(a, tol: Tolerances = DEFAULT_TOLERANCES) -> SVDResult:
    """Singular value decomposition of a matrix or 2-D array.

    Wide inputs are decomposed through their transpose.  Singular values are
    sorted descending, carrying their vector columns along.

    Raises :class:`~mde.errors.ConvergenceError` when a QR sweep does not
    converge.
    """
    values = a.array if isinstance(a, Matrix) else np.asarray(a, dtype=float)
    rows, cols = values.shape
    if rows == 0 or cols == 0:
        return SVDResult(np.zeros((rows, 0)), np.zeros(0), np.zeros((cols, 0)))

    transposed = rows < cols
    u, w, v = _golub_reinsch(values.T if transposed else values, tol.svd_max_sweeps)
    order = np.argsort(-np.abs(w), kind="stable")
    u, w, v = u[:, order], w[order], v[:, order]
    if transposed:
        u, v = v, u
    return SVDResult(u, w, v)


class Matrix:
    """Immutable dense matrix of floats."""

    def __init__(self, values=None, rows: int = 0, cols: int = 0):
        if values is None:
            data = np.zeros((rows, cols))
        else:
            data = np.array(values, dtype=float)
            if data.ndim == 1 and data.size == 0:
                data = data.reshape(0, 0)
            if data.ndim != 2:
                raise ValueError("Matrix values must be two-dimensional.")
        data.setflags(write=False)
        self._data = data
        self._svd: dict = {}

    @classmethod
    def diagonal(cls, values) -> "Matrix":
        return cls(np.diag(np.asarray(values, dtype=float)))

    # ── Shape ───────────────────────────────────────────────────────────

    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def cols(self) -> int:
        return self._data.shape[1]

    @property
    def array(self) -> np.ndarray:
        """Read-only view of the values."""
        return self._data

    def __getitem__(self, index):
        return self._data[index]

    def __repr__(self) -> str:
        return f"Matrix({self._data.tolist()!r})"

    # ── Algebra ─────────────────────────────────────────────────────────

    def submatrix(self, rows: int, cols: int) -> "Matrix":
        """The leading ``rows`` x ``cols`` block."""
        if rows < 0 or cols < 0 or rows > self.rows or cols > self.cols:
            raise ValueError("Submatrix size out of range.")
        return Matrix(self._data[:rows, :cols])

    def transpose(self) -> "Matrix":
        return Matrix(self._data.T)

    def product(self, other) -> "Matrix":
        """Matrix product, or scaling when *other* is a number."""
        if isinstance(other, (int, float)):
            return Matrix(other * self._data)
        if self.cols != other.rows:
            raise ValueError(
                f"Cannot multiply a {self.rows}x{self.cols} matrix by a "
                f"{other.rows}x{other.cols} matrix."
            )
        return Matrix(self._data @ other._data)

    def sum(self, other: "Matrix") -> "Matrix":
        if self._data.shape != other._data.shape:
            raise ValueError("Matrix sizes must match.")
        return Matrix(self._data + other._data)

    def difference(self, other: "Matrix") -> "Matrix":
        if self._data.shape != other._data.shape:
            raise ValueError("Matrix sizes must match.")
        return Matrix(self._data - other._data)

    def l2norm(self) -> float:
        """Root-mean-square of the entries."""
        if self._data.size == 0:
            return 0.0
        return math.sqrt(float((self._data ** 2).sum()) / self._data.size)

    # ── Decomposition ───────────────────────────────────────────────────

    def svd(self, tol: Tolerances = DEFAULT_TOLERANCES) -> SVDResult:
        """Decomposition of this matrix, cached per tolerance set."""
        result = self._svd.get(tol)
        if result is None:
            result = self._svd[tol] = svd(self, tol)
        return result

    def left_singular_vectors(self) -> "Matrix":
        return Matrix(self.svd().left)

    def singular_values(self) -> np.ndarray:
        return self.svd().values.copy()

    def right_singular_vectors(self) -> "Matrix":
        return Matrix(self.svd().right)

    def pseudo_inverse(self, fraction_of_largest: float) -> Optional["Matrix"]:
        """Damped pseudo-inverse, each singular value ``s`` inverted as ``s/(s+t)^2``.

        ``t`` is *fraction_of_largest* times the largest singular value.
        Returns None when there are no singular values or the largest is zero.
        """
        result = self.svd()
        if result.values.size == 0 or result.values[0] == 0.0:
            return None
        t = result.values[0] * fraction_of_largest
        inverted = result.values / (result.values + t) ** 2
        return Matrix((result.right * inverted) @ result.left.T)
