"""Dense linear-algebra kernels used to compute search directions.

Both routines are written against NumPy only. ``ldl_factor`` handles the
symmetric indefinite Hessians met by Newton's method; ``conjugate_gradient``
solves the symmetric positive definite systems of BFGS.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

# Pivots at or below this magnitude are treated as exact zeros.
_TINY = np.finfo(float).tiny


@dataclass(frozen=True)
class LDLFactorization:
    """Factorization ``P A P^T = L D L^T`` with unit lower-triangular ``L``.

    Attributes:
        lower: Unit lower-triangular factor ``L``.
        diag: Diagonal of ``D``.
        perm: Row permutation; ``A[perm][:, perm] = L D L^T``.
    """

    lower: np.ndarray
    diag: np.ndarray
    perm: np.ndarray

    def solve(self, rhs: np.ndarray) -> np.ndarray:
        """Solve ``A x = rhs``.

        Zero pivots are pseudo-inverted (the matching component is set to
        zero) so a singular but consistent system still yields a finite
        solution.

        Raises
        ------
        np.linalg.LinAlgError
            If ``rhs`` has the wrong size or the solution is not finite.
        """
        rhs = np.asarray(rhs, dtype=float)
        n = self.diag.size
        if rhs.shape != (n,):
            raise np.linalg.LinAlgError(
                f"LDLT solve failed: right-hand side has shape {rhs.shape}, expected ({n},)"
            )
        z = _forward_substitution(self.lower, rhs[self.perm])
        w = np.zeros(n)
        nonzero = np.abs(self.diag) > _TINY
        w[nonzero] = z[nonzero] / self.diag[nonzero]
        u = _backward_substitution(self.lower.T, w)
        x = np.empty(n)
        x[self.perm] = u
        if not np.all(np.isfinite(x)):
            raise np.linalg.LinAlgError("LDLT solve failed: non-finite solution")
        return x


def _forward_substitution(lower: np.ndarray, rhs: np.ndarray) -> np.ndarray:
    out = rhs.copy()
    for i in range(1, out.size):
        out[i] -= lower[i, :i] @ out[:i]
    return out


def _backward_substitution(upper: np.ndarray, rhs: np.ndarray) -> np.ndarray:
    out = rhs.copy()
    for i in range(out.size - 2, -1, -1):
        out[i] -= upper[i, i + 1 :] @ out[i + 1 :]
    return out


def ldl_factor(matrix: np.ndarray) -> LDLFactorization:
    """Symmetric-indefinite ``L D L^T`` factorization with diagonal pivoting.

    At step ``k`` the remaining diagonal entry of largest magnitude is
    swapped into place. Only the lower triangle of ``matrix`` is read.

    Raises
    ------
    np.linalg.LinAlgError
        If ``matrix`` is not square, contains non-finite entries, or a zero
        pivot leaves a non-zero column below it.
    """
    a = np.array(matrix, dtype=float)
    if a.ndim != 2 or a.shape[0] != a.shape[1]:
        raise np.linalg.LinAlgError(
            f"LDLT factorization failed: matrix of shape {a.shape} is not square"
        )
    if not np.all(np.isfinite(a)):
        raise np.linalg.LinAlgError("LDLT factorization failed: non-finite entries")
    n = a.shape[0]
    a = np.tril(a) + np.tril(a, -1).T
    lower = np.eye(n)
    diag = np.zeros(n)
    perm = np.arange(n)

    for k in range(n):
        j = k + int(np.argmax(np.abs(np.diag(a)[k:])))
        if j != k:
            a[[k, j], :] = a[[j, k], :]
            a[:, [k, j]] = a[:, [j, k]]
            lower[[k, j], :k] = lower[[j, k], :k]
            perm[[k, j]] = perm[[j, k]]
        pivot = a[k, k]
        diag[k] = pivot
        column = a[k + 1 :, k]
        if abs(pivot) > _TINY:
            lower[k + 1 :, k] = column / pivot
            a[k + 1 :, k + 1 :] -= np.outer(lower[k + 1 :, k], column)
        elif np.any(column != 0.0):
            raise np.linalg.LinAlgError(
                f"LDLT factorization failed: zero pivot at step {k}"
            )
    return LDLFactorization(lower=lower, diag=diag, perm=perm)


def conjugate_gradient(
    matrix: np.ndarray,
    rhs: np.ndarray,
    tol: float = np.finfo(float).eps,
    maxiter: int | None = None,
) -> tuple[np.ndarray, int, float]:
    """Jacobi-preconditioned conjugate gradients from a zero initial guess.

    Parameters
    ----------
    matrix:
        Symmetric positive definite matrix.
    rhs:
        Right-hand side.
    tol:
        Relative residual ``||r|| / ||rhs||`` at which to stop.
    maxiter:
        Iteration cap, ``2 n`` by default.

    Returns
    -------
    tuple
        ``(x, info, relres)``. ``info`` is 0 on convergence, the number of
        iterations when the cap was hit first, and -1 on breakdown
        (non-positive curvature ``p^T A p`` or non-finite values), which
        means ``matrix`` is not positive definite.
    """
    a = np.asarray(matrix, dtype=float)
    b = np.asarray(rhs, dtype=float)
    n = b.size
    if a.shape != (n, n):
        raise np.linalg.LinAlgError(
            f"conjugate gradient: matrix shape {a.shape} does not match rhs size {n}"
        )
    if maxiter is None:
        maxiter = 2 * n
    x = np.zeros(n)
    rhs_norm2 = float(b @ b)
    if rhs_norm2 == 0.0:
        return x, 0, 0.0
    diag = np.diag(a)
    inv_diag = 1.0 / np.where(diag != 0.0, diag, 1.0)
    threshold = max(tol * tol * rhs_norm2, _TINY)

    residual = b.copy()
    z = inv_diag * residual
    direction = z.copy()
    abs_new = float(residual @ z)
    residual_norm2 = rhs_norm2
    for _ in range(maxiter):
        a_dir = a @ direction
        curvature = float(direction @ a_dir)
        if not np.isfinite(curvature) or curvature <= 0.0:
            return x, -1, float(np.sqrt(residual_norm2 / rhs_norm2))
        step = abs_new / curvature
        x += step * direction
        residual -= step * a_dir
        residual_norm2 = float(residual @ residual)
        if residual_norm2 < threshold:
            return x, 0, float(np.sqrt(residual_norm2 / rhs_norm2))
        z = inv_diag * residual
        abs_old = abs_new
        abs_new = float(residual @ z)
        direction = z + (abs_new / abs_old) * direction
    return x, maxiter, float(np.sqrt(residual_norm2 / rhs_norm2))


__all__ = ["LDLFactorization", "conjugate_gradient", "ldl_factor"]
