"""
Single step of the Newton-Raphson method for systems of equations,
along with a helper to classify the stationary points it finds when
used for optimisation.
"""
from __future__ import annotations

from collections.abc import Callable

import numpy as np
import numpy.typing as npt
from scipy.linalg import lu_factor, lu_solve

from stepopt.exception import DimensionError
from stepopt.types import (ResultInfo, StepResult, as_column, as_matrix,
                           float_dtype)


# ======================================================================

def newton_raphson(f: Callable[[npt.NDArray], npt.ArrayLike],
                   d: Callable[[npt.NDArray], npt.ArrayLike],
                   x: npt.ArrayLike, *, rank_tol: float = None,
                   dtype: npt.DTypeLike = None) -> StepResult:
    r"""
    Perform one step of the Newton-Raphson root finding method.

    For a univariate function the next estimate is the intersection of
    the linearisation of `f` at :math:`x_k` with the `x`-axis:

    .. math:: x_{k+1} = x_k - f(x_k) / f'(x_k)

    For vector valued / multivariate functions this is rearranged to
    avoid forming an inverse.  The step :math:`s = x_{k+1} - x_k` is
    found by solving the linear system:

    .. math:: J(x_k) s = -f(x_k)

    Where `J` is the ``(M, N)`` Jacobian of `f`.  Only the square case
    ``M == N`` is supported.

    Parameters
    ----------
    f : Callable[[ndarray], array_like]
        Function taking an ``(N, 1)`` column and returning `N` values.
    d : Callable[[ndarray], array_like]
        Jacobian of `f`, returning an ``(N, N)`` array.
    x : array_like, shape (N, 1) or (N,)
        Current parameters.  This is not modified.
    rank_tol : float, optional
        Singular values of the Jacobian below this are treated as zero
        when checking its rank.  Default is the ``matrix_rank`` default
        (largest singular value x N x machine epsilon).
    dtype : dtype, optional
        Working precision.  If `None`, the precision of `x` is used.

    Returns
    -------
    StepResult
        ``(x, info)``.  `info` is ``ResultInfo.ERROR`` and `x` is
        unchanged if any of the following occur:

        - The Jacobian is not ``(N, N)`` or `f` does not return `N`
          values.
        - The Jacobian is rank deficient (singular) or not finite at
          `x`.

    Raises
    ------
    DimensionError
        If `x` is not a vector.

    Notes
    -----
    Stationary points of an objective have a gradient of zero, so
    passing the gradient as `f` and the Hessian as `d` finds a
    stationary point.  This may be a minimum, maximum or saddle point;
    `classify_stationary` can be used to check which.
    """
    dt = float_dtype(x, dtype)
    x = as_column(x, dt).copy()
    n = x.shape[0]
    failed = StepResult(x, ResultInfo.ERROR)

    try:
        jac = as_matrix(d(x), n, dt)
        if jac.shape[0] != n:
            return failed  # More (or fewer) equations than variables.

        if (not np.all(np.isfinite(jac)) or
                np.linalg.matrix_rank(jac, tol=rank_tol) < n):
            return failed

        fx = as_column(f(x), dt, rows=n)

    except DimensionError:
        return failed

    s = lu_solve(lu_factor(jac, check_finite=False), -fx,
                 check_finite=False)
    return StepResult(x + s, ResultInfo.SUCCESS)


# ----------------------------------------------------------------------

def classify_stationary(hess: Callable[[npt.NDArray], npt.ArrayLike],
                        x: npt.ArrayLike, *, tol: float = None) -> str:
    """
    Classify a stationary point `x` using the eigenvalues of the Hessian
    evaluated there.

    Parameters
    ----------
    hess : Callable[[ndarray], array_like]
        Hessian of the objective, returning an ``(N, N)`` array.
    x : array_like, shape (N, 1) or (N,)
        Stationary point.
    tol : float, optional
        Eigenvalues with magnitude less than or equal to this are
        treated as zero.  Default is the largest eigenvalue magnitude x
        N x machine epsilon.

    Returns
    -------
    str
        One of ``'minimum'``, ``'maximum'``, ``'saddle'`` or
        ``'degenerate'`` (semi-definite, so the second derivative test
        is inconclusive).

    Raises
    ------
    DimensionError
        If the Hessian is not ``(N, N)``.
    """
    dt = float_dtype(x)
    x = as_column(x, dt)
    n = x.shape[0]

    h = as_matrix(hess(x), n, dt)
    if h.shape[0] != n:
        raise DimensionError(f"Hessian must be ({n}, {n}), got "
                             f"{h.shape}.")

    eig = np.linalg.eigvalsh(0.5 * (h + h.T))
    if tol is None:
        tol = np.max(np.abs(eig)) * n * np.finfo(dt).eps

    if np.any(eig > tol) and np.any(eig < -tol):
        return 'saddle'
    if np.any(np.abs(eig) <= tol):
        return 'degenerate'
    return 'minimum' if eig[0] > 0 else 'maximum'
