"""
Single step of the Gauss-Newton method for nonlinear least squares.
"""
from __future__ import annotations

from collections.abc import Callable

import numpy as np
import numpy.typing as npt
from scipy.linalg import LinAlgError, cho_factor, cho_solve

from stepopt.exception import DimensionError
from stepopt.types import (ResultInfo, StepResult, as_column, as_matrix,
                           float_dtype)


# ======================================================================

def gauss_newton(f: Callable[[npt.NDArray], npt.ArrayLike],
                 d: Callable[[npt.NDArray], npt.ArrayLike],
                 x: npt.ArrayLike, *, rank_tol: float = None,
                 dtype: npt.DTypeLike = None) -> StepResult:
    r"""
    Perform one step of the Gauss-Newton method, minimising the sum of
    squared residuals :math:`\|r(x)\|^2`.

    The Hessian of the sum of squares is approximated by :math:`J^T J`,
    so no second derivatives are required.  The step `s` is found by
    solving the normal equations:

    .. math:: (J^T J) s = -J^T r(x)

    The approximation is exact when residuals are small or the model is
    close to linear near the optimum.  :math:`J^T J` is symmetric
    positive semi-definite and is solved by Cholesky decomposition.

    Parameters
    ----------
    f : Callable[[ndarray], array_like]
        Residual function, taking an ``(N, 1)`` column and returning
        ``M >= N`` residuals.
    d : Callable[[ndarray], array_like]
        Jacobian of `f`, returning an ``(M, N)`` array.
    x : array_like, shape (N, 1) or (N,)
        Current parameters.  This is not modified.
    rank_tol : float, optional
        Singular values of the Jacobian below this are treated as zero
        when checking that its columns are independent.  Default is the
        ``matrix_rank`` default (largest singular value x max(M, N) x
        machine epsilon).
    dtype : dtype, optional
        Working precision.  If `None`, the precision of `x` is used.

    Returns
    -------
    StepResult
        ``(x, info)``.  `info` is ``ResultInfo.ERROR`` and `x` is
        unchanged if any of the following occur:

        - There are fewer residuals than parameters (``M < N``), or the
          shapes of `f` and `d` do not agree.
        - :math:`J^T J` is not positive definite, i.e. the columns of
          `J` are linearly dependent at `x`, or `J` is not finite.

    Raises
    ------
    DimensionError
        If `x` is not a vector.
    """
    dt = float_dtype(x, dtype)
    x = as_column(x, dt).copy()
    n = x.shape[0]
    failed = StepResult(x, ResultInfo.ERROR)

    try:
        jac = as_matrix(d(x), n, dt)
        m = jac.shape[0]
        if m < n:
            return failed  # Underdetermined.

        r = as_column(f(x), dt, rows=m)

    except DimensionError:
        return failed

    # Rounding can leave a small positive pivot when columns of J are
    # dependent, so Cholesky alone does not detect this.
    if (not np.all(np.isfinite(jac)) or
            np.linalg.matrix_rank(jac, tol=rank_tol) < n):
        return failed

    jt = jac.T
    try:
        c_and_lower = cho_factor(jt @ jac, check_finite=False)
    except LinAlgError:
        return failed

    s = cho_solve(c_and_lower, -(jt @ r), check_finite=False)
    return StepResult(x + s, ResultInfo.SUCCESS)
