"""
Single step of the method of steepest descent.
"""
from __future__ import annotations

from collections.abc import Callable

import numpy.typing as npt

from stepopt.exception import DimensionError
from stepopt.types import ResultInfo, StepResult, as_column, float_dtype


# ======================================================================

def gradient_descent(d: Callable[[npt.NDArray], npt.ArrayLike],
                     x: npt.ArrayLike, step: float, *,
                     dtype: npt.DTypeLike = None) -> StepResult:
    r"""
    Perform one step of the method of steepest descent.  A real valued
    function decreases fastest in the direction of its negative
    gradient, so:

    .. math:: x_{k+1} = x_k - \gamma \nabla f(x_k)

    The step length :math:`\gamma` is used as given.  There is no line
    search, momentum or decay; if required these belong in the calling
    loop.

    Parameters
    ----------
    d : Callable[[ndarray], array_like]
        Gradient of the objective, returning `N` partial derivatives as
        an ``(N, 1)`` column or a ``(1, N)`` row.
    x : array_like, shape (N, 1) or (N,)
        Current parameters.  This is not modified.
    step : float
        Step length :math:`\gamma`.
    dtype : dtype, optional
        Working precision.  If `None`, the precision of `x` is used.

    Returns
    -------
    StepResult
        ``(x, info)``.  This cannot fail numerically; divergence caused
        by a `step` that is too large is not detected.  The only failure
        is a gradient that does not have `N` elements, in which case
        `x` is unchanged.

    Raises
    ------
    DimensionError
        If `x` is not a vector.
    """
    dt = float_dtype(x, dtype)
    x = as_column(x, dt).copy()

    try:
        grad = as_column(d(x), dt, rows=x.shape[0])
    except DimensionError:
        return StepResult(x, ResultInfo.ERROR)

    return StepResult(x - dt.type(step) * grad, ResultInfo.SUCCESS)
