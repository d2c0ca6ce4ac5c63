"""
Simple driver repeating a single step function until convergence.
"""
from __future__ import annotations

import operator
from collections.abc import Callable
from typing import NamedTuple

import numpy as np
import numpy.typing as npt

from stepopt.exception import SolverError
from stepopt.types import ResultInfo, StepResult, as_column, float_dtype


# ======================================================================

class IterateResult(NamedTuple):
    x: npt.NDArray[np.floating]
    its: int
    norm: float


# ----------------------------------------------------------------------

def iterate_steps(step: Callable[[npt.NDArray], StepResult],
                  x0: npt.ArrayLike, *,
                  norm_func: Callable[[npt.NDArray], npt.ArrayLike],
                  tol: float = 1e-6, maxits: int = 50,
                  verbose: bool = False) -> IterateResult:
    """
    Repeatedly apply `step` starting from `x0` until the norm of
    ``norm_func(x)`` is no greater than `tol`.

    Examples
    --------
    Find the minimum of :math:`x^2 + y^2 + 2x + 8y` using Newton-Raphson
    on its gradient and Hessian:

    >>> from functools import partial
    >>> import numpy as np
    >>> from stepopt.solve import newton_raphson
    >>> def df(x): return 2 * x + np.array([[2.0], [8.0]])
    >>> def ddf(x): return 2 * np.eye(2)
    >>> res = iterate_steps(partial(newton_raphson, df, ddf), [-3, -2],
    ...                     norm_func=df, tol=1e-3)
    >>> res.its
    1
    >>> res.x.ravel().tolist()
    [-1.0, -4.0]

    Parameters
    ----------
    step : Callable[[ndarray], StepResult]
        Step function taking the current ``(N, 1)`` parameters, e.g.
        ``partial(gauss_newton, f, d)``.
    x0 : array_like, shape (N, 1) or (N,)
        Starting parameters.
    norm_func : Callable[[ndarray], array_like]
        Convergence measure, typically the residual or gradient.
    tol : float, default = 1e-6
        Stop when :math:`\\|norm\\_func(x)\\| \\leq tol`.  This is checked
        before each step, so a starting point that already satisfies
        `tol` is returned without stepping.
    maxits : int, default = 50
        Maximum number of steps allowed.
    verbose : bool, default = False
        If True, print status updates during run.

    Returns
    -------
    IterateResult
        ``(x, its, norm)``: Converged parameters, number of steps taken
        and final norm.

    Raises
    ------
    ValueError
        Invalid parameters.
    SolverError
        Failure to converge raises a `SolverError` exception including
        the following attributes:

        - `x`: Most recent parameters.
        - `its`: Number of steps taken.
        - `norm`: Most recent norm.
        - `flag` and `details`:
            - 1: Step reported failure.
            - 2: Reached maxits.
    """
    def verbose_print(info):
        if verbose:
            print(info)

    if not tol > 0:
        raise ValueError(f"tol must be positive, got {tol}.")
    maxits = operator.index(maxits)
    if maxits < 1:
        raise ValueError("maxits must be greater than 0.")

    x = as_column(x0, float_dtype(x0)).copy()
    n = x.shape[0]
    norm = float(np.linalg.norm(norm_func(x)))
    its = 0

    verbose_print(f"Single Step Iteration - {n} Parameters:")

    while not norm <= tol:  # Also continues on NaN.
        if its >= maxits:
            raise SolverError(f"Reached maximum iteration limit: {maxits}",
                              flag=2, details="Reached maxits.", x=x,
                              its=its, norm=norm)

        x_new, info = step(x)
        if info is not ResultInfo.SUCCESS:
            raise SolverError(f"Step failed after {its} iterations.",
                              flag=1, details="Step reported failure.",
                              x=x, its=its, norm=norm)

        x = as_column(x_new)
        norm = float(np.linalg.norm(norm_func(x)))
        its += 1

        if n < 10:
            x_str = f", x* = " + f', '.join(f"{x_i:.6G}" for x_i in x[:, 0])
        else:
            x_str = ''
        verbose_print(f"... Iteration {its}: ||F(x)|| = {norm:.5G}{x_str}")

    verbose_print(f"... Converged.")
    return IterateResult(x, its, norm)
