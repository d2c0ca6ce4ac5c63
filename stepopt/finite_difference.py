"""
Finite Differences (:mod:`stepopt.finite_difference`)
=====================================================

.. currentmodule:: stepopt.finite_difference

Numerical approximation of first and second order partial derivatives
for use in place of hand-derived derivatives.  Each approximator is
constructed from a function and its `Dims`, and returns a new callable
``x -> ndarray`` that can be passed directly to the step functions.

.. autosummary::
    :toctree:

    approximate_derivative
    central_difference
    central_hessian
    forward_difference
    forward_hessian
    suitable_step
"""
from __future__ import annotations

import warnings
from collections.abc import Callable

import numpy as np
import numpy.typing as npt

from stepopt.exception import DimensionError
from stepopt.types import Dims, as_column, float_dtype

# Step used when a flat (non-adaptive) perturbation is requested.
FLAT_STEP = 1e-3

_Func = Callable[[npt.NDArray], npt.ArrayLike]


# ======================================================================

def suitable_step(xi: float, dtype: npt.DTypeLike = np.float64,
                  scale: float = None) -> float:
    r"""
    Find a perturbation `h` for differentiating with respect to a
    variable currently equal to `xi`.  The returned value is:

        - Small, so that the difference approximation is accurate.
        - Representable in the working precision.
        - Exactly the distance between `xi` and ``xi + h`` after
          rounding.

    The nominal step is :math:`h = |x_i| \sqrt{\epsilon}` (a scale of
    unity is used when :math:`x_i = 0`).  The *realised* step
    :math:`(x_i + h) - x_i` is then computed in the working precision and
    returned, so that the rounding error in forming :math:`x_i + h` does
    not appear in the denominator of the difference quotient.

    Parameters
    ----------
    xi : float
        Current value of the variable.
    dtype : dtype, default = float64
        Working precision.  :math:`\epsilon` is the machine epsilon of
        this type.
    scale : float, optional
        Relative step size.  Default is :math:`\sqrt{\epsilon}`, which
        suits first order differences.

    Returns
    -------
    float
        Realised step (as `dtype`).
    """
    ftype = np.dtype(dtype).type
    if scale is None:
        scale = np.sqrt(np.finfo(ftype).eps)

    xi = ftype(xi)
    h = ftype(scale) * (abs(xi) if xi != 0 else ftype(1))

    with np.errstate(over='ignore', invalid='ignore'):
        xph = ftype(xi + h)  # Rounded to working precision.
        dx = xph - xi

    if not np.isfinite(dx) or dx == 0:
        warnings.warn(f"No usable finite difference step at x = {xi}.",
                      RuntimeWarning)
    return dx


# ----------------------------------------------------------------------

def forward_difference(f: _Func, dims: Dims, *, step: float = None,
                       dtype: npt.DTypeLike = None
                       ) -> Callable[[npt.ArrayLike], npt.NDArray]:
    r"""
    Construct a first order derivative approximation of `f` using
    forward differences:

    .. math:: \frac{\partial f}{\partial x_i} \approx
              \frac{f(x + h_i e_i) - f(x)}{h_i}

    This requires N + 1 evaluations of `f` per call and has truncation
    error of order `h`.

    Parameters
    ----------
    f : Callable[[ndarray], array_like]
        Function taking an ``(N, 1)`` column and returning `M` values.
    dims : Dims
        Expected dimensions of `f`.  Only column-valued functions
        (``y_cols == 1``) are supported.
    step : float, optional
        If given, a flat perturbation used for every variable (see
        `FLAT_STEP`).  This is a lower fidelity mode.  If `None`, each
        perturbation is chosen using `suitable_step`.
    dtype : dtype, optional
        Working precision.  If `None`, the precision of `x` is used.

    Returns
    -------
    Callable[[array_like], ndarray]
        Function returning the ``(M, N)`` Jacobian at `x`.  For scalar
        valued functions (``M == 1``) the result is transposed to give
        an ``(N, 1)`` gradient column.

    Raises
    ------
    ValueError
        Invalid `dims` or `step`.
    """
    _check_first_order(dims, step)

    def derivative(x: npt.ArrayLike) -> npt.NDArray:
        x, dt = _prepare(x, dims, dtype)
        steps = _steps(x, step, dt)
        return _orient(_jacobian(f, dims, x, steps, central=False))

    return derivative


def central_difference(f: _Func, dims: Dims, *, step: float = None,
                       dtype: npt.DTypeLike = None
                       ) -> Callable[[npt.ArrayLike], npt.NDArray]:
    r"""
    Construct a first order derivative approximation of `f` using
    central differences:

    .. math:: \frac{\partial f}{\partial x_i} \approx
              \frac{f(x + h_i e_i) - f(x - h_i e_i)}{2 h_i}

    This requires 2N evaluations of `f` per call and has truncation
    error of order :math:`h^2`.  Parameters and return value are as per
    `forward_difference`.
    """
    _check_first_order(dims, step)

    def derivative(x: npt.ArrayLike) -> npt.NDArray:
        x, dt = _prepare(x, dims, dtype)
        steps = _steps(x, step, dt)
        return _orient(_jacobian(f, dims, x, steps, central=True))

    return derivative


_FIRST_ORDER = {'forward': forward_difference,
                'central': central_difference}


def approximate_derivative(f: _Func, dims: Dims, *,
                           method: str = 'forward', step: float = None,
                           dtype: npt.DTypeLike = None
                           ) -> Callable[[npt.ArrayLike], npt.NDArray]:
    """
    Construct a first order derivative approximation of `f` using the
    given `method` (``'forward'`` or ``'central'``).  Other parameters
    are passed to `forward_difference` / `central_difference`.

    Examples
    --------
    >>> import numpy as np
    >>> d = approximate_derivative(lambda x: x ** 2, Dims(1, 1, 1, 1),
    ...                            method='central')
    >>> float(d(np.array([[3.0]]))[0, 0])  # doctest: +ELLIPSIS
    6.0...
    """
    try:
        ctor = _FIRST_ORDER[method]
    except KeyError:
        raise ValueError(f"Unknown method '{method}', expected one of: "
                         f"{', '.join(_FIRST_ORDER)}.") from None
    return ctor(f, dims, step=step, dtype=dtype)


# ----------------------------------------------------------------------

def forward_hessian(f: _Func, dims: Dims, *, step: float = None,
                    dtype: npt.DTypeLike = None
                    ) -> Callable[[npt.ArrayLike], npt.NDArray]:
    r"""
    Construct a second order derivative (Hessian) approximation of a
    scalar valued `f` by forward differencing its forward difference
    gradient:

    .. math:: H_{:, i} \approx \frac{g(x + h_i e_i) - g(x)}{h_i}

    The result is symmetrised.  Adaptive steps use a relative scale of
    :math:`\epsilon^{1/3}`.  Requires :math:`(N + 1)^2` evaluations of
    `f` per call.

    Returns
    -------
    Callable[[array_like], ndarray]
        Function returning the ``(N, N)`` Hessian at `x`.

    Raises
    ------
    ValueError
        If `f` is not scalar valued, or for an invalid `step`.
    """
    _check_second_order(dims, step)

    def hessian(x: npt.ArrayLike) -> npt.NDArray:
        x, dt = _prepare(x, dims, dtype)
        n = dims.x_rows
        steps = _steps(x, step, dt, scale=np.cbrt(np.finfo(dt).eps))

        g0 = _jacobian(f, dims, x, steps, central=False)[0]
        h = np.empty((n, n), dtype=dt)
        for i in range(n):
            x_i = x.copy()
            x_i[i, 0] += steps[i]
            g_i = _jacobian(f, dims, x_i, steps, central=False)[0]
            h[:, i] = (g_i - g0) / steps[i]

        return 0.5 * (h + h.T)

    return hessian


def central_hessian(f: _Func, dims: Dims, *, step: float = None,
                    dtype: npt.DTypeLike = None
                    ) -> Callable[[npt.ArrayLike], npt.NDArray]:
    r"""
    Construct a second order derivative (Hessian) approximation of a
    scalar valued `f` using central differences.  Diagonal terms use the
    three point stencil:

    .. math:: H_{ii} \approx \frac{f(x + h_i e_i) - 2 f(x) +
              f(x - h_i e_i)}{h_i^2}

    Off-diagonal terms perturb two variables at once:

    .. math:: H_{ij} \approx \frac{f_{++} - f_{+-} - f_{-+} + f_{--}}
              {4 h_i h_j}

    Where :math:`f_{+-} = f(x + h_i e_i - h_j e_j)`, etc.  Adaptive steps
    use a relative scale of :math:`\epsilon^{1/4}`.  Parameters, return
    value and exceptions are as per `forward_hessian`.
    """
    _check_second_order(dims, step)

    def hessian(x: npt.ArrayLike) -> npt.NDArray:
        x, dt = _prepare(x, dims, dtype)
        n = dims.x_rows
        steps = _steps(x, step, dt, scale=np.finfo(dt).eps ** 0.25)

        def f_at(*moves):
            x_m = x.copy()
            for i, sign in moves:
                x_m[i, 0] += sign * steps[i]
            return _sample(f, x_m, dims, dt)[0]

        f0 = f_at()
        h = np.empty((n, n), dtype=dt)
        for i in range(n):
            h[i, i] = (f_at((i, +1)) - 2 * f0 + f_at((i, -1))) / (
                    steps[i] ** 2)
            for j in range(i + 1, n):
                h[i, j] = (f_at((i, +1), (j, +1)) - f_at((i, +1), (j, -1)) -
                           f_at((i, -1), (j, +1)) + f_at((i, -1), (j, -1))
                           ) / (4 * steps[i] * steps[j])
                h[j, i] = h[i, j]

        return h

    return hessian


# ======================================================================

def _check_first_order(dims: Dims, step: float | None):
    if dims.y_cols != 1:
        raise ValueError(f"Derivatives can only be approximated for "
                         f"column valued functions, got y_cols = "
                         f"{dims.y_cols}.")
    _check_step(step)


def _check_second_order(dims: Dims, step: float | None):
    if dims.y_rows != 1 or dims.y_cols != 1:
        raise ValueError(f"Hessians can only be approximated for scalar "
                         f"valued functions, got output "
                         f"({dims.y_rows}, {dims.y_cols}).")
    _check_step(step)


def _check_step(step: float | None):
    if step is not None and not (np.isfinite(step) and step > 0):
        raise ValueError(f"Flat step must be positive and finite, got "
                         f"{step}.")


def _prepare(x: npt.ArrayLike, dims: Dims,
             dtype: npt.DTypeLike) -> tuple[npt.NDArray, np.dtype]:
    dt = float_dtype(x, dtype)
    return as_column(x, dt, rows=dims.x_rows).copy(), dt


def _steps(x: npt.NDArray, step: float | None, dtype: np.dtype,
           scale: float = None) -> npt.NDArray:
    if step is not None:
        return np.full(x.shape[0], step, dtype=dtype)
    return np.array([suitable_step(xi, dtype, scale) for xi in x[:, 0]],
                    dtype=dtype)


def _sample(f: _Func, x: npt.NDArray, dims: Dims,
            dtype: np.dtype) -> npt.NDArray:
    # Evaluate f(x) as a flat array of `y_rows` values.
    y = np.asarray(f(x), dtype=dtype)
    if y.size != dims.y_rows:
        raise DimensionError(f"Expected {dims.y_rows} function values, "
                             f"got shape {y.shape}.")
    return y.reshape(-1)


def _jacobian(f: _Func, dims: Dims, x: npt.NDArray, steps: npt.NDArray,
              central: bool) -> npt.NDArray:
    # Partial derivatives placed column-wise, shape (M, N).
    d = np.empty((dims.y_rows, dims.x_rows), dtype=x.dtype)
    f0 = None if central else _sample(f, x, dims, x.dtype)

    for i, dx in enumerate(steps):
        x_p = x.copy()
        x_p[i, 0] += dx
        f_p = _sample(f, x_p, dims, x.dtype)
        if central:
            x_m = x.copy()
            x_m[i, 0] -= dx
            d[:, i] = (f_p - _sample(f, x_m, dims, x.dtype)) / (2 * dx)
        else:
            d[:, i] = (f_p - f0) / dx

    return d


def _orient(d: npt.NDArray) -> npt.NDArray:
    # Gradients are columns; Jacobians keep partial derivatives in
    # columns.
    if d.shape[0] == 1:
        return d.T.copy()
    return d
