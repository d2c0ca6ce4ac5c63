"""
Types (:mod:`stepopt.types`)
============================

.. currentmodule:: stepopt.types

Common types shared by the step functions and derivative approximators.

All parameter vectors are handled as ``(N, 1)`` column arrays and all
Jacobians as ``(M, N)`` arrays, i.e. one row per function output and
one column per parameter.  Functions are plain callables taking an
``(N, 1)`` array and returning something array-like; results are
brought into shape by `as_column` / `as_matrix` at the point of use.

.. autosummary::
    :toctree:

    Dims
    ResultInfo
    StepResult
    VectorFunction
    as_column
    as_matrix
    float_dtype
"""
from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np
import numpy.typing as npt

from stepopt.exception import DimensionError


# ======================================================================

class ResultInfo(enum.Enum):
    """
    Two-valued status returned by every step function.  No diagnostic
    payload is attached; a step either succeeded or it did not.
    """
    SUCCESS = 0
    ERROR = 1


class StepResult(NamedTuple):
    """
    Result of a single step.  On success `x` is the updated parameter
    column, otherwise it is an unmodified copy of the starting point.
    """
    x: npt.NDArray[np.floating]
    info: ResultInfo

    @property
    def success(self) -> bool:
        return self.info is ResultInfo.SUCCESS


# ----------------------------------------------------------------------

@dataclass(frozen=True)
class Dims:
    """
    Input / output dimensions of a function, used by the derivative
    approximators to size their working arrays.

    Parameters
    ----------
    x_rows, x_cols : int
        Shape of the input.  Inputs are columns so ``x_cols == 1``.
    y_rows, y_cols : int
        Shape of the output.
    """
    x_rows: int
    x_cols: int
    y_rows: int
    y_cols: int

    def __post_init__(self):
        if min(self.x_rows, self.x_cols, self.y_rows, self.y_cols) < 1:
            raise ValueError(f"All dimensions must be positive, got "
                             f"{self}.")
        if self.x_cols != 1:
            raise ValueError(f"Inputs must be column vectors, got "
                             f"x_cols = {self.x_cols}.")


# ----------------------------------------------------------------------

class VectorFunction:
    """
    Wraps a callable together with its declared input and output shape.
    Each call checks that `x` has ``x_rows`` elements and that the
    result can be read as a ``(y_rows, y_cols)`` array, raising
    `DimensionError` otherwise.  Step functions treat a
    `DimensionError` as a failed step.

    Parameters
    ----------
    func : Callable[[ndarray], array_like]
        Function to wrap.
    x_rows : int
        Number of parameters `N`.
    y_rows : int
        Number of outputs `M`.
    y_cols : int, default = 1
        Use ``y_cols = N`` for Jacobians / Hessians.

    Examples
    --------
    >>> import numpy as np
    >>> f = VectorFunction(lambda x: [x[0, 0] ** 2, x[1, 0]], 2, 2)
    >>> f(np.array([[3.0], [1.0]]))
    array([[9.],
           [1.]])
    """

    def __init__(self, func: Callable[[npt.NDArray], npt.ArrayLike],
                 x_rows: int, y_rows: int, y_cols: int = 1):
        self.func = func
        self.dims = Dims(x_rows, 1, y_rows, y_cols)

    @classmethod
    def from_dims(cls, func: Callable[[npt.NDArray], npt.ArrayLike],
                  dims: Dims) -> VectorFunction:
        return cls(func, dims.x_rows, dims.y_rows, dims.y_cols)

    def __call__(self, x: npt.ArrayLike) -> npt.NDArray:
        x = np.asarray(x)
        if x.size != self.dims.x_rows or x.ndim > 2 or (
                x.ndim == 2 and x.shape[1] != 1):
            raise DimensionError(f"Expected input of {self.dims.x_rows} "
                                 f"rows, got shape {x.shape}.")

        y = np.asarray(self.func(x.reshape(-1, 1)))
        expected = (self.dims.y_rows, self.dims.y_cols)
        if y.shape != expected:
            if (y.size != self.dims.y_rows * self.dims.y_cols or
                    y.ndim > 2 or (y.ndim == 2 and self.dims.y_cols != 1)):
                raise DimensionError(f"Expected output shape {expected}, "
                                     f"got {y.shape}.")
            y = y.reshape(expected)

        return y

    def __repr__(self):
        return (f"VectorFunction({getattr(self.func, '__name__', '?')}, "
                f"x_rows={self.dims.x_rows}, y_rows={self.dims.y_rows}, "
                f"y_cols={self.dims.y_cols})")


# ======================================================================

def float_dtype(x: npt.ArrayLike, dtype: npt.DTypeLike = None) -> np.dtype:
    """
    Returns the floating point precision to use for a calculation.  If
    `dtype` is given it is used directly, otherwise the precision of `x`
    is kept where it is already floating point and anything else is
    promoted to ``float64``.

    Raises
    ------
    ValueError
        If `dtype` is not a real floating point type.
    """
    if dtype is not None:
        dtype = np.dtype(dtype)
        if not np.issubdtype(dtype, np.floating):
            raise ValueError(f"dtype must be a floating point type, got "
                             f"{dtype}.")
        return dtype

    x_dtype = np.asarray(x).dtype
    if np.issubdtype(x_dtype, np.floating):
        return x_dtype
    return np.dtype(np.float64)


def as_column(v: npt.ArrayLike, dtype: npt.DTypeLike = None,
              rows: int = None) -> npt.NDArray:
    """
    Return `v` as a ``(rows, 1)`` column.  Scalars, 1-D arrays and
    single row / single column 2-D arrays are accepted.

    Raises
    ------
    DimensionError
        If `v` is not vector-like, or does not have `rows` elements
        (when given).
    """
    a = np.asarray(v, dtype=dtype)
    if a.ndim > 2 or (a.ndim == 2 and 1 not in a.shape):
        raise DimensionError(f"Expected a vector, got shape {a.shape}.")

    a = a.reshape(-1, 1)
    if rows is not None and a.shape[0] != rows:
        raise DimensionError(f"Expected {rows} rows, got {a.shape[0]}.")
    return a


def as_matrix(a: npt.ArrayLike, n_cols: int,
              dtype: npt.DTypeLike = None) -> npt.NDArray:
    """
    Return `a` as a 2-D array with `n_cols` columns.  Scalars and 1-D
    arrays are reshaped row-wise to ``(-1, n_cols)``; 2-D arrays must
    already have `n_cols` columns.

    Raises
    ------
    DimensionError
        If `a` cannot be read as a matrix with `n_cols` columns.
    """
    a = np.asarray(a, dtype=dtype)
    if a.ndim < 2:
        if a.size == 0 or a.size % n_cols:
            raise DimensionError(f"Cannot arrange {a.size} values into "
                                 f"{n_cols} columns.")
        return a.reshape(-1, n_cols)

    if a.ndim > 2 or a.shape[1] != n_cols:
        raise DimensionError(f"Expected {n_cols} columns, got shape "
                             f"{a.shape}.")
    return a
