"""
.. This module acts as the top-level API documentation.

.. module: stepopt

Lightweight single step numerical optimisation and root finding
primitives for vector valued functions of vector inputs.

.. autosummary::
    :toctree: generated/

    exception
    finite_difference
    solve
    types
"""

__version__ = "0.1.0"

from .exception import DimensionError, SolverError
from .finite_difference import (approximate_derivative, central_difference,
                                central_hessian, forward_difference,
                                forward_hessian, suitable_step)
from .solve import (IterateResult, classify_stationary, gauss_newton,
                    gradient_descent, iterate_steps, newton_raphson)
from .types import Dims, ResultInfo, StepResult, VectorFunction
