"""
Exceptions (:mod:`stepopt.exception`)
=====================================

.. currentmodule:: stepopt.exception

.. autosummary::
    :toctree:

    DimensionError
    SolverError
"""
import numpy as np


# ======================================================================

class DimensionError(ValueError):
    """
    Raised when an input vector or a function result does not have the
    shape required by the function contract, e.g. a Jacobian with the
    wrong number of columns or a residual that is not a column.

    Step functions catch this internally and report
    ``ResultInfo.ERROR``; it only reaches the caller when a
    `VectorFunction` or derivative approximator is called directly.
    """
    pass


# ----------------------------------------------------------------------

class SolverError(RuntimeError):
    """
    Raised by `iterate_steps` when repeated steps do not reach the
    requested norm.  The `flag` attribute gives the cause:

    - 1: A step returned ``ResultInfo.ERROR`` (e.g. singular Jacobian).
    - 2: The iteration limit `maxits` was reached.

    The state at the point of failure is attached as `x` (an ``(N, 1)``
    copy of the last parameters), `its` (steps taken) and `norm`.
    """

    def __init__(self, *args, flag: int = None, details: str = None,
                 **state):
        """
        Parameters
        ----------
        args :
            Failure notice, passed to `RuntimeError`.
        flag : int, default = None
            Cause of the failure, as listed above.
        details : str, default = None
            Short description matching `flag`.
        state :
            Iteration state (`x`, `its`, `norm`) stored as attributes.
        """
        super().__init__(*args)
        self.flag, self.details = flag, details
        for k, v in state.items():
            setattr(self, k, v)

    def __str__(self):
        """Failure notice followed by each attribute on its own line."""
        lines = [super().__str__()]
        for k, v in vars(self).items():
            if v is None:
                continue
            if isinstance(v, np.ndarray):
                v = np.array2string(v.ravel(), precision=6)
            lines.append(f"{k} -> {v}")
        return '\n'.join(lines)
