"""
============================
Steps (:mod:`stepopt.solve`)
============================

.. currentmodule:: stepopt.solve

Single step root finding and optimisation methods.  Each step function
takes the current parameters and returns a `StepResult` holding the new
parameters and a `ResultInfo` status; the caller decides when to stop.

Functions
---------

.. autosummary::
    :toctree:

    classify_stationary
    gauss_newton
    gradient_descent
    iterate_steps
    newton_raphson
"""

from .gauss_newton import gauss_newton
from .gradient_descent import gradient_descent
from .iterate import IterateResult, iterate_steps
from .newton_raphson import classify_stationary, newton_raphson
