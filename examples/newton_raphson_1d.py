#!usr/bin/env python3

# Find a local extremum of f(x) = 3x^3 - 10x^2 - 56x + 5 using
# Newton-Raphson on the first and second derivatives:
#
#   f'(x)  = 9x^2 - 20x - 56
#   f''(x) = 18x - 20
#
# Stationary points have f'(x) = 0, so the derivative is passed as the
# function and the second derivative as its Jacobian.  Depending on the
# starting point this finds a minimum or a maximum; try x0 = 0.

from functools import partial

import numpy as np

from stepopt.solve import classify_stationary, iterate_steps, newton_raphson


def df(x):
    return 9 * x ** 2 - 20 * x - 56


def ddf(x):
    return 18 * x - 20


res = iterate_steps(partial(newton_raphson, df, ddf), x0=[2.0],
                    norm_func=df, tol=1e-3, verbose=True)

print(f"\nFound a {classify_stationary(ddf, res.x)} at x = "
      f"{res.x[0, 0]:.4f} after {res.its} steps.")
assert np.isclose(res.x[0, 0], 3.841, atol=1e-3)
