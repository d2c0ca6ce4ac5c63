#!usr/bin/env python3

# Minimise f(x, y) = x^2 + y^2 + 2x + 8y using steepest descent with a
# constant step size.  The global minimum is at (-1, -4).  Here the
# gradient is approximated by central differences rather than given
# exactly.  Compare the number of iterations with newton_raphson_2d.py.

from functools import partial

import numpy as np

from stepopt import Dims, central_difference, gradient_descent, iterate_steps


def f(x):
    return x[0, 0] ** 2 + x[1, 0] ** 2 + 2 * x[0, 0] + 8 * x[1, 0]


df = central_difference(f, Dims(2, 1, 1, 1))
res = iterate_steps(partial(gradient_descent, df, step=0.01),
                    x0=[-3.0, -2.0], norm_func=df, tol=1e-3, maxits=1000)

print(f"Minimum at {res.x[:, 0]} after {res.its} steps.")
assert np.allclose(res.x[:, 0], [-1.0, -4.0], atol=1e-3)
