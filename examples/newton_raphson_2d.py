#!usr/bin/env python3

# Minimise f(x, y) = x^2 + y^2 + 2x + 8y using Newton-Raphson on the
# gradient and Hessian:
#
#   df/dx = 2x + 2,  df/dy = 2y + 8
#   H = [[2, 0], [0, 2]]
#
# The Hessian is constant so the minimum at (-1, -4) is found in a
# single step.  Compare with gradient_descent_2d.py.

import numpy as np

from stepopt import ResultInfo, newton_raphson


def df(x):
    return 2 * x + np.array([[2.0], [8.0]])


def ddf(_):
    return 2 * np.eye(2)


x = np.array([[-3.0], [-2.0]])
info = ResultInfo.SUCCESS
while info is ResultInfo.SUCCESS and np.linalg.norm(df(x)) > 1e-3:
    x, info = newton_raphson(df, ddf, x)
    print(f"Parameters: {x[:, 0]} Error: {np.linalg.norm(df(x)):.6f}")
