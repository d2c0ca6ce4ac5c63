#!usr/bin/env python3

# Fit a circle to noisy two-dimensional points using Gauss-Newton.  The
# residual of each point p is its geometric distance from the circle
# with parameters (cx, cy, r):
#
#   r_i = r - sqrt((p_x - cx)^2 + (p_y - cy)^2)
#
# With partial derivatives:
#
#   dr_i/dcx = (p_x - cx) / sqrt(...)
#   dr_i/dcy = (p_y - cy) / sqrt(...)
#   dr_i/dr  = 1

import numpy as np

from stepopt import ResultInfo, gauss_newton


def points_on_circle(centre, radius, sigma, n=20, seed=0):
    """Random points on a circle, with added white noise."""
    rng = np.random.default_rng(seed)
    angle = rng.uniform(0.0, 2 * np.pi, size=n)
    p = np.column_stack((np.cos(angle), np.sin(angle))) * radius
    return p + np.asarray(centre) + rng.normal(0.0, sigma, size=(n, 2))


p = points_on_circle([2.0, 1.5], 8.0, 0.001)


def f(x):
    dist = np.hypot(p[:, 0] - x[0, 0], p[:, 1] - x[1, 0])
    return (x[2, 0] - dist).reshape(-1, 1)


def df(x):
    dist = np.hypot(p[:, 0] - x[0, 0], p[:, 1] - x[1, 0])
    return np.column_stack(((p[:, 0] - x[0, 0]) / dist,
                            (p[:, 1] - x[1, 0]) / dist,
                            np.ones_like(dist)))


x = np.array([[2.0], [2.5], [10.0]])
info = ResultInfo.SUCCESS
while info is ResultInfo.SUCCESS and np.linalg.norm(f(x)) > 0.01:
    x, info = gauss_newton(f, df, x)
    print(f"Parameters: {x[:, 0]} Error: {np.linalg.norm(f(x)):.6f}")
