#!usr/bin/env python3

# Find the rotation angle that best aligns two corresponding point sets
# using Gauss-Newton.  For model point m, scene point s and rotation
# R(phi) the residual is:
#
#   r_i = ||m_i - R(phi) s_i||
#
# Writing k = m - R(phi) s, the derivative is:
#
#   dr_i/dphi = (k . dk/dphi) / ||k||,  dk/dphi = -R'(phi) s

from functools import partial

import numpy as np

from stepopt import gauss_newton, iterate_steps


def rotation(phi):
    return np.array([[np.cos(phi), -np.sin(phi)],
                     [np.sin(phi), np.cos(phi)]])


def rotation_deriv(phi):
    return np.array([[-np.sin(phi), -np.cos(phi)],
                     [np.cos(phi), -np.sin(phi)]])


# Model points are random; the scene is a rotated copy plus noise.
rng = np.random.default_rng(0)
model = rng.uniform(-100.0, 100.0, size=(20, 2))
scene = (model + rng.normal(0.0, 0.001, size=model.shape)) @ rotation(0.3).T


def f(x):
    k = model - scene @ rotation(x[0, 0]).T
    return np.linalg.norm(k, axis=1).reshape(-1, 1)


def df(x):
    k = model - scene @ rotation(x[0, 0]).T
    dk = -scene @ rotation_deriv(x[0, 0]).T
    return (np.sum(k * dk, axis=1) / np.linalg.norm(k, axis=1)).reshape(-1, 1)


res = iterate_steps(partial(gauss_newton, f, df), x0=[0.0], norm_func=f,
                    tol=0.01, maxits=50, verbose=True)
print(f"\nRotation = {res.x[0, 0]:.4f} rad.")
assert abs(res.x[0, 0] + 0.3) < 1e-3
