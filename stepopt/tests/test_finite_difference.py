import warnings
from unittest import TestCase

import numpy as np
from numpy.testing import assert_allclose


# ======================================================================

# Test functions along with exact derivatives.

def sin_sq(x):
    return np.sin(x ** 2)


def sin_sq_deriv(x):
    return 2 * x * np.cos(x ** 2)


def poly2d(x):
    # f(x, y) = x^2 y + 3y^2 + xy
    return np.array([[x[0, 0] ** 2 * x[1, 0] + 3 * x[1, 0] ** 2 +
                      x[0, 0] * x[1, 0]]])


def poly2d_hess(x):
    return np.array([[2 * x[1, 0], 2 * x[0, 0] + 1],
                     [2 * x[0, 0] + 1, 6.0]])


def vec3(x):
    return np.array([[x[0, 0] * x[1, 0]],
                     [x[0, 0] + 3 * x[1, 0]],
                     [np.sin(x[0, 0])]])


def vec3_jac(x):
    return np.array([[x[1, 0], x[0, 0]],
                     [1.0, 3.0],
                     [np.cos(x[0, 0]), 0.0]])


# ----------------------------------------------------------------------

class TestSuitableStep(TestCase):
    def test_realised_step(self):
        from stepopt.finite_difference import suitable_step

        sqrt_eps = np.sqrt(np.finfo(float).eps)
        for xi in (1.0, -3.7, 0.1, 1e6, 123.456):
            h = suitable_step(xi)
            self.assertGreater(h, 0.0)
            self.assertEqual((xi + h) - xi, h)  # Exactly representable.
            self.assertAlmostEqual(h / (abs(xi) * sqrt_eps), 1.0,
                                   delta=0.01)

    def test_zero(self):
        from stepopt.finite_difference import suitable_step

        h = suitable_step(0.0)
        self.assertAlmostEqual(h, np.sqrt(np.finfo(float).eps), places=20)

    def test_precision(self):
        from stepopt.finite_difference import suitable_step

        h32 = suitable_step(1.0, np.float32)
        self.assertIsInstance(h32, np.float32)
        self.assertAlmostEqual(float(h32),
                               np.sqrt(np.finfo(np.float32).eps),
                               delta=1e-6)
        self.assertGreater(h32, suitable_step(1.0, np.float64))

    def test_scale(self):
        from stepopt.finite_difference import suitable_step

        h = suitable_step(2.0, scale=1e-3)
        self.assertAlmostEqual(h, 2e-3, places=12)

    def test_non_finite_warns(self):
        from stepopt.finite_difference import suitable_step

        with self.assertWarns(RuntimeWarning):
            h = suitable_step(np.inf)
        self.assertFalse(np.isfinite(h))


# ----------------------------------------------------------------------

class TestFirstDerivative(TestCase):
    def test_univariate(self):
        from stepopt.finite_difference import (central_difference,
                                               forward_difference)
        from stepopt.types import Dims

        dims = Dims(1, 1, 1, 1)
        fwd = forward_difference(sin_sq, dims)
        ctr = central_difference(sin_sq, dims)
        for xi in (-1.7, -0.5, 0.0, 0.3, 1.3, 2.0):
            x = np.array([[xi]])
            exact = sin_sq_deriv(x)
            self.assertEqual(fwd(x).shape, (1, 1))
            assert_allclose(fwd(x), exact, rtol=1e-6, atol=1e-6)
            assert_allclose(ctr(x), exact, rtol=1e-7, atol=1e-7)

    def test_central_more_accurate(self):
        from stepopt.finite_difference import (central_difference,
                                               forward_difference)
        from stepopt.types import Dims

        dims = Dims(1, 1, 1, 1)
        x = np.array([[1.3]])
        exact = sin_sq_deriv(x)[0, 0]

        def error(ctor, step):
            return abs(ctor(sin_sq, dims, step=step)(x)[0, 0] - exact)

        # Same perturbation: central difference is closer.
        for step in (1e-2, 1e-3, 1e-4):
            self.assertLess(error(central_difference, step),
                            error(forward_difference, step))

        # Refining the perturbation improves agreement.
        for ctor in (forward_difference, central_difference):
            self.assertLess(error(ctor, 1e-3), error(ctor, 1e-2))
            self.assertLess(error(ctor, 1e-4), error(ctor, 1e-3))

    def test_flat_step(self):
        from stepopt.finite_difference import FLAT_STEP, forward_difference
        from stepopt.types import Dims

        # Lower fidelity, but still near the exact value.
        d = forward_difference(sin_sq, Dims(1, 1, 1, 1), step=FLAT_STEP)
        x = np.array([[0.8]])
        assert_allclose(d(x), sin_sq_deriv(x), atol=1e-2)

    def test_jacobian_layout(self):
        from stepopt.finite_difference import approximate_derivative
        from stepopt.types import Dims

        x = np.array([[0.7], [-1.2]])
        for method, tol in (('forward', 1e-6), ('central', 1e-7)):
            d = approximate_derivative(vec3, Dims(2, 1, 3, 1),
                                       method=method)
            jac = d(x)
            self.assertEqual(jac.shape, (3, 2))  # No transpose.
            assert_allclose(jac, vec3_jac(x), rtol=tol, atol=tol)

    def test_gradient_is_column(self):
        from stepopt.finite_difference import central_difference
        from stepopt.types import Dims

        def f(x):
            return np.sin(x[0, 0]) + np.cos(x[1, 0])

        g = central_difference(f, Dims(2, 1, 1, 1))([0.4, 2.2])
        self.assertEqual(g.shape, (2, 1))
        assert_allclose(g, [[np.cos(0.4)], [-np.sin(2.2)]], rtol=1e-6)

    def test_precision(self):
        from stepopt.finite_difference import forward_difference
        from stepopt.types import Dims

        d = forward_difference(sin_sq, Dims(1, 1, 1, 1))
        g = d(np.array([[1.0]], dtype=np.float32))
        self.assertEqual(g.dtype, np.float32)
        assert_allclose(g, sin_sq_deriv(np.array([[1.0]])), rtol=1e-2)

        d = forward_difference(sin_sq, Dims(1, 1, 1, 1), dtype=np.float32)
        self.assertEqual(d(np.array([[1.0]])).dtype, np.float32)

    def test_evaluation_count(self):
        from stepopt.finite_difference import (central_difference,
                                               forward_difference)
        from stepopt.types import Dims

        calls = []

        def f(x):
            calls.append(x.copy())
            return vec3(x)

        dims, x = Dims(2, 1, 3, 1), np.array([[1.0], [2.0]])
        forward_difference(f, dims)(x)
        self.assertEqual(len(calls), 3)

        calls.clear()
        central_difference(f, dims)(x)
        self.assertEqual(len(calls), 4)

    def test_dimension_errors(self):
        from stepopt.exception import DimensionError
        from stepopt.finite_difference import forward_difference
        from stepopt.types import Dims

        # Function output disagrees with dims.
        d = forward_difference(vec3, Dims(2, 1, 2, 1))
        with self.assertRaises(DimensionError):
            d(np.array([[1.0], [2.0]]))

        # Input disagrees with dims.
        d = forward_difference(vec3, Dims(2, 1, 3, 1))
        with self.assertRaises(DimensionError):
            d(np.array([[1.0], [2.0], [3.0]]))

    def test_invalid_parameters(self):
        from stepopt.finite_difference import (approximate_derivative,
                                               forward_difference)
        from stepopt.types import Dims

        dims = Dims(1, 1, 1, 1)
        with self.assertRaises(ValueError):
            approximate_derivative(sin_sq, dims, method='backward')
        with self.assertRaises(ValueError):
            forward_difference(sin_sq, dims, step=0.0)
        with self.assertRaises(ValueError):
            forward_difference(sin_sq, dims, step=-1e-3)
        with self.assertRaises(ValueError):
            forward_difference(sin_sq, Dims(2, 1, 2, 2))

    def test_non_finite_point(self):
        from stepopt.finite_difference import forward_difference
        from stepopt.types import Dims

        d = forward_difference(sin_sq, Dims(1, 1, 1, 1))
        with warnings.catch_warnings():
            warnings.simplefilter('ignore')
            g = d(np.array([[np.inf]]))
        self.assertTrue(np.isnan(g[0, 0]))


# ----------------------------------------------------------------------

class TestHessian(TestCase):
    def test_polynomial(self):
        from stepopt.finite_difference import central_hessian, forward_hessian
        from stepopt.types import Dims

        dims = Dims(2, 1, 1, 1)
        for xy in ([1.2, 0.8], [-0.9, 1.7], [0.0, 1.0]):
            x = np.array(xy).reshape(-1, 1)
            exact = poly2d_hess(x)

            h = forward_hessian(poly2d, dims)(x)
            self.assertEqual(h.shape, (2, 2))
            assert_allclose(h, h.T)
            assert_allclose(h, exact, atol=1e-3)

            h = central_hessian(poly2d, dims)(x)
            assert_allclose(h, h.T)
            assert_allclose(h, exact, atol=1e-5)

    def test_univariate(self):
        from stepopt.finite_difference import central_hessian
        from stepopt.solve.tests.sample_functions import uni_ddf
        from stepopt.types import Dims

        x = np.array([[0.9]])
        h = central_hessian(sin_sq, Dims(1, 1, 1, 1))(x)
        self.assertEqual(h.shape, (1, 1))
        assert_allclose(h, uni_ddf(x), atol=1e-6)

    def test_newton_with_approximations(self):
        from stepopt.finite_difference import central_difference, \
            central_hessian
        from stepopt.solve import newton_raphson
        from stepopt.types import Dims

        # Minimise sin(x) + cos(y) from near (-pi/2, pi) with no
        # derivatives supplied.
        def f(x):
            return np.sin(x[0, 0]) + np.cos(x[1, 0])

        dims = Dims(2, 1, 1, 1)
        grad, hess = central_difference(f, dims), central_hessian(f, dims)
        x = np.array([[-1.3], [2.9]])
        for _ in range(6):
            x, info = newton_raphson(grad, hess, x)
            self.assertTrue(info.name == 'SUCCESS')
        assert_allclose(x, [[-np.pi / 2], [np.pi]], atol=1e-6)

    def test_vector_valued_rejected(self):
        from stepopt.finite_difference import central_hessian, forward_hessian
        from stepopt.types import Dims

        with self.assertRaises(ValueError):
            forward_hessian(vec3, Dims(2, 1, 3, 1))
        with self.assertRaises(ValueError):
            central_hessian(vec3, Dims(2, 1, 3, 1))
        with self.assertRaises(ValueError):
            central_hessian(poly2d, Dims(2, 1, 1, 1), step=np.nan)

# ----------------------------------------------------------------------
