"""
Pullback / grad / jacobian helpers on fresh tapes.
"""

import numpy as np
import pytest

from aad_pullback.aad import (
    Tape, ops, pullback, grad, grads, grads_list, jacobian, value, TapeConsistencyError,
)


def test_sin_pullback_is_reusable():
    s, sin_J = pullback(ops.sin, 0.1)
    assert s == np.sin(0.1)
    assert sin_J(1) == pytest.approx((np.cos(0.1),), rel=1e-14)
    assert sin_J(2) == pytest.approx((2 * np.cos(0.1),), rel=1e-14)
    # the second call did not disturb the first result
    assert sin_J(1)[0] == sin_J(1)[0]


def test_two_argument_pullback():
    def f(x, y):
        return ops.cos(x * ops.exp(y))

    x0, y0 = 0.3, -0.2
    r, pb = pullback(f, x0, y0)
    u = x0 * np.exp(y0)
    assert r == pytest.approx(np.cos(u))
    dx, dy = pb(1.0)
    assert dx == pytest.approx(-np.sin(u) * np.exp(y0), rel=1e-12)
    assert dy == pytest.approx(-np.sin(u) * u, rel=1e-12)


def test_gradient_of_vector_input():
    # f(x, y) = exp(x cos y), input packed as a vector
    def f(v):
        x, y = v
        return ops.exp(x * ops.cos(y))

    v0 = np.array([0.5, 1.2])
    g = grad(f, v0)
    e = np.exp(v0[0] * np.cos(v0[1]))
    np.testing.assert_allclose(g, [e * np.cos(v0[1]), -e * v0[0] * np.sin(v0[1])],
                               rtol=1e-12)


def test_jacobian_rows_are_pullbacks_of_unit_vectors():
    def f(v):
        x, y, z = v
        return ops.stack(ops.exp(x * y * z), ops.cos(x * y + z))

    v0 = np.array([0.4, -0.7, 1.1])
    x, y, z = v0
    p = np.exp(x * y * z)
    q = -np.sin(x * y + z)
    expected = np.array([
        [p * y * z, p * x * z, p * x * y],
        [q * y,     q * x,     q        ],
    ])
    J = jacobian(f, v0)
    np.testing.assert_allclose(J, expected, rtol=1e-12)

    _, pb = pullback(f, v0)
    np.testing.assert_allclose(pb(np.array([1.0, 2.0]))[0],
                               expected.T @ np.array([1.0, 2.0]), rtol=1e-12)


def test_jacobian_of_scalar_function():
    J = jacobian(ops.sin, 0.25)
    assert J.shape == (1,)
    assert J[0] == pytest.approx(np.cos(0.25))


def test_grads_dict_and_list():
    g = grads(lambda v: v["a"] * v["a"] + 3 * v["b"], {"a": 2.0, "b": 4.0})
    assert list(g) == ["a", "b"]
    assert g["a"] == pytest.approx(4.0)
    assert g["b"] == pytest.approx(3.0)

    assert grads_list(lambda xs: xs[0] * xs[0] + 3 * xs[1], [2.0, 4.0]) == \
        pytest.approx([4.0, 3.0])


def test_grad_rejects_vector_output():
    with pytest.raises(TapeConsistencyError):
        grad(ops.sin, np.array([0.1, 0.2]))


def test_constant_and_identity_outputs():
    assert grad(lambda x: 3.0, 1.5) == 0.0
    assert grads_list(lambda xs: 2.0, [1.0, 2.0]) == [0.0, 0.0]
    assert grad(lambda x: x, 1.5) == 1.0


def test_complex_grad():
    z0 = 0.2 + 0.9j
    assert grad(lambda z: ops.sin(z) * z, z0) == \
        pytest.approx(np.cos(z0) * z0 + np.sin(z0), rel=1e-12)


def test_value_unwraps_vars():
    tape = Tape()
    x = tape.variable(1.5)
    assert value(x * 2.0) == 3.0
    assert value(3.0) == 3.0
