"""
Forward recording: primitive rules, pullback closures, tape bookkeeping.
"""

import warnings

import numpy as np
import pytest

from aad_pullback.aad import (
    Tape, Var, ValueKind, record_op, ops, backpropagate, grad,
    UnsupportedOperation, ShapeMismatch, TapeConsistencyError,
)
from aad_pullback.aad.core.values import as_value, kind_of


def sample_reals(n=25, seed=0):
    rng = np.random.default_rng(seed)
    return rng.normal(scale=3.0, size=(n, 3))


# ----------------------------- exact pullbacks ------------------------------ #
def test_mul_pullback_is_exact():
    for a, b, t in sample_reals():
        tape = Tape()
        out, pb = record_op(tape, "mul", a, b)
        assert out.val == a * b
        assert pb(t) == (b * t, a * t)


def test_div_pullback_is_exact():
    for a, b, t in sample_reals(seed=1):
        tape = Tape()
        out, pb = tape.record("div", a, b)
        assert out.val == a / b
        assert pb(t) == (t / b, -t * a / (b * b))


def test_add_sub_pullbacks():
    tape = Tape()
    _, pb_add = tape.record("add", 1.5, -2.0)
    _, pb_sub = tape.record("sub", 1.5, -2.0)
    assert pb_add(0.25) == (0.25, 0.25)
    assert pb_sub(0.25) == (0.25, -0.25)


@pytest.mark.parametrize("op, deriv", [
    ("exp",  np.exp),
    ("log",  lambda x: 1.0 / x),
    ("sqrt", lambda x: 0.5 / np.sqrt(x)),
    ("sin",  np.cos),
    ("cos",  lambda x: -np.sin(x)),
    ("tan",  lambda x: 1.0 / np.cos(x) ** 2),
    ("tanh", lambda x: 1.0 - np.tanh(x) ** 2),
    ("erf",  lambda x: 2.0 / np.sqrt(np.pi) * np.exp(-x * x)),
    ("norm_cdf", lambda x: np.exp(-0.5 * x * x) / np.sqrt(2.0 * np.pi)),
])
def test_unary_real_pullbacks(op, deriv):
    x, t = 0.7, 1.3
    tape = Tape()
    _, pb = tape.record(op, x)
    (ct,) = pb(t)
    assert ct == pytest.approx(deriv(x) * t, rel=1e-12)


def test_pow_pullback():
    tape = Tape()
    out, pb = tape.record("pow", 2.0, 3.0)
    assert out.val == 8.0
    dx, dy = pb(1.0)
    assert dx == pytest.approx(12.0)
    assert dy == pytest.approx(8.0 * np.log(2.0))

    # no real derivative in the exponent for a negative real base
    _, pb = tape.record("pow", -2.0, 2.0)
    dx, dy = pb(1.0)
    assert dx == pytest.approx(-4.0)
    assert np.isnan(dy)


def test_pow_complex_exponent_of_negative_base():
    tape = Tape()
    y = tape.variable(0.5j)
    out = (-2.0) ** y
    assert out.kind is ValueKind.COMPLEX
    dy = backpropagate(tape, 1.0, wrt=y)
    assert dy == pytest.approx(out.val * np.log(-2.0 + 0j), rel=1e-12)
    assert dy != 0


def test_pow_zero_exponent_at_zero():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert grad(lambda x: x ** 0.0, 0.0) == 0.0
        tape = Tape()
        _, pb = tape.record("pow", [0.0, 2.0, -1.0], [0.0, 3.0, 2.0])
        dx, dy = pb(np.ones(3))
    np.testing.assert_array_equal(dx, [0.0, 12.0, -2.0])
    assert dy[0] == 0.0
    assert dy[1] == pytest.approx(8.0 * np.log(2.0))
    assert np.isnan(dy[2])


def test_relu_and_abs():
    tape = Tape()
    _, pb = tape.record("relu", [-1.0, 0.5, 2.0])
    np.testing.assert_array_equal(pb(np.array([3.0, 3.0, 3.0]))[0], [0.0, 3.0, 3.0])
    _, pb = tape.record("abs", -2.5)
    assert pb(2.0) == (-2.0,)


# --------------------------------- complex ---------------------------------- #
def test_complex_exp_pullback_is_holomorphic():
    z = 0.3 + 0.4j
    tape = Tape()
    out, pb = tape.record("exp", z)
    assert out.kind is ValueKind.COMPLEX
    assert pb(1.0)[0] == np.exp(z)
    assert pb(2.0 - 1.0j)[0] == pytest.approx(np.exp(z) * (2.0 - 1.0j))


def test_real_complex_promotion():
    tape = Tape()
    out, pb = tape.record("mul", 2.0, 1.0 + 1.0j)
    assert out.kind is ValueKind.COMPLEX
    assert out.val == 2.0 + 2.0j
    assert pb(1.0) == (1.0 + 1.0j, 2.0)


# --------------------------------- vectors ---------------------------------- #
def test_sum_pullback_repeats_seed():
    v = [0.1, -0.4, 2.0, 3.5, 1.0]
    tape = Tape()
    out, pb = tape.record("sum", v)
    assert out.val == pytest.approx(sum(v))
    (ct,) = pb(0.75)
    assert ct.shape == (5,)
    np.testing.assert_array_equal(ct, np.full(5, 0.75))


def test_elementwise_mul_pullback():
    a = np.array([1.0, 2.0, 3.0])
    b = np.array([-1.0, 0.5, 4.0])
    t = np.array([0.2, 0.3, 0.4])
    tape = Tape()
    out, pb = tape.record("mul", a, b)
    np.testing.assert_array_equal(out.val, a * b)
    da, db = pb(t)
    np.testing.assert_array_equal(da, t * b)
    np.testing.assert_array_equal(db, t * a)


def test_dot_getitem_stack_shapes():
    tape = Tape()
    a = tape.variable([1.0, 2.0, 3.0])
    b = tape.variable([4.0, 5.0, 6.0])

    d, pb = tape.record("dot", a, b)
    assert d.val == 32.0
    da, db = pb(2.0)
    np.testing.assert_array_equal(da, [8.0, 10.0, 12.0])
    np.testing.assert_array_equal(db, [2.0, 4.0, 6.0])

    c, pb = tape.record("getitem", a, index=1)
    assert c.val == 2.0
    np.testing.assert_array_equal(pb(5.0)[0], [0.0, 5.0, 0.0])

    s, pb = tape.record("stack", 1.0, c, 3.0)
    np.testing.assert_array_equal(s.val, [1.0, 2.0, 3.0])
    assert pb(np.array([7.0, 8.0, 9.0])) == (7.0, 8.0, 9.0)


def test_var_iteration_records_getitem():
    tape = Tape()
    v = tape.variable([1.0, 2.0, 3.0])
    x, y, z = v
    assert (x.val, y.val, z.val) == (1.0, 2.0, 3.0)
    assert [n.op_tag for n in tape.nodes] == ["getitem"] * 3
    assert len(v) == 3


# ------------------------------- bookkeeping -------------------------------- #
def test_tape_is_append_only_in_execution_order():
    tape = Tape()
    x = tape.variable(0.3, name="x")
    y = ops.sin(x)
    z = y * x
    w = ops.exp(z) + 1.0
    assert [n.op_tag for n in tape.nodes] == ["sin", "mul", "exp", "add"]
    assert tape.nodes[1].parents == (y.index, x.index)
    assert tape.nodes[-1].parents == (tape.nodes[2].out, None)
    assert tape.nodes[-1].out == w.index
    assert len(tape) == 4


def test_operators_record_on_owning_tape():
    tape = Tape()
    x = tape.variable(2.0)
    y = 3 * x - x / 4.0 + np.float64(1.0) * x ** 2 - (-x)
    assert isinstance(y, Var)
    assert y.val == pytest.approx(3 * 2.0 - 0.5 + 4.0 + 2.0)
    assert (2.0 ** x).val == pytest.approx(4.0)


def test_pullbacks_capture_their_own_operands():
    tape = Tape()
    r = tape.variable(0.1)
    points, pullbacks = [], []
    for _ in range(4):
        points.append(r.val)
        r, p = tape.record("sin", r)
        pullbacks.append(p)
    for x, p in zip(points, pullbacks):
        assert p(1.0) == (np.cos(x),)


def test_vector_operands_are_snapshots():
    v = np.array([1.0, 2.0])
    w = [3.0, 4.0]
    tape = Tape()
    x = tape.variable(v)
    out, pb = tape.record("mul", x, w)
    v[0] = 100.0
    w[0] = 100.0
    assert x.val[0] == 1.0
    with pytest.raises(ValueError):
        x.val[0] = 5.0
    dx, dw = pb(np.ones(2))
    np.testing.assert_array_equal(dx, [3.0, 4.0])
    np.testing.assert_array_equal(dw, [1.0, 2.0])


def test_var_is_immutable():
    tape = Tape()
    x = tape.variable(1.0)
    with pytest.raises(AttributeError):
        x.val = 2.0


def test_reset_clears_everything():
    tape = Tape()
    x = tape.variable(1.0)
    ops.exp(x)
    tape.reset()
    assert len(tape) == 0
    assert tape.values == [] and tape.inputs == []


# ---------------------------------- errors ---------------------------------- #
def test_unknown_operation_raises_and_records_nothing():
    tape = Tape()
    with pytest.raises(UnsupportedOperation) as excinfo:
        record_op(tape, "frobnicate", 1.0, 2.0)
    assert excinfo.value.op_tag == "frobnicate"
    assert len(tape) == 0


@pytest.mark.parametrize("op, operands", [
    ("add", ([1.0, 2.0], 1.0)),
    ("mul", ([1.0, 2.0], [1.0, 2.0, 3.0])),
    ("dot", ([1.0, 2.0], [1.0])),
    ("relu", (1.0j,)),
    ("sum", (1.0,)),
    ("stack", (1.0, 2.0j)),
    ("getitem", (1.0,)),
])
def test_shape_mismatch(op, operands):
    tape = Tape()
    with pytest.raises(ShapeMismatch):
        tape.record(op, *operands, **({"index": 0} if op == "getitem" else {}))
    assert len(tape) == 0


def test_wrong_arity_is_type_error():
    tape = Tape()
    with pytest.raises(TypeError):
        tape.record("mul", 1.0)
    with pytest.raises(TypeError):
        tape.record("sin", 1.0, 2.0)


def test_foreign_tape_operand():
    tape_a, tape_b = Tape(), Tape()
    x = tape_a.variable(1.0)
    y = tape_b.variable(2.0)
    with pytest.raises(TapeConsistencyError):
        x * y
    assert len(tape_a) == 0 and len(tape_b) == 0


def test_ops_need_a_var():
    with pytest.raises(TypeError):
        ops.sin(0.5)


def test_value_kinds():
    assert kind_of(1) is ValueKind.REAL
    assert kind_of(np.float32(1.0)) is ValueKind.REAL
    assert kind_of(2j) is ValueKind.COMPLEX
    assert kind_of((1, 2)) is ValueKind.VECTOR
    for bad in (True, "x", [[1.0]], [1j, 2j], None):
        with pytest.raises(TypeError):
            kind_of(bad)
    assert isinstance(as_value(3), np.float64)
    assert isinstance(as_value(3j), np.complex128)


# ---------------------------- user primitives ------------------------------- #
def _softplus_pb(x, out):
    sigmoid = 1.0 / (1.0 + np.exp(-x))
    def pullback(t):
        return (sigmoid * t,)
    return pullback


def test_user_defined_primitive():
    ops.defrule("softplus", (ops.REAL, ops.VECTOR), forward=lambda x: np.log1p(np.exp(x)),
                pullback=_softplus_pb, replace=True)
    assert "softplus" in ops.supported_ops()

    x0 = 0.3
    tape = Tape()
    x = tape.variable(x0)
    y = ops.apply("softplus", x * 2.0)
    assert y.val == pytest.approx(np.log1p(np.exp(0.6)))
    dx = backpropagate(tape, 1.0, wrt=x)
    assert dx == pytest.approx(2.0 / (1.0 + np.exp(-0.6)), rel=1e-12)

    # no rule registered for complex operands
    with pytest.raises(ShapeMismatch):
        tape.record("softplus", 1.0j)


def test_existing_rules_are_not_overwritten_silently():
    with pytest.raises(ValueError):
        ops.defrule("sin", (ops.REAL,), forward=np.sin, pullback=_softplus_pb)
    tape = Tape()
    _, pb = tape.record("sin", 0.2)
    assert pb(1.0)[0] == np.cos(0.2)
