"""Stage evaluation for the three tableau storage kinds.

Each function advances ``y`` by one step of size ``h`` from working
coefficients (see :meth:`ButcherTableau.working_coefficients` and its
siblings).  Stages are evaluated in ascending order and ``f`` is called
exactly once per stage.  Coefficients are Python floats, so they adopt the
dtype of the arrays they multiply.

Coefficients that are exactly zero are skipped; they are structural zeros
of the published methods, and skipping them leaves the result unchanged.
"""

from __future__ import annotations

from collections.abc import Sequence

from jax import Array

from rkfixed.integrators._types import Dynamics
from rkfixed.tableau._types import (
    ButcherCoefficients,
    ConvexCoefficients,
    LowStorageCoefficients,
)


def _weighted_sum(weights: Sequence[float], values) -> Array | None:
    """``sum_j weights[j] * values[j]`` in index order, or ``None`` if all weights are zero."""
    total = None
    for w, v in zip(weights, values):
        if w == 0.0:
            continue
        term = w * v
        total = term if total is None else total + term
    return total


def full_storage_update(
    coeffs: ButcherCoefficients,
    f: Dynamics,
    t: Array,
    y: Array,
    h: Array,
) -> Array:
    """One step of a full-storage (Butcher) method.

    Computes ``k[i] = f(t + c[i] h, y + h * sum_j a[i][j] k[j])`` for every
    stage and returns ``y + h * sum_i b[i] k[i]``.
    """
    k = []
    for a_i, c_i in zip(coeffs.a, coeffs.c):
        increment = _weighted_sum(a_i, k)
        y_i = y if increment is None else y + h * increment
        k.append(f(t + c_i * h, y_i))
    return y + h * _weighted_sum(coeffs.b, k)


def low_storage_update(
    coeffs: LowStorageCoefficients,
    f: Dynamics,
    t: Array,
    y: Array,
    h: Array,
) -> Array:
    """One step of a Williamson 2N low-storage method.

    Only two state-sized registers are live across stages:

    .. code-block:: text

        k     = f(t + c[i] h, state)
        delta = alpha[i] * delta + h * k
        state = state + beta[i] * delta
    """
    state = y
    delta = None
    for alpha_i, beta_i, c_i in zip(coeffs.alpha, coeffs.beta, coeffs.c):
        k = f(t + c_i * h, state)
        delta = h * k if delta is None else alpha_i * delta + h * k
        state = state + beta_i * delta
    return state


def convex_update(
    coeffs: ConvexCoefficients,
    f: Dynamics,
    t: Array,
    y: Array,
    h: Array,
) -> Array:
    """One step of a method in Shu-Osher (convex combination) form.

    Row ``i`` builds register ``u[i + 1]`` from the registers ``u[0..i]``
    and derivatives ``F[k] = f(t + c[k] h, u[k])``.  A register or
    derivative is dropped once no later row reads it.
    """
    s = len(coeffs.beta)
    derivative_last_use = [
        max(i for i in range(k, s) if coeffs.beta[i][k] != 0.0) for k in range(s)
    ]
    registers = {0: y}
    derivatives = {}
    for i in range(s):
        derivatives[i] = f(t + coeffs.c[i] * h, registers[i])

        alpha_i = coeffs.alpha[i]
        beta_i = coeffs.beta[i]
        combination = _weighted_sum(alpha_i, (registers.get(k) for k in range(i + 1)))
        increment = _weighted_sum(beta_i, (derivatives.get(k) for k in range(i + 1)))
        registers[i + 1] = combination if increment is None else combination + h * increment

        for k in [k for k in registers if coeffs.last_use[k] <= i]:
            del registers[k]
        for k in [k for k in derivatives if derivative_last_use[k] <= i]:
            del derivatives[k]
    return registers[s]
