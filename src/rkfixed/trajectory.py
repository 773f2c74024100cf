"""Trajectory buffers and the fixed-step accumulation loop.

The step count is fixed before the first step, so the ``(N + 1)``-sample
buffers are allocated once and filled in place inside a
``jax.lax.while_loop``.  Sample ``i`` is recorded at time ``t0 + i * h``;
times are not accumulated step by step, so they carry no drift.

When ``h`` does not divide ``tf - t0`` the last step crosses ``tf``: the
final sample lies less than one step beyond the horizon.
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from typing import NamedTuple

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from rkfixed.config import get_dtype
from rkfixed.integrators._types import Dynamics
from rkfixed.integrators.stepper import StepFunction

_STEP_COUNT_RTOL = 1e-12
"""Relative distance from an integer below which ``(tf - t0) / h`` is snapped to it."""


class Trajectory(NamedTuple):
    """Time history of one integration.

    A :class:`~typing.NamedTuple`, hence a JAX pytree.  Batched results
    (see :func:`~rkfixed.integrate.integrate_many`) carry a leading batch
    axis on both fields.

    Attributes:
        times: Sample times, shape ``(N + 1,)``.
        states: Samples, shape ``(N + 1, *y0.shape)``; ``states[0]`` is the
            initial condition.
    """

    times: Array
    states: Array

    @property
    def num_samples(self) -> int:
        return self.times.shape[-1]

    @property
    def num_steps(self) -> int:
        return self.times.shape[-1] - 1

    @property
    def final_time(self) -> Array:
        return self.times[..., -1]

    @property
    def final_state(self) -> Array:
        return jnp.take(self.states, self.num_steps, axis=self.times.ndim - 1)

    def samples(self) -> Iterator[tuple[Array, Array]]:
        """Iterate over ``(t, y)`` pairs in increasing time order.

        For batched results each pair holds sample ``i`` of every member:
        ``t`` has shape ``(B,)`` and ``y`` has shape ``(B, *state_shape)``.
        """
        axis = self.times.ndim - 1
        for i in range(self.num_samples):
            yield self.times[..., i], jnp.take(self.states, i, axis=axis)


def step_count(t0: float, tf: float, h: float) -> int:
    """Number of fixed steps needed to reach *tf* from *t0*.

    ``ceil((tf - t0) / h)``, except that a quotient within ``1e-12``
    (relative) of a whole number is taken as that number, so ``[0, 1]``
    with ``h = 0.1`` is exactly 10 steps rather than 11.

    Args:
        t0: Start time.
        tf: End time, ``tf > t0``.
        h: Step size, ``h > 0``.

    Returns:
        int: Step count, at least 1.
    """
    quotient = (tf - t0) / h
    nearest = round(quotient)
    if nearest >= 1 and abs(quotient - nearest) <= _STEP_COUNT_RTOL * quotient:
        return int(nearest)
    return max(1, math.ceil(quotient))


def accumulate(
    step: StepFunction,
    dynamics: Dynamics,
    t0: ArrayLike,
    y0: ArrayLike,
    h: ArrayLike,
    n_steps: int,
) -> tuple[Trajectory, Array]:
    """Run *n_steps* fixed steps and record every sample.

    Slot 0 holds the initial condition and slot ``i`` the result of step
    ``i``.  The loop stops early at the first step whose state is not
    finite; that state is not recorded.

    The loop is a ``jax.lax.while_loop``: it can be jitted, vmapped and
    differentiated in forward mode (``jax.jvp``), but not in reverse mode.

    Args:
        step: Bound step function from
            :func:`~rkfixed.integrators.create_step_function`.
        dynamics: ODE right-hand side ``f(t, y) -> dy/dt``.
        t0: Initial time.
        y0: Initial state; any shape.
        h: Step size.
        n_steps: Number of steps (a static Python int).

    Returns:
        tuple: ``(trajectory, n_valid)`` where ``n_valid`` is the number of
            finite samples written, ``n_steps + 1`` on success.  Slots at and
            beyond ``n_valid`` are zero.
    """
    dtype = get_dtype()
    t0 = jnp.asarray(t0, dtype=dtype)
    y0 = jnp.asarray(y0, dtype=dtype)
    h = jnp.asarray(h, dtype=dtype)

    times = t0 + h * jnp.arange(n_steps + 1, dtype=dtype)
    states = jnp.zeros((n_steps + 1,) + y0.shape, dtype=dtype).at[0].set(y0)

    def cond_fn(carry):
        i, _, _, finite = carry
        return (i <= n_steps) & finite

    def body_fn(carry):
        i, y, states, _ = carry
        y_new = step(dynamics, times[i - 1], y, h).state
        finite = jnp.all(jnp.isfinite(y_new))
        states = states.at[i].set(jnp.where(finite, y_new, states[i]))
        return i + 1, y_new, states, finite

    init = (jnp.asarray(1), y0, states, jnp.asarray(True))
    i, _, states, finite = jax.lax.while_loop(cond_fn, body_fn, init)

    n_valid = jnp.where(finite, i, i - 1)
    return Trajectory(times=times, states=states), n_valid
