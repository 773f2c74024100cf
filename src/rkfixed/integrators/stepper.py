"""Generic explicit Runge-Kutta stepper.

A single step function serves every tableau: :func:`create_step_function`
binds a tableau, resolves its working-precision coefficients once, and
dispatches on :attr:`~rkfixed.tableau.ButcherTableau.storage` to the
matching stage evaluator.

The returned step is pure and compatible with ``jax.jit``, ``jax.vmap`` and
``jax.grad``.  Tableau coefficients are Python constants at trace time, so
each bound tableau compiles to a straight-line sequence of stage
evaluations.
"""

from __future__ import annotations

from collections.abc import Callable

import jax.numpy as jnp
from jax.typing import ArrayLike

from rkfixed.config import get_dtype
from rkfixed.errors import ConfigurationError
from rkfixed.integrators._stages import (
    convex_update,
    full_storage_update,
    low_storage_update,
)
from rkfixed.integrators._types import Dynamics, StepResult
from rkfixed.tableau._types import StorageKind, Tableau

StepFunction = Callable[[Dynamics, ArrayLike, ArrayLike, ArrayLike], StepResult]

_UPDATES = {
    StorageKind.FULL: full_storage_update,
    StorageKind.LOW_STORAGE: low_storage_update,
    StorageKind.CONVEX: convex_update,
}


def create_step_function(tableau: Tableau) -> StepFunction:
    """Bind *tableau* and return its step function.

    Args:
        tableau: Any tableau variant.

    Returns:
        A callable ``step(dynamics, t, state, dt) -> StepResult`` that
        advances ``state`` from ``t`` to ``t + dt``.  ``dt`` may be
        negative.

    Coefficients are rounded for the working dtype active when this is
    called; call :func:`~rkfixed.config.set_dtype` before binding.

    Raises:
        ConfigurationError: If *tableau* has no known storage kind.

    Examples:
        ```python
        import jax
        import jax.numpy as jnp
        from rkfixed.integrators import create_step_function
        from rkfixed.tableau import get_tableau

        step = jax.jit(create_step_function(get_tableau("rk4")), static_argnums=0)
        result = step(lambda t, y: -y, 0.0, jnp.array([1.0]), 0.1)
        result.state  # ~[exp(-0.1)]
        ```
    """
    try:
        update = _UPDATES[tableau.storage]
    except (AttributeError, KeyError):
        raise ConfigurationError(f"Not a tableau: {tableau!r}") from None
    coeffs = tableau.working_coefficients()

    def step(
        dynamics: Dynamics,
        t: ArrayLike,
        state: ArrayLike,
        dt: ArrayLike,
    ) -> StepResult:
        dtype = get_dtype()
        t = jnp.asarray(t, dtype=dtype)
        state = jnp.asarray(state, dtype=dtype)
        dt = jnp.asarray(dt, dtype=dtype)

        state_new = update(coeffs, dynamics, t, state, dt)

        return StepResult(t=t + dt, state=jnp.asarray(state_new, dtype=dtype))

    return step


def rk_step(
    tableau: Tableau,
    dynamics: Dynamics,
    t: ArrayLike,
    state: ArrayLike,
    dt: ArrayLike,
) -> StepResult:
    """Perform a single step of *tableau*.

    Equivalent to ``create_step_function(tableau)(dynamics, t, state, dt)``.
    Prefer :func:`create_step_function` when stepping repeatedly, so the
    working coefficients are resolved once.

    Args:
        tableau: Method to step with.
        dynamics: ODE right-hand side ``f(t, y) -> dy/dt``.
        t: Current time.
        state: Current state; any shape.
        dt: Step size.  May be negative for backward integration.

    Returns:
        StepResult: Named tuple with fields:
            - ``t``: ``t + dt``.
            - ``state``: State at ``t + dt``.
    """
    return create_step_function(tableau)(dynamics, t, state, dt)
