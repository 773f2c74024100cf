"""Tableau-driven explicit Runge-Kutta stepping engine.

All step functions share a common interface::

    result = step(dynamics, t, state, dt)

where ``dynamics(t, y) -> dy`` defines the ODE right-hand side and the
result is a :class:`StepResult` named tuple.  Steps are implemented in JAX
and are compatible with ``jax.jit``, ``jax.vmap``, and automatic
differentiation.
"""

from rkfixed.integrators._types import Dynamics, StepResult
from rkfixed.integrators.stepper import StepFunction, create_step_function, rk_step

__all__ = [
    "Dynamics",
    "StepFunction",
    "StepResult",
    "create_step_function",
    "rk_step",
]
