"""Type definitions for the stepping engine.

:class:`StepResult` is a :class:`~typing.NamedTuple`, which JAX treats as a
pytree, so it can be returned from ``jax.jit``-compiled functions and
carried through ``jax.lax`` control flow.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import NamedTuple

from jax import Array
from jax.typing import ArrayLike

Dynamics = Callable[[ArrayLike, ArrayLike], Array]
"""Right-hand side ``f(t, y) -> dy/dt``; ``dy/dt`` has the shape of ``y``."""


class StepResult(NamedTuple):
    """Result of a single fixed-size step.

    Attributes:
        t: Time at the end of the step, ``t + dt``.
        state: State at time ``t``.
    """

    t: Array
    state: Array
