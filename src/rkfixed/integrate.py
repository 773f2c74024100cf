"""Fixed-step integration driver.

- :func:`integrate`: Integrate one initial condition over a time span.
- :func:`iter_steps`: Step-by-step generator, for callers that want to
  inspect each sample or stop early.
- :func:`integrate_many`: Integrate a batch of initial conditions with
  ``jax.vmap``, sharing one tableau.

Inputs are validated before the first step; invalid inputs raise
:class:`~rkfixed.errors.ConfigurationError`.  A step that produces a
non-finite state raises :class:`~rkfixed.errors.NumericDivergenceError`.
Exceptions raised by the derivative function propagate unchanged.

Example:
    ```python
    import jax.numpy as jnp
    from rkfixed import integrate

    traj = integrate("rk4", lambda t, y: -y, (0.0, 1.0), jnp.array([1.0]), h=0.1)
    traj.final_state  # ~[exp(-1)]
    ```
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator, Sequence

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from rkfixed.config import DEFAULT_STEP_SIZE, get_dtype
from rkfixed.errors import ConfigurationError, NumericDivergenceError
from rkfixed.integrators._types import Dynamics
from rkfixed.integrators.stepper import create_step_function
from rkfixed.tableau._types import ButcherTableau, ConvexTableau, LowStorageTableau, Tableau
from rkfixed.tableau.catalogue import get_tableau
from rkfixed.trajectory import Trajectory, accumulate, step_count

logger = logging.getLogger(__name__)

Method = Tableau | str


def _resolve_method(method: Method) -> Tableau:
    if isinstance(method, (ButcherTableau, LowStorageTableau, ConvexTableau)):
        return method
    if isinstance(method, str):
        try:
            return get_tableau(method)
        except KeyError as exc:
            raise ConfigurationError(exc.args[0]) from exc
    raise ConfigurationError(
        f"method must be a tableau or a catalogue name, got {type(method).__name__}"
    )


def _validate_span(t_span: Sequence[float], h: float) -> tuple[float, float, float]:
    try:
        t0, tf = t_span
        t0, tf, h = float(t0), float(tf), float(h)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            f"t_span must be a pair of real numbers and h a real number, "
            f"got t_span={t_span!r}, h={h!r}"
        ) from exc
    if not all(math.isfinite(v) for v in (t0, tf, h)):
        raise ConfigurationError(
            f"t_span and h must be finite, got t_span=({t0}, {tf}), h={h}"
        )
    if tf <= t0:
        raise ConfigurationError(f"tf must be greater than t0, got t0={t0}, tf={tf}")
    if h <= 0.0:
        raise ConfigurationError(f"Step size must be positive, got h={h}")
    return t0, tf, h


def _validate_state(y0: ArrayLike) -> Array:
    y0 = jnp.asarray(y0, dtype=get_dtype())
    if not bool(jnp.all(jnp.isfinite(y0))):
        raise ConfigurationError("Initial state contains non-finite values")
    return y0


def _check_derivative_shape(f: Dynamics, shape: tuple[int, ...]) -> None:
    dtype = get_dtype()
    out = jax.eval_shape(
        f,
        jax.ShapeDtypeStruct((), dtype),
        jax.ShapeDtypeStruct(shape, dtype),
    )
    out_shape = getattr(out, "shape", None)
    if out_shape != shape:
        raise ConfigurationError(
            f"Derivative function returned shape {out_shape}, expected {shape} "
            f"(the shape of the state)"
        )


def _prepare(method, t_span, y0, h):
    tableau = _resolve_method(method)
    t0, tf, h = _validate_span(t_span, h)
    y0 = _validate_state(y0)
    return tableau, t0, tf, h, y0


def _divergence(tableau, step_index, times, last_state, member=None) -> NumericDivergenceError:
    error = NumericDivergenceError(
        step_index=step_index,
        time=times[step_index],
        last_time=times[step_index - 1],
        last_state=last_state,
        member=member,
    )
    logger.warning("%s integration diverged: %s", tableau.name, error)
    return error


def integrate(
    method: Method,
    f: Dynamics,
    t_span: Sequence[float],
    y0: ArrayLike,
    h: float = DEFAULT_STEP_SIZE,
) -> Trajectory:
    """Integrate ``y' = f(t, y)`` from ``t_span[0]`` to ``t_span[1]`` with fixed steps.

    Takes ``N = ceil((tf - t0) / h)`` steps (see
    :func:`~rkfixed.trajectory.step_count`).  When *h* does not divide the
    span, the final sample overshoots ``tf`` by less than one step.

    Args:
        method: A tableau, or the name of a catalogued one (e.g. ``"rk4"``).
        f: ODE right-hand side ``f(t, y) -> dy/dt``, JAX-traceable, returning
            an array of the same shape as ``y``.
        t_span: ``(t0, tf)`` with ``tf > t0``.
        y0: Initial state; any shape.
        h: Step size, ``h > 0``.  Default: 0.01.

    Returns:
        Trajectory: ``N + 1`` samples including the initial condition.

    Raises:
        ConfigurationError: For an unknown method, ``tf <= t0``, ``h <= 0``,
            non-finite ``t0``, ``tf``, ``h`` or ``y0``, or a derivative whose
            output shape differs from ``y0``.
        NumericDivergenceError: If a step produces a non-finite state.

    Examples:
        ```python
        import jax.numpy as jnp
        from rkfixed import integrate
        traj = integrate("rk4", lambda t, y: -y, (0.0, 1.0), jnp.array([1.0]), h=0.1)
        traj.num_samples  # 11
        ```
    """
    tableau, t0, tf, h, y0 = _prepare(method, t_span, y0, h)
    _check_derivative_shape(f, y0.shape)
    n_steps = step_count(t0, tf, h)

    logger.debug(
        "Integrating with %s over [%g, %g], h=%g, %d steps",
        tableau.name, t0, tf, h, n_steps,
    )
    step = create_step_function(tableau)
    traj, n_valid = accumulate(step, f, t0, y0, h, n_steps)

    n_valid = int(n_valid)
    if n_valid <= n_steps:
        raise _divergence(tableau, n_valid, traj.times, traj.states[n_valid - 1])

    logger.debug("Finished %s integration at t=%g", tableau.name, float(traj.final_time))
    return traj


def iter_steps(
    method: Method,
    f: Dynamics,
    t_span: Sequence[float],
    y0: ArrayLike,
    h: float = DEFAULT_STEP_SIZE,
) -> Iterator[tuple[int, Array, Array]]:
    """Integrate step by step, yielding every sample.

    Validation happens when this function is called, before iteration
    starts.  The generator first yields the initial condition as
    ``(0, t0, y0)`` and then ``(i, t_i, y_i)`` after each step ``i``; the
    samples equal those of :func:`integrate` up to rounding.  Stopping
    iteration early simply abandons the run.

    Args:
        method: A tableau, or the name of a catalogued one.
        f: ODE right-hand side ``f(t, y) -> dy/dt``.
        t_span: ``(t0, tf)`` with ``tf > t0``.
        y0: Initial state; any shape.
        h: Step size, ``h > 0``.  Default: 0.01.

    Returns:
        Iterator over ``(index, t, y)`` tuples.

    Raises:
        ConfigurationError: As for :func:`integrate`.
        NumericDivergenceError: During iteration, if a step produces a
            non-finite state.
    """
    tableau, t0, tf, h, y0 = _prepare(method, t_span, y0, h)
    _check_derivative_shape(f, y0.shape)
    n_steps = step_count(t0, tf, h)
    bound = create_step_function(tableau)

    @jax.jit
    def advance(t, y):
        return bound(f, t, y, h).state

    def generate():
        dtype = get_dtype()
        times = jnp.asarray(t0, dtype=dtype) + jnp.asarray(h, dtype=dtype) * jnp.arange(
            n_steps + 1, dtype=dtype
        )
        y = y0
        yield 0, times[0], y
        for i in range(1, n_steps + 1):
            y_new = advance(times[i - 1], y)
            if not bool(jnp.all(jnp.isfinite(y_new))):
                raise _divergence(tableau, i, times, y)
            y = y_new
            yield i, times[i], y

    logger.debug("Stepping with %s over [%g, %g], h=%g", tableau.name, t0, tf, h)
    return generate()


def integrate_many(
    method: Method,
    f: Dynamics,
    t_span: Sequence[float],
    y0s: ArrayLike,
    h: float = DEFAULT_STEP_SIZE,
) -> Trajectory:
    """Integrate a batch of initial conditions in parallel with ``jax.vmap``.

    Every member shares the tableau, derivative, time span and step size.

    Args:
        method: A tableau, or the name of a catalogued one.
        f: ODE right-hand side ``f(t, y) -> dy/dt`` for a single member.
        t_span: ``(t0, tf)`` with ``tf > t0``.
        y0s: Initial states stacked along axis 0, shape ``(B, *state_shape)``.
        h: Step size, ``h > 0``.  Default: 0.01.

    Returns:
        Trajectory: ``times`` of shape ``(B, N + 1)`` and ``states`` of shape
            ``(B, N + 1, *state_shape)``.

    Raises:
        ConfigurationError: As for :func:`integrate`, or if *y0s* has no
            batch axis.
        NumericDivergenceError: If any member diverges; ``member`` is the
            index of the first diverging member.
    """
    tableau, t0, tf, h, y0s = _prepare(method, t_span, y0s, h)
    if y0s.ndim < 1 or y0s.shape[0] == 0:
        raise ConfigurationError(
            f"y0s must have a non-empty leading batch axis, got shape {y0s.shape}"
        )
    _check_derivative_shape(f, y0s.shape[1:])
    n_steps = step_count(t0, tf, h)

    logger.debug(
        "Integrating %d members with %s over [%g, %g], h=%g, %d steps",
        y0s.shape[0], tableau.name, t0, tf, h, n_steps,
    )
    step = create_step_function(tableau)
    trajs, n_valid = jax.vmap(lambda y0: accumulate(step, f, t0, y0, h, n_steps))(y0s)

    for member, valid in enumerate(n_valid.tolist()):
        if valid <= n_steps:
            raise _divergence(
                tableau, valid, trajs.times[member], trajs.states[member, valid - 1],
                member=member,
            )
    return trajs
