"""Module-wide numeric configuration.

Two precisions are configured here and kept deliberately separate:

- The *working* dtype (``set_dtype`` / ``get_dtype``) is the float type the
  stepping engine computes in.  The default is ``jnp.float64``, so importing
  this module enables JAX's 64-bit mode (``jax_enable_x64``); selecting
  float64 later with ``set_dtype`` does the same.
- The *coefficient* precision (``set_coefficient_dps`` /
  ``get_coefficient_dps``) is the number of decimal digits ``mpmath`` uses
  while building and validating tableau coefficients.  Coefficients are
  rounded to the working dtype only when a tableau is bound to a step
  function.

Call ``set_dtype`` **before** any JIT compilation, just like JAX's own
``jax.config.update("jax_enable_x64", True)``.  Under JIT, ``get_dtype()``
runs during tracing and its result is baked into the compiled program.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp

from rkfixed.errors import ConfigurationError

_VALID_DTYPES = (jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64)

# binary128 carries ~34 significant decimal digits
_MIN_COEFFICIENT_DPS = 34

_dtype = jnp.float64
_coefficient_dps = 100
_consistency_tolerance = 1e-12

DEFAULT_STEP_SIZE = 0.01


def _enable_x64(dtype) -> None:
    if dtype == jnp.float64 and not jax.config.jax_enable_x64:
        jax.config.update("jax_enable_x64", True)


_enable_x64(_dtype)


def set_dtype(dtype) -> None:
    """Set the module-wide working float dtype.

    Must be called **before** any ``jax.jit`` compilation.  In eager mode
    the change takes effect immediately.

    If *dtype* is ``jnp.float64``, JAX's 64-bit mode is automatically
    enabled via ``jax.config.update("jax_enable_x64", True)``.

    Args:
        dtype: One of ``jnp.float16``, ``jnp.bfloat16``, ``jnp.float32``,
            or ``jnp.float64``.

    Raises:
        ConfigurationError: If *dtype* is not a supported float type.
    """
    global _dtype
    if dtype not in _VALID_DTYPES:
        raise ConfigurationError(
            f"Unsupported dtype {dtype}. Must be one of: "
            f"jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64"
        )
    _enable_x64(dtype)
    _dtype = dtype


def get_dtype():
    """Return the current module-wide working dtype.

    Returns:
        The active float dtype (default ``jnp.float64``).
    """
    return _dtype


def set_coefficient_dps(dps: int) -> None:
    """Set the decimal precision used to evaluate tableau coefficients.

    Only tableaux constructed after the call are affected; the built-in
    catalogue is evaluated once, at import time.

    Args:
        dps: Number of significant decimal digits, at least 34.

    Raises:
        ConfigurationError: If *dps* is not an integer or is below 34.
    """
    global _coefficient_dps
    if isinstance(dps, bool) or not isinstance(dps, int):
        raise ConfigurationError(f"Coefficient precision must be an int, got {dps!r}")
    if dps < _MIN_COEFFICIENT_DPS:
        raise ConfigurationError(
            f"Coefficient precision must be at least {_MIN_COEFFICIENT_DPS} "
            f"digits, got {dps}"
        )
    _coefficient_dps = dps


def get_coefficient_dps() -> int:
    """Return the decimal precision used for tableau coefficients.

    Returns:
        int: Significant decimal digits (default 100).
    """
    return _coefficient_dps


def set_consistency_tolerance(tol: float) -> None:
    """Set the relative tolerance used by tableau consistency checks.

    Args:
        tol: Positive relative tolerance.

    Raises:
        ConfigurationError: If *tol* is not positive.
    """
    global _consistency_tolerance
    if not tol > 0.0:
        raise ConfigurationError(f"Consistency tolerance must be positive, got {tol!r}")
    _consistency_tolerance = float(tol)


def get_consistency_tolerance() -> float:
    """Return the relative tolerance for tableau consistency checks.

    A condition ``lhs == rhs`` is accepted when
    ``|lhs - rhs| <= tol * max(1, |rhs|)``.

    Returns:
        float: Relative tolerance (default ``1e-12``).
    """
    return _consistency_tolerance
