"""Extended-precision evaluation of tableau coefficients.

Published Runge-Kutta coefficients are rationals, surds, or (for the
10th-order Hairer method) decimals quoted to ~85 significant digits.
Tableaux therefore hold their coefficients as :class:`mpmath.mpf` values
computed at :func:`~rkfixed.config.get_coefficient_dps` digits, and the
engine only sees working-precision floats produced by :func:`to_working`.
That call is the single conversion boundary between the two precisions.

Example:
    ```python
    from rkfixed.precision import extended_precision, rational, sqrt

    with extended_precision():
        c5 = rational(1, 2) - sqrt(15) / 10
    ```
"""

from __future__ import annotations

from collections.abc import Iterable
from fractions import Fraction

import jax.numpy as jnp
import mpmath as mp

from rkfixed.config import get_coefficient_dps, get_dtype
from rkfixed.errors import ConfigurationError


def extended_precision(dps: int | None = None):
    """Context manager that evaluates mpmath arithmetic at *dps* digits.

    Args:
        dps: Decimal digits.  Defaults to
            :func:`~rkfixed.config.get_coefficient_dps`.

    Returns:
        An ``mpmath.workdps`` context manager.
    """
    if dps is None:
        dps = get_coefficient_dps()
    return mp.workdps(dps)


def coefficient(value) -> mp.mpf:
    """Convert a published coefficient to an extended-precision value.

    Accepted inputs are ints, :class:`fractions.Fraction`, ``mpf``, decimal
    strings (``"0.5233584004620047139632937023"``, ``"-0.98e-1"``) and
    rational strings (``"-567301805773/1357537059087"``).  Python floats
    are accepted as exact binary values but cannot recover digits they
    never carried.

    Args:
        value: Coefficient to convert.

    Returns:
        mpmath.mpf: The coefficient at the current coefficient precision.

    Raises:
        ConfigurationError: If *value* cannot be parsed as a real number.
    """
    with extended_precision():
        if isinstance(value, bool):
            raise ConfigurationError(f"Invalid coefficient {value!r}")
        if isinstance(value, mp.mpf):
            return +value
        if isinstance(value, Fraction):
            return mp.mpf(value.numerator) / value.denominator
        if isinstance(value, (int, float)):
            return mp.mpf(value)
        if isinstance(value, str):
            text = value.strip()
            try:
                if "/" in text:
                    num, den = text.split("/")
                    return mp.mpf(num.strip()) / mp.mpf(den.strip())
                return mp.mpf(text)
            except (ValueError, ZeroDivisionError) as exc:
                raise ConfigurationError(f"Invalid coefficient {value!r}") from exc
    raise ConfigurationError(
        f"Invalid coefficient {value!r} of type {type(value).__name__}"
    )


def coefficients(values: Iterable) -> tuple[mp.mpf, ...]:
    """Convert a sequence of coefficients with :func:`coefficient`."""
    return tuple(coefficient(v) for v in values)


def rational(numerator: int, denominator: int) -> mp.mpf:
    """Return ``numerator / denominator`` at coefficient precision."""
    with extended_precision():
        return mp.mpf(numerator) / denominator


def sqrt(value) -> mp.mpf:
    """Return the square root of *value* at coefficient precision."""
    with extended_precision():
        return mp.sqrt(coefficient(value))


def is_close(lhs, rhs, tol: float) -> bool:
    """Relative comparison used by the tableau consistency checks.

    Args:
        lhs: Computed value.
        rhs: Expected value.
        tol: Relative tolerance.

    Returns:
        bool: ``|lhs - rhs| <= tol * max(1, |rhs|)``.
    """
    with extended_precision():
        return abs(lhs - rhs) <= tol * max(mp.mpf(1), abs(rhs))


def to_working(values: Iterable) -> tuple[float, ...]:
    """Round extended-precision coefficients to the working dtype.

    Each value is rounded once, directly from its extended-precision form
    to the nearest value with the significand width of
    :func:`~rkfixed.config.get_dtype` (24 bits for float32, 53 for
    float64).  The result is returned as a Python float, which represents
    it exactly, so the cast JAX applies when it enters a traced computation
    does not round again.

    Args:
        values: Extended-precision coefficients.

    Returns:
        tuple[float, ...]: Rounded coefficients, in the same order.
    """
    bits = jnp.finfo(get_dtype()).nmant + 1
    with mp.workprec(bits):
        return tuple(float(+mp.mpf(v)) for v in values)
