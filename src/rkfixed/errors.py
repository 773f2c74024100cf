"""Exception types raised by rkfixed.

- :class:`ConfigurationError`: invalid inputs detected before any step is
  taken (inconsistent tableau, bad time span or step size, bad settings).
  Subclasses :class:`ValueError`.
- :class:`NumericDivergenceError`: a step produced a non-finite state.
  Subclasses :class:`FloatingPointError`.

Exceptions raised by a user's derivative function are never wrapped; they
reach the caller unchanged.
"""

from __future__ import annotations


class RKFixedError(Exception):
    """Base class for all rkfixed errors."""


class ConfigurationError(RKFixedError, ValueError):
    """Invalid tableau, time span, step size, or setting."""


class NumericDivergenceError(RKFixedError, FloatingPointError):
    """A step produced a non-finite (NaN or infinite) state.

    Attributes:
        step_index: Index of the failing step, equal to the trajectory slot
            its result would have occupied (the first step is 1).
        time: Time the failing step was advancing to.
        last_time: Time of the last finite sample.
        last_state: Last finite state, so a caller can resume from it with a
            smaller step size.
        member: Batch index of the diverging member for batched
            integration, ``None`` otherwise.
    """

    def __init__(self, step_index, time, last_time, last_state, member=None):
        self.step_index = int(step_index)
        self.time = float(time)
        self.last_time = float(last_time)
        self.last_state = last_state
        self.member = member
        where = f" (batch member {member})" if member is not None else ""
        super().__init__(
            f"Non-finite state at step {self.step_index}, t={self.time:g}{where}; "
            f"last finite sample at t={self.last_time:g}"
        )
