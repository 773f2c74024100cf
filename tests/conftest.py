import jax.numpy as jnp
import pytest

from rkfixed.config import set_coefficient_dps, set_consistency_tolerance, set_dtype


@pytest.fixture(autouse=True)
def _default_settings():
    """Run every test with float64 states and the default coefficient settings.

    The working dtype and precision settings are module globals; a test
    that changes them must not leak into the next one.
    """
    set_dtype(jnp.float64)
    set_coefficient_dps(100)
    set_consistency_tolerance(1e-12)
