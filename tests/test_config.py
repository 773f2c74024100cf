"""Tests for the rkfixed.config module."""

from unittest.mock import patch

import jax
import jax.numpy as jnp
import mpmath as mp
import pytest

from rkfixed.config import (
    DEFAULT_STEP_SIZE,
    get_coefficient_dps,
    get_consistency_tolerance,
    get_dtype,
    set_coefficient_dps,
    set_consistency_tolerance,
    set_dtype,
)
from rkfixed.errors import ConfigurationError
from rkfixed.integrate import integrate
from rkfixed.integrators import rk_step
from rkfixed.tableau import ButcherTableau, get_tableau

pytestmark = pytest.mark.order("first")


@pytest.fixture(autouse=True)
def reset_config():
    """Restore default settings before and after each test."""
    set_dtype(jnp.float64)
    set_coefficient_dps(100)
    set_consistency_tolerance(1e-12)
    yield
    set_dtype(jnp.float64)
    set_coefficient_dps(100)
    set_consistency_tolerance(1e-12)


class TestGetSetDtype:
    def test_default_dtype(self):
        assert get_dtype() == jnp.float64

    def test_set_float32(self):
        set_dtype(jnp.float32)
        assert get_dtype() == jnp.float32

    def test_set_float16(self):
        set_dtype(jnp.float16)
        assert get_dtype() == jnp.float16

    def test_set_bfloat16(self):
        set_dtype(jnp.bfloat16)
        assert get_dtype() == jnp.bfloat16

    def test_roundtrip(self):
        for dtype in (jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64):
            set_dtype(dtype)
            assert get_dtype() == dtype

    def test_invalid_dtype_raises(self):
        with pytest.raises(ConfigurationError, match="Unsupported dtype"):
            set_dtype(jnp.int32)

    def test_invalid_dtype_is_value_error(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype("float32")

    def test_float64_enables_x64(self):
        set_dtype(jnp.float64)
        assert jax.config.jax_enable_x64 is True

    def test_get_dtype_leaves_jax_config_alone(self):
        with patch.object(jax.config, "update") as update:
            assert get_dtype() == jnp.float64
        update.assert_not_called()

    def test_x64_enabled_on_import(self):
        """The float64 default is usable without ever calling set_dtype."""
        assert jax.config.jax_enable_x64 is True


class TestCoefficientPrecision:
    def test_default(self):
        assert get_coefficient_dps() == 100

    def test_set(self):
        set_coefficient_dps(50)
        assert get_coefficient_dps() == 50

    def test_minimum_is_quad_precision(self):
        set_coefficient_dps(34)
        assert get_coefficient_dps() == 34
        with pytest.raises(ConfigurationError, match="at least 34"):
            set_coefficient_dps(33)

    @pytest.mark.parametrize("value", [50.0, "50", True])
    def test_non_int_raises(self, value):
        with pytest.raises(ConfigurationError, match="must be an int"):
            set_coefficient_dps(value)

    def test_new_tableaux_use_setting(self):
        """Tableaux built after the call carry coefficients at the new precision."""
        set_coefficient_dps(40)
        tableau = ButcherTableau("thirds", 1, a=[[], ["1/3"]], b=["1/3", "2/3"], c=[0, "1/3"])
        with mp.workdps(40):
            assert abs(tableau.b[0] - mp.mpf(1) / 3) < mp.mpf("1e-38")


class TestConsistencyTolerance:
    def test_default(self):
        assert get_consistency_tolerance() == 1e-12

    def test_set(self):
        set_consistency_tolerance(1e-6)
        assert get_consistency_tolerance() == 1e-6

    @pytest.mark.parametrize("value", [0.0, -1e-12])
    def test_non_positive_raises(self, value):
        with pytest.raises(ConfigurationError, match="must be positive"):
            set_consistency_tolerance(value)

    def test_loose_tolerance_accepts_rounded_coefficients(self):
        """A six-digit transcription of Heun passes only with a loose tolerance."""
        kwargs = dict(a=[[], ["1.000001"]], b=["0.5", "0.5"], c=[0, 1])
        with pytest.raises(ConfigurationError, match="inconsistent"):
            ButcherTableau("heun6", 2, **kwargs)
        set_consistency_tolerance(1e-5)
        assert ButcherTableau("heun6", 2, **kwargs).stage_count == 2


class TestDtypeSwitchingOutputs:
    """Verify that outputs follow the configured working dtype."""

    def test_step_dtype_float32(self):
        set_dtype(jnp.float32)
        result = rk_step(get_tableau("rk4"), lambda t, y: -y, 0.0, jnp.array([1.0]), 0.1)
        assert result.state.dtype == jnp.float32
        assert result.t.dtype == jnp.float32

    def test_step_dtype_float64(self):
        set_dtype(jnp.float64)
        result = rk_step(get_tableau("rk4"), lambda t, y: -y, 0.0, jnp.array([1.0]), 0.1)
        assert result.state.dtype == jnp.float64

    def test_trajectory_dtype_float32(self):
        set_dtype(jnp.float32)
        traj = integrate("rk4", lambda t, y: -y, (0.0, 1.0), jnp.array([1.0]), h=0.1)
        assert traj.times.dtype == jnp.float32
        assert traj.states.dtype == jnp.float32
        assert float(traj.final_state[0]) == pytest.approx(0.36787944, rel=1e-5)

    def test_default_step_size(self):
        assert DEFAULT_STEP_SIZE == 0.01
