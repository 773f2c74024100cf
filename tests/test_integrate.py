"""Tests for the integration driver.

Tests cover:
- Step-count exactness and the boundary overshoot policy
- Convergence order of every catalogued method
- Storage-strategy equivalence over whole trajectories
- Input validation and divergence detection
- Step-by-step and batched integration
"""

import logging
import math

import jax
import jax.numpy as jnp
import pytest

from rkfixed.errors import ConfigurationError, NumericDivergenceError
from rkfixed.integrate import integrate, integrate_many, iter_steps
from rkfixed.tableau import get_tableau, list_tableaux
from rkfixed.trajectory import Trajectory


# ──────────────────────────────────────────────
# Helper dynamics functions
# ──────────────────────────────────────────────

def _exponential_decay(t, x):
    """dx/dt = -x. Solution: x(t) = x0 * exp(-t)."""
    return -x


def _harmonic_oscillator(t, x):
    """d^2q/dt^2 = -q. State: [q, dq/dt]. Solution: [cos(t), -sin(t)]."""
    return jnp.array([x[1], -x[0]])


def _van_der_pol(t, x):
    """Van der Pol oscillator with mu = 1."""
    return jnp.array([x[1], (1.0 - x[0] ** 2) * x[1] - x[0]])


def _nan_after(threshold):
    """Exponential decay that returns NaN once t exceeds *threshold*."""
    def dynamics(t, x):
        return jnp.where(t > threshold, jnp.nan, -x)
    return dynamics


def _final_error(name, h):
    traj = integrate(name, _exponential_decay, (0.0, 1.0), jnp.array([1.0]), h=h)
    return abs(float(traj.final_state[0]) - math.exp(-float(traj.final_time)))


def _step_pair(order):
    """Step sizes at which the error is well above rounding and in the asymptotic range."""
    if order <= 4:
        return 0.1, 0.05
    if order <= 6:
        return 0.2, 0.1
    return 0.5, 0.25


# ──────────────────────────────────────────────
# Sampling and boundary policy
# ──────────────────────────────────────────────

class TestSampling:
    def test_exact_step_count(self):
        """[0, 1] with h = 0.1 gives exactly 11 samples."""
        traj = integrate("rk4", _exponential_decay, (0.0, 1.0), jnp.array([1.0]), h=0.1)
        assert isinstance(traj, Trajectory)
        assert traj.num_samples == 11
        assert traj.states.shape == (11, 1)
        assert float(traj.times[0]) == 0.0
        assert abs(float(traj.times[10]) - 1.0) < 0.1

    def test_overshoot(self):
        """[0, 1] with h = 0.3 takes 4 steps and ends at 1.2."""
        traj = integrate("rk4", _exponential_decay, (0.0, 1.0), jnp.array([1.0]), h=0.3)
        assert traj.num_steps == 4
        assert float(traj.final_time) == pytest.approx(1.2)
        assert float(traj.final_time) > 1.0

    def test_default_step_size(self):
        traj = integrate("euler", _exponential_decay, (0.0, 1.0), jnp.array([1.0]))
        assert traj.num_steps == 100

    def test_times_increase(self):
        traj = integrate("ssprk3", _exponential_decay, (2.0, 3.0), jnp.array([1.0]), h=0.05)
        assert jnp.all(jnp.diff(traj.times) > 0)
        assert float(traj.times[0]) == 2.0

    def test_accepts_tableau(self):
        tableau = get_tableau("rk4")
        by_name = integrate("rk4", _harmonic_oscillator, (0.0, 1.0), jnp.array([1.0, 0.0]), h=0.1)
        by_tableau = integrate(tableau, _harmonic_oscillator, (0.0, 1.0), jnp.array([1.0, 0.0]), h=0.1)
        assert jnp.array_equal(by_name.states, by_tableau.states)

    def test_deterministic(self):
        runs = [
            integrate("hairer10", _van_der_pol, (0.0, 2.0), jnp.array([2.0, 0.0]), h=0.1)
            for _ in range(2)
        ]
        assert jnp.array_equal(runs[0].states, runs[1].states)


# ──────────────────────────────────────────────
# Accuracy and convergence order
# ──────────────────────────────────────────────

class TestAccuracy:
    def test_rk4_exponential_decay(self):
        """y' = -y, y(0) = 1, h = 0.1 gives y(1) = exp(-1) to better than 1e-6."""
        traj = integrate("rk4", _exponential_decay, (0.0, 1.0), jnp.array([1.0]), h=0.1)
        assert abs(float(traj.final_state[0]) - 0.36787944117144233) < 1e-6

    @pytest.mark.parametrize(
        "name", [n for n in list_tableaux() if n != "hairer10"]
    )
    def test_convergence_order(self, name):
        """Halving h divides the global error by at least about 2^order."""
        order = get_tableau(name).order
        h1, h2 = _step_pair(order)
        ratio = _final_error(name, h1) / _final_error(name, h2)
        assert 2.0**order * 0.5 <= ratio < 2.0 ** (order + 3)

    def test_hairer10_convergence_order(self):
        """Hairer's method converges at least at tenth order."""
        ratio = _final_error("hairer10", 1.0) / _final_error("hairer10", 0.5)
        assert ratio >= 2.0**10 * 0.5

    def test_harmonic_oscillator_high_order(self):
        traj = integrate(
            "cooper_verner8", _harmonic_oscillator, (0.0, 2.0 * math.pi), jnp.array([1.0, 0.0]),
            h=2.0 * math.pi / 200,
        )
        assert jnp.allclose(traj.final_state, jnp.array([1.0, 0.0]), atol=1e-9)


# ──────────────────────────────────────────────
# Storage-strategy equivalence
# ──────────────────────────────────────────────

class TestStorageEquivalence:
    def test_convex_rk4_matches_full_rk4(self):
        y0 = jnp.array([2.0, 0.0])
        convex = integrate("jiang_shu4_ls", _van_der_pol, (0.0, 5.0), y0, h=0.01)
        full = integrate("rk4", _van_der_pol, (0.0, 5.0), y0, h=0.01)
        assert jnp.allclose(convex.states, full.states, rtol=0.0, atol=1e-9)

    def test_low_storage_matches_butcher_form(self):
        tableau = get_tableau("carpenter_kennedy4_ls")
        y0 = jnp.array([2.0, 0.0])
        low = integrate(tableau, _van_der_pol, (0.0, 5.0), y0, h=0.01)
        full = integrate(tableau.to_butcher(), _van_der_pol, (0.0, 5.0), y0, h=0.01)
        assert jnp.allclose(low.states, full.states, rtol=0.0, atol=1e-9)


# ──────────────────────────────────────────────
# Validation
# ──────────────────────────────────────────────

class TestValidation:
    @pytest.mark.parametrize("t_span", [(1.0, 1.0), (1.0, 0.0)])
    def test_empty_or_reversed_span(self, t_span):
        with pytest.raises(ConfigurationError, match="tf must be greater than t0"):
            integrate("rk4", _exponential_decay, t_span, jnp.array([1.0]))

    @pytest.mark.parametrize("h", [0.0, -0.1])
    def test_non_positive_step(self, h):
        with pytest.raises(ConfigurationError, match="Step size must be positive"):
            integrate("rk4", _exponential_decay, (0.0, 1.0), jnp.array([1.0]), h=h)

    @pytest.mark.parametrize(
        "t_span, h",
        [((0.0, math.inf), 0.1), ((math.nan, 1.0), 0.1), ((0.0, 1.0), math.nan)],
    )
    def test_non_finite_span_or_step(self, t_span, h):
        with pytest.raises(ConfigurationError, match="must be finite"):
            integrate("rk4", _exponential_decay, t_span, jnp.array([1.0]), h=h)

    @pytest.mark.parametrize("t_span", [(0.0,), (0.0, 1.0, 2.0), None, ("a", "b")])
    def test_malformed_span(self, t_span):
        with pytest.raises(ConfigurationError, match="t_span must be a pair"):
            integrate("rk4", _exponential_decay, t_span, jnp.array([1.0]))

    def test_non_finite_initial_state(self):
        with pytest.raises(ConfigurationError, match="non-finite"):
            integrate("rk4", _exponential_decay, (0.0, 1.0), jnp.array([1.0, jnp.nan]))

    def test_derivative_shape_mismatch(self):
        with pytest.raises(ConfigurationError, match=r"shape \(1,\), expected \(2,\)"):
            integrate("rk4", lambda t, x: x[:1], (0.0, 1.0), jnp.array([1.0, 2.0]))

    def test_unknown_method(self):
        with pytest.raises(ConfigurationError, match="Unknown tableau 'rk99'"):
            integrate("rk99", _exponential_decay, (0.0, 1.0), jnp.array([1.0]))

    def test_invalid_method_type(self):
        with pytest.raises(ConfigurationError, match="tableau or a catalogue name"):
            integrate(4, _exponential_decay, (0.0, 1.0), jnp.array([1.0]))

    def test_user_errors_propagate(self):
        def failing(t, x):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            integrate("rk4", failing, (0.0, 1.0), jnp.array([1.0]))


# ──────────────────────────────────────────────
# Divergence
# ──────────────────────────────────────────────

class TestDivergence:
    def test_nan_at_first_stage(self):
        def always_nan(t, x):
            return jnp.full_like(x, jnp.nan)

        with pytest.raises(NumericDivergenceError) as excinfo:
            integrate("rk4", always_nan, (0.0, 1.0), jnp.array([1.0]), h=0.1)
        error = excinfo.value
        assert error.step_index == 1
        assert error.time == pytest.approx(0.1)
        assert error.last_time == 0.0
        assert jnp.array_equal(error.last_state, jnp.array([1.0]))
        assert error.member is None

    def test_nan_mid_run_reports_last_finite_sample(self):
        with pytest.raises(NumericDivergenceError) as excinfo:
            integrate("rk4", _nan_after(0.42), (0.0, 1.0), jnp.array([1.0]), h=0.1)
        error = excinfo.value
        assert error.step_index == 5
        assert error.time == pytest.approx(0.5)
        assert error.last_time == pytest.approx(0.4)
        assert float(error.last_state[0]) == pytest.approx(math.exp(-0.4), abs=1e-6)

    def test_overflow(self):
        """Blow-up to infinity is a divergence, not a result."""
        with pytest.raises(NumericDivergenceError, match="Non-finite state"):
            integrate("euler", lambda t, x: x**2, (0.0, 5.0), jnp.array([1.0]), h=0.1)

    def test_is_floating_point_error(self):
        with pytest.raises(FloatingPointError):
            integrate("heun", _nan_after(0.0), (0.0, 1.0), jnp.array([1.0]), h=0.1)

    def test_warning_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="rkfixed.integrate"):
            with pytest.raises(NumericDivergenceError):
                integrate("rk4", _nan_after(0.42), (0.0, 1.0), jnp.array([1.0]), h=0.1)
        assert "rk4 integration diverged" in caplog.text


# ──────────────────────────────────────────────
# Step-by-step integration
# ──────────────────────────────────────────────

class TestIterSteps:
    def test_matches_integrate(self):
        y0 = jnp.array([2.0, 0.0])
        traj = integrate("rk5", _van_der_pol, (0.0, 1.0), y0, h=0.1)
        samples = list(iter_steps("rk5", _van_der_pol, (0.0, 1.0), y0, h=0.1))
        assert [i for i, _, _ in samples] == list(range(11))
        for i, t, y in samples:
            assert float(t) == float(traj.times[i])
            assert jnp.allclose(y, traj.states[i], rtol=0.0, atol=1e-13)

    def test_early_termination(self):
        seen = []
        for i, t, y in iter_steps("rk4", _exponential_decay, (0.0, 10.0), jnp.array([1.0]), h=0.1):
            seen.append(i)
            if float(y[0]) < 0.5:
                break
        # exp(-t) first drops below 0.5 at t = 0.7
        assert seen[-1] == 7

    def test_validates_before_iteration(self):
        with pytest.raises(ConfigurationError, match="Step size must be positive"):
            iter_steps("rk4", _exponential_decay, (0.0, 1.0), jnp.array([1.0]), h=0.0)

    def test_divergence_during_iteration(self):
        steps = iter_steps("rk4", _nan_after(0.42), (0.0, 1.0), jnp.array([1.0]), h=0.1)
        seen = []
        with pytest.raises(NumericDivergenceError) as excinfo:
            for i, _, _ in steps:
                seen.append(i)
        assert seen == [0, 1, 2, 3, 4]
        assert excinfo.value.step_index == 5
        assert excinfo.value.last_time == pytest.approx(0.4)


# ──────────────────────────────────────────────
# Batched integration
# ──────────────────────────────────────────────

class TestIntegrateMany:
    def test_matches_individual_runs(self):
        y0s = jnp.array([
            [1.0, 0.0],
            [2.0, 0.0],
            [0.5, 0.5],
        ])
        batch = integrate_many("ssprk54", _van_der_pol, (0.0, 2.0), y0s, h=0.05)
        assert batch.times.shape == (3, 41)
        assert batch.states.shape == (3, 41, 2)
        for member, y0 in enumerate(y0s):
            single = integrate("ssprk54", _van_der_pol, (0.0, 2.0), y0, h=0.05)
            assert jnp.allclose(batch.states[member], single.states, rtol=0.0, atol=1e-12)
            assert jnp.allclose(batch.times[member], single.times)

    def test_samples_per_time(self):
        y0s = jnp.array([[1.0], [2.0]])
        batch = integrate_many("rk4", _exponential_decay, (0.0, 1.0), y0s, h=0.1)
        pairs = list(batch.samples())
        assert len(pairs) == 11
        t, y = pairs[0]
        assert t.shape == (2,)
        assert jnp.array_equal(y, y0s)
        t, y = pairs[-1]
        assert jnp.allclose(t, 1.0)
        assert jnp.allclose(y[:, 0], math.exp(-1.0) * y0s[:, 0], atol=1e-6)

    def test_final_state_per_member(self):
        y0s = jnp.array([[1.0], [2.0]])
        batch = integrate_many("rk4", _exponential_decay, (0.0, 1.0), y0s, h=0.1)
        assert batch.final_state.shape == (2, 1)
        assert jnp.allclose(batch.final_state[:, 0], math.exp(-1.0) * y0s[:, 0], atol=1e-6)

    def test_diverging_member(self):
        def blows_up_when_large(t, x):
            return jnp.where(x > 1.5, jnp.nan, -x)

        y0s = jnp.array([[1.0], [2.0], [1.0]])
        with pytest.raises(NumericDivergenceError) as excinfo:
            integrate_many("rk4", blows_up_when_large, (0.0, 1.0), y0s, h=0.1)
        assert excinfo.value.member == 1
        assert excinfo.value.step_index == 1
        assert "batch member 1" in str(excinfo.value)

    def test_requires_batch_axis(self):
        with pytest.raises(ConfigurationError, match="leading batch axis"):
            integrate_many("rk4", _exponential_decay, (0.0, 1.0), jnp.array(1.0))

    def test_member_shape_checked(self):
        with pytest.raises(ConfigurationError, match="expected"):
            integrate_many("rk4", lambda t, x: x[:1], (0.0, 1.0), jnp.ones((4, 2)))

    def test_many_members(self):
        """Each member scales with its own initial condition."""
        y0s = jnp.linspace(0.5, 1.5, 8)[:, None]
        batch = integrate_many("ralston4", _exponential_decay, (0.0, 1.0), y0s, h=0.1)
        expected = jax.vmap(lambda y0: y0 * math.exp(-1.0))(y0s)
        assert jnp.allclose(batch.final_state, expected, atol=1e-6)
