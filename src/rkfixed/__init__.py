"""
rkfixed is a library of fixed-step explicit Runge-Kutta integrators implemented in JAX.
"""

from .config import (
    get_coefficient_dps,
    get_consistency_tolerance,
    get_dtype,
    set_coefficient_dps,
    set_consistency_tolerance,
    set_dtype,
)
from .errors import ConfigurationError, NumericDivergenceError, RKFixedError

from .tableau import (
    ButcherTableau,
    ConvexTableau,
    LowStorageTableau,
    StorageKind,
    get_tableau,
    list_tableaux,
    register_tableau,
)

from .integrators import StepResult, create_step_function, rk_step
from .trajectory import Trajectory, accumulate, step_count
from .integrate import integrate, integrate_many, iter_steps

__all__ = [
    # Config
    "set_dtype",
    "get_dtype",
    "set_coefficient_dps",
    "get_coefficient_dps",
    "set_consistency_tolerance",
    "get_consistency_tolerance",
    # Errors
    "RKFixedError",
    "ConfigurationError",
    "NumericDivergenceError",
    # Tableaux
    "ButcherTableau",
    "LowStorageTableau",
    "ConvexTableau",
    "StorageKind",
    "get_tableau",
    "list_tableaux",
    "register_tableau",
    # Stepping
    "StepResult",
    "create_step_function",
    "rk_step",
    # Trajectories
    "Trajectory",
    "accumulate",
    "step_count",
    # Integration
    "integrate",
    "iter_steps",
    "integrate_many",
]
