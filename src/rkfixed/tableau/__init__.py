"""Explicit Runge-Kutta tableaux and the named method catalogue.

Three storage variants are supported:

- :class:`ButcherTableau` -- full storage, one register per stage
- :class:`LowStorageTableau` -- Williamson 2N recurrence, two registers
- :class:`ConvexTableau` -- Shu-Osher convex form used by SSP methods

Typical usage::

    from rkfixed.tableau import get_tableau, list_tableaux, StorageKind
    ssp = [get_tableau(n) for n in list_tableaux(storage=StorageKind.CONVEX)]
"""

from rkfixed.tableau._types import (
    ButcherTableau,
    ConvexTableau,
    LowStorageTableau,
    StorageKind,
    Tableau,
)
from rkfixed.tableau.catalogue import get_tableau, list_tableaux, register_tableau

__all__ = [
    "ButcherTableau",
    "ConvexTableau",
    "LowStorageTableau",
    "StorageKind",
    "Tableau",
    "get_tableau",
    "list_tableaux",
    "register_tableau",
]
