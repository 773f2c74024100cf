"""Named catalogue of explicit Runge-Kutta tableaux.

The built-in methods are constructed (and therefore validated) once, when
this module is first imported.  Additional tableaux can be added with
:func:`register_tableau`; names are unique.

- :func:`get_tableau`: Look up a tableau by name.
- :func:`list_tableaux`: Names of registered tableaux, optionally filtered.
- :func:`register_tableau`: Add a tableau under its own name.
"""

from __future__ import annotations

import logging

from rkfixed.errors import ConfigurationError
from rkfixed.tableau import _classic, _fifth, _high_order, _low_storage, _ssp
from rkfixed.tableau._types import (
    ButcherTableau,
    ConvexTableau,
    LowStorageTableau,
    StorageKind,
    Tableau,
)

logger = logging.getLogger(__name__)

_TABLEAU_TYPES = (ButcherTableau, LowStorageTableau, ConvexTableau)

_catalogue: dict[str, Tableau] = {}


def register_tableau(tableau: Tableau) -> Tableau:
    """Add *tableau* to the catalogue under ``tableau.name``.

    Args:
        tableau: A constructed (hence validated) tableau.

    Returns:
        The registered tableau, so the call can wrap a constructor.

    Raises:
        ConfigurationError: If *tableau* is not a tableau or its name is
            already registered.
    """
    if not isinstance(tableau, _TABLEAU_TYPES):
        raise ConfigurationError(
            f"Expected a tableau, got {type(tableau).__name__}"
        )
    if tableau.name in _catalogue:
        raise ConfigurationError(f"Tableau {tableau.name!r} is already registered")
    _catalogue[tableau.name] = tableau
    logger.debug(
        "Registered tableau %s (%s, order %d, %d stages)",
        tableau.name,
        tableau.storage.value,
        tableau.order,
        tableau.stage_count,
    )
    return tableau


def get_tableau(name: str) -> Tableau:
    """Return the tableau registered under *name*.

    Args:
        name: Catalogue name, e.g. ``"rk4"`` or ``"ssprk3"``.

    Returns:
        The registered tableau.

    Raises:
        KeyError: If no tableau has that name.

    Examples:
        ```python
        from rkfixed.tableau import get_tableau
        rk4 = get_tableau("rk4")
        rk4.order  # 4
        ```
    """
    try:
        return _catalogue[name]
    except KeyError:
        raise KeyError(
            f"Unknown tableau {name!r}. Available: {', '.join(sorted(_catalogue))}"
        ) from None


def list_tableaux(
    storage: StorageKind | None = None,
    min_order: int | None = None,
) -> list[str]:
    """Names of registered tableaux, in registration order.

    Args:
        storage: Only include tableaux with this storage kind.
        min_order: Only include tableaux of at least this order.

    Returns:
        list[str]: Matching names.
    """
    return [
        name
        for name, tableau in _catalogue.items()
        if (storage is None or tableau.storage is storage)
        and (min_order is None or tableau.order >= min_order)
    ]


def _load_builtin() -> None:
    for module in (_classic, _fifth, _high_order, _low_storage, _ssp):
        for tableau in module.tableaux():
            register_tableau(tableau)
    logger.debug("Loaded %d built-in tableaux", len(_catalogue))


_load_builtin()
