"""Tableau data model for explicit Runge-Kutta methods.

Three immutable variants describe how a method is stepped:

- :class:`ButcherTableau` (``StorageKind.FULL``): classic ``(a, b, c)``
  form; every stage derivative is kept until the final combination.
- :class:`LowStorageTableau` (``StorageKind.LOW_STORAGE``): Williamson
  2N form ``(alpha, beta, c)``; two state-sized registers regardless of the
  stage count.
- :class:`ConvexTableau` (``StorageKind.CONVEX``): Shu-Osher form
  ``(alpha, beta)`` over intermediate registers, used by strong-stability
  preserving (SSP) methods.

Coefficients are converted to extended precision on construction (see
:mod:`rkfixed.precision`) and the structural and consistency invariants of
each variant are checked there.  A violation raises
:class:`~rkfixed.errors.ConfigurationError`; a tableau that exists is
valid.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import ClassVar, NamedTuple, Union

import mpmath as mp

from rkfixed.config import get_consistency_tolerance
from rkfixed.errors import ConfigurationError
from rkfixed.precision import coefficient, coefficients, extended_precision, is_close, to_working


class StorageKind(enum.Enum):
    """Register strategy used to step a tableau."""

    FULL = "full"
    LOW_STORAGE = "low_storage"
    CONVEX = "convex"


class ButcherCoefficients(NamedTuple):
    """Working-precision coefficients of a :class:`ButcherTableau`."""

    a: tuple[tuple[float, ...], ...]
    b: tuple[float, ...]
    c: tuple[float, ...]


class LowStorageCoefficients(NamedTuple):
    """Working-precision coefficients of a :class:`LowStorageTableau`."""

    alpha: tuple[float, ...]
    beta: tuple[float, ...]
    c: tuple[float, ...]


class ConvexCoefficients(NamedTuple):
    """Working-precision coefficients of a :class:`ConvexTableau`.

    ``last_use[k]`` is the last row that reads register ``u[k]``.
    """

    alpha: tuple[tuple[float, ...], ...]
    beta: tuple[tuple[float, ...], ...]
    c: tuple[float, ...]
    last_use: tuple[int, ...]


def _set(obj, name: str, value) -> None:
    object.__setattr__(obj, name, value)


def _check_metadata(tableau) -> None:
    if not isinstance(tableau.name, str) or not tableau.name:
        raise ConfigurationError(f"Tableau name must be a non-empty string, got {tableau.name!r}")
    if isinstance(tableau.order, bool) or not isinstance(tableau.order, int) or tableau.order < 1:
        raise ConfigurationError(
            f"{tableau.name}: order must be a positive int, got {tableau.order!r}"
        )
    if tableau.cfl is not None and (
        isinstance(tableau.cfl, bool)
        or not isinstance(tableau.cfl, (int, float))
        or not tableau.cfl > 0.0
    ):
        raise ConfigurationError(
            f"{tableau.name}: cfl must be a positive number, got {tableau.cfl!r}"
        )
    _set(tableau, "references", tuple(tableau.references))


def _vector(tableau, label: str, values) -> tuple[mp.mpf, ...]:
    values = coefficients(values)
    if not values:
        raise ConfigurationError(f"{tableau.name}: {label} must have at least one entry")
    return values


def _triangle(tableau, label: str, rows, extra: int) -> tuple[tuple[mp.mpf, ...], ...]:
    """Convert rows where row ``i`` must hold exactly ``i + extra`` entries."""
    rows = tuple(coefficients(row) for row in rows)
    for i, row in enumerate(rows):
        if len(row) != i + extra:
            raise ConfigurationError(
                f"{tableau.name}: row {i} of {label} has {len(row)} entries, "
                f"expected {i + extra}"
            )
    return rows


def _check_close(tableau, what: str, lhs, rhs) -> None:
    tol = get_consistency_tolerance()
    if not is_close(lhs, rhs, tol):
        raise ConfigurationError(
            f"{tableau.name}: inconsistent tableau, {what}: "
            f"{mp.nstr(lhs, 20)} != {mp.nstr(rhs, 20)}"
        )


def _check_butcher(tableau, a, b, c) -> None:
    with extended_precision():
        for i, row in enumerate(a):
            _check_close(tableau, f"c[{i}] != sum(a[{i}])", mp.fsum(row), c[i])
        _check_close(tableau, "sum(b) != 1", mp.fsum(b), mp.mpf(1))


@dataclass(frozen=True)
class ButcherTableau:
    """Explicit Runge-Kutta method in Butcher ``(a, b, c)`` form.

    Stage ``i`` evaluates
    ``k[i] = f(t + c[i] h, y + h * sum_j a[i][j] k[j])`` and the step returns
    ``y + h * sum_i b[i] k[i]``.

    Args:
        name: Catalogue name.
        order: Formal order of accuracy (metadata only).
        a: Strictly lower-triangular coupling coefficients as a sequence of
            rows; row ``i`` holds exactly ``i`` entries (row 0 is empty).
        b: Final combination weights, one per stage.
        c: Stage time fractions, one per stage.
        cfl: Optional published CFL-like step bound.
        description: Human-readable method name.
        references: Bibliographic references.

    Raises:
        ConfigurationError: If the rows are not strictly lower triangular,
            lengths disagree, ``c[i] != sum(a[i])`` or ``sum(b) != 1``.

    Examples:
        ```python
        from rkfixed.tableau import ButcherTableau
        heun = ButcherTableau("heun", 2, a=[[], ["1"]], b=["1/2", "1/2"], c=[0, 1])
        heun.stage_count  # 2
        ```
    """

    name: str
    order: int
    a: tuple
    b: tuple
    c: tuple
    cfl: float | None = None
    description: str = ""
    references: tuple[str, ...] = ()

    storage: ClassVar[StorageKind] = StorageKind.FULL

    def __post_init__(self) -> None:
        _check_metadata(self)
        b = _vector(self, "b", self.b)
        c = _vector(self, "c", self.c)
        a = _triangle(self, "a", self.a, extra=0)
        if not len(a) == len(b) == len(c):
            raise ConfigurationError(
                f"{self.name}: a, b and c must describe the same number of stages, "
                f"got {len(a)}, {len(b)}, {len(c)}"
            )
        _check_butcher(self, a, b, c)
        _set(self, "a", a)
        _set(self, "b", b)
        _set(self, "c", c)

    @property
    def stage_count(self) -> int:
        return len(self.b)

    @property
    def register_count(self) -> int:
        """One stage-derivative register per stage."""
        return len(self.b)

    def working_coefficients(self) -> ButcherCoefficients:
        """Coefficients rounded to working precision."""
        return ButcherCoefficients(
            a=tuple(to_working(row) for row in self.a),
            b=to_working(self.b),
            c=to_working(self.c),
        )


@dataclass(frozen=True)
class LowStorageTableau:
    """Williamson 2N low-storage Runge-Kutta method.

    Two registers, ``state`` and ``delta``, are updated for each stage ``i``:

    .. code-block:: text

        k     = f(t + c[i] h, state)
        delta = alpha[i] * delta + h * k
        state = state + beta[i] * delta

    ``alpha[0]`` must be zero so the first stage starts from ``delta = h k``.

    Args:
        name: Catalogue name.
        order: Formal order of accuracy (metadata only).
        alpha: Register-decay coefficients, one per stage.
        beta: State-update coefficients, one per stage.
        c: Stage time fractions, one per stage.
        cfl: Optional published CFL-like step bound.
        description: Human-readable method name.
        references: Bibliographic references.

    Raises:
        ConfigurationError: If lengths disagree, ``alpha[0] != 0``, or the
            equivalent Butcher tableau is inconsistent.
    """

    name: str
    order: int
    alpha: tuple
    beta: tuple
    c: tuple
    cfl: float | None = None
    description: str = ""
    references: tuple[str, ...] = ()

    storage: ClassVar[StorageKind] = StorageKind.LOW_STORAGE

    def __post_init__(self) -> None:
        _check_metadata(self)
        alpha = _vector(self, "alpha", self.alpha)
        beta = _vector(self, "beta", self.beta)
        c = _vector(self, "c", self.c)
        if not len(alpha) == len(beta) == len(c):
            raise ConfigurationError(
                f"{self.name}: alpha, beta and c must have the same length, "
                f"got {len(alpha)}, {len(beta)}, {len(c)}"
            )
        if alpha[0] != 0:
            raise ConfigurationError(
                f"{self.name}: alpha[0] must be 0, got {mp.nstr(alpha[0], 20)}"
            )
        _set(self, "alpha", alpha)
        _set(self, "beta", beta)
        _set(self, "c", c)
        a, b = self._butcher_weights()
        _check_butcher(self, a, b, c)

    def _butcher_weights(self):
        alpha, beta = self.alpha, self.beta
        s = len(beta)

        def weight(j, upto):
            # contribution of stage j to the state after stage `upto`
            total = mp.mpf(0)
            decay = mp.mpf(1)
            for m in range(j, upto + 1):
                if m > j:
                    decay *= alpha[m]
                total += beta[m] * decay
            return total

        with extended_precision():
            a = tuple(tuple(weight(j, i - 1) for j in range(i)) for i in range(s))
            b = tuple(weight(j, s - 1) for j in range(s))
        return a, b

    def to_butcher(self) -> ButcherTableau:
        """Return the equivalent full-storage tableau.

        The two forms produce the same step up to rounding.

        Returns:
            ButcherTableau: Tableau named ``"<name>_butcher"``.
        """
        a, b = self._butcher_weights()
        return ButcherTableau(
            name=f"{self.name}_butcher",
            order=self.order,
            a=a,
            b=b,
            c=self.c,
            cfl=self.cfl,
            description=f"{self.description} (Butcher form)".strip(),
            references=self.references,
        )

    @property
    def stage_count(self) -> int:
        return len(self.beta)

    @property
    def register_count(self) -> int:
        return 2

    def working_coefficients(self) -> LowStorageCoefficients:
        """Coefficients rounded to working precision."""
        return LowStorageCoefficients(
            alpha=to_working(self.alpha),
            beta=to_working(self.beta),
            c=to_working(self.c),
        )


@dataclass(frozen=True)
class ConvexTableau:
    """Explicit Runge-Kutta method in Shu-Osher (convex combination) form.

    With ``u[0] = y`` and ``F[k] = f(t + c[k] h, u[k])``, row ``i`` of the
    coefficients defines

    .. code-block:: text

        u[i + 1] = sum_k alpha[i][k] * u[k] + h * sum_k beta[i][k] * F[k]

    for ``k = 0..i``; the step returns ``u[s]``.  Stage times ``c`` follow
    from the coefficients.  When every coefficient is non-negative the form
    is strong-stability preserving for step sizes up to
    :attr:`ssp_coefficient` times the forward-Euler bound; that bound is
    not enforced by the engine.

    Args:
        name: Catalogue name.
        order: Formal order of accuracy (metadata only).
        alpha: Register weights; row ``i`` holds ``i + 1`` entries.
        beta: Derivative weights; row ``i`` holds ``i + 1`` entries.
        cfl: Optional published CFL (SSP) coefficient.
        description: Human-readable method name.
        references: Bibliographic references.

    Raises:
        ConfigurationError: If row shapes are wrong, an ``alpha`` row does
            not sum to 1, a stage derivative is never used, or the final
            register does not advance time by exactly one step.
    """

    name: str
    order: int
    alpha: tuple
    beta: tuple
    cfl: float | None = None
    description: str = ""
    references: tuple[str, ...] = ()

    storage: ClassVar[StorageKind] = StorageKind.CONVEX

    def __post_init__(self) -> None:
        _check_metadata(self)
        alpha = _triangle(self, "alpha", self.alpha, extra=1)
        beta = _triangle(self, "beta", self.beta, extra=1)
        if not alpha or len(alpha) != len(beta):
            raise ConfigurationError(
                f"{self.name}: alpha and beta must have the same non-zero number "
                f"of rows, got {len(alpha)} and {len(beta)}"
            )
        s = len(beta)
        with extended_precision():
            for i, row in enumerate(alpha):
                _check_close(self, f"sum(alpha[{i}]) != 1", mp.fsum(row), mp.mpf(1))
            for k in range(s):
                if all(beta[i][k] == 0 for i in range(k, s)):
                    raise ConfigurationError(
                        f"{self.name}: stage derivative {k} is never used"
                    )
            times = [mp.mpf(0)]
            for i in range(s):
                times.append(
                    mp.fsum(alpha[i][k] * times[k] for k in range(i + 1))
                    + mp.fsum(beta[i])
                )
            _check_close(self, "final register time != 1", times[s], mp.mpf(1))
        _set(self, "alpha", alpha)
        _set(self, "beta", beta)
        _set(self, "_times", tuple(times))

    @property
    def c(self) -> tuple[mp.mpf, ...]:
        """Stage time fractions ``c[k]`` of the registers ``u[k]``."""
        return self._times[:-1]

    @property
    def stage_count(self) -> int:
        return len(self.beta)

    @property
    def last_use(self) -> tuple[int, ...]:
        """Last row reading each register ``u[0..s]``.

        Register ``u[k]`` is read by row ``k`` (to evaluate ``F[k]``) and by
        every row with a non-zero ``alpha[i][k]``.  The output ``u[s]`` is
        given ``s``.
        """
        s = self.stage_count
        last = list(range(s + 1))
        for i, row in enumerate(self.alpha):
            for k, value in enumerate(row):
                if value != 0:
                    last[k] = max(last[k], i)
        return tuple(last)

    @property
    def register_count(self) -> int:
        """Peak number of intermediate registers alive at once.

        Counts ``u[1..s-1]``; the input state and the output are excluded.
        """
        s = self.stage_count
        last = self.last_use
        peak = 0
        for i in range(s - 1):
            live = sum(1 for k in range(1, i + 2) if last[k] > i)
            peak = max(peak, live)
        return peak

    @property
    def ssp_coefficient(self) -> float | None:
        """Shu-Osher SSP coefficient ``min alpha[i][k] / beta[i][k]``.

        Returns ``None`` when any coefficient is negative, in which case the
        form carries no strong-stability guarantee.
        """
        ratios = []
        for a_row, b_row in zip(self.alpha, self.beta):
            for a_ik, b_ik in zip(a_row, b_row):
                if a_ik < 0 or b_ik < 0:
                    return None
                if b_ik > 0:
                    ratios.append(a_ik / b_ik)
        return float(min(ratios))

    def working_coefficients(self) -> ConvexCoefficients:
        """Coefficients rounded to working precision."""
        return ConvexCoefficients(
            alpha=tuple(to_working(row) for row in self.alpha),
            beta=tuple(to_working(row) for row in self.beta),
            c=to_working(self.c),
            last_use=self.last_use,
        )


Tableau = Union[ButcherTableau, LowStorageTableau, ConvexTableau]
