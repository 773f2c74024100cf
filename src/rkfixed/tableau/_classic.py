"""Full-storage methods of order 1 to 4."""

from __future__ import annotations

from rkfixed.precision import extended_precision, rational as q, sqrt
from rkfixed.tableau._types import ButcherTableau


def _ralston4() -> ButcherTableau:
    r5 = sqrt(5)
    return ButcherTableau(
        name="ralston4",
        order=4,
        a=(
            (),
            (q(2, 5),),
            ((-2889 + 1428 * r5) / 1024, (3785 - 1620 * r5) / 1024),
            (
                (-3365 + 2094 * r5) / 6040,
                (-975 - 3046 * r5) / 2552,
                (467040 + 203968 * r5) / 240845,
            ),
        ),
        b=(
            (263 + 24 * r5) / 1812,
            (125 - 1000 * r5) / 3828,
            1024 * (3346 + 1623 * r5) / 5924787,
            (30 - 4 * r5) / 123,
        ),
        c=(0, q(2, 5), (14 - 3 * r5) / 16, 1),
        description="Ralston fourth-order method with minimum truncation error",
        references=("A. Ralston, Math. Comp. 16 (1962) 431-437",),
    )


def _shanks4() -> ButcherTableau:
    return ButcherTableau(
        name="shanks4",
        order=4,
        a=(
            (),
            (q(1, 100),),
            (q(-4278, 245), q(4425, 245)),
            (q(524746, 8791), q(-532125, 8791), q(16170, 8791)),
        ),
        b=(q(-179124, 70092), q(200000, 70092), q(40425, 70092), q(8791, 70092)),
        c=(0, q(1, 100), q(3, 5), 1),
        description="Shanks four-stage fourth-order method",
        references=("E. B. Shanks, Math. Comp. 20 (1966) 21-38",),
    )


def tableaux() -> tuple[ButcherTableau, ...]:
    with extended_precision():
        return (
            ButcherTableau(
                name="euler",
                order=1,
                a=((),),
                b=(1,),
                c=(0,),
                cfl=1.0,
                description="Forward Euler",
            ),
            ButcherTableau(
                name="heun",
                order=2,
                a=((), (1,)),
                b=(q(1, 2), q(1, 2)),
                c=(0, 1),
                description="Heun's method (explicit trapezoidal rule)",
            ),
            ButcherTableau(
                name="midpoint",
                order=2,
                a=((), (q(1, 2),)),
                b=(0, 1),
                c=(0, q(1, 2)),
                description="Explicit midpoint method",
            ),
            ButcherTableau(
                name="rk3",
                order=3,
                a=((), (q(1, 2),), (-1, 2)),
                b=(q(1, 6), q(2, 3), q(1, 6)),
                c=(0, q(1, 2), 1),
                description="Kutta's third-order method",
                references=("W. Kutta, Z. Math. Phys. 46 (1901) 435-453",),
            ),
            ButcherTableau(
                name="rk4",
                order=4,
                a=((), (q(1, 2),), (0, q(1, 2)), (0, 0, 1)),
                b=(q(1, 6), q(1, 3), q(1, 3), q(1, 6)),
                c=(0, q(1, 2), q(1, 2), 1),
                description="Classic fourth-order Runge-Kutta",
                references=("W. Kutta, Z. Math. Phys. 46 (1901) 435-453",),
            ),
            ButcherTableau(
                name="rk4_38",
                order=4,
                a=((), (q(1, 3),), (q(-1, 3), 1), (1, -1, 1)),
                b=(q(1, 8), q(3, 8), q(3, 8), q(1, 8)),
                c=(0, q(1, 3), q(2, 3), 1),
                description="Kutta's 3/8 rule",
                references=("W. Kutta, Z. Math. Phys. 46 (1901) 435-453",),
            ),
            _ralston4(),
            _shanks4(),
        )
