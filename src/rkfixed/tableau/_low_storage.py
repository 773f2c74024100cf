"""Williamson 2N low-storage methods."""

from __future__ import annotations

from rkfixed.precision import extended_precision, rational as q
from rkfixed.tableau._types import LowStorageTableau


def tableaux() -> tuple[LowStorageTableau, ...]:
    with extended_precision():
        return (
            LowStorageTableau(
                name="williamson3_ls",
                order=3,
                alpha=(0, q(-5, 9), q(-153, 128)),
                beta=(q(1, 3), q(15, 16), q(8, 15)),
                c=(0, q(1, 3), q(3, 4)),
                description="Williamson three-stage third-order 2N method",
                references=("J. H. Williamson, J. Comput. Phys. 35 (1980) 48-56",),
            ),
            LowStorageTableau(
                name="carpenter_kennedy4_ls",
                order=4,
                alpha=(
                    0,
                    "-567301805773/1357537059087",
                    "-2404267990393/2016746695238",
                    "-3550918686646/2091501179385",
                    "-1275806237668/842570457699",
                ),
                beta=(
                    "1432997174477/9575080441755",
                    "5161836677717/13612068292357",
                    "1720146321549/2090206949498",
                    "3134564353537/4481467310338",
                    "2277821191437/14882151754819",
                ),
                c=(
                    0,
                    "1432997174477/9575080441755",
                    "2526269341429/6820363962896",
                    "2006345519317/3224310063776",
                    "2802321613138/2924317926251",
                ),
                cfl=0.32,
                description="Carpenter and Kennedy five-stage fourth-order 2N method",
                references=(
                    "M. H. Carpenter and C. A. Kennedy, NASA TM-109112 (1994)",
                ),
            ),
        )
