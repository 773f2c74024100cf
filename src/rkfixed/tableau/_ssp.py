"""Shu-Osher (convex combination) methods.

The Spiteri-Ruuth coefficients are published to 15 decimal places; they
are used as given.
"""

from __future__ import annotations

from rkfixed.precision import extended_precision, rational as q
from rkfixed.tableau._types import ConvexTableau


def _ssprk53() -> ConvexTableau:
    return ConvexTableau(
        name="ssprk53",
        order=3,
        alpha=(
            (1,),
            (0, 1),
            ("0.355909775063327", 0, "0.644090224936674"),
            ("0.367933791638137", 0, 0, "0.632066208361863"),
            (0, 0, "0.237593836598569", 0, "0.762406163401431"),
        ),
        beta=(
            ("0.377268915331368",),
            (0, "0.377268915331368"),
            (0, 0, "0.242995220537396"),
            (0, 0, 0, "0.238458932846290"),
            (0, 0, 0, 0, "0.287632146308408"),
        ),
        cfl=2.65,
        description="Spiteri-Ruuth five-stage third-order SSP method",
        references=("R. J. Spiteri and S. J. Ruuth, SIAM J. Numer. Anal. 40 (2002) 469-491",),
    )


def _ssprk54() -> ConvexTableau:
    return ConvexTableau(
        name="ssprk54",
        order=4,
        alpha=(
            (1,),
            ("0.444370493651235", "0.555629506348765"),
            ("0.620101851488403", 0, "0.379898148511597"),
            ("0.178079954393132", 0, 0, "0.821920045606868"),
            (0, 0, "0.517231671970585", "0.096059710526147", "0.386708617503269"),
        ),
        beta=(
            ("0.391752226571890",),
            (0, "0.368410593050371"),
            (0, 0, "0.251891774271694"),
            (0, 0, 0, "0.544974750228521"),
            (0, 0, 0, "0.063692468666290", "0.226007483236906"),
        ),
        cfl=1.508,
        description="Spiteri-Ruuth five-stage fourth-order SSP method",
        references=("R. J. Spiteri and S. J. Ruuth, Math. Comput. Simul. 62 (2003) 125-135",),
    )


def tableaux() -> tuple[ConvexTableau, ...]:
    with extended_precision():
        return (
            ConvexTableau(
                name="jiang_shu4_ls",
                order=4,
                alpha=(
                    (1,),
                    (1, 0),
                    (1, 0, 0),
                    (q(-1, 3), q(1, 3), q(2, 3), q(1, 3)),
                ),
                beta=(
                    (q(1, 2),),
                    (0, q(1, 2)),
                    (0, 0, 1),
                    (0, 0, 0, q(1, 6)),
                ),
                description="Jiang-Shu low-storage form of the classic fourth-order method",
                references=("G.-S. Jiang and C.-W. Shu, J. Comput. Phys. 126 (1996) 202-228",),
            ),
            ConvexTableau(
                name="ssprk2",
                order=2,
                alpha=((1,), (q(1, 2), q(1, 2))),
                beta=((1,), (0, q(1, 2))),
                cfl=1.0,
                description="Shu-Osher two-stage second-order SSP method",
                references=("C.-W. Shu and S. Osher, J. Comput. Phys. 77 (1988) 439-471",),
            ),
            ConvexTableau(
                name="ssprk3",
                order=3,
                alpha=((1,), (q(3, 4), q(1, 4)), (q(1, 3), 0, q(2, 3))),
                beta=((1,), (0, q(1, 4)), (0, 0, q(2, 3))),
                cfl=1.0,
                description="Shu-Osher three-stage third-order SSP method",
                references=("C.-W. Shu and S. Osher, J. Comput. Phys. 77 (1988) 439-471",),
            ),
            _ssprk53(),
            _ssprk54(),
        )
