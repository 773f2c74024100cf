"""Full-storage fifth-order methods."""

from __future__ import annotations

from rkfixed.precision import extended_precision, rational as q, sqrt
from rkfixed.tableau._types import ButcherTableau


def _luther_konen5() -> ButcherTableau:
    r15 = sqrt(15)
    half = q(1, 2)
    return ButcherTableau(
        name="luther_konen5",
        order=5,
        a=(
            (),
            (q(2, 5),),
            (q(3, 16), q(5, 16)),
            (q(1, 4), q(-5, 4), 2),
            (q(3, 20) - r15 / 100, q(-1, 4), q(3, 5) - 2 * r15 / 25, -r15 / 100),
            (q(-3, 20) - r15 / 20, q(-1, 4), q(3, 5), q(3, 10) - r15 / 20, r15 / 5),
        ),
        b=(0, 0, q(4, 9), 0, q(5, 18), q(5, 18)),
        c=(0, q(2, 5), half, 1, half - r15 / 10, half + r15 / 10),
        description="Luther and Konen fifth-order method (second variant)",
        references=(
            "H. A. Luther and H. P. Konen, SIAM Review 7 (1965) 551-558",
        ),
    )


def tableaux() -> tuple[ButcherTableau, ...]:
    with extended_precision():
        return (
            ButcherTableau(
                name="rk5",
                order=5,
                a=(
                    (),
                    (q(1, 5),),
                    (0, q(2, 5)),
                    (q(9, 4), -5, q(15, 4)),
                    (q(-63, 100), q(9, 5), q(-13, 20), q(2, 25)),
                    (q(-6, 25), q(4, 5), q(2, 15), q(8, 75), 0),
                ),
                b=(q(17, 144), 0, q(25, 36), q(1, 72), q(-25, 72), q(25, 48)),
                c=(0, q(1, 5), q(2, 5), 1, q(3, 5), q(4, 5)),
                description="Nystrom fifth-order method",
                references=("E. J. Nystrom, Acta Soc. Sci. Fenn. 50 (1925) 1-55",),
            ),
            ButcherTableau(
                name="cassity5",
                order=5,
                a=(
                    (),
                    (q(1, 7),),
                    (q(-367, 4088), q(261, 584)),
                    (q(41991, 2044), q(-2493, 73), q(57, 4)),
                    (q(-108413, 196224), q(58865, 65408), q(5, 16), q(265, 1344)),
                    (
                        q(-204419, 58984),
                        q(143829, 58984),
                        q(171, 202),
                        q(2205, 404),
                        q(-432, 101),
                    ),
                ),
                b=(q(1, 9), q(7, 2700), q(413, 810), q(7, 450), q(28, 75), q(-101, 8100)),
                c=(0, q(1, 7), q(5, 14), q(9, 14), q(6, 7), 1),
                description="Cassity fifth-order method",
                references=("C. R. Cassity, SIAM J. Numer. Anal. 3 (1966) 598-606",),
            ),
            ButcherTableau(
                name="lawson5",
                order=5,
                a=(
                    (),
                    (q(1, 12),),
                    (q(-1, 8), q(3, 8)),
                    (q(3, 5), q(-9, 10), q(4, 5)),
                    (q(39, 80), q(-9, 20), q(3, 20), q(9, 16)),
                    (q(-59, 35), q(66, 35), q(48, 35), q(-12, 7), q(8, 7)),
                ),
                b=(q(7, 90), 0, q(16, 45), q(2, 15), q(16, 45), q(7, 90)),
                c=(0, q(1, 12), q(1, 4), q(1, 2), q(3, 4), 1),
                description="Lawson fifth-order method",
                references=("J. D. Lawson, SIAM J. Numer. Anal. 3 (1966) 593-597",),
            ),
            _luther_konen5(),
            ButcherTableau(
                name="shanks5",
                order=5,
                a=(
                    (),
                    (q(1, 9000),),
                    (q(-4047, 10), q(4050, 10)),
                    (q(20241, 8), q(-20250, 8), q(15, 8)),
                    (q(-931041, 81), q(931500, 81), q(-490, 81), q(112, 81)),
                ),
                b=(q(105, 1134), 0, q(500, 1134), q(448, 1134), q(81, 1134)),
                c=(0, q(1, 9000), q(3, 10), q(3, 4), 1),
                description="Shanks five-stage fifth-order method",
                references=("E. B. Shanks, Math. Comp. 20 (1966) 21-38",),
            ),
        )
