"""Full-storage methods of order 6 to 10."""

from __future__ import annotations

from rkfixed.precision import extended_precision, rational as q, sqrt
from rkfixed.tableau._types import ButcherTableau


def _over(denominator: int, *numerators: int) -> tuple:
    """Row of rationals sharing one denominator."""
    return tuple(q(n, denominator) for n in numerators)


def _dense(sparse_rows) -> tuple:
    """Expand rows given as ``{column: value}`` into strictly lower-triangular rows."""
    return tuple(
        tuple(row.get(j, 0) for j in range(i)) for i, row in enumerate(sparse_rows)
    )


def _butcher6() -> ButcherTableau:
    return ButcherTableau(
        name="butcher6",
        order=6,
        a=(
            (),
            (q(1, 3),),
            (0, q(2, 3)),
            (q(1, 12), q(1, 3), q(-1, 12)),
            (q(-1, 16), q(9, 8), q(-3, 16), q(-3, 8)),
            (0, q(9, 8), q(-3, 8), q(-3, 4), q(1, 2)),
            (q(9, 44), q(-9, 11), q(63, 44), q(18, 11), 0, q(-16, 11)),
        ),
        b=(q(11, 120), 0, q(27, 40), q(27, 40), q(-4, 15), q(-4, 15), q(11, 120)),
        c=(0, q(1, 3), q(2, 3), q(1, 3), q(1, 2), q(1, 2), 1),
        description="Butcher seven-stage sixth-order method",
        references=("J. C. Butcher, J. Austral. Math. Soc. 4 (1964) 179-194",),
    )


def _shanks7() -> ButcherTableau:
    return ButcherTableau(
        name="shanks7",
        order=7,
        a=(
            (),
            (q(2, 9),),
            _over(12, 1, 3),
            _over(8, 1, 0, 3),
            _over(216, 23, 0, 21, -8),
            _over(729, -4136, 0, -13584, 5264, 13104),
            _over(151632, 105131, 0, 302016, -107744, -284256, 1701),
            _over(1375920, -775229, 0, -2770950, 1735136, 2547216, 81891, 328536),
            _over(251888, 23569, 0, -122304, -20384, 695520, -99873, -466560, 241920),
        ),
        b=_over(2140320, 110201, 0, 0, 767936, 635040, -59049, -59049, 635040, 110201),
        c=(0, q(2, 9), q(1, 3), q(1, 2), q(1, 6), q(8, 9), q(1, 9), q(5, 6), 1),
        description="Shanks nine-stage seventh-order method",
        references=("E. B. Shanks, Math. Comp. 20 (1966) 21-38",),
    )


def _shanks8_10() -> ButcherTableau:
    return ButcherTableau(
        name="shanks8_10",
        order=8,
        a=(
            (),
            (q(4, 27),),
            _over(18, 1, 3),
            _over(12, 1, 0, 3),
            _over(8, 1, 0, 0, 3),
            _over(54, 13, 0, -27, 42, 8),
            _over(4320, 389, 0, -54, 966, -824, 243),
            _over(20, -231, 0, 81, -1164, 656, -122, 800),
            _over(288, -127, 0, 18, -678, 456, -9, 576, 4),
            _over(820, 1481, 0, -81, 7104, -3376, 72, -5040, -60, 720),
        ),
        b=_over(840, 41, 0, 0, 27, 272, 27, 216, 0, 216, 41),
        c=(0, q(4, 27), q(2, 9), q(1, 3), q(1, 2), q(2, 3), q(1, 6), 1, q(5, 6), 1),
        description="Shanks ten-stage eighth-order method",
        references=("E. B. Shanks, Math. Comp. 20 (1966) 21-38",),
    )


def _shanks8_12() -> ButcherTableau:
    return ButcherTableau(
        name="shanks8_12",
        order=8,
        a=(
            (),
            (q(1, 9),),
            _over(24, 1, 3),
            _over(16, 1, 0, 3),
            _over(500, 29, 0, 33, -12),
            _over(972, 33, 0, 0, 4, 125),
            _over(36, -21, 0, 0, 76, 125, -162),
            _over(243, -30, 0, 0, -32, 125, 0, 99),
            _over(324, 1175, 0, 0, -3456, -6250, 8424, 242, -27),
            _over(324, 293, 0, 0, -852, -1375, 1836, -118, 162, 324),
            _over(1620, 1303, 0, 0, -4260, -6875, 9990, 1030, 0, 0, 162),
            _over(4428, -8595, 0, 0, 30720, 48750, -66096, 378, -729, -1944, -1296, 3240),
        ),
        b=_over(840, 41, 0, 0, 0, 0, 216, 272, 27, 27, 36, 180, 41),
        c=(
            0, q(1, 9), q(1, 6), q(1, 4), q(1, 10), q(1, 6),
            q(1, 2), q(2, 3), q(1, 3), q(5, 6), q(5, 6), 1,
        ),
        description="Shanks twelve-stage eighth-order method",
        references=("E. B. Shanks, Math. Comp. 20 (1966) 21-38",),
    )


def _cooper_verner8() -> ButcherTableau:
    r21 = sqrt(21)
    half = q(1, 2)
    lo = half - r21 / 14
    hi = half + r21 / 14
    return ButcherTableau(
        name="cooper_verner8",
        order=8,
        a=_dense((
            {},
            {0: half},
            {0: q(1, 4), 1: q(1, 4)},
            {0: q(1, 7), 1: q(-1, 14) + 3 * r21 / 98, 2: q(3, 7) - 5 * r21 / 49},
            {0: q(11, 84) - r21 / 84, 2: q(2, 7) - 4 * r21 / 63, 3: q(1, 12) + r21 / 252},
            {
                0: q(5, 48) - r21 / 48,
                2: q(1, 4) - r21 / 36,
                3: q(-77, 120) - 7 * r21 / 180,
                4: q(63, 80) + 7 * r21 / 80,
            },
            {
                0: q(5, 21) + r21 / 42,
                2: q(-48, 35) - 92 * r21 / 315,
                3: q(211, 30) + 29 * r21 / 18,
                4: q(-36, 5) - 23 * r21 / 14,
                5: q(9, 5) + 13 * r21 / 35,
            },
            {0: q(1, 14), 4: q(1, 9) + r21 / 42, 5: q(13, 63) + r21 / 21, 6: q(1, 9)},
            {
                0: q(1, 32),
                4: q(91, 576) + 7 * r21 / 192,
                5: q(11, 72),
                6: q(-385, 1152) + 25 * r21 / 384,
                7: q(63, 128) - 13 * r21 / 128,
            },
            {
                0: q(1, 14),
                4: q(1, 9),
                5: q(-733, 2205) + r21 / 15,
                6: q(515, 504) - 37 * r21 / 168,
                7: q(-51, 56) + 11 * r21 / 56,
                8: q(132, 245) - 4 * r21 / 35,
            },
            {
                4: q(-7, 3) - 7 * r21 / 18,
                5: q(-2, 5) - 28 * r21 / 45,
                6: q(-91, 24) + 53 * r21 / 72,
                7: q(301, 72) - 53 * r21 / 72,
                8: q(28, 45) + 28 * r21 / 45,
                9: q(49, 18) + 7 * r21 / 18,
            },
        )),
        b=(q(1, 20), 0, 0, 0, 0, 0, 0, q(49, 180), q(16, 45), q(49, 180), q(1, 20)),
        c=(0, half, half, lo, lo, half, hi, hi, half, lo, 1),
        description="Cooper and Verner eleven-stage eighth-order method",
        references=("G. J. Cooper and J. H. Verner, SIAM J. Numer. Anal. 9 (1972) 389-405",),
    )


# Published to 85 significant digits.
_HAIRER10_C = (
    "0",
    "0.5233584004620047139632937023215170497515953383496781610502942213792083195573343614542",
    "0.5265091001416125727329516734775408259523008085442588621240322448552569517961160776999",
    "0.7897636502124188590994275102163112389284512128163882931860483672828854276941741165498",
    "0.3939235701256720143227738119996521367488350094732736567444747389961242969755195414769",
    "0.7666539862535505911932668693560686601417881683220066628197494388337786524595845606945",
    "0.2897636502124188590994275102163112389284512128163882931860483672828854276941741165498",
    "0.1084776892195672933536461100396272126536495082872530661076180009074872219675135232227",
    "0.3573842417596774518429245029795604640404982636367873040901247917361510345429002009092",
    "0.8825276619647323464255014869796690751828678442680521196637911779185276585194132570617",
    "0.6426157582403225481570754970204395359595017363632126959098752082638489654570997990908",
    "0.1174723380352676535744985130203309248171321557319478803362088220814723414805867429383",
    "0.7666539862535505911932668693560686601417881683220066628197494388337786524595845606945",
    "0.2897636502124188590994275102163112389284512128163882931860483672828854276941741165498",
    "0.5265091001416125727329516734775408259523008085442588621240322448552569517961160776999",
    "0.5233584004620047139632937023215170497515953383496781610502942213792083195573343614542",
    "1",
)

# Rows as {column: value}. a[12][8] and a[16][5] are -1.017... and -1.061...;
# the -10.0... values found in some transcriptions break the row-sum condition.
_HAIRER10_A = (
    {},
    {
        0: "0.5233584004620047139632937023215170497515953383496781610502942213792083195573343614542",
    },
    {
        0: "0.2616697163778127283312402097548997641973627614039327706102102491953717704187699219879",
        1: "0.2648393837637998444017114637226410617549380471403260915138219956598851813773461557120",
    },
    {
        0: "0.1974409125531047147748568775540778097321128032040970732965120918207213569235435291375",
        2: "0.5923227376593141443245706326622334291963384096122912198895362754621640707706305874124",
    },
    {
        0: "0.1973205486287023067036649485978952117578825584337199991656132317825743833021058860612",
        2: "0.2950833340926721918228255598274359230145509784596048092593866299668586683096812321792",
        3: "-0.9848031259570248420371669642567899802359852742005115168052512275330875463626757676351e-1",
    },
    {
        0: "0.1313134173444616536130177999345909470542768366990469474228776563495603985387834598888",
        3: "0.1101544395386396206773696967716892932905881833462590372574439152868807925960672597269",
        4: "0.5251861293704493169028793726497884197969231482767006781394278671973374613247338410788",
    },
    {
        0: "0.1342003418463226002727476951680931444018781918996634475042938727232827990267510411664",
        3: "0.6960887032881160802299824047678314828416281106463280160258778625630871045892118300249",
        4: "0.2504977215703398097125518092509800218006823479445679226772611578145189247821334145350",
        5: "-0.7910231164923596311158543989705934101157374376741710930213845258180034007039221691766",
    },
    {
        0: "0.7221827418966261942005081845517049770474117717860435538167259617193885317787239789517e-1",
        4: "-0.5833632293645610716380606138930651874161115931850840194371530896953184153028603826158e-1",
        5: "0.3047557668574525220174950070294036092519082552287015783049982467857131629284936232933e-2",
        6: "0.9154818029778625587722640290346919759800040787487009688661073123722307869064222735619e-1",
    },
    {
        0: "0.3125500813516617947050120528263476612150928811800844295622424453129979711857118942140e-1",
        5: "0.1091238215424128929294834955207716494619546474783251185719596191189550956073995218558e-3",
        6: "0.1567257586309938356246107465648794708917441337700138495832023584660674808897051732313",
        7: "0.1692943511719750238548830676365254553777828871012866864321262291196648014390164387346",
    },
    {
        0: "0.1190660441466861924216884258080925099509546061156163781761478570338134316043617322173e-1",
        5: "0.2834370820246027860255992266982188665428702252125274101591962479489267620092644600260",
        6: "-0.4163121675706282353724276181356300212164192944619403444080980777942870933794472685216",
        7: "0.2646463339497663668210902091085361027053564926326924812994390366777834273576276339310",
        8: "0.7388498091463228097090708267277348761559649602732109347956391853827232193715322584046",
    },
    {
        0: "0.2340657369133197891470838377984007842503946857756845416362339865999662377057916960290e-1",
        5: "0.9449313018949365401300253095605614324982516623777346096448800625130954018295939047740e-1",
        6: "-0.2728720559019952606363092580665963250433705067252372208829562550632597611313198545757",
        7: "0.2240220461156057997944315522518131846261124699330640294272458923970695162204120486767",
        8: "0.6043814410751657569719347222576085340011863610739072982875214128849988434755301302413",
        9: "-0.3081537692927938090069243415828207929929122273386332605004724686626579706106108533173e-1",
    },
    {
        0: "0.4544377531017616315765389908153096498645890941991961177836633137902353666760633687088e-1",
        5: "-0.1187996671864028586765254219285356343376285990176386474891150929245660355742130860183e-2",
        6: "0.1203565499092261097966188217234362058515446695047694116231895919296441480090125575596e-1",
        7: "0.7512690298764966821627521371565572140275315500656240513504528112598150181393445048666e-1",
        8: "-0.1822092409888012403141186105974838892761579859192182074696828369088959767419077567178e-1",
        9: "-0.2571528540841043468806376221771396205460354181513400383106090430345956162981031278207e-3",
        10: "0.4532078371347468185965270952011502734303744355238469520648294046672741844375709484540e-2",
    },
    {
        0: "0.1767137782592772030958798765711993346076326211800572275450227165783753236705910865492",
        3: "0.1101544395386396206773696967716892932905881833462590372574439152868807925960672597269",
        4: "0.5251861293704493169028793726497884197969231482767006781394278671973374613247338410788",
        5: "-0.4716207672801957948798217912152359376250630852495511063738116933651587031904328351457",
        6: "0.8990310498491875266368990071875152922763468480002185650326986125011485318362907529907",
        7: "-0.7467230306916289638599602008088168117750310724922743198498253813592425510843163068237",
        8: "-1.017101516756146040853186972006065972987027196800421553809421717321497529906933631477",
        9: "0.1263508715195988962951307827687648346421985369266969430473204298972536422365713122404",
        10: "0.5660138272355064270682732249907470012763799581315503842554078250210353407723389384909",
        11: "0.5986492052088624001098038724464832066388402270027708075754868643976463442046741430643",
    },
    {
        0: "0.1277534947480869822694777006880571541639616513225826576695303067404023367054772185702",
        3: "0.6960887032881160802299824047678314828416281106463280160258778625630871045892118300249",
        4: "0.2504977215703398097125518092509800218006823479445679226772611578145189247821334145350",
        5: "-0.7368246436028416867609246757454535374296880219263938462439002090823944915566264811824",
        6: "-0.2778578777108241826773273374900723250222301109862216853553157201018147214465526588169",
        7: "-0.5997526313598403501296884799197753021563938240370770948150479630779446286262003432092",
        8: "0.2024692338910704693500237585621903123505161701229471467587157451308903694383321235511",
        9: "0.5432036982363849780600684652634443601468189969678666775046718813224989883416104871445e-2",
        10: "-0.1074472474155047920101206919894381337125444664272205024314798936418733258920769563370e-1",
        11: "0.6951688484570234004700591858164146072357628221597117426434839740273190245052113679250",
        12: "-0.6246651130952503394431547116755180508600167575701318270645551618021614799102076408562e-1",
    },
    {
        0: "0.2616697163778127283312402097548997641973627614039327706102102491953717704187699219879",
        1: "0.2648393837637998444017114637226410617549380471403260915138219956598851813773461557120",
        5: "-0.1998011270205324791079663580830885049848273745422651189682301346802905866051733476638",
        6: "-0.6510499873052827124921914489683813643155863882516440645794556633240216912803403931627",
        12: "0.1998011270205324791079663580830885049848273745422651189682301346802905866051733476638",
        13: "0.6510499873052827124921914489683813643155863882516440645794556633240216912803403931627",
    },
    {
        0: "0.5233584004620047139632937023215170497515953383496781610502942213792083195573343614542",
        2: "-0.5558812136754302060726143105309293455559184141943321053532734480099926250948077261183",
        14: "0.5558812136754302060726143105309293455559184141943321053532734480099926250948077261183",
    },
    {
        0: "0.5732079543206559103114261705103983656495216504867462310285994428078568043160654439795e-1",
        1: "-0.5499710763899945608115841896290187887481592249811405834035066676393750158953834290913",
        2: "-0.6499374174008749135116607420010890619711618624173024222960650740195874521599402439688",
        5: "-1.061667370401756207240019539023157074172524666307437022389776456477183230723296269940",
        6: "-0.4040156689806358294269682234212183308262562023912486365220642577870402491555711062480e-1",
        7: "-0.1828302366407607254710272774065261039379052622607190097473388370699414811305446343873",
        8: "-0.3336592706492786845666575661828162687906558601961826440714525336287466822150370633233",
        9: "0.3956485423760567568801345107166015519577734440834727480004748180136901286634710478955",
        10: "0.6950570494599735891002099282005158129027126868215679095299345058137097320818106877162",
        11: "0.2714873764573748588377263058539220945263829691804714618529052530298982146739754552950",
        12: "0.6071810560414041202873774349794680164722661545496003750296400378855628528787164400954",
        13: "0.5918636248229842840838104081530739675596239893196764223449596939309288102548549028752",
        14: "0.6499374174008749135116607420010890619711618624173024222960650740195874521599402439688",
        15: "0.5499710763899945608115841896290187887481592249811405834035066676393750158953834290913",
    },
)

_HAIRER10_B = {
    0: "0.3333333333333333333333333333333333333333333333333333333333333333333333333333333333333e-1",
    1: "-0.3846153846153846153846153846153846153846153846153846153846153846153846153846153846154e-1",
    2: "-0.9090909090909090909090909090909090909090909090909090909090909090909090909090909090909e-1",
    5: "-0.1348314606741573033707865168539325842696629213483146067415730337078651685393258426966",
    6: "-0.1111111111111111111111111111111111111111111111111111111111111111111111111111111111111",
    8: "0.2774291885177431765083602625606543404285043197180408363394722409866844803871713937960",
    9: "0.1892374781489234901583064041060123262381623469486258303271944256799821862794952728707",
    10: "0.2774291885177431765083602625606543404285043197180408363394722409866844803871713937960",
    11: "0.1892374781489234901583064041060123262381623469486258303271944256799821862794952728707",
    12: "0.1348314606741573033707865168539325842696629213483146067415730337078651685393258426966",
    13: "0.1111111111111111111111111111111111111111111111111111111111111111111111111111111111111",
    14: "0.9090909090909090909090909090909090909090909090909090909090909090909090909090909090909e-1",
    15: "0.3846153846153846153846153846153846153846153846153846153846153846153846153846153846154e-1",
    16: "0.3333333333333333333333333333333333333333333333333333333333333333333333333333333333333e-1",
}


def _hairer10() -> ButcherTableau:
    return ButcherTableau(
        name="hairer10",
        order=10,
        a=_dense(_HAIRER10_A),
        b=tuple(_HAIRER10_B.get(i, 0) for i in range(17)),
        c=_HAIRER10_C,
        description="Hairer seventeen-stage tenth-order method",
        references=("E. Hairer, IMA J. Appl. Math. 21 (1978) 47-59",),
    )


def tableaux() -> tuple[ButcherTableau, ...]:
    with extended_precision():
        return (
            _butcher6(),
            _shanks7(),
            _shanks8_10(),
            _shanks8_12(),
            _cooper_verner8(),
            _hairer10(),
        )
