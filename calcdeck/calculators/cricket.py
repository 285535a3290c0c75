"""
Cricket statistics.

Overs are entered in cricket notation: ``4.3`` is four overs and three
balls, so the digit after the point must be 0-5.
"""

from typing import Any, Dict, Optional

from ..helpers import _choice, _clamp, _err, _int, _make_calc_entry, _num, _ok, _tier

LABELS = ("excellent", "very-good", "good", "average", "below-average")
POOR = "poor"


# ── Helpers ──────────────────────────────────────────────────────────────────

def _overs_to_decimal(overs: float) -> Optional[float]:
    """4.3 -> 4.5; None when the ball part is not 0-5."""
    whole = int(overs)
    balls = round((overs - whole) * 10)
    if balls > 5:
        return None
    return whole + balls / 6


def _labelled(value: float, cuts: Any, ascending: bool = False, strict: bool = False) -> str:
    return _tier(value, list(zip(cuts, LABELS)), POOR, ascending=ascending, strict=strict)


def _bad_overs(field: str) -> Dict[str, Any]:
    return _err("Overs must use cricket notation with 0-5 balls after the point", field)


# 1. Batting Average ──────────────────────────────────────────────────────────
def run_batting_average(v: Dict[str, Any]) -> Dict[str, Any]:
    runs = v["runs"]
    outs = v["dismissals"]
    if outs == 0:
        return _ok(float(runs), ["no dismissals: average = runs"], tier="excellent", not_outs_only=True)
    avg = runs / outs
    return _ok(avg, ["average = runs / dismissals"], tier=_labelled(avg, (60, 45, 35, 25, 15)))


# 2. Bowling Average ──────────────────────────────────────────────────────────
def run_bowling_average(v: Dict[str, Any]) -> Dict[str, Any]:
    runs = v["runs_conceded"]
    wickets = v["wickets"]
    if wickets == 0:
        return _ok(float(runs), ["no wickets: average = runs conceded"], tier=POOR)
    avg = runs / wickets
    tier = _tier(avg, [(20, "excellent"), (25, "very-good"), (30, "good"), (40, "average")],
                 "below-average", ascending=True, strict=True)
    extra: Dict[str, Any] = {}
    if v["overs"]:
        overs = _overs_to_decimal(v["overs"])
        if overs is None:
            return _bad_overs("overs")
        extra["bowling_strike_rate"] = overs * 6 / wickets
    return _ok(avg, ["average = runs conceded / wickets"], tier=tier, **extra)


# 3. Economy Rate ─────────────────────────────────────────────────────────────
_ECONOMY_CUTS = {
    "t20": (6, 7, 8, 9, 10),
    "test": (2.5, 3, 3.5, 4, 4.5),
    "odi": (4, 4.5, 5, 5.5, 6),
}


def run_economy_rate(v: Dict[str, Any]) -> Dict[str, Any]:
    overs = _overs_to_decimal(v["overs"])
    if overs is None:
        return _bad_overs("overs")
    if overs == 0:
        return _ok(0.0, ["no overs bowled"], tier=POOR)
    econ = v["runs_conceded"] / overs
    return _ok(econ, ["economy = runs conceded / overs"],
               tier=_labelled(econ, _ECONOMY_CUTS[v["format"]], ascending=True), balls=round(overs * 6))


# 4. Fantasy Points ───────────────────────────────────────────────────────────
def run_fantasy_points(v: Dict[str, Any]) -> Dict[str, Any]:
    balls = v["balls_faced"]
    overs = _overs_to_decimal(v["overs"])
    if overs is None:
        return _bad_overs("overs")
    if balls == 0 and overs == 0:
        return _ok(0, ["no batting or bowling"], tier=POOR, batting=0, bowling=0, fielding=0)

    batting = 0
    if balls > 0:
        runs = v["runs"]
        sr = runs / balls * 100
        batting = runs
        if sr >= 200:
            batting += 6
        elif sr >= 150:
            batting += 4
        elif sr >= 100:
            batting += 2
        if runs >= 100:
            batting += 16
        elif runs >= 50:
            batting += 8
        elif runs >= 30:
            batting += 4

    bowling = 0
    if overs > 0:
        wickets = v["wickets"]
        econ = v["runs_conceded"] / overs
        bowling = 25 * wickets
        if econ <= 4:
            bowling += 6
        elif econ <= 5:
            bowling += 4
        elif econ <= 6:
            bowling += 2
        if wickets >= 5:
            bowling += 16
        elif wickets >= 4:
            bowling += 8
        elif wickets >= 3:
            bowling += 4
        bowling += 4 * v["maidens"]

    fielding = 8 * v["catches"] + 12 * v["stumpings"] + 6 * v["run_outs"]
    total = batting + bowling + fielding + v["bonus_points"]
    return _ok(total, ["batting + bowling + fielding + bonus"], tier=_labelled(total, (100, 75, 50, 25, 10)),
               batting=batting, bowling=bowling, fielding=fielding)


# 5. Net Run Rate ─────────────────────────────────────────────────────────────
_NRR_CUTS = {"t20": (1.5, 1.0, 0.5, 0, -0.5), "odi": (1.0, 0.5, 0.2, 0, -0.5)}


def run_net_run_rate(v: Dict[str, Any]) -> Dict[str, Any]:
    faced = _overs_to_decimal(v["overs_faced"])
    bowled = _overs_to_decimal(v["overs_bowled"])
    for field, overs in (("overs_faced", faced), ("overs_bowled", bowled)):
        if overs is None:
            return _bad_overs(field)
        if overs == 0:
            return _err("Overs must be greater than zero", field)
    scoring = v["runs_scored"] / faced
    conceding = v["runs_conceded"] / bowled
    nrr = scoring - conceding
    return _ok(nrr, ["NRR = runs scored / overs faced - runs conceded / overs bowled"],
               tier=_labelled(nrr, _NRR_CUTS[v["format"]]), scoring_rate=scoring, conceding_rate=conceding)


# 6. Player Performance Index ─────────────────────────────────────────────────
def run_player_performance_index(v: Dict[str, Any]) -> Dict[str, Any]:
    overs = _overs_to_decimal(v["overs"])
    if overs is None:
        return _bad_overs("overs")
    runs, balls = v["runs"], v["balls_faced"]
    wickets, conceded = v["wickets"], v["runs_conceded"]

    bat_avg = runs / max(1, balls / 6)
    sr = runs / balls * 100 if balls else 0.0
    batting = 0.6 * min(100, bat_avg / 50 * 100) + 0.4 * min(100, sr / 150 * 100)

    bowling = 0.0
    if overs > 0:
        bowl_avg = conceded / wickets if wickets else conceded
        econ = conceded / overs
        bowling = (0.4 * _clamp(100 - bowl_avg / 50 * 100, 0, 100)
                   + 0.3 * _clamp(100 - econ / 10 * 100, 0, 100)
                   + 0.3 * min(100, wickets / 5 * 100))

    dismissals = v["catches"] + v["stumpings"] + v["run_outs"]
    fielding = min(100, dismissals / 10 * 100)
    overall = 0.4 * batting + 0.4 * bowling + 0.2 * fielding
    return _ok(overall, ["overall = 0.4 batting + 0.4 bowling + 0.2 fielding"],
               tier=_labelled(overall, (80, 65, 50, 35, 20)),
               batting_index=batting, bowling_index=bowling, fielding_index=fielding)


# 7. Required Run Rate ────────────────────────────────────────────────────────
def run_required_run_rate(v: Dict[str, Any]) -> Dict[str, Any]:
    remaining = _overs_to_decimal(v["overs_remaining"])
    played = _overs_to_decimal(v["overs_played"])
    if remaining is None:
        return _bad_overs("overs_remaining")
    if played is None:
        return _bad_overs("overs_played")
    balls_left = v["balls_remaining"] or round(remaining * 6)
    if remaining == 0 or balls_left == 0:
        return _err("No overs remaining", "overs_remaining")
    required = max(0, v["target"] - v["runs_scored"])
    rrr = required / remaining
    current = v["runs_scored"] / played if played else 0.0
    diff = rrr - current
    tier = _labelled(diff, (-2, -1, 0, 1, 2), ascending=True)
    return _ok(
        rrr,
        ["RRR = runs needed / overs left", "required SR = runs needed / balls left * 100"],
        tier=tier,
        runs_required=required,
        required_strike_rate=required / balls_left * 100,
        current_run_rate=current,
        rate_difference=diff,
        wickets_in_hand=10 - v["wickets_lost"],
    )


# 8. Strike Rate ──────────────────────────────────────────────────────────────
_SR_CUTS = {
    "t20": (150, 130, 110, 100, 80),
    "test": (80, 65, 50, 40, 30),
    "odi": (120, 100, 85, 70, 55),
}


def run_strike_rate(v: Dict[str, Any]) -> Dict[str, Any]:
    balls = v["balls_faced"]
    if balls == 0:
        return _ok(0.0, ["no balls faced"], tier=POOR)
    sr = v["runs"] / balls * 100
    return _ok(sr, ["SR = runs / balls * 100"], tier=_labelled(sr, _SR_CUTS[v["format"]]))


# 9. Team Run Rate ────────────────────────────────────────────────────────────
_TEAM_RR_CUTS = {
    "t20": (9, 8, 7, 6, 5),
    "test": (4, 3.5, 3, 2.5, 2),
    "odi": (6.5, 5.5, 4.5, 3.5, 2.5),
}
_FORMAT_OVERS = {"t20": 20, "odi": 50}
TEST_DAY_OVERS = 90


def run_team_run_rate(v: Dict[str, Any]) -> Dict[str, Any]:
    overs = _overs_to_decimal(v["overs"])
    if overs is None:
        return _bad_overs("overs")
    if overs == 0:
        return _err("Overs faced must be greater than zero", "overs")
    fmt = v["format"]
    runs = v["runs"]
    rr = runs / overs
    balls = v["balls_faced"] or round(overs * 6)
    if fmt == "test":
        overs_left = float(TEST_DAY_OVERS)
    else:
        overs_left = max(0.0, _FORMAT_OVERS[fmt] - overs)
    return _ok(
        rr,
        ["RR = runs / overs", "projected = runs + RR * overs remaining"],
        tier=_labelled(rr, _TEAM_RR_CUTS[fmt]),
        strike_rate=runs / balls * 100,
        wickets_remaining=10 - v["wickets_lost"],
        overs_remaining=overs_left,
        projected_score=runs + rr * overs_left,
    )


# ── Registry ────────────────────────────────────────────────────────────────

_CATEGORY = "cricket"


def _count(field_id: str, label: str, required: bool = True, **bounds: Any) -> Any:
    bounds = bounds or {"ge": 0}
    return _int(field_id, label, required=required, default=None if required else 0, **bounds)


def _overs(field_id: str = "overs", label: str = "Overs", required: bool = True) -> Any:
    return _num(field_id, label, "overs", required=required, default=None if required else 0.0, ge=0, le=500)


def _format(options: Any = ("t20", "odi", "test"), default: str = "t20") -> Any:
    return _choice("format", "Match format", list(options), default)


CALCULATORS: Dict[str, Dict[str, Any]] = {
    "batting_average": _make_calc_entry(
        "batting_average", run_batting_average, "Batting Average Calculator",
        "Runs per dismissal.",
        _CATEGORY,
        [_count("runs", "Runs scored"), _count("dismissals", "Dismissals")],
        tags=["batting"],
        related=["strike_rate", "player_performance_index"],
    ),
    "bowling_average": _make_calc_entry(
        "bowling_average", run_bowling_average, "Bowling Average Calculator",
        "Runs conceded per wicket.",
        _CATEGORY,
        [_count("runs_conceded", "Runs conceded"), _count("wickets", "Wickets taken"),
         _overs(required=False)],
        tags=["bowling"],
        related=["economy_rate"],
    ),
    "economy_rate": _make_calc_entry(
        "economy_rate", run_economy_rate, "Bowling Economy Rate",
        "Runs conceded per over, rated for the format.",
        _CATEGORY,
        [_count("runs_conceded", "Runs conceded"), _overs("overs", "Overs bowled"), _format()],
        tags=["bowling"],
        related=["bowling_average"],
    ),
    "fantasy_points": _make_calc_entry(
        "fantasy_points", run_fantasy_points, "Fantasy Cricket Points",
        "T20 fantasy points from batting, bowling and fielding.",
        _CATEGORY,
        [_count("runs", "Runs scored"), _count("balls_faced", "Balls faced"),
         _count("wickets", "Wickets taken"), _count("runs_conceded", "Runs conceded"),
         _overs("overs", "Overs bowled"),
         _count("catches", "Catches", required=False), _count("stumpings", "Stumpings", required=False),
         _count("run_outs", "Run outs", required=False), _count("maidens", "Maiden overs", required=False),
         _count("bonus_points", "Bonus points", required=False, ge=-1000, le=1000)],
        tags=["fantasy"],
        related=["player_performance_index"],
    ),
    "net_run_rate": _make_calc_entry(
        "net_run_rate", run_net_run_rate, "Net Run Rate Calculator",
        "Tournament net run rate.",
        _CATEGORY,
        [_count("runs_scored", "Runs scored"), _overs("overs_faced", "Overs faced"),
         _count("runs_conceded", "Runs conceded"), _overs("overs_bowled", "Overs bowled"),
         _format(("t20", "odi"))],
        tags=["team", "tournament"],
        related=["team_run_rate"],
    ),
    "player_performance_index": _make_calc_entry(
        "player_performance_index", run_player_performance_index, "Player Performance Index",
        "Weighted batting, bowling and fielding index out of 100.",
        _CATEGORY,
        [_count("runs", "Runs scored"), _count("balls_faced", "Balls faced"),
         _count("wickets", "Wickets taken"), _count("runs_conceded", "Runs conceded"),
         _overs("overs", "Overs bowled"),
         _count("catches", "Catches", required=False), _count("stumpings", "Stumpings", required=False),
         _count("run_outs", "Run outs", required=False)],
        tags=["all-rounder"],
        related=["fantasy_points"],
    ),
    "required_run_rate": _make_calc_entry(
        "required_run_rate", run_required_run_rate, "Required Run Rate",
        "Runs per over needed to reach a target.",
        _CATEGORY,
        [_count("target", "Target"), _count("runs_scored", "Runs scored"),
         _overs("overs_played", "Overs played"), _overs("overs_remaining", "Overs remaining"),
         _count("wickets_lost", "Wickets lost", ge=0, le=10),
         _count("balls_remaining", "Balls remaining", required=False),
         _format()],
        tags=["chase", "team"],
        related=["team_run_rate"],
    ),
    "strike_rate": _make_calc_entry(
        "strike_rate", run_strike_rate, "Strike Rate Calculator",
        "Runs per 100 balls, rated for the format.",
        _CATEGORY,
        [_count("runs", "Runs scored"), _count("balls_faced", "Balls faced"), _format()],
        tags=["batting"],
        related=["batting_average"],
    ),
    "team_run_rate": _make_calc_entry(
        "team_run_rate", run_team_run_rate, "Team Run Rate",
        "Current run rate with a projected total.",
        _CATEGORY,
        [_count("runs", "Runs scored"), _overs("overs", "Overs faced"),
         _count("wickets_lost", "Wickets lost", ge=0, le=10),
         _count("balls_faced", "Balls faced", required=False),
         _format()],
        tags=["team"],
        related=["required_run_rate", "net_run_rate"],
    ),
}
