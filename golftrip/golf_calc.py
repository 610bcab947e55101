"""Pure golf scoring rules.

Nothing in here touches the database or logs. Every function is total: bad
handicaps collapse to 0 strokes and holes without a recorded score are left
out of aggregates instead of being counted as zero.
"""
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

HOLES_PER_ROUND = 18

LEADER_A = "A"
LEADER_B = "B"
LEADER_TIE = "TIE"

MODE_STROKE = "stroke"
MODE_STABLEFORD = "stableford"
RANKING_MODES = (MODE_STROKE, MODE_STABLEFORD)


# ---------------------------------------------------------------------------------
# ------------------------------- Handicap strokes --------------------------------
# ---------------------------------------------------------------------------------

def coerce_handicap(value) -> int:
    """Whole-stroke course handicap; missing, non-numeric or negative -> 0."""
    try:
        h = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(h) or math.isinf(h) or h <= 0:
        return 0
    # halves round up, 12.5 plays off 13
    return int(math.floor(h + 0.5))


def strokes_received(course_handicap, stroke_index: int) -> int:
    ch = coerce_handicap(course_handicap)
    base = ch // HOLES_PER_ROUND
    extra = 1 if ch % HOLES_PER_ROUND >= stroke_index else 0
    return base + extra


def strokes_received_per_hole(course_handicap, holes) -> Dict[int, int]:
    """
    holes: iterable of objects with .number and .stroke_index
    returns {hole_number: strokes_received}
    """
    return {h.number: strokes_received(course_handicap, h.stroke_index) for h in holes}


# ---------------------------------------------------------------------------------
# ------------------------------- Hole scoring -----------------------------------
# ---------------------------------------------------------------------------------

def net_score(gross: int, strokes: int) -> int:
    return max(1, gross - strokes)


def capped_gross(gross: int, par: int, strokes: int, max_over_par: Optional[int] = None) -> int:
    # pickup rule: net never counts worse than par + max_over_par
    if max_over_par is None:
        return gross
    return min(gross, par + strokes + max_over_par)


def stableford_points(gross: int, par: int, strokes: int = 0) -> int:
    diff = (gross - strokes) - par
    if diff >= 2: return 0
    if diff == 1: return 1
    if diff == 0: return 2
    if diff == -1: return 3
    if diff == -2: return 4
    return 5


def score_label(gross: int, par: int) -> str:
    if gross == 1:
        return "hole_in_one"
    d = gross - par
    if d <= -3: return "albatross"
    if d == -2: return "eagle"
    if d == -1: return "birdie"
    if d == 0: return "par"
    if d == 1: return "bogey"
    if d == 2: return "double_bogey"
    return "worse"


def format_to_par(to_par: int) -> str:
    if to_par == 0:
        return "E"
    return f"+{to_par}" if to_par > 0 else str(to_par)


# ---------------------------------------------------------------------------------
# -------------------------------- Betterball ------------------------------------
# ---------------------------------------------------------------------------------

@dataclass(frozen=True)
class BetterballResult:
    points: int
    holes_played: int
    per_hole: Dict[int, int] = field(default_factory=dict)


def best_ball_per_hole(*values_by_hole: Mapping[int, int], better=max) -> Dict[int, int]:
    """
    Each argument maps hole -> value for one player; a missing hole means no
    recorded score. A hole is kept when at least one player recorded it.
    """
    holes = set()
    for values in values_by_hole:
        holes.update(values)

    best = {}
    for hole in sorted(holes):
        recorded = [values[hole] for values in values_by_hole if hole in values]
        best[hole] = better(recorded)
    return best


def betterball_total(p1_points: Mapping[int, int], p2_points: Mapping[int, int]) -> BetterballResult:
    per_hole = best_ball_per_hole(p1_points, p2_points, better=max)
    return BetterballResult(points=sum(per_hole.values()), holes_played=len(per_hole), per_hole=per_hole)


def better_net_total(p1_nets: Mapping[int, int], p2_nets: Mapping[int, int]) -> BetterballResult:
    per_hole = best_ball_per_hole(p1_nets, p2_nets, better=min)
    return BetterballResult(points=sum(per_hole.values()), holes_played=len(per_hole), per_hole=per_hole)


# ---------------------------------------------------------------------------------
# -------------------------------- Match play ------------------------------------
# ---------------------------------------------------------------------------------

@dataclass(frozen=True)
class MatchStatus:
    label: str
    leader: str


def match_status(a_won: int, b_won: int, holes_played: int) -> MatchStatus:
    lead = a_won - b_won
    if lead == 0:
        return MatchStatus("AS", LEADER_TIE)

    holes_played = min(max(holes_played, 0), HOLES_PER_ROUND)
    remaining = HOLES_PER_ROUND - holes_played
    leader = LEADER_A if lead > 0 else LEADER_B
    margin = abs(lead)

    if margin > remaining:
        return MatchStatus(f"{margin}&{remaining + 1}", leader)
    return MatchStatus(f"{margin}UP", leader)


def hole_winners(a_best: Mapping[int, int], b_best: Mapping[int, int]) -> Tuple[int, int, int]:
    """
    Compare per-hole best-ball points (higher wins). A side with no recorded
    score on a hole its opponents played scores 0 there.
    Returns (a_won, b_won, holes_played).
    """
    a_won = b_won = 0
    holes = set(a_best) | set(b_best)
    for hole in holes:
        a = a_best.get(hole, 0)
        b = b_best.get(hole, 0)
        if a > b:
            a_won += 1
        elif b > a:
            b_won += 1
    return a_won, b_won, len(holes)


# ---------------------------------------------------------------------------------
# -------------------------------- Leaderboards ----------------------------------
# ---------------------------------------------------------------------------------

@dataclass(frozen=True)
class LeaderboardEntry:
    key: int
    name: str
    total_strokes: int = 0
    par_played: int = 0
    holes_completed: int = 0
    points: int = 0
    rounds_played: int = 0

    @property
    def to_par(self) -> int:
        return self.total_strokes - self.par_played


@dataclass(frozen=True)
class RankedEntry:
    position: int
    entry: LeaderboardEntry


def _sort_key(entry: LeaderboardEntry, mode: str):
    no_data = entry.holes_completed == 0
    if mode == MODE_STABLEFORD:
        # same points through fewer holes is the better pace
        return (no_data, -entry.points, entry.holes_completed)
    # level to par: the player further round ranks ahead
    return (no_data, entry.to_par, -entry.holes_completed)


def rank_leaderboard(entries: Iterable[LeaderboardEntry], mode: str = MODE_STROKE) -> List[RankedEntry]:
    if mode not in RANKING_MODES:
        raise ValueError(f"unknown ranking mode {mode!r}")

    # sorted() is stable, so exact ties keep insertion order
    ordered = sorted(entries, key=lambda e: _sort_key(e, mode))

    ranked = []
    prev_key = None
    position = 0
    for i, entry in enumerate(ordered, start=1):
        key = _sort_key(entry, mode)
        if key != prev_key:
            position = i
            prev_key = key
        ranked.append(RankedEntry(position=position, entry=entry))
    return ranked


def combine_entries(key: int, name: str, parts: Sequence[LeaderboardEntry]) -> LeaderboardEntry:
    """Sum several entries (rounds, or team members) into one."""
    return LeaderboardEntry(
        key=key,
        name=name,
        total_strokes=sum(p.total_strokes for p in parts),
        par_played=sum(p.par_played for p in parts),
        holes_completed=sum(p.holes_completed for p in parts),
        points=sum(p.points for p in parts),
        rounds_played=sum(p.rounds_played for p in parts),
    )
