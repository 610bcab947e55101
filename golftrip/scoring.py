"""Round-level scoring over an immutable snapshot.

A RoundSnapshot is everything the scoring rules need for one round, loaded
once by crud.load_round_snapshot. Every function here takes the snapshot
explicitly and is a pure function of it.
"""
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .golf_calc import (
    MODE_STABLEFORD,
    MODE_STROKE,
    BetterballResult,
    LeaderboardEntry,
    RankedEntry,
    betterball_total,
    capped_gross,
    combine_entries,
    hole_winners,
    match_status,
    net_score,
    rank_leaderboard,
    score_label,
    stableford_points,
    strokes_received,
)

MODE_NET = "net"
ROUND_MODES = (MODE_STROKE, MODE_NET, MODE_STABLEFORD)


@dataclass(frozen=True)
class HoleInfo:
    number: int
    par: int
    stroke_index: int
    yardage: Optional[int] = None


@dataclass(frozen=True)
class CourseInfo:
    id: int
    name: str
    par_total: int
    holes: Tuple[HoleInfo, ...]

    def hole(self, number: int) -> Optional[HoleInfo]:
        for h in self.holes:
            if h.number == number:
                return h
        return None


@dataclass(frozen=True)
class PlayerInfo:
    id: int
    name: str
    handicap: int = 0
    team_id: Optional[int] = None


@dataclass(frozen=True)
class ScoreInfo:
    player_id: int
    hole: int
    gross: int
    three_putt: bool = False
    picked_up: bool = False
    in_water: bool = False
    in_bunker: bool = False


@dataclass(frozen=True)
class MatchInfo:
    id: int
    team_a_id: int
    team_b_id: int
    pair_a: Tuple[int, int]
    pair_b: Tuple[int, int]


@dataclass(frozen=True)
class IndividualMatchInfo:
    id: int
    player_a_id: int
    player_b_id: int


@dataclass(frozen=True)
class RoundSnapshot:
    round_id: int
    course: CourseInfo
    players: Mapping[int, PlayerInfo]
    scores: Mapping[Tuple[int, int], ScoreInfo]  # (player_id, hole) -> score
    participant_ids: Tuple[int, ...] = ()
    day: Optional[int] = None
    format: str = "stroke"
    max_strokes_over_par: Optional[int] = None
    matches: Tuple[MatchInfo, ...] = ()
    individual_matches: Tuple[IndividualMatchInfo, ...] = ()

    def player_scores(self, player_id: int) -> List[ScoreInfo]:
        return sorted(
            (s for (pid, _), s in self.scores.items() if pid == player_id),
            key=lambda s: s.hole,
        )


@dataclass(frozen=True)
class HoleResult:
    hole: int
    par: int
    gross: int
    strokes: int
    net: int
    points: int


@dataclass(frozen=True)
class MatchResult:
    match_id: int
    label: str
    leader: str
    a_won: int
    b_won: int
    holes_played: int
    a_points: int
    b_points: int
    per_hole: Dict[int, Tuple[int, int]] = field(default_factory=dict)


# ---------------------------------------------------------------------------------
# ------------------------------- Per-hole scoring --------------------------------
# ---------------------------------------------------------------------------------

def hole_result(snapshot: RoundSnapshot, player_id: int, hole: int) -> Optional[HoleResult]:
    score = snapshot.scores.get((player_id, hole))
    hole_info = snapshot.course.hole(hole)
    player = snapshot.players.get(player_id)
    if score is None or hole_info is None or player is None:
        return None

    strokes = strokes_received(player.handicap, hole_info.stroke_index)
    gross = capped_gross(score.gross, hole_info.par, strokes, snapshot.max_strokes_over_par)
    return HoleResult(
        hole=hole,
        par=hole_info.par,
        gross=gross,
        strokes=strokes,
        net=net_score(gross, strokes),
        points=stableford_points(gross, hole_info.par, strokes),
    )


def player_hole_results(snapshot: RoundSnapshot, player_id: int) -> Dict[int, HoleResult]:
    results = {}
    for score in snapshot.player_scores(player_id):
        r = hole_result(snapshot, player_id, score.hole)
        if r is not None:
            results[score.hole] = r
    return results


def player_hole_points(snapshot: RoundSnapshot, player_id: int) -> Dict[int, int]:
    return {h: r.points for h, r in player_hole_results(snapshot, player_id).items()}


def compute_hole_stableford(snapshot: RoundSnapshot, player_id: int, hole: int) -> int:
    r = hole_result(snapshot, player_id, hole)
    return r.points if r is not None else 0


def compute_betterball_score(snapshot: RoundSnapshot, player1_id: int, player2_id: int) -> BetterballResult:
    return betterball_total(
        player_hole_points(snapshot, player1_id),
        player_hole_points(snapshot, player2_id),
    )


# ---------------------------------------------------------------------------------
# -------------------------------- Match status ----------------------------------
# ---------------------------------------------------------------------------------

def _pair_points(snapshot: RoundSnapshot, pair: Sequence[int], team_id: int) -> BetterballResult:
    # a player not on the stated team is treated as not having played
    members = [
        pid for pid in pair
        if pid in snapshot.players and snapshot.players[pid].team_id == team_id
    ]
    per_player = [player_hole_points(snapshot, pid) for pid in members]
    while len(per_player) < 2:
        per_player.append({})
    return betterball_total(per_player[0], per_player[1])


def _match_result(match_id: int, a: BetterballResult, b: BetterballResult) -> MatchResult:
    a_won, b_won, played = hole_winners(a.per_hole, b.per_hole)
    status = match_status(a_won, b_won, played)
    holes = sorted(set(a.per_hole) | set(b.per_hole))
    return MatchResult(
        match_id=match_id,
        label=status.label,
        leader=status.leader,
        a_won=a_won,
        b_won=b_won,
        holes_played=played,
        a_points=a.points,
        b_points=b.points,
        per_hole={h: (a.per_hole.get(h, 0), b.per_hole.get(h, 0)) for h in holes},
    )


def compute_match_status(snapshot: RoundSnapshot, match: MatchInfo) -> MatchResult:
    a = _pair_points(snapshot, match.pair_a, match.team_a_id)
    b = _pair_points(snapshot, match.pair_b, match.team_b_id)
    return _match_result(match.id, a, b)


def compute_individual_match_status(snapshot: RoundSnapshot, match: IndividualMatchInfo) -> MatchResult:
    a_points = player_hole_points(snapshot, match.player_a_id)
    b_points = player_hole_points(snapshot, match.player_b_id)
    a = BetterballResult(points=sum(a_points.values()), holes_played=len(a_points), per_hole=a_points)
    b = BetterballResult(points=sum(b_points.values()), holes_played=len(b_points), per_hole=b_points)
    return _match_result(match.id, a, b)


def day_team_totals(snapshots: Iterable[RoundSnapshot]) -> Dict[int, int]:
    """Betterball points per team summed over every match of the given rounds."""
    totals: Dict[int, int] = {}
    for snap in snapshots:
        for match in snap.matches:
            result = compute_match_status(snap, match)
            totals[match.team_a_id] = totals.get(match.team_a_id, 0) + result.a_points
            totals[match.team_b_id] = totals.get(match.team_b_id, 0) + result.b_points
    return totals


# ---------------------------------------------------------------------------------
# -------------------------------- Leaderboards ----------------------------------
# ---------------------------------------------------------------------------------

def player_round_entry(snapshot: RoundSnapshot, player_id: int, mode: str = MODE_STROKE) -> LeaderboardEntry:
    player = snapshot.players[player_id]
    results = player_hole_results(snapshot, player_id).values()
    if mode == MODE_NET:
        total = sum(r.net for r in results)
    else:
        total = sum(r.gross for r in results)
    return LeaderboardEntry(
        key=player_id,
        name=player.name,
        total_strokes=total,
        par_played=sum(r.par for r in results),
        holes_completed=len(results),
        points=sum(r.points for r in results),
        rounds_played=1 if results else 0,
    )


def _ranking_mode(mode: str) -> str:
    return MODE_STABLEFORD if mode == MODE_STABLEFORD else MODE_STROKE


def round_leaderboard(snapshot: RoundSnapshot, mode: str = MODE_STROKE) -> List[RankedEntry]:
    entries = [
        player_round_entry(snapshot, pid, mode)
        for pid in snapshot.participant_ids
        if pid in snapshot.players
    ]
    return rank_leaderboard(entries, _ranking_mode(mode))


def _entries_by_player(snapshots: Iterable[RoundSnapshot], mode: str) -> Dict[int, List[LeaderboardEntry]]:
    by_player: Dict[int, List[LeaderboardEntry]] = {}
    for snap in snapshots:
        for pid in snap.participant_ids:
            if pid not in snap.players:
                continue
            entry = player_round_entry(snap, pid, mode)
            if entry.holes_completed:
                by_player.setdefault(pid, []).append(entry)
    return by_player


def trip_leaderboard(
    snapshots: Sequence[RoundSnapshot],
    players: Mapping[int, PlayerInfo],
    mode: str = MODE_STROKE,
) -> List[RankedEntry]:
    """Cumulative leaderboard over several rounds, against each course's real par."""
    by_player = _entries_by_player(snapshots, mode)
    entries = [
        combine_entries(pid, p.name, by_player.get(pid, []))
        for pid, p in players.items()
    ]
    return rank_leaderboard(entries, _ranking_mode(mode))


def team_leaderboard(
    snapshots: Sequence[RoundSnapshot],
    players: Mapping[int, PlayerInfo],
    teams: Mapping[int, str],
    mode: str = MODE_STROKE,
) -> List[RankedEntry]:
    by_player = _entries_by_player(snapshots, mode)
    entries = []
    for team_id, team_name in teams.items():
        parts = []
        for pid, p in players.items():
            if p.team_id == team_id:
                parts.extend(by_player.get(pid, []))
        entries.append(combine_entries(team_id, team_name, parts))
    return rank_leaderboard(entries, _ranking_mode(mode))


def player_round_stats(snapshot: RoundSnapshot, player_id: int) -> dict:
    results = player_hole_results(snapshot, player_id)
    labels = Counter(score_label(r.gross, r.par) for r in results.values())
    scores = [s for s in snapshot.player_scores(player_id) if s.hole in results]

    return {
        "holes_completed": len(results),
        "gross_total": sum(r.gross for r in results.values()),
        "net_total": sum(r.net for r in results.values()),
        "points_total": sum(r.points for r in results.values()),
        "par_played": sum(r.par for r in results.values()),
        "hole_in_one": labels["hole_in_one"],
        "albatross": labels["albatross"],
        "eagles": labels["eagle"],
        "birdies": labels["birdie"],
        "pars": labels["par"],
        "bogeys": labels["bogey"],
        "double_bogeys": labels["double_bogey"],
        "worse": labels["worse"],
        "three_putts": sum(1 for s in scores if s.three_putt),
        "picked_up": sum(1 for s in scores if s.picked_up),
        "in_water": sum(1 for s in scores if s.in_water),
        "in_bunker": sum(1 for s in scores if s.in_bunker),
    }
