from typing import List, Literal

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..db import get_db
from ..golf_calc import format_to_par
from ..scoring import (
    compute_betterball_score,
    compute_individual_match_status,
    compute_match_status,
    day_team_totals,
    round_leaderboard,
    team_leaderboard,
    trip_leaderboard,
)

router = APIRouter(prefix="/leaderboards", tags=["leaderboards"])

Mode = Literal["stroke", "net", "stableford"]


def _rows(ranked) -> List[schemas.LeaderboardRow]:
    return [
        schemas.LeaderboardRow(
            position=r.position,
            key=r.entry.key,
            name=r.entry.name,
            total_strokes=r.entry.total_strokes,
            par_played=r.entry.par_played,
            to_par=r.entry.to_par,
            to_par_label=format_to_par(r.entry.to_par),
            holes_completed=r.entry.holes_completed,
            points=r.entry.points,
            rounds_played=r.entry.rounds_played,
        )
        for r in ranked
    ]


@router.get("/rounds/{round_id}", response_model=List[schemas.LeaderboardRow])
def round_board(round_id: int, mode: Mode = "stroke", db: Session = Depends(get_db)):
    snapshot = crud.load_round_snapshot(db, round_id)
    return _rows(round_leaderboard(snapshot, mode))


@router.get("/rounds/{round_id}/betterball", response_model=List[schemas.BetterballRow])
def round_betterball(round_id: int, db: Session = Depends(get_db)):
    snapshot = crud.load_round_snapshot(db, round_id)

    rows = []
    for match in snapshot.matches:
        for team_id, (p1, p2) in ((match.team_a_id, match.pair_a), (match.team_b_id, match.pair_b)):
            result = compute_betterball_score(snapshot, p1, p2)
            rows.append(schemas.BetterballRow(
                match_id=match.id,
                team_id=team_id,
                player1_id=p1,
                player2_id=p2,
                points=result.points,
                holes_played=result.holes_played,
            ))

    # best pairs first; sorted() keeps match order for ties
    return sorted(rows, key=lambda row: -row.points)


@router.get("/trip", response_model=List[schemas.LeaderboardRow])
def trip_board(mode: Mode = "stroke", db: Session = Depends(get_db)):
    snapshots = crud.load_snapshots(db, crud.get_rounds(db))
    return _rows(trip_leaderboard(snapshots, crud.player_infos(db), mode))


@router.get("/teams", response_model=List[schemas.LeaderboardRow])
def teams_board(mode: Mode = "stroke", db: Session = Depends(get_db)):
    snapshots = crud.load_snapshots(db, crud.get_rounds(db))
    return _rows(team_leaderboard(snapshots, crud.player_infos(db), crud.team_names(db), mode))


@router.get("/days/{day}", response_model=schemas.DaySummary)
def day_board(day: int, db: Session = Depends(get_db)):
    snapshots = crud.load_snapshots(db, crud.get_rounds_by_day(db, day))

    matches = []
    individual = []
    for snap in snapshots:
        for match in snap.matches:
            result = compute_match_status(snap, match)
            matches.append(schemas.DayMatchRow(
                round_id=snap.round_id,
                match=schemas.MatchStatusRead.model_validate(result),
                team_a_id=match.team_a_id,
                team_b_id=match.team_b_id,
            ))
        for im in snap.individual_matches:
            result = compute_individual_match_status(snap, im)
            individual.append(schemas.MatchStatusRead.model_validate(result))

    return schemas.DaySummary(
        day=day,
        matches=matches,
        individual_matches=individual,
        team_points=day_team_totals(snapshots),
    )
