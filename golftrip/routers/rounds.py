from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..db import get_db
from ..scoring import player_round_stats

router = APIRouter(prefix="/rounds", tags=["rounds"])


@router.get("", response_model=List[schemas.RoundRead])
def rounds_list(db: Session = Depends(get_db)):
    return crud.get_rounds(db)


@router.post("", response_model=schemas.RoundRead, status_code=201)
def round_create(data: schemas.RoundCreate, db: Session = Depends(get_db)):
    return crud.create_round(db, data)


@router.get("/{round_id}", response_model=schemas.RoundRead)
def round_detail(round_id: int, db: Session = Depends(get_db)):
    r = crud.get_round(db, round_id)
    if not r:
        raise HTTPException(status_code=404, detail="Round not found")
    return r


@router.delete("/{round_id}")
def round_delete(round_id: int, db: Session = Depends(get_db)):
    crud.delete_round(db, round_id)
    return {"message": "Round deleted successfully"}


@router.post("/{round_id}/clear")
def round_clear(round_id: int, db: Session = Depends(get_db)):
    removed = crud.clear_round_scores(db, round_id)
    return {"message": "Round scores cleared successfully", "removed": removed}


@router.get("/{round_id}/scores", response_model=List[schemas.ScoreRead])
def round_scores(round_id: int, db: Session = Depends(get_db)):
    if not crud.get_round(db, round_id):
        raise HTTPException(status_code=404, detail="Round not found")
    return crud.get_scores(db, round_id)


@router.get("/{round_id}/players/{player_id}/stats", response_model=schemas.PlayerRoundStats)
def round_player_stats(round_id: int, player_id: int, db: Session = Depends(get_db)):
    snapshot = crud.load_round_snapshot(db, round_id)
    if player_id not in snapshot.players:
        raise HTTPException(status_code=404, detail="Player not found")
    stats = player_round_stats(snapshot, player_id)
    return schemas.PlayerRoundStats(round_id=round_id, player_id=player_id, **stats)
