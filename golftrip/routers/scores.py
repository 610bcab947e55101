from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..db import get_db

router = APIRouter(prefix="/scores", tags=["scores"])


@router.get("/all", response_model=List[schemas.ScoreRead])
def scores_all(db: Session = Depends(get_db)):
    return crud.get_all_scores(db)


@router.get("", response_model=List[schemas.ScoreRead])
def scores_list(round_id: Optional[int] = None, db: Session = Depends(get_db)):
    if round_id is None:
        return []
    return crud.get_scores(db, round_id)


@router.post("", response_model=schemas.ScoreRead)
def score_save(data: schemas.ScoreCreate, db: Session = Depends(get_db)):
    return crud.save_score(db, data)


@router.patch("/{score_id}", response_model=schemas.ScoreRead)
def score_update(score_id: int, data: schemas.ScoreUpdate, db: Session = Depends(get_db)):
    return crud.update_score(db, score_id, data)
