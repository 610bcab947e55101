from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..db import get_db

router = APIRouter(tags=["matches"])


@router.get("/matches", response_model=List[schemas.MatchRead])
def matches_list(round_id: Optional[int] = None, db: Session = Depends(get_db)):
    return crud.get_matches(db, round_id)


@router.post("/matches", response_model=schemas.MatchRead, status_code=201)
def match_create(data: schemas.MatchCreate, db: Session = Depends(get_db)):
    return crud.create_match(db, data)


@router.patch("/matches/{match_id}", response_model=schemas.MatchRead)
def match_update(match_id: int, data: schemas.MatchUpdate, db: Session = Depends(get_db)):
    return crud.update_match(db, match_id, data)


@router.delete("/matches/{match_id}")
def match_delete(match_id: int, db: Session = Depends(get_db)):
    crud.delete_match(db, match_id)
    return {"success": True}


@router.get("/matches/{match_id}/status", response_model=schemas.MatchStatusRead)
def match_status(match_id: int, db: Session = Depends(get_db)):
    return crud.get_match_status(db, match_id)


@router.post("/matches/{match_id}/refresh", response_model=schemas.MatchStatusRead)
def match_refresh(match_id: int, db: Session = Depends(get_db)):
    return crud.refresh_match_status(db, match_id)


# ---------------------------- individual (final day) ----------------------------

@router.post("/individual-matches", response_model=schemas.IndividualMatchRead, status_code=201)
def individual_match_create(data: schemas.IndividualMatchCreate, db: Session = Depends(get_db)):
    return crud.create_individual_match(db, data)


@router.get("/individual-matches/{round_id}", response_model=List[schemas.IndividualMatchRead])
def individual_matches_list(round_id: int, db: Session = Depends(get_db)):
    return crud.get_individual_matches(db, round_id)


@router.get("/individual-matches/{match_id}/status", response_model=schemas.MatchStatusRead)
def individual_match_status(match_id: int, db: Session = Depends(get_db)):
    return crud.get_individual_match_status(db, match_id)


@router.post("/individual-matches/{match_id}/refresh", response_model=schemas.MatchStatusRead)
def individual_match_refresh(match_id: int, db: Session = Depends(get_db)):
    return crud.refresh_individual_match_status(db, match_id)
