from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..db import get_db

router = APIRouter(prefix="/votes", tags=["votes"])


@router.get("", response_model=List[schemas.VoteRead])
def votes_list(db: Session = Depends(get_db)):
    return crud.get_votes(db)


@router.post("", response_model=schemas.VoteRead)
def vote_cast(data: schemas.VoteCast, db: Session = Depends(get_db)):
    return crud.cast_vote(db, data.activity)
