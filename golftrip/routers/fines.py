from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..db import get_db
from ..fines import FINE_CATALOG

router = APIRouter(prefix="/fines", tags=["fines"])


@router.get("/catalog", response_model=List[schemas.FineTypeRead])
def fines_catalog():
    return list(FINE_CATALOG)


@router.get("/summary")
def fines_summary(db: Session = Depends(get_db)):
    return crud.fines_summary(db)


@router.get("/player/{player_id}", response_model=List[schemas.FineRead])
def player_fines(player_id: int, db: Session = Depends(get_db)):
    return crud.get_fines_for_player(db, player_id)


@router.get("", response_model=List[schemas.FineRead])
def fines_list(db: Session = Depends(get_db)):
    return crud.get_fines(db)


@router.post("", response_model=schemas.FineRead, status_code=201)
def fine_create(data: schemas.FineCreate, db: Session = Depends(get_db)):
    return crud.create_fine(db, data)
