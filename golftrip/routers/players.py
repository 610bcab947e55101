from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..db import get_db

router = APIRouter(prefix="/players", tags=["players"])


@router.get("", response_model=List[schemas.PlayerRead])
def players_list(db: Session = Depends(get_db)):
    return crud.get_players(db)


@router.post("", response_model=schemas.PlayerRead, status_code=201)
def player_create(data: schemas.PlayerCreate, db: Session = Depends(get_db)):
    return crud.create_player(db, data)


@router.get("/{player_id}", response_model=schemas.PlayerRead)
def player_detail(player_id: int, db: Session = Depends(get_db)):
    player = crud.get_player(db, player_id)
    if not player:
        raise HTTPException(status_code=404, detail="Player not found")
    return player


@router.patch("/{player_id}", response_model=schemas.PlayerRead)
def player_update(player_id: int, data: schemas.PlayerUpdate, db: Session = Depends(get_db)):
    return crud.update_player(db, player_id, data)


@router.delete("/{player_id}")
def player_delete(player_id: int, db: Session = Depends(get_db)):
    crud.delete_player(db, player_id)
    return {"success": True}
