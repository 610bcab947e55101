from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..db import get_db

router = APIRouter(prefix="/teams", tags=["teams"])


@router.get("", response_model=List[schemas.TeamRead])
def teams_list(db: Session = Depends(get_db)):
    return crud.get_teams(db)


@router.post("", response_model=schemas.TeamRead, status_code=201)
def team_create(data: schemas.TeamCreate, db: Session = Depends(get_db)):
    return crud.create_team(db, data)


@router.get("/{team_id}", response_model=schemas.TeamRead)
def team_detail(team_id: int, db: Session = Depends(get_db)):
    team = crud.get_team(db, team_id)
    if not team:
        raise HTTPException(status_code=404, detail="Team not found")
    return team


@router.get("/{team_id}/players", response_model=List[schemas.PlayerRead])
def team_players(team_id: int, db: Session = Depends(get_db)):
    return crud.get_team_players(db, team_id)


@router.patch("/{team_id}", response_model=schemas.TeamRead)
def team_update(team_id: int, data: schemas.TeamUpdate, db: Session = Depends(get_db)):
    return crud.update_team(db, team_id, data)


@router.delete("/{team_id}")
def team_delete(team_id: int, db: Session = Depends(get_db)):
    crud.delete_team(db, team_id)
    return {"success": True}
