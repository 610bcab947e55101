from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..db import get_db

router = APIRouter(prefix="/courses", tags=["courses"])


@router.get("", response_model=List[schemas.CourseRead])
def courses_list(db: Session = Depends(get_db)):
    return crud.get_courses(db)


@router.post("", response_model=schemas.CourseRead, status_code=201)
def course_create(data: schemas.CourseCreate, db: Session = Depends(get_db)):
    return crud.create_course(db, data)


@router.get("/{course_id}", response_model=schemas.CourseRead)
def course_detail(course_id: int, db: Session = Depends(get_db)):
    course = crud.get_course(db, course_id)
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


@router.put("/{course_id}/holes", response_model=schemas.CourseRead)
def holes_save(course_id: int, data: schemas.HoleSet, db: Session = Depends(get_db)):
    return crud.upsert_holes_for_course(db, course_id, data.holes)


@router.delete("/{course_id}")
def course_delete(course_id: int, db: Session = Depends(get_db)):
    crud.delete_course(db, course_id)
    return {"success": True}
