from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas import SetOut
from app.services import match_service

router = APIRouter(prefix="/sets", tags=["sets"])


@router.get("", response_model=List[SetOut])
def list_sets(db: Session = Depends(get_db)):
    return match_service.get_all_sets(db)


@router.get("/{set_id}", response_model=SetOut)
def get_set(set_id: str, db: Session = Depends(get_db)):
    return match_service.get_set_by_id(db, set_id)
