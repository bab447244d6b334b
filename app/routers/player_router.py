from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas import PlayerCreate, PlayerOut
from app.services.player_service import get_all, create, get_by_id, delete

router = APIRouter(prefix="/players", tags=["players"])

# Player listing
@router.get("", response_model=List[PlayerOut])
def list_players(db: Session = Depends(get_db)):
    return get_all(db)

@router.get("/{player_id}", response_model=PlayerOut)
def get_player(player_id: str, db: Session = Depends(get_db)):
    return get_by_id(db, player_id)

@router.post("", response_model=PlayerOut, status_code=201)
def create_player(body: PlayerCreate, db: Session = Depends(get_db)):
    """Create a player without a team.

    Such players cannot take part in a match: teams create their own two
    players through `POST /teams`, and no endpoint moves a player into a team.
    """
    return create(db, body.name)

@router.delete("/{player_id}", status_code=204)
def delete_player(player_id: str, db: Session = Depends(get_db)):
    delete(db, player_id)
    return Response(status_code=204)
