from sqlalchemy.orm import Session
from app.exceptions import InvalidState, NotFound
from app.models.player import Player

def get_all(db: Session):
    return db.query(Player).order_by(Player.name).all()

def get_by_id(db: Session, player_id: str):
    player = db.query(Player).filter(Player.id == player_id).first()
    if not player:
        raise NotFound("player", player_id)
    return player

def create(db: Session, name: str):
    player = Player(name=name.strip(), busy=False)
    db.add(player)
    db.commit()
    db.refresh(player)
    return player

def delete(db: Session, player_id: str):
    player = get_by_id(db, player_id)
    if player.busy:
        raise InvalidState(f"player '{player_id}' is playing an ongoing match")
    if player.team_id is not None:
        raise InvalidState(f"player '{player_id}' belongs to a team; delete the team instead")
    db.delete(player)
    db.commit()
