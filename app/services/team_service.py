from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.exceptions import InvalidState, NotFound
from app.models.enums import Side
from app.models.match import Match
from app.models.player import Player
from app.models.team import Team

# Starting court per slot: first player on the right, second on the left
START_POSITIONS = (Side.RIGHT, Side.LEFT)


def get_all(db: Session):
    return db.query(Team).all()


def get_by_id(db: Session, team_id: str):
    team = db.query(Team).filter(Team.id == team_id).first()
    if not team:
        raise NotFound("team", team_id)
    return team


def create(db: Session, player_names: List[str], name: Optional[str] = None):
    if len(player_names) != 2:
        raise InvalidState("a doubles team needs exactly two players")

    team = Team(name=name.strip() if name else None)
    for slot, player_name in enumerate(player_names):
        team.players.append(
            Player(
                name=player_name.strip(),
                slot=slot,
                position=START_POSITIONS[slot],
                busy=False,
            )
        )
    db.add(team)
    db.commit()
    db.refresh(team)
    return team


def delete(db: Session, team_id: str):
    team = get_by_id(db, team_id)
    in_use = db.query(Match).filter(
        or_(Match.team_a_id == team_id, Match.team_b_id == team_id)
    ).count() > 0
    if in_use:
        raise InvalidState(f"team '{team_id}' has played matches and cannot be deleted")
    db.delete(team)
    db.commit()
