import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.exceptions import NotFound
from app.models.enums import MatchStatus, Side
from app.models.match import Match, MatchSet
from app.models.player import Player
from app.services import match_engine
from app.services.team_service import get_by_id as get_team

logger = logging.getLogger(__name__)


def get_all(db: Session, status: Optional[MatchStatus] = None):
    query = db.query(Match)
    if status is not None:
        query = query.filter(Match.status == status)
    return query.order_by(Match.match_date.desc()).all()


def get_by_id(db: Session, match_id: str):
    match = db.query(Match).filter(Match.id == match_id).first()
    if not match:
        raise NotFound("match", match_id)
    return match


def exists(db: Session, match_id: str) -> bool:
    return db.query(Match.id).filter(Match.id == match_id).first() is not None


def _lock_team(db: Session, team_id: str):
    """Load a team and lock its player rows until the transaction ends."""
    team = get_team(db, team_id)
    db.query(Player).filter(Player.team_id == team.id).with_for_update().all()
    return team


def _run(db: Session, match_id: str, operation, *args):
    """Load the aggregate, apply one engine operation and commit it.

    Any failure rolls the whole session back so nothing half-applied is
    persisted.
    """
    match = get_by_id(db, match_id)
    try:
        operation(match, *args)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(match)
    return match


def start_match(
    db: Session,
    team_a_id: str,
    team_b_id: str,
    serve_team_is_a: bool,
    start_side: Side,
):
    try:
        team_a = _lock_team(db, team_a_id)
        team_b = _lock_team(db, team_b_id)
        match = match_engine.start_match(team_a, team_b, serve_team_is_a, start_side)
        db.add(match)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(match)
    logger.info(
        "Started match %s: team %s vs team %s (serving %s from %s)",
        match.id, team_a_id, team_b_id,
        "A" if serve_team_is_a else "B", match.serve_side.value,
    )
    return match


def award_point(db: Session, match_id: str, for_team_a: bool):
    match = _run(db, match_id, match_engine.award_point, for_team_a)
    if match.status == MatchStatus.FINISHED:
        logger.info("Match %s finished, winner team %s", match.id, match.winning_team_id)
    return match


def undo_last_point(db: Session, match_id: str, for_team_a: bool):
    return _run(db, match_id, match_engine.undo_last_point, for_team_a)


def abort_match(db: Session, match_id: str, team_a_forfeits: bool):
    match = _run(db, match_id, match_engine.abort_match, team_a_forfeits)
    logger.info(
        "Match %s forfeited by team %s", match.id, "A" if team_a_forfeits else "B"
    )
    return match


def set_serve_side(db: Session, match_id: str, side: Side):
    return _run(db, match_id, match_engine.set_serve_side, side)


def is_break_recommended(db: Session, match_id: str) -> bool:
    return match_engine.is_break_recommended(get_by_id(db, match_id))


def delete(db: Session, match_id: str):
    match = get_by_id(db, match_id)
    try:
        if match.status == MatchStatus.ONGOING:
            for team in match.teams:
                for player in team.players:
                    player.busy = False
        db.delete(match)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Deleted match %s", match_id)


def get_all_sets(db: Session):
    return db.query(MatchSet).order_by(MatchSet.match_id, MatchSet.number).all()


def get_set_by_id(db: Session, set_id: str):
    match_set = db.query(MatchSet).filter(MatchSet.id == set_id).first()
    if not match_set:
        raise NotFound("set", set_id)
    return match_set
