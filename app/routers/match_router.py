from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.enums import MatchStatus, Side
from app.schemas import BreakRecommendation, MatchOut, MatchStart, SetOut, TeamOut
from app.services import match_engine, match_service, scoresheet

router = APIRouter(prefix="/matches", tags=["matches"])

TeamCode = Literal["A", "B"]


def to_match_out(match) -> MatchOut:
    return MatchOut(
        id=match.id,
        match_date=match.match_date,
        teams=[TeamOut.model_validate(t) for t in match.teams],
        sets=[
            SetOut.model_validate(s)
            for s in sorted(match.sets, key=lambda s: s.number)
        ],
        serving_team_id=match.serving_team_id,
        winning_team_id=match.winning_team_id,
        serve_side=match.serve_side,
        status=match.status,
        break_recommended=match_engine.is_break_recommended(match),
    )


@router.get("", response_model=List[MatchOut])
def list_matches(
    status: Optional[MatchStatus] = Query(None),
    db: Session = Depends(get_db),
):
    return [to_match_out(m) for m in match_service.get_all(db, status)]


@router.get("/{match_id}", response_model=MatchOut)
def get_match(match_id: str, db: Session = Depends(get_db)):
    return to_match_out(match_service.get_by_id(db, match_id))


@router.post("/start", response_model=MatchOut, status_code=201)
def start_match(body: MatchStart, db: Session = Depends(get_db)):
    match = match_service.start_match(
        db,
        body.team_a_id,
        body.team_b_id,
        body.serve_team_is_a,
        body.start_side,
    )
    return to_match_out(match)


@router.post("/{match_id}/point", response_model=MatchOut)
def award_point(
    match_id: str,
    team: TeamCode = Query(...),
    db: Session = Depends(get_db),
):
    return to_match_out(match_service.award_point(db, match_id, team == "A"))


@router.post("/{match_id}/undo", response_model=MatchOut)
def undo_point(
    match_id: str,
    team: TeamCode = Query(...),
    db: Session = Depends(get_db),
):
    return to_match_out(match_service.undo_last_point(db, match_id, team == "A"))


@router.post("/{match_id}/abort", response_model=MatchOut)
def abort_match(
    match_id: str,
    forfeiting_team: TeamCode = Query(...),
    db: Session = Depends(get_db),
):
    return to_match_out(
        match_service.abort_match(db, match_id, forfeiting_team == "A")
    )


@router.put("/{match_id}/serve-side", response_model=MatchOut)
def set_serve_side(
    match_id: str,
    side: Side = Query(...),
    db: Session = Depends(get_db),
):
    return to_match_out(match_service.set_serve_side(db, match_id, side))


@router.get("/{match_id}/break-recommended", response_model=BreakRecommendation)
def break_recommended(match_id: str, db: Session = Depends(get_db)):
    return BreakRecommendation(
        match_id=match_id,
        break_recommended=match_service.is_break_recommended(db, match_id),
    )


@router.get("/{match_id}/scoresheet.pdf")
def match_scoresheet(match_id: str, db: Session = Depends(get_db)):
    match = match_service.get_by_id(db, match_id)
    buffer = scoresheet.render(match)
    return StreamingResponse(
        buffer,
        media_type="application/pdf",
        headers={
            "Content-Disposition":
                f"attachment; filename=match_{match.match_date}_{match.id[:8]}.pdf"
        }
    )


@router.delete("/{match_id}", status_code=204)
def delete_match(match_id: str, db: Session = Depends(get_db)):
    match_service.delete(db, match_id)
    return Response(status_code=204)
