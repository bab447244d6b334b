from fastapi import APIRouter, Request, Depends
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session
from fastapi.responses import HTMLResponse
from app.config import API_PREFIX, TEMPLATES_DIR
from app.database import get_db
from app.models.enums import MatchStatus
from app.services import match_engine, match_service, team_service

router = APIRouter(include_in_schema=False)
templates = Jinja2Templates(directory=TEMPLATES_DIR)


@router.get("/", response_class=HTMLResponse)
def index(request: Request, db: Session = Depends(get_db)):
    teams = team_service.get_all(db)
    ongoing = match_service.get_all(db, MatchStatus.ONGOING)

    return templates.TemplateResponse(
        request,
        "index.html",
        {"teams": teams, "ongoing": ongoing, "api_prefix": API_PREFIX}
    )


@router.get("/match/{match_id}", response_class=HTMLResponse)
def match_page(match_id: str, request: Request, db: Session = Depends(get_db)):
    match = match_service.get_by_id(db, match_id)
    current = match_engine.current_set(match)

    return templates.TemplateResponse(
        request,
        "match.html",
        {
            "match": match,
            "current_set": current,
            "sets": sorted(match.sets, key=lambda s: s.number),
            "break_recommended": match_engine.is_break_recommended(match),
            "api_prefix": API_PREFIX,
        }
    )


@router.get("/history", response_class=HTMLResponse)
def history(request: Request, db: Session = Depends(get_db)):
    matches = match_service.get_all(db)
    rows = []
    for m in matches:
        won_a, won_b = match_engine.sets_won(m)
        rows.append({
            "match": m,
            "sets": sorted(m.sets, key=lambda s: s.number),
            "won_a": won_a,
            "won_b": won_b,
        })

    return templates.TemplateResponse(
        request,
        "history.html",
        {"rows": rows}
    )
