import os

import pytest

# Keep module import from pointing at a file database
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.models.enums import Side
from app.models.player import Player
from app.models.team import Team


@pytest.fixture()
def session_factory():
    """In-memory SQLite database shared by every session of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.pop(get_db, None)


def build_team(first: str, second: str, name=None) -> Team:
    """A transient two-player team: slot 0 on the right, slot 1 on the left."""
    team = Team(name=name)
    team.players.append(Player(name=first, slot=0, position=Side.RIGHT, busy=False))
    team.players.append(Player(name=second, slot=1, position=Side.LEFT, busy=False))
    return team


@pytest.fixture()
def make_team(client):
    def _make(first: str, second: str, name=None) -> dict:
        resp = client.post("/api/teams", json={"name": name, "players": [first, second]})
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make


@pytest.fixture()
def teams():
    return build_team("Max", "Lara", name="A"), build_team("Paul", "Anna", name="B")
