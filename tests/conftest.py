"""Shared fixtures: in-memory database, API client and sample results."""

from __future__ import annotations

import os

# Must be set before the package reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fantasy_league.core.deps import get_db
from fantasy_league.core.security import create_access_token
from fantasy_league.db.models import _all  # noqa: F401
from fantasy_league.db.models.user import User
from fantasy_league.db.session import Base
from fantasy_league.schemas.picks import PickSelection
from fantasy_league.schemas.results import EventResult
from fantasy_league.schemas.scoring import DEFAULT_POINTS_SYSTEM
from fantasy_league.services.catalog import default_roster


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    yield session
    session.close()


@pytest.fixture
def users(db):
    rows = [
        User(id="admin", display_name="Admin", email="admin@example.com", is_admin=True),
        User(id="alice", display_name="Alice", email="alice@example.com"),
        User(id="bob", display_name="Bob", email="bob@example.com"),
    ]
    db.add_all(rows)
    db.commit()
    return {u.id: u for u in rows}


@pytest.fixture
def client(db):
    from main import app

    app.dependency_overrides[get_db] = lambda: db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}


@pytest.fixture
def admin_headers(users) -> dict:
    return auth_headers("admin")


@pytest.fixture
def player_headers(users) -> dict:
    return auth_headers("alice")


@pytest.fixture
def roster():
    return default_roster()


@pytest.fixture
def config():
    return DEFAULT_POINTS_SYSTEM


def finish(*driver_ids, size: int = 10) -> list:
    """Finishing order padded with empty slots."""
    return list(driver_ids) + [None] * (size - len(driver_ids))


def make_result(gp=(), quali=(), fastest_lap=None, sprint=None, sprint_quali=None, **kwargs) -> EventResult:
    return EventResult(
        grand_prix_finish=finish(*gp),
        gp_qualifying=finish(*quali, size=3),
        fastest_lap=fastest_lap,
        sprint_finish=finish(*sprint, size=8) if sprint is not None else None,
        sprint_qualifying=finish(*sprint_quali, size=3) if sprint_quali is not None else None,
        **kwargs,
    )


def make_picks(teams=(), b_team=None, drivers=(), b_drivers=(), fastest_lap=None, **kwargs) -> PickSelection:
    return PickSelection(
        a_teams=finish(*teams, size=2),
        b_team=b_team,
        a_drivers=finish(*drivers, size=3),
        b_drivers=finish(*b_drivers, size=2),
        fastest_lap=fastest_lap,
        **kwargs,
    )
