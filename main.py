from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fantasy_league.core.config import get_settings
from fantasy_league.core.logging import configure_logging

# Base and engine are needed to create the tables
from fantasy_league.db.session import engine, Base

# Import the models so SQLAlchemy sees them before creating the tables
from fantasy_league.db.models import _all  # noqa: F401

# Routers
from fantasy_league.api.admin import router as admin_router
from fantasy_league.api.leaderboard import router as leaderboard_router
from fantasy_league.api.picks import router as picks_router
from fantasy_league.api.results import router as results_router
from fantasy_league.api.scoring import router as scoring_router

configure_logging()

app = FastAPI(
    title="Fantasy F1 League",
    version="1.0.0"
)

Base.metadata.create_all(bind=engine)

app.include_router(leaderboard_router)
app.include_router(results_router)
app.include_router(scoring_router)
app.include_router(picks_router)
app.include_router(admin_router)

# Lets the web client talk to the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def read_root():
    return {"message": "Fantasy F1 League API running"}
