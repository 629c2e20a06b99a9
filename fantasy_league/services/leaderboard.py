"""
Leaderboard recalculation.

Every trigger recomputes the whole population from scratch: read all pick
documents and the results document, score everything in memory, then write
the ranked entries back in chunks. There is no incremental state, so a run
that failed halfway is repaired by simply running it again.

Chunks are separate transactions. If one fails, the earlier chunks stay
written and the board is temporarily mixed (old and new ranks) until the
next successful run.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Iterator, Optional, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from fantasy_league.core.config import clamp_chunk_size, get_settings
from fantasy_league.core.exceptions import LeaderboardWriteError
from fantasy_league.db.models.app_state import SCORING_CONFIG
from fantasy_league.db.models.leaderboard_entry import LeaderboardEntryRow
from fantasy_league.db.session import SessionLocal
from fantasy_league.schemas.entities import Roster
from fantasy_league.schemas.leaderboard import Breakdown, LeaderboardEntry
from fantasy_league.schemas.results import EventResult
from fantasy_league.schemas.scoring import Number, PointsSystem
from fantasy_league.services.catalog import load_roster
from fantasy_league.services.scoring import rollup_season
from fantasy_league.services.scoring_config import active_points_system
from fantasy_league.services.store import all_user_picks, get_document, get_race_results, parse_season_picks

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Overlapping triggers run one after another; the last one wins
_recompute_lock = threading.Lock()


@dataclass
class UserStanding:
    user_id: str
    total_points: Number
    breakdown: dict


@dataclass
class LeaderboardRun:
    users: int = 0
    chunks: int = 0
    entries: list[LeaderboardEntry] = field(default_factory=list)


def compute_standings(
    user_picks: dict[str, dict],
    race_results: dict[str, EventResult],
    config: PointsSystem,
    roster: Optional[Roster] = None,
) -> list[UserStanding]:
    """Season rollup for every user (events without a result count 0)."""
    standings = []
    for user_id, raw_picks in user_picks.items():
        season = rollup_season(parse_season_picks(raw_picks), race_results, config, roster)
        standings.append(UserStanding(user_id, season.total_points, season.breakdown))
    return standings


def rank_standings(standings: Iterable[UserStanding]) -> list[UserStanding]:
    """Points descending; ties ordered by user id so reruns are reproducible."""
    return sorted(standings, key=lambda s: (-s.total_points, s.user_id))


def chunked(items: list[T], size: int) -> Iterator[list[T]]:
    for start in range(0, len(items), size):
        yield items[start:start + size]


def write_leaderboard(
    db: Session,
    ranked: list[UserStanding],
    chunk_size: int,
    now: Optional[datetime] = None,
) -> list[LeaderboardEntry]:
    """
    Persists ranked standings chunk by chunk (one commit per chunk).
    Ranks are global: each chunk's local index is offset by what was
    already written.
    """
    now = now or datetime.now(timezone.utc)
    written: list[LeaderboardEntry] = []

    for chunk_index, chunk in enumerate(chunked(ranked, chunk_size)):
        offset = len(written)
        entries = [
            LeaderboardEntry(
                user_id=standing.user_id,
                total_points=standing.total_points,
                rank=offset + local_index + 1,
                breakdown=Breakdown(**standing.breakdown),
                last_updated=now,
            )
            for local_index, standing in enumerate(chunk)
        ]

        try:
            for entry in entries:
                db.merge(LeaderboardEntryRow(
                    user_id=entry.user_id,
                    total_points=entry.total_points,
                    rank=entry.rank,
                    breakdown=entry.breakdown.model_dump(),
                    last_updated=entry.last_updated,
                ))
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error("Leaderboard chunk %d failed after %d entries: %s", chunk_index, offset, e)
            raise LeaderboardWriteError(chunk_index, offset, e) from e

        written.extend(entries)
        logger.info("Committed leaderboard chunk %d (%d entries)", chunk_index, len(entries))

    return written


def remove_stale_entries(db: Session, user_ids: Iterable[str]) -> int:
    """Drops entries of users that no longer have a picks document."""
    keep = set(user_ids)
    existing = db.execute(select(LeaderboardEntryRow.user_id)).scalars().all()
    stale = [uid for uid in existing if uid not in keep]
    if stale:
        db.execute(delete(LeaderboardEntryRow).where(LeaderboardEntryRow.user_id.in_(stale)))
        db.commit()
    return len(stale)


def recompute_leaderboard(db: Optional[Session] = None, chunk_size: Optional[int] = None) -> LeaderboardRun:
    """
    Entry point for every trigger (results saved, penalty applied, scoring
    profile changed, manual admin rerun). Opens its own session if needed.
    """
    owns_session = db is None
    if owns_session:
        db = SessionLocal()

    size = clamp_chunk_size(chunk_size or get_settings().leaderboard_chunk_size)

    try:
        with _recompute_lock:
            logger.info("Starting leaderboard calculation...")

            # 1. Inputs
            user_picks = all_user_picks(db)
            race_results = get_race_results(db)
            config = active_points_system(get_document(db, SCORING_CONFIG))
            roster = load_roster(db)

            # 2. Scores + ranks
            ranked = rank_standings(compute_standings(user_picks, race_results, config, roster))

            # 3. Persist
            entries = write_leaderboard(db, ranked, size)
            removed = remove_stale_entries(db, user_picks.keys())

            run = LeaderboardRun(
                users=len(entries),
                chunks=(len(entries) + size - 1) // size,
                entries=entries,
            )
            logger.info(
                "Leaderboard updated for %d users in %d chunks (%d stale removed)",
                run.users, run.chunks, removed,
            )
            return run
    finally:
        if owns_session:
            db.close()


def get_leaderboard(db: Session) -> list[LeaderboardEntry]:
    rows = db.execute(
        select(LeaderboardEntryRow).order_by(LeaderboardEntryRow.rank)
    ).scalars().all()
    return [LeaderboardEntry.model_validate(row) for row in rows]
