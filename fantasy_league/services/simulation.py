"""
Randomized season simulation used to sanity check the scoring engine.

Results and picks are generated from a seeded RNG, rolled up with the same
functions the leaderboard uses, and every suspicious total is reported as an
anomaly.
"""

import logging
import math
import random
import time
from dataclasses import dataclass, field
from typing import Optional

from fantasy_league.schemas.entities import EntityClass, Event, Roster
from fantasy_league.schemas.picks import PickSelection
from fantasy_league.schemas.results import EventResult
from fantasy_league.schemas.scoring import DEFAULT_POINTS_SYSTEM, PointsSystem
from fantasy_league.services.catalog import default_events, default_roster
from fantasy_league.services.scoring import SeasonScore, rollup_season

logger = logging.getLogger(__name__)

ANOMALY_WEIGHT = 5


@dataclass
class SimulationReport:
    season_count: int = 0
    total_races_simulated: int = 0
    total_picks_processed: int = 0
    anomalies: list[str] = field(default_factory=list)
    integrity_score: int = 100
    execution_time_ms: float = 0.0


def random_result(rng: random.Random, roster: Roster, event: Event) -> EventResult:
    grid = [d.id for d in roster.drivers]
    rng.shuffle(grid)

    result = EventResult(
        grand_prix_finish=grid[:10],
        gp_qualifying=rng.sample(grid, min(3, len(grid))),
        fastest_lap=rng.choice(grid) if grid else None,
    )
    if event.has_sprint:
        sprint = grid[:]
        rng.shuffle(sprint)
        result.sprint_finish = sprint[:8]
        result.sprint_qualifying = rng.sample(grid, min(3, len(grid)))
    return result


def _pick_ids(rng: random.Random, pool: list[str], count: int) -> list[Optional[str]]:
    chosen = rng.sample(pool, min(count, len(pool)))
    return chosen + [None] * (count - len(chosen))


def random_picks(rng: random.Random, roster: Roster) -> PickSelection:
    teams_a = [c.id for c in roster.constructors if c.class_of == EntityClass.A]
    teams_b = [c.id for c in roster.constructors if c.class_of == EntityClass.B]
    drivers_a = [d.id for d in roster.drivers if d.class_of == EntityClass.A]
    drivers_b = [d.id for d in roster.drivers if d.class_of == EntityClass.B]

    return PickSelection(
        a_teams=_pick_ids(rng, teams_a, 2),
        b_team=rng.choice(teams_b) if teams_b else None,
        a_drivers=_pick_ids(rng, drivers_a, 3),
        b_drivers=_pick_ids(rng, drivers_b, 2),
        fastest_lap=rng.choice([d.id for d in roster.drivers]) if roster.drivers else None,
    )


def check_picks(picks: PickSelection, roster: Roster) -> list[str]:
    return [d for d in picks.driver_ids() if roster.driver(d) is None]


def check_score(score: SeasonScore) -> list[str]:
    """NaN or negative values; the season clamp would hide them in the total."""
    problems = []
    values = {**score.breakdown, "total": score.total_points}
    for name, value in values.items():
        if isinstance(value, float) and math.isnan(value):
            problems.append(f"{name} is NaN")
        elif value < 0:
            problems.append(f"negative {name} {value}")
    return problems


def run_season_simulation(
    seasons: int = 1,
    points_system: PointsSystem = DEFAULT_POINTS_SYSTEM,
    roster: Optional[Roster] = None,
    events: Optional[list[Event]] = None,
    users_per_season: int = 10,
    seed: Optional[int] = None,
) -> SimulationReport:
    roster = roster or default_roster()
    events = events or default_events()
    rng = random.Random(seed)

    report = SimulationReport()
    started = time.perf_counter()

    for season in range(1, seasons + 1):
        results = {event.id: random_result(rng, roster, event) for event in events}
        report.total_races_simulated += len(results)

        for user_index in range(users_per_season):
            user = f"sim_user_{season}_{user_index}"
            season_picks = {event.id: random_picks(rng, roster) for event in events}
            report.total_picks_processed += len(season_picks)

            for event_id, picks in season_picks.items():
                for driver_id in check_picks(picks, roster):
                    report.anomalies.append(f"Season {season}, {user}: unknown driver {driver_id} in {event_id}")

            try:
                score = rollup_season(season_picks, results, points_system, roster)
            except Exception as e:
                report.anomalies.append(f"Season {season}, {user}: scoring crashed ({e})")
                continue

            for problem in check_score(score):
                report.anomalies.append(f"Season {season}, {user}: {problem}")

        report.season_count += 1

    report.integrity_score = max(0, 100 - ANOMALY_WEIGHT * len(report.anomalies))
    report.execution_time_ms = (time.perf_counter() - started) * 1000

    logger.info(
        "Simulated %d seasons (%d races, %d picks): integrity %d, %d anomalies",
        report.season_count,
        report.total_races_simulated,
        report.total_picks_processed,
        report.integrity_score,
        len(report.anomalies),
    )
    return report
