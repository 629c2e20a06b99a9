"""
Scoring engine: picks + official results + points tables -> points.

One semantics is used everywhere (profile breakdowns, season rollups and the
leaderboard batch):

- team credit and individual driver credit are independent and additive, so
  a driver picked individually whose team is also picked earns both;
- duplicate ids inside one path are credited once (picking the same driver
  in two slots does not double the award).
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Iterator, Optional

from fantasy_league.schemas.entities import Roster
from fantasy_league.schemas.picks import PickSelection
from fantasy_league.schemas.results import EventResult
from fantasy_league.schemas.scoring import Number, PointsSystem

logger = logging.getLogger(__name__)

GRAND_PRIX = "grand_prix"
SPRINT = "sprint"
GP_QUALIFYING = "gp_qualifying"
SPRINT_QUALIFYING = "sprint_qualifying"

# category -> (EventResult attribute, PointsSystem attribute)
CATEGORIES = {
    GRAND_PRIX: ("grand_prix_finish", "grand_prix_finish"),
    SPRINT: ("sprint_finish", "sprint_finish"),
    GP_QUALIFYING: ("gp_qualifying", "gp_qualifying"),
    SPRINT_QUALIFYING: ("sprint_qualifying", "sprint_qualifying"),
}


@dataclass
class EventScore:
    grand_prix: Number = 0
    sprint: Number = 0
    gp_qualifying: Number = 0
    sprint_qualifying: Number = 0
    fastest_lap: Number = 0
    # Points removed by an admin penalty (>= 0)
    penalty: Number = 0

    @property
    def quali(self) -> Number:
        return self.gp_qualifying + self.sprint_qualifying

    @property
    def pre_penalty_total(self) -> Number:
        return self.grand_prix + self.sprint + self.quali + self.fastest_lap

    @property
    def total(self) -> Number:
        return self.pre_penalty_total - self.penalty

    @property
    def breakdown(self) -> dict:
        return {"gp": self.grand_prix, "sprint": self.sprint, "quali": self.quali, "fl": self.fastest_lap}


@dataclass
class SeasonScore:
    grand_prix_points: Number = 0
    sprint_points: Number = 0
    gp_qualifying_points: Number = 0
    sprint_qualifying_points: Number = 0
    fastest_lap_points: Number = 0
    penalty_points: Number = 0
    events_scored: list[str] = field(default_factory=list)

    @property
    def total_points(self) -> Number:
        raw = (
            self.grand_prix_points
            + self.sprint_points
            + self.gp_qualifying_points
            + self.sprint_qualifying_points
            + self.fastest_lap_points
            - self.penalty_points
        )
        # Season totals are never reported below zero
        return max(0, raw)

    @property
    def breakdown(self) -> dict:
        return {
            "gp": self.grand_prix_points,
            "sprint": self.sprint_points,
            "quali": self.gp_qualifying_points + self.sprint_qualifying_points,
            "fl": self.fastest_lap_points,
        }

    def add(self, score: EventScore) -> None:
        self.grand_prix_points += score.grand_prix
        self.sprint_points += score.sprint
        self.gp_qualifying_points += score.gp_qualifying
        self.sprint_qualifying_points += score.sprint_qualifying
        self.fastest_lap_points += score.fastest_lap
        self.penalty_points += score.penalty


def points_for_position(points_table: list[Number], index: int) -> Number:
    """Points for the 0-based finishing index; beyond the table scores 0."""
    if 0 <= index < len(points_table):
        return points_table[index]
    return 0


def build_team_resolver(result: EventResult, roster: Optional[Roster]):
    """
    Returns driver_id -> constructor_id | None.
    The snapshot frozen on the result wins over the current roster.
    """
    snapshot = result.driver_teams or {}

    def resolve(driver_id: str) -> Optional[str]:
        team = snapshot.get(driver_id)
        if team:
            return team
        if roster is not None:
            team = roster.team_of(driver_id)
        if team is None:
            logger.debug("Driver %s has no known team, no team credit", driver_id)
        return team

    return resolve


def calculate_team_points(finishers, points_table, credited_teams, resolve_team) -> Number:
    # A credited team scores once per classified driver
    total = 0
    for index, driver_id in enumerate(finishers):
        if driver_id and resolve_team(driver_id) in credited_teams:
            total += points_for_position(points_table, index)
    return total


def calculate_driver_points(finishers, points_table, driver_ids) -> Number:
    total = 0
    for index, driver_id in enumerate(finishers):
        if driver_id and driver_id in driver_ids:
            total += points_for_position(points_table, index)
    return total


def calculate_penalty(pre_total: Number, penalty: Optional[float]) -> Number:
    """Deduction rounded up toward the larger deduction."""
    if not penalty or penalty <= 0:
        return 0
    return math.ceil(pre_total * penalty)


def score_event(
    picks: Optional[PickSelection],
    result: EventResult,
    config: PointsSystem,
    roster: Optional[Roster] = None,
) -> EventScore:
    """
    Scores one pick against one event result.

    `picks=None` is the all-empty selection. The returned total may be
    negative if a penalty exceeds the subtotal; callers decide on clamping.
    """
    picks = picks or PickSelection.empty()
    score = EventScore()

    resolve_team = build_team_resolver(result, roster)
    credited_teams = set(picks.team_ids())
    picked_drivers = set(picks.driver_ids())

    for category, (result_attr, config_attr) in CATEGORIES.items():
        finishers = getattr(result, result_attr) or []
        points_table = getattr(config, config_attr) or []

        category_points = 0
        if credited_teams:
            category_points += calculate_team_points(finishers, points_table, credited_teams, resolve_team)
        if picked_drivers:
            category_points += calculate_driver_points(finishers, points_table, picked_drivers)

        setattr(score, category, category_points)

    if picks.fastest_lap and picks.fastest_lap == result.fastest_lap:
        score.fastest_lap = config.fastest_lap

    score.penalty = calculate_penalty(score.pre_penalty_total, picks.penalty)
    return score


def effective_points_system(result: EventResult, active: PointsSystem) -> PointsSystem:
    """The snapshot frozen on the result, else the active configuration."""
    return result.scoring_snapshot or active


def score_user_events(
    season_picks: dict[str, PickSelection],
    race_results: dict[str, EventResult],
    config: PointsSystem,
    roster: Optional[Roster] = None,
) -> Iterator[tuple[str, EventScore]]:
    """Per-event scores for the events that already have a result."""
    for event_id, picks in season_picks.items():
        result = race_results.get(event_id)
        if result is None:
            # Results pending: contributes nothing
            continue
        yield event_id, score_event(picks, result, effective_points_system(result, config), roster)


def rollup_season(
    season_picks: dict[str, PickSelection],
    race_results: dict[str, EventResult],
    config: PointsSystem,
    roster: Optional[Roster] = None,
) -> SeasonScore:
    season = SeasonScore()

    for event_id, event_score in score_user_events(season_picks, race_results, config, roster):
        season.add(event_score)
        season.events_scored.append(event_id)

    return season
