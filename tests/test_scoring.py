"""Tests for the per-event scoring function and the season rollup."""

from __future__ import annotations

import math

import pytest

from conftest import make_picks, make_result
from fantasy_league.schemas.picks import PickSelection
from fantasy_league.schemas.scoring import PointsSystem
from fantasy_league.services.scoring import (
    calculate_penalty,
    points_for_position,
    rollup_season,
    score_event,
    score_user_events,
)

GRID = ["ver", "lec", "nor", "pia", "law", "ham", "rus", "ant", "alb", "sai"]


class TestPointsForPosition:
    def test_inside_table(self) -> None:
        assert points_for_position([25, 18, 15], 1) == 18

    def test_beyond_table_scores_zero(self) -> None:
        assert points_for_position([25, 18, 15], 3) == 0

    def test_empty_table(self) -> None:
        assert points_for_position([], 0) == 0


class TestScoreEventScenarios:
    def test_winner_with_fastest_lap(self, config, roster) -> None:
        result = make_result(gp=["ver"], fastest_lap="ver")
        picks = make_picks(drivers=["ver"], fastest_lap="ver")

        score = score_event(picks, result, config, roster)

        assert score.grand_prix == 25
        assert score.fastest_lap == 3
        assert score.total == 28

    def test_team_credit_for_both_drivers(self, config, roster) -> None:
        result = make_result(gp=["ver", "lec", "nor", "pia", "law"])
        picks = make_picks(teams=["red_bull"])

        score = score_event(picks, result, config, roster)

        assert score.grand_prix == 35

    def test_half_penalty(self, config, roster) -> None:
        result = make_result(gp=["ver"], fastest_lap="ver")
        picks = make_picks(drivers=["ver"], fastest_lap="ver", penalty=0.5)

        score = score_event(picks, result, config, roster)

        assert score.pre_penalty_total == 28
        assert score.penalty == 14
        assert score.total == 14

    def test_breakdown_groups_qualifying(self, config, roster) -> None:
        result = make_result(gp=GRID, quali=["ver"], sprint=["ver"], sprint_quali=["ver"])
        score = score_event(make_picks(drivers=["ver"]), result, config, roster)

        assert score.breakdown == {"gp": 25, "sprint": 8, "quali": 6, "fl": 0}


class TestScoreEventProperties:
    def test_deterministic(self, config, roster) -> None:
        result = make_result(gp=GRID, quali=GRID[:3], fastest_lap="nor")
        picks = make_picks(teams=["mclaren", "ferrari"], b_team="haas", drivers=["ver", "ham"], fastest_lap="nor")

        first = score_event(picks, result, config, roster)
        second = score_event(picks, result, config, roster)

        assert first == second

    def test_adding_a_pick_never_lowers_the_score(self, config, roster) -> None:
        result = make_result(gp=GRID, quali=GRID[:3], fastest_lap="lec")
        smaller = make_picks(teams=["ferrari"], drivers=["nor"])
        larger = make_picks(teams=["ferrari", "mercedes"], drivers=["nor", "alb"], b_drivers=["oco"])

        assert score_event(larger, result, config, roster).total >= score_event(smaller, result, config, roster).total

    @pytest.mark.parametrize("picks", [None, PickSelection.empty()])
    def test_empty_picks_score_zero(self, picks, config, roster) -> None:
        result = make_result(gp=GRID, quali=GRID[:3], fastest_lap="ver", sprint=GRID[:8], sprint_quali=GRID[:3])

        score = score_event(picks, result, config, roster)

        assert score.total == 0
        assert score.breakdown == {"gp": 0, "sprint": 0, "quali": 0, "fl": 0}

    def test_fastest_lap_only_through_the_fastest_lap_pick(self, config, roster) -> None:
        result = make_result(gp=GRID, fastest_lap="ver")

        by_driver_pick = score_event(make_picks(drivers=["ver"], fastest_lap="lec"), result, config, roster)
        by_team_pick = score_event(make_picks(teams=["red_bull"]), result, config, roster)

        assert by_driver_pick.fastest_lap == 0
        assert by_team_pick.fastest_lap == 0

    def test_no_fastest_lap_on_either_side(self, config, roster) -> None:
        result = make_result(gp=GRID)

        score = score_event(make_picks(drivers=["ver"]), result, config, roster)

        assert score.fastest_lap == 0

    def test_fastest_lap_pick_without_a_recorded_lap(self, config, roster) -> None:
        result = make_result(gp=GRID)

        score = score_event(make_picks(fastest_lap="ver"), result, config, roster)

        assert score.fastest_lap == 0
        assert score.total == 0

    @pytest.mark.parametrize(
        "table, index",
        [("grand_prix_finish", i) for i in range(10)]
        + [("sprint_finish", i) for i in range(8)]
        + [("gp_qualifying", i) for i in range(3)]
        + [("sprint_qualifying", i) for i in range(3)],
    )
    def test_raising_a_table_entry_never_lowers_the_score(self, table, index, config, roster) -> None:
        result = make_result(gp=GRID, quali=GRID[:3], fastest_lap="lec", sprint=GRID[:8], sprint_quali=GRID[:3])
        picks = make_picks(
            teams=["ferrari"], b_team="haas", drivers=["ver", "nor"], b_drivers=["alb"], fastest_lap="lec"
        )
        values = list(getattr(config, table))
        values[index] += 5
        raised = config.model_copy(update={table: values})

        before = score_event(picks, result, config, roster).total
        after = score_event(picks, result, raised, roster).total

        assert after >= before

    def test_raising_the_fastest_lap_bonus_never_lowers_the_score(self, config, roster) -> None:
        result = make_result(gp=GRID, fastest_lap="lec")
        picks = make_picks(drivers=["ver"], fastest_lap="lec")
        raised = config.model_copy(update={"fastest_lap": config.fastest_lap + 5})

        assert score_event(picks, result, raised, roster).total == score_event(picks, result, config, roster).total + 5

    @pytest.mark.parametrize("penalty", [0, 0.1, 0.25, 0.33, 0.5, 0.75, 1])
    def test_penalty_rounds_the_deduction_up(self, penalty, config, roster) -> None:
        result = make_result(gp=["ver"], fastest_lap="ver")
        picks = make_picks(drivers=["ver"], fastest_lap="ver", penalty=penalty)

        score = score_event(picks, result, config, roster)

        assert score.total == 28 - math.ceil(28 * penalty)
        assert 0 <= score.total <= 28

    def test_sprint_categories_absent_score_zero(self, config, roster) -> None:
        result = make_result(gp=GRID)
        score = score_event(make_picks(drivers=["ver"]), result, config, roster)

        assert score.sprint == 0
        assert score.sprint_qualifying == 0


class TestScoringSemantics:
    def test_team_and_driver_credit_are_additive(self, config, roster) -> None:
        result = make_result(gp=["ver"])
        picks = make_picks(teams=["red_bull"], drivers=["ver"])

        assert score_event(picks, result, config, roster).grand_prix == 50

    def test_duplicate_driver_credited_once(self, config, roster) -> None:
        result = make_result(gp=["ver"])
        picks = make_picks(drivers=["ver", "ver"])

        assert score_event(picks, result, config, roster).grand_prix == 25

    def test_duplicate_team_credited_once(self, config, roster) -> None:
        result = make_result(gp=["ver"])
        picks = make_picks(teams=["red_bull", "red_bull"])

        assert score_event(picks, result, config, roster).grand_prix == 25

    def test_snapshot_wins_over_current_roster(self, config, roster) -> None:
        # Driver moved teams after the event was saved
        result = make_result(gp=["ver"], driver_teams={"ver": "ferrari"})

        ferrari = score_event(make_picks(teams=["ferrari"]), result, config, roster)
        red_bull = score_event(make_picks(teams=["red_bull"]), result, config, roster)

        assert ferrari.grand_prix == 25
        assert red_bull.grand_prix == 0

    def test_unknown_driver_scores_nothing(self, config, roster) -> None:
        result = make_result(gp=["zzz", "ver"])
        picks = make_picks(teams=["red_bull", "ferrari"])

        assert score_event(picks, result, config, roster).grand_prix == 18

    def test_without_roster_only_driver_picks_count(self, config) -> None:
        result = make_result(gp=["ver"])
        picks = make_picks(teams=["red_bull"], drivers=["ver"])

        assert score_event(picks, result, config).grand_prix == 25

    def test_custom_points_table(self, roster) -> None:
        config = PointsSystem(grand_prix_finish=[10.5, 5], fastest_lap=1)
        result = make_result(gp=["ver", "lec"], fastest_lap="lec")
        picks = make_picks(drivers=["ver", "lec"], fastest_lap="lec")

        assert score_event(picks, result, config, roster).total == 16.5


class TestCalculatePenalty:
    def test_no_penalty(self) -> None:
        assert calculate_penalty(28, None) == 0
        assert calculate_penalty(28, 0) == 0

    def test_rounds_up(self) -> None:
        assert calculate_penalty(25, 0.1) == 3


class TestSeasonRollup:
    def test_events_without_result_are_skipped(self, config, roster) -> None:
        season_picks = {
            "aus_26": make_picks(drivers=["ver"], fastest_lap="ver"),
            "chn_26": make_picks(drivers=["ver"], fastest_lap="ver"),
        }
        results = {"aus_26": make_result(gp=["ver"], fastest_lap="ver")}

        season = rollup_season(season_picks, results, config, roster)

        assert season.total_points == 28
        assert season.events_scored == ["aus_26"]

    def test_sums_every_category(self, config, roster) -> None:
        season_picks = {
            "aus_26": make_picks(drivers=["ver"]),
            "chn_26": make_picks(drivers=["lec"], fastest_lap="lec"),
        }
        results = {
            "aus_26": make_result(gp=["ver"], quali=["ver"]),
            "chn_26": make_result(gp=["lec"], fastest_lap="lec", sprint=["lec"], sprint_quali=["lec"]),
        }

        season = rollup_season(season_picks, results, config, roster)

        assert season.breakdown == {"gp": 50, "sprint": 8, "quali": 6, "fl": 3}
        assert season.total_points == 67

    def test_snapshot_table_used_for_past_event(self, config, roster) -> None:
        frozen = PointsSystem(grand_prix_finish=[100])
        results = {"aus_26": make_result(gp=["ver"], scoring_snapshot=frozen)}

        season = rollup_season({"aus_26": make_picks(drivers=["ver"])}, results, config, roster)

        assert season.total_points == 100

    def test_per_event_scores(self, config, roster) -> None:
        season_picks = {"aus_26": make_picks(drivers=["ver"]), "jpn_26": make_picks(drivers=["ver"])}
        results = {"aus_26": make_result(gp=["ver"])}

        scored = dict(score_user_events(season_picks, results, config, roster))

        assert list(scored) == ["aus_26"]
        assert scored["aus_26"].total == 25

    def test_penalties_are_subtracted(self, config, roster) -> None:
        season_picks = {"aus_26": make_picks(drivers=["ver"], penalty=1)}
        results = {"aus_26": make_result(gp=["ver"])}

        season = rollup_season(season_picks, results, config, roster)

        assert season.penalty_points == 25
        assert season.total_points == 0
