"""Randomized property checks driven by the season simulation."""

from __future__ import annotations

import random

import pytest

from fantasy_league.schemas.entities import Constructor, Driver, EntityClass, Roster
from fantasy_league.schemas.scoring import PointsSystem
from fantasy_league.services.catalog import default_events, default_roster
from fantasy_league.services.scoring import score_event
from fantasy_league.services.simulation import random_picks, random_result, run_season_simulation


class TestRunSeasonSimulation:
    @pytest.mark.parametrize("seed", range(10))
    def test_default_setup_has_full_integrity(self, seed) -> None:
        report = run_season_simulation(seasons=2, users_per_season=5, seed=seed)

        assert report.anomalies == []
        assert report.integrity_score == 100
        assert report.season_count == 2
        assert report.total_races_simulated == 48
        assert report.total_picks_processed == 2 * 5 * 24

    def test_same_seed_same_report(self) -> None:
        first = run_season_simulation(seed=7)
        second = run_season_simulation(seed=7)

        assert first.anomalies == second.anomalies
        assert first.total_picks_processed == second.total_picks_processed

    def test_nan_table_is_reported(self) -> None:
        table = PointsSystem(grand_prix_finish=[float("nan")] * 10)

        report = run_season_simulation(points_system=table, users_per_season=3, seed=1)

        assert report.integrity_score < 100
        assert any("NaN" in a for a in report.anomalies)

    def test_negative_table_is_reported(self) -> None:
        table = PointsSystem(grand_prix_finish=[-5] * 10)

        report = run_season_simulation(points_system=table, users_per_season=3, seed=1)

        assert any("negative gp" in a for a in report.anomalies)

    def test_integrity_formula(self) -> None:
        table = PointsSystem(grand_prix_finish=[-5] * 10)
        report = run_season_simulation(points_system=table, users_per_season=30, seed=3)

        assert report.integrity_score == max(0, 100 - 5 * len(report.anomalies))

    def test_small_custom_roster(self) -> None:
        roster = Roster(
            constructors=(
                Constructor(id="t1", name="T1", class_of=EntityClass.A),
                Constructor(id="t2", name="T2", class_of=EntityClass.B),
            ),
            drivers=(
                Driver(id="d1", name="D1", class_of=EntityClass.A, constructor_id="t1"),
                Driver(id="d2", name="D2", class_of=EntityClass.B, constructor_id="t2"),
            ),
        )

        report = run_season_simulation(roster=roster, events=default_events()[:3], seed=5)

        assert report.integrity_score == 100
        assert report.total_races_simulated == 3


class TestRandomizedProperties:
    @pytest.mark.parametrize("seed", range(25))
    def test_monotonic_and_bounded(self, seed) -> None:
        rng = random.Random(seed)
        roster = default_roster()
        event = default_events()[1]
        result = random_result(rng, roster, event)
        picks = random_picks(rng, roster)
        config = PointsSystem(
            grand_prix_finish=[25, 18, 15, 12, 10, 8, 6, 4, 2, 1],
            sprint_finish=[8, 7, 6, 5, 4, 3, 2, 1],
            gp_qualifying=[3, 2, 1],
            sprint_qualifying=[3, 2, 1],
            fastest_lap=3,
        )

        full = score_event(picks, result, config, roster)
        fewer = score_event(picks.model_copy(update={"b_drivers": [None, None]}), result, config, roster)
        penalised = score_event(picks.model_copy(update={"penalty": rng.random()}), result, config, roster)

        assert full.total >= fewer.total >= 0
        assert 0 <= penalised.total <= full.total
