import argparse

from fantasy_league.core.logging import configure_logging
from fantasy_league.services.simulation import run_season_simulation


def main():
    parser = argparse.ArgumentParser(description="Stress the scoring engine with random seasons")
    parser.add_argument("--seasons", type=int, default=5)
    parser.add_argument("--users", type=int, default=10)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    configure_logging()
    report = run_season_simulation(seasons=args.seasons, users_per_season=args.users, seed=args.seed)

    print(f"Seasons: {report.season_count}")
    print(f"Races simulated: {report.total_races_simulated}")
    print(f"Picks processed: {report.total_picks_processed}")
    print(f"Integrity score: {report.integrity_score}")
    print(f"Time: {report.execution_time_ms:.1f} ms")
    for anomaly in report.anomalies:
        print(f"  - {anomaly}")


if __name__ == "__main__":
    main()
