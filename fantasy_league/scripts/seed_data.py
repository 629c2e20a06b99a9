import random

from fantasy_league.core.logging import configure_logging
from fantasy_league.db.session import SessionLocal, engine, Base
from fantasy_league.db.models import _all  # noqa: F401
from fantasy_league.db.models.app_state import ENTITIES, SCORING_CONFIG
from fantasy_league.db.models.user import User
from fantasy_league.schemas.scoring import DEFAULT_POINTS_SYSTEM, ScoringProfile, ScoringSettingsDoc
from fantasy_league.services.catalog import default_events, default_roster
from fantasy_league.services.leaderboard import recompute_leaderboard
from fantasy_league.services.results import save_event_result
from fantasy_league.services.simulation import random_picks, random_result
from fantasy_league.services.store import set_document, set_event_picks

NUM_USERS = 20
# Events that already have an official result
COMPLETED_EVENTS = 6
SEED = 2026


def reset_db():
    print("Dropping the old database...")
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    print("Tables created.")


def seed_settings(db):
    roster = default_roster()
    set_document(db, ENTITIES, roster.model_dump(mode="json", by_alias=True))

    settings = ScoringSettingsDoc(
        profiles=[
            ScoringProfile(id="default", name="Standard 2026", config=DEFAULT_POINTS_SYSTEM),
            ScoringProfile(
                id="double_quali",
                name="Double qualifying",
                config=DEFAULT_POINTS_SYSTEM.model_copy(update={"gp_qualifying": [6, 4, 2]}),
            ),
        ],
        active_profile_id="default",
    )
    set_document(db, SCORING_CONFIG, settings.model_dump(by_alias=True))
    db.commit()
    return roster


def create_users(db):
    users = [User(id="admin", display_name="Administrator", email="admin@example.com", is_admin=True)]
    for i in range(1, NUM_USERS + 1):
        users.append(User(id=f"user_{i:02d}", display_name=f"Player {i}", email=f"player{i}@example.com"))
    db.add_all(users)
    db.commit()
    print(f"{len(users)} users created.")
    return users


def create_picks(db, rng, users, roster, events):
    for user in users:
        for event in events:
            set_event_picks(db, user.id, event.id, random_picks(rng, roster))
    db.commit()
    print(f"Picks created for {len(users)} users over {len(events)} events.")


def create_results(db, rng, roster, events):
    for event in events:
        save_event_result(db, "admin", event.id, random_result(rng, roster, event), recompute=False)
        print(f"  Results stored for {event.name}")


def main():
    configure_logging()
    rng = random.Random(SEED)
    reset_db()

    db = SessionLocal()
    try:
        roster = seed_settings(db)
        users = create_users(db)
        events = default_events()[:COMPLETED_EVENTS]

        create_picks(db, rng, users, roster, events)
        create_results(db, rng, roster, events)

        run = recompute_leaderboard(db)
        print(f"Leaderboard ready: {run.users} users ranked.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
