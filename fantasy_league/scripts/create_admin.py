import argparse

from fantasy_league.core.security import create_access_token
from fantasy_league.db.session import SessionLocal, engine, Base
from fantasy_league.db.models import _all  # noqa: F401
from fantasy_league.db.models.user import User


def create_admin_user(user_id: str, email: str, display_name: str):
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    try:
        existing_user = db.get(User, user_id)

        if existing_user:
            print("An account with that id already exists")
            print("  Email:", existing_user.email)
            print("  Admin:", existing_user.is_admin)
            if not existing_user.is_admin:
                existing_user.is_admin = True
                db.commit()
                print("  Promoted to admin")
            admin_user = existing_user
        else:
            admin_user = User(id=user_id, email=email, display_name=display_name, is_admin=True)
            db.add(admin_user)
            db.commit()
            print("Admin user created")
            print("  Id:", user_id)
            print("  Email:", email)

        # Token for manual API calls (the regular login flow lives elsewhere)
        print("  Token:", create_access_token({"sub": admin_user.id}))

    except Exception:
        db.rollback()
        print("Error creating the admin user")
        raise

    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create (or promote) a league admin")
    parser.add_argument("--id", default="admin")
    parser.add_argument("--email", default="admin@example.com")
    parser.add_argument("--name", default="Administrator")
    args = parser.parse_args()

    create_admin_user(args.id, args.email, args.name)
