# Import every model so Base.metadata knows them before create_all()
from fantasy_league.db.models.user import User  # noqa: F401
from fantasy_league.db.models.user_picks import UserPicks  # noqa: F401
from fantasy_league.db.models.app_state import AppState  # noqa: F401
from fantasy_league.db.models.leaderboard_entry import LeaderboardEntryRow  # noqa: F401
from fantasy_league.db.models.admin_log import AdminLog  # noqa: F401
