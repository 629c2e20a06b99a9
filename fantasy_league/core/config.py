"""
Central configuration for the fantasy league backend.

Values come from environment variables (a local .env file is loaded first).
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

# Upper bound on rows committed per leaderboard chunk
MAX_LEADERBOARD_CHUNK_SIZE = 450


class Settings:
    def __init__(self):
        self.database_url = os.getenv("DATABASE_URL", "sqlite:///./fantasy_league.db")
        self.secret_key = os.getenv("SECRET_KEY", "change-me")
        self.jwt_algorithm = os.getenv("JWT_ALGORITHM", "HS256")
        self.access_token_minutes = int(os.getenv("ACCESS_TOKEN_MINUTES", "1440"))
        self.leaderboard_chunk_size = clamp_chunk_size(
            int(os.getenv("LEADERBOARD_CHUNK_SIZE", str(MAX_LEADERBOARD_CHUNK_SIZE)))
        )
        self.fastf1_cache_dir = os.getenv("FASTF1_CACHE_DIR", "cache")
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.cors_origins = [
            origin.strip()
            for origin in os.getenv(
                "CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173"
            ).split(",")
            if origin.strip()
        ]


def clamp_chunk_size(size: int) -> int:
    return max(1, min(size, MAX_LEADERBOARD_CHUNK_SIZE))


@lru_cache
def get_settings() -> Settings:
    return Settings()
