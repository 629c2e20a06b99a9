from datetime import datetime, timedelta, timezone

from jose import jwt

from fantasy_league.core.config import get_settings

SECRET_KEY = get_settings().secret_key
ALGORITHM = get_settings().jwt_algorithm


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Signs a token for a user issued by the (external) login flow."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=get_settings().access_token_minutes)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
