import secrets
from datetime import datetime, timedelta

from noticias.utils.dates import utcnow

TOKEN_BYTES = 32


def generate_token() -> str:
    """64 hex characters from 32 random bytes."""
    return secrets.token_hex(TOKEN_BYTES)


def token_expiry(hours: int, now: datetime = None) -> datetime:
    return (now or utcnow()) + timedelta(hours=hours)
