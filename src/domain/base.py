import secrets
from datetime import UTC, datetime

ACCESS_CODE_MIN = 100000
ACCESS_CODE_MAX = 999999


def utcnow() -> datetime:
    # Stored columns are naive UTC (sqlite drops tzinfo)
    return datetime.now(UTC).replace(tzinfo=None)


def generate_token() -> str:
    """32 hex characters; primary key of an invitation and the bearer credential."""
    return secrets.token_hex(16)


def generate_access_code() -> str:
    """Uniform 6-digit decimal code in [100000, 999999]."""
    return str(ACCESS_CODE_MIN + secrets.randbelow(ACCESS_CODE_MAX - ACCESS_CODE_MIN + 1))
