import base64
import hashlib
from datetime import datetime, timezone

SECONDS_PER_DAY = 86400


# -------------------------------
# 1. Current time (timezone-aware UTC)
# -------------------------------
def utc_now() -> datetime:
    """
    Return the current time as a timezone-aware UTC datetime
    """
    return datetime.now(timezone.utc)


# -------------------------------
# 2. UNIX timestamp -> UTC datetime
# -------------------------------
def from_timestamp_utc(ts) -> datetime:
    """
    Convert an integer UNIX timestamp to a timezone-aware UTC datetime
    """
    return datetime.fromtimestamp(int(ts), tz=timezone.utc)


# -------------------------------
# 3. Signed whole-day difference
# -------------------------------
def diff_in_days(start: datetime, end: datetime) -> int:
    """
    Whole days from start to end, negative when end is before start.
    Partial days are truncated toward zero.
    """
    return int((end - start).total_seconds() / SECONDS_PER_DAY)


# -------------------------------
# 4. Base64 encode bytes -> string
# -------------------------------
def b64e(b: bytes) -> str:
    """
    Base64 encode bytes -> string
    """
    return base64.b64encode(b).decode("utf-8")


# -------------------------------
# 5. Base64 decode string -> bytes
# -------------------------------
def b64d(s: str) -> bytes:
    """
    Base64 decode string -> bytes
    """
    return base64.b64decode(s.encode("utf-8"))


# -------------------------------
# 6. MD5 digest as hex string
# -------------------------------
def md5_hex(data: bytes) -> str:
    """
    Compute MD5 digest of data and return hex string.
    Used as a content identifier only, never for signatures.
    """
    return hashlib.md5(data).hexdigest()
