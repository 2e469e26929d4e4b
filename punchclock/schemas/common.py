"""
Common schema helpers and response envelopes
"""
import re
from datetime import datetime, timezone

from atams.schemas import DataResponse, PaginationResponse

_SHORT_OFFSET = re.compile(r'([+-]\d{2})$')


def normalize_db_datetime(v):
    """
    Fix datetime values coming from the database

    PostgreSQL returns: '2025-10-01 09:17:39.587802+00'
    Pydantic expects: '2025-10-01 09:17:39.587802+00:00'
    SQLite drops the offset entirely; stored values are UTC.
    """
    if v == '' or v is None:
        return None

    if isinstance(v, str) and _SHORT_OFFSET.search(v):
        v = v + ':00'

    if isinstance(v, datetime) and v.tzinfo is None:
        v = v.replace(tzinfo=timezone.utc)

    return v


__all__ = ["DataResponse", "PaginationResponse", "normalize_db_datetime"]
