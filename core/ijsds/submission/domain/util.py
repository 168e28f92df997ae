"""Helpers and utilities."""

from typing import Dict, Any, List, Optional, Callable, Iterable
from datetime import datetime

from dateutil.parser import parse as parse_date
from pytz import UTC


def get_tzaware_utc_now() -> datetime:
    """Generate a datetime for the current moment in UTC."""
    return datetime.now(UTC)


def coerce_datetime(value: Any) -> Optional[datetime]:
    """Parse ISO-8601 strings, and make naive datetimes UTC."""
    if value is None or value == '':
        return None
    if isinstance(value, str):
        value = parse_date(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


def dict_coerce(factory: Callable[..., Any], data: dict) -> Dict[str, Any]:
    return {event_id: factory(**value) if isinstance(value, dict) else value
            for event_id, value in data.items()}


def list_coerce(factory: Callable[..., Any], data: Iterable) -> List[Any]:
    return [factory(**value) if isinstance(value, dict) else value
            for value in data]


def words(text: Optional[str], min_length: int = 0) -> List[str]:
    """Lowercase whitespace-delimited words longer than ``min_length``."""
    if not text:
        return []
    return [w for w in text.lower().split() if len(w) > min_length]


def email_domain(email: Optional[str]) -> Optional[str]:
    """The part of an e-mail address after the ``@``, lowercased."""
    if not email or '@' not in email:
        return None
    return email.rsplit('@', 1)[1].lower()
