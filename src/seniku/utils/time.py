from datetime import datetime
from typing import Optional

import pytz

from src.seniku.config.settings import APP_TIMEZONE

LOCAL_TZ = pytz.timezone(APP_TIMEZONE)


def get_current_time() -> datetime:
    """Current UTC time as a naive datetime, the form every timestamp column stores."""
    return datetime.now(pytz.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(pytz.utc).replace(tzinfo=None)
    return value


def to_local(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    return pytz.utc.localize(to_naive_utc(value)).astimezone(LOCAL_TZ)


def format_local_date(value: Optional[datetime], fmt: str = "%Y-%m-%d") -> str:
    local = to_local(value)
    return local.strftime(fmt) if local else "-"


def today_stamp() -> str:
    return datetime.now(LOCAL_TZ).strftime("%Y-%m-%d")
