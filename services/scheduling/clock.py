# ============================================================
# clock.py - Gestion des instants
# ------------------------------------------------------------
# Tous les instants manipulés sont des datetimes *aware* en UTC.
# Les dates reçues sans tz sont interprétées dans LOCAL_TZ.
# ============================================================
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from services.scheduling.config import LOCAL_TZ

_LOCAL = ZoneInfo(LOCAL_TZ)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    # si pas de tz, on suppose la timezone locale
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_LOCAL)
    return dt.astimezone(timezone.utc)


def isoformat(dt):
    if dt is None:
        return None
    return to_utc(dt).isoformat()
