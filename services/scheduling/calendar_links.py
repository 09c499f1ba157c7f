# ============================================================
# calendar_links.py - Liens d'agenda et fichier ICS
# ------------------------------------------------------------
# Liens Google Calendar / Outlook et document iCalendar pour
# qu'un participant ajoute la réunion à son agenda. Les liens
# voyagent dans chaque événement publié vers Notification.
# ============================================================
import uuid
from datetime import datetime
from urllib.parse import urlencode

from services.scheduling.clock import isoformat, to_utc, utcnow
from services.scheduling.config import PUBLIC_BASE_URL
from services.scheduling.models import Meeting


def _stamp(dt: datetime) -> str:
    return to_utc(dt).strftime("%Y%m%dT%H%M%SZ")


def _params(**kw) -> str:
    return urlencode({k: v for k, v in kw.items() if v})


def google_link(meeting: Meeting, location: str = "") -> str:
    q = _params(
        action="TEMPLATE",
        text=meeting.title,
        dates=f"{_stamp(meeting.start_date)}/{_stamp(meeting.end_date)}",
        details=meeting.description or "",
        location=location,
    )
    return f"https://calendar.google.com/calendar/render?{q}"


def outlook_link(meeting: Meeting, location: str = "") -> str:
    q = _params(
        subject=meeting.title,
        startdt=isoformat(meeting.start_date),
        enddt=isoformat(meeting.end_date),
        body=meeting.description or "",
        location=location,
    )
    return f"https://outlook.live.com/calendar/0/deeplink/compose?{q}"


def ics_link(meeting_id: int) -> str:
    return f"{PUBLIC_BASE_URL}/v1/calendar/ics/{meeting_id}"


def links(meeting: Meeting, location: str = "") -> dict:
    return {
        "google": google_link(meeting, location),
        "outlook": outlook_link(meeting, location),
        "ics": ics_link(meeting.id),
    }


def _escape(text: str) -> str:
    return (text or "").replace("\\", "\\\\").replace(";", "\\;").replace(",", "\\,").replace("\n", "\\n")


def ics_content(meeting: Meeting, location: str = "", now=None) -> str:
    now = now or utcnow()
    status = "CANCELLED" if meeting.status.value == "cancelled" else "CONFIRMED"
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//Rooms Scheduling//Meeting Calendar//EN",
        "BEGIN:VEVENT",
        f"UID:meeting-{meeting.id}-{uuid.uuid4().hex[:12]}@rooms-scheduling",
        f"DTSTAMP:{_stamp(now)}",
        f"DTSTART:{_stamp(meeting.start_date)}",
        f"DTEND:{_stamp(meeting.end_date)}",
        f"SUMMARY:{_escape(meeting.title)}",
        f"DESCRIPTION:{_escape(meeting.description)}",
    ]
    if location:
        lines.append(f"LOCATION:{_escape(location)}")
    lines += [f"STATUS:{status}", "SEQUENCE:0", "END:VEVENT", "END:VCALENDAR"]
    return "\r\n".join(lines) + "\r\n"
