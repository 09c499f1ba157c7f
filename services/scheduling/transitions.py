# ============================================================
# transitions.py - Transitions d'état d'une réunion
# ------------------------------------------------------------
# Fonctions pures : (réunion chargée, commande) -> changements à
# écrire. La persistance est faite ensuite par le repository via
# une écriture conditionnelle sur le statut.
#
#   SCHEDULED → CANCELLED   (annulation, préemption)
#   SCHEDULED → COMPLETED   (déclenchement externe)
#   CANCELLED / COMPLETED   : terminaux
# ============================================================
from datetime import datetime

from services.scheduling.errors import InvalidInput, InvalidState
from services.scheduling.models import Meeting, MeetingStatus

UPDATABLE_FIELDS = (
    "title", "description", "start_date", "end_date", "attendees",
    "organizer_full_name", "organizer_email", "room_id",
)


def check_range(start: datetime, end: datetime, now: datetime):
    if start >= end:
        raise InvalidInput("start_date must be before end_date")
    if start < now:
        raise InvalidInput("start_date cannot be in the past")


def require_scheduled(meeting: Meeting, action: str):
    if meeting.status != MeetingStatus.SCHEDULED:
        raise InvalidState(f"only scheduled meetings can be {action} (meeting {meeting.id} is {meeting.status.value})")


def cancellation_changes(meeting: Meeting, reason: str, cancelled_by: str, at: datetime) -> dict:
    require_scheduled(meeting, "cancelled")
    return {
        "status": MeetingStatus.CANCELLED,
        "cancelled_reason": reason,
        "cancelled_by": cancelled_by,
        "cancelled_at": at,
    }


def completion_changes(meeting: Meeting) -> dict:
    require_scheduled(meeting, "completed")
    return {"status": MeetingStatus.COMPLETED}


# Écrasement champ par champ : seuls les champs fournis (non None)
# remplacent la valeur précédente.
def update_changes(meeting: Meeting, fields: dict) -> dict:
    require_scheduled(meeting, "updated")
    changes = {}
    for name in UPDATABLE_FIELDS:
        value = fields.get(name)
        if value is not None and value != getattr(meeting, name):
            changes[name] = value
    return changes
