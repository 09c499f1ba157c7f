# ============================================================
# scheduling.py - Orchestration des réservations
# ------------------------------------------------------------
# Point d'entrée des opérations qui modifient une réunion :
#   - résout le privilège de l'organisateur (PrivilegeDirectory)
#   - délègue au cycle de vie (lifecycle.py)
#   - publie les événements de notification après le commit
#
# La publication est "fire-and-forget" : une erreur côté
# notification est journalisée et n'annule jamais la réservation.
# ============================================================
import logging
from typing import List

from services.scheduling import calendar_links
from services.scheduling.clock import isoformat
from services.scheduling.lifecycle import MeetingLifecycle
from services.scheduling.models import CancelByAccessCode, CancelMeeting, Meeting, MeetingCreate, MeetingUpdate
from services.scheduling.privileges import PrivilegeDirectory

logger = logging.getLogger(__name__)

MEETING_CREATED = "MeetingCreated"
MEETING_UPDATED = "MeetingUpdated"
MEETING_CANCELLED = "MeetingCancelled"
ATTENDEE_ADDED = "AttendeeAdded"
ATTENDEE_REMOVED = "AttendeeRemoved"

UNKNOWN_ROOM = "Unknown room"


def attendee_changes(before: List[str], after: List[str]):
    # ordre conservé, doublons retirés du diff
    old, new = set(before), set(after)
    added = list(dict.fromkeys(a for a in after if a not in old))
    removed = list(dict.fromkeys(a for a in before if a not in new))
    return added, removed


def serialize_meeting(m: Meeting) -> dict:
    return {
        "id": m.id,
        "title": m.title,
        "description": m.description,
        "start_date": isoformat(m.start_date),
        "end_date": isoformat(m.end_date),
        "attendees": list(m.attendees),
        "organizer_full_name": m.organizer_full_name,
        "organizer_email": m.organizer_email,
        "room_id": m.room_id,
        "status": m.status.value,
        "access_code": m.access_code,
        "is_organizer_privileged": m.is_organizer_privileged,
        "cancelled_reason": m.cancelled_reason,
        "cancelled_by": m.cancelled_by,
        "cancelled_at": isoformat(m.cancelled_at),
    }


class SchedulingService:
    def __init__(self, lifecycle: MeetingLifecycle, privileges: PrivilegeDirectory, publisher):
        self.lifecycle = lifecycle
        self.privileges = privileges
        self.publisher = publisher

    def create_meeting(self, data: MeetingCreate) -> Meeting:
        privileged = self.privileges.is_privileged(data.organizer_email)
        meeting, room, outcome = self.lifecycle.create(data, privileged)
        logger.info("meeting %s created in room %s (privileged=%s)", meeting.id, room.id, privileged)

        self._notify(MEETING_CREATED, meeting, room.name)
        for meeting_id in outcome.meeting_ids:
            self._notify(MEETING_CANCELLED, self.lifecycle.get(meeting_id), room.name)
        return meeting

    def update_meeting(self, meeting_id: int, data: MeetingUpdate) -> Meeting:
        meeting, room, previous, changes = self.lifecycle.update(meeting_id, data)
        if not changes:
            logger.info("meeting %s: nothing to update", meeting.id)
            return meeting
        added, removed = attendee_changes(previous, meeting.attendees)

        self._notify(MEETING_UPDATED, meeting, room.name, previousAttendees=previous)
        if added:
            self._notify(ATTENDEE_ADDED, meeting, room.name, attendees=added)
        if removed:
            self._notify(ATTENDEE_REMOVED, meeting, room.name, attendees=removed)
        return meeting

    def cancel_meeting(self, meeting_id: int, data: CancelMeeting) -> Meeting:
        meeting = self.lifecycle.cancel_by_id(meeting_id, data.cancelled_reason, data.cancelled_by)
        self._notify(MEETING_CANCELLED, meeting, self._room_name(meeting))
        return meeting

    def cancel_by_access_code(self, data: CancelByAccessCode) -> Meeting:
        meeting = self.lifecycle.cancel_by_access_code(data.access_code, data.cancelled_reason, data.cancelled_by)
        self._notify(MEETING_CANCELLED, meeting, self._room_name(meeting))
        return meeting

    def complete_meeting(self, meeting_id: int) -> Meeting:
        return self.lifecycle.complete(meeting_id)

    def _room_name(self, meeting: Meeting) -> str:
        room = self.lifecycle.rooms.get(meeting.room_id)
        return room.name if room else UNKNOWN_ROOM

    def _notify(self, event_type: str, meeting: Meeting, room_name: str, **extra):
        try:
            payload = {
                "meeting": serialize_meeting(meeting),
                "roomName": room_name,
                "links": calendar_links.links(meeting, room_name),
                **extra,
            }
            self.publisher.publish(event_type, payload)
        except Exception:
            logger.exception("could not queue %s for meeting %s", event_type, meeting.id)
