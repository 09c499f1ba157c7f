# ============================================================
# lifecycle.py - Cycle de vie des réunions
# ------------------------------------------------------------
# create / update / cancel (par id ou par code) / complete, avec
# validation des dates, disponibilité de la salle et résolution
# des conflits. Chaque opération suit le même schéma :
#   charger -> calculer les changements -> écrire -> commit
# Aucun envoi d'email ici (voir scheduling.py).
# ============================================================
from datetime import datetime, timedelta, timezone
from typing import Optional

from services.scheduling import codes
from services.scheduling.clock import to_utc, utcnow
from services.scheduling.config import UNKNOWN_CANCELLER
from services.scheduling.conflicts import ConflictResolver
from services.scheduling.errors import Conflict, InvalidState, NotFound, RoomUnavailable
from services.scheduling.models import Meeting, MeetingCreate, MeetingStatus, MeetingUpdate, Room
from services.scheduling.repository import MeetingRepository, RoomRepository
from services.scheduling.transitions import (
    cancellation_changes,
    check_range,
    completion_changes,
    update_changes,
)


class MeetingLifecycle:
    def __init__(self, rooms: RoomRepository, meetings: MeetingRepository,
                 code_generator: codes.AccessCodeGenerator, clock=utcnow):
        self.rooms = rooms
        self.meetings = meetings
        self.codes = code_generator
        self.clock = clock
        self.resolver = ConflictResolver(meetings, clock)

    # ------------------------------------------------------------
    # Lectures
    # ------------------------------------------------------------
    def get(self, meeting_id: int) -> Meeting:
        m = self.meetings.get(meeting_id)
        if not m:
            raise NotFound(f"meeting {meeting_id} not found")
        return m

    def find_by_access_code(self, code: str) -> Meeting:
        m = self.meetings.get_by_access_code(code)
        if not m:
            raise NotFound("no meeting matches this access code")
        return m

    def bookable_room(self, room_id: int) -> Room:
        room = self.rooms.get(room_id)
        if not room:
            raise NotFound(f"room {room_id} not found")
        if not room.available:
            raise RoomUnavailable(f"room {room.name!r} is not available for booking")
        return room

    def list(self, room_id=None, status=None, organizer=None, start=None, end=None):
        if room_id is not None:
            return self.meetings.list(room_id=room_id, status=status)
        if organizer:
            return self.meetings.list(organizer=organizer)
        if start is not None and end is not None:
            return self.meetings.scheduled_between(to_utc(start), to_utc(end))
        return self.meetings.list(status=status)

    def upcoming(self, limit: int):
        return self.meetings.upcoming(self.clock(), limit)

    # planning d'une salle sur une journée UTC
    def room_schedule(self, room_id: int, day):
        start = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
        return self.meetings.starting_between(room_id, start, start + timedelta(days=1))

    # ------------------------------------------------------------
    # Création
    # ------------------------------------------------------------
    def create(self, data: MeetingCreate, privileged: bool):
        start, end = to_utc(data.start_date), to_utc(data.end_date)
        check_range(start, end, self.clock())
        room = self.bookable_room(data.room_id)

        try:
            outcome = self.resolver.resolve(
                room.id, start, end, data.organizer_full_name, privileged,
            )
            if not outcome.accepted:
                raise Conflict("meetings are already scheduled in this slot", outcome.meeting_ids)

            meeting = Meeting(
                title=data.title,
                description=data.description,
                start_date=start,
                end_date=end,
                attendees=list(data.attendees),
                organizer_full_name=data.organizer_full_name,
                organizer_email=data.organizer_email,
                room_id=room.id,
                status=MeetingStatus.SCHEDULED,
                is_organizer_privileged=privileged,
                access_code=self.codes.generate_unique(codes.MEETING, self.meetings.access_code_exists),
            )
            # commit unique : préemptions + nouvelle réunion
            meeting = self.meetings.create(meeting)
        except Exception:
            self.meetings.rollback()
            raise
        return meeting, room, outcome

    # ------------------------------------------------------------
    # Modification
    # ------------------------------------------------------------
    # Retourne (réunion, salle, participants avant modification, changements)
    def update(self, meeting_id: int, data: MeetingUpdate):
        meeting = self.get(meeting_id)
        fields = data.model_dump(exclude_unset=True)
        for key in ("start_date", "end_date"):
            if fields.get(key) is not None:
                fields[key] = to_utc(fields[key])

        changes = update_changes(meeting, fields)
        start = changes.get("start_date", meeting.start_date)
        end = changes.get("end_date", meeting.end_date)
        check_range(start, end, self.clock())
        room = self.bookable_room(changes.get("room_id", meeting.room_id))

        outcome = self.resolver.resolve(
            room.id, start, end, meeting.organizer_full_name, meeting.is_organizer_privileged,
            is_update=True, self_meeting_id=meeting.id,
        )
        if not outcome.accepted:
            raise Conflict("meetings are already scheduled in this slot", outcome.meeting_ids)

        previous_attendees = list(meeting.attendees)
        if changes:
            self._write(meeting, changes, "updated")
        return meeting, room, previous_attendees, changes

    # ------------------------------------------------------------
    # Annulation / clôture
    # ------------------------------------------------------------
    def cancel_by_id(self, meeting_id: int, reason: str, cancelled_by: Optional[str] = None) -> Meeting:
        meeting = self.get(meeting_id)
        return self._cancel(meeting, reason, cancelled_by or UNKNOWN_CANCELLER)

    # le code d'accès sert d'authentification : par défaut c'est
    # l'organisateur lui-même qui annule
    def cancel_by_access_code(self, code: str, reason: str, cancelled_by: Optional[str] = None) -> Meeting:
        meeting = self.find_by_access_code(code)
        return self._cancel(meeting, reason, cancelled_by or meeting.organizer_full_name)

    def complete(self, meeting_id: int) -> Meeting:
        meeting = self.get(meeting_id)
        return self._write(meeting, completion_changes(meeting), "completed")

    def delete(self, meeting_id: int):
        self.meetings.delete(self.get(meeting_id))

    def _cancel(self, meeting: Meeting, reason: str, cancelled_by: str) -> Meeting:
        changes = cancellation_changes(meeting, reason, cancelled_by, self.clock())
        return self._write(meeting, changes, "cancelled")

    def _write(self, meeting: Meeting, changes: dict, action: str) -> Meeting:
        if not self.meetings.transition(meeting.id, changes):
            # une autre requête a changé le statut entre lecture et écriture
            self.meetings.rollback()
            raise InvalidState(f"meeting {meeting.id} is no longer scheduled, it cannot be {action}")
        self.meetings.commit()
        return self.meetings.refresh(meeting)
