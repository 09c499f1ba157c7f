# ============================================================
# rooms.py - Gestion des salles et appairage tablette
# ------------------------------------------------------------
# Une salle reçoit à sa création un code d'accès à 6 chiffres.
# La tablette posée devant la salle ne connaît que ce code :
#   - lock   : associe la salle à une tablette (locked=True)
#   - unlock : dissocie la salle (locked=False)
#   - check_status : état courant, lecture seule
# ============================================================
import logging
from typing import Optional

from services.scheduling import codes
from services.scheduling.errors import InvalidState, NotFound
from services.scheduling.models import LockStatus, Room, RoomCreate, RoomUpdate
from services.scheduling.repository import MeetingRepository, RoomRepository

logger = logging.getLogger(__name__)

# champs non nullables : un null explicite est ignoré
_REQUIRED = ("name", "company", "available")


class RoomService:
    def __init__(self, rooms: RoomRepository, meetings: MeetingRepository,
                 code_generator: codes.AccessCodeGenerator):
        self.rooms = rooms
        self.meetings = meetings
        self.codes = code_generator

    def create(self, data: RoomCreate) -> Room:
        code = self.codes.generate_unique(codes.ROOM, self.rooms.access_code_exists)
        room = self.rooms.create(Room(**data.model_dump(), access_code=code))
        logger.info("room %s (%s) created", room.id, room.name)
        return room

    def get(self, room_id: int) -> Room:
        room = self.rooms.get(room_id)
        if not room:
            raise NotFound(f"room {room_id} not found")
        return room

    def find_by_access_code(self, code: str) -> Room:
        room = self.rooms.get_by_access_code(code)
        if not room:
            raise NotFound("no room matches this access code")
        return room

    def list(self, company: Optional[str] = None, available: Optional[bool] = None):
        if company:
            return self.rooms.list(company=company)
        # comme l'ancienne API : seul available=true filtre
        return self.rooms.list(available=True if available else None)

    def update(self, room_id: int, data: RoomUpdate) -> Room:
        room = self.get(room_id)
        values = {
            k: v for k, v in data.model_dump(exclude_unset=True).items()
            if v is not None or k not in _REQUIRED
        }
        return self.rooms.update(room, values)

    # une salle encore référencée par une réunion programmée est conservée
    def delete(self, room_id: int):
        room = self.get(room_id)
        if self.meetings.has_scheduled(room.id):
            raise InvalidState(f"room {room_id} still has scheduled meetings")
        self.meetings.delete_for_room(room.id)
        self.rooms.delete(room)
        logger.info("room %s deleted", room_id)

    # ------------------------------------------------------------
    # Verrouillage par code d'accès
    # ------------------------------------------------------------
    def lock(self, code: str) -> Room:
        return self._flip(code, locked=True)

    def unlock(self, code: str) -> Room:
        return self._flip(code, locked=False)

    def check_status(self, code: str) -> LockStatus:
        room = self.find_by_access_code(code)
        return LockStatus(locked=room.locked, room=room)

    def _flip(self, code: str, locked: bool) -> Room:
        room = self.find_by_access_code(code)
        if room.locked == locked:
            raise InvalidState("room is already locked to a console" if locked else "room is not locked")
        if not self.rooms.set_locked(code, locked):
            raise InvalidState("room lock state changed concurrently")
        self.rooms.refresh(room)
        logger.info("room %s %s", room.id, "locked" if locked else "unlocked")
        return room
