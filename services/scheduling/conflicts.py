# ============================================================
# conflicts.py - Résolution des conflits de créneaux
# ------------------------------------------------------------
# Pour une salle et un créneau candidat :
#   1. on récupère les réunions SCHEDULED qui chevauchent
#      (en excluant la réunion elle-même lors d'une modification)
#   2. organisateur non privilégié + conflits  -> REJECTED
#   3. organisateur privilégié + conflits      -> toutes les réunions
#      en conflit passent CANCELLED (cancelled_by = "SYSTEM")
#
# La préemption est inconditionnelle : on ne regarde pas si
# l'organisateur de la réunion annulée est lui-même privilégié.
# Les écritures ne sont pas commitées ici, l'appelant termine la
# transaction avec l'insertion / la mise à jour de la réunion.
# ============================================================
import logging
from dataclasses import dataclass
from typing import Tuple

from services.scheduling.clock import utcnow
from services.scheduling.config import SYSTEM_CANCELLER
from services.scheduling.overlap import overlaps
from services.scheduling.repository import MeetingRepository
from services.scheduling.transitions import cancellation_changes

logger = logging.getLogger(__name__)

ACCEPTED = "accepted"
ACCEPTED_WITH_PREEMPTIONS = "accepted_with_preemptions"
REJECTED = "rejected"

PREEMPTION_REASON = (
    "Automatically cancelled: conflicts with a meeting booked by privileged organizer {name}"
)


@dataclass(frozen=True)
class Outcome:
    kind: str
    meeting_ids: Tuple[int, ...] = ()

    @property
    def accepted(self) -> bool:
        return self.kind != REJECTED


class ConflictResolver:
    def __init__(self, meetings: MeetingRepository, clock=utcnow):
        self.meetings = meetings
        self.clock = clock

    def find_conflicts(self, room_id: int, start, end, self_meeting_id=None):
        rows = self.meetings.find_overlapping(room_id, start, end, exclude_id=self_meeting_id)
        return [m for m in rows if overlaps(start, end, m.start_date, m.end_date)]

    def resolve(self, room_id: int, start, end, organizer_name: str, privileged: bool,
                is_update: bool = False, self_meeting_id=None) -> Outcome:
        conflicts = self.find_conflicts(room_id, start, end, self_meeting_id if is_update else None)
        if not conflicts:
            return Outcome(ACCEPTED)

        ids = tuple(m.id for m in conflicts)
        # une modification ne préempte jamais
        if not privileged or is_update:
            logger.info("room %s: slot %s-%s rejected, conflicts with %s", room_id, start, end, ids)
            return Outcome(REJECTED, ids)

        now = self.clock()
        reason = PREEMPTION_REASON.format(name=organizer_name)
        preempted = []
        for m in conflicts:
            changes = cancellation_changes(m, reason, SYSTEM_CANCELLER, now)
            if self.meetings.transition(m.id, changes):
                preempted.append(m.id)
            else:
                # annulée par une autre requête entre la lecture et l'écriture
                logger.warning("meeting %s left SCHEDULED before preemption, skipped", m.id)
        logger.info("room %s: %s preempted meetings %s", room_id, organizer_name, preempted)
        return Outcome(ACCEPTED_WITH_PREEMPTIONS, tuple(preempted))
