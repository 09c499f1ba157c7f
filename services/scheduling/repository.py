# ============================================================
# repository.py - Accès aux données Scheduling
# ------------------------------------------------------------
# Design pattern "Repository" pour les tables Room, Meeting et
# PrivilegedUser. Isole SQL/SQLModel de la logique métier.
#
# Les changements d'état passent par des écritures conditionnelles
# (UPDATE ... WHERE status = attendu) : si une autre requête a
# modifié l'enregistrement entre-temps, rowcount vaut 0.
# ============================================================
from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from services.scheduling.clock import utcnow
from services.scheduling.errors import Conflict, DuplicateCode
from services.scheduling.models import Meeting, MeetingStatus, PrivilegedUser, Room


class RoomRepository:
    def __init__(self, session: Session):
        self.session = session

    def create(self, room: Room) -> Room:
        self.session.add(room)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise DuplicateCode("room access code already exists")
        self.session.refresh(room)
        return room

    def get(self, room_id: int) -> Optional[Room]:
        return self.session.get(Room, room_id)

    def get_by_access_code(self, code: str) -> Optional[Room]:
        return self.session.exec(select(Room).where(Room.access_code == code)).first()

    def access_code_exists(self, code: str) -> bool:
        return self.get_by_access_code(code) is not None

    def list(self, company: Optional[str] = None, available: Optional[bool] = None) -> List[Room]:
        q = select(Room)
        if company:
            q = q.where(Room.company == company)
        if available is not None:
            q = q.where(Room.available == available)
        return list(self.session.exec(q.order_by(Room.id)).all())

    def update(self, room: Room, values: dict) -> Room:
        for k, v in values.items():
            setattr(room, k, v)
        room.updated_at = utcnow()
        self.session.add(room)
        self.session.commit()
        self.session.refresh(room)
        return room

    # bascule atomique : n'écrit que si locked vaut encore l'ancienne valeur
    def set_locked(self, code: str, locked: bool) -> bool:
        stmt = (
            update(Room)
            .where(Room.access_code == code, Room.locked == (not locked))
            .values(locked=locked, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        res = self.session.exec(stmt)
        self.session.commit()
        return res.rowcount == 1

    def refresh(self, room: Room) -> Room:
        self.session.refresh(room)
        return room

    def delete(self, room: Room):
        self.session.delete(room)
        self.session.commit()


class MeetingRepository:
    def __init__(self, session: Session):
        self.session = session

    # add sans commit séparé : les annulations préparées par la
    # préemption partent dans la même transaction que l'insertion
    def create(self, meeting: Meeting) -> Meeting:
        self.session.add(meeting)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise DuplicateCode("meeting access code already exists")
        self.session.refresh(meeting)
        return meeting

    def get(self, meeting_id: int) -> Optional[Meeting]:
        return self.session.get(Meeting, meeting_id)

    def get_by_access_code(self, code: str) -> Optional[Meeting]:
        return self.session.exec(select(Meeting).where(Meeting.access_code == code)).first()

    def access_code_exists(self, code: str) -> bool:
        return self.get_by_access_code(code) is not None

    # Forme fermée du prédicat overlaps() : start < fin AND end > début
    def find_overlapping(self, room_id: int, start: datetime, end: datetime,
                         exclude_id: Optional[int] = None) -> List[Meeting]:
        q = select(Meeting).where(
            Meeting.room_id == room_id,
            Meeting.status == MeetingStatus.SCHEDULED,
            Meeting.start_date < end,
            Meeting.end_date > start,
        )
        if exclude_id is not None:
            q = q.where(Meeting.id != exclude_id)
        return list(self.session.exec(q.order_by(Meeting.start_date)).all())

    def list(self, room_id: Optional[int] = None, status: Optional[MeetingStatus] = None,
             organizer: Optional[str] = None) -> List[Meeting]:
        q = select(Meeting)
        if room_id is not None:
            q = q.where(Meeting.room_id == room_id)
        if status is not None:
            q = q.where(Meeting.status == status)
        if organizer:
            q = q.where(Meeting.organizer_email == organizer)
        return list(self.session.exec(q.order_by(Meeting.start_date)).all())

    def scheduled_between(self, start: datetime, end: datetime, room_id: Optional[int] = None) -> List[Meeting]:
        q = select(Meeting).where(
            Meeting.status == MeetingStatus.SCHEDULED,
            Meeting.start_date < end,
            Meeting.end_date > start,
        )
        if room_id is not None:
            q = q.where(Meeting.room_id == room_id)
        return list(self.session.exec(q.order_by(Meeting.start_date)).all())

    def starting_between(self, room_id: int, start: datetime, end: datetime) -> List[Meeting]:
        q = select(Meeting).where(
            Meeting.room_id == room_id,
            Meeting.status == MeetingStatus.SCHEDULED,
            Meeting.start_date >= start,
            Meeting.start_date < end,
        )
        return list(self.session.exec(q.order_by(Meeting.start_date)).all())

    def upcoming(self, now: datetime, limit: int) -> List[Meeting]:
        q = (
            select(Meeting)
            .where(Meeting.status == MeetingStatus.SCHEDULED, Meeting.start_date >= now)
            .order_by(Meeting.start_date)
            .limit(limit)
        )
        return list(self.session.exec(q).all())

    def has_scheduled(self, room_id: int) -> bool:
        q = select(Meeting.id).where(Meeting.room_id == room_id, Meeting.status == MeetingStatus.SCHEDULED)
        return self.session.exec(q).first() is not None

    # Écriture conditionnelle, sans commit : l'appelant décide de la
    # fin de transaction (préemption + insertion groupées).
    def transition(self, meeting_id: int, values: dict,
                   expected: MeetingStatus = MeetingStatus.SCHEDULED) -> bool:
        stmt = (
            update(Meeting)
            .where(Meeting.id == meeting_id, Meeting.status == expected)
            .values(updated_at=utcnow(), **values)
            .execution_options(synchronize_session=False)
        )
        res = self.session.exec(stmt)
        return res.rowcount == 1

    # historique d'une salle supprimée, commit avec la suppression de la salle
    def delete_for_room(self, room_id: int):
        self.session.exec(
            delete(Meeting).where(Meeting.room_id == room_id).execution_options(synchronize_session=False)
        )

    def commit(self):
        self.session.commit()

    def rollback(self):
        self.session.rollback()

    def refresh(self, meeting: Meeting) -> Meeting:
        self.session.refresh(meeting)
        return meeting

    def delete(self, meeting: Meeting):
        self.session.delete(meeting)
        self.session.commit()


class PrivilegedUserRepository:
    def __init__(self, session: Session):
        self.session = session

    def create(self, user: PrivilegedUser) -> PrivilegedUser:
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise Conflict(f"email already registered: {user.email}")
        self.session.refresh(user)
        return user

    def get(self, user_id: int) -> Optional[PrivilegedUser]:
        return self.session.get(PrivilegedUser, user_id)

    def get_active_by_email(self, email: str) -> Optional[PrivilegedUser]:
        q = select(PrivilegedUser).where(
            PrivilegedUser.email == email.strip().lower(),
            PrivilegedUser.is_active == True,  # noqa: E712
        )
        return self.session.exec(q).first()

    def list(self, company: Optional[str] = None, active_only: bool = False) -> List[PrivilegedUser]:
        q = select(PrivilegedUser)
        if company:
            q = q.where(PrivilegedUser.company == company, PrivilegedUser.is_active == True)  # noqa: E712
        elif active_only:
            q = q.where(PrivilegedUser.is_active == True)  # noqa: E712
        return list(self.session.exec(q.order_by(PrivilegedUser.id)).all())

    def update(self, user: PrivilegedUser, values: dict) -> PrivilegedUser:
        for k, v in values.items():
            setattr(user, k, v)
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise Conflict(f"email already registered: {values.get('email')}")
        self.session.refresh(user)
        return user

    def delete(self, user: PrivilegedUser):
        self.session.delete(user)
        self.session.commit()
