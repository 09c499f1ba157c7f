# ============================================================
# models.py - Modèles de données SQLModel (Scheduling Service)
# ------------------------------------------------------------
# Tables :
#   1. Room           : salle réservable, appairable à une tablette
#   2. Meeting        : réunion dans une salle
#   3. PrivilegedUser : organisateurs prioritaires (préemption)
# Plus les schémas d'entrée des routes (non-tables).
# ============================================================
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import EmailStr, field_validator
from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


def _utcnow():
    return datetime.now(timezone.utc)


# ------------------------------------------------------------
# Room
# ------------------------------------------------------------
#  - available : proposée à la réservation (modifiable par l'admin)
#  - locked    : associée à une tablette (lock/unlock par code)
#  - access_code : 6 chiffres, unique sur toutes les salles
# ------------------------------------------------------------
class Room(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: Optional[str] = None
    company: str = Field(index=True)
    access_code: str = Field(index=True, unique=True, max_length=6)
    available: bool = True
    locked: bool = False
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class MeetingStatus(str, Enum):
    SCHEDULED = "scheduled"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


# ------------------------------------------------------------
# Meeting
# ------------------------------------------------------------
# Cycle de vie : SCHEDULED → CANCELLED | COMPLETED (terminaux)
#  - room_id : clé étrangère, la salle est rechargée à part
#  - is_organizer_privileged : photo prise à la création
#  - access_code : 12 caractères, unique sur toutes les réunions
# ------------------------------------------------------------
class Meeting(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    description: Optional[str] = None
    start_date: datetime = Field(index=True)
    end_date: datetime
    attendees: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    organizer_full_name: str
    organizer_email: str = Field(index=True)
    room_id: int = Field(foreign_key="room.id", index=True)
    status: MeetingStatus = Field(default=MeetingStatus.SCHEDULED, index=True)
    is_organizer_privileged: bool = False
    cancelled_reason: Optional[str] = None
    cancelled_by: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    access_code: str = Field(index=True, unique=True, max_length=12)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class PrivilegedUser(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    full_name: str
    email: str = Field(index=True, unique=True)
    company: str = Field(index=True)
    is_active: bool = True
    created_at: datetime = Field(default_factory=_utcnow)


# ------------------------------------------------------------
# Schémas d'entrée
# ------------------------------------------------------------
class RoomCreate(SQLModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    company: str = Field(min_length=1)
    available: bool = True


class RoomUpdate(SQLModel):
    name: Optional[str] = None
    description: Optional[str] = None
    company: Optional[str] = None
    available: Optional[bool] = None


class AccessCodeIn(SQLModel):
    access_code: str = Field(min_length=1)


class LockStatus(SQLModel):
    locked: bool
    room: Room


class MeetingCreate(SQLModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    start_date: datetime
    end_date: datetime
    attendees: List[EmailStr] = Field(default_factory=list)
    organizer_full_name: str = Field(min_length=1)
    organizer_email: EmailStr
    room_id: int


# champs absents = valeur précédente conservée
class MeetingUpdate(SQLModel):
    title: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    attendees: Optional[List[EmailStr]] = None
    organizer_full_name: Optional[str] = None
    organizer_email: Optional[EmailStr] = None
    room_id: Optional[int] = None


class CancelMeeting(SQLModel):
    cancelled_reason: str = Field(min_length=1)
    cancelled_by: Optional[str] = None


class CancelByAccessCode(SQLModel):
    access_code: str = Field(min_length=1)
    cancelled_reason: str = Field(min_length=1)
    cancelled_by: Optional[str] = None


# emails stockés en minuscules, comparés sans la casse
class PrivilegedUserCreate(SQLModel):
    full_name: str = Field(min_length=1)
    email: EmailStr
    company: str = Field(min_length=1)
    is_active: bool = True

    @field_validator("email")
    @classmethod
    def _email(cls, v):
        return v.lower()


class PrivilegedUserUpdate(SQLModel):
    full_name: Optional[str] = None
    email: Optional[EmailStr] = None
    company: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def _email(cls, v):
        return None if v is None else v.lower()
