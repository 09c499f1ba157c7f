# ============================================================
# deps.py - Dépendances FastAPI partagées
# ------------------------------------------------------------
# Moteur SQLModel, session par requête, publisher d'événements et
# assemblage des services métier. Les tests remplacent ces
# fonctions via app.dependency_overrides.
# ============================================================
from fastapi import Depends
from sqlmodel import Session, create_engine

from services.scheduling.clock import utcnow
from services.scheduling.codes import AccessCodeGenerator
from services.scheduling.config import DATABASE_URL
from services.scheduling.lifecycle import MeetingLifecycle
from services.scheduling.privileges import PrivilegeDirectory
from services.scheduling.publisher import EventPublisher
from services.scheduling.repository import MeetingRepository, PrivilegedUserRepository, RoomRepository
from services.scheduling.rooms import RoomService
from services.scheduling.scheduling import SchedulingService

_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, pool_pre_ping=True, connect_args=_connect_args)

publisher = EventPublisher()
code_generator = AccessCodeGenerator()


# fournit une Session DB par requête, auto-close
def get_session():
    with Session(engine) as s:
        yield s


def get_publisher():
    return publisher


def get_clock():
    return utcnow


def get_code_generator():
    return code_generator


def get_rooms(s: Session = Depends(get_session), codes=Depends(get_code_generator)) -> RoomService:
    return RoomService(RoomRepository(s), MeetingRepository(s), codes)


def get_privileges(s: Session = Depends(get_session)) -> PrivilegeDirectory:
    return PrivilegeDirectory(PrivilegedUserRepository(s))


def get_lifecycle(s: Session = Depends(get_session), codes=Depends(get_code_generator),
                  clock=Depends(get_clock)) -> MeetingLifecycle:
    return MeetingLifecycle(RoomRepository(s), MeetingRepository(s), codes, clock)


def get_scheduler(lifecycle: MeetingLifecycle = Depends(get_lifecycle),
                  privileges: PrivilegeDirectory = Depends(get_privileges),
                  pub=Depends(get_publisher)) -> SchedulingService:
    return SchedulingService(lifecycle, privileges, pub)
