# ============================================================
# Meetings API Router
# ------------------------------------------------------------
# Endpoints REST des réunions : création, consultation,
# modification, annulation (par id ou par code d'accès),
# clôture, suppression. Plus l'export ICS d'une réunion.
# Les erreurs métier (errors.py) sont converties en JSON par
# scheduling_error_handler.
# ============================================================
from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from services.scheduling import calendar_links
from services.scheduling.config import UPCOMING_DEFAULT_LIMIT
from services.scheduling.deps import get_lifecycle, get_scheduler
from services.scheduling.errors import InvalidInput, SchedulingError
from services.scheduling.lifecycle import MeetingLifecycle
from services.scheduling.models import (
    CancelByAccessCode,
    CancelMeeting,
    Meeting,
    MeetingCreate,
    MeetingStatus,
    MeetingUpdate,
)
from services.scheduling.scheduling import SchedulingService

router = APIRouter()


def scheduling_error_handler(request: Request, exc: SchedulingError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# ------------------------------------------------------------
# POST /v1/meetings - Créer une réunion
# ------------------------------------------------------------
# - Valide start < end et start >= maintenant
# - Salle disponible, puis conflits (rejet ou préemption)
# - Réponse 201 avec le code d'accès de la réunion
# ------------------------------------------------------------
@router.post("/v1/meetings", response_model=Meeting, status_code=201)
def create_meeting(data: MeetingCreate, svc: SchedulingService = Depends(get_scheduler)):
    return svc.create_meeting(data)


@router.get("/v1/meetings", response_model=List[Meeting])
def list_meetings(
    room: Optional[int] = None,
    organizer: Optional[str] = None,
    status: Optional[MeetingStatus] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    lc: MeetingLifecycle = Depends(get_lifecycle),
):
    if (start_date is None) != (end_date is None):
        raise InvalidInput("start_date and end_date must be given together")
    return lc.list(room_id=room, status=status, organizer=organizer, start=start_date, end=end_date)


@router.get("/v1/meetings/upcoming", response_model=List[Meeting])
def upcoming_meetings(limit: int = UPCOMING_DEFAULT_LIMIT, lc: MeetingLifecycle = Depends(get_lifecycle)):
    return lc.upcoming(limit)


# planning du jour (YYYY-MM-DD) d'une salle
@router.get("/v1/meetings/room-schedule/{room_id}/{day}", response_model=List[Meeting])
def room_schedule(room_id: int, day: date, lc: MeetingLifecycle = Depends(get_lifecycle)):
    return lc.room_schedule(room_id, day)


# consultation anonyme "ma réservation" via le code d'accès
@router.get("/v1/meetings/by-access-code/{access_code}", response_model=Meeting)
def meeting_by_access_code(access_code: str, lc: MeetingLifecycle = Depends(get_lifecycle)):
    return lc.find_by_access_code(access_code)


@router.get("/v1/meetings/{meeting_id}", response_model=Meeting)
def get_meeting(meeting_id: int, lc: MeetingLifecycle = Depends(get_lifecycle)):
    return lc.get(meeting_id)


# ------------------------------------------------------------
# PATCH /v1/meetings/{id} - Modifier une réunion
# ------------------------------------------------------------
# - Champs absents : valeur précédente conservée
# - Revalide dates, salle et conflits (sans se compter soi-même)
# ------------------------------------------------------------
@router.patch("/v1/meetings/{meeting_id}", response_model=Meeting)
def update_meeting(meeting_id: int, data: MeetingUpdate, svc: SchedulingService = Depends(get_scheduler)):
    return svc.update_meeting(meeting_id, data)


# ------------------------------------------------------------
# Annulation - seules les réunions SCHEDULED sont annulables
# ------------------------------------------------------------
@router.post("/v1/meetings/cancel-by-code", response_model=Meeting)
def cancel_by_access_code(data: CancelByAccessCode, svc: SchedulingService = Depends(get_scheduler)):
    return svc.cancel_by_access_code(data)


@router.post("/v1/meetings/{meeting_id}/cancel", response_model=Meeting)
def cancel_meeting(meeting_id: int, data: CancelMeeting, svc: SchedulingService = Depends(get_scheduler)):
    return svc.cancel_meeting(meeting_id, data)


@router.post("/v1/meetings/{meeting_id}/complete", response_model=Meeting)
def complete_meeting(meeting_id: int, svc: SchedulingService = Depends(get_scheduler)):
    return svc.complete_meeting(meeting_id)


@router.delete("/v1/meetings/{meeting_id}", status_code=204)
def delete_meeting(meeting_id: int, lc: MeetingLifecycle = Depends(get_lifecycle)):
    lc.delete(meeting_id)
    return Response(status_code=204)


# ------------------------------------------------------------
# GET /v1/calendar/ics/{id} - Fichier ICS d'une réunion
# ------------------------------------------------------------
@router.get("/v1/calendar/ics/{meeting_id}")
def meeting_ics(meeting_id: int, lc: MeetingLifecycle = Depends(get_lifecycle)):
    m = lc.get(meeting_id)
    room = lc.rooms.get(m.room_id)
    body = calendar_links.ics_content(m, room.name if room else "")
    return Response(
        content=body,
        media_type="text/calendar; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="meeting-{meeting_id}.ics"',
            "Cache-Control": "no-cache, no-store, must-revalidate",
        },
    )
