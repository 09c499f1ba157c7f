# ============================================================
# Rooms API Router
# ------------------------------------------------------------
# CRUD des salles + appairage tablette par code d'accès
# (lock / unlock / check-lock).
# ============================================================
from typing import List, Optional

from fastapi import APIRouter, Depends, Response

from services.scheduling.deps import get_rooms
from services.scheduling.models import AccessCodeIn, LockStatus, Room, RoomCreate, RoomUpdate
from services.scheduling.rooms import RoomService

router = APIRouter()


# code d'accès à 6 chiffres généré automatiquement
@router.post("/v1/rooms", response_model=Room, status_code=201)
def create_room(data: RoomCreate, rooms: RoomService = Depends(get_rooms)):
    return rooms.create(data)


@router.get("/v1/rooms", response_model=List[Room])
def list_rooms(company: Optional[str] = None, available: Optional[bool] = None,
               rooms: RoomService = Depends(get_rooms)):
    return rooms.list(company=company, available=available)


@router.get("/v1/rooms/by-access-code/{access_code}", response_model=Room)
def room_by_access_code(access_code: str, rooms: RoomService = Depends(get_rooms)):
    return rooms.find_by_access_code(access_code)


# ------------------------------------------------------------
# Appairage tablette
# ------------------------------------------------------------
# - lock   : 409 si la salle est déjà verrouillée
# - unlock : 409 si la salle n'est pas verrouillée
# ------------------------------------------------------------
@router.post("/v1/rooms/lock", response_model=Room)
def lock_room(data: AccessCodeIn, rooms: RoomService = Depends(get_rooms)):
    return rooms.lock(data.access_code)


@router.post("/v1/rooms/unlock", response_model=Room)
def unlock_room(data: AccessCodeIn, rooms: RoomService = Depends(get_rooms)):
    return rooms.unlock(data.access_code)


@router.get("/v1/rooms/check-lock/{access_code}", response_model=LockStatus)
def check_lock(access_code: str, rooms: RoomService = Depends(get_rooms)):
    return rooms.check_status(access_code)


@router.get("/v1/rooms/{room_id}", response_model=Room)
def get_room(room_id: int, rooms: RoomService = Depends(get_rooms)):
    return rooms.get(room_id)


@router.patch("/v1/rooms/{room_id}", response_model=Room)
def update_room(room_id: int, data: RoomUpdate, rooms: RoomService = Depends(get_rooms)):
    return rooms.update(room_id, data)


@router.delete("/v1/rooms/{room_id}", status_code=204)
def delete_room(room_id: int, rooms: RoomService = Depends(get_rooms)):
    rooms.delete(room_id)
    return Response(status_code=204)
