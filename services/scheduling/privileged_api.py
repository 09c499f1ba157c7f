# ============================================================
# Privileged users API Router
# ------------------------------------------------------------
# Gestion du registre des organisateurs prioritaires.
# ============================================================
from typing import List, Optional

from fastapi import APIRouter, Depends, Response

from services.scheduling.deps import get_privileges
from services.scheduling.models import PrivilegedUser, PrivilegedUserCreate, PrivilegedUserUpdate
from services.scheduling.privileges import PrivilegeDirectory

router = APIRouter()


@router.post("/v1/privileged-users", response_model=PrivilegedUser, status_code=201)
def create_privileged_user(data: PrivilegedUserCreate, d: PrivilegeDirectory = Depends(get_privileges)):
    return d.create(data)


@router.get("/v1/privileged-users", response_model=List[PrivilegedUser])
def list_privileged_users(company: Optional[str] = None, active: Optional[bool] = None,
                          d: PrivilegeDirectory = Depends(get_privileges)):
    return d.list(company=company, active=active)


@router.get("/v1/privileged-users/by-email/{email}")
def check_privileged(email: str, d: PrivilegeDirectory = Depends(get_privileges)):
    return {"email": email, "privileged": d.is_privileged(email)}


@router.get("/v1/privileged-users/{user_id}", response_model=PrivilegedUser)
def get_privileged_user(user_id: int, d: PrivilegeDirectory = Depends(get_privileges)):
    return d.get(user_id)


@router.patch("/v1/privileged-users/{user_id}", response_model=PrivilegedUser)
def update_privileged_user(user_id: int, data: PrivilegedUserUpdate, d: PrivilegeDirectory = Depends(get_privileges)):
    return d.update(user_id, data)


@router.delete("/v1/privileged-users/{user_id}", status_code=204)
def delete_privileged_user(user_id: int, d: PrivilegeDirectory = Depends(get_privileges)):
    d.delete(user_id)
    return Response(status_code=204)
