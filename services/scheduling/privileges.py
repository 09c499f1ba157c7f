# ============================================================
# privileges.py - Organisateurs privilégiés
# ------------------------------------------------------------
# Registre des emails ayant priorité de réservation. Sert
# d'oracle à la création de réunion : is_privileged(email) est
# vrai seulement pour un enregistrement actif.
# ============================================================
from typing import Optional

from services.scheduling.errors import NotFound
from services.scheduling.models import PrivilegedUser, PrivilegedUserCreate, PrivilegedUserUpdate
from services.scheduling.repository import PrivilegedUserRepository


class PrivilegeDirectory:
    def __init__(self, users: PrivilegedUserRepository):
        self.users = users

    def is_privileged(self, email: str) -> bool:
        return self.users.get_active_by_email(email) is not None

    def create(self, data: PrivilegedUserCreate) -> PrivilegedUser:
        return self.users.create(PrivilegedUser(**data.model_dump()))

    def get(self, user_id: int) -> PrivilegedUser:
        user = self.users.get(user_id)
        if not user:
            raise NotFound(f"privileged user {user_id} not found")
        return user

    def list(self, company: Optional[str] = None, active: Optional[bool] = None):
        return self.users.list(company=company, active_only=bool(active))

    def update(self, user_id: int, data: PrivilegedUserUpdate) -> PrivilegedUser:
        user = self.get(user_id)
        values = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        return self.users.update(user, values)

    def delete(self, user_id: int):
        self.users.delete(self.get(user_id))
