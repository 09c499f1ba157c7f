# ============================================================
# errors.py - Erreurs métier du service Scheduling
# ------------------------------------------------------------
# Chaque erreur porte un code stable et un statut HTTP ; le
# handler FastAPI (api.py) les convertit en réponse JSON.
# ============================================================


class SchedulingError(Exception):
    code = "error"
    status_code = 400

    def __init__(self, message: str, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> dict:
        return {"error": self.code, "detail": self.message, **self.extra}


class NotFound(SchedulingError):
    code = "not_found"
    status_code = 404


class InvalidInput(SchedulingError):
    code = "invalid_input"
    status_code = 400


class RoomUnavailable(SchedulingError):
    code = "room_unavailable"
    status_code = 400


class Conflict(SchedulingError):
    code = "conflict"
    status_code = 409

    def __init__(self, message: str, meeting_ids=(), **extra):
        super().__init__(message, meeting_ids=list(meeting_ids), **extra)
        self.meeting_ids = list(meeting_ids)


class InvalidState(SchedulingError):
    code = "invalid_state"
    status_code = 409


class CodeSpaceExhausted(SchedulingError):
    code = "code_space_exhausted"
    status_code = 503


# violation d'unicité remontée par la base sur access_code
class DuplicateCode(Conflict):
    pass
