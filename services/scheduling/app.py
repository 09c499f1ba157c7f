# ============================================================
# app.py - Point d'entrée du service Scheduling
# ------------------------------------------------------------
# Ce module initialise l'application FastAPI :
#   - Configure les logs
#   - Crée les tables dans la base de données
#   - Démarre le thread qui publie les événements vers RabbitMQ
#   - Monte les routes (salles, réunions, utilisateurs privilégiés)
# ============================================================
import logging

from fastapi import FastAPI
from sqlmodel import SQLModel

from services.scheduling import models  # noqa: F401  (enregistre les tables)
from services.scheduling.api import router, scheduling_error_handler
from services.scheduling.config import LOG_LEVEL
from services.scheduling.deps import engine, publisher
from services.scheduling.errors import SchedulingError
from services.scheduling.privileged_api import router as privileged_router
from services.scheduling.room_api import router as room_router


def _init_logging():
    level = getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s in %(module)s: %(message)s"))
    root = logging.getLogger()
    root.setLevel(level)
    if not root.handlers:
        root.addHandler(handler)


_init_logging()

app = FastAPI(title="Scheduling Service")
app.add_exception_handler(SchedulingError, scheduling_error_handler)


# Exécuté automatiquement par FastAPI au lancement du conteneur.
# 1. Crée les tables SQL.
# 2. Lance le thread de publication pour ne pas bloquer l'API.
@app.on_event("startup")
def start():
    SQLModel.metadata.create_all(engine)
    publisher.start()


@app.on_event("shutdown")
def stop():
    publisher.stop()


@app.get("/health")
def health():
    return {"ok": True}


app.include_router(room_router)
app.include_router(router)
app.include_router(privileged_router)
