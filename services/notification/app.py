# ============================================================
# app.py - Point d'entrée du service Notification
# ------------------------------------------------------------
# Démarre le consumer RabbitMQ dans un thread au lancement et
# expose /health.
# ============================================================
import logging
import threading

from fastapi import FastAPI

from services.notification.config import LOG_LEVEL
from services.notification.consumer import start_consumer

root = logging.getLogger()
root.setLevel(getattr(logging, LOG_LEVEL.upper(), logging.INFO))
if not root.handlers:
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s in %(module)s: %(message)s"))
    root.addHandler(_handler)

app = FastAPI(title="Notification Service")


@app.on_event("startup")
def startup():
    threading.Thread(target=start_consumer, daemon=True).start()


@app.get("/health")
def health():
    return {"ok": True}
