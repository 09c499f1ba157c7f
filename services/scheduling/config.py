# ============================================================
# config.py - Paramètres du service Scheduling
# ------------------------------------------------------------
# Toutes les valeurs viennent de l'environnement (docker-compose
# ou .env), avec des valeurs par défaut pour le développement.
# ============================================================
import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./scheduling.db")
RABBITMQ_HOST = os.getenv("RABBITMQ_HOST", "rabbitmq")
EVENTS_EXCHANGE = os.getenv("EVENTS_EXCHANGE", "events")

# fuseau supposé pour les dates reçues sans tz
LOCAL_TZ = os.getenv("LOCAL_TZ", "UTC")

# sert à construire les liens ICS envoyés dans les emails
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

CODE_MAX_ATTEMPTS = 10
UPCOMING_DEFAULT_LIMIT = 10

SYSTEM_CANCELLER = "SYSTEM"
UNKNOWN_CANCELLER = "Unknown"
