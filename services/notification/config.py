# ============================================================
# config.py - Paramètres du service Notification
# ============================================================
import os

RABBITMQ_HOST = os.getenv("RABBITMQ_HOST", "rabbitmq")
EVENTS_EXCHANGE = os.getenv("EVENTS_EXCHANGE", "events")

# SMTP_HOST vide : pas d'envoi réel, l'email est seulement journalisé
SMTP_HOST = os.getenv("SMTP_HOST", "")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER", "")
SMTP_PASS = os.getenv("SMTP_PASS", "")
SMTP_USE_TLS = os.getenv("SMTP_USE_TLS", "1").strip().lower() in {"1", "true", "yes", "on"}
MAIL_FROM = os.getenv("MAIL_FROM", "no-reply@rooms.local")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
