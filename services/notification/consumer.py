# ============================================================
# Notification Service - RabbitMQ Consumer
# ------------------------------------------------------------
# Écoute l'échange "events" et envoie les emails de réunion :
#   - MeetingCreated   : confirmation organisateur + invitations
#   - MeetingUpdated   : mise à jour organisateur + participants restants
#   - AttendeeAdded    : invitation aux nouveaux participants
#   - AttendeeRemoved  : avis aux participants retirés
#   - MeetingCancelled : avis d'annulation à tous (organisateur inclus)
# Les autres types d'événements sont ignorés.
# ============================================================
import json
import logging
import time

import pika

from services.notification.config import EVENTS_EXCHANGE, RABBITMQ_HOST
from services.notification.mailer import Mailer

logger = logging.getLogger(__name__)


def _ctx(p: dict) -> dict:
    return {"meeting": p["meeting"], "room_name": p.get("roomName", ""), "links": p.get("links", {})}


def _unique(addresses):
    return list(dict.fromkeys(a for a in addresses if a))


def on_created(p: dict, mailer: Mailer):
    m, ctx = p["meeting"], _ctx(p)
    mailer.send(m["organizer_email"], f"Meeting confirmed: {m['title']}", "organizer_confirmation.txt", **ctx)
    for a in _unique(m["attendees"]):
        if a != m["organizer_email"]:
            mailer.send(a, f"Invitation: {m['title']}", "attendee_invitation.txt", **ctx)


def on_updated(p: dict, mailer: Mailer):
    m, ctx = p["meeting"], _ctx(p)
    mailer.send(m["organizer_email"], f"Meeting updated: {m['title']}", "organizer_update.txt", **ctx)
    previous = set(p.get("previousAttendees", []))
    for a in _unique(m["attendees"]):
        if a in previous and a != m["organizer_email"]:
            mailer.send(a, f"Updated: {m['title']}", "attendee_update.txt", **ctx)


def on_attendee_added(p: dict, mailer: Mailer):
    m, ctx = p["meeting"], _ctx(p)
    for a in _unique(p.get("attendees", [])):
        mailer.send(a, f"Invitation: {m['title']}", "attendee_invitation.txt", **ctx)


def on_attendee_removed(p: dict, mailer: Mailer):
    m, ctx = p["meeting"], _ctx(p)
    for a in _unique(p.get("attendees", [])):
        mailer.send(a, f"Removed from: {m['title']}", "attendee_removed.txt", **ctx)


def on_cancelled(p: dict, mailer: Mailer):
    m, ctx = p["meeting"], _ctx(p)
    for a in _unique(m["attendees"] + [m["organizer_email"]]):
        mailer.send(a, f"CANCELLED: {m['title']}", "meeting_cancelled.txt", **ctx)


HANDLERS = {
    "MeetingCreated": on_created,
    "MeetingUpdated": on_updated,
    "AttendeeAdded": on_attendee_added,
    "AttendeeRemoved": on_attendee_removed,
    "MeetingCancelled": on_cancelled,
}


def handle_event(msg: dict, mailer: Mailer) -> bool:
    handler = HANDLERS.get(msg.get("type"))
    if handler is None:
        return False
    payload = msg.get("payload") or {}
    if "meeting" not in payload:
        logger.warning("skipping %s %s: no meeting in payload", msg.get("type"), msg.get("messageId"))
        return False
    handler(payload, mailer)
    return True


def make_on_message(mailer: Mailer):
    # Callback exécuté à chaque message reçu depuis RabbitMQ
    def on_message(ch, method, properties, body):
        try:
            msg = json.loads(body)
        except ValueError as e:
            logger.warning("bad payload: %s", e)
            return
        logger.info("received %s mid=%s", msg.get("type"), msg.get("messageId"))
        try:
            handle_event(msg, mailer)
        except Exception:
            logger.exception("failed to handle %s %s", msg.get("type"), msg.get("messageId"))
    return on_message


#  Boucle de connexion + consommation RabbitMQ
def start_consumer(mailer: Mailer = None):
    on_message = make_on_message(mailer or Mailer())
    attempt = 0
    while True:
        try:
            logger.info("connecting to rabbitmq at %s...", RABBITMQ_HOST)
            conn = pika.BlockingConnection(pika.ConnectionParameters(host=RABBITMQ_HOST, heartbeat=60))
            ch = conn.channel()
            ch.exchange_declare(exchange=EVENTS_EXCHANGE, exchange_type="fanout", durable=True)
            # queue anonyme, exclusive à ce consumer
            q = ch.queue_declare(queue="", exclusive=True).method.queue
            ch.queue_bind(exchange=EVENTS_EXCHANGE, queue=q)
            logger.info("bound to exchange '%s' queue='%s'. waiting for messages...", EVENTS_EXCHANGE, q)
            attempt = 0
            ch.basic_consume(queue=q, on_message_callback=on_message, auto_ack=True)
            ch.start_consuming()
        except Exception as e:
            attempt += 1
            wait = min(5 * attempt, 30)
            logger.warning("connection error: %s, retrying in %ss", e, wait)
            time.sleep(wait)
