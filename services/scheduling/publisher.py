# ============================================================
# publisher.py - Émission d'événements RabbitMQ
# ------------------------------------------------------------
# Les événements de réunion (MeetingCreated, MeetingUpdated,
# MeetingCancelled, AttendeeAdded, AttendeeRemoved) partent sur
# l'échange "events" en mode fanout ; le service Notification les
# consomme pour envoyer les emails.
#
# publish() ne fait que déposer le message dans une file en
# mémoire : un thread dédié la vide vers RabbitMQ. Une requête de
# réservation n'attend donc jamais le broker et n'échoue jamais
# à cause de lui.
# ============================================================
import json
import logging
import queue
import threading
import uuid

import pika

from services.scheduling.config import EVENTS_EXCHANGE, RABBITMQ_HOST

logger = logging.getLogger(__name__)

_STOP = object()


class EventPublisher:
    def __init__(self, host: str = RABBITMQ_HOST, exchange: str = EVENTS_EXCHANGE):
        self.host = host
        self.exchange = exchange
        self._queue = queue.Queue()
        self._thread = None

    def start(self):
        if self._thread and self._thread.is_alive():
            return
        self._thread = threading.Thread(target=self._run, name="event-publisher", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 5.0):
        if not self._thread:
            return
        self._queue.put(_STOP)
        self._thread.join(timeout)
        self._thread = None

    # event_type : nom de l'événement, payload : contenu du message
    def publish(self, event_type: str, payload: dict):
        message = {"type": event_type, "messageId": uuid.uuid4().hex, "payload": payload}
        self._queue.put(message)

    def _run(self):
        while True:
            message = self._queue.get()
            if message is _STOP:
                break
            try:
                self._send(message)
            except Exception:
                logger.exception("failed to publish %s %s", message["type"], message["messageId"])

    def _send(self, message: dict):
        conn = pika.BlockingConnection(pika.ConnectionParameters(host=self.host, heartbeat=60))
        try:
            ch = conn.channel()
            # durable=True pour survivre aux redémarrages RabbitMQ
            ch.exchange_declare(exchange=self.exchange, exchange_type="fanout", durable=True)
            ch.basic_publish(exchange=self.exchange, routing_key="", body=json.dumps(message))
            logger.info("[event] %s %s", message["type"], message["messageId"])
        finally:
            conn.close()
