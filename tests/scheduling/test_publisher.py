import json
from unittest import mock

from services.scheduling.publisher import EventPublisher


def test_publish_enqueues_envelope():
    pub = EventPublisher(host="nowhere", exchange="events")
    pub.publish("MeetingCreated", {"meeting": {"id": 1}})
    msg = pub._queue.get_nowait()
    assert msg["type"] == "MeetingCreated"
    assert msg["payload"] == {"meeting": {"id": 1}}
    assert len(msg["messageId"]) == 32


def test_worker_sends_to_fanout_exchange():
    with mock.patch("services.scheduling.publisher.pika") as pika:
        channel = pika.BlockingConnection.return_value.channel.return_value
        pub = EventPublisher(host="broker", exchange="events")
        pub.start()
        pub.publish("MeetingCancelled", {"meeting": {"id": 3}})
        pub.stop()

    pika.ConnectionParameters.assert_called_once_with(host="broker", heartbeat=60)
    channel.exchange_declare.assert_called_once_with(exchange="events", exchange_type="fanout", durable=True)
    kwargs = channel.basic_publish.call_args.kwargs
    assert kwargs["exchange"] == "events"
    assert json.loads(kwargs["body"])["type"] == "MeetingCancelled"
    pika.BlockingConnection.return_value.close.assert_called_once()


def test_worker_survives_broker_errors(caplog):
    with mock.patch("services.scheduling.publisher.pika") as pika:
        pika.BlockingConnection.side_effect = [OSError("refused"), mock.MagicMock()]
        pub = EventPublisher(host="broker")
        pub.start()
        pub.publish("MeetingCreated", {})
        pub.publish("MeetingUpdated", {})
        pub.stop()

    assert pika.BlockingConnection.call_count == 2
    assert "failed to publish MeetingCreated" in caplog.text
