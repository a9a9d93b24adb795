"""Outbound real-time events for a vehicle's observers.

The bid transaction only knows the ``NotificationSink`` interface; the
application wires the concrete sinks in ``create_app``.
"""
import logging
from . import sse

log = logging.getLogger("autobid.notifications")

NEW_BID = "new-bid"
PRICE_UPDATE = "price-update"


def vehicle_room(vehicle_id):
    return f"vehicle:{vehicle_id}"


class NotificationSink:
    def publish(self, vehicle_id, event_type, payload):
        raise NotImplementedError


class NullSink(NotificationSink):
    def publish(self, vehicle_id, event_type, payload):
        pass


class SocketIOSink(NotificationSink):
    def __init__(self, socketio, namespace="/rt"):
        self.socketio = socketio
        self.namespace = namespace

    def publish(self, vehicle_id, event_type, payload):
        self.socketio.emit(event_type, payload, to=vehicle_room(vehicle_id), namespace=self.namespace)


class SSESink(NotificationSink):
    def publish(self, vehicle_id, event_type, payload):
        sse.publish(vehicle_room(vehicle_id), event_type, payload)


class FanoutSink(NotificationSink):
    def __init__(self, *sinks):
        self.sinks = list(sinks)

    def publish(self, vehicle_id, event_type, payload):
        for sink in self.sinks:
            try:
                sink.publish(vehicle_id, event_type, payload)
            except Exception:
                log.exception("notify:failed sink=%s vehicle=%s event=%s",
                              type(sink).__name__, vehicle_id, event_type)
