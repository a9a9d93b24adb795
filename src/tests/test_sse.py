# tests/test_sse.py
from autobid import sse
from autobid.notifications import FanoutSink, SSESink


def test_sse_endpoint_available(client, vehicle):
    r = client.get(f"/api/sse/vehicles/{vehicle['id']}")
    # The test client does not keep the stream open, but headers are validated
    assert r.status_code == 200
    assert r.mimetype == "text/event-stream"


def test_sse_sink_reaches_vehicle_channel():
    gen = sse.stream("vehicle:7")
    assert next(gen).startswith("event: ping")

    FanoutSink(SSESink()).publish(7, "price-update", {"vehicleId": 7, "currentPrice": 95000})
    msg = next(gen)
    assert msg.startswith("event: price-update\n")
    assert '"currentPrice": 95000' in msg
    gen.close()
    assert "vehicle:7" not in sse.CHANNELS


def test_channel_is_dropped_with_its_last_stream():
    first, second = sse.stream("vehicle:8"), sse.stream("vehicle:8")
    next(first), next(second)
    assert len(sse.CHANNELS["vehicle:8"]) == 2

    first.close()
    assert len(sse.CHANNELS["vehicle:8"]) == 1
    assert sse.publish("vehicle:8", "new-bid", {}) == 1

    second.close()
    assert "vehicle:8" not in sse.CHANNELS
    assert sse.publish("vehicle:8", "new-bid", {}) == 0


def test_fanout_keeps_going_when_one_sink_fails():
    received = []

    class Broken:
        def publish(self, *a):
            raise RuntimeError("down")

    class Recorder:
        def publish(self, *a):
            received.append(a)

    FanoutSink(Broken(), Recorder()).publish(1, "new-bid", {"bid": {}})
    assert received == [(1, "new-bid", {"bid": {}})]
