import json
from queue import Queue, Full
from flask import Response, stream_with_context

# Channel -> one queue per connected client
CHANNELS = {}

def publish(channel: str, event: str, data: dict) -> int:
    """Queue the event for every open stream on the channel; returns how many got it."""
    payload = f"event: {event}\n" + f"data: {json.dumps(data)}\n\n"
    delivered = 0
    for q in list(CHANNELS.get(channel, [])):
        try:
            q.put_nowait(payload)
            delivered += 1
        except Full:
            # Slow reader; it misses this event rather than blocking the bid
            pass
    return delivered

def stream(channel: str):
    q = Queue(maxsize=256)
    CHANNELS.setdefault(channel, []).append(q)
    try:
        yield "event: ping\ndata: {}\n\n"
        while True:
            yield q.get()
    except GeneratorExit:
        pass
    finally:
        queues = CHANNELS.get(channel, [])
        queues.remove(q)
        if not queues:
            CHANNELS.pop(channel, None)

def sse_response(generator):
    return Response(
        stream_with_context(generator),
        mimetype="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
