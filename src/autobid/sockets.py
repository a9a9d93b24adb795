import logging
from typing import Optional
from flask import request
from flask_socketio import Namespace, emit, join_room, leave_room
from flask_jwt_extended import decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from .notifications import vehicle_room

log = logging.getLogger("autobid.sockets")

def _extract_uid_from_token(token: Optional[str]) -> Optional[int]:
    if not token:
        return None
    try:
        sub = decode_token(token).get("sub")
        return int(sub) if sub is not None else None
    except (JWTExtendedException, PyJWTError, ValueError):
        return None

def _vehicle_id(data):
    vid = (data or {}).get("vehicleId") if isinstance(data, dict) else data
    try:
        return int(vid)
    except (TypeError, ValueError):
        return None

class AuctionNamespace(Namespace):
    """Watchers join ``vehicle:<id>`` rooms to receive new-bid and price-update events."""

    def on_connect(self, auth=None):
        # Token is optional: anonymous visitors may watch prices too
        token = (auth or {}).get("token") if isinstance(auth, dict) else None
        token = token or request.args.get("token")
        uid = _extract_uid_from_token(token)
        emit("connected", {"success": True, "userId": uid}, to=request.sid)

    def on_subscribe_vehicle(self, data):
        vid = _vehicle_id(data)
        if vid is None:
            return
        join_room(vehicle_room(vid))
        log.debug("rt:subscribe sid=%s vehicle=%s", request.sid, vid)
        emit("subscribed", {"vehicleId": vid}, to=request.sid)

    def on_unsubscribe_vehicle(self, data):
        vid = _vehicle_id(data)
        if vid is None:
            return
        leave_room(vehicle_room(vid))
        emit("unsubscribed", {"vehicleId": vid}, to=request.sid)

def register_socketio(socketio):
    socketio.on_namespace(AuctionNamespace("/rt"))
