"""Per (vehicle, user) bidding direction.

A user's first bid on a vehicle locks them to that direction for the vehicle.
The lock is not stored: it is the direction of their most recent bid there.
"""
from typing import Optional
from .errors import DirectionLocked
from .models import Bid


def locked_direction(vehicle_id: int, user_id: int) -> Optional[str]:
    last = (
        Bid.query
        .filter_by(vehicle_id=vehicle_id, user_id=user_id)
        .order_by(Bid.created_at.desc(), Bid.id.desc())
        .first()
    )
    return last.type if last else None


def check_direction(locked: Optional[str], requested: str) -> None:
    if locked is not None and locked != requested:
        raise DirectionLocked(locked)
