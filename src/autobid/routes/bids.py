# autobid/routes/bids.py
from flask import Blueprint
from flask_jwt_extended import jwt_required
from ..extensions import db
from ..models import Bid, Vehicle
from ..pricing import format_time_remaining
from ..utils import api_ok, current_user_id, iso, page_args, pagination, utcnow

bp = Blueprint("bids", __name__)

@bp.get("/bids")
def all_bids():
    page, limit = page_args(default_limit=100)
    q = Bid.query
    total = q.count()
    items = q.order_by(Bid.created_at.desc(), Bid.id.desc()).offset((page - 1) * limit).limit(limit).all()
    return api_ok({"bids": [b.to_dict() for b in items], "pagination": pagination(page, limit, total)})

@bp.get("/bids/user/<int:user_id>")
def user_bids(user_id):
    items = Bid.query.filter_by(user_id=user_id).order_by(Bid.created_at.desc(), Bid.id.desc()).all()
    return api_ok({"bids": [b.to_dict() for b in items]})

@bp.get("/users/me/history")
@jwt_required()
def my_history():
    """Bids of the caller with the vehicle's state at read time."""
    uid = current_user_id()
    rows = (
        db.session.query(Bid, Vehicle)
        .join(Vehicle, Vehicle.id == Bid.vehicle_id)
        .filter(Bid.user_id == uid)
        .order_by(Bid.created_at.desc(), Bid.id.desc())
        .all()
    )
    now = utcnow()
    data = []
    for b, v in rows:
        data.append({
            "bidId": b.id,
            "vehicleId": v.id,
            "title": v.title,
            "type": b.type,
            "amount": b.amount,
            "currentPrice": v.current_price,
            "isActive": v.is_active and now < v.bidding_end_time,
            "timeLeftLabel": format_time_remaining(v.bidding_end_time, now),
            "bidAt": iso(b.created_at),
        })
    return api_ok(data)
