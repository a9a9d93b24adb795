from time import sleep
from flask import Blueprint, request, current_app
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, OperationalError
from flask_jwt_extended import jwt_required
from ..bidding import BidService
from ..errors import AppError, Forbidden, NotFound, ValidationError
from ..extensions import db
from ..models import Vehicle, Bid, User
from ..pricing import BIDDING_TYPES, MAX_AMOUNT, UPWARD, format_time_remaining
from ..schemas import PlaceBidRequest
from ..utils import api_error, api_ok, current_user_id, iso, page_args, pagination, utcnow
from ..sse import stream, sse_response

bp = Blueprint("vehicles", __name__)

CATEGORIES = ("car", "bike", "truck", "suv", "van", "other")
FUEL_TYPES = ("Petrol", "Diesel", "CNG", "Hybrid", "Electric")
TRANSMISSIONS = ("Manual", "Automatic", "Triptronic", "Other Transmission")

# camelCase body key -> column, for attributes the owner may edit later
_EDITABLE = {
    "title": "title",
    "category": "category",
    "image": "image",
    "description": "description",
    "nearestCity": "nearest_city",
    "locationLat": "location_lat",
    "locationLng": "location_lng",
    "yearOfManufacture": "year_of_manufacture",
    "mileage": "mileage",
    "engineCapacity": "engine_capacity",
    "previousOwners": "previous_owners",
    "fuelType": "fuel_type",
    "transmissionType": "transmission_type",
    "sellingReason": "selling_reason",
    "tyreCondition": "tyre_condition",
    "batteryCondition": "battery_condition",
    "interiorCondition": "interior_condition",
    "exteriorCondition": "exterior_condition",
    "negotiable": "negotiable",
}
_CONDITIONS = ("tyreCondition", "batteryCondition", "interiorCondition", "exteriorCondition")

def _int_field(data, key, low=None, high=None, required=False):
    value = data.get(key)
    if value is None:
        if required:
            raise ValidationError(f"{key} is required")
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{key} must be a whole number")
    if (low is not None and value < low) or (high is not None and value > high):
        raise ValidationError(f"{key} must be between {low} and {high}")
    return value

def _editable_attrs(data, partial):
    """Validate the owner-editable attributes and map them to columns."""
    if not partial or "title" in data:
        if len((data.get("title") or "").strip()) < 5:
            raise ValidationError("Title must be at least 5 characters")
    if not partial or "category" in data:
        if data.get("category") not in CATEGORIES:
            raise ValidationError("Category is required")
    if not partial or "image" in data:
        if not data.get("image"):
            raise ValidationError("Vehicle image is required")
    if not partial or "description" in data:
        if len((data.get("description") or "").strip()) < 20:
            raise ValidationError("Description must be at least 20 characters")
    if not partial or "nearestCity" in data:
        if not (data.get("nearestCity") or "").strip():
            raise ValidationError("Nearest city is required")
    if data.get("fuelType") not in (None,) + FUEL_TYPES:
        raise ValidationError("Invalid fuelType")
    if data.get("transmissionType") not in (None,) + TRANSMISSIONS:
        raise ValidationError("Invalid transmissionType")
    if "negotiable" in data and not isinstance(data["negotiable"], bool):
        raise ValidationError("negotiable must be true or false")
    for key in _CONDITIONS:
        _int_field(data, key, 0, 100)
    _int_field(data, "previousOwners", 0)

    attrs = {}
    for key, column in _EDITABLE.items():
        if key in data:
            value = data[key]
            attrs[column] = value.strip() if isinstance(value, str) else value
    return attrs

def _get_vehicle(vehicle_id):
    v = db.session.get(Vehicle, vehicle_id)
    if not v:
        raise NotFound("Vehicle not found")
    return v

def _owned_vehicle(vehicle_id, action):
    v = _get_vehicle(vehicle_id)
    if v.owner_id != current_user_id():
        raise Forbidden(f"Not authorized to {action} this vehicle")
    return v

@bp.get("/sse/vehicles/<int:vehicle_id>")
def sse_vehicle(vehicle_id):
    return sse_response(stream(f"vehicle:{vehicle_id}"))

@bp.get("/vehicles")
def list_vehicles():
    q = Vehicle.query
    category = request.args.get("category")
    if category:
        q = q.filter(Vehicle.category == category)
    is_active = request.args.get("isActive")
    if is_active is not None:
        q = q.filter(Vehicle.is_active == (is_active == "true"))
    owner = request.args.get("userId", type=int)
    if owner:
        q = q.filter(Vehicle.owner_id == owner)
    text_q = request.args.get("search")
    if text_q:
        like = f"%{text_q}%"
        q = q.filter(or_(Vehicle.title.ilike(like), Vehicle.description.ilike(like)))

    page, limit = page_args()
    total = q.count()
    items = q.order_by(Vehicle.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
    return api_ok({
        "vehicles": [serialize_vehicle(v) for v in items],
        "pagination": pagination(page, limit, total),
    })

@bp.post("/vehicles")
@jwt_required()
def create_vehicle():
    user = db.session.get(User, current_user_id())
    if not user:
        raise NotFound("User not found")

    data = request.get_json(silent=True) or {}
    base_price = _int_field(data, "basePrice", 0, MAX_AMOUNT, required=True)
    duration = _int_field(data, "biddingDuration", 1, 30, required=True)
    bidding_type = data.get("biddingType") or UPWARD
    if bidding_type not in BIDDING_TYPES:
        raise ValidationError("biddingType must be 'upward' or 'downward'")
    attrs = _editable_attrs(data, partial=False)

    v = Vehicle.list_new(user, base_price, duration, bidding_type=bidding_type, **attrs)

    # ---- Retry on 1205/1213 ----
    for attempt in range(3):
        try:
            db.session.add(v)
            db.session.commit()
            current_app.logger.info("vehicle:created id=%s owner=%s", v.id, user.id)
            return api_ok({"vehicle": serialize_vehicle(v, with_bids=True)},
                          message="Vehicle created successfully"), 201
        except OperationalError as e:
            db.session.rollback()
            code = getattr(getattr(e, "orig", None), "args", [None])[0]
            if code in (1205, 1213):  # lock wait / deadlock
                current_app.logger.warning("Retry vehicles.insert after lock (attempt %s)", attempt + 1)
                sleep(0.35 * (attempt + 1))
                continue
            raise
        except IntegrityError:
            db.session.rollback()
            current_app.logger.exception("Integrity error creating vehicle")
            raise AppError("Could not create the vehicle", 409)

    return api_error("Could not create the vehicle (retries exhausted).", 409)

@bp.get("/vehicles/<int:vehicle_id>")
def get_vehicle(vehicle_id):
    return api_ok({"vehicle": serialize_vehicle(_get_vehicle(vehicle_id), with_bids=True)})

@bp.put("/vehicles/<int:vehicle_id>")
@jwt_required()
def update_vehicle(vehicle_id):
    v = _owned_vehicle(vehicle_id, "update")
    data = request.get_json(silent=True) or {}
    # Pricing, window, direction and ownership are fixed at listing time
    for column, value in _editable_attrs(data, partial=True).items():
        setattr(v, column, value)
    db.session.commit()
    return api_ok({"vehicle": serialize_vehicle(v)}, message="Vehicle updated successfully")

@bp.delete("/vehicles/<int:vehicle_id>")
@jwt_required()
def delete_vehicle(vehicle_id):
    v = _owned_vehicle(vehicle_id, "delete")
    v.is_active = False
    db.session.commit()
    current_app.logger.info("vehicle:deactivated id=%s", v.id)
    return api_ok(None, message="Vehicle deleted successfully")

@bp.get("/vehicles/user/<int:user_id>")
def user_vehicles(user_id):
    items = Vehicle.query.filter_by(owner_id=user_id).order_by(Vehicle.created_at.desc()).all()
    return api_ok({"vehicles": [serialize_vehicle(v, with_bids=True) for v in items]})

@bp.get("/vehicles/<int:vehicle_id>/bids")
def list_bids(vehicle_id):
    v = _get_vehicle(vehicle_id)
    bids = v.bids.order_by(Bid.created_at.desc(), Bid.id.desc()).all()
    return api_ok({"bids": [b.to_dict() for b in bids]})

@bp.post("/vehicles/<int:vehicle_id>/bid")
@jwt_required()
def place_bid(vehicle_id):
    req = PlaceBidRequest.from_json(request.get_json(silent=True))
    service = BidService(sink=current_app.extensions["notification_sink"])
    outcome = service.place_bid(vehicle_id, current_user_id(), req)
    return api_ok(outcome.to_dict(), message="Bid placed successfully"), 201

def serialize_vehicle(v: Vehicle, with_bids=False):
    data = {
        "id": v.id,
        "userId": v.owner_id,
        "userName": v.owner_name,
        "title": v.title,
        "category": v.category,
        "image": v.image,
        "description": v.description,
        "basePrice": v.base_price,
        "suggestedStartingBid": v.suggested_starting_bid,
        "currentPrice": v.current_price,
        "biddingType": v.bidding_type,
        "biddingDuration": v.bidding_duration,
        "biddingEndTime": iso(v.bidding_end_time),
        "timeRemaining": format_time_remaining(v.bidding_end_time, utcnow()),
        "isActive": v.is_active,
        "createdAt": iso(v.created_at),
        "updatedAt": iso(v.updated_at),
    }
    for key, column in _EDITABLE.items():
        data.setdefault(key, getattr(v, column))
    if with_bids:
        data["bids"] = [b.to_dict() for b in v.bids.order_by(Bid.created_at.desc(), Bid.id.desc())]
    return data
