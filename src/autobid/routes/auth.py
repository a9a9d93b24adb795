# autobid/routes/auth.py
import logging
import time
from flask import Blueprint, request, current_app
from flask_jwt_extended import create_access_token, jwt_required
from ..errors import NotFound, ValidationError, Unauthorized
from ..extensions import db
from ..accounts import open_account
from ..models import User, Vehicle
from ..utils import api_ok, current_user_id

bp = Blueprint("auth", __name__)
log = logging.getLogger("autobid.auth")

def _bcrypt_cost(pw_hash: str) -> int | None:
    parts = (pw_hash or "").split("$")
    try:
        return int(parts[2]) if len(parts) > 2 else None
    except ValueError:
        return None

def _load_current_user() -> User:
    u = db.session.get(User, current_user_id())
    if not u:
        raise Unauthorized("User no longer exists")
    return u

def _auth_payload(u: User):
    return {"token": create_access_token(identity=str(u.id)), "user": u.to_dict()}

# ---------- Endpoints ----------
@bp.post("/signup")
def signup():
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    display_name = (data.get("displayName") or "").strip()
    if not all([email, password, display_name]):
        raise ValidationError("Please provide email, password, and display name")
    if "@" not in email:
        raise ValidationError("Please provide a valid email")
    if len(password) < 6:
        raise ValidationError("Password must be at least 6 characters")
    if User.query.filter_by(email=email).first():
        raise ValidationError("User with this email already exists")

    u = open_account(email, display_name, password)

    log.info("signup:ok user=%s email=%s", u.id, email)
    return api_ok(_auth_payload(u), message="User registered successfully"), 201


@bp.post("/login")
def login():
    t0 = time.perf_counter()
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    if not email or not password:
        raise ValidationError("Please provide email and password")

    u = User.query.filter_by(email=email).first()
    if not u or not u.check_password(password):
        log.info("login:rejected email=%s", email)
        raise Unauthorized("Invalid email or password")

    # Progressive rehash when the stored cost is above the configured one
    desired_cost = current_app.config.get("BCRYPT_LOG_ROUNDS", 10)
    current_cost = _bcrypt_cost(u.password_hash) or desired_cost
    if current_cost > desired_cost:
        try:
            u.set_password(password)
            db.session.commit()
        except Exception:
            db.session.rollback()
            log.exception("login:rehash_failed user=%s", u.id)

    log.info("login:ok email=%s total=%.3fs", email, time.perf_counter() - t0)
    return api_ok(_auth_payload(u), message="Login successful")


@bp.get("/me")
@jwt_required()
def me():
    return api_ok({"user": _load_current_user().to_dict()})


@bp.put("/profile")
@jwt_required()
def update_profile():
    u = _load_current_user()
    data = request.get_json(silent=True) or {}
    display_name = (data.get("displayName") or "").strip()
    if display_name:
        u.display_name = display_name
    if "photoURL" in data:
        u.photo_url = data.get("photoURL")
    db.session.commit()
    return api_ok({"user": u.to_dict()}, message="Profile updated successfully")


@bp.post("/favorites/<int:vehicle_id>")
@jwt_required()
def toggle_favorite(vehicle_id):
    u = _load_current_user()
    if not db.session.get(Vehicle, vehicle_id):
        raise NotFound("Vehicle not found")
    favorites = list(u.favorites or [])
    removed = vehicle_id in favorites
    if removed:
        favorites.remove(vehicle_id)
    else:
        favorites.append(vehicle_id)
    u.favorites = favorites
    db.session.commit()
    return api_ok(
        {"favorites": favorites},
        message="Removed from favorites" if removed else "Added to favorites",
    )


@bp.post("/change-password")
@jwt_required()
def change_password():
    data = request.get_json(silent=True) or {}
    old_pwd = data.get("oldPassword")
    new_pwd = data.get("newPassword")
    if not old_pwd or not new_pwd:
        raise ValidationError("Please provide oldPassword and newPassword")
    if len(new_pwd) < 6:
        raise ValidationError("Password must be at least 6 characters")

    u = _load_current_user()
    if not u.check_password(old_pwd):
        raise Unauthorized("Current password is incorrect")

    u.set_password(new_pwd)
    db.session.commit()
    return api_ok({"message": "Password updated"})
