from contextlib import contextmanager
from datetime import datetime, timezone
from flask import jsonify, request
from flask_jwt_extended import get_jwt_identity
from .errors import Unauthorized
from .extensions import db

def api_error(message, status=400, **extra):
    payload = {"success": False, "message": message, **extra}
    return jsonify(payload), status

def api_ok(data=None, **extra):
    return jsonify({"success": True, "data": data, **extra})

def utcnow():
    # Naive UTC, same as what the DateTime columns store
    return datetime.now(timezone.utc).replace(tzinfo=None)

def iso(dt):
    return dt.isoformat() + "Z" if dt else None

def current_user_id() -> int:
    try:
        return int(get_jwt_identity())
    except (TypeError, ValueError):
        raise Unauthorized("Invalid or expired token")

def page_args(default_limit=50):
    try:
        page = max(int(request.args.get("page", 1)), 1)
        limit = min(max(int(request.args.get("limit", default_limit)), 1), 500)
    except ValueError:
        page, limit = 1, default_limit
    return page, limit

def pagination(page, limit, total):
    return {"page": page, "limit": limit, "total": total, "pages": -(-total // limit)}

@contextmanager
def atomic():
    """Commit the session on success, roll everything back on any error."""
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
