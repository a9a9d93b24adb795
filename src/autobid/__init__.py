# autobid/__init__.py
import logging
from flask import Flask, request, current_app
from sqlalchemy.orm.exc import StaleDataError
from werkzeug.exceptions import HTTPException
from .config import Config
from .errors import AppError
from .extensions import db, migrate, bcrypt, jwt, cors, scheduler, socketio
from .notifications import FanoutSink, SocketIOSink, SSESink
from .routes import register_blueprints
from .tasks import schedule_jobs
from .cli import register_cli
from .utils import api_error, api_ok
from .sockets import register_socketio

def create_app(config_object=None, **overrides):
    app = Flask(__name__)
    app.config.from_object(config_object or Config())
    app.config.update(overrides)

    logging.getLogger("autobid").setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Base extensions
    db.init_app(app)
    migrate.init_app(app, db)
    bcrypt.init_app(app)
    jwt.init_app(app)

    origins = app.config["CORS_ORIGINS"]

    # HTTP CORS for /api/* and for /socket.io/* (WS preflight)
    cors.init_app(
        app,
        resources={
            r"/api/*": {
                "origins": origins,
                "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
                "allow_headers": ["Content-Type", "Authorization"],
                "supports_credentials": True,
            },
            r"/socket.io/*": {
                "origins": origins,
                "methods": ["GET", "POST", "OPTIONS"],
                "allow_headers": ["Content-Type", "Authorization"],
                "supports_credentials": True,
            },
        },
    )
    socketio.init_app(app, cors_allowed_origins=origins, cors_credentials=True)

    # Outbound bid events: Socket.IO rooms and SSE channels
    app.extensions["notification_sink"] = FanoutSink(SocketIOSink(socketio), SSESink())

    register_blueprints(app)

    @app.get("/api/health")
    def health():
        return api_ok(True)

    @app.errorhandler(AppError)
    def handle_app_error(e):
        return api_error(e.message, e.status, **e.extra)

    @app.errorhandler(StaleDataError)
    def handle_stale(e):
        db.session.rollback()
        current_app.logger.warning("stale write on %s %s", request.method, request.path)
        return api_error("The record changed while your request was processed. Please retry.", 409)

    @app.errorhandler(HTTPException)
    def handle_http(e):
        if e.code is None or e.code < 400:
            return e
        return api_error(e.description, e.code)

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        current_app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        return api_error("Internal server error", 500)

    # Clear JWT messages instead of opaque 500s
    @jwt.unauthorized_loader
    def jwt_missing(reason):
        return api_error("Not authorized to access this route. Please provide a valid token.", 401)

    @jwt.invalid_token_loader
    def jwt_invalid(reason):
        return api_error("Invalid or expired token", 401)

    @jwt.expired_token_loader
    def jwt_expired(h, d):
        return api_error("Invalid or expired token", 401)

    if app.config.get("LEDGER_AUDIT_ENABLED"):
        scheduler.init_app(app)
        schedule_jobs(scheduler, app)
        scheduler.start()

    register_socketio(socketio)

    register_cli(app)
    return app
