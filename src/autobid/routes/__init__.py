from .auth import bp as auth_bp
from .vehicles import bp as vehicles_bp
from .bids import bp as bids_bp
from .wallet import bp as wallet_bp

def register_blueprints(app):
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(vehicles_bp, url_prefix="/api")
    app.register_blueprint(bids_bp, url_prefix="/api")
    app.register_blueprint(wallet_bp, url_prefix="/api/wallet")
