from sqlalchemy import event
from .extensions import db, bcrypt
from .pricing import UPWARD, suggested_starting_bid, bidding_end_time
from .utils import utcnow, iso

INITIAL_WALLET_GRANT = 5000

class TimestampMixin:
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

class User(db.Model, TimestampMixin):
    __tablename__ = "users"
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(180), unique=True, index=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    display_name = db.Column(db.String(120), nullable=False)
    photo_url = db.Column(db.String(500), nullable=True)
    # Owned by the wallet ledger; only WalletLedger writes it
    wallet_balance = db.Column(db.BigInteger, nullable=False, default=0)
    favorites = db.Column(db.JSON, nullable=False, default=list)
    version_id = db.Column(db.Integer, nullable=False)

    bids = db.relationship("Bid", back_populates="bidder", lazy="dynamic")

    __table_args__ = (
        db.CheckConstraint("wallet_balance >= 0", name="ck_users_wallet_non_negative"),
    )
    __mapper_args__ = {"version_id_col": version_id}

    def set_password(self, raw):
        self.password_hash = bcrypt.generate_password_hash(raw).decode()

    def check_password(self, raw):
        return bcrypt.check_password_hash(self.password_hash, raw)

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "displayName": self.display_name,
            "photoURL": self.photo_url,
            "walletBalance": self.wallet_balance,
            "favorites": list(self.favorites or []),
            "createdAt": iso(self.created_at),
        }

class Vehicle(db.Model, TimestampMixin):
    __tablename__ = "vehicles"
    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    owner_name = db.Column(db.String(120), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    category = db.Column(db.String(20), nullable=False)  # car|bike|truck|suv|van|other
    image = db.Column(db.String(500), nullable=False)
    description = db.Column(db.Text, nullable=False)

    base_price = db.Column(db.BigInteger, nullable=False)
    suggested_starting_bid = db.Column(db.BigInteger, nullable=False)
    current_price = db.Column(db.BigInteger, nullable=False)
    bidding_type = db.Column(db.String(10), nullable=False, default=UPWARD)
    bidding_duration = db.Column(db.Integer, nullable=False)
    bidding_end_time = db.Column(db.DateTime, nullable=False, index=True)

    nearest_city = db.Column(db.String(120), nullable=False)
    location_lat = db.Column(db.Float, nullable=True)
    location_lng = db.Column(db.Float, nullable=True)
    year_of_manufacture = db.Column(db.String(10), nullable=True)
    mileage = db.Column(db.String(40), nullable=True)
    engine_capacity = db.Column(db.String(40), nullable=True)
    previous_owners = db.Column(db.Integer, nullable=True)
    fuel_type = db.Column(db.String(20), nullable=True)
    transmission_type = db.Column(db.String(30), nullable=True)
    selling_reason = db.Column(db.Text, nullable=True)
    tyre_condition = db.Column(db.Integer, nullable=True)
    battery_condition = db.Column(db.Integer, nullable=True)
    interior_condition = db.Column(db.Integer, nullable=True)
    exterior_condition = db.Column(db.Integer, nullable=True)
    negotiable = db.Column(db.Boolean, nullable=False, default=True)

    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    version_id = db.Column(db.Integer, nullable=False)

    owner = db.relationship("User", foreign_keys=[owner_id])
    bids = db.relationship(
        "Bid",
        back_populates="vehicle",
        lazy="dynamic",
        order_by="Bid.created_at.desc()",
    )

    __table_args__ = (
        db.CheckConstraint("base_price >= 0", name="ck_vehicles_base_price"),
        db.CheckConstraint("bidding_duration BETWEEN 1 AND 30", name="ck_vehicles_duration"),
    )
    __mapper_args__ = {"version_id_col": version_id}

    @classmethod
    def list_new(cls, owner, base_price, bidding_duration, now=None, **attrs):
        """Build a listing; pricing and the auction window are fixed here, once."""
        now = now or utcnow()
        starting = suggested_starting_bid(base_price)
        return cls(
            owner_id=owner.id,
            owner_name=owner.display_name,
            base_price=base_price,
            suggested_starting_bid=starting,
            current_price=starting,
            bidding_duration=bidding_duration,
            bidding_end_time=bidding_end_time(bidding_duration, now),
            is_active=True,
            **attrs,
        )

class Bid(db.Model, TimestampMixin):
    __tablename__ = "bids"
    id = db.Column(db.Integer, primary_key=True)
    vehicle_id = db.Column(db.Integer, db.ForeignKey("vehicles.id"), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    user_name = db.Column(db.String(120), nullable=False)
    user_email = db.Column(db.String(180), nullable=False)
    type = db.Column(db.String(10), nullable=False)
    bidding_type = db.Column(db.String(10), nullable=False)
    amount = db.Column(db.BigInteger, nullable=False)
    timestamp = db.Column(db.DateTime, nullable=False, default=utcnow)

    vehicle = db.relationship("Vehicle", back_populates="bids", foreign_keys=[vehicle_id])
    bidder = db.relationship("User", back_populates="bids", foreign_keys=[user_id])

    __table_args__ = (
        db.Index("ix_bids_vehicle_user_created", "vehicle_id", "user_id", "created_at"),
        db.CheckConstraint("amount > 0", name="ck_bids_amount_positive"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "vehicleId": self.vehicle_id,
            "userId": self.user_id,
            "userName": self.user_name,
            "userEmail": self.user_email,
            "type": self.type,
            "biddingType": self.bidding_type,
            "amount": self.amount,
            "timestamp": iso(self.timestamp),
            "createdAt": iso(self.created_at),
        }

class WalletTransaction(db.Model, TimestampMixin):
    __tablename__ = "wallet_transactions"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    type = db.Column(db.String(20), nullable=False)  # deposit|withdrawal|bid|refund
    amount = db.Column(db.BigInteger, nullable=False)
    balance_before = db.Column(db.BigInteger, nullable=False)
    balance_after = db.Column(db.BigInteger, nullable=False)
    description = db.Column(db.String(255), nullable=False)
    related_vehicle_id = db.Column(db.Integer, nullable=True)
    related_bid_id = db.Column(db.Integer, nullable=True)

    __table_args__ = (
        db.Index("ix_wallet_transactions_user_created", "user_id", "created_at"),
        db.CheckConstraint("balance_after = balance_before + amount", name="ck_wallet_tx_snapshot"),
        db.CheckConstraint("balance_after >= 0", name="ck_wallet_tx_non_negative"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "type": self.type,
            "amount": self.amount,
            "balanceBefore": self.balance_before,
            "balanceAfter": self.balance_after,
            "description": self.description,
            "relatedVehicleId": self.related_vehicle_id,
            "relatedBidId": self.related_bid_id,
            "createdAt": iso(self.created_at),
        }


class ImmutableRecordError(RuntimeError):
    pass


def _refuse_change(mapper, connection, target):
    raise ImmutableRecordError(f"{type(target).__name__} {target.id} is append-only")

for _model in (Bid, WalletTransaction):
    event.listen(_model, "before_update", _refuse_change)
    event.listen(_model, "before_delete", _refuse_change)
