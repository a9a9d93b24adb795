"""Bid placement.

``BidService.place_bid`` validates a bid against the vehicle, the bidder's
wallet and direction lock, then debits the bid fee, records the bid and moves
the vehicle's price in a single database transaction. Observers are told
about the new bid only once that transaction has committed.
"""
import logging
from collections import namedtuple
from sqlalchemy.orm.exc import StaleDataError
from .direction_lock import check_direction, locked_direction
from .errors import (
    AuctionClosed, InsufficientFunds, InvalidBidAmount, NotFound,
    SelfBidForbidden, StalePrice,
)
from .extensions import db
from .ledger import BID, WalletLedger
from .models import Bid, User, Vehicle
from .notifications import NEW_BID, PRICE_UPDATE, NullSink
from .pricing import BID_COST, is_bidding_active, resolve_bid_amount, validate_bid_amount
from .utils import utcnow

log = logging.getLogger("autobid.bids")


class BidOutcome(namedtuple("BidOutcome", ["bid", "current_price", "wallet_balance"])):
    __slots__ = ()

    def to_dict(self):
        return {
            "bid": self.bid.to_dict(),
            "vehicle": {"id": self.bid.vehicle_id, "currentPrice": self.current_price},
            "user": {"walletBalance": self.wallet_balance},
        }


class BidService:
    def __init__(self, sink=None, ledger=None, clock=utcnow):
        self.sink = sink or NullSink()
        self.ledger = ledger or WalletLedger()
        self.clock = clock

    def place_bid(self, vehicle_id, user_id, request):
        try:
            outcome = self._place(vehicle_id, user_id, request)
            db.session.commit()
        except StaleDataError:
            db.session.rollback()
            log.warning("bid:stale vehicle=%s user=%s", vehicle_id, user_id)
            raise StalePrice("The price changed while your bid was processed. Please retry.")
        except Exception:
            db.session.rollback()
            raise

        log.info("bid:accepted vehicle=%s user=%s type=%s amount=%s",
                 vehicle_id, user_id, outcome.bid.type, outcome.bid.amount)
        self._notify(outcome)
        return outcome

    def _place(self, vehicle_id, user_id, request):
        vehicle = db.session.query(Vehicle).filter_by(id=vehicle_id).with_for_update().first()
        if not vehicle:
            raise NotFound("Vehicle not found")
        if not vehicle.is_active:
            raise AuctionClosed("This vehicle is no longer active")
        if not is_bidding_active(vehicle.bidding_end_time, self.clock()):
            raise AuctionClosed("Bidding has ended for this vehicle")
        if vehicle.owner_id == user_id:
            raise SelfBidForbidden("You cannot bid on your own vehicle")

        user = db.session.query(User).filter_by(id=user_id).with_for_update().first()
        if not user:
            raise NotFound("User not found")
        if user.wallet_balance < BID_COST:
            raise InsufficientFunds(
                f"Insufficient balance. Each bid costs Rs. {BID_COST}",
                walletBalance=user.wallet_balance,
                required=BID_COST,
            )

        check_direction(locked_direction(vehicle.id, user.id), request.bidding_type)

        amount = resolve_bid_amount(vehicle.current_price, request.bidding_type, request.custom_amount)
        check = validate_bid_amount(
            amount, vehicle.current_price, request.bidding_type, vehicle.suggested_starting_bid,
        )
        if not check.valid:
            raise InvalidBidAmount(check.reason, check.rule)

        now = self.clock()
        bid = Bid(
            vehicle_id=vehicle.id,
            user_id=user.id,
            user_name=user.display_name,
            user_email=user.email,
            type=request.bidding_type,
            bidding_type=request.bidding_type,
            amount=amount,
            timestamp=now,
            created_at=now,
            updated_at=now,
        )
        db.session.add(bid)
        # id is needed for the fee entry; nothing is visible before commit
        db.session.flush()

        self.ledger.debit(
            user.id, BID_COST, BID, f"Bid placed on {vehicle.title}",
            vehicle_id=vehicle.id, bid_id=bid.id,
        )

        vehicle.current_price = amount
        db.session.flush()
        return BidOutcome(bid, vehicle.current_price, user.wallet_balance)

    def _notify(self, outcome):
        bid = outcome.bid
        events = (
            (NEW_BID, {"bid": bid.to_dict()}),
            (PRICE_UPDATE, {"vehicleId": bid.vehicle_id, "currentPrice": outcome.current_price}),
        )
        for event_type, payload in events:
            try:
                self.sink.publish(bid.vehicle_id, event_type, payload)
            except Exception:
                log.exception("bid:notify_failed vehicle=%s event=%s", bid.vehicle_id, event_type)
