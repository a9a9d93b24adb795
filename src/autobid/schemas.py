"""Explicit request bodies for the paid operations."""
from dataclasses import dataclass
from typing import Optional
from .errors import ValidationError
from .pricing import BIDDING_TYPES, MAX_AMOUNT


def _as_int(value, field):
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be a whole number")
    if value > MAX_AMOUNT:
        raise ValidationError(f"{field} cannot exceed Rs. {MAX_AMOUNT:,}")
    return value


@dataclass(frozen=True)
class PlaceBidRequest:
    bidding_type: str
    custom_amount: Optional[int] = None

    @classmethod
    def from_json(cls, data):
        data = data or {}
        bidding_type = data.get("biddingType")
        if bidding_type not in BIDDING_TYPES:
            raise ValidationError("biddingType must be 'upward' or 'downward'")
        custom = data.get("customAmount")
        if custom is not None:
            custom = _as_int(custom, "customAmount")
        return cls(bidding_type=bidding_type, custom_amount=custom)


@dataclass(frozen=True)
class AmountRequest:
    amount: int

    @classmethod
    def from_json(cls, data):
        amount = (data or {}).get("amount")
        if amount is None:
            raise ValidationError("Please provide a valid amount")
        amount = _as_int(amount, "amount")
        if amount <= 0:
            raise ValidationError("Please provide a valid amount")
        return cls(amount=amount)
