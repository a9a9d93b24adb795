"""Bid pricing rules.

Pure functions over integer prices in the smallest currency unit. Nothing in
here touches the database; the bid transaction feeds in the vehicle's current
state and acts on the result.
"""
from collections import namedtuple
from datetime import datetime, timedelta

UPWARD = "upward"
DOWNWARD = "downward"
BIDDING_TYPES = (UPWARD, DOWNWARD)

# Fixed amount a single bid may move the price by
BID_STEP = 10000
# Fee debited from the bidder's wallet for every accepted bid
BID_COST = 50
STARTING_BID_PERCENT = 85
# Ceiling for any single money amount a client may send; prices stay well
# inside a BIGINT column even after many further steps
MAX_AMOUNT = 10 ** 12

BidCheck = namedtuple("BidCheck", ["valid", "reason", "rule"])
_OK = BidCheck(True, None, None)


def _money(value: int) -> str:
    return f"Rs. {value:,}"


def suggested_starting_bid(base_price: int) -> int:
    return base_price * STARTING_BID_PERCENT // 100


def bidding_end_time(duration_days: int, now: datetime) -> datetime:
    return now + timedelta(days=duration_days)


def is_bidding_active(end_time: datetime, now: datetime) -> bool:
    return now < end_time


def next_suggested_amount(current_price: int, bidding_type: str) -> int:
    """Pre-filled amount for the next bid; never used to override a caller's amount."""
    if bidding_type == UPWARD:
        return current_price + BID_STEP
    return max(0, current_price - BID_STEP)


def resolve_bid_amount(current_price: int, bidding_type: str, custom_amount=None) -> int:
    if custom_amount is not None and custom_amount > 0:
        return custom_amount
    return next_suggested_amount(current_price, bidding_type)


def validate_bid_amount(amount: int, current_price: int, bidding_type: str,
                        suggested_starting: int) -> BidCheck:
    """Check ``amount`` against the bounds for ``bidding_type``.

    The first violated bound wins. ``rule`` is a stable identifier for it
    (``positive``, ``above_current``, ``min_increment``, ``below_current``,
    ``starting_floor``, ``max_decrement``) and ``reason`` the sentence shown
    to the bidder.
    """
    if amount <= 0:
        return BidCheck(False, "Bid amount must be positive", "positive")

    if bidding_type == UPWARD:
        if amount <= current_price:
            return BidCheck(
                False,
                f"Upward bid must be higher than current price ({_money(current_price)})",
                "above_current",
            )
        minimum = current_price + BID_STEP
        if amount < minimum:
            return BidCheck(False, f"Minimum upward bid is {_money(minimum)}", "min_increment")

    elif bidding_type == DOWNWARD:
        if amount >= current_price:
            return BidCheck(
                False,
                f"Downward bid must be lower than current price ({_money(current_price)})",
                "below_current",
            )
        if amount < suggested_starting:
            return BidCheck(
                False,
                f"Bid cannot be lower than suggested starting bid ({_money(suggested_starting)})",
                "starting_floor",
            )
        lowest = current_price - BID_STEP
        if amount < lowest:
            return BidCheck(
                False,
                f"A downward bid may drop the price by at most {_money(BID_STEP)} "
                f"(lowest allowed bid is {_money(lowest)})",
                "max_decrement",
            )

    return _OK


def format_time_remaining(end_time: datetime, now: datetime) -> str:
    secs = int((end_time - now).total_seconds())
    if secs <= 0:
        return "Ended"
    d, r = divmod(secs, 86400)
    h, r = divmod(r, 3600)
    m, _ = divmod(r, 60)
    if d > 0:
        return f"{d}d {h}h"
    if h > 0:
        return f"{h}h {m}m"
    return f"{m}m"
