# tests/test_pricing.py
from datetime import datetime, timedelta
import pytest
from autobid.pricing import (
    BID_STEP, DOWNWARD, UPWARD, format_time_remaining, is_bidding_active,
    next_suggested_amount, resolve_bid_amount, suggested_starting_bid,
    validate_bid_amount, bidding_end_time,
)

STARTING = 85000


def test_starting_bid_is_floor_of_85_percent():
    assert suggested_starting_bid(100000) == 85000
    assert suggested_starting_bid(99999) == 84999  # 84999.15
    assert suggested_starting_bid(0) == 0


def test_next_suggested_amount():
    assert next_suggested_amount(85000, UPWARD) == 85000 + BID_STEP
    assert next_suggested_amount(85000, DOWNWARD) == 75000
    assert next_suggested_amount(4000, DOWNWARD) == 0


def test_next_suggested_amount_is_pure():
    price = 85000
    first = next_suggested_amount(price, UPWARD)
    assert next_suggested_amount(price, UPWARD) == first
    assert price == 85000


def test_custom_amount_is_used_verbatim_only_when_positive():
    assert resolve_bid_amount(85000, UPWARD, 123456) == 123456
    assert resolve_bid_amount(85000, UPWARD, None) == 95000
    assert resolve_bid_amount(85000, UPWARD, 0) == 95000
    assert resolve_bid_amount(85000, DOWNWARD, -5) == 75000


@pytest.mark.parametrize("amount,rule", [
    (0, "positive"),
    (-1, "positive"),
    (85000, "above_current"),
    (80000, "above_current"),
    (85001, "min_increment"),
    (94999, "min_increment"),
])
def test_upward_rejections(amount, rule):
    check = validate_bid_amount(amount, 85000, UPWARD, STARTING)
    assert not check.valid
    assert check.rule == rule
    assert check.reason


def test_upward_accepts_at_and_above_one_step():
    assert validate_bid_amount(95000, 85000, UPWARD, STARTING).valid
    assert validate_bid_amount(500000, 85000, UPWARD, STARTING).valid


@pytest.mark.parametrize("amount,rule", [
    (95000, "below_current"),
    (100000, "below_current"),
    (84999, "starting_floor"),
    (86000, None),
])
def test_downward_bounds(amount, rule):
    check = validate_bid_amount(amount, 95000, DOWNWARD, STARTING)
    assert check.valid is (rule is None)
    assert check.rule == rule


def test_downward_step_caps_the_drop():
    # price 120000: floor 85000, lowest single step 110000
    check = validate_bid_amount(100000, 120000, DOWNWARD, STARTING)
    assert not check.valid
    assert check.rule == "max_decrement"
    assert "Rs. 110,000" in check.reason
    assert validate_bid_amount(110000, 120000, DOWNWARD, STARTING).valid


def test_downward_never_below_starting_bid_on_fresh_listing():
    # A fresh listing sits at its starting bid, so there is no room to go down
    check = validate_bid_amount(75000, STARTING, DOWNWARD, STARTING)
    assert not check.valid
    assert check.rule == "starting_floor"


def test_reason_names_the_bound():
    check = validate_bid_amount(90000, 85000, UPWARD, STARTING)
    assert check.reason == "Minimum upward bid is Rs. 95,000"


def test_bidding_window():
    now = datetime(2026, 1, 1, 12, 0, 0)
    end = bidding_end_time(7, now)
    assert end == now + timedelta(days=7)
    assert is_bidding_active(end, now)
    assert not is_bidding_active(end, end)
    assert not is_bidding_active(end, end + timedelta(seconds=1))


def test_format_time_remaining():
    now = datetime(2026, 1, 1)
    assert format_time_remaining(now, now) == "Ended"
    assert format_time_remaining(now + timedelta(days=2, hours=3), now) == "2d 3h"
    assert format_time_remaining(now + timedelta(hours=5, minutes=7), now) == "5h 7m"
    assert format_time_remaining(now + timedelta(minutes=9), now) == "9m"
