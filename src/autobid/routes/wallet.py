# autobid/routes/wallet.py
from flask import Blueprint, request
from flask_jwt_extended import jwt_required
from ..errors import NotFound, ValidationError
from ..extensions import db
from ..ledger import (
    DEPOSIT, WITHDRAWAL, CREDIT_TYPES, DEBIT_TYPES, TOPUP_MAX, TOPUP_MIN, WalletLedger,
)
from ..models import User
from ..schemas import AmountRequest
from ..utils import api_ok, atomic, current_user_id, page_args, pagination

bp = Blueprint("wallet", __name__)

@bp.get("/balance")
@jwt_required()
def balance():
    u = db.session.get(User, current_user_id())
    if not u:
        raise NotFound("User not found")
    return api_ok({"walletBalance": u.wallet_balance})

@bp.post("/topup")
@jwt_required()
def topup():
    amount = AmountRequest.from_json(request.get_json(silent=True)).amount
    if amount < TOPUP_MIN:
        raise ValidationError(f"Minimum top-up amount is Rs. {TOPUP_MIN:,}")
    if amount > TOPUP_MAX:
        raise ValidationError(f"Maximum top-up amount is Rs. {TOPUP_MAX:,}")

    with atomic():
        entry = WalletLedger().credit(
            current_user_id(), amount, DEPOSIT, f"Wallet top-up of Rs. {amount:,}",
        )
        balance_after = entry.balance_after
    return api_ok(
        {"walletBalance": balance_after, "amountAdded": amount},
        message=f"Wallet topped up successfully with Rs. {amount:,}",
    )

@bp.post("/withdraw")
@jwt_required()
def withdraw():
    amount = AmountRequest.from_json(request.get_json(silent=True)).amount
    with atomic():
        entry = WalletLedger().debit(
            current_user_id(), amount, WITHDRAWAL, f"Withdrawal of Rs. {amount:,}",
        )
        balance_after = entry.balance_after
    return api_ok({"walletBalance": balance_after, "amountWithdrawn": amount},
                  message="Withdrawal successful")

@bp.get("/transactions")
@jwt_required()
def transactions():
    type_ = request.args.get("type")
    if type_ and type_ not in CREDIT_TYPES + DEBIT_TYPES:
        raise ValidationError("Unknown transaction type")
    page, limit = page_args()
    items, total = WalletLedger().transactions(current_user_id(), type_, page, limit)
    return api_ok({
        "transactions": [t.to_dict() for t in items],
        "pagination": pagination(page, limit, total),
    })

@bp.get("/summary")
@jwt_required()
def summary():
    return api_ok(WalletLedger().get_summary(current_user_id()))
