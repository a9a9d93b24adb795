"""Wallet ledger.

``users.wallet_balance`` is a cache of the fold of the user's
``wallet_transactions``. Both are written together here, inside the caller's
unit of work: the caller commits (or rolls back) the balance change and its
ledger entry as one.
"""
import logging
from collections import namedtuple
from .errors import InsufficientFunds, NotFound, ValidationError
from .extensions import db
from .models import User, WalletTransaction

log = logging.getLogger("autobid.ledger")

DEPOSIT = "deposit"
WITHDRAWAL = "withdrawal"
BID = "bid"
REFUND = "refund"

CREDIT_TYPES = (DEPOSIT, REFUND)
DEBIT_TYPES = (BID, WITHDRAWAL)

TOPUP_MIN = 100
TOPUP_MAX = 100000

Discrepancy = namedtuple("Discrepancy", ["user_id", "transaction_id", "problem"])


class WalletLedger:

    def _lock_user(self, user_id):
        user = db.session.query(User).filter_by(id=user_id).with_for_update().first()
        if not user:
            raise NotFound("User not found")
        return user

    def _append(self, user, signed_amount, type_, description, vehicle_id, bid_id):
        before = user.wallet_balance
        after = before + signed_amount
        if after < 0:
            raise InsufficientFunds(
                "Insufficient balance",
                walletBalance=before,
                required=-signed_amount,
            )
        user.wallet_balance = after
        entry = WalletTransaction(
            user_id=user.id,
            type=type_,
            amount=signed_amount,
            balance_before=before,
            balance_after=after,
            description=description,
            related_vehicle_id=vehicle_id,
            related_bid_id=bid_id,
        )
        db.session.add(entry)
        db.session.flush()
        log.info("ledger:%s user=%s amount=%s balance=%s->%s",
                 type_, user.id, signed_amount, before, after)
        return entry

    def credit(self, user_id, amount, type_, description, vehicle_id=None, bid_id=None):
        if type_ not in CREDIT_TYPES:
            raise ValueError(f"{type_!r} is not a credit type")
        if amount <= 0:
            raise ValidationError("Credit amount must be positive")
        user = self._lock_user(user_id)
        return self._append(user, amount, type_, description, vehicle_id, bid_id)

    def debit(self, user_id, amount, type_, description, vehicle_id=None, bid_id=None):
        if type_ not in DEBIT_TYPES:
            raise ValueError(f"{type_!r} is not a debit type")
        if amount <= 0:
            raise ValidationError("Debit amount must be positive")
        user = self._lock_user(user_id)
        return self._append(user, -amount, type_, description, vehicle_id, bid_id)

    def history(self, user_id):
        """All entries of a user, oldest first."""
        return (
            WalletTransaction.query
            .filter_by(user_id=user_id)
            .order_by(WalletTransaction.created_at.asc(), WalletTransaction.id.asc())
            .all()
        )

    def transactions(self, user_id, type_=None, page=1, limit=50):
        q = WalletTransaction.query.filter_by(user_id=user_id)
        if type_:
            q = q.filter_by(type=type_)
        total = q.count()
        items = (
            q.order_by(WalletTransaction.created_at.desc(), WalletTransaction.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return items, total

    def get_summary(self, user_id):
        user = db.session.get(User, user_id)
        if not user:
            raise NotFound("User not found")
        totals = {DEPOSIT: 0, BID: 0, WITHDRAWAL: 0, REFUND: 0}
        entries = self.history(user_id)
        for txn in entries:
            totals[txn.type] = totals.get(txn.type, 0) + abs(txn.amount)
        return {
            "currentBalance": user.wallet_balance,
            "totalDeposits": totals[DEPOSIT],
            "totalBids": totals[BID],
            "totalWithdrawals": totals[WITHDRAWAL],
            "totalRefunds": totals[REFUND],
            "transactionCount": len(entries),
        }

    def reconstruct_balance(self, user_id):
        return sum(txn.amount for txn in self.history(user_id))

    def verify(self, user_id):
        """Return every way the ledger disagrees with itself or the cached balance."""
        user = db.session.get(User, user_id)
        if not user:
            raise NotFound("User not found")
        problems = []
        running = 0
        for txn in self.history(user_id):
            if txn.balance_before != running:
                problems.append(Discrepancy(
                    user_id, txn.id,
                    f"balance_before {txn.balance_before} does not follow previous balance {running}",
                ))
            if txn.balance_after != txn.balance_before + txn.amount:
                problems.append(Discrepancy(
                    user_id, txn.id,
                    f"balance_after {txn.balance_after} != {txn.balance_before} + {txn.amount}",
                ))
            running += txn.amount
            if running < 0:
                problems.append(Discrepancy(user_id, txn.id, f"running balance went negative ({running})"))
        if running != user.wallet_balance:
            problems.append(Discrepancy(
                user_id, None,
                f"ledger folds to {running} but wallet_balance is {user.wallet_balance}",
            ))
        return problems
