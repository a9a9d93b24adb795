import logging
from flask import current_app
from .extensions import db
from .ledger import WalletLedger
from .models import User

log = logging.getLogger("autobid.tasks")

def reconcile_wallets(app=None):
    """Fold every user's ledger and log any disagreement. Read only."""
    if app is None:
        app = current_app._get_current_object()
    with app.app_context():
        try:
            ledger = WalletLedger()
            problems = []
            for (uid,) in db.session.query(User.id).order_by(User.id).all():
                problems.extend(ledger.verify(uid))
            for p in problems:
                log.error("ledger:mismatch user=%s txn=%s %s", p.user_id, p.transaction_id, p.problem)
            if not problems:
                log.info("ledger:reconciled ok")
            return problems
        finally:
            db.session.remove()

def schedule_jobs(scheduler, app):
    scheduler.add_job(
        id="reconcile_wallets",
        func=reconcile_wallets,
        trigger="interval",
        seconds=app.config.get("LEDGER_AUDIT_SECONDS", 300),
        args=[app],
        coalesce=True,
        max_instances=1,
    )
