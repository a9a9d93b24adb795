from .extensions import db
from .ledger import DEPOSIT, WalletLedger
from .models import User, INITIAL_WALLET_GRANT
from .utils import atomic

def open_account(email, display_name, password):
    """Create a user and grant the starting balance through the ledger, in one commit."""
    with atomic():
        u = User(email=email, display_name=display_name, favorites=[], wallet_balance=0)
        u.set_password(password)
        db.session.add(u)
        db.session.flush()
        WalletLedger().credit(u.id, INITIAL_WALLET_GRANT, DEPOSIT, "Initial wallet grant")
    return u
