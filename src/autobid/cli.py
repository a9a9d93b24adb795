# autobid/cli.py
import click
from .extensions import db
from .accounts import open_account
from .models import User, Vehicle
from .tasks import reconcile_wallets

_DEMO_USERS = [
    ("seller@autobid.test", "Demo Seller", "seller123"),
    ("buyer@autobid.test", "Demo Buyer", "buyer123"),
]

_DEMO_VEHICLES = [
    dict(title="Toyota Aqua 2015", category="car", base_price=5200000, bidding_duration=7,
         image="https://images.unsplash.com/photo-1503376780353-7e6692767b70?auto=format&fit=crop&w=1600&q=80",
         description="Single owner hybrid, full service history, new tyres fitted last year.",
         nearest_city="Colombo", fuel_type="Hybrid", transmission_type="Automatic"),
    dict(title="Honda CB 150R", category="bike", base_price=650000, bidding_duration=3,
         image="https://images.unsplash.com/photo-1558981806-ec527fa84c39?auto=format&fit=crop&w=1600&q=80",
         description="Well kept commuter bike, recently serviced, original paint and parts.",
         nearest_city="Kandy", fuel_type="Petrol", transmission_type="Manual"),
    dict(title="Isuzu Elf Truck", category="truck", base_price=4100000, bidding_duration=14,
         bidding_type="downward",
         image="https://images.unsplash.com/photo-1601584115197-04ecc0da31d7?auto=format&fit=crop&w=1600&q=80",
         description="Light duty truck in running condition, ideal for transport business.",
         nearest_city="Galle", fuel_type="Diesel", transmission_type="Manual"),
]

def _ensure_user(email, name, password):
    u = User.query.filter_by(email=email).first()
    if u:
        return u
    return open_account(email, name, password)

def register_cli(app):
    @app.cli.command("seed")
    def seed():
        """Load demo users and vehicles."""
        users = [_ensure_user(*row) for row in _DEMO_USERS]
        seller = users[0]
        if not Vehicle.query.filter_by(owner_id=seller.id).first():
            for demo in _DEMO_VEHICLES:
                demo = dict(demo)
                db.session.add(Vehicle.list_new(
                    seller, demo.pop("base_price"), demo.pop("bidding_duration"), **demo,
                ))
            db.session.commit()
        click.echo("Seed done.")

    @app.cli.command("verify-ledger")
    def verify_ledger():
        """Fold every wallet ledger and report mismatches with the cached balances."""
        problems = reconcile_wallets(app)
        for p in problems:
            click.echo(f"user={p.user_id} txn={p.transaction_id}: {p.problem}")
        if problems:
            raise SystemExit(1)
        click.echo("Ledger consistent.")
