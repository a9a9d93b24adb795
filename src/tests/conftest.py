# tests/conftest.py
import pytest
from autobid import create_app
from autobid.config import TestConfig
from autobid.extensions import db
from autobid.notifications import NotificationSink

# Import the models so SQLAlchemy knows the tables
from autobid import models  # noqa


class RecordingSink(NotificationSink):
    def __init__(self):
        self.events = []

    def publish(self, vehicle_id, event_type, payload):
        self.events.append((vehicle_id, event_type, payload))


VEHICLE_PAYLOAD = {
    "title": "Toyota Corolla 2012",
    "category": "car",
    "image": "https://example.test/corolla.jpg",
    "description": "Well maintained family car with a full service record.",
    "basePrice": 100000,
    "biddingDuration": 7,
    "nearestCity": "Colombo",
}


@pytest.fixture()
def app_instance(tmp_path):
    """
    App for tests:
    - SQLite in a temporary file, one per test.
    - No ledger audit scheduler.
    - Notifications recorded instead of pushed.
    """
    application = create_app(
        TestConfig,
        SQLALCHEMY_DATABASE_URI=f"sqlite:///{tmp_path / 'test.sqlite'}",
    )
    application.extensions["notification_sink"] = RecordingSink()

    with application.app_context():
        db.create_all()

    yield application

    with application.app_context():
        db.session.remove()
        db.drop_all()

@pytest.fixture()
def client(app_instance):
    return app_instance.test_client()

@pytest.fixture()
def app_ctx(app_instance):
    with app_instance.app_context():
        yield

@pytest.fixture()
def sink(app_instance):
    return app_instance.extensions["notification_sink"]

@pytest.fixture()
def make_user(client):
    """
    Signs a user up and returns (headers, user_id).
    Every new account starts with the 5000 grant.
    """
    def _mk(email, password="secret123", name="Test User"):
        r = client.post("/api/auth/signup", json={
            "email": email,
            "password": password,
            "displayName": name,
        })
        assert r.status_code == 201, r.get_json()
        data = r.get_json()["data"]
        return {"Authorization": f"Bearer {data['token']}"}, data["user"]["id"]
    return _mk

@pytest.fixture()
def topup(client):
    def _topup(headers, amount):
        r = client.post("/api/wallet/topup", json={"amount": amount}, headers=headers)
        assert r.status_code == 200, r.get_json()
        return r.get_json()["data"]["walletBalance"]
    return _topup

@pytest.fixture()
def seller(make_user):
    return make_user("seller@test.local", name="Seller")

@pytest.fixture()
def vehicle_payload():
    return dict(VEHICLE_PAYLOAD)

@pytest.fixture()
def make_vehicle(client, seller, vehicle_payload):
    def _mk(headers=None, **overrides):
        payload = {**vehicle_payload, **overrides}
        r = client.post("/api/vehicles", json=payload, headers=headers or seller[0])
        assert r.status_code == 201, r.get_json()
        return r.get_json()["data"]["vehicle"]
    return _mk

@pytest.fixture()
def vehicle(make_vehicle):
    return make_vehicle()
