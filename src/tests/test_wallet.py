# tests/test_wallet.py
import pytest


@pytest.mark.parametrize("amount,status", [
    (99, 400),
    (100, 200),
    (100000, 200),
    (100001, 400),
    (0, 400),
    (-500, 400),
    (150.5, 400),
    ("500", 400),
])
def test_topup_range(client, make_user, amount, status):
    headers, _ = make_user("wallet@test.local")
    r = client.post("/api/wallet/topup", json={"amount": amount}, headers=headers)
    assert r.status_code == status
    if status == 200:
        assert r.get_json()["data"] == {"walletBalance": 5000 + amount, "amountAdded": amount}
    else:
        assert r.get_json()["success"] is False


def test_topup_limits_are_named(client, make_user):
    headers, _ = make_user("wallet@test.local")
    r = client.post("/api/wallet/topup", json={"amount": 99}, headers=headers)
    assert r.get_json()["message"] == "Minimum top-up amount is Rs. 100"
    r = client.post("/api/wallet/topup", json={"amount": 100001}, headers=headers)
    assert r.get_json()["message"] == "Maximum top-up amount is Rs. 100,000"


def test_withdraw(client, make_user):
    headers, _ = make_user("wallet@test.local")
    r = client.post("/api/wallet/withdraw", json={"amount": 1200}, headers=headers)
    assert r.status_code == 200
    assert r.get_json()["data"] == {"walletBalance": 3800, "amountWithdrawn": 1200}

    r = client.post("/api/wallet/withdraw", json={"amount": 3801}, headers=headers)
    assert r.status_code == 400
    assert r.get_json()["message"] == "Insufficient balance"

    r = client.get("/api/wallet/balance", headers=headers)
    assert r.get_json()["data"]["walletBalance"] == 3800


def test_withdraw_needs_positive_amount(client, make_user):
    headers, _ = make_user("wallet@test.local")
    for body in ({}, {"amount": 0}, {"amount": -1}, {"amount": 2 ** 63}):
        r = client.post("/api/wallet/withdraw", json=body, headers=headers)
        assert r.status_code == 400


def test_summary_and_transactions(client, make_user, vehicle, topup):
    headers, uid = make_user("wallet@test.local")
    topup(headers, 1000)
    client.post(f"/api/vehicles/{vehicle['id']}/bid", json={"biddingType": "upward"}, headers=headers)
    client.post("/api/wallet/withdraw", json={"amount": 450}, headers=headers)

    r = client.get("/api/wallet/summary", headers=headers)
    assert r.status_code == 200
    assert r.get_json()["data"] == {
        "currentBalance": 5500,
        "totalDeposits": 6000,
        "totalBids": 50,
        "totalWithdrawals": 450,
        "totalRefunds": 0,
        "transactionCount": 4,
    }

    r = client.get("/api/wallet/transactions?limit=2", headers=headers)
    data = r.get_json()["data"]
    assert data["pagination"] == {"page": 1, "limit": 2, "total": 4, "pages": 2}
    assert [t["type"] for t in data["transactions"]] == ["withdrawal", "bid"]
    assert data["transactions"][0]["balanceAfter"] == 5500

    r = client.get("/api/wallet/transactions?type=deposit", headers=headers)
    txns = r.get_json()["data"]["transactions"]
    assert [t["amount"] for t in txns] == [1000, 5000]
    assert all(t["userId"] == uid for t in txns)

    r = client.get("/api/wallet/transactions?type=bonus", headers=headers)
    assert r.status_code == 400


def test_wallet_requires_auth(client):
    assert client.get("/api/wallet/summary").status_code == 401
    r = client.get("/api/wallet/balance", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401
