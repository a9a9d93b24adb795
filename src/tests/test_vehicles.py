# tests/test_vehicles.py
def test_create_and_list(client, seller, vehicle):
    assert vehicle["userId"] == seller[1]
    assert vehicle["userName"] == "Seller"
    assert vehicle["biddingDuration"] == 7
    assert vehicle["bids"] == []
    assert vehicle["timeRemaining"].startswith("6d") or vehicle["timeRemaining"].startswith("7d")

    r = client.get("/api/vehicles")
    assert r.status_code == 200
    data = r.get_json()["data"]
    assert [v["id"] for v in data["vehicles"]] == [vehicle["id"]]
    assert data["pagination"]["total"] == 1

    r = client.get("/api/vehicles?search=corolla&category=car&isActive=true")
    assert len(r.get_json()["data"]["vehicles"]) == 1
    r = client.get("/api/vehicles?category=bike")
    assert r.get_json()["data"]["vehicles"] == []

    r = client.get(f"/api/vehicles/user/{seller[1]}")
    assert [v["id"] for v in r.get_json()["data"]["vehicles"]] == [vehicle["id"]]


def test_downward_listing(make_vehicle):
    v = make_vehicle(biddingType="downward", basePrice=250000)
    assert v["biddingType"] == "downward"
    assert v["suggestedStartingBid"] == v["currentPrice"] == 212500


def test_create_validation(client, seller, vehicle_payload):
    for bad in (
        {"basePrice": -1},
        {"basePrice": "100000"},
        {"basePrice": 2 ** 63},
        {"biddingDuration": 0},
        {"biddingDuration": 31},
        {"biddingType": "sideways"},
        {"title": "Car"},
        {"description": "too short"},
        {"category": "boat"},
    ):
        r = client.post("/api/vehicles", json={**vehicle_payload, **bad}, headers=seller[0])
        assert r.status_code == 400, bad


def test_update_keeps_pricing_fixed(client, seller, vehicle):
    r = client.put(f"/api/vehicles/{vehicle['id']}", json={
        "title": "Toyota Corolla 2012 (facelift)",
        "currentPrice": 1,
        "suggestedStartingBid": 1,
        "basePrice": 1,
        "biddingEndTime": "2000-01-01T00:00:00Z",
        "userId": 999,
    }, headers=seller[0])
    assert r.status_code == 200
    v = r.get_json()["data"]["vehicle"]
    assert v["title"] == "Toyota Corolla 2012 (facelift)"
    assert v["currentPrice"] == 85000
    assert v["suggestedStartingBid"] == 85000
    assert v["basePrice"] == 100000
    assert v["biddingEndTime"] == vehicle["biddingEndTime"]
    assert v["userId"] == seller[1]


def test_only_owner_may_edit_or_delete(client, vehicle, make_user):
    headers, _ = make_user("other@test.local")
    r = client.put(f"/api/vehicles/{vehicle['id']}", json={"title": "Hijacked listing"}, headers=headers)
    assert r.status_code == 403
    assert r.get_json()["message"] == "Not authorized to update this vehicle"
    assert client.delete(f"/api/vehicles/{vehicle['id']}", headers=headers).status_code == 403


def test_soft_delete(client, seller, vehicle):
    r = client.delete(f"/api/vehicles/{vehicle['id']}", headers=seller[0])
    assert r.status_code == 200
    r = client.get(f"/api/vehicles/{vehicle['id']}")
    assert r.status_code == 200
    assert r.get_json()["data"]["vehicle"]["isActive"] is False


def test_missing_vehicle(client):
    r = client.get("/api/vehicles/4242")
    assert r.status_code == 404
    assert r.get_json() == {"success": False, "message": "Vehicle not found"}


def test_bid_listings(client, vehicle, make_user):
    headers, uid = make_user("buyer@test.local")
    client.post(f"/api/vehicles/{vehicle['id']}/bid", json={"biddingType": "upward"}, headers=headers)

    r = client.get(f"/api/bids/user/{uid}")
    assert [b["amount"] for b in r.get_json()["data"]["bids"]] == [95000]
    r = client.get("/api/bids")
    assert r.get_json()["data"]["pagination"]["total"] == 1
    r = client.get("/api/users/me/history", headers=headers)
    hist = r.get_json()["data"]
    assert hist[0]["vehicleId"] == vehicle["id"]
    assert hist[0]["currentPrice"] == 95000
    assert hist[0]["isActive"] is True
