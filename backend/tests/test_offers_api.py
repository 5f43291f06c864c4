import pytest


def offer_body(hotel_id: int, **overrides) -> dict:
    body = {
        "title": "Long weekend",
        "description": "Three nights for the price of two",
        "hotel": hotel_id,
        "discountType": "percentage",
        "discountValue": 20,
        "originalPrice": 50000,
        "startDate": "2020-01-01T00:00:00Z",
        "endDate": "2099-01-01T00:00:00Z",
    }
    body.update(overrides)
    return body


@pytest.fixture
def hotel(make_hotel):
    return make_hotel()


@pytest.fixture
def make_offer(client, owner):
    def create(hotel_id: int, **overrides) -> dict:
        r = client.post("/api/offers", json=offer_body(hotel_id, **overrides), headers=owner)
        assert r.status_code == 201, r.text
        return r.json()["data"]
    return create


def test_create_offer_computes_offer_price(make_offer, hotel):
    offer = make_offer(hotel["id"], promoCode=" weekend20 ", blackoutDates=["2025-12-25"])
    assert offer["offerPrice"] == 40000.0
    assert offer["promoCode"] == "WEEKEND20"
    assert offer["isCurrentlyValid"] is True
    assert offer["bookingWindow"] == {"start": 0, "end": 365}
    assert offer["blackoutDates"] == ["2025-12-25T00:00:00"]
    assert offer["hotel"]["id"] == hotel["id"]


def test_create_offer_rules(client, hotel, make_offer, auth, owner):
    r = client.post("/api/offers", json=offer_body(hotel["id"]), headers=auth("owner-2"))
    assert r.status_code == 403

    assert client.post("/api/offers", json=offer_body(999), headers=owner).status_code == 404

    r = client.post("/api/offers", json=offer_body(hotel["id"], endDate="2019-01-01"), headers=owner)
    assert r.status_code == 400
    assert "endDate must be after startDate" in r.json()["message"]

    r = client.post("/api/offers", json=offer_body(hotel["id"], discountValue=150), headers=owner)
    assert r.status_code == 400

    make_offer(hotel["id"], promoCode="SUMMER")
    r = client.post("/api/offers", json=offer_body(hotel["id"], promoCode="summer"), headers=owner)
    assert r.status_code == 400
    assert "promoCode" in r.json()["message"]


def test_applicable_rooms_must_belong_to_hotel(client, hotel, make_hotel, make_room, make_offer, owner):
    own_room = make_room(hotel["id"])
    other_room = make_room(make_hotel(name="Other")["id"])
    r = client.post("/api/offers", json=offer_body(hotel["id"], applicableRooms=[other_room["id"]]), headers=owner)
    assert r.status_code == 400

    offer = make_offer(hotel["id"], applicableRooms=[own_room["id"]])
    assert [room["id"] for room in offer["applicableRooms"]] == [own_room["id"]]


def test_listing_and_featured(client, hotel, make_offer, owner):
    low = make_offer(hotel["id"], title="Low", priority=1)
    high = make_offer(hotel["id"], title="High", priority=5, isFeatured=True)
    make_offer(hotel["id"], title="Expired", startDate="2020-01-01", endDate="2020-02-01")
    paused = make_offer(hotel["id"], title="Paused")
    client.patch(f"/api/offers/{paused['id']}/toggle-active", headers=owner)

    r = client.get("/api/offers")
    assert r.status_code == 200, r.text
    assert [o["id"] for o in r.json()["data"]] == [high["id"], low["id"]]

    r = client.get("/api/offers", params={"active": False})
    assert [o["title"] for o in r.json()["data"]] == ["Paused"]

    featured = client.get("/api/offers/featured").json()
    assert featured["count"] == 1
    assert featured["data"][0]["id"] == high["id"]


def test_validate_promo(client, hotel, make_offer):
    make_offer(hotel["id"], promoCode="STAY3")
    make_offer(hotel["id"], promoCode="USEDUP", usageLimit=0)

    r = client.post("/api/offers/validate-promo", json={"promoCode": "stay3", "hotelId": hotel["id"]})
    assert r.status_code == 200, r.text
    assert r.json()["data"]["promoCode"] == "STAY3"

    for code, hotel_id in (("STAY3", 999), ("USEDUP", hotel["id"]), ("NOPE", hotel["id"])):
        r = client.post("/api/offers/validate-promo", json={"promoCode": code, "hotelId": hotel_id})
        assert r.status_code == 404
        assert r.json()["message"] == "Invalid or expired promo code"


def test_update_offer_recomputes_price(client, hotel, make_offer, owner, auth):
    offer = make_offer(hotel["id"])
    url = f"/api/offers/{offer['id']}"

    r = client.put(url, json={"discountValue": 30}, headers=owner)
    assert r.status_code == 200, r.text
    assert r.json()["data"]["offerPrice"] == 35000.0

    r = client.put(url, json={"endDate": "2019-06-01"}, headers=owner)
    assert r.status_code == 400
    assert client.get(url).json()["data"]["endDate"] == "2099-01-01T00:00:00"

    assert client.put(url, json={"title": "Mine"}, headers=auth("owner-2")).status_code == 403


def test_toggle_and_delete(client, hotel, make_offer, owner):
    offer = make_offer(hotel["id"])
    url = f"/api/offers/{offer['id']}"

    r = client.patch(f"{url}/toggle-active", headers=owner)
    assert r.status_code == 200, r.text
    assert r.json()["message"] == "Offer deactivated successfully"
    assert r.json()["data"]["isActive"] is False

    r = client.patch(f"{url}/toggle-active", headers=owner)
    assert r.json()["message"] == "Offer activated successfully"

    assert client.delete(url, headers=owner).status_code == 200
    assert client.get(url).status_code == 404
