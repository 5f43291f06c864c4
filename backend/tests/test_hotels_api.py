def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200, r.text
    assert r.json() == {"success": True, "message": "Server is running!"}


def test_create_hotel_requires_auth(client, auth):
    from_anon = client.post("/api/hotels", json={"name": "X"})
    assert from_anon.status_code == 401
    assert from_anon.json()["message"] == "Authentication required"

    bad = client.post("/api/hotels", json={"name": "X"}, headers={"Authorization": "Bearer not-a-jwt"})
    assert bad.status_code == 401
    assert bad.json()["message"] == "Invalid or expired token"


def test_create_hotel_validation_lists_fields(client, owner):
    r = client.post("/api/hotels", json={"name": "Half done", "starRating": 9}, headers=owner)
    assert r.status_code == 400, r.text
    body = r.json()
    assert body["success"] is False
    assert body["message"].startswith("Validation failed: ")
    fields = " ".join(body["errors"])
    for name in ("address", "city", "state", "phone", "starRating"):
        assert name in fields


def test_create_hotel_sets_owner_from_token(client, make_hotel):
    hotel = make_hotel()
    assert hotel["ownerId"] == "owner-1"
    assert hotel["ownerEmail"] == "owner@example.com"
    assert hotel["isActive"] is True
    assert hotel["featured"] is False
    assert hotel["checkInTime"] == "14:00"


def test_list_hotels_filters(client, make_hotel):
    make_hotel(name="Lagoon", city="Lagos", starRating=5, amenities=["Pool"])
    make_hotel(name="Capital", city="Abuja", starRating=3, category="Budget", amenities=["Gym"])
    make_hotel(name="Island", city="Lagos Island", starRating=2, amenities=["WiFi"])

    r = client.get("/api/hotels", params={"city": "lagos"})
    assert r.status_code == 200, r.text
    assert sorted(h["name"] for h in r.json()["data"]) == ["Island", "Lagoon"]

    r = client.get("/api/hotels", params={"minRating": 3})
    assert sorted(h["name"] for h in r.json()["data"]) == ["Capital", "Lagoon"]

    r = client.get("/api/hotels", params={"category": "Budget"})
    assert [h["name"] for h in r.json()["data"]] == ["Capital"]

    r = client.get("/api/hotels", params={"amenities": "gym,wifi"})
    assert sorted(h["name"] for h in r.json()["data"]) == ["Capital", "Island"]

    r = client.get("/api/hotels", params={"limit": 2})
    assert r.json()["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}


def test_featured_hotels_first(client, make_hotel, owner):
    plain = make_hotel(name="Plain")
    star = make_hotel(name="Star")
    r = client.put(f"/api/hotels/{plain['id']}", json={"featured": True}, headers=owner)
    assert r.status_code == 200, r.text

    listing = client.get("/api/hotels").json()["data"]
    assert [h["name"] for h in listing] == ["Plain", "Star"]

    featured = client.get("/api/hotels/featured/list").json()
    assert featured["count"] == 1
    assert featured["data"][0]["id"] == plain["id"]
    assert star["featured"] is False


def test_get_hotel_includes_available_rooms(client, make_hotel, make_room, owner):
    hotel = make_hotel()
    open_room = make_room(hotel["id"], roomNumber="101")
    closed = make_room(hotel["id"], roomNumber="102", isAvailable=False)

    r = client.get(f"/api/hotels/{hotel['id']}")
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["hotel"]["name"] == "Lagoon View"
    assert [room["id"] for room in data["rooms"]] == [open_room["id"]]
    assert closed["isAvailable"] is False


def test_get_missing_hotel(client):
    r = client.get("/api/hotels/404")
    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Hotel not found"}


def test_update_hotel_ignores_unknown_and_null_fields(client, make_hotel, owner):
    hotel = make_hotel()
    r = client.put(
        f"/api/hotels/{hotel['id']}",
        json={"description": "Sea views", "city": None, "ownerId": "someone-else"},
        headers=owner,
    )
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["description"] == "Sea views"
    assert data["city"] == "Lagos"
    assert data["ownerId"] == "owner-1"


def test_delete_hotel_is_soft(client, make_hotel, make_room, owner):
    hotel = make_hotel()
    make_room(hotel["id"])
    r = client.delete(f"/api/hotels/{hotel['id']}", headers=owner)
    assert r.status_code == 200, r.text
    assert r.json()["message"] == "Hotel deleted successfully"

    assert client.get(f"/api/hotels/{hotel['id']}").status_code == 404
    assert client.get("/api/hotels").json()["data"] == []
    assert client.get("/api/rooms").json()["data"] == []

    mine = client.get("/api/hotels/owner/my-hotels", headers=owner).json()
    assert mine["data"][0]["isActive"] is False


def test_my_hotels_only_lists_callers_hotels(client, make_hotel, auth, owner):
    make_hotel(name="Mine")
    make_hotel(headers=auth("owner-2"), name="Theirs")
    r = client.get("/api/hotels/owner/my-hotels", headers=owner)
    assert r.status_code == 200, r.text
    assert [h["name"] for h in r.json()["data"]] == ["Mine"]
    assert r.json()["pagination"]["total"] == 1
