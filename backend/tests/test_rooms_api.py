def test_create_room_defaults(client, make_hotel, make_room):
    hotel = make_hotel()
    room = make_room(hotel["id"], size={"value": 32})
    assert room["hotelId"] == hotel["id"]
    assert room["hotel"]["name"] == "Lagoon View"
    assert room["currency"] == "NGN"
    assert room["pricePerNight"] == 25000.0
    assert room["discount"] == {"amount": 0.0, "type": "fixed", "validUntil": None}
    assert room["size"] == {"value": 32.0, "unit": "sqm"}
    assert room["availableRooms"] == 3


def test_available_units_never_exceed_total(client, make_hotel, make_room):
    room = make_room(make_hotel()["id"], totalRooms=2, availableRooms=5)
    assert room["availableRooms"] == 2


def test_create_room_for_missing_or_inactive_hotel(client, make_hotel, owner):
    r = client.post("/api/rooms", json={
        "hotel": 999, "roomType": "Suite", "roomNumber": "1", "pricePerNight": 100, "maxGuests": 1,
    }, headers=owner)
    assert r.status_code == 404

    hotel = make_hotel()
    client.delete(f"/api/hotels/{hotel['id']}", headers=owner)
    r = client.post("/api/rooms", json={
        "hotel": hotel["id"], "roomType": "Suite", "roomNumber": "1", "pricePerNight": 100, "maxGuests": 1,
    }, headers=owner)
    assert r.status_code == 404
    assert r.json()["message"] == "Hotel not found"


def test_create_room_validation(client, make_hotel, owner):
    hotel = make_hotel()
    r = client.post("/api/rooms", json={
        "hotel": hotel["id"], "roomType": "Suite", "roomNumber": "1", "pricePerNight": -5, "maxGuests": 0,
        "beds": [{"type": "Waterbed"}],
    }, headers=owner)
    assert r.status_code == 400, r.text
    joined = " ".join(r.json()["errors"])
    assert "pricePerNight" in joined
    assert "maxGuests" in joined
    assert "beds" in joined


def test_search_returns_summaries(client, make_hotel, make_room):
    hotel = make_hotel()
    make_room(hotel["id"], roomNumber="1", pricePerNight=10000)
    make_room(hotel["id"], roomNumber="2", pricePerNight=30000, discount={"amount": 5000, "type": "fixed"})

    r = client.get("/api/rooms", params={"sort": "priceDesc"})
    assert r.status_code == 200, r.text
    body = r.json()
    assert [room["roomNumber"] for room in body["data"]] == ["2", "1"]
    top = body["data"][0]
    assert top["finalPrice"] == 25000.0
    assert top["hasDiscount"] is True
    assert top["avgRating"] == 0
    assert top["totalReviews"] == 0
    assert body["pagination"] == {"page": 1, "limit": 10, "total": 2, "pages": 1}


def test_search_page_out_of_range(client, make_hotel, make_room):
    hotel = make_hotel()
    make_room(hotel["id"], roomNumber="1")
    make_room(hotel["id"], roomNumber="2")

    r = client.get("/api/rooms", params={"page": 99})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["data"] == []
    assert body["pagination"] == {"page": 99, "limit": 10, "total": 2, "pages": 1}

    r = client.get("/api/rooms", params={"limit": 0})
    assert r.json()["pagination"] == {"page": 1, "limit": 1, "total": 2, "pages": 2}


def test_search_query_filters(client, make_hotel, make_room, auth):
    lagos = make_hotel(city="Lagos")
    abuja = make_hotel(city="Abuja", headers=auth("owner-2"))
    make_room(lagos["id"], roomType="Deluxe King", amenities=["WiFi", "TV"], maxGuests=4)
    make_room(lagos["id"], roomType="Standard", amenities=["WiFi"])
    make_room(abuja["id"], roomType="Deluxe", amenities=["Pool"], headers=auth("owner-2"))

    def matches(**params):
        r = client.get("/api/rooms", params=params)
        assert r.status_code == 200, r.text
        return [(room["hotelId"], room["roomType"]) for room in r.json()["data"]]

    assert matches(city="LAGOS", roomType="deluxe") == [(lagos["id"], "Deluxe King")]
    assert matches(amenities="wifi,tv") == [(lagos["id"], "Deluxe King")]
    assert matches(guests=3) == [(lagos["id"], "Deluxe King")]
    assert len(matches(hotelId=lagos["id"])) == 2


def test_search_rejects_bad_sort_and_price_range(client):
    r = client.get("/api/rooms", params={"sort": "cheapest"})
    assert r.status_code == 400
    assert "sort" in r.json()["message"]

    r = client.get("/api/rooms", params={"minPrice": 500, "maxPrice": 100})
    assert r.status_code == 400


def test_hotel_rooms_listing(client, make_hotel, make_room, owner):
    hotel = make_hotel()
    vacant = make_room(hotel["id"], roomNumber="1")
    full = make_room(hotel["id"], roomNumber="2")
    client.patch(f"/api/rooms/{full['id']}/availability", json={"availableRooms": 0}, headers=owner)

    r = client.get(f"/api/rooms/hotel/{hotel['id']}")
    assert r.status_code == 200, r.text
    assert [room["id"] for room in r.json()["data"]] == [vacant["id"]]

    assert client.get("/api/rooms/hotel/999").status_code == 404


def test_get_room(client, make_hotel, make_room):
    room = make_room(make_hotel()["id"], discount={"amount": 10, "type": "percentage"})
    r = client.get(f"/api/rooms/{room['id']}")
    assert r.status_code == 200, r.text
    assert r.json()["data"]["finalPrice"] == 22500.0
    assert client.get("/api/rooms/999").status_code == 404


def test_update_room_and_clear_discount(client, make_hotel, make_room, owner):
    room = make_room(make_hotel()["id"], discount={"amount": 10, "type": "percentage"})
    r = client.put(f"/api/rooms/{room['id']}", json={"pricePerNight": 30000, "roomType": None}, headers=owner)
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["pricePerNight"] == 30000.0
    assert data["roomType"] == "Deluxe"
    assert data["discount"]["amount"] == 10.0

    r = client.put(f"/api/rooms/{room['id']}", json={"discount": None}, headers=owner)
    assert r.status_code == 200, r.text
    assert r.json()["data"]["discount"] == {"amount": 0.0, "type": "fixed", "validUntil": None}


def test_availability_patch_clamps_to_total(client, make_hotel, make_room, owner):
    room = make_room(make_hotel()["id"], totalRooms=3, availableRooms=1)
    r = client.patch(f"/api/rooms/{room['id']}/availability", json={"availableRooms": 10}, headers=owner)
    assert r.status_code == 200, r.text
    assert r.json()["data"]["availableRooms"] == 3
    assert r.json()["message"] == "Room availability updated successfully"

    r = client.patch(f"/api/rooms/{room['id']}/availability", json={"isAvailable": False}, headers=owner)
    assert r.json()["data"]["isAvailable"] is False
    assert r.json()["data"]["availableRooms"] == 3


def test_delete_room(client, make_hotel, make_room, owner):
    room = make_room(make_hotel()["id"])
    r = client.delete(f"/api/rooms/{room['id']}", headers=owner)
    assert r.status_code == 200, r.text
    assert client.get(f"/api/rooms/{room['id']}").status_code == 404


def test_my_rooms(client, make_hotel, make_room, auth, owner):
    mine = make_hotel()
    theirs = make_hotel(headers=auth("owner-2"))
    make_room(mine["id"])
    make_room(theirs["id"], headers=auth("owner-2"))

    r = client.get("/api/rooms/owner/my-rooms", headers=owner)
    assert r.status_code == 200, r.text
    assert [room["hotelId"] for room in r.json()["data"]] == [mine["id"]]

    r = client.get("/api/rooms/owner/my-rooms", params={"hotelId": theirs["id"]}, headers=owner)
    assert r.status_code == 404


def test_check_availability_errors(client, make_hotel, make_room):
    room = make_room(make_hotel()["id"])
    r = client.post(f"/api/rooms/{room['id']}/check-availability", json={
        "checkIn": "2025-01-13", "checkOut": "2025-01-10", "guests": 1,
    })
    assert r.status_code == 400
    assert r.json()["code"] == "invalid_date_range"

    r = client.post("/api/rooms/999/check-availability", json={"checkIn": "2025-01-10", "checkOut": "2025-01-11"})
    assert r.status_code == 404

    r = client.post(f"/api/rooms/{room['id']}/check-availability", json={"checkIn": "soon", "checkOut": "2025-01-11"})
    assert r.status_code == 400
    assert "checkIn" in r.json()["message"]
