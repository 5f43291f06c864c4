from fastapi.testclient import TestClient

from hotel_api.db.init_db import create_tables
from hotel_api.main import create_app

GUEST_EMAIL = "ada@example.com"


def setup_room(make_hotel, make_room):
    hotel = make_hotel()
    return make_room(hotel["id"])


def test_create_booking_is_public(client, make_hotel, make_room, booking_body):
    room = setup_room(make_hotel, make_room)
    r = client.post("/api/bookings", json=booking_body(room["id"], specialRequests="  Late arrival  "))
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["message"] == "Booking created successfully"
    data = body["data"]
    assert data["status"] == "pending"
    assert data["isPaid"] is False
    assert data["hotelId"] == room["hotelId"]
    assert data["room"]["roomNumber"] == "101"
    assert data["specialRequests"] == "Late arrival"
    assert data["userId"] is None


def test_create_booking_links_authenticated_guest(client, make_hotel, make_room, booking_body, auth):
    room = setup_room(make_hotel, make_room)
    r = client.post("/api/bookings", json=booking_body(room["id"]), headers=auth("guest-9", GUEST_EMAIL))
    assert r.status_code == 201, r.text
    assert r.json()["data"]["userId"] == "guest-9"


def test_create_booking_validation(client, make_hotel, make_room, booking_body):
    room = setup_room(make_hotel, make_room)
    r = client.post("/api/bookings", json=booking_body(room["id"], guestEmail="not-an-email", guests=0))
    assert r.status_code == 400, r.text
    joined = " ".join(r.json()["errors"])
    assert "guestEmail" in joined
    assert "guests" in joined

    r = client.post("/api/bookings", json=booking_body(room["id"], nights=5))
    assert r.status_code == 400
    assert "nights" in r.json()["message"]

    r = client.post("/api/bookings", json=booking_body(999))
    assert r.status_code == 404


def test_public_view_hides_contact_details(client, make_hotel, make_room, make_booking):
    booking = make_booking(setup_room(make_hotel, make_room)["id"])
    r = client.get(f"/api/bookings/public/{booking['id']}")
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["guestName"] == "Ada Obi"
    assert data["hotel"]["city"] == "Lagos"
    assert "guestEmail" not in data
    assert "guestPhone" not in data
    assert client.get("/api/bookings/public/999").status_code == 404


def test_guest_reads_own_booking(client, make_hotel, make_room, make_booking, auth):
    booking = make_booking(setup_room(make_hotel, make_room)["id"])
    url = f"/api/bookings/{booking['id']}"

    assert client.get(url).status_code == 401
    assert client.get(url, headers=auth("guest-1", "ADA@example.com")).status_code == 200
    r = client.get(url, headers=auth("guest-2", "eve@example.com"))
    assert r.status_code == 403
    assert r.json()["message"] == "Not authorized to view this booking"
    assert client.get(url, headers=auth("guest-3", None)).status_code == 401


def test_my_bookings(client, make_hotel, make_room, make_booking, auth):
    room = setup_room(make_hotel, make_room)
    make_booking(room["id"])
    make_booking(room["id"], guestEmail="bo@example.com")
    r = client.get("/api/bookings/my-bookings", headers=auth("guest-1", GUEST_EMAIL))
    assert r.status_code == 200, r.text
    assert [b["guestEmail"] for b in r.json()["data"]] == [GUEST_EMAIL]
    assert r.json()["pagination"]["total"] == 1


def test_guest_cancels_ahead_of_check_in(client, make_hotel, make_room, make_booking, auth):
    booking = make_booking(setup_room(make_hotel, make_room)["id"])
    guest = auth("guest-1", GUEST_EMAIL)
    r = client.patch(f"/api/bookings/{booking['id']}/cancel", headers=guest)
    assert r.status_code == 200, r.text
    assert r.json()["data"]["status"] == "cancelled"
    assert r.json()["message"] == "Booking cancelled successfully"

    again = client.patch(f"/api/bookings/{booking['id']}/cancel", headers=guest)
    assert again.status_code == 400
    assert again.json()["message"] == "Booking is already cancelled"


def test_admin_listing_and_filters(client, make_hotel, make_room, make_booking, owner):
    room = setup_room(make_hotel, make_room)
    first = make_booking(room["id"])
    make_booking(room["id"], guestEmail="bo@example.com", guestName="Bo")

    assert client.get("/api/bookings").status_code == 401

    r = client.get("/api/bookings", params={"sortBy": "guestName", "sortOrder": "asc"}, headers=owner)
    assert r.status_code == 200, r.text
    assert [b["guestName"] for b in r.json()["data"]] == ["Ada Obi", "Bo"]

    r = client.get("/api/bookings", params={"guestEmail": "ADA@EXAMPLE.COM"}, headers=owner)
    assert [b["id"] for b in r.json()["data"]] == [first["id"]]

    r = client.get(f"/api/bookings/guest/{GUEST_EMAIL}", headers=owner)
    assert [b["id"] for b in r.json()["data"]] == [first["id"]]

    assert client.get("/api/bookings", params={"sortBy": "secret"}, headers=owner).status_code == 400
    assert client.get("/api/bookings", params={"sortOrder": "sideways"}, headers=owner).status_code == 400


def test_admin_payment_update_and_stats(client, make_hotel, make_room, make_booking, owner):
    room = setup_room(make_hotel, make_room)
    booking = make_booking(room["id"])
    make_booking(room["id"])

    r = client.patch(f"/api/bookings/{booking['id']}/payment", json={"isPaid": True, "paymentMethod": "card"}, headers=owner)
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert (data["status"], data["isPaid"], data["paymentMethod"]) == ("confirmed", True, "card")

    stats = client.get("/api/bookings/stats/dashboard", headers=owner).json()["data"]
    assert stats["total"] == 2
    assert stats["byStatus"]["confirmed"] == 1
    assert stats["byStatus"]["pending"] == 1
    assert stats["totalRevenue"] == 75000.0


def test_admin_update_and_delete(client, make_hotel, make_room, make_booking, owner):
    booking = make_booking(setup_room(make_hotel, make_room)["id"])
    url = f"/api/bookings/{booking['id']}"

    r = client.put(url, json={"status": "completed", "guestPhone": "+2348099999999"}, headers=owner)
    assert r.status_code == 200, r.text
    assert r.json()["data"]["status"] == "completed"
    assert r.json()["data"]["guestPhone"] == "+2348099999999"

    r = client.put(url, json={"status": "pending"}, headers=owner)
    assert r.status_code == 400
    assert r.json()["message"] == "Booking is completed and cannot become pending"

    assert client.put(url, json={"status": "archived"}, headers=owner).status_code == 400

    r = client.delete(url, headers=owner)
    assert r.status_code == 200, r.text
    assert client.get(f"/api/bookings/public/{booking['id']}").status_code == 404


def test_admin_update_keeps_booking_consistent(client, make_hotel, make_room, make_booking, owner):
    booking = make_booking(setup_room(make_hotel, make_room)["id"], nights=3)
    url = f"/api/bookings/{booking['id']}"

    r = client.put(url, json={"isPaid": True}, headers=owner)
    assert r.status_code == 200, r.text
    assert r.json()["data"]["isPaid"] is True
    assert r.json()["data"]["status"] == "confirmed"

    r = client.put(url, json={"nights": 5}, headers=owner)
    assert r.status_code == 400
    assert "nights" in " ".join(r.json()["errors"])


def test_admin_allow_list(settings, auth):
    restricted = settings.model_copy(update={"admin_user_ids_raw": "admin-1, admin-2"})
    app = create_app(restricted)
    create_tables(app.state.db.engine)
    with TestClient(app) as c:
        r = c.get("/api/bookings", headers=auth("owner-1"))
        assert r.status_code == 403
        assert r.json()["message"] == "Admin access required"
        r = c.get("/api/bookings", headers=auth("admin-2"))
        assert r.status_code == 200, r.text
    app.state.db.dispose()
