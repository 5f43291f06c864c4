from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from hotel_api.core.config import Settings
from hotel_api.core.dates import utcnow
from hotel_api.core.security import create_access_token
from hotel_api.db.init_db import create_tables
from hotel_api.main import create_app

TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"
OWNER_ID = "owner-1"
OWNER_EMAIL = "owner@example.com"
GUEST_EMAIL = "ada@example.com"


def make_settings(tmp_path, **overrides) -> Settings:
    values = dict(
        env="test",
        database_url="sqlite://",
        auth_jwt_key=TEST_SECRET,
        upload_dir=str(tmp_path / "uploads"),
        public_base_url="http://testserver",
        admin_user_ids_raw=None,
        cors_origins_raw=None,
        default_currency="NGN",
        cancellation_notice_hours=24,
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def app(settings):
    app = create_app(settings)
    create_tables(app.state.db.engine)
    yield app
    app.state.db.dispose()


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db(app):
    session = app.state.db.session()
    yield session
    session.close()


@pytest.fixture
def auth(settings):
    def headers(user_id: str = OWNER_ID, email: str | None = OWNER_EMAIL) -> dict:
        token = create_access_token(user_id, settings, email=email)
        return {"Authorization": f"Bearer {token}"}
    return headers


@pytest.fixture
def owner(auth):
    return auth()


def hotel_payload(**overrides) -> dict:
    body = {
        "name": "Lagoon View",
        "address": "12 Marina Road",
        "city": "Lagos",
        "state": "Lagos",
        "phone": "+2348000000000",
        "amenities": ["WiFi", "Pool"],
        "starRating": 4,
        "category": "Luxury",
    }
    body.update(overrides)
    return body


def room_payload(hotel_id: int, **overrides) -> dict:
    body = {
        "hotel": hotel_id,
        "roomType": "Deluxe",
        "roomNumber": "101",
        "pricePerNight": 25000,
        "maxGuests": 2,
        "amenities": ["WiFi", "TV"],
        "totalRooms": 3,
        "availableRooms": 3,
    }
    body.update(overrides)
    return body


@pytest.fixture
def make_hotel(client, owner):
    def create(headers: dict | None = None, **overrides) -> dict:
        r = client.post("/api/hotels", json=hotel_payload(**overrides), headers=headers or owner)
        assert r.status_code == 201, r.text
        return r.json()["data"]
    return create


@pytest.fixture
def make_room(client, owner):
    def create(hotel_id: int, headers: dict | None = None, **overrides) -> dict:
        r = client.post("/api/rooms", json=room_payload(hotel_id, **overrides), headers=headers or owner)
        assert r.status_code == 201, r.text
        return r.json()["data"]
    return create


def booking_payload(room_id: int, check_in=None, nights: int = 3, **overrides) -> dict:
    check_in = check_in or (utcnow() + timedelta(days=10)).replace(microsecond=0)
    check_out = check_in + timedelta(days=nights)
    body = {
        "room": room_id,
        "guestName": "Ada Obi",
        "guestEmail": GUEST_EMAIL,
        "guestPhone": "+2348011111111",
        "checkInDate": check_in.isoformat(),
        "checkOutDate": check_out.isoformat(),
        "nights": nights,
        "totalPrice": 25000 * nights,
        "guests": 2,
    }
    body.update(overrides)
    return body


@pytest.fixture
def make_booking(client):
    def create(room_id: int, **kwargs) -> dict:
        r = client.post("/api/bookings", json=booking_payload(room_id, **kwargs))
        assert r.status_code == 201, r.text
        return r.json()["data"]
    return create


@pytest.fixture
def booking_body():
    return booking_payload
