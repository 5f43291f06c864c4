import logging

from sqlalchemy import select

from hotel_api.models.newsletter import NewsletterSubscriber


def subscribe(client, email="Reader@Example.com", **extra):
    return client.post("/api/newsletter/subscribe", json={"email": email, **extra})


def token_for(db, email):
    return db.scalar(select(NewsletterSubscriber.verification_token).where(NewsletterSubscriber.email == email))


def test_subscribe_normalizes_email_and_defaults(client):
    r = subscribe(client, firstName="Ada", lastName="Obi", city="Lagos", preferences={"travelTips": False})
    assert r.status_code == 201, r.text
    data = r.json()["data"]
    assert data["email"] == "reader@example.com"
    assert data["fullName"] == "Ada Obi"
    assert data["country"] == "Nigeria"
    assert data["isVerified"] is False
    assert data["preferences"] == {"promotions": True, "newHotels": True, "travelTips": False, "exclusiveOffers": True}
    assert "verificationToken" not in data


def test_duplicate_and_resubscribe(client):
    subscribe(client)
    r = subscribe(client, email="reader@example.com")
    assert r.status_code == 400
    assert r.json()["message"] == "Email already subscribed"

    r = client.post("/api/newsletter/unsubscribe", json={"email": "READER@example.com", "reason": "Too many emails"})
    assert r.status_code == 200, r.text

    r = subscribe(client)
    assert r.status_code == 200, r.text
    assert r.json()["message"] == "Successfully resubscribed to newsletter"
    assert r.json()["data"]["isActive"] is True
    assert r.json()["data"]["unsubscribeReason"] is None


def test_subscribe_rejects_bad_email(client):
    r = subscribe(client, email="nope")
    assert r.status_code == 400
    assert "email" in r.json()["message"]


def test_verify_token(client, db):
    subscribe(client)
    token = token_for(db, "reader@example.com")
    assert token

    r = client.get("/api/newsletter/verify", params={"token": token})
    assert r.status_code == 200, r.text
    assert r.json()["message"] == "Email successfully verified"

    # the token is spent on use
    assert client.get("/api/newsletter/verify", params={"token": token}).status_code == 404
    assert client.get("/api/newsletter/verify", params={"token": "bogus"}).json()["message"] == "Invalid verification token"


def test_update_preferences(client):
    subscribe(client)
    r = client.put("/api/newsletter/preferences", json={"email": "reader@example.com", "preferences": {"promotions": False}})
    assert r.status_code == 200, r.text
    prefs = r.json()["data"]["preferences"]
    assert prefs["promotions"] is False
    assert prefs["newHotels"] is True

    r = client.put("/api/newsletter/preferences", json={"email": "ghost@example.com", "preferences": {}})
    assert r.status_code == 404
    assert r.json()["message"] == "Subscriber not found"


def test_unsubscribe_unknown(client):
    r = client.post("/api/newsletter/unsubscribe", json={"email": "ghost@example.com"})
    assert r.status_code == 404


def test_admin_subscribers_and_stats(client, db, owner):
    subscribe(client, email="a@example.com", city="Lagos")
    subscribe(client, email="b@example.com", city="Lagos")
    subscribe(client, email="c@example.com", city="Abuja")
    client.get("/api/newsletter/verify", params={"token": token_for(db, "a@example.com")})
    client.post("/api/newsletter/unsubscribe", json={"email": "c@example.com"})

    assert client.get("/api/newsletter/subscribers").status_code == 401

    r = client.get("/api/newsletter/subscribers", headers=owner)
    assert r.status_code == 200, r.text
    assert [s["email"] for s in r.json()["data"]] == ["a@example.com"]
    assert r.json()["pagination"]["limit"] == 20

    r = client.get("/api/newsletter/subscribers", params={"active": False}, headers=owner)
    assert [s["email"] for s in r.json()["data"]] == ["c@example.com"]

    stats = client.get("/api/newsletter/stats", headers=owner).json()["data"]
    assert stats["totalSubscribers"] == 2
    assert stats["totalUnsubscribed"] == 1
    assert stats["newThisWeek"] == 2
    assert stats["topCities"] == [{"city": "Lagos", "count": 2}]


def test_verification_log_omits_email(client, db, caplog):
    caplog.set_level(logging.INFO, logger="hotel_api.api.routes.newsletter")
    subscriber_id = subscribe(client, email="quiet@example.com").json()["data"]["id"]
    token = token_for(db, "quiet@example.com")
    lines = [r.getMessage() for r in caplog.records if token in r.getMessage()]
    assert lines == [f"Verification token for subscriber {subscriber_id}: {token}"]
    assert "quiet@example.com" not in caplog.text
