from main import app
from services.welcome_email import get_notifier


def test_join_without_profile(client, notifier):
    response = client.post("/api/waitlist", json={"email": "alice@example.com", "willingToPay": True})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["status"] == "incomplete"
    assert body["emailSent"] is True
    assert isinstance(body["id"], int)
    assert notifier.calls == [("alice@example.com", "alice")]


def test_join_with_profile_is_complete(client):
    response = client.post("/api/waitlist", json={"email": "alice@example.com", "profileUrl": "facebook.com/alice"})

    assert response.status_code == 200
    assert response.json()["status"] == "complete"
    assert response.json()["message"] == "Successfully joined the waitlist!"


def test_legacy_facebook_field_is_accepted(client):
    response = client.post("/api/waitlist", json={"email": "alice@example.com", "facebook": "fb.com/alice"})
    assert response.json()["status"] == "complete"


def test_invalid_email_is_400(client):
    response = client.post("/api/waitlist", json={"email": "alice"})

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "message": "Please enter a valid email address",
        "error": "InvalidEmail",
    }


def test_missing_email_is_400(client):
    response = client.post("/api/waitlist", json={})
    assert response.status_code == 400
    assert response.json()["message"] == "Email is required"


def test_invalid_profile_is_400(client):
    response = client.post("/api/waitlist", json={"email": "a@example.com", "profileUrl": "https://example.com/alice"})
    assert response.status_code == 400
    assert response.json()["error"] == "InvalidProfileUrl"


def test_duplicate_is_409(client):
    client.post("/api/waitlist", json={"email": "alice@example.com"})
    response = client.post("/api/waitlist", json={"email": "alice@example.com"})

    assert response.status_code == 409
    assert response.json()["error"] == "DuplicateEmail"


def test_sixth_signup_is_429(client):
    for index in range(5):
        assert client.post("/api/waitlist", json={"email": f"user{index}@example.com"}).status_code == 200

    response = client.post("/api/waitlist", json={"email": "user5@example.com"})

    assert response.status_code == 429
    assert response.json()["error"] == "RateLimited"


def test_malformed_body_is_400(client):
    response = client.post("/api/waitlist", json={"email": "a@example.com", "willingToPay": "perhaps"})
    assert response.status_code == 400
    assert response.json()["error"] == "ValidationError"


def test_malformed_bodies_after_limit_are_429(client):
    for index in range(5):
        assert client.post("/api/waitlist", json={"email": f"user{index}@example.com"}).status_code == 200

    malformed = [
        {"email": "a@example.com", "profileUrl": "https://facebook.com/" + "x" * 3000},
        {"email": "b@example.com", "willingToPay": "perhaps"},
        {"email": 123},
    ]
    codes = [client.post("/api/waitlist", json=body).status_code for body in malformed]

    assert codes == [429, 429, 429]


def test_rejected_bodies_exhaust_the_limit(client):
    codes = [
        client.post("/api/waitlist", json={"email": f"user{index}@example.com", "name": "n" * 500}).status_code
        for index in range(20)
    ]
    assert codes == [400] * 5 + [429] * 15

    response = client.post("/api/waitlist", json={"email": "valid@example.com"})
    assert response.status_code == 429
    assert response.json()["error"] == "RateLimited"


def test_unparseable_json_counts_toward_limit(client):
    headers = {"content-type": "application/json"}
    codes = [client.post("/api/waitlist", content="{not json", headers=headers).status_code for _ in range(6)]
    assert codes == [400] * 5 + [429]

    assert client.post("/api/waitlist", json={"email": "valid@example.com"}).status_code == 429


def test_notifier_failure_only_flips_email_sent(client, failing_notifier):
    app.dependency_overrides[get_notifier] = lambda: failing_notifier

    response = client.post("/api/waitlist", json={"email": "alice@example.com"})

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["emailSent"] is False


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}
    assert client.get("/api/health/ready").json() == {"status": "ready"}
