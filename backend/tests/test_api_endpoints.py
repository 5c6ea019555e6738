"""Tests for API endpoints."""
import json

import pytest

from tests.factories import make_itinerary_payload
from tripai.errors import GenerationFailed, QuotaExceeded
from tripai.models.trip import Trip


async def register(client, email="bruno@example.com", name="Bruno", password="secret123"):
    response = await client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 201
    return response.json()


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


async def save(client, headers, destination="Paris", days=3, **extra):
    body = {
        "destination": destination,
        "days": days,
        "itinerary": make_itinerary_payload(destination=destination, days=days),
    }
    body.update(extra)
    response = await client.post("/api/trips", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["trip"]


class TestAuthAPI:
    async def test_register_returns_token_and_user(self, client):
        data = await register(client)
        assert data["token"]
        assert data["user"]["email"] == "bruno@example.com"
        assert "password" not in json.dumps(data["user"])

    async def test_login_returns_same_user(self, client):
        registered = await register(client)
        response = await client.post(
            "/api/auth/login",
            json={"email": "bruno@example.com", "password": "secret123"},
        )
        assert response.status_code == 200
        assert response.json()["user"]["id"] == registered["user"]["id"]

    async def test_login_wrong_password(self, client):
        await register(client)
        response = await client.post(
            "/api/auth/login",
            json={"email": "bruno@example.com", "password": "nope-nope"},
        )
        assert response.status_code == 401
        assert response.json()["error"]["kind"] == "invalid_credentials"

    async def test_login_unknown_email_matches_wrong_password(self, client):
        await register(client)
        wrong = await client.post(
            "/api/auth/login", json={"email": "bruno@example.com", "password": "nope-nope"}
        )
        unknown = await client.post(
            "/api/auth/login", json={"email": "ghost@example.com", "password": "secret123"}
        )
        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json()

    async def test_register_duplicate(self, client):
        await register(client)
        response = await client.post(
            "/api/auth/register",
            json={"name": "Other", "email": "bruno@example.com", "password": "secret123"},
        )
        assert response.status_code == 409
        assert response.json()["error"]["kind"] == "conflict"

    async def test_register_short_password(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"name": "Bruno", "email": "b@example.com", "password": "123"},
        )
        assert response.status_code == 400
        assert response.json()["error"]["kind"] == "validation_error"

    async def test_me(self, client):
        data = await register(client)
        response = await client.get("/api/auth/me", headers=bearer(data["token"]))
        assert response.status_code == 200
        assert response.json()["user"]["id"] == data["user"]["id"]


class TestAuthentication:
    @pytest.mark.parametrize(
        "method,path",
        [
            ("get", "/api/trips"),
            ("get", "/api/trips/1"),
            ("delete", "/api/trips/1"),
            ("patch", "/api/trips/1/active"),
            ("get", "/api/auth/me"),
        ],
    )
    async def test_requires_credential(self, client, method, path):
        response = await getattr(client, method)(path)
        assert response.status_code == 401
        assert response.json()["error"]["kind"] == "unauthenticated"

    async def test_generate_requires_credential(self, client):
        response = await client.post("/api/trips/generate", json={"destination": "Paris", "days": 3})
        assert response.status_code == 401

    async def test_garbage_token(self, client):
        response = await client.get("/api/trips", headers=bearer("garbage"))
        assert response.status_code == 401


class TestGenerateAPI:
    async def test_generate_returns_itinerary_and_total(self, client, auth_headers, fake_backend, db_session):
        response = await client.post(
            "/api/trips/generate",
            json={"destination": "Paris", "days": 3},
            headers=auth_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["itinerary"]["destination"] == "Paris"
        assert data["totalCost"] == 900
        assert data["activityCount"] == 9
        assert len(fake_backend.prompts) == 1
        assert db_session.query(Trip).count() == 0

    async def test_generate_with_budget(self, client, auth_headers, fake_backend):
        await client.post(
            "/api/trips/generate",
            json={"destination": "Paris", "days": 3, "budgetMin": 1000, "budgetMax": 5000, "budgetLabel": "Moderado"},
            headers=auth_headers,
        )
        prompt = fake_backend.prompts[0]
        assert "R$ 1000" in prompt and "R$ 5000" in prompt and "Moderado" in prompt

    async def test_generate_missing_destination(self, client, auth_headers):
        response = await client.post("/api/trips/generate", json={"days": 3}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["error"]["kind"] == "validation_error"

    async def test_generate_non_numeric_days(self, client, auth_headers):
        response = await client.post(
            "/api/trips/generate", json={"destination": "Paris", "days": "many"}, headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json()["error"]["kind"] == "validation_error"

    async def test_generate_malformed_provider_output(self, client, auth_headers, fake_backend, db_session):
        fake_backend.response = "not json"
        response = await client.post(
            "/api/trips/generate", json={"destination": "Paris", "days": 3}, headers=auth_headers
        )
        assert response.status_code == 502
        assert response.json()["error"]["kind"] == "malformed_response"
        assert db_session.query(Trip).count() == 0

    async def test_generate_quota(self, client, auth_headers, fake_backend):
        fake_backend.error = QuotaExceeded()
        response = await client.post(
            "/api/trips/generate", json={"destination": "Paris", "days": 3}, headers=auth_headers
        )
        assert response.status_code == 429
        assert response.json()["error"]["kind"] == "quota_exceeded"

    async def test_generate_provider_failure(self, client, auth_headers, fake_backend):
        fake_backend.error = GenerationFailed()
        response = await client.post(
            "/api/trips/generate", json={"destination": "Paris", "days": 3}, headers=auth_headers
        )
        assert response.status_code == 502
        assert response.json()["error"]["kind"] == "generation_failed"

    async def test_generate_without_provider(self, client, auth_headers):
        from tripai.api.deps import get_ai_backend
        from tripai.main import app

        app.dependency_overrides[get_ai_backend] = lambda: None
        response = await client.post(
            "/api/trips/generate", json={"destination": "Paris", "days": 3}, headers=auth_headers
        )
        assert response.status_code == 503
        assert response.json()["error"]["kind"] == "provider_unavailable"


class TestTripsAPI:
    async def test_list_trips_empty(self, client, auth_headers):
        response = await client.get("/api/trips", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {"trips": []}

    async def test_save_and_get_trip(self, client, auth_headers):
        trip = await save(client, auth_headers, budgetMin=1000, budgetMax=5000, budgetLabel="Moderado")
        assert trip["isActive"] is False
        assert trip["budgetMin"] == 1000
        assert trip["totalCost"] == 900

        response = await client.get(f"/api/trips/{trip['id']}", headers=auth_headers)
        assert response.status_code == 200
        fetched = response.json()["trip"]
        assert fetched["itinerary"] == make_itinerary_payload(destination="Paris", days=3)

    async def test_save_without_itinerary(self, client, auth_headers, db_session):
        response = await client.post(
            "/api/trips", json={"destination": "Paris", "days": 3}, headers=auth_headers
        )
        assert response.status_code == 400
        assert db_session.query(Trip).count() == 0

    async def test_list_newest_first(self, client, auth_headers):
        first = await save(client, auth_headers, destination="Paris")
        second = await save(client, auth_headers, destination="Roma")
        response = await client.get("/api/trips", headers=auth_headers)
        ids = [t["id"] for t in response.json()["trips"]]
        assert ids == [second["id"], first["id"]]

    async def test_other_users_trip_not_visible(self, client, auth_headers):
        trip = await save(client, auth_headers)
        other = await register(client)
        headers = bearer(other["token"])

        assert (await client.get(f"/api/trips/{trip['id']}", headers=headers)).status_code == 404
        assert (await client.patch(f"/api/trips/{trip['id']}/active", headers=headers)).status_code == 404
        assert (await client.delete(f"/api/trips/{trip['id']}", headers=headers)).status_code == 404
        assert (await client.get(f"/api/trips/{trip['id']}", headers=auth_headers)).status_code == 200

    async def test_missing_and_foreign_trip_look_the_same(self, client, auth_headers):
        trip = await save(client, auth_headers)
        other = await register(client)
        headers = bearer(other["token"])
        foreign = await client.get(f"/api/trips/{trip['id']}", headers=headers)
        missing = await client.get("/api/trips/9999", headers=headers)
        assert foreign.json() == missing.json()

    async def test_delete_trip(self, client, auth_headers):
        trip = await save(client, auth_headers)
        response = await client.delete(f"/api/trips/{trip['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert (await client.get(f"/api/trips/{trip['id']}", headers=auth_headers)).status_code == 404

    async def test_activate_switches_active_trip(self, client, auth_headers):
        first = await save(client, auth_headers)
        second = await save(client, auth_headers)

        response = await client.patch(f"/api/trips/{first['id']}/active", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["trip"]["isActive"] is True

        await client.patch(f"/api/trips/{second['id']}/active", headers=auth_headers)
        trips = (await client.get("/api/trips", headers=auth_headers)).json()["trips"]
        active = {t["id"]: t["isActive"] for t in trips}
        assert active == {first["id"]: False, second["id"]: True}

    async def test_active_trip_is_null_until_activated(self, client, auth_headers):
        trip = await save(client, auth_headers)
        response = await client.get("/api/trips/active", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {"trip": None}

        await client.patch(f"/api/trips/{trip['id']}/active", headers=auth_headers)
        response = await client.get("/api/trips/active", headers=auth_headers)
        assert response.json()["trip"]["id"] == trip["id"]
        assert response.json()["trip"]["isActive"] is True

    async def test_huge_trip_id_is_not_found(self, client, auth_headers):
        response = await client.get("/api/trips/99999999999999999999", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["error"]["kind"] == "not_found"

    @pytest.mark.parametrize("extra", [{"days": 10**20}, {"budgetMin": 0, "budgetMax": 10**20}])
    async def test_save_with_huge_numbers_rejected(self, client, auth_headers, db_session, extra):
        body = {"destination": "Paris", "days": 3, "itinerary": make_itinerary_payload()}
        body.update(extra)
        response = await client.post("/api/trips", json=body, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["error"]["kind"] == "validation_error"
        assert db_session.query(Trip).count() == 0
