"""
Integration tests for the HTTP API.

Runs the Flask app on the memory adapter with the market clock frozen
at TestConfig.FIXED_NOW.
"""

import pytest

from petbkk.container import EXTENSION_KEY
from petbkk.main import create_app
from tests.config import CatalogIds, TestConfig


def add_pet(client, **overrides):
    body = {"name": "Mochi", "species": "dog", "weight": 9.5}
    body.update(overrides)
    response = client.post("/api/pets", json=body)
    assert response.status_code == 201
    return response.get_json()["data"]


def book(client, pet_id, **overrides):
    body = {
        "pet_id": pet_id,
        "provider_id": CatalogIds.VET,
        "service_id": CatalogIds.CHECKUP,
        "booking_date": "2026-03-01",
        "booking_time": "10:00",
    }
    body.update(overrides)
    return client.post("/api/bookings", json=body)


@pytest.mark.integration
@pytest.mark.controllers
@pytest.mark.profile
class TestAuthEndpoints:
    def test_sign_in_normalizes_phone(self, client):
        response = client.post("/api/auth/sign-in", json={"phone": "081-234-5678"})

        assert response.status_code == 200
        data = response.get_json()
        assert data["success"] is True
        assert data["data"]["phone"] == "+66812345678"

    def test_sign_in_rejects_bad_phone(self, client):
        response = client.post("/api/auth/sign-in", json={"phone": "12345"})

        assert response.status_code == 400
        data = response.get_json()
        assert data["success"] is False
        assert data["error"] == "validation_error"
        assert data["details"] == {"field": "phone"}

    def test_protected_endpoints_require_auth(self, client):
        for path in ("/api/profile", "/api/pets", "/api/bookings"):
            response = client.get(path)

            assert response.status_code == 401
            assert response.get_json()["error"] == "not_authenticated"

    def test_sign_out_ends_session(self, signed_in_client):
        assert signed_in_client.get("/api/profile").status_code == 200

        signed_in_client.post("/api/auth/sign-out")

        assert signed_in_client.get("/api/profile").status_code == 401

    def test_profile_header_ignored_by_default(self, client, profile):
        response = client.get("/api/profile", headers={"X-Profile-Id": profile.id})

        assert response.status_code == 401
        assert response.get_json()["error"] == "not_authenticated"

    def test_trusted_profile_header_authenticates(self, memory_repositories, fixed_clock, profile):
        app = create_app(
            {**TestConfig.get_flask_config(), "TRUST_PROFILE_HEADER": True},
            repositories=memory_repositories,
            clock=fixed_clock,
        )
        client = app.test_client()

        response = client.get("/api/profile", headers={"X-Profile-Id": profile.id})
        assert response.status_code == 200
        assert response.get_json()["data"]["id"] == profile.id

        unknown = client.get("/api/pets", headers={"X-Profile-Id": "nobody"})
        assert unknown.status_code == 401

    def test_update_profile(self, signed_in_client):
        response = signed_in_client.patch("/api/profile", json={"display_name": "Somchai"})

        assert response.status_code == 200
        assert response.get_json()["data"]["display_name"] == "Somchai"

    def test_profile_phone_is_read_only(self, signed_in_client):
        response = signed_in_client.patch("/api/profile", json={"phone": "+66800000000"})

        assert response.status_code == 400
        assert response.get_json()["details"] == {"field": "phone"}

    def test_stats(self, signed_in_client):
        pet = add_pet(signed_in_client)
        book(signed_in_client, pet["id"])

        response = signed_in_client.get("/api/profile/stats")

        assert response.get_json()["data"] == {"pet_count": 1, "booking_count": 1}


@pytest.mark.integration
@pytest.mark.controllers
@pytest.mark.pets
class TestPetEndpoints:
    def test_pet_crud(self, signed_in_client):
        pet = add_pet(signed_in_client, birth_date="2022-05-01")
        assert pet["birth_date"] == "2022-05-01"

        listed = signed_in_client.get("/api/pets").get_json()["data"]
        assert [p["id"] for p in listed] == [pet["id"]]

        response = signed_in_client.patch(f"/api/pets/{pet['id']}", json={"weight": 10})
        assert response.status_code == 200
        assert response.get_json()["data"]["weight"] == 10.0

        assert signed_in_client.delete(f"/api/pets/{pet['id']}").status_code == 200
        assert signed_in_client.get(f"/api/pets/{pet['id']}").status_code == 404

    def test_invalid_species(self, signed_in_client):
        response = signed_in_client.post("/api/pets", json={"name": "Rex", "species": "dinosaur"})

        assert response.status_code == 400
        assert response.get_json()["details"] == {"field": "species"}

    def test_future_birth_date(self, signed_in_client):
        response = signed_in_client.post(
            "/api/pets", json={"name": "Rex", "species": "dog", "birth_date": "2026-01-16"}
        )

        assert response.status_code == 400

    def test_other_profiles_pet_is_not_found(self, signed_in_client, memory_repositories, other_profile):
        theirs = memory_repositories.pets.create(
            other_profile.id, {"name": "Tama", "species": "cat"}
        )

        assert signed_in_client.get(f"/api/pets/{theirs.id}").status_code == 404
        assert signed_in_client.delete(f"/api/pets/{theirs.id}").status_code == 404

    def test_non_object_body(self, signed_in_client):
        response = signed_in_client.post("/api/pets", json=["Mochi"])

        assert response.status_code == 400
        assert response.get_json()["details"] == {"field": "body"}


@pytest.mark.integration
@pytest.mark.controllers
@pytest.mark.booking
class TestBookingEndpoints:
    def test_create_booking(self, signed_in_client):
        pet = add_pet(signed_in_client)

        response = book(signed_in_client, pet["id"])

        assert response.status_code == 201
        data = response.get_json()["data"]
        assert data["status"] == "pending"
        assert data["total_price"] == 500.0
        assert data["pet"]["name"] == "Mochi"
        assert data["provider"]["id"] == CatalogIds.VET
        assert data["service"]["id"] == CatalogIds.CHECKUP

    def test_past_date(self, signed_in_client):
        pet = add_pet(signed_in_client)

        response = book(signed_in_client, pet["id"], booking_date="2020-01-01")

        assert response.status_code == 400
        assert response.get_json()["details"] == {"field": "booking_date"}

    def test_off_grid_time(self, signed_in_client):
        pet = add_pet(signed_in_client)

        response = book(signed_in_client, pet["id"], booking_time="10:15")

        assert response.status_code == 400
        assert response.get_json()["details"] == {"field": "booking_time"}

    def test_malformed_date(self, signed_in_client):
        pet = add_pet(signed_in_client)

        response = book(signed_in_client, pet["id"], booking_date="March 1st")

        assert response.status_code == 400

    def test_full_slot_is_conflict(self, app, signed_in_client):
        app.extensions[EXTENSION_KEY].bookings.slot_capacity = 1
        pet = add_pet(signed_in_client)
        assert book(signed_in_client, pet["id"]).status_code == 201

        response = book(signed_in_client, pet["id"])

        assert response.status_code == 409
        assert response.get_json()["error"] == "slot_unavailable"

    def test_cancel_then_cancel_again(self, signed_in_client):
        pet = add_pet(signed_in_client)
        booking = book(signed_in_client, pet["id"]).get_json()["data"]

        first = signed_in_client.post(f"/api/bookings/{booking['id']}/cancel")
        assert first.status_code == 200
        assert first.get_json()["data"]["status"] == "cancelled"

        second = signed_in_client.post(f"/api/bookings/{booking['id']}/cancel")
        assert second.status_code == 409
        assert second.get_json()["error"] == "invalid_state"
        assert second.get_json()["details"]["current_status"] == "cancelled"

    def test_cancel_missing_booking(self, signed_in_client):
        response = signed_in_client.post("/api/bookings/missing/cancel")

        assert response.status_code == 404
        assert response.get_json()["error"] == "not_found"

    def test_list_with_filters(self, signed_in_client):
        pet = add_pet(signed_in_client)
        keep = book(signed_in_client, pet["id"], booking_time="11:00").get_json()["data"]
        drop = book(signed_in_client, pet["id"], booking_time="09:00").get_json()["data"]
        signed_in_client.post(f"/api/bookings/{drop['id']}/cancel")

        def listed(list_filter):
            response = signed_in_client.get(f"/api/bookings?filter={list_filter}")
            return [b["id"] for b in response.get_json()["data"]]

        assert listed("upcoming") == [keep["id"]]
        assert listed("past") == [drop["id"]]
        assert listed("all") == [drop["id"], keep["id"]]

    def test_invalid_filter(self, signed_in_client):
        response = signed_in_client.get("/api/bookings?filter=soon")

        assert response.status_code == 400
        assert response.get_json()["details"] == {"field": "filter"}

    def test_get_booking(self, signed_in_client):
        pet = add_pet(signed_in_client)
        booking = book(signed_in_client, pet["id"]).get_json()["data"]

        response = signed_in_client.get(f"/api/bookings/{booking['id']}")

        assert response.status_code == 200
        assert response.get_json()["data"]["booking_time"] == "10:00"


@pytest.mark.integration
@pytest.mark.controllers
@pytest.mark.catalog
class TestCatalogEndpoints:
    def test_list_is_public(self, client):
        response = client.get("/api/providers")

        assert response.status_code == 200
        assert len(response.get_json()["data"]) == 6

    def test_filter_and_search(self, client):
        grooming = client.get("/api/providers?type=grooming").get_json()["data"]
        paws = client.get("/api/providers?q=paws").get_json()["data"]

        assert [p["id"] for p in grooming] == [CatalogIds.GROOMING]
        assert [p["business_name"] for p in paws] == ["Happy Paws Grooming"]

    def test_unknown_type(self, client):
        assert client.get("/api/providers?type=spa").status_code == 400

    def test_provider_detail(self, client):
        data = client.get(f"/api/providers/{CatalogIds.VET}").get_json()["data"]

        assert data["business_name"] == "Sukhumvit Animal Hospital"
        assert len(data["services"]) == 3

    def test_services(self, client):
        response = client.get(f"/api/providers/{CatalogIds.VET}/services")

        assert response.status_code == 200
        services = response.get_json()["data"]
        assert services[0]["id"] == CatalogIds.CHECKUP
        assert [s["is_fixed_price"] for s in services] == [False, True, False]
        assert client.get("/api/providers/missing/services").status_code == 404

    def test_slots(self, client):
        response = client.get(f"/api/providers/{CatalogIds.VET}/slots?date=2026-03-01")

        data = response.get_json()["data"]
        assert data["date"] == "2026-03-01"
        assert len(data["slots"]) == 19

    def test_slots_require_date(self, client):
        response = client.get(f"/api/providers/{CatalogIds.VET}/slots")

        assert response.status_code == 400
        assert response.get_json()["details"] == {"field": "date"}

    def test_unknown_provider(self, client):
        assert client.get("/api/providers/missing").status_code == 404
        assert client.get("/api/providers/missing/slots?date=2026-03-01").status_code == 404


@pytest.mark.integration
@pytest.mark.controllers
class TestHealthAndErrors:
    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.get_json()
        assert data["status"] == "healthy"
        assert data["storage"] == "memory"
        assert data["providers"] == 6

    def test_unknown_route_is_json(self, client):
        response = client.get("/api/nowhere")

        assert response.status_code == 404
        assert response.get_json()["success"] is False

    def test_method_not_allowed_is_json(self, client):
        response = client.put("/api/providers")

        assert response.status_code == 405
        assert response.get_json()["error"] == "method_not_allowed"
