"""Integration tests for the HTTP API.

Run with: pytest tests/test_api.py -v
"""

import pytest
from rest_framework.test import APIClient

from conference.dependencies import get_services
from conference.domain.errors import StoreUnavailableError
from conference.domain.results import Result

from tests.conftest import details_for


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(username="asha", password="pw")


@pytest.fixture
def admin_user(django_user_model):
    return django_user_model.objects.create_user(username="root", password="pw", is_staff=True)


@pytest.fixture
def user_client(user) -> APIClient:
    client = APIClient()
    client.force_authenticate(user)
    return client


@pytest.fixture
def admin_client(admin_user) -> APIClient:
    client = APIClient()
    client.force_authenticate(admin_user)
    return client


@pytest.fixture
def event(db):
    return get_services().events.create_event(
        {"title": "Code Clash", "category": "Technology", "price": 249, "maxTickets": 2}
    ).unwrap()


@pytest.mark.django_db
class TestEventList:
    """Tests for GET/POST /api/events"""

    def test_list_events_with_participant_counts(self, api_client: APIClient, event):
        """Given events exist, returns them with participant counts."""
        response = api_client.get("/api/events")
        assert response.status_code == 200
        [item] = response.json()["results"]
        assert item["id"] == event.id.value
        assert item["participantCount"] == 0
        assert item["maxTickets"] == 2

    def test_list_events_empty_catalog(self, api_client: APIClient):
        """Given no events, returns an empty list."""
        response = api_client.get("/api/events")
        assert response.json() == {"results": []}

    def test_list_events_filtered_by_category(self, api_client: APIClient, event):
        """A category filter drops other categories."""
        response = api_client.get("/api/events", {"category": "Gaming"})
        assert response.json()["results"] == []

    def test_create_requires_admin(self, user_client: APIClient):
        """Non-admins cannot create events."""
        response = user_client.post("/api/events", {"title": "Design Duel"}, format="json")
        assert response.status_code == 403

    def test_admin_creates_event(self, admin_client: APIClient):
        """Admins create active events."""
        response = admin_client.post(
            "/api/events", {"title": "Design Duel", "price": "179", "maxTickets": 40}, format="json"
        )
        assert response.status_code == 201
        body = response.json()
        assert body["active"] is True
        assert body["price"] == 179


@pytest.mark.django_db
class TestEventDetail:
    """Tests for GET /api/events/{id}"""

    def test_get_event_returns_details(self, api_client: APIClient, event):
        """Given event exists, returns event details."""
        response = api_client.get(f"/api/events/{event.id.value}")
        assert response.status_code == 200
        assert response.json()["title"] == "Code Clash"

    def test_get_event_not_found(self, api_client: APIClient):
        """Given event does not exist, returns 404."""
        response = api_client.get("/api/events/missing")
        assert response.status_code == 404
        assert response.json()["error"] == "EVENT_NOT_FOUND"

    def test_admin_deactivates_event(self, admin_client: APIClient, event):
        """POST status toggles the active flag."""
        response = admin_client.post(
            f"/api/events/{event.id.value}/status", {"active": False}, format="json"
        )
        assert response.status_code == 200
        assert response.json()["active"] is False


@pytest.mark.django_db
class TestCartCheckout:
    """Tests for the cart and checkout endpoints."""

    def test_anonymous_toggle_needs_login(self, api_client: APIClient, event):
        """Anonymous users get a login notice and an unchanged cart."""
        response = api_client.post("/api/cart/toggle", {"eventId": event.id.value}, format="json")
        assert response.status_code == 401
        assert response.json()["notice"] == "login_required"
        assert response.json()["cart"]["items"] == []

    def test_toggle_and_checkout(self, user_client: APIClient, user, event):
        """A user adds an event, checks out, and holds a registration."""
        response = user_client.post("/api/cart/toggle", {"eventId": event.id.value}, format="json")
        assert response.status_code == 200
        assert response.json()["notice"] == "added"
        assert response.json()["cart"]["totalPrice"] == 249

        response = user_client.post("/api/cart/checkout")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "completed"
        assert body["registered"] == [event.id.value]
        assert body["cart"]["items"] == []

        registrations = user_client.get("/api/me/registrations").json()
        assert registrations[event.id.value]["status"] == "registered"

    def test_checkout_keeps_failed_items(self, user_client: APIClient, admin_client, event):
        """Items that fail at checkout stay in the cart."""
        user_client.post("/api/cart/toggle", {"eventId": event.id.value}, format="json")
        admin_client.post(f"/api/events/{event.id.value}/status", {"active": False}, format="json")

        response = user_client.post("/api/cart/checkout")
        assert response.status_code == 409
        body = response.json()
        assert body["status"] == "failed"
        assert body["failed"][0]["error"] == "EVENT_INACTIVE"
        assert [i["id"] for i in user_client.get("/api/cart").json()["items"]] == [event.id.value]

    def test_remove_cart_item(self, user_client: APIClient, event):
        """DELETE drops the item from the cart."""
        user_client.post("/api/cart/toggle", {"eventId": event.id.value}, format="json")
        response = user_client.delete(f"/api/cart/{event.id.value}")
        assert response.json()["items"] == []

    def test_globally_banned_user_blocked(self, user_client: APIClient, user, event):
        """A globally banned account cannot check out."""
        get_services().bans.ban_user_globally(str(user.pk), True)
        response = user_client.post("/api/cart/checkout")
        assert response.status_code == 403
        assert response.json()["error"] == "USER_BANNED"

    def test_unreadable_ban_state_refuses_request(self, user_client: APIClient, monkeypatch):
        """A failed ban lookup refuses the request with 503."""
        bans = get_services().bans
        monkeypatch.setattr(bans, "get_global_ban", lambda user_id: Result.fail(StoreUnavailableError()))
        response = user_client.post("/api/cart/checkout")
        assert response.status_code == 503
        assert response.json()["error"] == "STORE_UNAVAILABLE"


@pytest.mark.django_db
class TestAdminEndpoints:
    """Tests for bans, attendance and stats endpoints."""

    def _register(self, user_id: str, event):
        return get_services().ledger.register_for_event(user_id, event.id.value, details_for(event))

    def test_non_admin_forbidden(self, user_client: APIClient):
        """Admin endpoints refuse regular users."""
        assert user_client.get("/api/stats").status_code == 403

    def test_profile_admin_role_grants_access(self, user_client: APIClient, user):
        """A profile with the admin role reaches admin endpoints."""
        services = get_services()
        services.profiles.save_profile(str(user.pk), {"name": "Asha"})
        services.profiles.make_admin(str(user.pk))
        assert user_client.get("/api/stats").status_code == 200

    def test_mixed_bulk_ban_refused(self, admin_client: APIClient):
        """A bulk ban over a mixed selection returns 409."""
        get_services().bans.ban_user_globally("u1", True)
        response = admin_client.post(
            "/api/users/ban", {"userIds": ["u1", "u2"], "banned": True}, format="json"
        )
        assert response.status_code == 409
        assert response.json()["error"] == "MIXED_SELECTION"

    def test_ban_actions(self, admin_client: APIClient):
        """Ban actions reflect the selection."""
        response = admin_client.post("/api/users/ban-actions", {"userIds": ["u1"]}, format="json")
        assert response.json() == {"canBan": True, "canUnban": False, "mixed": False}

    def test_bulk_attendance_and_stats(self, admin_client: APIClient, event):
        """Bulk attendance skips event-banned users and feeds the stats."""
        self._register("u1", event)
        self._register("u2", event)
        get_services().bans.ban_user_from_event("u2", event.id.value, True)

        response = admin_client.post(
            f"/api/events/{event.id.value}/attendance",
            {"userIds": ["u1", "u2"], "attended": True},
            format="json",
        )
        assert response.status_code == 200
        assert response.json()["succeeded"] == ["u1"]

        stats = admin_client.get(f"/api/events/{event.id.value}/attendance-stats").json()
        assert stats == {"totalRegistered": 2, "attended": 1, "notAttended": 1, "attendanceRate": 50}

    def test_mark_unregistered_attendee(self, admin_client: APIClient, event):
        """Marking someone without a registration returns 404."""
        response = admin_client.put(
            f"/api/events/{event.id.value}/attendance/ghost", {"attended": True}, format="json"
        )
        assert response.status_code == 404
        assert response.json()["error"] == "NOT_REGISTERED"

    def test_user_directory_search_by_name(self, admin_client: APIClient):
        """The user directory filters by a case-insensitive name match."""
        profiles = get_services().profiles
        profiles.save_profile("u1", {"name": "Asha Rao"})
        profiles.save_profile("u2", {"name": "Vikram"})
        response = admin_client.get("/api/users", {"search": "asha"})
        assert [u["profile"]["userId"] for u in response.json()["results"]] == ["u1"]

    def test_attendee_search_by_name_or_email(self, admin_client: APIClient, event):
        """The attendee list filters by name or email."""
        profiles = get_services().profiles
        profiles.save_profile("u1", {"name": "Asha", "email": "asha@example.com"})
        profiles.save_profile("u2", {"name": "Vikram", "email": "vik@college.edu"})
        self._register("u1", event)
        self._register("u2", event)

        url = f"/api/events/{event.id.value}/attendees"
        by_name = admin_client.get(url, {"search": "ASHA"}).json()["results"]
        assert [a["userId"] for a in by_name] == ["u1"]
        by_email = admin_client.get(url, {"search": "college.edu"}).json()["results"]
        assert [a["userId"] for a in by_email] == ["u2"]
        assert by_email[0]["profile"]["name"] == "Vikram"
        assert by_email[0]["bannedFromEvent"] is False

    def test_event_roster(self, admin_client: APIClient, event):
        """The roster lists registrants of the event."""
        self._register("u1", event)
        response = admin_client.get(f"/api/events/{event.id.value}/registrations")
        assert response.json()["count"] == 1
        assert response.json()["results"][0]["userId"] == "u1"


@pytest.mark.django_db
class TestProfile:
    """Tests for /api/me/profile"""

    def test_profile_round_trip(self, user_client: APIClient):
        """PUT then GET returns the profile with its completeness."""
        response = user_client.put(
            "/api/me/profile",
            {"name": "Asha", "college": "NIT", "phone": "98765"},
            format="json",
        )
        assert response.status_code == 201
        body = user_client.get("/api/me/profile").json()
        assert body["name"] == "Asha"
        assert body["complete"] is True

    def test_missing_profile(self, user_client: APIClient):
        """A user without a profile gets 404."""
        assert user_client.get("/api/me/profile").status_code == 404
