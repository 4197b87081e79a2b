"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from django.conf import settings
from django.core.cache import cache
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from conference.dependencies import get_services
from conference.domain.cart import Cart
from conference.domain.errors import DomainError, ErrorCode
from conference.handlers.permissions import IsConferenceAdmin, IsNotBanned, user_id_for
from conference.handlers.serializers import (
    AttendanceSerializer,
    AttendanceStatsSerializer,
    BanActionsQuerySerializer,
    BanSerializer,
    BulkAttendanceSerializer,
    BulkBanSerializer,
    CartSerializer,
    CartToggleSerializer,
    DirectoryUserSerializer,
    EventBanSerializer,
    EventInputSerializer,
    EventSerializer,
    EventStatsSerializer,
    EventStatusSerializer,
    ParticipantSerializer,
    ProfileSerializer,
    RegistrationSerializer,
    serialize_batch,
)
from conference.services.checkout_service import CartNotice, CheckoutStatus
from conference.services.profile_service import is_profile_complete
from conference.signals import EVENT_LIST_KEY, event_detail_key

CART_SESSION_KEY = "cart"

ERROR_STATUS = {
    ErrorCode.CAPACITY_EXCEEDED: status.HTTP_409_CONFLICT,
    ErrorCode.EVENT_INACTIVE: status.HTTP_409_CONFLICT,
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_EVENT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_EVENT_DATA: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_USER_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_AUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.NOT_REGISTERED: status.HTTP_404_NOT_FOUND,
    ErrorCode.BANNED_FROM_EVENT: status.HTTP_403_FORBIDDEN,
    ErrorCode.USER_BANNED: status.HTTP_403_FORBIDDEN,
    ErrorCode.PROFILE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.MIXED_SELECTION: status.HTTP_409_CONFLICT,
    ErrorCode.EMPTY_SELECTION: status.HTTP_400_BAD_REQUEST,
    ErrorCode.STORE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.INVALID_DOCUMENT: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.PARTIAL_BATCH_FAILURE: status.HTTP_207_MULTI_STATUS,
}

NOTICE_STATUS = {
    CartNotice.ADDED: status.HTTP_200_OK,
    CartNotice.REMOVED: status.HTTP_200_OK,
    CartNotice.LOGIN_REQUIRED: status.HTTP_401_UNAUTHORIZED,
}

CHECKOUT_STATUS = {
    CheckoutStatus.COMPLETED: status.HTTP_200_OK,
    CheckoutStatus.EMPTY: status.HTTP_200_OK,
    CheckoutStatus.PARTIAL: status.HTTP_207_MULTI_STATUS,
    CheckoutStatus.FAILED: status.HTTP_409_CONFLICT,
}


def error_response(error: DomainError, **extra) -> Response:
    return Response(
        {"error": error.code.value, "message": error.message, **extra},
        status=ERROR_STATUS.get(error.code, status.HTTP_400_BAD_REQUEST),
    )


def batch_response(result) -> Response:
    body = serialize_batch(result.data)
    if result.success:
        return Response(body)
    return error_response(result.error, **body)


def matches_search(search: str, *fields: str) -> bool:
    """Case-insensitive substring match against any of the fields."""
    needle = search.strip().lower()
    return not needle or any(needle in (value or "").lower() for value in fields)


def load_cart(request: Request) -> Cart:
    return Cart.from_session(request.session.get(CART_SESSION_KEY))


def store_cart(request: Request, cart: Cart) -> None:
    request.session[CART_SESSION_KEY] = cart.to_session()


class AdminView(APIView):
    permission_classes = [IsAuthenticated, IsConferenceAdmin]


class AccountView(APIView):
    permission_classes = [IsAuthenticated, IsNotBanned]


class EventListView(APIView):
    """Handler for GET/POST /api/events"""

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAuthenticated(), IsConferenceAdmin()]

    def get(self, request: Request) -> Response:
        payload = cache.get(EVENT_LIST_KEY)
        if payload is None:
            result = get_services().ledger.list_events_with_counts()
            if not result.success:
                return error_response(result.error)
            payload = [
                {**EventSerializer(event).data, "participantCount": count}
                for event, count in result.data
            ]
            cache.set(EVENT_LIST_KEY, payload, settings.CONFERENCE_CACHE_TIMEOUT)
        category = request.query_params.get("category")
        if category and category != "All":
            payload = [e for e in payload if e["category"] == category]
        return Response({"results": payload})

    def post(self, request: Request) -> Response:
        serializer = EventInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = get_services().events.create_event(serializer.validated_data)
        if not result.success:
            return error_response(result.error)
        return Response(EventSerializer(result.data).data, status=status.HTTP_201_CREATED)


class EventDetailView(APIView):
    """Handler for GET/PATCH /api/events/{event_id}"""

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAuthenticated(), IsConferenceAdmin()]

    def get(self, request: Request, event_id: str) -> Response:
        key = event_detail_key(event_id)
        payload = cache.get(key)
        if payload is None:
            result = get_services().events.get_event(event_id)
            if not result.success:
                return error_response(result.error)
            payload = dict(EventSerializer(result.data).data)
            cache.set(key, payload, settings.CONFERENCE_CACHE_TIMEOUT)
        return Response(payload)

    def patch(self, request: Request, event_id: str) -> Response:
        serializer = EventInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        result = get_services().events.update_event(event_id, serializer.validated_data)
        if not result.success:
            return error_response(result.error)
        return Response(EventSerializer(result.data).data)


class EventStatusView(AdminView):
    """Handler for POST /api/events/{event_id}/status"""

    def post(self, request: Request, event_id: str) -> Response:
        serializer = EventStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = get_services().events.toggle_event_status(
            event_id, serializer.validated_data["active"]
        )
        if not result.success:
            return error_response(result.error)
        return Response(EventSerializer(result.data).data)


class EventRegistrationsView(AdminView):
    """Handler for GET /api/events/{event_id}/registrations"""

    def get(self, request: Request, event_id: str) -> Response:
        result = get_services().ledger.get_event_registrations(event_id)
        if not result.success:
            return error_response(result.error)
        return Response(
            {"count": len(result.data), "results": ParticipantSerializer(result.data, many=True).data}
        )


class EventStatsView(AdminView):
    """Handler for GET /api/stats"""

    def get(self, request: Request) -> Response:
        result = get_services().ledger.get_event_stats()
        if not result.success:
            return error_response(result.error)
        return Response(EventStatsSerializer(result.data).data)


class MyRegistrationsView(AccountView):
    """Handler for GET /api/me/registrations"""

    def get(self, request: Request) -> Response:
        result = get_services().ledger.get_user_registrations(user_id_for(request))
        if not result.success:
            return error_response(result.error)
        return Response(
            {eid: RegistrationSerializer(reg).data for eid, reg in result.data.items()}
        )


class MyEventBansView(AccountView):
    """Handler for GET /api/me/event-bans"""

    def get(self, request: Request) -> Response:
        result = get_services().bans.list_event_bans(user_id_for(request))
        if not result.success:
            return error_response(result.error)
        return Response({eid: EventBanSerializer(ban).data for eid, ban in result.data.items()})


class ProfileView(AccountView):
    """Handler for GET/PUT/PATCH /api/me/profile"""

    def _respond(self, result, ok_status=status.HTTP_200_OK) -> Response:
        if not result.success:
            return error_response(result.error)
        profile = result.data
        return Response(
            {**ProfileSerializer(profile).data, "complete": is_profile_complete(profile)},
            status=ok_status,
        )

    def get(self, request: Request) -> Response:
        return self._respond(get_services().profiles.get_profile(user_id_for(request)))

    def put(self, request: Request) -> Response:
        serializer = ProfileSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = get_services().profiles.save_profile(
            user_id_for(request), serializer.validated_data
        )
        return self._respond(result, status.HTTP_201_CREATED)

    def patch(self, request: Request) -> Response:
        serializer = ProfileSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        result = get_services().profiles.update_profile(
            user_id_for(request), serializer.validated_data
        )
        return self._respond(result)


class UserListView(AdminView):
    """Handler for GET /api/users"""

    def get(self, request: Request) -> Response:
        result = get_services().profiles.list_users()
        if not result.success:
            return error_response(result.error)
        users = result.data
        banned = request.query_params.get("banned")
        if banned in ("true", "false"):
            users = [u for u in users if u.banned == (banned == "true")]
        event_id = request.query_params.get("event")
        if event_id:
            users = [
                u for u in users if any(e.event_id == event_id for e in u.registered_events)
            ]
        search = request.query_params.get("search")
        if search:
            users = [u for u in users if matches_search(search, u.profile.name)]
        return Response({"results": DirectoryUserSerializer(users, many=True).data})


class UserBanView(AdminView):
    """Handler for POST /api/users/{user_id}/ban"""

    def post(self, request: Request, user_id: str) -> Response:
        serializer = BanSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        banned = serializer.validated_data["banned"]
        result = get_services().bans.ban_user_globally(user_id, banned)
        if not result.success:
            return error_response(result.error)
        return Response({"userId": user_id, "banned": banned})


class BulkBanView(AdminView):
    """Handler for POST /api/users/ban"""

    def post(self, request: Request) -> Response:
        serializer = BulkBanSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        return batch_response(get_services().bans.ban_selected(data["userIds"], data["banned"]))


class BanActionsView(AdminView):
    """Handler for POST /api/users/ban-actions"""

    def post(self, request: Request) -> Response:
        serializer = BanActionsQuerySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        bans = get_services().bans
        if data.get("eventId"):
            result = bans.event_ban_actions(data["userIds"], data["eventId"])
        else:
            result = bans.global_ban_actions(data["userIds"])
        if not result.success:
            return error_response(result.error)
        actions = result.data
        return Response(
            {"canBan": actions.can_ban, "canUnban": actions.can_unban, "mixed": actions.mixed}
        )


class EventBansView(AdminView):
    """Handler for POST /api/events/{event_id}/bans"""

    def post(self, request: Request, event_id: str) -> Response:
        serializer = BulkBanSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = get_services().bans.ban_selected_from_event(
            data["userIds"], event_id, data["banned"]
        )
        return batch_response(result)


class EventAttendanceView(AdminView):
    """Handler for POST /api/events/{event_id}/attendance"""

    def post(self, request: Request, event_id: str) -> Response:
        serializer = BulkAttendanceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = get_services().attendance.mark_attendance_for_selected(
            data["userIds"], event_id, data["attended"]
        )
        return batch_response(result)


class AttendeeView(AdminView):
    """Handler for PUT /api/events/{event_id}/attendance/{user_id}"""

    def put(self, request: Request, event_id: str, user_id: str) -> Response:
        serializer = AttendanceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        attended = serializer.validated_data["attended"]
        result = get_services().attendance.mark_attendance(user_id, event_id, attended)
        if not result.success:
            return error_response(result.error)
        return Response({"userId": user_id, "eventId": event_id, "attended": attended})


class EventAttendeesView(AdminView):
    """Handler for GET /api/events/{event_id}/attendees"""

    def get(self, request: Request, event_id: str) -> Response:
        services = get_services()
        result = services.ledger.get_event_registrations(event_id)
        if not result.success:
            return error_response(result.error)
        search = request.query_params.get("search", "")
        attendees = []
        for participant in result.data:
            profile = participant.profile
            if not matches_search(search, profile.name, profile.email):
                continue
            ban = services.bans.is_banned_from_event(participant.user_id, event_id)
            attendees.append(
                {
                    **ParticipantSerializer(participant).data,
                    "bannedFromEvent": bool(ban.success and ban.data.banned),
                }
            )
        attended = request.query_params.get("attended")
        if attended in ("true", "false"):
            wanted = attended == "true"
            attendees = [a for a in attendees if a["registration"]["attended"] == wanted]
        return Response({"results": attendees})


class AttendanceStatsView(AdminView):
    """Handler for GET /api/events/{event_id}/attendance-stats"""

    def get(self, request: Request, event_id: str) -> Response:
        result = get_services().attendance.get_attendance_stats(event_id)
        if not result.success:
            return error_response(result.error)
        return Response(AttendanceStatsSerializer(result.data).data)


class CartView(APIView):
    """Handler for GET /api/cart"""

    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        return Response(CartSerializer(load_cart(request)).data)


class CartToggleView(APIView):
    """Handler for POST /api/cart/toggle"""

    permission_classes = [AllowAny, IsNotBanned]

    def post(self, request: Request) -> Response:
        serializer = CartToggleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services = get_services()
        event_result = services.events.get_event(serializer.validated_data["eventId"])
        if not event_result.success:
            return error_response(event_result.error)
        event = event_result.data
        user_id = user_id_for(request)

        registrations, counts, bans = {}, {}, {}
        if user_id is not None:
            lookups = (
                services.ledger.get_user_registrations(user_id),
                services.ledger.get_participant_counts([event.id.value]),
                services.bans.list_event_bans(user_id),
            )
            for lookup in lookups:
                if not lookup.success:
                    return error_response(lookup.error)
            registrations, counts, bans = (lookup.data for lookup in lookups)

        toggle = services.checkout.toggle_cart(
            load_cart(request),
            event,
            user_id=user_id,
            user_registrations=registrations,
            participant_counts=counts,
            event_bans=bans,
        )
        store_cart(request, toggle.cart)
        return Response(
            {"notice": toggle.notice.value, "cart": CartSerializer(toggle.cart).data},
            status=NOTICE_STATUS.get(toggle.notice, status.HTTP_409_CONFLICT),
        )


class CartItemView(APIView):
    """Handler for DELETE /api/cart/{event_id}"""

    permission_classes = [AllowAny]

    def delete(self, request: Request, event_id: str) -> Response:
        cart = load_cart(request).remove(event_id)
        store_cart(request, cart)
        return Response(CartSerializer(cart).data)


class CheckoutView(AccountView):
    """Handler for POST /api/cart/checkout"""

    def post(self, request: Request) -> Response:
        result = get_services().checkout.checkout(user_id_for(request), load_cart(request))
        if not result.success:
            return error_response(result.error)
        outcome = result.data
        store_cart(request, outcome.cart)
        return Response(
            {
                "status": outcome.status.value,
                "message": outcome.message,
                "registered": [item.event_id for item in outcome.registered],
                "failed": [
                    {
                        "eventId": f.item.event_id,
                        "title": f.item.event.title,
                        "error": f.error.code.value,
                        "message": f.error.message,
                    }
                    for f in outcome.failed
                ],
                "cart": CartSerializer(outcome.cart).data,
            },
            status=CHECKOUT_STATUS[outcome.status],
        )
