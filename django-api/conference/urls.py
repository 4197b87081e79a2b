from django.urls import path

from conference.handlers import (
    AttendanceStatsView,
    AttendeeView,
    BanActionsView,
    BulkBanView,
    CartItemView,
    CartToggleView,
    CartView,
    CheckoutView,
    EventAttendanceView,
    EventAttendeesView,
    EventBansView,
    EventDetailView,
    EventListView,
    EventRegistrationsView,
    EventStatsView,
    EventStatusView,
    MyEventBansView,
    MyRegistrationsView,
    ProfileView,
    UserBanView,
    UserListView,
)

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path("events/<str:event_id>/status", EventStatusView.as_view(), name="event-status"),
    path(
        "events/<str:event_id>/registrations",
        EventRegistrationsView.as_view(),
        name="event-registrations",
    ),
    path("events/<str:event_id>/bans", EventBansView.as_view(), name="event-bans"),
    path(
        "events/<str:event_id>/attendance",
        EventAttendanceView.as_view(),
        name="event-attendance",
    ),
    path(
        "events/<str:event_id>/attendance/<str:user_id>",
        AttendeeView.as_view(),
        name="attendee",
    ),
    path("events/<str:event_id>/attendees", EventAttendeesView.as_view(), name="event-attendees"),
    path(
        "events/<str:event_id>/attendance-stats",
        AttendanceStatsView.as_view(),
        name="attendance-stats",
    ),
    path("stats", EventStatsView.as_view(), name="event-stats"),
    path("me/registrations", MyRegistrationsView.as_view(), name="my-registrations"),
    path("me/event-bans", MyEventBansView.as_view(), name="my-event-bans"),
    path("me/profile", ProfileView.as_view(), name="profile"),
    path("users", UserListView.as_view(), name="user-list"),
    path("users/ban", BulkBanView.as_view(), name="bulk-ban"),
    path("users/ban-actions", BanActionsView.as_view(), name="ban-actions"),
    path("users/<str:user_id>/ban", UserBanView.as_view(), name="user-ban"),
    path("cart", CartView.as_view(), name="cart"),
    path("cart/toggle", CartToggleView.as_view(), name="cart-toggle"),
    path("cart/checkout", CheckoutView.as_view(), name="checkout"),
    path("cart/<str:event_id>", CartItemView.as_view(), name="cart-item"),
]
