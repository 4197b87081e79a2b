from conference.handlers.views import (
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

__all__ = [
    "AttendanceStatsView",
    "AttendeeView",
    "BanActionsView",
    "BulkBanView",
    "CartItemView",
    "CartToggleView",
    "CartView",
    "CheckoutView",
    "EventAttendanceView",
    "EventAttendeesView",
    "EventBansView",
    "EventDetailView",
    "EventListView",
    "EventRegistrationsView",
    "EventStatsView",
    "EventStatusView",
    "MyEventBansView",
    "MyRegistrationsView",
    "ProfileView",
    "UserBanView",
    "UserListView",
]
