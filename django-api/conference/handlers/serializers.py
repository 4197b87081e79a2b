"""Serializers for request payloads and domain model responses.

Field names are camelCase to match the stored documents.
"""

from rest_framework import serializers


def _timestamp(value):
    return value.isoformat() if value is not None else None


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.CharField(source="id.value")
    title = serializers.CharField()
    description = serializers.CharField()
    category = serializers.CharField()
    price = serializers.SerializerMethodField()
    duration = serializers.CharField()
    prize = serializers.CharField()
    image = serializers.CharField()
    icon = serializers.CharField()
    maxTickets = serializers.SerializerMethodField()
    active = serializers.BooleanField(source="is_active")
    createdAt = serializers.SerializerMethodField()
    updatedAt = serializers.SerializerMethodField()

    def get_price(self, obj):
        return obj.price.to_raw()

    def get_maxTickets(self, obj):
        return obj.max_tickets.value if obj.max_tickets else None

    def get_createdAt(self, obj):
        return _timestamp(obj.created_at)

    def get_updatedAt(self, obj):
        return _timestamp(obj.updated_at)


class EventInputSerializer(serializers.Serializer):
    """Admin create/update payload; validation of values happens in the service."""

    title = serializers.CharField(required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    category = serializers.CharField(required=False, allow_blank=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    duration = serializers.CharField(required=False, allow_blank=True)
    prize = serializers.CharField(required=False, allow_blank=True)
    image = serializers.CharField(required=False, allow_blank=True)
    icon = serializers.CharField(required=False, allow_blank=True)
    maxTickets = serializers.IntegerField(required=False, allow_null=True, min_value=0)


class EventStatusSerializer(serializers.Serializer):
    active = serializers.BooleanField()


class RegistrationSerializer(serializers.Serializer):
    """Serializer for Registration domain model."""

    eventId = serializers.CharField(source="event_id")
    eventName = serializers.CharField(source="event_name")
    eventDate = serializers.CharField(source="event_date")
    eventTime = serializers.CharField(source="event_time")
    venue = serializers.CharField()
    paymentId = serializers.CharField(source="payment_id")
    amount = serializers.SerializerMethodField()
    quantity = serializers.IntegerField()
    registeredAt = serializers.SerializerMethodField()
    status = serializers.CharField(source="status.value")
    attended = serializers.BooleanField()
    attendedAt = serializers.SerializerMethodField()

    def get_amount(self, obj):
        return obj.amount.to_raw()

    def get_registeredAt(self, obj):
        return _timestamp(obj.registered_at)

    def get_attendedAt(self, obj):
        return _timestamp(obj.attended_at)


class EventBanSerializer(serializers.Serializer):
    eventId = serializers.CharField(source="event_id")
    banned = serializers.BooleanField(source="state.banned")
    bannedAt = serializers.SerializerMethodField()

    def get_bannedAt(self, obj):
        return _timestamp(obj.state.banned_at)


class ProfileSerializer(serializers.Serializer):
    """Serializer for Profile domain model; also the profile write payload."""

    userId = serializers.CharField(source="user_id", read_only=True)
    name = serializers.CharField(required=False, allow_blank=True)
    email = serializers.CharField(required=False, allow_blank=True)
    college = serializers.CharField(required=False, allow_blank=True)
    phone = serializers.CharField(required=False, allow_blank=True)
    role = serializers.CharField(read_only=True)
    banned = serializers.BooleanField(source="ban.banned", read_only=True)


class ParticipantSerializer(serializers.Serializer):
    userId = serializers.CharField(source="user_id")
    registration = RegistrationSerializer()
    profile = ProfileSerializer()


class RegisteredEventSerializer(serializers.Serializer):
    eventId = serializers.CharField(source="event_id")
    eventTitle = serializers.CharField(source="event_title")
    eventCategory = serializers.CharField(source="event_category")
    registeredAt = serializers.SerializerMethodField()
    status = serializers.CharField(source="status.value")
    attended = serializers.BooleanField()

    def get_registeredAt(self, obj):
        return _timestamp(obj.registered_at)


class DirectoryUserSerializer(serializers.Serializer):
    profile = ProfileSerializer()
    registeredEvents = RegisteredEventSerializer(source="registered_events", many=True)
    totalEvents = serializers.IntegerField(source="total_events")
    banned = serializers.BooleanField()


class EventStatsSerializer(serializers.Serializer):
    totalEvents = serializers.IntegerField(source="total_events")
    activeEvents = serializers.IntegerField(source="active_events")
    totalRegistrations = serializers.IntegerField(source="total_registrations")
    confirmedPayments = serializers.IntegerField(source="confirmed_payments")


class AttendanceStatsSerializer(serializers.Serializer):
    totalRegistered = serializers.IntegerField(source="total_registered")
    attended = serializers.IntegerField()
    notAttended = serializers.IntegerField(source="not_attended")
    attendanceRate = serializers.IntegerField(source="attendance_rate")


class CartSerializer(serializers.Serializer):
    items = serializers.SerializerMethodField()
    totalItems = serializers.SerializerMethodField()
    totalPrice = serializers.SerializerMethodField()

    def get_items(self, obj):
        return [
            {**EventSerializer(item.event).data, "quantity": item.quantity} for item in obj
        ]

    def get_totalItems(self, obj):
        return obj.total_items()

    def get_totalPrice(self, obj):
        return obj.total_price().to_raw()


class BanSerializer(serializers.Serializer):
    banned = serializers.BooleanField()


class UserSelectionSerializer(serializers.Serializer):
    userIds = serializers.ListField(child=serializers.CharField(), allow_empty=True)


class BulkBanSerializer(UserSelectionSerializer):
    banned = serializers.BooleanField()


class BanActionsQuerySerializer(UserSelectionSerializer):
    eventId = serializers.CharField(required=False, allow_blank=True)


class AttendanceSerializer(serializers.Serializer):
    attended = serializers.BooleanField(default=True)


class BulkAttendanceSerializer(UserSelectionSerializer):
    attended = serializers.BooleanField(default=True)


class CartToggleSerializer(serializers.Serializer):
    eventId = serializers.CharField()


def serialize_batch(batch) -> dict:
    return {
        "succeeded": [_batch_item(item) for item in (batch.succeeded if batch else ())],
        "failed": [
            {"item": _batch_item(f.item), "error": f.error.code.value, "message": f.error.message}
            for f in (batch.failed if batch else ())
        ],
    }


def _batch_item(item):
    user_id = getattr(item, "user_id", None)
    return user_id if user_id is not None else item
