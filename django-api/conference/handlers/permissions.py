"""Access gating at the HTTP boundary.

The ledger does not look at global bans; a globally banned user is stopped
here, before any account functionality runs.
"""

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.permissions import BasePermission

from conference.dependencies import get_services
from conference.domain.errors import DomainError, UserBannedError


def user_id_for(request) -> str | None:
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return None
    return str(user.pk)


class BanCheckUnavailable(APIException):
    """The ban state could not be read, so the request is refused."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_code = "ban_check_unavailable"

    def __init__(self, error: DomainError) -> None:
        super().__init__(detail={"error": error.code.value, "message": error.message})


class IsNotBanned(BasePermission):
    """Deny every action to a globally banned account.

    A failed ban lookup refuses the request with 503.
    """

    message = "Account is banned"

    def has_permission(self, request, view) -> bool:
        user_id = user_id_for(request)
        if user_id is None:
            return True
        result = get_services().bans.get_global_ban(user_id)
        if not result.success:
            raise BanCheckUnavailable(result.error)
        if result.data.banned:
            error = UserBannedError(user_id)
            self.message = {"error": error.code.value, "message": error.message}
            return False
        return True


class IsConferenceAdmin(BasePermission):
    """Staff accounts, or users whose profile carries the admin role."""

    def has_permission(self, request, view) -> bool:
        user_id = user_id_for(request)
        if user_id is None:
            return False
        if request.user.is_staff:
            return True
        result = get_services().profiles.is_admin(user_id)
        return bool(result.success and result.data)
