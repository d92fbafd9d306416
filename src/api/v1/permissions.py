"""Custom DRF permissions for the Indana back office."""
from rest_framework.permissions import BasePermission

from navigation.capabilities import user_has_capability


# ---------------------------------------------------------------------------
# Capability-aware permission base class
# ---------------------------------------------------------------------------

class _CapabilityPermission(BasePermission):
    """Grant access when the user's role carries ``capability``.

    Superusers always pass (they hold every capability).
    """

    capability = None  # e.g. "MANAGE_SALES_TARGETS"

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if not self.capability:
            return False
        return user_has_capability(user, self.capability)


class CanViewSalesTargets(_CapabilityPermission):
    """Sales staff and management may read targets and progress."""
    capability = "VIEW_SALES_TARGETS"


class CanManageSalesTargets(_CapabilityPermission):
    """Only owners and admins may create, edit or export targets."""
    capability = "MANAGE_SALES_TARGETS"
