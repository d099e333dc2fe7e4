# users/permissions.py

from rest_framework.permissions import BasePermission

from users.models.user import ROLE_ADMIN, ROLE_MANAGER, STAFF_ROLES


# ---------------- BASE ROLE PERMISSION ----------------
class HasRole(BasePermission):
    """
    Base permission to check user role safely.
    """

    allowed_roles = set()

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return getattr(user, "role", None) in self.allowed_roles


# ---------------- ROLE PERMISSIONS ----------------
class IsAdmin(HasRole):
    """
    Privileged operations: ledger resets, staff registration.
    """

    allowed_roles = {ROLE_ADMIN}


class IsManagerOrAdmin(HasRole):
    """
    Manual supplier debits.
    """

    allowed_roles = {ROLE_ADMIN, ROLE_MANAGER}


class IsStaff(HasRole):
    """
    Ledger reads, transactions, payments and the event stream.
    Any shop staff member:
    - admin
    - manager
    - technician
    - cashier
    """

    allowed_roles = set(STAFF_ROLES)
