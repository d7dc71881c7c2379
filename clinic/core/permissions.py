"""
Role-based authorization policy.

Every protected action is listed once in ``POLICY`` together with the roles
allowed to perform it. Routes declare the action they need and the check runs
once per request through ``clinic.api.deps.require_action``.
"""

import enum
from typing import Dict, FrozenSet, Union

from clinic.core.exceptions import AuthorizationError
from clinic.domain.accounts.models import UserRole


class Action(str, enum.Enum):
    """Actions guarded by the authorization policy"""
    VIEW_APPOINTMENTS = "view_appointments"
    BOOK_APPOINTMENT = "book_appointment"
    UPDATE_APPOINTMENT_STATUS = "update_appointment_status"
    VIEW_PAYMENTS = "view_payments"
    UPDATE_PAYMENT = "update_payment"
    LIST_DOCTORS = "list_doctors"
    LIST_PATIENTS = "list_patients"
    VIEW_DASHBOARD = "view_dashboard"
    CREATE_USER = "create_user"


_EVERYONE = frozenset(UserRole)
_FRONT_DESK = frozenset({UserRole.RECEPTIONIST, UserRole.ADMIN})

POLICY: Dict[Action, FrozenSet[UserRole]] = {
    Action.VIEW_APPOINTMENTS: _EVERYONE,
    Action.BOOK_APPOINTMENT: _FRONT_DESK | {UserRole.PATIENT},
    Action.UPDATE_APPOINTMENT_STATUS: _FRONT_DESK,
    Action.VIEW_PAYMENTS: _FRONT_DESK | {UserRole.PATIENT},
    Action.UPDATE_PAYMENT: _FRONT_DESK,
    Action.LIST_DOCTORS: _EVERYONE,
    Action.LIST_PATIENTS: _FRONT_DESK,
    Action.VIEW_DASHBOARD: _EVERYONE,
    Action.CREATE_USER: frozenset({UserRole.ADMIN}),
}


def is_allowed(role: Union[UserRole, str], action: Action) -> bool:
    """Return True if ``role`` may perform ``action``. Unknown roles are denied."""
    try:
        role = UserRole(role)
    except ValueError:
        return False
    return role in POLICY.get(action, frozenset())


def authorize(role: Union[UserRole, str], action: Action) -> None:
    """Raise AuthorizationError unless ``role`` may perform ``action``"""
    if not is_allowed(role, action):
        raise AuthorizationError(
            message="Insufficient permissions",
            details={"action": action.value, "role": str(getattr(role, "value", role))}
        )
