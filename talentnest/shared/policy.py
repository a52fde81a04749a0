"""
Authorization policy
Roles are a closed set; every capability check in the domain services goes
through ``authorize(actor, action, resource)``.
"""

import logging
from enum import Enum
from typing import Any, Callable, Optional

from .errors import AuthorizationError

logger = logging.getLogger(__name__)


class Role(str, Enum):
    STUDENT = "student"
    ARTISAN = "artisan"
    ADMIN = "admin"


class Action(str, Enum):
    CREATE_SERVICE = "create_service"
    UPDATE_SERVICE = "update_service"
    TOGGLE_SERVICE = "toggle_service"
    MODERATE_SERVICE = "moderate_service"
    BOOK_SERVICE = "book_service"
    VIEW_BOOKING = "view_booking"
    CONTACT_PROVIDER = "contact_provider"
    SUBMIT_VERIFICATION = "submit_verification"
    VIEW_VERIFICATION = "view_verification"
    REVIEW_VERIFICATION = "review_verification"
    UPLOAD_EVIDENCE = "upload_evidence"
    WRITE_REVIEW = "write_review"
    CREATE_SKILL = "create_skill"
    UPDATE_SKILL = "update_skill"
    ENROLL_IN_SKILL = "enroll_in_skill"
    VIEW_ENROLLMENT = "view_enrollment"
    TEACH_ENROLLMENT = "teach_enrollment"
    CANCEL_ENROLLMENT = "cancel_enrollment"
    MANAGE_CATEGORIES = "manage_categories"
    VIEW_ADMIN_CONSOLE = "view_admin_console"


def role_of(actor: Any) -> Optional[Role]:
    """Resolve the stored role string once; unknown values resolve to None"""
    try:
        return Role(actor.role)
    except (ValueError, AttributeError):
        return None


def _is_owner(actor, resource) -> bool:
    return resource is not None and getattr(resource, "user_id", None) == actor.id


def _is_participant(actor, resource) -> bool:
    return resource is not None and actor.id in (
        getattr(resource, "client_id", None),
        getattr(resource, "provider_id", None),
    )


def _is_applicant(actor, resource) -> bool:
    return resource is not None and getattr(resource, "applicant_id", None) == actor.id


def _is_enrolled(actor, resource) -> bool:
    return resource is not None and getattr(resource, "student_id", None) == actor.id


def _is_teacher(actor, resource) -> bool:
    return resource is not None and getattr(resource, "provider_id", None) == actor.id


_MEMBERS = {Role.STUDENT, Role.ARTISAN}

_RULES: dict[Action, Callable[[Role, Any, Any], bool]] = {
    Action.CREATE_SERVICE: lambda role, actor, res: role == Role.ARTISAN,
    Action.UPDATE_SERVICE: lambda role, actor, res: _is_owner(actor, res),
    Action.TOGGLE_SERVICE: lambda role, actor, res: role == Role.ADMIN or _is_owner(actor, res),
    Action.MODERATE_SERVICE: lambda role, actor, res: role == Role.ADMIN,
    Action.BOOK_SERVICE: lambda role, actor, res: role in _MEMBERS,
    Action.VIEW_BOOKING: lambda role, actor, res: role == Role.ADMIN or _is_participant(actor, res),
    Action.CONTACT_PROVIDER: lambda role, actor, res: role in _MEMBERS,
    Action.SUBMIT_VERIFICATION: lambda role, actor, res: role == Role.ARTISAN,
    Action.VIEW_VERIFICATION: lambda role, actor, res: role == Role.ADMIN or _is_applicant(actor, res),
    Action.REVIEW_VERIFICATION: lambda role, actor, res: role == Role.ADMIN,
    Action.UPLOAD_EVIDENCE: lambda role, actor, res: role == Role.ARTISAN,
    Action.WRITE_REVIEW: lambda role, actor, res: _is_participant(actor, res),
    Action.CREATE_SKILL: lambda role, actor, res: role == Role.ARTISAN,
    Action.UPDATE_SKILL: lambda role, actor, res: _is_owner(actor, res),
    Action.ENROLL_IN_SKILL: lambda role, actor, res: role == Role.STUDENT,
    Action.VIEW_ENROLLMENT: lambda role, actor, res: (
        role == Role.ADMIN or _is_enrolled(actor, res) or _is_teacher(actor, res)
    ),
    Action.TEACH_ENROLLMENT: lambda role, actor, res: _is_teacher(actor, res),
    Action.CANCEL_ENROLLMENT: lambda role, actor, res: _is_enrolled(actor, res) or _is_teacher(actor, res),
    Action.MANAGE_CATEGORIES: lambda role, actor, res: role == Role.ADMIN,
    Action.VIEW_ADMIN_CONSOLE: lambda role, actor, res: role == Role.ADMIN,
}


def is_allowed(actor: Any, action: Action, resource: Any = None) -> bool:
    """Return True when ``actor`` may perform ``action`` on ``resource``"""
    if actor is None or not getattr(actor, "is_active", True):
        return False

    role = role_of(actor)
    if role is None:
        return False

    return _RULES[action](role, actor, resource)


def authorize(actor: Any, action: Action, resource: Any = None) -> None:
    """Raise AuthorizationError unless the policy allows the action"""
    if not is_allowed(actor, action, resource):
        logger.warning(
            f"🚫 Denied {action.value} for user {getattr(actor, 'id', None)} "
            f"(role={getattr(actor, 'role', None)})"
        )
        raise AuthorizationError(f"You are not allowed to {action.value.replace('_', ' ')}")
