from types import SimpleNamespace

import pytest

from talentnest.shared.errors import AuthorizationError
from talentnest.shared.policy import Action, Role, authorize, is_allowed, role_of


def actor(id=1, role="student", is_active=True):
    return SimpleNamespace(id=id, role=role, is_active=is_active)


def test_role_of_resolves_known_roles_only():
    assert role_of(actor(role="artisan")) == Role.ARTISAN
    assert role_of(actor(role="superuser")) is None


def test_only_artisans_create_services():
    assert is_allowed(actor(role="artisan"), Action.CREATE_SERVICE)
    assert not is_allowed(actor(role="student"), Action.CREATE_SERVICE)
    assert not is_allowed(actor(role="admin"), Action.CREATE_SERVICE)


def test_service_update_requires_ownership():
    listing = SimpleNamespace(user_id=7)
    assert is_allowed(actor(id=7, role="artisan"), Action.UPDATE_SERVICE, listing)
    assert not is_allowed(actor(id=8, role="artisan"), Action.UPDATE_SERVICE, listing)


def test_admin_can_toggle_any_listing():
    listing = SimpleNamespace(user_id=7)
    assert is_allowed(actor(id=99, role="admin"), Action.TOGGLE_SERVICE, listing)


def test_booking_visibility():
    booking = SimpleNamespace(client_id=1, provider_id=2)
    assert is_allowed(actor(id=1), Action.VIEW_BOOKING, booking)
    assert is_allowed(actor(id=2, role="artisan"), Action.VIEW_BOOKING, booking)
    assert is_allowed(actor(id=3, role="admin"), Action.VIEW_BOOKING, booking)
    assert not is_allowed(actor(id=3), Action.VIEW_BOOKING, booking)


def test_inactive_and_unknown_actors_are_denied():
    assert not is_allowed(actor(role="artisan", is_active=False), Action.CREATE_SERVICE)
    assert not is_allowed(actor(role="ghost"), Action.BOOK_SERVICE)
    assert not is_allowed(None, Action.BOOK_SERVICE)


def test_authorize_raises_authorization_error():
    with pytest.raises(AuthorizationError) as exc:
        authorize(actor(role="student"), Action.REVIEW_VERIFICATION)
    assert exc.value.status_code == 403
    assert "review verification" in exc.value.detail


def test_enrollment_roles():
    enrollment = SimpleNamespace(student_id=1, provider_id=2)
    assert is_allowed(actor(id=1), Action.VIEW_ENROLLMENT, enrollment)
    assert is_allowed(actor(id=2, role="artisan"), Action.TEACH_ENROLLMENT, enrollment)
    assert not is_allowed(actor(id=1), Action.TEACH_ENROLLMENT, enrollment)
    assert is_allowed(actor(id=1), Action.CANCEL_ENROLLMENT, enrollment)
    assert not is_allowed(actor(id=3, role="admin"), Action.CANCEL_ENROLLMENT, enrollment)
    assert is_allowed(actor(id=3, role="admin"), Action.VIEW_ENROLLMENT, enrollment)
    assert not is_allowed(actor(role="artisan"), Action.ENROLL_IN_SKILL)


def test_every_action_has_a_rule():
    for action in Action:
        is_allowed(actor(role="admin"), action, SimpleNamespace())
