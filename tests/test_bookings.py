from urllib.parse import parse_qs, urlparse

import pytest

from talentnest.domain.bookings import state_machine as sm
from talentnest.domain.bookings.schemas import BookingCreate
from talentnest.domain.bookings.service import BookingEngine
from talentnest.models import ContactEvent
from talentnest.shared.errors import AuthorizationError, InvalidStateTransition, NotFoundError


@pytest.fixture
def booking(db, student, service):
    return BookingEngine(db).create_booking(
        student, BookingCreate(serviceId=service.id, providerId=service.user_id)
    )


def test_create_booking_snapshots_service(login_as, db, student, service):
    response = login_as(student).post(
        "/bookings",
        json={"serviceId": service.id, "providerId": service.user_id, "agreedPrice": "₦7,500"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["title"] == service.title
    assert body["description"] == service.description
    assert body["clientId"] == student.id
    assert body["providerId"] == service.user_id
    assert body["whatsappChatInitiated"] is False

    db.refresh(service)
    assert service.orders_count == 1


def test_provider_must_own_the_service(login_as, make_user, student, service):
    stranger = make_user("artisan")

    response = login_as(student).post(
        "/bookings", json={"serviceId": service.id, "providerId": stranger.id}
    )

    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"


def test_hidden_service_cannot_be_booked(login_as, make_service, artisan, student):
    pending = make_service(artisan, status="pending")

    response = login_as(student).post(
        "/bookings", json={"serviceId": pending.id, "providerId": artisan.id}
    )

    assert response.status_code == 404


def test_scenario_full_lifecycle(login_as, student, artisan, service):
    client = login_as(student)
    created = client.post("/bookings", json={"serviceId": service.id, "providerId": artisan.id})
    booking_id = created.json()["id"]
    assert created.json()["status"] == "pending"

    client = login_as(artisan)
    assert client.post(f"/bookings/{booking_id}/accept").json()["status"] == "accepted"
    assert client.post(f"/bookings/{booking_id}/start").json()["status"] == "in_progress"
    assert client.post(f"/bookings/{booking_id}/complete").json()["status"] == "completed"

    for action in ("accept", "start", "complete", "cancel"):
        response = client.post(f"/bookings/{booking_id}/{action}")
        assert response.status_code == 409
        assert response.json()["error"] == "invalid_state_transition"


def test_pending_cannot_jump_to_in_progress(db, artisan, booking):
    with pytest.raises(InvalidStateTransition):
        BookingEngine(db).start(booking.id, artisan)

    db.refresh(booking)
    assert booking.status == "pending"


def test_client_cannot_accept(db, student, booking):
    with pytest.raises(AuthorizationError):
        BookingEngine(db).accept(booking.id, student)


def test_client_can_cancel_pending(login_as, student, booking):
    response = login_as(student).patch(f"/bookings/{booking.id}/status", json={"status": "cancelled"})

    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"


def test_cancelled_is_terminal(db, student, artisan, booking):
    engine = BookingEngine(db)
    engine.cancel(booking.id, student)

    for status in sm.BOOKING_STATUSES:
        with pytest.raises(InvalidStateTransition):
            engine.transition(booking.id, artisan, status)


def test_client_cannot_complete_in_progress(db, student, artisan, booking):
    engine = BookingEngine(db)
    engine.accept(booking.id, artisan)
    engine.start(booking.id, artisan)

    with pytest.raises(AuthorizationError):
        engine.complete(booking.id, student)


def test_outsider_gets_not_found(login_as, make_user, booking):
    outsider = make_user("student")

    assert login_as(outsider).get(f"/bookings/{booking.id}").status_code == 404
    assert login_as(outsider).post(f"/bookings/{booking.id}/cancel").status_code == 404


def test_admin_can_view_but_not_drive(db, admin, booking):
    engine = BookingEngine(db)

    assert engine.get_booking(booking.id, admin).id == booking.id
    with pytest.raises(AuthorizationError):
        engine.cancel(booking.id, admin)


def test_every_transition_edge_is_in_the_table():
    for current in sm.BOOKING_STATUSES:
        for target in sm.allowed_next_statuses(current):
            assert (current, target) in sm.TRANSITIONS
    for terminal in sm.TERMINAL_STATUSES:
        assert sm.allowed_next_statuses(terminal) == []
    assert sm.IN_PROGRESS not in sm.allowed_next_statuses(sm.PENDING)


def test_list_and_partition(login_as, db, make_user, make_service, student, artisan, service, booking):
    # The artisan also books someone else's service
    other = make_user("artisan", is_verified=True)
    other_listing = make_service(other, title="Logo Design")
    BookingEngine(db).create_booking(
        artisan, BookingCreate(serviceId=other_listing.id, providerId=other.id)
    )

    client = login_as(artisan)
    everything = client.get("/bookings").json()
    as_provider = client.get("/bookings", params={"as": "provider"}).json()
    as_client = client.get("/bookings", params={"as": "client"}).json()
    parts = client.get("/bookings/partitioned").json()

    assert len(everything) == 2
    assert [b["id"] for b in as_provider] == [booking.id]
    assert [b["title"] for b in as_client] == ["Logo Design"]
    assert [b["id"] for b in parts["asProvider"]] == [booking.id]
    assert [b["title"] for b in parts["asClient"]] == ["Logo Design"]


def test_contact_targets_the_counterpart(login_as, db, student, artisan, booking):
    response = login_as(student).post(f"/bookings/{booking.id}/contact", json={})

    assert response.status_code == 200
    url = urlparse(response.json()["url"])
    query = parse_qs(url.query)
    assert url.netloc == "web.whatsapp.com"
    assert query["phone"] == ["2348031234567"]
    assert booking.title in query["text"][0]
    assert student.full_name in query["text"][0]
    assert response.json()["booking"]["whatsappChatInitiated"] is True

    event = db.query(ContactEvent).one()
    assert event.booking_id == booking.id
    assert event.requester_id == student.id
    assert event.provider_id == artisan.id


def test_provider_contacting_client_uses_client_number(login_as, student, artisan, booking):
    response = login_as(artisan).post(f"/bookings/{booking.id}/contact", json={"mobile": True})

    url = urlparse(response.json()["url"])
    assert url.netloc == "wa.me"
    assert url.path == "/" + student.whatsapp_number.lstrip("+")


def test_repeat_contact_is_idempotent(db, student, booking):
    engine = BookingEngine(db)

    first_url, first = engine.initiate_contact(booking.id, student)
    second_url, second = engine.initiate_contact(booking.id, student)

    assert first.whatsapp_chat_initiated and second.whatsapp_chat_initiated
    assert first_url == second_url


def test_outsider_cannot_contact(db, make_user, booking):
    with pytest.raises(NotFoundError):
        BookingEngine(db).initiate_contact(booking.id, make_user("student"))
