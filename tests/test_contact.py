from urllib.parse import parse_qs, urlparse

import pytest

from talentnest.domain.contact.router import contact_rate_limit
from talentnest.domain.contact.repository import ContactEventRepository
from talentnest.domain.contact.service import ContactBridge
from talentnest.main import app
from talentnest.models import ContactEvent
from talentnest.rate_limiter import create_user_rate_limiter
from talentnest.shared.errors import InvalidContactNumber, ValidationError
from talentnest.shared.validators import is_valid_whatsapp_number, normalize_phone_number


@pytest.mark.parametrize(
    "number,valid",
    [
        ("+2348031234567", True),
        ("+234 803 123 4567", True),
        ("+234-803-123-4567", True),
        ("08031234567", False),
        ("+123", False),
        ("+0348031234567", False),
        ("", False),
        (None, False),
    ],
)
def test_whatsapp_number_validity(number, valid):
    assert is_valid_whatsapp_number(number) is valid


def test_local_numbers_normalize_to_nigerian_e164():
    assert normalize_phone_number("0803 123 4567") == "+2348031234567"
    assert normalize_phone_number("2348031234567") == "+2348031234567"
    with pytest.raises(ValueError):
        normalize_phone_number("12")


def decoded_text(url):
    return parse_qs(urlparse(url).query)["text"][0]


def test_skill_learning_link(db, student, make_user):
    teacher = make_user(
        "artisan",
        business_name="Bolu Beats",
        whatsapp_number="+2348031234567",
        available_for_learning=True,
    )

    url = ContactBridge(db).build_contact_link(
        teacher, student, "skill_learning", skill_title="Beat Making & Mixing"
    )

    parsed = urlparse(url)
    assert parsed.scheme == "https"
    assert parsed.netloc == "web.whatsapp.com"
    assert parse_qs(parsed.query)["phone"] == ["2348031234567"]
    text = decoded_text(url)
    assert "Bolu Beats" in text
    assert student.full_name in text
    assert '"Beat Making & Mixing"' in text
    assert "UNILORIN" in text
    assert "Training schedule" in text


def test_skill_learning_body_depends_on_availability(db, student, artisan):
    url = ContactBridge(db).build_contact_link(
        artisan, student, "skill_learning", skill_title="Tailoring"
    )

    assert "available to teach this skill" in decoded_text(url)


def test_direct_service_lists_skills(db, student, artisan):
    url = ContactBridge(db).build_contact_link(artisan, student, "direct_service", mobile=True)

    parsed = urlparse(url)
    assert parsed.netloc == "wa.me"
    assert parsed.path == "/2348031234567"
    text = decoded_text(url)
    assert "Ada Stitches" in text
    assert "Tailoring, Fashion Design" in text


def test_provider_name_falls_back_to_full_name(db, student, make_user):
    provider = make_user("artisan", full_name="Grace Obi", business_name=None)

    text = decoded_text(ContactBridge(db).build_contact_link(provider, student, "direct_service"))

    assert text.startswith("Hi Grace Obi!")


def test_invalid_number_produces_no_link_and_no_event(db, student, make_user):
    provider = make_user("artisan", whatsapp_number="08031234567")

    with pytest.raises(InvalidContactNumber):
        ContactBridge(db).build_contact_link(provider, student, "direct_service")

    assert db.query(ContactEvent).count() == 0


def test_skill_learning_without_title_rejected(db, student, artisan):
    with pytest.raises(ValidationError):
        ContactBridge(db).build_contact_link(artisan, student, "skill_learning")


def test_unknown_intent_rejected(db, student, artisan):
    with pytest.raises(ValidationError):
        ContactBridge(db).build_contact_link(artisan, student, "gossip")


def test_recording_failure_still_returns_link(db, student, artisan, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("analytics down")

    monkeypatch.setattr(ContactEventRepository, "record_event", staticmethod(broken))

    url = ContactBridge(db).build_contact_link(artisan, student, "direct_service")

    assert url.startswith("https://web.whatsapp.com/send?phone=2348031234567&text=")


def test_contact_from_profile(login_as, db, student, artisan):
    response = login_as(student).post(
        f"/contact/providers/{artisan.id}",
        json={"intent": "skill_learning", "skillTitle": "Tailoring"},
    )

    assert response.status_code == 200
    assert response.json()["providerId"] == artisan.id
    event = db.query(ContactEvent).one()
    assert event.intent == "skill_learning"
    assert event.skill_title == "Tailoring"
    assert event.booking_id is None


def test_contact_from_profile_invalid_number(login_as, student, make_user):
    provider = make_user("artisan", whatsapp_number=None)

    response = login_as(student).post(f"/contact/providers/{provider.id}", json={})

    assert response.status_code == 400
    assert response.json()["error"] == "invalid_contact_number"


def test_only_artisans_can_be_contacted(login_as, student, make_user):
    other_student = make_user("student")

    response = login_as(student).post(f"/contact/providers/{other_student.id}", json={})

    assert response.status_code == 404


def test_contact_is_rate_limited(login_as, student, artisan):
    limited = create_user_rate_limiter(2, 3600, "contact-test")
    app.dependency_overrides[contact_rate_limit] = limited

    client = login_as(student)
    codes = [client.post(f"/contact/providers/{artisan.id}", json={}).status_code for _ in range(3)]

    assert codes == [200, 200, 429]


def test_contact_about_a_listed_skill_uses_its_title(login_as, db, student, artisan, make_skill):
    skill = make_skill(artisan, title="Aso Oke Weaving")

    response = login_as(student).post(
        f"/contact/providers/{artisan.id}",
        json={"intent": "skill_learning", "skillId": skill.id, "skillTitle": "something else"},
    )

    assert response.status_code == 200
    assert '"Aso Oke Weaving"' in decoded_text(response.json()["url"])
    event = db.query(ContactEvent).one()
    assert event.skill_id == skill.id
    assert event.skill_title == "Aso Oke Weaving"


def test_contact_about_another_providers_skill_not_found(login_as, db, student, artisan, make_user, make_skill):
    elsewhere = make_skill(make_user("artisan"), title="Soap Making")

    response = login_as(student).post(
        f"/contact/providers/{artisan.id}",
        json={"intent": "skill_learning", "skillId": elsewhere.id},
    )

    assert response.status_code == 404
    assert db.query(ContactEvent).count() == 0
