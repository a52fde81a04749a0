import pytest

from talentnest.domain.skills.schemas import SkillUpdate
from talentnest.domain.skills.service import SkillCatalog
from talentnest.shared.errors import (
    AuthorizationError,
    ConflictError,
    InvalidStateTransition,
    NotFoundError,
    ValidationError,
)

NEW_SKILL = {
    "title": "Gele Tying Masterclass",
    "description": "Learn classic and modern gele styles for owambe events",
    "category": "Fashion",
    "difficulty": "intermediate",
    "duration": "3 weeks",
    "price": "₦10,000",
    "maxStudents": 8,
    "syllabus": ["Fabric choice", " ", "Classic fan style"],
    "requirements": ["Your own gele"],
}


@pytest.fixture
def skill(make_skill, artisan):
    return make_skill(artisan)


def test_artisan_lists_skill(login_as, artisan):
    response = login_as(artisan).post("/skills", json=NEW_SKILL)

    assert response.status_code == 201
    body = response.json()
    assert body["currentStudents"] == 0
    assert body["difficulty"] == "intermediate"
    assert body["syllabus"] == ["Fabric choice", "Classic fan style"]
    assert body["provider"]["id"] == artisan.id


def test_students_cannot_list_skills(login_as, student):
    response = login_as(student).post("/skills", json=NEW_SKILL)

    assert response.status_code == 403
    assert response.json()["error"] == "authorization_error"


def test_browse_filters(client, make_user, make_skill, artisan):
    make_skill(artisan, title="Beat Making", category="Music", difficulty="beginner")
    make_skill(artisan, title="Advanced Mixing", category="Music", difficulty="advanced")
    make_skill(artisan, title="Crochet Basics", category="Crafts", difficulty="beginner")
    make_skill(artisan, title="Retired Class", is_active=False)
    suspended = make_user("artisan", is_active=False)
    make_skill(suspended, title="Hidden Owner Class")

    def titles(**params):
        return sorted(s["title"] for s in client.get("/skills", params=params).json())

    assert titles() == ["Advanced Mixing", "Beat Making", "Crochet Basics"]
    assert titles(category="Music") == ["Advanced Mixing", "Beat Making"]
    assert titles(category="All categories", difficulty="beginner") == ["Beat Making", "Crochet Basics"]
    assert titles(search="crochet") == ["Crochet Basics"]


def test_search_matches_provider_business_name(client, make_skill, artisan):
    make_skill(artisan, title="Pattern Drafting")

    response = client.get("/skills", params={"search": "ada stitches"})

    assert [s["title"] for s in response.json()] == ["Pattern Drafting"]


def test_unknown_difficulty_filter_rejected(client):
    response = client.get("/skills", params={"difficulty": "expert"})

    assert response.status_code == 400


def test_unlisted_skill_is_not_found_for_the_public(client, make_skill, artisan):
    retired = make_skill(artisan, is_active=False)

    assert client.get(f"/skills/{retired.id}").status_code == 404


def test_capacity_cannot_drop_below_enrolled(db, make_user, artisan, skill):
    catalog = SkillCatalog(db)
    catalog.enroll(make_user("student"), skill.id)
    catalog.enroll(make_user("student"), skill.id)

    with pytest.raises(ValidationError):
        catalog.update_skill(skill.id, artisan, SkillUpdate(maxStudents=1))

    updated = catalog.update_skill(skill.id, artisan, SkillUpdate(maxStudents=2))
    assert updated.max_students == 2


def test_only_owner_updates_skill(db, make_user, skill):
    with pytest.raises(AuthorizationError):
        SkillCatalog(db).update_skill(skill.id, make_user("artisan"), SkillUpdate(title="Taken over"))


def test_student_enrolls(login_as, db, student, skill):
    response = login_as(student).post("/enrollments", json={"skillId": skill.id})

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "active"
    assert body["progress"] == 0
    assert body["providerId"] == skill.user_id
    assert body["skillTitle"] == skill.title
    db.refresh(skill)
    assert skill.current_students == 1


def test_duplicate_enrollment_conflicts(login_as, db, student, skill):
    client = login_as(student)
    client.post("/enrollments", json={"skillId": skill.id})

    response = client.post("/enrollments", json={"skillId": skill.id})

    assert response.status_code == 409
    assert response.json()["error"] == "conflict"
    db.refresh(skill)
    assert skill.current_students == 1


def test_artisans_cannot_enroll(db, make_user, skill):
    with pytest.raises(AuthorizationError):
        SkillCatalog(db).enroll(make_user("artisan"), skill.id)


def test_full_skill_rejects_enrollment(db, make_user, make_skill, artisan):
    small = make_skill(artisan, max_students=1)
    catalog = SkillCatalog(db)
    catalog.enroll(make_user("student"), small.id)

    with pytest.raises(ValidationError):
        catalog.enroll(make_user("student"), small.id)


def test_unlisted_skill_cannot_be_enrolled(db, student, make_skill, artisan):
    retired = make_skill(artisan, is_active=False)

    with pytest.raises(NotFoundError):
        SkillCatalog(db).enroll(student, retired.id)


def test_progress_to_completion_frees_the_seat(db, artisan, student, skill):
    catalog = SkillCatalog(db)
    enrollment = catalog.enroll(student, skill.id)

    enrollment = catalog.update_progress(enrollment.id, artisan, 65)
    assert enrollment.status == "active"
    assert enrollment.progress == 65

    enrollment = catalog.update_progress(enrollment.id, artisan, 100)
    assert enrollment.status == "completed"
    assert enrollment.completed_at is not None
    db.refresh(skill)
    assert skill.current_students == 0

    with pytest.raises(InvalidStateTransition):
        catalog.update_progress(enrollment.id, artisan, 50)


def test_student_cannot_set_own_progress(db, student, skill):
    catalog = SkillCatalog(db)
    enrollment = catalog.enroll(student, skill.id)

    with pytest.raises(AuthorizationError):
        catalog.update_progress(enrollment.id, student, 100)


def test_cancel_then_reenroll(login_as, db, student, skill):
    client = login_as(student)
    enrollment_id = client.post("/enrollments", json={"skillId": skill.id}).json()["id"]

    cancelled = client.post(f"/enrollments/{enrollment_id}/cancel")
    assert cancelled.json()["status"] == "cancelled"
    assert client.post(f"/enrollments/{enrollment_id}/cancel").status_code == 409

    reopened = client.post("/enrollments", json={"skillId": skill.id})
    assert reopened.status_code == 201
    assert reopened.json()["id"] == enrollment_id
    assert reopened.json()["status"] == "active"
    db.refresh(skill)
    assert skill.current_students == 1


def test_outsider_cannot_see_enrollment(db, make_user, student, skill):
    catalog = SkillCatalog(db)
    enrollment = catalog.enroll(student, skill.id)

    with pytest.raises(NotFoundError):
        catalog.get_enrollment(enrollment.id, make_user("student"))


def test_enrollment_lists_are_scoped_by_role(login_as, db, make_user, make_skill, artisan, admin, student, skill):
    catalog = SkillCatalog(db)
    other_teacher = make_user("artisan")
    other_skill = make_skill(other_teacher, title="Soap Making")
    catalog.enroll(student, skill.id)
    finished = catalog.enroll(student, other_skill.id)
    catalog.update_progress(finished.id, other_teacher, 100)
    catalog.enroll(make_user("student"), skill.id)

    mine = login_as(student).get("/enrollments").json()
    completed = login_as(student).get("/enrollments", params={"status": "completed"}).json()
    learners = login_as(artisan).get("/enrollments").json()
    everything = login_as(admin).get("/enrollments", params={"skillId": skill.id}).json()

    assert len(mine) == 2
    assert [e["skillTitle"] for e in completed] == ["Soap Making"]
    assert len(learners) == 2 and all(e["providerId"] == artisan.id for e in learners)
    assert len(everything) == 2
