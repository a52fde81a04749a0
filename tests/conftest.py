import os

# Must be set before talentnest.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("REDIS_URL", None)

import itertools  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from talentnest import rate_limiter  # noqa: E402
from talentnest.auth import get_current_user, get_optional_user, get_token_claims  # noqa: E402
from talentnest.database import Base, SessionLocal, engine, get_db  # noqa: E402
from talentnest.main import app  # noqa: E402
from talentnest.models import Service, Skill, User, VerificationRequest  # noqa: E402

_ids = itertools.count(1)


@pytest.fixture(autouse=True)
def reset_rate_limits():
    rate_limiter.memory_cache.clear()
    yield
    rate_limiter.memory_cache.clear()


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def make_user(db):
    def _make_user(role="student", **overrides):
        n = next(_ids)
        data = {
            "auth_uid": f"uid-{n}",
            "email": f"user{n}@students.unilorin.edu.ng",
            "role": role,
            "full_name": f"User {n}",
            "whatsapp_number": f"+23480312{n:05d}",
            "is_verified": False,
            "is_active": True,
            "rating": 0.0,
            "review_count": 0,
            "available_for_learning": False,
            "skills": [],
        }
        data.update(overrides)
        user = User(**data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def student(make_user):
    return make_user("student", full_name="Tunde Bakare", matric_number="20-52hl077")


@pytest.fixture
def artisan(make_user):
    return make_user(
        "artisan",
        full_name="Adaeze Okafor",
        business_name="Ada Stitches",
        skills=["Tailoring", "Fashion Design"],
        whatsapp_number="+2348031234567",
        is_verified=True,
    )


@pytest.fixture
def admin(make_user):
    return make_user("admin", full_name="Platform Admin")


@pytest.fixture
def make_service(db):
    def _make_service(owner, status="active", is_active=True, **overrides):
        data = {
            "title": "Custom Ankara Tailoring",
            "description": "Made-to-measure outfits for events and everyday wear",
            "category": "Fashion",
            "price_range": "₦5,000 - ₦15,000",
            "delivery_time": "1 week",
            "images": [],
            "tags": ["ankara", "tailoring"],
            "status": status,
            "is_active": is_active,
            "views_count": 0,
            "orders_count": 0,
        }
        data.update(overrides)
        service = Service(user_id=owner.id, **data)
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    return _make_service


@pytest.fixture
def service(make_service, artisan):
    return make_service(artisan)


@pytest.fixture
def make_skill(db):
    def _make_skill(owner, **overrides):
        data = {
            "title": "Beat Making and Mixing",
            "description": "Produce and mix Afrobeats tracks in FL Studio",
            "category": "Music",
            "difficulty": "beginner",
            "duration": "6 weeks",
            "price": "₦15,000",
            "max_students": 5,
            "current_students": 0,
            "images": [],
            "syllabus": ["Drum patterns", "Mixing basics"],
            "requirements": ["Laptop"],
            "is_active": True,
        }
        data.update(overrides)
        skill = Skill(user_id=owner.id, **data)
        db.add(skill)
        db.commit()
        db.refresh(skill)
        return skill

    return _make_skill


@pytest.fixture
def make_verification_request(db):
    def _make_request(applicant, **overrides):
        data = {
            "applicant_name": applicant.full_name,
            "applicant_email": applicant.email,
            "student_id": "20-52hl077",
            "business_name": applicant.business_name or "Campus Fixes",
            "specializations": [],
            "experience_years": 2,
            "certificates": [],
            "supporting_documents": [],
            "status": "pending",
        }
        data.update(overrides)
        request = VerificationRequest(applicant_id=applicant.id, **data)
        db.add(request)
        db.commit()
        db.refresh(request)
        return request

    return _make_request


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_optional_user] = lambda: None
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login_as(client):
    """Make every following request act as ``user``"""

    def _login_as(user):
        app.dependency_overrides[get_current_user] = lambda: user
        app.dependency_overrides[get_optional_user] = lambda: user
        return client

    return _login_as


@pytest.fixture
def token_claims(client):
    """Stand in verified identity-provider claims for the registration endpoint"""

    def _token_claims(sub, email):
        app.dependency_overrides[get_token_claims] = lambda: {"sub": sub, "email": email}
        return client

    return _token_claims
