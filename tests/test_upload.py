import pytest


class FakeR2:
    def __init__(self, fail=False):
        self.fail = fail
        self.objects = {}

    def put_object(self, Bucket, Key, Body, ContentType):
        if self.fail:
            raise RuntimeError("R2 unreachable")
        self.objects[Key] = (Body, ContentType)

    def generate_presigned_url(self, operation, Params, ExpiresIn):
        return f"https://r2.example/{Params['Key']}?expires={ExpiresIn}"


@pytest.fixture
def r2(monkeypatch):
    fake = FakeR2()
    monkeypatch.setattr("talentnest.routes.upload.get_r2_client", lambda: fake)
    return fake


def test_artisan_uploads_pdf(login_as, artisan, r2):
    response = login_as(artisan).post(
        "/uploads/evidence",
        files={"file": ("certificate.pdf", b"%PDF-1.4 fake", "application/pdf")},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["key"].startswith(f"evidence/{artisan.id}/")
    assert body["key"].endswith(".pdf")
    assert body["url"].startswith("https://r2.example/evidence/")
    assert r2.objects[body["key"]] == (b"%PDF-1.4 fake", "application/pdf")


def test_students_cannot_upload_evidence(login_as, student, r2):
    response = login_as(student).post(
        "/uploads/evidence",
        files={"file": ("certificate.pdf", b"%PDF-1.4", "application/pdf")},
    )

    assert response.status_code == 403
    assert r2.objects == {}


def test_rejects_unsupported_type(login_as, artisan, r2):
    response = login_as(artisan).post(
        "/uploads/evidence",
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )

    assert response.status_code == 400


def test_rejects_oversized_file(login_as, artisan, r2):
    big = b"0" * (10 * 1024 * 1024 + 1)

    response = login_as(artisan).post(
        "/uploads/evidence",
        files={"file": ("scan.png", big, "image/png")},
    )

    assert response.status_code == 400
    assert "10MB" in response.json()["detail"]


def test_storage_failure_is_a_dependency_error(login_as, artisan, monkeypatch):
    monkeypatch.setattr("talentnest.routes.upload.get_r2_client", lambda: FakeR2(fail=True))

    response = login_as(artisan).post(
        "/uploads/evidence",
        files={"file": ("scan.jpg", b"\xff\xd8\xff", "image/jpeg")},
    )

    assert response.status_code == 503
    assert response.json()["error"] == "dependency_error"


def test_evidence_url_limited_to_owner_and_admins(login_as, make_user, artisan, admin, r2):
    key = f"evidence/{artisan.id}/abc.pdf"

    assert login_as(artisan).get("/uploads/evidence/url", params={"key": key}).status_code == 200
    assert login_as(admin).get("/uploads/evidence/url", params={"key": key}).status_code == 200
    assert login_as(make_user("artisan")).get("/uploads/evidence/url", params={"key": key}).status_code == 404
