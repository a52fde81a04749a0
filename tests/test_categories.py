from talentnest.models import Category


def test_lists_active_categories_alphabetically(client, db):
    db.add_all(
        [
            Category(name="Music", icon="music", is_active=True),
            Category(name="Fashion", icon="shirt", is_active=True),
            Category(name="Retired", is_active=False),
        ]
    )
    db.commit()

    response = client.get("/categories")

    assert response.status_code == 200
    assert [c["name"] for c in response.json()] == ["Fashion", "Music"]


def test_admin_adds_category(login_as, admin):
    client = login_as(admin)

    response = client.post("/categories", json={"name": "Tech", "description": "Repairs and coding"})

    assert response.status_code == 201
    assert response.json()["isActive"] is True
    assert [c["name"] for c in client.get("/categories").json()] == ["Tech"]


def test_duplicate_category_conflicts(login_as, admin):
    client = login_as(admin)
    client.post("/categories", json={"name": "Tech"})

    response = client.post("/categories", json={"name": "tech"})

    assert response.status_code == 409
    assert response.json()["error"] == "conflict"


def test_non_admin_cannot_add_category(login_as, artisan):
    response = login_as(artisan).post("/categories", json={"name": "Tech"})

    assert response.status_code == 403
