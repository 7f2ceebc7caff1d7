from tutorial_cms.services import version_service
from tests.conftest import auth_headers


def _create_tutorial(client, headers, slug="fastapi-basics", **extra):
    payload = {
        "title": "FastAPI 기초",
        "slug": slug,
        "content": "첫 번째 본문",
        "tags": ["python", "fastapi"],
        **extra,
    }
    resp = client.post("/api/admin/tutorials", json=payload, headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_create_tutorial_records_first_version(client, seed_users):
    headers = auth_headers(client, "editor001")
    tutorial = _create_tutorial(client, headers, version_metadata={"note": "초안"})
    assert tutorial["published"] is False
    assert len(tutorial["id"]) == 32

    resp = client.get(f"/api/admin/content/{tutorial['id']}/versions", headers=headers)
    assert resp.status_code == 200
    versions = resp.json()
    assert len(versions) == 1
    assert versions[0]["version_number"] == 1
    assert versions[0]["body"] == "첫 번째 본문"
    assert versions[0]["metadata"] == {"change_type": "create", "note": "초안"}
    assert versions[0]["created_by"] == seed_users["editor"].user_id
    assert versions[0]["content_title"] == "FastAPI 기초"


def test_update_tutorial_appends_version(client, seed_users):
    headers = auth_headers(client, "editor001")
    tutorial = _create_tutorial(client, headers)

    resp = client.put(
        f"/api/admin/tutorials/{tutorial['id']}",
        json={"content": "두 번째 본문"},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["content"] == "두 번째 본문"
    assert resp.json()["title"] == "FastAPI 기초"

    versions = client.get(f"/api/admin/content/{tutorial['id']}/versions", headers=headers).json()
    assert [v["version_number"] for v in versions] == [2, 1]
    assert versions[0]["metadata"]["change_type"] == "update"


def test_duplicate_slug_conflict(client, seed_users):
    headers = auth_headers(client, "editor001")
    _create_tutorial(client, headers, slug="same")
    resp = client.post(
        "/api/admin/tutorials",
        json={"title": "다른 글", "slug": "same"},
        headers=headers,
    )
    assert resp.status_code == 409


def test_reviewer_cannot_edit_content(client, seed_users):
    headers = auth_headers(client, "reviewer001")
    resp = client.post(
        "/api/admin/tutorials",
        json={"title": "검토자 글", "slug": "reviewer"},
        headers=headers,
    )
    assert resp.status_code == 403


def test_unpublished_tutorial_hidden_from_public(client, seed_users):
    headers = auth_headers(client, "editor001")
    _create_tutorial(client, headers, slug="draft")
    assert client.get("/api/tutorials").json() == []
    assert client.get("/api/tutorials/draft").status_code == 404


def test_published_tutorial_counts_views(client, db, seed_tutorial):
    seed_tutorial.published = True
    db.commit()

    resp = client.get(f"/api/tutorials/{seed_tutorial.slug}")
    assert resp.status_code == 200
    assert resp.json()["view_count"] == 1
    assert [t["slug"] for t in client.get("/api/tutorials").json()] == ["python-intro"]


def test_delete_tutorial_keeps_versions(client, seed_users):
    headers = auth_headers(client, "admin001")
    tutorial = _create_tutorial(client, headers)

    resp = client.delete(f"/api/admin/tutorials/{tutorial['id']}", headers=headers)
    assert resp.status_code == 200
    assert client.get(f"/api/admin/tutorials/{tutorial['id']}", headers=headers).status_code == 404

    versions = client.get(f"/api/admin/content/{tutorial['id']}/versions", headers=headers).json()
    assert len(versions) == 1
    assert versions[0]["content_title"] is None


def test_page_crud_and_public_view(client, seed_users):
    headers = auth_headers(client, "editor001")
    resp = client.post(
        "/api/admin/pages",
        json={"title": "이용 안내", "slug": "guide", "content": "안내문", "meta_description": "안내"},
        headers=headers,
    )
    assert resp.status_code == 200
    page = resp.json()

    resp = client.put(f"/api/admin/pages/{page['id']}", json={"title": "이용 가이드"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["title"] == "이용 가이드"

    assert client.get("/api/pages/guide").status_code == 404
    assert [p["id"] for p in client.get("/api/admin/pages", headers=headers).json()] == [page["id"]]

    versions = client.get(f"/api/admin/content/{page['id']}/versions", headers=headers).json()
    assert [v["title"] for v in versions] == ["이용 가이드", "이용 안내"]
    assert all(v["content_type"] == "page" for v in versions)


def test_missing_content_returns_404(client, seed_users):
    headers = auth_headers(client, "editor001")
    assert client.get("/api/admin/pages/nothing", headers=headers).status_code == 404
    resp = client.put("/api/admin/tutorials/nothing", json={"title": "x"}, headers=headers)
    assert resp.status_code == 404


def test_update_is_discarded_when_version_cannot_be_recorded(client, seed_users, monkeypatch):
    headers = auth_headers(client, "editor001")
    tutorial = _create_tutorial(client, headers)
    monkeypatch.setattr(version_service, "_next_version_number", lambda content_id: 1)

    resp = client.put(
        f"/api/admin/tutorials/{tutorial['id']}",
        json={"content": "두 번째 본문"},
        headers=headers,
    )
    assert resp.status_code == 409
    assert resp.json()["code"] == "concurrency_conflict"

    current = client.get(f"/api/admin/tutorials/{tutorial['id']}", headers=headers).json()
    assert current["content"] == "첫 번째 본문"
    versions = client.get(f"/api/admin/content/{tutorial['id']}/versions", headers=headers).json()
    assert [v["version_number"] for v in versions] == [1]


def test_create_with_invalid_version_metadata_writes_nothing(client, seed_users):
    headers = auth_headers(client, "editor001")
    resp = client.post(
        "/api/admin/tutorials",
        json={"title": "잘못된 메타", "slug": "bad-meta", "content": "본문", "version_metadata": ["x"]},
        headers=headers,
    )
    assert resp.status_code == 422
    listing = client.get("/api/admin/tutorials", headers=headers).json()
    assert all(t["slug"] != "bad-meta" for t in listing)
