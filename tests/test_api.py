"""
HTTP-level tests against the real application factory.

Every request gets its own session, so these also cover commit behavior
and the JSON error envelope.
"""

import pytest


def _create(client, **overrides):
    body = {"title": "Greeting", "content": "Hello {{name}}", **overrides}
    response = client.post("/api/prompts", json=body)
    assert response.status_code == 201, response.text
    return response.json()


# ════════════════════════════════════════════════════════════════════
# Health and middleware
# ════════════════════════════════════════════════════════════════════

class TestHealth:

    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert "timestamp" in body

    def test_request_id_is_echoed(self, client):
        response = client.get("/api/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"

    def test_unknown_route_uses_error_envelope(self, client):
        response = client.get("/api/nope")
        assert response.status_code == 404
        assert "error" in response.json()


# ════════════════════════════════════════════════════════════════════
# Prompts
# ════════════════════════════════════════════════════════════════════

class TestPrompts:

    def test_create_returns_camel_case(self, client):
        prompt = _create(client, description="d", type="code", tags=["py"])

        assert prompt["type"] == "CODE"
        assert prompt["language"] == "EN"
        assert prompt["usageCount"] == 0
        assert prompt["versionCount"] == 1
        assert prompt["executionCount"] == 0
        assert prompt["deletedAt"] is None
        assert [t["name"] for t in prompt["tags"]] == ["py"]

    def test_create_validation_error(self, client):
        response = client.post("/api/prompts", json={"title": "", "content": "x"})
        assert response.status_code == 400
        assert "error" in response.json()

        response = client.post("/api/prompts", json={"title": "t", "content": "x", "type": "POEM"})
        assert response.status_code == 400

    def test_get_detail(self, client):
        prompt = _create(client)

        detail = client.get(f"/api/prompts/{prompt['id']}").json()
        assert detail["id"] == prompt["id"]
        assert [v["versionNumber"] for v in detail["versions"]] == [1]
        assert detail["executions"] == []

    def test_missing_prompt(self, client):
        response = client.get("/api/prompts/missing")
        assert response.status_code == 404
        assert response.json() == {"error": "Prompt not found"}

        assert client.patch("/api/prompts/missing", json={"title": "x"}).status_code == 404
        assert client.delete("/api/prompts/missing").status_code == 404
        assert client.post("/api/prompts/missing/duplicate").status_code == 404
        assert client.post("/api/prompts/missing/use").status_code == 404

    def test_update_with_new_content_adds_version(self, client):
        prompt = _create(client)

        updated = client.patch(f"/api/prompts/{prompt['id']}", json={"content": "Bye {{name}}", "tags": ["a"]})
        assert updated.status_code == 200
        assert updated.json()["versionCount"] == 2
        assert [t["name"] for t in updated.json()["tags"]] == ["a"]

        same = client.patch(f"/api/prompts/{prompt['id']}", json={"content": "Bye {{name}}"})
        assert same.json()["versionCount"] == 2

    def test_update_rejects_null_title(self, client):
        prompt = _create(client)
        response = client.patch(f"/api/prompts/{prompt['id']}", json={"title": None})
        assert response.status_code == 400

    def test_delete_is_soft(self, client):
        prompt = _create(client)

        assert client.delete(f"/api/prompts/{prompt['id']}").status_code == 204

        listing = client.get("/api/prompts").json()
        assert listing["data"] == []
        assert listing["meta"]["total"] == 0
        detail = client.get(f"/api/prompts/{prompt['id']}").json()
        assert detail["deletedAt"] is not None

    def test_duplicate_and_use(self, client):
        prompt = _create(client, tags=["x"])

        copy = client.post(f"/api/prompts/{prompt['id']}/duplicate")
        assert copy.status_code == 201
        assert copy.json()["title"] == "Greeting (Copy)"

        assert client.post(f"/api/prompts/{prompt['id']}/use").status_code == 204
        assert client.get(f"/api/prompts/{prompt['id']}").json()["usageCount"] == 1

    def test_list_filters_sorting_and_paging(self, client):
        for title in ["b", "a", "c"]:
            _create(client, title=title)
        _create(client, title="fa", language="fa", tags=["persian"])

        page = client.get("/api/prompts", params={"sortBy": "title", "sortOrder": "asc", "limit": 2}).json()
        assert [p["title"] for p in page["data"]] == ["a", "b"]
        assert page["meta"] == {"total": 4, "limit": 2, "offset": 0, "hasMore": True}

        by_language = client.get("/api/prompts", params={"language": "FA"}).json()
        assert [p["title"] for p in by_language["data"]] == ["fa"]

        by_tag = client.get("/api/prompts", params={"tags": "persian"}).json()
        assert [p["title"] for p in by_tag["data"]] == ["fa"]

        by_types = client.get("/api/prompts", params=[("type", "TEXT"), ("type", "CODE")]).json()
        assert by_types["meta"]["total"] == 4

    def test_invalid_sort_field(self, client):
        response = client.get("/api/prompts", params={"sortBy": "content"})
        assert response.status_code == 400
        assert "error" in response.json()


# ════════════════════════════════════════════════════════════════════
# Tags
# ════════════════════════════════════════════════════════════════════

class TestTags:

    def test_crud_and_conflict(self, client):
        created = client.post("/api/tags", json={"name": "python", "color": "#3776AB"})
        assert created.status_code == 201
        tag = created.json()
        assert tag["promptCount"] == 0

        conflict = client.post("/api/tags", json={"name": "python"})
        assert conflict.status_code == 409
        assert conflict.json() == {"error": "Tag with name 'python' already exists"}

        renamed = client.patch(f"/api/tags/{tag['id']}", json={"name": "py"})
        assert renamed.json()["name"] == "py"

        assert client.delete(f"/api/tags/{tag['id']}").status_code == 204
        assert client.get(f"/api/tags/{tag['id']}").status_code == 404

    def test_bad_color(self, client):
        assert client.post("/api/tags", json={"name": "x", "color": "red"}).status_code == 400

    def test_delete_detaches_from_prompts(self, client):
        prompt = _create(client, tags=["temp", "keep"])
        tags = {t["name"]: t for t in client.get("/api/tags").json()}
        assert tags["temp"]["promptCount"] == 1

        client.delete(f"/api/tags/{tags['temp']['id']}")

        detail = client.get(f"/api/prompts/{prompt['id']}").json()
        assert [t["name"] for t in detail["tags"]] == ["keep"]


# ════════════════════════════════════════════════════════════════════
# Versions, executions, search
# ════════════════════════════════════════════════════════════════════

class TestVersions:

    def test_create_list_and_restore(self, client):
        prompt = _create(client, content="one")
        created = client.post("/api/versions", json={"promptId": prompt["id"], "content": "two"})
        assert created.status_code == 201
        assert created.json()["versionNumber"] == 2

        versions = client.get(f"/api/versions/prompt/{prompt['id']}").json()
        first = [v for v in versions if v["versionNumber"] == 1][0]

        restored = client.post(f"/api/versions/{first['id']}/restore")
        assert restored.status_code == 200
        body = restored.json()
        assert body["success"] is True
        assert body["restoredFrom"] == 1
        assert body["version"]["versionNumber"] == 3

        detail = client.get(f"/api/versions/{first['id']}").json()
        assert detail["prompt"]["content"] == "one"

    def test_missing_version(self, client):
        assert client.get("/api/versions/missing").status_code == 404
        assert client.post("/api/versions/missing/restore").status_code == 404
        missing_prompt = client.post("/api/versions", json={"promptId": "missing", "content": "x"})
        assert missing_prompt.status_code == 404


class TestExecutions:

    def test_execute_success(self, client):
        prompt = _create(client)

        response = client.post(
            "/api/executions/execute", json={"promptId": prompt["id"], "parameters": {"name": "Bob"}}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["output"] == "Hello Bob"
        assert "error" not in body
        assert set(body["metadata"]) == {"duration", "executionId"}

        history = client.get(f"/api/executions/prompt/{prompt['id']}").json()
        assert [e["status"] for e in history] == ["SUCCESS"]
        assert client.get(f"/api/prompts/{prompt['id']}").json()["usageCount"] == 1

    def test_execute_missing_prompt_is_recorded(self, client):
        response = client.post("/api/executions/execute", json={"promptId": "ghost"})

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Prompt not found"

        execution = client.get(f"/api/executions/{body['metadata']['executionId']}").json()
        assert execution["status"] == "FAILED"
        assert execution["prompt"] is None


class TestSearch:

    def test_text_search(self, client):
        _create(client, title="Email writer")
        _create(client, title="Other", content="nothing")

        response = client.get("/api/search/text", params={"query": "email"})
        assert response.status_code == 200
        body = response.json()
        assert [hit["prompt"]["title"] for hit in body["data"]] == ["Email writer"]
        assert body["data"][0]["score"] == 0.5
        assert body["meta"]["total"] == 1

    def test_query_is_required(self, client):
        response = client.get("/api/search/text")
        assert response.status_code == 400
        assert response.json() == {"error": "Query parameter is required"}

    def test_semantic_search(self, client):
        for i in range(3):
            _create(client, title=f"note {i}")

        hits = client.get("/api/search/semantic", params={"query": "note", "limit": 2}).json()
        assert len(hits) == 2
        assert client.get("/api/search/semantic", params={"query": "note", "limit": 0}).status_code == 400


# ════════════════════════════════════════════════════════════════════
# Settings and images
# ════════════════════════════════════════════════════════════════════

class TestSettings:

    def test_put_get(self, client):
        assert client.get("/api/settings").json() == {}
        assert client.get("/api/settings/theme").status_code == 404

        written = client.put("/api/settings/theme", json={"value": {"mode": "dark"}})
        assert written.status_code == 200
        assert written.json()["value"] == {"mode": "dark"}

        assert client.get("/api/settings/theme").json() == {"key": "theme", "value": {"mode": "dark"}}
        assert client.get("/api/settings").json() == {"theme": {"mode": "dark"}}


class TestImages:

    def test_upload_list_serve_delete(self, client, image_bytes):
        prompt = _create(client)

        response = client.post(
            f"/api/prompts/{prompt['id']}/images",
            files={"image": ("my photo.png", image_bytes(80, 60), "image/png")},
        )
        assert response.status_code == 201, response.text
        image = response.json()
        assert image["filename"] == "my_photo.png"
        assert image["width"] == 80
        assert image["height"] == 60
        assert image["path"].startswith("uploads/images/")
        assert "\\" not in image["thumbnail"]

        listed = client.get(f"/api/prompts/{prompt['id']}/images").json()
        assert [i["id"] for i in listed["data"]] == [image["id"]]

        assert client.get(f"/{image['path']}").status_code == 200
        assert client.get(f"/{image['thumbnail']}").status_code == 200

        assert client.delete(f"/api/images/{image['id']}").status_code == 204
        assert client.get(f"/{image['path']}").status_code == 404
        assert client.delete(f"/api/images/{image['id']}").status_code == 404

    def test_upload_rejections(self, client, image_bytes):
        prompt = _create(client)
        url = f"/api/prompts/{prompt['id']}/images"

        bad_type = client.post(url, files={"file": ("a.bmp", image_bytes(), "image/bmp")})
        assert bad_type.status_code == 400
        assert bad_type.json()["error"].startswith("Unsupported image type")

        no_file = client.post(url, data={"note": "hi"})
        assert no_file.status_code == 400

        missing = client.post(
            "/api/prompts/missing/images", files={"file": ("a.png", image_bytes(), "image/png")}
        )
        assert missing.status_code == 404

    def test_upload_to_deleted_prompt(self, client, image_bytes):
        prompt = _create(client)
        client.delete(f"/api/prompts/{prompt['id']}")

        response = client.post(
            f"/api/prompts/{prompt['id']}/images", files={"file": ("a.png", image_bytes(), "image/png")}
        )
        assert response.status_code == 404
