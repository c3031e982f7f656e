"""
Notekeep Backend: /api/tags Endpoint Tests
============================================

What we test:
    ✅ 401 without a session
    ✅ Names are unique per user, not globally
    ✅ Missing / blank names are 400
    ✅ List is alphabetical with `_count.notes`
    ✅ Rename: 404 for foreign tags, conflict only against *other* tags
    ✅ Delete detaches the tag from notes without touching them
    ✅ A failed commit is a 500 and leaves the tag set unchanged
"""

from unittest.mock import AsyncMock, patch

import pytest

from conftest import ALICE, BOB


async def _create_tag(client, headers, name):
    response = await client.post("/api/tags", json={"name": name}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestTagAuth:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/tags"),
            ("POST", "/api/tags"),
            ("PATCH", "/api/tags/t1"),
            ("DELETE", "/api/tags/t1"),
        ],
    )
    async def test_no_session_is_401(self, test_client, method, path):
        kwargs = {"json": {"name": "x"}} if method in ("POST", "PATCH") else {}
        response = await test_client.request(method, path, **kwargs)

        assert response.status_code == 401
        assert response.json()["error"] == "Unauthorized"


class TestCreateTag:

    @pytest.mark.asyncio
    async def test_create(self, test_client, auth_headers):
        response = await test_client.post("/api/tags", json={"name": "Work"}, headers=auth_headers(ALICE))

        assert response.status_code == 201
        tag = response.json()
        assert tag["name"] == "Work"
        assert tag["userId"] == ALICE
        assert tag["id"]

    @pytest.mark.asyncio
    async def test_duplicate_for_same_user_is_400(self, test_client, auth_headers):
        headers = auth_headers(ALICE)
        await _create_tag(test_client, headers, "Work")

        response = await test_client.post("/api/tags", json={"name": "Work"}, headers=headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Tag already exists"

    @pytest.mark.asyncio
    async def test_same_name_for_another_user_is_fine(self, test_client, auth_headers):
        await _create_tag(test_client, auth_headers(ALICE), "Work")

        response = await test_client.post("/api/tags", json={"name": "Work"}, headers=auth_headers(BOB))

        assert response.status_code == 201
        assert response.json()["userId"] == BOB

    @pytest.mark.asyncio
    async def test_surrounding_whitespace_is_ignored(self, test_client, auth_headers):
        """Names are stored trimmed, so a padded copy of an existing name collides."""
        headers = auth_headers(ALICE)
        created = await _create_tag(test_client, headers, "  Work ")
        assert created["name"] == "Work"

        response = await test_client.post("/api/tags", json={"name": " Work"}, headers=headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Tag already exists"
        assert "details" not in response.json()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"name": ""}, {"name": "   "}, {"name": None}])
    async def test_missing_name_is_400(self, test_client, auth_headers, body):
        response = await test_client.post("/api/tags", json=body, headers=auth_headers(ALICE))

        assert response.status_code == 400
        assert response.json()["error"] == "Tag name is required"


class TestListTags:

    @pytest.mark.asyncio
    async def test_alphabetical_with_counts(self, test_client, auth_headers):
        headers = auth_headers(ALICE)
        zeta = await _create_tag(test_client, headers, "zeta")
        alpha = await _create_tag(test_client, headers, "alpha")
        await _create_tag(test_client, auth_headers(BOB), "bob's")

        for _ in range(2):
            await test_client.post("/api/notes", json={"tagIds": [zeta["id"]]}, headers=headers)
        await test_client.post("/api/notes", json={"tagIds": [zeta["id"], alpha["id"]]}, headers=headers)

        response = await test_client.get("/api/tags", headers=headers)

        assert response.status_code == 200
        tags = response.json()
        assert [(t["name"], t["_count"]["notes"]) for t in tags] == [("alpha", 1), ("zeta", 3)]

    @pytest.mark.asyncio
    async def test_empty(self, test_client, auth_headers):
        response = await test_client.get("/api/tags", headers=auth_headers(BOB))
        assert response.json() == []


class TestRenameTag:

    @pytest.mark.asyncio
    async def test_rename(self, test_client, auth_headers):
        headers = auth_headers(ALICE)
        tag = await _create_tag(test_client, headers, "Wrok")

        response = await test_client.patch(f"/api/tags/{tag['id']}", json={"name": "Work"}, headers=headers)

        assert response.status_code == 200
        assert response.json()["name"] == "Work"
        assert response.json()["id"] == tag["id"]

    @pytest.mark.asyncio
    async def test_rename_to_own_name(self, test_client, auth_headers):
        headers = auth_headers(ALICE)
        tag = await _create_tag(test_client, headers, "Work")

        response = await test_client.patch(f"/api/tags/{tag['id']}", json={"name": "Work"}, headers=headers)

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_rename_collision_is_400(self, test_client, auth_headers):
        headers = auth_headers(ALICE)
        await _create_tag(test_client, headers, "Home")
        tag = await _create_tag(test_client, headers, "Work")

        response = await test_client.patch(f"/api/tags/{tag['id']}", json={"name": "Home"}, headers=headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Tag with this name already exists"

    @pytest.mark.asyncio
    async def test_rename_foreign_tag_is_404(self, test_client, auth_headers):
        tag = await _create_tag(test_client, auth_headers(ALICE), "Work")

        response = await test_client.patch(
            f"/api/tags/{tag['id']}", json={"name": "Stolen"}, headers=auth_headers(BOB)
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Tag not found"

    @pytest.mark.asyncio
    async def test_rename_without_name_is_400(self, test_client, auth_headers):
        headers = auth_headers(ALICE)
        tag = await _create_tag(test_client, headers, "Work")

        response = await test_client.patch(f"/api/tags/{tag['id']}", json={}, headers=headers)

        assert response.status_code == 400


class TestDeleteTag:

    @pytest.mark.asyncio
    async def test_delete_detaches_from_notes(self, test_client, auth_headers):
        headers = auth_headers(ALICE)
        keep = await _create_tag(test_client, headers, "keep")
        drop = await _create_tag(test_client, headers, "drop")
        created = await test_client.post(
            "/api/notes",
            json={"title": "tagged", "tagIds": [keep["id"], drop["id"]]},
            headers=headers,
        )
        note_id = created.json()["id"]

        response = await test_client.delete(f"/api/tags/{drop['id']}", headers=headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Tag deleted successfully"}

        note = (await test_client.get(f"/api/notes/{note_id}", headers=headers)).json()
        assert note["title"] == "tagged"
        assert [t["id"] for t in note["tags"]] == [keep["id"]]

        names = [t["name"] for t in (await test_client.get("/api/tags", headers=headers)).json()]
        assert names == ["keep"]

    @pytest.mark.asyncio
    async def test_delete_foreign_tag_is_404(self, test_client, auth_headers):
        tag = await _create_tag(test_client, auth_headers(ALICE), "Work")

        response = await test_client.delete(f"/api/tags/{tag['id']}", headers=auth_headers(BOB))

        assert response.status_code == 404

        still = await test_client.get("/api/tags", headers=auth_headers(ALICE))
        assert [t["id"] for t in still.json()] == [tag["id"]]


class TestTagCommitFailure:

    @pytest.mark.asyncio
    async def test_create_tag_commit_failure(self, test_client, auth_headers):
        headers = auth_headers(ALICE)

        with patch(
            "sqlalchemy.ext.asyncio.AsyncSession.commit",
            new=AsyncMock(side_effect=RuntimeError("disk full")),
        ):
            response = await test_client.post("/api/tags", json={"name": "Work"}, headers=headers)

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to create tag"

        listed = await test_client.get("/api/tags", headers=headers)
        assert listed.json() == []

    @pytest.mark.asyncio
    async def test_rename_commit_failure(self, test_client, auth_headers):
        headers = auth_headers(ALICE)
        tag = await _create_tag(test_client, headers, "Work")

        with patch(
            "sqlalchemy.ext.asyncio.AsyncSession.commit",
            new=AsyncMock(side_effect=RuntimeError("disk full")),
        ):
            response = await test_client.patch(f"/api/tags/{tag['id']}", json={"name": "Home"}, headers=headers)

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to update tag"

        names = [t["name"] for t in (await test_client.get("/api/tags", headers=headers)).json()]
        assert names == ["Work"]


@pytest.mark.asyncio
async def test_tag_timestamps_are_utc(test_client, auth_headers):
    headers = auth_headers(ALICE)
    created = await _create_tag(test_client, headers, "Work")
    listed = (await test_client.get("/api/tags", headers=headers)).json()[0]

    for tag in (created, listed):
        assert tag["createdAt"].endswith("Z")
        assert tag["updatedAt"].endswith("Z")
