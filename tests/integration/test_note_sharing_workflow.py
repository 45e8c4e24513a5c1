"""End-to-end note lifecycle through the HTTP API."""

import pytest


pytestmark = pytest.mark.integration


class TestNoteSharingWorkflow:
    async def test_share_read_then_delete(self, client, owner, reader, auth_headers):
        owner_h, reader_h = auth_headers(owner), auth_headers(reader)

        # owner creates a private note
        resp = await client.post(
            "/api/notes/", json={"title": "T", "content": "c", "is_public": False}, headers=owner_h
        )
        assert resp.status_code == 201
        note_id = resp.json()["id"]

        # hidden from the reader until shared
        assert (await client.get(f"/api/notes/{note_id}", headers=reader_h)).status_code == 404

        resp = await client.post(
            "/api/sharing/",
            json={"note_id": note_id, "email": "rick@example.com", "permission": "read"},
            headers=owner_h,
        )
        assert resp.status_code == 201
        assert resp.json()["shared_with_name"] == "Rick Reader"

        resp = await client.get(f"/api/notes/{note_id}", headers=reader_h)
        assert resp.status_code == 200
        body = resp.json()
        assert body["can_edit"] is False
        assert body["author_name"] == "Olivia Owner"

        shared = (await client.get("/api/notes/shared", headers=reader_h)).json()
        assert [n["id"] for n in shared] == [note_id]
        assert shared[0]["permission"] == "read"

        resp = await client.put(f"/api/notes/{note_id}", json={"content": "x"}, headers=reader_h)
        assert resp.status_code == 403
        assert resp.json()["error"] == "AuthorizationError"

        assert (await client.delete(f"/api/notes/{note_id}", headers=owner_h)).status_code == 204
        assert (await client.get("/api/notes/shared", headers=reader_h)).json() == []
        assert (await client.get(f"/api/notes/{note_id}", headers=owner_h)).status_code == 404

    async def test_write_share_allows_edit_but_not_visibility(
        self, client, owner, writer, auth_headers
    ):
        owner_h, writer_h = auth_headers(owner), auth_headers(writer)
        note_id = (
            await client.post("/api/notes/", json={"title": "Draft", "is_public": False}, headers=owner_h)
        ).json()["id"]
        await client.post(
            "/api/sharing/",
            json={"note_id": note_id, "email": "WENDY@example.com", "permission": "write"},
            headers=owner_h,
        )

        resp = await client.put(
            f"/api/notes/{note_id}",
            json={"content": "edited", "is_public": True},
            headers=writer_h,
        )
        assert resp.status_code == 204

        note = (await client.get(f"/api/notes/{note_id}", headers=owner_h)).json()
        assert note["content"] == "edited"
        assert note["is_public"] is False
        assert note["last_edited_by_id"] == str(writer.id)

    async def test_reshare_changes_permission_and_revoke(self, client, owner, reader, auth_headers):
        owner_h, reader_h = auth_headers(owner), auth_headers(reader)
        note_id = (
            await client.post("/api/notes/", json={"title": "N", "is_public": False}, headers=owner_h)
        ).json()["id"]
        share = {"note_id": note_id, "email": "rick@example.com", "permission": "read"}

        first = (await client.post("/api/sharing/", json=share, headers=owner_h)).json()
        second = (
            await client.post("/api/sharing/", json={**share, "permission": "write"}, headers=owner_h)
        ).json()
        assert first["id"] == second["id"]
        assert second["permission"] == "write"

        grants = (await client.get(f"/api/sharing/notes/{note_id}", headers=owner_h)).json()
        assert len(grants) == 1

        assert (await client.get(f"/api/notes/{note_id}", headers=reader_h)).json()["can_edit"] is True

        assert (await client.delete(f"/api/sharing/{first['id']}", headers=owner_h)).status_code == 204
        assert (await client.get(f"/api/notes/{note_id}", headers=reader_h)).status_code == 404

    async def test_public_feed_and_owned_list(self, client, owner, auth_headers):
        owner_h = auth_headers(owner)
        await client.post("/api/notes/", json={"title": "Open"}, headers=owner_h)
        await client.post("/api/notes/", json={"title": "Closed", "is_public": False}, headers=owner_h)

        public = (await client.get("/api/notes/public")).json()
        assert [n["title"] for n in public] == ["Open"]
        assert public[0]["author_name"] == "Olivia Owner"

        owned = (await client.get("/api/notes/", headers=owner_h)).json()
        assert {n["title"] for n in owned} == {"Open", "Closed"}
        assert (await client.get("/api/notes/")).json() == []
