"""
Integration Tests for the group endpoints.

A study group shares U1's note with U2; U2 may read it and nothing more.
"""

API = "/api/v1"


async def study_group(client, owner, member, **group_fields):
    response = await client.post(
        f"{API}/groups",
        json={"name": "Study Group", **group_fields},
        headers=owner.headers,
    )
    assert response.status_code == 201, response.text
    group = response.json()["data"]
    response = await client.post(
        f"{API}/groups/{group['id']}/members",
        json={"user_id": member.id},
        headers=owner.headers,
    )
    assert response.status_code == 201, response.text
    return group


class TestSharing:

    async def test_member_reads_shared_note_but_cannot_modify(self, client, api, register):
        u1 = await register("U1")
        u2 = await register("U2")
        group = await study_group(client, u1, u2)
        created = await client.post(f"{API}/notes", json={"title": "Lecture 1"}, headers=u1.headers)
        note_id = created.json()["data"]["id"]

        shared = await client.post(
            f"{API}/groups/{group['id']}/notes",
            json={"note_id": note_id},
            headers=u1.headers,
        )
        assert api.assert_success(shared, 201)["data"]["note_id"] == note_id

        read = await client.get(f"{API}/notes/{note_id}", headers=u2.headers)
        assert api.assert_success(read)["data"]["title"] == "Lecture 1"

        update = await client.put(
            f"{API}/notes/{note_id}", json={"title": "Hijacked"}, headers=u2.headers,
        )
        api.assert_error(update, 403, "AUTHZ_FORBIDDEN")
        delete = await client.delete(f"{API}/notes/{note_id}", headers=u2.headers)
        api.assert_error(delete, 403, "AUTHZ_FORBIDDEN")

        listed = await client.get(f"{API}/groups/{group['id']}/notes", headers=u2.headers)
        assert [n["id"] for n in api.assert_success(listed)["data"]] == [note_id]

    async def test_unshare_revokes_access(self, client, api, register):
        u1 = await register("U1")
        u2 = await register("U2")
        group = await study_group(client, u1, u2)
        created = await client.post(f"{API}/notes", json={"title": "Lecture 1"}, headers=u1.headers)
        note_id = created.json()["data"]["id"]
        await client.post(
            f"{API}/groups/{group['id']}/notes", json={"note_id": note_id}, headers=u1.headers,
        )

        response = await client.delete(
            f"{API}/groups/{group['id']}/notes/{note_id}", headers=u1.headers,
        )

        assert response.status_code == 204
        read = await client.get(f"{API}/notes/{note_id}", headers=u2.headers)
        api.assert_error(read, 404, "RES_NOT_FOUND")

    async def test_share_twice_conflicts(self, client, api, register):
        u1 = await register("U1")
        u2 = await register("U2")
        group = await study_group(client, u1, u2)
        created = await client.post(f"{API}/notes", json={"title": "Lecture 1"}, headers=u1.headers)
        note_id = created.json()["data"]["id"]
        url = f"{API}/groups/{group['id']}/notes"
        await client.post(url, json={"note_id": note_id}, headers=u1.headers)

        response = await client.post(url, json={"note_id": note_id}, headers=u1.headers)

        api.assert_error(response, 409, "RES_CONFLICT")


class TestGroups:

    async def test_detail_and_list(self, client, api, register):
        u1 = await register("U1")
        u2 = await register("U2")
        group = await study_group(client, u1, u2, description="Calculus")

        detail = await client.get(f"{API}/groups/{group['id']}", headers=u2.headers)
        data = api.assert_success(detail)["data"]
        assert data["description"] == "Calculus"
        assert {(m["user"]["name"], m["role"]) for m in data["members"]} == {
            ("U1", "admin"),
            ("U2", "member"),
        }

        listed = await client.get(f"{API}/groups", headers=u2.headers)
        data = api.assert_success(listed)["data"]
        assert data["owned"] == []
        assert [g["id"] for g in data["member"]] == [group["id"]]

    async def test_member_cannot_update_or_delete_group(self, client, api, register):
        u1 = await register("U1")
        u2 = await register("U2")
        group = await study_group(client, u1, u2)

        update = await client.put(
            f"{API}/groups/{group['id']}", json={"name": "Ours"}, headers=u2.headers,
        )
        delete = await client.delete(f"{API}/groups/{group['id']}", headers=u2.headers)

        api.assert_error(update, 403, "AUTHZ_FORBIDDEN")
        api.assert_error(delete, 403, "AUTHZ_FORBIDDEN")

    async def test_private_group_is_hidden_from_outsiders(self, client, api, register):
        u1 = await register("U1")
        u2 = await register("U2")
        u3 = await register("U3")
        private = await study_group(client, u1, u2, is_private=True)
        public = await study_group(client, u1, u2)

        hidden = await client.get(f"{API}/groups/{private['id']}", headers=u3.headers)
        forbidden = await client.get(f"{API}/groups/{public['id']}", headers=u3.headers)

        api.assert_error(hidden, 404, "RES_NOT_FOUND")
        api.assert_error(forbidden, 403, "AUTHZ_FORBIDDEN")

    async def test_member_leaves(self, client, api, register):
        u1 = await register("U1")
        u2 = await register("U2")
        group = await study_group(client, u1, u2)

        response = await client.delete(
            f"{API}/groups/{group['id']}/members/{u2.id}", headers=u2.headers,
        )

        assert response.status_code == 204
        detail = await client.get(f"{API}/groups/{group['id']}", headers=u2.headers)
        api.assert_error(detail, 403, "AUTHZ_FORBIDDEN")

    async def test_unknown_role_is_rejected(self, client, api, register):
        u1 = await register("U1")
        u2 = await register("U2")
        created = await client.post(f"{API}/groups", json={"name": "Study Group"}, headers=u1.headers)
        group_id = created.json()["data"]["id"]

        response = await client.post(
            f"{API}/groups/{group_id}/members",
            json={"user_id": u2.id, "role": "moderator"},
            headers=u1.headers,
        )

        api.assert_validation_error(response, "role")
