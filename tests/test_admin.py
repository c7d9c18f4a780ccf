import pytest

from conftest import approve, auth, create_group, register


@pytest.mark.asyncio
async def test_admin_endpoints_require_admin(client):
    token, _ = await register(client, "Alice")

    for method, url in [
        ("get", "/api/v1/admin/groups"),
        ("get", "/api/v1/admin/approved-groups"),
        ("put", "/api/v1/admin/groups/1/approve"),
        ("get", "/api/v1/admin/users-for-notification"),
        ("get", "/api/v1/users/"),
        ("put", "/api/v1/users/1/block"),
    ]:
        res = await client.request(method.upper(), url, headers=auth(token))
        assert res.status_code == 403, url
        assert res.json()["message"] == "Admin access required"


@pytest.mark.asyncio
async def test_approve_notifies_creator(client, admin_token, notifier):
    token, user = await register(client, "Alice")
    group = await create_group(client, token)

    body = await approve(client, admin_token, group["id"])

    assert body["group"]["status"] == "approved"
    assert body["notification_sent"] is True
    assert body["notification_data"]["user_email"] == user["email"]
    assert body["notification_data"]["status"] == "approved"
    assert len(notifier.status_mails) == 1
    assert notifier.status_mails[0].group_title == group["title"]


@pytest.mark.asyncio
async def test_reject_hides_group_from_listing(client, admin_token, notifier):
    token, _ = await register(client, "Alice")
    group = await create_group(client, token)

    res = await client.put(f"/api/v1/admin/groups/{group['id']}/reject", headers=auth(admin_token))
    assert res.status_code == 200
    assert res.json()["group"]["status"] == "rejected"
    assert notifier.status_mails[-1].status == "rejected"

    public = await client.get("/api/v1/groups/")
    assert group["id"] not in [g["id"] for g in public.json()]

    approved = await client.get("/api/v1/admin/approved-groups", headers=auth(admin_token))
    assert group["id"] not in [g["id"] for g in approved.json()]

    everything = await client.get("/api/v1/admin/groups", headers=auth(admin_token))
    assert group["id"] in [g["id"] for g in everything.json()]


@pytest.mark.asyncio
async def test_decided_group_can_be_decided_again(client, admin_token, notifier):
    token, _ = await register(client, "Alice")
    group = await create_group(client, token)

    await approve(client, admin_token, group["id"])
    res = await client.put(f"/api/v1/admin/groups/{group['id']}/reject", headers=auth(admin_token))

    assert res.status_code == 200
    assert res.json()["group"]["status"] == "rejected"
    assert len(notifier.status_mails) == 2


@pytest.mark.asyncio
async def test_approve_missing_group(client, admin_token, notifier):
    res = await client.put("/api/v1/admin/groups/4242/approve", headers=auth(admin_token))

    assert res.status_code == 404
    assert notifier.status_mails == []


@pytest.mark.asyncio
async def test_group_users(client, admin_token):
    alice, alice_user = await register(client, "Alice")
    bob, bob_user = await register(client, "Bob")
    group = await create_group(client, alice)
    await approve(client, admin_token, group["id"])
    await client.post(f"/api/v1/groups/{group['id']}/join", headers=auth(bob))

    res = await client.get(f"/api/v1/admin/groups/{group['id']}/users", headers=auth(admin_token))

    assert res.status_code == 200
    assert {u["email"] for u in res.json()} == {alice_user["email"], bob_user["email"]}


@pytest.mark.asyncio
async def test_users_for_notification_skips_admins_and_blocked(client, admin_token):
    _, alice = await register(client, "Alice")
    _, bob = await register(client, "Bob")
    await client.put(f"/api/v1/users/{bob['id']}/block", headers=auth(admin_token))

    res = await client.get("/api/v1/admin/users-for-notification", headers=auth(admin_token))

    assert [u["id"] for u in res.json()] == [alice["id"]]


@pytest.mark.asyncio
async def test_block_and_unblock(client, admin_token):
    _, alice = await register(client, "Alice")

    blocked = await client.put(f"/api/v1/users/{alice['id']}/block", headers=auth(admin_token))
    assert blocked.json()["is_blocked"] is True

    unblocked = await client.put(f"/api/v1/users/{alice['id']}/unblock", headers=auth(admin_token))
    assert unblocked.json()["is_blocked"] is False

    login = await client.post("/api/v1/auth/login", json={"email": alice["email"], "password": "secret123"})
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_admin_accounts_are_protected(client, admin_token):
    me = await client.get("/api/v1/auth/me", headers=auth(admin_token))
    admin_id = me.json()["id"]

    res = await client.delete(f"/api/v1/users/{admin_id}", headers=auth(admin_token))
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_delete_user_cascades(client, admin_token):
    alice, alice_user = await register(client, "Alice")
    bob, bob_user = await register(client, "Bob")

    bobs_group = await create_group(client, bob, title="Bob's group")
    alices_group = await create_group(client, alice, title="Alice's group")
    await approve(client, admin_token, bobs_group["id"])
    await approve(client, admin_token, alices_group["id"])

    await client.post(f"/api/v1/groups/{bobs_group['id']}/join", headers=auth(alice))
    await client.post(f"/api/v1/groups/{alices_group['id']}/join", headers=auth(bob))
    await client.post(f"/api/v1/groups/{alices_group['id']}/messages", json={"content": "hello"}, headers=auth(bob))
    await client.post(
        f"/api/v1/groups/{alices_group['id']}/materials",
        json={"title": "Notes", "url": "https://example.com/n"},
        headers=auth(bob),
    )

    res = await client.delete(f"/api/v1/users/{bob_user['id']}", headers=auth(admin_token))
    assert res.status_code == 200
    assert res.json()["deleted_groups"] == 1

    gone = await client.get(f"/api/v1/groups/{bobs_group['id']}", headers=auth(alice))
    assert gone.status_code == 404

    remaining = await client.get(f"/api/v1/groups/{alices_group['id']}", headers=auth(alice))
    body = remaining.json()
    assert [m["id"] for m in body["members"]] == [alice_user["id"]]
    assert body["messages"][0]["user"] is None
    assert body["materials"][0]["uploader"] is None

    profile = await client.get("/api/v1/users/profile", headers=auth(alice))
    assert [g["id"] for g in profile.json()["joined_groups"]] == [alices_group["id"]]

    users = await client.get("/api/v1/users/", headers=auth(admin_token))
    assert bob_user["id"] not in [u["id"] for u in users.json()]


@pytest.mark.asyncio
async def test_delete_missing_user(client, admin_token):
    res = await client.delete("/api/v1/users/777", headers=auth(admin_token))
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_broadcast_to_group_members(client, admin_token, notifier):
    alice, alice_user = await register(client, "Alice")
    bob, bob_user = await register(client, "Bob")
    await register(client, "Carol")
    group = await create_group(client, alice)
    await approve(client, admin_token, group["id"])
    await client.post(f"/api/v1/groups/{group['id']}/join", headers=auth(bob))

    res = await client.post("/api/v1/admin/notifications", json={
        "recipient_type": "group",
        "group_id": group["id"],
        "subject": "Exam moved",
        "message": "The exam is now on Friday",
    }, headers=auth(admin_token))

    assert res.status_code == 200
    assert res.json() == {"sent": 2, "failed": 0, "total": 2}
    users, subject, _ = notifier.broadcasts[0]
    assert {u.id for u in users} == {alice_user["id"], bob_user["id"]}
    assert subject == "Exam moved"


@pytest.mark.asyncio
async def test_broadcast_selected_requires_ids(client, admin_token):
    res = await client.post("/api/v1/admin/notifications", json={
        "recipient_type": "selected",
        "subject": "Hi",
        "message": "Hello",
    }, headers=auth(admin_token))

    assert res.status_code == 400


@pytest.mark.asyncio
async def test_broadcast_all(client, admin_token, notifier):
    await register(client, "Alice")
    await register(client, "Bob")

    res = await client.post("/api/v1/admin/notifications", json={
        "recipient_type": "all",
        "subject": "Maintenance",
        "message": "Down tonight",
    }, headers=auth(admin_token))

    assert res.json()["total"] == 2
