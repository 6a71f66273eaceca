"""
测试用户管理
"""


def _user_payload(**overrides) -> dict:
    payload = {
        "fname": "Grace",
        "lname": "Editor",
        "email": "grace@example.com",
        "password": "password123",
        "password_confirmation": "password123",
        "role": "editor",
    }
    payload.update(overrides)
    return payload


async def test_admin_user_crud(client, admin, author):
    admin_user, headers = admin
    author_user, author_headers = author
    await client.post("/api/posts", headers=author_headers, json={"title": "Counted", "body": "Body"})

    response = await client.post("/api/users", headers=headers, json=_user_payload())
    assert response.status_code == 201
    created = response.json()["data"]
    assert created["name"] == "Grace Editor"
    assert created["role"] == "editor"

    response = await client.get("/api/users", headers=headers)
    users = {u["id"]: u for u in response.json()["data"]}
    assert set(users) == {admin_user.id, author_user.id, created["id"]}
    assert users[author_user.id]["articleCount"] == 1
    assert users[created["id"]]["articleCount"] == 0

    response = await client.put(f"/api/users/{created['id']}", headers=headers, json={
        "fname": "Grace", "lname": "Author", "email": "grace.author@example.com", "role": "author"
    })
    assert response.status_code == 200
    assert response.json()["data"]["role"] == "author"

    response = await client.post("/api/login", json={"email": "grace.author@example.com", "password": "password123"})
    assert response.status_code == 200

    response = await client.delete(f"/api/users/{created['id']}", headers=headers)
    assert response.status_code == 200
    assert (await client.get(f"/api/users/{created['id']}", headers=headers)).status_code == 404


async def test_email_conflicts(client, admin, author):
    _, headers = admin
    author_user, _ = author

    response = await client.post("/api/users", headers=headers, json=_user_payload(email=author_user.email.upper()))
    assert response.status_code == 409

    created = (await client.post("/api/users", headers=headers, json=_user_payload())).json()["data"]
    response = await client.put(f"/api/users/{created['id']}", headers=headers, json={
        "fname": "Grace", "lname": "Editor", "email": author_user.email, "role": "editor"
    })
    assert response.status_code == 409


async def test_non_admin_is_forbidden(client, author, viewer):
    _, author_headers = author
    _, viewer_headers = viewer

    assert (await client.get("/api/users", headers=author_headers)).status_code == 403
    assert (await client.post("/api/users", headers=viewer_headers, json=_user_payload())).status_code == 403
    assert (await client.get("/api/users")).status_code == 401


async def test_admin_cannot_delete_self(client, admin):
    admin_user, headers = admin
    response = await client.delete(f"/api/users/{admin_user.id}", headers=headers)
    assert response.status_code == 409


async def test_deleting_author_keeps_posts(client, admin, author):
    _, headers = admin
    author_user, author_headers = author
    post = (await client.post("/api/posts", headers=author_headers, json={"title": "Orphaned", "body": "Body"})).json()["data"]

    response = await client.delete(f"/api/users/{author_user.id}", headers=headers)
    assert response.status_code == 200

    response = await client.get(f"/api/posts/{post['id']}")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["userId"] is None
    assert data["user"] is None


async def test_name_longer_than_column_is_rejected(client, admin, author):
    _, headers = admin
    author_user, author_headers = author
    long_name = "x" * 31

    response = await client.put(f"/api/users/{author_user.id}", headers=headers, json={
        "fname": long_name, "lname": "Writer", "email": author_user.email, "role": "author"
    })
    assert response.status_code == 422

    response = await client.put("/api/me", headers=author_headers, json={"lname": long_name})
    assert response.status_code == 422

    response = await client.put("/api/me", headers=author_headers, json={"number": "1" * 16})
    assert response.status_code == 422


async def test_cached_post_listing_reflects_author_changes(client, admin, author):
    _, headers = admin
    author_user, author_headers = author
    await client.post("/api/posts", headers=author_headers, json={"title": "Cached", "body": "Body"})

    response = await client.get("/api/posts")
    assert response.json()["data"]["items"][0]["user"]["name"] == "Wanjiru Writer"

    await client.put(f"/api/users/{author_user.id}", headers=headers, json={
        "fname": "Wanjiru", "lname": "Editor", "email": author_user.email, "role": "author"
    })
    response = await client.get("/api/posts")
    assert response.json()["data"]["items"][0]["user"]["name"] == "Wanjiru Editor"

    await client.delete(f"/api/users/{author_user.id}", headers=headers)
    response = await client.get("/api/posts")
    assert response.json()["data"]["items"][0]["user"] is None
