"""
测试附件归属与可见性
"""


async def test_owner_and_admin_visibility(client, admin, author, viewer):
    _, admin_headers = admin
    _, author_headers = author
    viewer_user, viewer_headers = viewer

    response = await client.post("/api/attachments", headers=viewer_headers, json={
        "type": "avatar", "url": "https://cdn.example.com/vic.png", "metadata": {"width": 128}
    })
    assert response.status_code == 201
    attachment = response.json()["data"]
    assert attachment["userId"] == viewer_user.id
    assert attachment["metadata"] == {"width": 128}

    assert (await client.get(f"/api/attachments/{attachment['id']}", headers=viewer_headers)).status_code == 200
    assert (await client.get(f"/api/attachments/{attachment['id']}", headers=admin_headers)).status_code == 200
    assert (await client.get(f"/api/attachments/{attachment['id']}", headers=author_headers)).status_code == 403

    response = await client.get("/api/attachments", headers=author_headers)
    assert response.json()["data"] == []
    response = await client.get("/api/attachments", headers=admin_headers)
    assert [a["id"] for a in response.json()["data"]] == [attachment["id"]]

    assert (await client.delete(f"/api/attachments/{attachment['id']}", headers=author_headers)).status_code == 403
    assert (await client.delete(f"/api/attachments/{attachment['id']}", headers=viewer_headers)).status_code == 200
    assert (await client.get(f"/api/attachments/{attachment['id']}", headers=admin_headers)).status_code == 404


async def test_creating_for_other_users(client, admin, viewer):
    _, admin_headers = admin
    viewer_user, viewer_headers = viewer
    payload = {"type": "logo", "url": "https://cdn.example.com/logo.png"}

    response = await client.post("/api/attachments", headers=admin_headers, json={**payload, "userId": viewer_user.id})
    assert response.status_code == 201
    assert response.json()["data"]["userId"] == viewer_user.id

    response = await client.post("/api/attachments", headers=admin_headers, json={**payload, "userId": 9999})
    assert response.status_code == 422

    response = await client.post("/api/attachments", headers=viewer_headers, json={**payload, "userId": viewer_user.id + 100})
    assert response.status_code == 403

    response = await client.post("/api/attachments", headers=viewer_headers, json={**payload, "url": "ftp://bad"})
    assert response.status_code == 422
