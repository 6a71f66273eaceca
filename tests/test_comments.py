"""
测试评论审核与公开可见性
"""
from sqlalchemy import select, func

from app.models.comment import Comment


async def _create_post(client, headers) -> int:
    response = await client.post("/api/posts", headers=headers, json={
        "title": "Comment Target", "body": "Body", "status": "published"
    })
    return response.json()["data"]["id"]


async def _comment(client, headers, post_id, body, parent_id=None) -> dict:
    payload = {"postId": post_id, "body": body}
    if parent_id is not None:
        payload["parentCommentId"] = parent_id
    response = await client.post("/api/comments", headers=headers, json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def _public(client, post_id) -> list:
    response = await client.get(f"/api/posts/{post_id}/comments")
    assert response.status_code == 200
    return response.json()["data"]


async def test_only_approved_comments_are_public(client, admin, author, viewer):
    _, admin_headers = admin
    _, author_headers = author
    _, viewer_headers = viewer
    post_id = await _create_post(client, author_headers)

    pending = await _comment(client, viewer_headers, post_id, "Pending comment")
    spam = await _comment(client, viewer_headers, post_id, "Buy now")
    assert pending["status"] == "pending"
    assert await _public(client, post_id) == []

    response = await client.patch(f"/api/comments/{spam['id']}/mark-spam", headers=admin_headers)
    assert response.json()["data"]["status"] == "spam"
    assert await _public(client, post_id) == []

    response = await client.patch(f"/api/comments/{pending['id']}/approve", headers=admin_headers)
    assert response.status_code == 200
    public = await _public(client, post_id)
    assert [c["id"] for c in public] == [pending["id"]]
    assert public[0]["user"]["name"] == "Vic Viewer"


async def test_approving_parent_does_not_approve_replies(client, admin, author, viewer):
    _, admin_headers = admin
    _, author_headers = author
    _, viewer_headers = viewer
    post_id = await _create_post(client, author_headers)

    parent = await _comment(client, viewer_headers, post_id, "Parent")
    reply = await _comment(client, author_headers, post_id, "Reply", parent_id=parent["id"])

    await client.patch(f"/api/comments/{parent['id']}/approve", headers=admin_headers)
    public = await _public(client, post_id)
    assert len(public) == 1
    assert public[0]["replies"] == []

    await client.patch(f"/api/comments/{reply['id']}/approve", headers=admin_headers)
    public = await _public(client, post_id)
    assert [r["body"] for r in public[0]["replies"]] == ["Reply"]


async def test_approved_reply_under_pending_parent_stays_hidden(client, admin, author, viewer):
    _, admin_headers = admin
    _, author_headers = author
    _, viewer_headers = viewer
    post_id = await _create_post(client, author_headers)

    parent = await _comment(client, viewer_headers, post_id, "Parent")
    reply = await _comment(client, author_headers, post_id, "Reply", parent_id=parent["id"])
    await client.patch(f"/api/comments/{reply['id']}/approve", headers=admin_headers)

    assert await _public(client, post_id) == []


async def test_only_admin_sets_status_on_create(client, admin, author):
    _, admin_headers = admin
    _, author_headers = author
    post_id = await _create_post(client, author_headers)

    response = await client.post("/api/comments", headers=author_headers, json={
        "postId": post_id, "body": "Self approved", "status": "approved"
    })
    assert response.status_code == 403

    response = await client.post("/api/comments", headers=admin_headers, json={
        "postId": post_id, "body": "Staff note", "status": "approved"
    })
    assert response.status_code == 201
    assert [c["body"] for c in await _public(client, post_id)] == ["Staff note"]


async def test_reply_must_belong_to_same_post(client, author, viewer):
    _, author_headers = author
    _, viewer_headers = viewer
    first = await _create_post(client, author_headers)
    second = (await client.post("/api/posts", headers=author_headers, json={
        "title": "Second Target", "body": "Body", "status": "published"
    })).json()["data"]["id"]

    parent = await _comment(client, viewer_headers, first, "Parent")
    response = await client.post("/api/comments", headers=viewer_headers, json={
        "postId": second, "body": "Wrong thread", "parentCommentId": parent["id"]
    })
    assert response.status_code == 422

    response = await client.post("/api/comments", headers=viewer_headers, json={"postId": 9999, "body": "Lost"})
    assert response.status_code == 422

    response = await client.post("/api/comments", json={"postId": first, "body": "Anonymous"})
    assert response.status_code == 401


async def test_admin_listing_and_cascading_delete(client, session_factory, admin, author, viewer):
    _, admin_headers = admin
    _, author_headers = author
    _, viewer_headers = viewer
    post_id = await _create_post(client, author_headers)

    parent = await _comment(client, viewer_headers, post_id, "Parent")
    await _comment(client, author_headers, post_id, "Reply", parent_id=parent["id"])

    assert (await client.get("/api/comments", headers=viewer_headers)).status_code == 403

    response = await client.get("/api/comments", headers=admin_headers)
    tree = response.json()["data"]
    assert len(tree) == 1
    assert tree[0]["status"] == "pending"
    assert [r["body"] for r in tree[0]["replies"]] == ["Reply"]

    response = await client.delete(f"/api/comments/{parent['id']}", headers=admin_headers)
    assert response.status_code == 200

    async with session_factory() as session:
        result = await session.execute(select(func.count(Comment.id)).where(Comment.post_id == post_id))
        assert result.scalar() == 0


async def test_public_listing_for_unknown_post(client):
    assert (await client.get("/api/posts/9999/comments")).status_code == 404
