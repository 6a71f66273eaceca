"""
测试媒体排序与封面图约定
"""
from sqlalchemy import select, func

from app.models.media import Media


async def _create_post(client, headers, title="Gallery Post") -> int:
    response = await client.post("/api/posts", headers=headers, json={"title": title, "body": "Body", "status": "draft"})
    return response.json()["data"]["id"]


def _image(name: str, **fields) -> dict:
    item = {"type": "image", "url": f"https://cdn.example.com/{name}.jpg"}
    item.update(fields)
    return item


async def test_reorder_scenario(client, author):
    """批量创建 [0,1,2] 后交换前两个，按排序值读取得到 [1,0,2]"""
    _, headers = author
    post_id = await _create_post(client, headers)

    response = await client.post("/api/media/multiple", headers=headers, json={
        "postId": post_id,
        "items": [_image("a", order=0), _image("b", order=1), _image("c", order=2)],
    })
    assert response.status_code == 201
    a, b, c = response.json()["data"]
    assert [a["order"], b["order"], c["order"]] == [0, 1, 2]

    response = await client.put("/api/media/order", headers=headers, json={
        "mediaItems": [{"id": a["id"], "order": 1}, {"id": b["id"], "order": 0}],
    })
    assert response.status_code == 200

    response = await client.get(f"/api/posts/{post_id}/media", headers=headers)
    items = response.json()["data"]
    assert [item["id"] for item in items] == [b["id"], a["id"], c["id"]]
    assert [item["order"] for item in items] == [0, 1, 2]
    originals = {a["id"]: 0, b["id"]: 1, c["id"]: 2}
    assert [originals[item["id"]] for item in items] == [1, 0, 2]


async def test_default_order_is_per_post_and_type(client, author):
    _, headers = author
    post_id = await _create_post(client, headers)
    other_post_id = await _create_post(client, headers, title="Other Post")

    orders = []
    for name in ("one", "two"):
        response = await client.post("/api/media", headers=headers, json={"postId": post_id, **_image(name)})
        orders.append(response.json()["data"]["order"])
    response = await client.post("/api/media", headers=headers, json={
        "postId": post_id, "type": "video", "url": "https://cdn.example.com/clip.mp4"
    })
    orders.append(response.json()["data"]["order"])
    response = await client.post("/api/media", headers=headers, json={"postId": other_post_id, **_image("x")})
    orders.append(response.json()["data"]["order"])

    assert orders == [0, 1, 0, 0]

    response = await client.post("/api/media/multiple", headers=headers, json={
        "postId": post_id, "items": [_image("three"), _image("four", order=10), _image("five")],
    })
    assert [m["order"] for m in response.json()["data"]] == [2, 10, 11]


async def test_update_order_requires_existing_ids(client, author):
    _, headers = author
    post_id = await _create_post(client, headers)
    media = (await client.post("/api/media", headers=headers, json={"postId": post_id, **_image("a")})).json()["data"]

    response = await client.put("/api/media/order", headers=headers, json={
        "mediaItems": [{"id": media["id"], "order": 5}, {"id": 9999, "order": 0}],
    })
    assert response.status_code == 422

    response = await client.get(f"/api/media/{media['id']}", headers=headers)
    assert response.json()["data"]["order"] == 0


async def test_second_featured_image_is_conflict(client, author):
    _, headers = author
    post_id = await _create_post(client, headers)

    response = await client.post("/api/media", headers=headers, json={
        "postId": post_id, **_image("cover", subtype="featured")
    })
    assert response.status_code == 201

    response = await client.post("/api/media", headers=headers, json={
        "postId": post_id, **_image("cover2", subtype="featured")
    })
    assert response.status_code == 409

    secondary = (await client.post("/api/media", headers=headers, json={
        "postId": post_id, **_image("side", subtype="secondary")
    })).json()["data"]
    response = await client.put(f"/api/media/{secondary['id']}", headers=headers, json={"subtype": "featured"})
    assert response.status_code == 409

    post = (await client.get(f"/api/posts/{post_id}")).json()["data"]
    assert post["imageUrl"] == "https://cdn.example.com/cover.jpg"
    assert post["secondaryImageUrl"] == "https://cdn.example.com/side.jpg"


async def test_create_multiple_is_atomic(client, session_factory, author):
    _, headers = author
    post_id = await _create_post(client, headers)

    response = await client.post("/api/media/multiple", headers=headers, json={
        "postId": post_id,
        "items": [_image("ok"), _image("cover", subtype="featured"), _image("cover2", subtype="featured")],
    })
    assert response.status_code == 409

    async with session_factory() as session:
        result = await session.execute(select(func.count(Media.id)).where(Media.post_id == post_id))
        assert result.scalar() == 0


async def test_find_and_delete_by_url(client, author):
    _, headers = author
    post_id = await _create_post(client, headers)
    media = (await client.post("/api/media", headers=headers, json={"postId": post_id, **_image("find-me")})).json()["data"]

    response = await client.get("/api/media/by-url", headers=headers, params={"url": media["url"]})
    assert response.status_code == 200
    assert response.json()["data"]["id"] == media["id"]

    response = await client.delete("/api/media/by-url", headers=headers, params={"url": media["url"]})
    assert response.status_code == 200
    assert (await client.get(f"/api/media/{media['id']}", headers=headers)).status_code == 404
    assert (await client.get("/api/media/by-url", headers=headers, params={"url": media["url"]})).status_code == 404


async def test_media_for_unknown_post(client, author):
    _, headers = author
    response = await client.post("/api/media", headers=headers, json={"postId": 9999, **_image("a")})
    assert response.status_code == 422
    assert (await client.get("/api/posts/9999/media", headers=headers)).status_code == 404
