"""
测试分类/标签以及文章关联的 attach / detach / sync
"""
import pytest
from sqlalchemy import select, func

from app.core.exceptions import NotFoundError, ValidationFailed
from app.models.category import Category
from app.models.post import Post, post_category
from app.models.tag import Tag
from app.services.taxonomy_service import post_categories, post_tags


async def _seed(db, category_names=("Alpha", "Beta", "Gamma", "Delta")):
    post = Post(title="Pivot Post", slug="pivot-post", body="Body", status="draft")
    db.add(post)
    categories = [Category(name=name, slug=name.lower()) for name in category_names]
    db.add_all(categories)
    await db.commit()
    return post, [c.id for c in categories]


async def _ids(db, post_id):
    return sorted(await post_categories.current_ids(db, post_id))


@pytest.mark.parametrize("initial, target", [
    ([0, 1], [1, 2]),    # 部分重叠
    ([0, 1], [2, 3]),    # 完全不相交
    ([0, 1, 2], []),     # 清空
    ([], [0, 3]),        # 从空集合开始
])
async def test_sync_sets_exact_ids(db, initial, target):
    """sync之后读取到的正好是传入的集合"""
    post, ids = await _seed(db)
    await post_categories.sync(db, post.id, [ids[i] for i in initial])
    await db.commit()

    changes = await post_categories.sync(db, post.id, [ids[i] for i in target])
    await db.commit()

    assert await _ids(db, post.id) == sorted(ids[i] for i in target)
    assert sorted(changes["attached"]) == sorted(ids[i] for i in target if i not in initial)
    assert sorted(changes["detached"]) == sorted(ids[i] for i in initial if i not in target)


async def test_attach_is_duplicate_safe(db):
    post, ids = await _seed(db)
    assert await post_categories.attach(db, post.id, [ids[0], ids[0]]) == [ids[0]]
    await db.commit()
    assert await post_categories.attach(db, post.id, [ids[0], ids[1]]) == [ids[1]]
    await db.commit()

    result = await db.execute(
        select(func.count()).select_from(post_category).where(
            post_category.c.post_id == post.id,
            post_category.c.category_id == ids[0]
        )
    )
    assert result.scalar() == 1
    assert await _ids(db, post.id) == sorted([ids[0], ids[1]])


async def test_detach_removes_only_named_ids(db):
    post, ids = await _seed(db)
    await post_categories.attach(db, post.id, ids)
    await db.commit()

    removed = await post_categories.detach(db, post.id, [ids[1], ids[3], 424242])
    await db.commit()

    assert removed == 2
    assert await _ids(db, post.id) == sorted([ids[0], ids[2]])


async def test_unknown_ids_and_posts(db):
    post, ids = await _seed(db)
    with pytest.raises(ValidationFailed) as exc_info:
        await post_categories.sync(db, post.id, [ids[0], 9999])
    assert exc_info.value.errors == {"categoryIds.1": "分类不存在: 9999"}
    assert await _ids(db, post.id) == []

    with pytest.raises(NotFoundError):
        await post_categories.attach(db, 9999, [ids[0]])


async def test_tags_are_independent_of_categories(db):
    post, ids = await _seed(db)
    tag = Tag(name="Breaking", slug="breaking")
    db.add(tag)
    await db.commit()

    await post_tags.sync(db, post.id, [tag.id])
    await post_categories.sync(db, post.id, [ids[0]])
    await db.commit()

    await post_tags.sync(db, post.id, [])
    await db.commit()

    assert await post_tags.current_ids(db, post.id) == []
    assert await _ids(db, post.id) == [ids[0]]


async def test_list_for_post_is_ordered_by_name(db):
    post, ids = await _seed(db, ("Zeta", "alpha-two", "Mu"))
    await post_categories.attach(db, post.id, list(reversed(ids)))
    await db.commit()

    names = [c.name for c in await post_categories.list_for_post(db, post.id)]
    assert names == sorted(names)


async def test_category_rename_scenario(client, author):
    """创建 "Breaking News!" 后重命名为 "Top Stories"，旧slug不再可用"""
    _, headers = author
    response = await client.post("/api/categories", headers=headers, json={"name": "Breaking News!"})
    assert response.status_code == 201
    category = response.json()["data"]
    assert category["slug"] == "breaking-news"

    response = await client.put(f"/api/categories/{category['id']}", headers=headers, json={"name": "Top Stories"})
    assert response.status_code == 200
    assert response.json()["data"]["slug"] == "top-stories"

    assert (await client.get("/api/categories/breaking-news/posts")).status_code == 404
    response = await client.get("/api/categories/top-stories/posts")
    assert response.status_code == 200
    assert response.json()["data"]["category"]["name"] == "Top Stories"


async def test_category_conflicts(client, author):
    _, headers = author
    await client.post("/api/categories", headers=headers, json={"name": "Health"})
    response = await client.post("/api/categories", headers=headers, json={"name": "health"})
    assert response.status_code == 409

    response = await client.post("/api/categories", headers=headers, json={"name": "?!"})
    assert response.status_code == 422


async def test_category_in_use_cannot_be_deleted(client, author):
    _, headers = author
    category = (await client.post("/api/categories", headers=headers, json={"name": "Tech"})).json()["data"]
    post = (await client.post("/api/posts", headers=headers, json={
        "title": "Chips", "body": "Body", "status": "published", "categories": [category["id"]]
    })).json()["data"]

    assert (await client.delete(f"/api/categories/{category['id']}", headers=headers)).status_code == 409

    response = await client.post(f"/api/post-categories/{post['id']}/detach", headers=headers,
                                 json={"categoryIds": [category["id"]]})
    assert response.status_code == 200
    assert response.json()["data"]["categories"] == []

    assert (await client.delete(f"/api/categories/{category['id']}", headers=headers)).status_code == 200


async def test_category_list_counts_posts(client, author):
    _, headers = author
    news = (await client.post("/api/categories", headers=headers, json={"name": "News"})).json()["data"]
    await client.post("/api/categories", headers=headers, json={"name": "Arts"})
    await client.post("/api/posts", headers=headers, json={
        "title": "One", "body": "Body", "status": "draft", "categories": [news["id"]]
    })

    response = await client.get("/api/categories")
    assert response.status_code == 200
    assert [(c["name"], c["postsCount"]) for c in response.json()["data"]] == [("Arts", 0), ("News", 1)]


async def test_pivot_routes(client, author):
    _, headers = author
    a = (await client.post("/api/tags", headers=headers, json={"name": "Africa"})).json()["data"]
    b = (await client.post("/api/tags", headers=headers, json={"name": "Business"})).json()["data"]
    post = (await client.post("/api/posts", headers=headers, json={
        "title": "Trade", "body": "Body", "status": "draft"
    })).json()["data"]

    response = await client.post(f"/api/post-tags/{post['id']}/attach", headers=headers, json={"tagIds": [b["id"], a["id"]]})
    assert response.status_code == 200
    assert [t["name"] for t in response.json()["data"]["tags"]] == ["Africa", "Business"]

    response = await client.put(f"/api/post-tags/{post['id']}", headers=headers, json={"tagIds": [a["id"]]})
    assert response.json()["data"]["detached"] == [b["id"]]

    response = await client.get(f"/api/post-tags/{post['id']}", headers=headers)
    assert [t["id"] for t in response.json()["data"]] == [a["id"]]

    response = await client.put("/api/post-tags/9999", headers=headers, json={"tagIds": []})
    assert response.status_code == 404

    response = await client.put(f"/api/post-tags/{post['id']}", headers=headers, json={"tagIds": [a["id"], 777]})
    assert response.status_code == 422
    assert response.json()["detail"][0]["loc"] == ["body", "tagIds", "1"]
