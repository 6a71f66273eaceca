"""
文章-分类、文章-标签关联API
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_writer, get_auth_context
from app.db.database import get_db
from app.schemas.common import ResponseModel
from app.schemas.taxonomy import CategoryIdsRequest, TagIdsRequest
from app.services.auth_service import AuthContext
from app.services.taxonomy_service import (
    PivotRelation, post_categories, post_tags, to_category_response, to_tag_response
)
from app.utils.cache import invalidate_content_cache

router = APIRouter(prefix="/api", tags=["文章关联"])


async def _commit(db: AsyncSession) -> None:
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    invalidate_content_cache()


async def _current(db: AsyncSession, relation: PivotRelation, post_id: int) -> list:
    items = await relation.list_for_post(db, post_id)
    if relation is post_categories:
        return [to_category_response(item) for item in items]
    return [to_tag_response(item) for item in items]


@router.post("/post-categories/{post_id}/attach", response_model=ResponseModel)
async def attach_categories(
    post_id: int,
    request: CategoryIdsRequest,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_writer)
):
    """
    为文章追加分类
    """
    added = await post_categories.attach(db, post_id, request.categoryIds)
    await _commit(db)
    return ResponseModel(
        code=200,
        message="分类关联成功",
        data={"attached": added, "categories": await _current(db, post_categories, post_id)}
    )


@router.post("/post-categories/{post_id}/detach", response_model=ResponseModel)
async def detach_categories(
    post_id: int,
    request: CategoryIdsRequest,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_writer)
):
    """
    移除文章的分类
    """
    removed = await post_categories.detach(db, post_id, request.categoryIds)
    await _commit(db)
    return ResponseModel(
        code=200,
        message="分类移除成功",
        data={"detached": removed, "categories": await _current(db, post_categories, post_id)}
    )


@router.put("/post-categories/{post_id}", response_model=ResponseModel)
async def sync_categories(
    post_id: int,
    request: CategoryIdsRequest,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_writer)
):
    """
    整体替换文章的分类
    """
    changes = await post_categories.sync(db, post_id, request.categoryIds)
    await _commit(db)
    return ResponseModel(
        code=200,
        message="分类同步成功",
        data={**changes, "categories": await _current(db, post_categories, post_id)}
    )


@router.get("/post-categories/{post_id}", response_model=ResponseModel)
async def get_post_categories(
    post_id: int,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context)
):
    """
    文章的分类列表
    """
    return ResponseModel(code=200, data=await _current(db, post_categories, post_id))


@router.post("/post-tags/{post_id}/attach", response_model=ResponseModel)
async def attach_tags(
    post_id: int,
    request: TagIdsRequest,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_writer)
):
    """
    为文章追加标签
    """
    added = await post_tags.attach(db, post_id, request.tagIds)
    await _commit(db)
    return ResponseModel(
        code=200,
        message="标签关联成功",
        data={"attached": added, "tags": await _current(db, post_tags, post_id)}
    )


@router.post("/post-tags/{post_id}/detach", response_model=ResponseModel)
async def detach_tags(
    post_id: int,
    request: TagIdsRequest,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_writer)
):
    """
    移除文章的标签
    """
    removed = await post_tags.detach(db, post_id, request.tagIds)
    await _commit(db)
    return ResponseModel(
        code=200,
        message="标签移除成功",
        data={"detached": removed, "tags": await _current(db, post_tags, post_id)}
    )


@router.put("/post-tags/{post_id}", response_model=ResponseModel)
async def sync_tags(
    post_id: int,
    request: TagIdsRequest,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_writer)
):
    """
    整体替换文章的标签
    """
    changes = await post_tags.sync(db, post_id, request.tagIds)
    await _commit(db)
    return ResponseModel(
        code=200,
        message="标签同步成功",
        data={**changes, "tags": await _current(db, post_tags, post_id)}
    )


@router.get("/post-tags/{post_id}", response_model=ResponseModel)
async def get_post_tags(
    post_id: int,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context)
):
    """
    文章的标签列表
    """
    return ResponseModel(code=200, data=await _current(db, post_tags, post_id))
