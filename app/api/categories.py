"""
分类与标签管理API
"""
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_writer
from app.core.config import settings
from app.db.database import get_db
from app.schemas.common import ResponseModel
from app.schemas.taxonomy import CategoryCreate, TagCreate
from app.services.auth_service import AuthContext
from app.services.post_service import PostService
from app.services.taxonomy_service import (
    category_service, tag_service, to_category_response, to_tag_response
)

router = APIRouter(prefix="/api", tags=["分类与标签"])


@router.get("/categories", response_model=ResponseModel)
async def list_categories(
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """
    分类列表（公开，附带文章数）
    """
    categories = await category_service.list_with_counts(db)
    response.headers["Cache-Control"] = f"public, max-age={settings.CATEGORIES_CACHE_SECONDS}"
    return ResponseModel(code=200, data=categories)


@router.post("/categories", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
async def create_category(
    request: CategoryCreate,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_writer)
):
    """
    创建分类
    """
    category = await category_service.create(db, request.name, description=request.description)
    return ResponseModel(code=201, message="分类创建成功", data=to_category_response(category))


@router.get("/categories/{category_id}", response_model=ResponseModel)
async def get_category(
    category_id: int,
    db: AsyncSession = Depends(get_db)
):
    """
    分类详情
    """
    category = await category_service.get(db, category_id)
    posts_count = await category_service.posts_count(db, category.id)
    return ResponseModel(code=200, data=to_category_response(category, posts_count))


@router.put("/categories/{category_id}", response_model=ResponseModel)
async def update_category(
    category_id: int,
    request: CategoryCreate,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_writer)
):
    """
    重命名分类（slug随名称重新生成）
    """
    category = await category_service.get(db, category_id)
    fields = {}
    if "description" in request.model_fields_set:
        fields["description"] = request.description

    category = await category_service.rename(db, category, request.name, **fields)
    posts_count = await category_service.posts_count(db, category.id)
    return ResponseModel(code=200, message="分类更新成功", data=to_category_response(category, posts_count))


@router.delete("/categories/{category_id}", response_model=ResponseModel)
async def delete_category(
    category_id: int,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_writer)
):
    """
    删除分类（仍有文章时拒绝）
    """
    category = await category_service.get(db, category_id)
    await category_service.delete(db, category)
    return ResponseModel(code=200, message="分类删除成功")


@router.get("/categories/{slug}/posts", response_model=ResponseModel)
async def get_category_posts(
    slug: str,
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db)
):
    """
    分类下的文章（公开），按发布时间倒序
    """
    category, posts = await category_service.posts_by_slug(db, slug, limit=limit, offset=offset)
    posts_count = await category_service.posts_count(db, category.id)

    return ResponseModel(
        code=200,
        data={
            "category": to_category_response(category, posts_count),
            "posts": await PostService.build_responses(db, posts),
            "limit": limit,
            "offset": offset
        }
    )


@router.get("/tags", response_model=ResponseModel)
async def list_tags(db: AsyncSession = Depends(get_db)):
    """
    标签列表（公开）
    """
    tags = await tag_service.list_all(db)
    return ResponseModel(code=200, data=[to_tag_response(tag) for tag in tags])


@router.post("/tags", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
async def create_tag(
    request: TagCreate,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_writer)
):
    """
    创建标签
    """
    tag = await tag_service.create(db, request.name)
    return ResponseModel(code=201, message="标签创建成功", data=to_tag_response(tag))


@router.get("/tags/{tag_id}", response_model=ResponseModel)
async def get_tag(
    tag_id: int,
    db: AsyncSession = Depends(get_db)
):
    """
    标签详情
    """
    tag = await tag_service.get(db, tag_id)
    return ResponseModel(code=200, data=to_tag_response(tag))


@router.put("/tags/{tag_id}", response_model=ResponseModel)
async def update_tag(
    tag_id: int,
    request: TagCreate,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_writer)
):
    """
    重命名标签（slug随名称重新生成）
    """
    tag = await tag_service.get(db, tag_id)
    tag = await tag_service.rename(db, tag, request.name)
    return ResponseModel(code=200, message="标签更新成功", data=to_tag_response(tag))


@router.delete("/tags/{tag_id}", response_model=ResponseModel)
async def delete_tag(
    tag_id: int,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_writer)
):
    """
    删除标签
    """
    tag = await tag_service.get(db, tag_id)
    await tag_service.delete(db, tag)
    return ResponseModel(code=200, message="标签删除成功")
