"""
文章管理API
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_writer
from app.core.config import settings
from app.db.database import get_db
from app.schemas.common import ResponseModel, build_pagination
from app.schemas.post import PostCreate, PostUpdate, PostStatusLiteral
from app.services.auth_service import AuthContext
from app.services.post_service import PostService

router = APIRouter(prefix="/api", tags=["文章管理"])


@router.get("/posts", response_model=ResponseModel)
async def list_posts(
    response: Response,
    page: int = Query(1, ge=1, description="页码"),
    limit: int = Query(10, ge=1, le=100, description="每页数量"),
    status_filter: Optional[PostStatusLiteral] = Query(None, alias="status", description="按状态筛选"),
    search: Optional[str] = Query(None, description="在标题和正文中搜索"),
    db: AsyncSession = Depends(get_db)
):
    """
    文章列表（公开），按创建时间倒序
    """
    items, total = await PostService.list_posts(db, page=page, limit=limit, status=status_filter, search=search)
    response.headers["Cache-Control"] = f"public, max-age={settings.POSTS_CACHE_SECONDS}"

    return ResponseModel(
        code=200,
        data={
            "items": items,
            "pagination": build_pagination(page, limit, total)
        }
    )


@router.post("/posts", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
async def create_post(
    request: PostCreate,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_writer)
):
    """
    创建文章（作者为当前用户）
    """
    post = await PostService.create(db, request, auth.user_id)
    return ResponseModel(
        code=201,
        message="文章创建成功",
        data=await PostService.build_response(db, post)
    )


@router.get("/posts/slug/{slug}", response_model=ResponseModel)
async def get_post_by_slug(
    slug: str,
    db: AsyncSession = Depends(get_db)
):
    """
    按slug获取文章
    """
    post = await PostService.get_by_slug(db, slug)
    return ResponseModel(code=200, data=await PostService.build_response(db, post))


@router.get("/posts/{post_id}", response_model=ResponseModel)
async def get_post(
    post_id: int,
    db: AsyncSession = Depends(get_db)
):
    """
    按ID获取文章
    """
    post = await PostService.get(db, post_id)
    return ResponseModel(code=200, data=await PostService.build_response(db, post))


@router.put("/posts/{post_id}", response_model=ResponseModel)
async def update_post(
    post_id: int,
    request: PostUpdate,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_writer)
):
    """
    更新文章，正文变化时自动保存修订
    """
    post = await PostService.get(db, post_id)
    post = await PostService.update(db, post, request, auth.user_id)
    return ResponseModel(
        code=200,
        message="文章更新成功",
        data=await PostService.build_response(db, post)
    )


@router.delete("/posts/{post_id}", response_model=ResponseModel)
async def delete_post(
    post_id: int,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_writer)
):
    """
    删除文章
    """
    post = await PostService.get(db, post_id)
    await PostService.delete(db, post)
    return ResponseModel(code=200, message="文章删除成功")
