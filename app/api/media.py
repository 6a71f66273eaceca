"""
媒体管理API
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_writer, get_auth_context
from app.core.exceptions import NotFoundError
from app.db.database import get_db
from app.schemas.common import ResponseModel
from app.schemas.media import MediaCreate, MediaUpdate, MediaBatchCreate, MediaOrderUpdate
from app.services.auth_service import AuthContext
from app.services.media_service import MediaService, to_media_response
from app.services.post_service import PostService

router = APIRouter(prefix="/api", tags=["媒体管理"])


@router.get("/media", response_model=ResponseModel)
async def list_media(
    post_id: Optional[int] = Query(None, alias="postId", description="按文章筛选"),
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context)
):
    """
    媒体列表
    """
    items = await MediaService.list_media(db, post_id)
    return ResponseModel(code=200, data=[to_media_response(m) for m in items])


@router.post("/media", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
async def create_media(
    request: MediaCreate,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_writer)
):
    """
    创建媒体（未指定排序值时追加到同类型媒体末尾）
    """
    media = await MediaService.create(db, request)
    return ResponseModel(code=201, message="媒体创建成功", data=to_media_response(media))


@router.get("/media/by-url", response_model=ResponseModel)
async def find_media_by_url(
    url: str = Query(..., description="媒体URL"),
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context)
):
    """
    按URL查找媒体
    """
    media = await MediaService.find_by_url(db, url)
    if not media:
        raise NotFoundError("媒体不存在")
    return ResponseModel(code=200, data=to_media_response(media))


@router.delete("/media/by-url", response_model=ResponseModel)
async def delete_media_by_url(
    url: str = Query(..., description="媒体URL"),
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_writer)
):
    """
    按URL删除媒体
    """
    media = await MediaService.delete_by_url(db, url)
    return ResponseModel(code=200, message="媒体删除成功", data={"id": media.id})


@router.post("/media/multiple", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
async def create_multiple_media(
    request: MediaBatchCreate,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_writer)
):
    """
    批量创建媒体（全部成功或全部失败）
    """
    items = await MediaService.create_multiple(db, request.postId, request.items)
    return ResponseModel(
        code=201,
        message="媒体批量创建成功",
        data=[to_media_response(m) for m in items]
    )


@router.put("/media/order", response_model=ResponseModel)
async def update_media_order(
    request: MediaOrderUpdate,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_writer)
):
    """
    批量调整媒体排序
    """
    items = await MediaService.update_order(db, request.mediaItems)
    return ResponseModel(
        code=200,
        message="排序更新成功",
        data=[to_media_response(m) for m in items]
    )


@router.get("/media/{media_id}", response_model=ResponseModel)
async def get_media(
    media_id: int,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context)
):
    """
    媒体详情
    """
    media = await MediaService.get(db, media_id)
    return ResponseModel(code=200, data=to_media_response(media))


@router.put("/media/{media_id}", response_model=ResponseModel)
async def update_media(
    media_id: int,
    request: MediaUpdate,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_writer)
):
    """
    更新媒体
    """
    media = await MediaService.get(db, media_id)
    media = await MediaService.update(db, media, request)
    return ResponseModel(code=200, message="媒体更新成功", data=to_media_response(media))


@router.delete("/media/{media_id}", response_model=ResponseModel)
async def delete_media(
    media_id: int,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_writer)
):
    """
    删除媒体
    """
    media = await MediaService.get(db, media_id)
    await MediaService.delete(db, media)
    return ResponseModel(code=200, message="媒体删除成功")


@router.get("/posts/{post_id}/media", response_model=ResponseModel)
async def get_post_media(
    post_id: int,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context)
):
    """
    文章的媒体列表，按排序值升序
    """
    await PostService.get(db, post_id)
    items = await MediaService.list_media(db, post_id)
    return ResponseModel(code=200, data=[to_media_response(m) for m in items])
