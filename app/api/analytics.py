"""
浏览记录、统计分析与仪表盘API
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_auth_context, get_optional_auth_context, require_writer
from app.db.database import get_db
from app.schemas.analytics import PostViewCreate, PostViewsOverTime
from app.schemas.common import ResponseModel
from app.services.analytics_service import AnalyticsService
from app.services.auth_service import AuthContext

router = APIRouter(prefix="/api", tags=["统计分析"])


@router.post("/post-views", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
async def record_post_view(
    request: PostViewCreate,
    db: AsyncSession = Depends(get_db),
    auth: Optional[AuthContext] = Depends(get_optional_auth_context)
):
    """
    记录文章浏览（可匿名）
    """
    view = await AnalyticsService.record_view(db, request.postId, auth.user_id if auth else None)
    return ResponseModel(
        code=201,
        message="浏览已记录",
        data={"id": view.id, "postId": view.post_id, "userId": view.user_id, "viewedAt": view.viewed_at}
    )


@router.get("/post-views", response_model=ResponseModel)
async def list_post_views(
    limit: int = Query(100, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context)
):
    """
    浏览记录列表（最新的在前）
    """
    views = await AnalyticsService.list_views(db, limit)
    return ResponseModel(code=200, data=views)


@router.get("/analytics/posts/{post_id}", response_model=ResponseModel)
async def get_post_stats(
    post_id: int,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context)
):
    """
    单篇文章统计：总浏览量与独立用户数
    """
    return ResponseModel(code=200, data=await AnalyticsService.post_stats(db, post_id))


@router.get("/analytics/top-posts", response_model=ResponseModel)
async def get_top_posts(
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context)
):
    """
    热门文章
    """
    return ResponseModel(code=200, data=await AnalyticsService.top_posts(db, limit))


@router.get("/analytics/posts/{post_id}/views-over-time", response_model=ResponseModel)
async def get_post_views_over_time(
    post_id: int,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context)
):
    """
    单篇文章的每日浏览量
    """
    daily = await AnalyticsService.views_over_time(db, post_id)
    return ResponseModel(code=200, data=PostViewsOverTime(postId=post_id, dailyViews=daily))


@router.get("/analytics/views-over-time", response_model=ResponseModel)
async def get_total_views_over_time(
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context)
):
    """
    全站每日浏览量
    """
    return ResponseModel(code=200, data=await AnalyticsService.views_over_time(db))


@router.get("/dashboard/stats", response_model=ResponseModel)
async def get_dashboard_stats(
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_writer)
):
    """
    仪表盘统计
    """
    return ResponseModel(code=200, data=await AnalyticsService.dashboard_stats(db))


@router.get("/dashboard/recent-articles", response_model=ResponseModel)
async def get_recent_articles(
    limit: int = Query(5, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_writer)
):
    """
    最近文章
    """
    return ResponseModel(code=200, data=await AnalyticsService.recent_articles(db, limit))
