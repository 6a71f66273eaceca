"""
突发新闻API
"""
from fastapi import APIRouter, Depends

from app.api.deps import require_admin
from app.schemas.common import ResponseModel
from app.schemas.misc import BreakingNewsSettings, BreakingNewsSettingsUpdate
from app.services.auth_service import AuthContext
from app.services.breaking_news_service import BreakingNewsService, breaking_news_service

router = APIRouter(prefix="/api", tags=["突发新闻"])


def get_breaking_news_service() -> BreakingNewsService:
    return breaking_news_service


@router.get("/breaking-news", response_model=ResponseModel)
async def get_breaking_news(
    service: BreakingNewsService = Depends(get_breaking_news_service)
):
    """
    获取突发新闻标题（公开）
    """
    news = await service.get_breaking_news()
    return ResponseModel(code=200, message=news.get("message"), data=news)


@router.get("/breaking-news/settings", response_model=ResponseModel)
async def get_breaking_news_settings(
    service: BreakingNewsService = Depends(get_breaking_news_service)
):
    """
    获取突发新闻设置
    """
    return ResponseModel(code=200, data=service.get_settings())


@router.post("/breaking-news/settings", response_model=ResponseModel)
async def update_breaking_news_settings(
    request: BreakingNewsSettingsUpdate,
    auth: AuthContext = Depends(require_admin),
    service: BreakingNewsService = Depends(get_breaking_news_service)
):
    """
    更新突发新闻设置（清除已缓存的新闻）
    """
    new_settings = BreakingNewsSettings(
        useManualNews=request.useManualNews,
        manualNews=request.headlines(),
        useNewsapi=request.useNewsapi,
        useNewsdata=request.useNewsdata
    )
    saved = service.update_settings(new_settings)
    return ResponseModel(code=200, message="突发新闻设置已更新", data=saved)
