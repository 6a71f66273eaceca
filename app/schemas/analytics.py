"""
浏览统计与仪表盘Schema模型
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class PostViewCreate(BaseModel):
    """记录浏览请求模型"""
    postId: int = Field(..., description="文章ID")


class PostViewResponse(BaseModel):
    """浏览记录响应模型"""
    id: int
    postId: int
    postTitle: Optional[str] = None
    userId: Optional[int] = None
    viewedAt: datetime


class PostStatsResponse(BaseModel):
    """单篇文章统计"""
    postId: int
    totalViews: int
    uniqueUsers: int


class TopPostItem(BaseModel):
    """热门文章项"""
    postId: int
    title: Optional[str] = None
    slug: Optional[str] = None
    views: int


class DailyViews(BaseModel):
    """按天统计的浏览量"""
    date: str
    views: int


class PostViewsOverTime(BaseModel):
    """单篇文章浏览趋势"""
    postId: int
    dailyViews: List[DailyViews]


class DashboardStats(BaseModel):
    """仪表盘统计"""
    totalArticles: int
    publishedArticles: int
    draftArticles: int
    totalCategories: int
    totalUsers: int
    totalTags: int


class RecentArticle(BaseModel):
    """最近文章"""
    id: int
    title: str
    status: str
    author: str
    date: str
