"""
浏览统计与仪表盘服务
"""
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from app.core.exceptions import NotFoundError, ValidationFailed
from app.models.category import Category
from app.models.post import Post, POST_STATUS_PUBLISHED, POST_STATUS_DRAFT
from app.models.post_view import PostView
from app.models.tag import Tag
from app.models.user import User
from app.schemas.analytics import (
    PostViewResponse, PostStatsResponse, TopPostItem, DailyViews,
    DashboardStats, RecentArticle
)
from app.services.user_service import load_users_map


class AnalyticsService:
    """统计服务类"""

    @staticmethod
    async def _ensure_post(db: AsyncSession, post_id: int) -> None:
        result = await db.execute(select(Post.id).where(Post.id == post_id))
        if result.scalar_one_or_none() is None:
            raise NotFoundError("文章不存在")

    @staticmethod
    async def record_view(db: AsyncSession, post_id: int, user_id: Optional[int] = None) -> PostView:
        """
        记录一次浏览（匿名访问user_id为空，不去重）
        """
        result = await db.execute(select(Post.id).where(Post.id == post_id))
        if result.scalar_one_or_none() is None:
            raise ValidationFailed({"postId": "文章不存在"})

        view = PostView(post_id=post_id, user_id=user_id)
        db.add(view)
        await db.commit()
        await db.refresh(view)
        return view

    @staticmethod
    async def list_views(db: AsyncSession, limit: int = 100) -> List[PostViewResponse]:
        """浏览记录（最新的在前）"""
        result = await db.execute(
            select(PostView, Post.title)
            .join(Post, Post.id == PostView.post_id)
            .order_by(PostView.viewed_at.desc(), PostView.id.desc())
            .limit(limit)
        )
        return [
            PostViewResponse(
                id=view.id,
                postId=view.post_id,
                postTitle=title,
                userId=view.user_id,
                viewedAt=view.viewed_at
            )
            for view, title in result.all()
        ]

    @classmethod
    async def post_stats(cls, db: AsyncSession, post_id: int) -> PostStatsResponse:
        """单篇文章的总浏览量与独立登录用户数"""
        await cls._ensure_post(db, post_id)
        result = await db.execute(
            select(
                func.count(PostView.id),
                func.count(func.distinct(PostView.user_id))
            ).where(PostView.post_id == post_id)
        )
        total_views, unique_users = result.one()
        return PostStatsResponse(
            postId=post_id,
            totalViews=total_views or 0,
            uniqueUsers=unique_users or 0
        )

    @staticmethod
    async def top_posts(db: AsyncSession, limit: int = 10) -> List[TopPostItem]:
        """浏览量最高的文章，浏览量相同时按文章ID升序"""
        views = func.count(PostView.id).label("views")
        result = await db.execute(
            select(PostView.post_id, Post.title, Post.slug, views)
            .join(Post, Post.id == PostView.post_id)
            .group_by(PostView.post_id, Post.title, Post.slug)
            .order_by(views.desc(), PostView.post_id.asc())
            .limit(limit)
        )
        return [
            TopPostItem(postId=post_id, title=title, slug=slug, views=count)
            for post_id, title, slug, count in result.all()
        ]

    @classmethod
    async def views_over_time(cls, db: AsyncSession, post_id: Optional[int] = None) -> List[DailyViews]:
        """
        按天统计浏览量，日期升序

        post_id为空时统计全部文章
        """
        day = func.date(PostView.viewed_at).label("day")
        query = select(day, func.count(PostView.id))
        if post_id is not None:
            await cls._ensure_post(db, post_id)
            query = query.where(PostView.post_id == post_id)

        result = await db.execute(query.group_by(day).order_by(day.asc()))
        # SQLite返回字符串，PostgreSQL返回date对象
        return [DailyViews(date=str(bucket), views=count) for bucket, count in result.all()]

    @staticmethod
    async def dashboard_stats(db: AsyncSession) -> DashboardStats:
        async def count(query) -> int:
            result = await db.execute(query)
            return result.scalar() or 0

        return DashboardStats(
            totalArticles=await count(select(func.count(Post.id))),
            publishedArticles=await count(select(func.count(Post.id)).where(Post.status == POST_STATUS_PUBLISHED)),
            draftArticles=await count(select(func.count(Post.id)).where(Post.status == POST_STATUS_DRAFT)),
            totalCategories=await count(select(func.count(Category.id))),
            totalUsers=await count(select(func.count(User.id))),
            totalTags=await count(select(func.count(Tag.id)))
        )

    @staticmethod
    async def recent_articles(db: AsyncSession, limit: int = 5) -> List[RecentArticle]:
        """
        最近创建的文章

        已发布文章的日期取发布时间（没有则取创建时间），其余取创建时间
        """
        result = await db.execute(
            select(Post).order_by(Post.created_at.desc(), Post.id.desc()).limit(limit)
        )
        posts = list(result.scalars().all())
        users_map = await load_users_map(db, [post.user_id for post in posts])

        articles = []
        for post in posts:
            author = users_map.get(post.user_id)
            date = post.created_at
            if post.status == POST_STATUS_PUBLISHED and post.published_at:
                date = post.published_at
            articles.append(RecentArticle(
                id=post.id,
                title=post.title,
                status=post.status,
                author=f"{author.fname} {author.lname}" if author else "Unknown",
                date=date.strftime("%Y-%m-%d") if date else ""
            ))
        return articles
