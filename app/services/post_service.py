"""
文章服务

slug派生与修订快照都在写入前由服务层显式完成
"""
import logging
from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_

from app.core.config import settings
from app.core.exceptions import NotFoundError, ConflictError, ValidationFailed
from app.models.post import Post, POST_STATUS_PUBLISHED
from app.models.post_revision import PostRevision
from app.models.media import MEDIA_SUBTYPE_FEATURED, MEDIA_SUBTYPE_SECONDARY
from app.schemas.post import PostCreate, PostUpdate, PostResponse, PostSummary
from app.services.media_service import MediaService, to_media_response
from app.services.taxonomy_service import post_categories, post_tags, to_category_response, to_tag_response
from app.services.user_service import load_users_map, author_info
from app.utils.cache import cache, POSTS_CACHE_PREFIX, invalidate_content_cache
from app.utils.slug import slugify
from app.utils.time import utcnow

logger = logging.getLogger(__name__)


def to_post_summary(post: Post) -> PostSummary:
    return PostSummary(
        id=post.id,
        title=post.title,
        slug=post.slug,
        status=post.status,
        publishedAt=post.published_at
    )


class PostService:
    """文章服务类"""

    @staticmethod
    def derive_slug(title: str) -> str:
        slug = slugify(title)
        if not slug:
            raise ValidationFailed({"title": "标题无法生成有效的slug"})
        return slug

    @staticmethod
    async def ensure_slug_available(db: AsyncSession, slug: str, exclude_id: Optional[int] = None) -> None:
        """
        Raises:
            ConflictError: slug已被其他文章占用
        """
        query = select(Post.id).where(Post.slug == slug)
        if exclude_id is not None:
            query = query.where(Post.id != exclude_id)
        result = await db.execute(query.limit(1))
        if result.scalar_one_or_none() is not None:
            raise ConflictError("已存在相同标题（slug）的文章")

    @staticmethod
    async def get(db: AsyncSession, post_id: int) -> Post:
        post = await db.get(Post, post_id)
        if not post:
            raise NotFoundError("文章不存在")
        return post

    @staticmethod
    async def get_by_slug(db: AsyncSession, slug: str) -> Post:
        result = await db.execute(select(Post).where(Post.slug == slug))
        post = result.scalar_one_or_none()
        if not post:
            raise NotFoundError("文章不存在")
        return post

    @staticmethod
    def snapshot_revision(db: AsyncSession, post: Post, editor_id: Optional[int]) -> PostRevision:
        """保存当前（修改前）正文的快照"""
        revision = PostRevision(post_id=post.id, editor_id=editor_id, body_snapshot=post.body)
        db.add(revision)
        return revision

    @classmethod
    async def create(cls, db: AsyncSession, data: PostCreate, author_id: Optional[int]) -> Post:
        """
        创建文章

        步骤：
        1. 由标题派生slug并检查唯一性
        2. 校验分类/标签ID
        3. 写入文章并同步关联（同一事务）
        """
        slug = cls.derive_slug(data.title)
        await cls.ensure_slug_available(db, slug)

        category_ids = data.categories or []
        tag_ids = data.tags or []
        await post_categories.validate_ids(db, category_ids)
        await post_tags.validate_ids(db, tag_ids)

        published_at = data.publishedAt
        if data.status == POST_STATUS_PUBLISHED and published_at is None:
            published_at = utcnow()

        post = Post(
            user_id=author_id,
            title=data.title,
            slug=slug,
            body=data.body,
            status=data.status,
            published_at=published_at
        )
        try:
            db.add(post)
            await db.flush()
            await post_categories.sync(db, post.id, category_ids)
            await post_tags.sync(db, post.id, tag_ids)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        await db.refresh(post)
        invalidate_content_cache()
        logger.info("创建文章: id=%s slug=%s author=%s", post.id, post.slug, author_id)
        return post

    @classmethod
    async def update(cls, db: AsyncSession, post: Post, data: PostUpdate, editor_id: Optional[int]) -> Post:
        """
        更新文章

        正文发生变化时，先在同一事务内保存修改前正文的修订快照
        """
        values = data.model_dump(exclude_unset=True)

        title = values.get("title") or post.title
        slug = cls.derive_slug(title)
        if slug != post.slug:
            await cls.ensure_slug_available(db, slug, exclude_id=post.id)

        category_ids = values.get("categories")
        tag_ids = values.get("tags")
        if category_ids is not None:
            await post_categories.validate_ids(db, category_ids)
        if tag_ids is not None:
            await post_tags.validate_ids(db, tag_ids)

        try:
            new_body = values.get("body")
            if new_body is not None and new_body != post.body:
                cls.snapshot_revision(db, post, editor_id)
                post.body = new_body

            post.title = title
            post.slug = slug
            if values.get("status") is not None:
                post.status = values["status"]
            if "publishedAt" in values:
                post.published_at = values["publishedAt"]
            if post.status == POST_STATUS_PUBLISHED and post.published_at is None:
                post.published_at = utcnow()

            if category_ids is not None:
                await post_categories.sync(db, post.id, category_ids)
            if tag_ids is not None:
                await post_tags.sync(db, post.id, tag_ids)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        await db.refresh(post)
        invalidate_content_cache()
        return post

    @staticmethod
    async def delete(db: AsyncSession, post: Post) -> None:
        """删除文章，媒体/修订/评论/浏览记录/关联由外键级联删除"""
        await db.delete(post)
        await db.commit()
        invalidate_content_cache()
        logger.info("删除文章: id=%s", post.id)

    @classmethod
    async def list_posts(
        cls,
        db: AsyncSession,
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
        search: Optional[str] = None
    ) -> Tuple[List[PostResponse], int]:
        """
        文章列表（分页），结果按查询参数缓存

        Returns:
            (文章列表, 总数)
        """
        cache_key = f"{POSTS_CACHE_PREFIX}list:{page}:{limit}:{status or ''}:{search or ''}"

        async def load():
            query = select(Post)
            if status:
                query = query.where(Post.status == status)
            if search:
                pattern = f"%{search}%"
                query = query.where(or_(Post.title.ilike(pattern), Post.body.ilike(pattern)))

            total_result = await db.execute(select(func.count()).select_from(query.subquery()))
            total = total_result.scalar() or 0

            result = await db.execute(
                query.order_by(Post.created_at.desc(), Post.id.desc())
                .offset((page - 1) * limit)
                .limit(limit)
            )
            posts = list(result.scalars().all())
            return await cls.build_responses(db, posts), total

        return await cache.remember(cache_key, settings.POSTS_CACHE_SECONDS, load)

    @staticmethod
    async def build_responses(db: AsyncSession, posts: List[Post]) -> List[PostResponse]:
        """批量加载作者、分类、标签、媒体并组装响应"""
        if not posts:
            return []

        post_ids = [post.id for post in posts]
        users_map = await load_users_map(db, [post.user_id for post in posts])
        categories_map = await post_categories.map_for_posts(db, post_ids)
        tags_map = await post_tags.map_for_posts(db, post_ids)
        media_map = await MediaService.map_for_posts(db, post_ids)

        responses = []
        for post in posts:
            media = media_map.get(post.id, [])
            featured = next((m for m in media if m.subtype == MEDIA_SUBTYPE_FEATURED), None)
            secondary = next((m for m in media if m.subtype == MEDIA_SUBTYPE_SECONDARY), None)

            responses.append(PostResponse(
                id=post.id,
                title=post.title,
                slug=post.slug,
                body=post.body,
                status=post.status,
                publishedAt=post.published_at,
                userId=post.user_id,
                user=author_info(users_map.get(post.user_id)),
                categories=[to_category_response(c) for c in categories_map.get(post.id, [])],
                tags=[to_tag_response(t) for t in tags_map.get(post.id, [])],
                media=[to_media_response(m) for m in media],
                imageUrl=featured.url if featured else None,
                secondaryImageUrl=secondary.url if secondary else None,
                createdAt=post.created_at,
                updatedAt=post.updated_at
            ))
        return responses

    @classmethod
    async def build_response(cls, db: AsyncSession, post: Post) -> PostResponse:
        responses = await cls.build_responses(db, [post])
        return responses[0]
