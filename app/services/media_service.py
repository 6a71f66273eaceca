"""
文章媒体服务
"""
import logging
from typing import Dict, Iterable, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from app.core.exceptions import NotFoundError, ConflictError, ValidationFailed
from app.models.media import Media, MEDIA_SUBTYPE_FEATURED
from app.models.post import Post
from app.schemas.media import MediaCreate, MediaItem, MediaUpdate, MediaOrderItem, MediaResponse
from app.utils.cache import invalidate_content_cache

logger = logging.getLogger(__name__)


def to_media_response(media: Media) -> MediaResponse:
    return MediaResponse(
        id=media.id,
        postId=media.post_id,
        type=media.type,
        subtype=media.subtype,
        url=media.url,
        altText=media.alt_text,
        metadata=media.meta,
        order=media.order,
        createdAt=media.created_at,
        updatedAt=media.updated_at
    )


class MediaService:
    """媒体服务类"""

    @staticmethod
    async def get(db: AsyncSession, media_id: int) -> Media:
        media = await db.get(Media, media_id)
        if not media:
            raise NotFoundError("媒体不存在")
        return media

    @staticmethod
    async def ensure_post_exists(db: AsyncSession, post_id: int) -> None:
        result = await db.execute(select(Post.id).where(Post.id == post_id))
        if result.scalar_one_or_none() is None:
            raise ValidationFailed({"postId": "文章不存在"})

    @staticmethod
    async def list_media(db: AsyncSession, post_id: Optional[int] = None) -> List[Media]:
        query = select(Media)
        if post_id is not None:
            query = query.where(Media.post_id == post_id)
        result = await db.execute(query.order_by(Media.post_id.asc(), Media.order.asc(), Media.id.asc()))
        return list(result.scalars().all())

    @staticmethod
    async def map_for_posts(db: AsyncSession, post_ids: Iterable[int]) -> Dict[int, List[Media]]:
        """批量查询多篇文章的媒体，组内按排序值、ID升序"""
        post_ids = list(post_ids)
        if not post_ids:
            return {}
        result = await db.execute(
            select(Media)
            .where(Media.post_id.in_(post_ids))
            .order_by(Media.order.asc(), Media.id.asc())
        )
        mapping: Dict[int, List[Media]] = {post_id: [] for post_id in post_ids}
        for media in result.scalars().all():
            mapping[media.post_id].append(media)
        return mapping

    @staticmethod
    async def next_order(db: AsyncSession, post_id: int, media_type: str) -> int:
        """同一文章同类型媒体的下一个排序值"""
        result = await db.execute(
            select(func.max(Media.order)).where(
                Media.post_id == post_id,
                Media.type == media_type
            )
        )
        current = result.scalar()
        return 0 if current is None else current + 1

    @staticmethod
    async def ensure_featured_available(db: AsyncSession, post_id: int, exclude_id: Optional[int] = None) -> None:
        """
        每篇文章最多一个featured媒体

        Raises:
            ConflictError: 已存在featured媒体
        """
        query = select(Media.id).where(
            Media.post_id == post_id,
            Media.subtype == MEDIA_SUBTYPE_FEATURED
        )
        if exclude_id is not None:
            query = query.where(Media.id != exclude_id)
        result = await db.execute(query.limit(1))
        if result.scalar_one_or_none() is not None:
            raise ConflictError("该文章已有封面图")

    @classmethod
    async def _add(cls, db: AsyncSession, post_id: int, item: MediaItem) -> Media:
        if item.subtype == MEDIA_SUBTYPE_FEATURED:
            await cls.ensure_featured_available(db, post_id)

        order = item.order
        if order is None:
            order = await cls.next_order(db, post_id, item.type)

        media = Media(
            post_id=post_id,
            type=item.type,
            subtype=item.subtype,
            url=item.url,
            alt_text=item.altText,
            meta=item.metadata,
            order=order
        )
        db.add(media)
        # 会话未开启autoflush，同一事务内后续的排序计算依赖这里的flush
        await db.flush()
        return media

    @classmethod
    async def create(cls, db: AsyncSession, data: MediaCreate) -> Media:
        await cls.ensure_post_exists(db, data.postId)
        media = await cls._add(db, data.postId, data)
        await db.commit()
        await db.refresh(media)

        invalidate_content_cache()
        return media

    @classmethod
    async def create_multiple(cls, db: AsyncSession, post_id: int, items: List[MediaItem]) -> List[Media]:
        """
        批量创建媒体（单个事务，任何一条失败则全部回滚）
        """
        await cls.ensure_post_exists(db, post_id)
        try:
            created = [await cls._add(db, post_id, item) for item in items]
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        for media in created:
            await db.refresh(media)

        invalidate_content_cache()
        logger.info("批量创建媒体: post_id=%s count=%s", post_id, len(created))
        return created

    @classmethod
    async def update(cls, db: AsyncSession, media: Media, data: MediaUpdate) -> Media:
        values = data.model_dump(exclude_unset=True)

        if values.get("subtype") == MEDIA_SUBTYPE_FEATURED and media.subtype != MEDIA_SUBTYPE_FEATURED:
            await cls.ensure_featured_available(db, media.post_id, exclude_id=media.id)

        field_map = {
            "type": "type",
            "subtype": "subtype",
            "url": "url",
            "altText": "alt_text",
            "metadata": "meta",
            "order": "order",
        }
        for key, value in values.items():
            if key in ("type", "url", "order") and value is None:
                continue
            setattr(media, field_map[key], value)

        await db.commit()
        await db.refresh(media)

        invalidate_content_cache()
        return media

    @staticmethod
    async def update_order(db: AsyncSession, items: List[MediaOrderItem]) -> List[Media]:
        """
        批量调整排序值

        Raises:
            ValidationFailed: 存在不存在的媒体ID（此时不做任何修改）
        """
        ids = [item.id for item in items]
        result = await db.execute(select(Media).where(Media.id.in_(set(ids))))
        media_map = {media.id: media for media in result.scalars().all()}

        errors = {
            f"mediaItems.{index}.id": f"媒体不存在: {item.id}"
            for index, item in enumerate(items)
            if item.id not in media_map
        }
        if errors:
            raise ValidationFailed(errors)

        for item in items:
            media_map[item.id].order = item.order
        await db.commit()

        updated = []
        for media_id in dict.fromkeys(ids):
            media = media_map[media_id]
            await db.refresh(media)
            updated.append(media)

        invalidate_content_cache()
        return updated

    @staticmethod
    async def find_by_url(db: AsyncSession, url: str) -> Optional[Media]:
        result = await db.execute(select(Media).where(Media.url == url).order_by(Media.id.asc()).limit(1))
        return result.scalar_one_or_none()

    @staticmethod
    async def delete(db: AsyncSession, media: Media) -> None:
        await db.delete(media)
        await db.commit()
        invalidate_content_cache()

    @classmethod
    async def delete_by_url(cls, db: AsyncSession, url: str) -> Media:
        media = await cls.find_by_url(db, url)
        if not media:
            raise NotFoundError("媒体不存在")
        await cls.delete(db, media)
        return media
