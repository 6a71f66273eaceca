"""
分类/标签服务及文章关联关系管理
"""
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, insert, delete, func, Table

from app.core.config import settings
from app.core.exceptions import NotFoundError, ConflictError, ValidationFailed
from app.models.category import Category
from app.models.tag import Tag
from app.models.post import Post, post_category, post_tag
from app.schemas.taxonomy import CategoryResponse, TagResponse
from app.utils.cache import cache, CATEGORIES_CACHE_PREFIX, invalidate_content_cache
from app.utils.slug import slugify

logger = logging.getLogger(__name__)


def _unique_ids(ids: Iterable[int]) -> List[int]:
    """去重并保持原有顺序"""
    seen = set()
    result = []
    for item in ids:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


class PivotRelation:
    """
    文章与分类/标签之间的多对多关联

    所有方法只执行SQL不提交事务，由调用方决定何时提交，
    这样文章创建、更新与关联同步可以在同一个事务内完成。
    """

    def __init__(self, table: Table, column: str, model, field: str, label: str):
        self.table = table
        self.column = column
        self.model = model
        self.field = field
        self.label = label

    @property
    def target_column(self):
        return self.table.c[self.column]

    async def ensure_post(self, db: AsyncSession, post_id: int) -> None:
        result = await db.execute(select(Post.id).where(Post.id == post_id))
        if result.scalar_one_or_none() is None:
            raise NotFoundError("文章不存在")

    async def validate_ids(self, db: AsyncSession, ids: Sequence[int]) -> None:
        """
        校验目标ID全部存在

        Raises:
            ValidationFailed: 错误字段形如 categoryIds.1
        """
        if not ids:
            return
        result = await db.execute(select(self.model.id).where(self.model.id.in_(set(ids))))
        existing = set(result.scalars().all())

        errors = {
            f"{self.field}.{index}": f"{self.label}不存在: {target_id}"
            for index, target_id in enumerate(ids)
            if target_id not in existing
        }
        if errors:
            raise ValidationFailed(errors)

    async def current_ids(self, db: AsyncSession, post_id: int) -> List[int]:
        result = await db.execute(
            select(self.target_column).where(self.table.c.post_id == post_id)
        )
        return list(result.scalars().all())

    async def _insert(self, db: AsyncSession, post_id: int, ids: Sequence[int]) -> None:
        if ids:
            await db.execute(
                insert(self.table),
                [{"post_id": post_id, self.column: target_id} for target_id in ids]
            )

    async def _delete(self, db: AsyncSession, post_id: int, ids: Sequence[int]) -> int:
        if not ids:
            return 0
        result = await db.execute(
            delete(self.table).where(
                self.table.c.post_id == post_id,
                self.target_column.in_(ids)
            )
        )
        return result.rowcount or 0

    async def attach(self, db: AsyncSession, post_id: int, ids: Sequence[int]) -> List[int]:
        """
        追加关联，已存在的关联保持不变

        Returns:
            List[int]: 本次新增的ID
        """
        await self.ensure_post(db, post_id)
        ids = _unique_ids(ids)
        await self.validate_ids(db, ids)

        current = set(await self.current_ids(db, post_id))
        added = [target_id for target_id in ids if target_id not in current]
        await self._insert(db, post_id, added)
        return added

    async def detach(self, db: AsyncSession, post_id: int, ids: Sequence[int]) -> int:
        """
        移除关联，不存在的关联直接忽略

        Returns:
            int: 实际删除的数量
        """
        await self.ensure_post(db, post_id)
        return await self._delete(db, post_id, _unique_ids(ids))

    async def sync(self, db: AsyncSession, post_id: int, ids: Sequence[int]) -> Dict[str, List[int]]:
        """
        将关联整体替换为给定集合，只对差异部分做增删

        Returns:
            {"attached": [...], "detached": [...]}
        """
        await self.ensure_post(db, post_id)
        ids = _unique_ids(ids)
        await self.validate_ids(db, ids)

        current = await self.current_ids(db, post_id)
        wanted = set(ids)
        to_detach = [target_id for target_id in current if target_id not in wanted]
        to_attach = [target_id for target_id in ids if target_id not in set(current)]

        await self._delete(db, post_id, to_detach)
        await self._insert(db, post_id, to_attach)
        return {"attached": to_attach, "detached": to_detach}

    async def list_for_post(self, db: AsyncSession, post_id: int) -> list:
        """文章关联的分类/标签，按名称、ID排序"""
        await self.ensure_post(db, post_id)
        mapping = await self.map_for_posts(db, [post_id])
        return mapping.get(post_id, [])

    async def map_for_posts(self, db: AsyncSession, post_ids: Iterable[int]) -> Dict[int, list]:
        """批量查询多篇文章的关联，返回 {文章ID: [对象]}"""
        post_ids = list(post_ids)
        if not post_ids:
            return {}
        result = await db.execute(
            select(self.table.c.post_id, self.model)
            .join(self.model, self.model.id == self.target_column)
            .where(self.table.c.post_id.in_(post_ids))
            .order_by(self.model.name.asc(), self.model.id.asc())
        )
        mapping: Dict[int, list] = {post_id: [] for post_id in post_ids}
        for post_id, target in result.all():
            mapping[post_id].append(target)
        return mapping


post_categories = PivotRelation(post_category, "category_id", Category, "categoryIds", "分类")
post_tags = PivotRelation(post_tag, "tag_id", Tag, "tagIds", "标签")


def to_category_response(category: Category, posts_count: int = 0) -> CategoryResponse:
    return CategoryResponse(
        id=category.id,
        name=category.name,
        slug=category.slug,
        description=category.description,
        postsCount=posts_count,
        createdAt=category.created_at,
        updatedAt=category.updated_at
    )


def to_tag_response(tag: Tag) -> TagResponse:
    return TagResponse(
        id=tag.id,
        name=tag.name,
        slug=tag.slug,
        createdAt=tag.created_at,
        updatedAt=tag.updated_at
    )


class TaxonomyService:
    """
    分类/标签的增删改查

    名称唯一，slug由名称派生，重命名时重新计算
    """

    def __init__(self, model, label: str):
        self.model = model
        self.label = label

    def derive_slug(self, name: str) -> str:
        slug = slugify(name)
        if not slug:
            raise ValidationFailed({"name": f"{self.label}名称无法生成有效的slug"})
        return slug

    async def get(self, db: AsyncSession, item_id: int):
        item = await db.get(self.model, item_id)
        if not item:
            raise NotFoundError(f"{self.label}不存在")
        return item

    async def get_by_slug(self, db: AsyncSession, slug: str):
        result = await db.execute(select(self.model).where(self.model.slug == slug))
        item = result.scalar_one_or_none()
        if not item:
            raise NotFoundError(f"{self.label}不存在")
        return item

    async def list_all(self, db: AsyncSession) -> list:
        result = await db.execute(select(self.model).order_by(self.model.name.asc(), self.model.id.asc()))
        return list(result.scalars().all())

    async def _ensure_unique(self, db: AsyncSession, name: str, slug: str, exclude_id: Optional[int] = None) -> None:
        query = select(self.model).where(
            (func.lower(self.model.name) == name.lower()) | (self.model.slug == slug)
        )
        if exclude_id is not None:
            query = query.where(self.model.id != exclude_id)
        result = await db.execute(query.limit(1))
        if result.scalar_one_or_none():
            raise ConflictError(f"{self.label}名称已存在")

    async def create(self, db: AsyncSession, name: str, **fields):
        """
        创建分类/标签

        Raises:
            ConflictError: 名称或slug已存在
        """
        name = name.strip()
        slug = self.derive_slug(name)
        await self._ensure_unique(db, name, slug)

        item = self.model(name=name, slug=slug, **fields)
        db.add(item)
        await db.commit()
        await db.refresh(item)

        invalidate_content_cache()
        logger.info("创建%s: id=%s name=%s slug=%s", self.label, item.id, item.name, item.slug)
        return item

    async def rename(self, db: AsyncSession, item, name: str, **fields):
        """重命名（同时重新计算slug）"""
        name = name.strip()
        slug = self.derive_slug(name)
        await self._ensure_unique(db, name, slug, exclude_id=item.id)

        item.name = name
        item.slug = slug
        for key, value in fields.items():
            setattr(item, key, value)

        await db.commit()
        await db.refresh(item)

        invalidate_content_cache()
        return item

    async def delete(self, db: AsyncSession, item) -> None:
        await db.delete(item)
        await db.commit()
        invalidate_content_cache()


class CategoryService(TaxonomyService):
    """分类服务"""

    def __init__(self):
        super().__init__(Category, "分类")

    async def posts_count(self, db: AsyncSession, category_id: int) -> int:
        result = await db.execute(
            select(func.count()).select_from(post_category).where(post_category.c.category_id == category_id)
        )
        return result.scalar() or 0

    async def list_with_counts(self, db: AsyncSession) -> List[CategoryResponse]:
        """分类列表（附带文章数），结果缓存"""
        async def load():
            count_subquery = (
                select(post_category.c.category_id, func.count().label("posts_count"))
                .group_by(post_category.c.category_id)
                .subquery()
            )
            result = await db.execute(
                select(Category, func.coalesce(count_subquery.c.posts_count, 0))
                .outerjoin(count_subquery, count_subquery.c.category_id == Category.id)
                .order_by(Category.name.asc(), Category.id.asc())
            )
            return [to_category_response(category, count) for category, count in result.all()]

        return await cache.remember(
            f"{CATEGORIES_CACHE_PREFIX}all",
            settings.CATEGORIES_CACHE_SECONDS,
            load
        )

    async def delete(self, db: AsyncSession, item) -> None:
        """
        删除分类

        Raises:
            ConflictError: 仍有文章关联该分类
        """
        if await self.posts_count(db, item.id) > 0:
            raise ConflictError("该分类下仍有文章，无法删除")
        await super().delete(db, item)

    async def posts_by_slug(
        self,
        db: AsyncSession,
        slug: str,
        limit: int = 10,
        offset: int = 0
    ) -> Tuple[Category, List[Post]]:
        """分类下的文章，按发布时间倒序"""
        category = await self.get_by_slug(db, slug)
        result = await db.execute(
            select(Post)
            .join(post_category, post_category.c.post_id == Post.id)
            .where(post_category.c.category_id == category.id)
            .order_by(Post.published_at.desc(), Post.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return category, list(result.scalars().all())


class TagService(TaxonomyService):
    """标签服务"""

    def __init__(self):
        super().__init__(Tag, "标签")


category_service = CategoryService()
tag_service = TagService()
