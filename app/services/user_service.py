"""
用户管理服务
"""
from typing import Dict, Iterable, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from app.core.exceptions import NotFoundError, ValidationFailed
from app.models.user import User
from app.models.post import Post
from app.schemas.user import AuthorInfo, UserResponse, UserUpdate, ProfileUpdate
from app.services.auth_service import AuthService
from app.utils.cache import invalidate_content_cache


def author_info(user: Optional[User]) -> Optional[AuthorInfo]:
    if not user:
        return None
    return AuthorInfo(id=user.id, name=user.full_name, email=user.email)


def to_user_response(user: User, article_count: int = 0) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.full_name,
        fname=user.fname,
        lname=user.lname,
        email=user.email,
        role=user.role,
        number=user.number,
        articleCount=article_count,
        createdAt=user.created_at,
        updatedAt=user.updated_at
    )


async def load_users_map(db: AsyncSession, user_ids: Iterable[Optional[int]]) -> Dict[int, User]:
    """批量查询用户，返回 {用户ID: 用户}"""
    ids = {user_id for user_id in user_ids if user_id is not None}
    if not ids:
        return {}
    result = await db.execute(select(User).where(User.id.in_(ids)))
    return {user.id: user for user in result.scalars().all()}


class UserService:
    """用户管理服务类"""

    @staticmethod
    async def get(db: AsyncSession, user_id: int) -> User:
        user = await db.get(User, user_id)
        if not user:
            raise NotFoundError("用户不存在")
        return user

    @staticmethod
    async def list_with_counts(db: AsyncSession) -> List[UserResponse]:
        """用户列表（附带文章数），按ID排序"""
        count_subquery = (
            select(Post.user_id, func.count(Post.id).label("article_count"))
            .group_by(Post.user_id)
            .subquery()
        )
        result = await db.execute(
            select(User, func.coalesce(count_subquery.c.article_count, 0))
            .outerjoin(count_subquery, count_subquery.c.user_id == User.id)
            .order_by(User.id.asc())
        )
        return [to_user_response(user, count) for user, count in result.all()]

    @staticmethod
    async def update(db: AsyncSession, user: User, data: UserUpdate) -> User:
        """管理员更新用户资料"""
        await AuthService.ensure_email_available(db, data.email, exclude_user_id=user.id)

        user.fname = data.fname
        user.lname = data.lname
        user.email = data.email.lower()
        user.role = data.role.lower()
        user.number = data.number
        if data.password:
            user.password = AuthService.hash_password(data.password)

        await db.commit()
        await db.refresh(user)
        invalidate_content_cache()
        return user

    @staticmethod
    async def update_profile(db: AsyncSession, user: User, data: ProfileUpdate) -> User:
        """
        更新个人资料

        修改密码时必须提供正确的当前密码
        """
        if data.email is not None:
            await AuthService.ensure_email_available(db, data.email, exclude_user_id=user.id)
            user.email = data.email.lower()
        if data.fname is not None:
            user.fname = data.fname
        if data.lname is not None:
            user.lname = data.lname
        if "number" in data.model_fields_set:
            user.number = data.number

        if data.new_password is not None:
            if not AuthService.verify_password(user.password, data.current_password):
                raise ValidationFailed({"current_password": "当前密码不正确"})
            user.password = AuthService.hash_password(data.new_password)

        await db.commit()
        await db.refresh(user)
        invalidate_content_cache()
        return user

    @staticmethod
    async def delete(db: AsyncSession, user: User) -> None:
        await db.delete(user)
        await db.commit()
        invalidate_content_cache()
