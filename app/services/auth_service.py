"""
认证服务
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from werkzeug.security import generate_password_hash, check_password_hash

from app.core.config import settings
from app.core.exceptions import AuthenticationFailed, ConflictError
from app.models.user import User, ROLE_VIEWER
from app.models.access_token import AccessToken
from app.models.post import Post
from app.utils.auth import create_access_token, verify_token
from app.utils.time import utcnow, as_utc

logger = logging.getLogger(__name__)

EXPIRED_LIFETIME = "lifetime"
EXPIRED_INACTIVITY = "inactivity"


@dataclass
class AuthContext:
    """单次请求的认证上下文，由依赖注入逐个请求传递"""
    user: User
    token: AccessToken

    @property
    def user_id(self) -> int:
        return self.user.id

    def has_role(self, *roles: str) -> bool:
        return self.user.has_role(*roles)


class AuthService:
    """认证服务类"""

    @staticmethod
    def hash_password(password: str) -> str:
        return generate_password_hash(password)

    @staticmethod
    def verify_password(password_hash: str, password: str) -> bool:
        return check_password_hash(password_hash, password)

    @staticmethod
    def expiry_reason(token: AccessToken, now: Optional[datetime] = None) -> Optional[str]:
        """
        检查token是否过期

        两个独立的限制：
        1. 创建时间超过最长有效期（默认7天）
        2. 距上次使用（没有则取创建时间）超过最长闲置时间（默认2天）

        Returns:
            str: 过期原因（lifetime / inactivity），未过期返回None
        """
        now = as_utc(now) if now else utcnow()
        created = as_utc(token.created_at)
        last_used = as_utc(token.last_used_at) or created

        if now - created > timedelta(minutes=settings.TOKEN_MAX_LIFETIME_MINUTES):
            return EXPIRED_LIFETIME
        if now - last_used > timedelta(minutes=settings.TOKEN_MAX_IDLE_MINUTES):
            return EXPIRED_INACTIVITY
        return None

    @classmethod
    async def get_user_by_email(cls, db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
        return result.scalar_one_or_none()

    @classmethod
    async def ensure_email_available(cls, db: AsyncSession, email: str, exclude_user_id: Optional[int] = None):
        """邮箱唯一性检查"""
        existing = await cls.get_user_by_email(db, email)
        if existing and existing.id != exclude_user_id:
            raise ConflictError("该邮箱已被注册")

    @classmethod
    async def create_user(
        cls,
        db: AsyncSession,
        fname: str,
        lname: str,
        email: str,
        password: str,
        role: str = ROLE_VIEWER,
        number: Optional[str] = None
    ) -> User:
        """
        创建用户

        Raises:
            ConflictError: 邮箱已存在
        """
        await cls.ensure_email_available(db, email)

        user = User(
            fname=fname,
            lname=lname,
            email=email.lower(),
            password=cls.hash_password(password),
            role=role.lower(),
            number=number
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)

        return user

    @classmethod
    async def authenticate_credentials(cls, db: AsyncSession, email: str, password: str) -> Optional[User]:
        """
        校验邮箱和密码

        Returns:
            User: 校验成功返回用户对象，失败返回None
        """
        user = await cls.get_user_by_email(db, email)
        if not user or not cls.verify_password(user.password, password):
            return None
        return user

    @classmethod
    async def issue_token(cls, db: AsyncSession, user: User, name: str = "api") -> Tuple[str, AccessToken]:
        """
        为用户签发访问token

        Returns:
            (token字符串, token记录)
        """
        jti = uuid.uuid4().hex
        access_token = AccessToken(user_id=user.id, jti=jti, name=name, created_at=utcnow())
        db.add(access_token)
        await db.commit()
        await db.refresh(access_token)

        token = create_access_token({"sub": str(user.id), "jti": jti})
        return token, access_token

    @classmethod
    async def revoke_token(cls, db: AsyncSession, token: AccessToken) -> None:
        await db.delete(token)
        await db.commit()

    @classmethod
    async def authenticate_token(cls, db: AsyncSession, raw_token: str, now: Optional[datetime] = None) -> AuthContext:
        """
        校验请求携带的token

        步骤：
        1. 解码JWT，取出用户ID和token标识
        2. 查询token记录，不存在视为已注销
        3. 超过最长有效期或闲置时间则删除token并拒绝
        4. 否则刷新最后使用时间

        Raises:
            AuthenticationFailed: token无效、已注销或已过期
        """
        payload = verify_token(raw_token)
        jti = payload.get("jti")
        user_id = payload.get("sub")
        if not jti or not user_id:
            raise AuthenticationFailed("Token中缺少必要信息")

        result = await db.execute(
            select(AccessToken).where(
                AccessToken.jti == jti,
                AccessToken.user_id == int(user_id)
            )
        )
        access_token = result.scalar_one_or_none()
        if not access_token:
            raise AuthenticationFailed("Token无效或已注销")

        now = as_utc(now) if now else utcnow()
        reason = cls.expiry_reason(access_token, now)
        if reason == EXPIRED_LIFETIME:
            logger.info("删除超过最长有效期的token: token_id=%s user_id=%s", access_token.id, user_id)
            await cls.revoke_token(db, access_token)
            raise AuthenticationFailed("Token已过期（超过最长有效期）")
        if reason == EXPIRED_INACTIVITY:
            logger.info("删除闲置过久的token: token_id=%s user_id=%s", access_token.id, user_id)
            await cls.revoke_token(db, access_token)
            raise AuthenticationFailed("Token已过期（长时间未使用）")

        user = await db.get(User, access_token.user_id)
        if not user:
            raise AuthenticationFailed("用户不存在")

        access_token.last_used_at = now
        await db.commit()

        return AuthContext(user=user, token=access_token)

    @classmethod
    async def count_posts(cls, db: AsyncSession, user_id: int) -> int:
        result = await db.execute(select(func.count(Post.id)).where(Post.user_id == user_id))
        return result.scalar() or 0
