"""
路由公共依赖：认证上下文与角色校验
"""
import logging
from typing import Optional
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AuthenticationFailed, PermissionDenied
from app.db.database import get_db
from app.models.user import ROLE_ADMIN, WRITER_ROLES
from app.services.auth_service import AuthService, AuthContext
from app.utils.auth import parse_bearer_token

logger = logging.getLogger(__name__)


async def get_auth_context(
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db)
) -> AuthContext:
    """
    获取当前请求的认证上下文（必须登录）
    """
    token = parse_bearer_token(authorization)
    if not token:
        raise AuthenticationFailed("未提供认证信息")
    return await AuthService.authenticate_token(db, token)


async def get_optional_auth_context(
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db)
) -> Optional[AuthContext]:
    """
    获取认证上下文（可匿名访问，未携带token时返回None）
    """
    token = parse_bearer_token(authorization)
    if not token:
        return None
    return await AuthService.authenticate_token(db, token)


def require_roles(*roles: str):
    """
    生成角色校验依赖，角色比较不区分大小写
    """
    async def checker(auth: AuthContext = Depends(get_auth_context)) -> AuthContext:
        if not auth.has_role(*roles):
            logger.warning(
                "越权访问: user_id=%s email=%s role=%s 需要角色=%s",
                auth.user.id, auth.user.email, auth.user.role, ",".join(roles)
            )
            raise PermissionDenied("权限不足")
        return auth

    return checker


require_admin = require_roles(ROLE_ADMIN)
require_writer = require_roles(*WRITER_ROLES)
