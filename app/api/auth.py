"""
认证API：注册、登录、注销、个人资料
"""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_auth_context
from app.core.exceptions import AuthenticationFailed
from app.db.database import get_db
from app.models.user import ROLE_VIEWER
from app.schemas.common import ResponseModel
from app.schemas.user import RegisterRequest, LoginRequest, ProfileUpdate, TokenResponse
from app.services.auth_service import AuthService, AuthContext
from app.services.user_service import UserService, to_user_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["认证"])


@router.post("/viewer-register", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
async def viewer_register(
    request: RegisterRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    读者自助注册（角色固定为viewer），注册成功后直接返回token
    """
    user = await AuthService.create_user(
        db,
        fname=request.fname,
        lname=request.lname,
        email=request.email,
        password=request.password,
        role=ROLE_VIEWER,
        number=request.number
    )
    token, _ = await AuthService.issue_token(db, user)
    logger.info("新读者注册: user_id=%s email=%s", user.id, user.email)

    return ResponseModel(
        code=201,
        message="注册成功",
        data=TokenResponse(accessToken=token, tokenType="bearer", user=to_user_response(user))
    )


@router.post("/login", response_model=ResponseModel)
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    邮箱密码登录
    """
    user = await AuthService.authenticate_credentials(db, request.email, request.password)
    if not user:
        raise AuthenticationFailed("邮箱或密码错误")

    token, _ = await AuthService.issue_token(db, user)
    article_count = await AuthService.count_posts(db, user.id)

    return ResponseModel(
        code=200,
        message="登录成功",
        data=TokenResponse(
            accessToken=token,
            tokenType="bearer",
            user=to_user_response(user, article_count)
        )
    )


@router.post("/logout", response_model=ResponseModel)
async def logout(
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db)
):
    """
    注销：删除当前请求使用的token
    """
    await AuthService.revoke_token(db, auth.token)
    return ResponseModel(code=200, message="已退出登录")


@router.get("/me", response_model=ResponseModel)
async def get_me(
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db)
):
    """
    获取当前用户信息
    """
    article_count = await AuthService.count_posts(db, auth.user_id)
    return ResponseModel(code=200, data=to_user_response(auth.user, article_count))


@router.put("/me", response_model=ResponseModel)
async def update_me(
    request: ProfileUpdate,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db)
):
    """
    更新当前用户资料
    """
    user = await UserService.update_profile(db, auth.user, request)
    article_count = await AuthService.count_posts(db, user.id)
    return ResponseModel(code=200, message="资料更新成功", data=to_user_response(user, article_count))
