"""
用户管理API（仅管理员）
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.core.exceptions import ConflictError
from app.db.database import get_db
from app.schemas.common import ResponseModel
from app.schemas.user import UserCreate, UserUpdate
from app.services.auth_service import AuthService, AuthContext
from app.services.user_service import UserService, to_user_response

router = APIRouter(prefix="/api", tags=["用户管理"])


@router.get("/users", response_model=ResponseModel)
async def list_users(
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_admin)
):
    """
    用户列表（附带文章数）
    """
    users = await UserService.list_with_counts(db)
    return ResponseModel(code=200, data=users)


@router.post("/users", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
async def create_user(
    request: UserCreate,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_admin)
):
    """
    创建用户
    """
    user = await AuthService.create_user(
        db,
        fname=request.fname,
        lname=request.lname,
        email=request.email,
        password=request.password,
        role=request.role,
        number=request.number
    )
    return ResponseModel(code=201, message="用户创建成功", data=to_user_response(user))


@router.get("/users/{user_id}", response_model=ResponseModel)
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_admin)
):
    """
    用户详情
    """
    user = await UserService.get(db, user_id)
    article_count = await AuthService.count_posts(db, user.id)
    return ResponseModel(code=200, data=to_user_response(user, article_count))


@router.put("/users/{user_id}", response_model=ResponseModel)
async def update_user(
    user_id: int,
    request: UserUpdate,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_admin)
):
    """
    更新用户
    """
    user = await UserService.get(db, user_id)
    user = await UserService.update(db, user, request)
    article_count = await AuthService.count_posts(db, user.id)
    return ResponseModel(code=200, message="用户更新成功", data=to_user_response(user, article_count))


@router.delete("/users/{user_id}", response_model=ResponseModel)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_admin)
):
    """
    删除用户（文章作者置空，token一并删除）
    """
    user = await UserService.get(db, user_id)
    if user.id == auth.user_id:
        raise ConflictError("不能删除当前登录的账号")

    await UserService.delete(db, user)
    return ResponseModel(code=200, message="用户删除成功")
