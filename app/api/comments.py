"""
评论API
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_auth_context, require_admin
from app.db.database import get_db
from app.models.comment import COMMENT_STATUS_APPROVED, COMMENT_STATUS_SPAM
from app.schemas.comment import CommentCreate, CommentUpdate
from app.schemas.common import ResponseModel
from app.services.auth_service import AuthContext
from app.services.comment_service import CommentService

router = APIRouter(prefix="/api", tags=["评论"])


@router.get("/comments", response_model=ResponseModel)
async def list_comments(
    post_id: Optional[int] = Query(None, alias="postId", description="按文章筛选"),
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_admin)
):
    """
    管理后台评论列表（所有状态，顶级评论附带回复）
    """
    tree = await CommentService.admin_tree(db, post_id)
    return ResponseModel(code=200, data=tree)


@router.post("/comments", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
async def create_comment(
    request: CommentCreate,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context)
):
    """
    发表评论或回复（需登录）
    """
    comment = await CommentService.create(db, request, auth)
    return ResponseModel(
        code=201,
        message="评论已提交",
        data=await CommentService.build_node(db, comment)
    )


@router.get("/comments/{comment_id}", response_model=ResponseModel)
async def get_comment(
    comment_id: int,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_admin)
):
    """
    评论详情（附带回复）
    """
    comment = await CommentService.get(db, comment_id)
    return ResponseModel(code=200, data=await CommentService.build_node(db, comment))


@router.put("/comments/{comment_id}", response_model=ResponseModel)
async def update_comment(
    comment_id: int,
    request: CommentUpdate,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_admin)
):
    """
    更新评论内容或状态
    """
    comment = await CommentService.get(db, comment_id)
    comment = await CommentService.update(db, comment, request)
    return ResponseModel(code=200, message="评论更新成功", data=await CommentService.build_node(db, comment))


@router.delete("/comments/{comment_id}", response_model=ResponseModel)
async def delete_comment(
    comment_id: int,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_admin)
):
    """
    删除评论（回复一并删除）
    """
    comment = await CommentService.get(db, comment_id)
    await CommentService.delete(db, comment)
    return ResponseModel(code=200, message="评论删除成功")


@router.patch("/comments/{comment_id}/approve", response_model=ResponseModel)
async def approve_comment(
    comment_id: int,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_admin)
):
    """
    审核通过评论（不影响回复）
    """
    comment = await CommentService.get(db, comment_id)
    comment = await CommentService.set_status(db, comment, COMMENT_STATUS_APPROVED)
    return ResponseModel(code=200, message="评论已通过审核", data=await CommentService.build_node(db, comment))


@router.patch("/comments/{comment_id}/mark-spam", response_model=ResponseModel)
async def mark_comment_spam(
    comment_id: int,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_admin)
):
    """
    标记为垃圾评论
    """
    comment = await CommentService.get(db, comment_id)
    comment = await CommentService.set_status(db, comment, COMMENT_STATUS_SPAM)
    return ResponseModel(code=200, message="评论已标记为垃圾评论", data=await CommentService.build_node(db, comment))


@router.get("/posts/{post_id}/comments", response_model=ResponseModel)
async def get_post_comments(
    post_id: int,
    db: AsyncSession = Depends(get_db)
):
    """
    文章的公开评论（仅已审核）
    """
    tree = await CommentService.public_tree(db, post_id)
    return ResponseModel(code=200, data=tree)
