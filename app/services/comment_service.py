"""
评论服务
"""
import logging
from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.core.config import settings
from app.core.exceptions import NotFoundError, PermissionDenied, ValidationFailed
from app.models.comment import Comment, COMMENT_STATUSES, COMMENT_STATUS_APPROVED
from app.models.post import Post
from app.models.user import User, ROLE_ADMIN
from app.schemas.comment import CommentCreate, CommentUpdate, CommentNode
from app.services.auth_service import AuthContext
from app.services.user_service import load_users_map, author_info

logger = logging.getLogger(__name__)


def to_comment_node(comment: Comment, users_map: Dict[int, User], replies: Optional[List[CommentNode]] = None) -> CommentNode:
    return CommentNode(
        id=comment.id,
        postId=comment.post_id,
        userId=comment.user_id,
        user=author_info(users_map.get(comment.user_id)),
        parentCommentId=comment.parent_comment_id,
        body=comment.body,
        status=comment.status,
        replies=replies or [],
        createdAt=comment.created_at,
        updatedAt=comment.updated_at
    )


def build_comment_tree(
    comments: List[Comment],
    users_map: Dict[int, User],
    parent_id: Optional[int] = None
) -> List[CommentNode]:
    """
    构建评论树结构

    只从传入的评论中查找子节点，因此被过滤掉的父评论下的回复不会出现
    """
    result = []
    for comment in comments:
        if comment.parent_comment_id != parent_id:
            continue
        replies = build_comment_tree(comments, users_map, comment.id)
        result.append(to_comment_node(comment, users_map, replies))
    return result


class CommentService:
    """评论服务类"""

    @staticmethod
    def default_status() -> str:
        status = (settings.COMMENT_DEFAULT_STATUS or "").lower()
        return status if status in COMMENT_STATUSES else COMMENT_STATUSES[0]

    @staticmethod
    async def get(db: AsyncSession, comment_id: int) -> Comment:
        comment = await db.get(Comment, comment_id)
        if not comment:
            raise NotFoundError("评论不存在")
        return comment

    @classmethod
    async def create(cls, db: AsyncSession, data: CommentCreate, auth: AuthContext) -> Comment:
        """
        创建评论

        回复必须与父评论属于同一篇文章；只有管理员可以直接指定状态
        """
        post = await db.get(Post, data.postId)
        if not post:
            raise ValidationFailed({"postId": "文章不存在"})

        if data.parentCommentId is not None:
            parent = await db.get(Comment, data.parentCommentId)
            if not parent:
                raise ValidationFailed({"parentCommentId": "父评论不存在"})
            if parent.post_id != data.postId:
                raise ValidationFailed({"parentCommentId": "父评论不属于该文章"})

        status = cls.default_status()
        if data.status is not None:
            if not auth.has_role(ROLE_ADMIN):
                raise PermissionDenied("只有管理员可以设置评论状态")
            status = data.status

        comment = Comment(
            post_id=data.postId,
            user_id=auth.user_id,
            parent_comment_id=data.parentCommentId,
            body=data.body,
            status=status
        )
        db.add(comment)
        await db.commit()
        await db.refresh(comment)

        logger.info(
            "新评论: id=%s post_id=%s user_id=%s parent_id=%s status=%s",
            comment.id, comment.post_id, comment.user_id, comment.parent_comment_id, comment.status
        )
        return comment

    @staticmethod
    async def update(db: AsyncSession, comment: Comment, data: CommentUpdate) -> Comment:
        if data.body is not None:
            comment.body = data.body
        if data.status is not None:
            comment.status = data.status
        await db.commit()
        await db.refresh(comment)
        return comment

    @staticmethod
    async def set_status(db: AsyncSession, comment: Comment, status: str) -> Comment:
        """修改评论状态（只影响当前评论，不影响回复）"""
        comment.status = status
        await db.commit()
        await db.refresh(comment)
        logger.info("评论状态变更: id=%s status=%s", comment.id, status)
        return comment

    @staticmethod
    async def delete(db: AsyncSession, comment: Comment) -> None:
        """删除评论，回复由外键级联删除"""
        await db.delete(comment)
        await db.commit()

    @staticmethod
    async def public_tree(db: AsyncSession, post_id: int) -> List[CommentNode]:
        """
        文章的公开评论：只包含已审核的顶级评论及其已审核的回复
        """
        post = await db.get(Post, post_id)
        if not post:
            raise NotFoundError("文章不存在")

        result = await db.execute(
            select(Comment)
            .where(Comment.post_id == post_id, Comment.status == COMMENT_STATUS_APPROVED)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        )
        comments = list(result.scalars().all())
        users_map = await load_users_map(db, [c.user_id for c in comments])
        return build_comment_tree(comments, users_map)

    @staticmethod
    async def admin_tree(db: AsyncSession, post_id: Optional[int] = None) -> List[CommentNode]:
        """管理后台：所有状态的顶级评论及回复，最新的顶级评论在前"""
        query = select(Comment)
        if post_id is not None:
            query = query.where(Comment.post_id == post_id)
        result = await db.execute(query.order_by(Comment.created_at.asc(), Comment.id.asc()))
        comments = list(result.scalars().all())
        users_map = await load_users_map(db, [c.user_id for c in comments])
        return list(reversed(build_comment_tree(comments, users_map)))

    @staticmethod
    async def build_node(db: AsyncSession, comment: Comment) -> CommentNode:
        """单条评论及其全部回复"""
        result = await db.execute(
            select(Comment)
            .where(Comment.post_id == comment.post_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        )
        comments = list(result.scalars().all())
        users_map = await load_users_map(db, [c.user_id for c in comments])
        replies = build_comment_tree(comments, users_map, comment.id)
        return to_comment_node(comment, users_map, replies)
