"""
评论Schema模型
"""
from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime

from app.schemas.user import AuthorInfo

CommentStatusLiteral = Literal["pending", "approved", "spam"]


class CommentCreate(BaseModel):
    """创建评论请求模型"""
    postId: int = Field(..., description="文章ID")
    body: str = Field(..., min_length=1, description="评论内容")
    parentCommentId: Optional[int] = Field(None, description="父评论ID，回复时填写")
    status: Optional[CommentStatusLiteral] = Field(None, description="评论状态（仅管理员可设置）")


class CommentUpdate(BaseModel):
    """更新评论请求模型"""
    body: Optional[str] = Field(None, min_length=1)
    status: Optional[CommentStatusLiteral] = None


class CommentNode(BaseModel):
    """评论树节点模型（支持递归）"""
    id: int
    postId: int
    userId: Optional[int] = None
    user: Optional[AuthorInfo] = None
    parentCommentId: Optional[int] = None
    body: str
    status: str
    replies: List['CommentNode'] = []
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


# 启用前向引用
CommentNode.model_rebuild()
