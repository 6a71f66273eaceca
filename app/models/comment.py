"""
评论模型
"""
from sqlalchemy import Column, String, Text, TIMESTAMP, ForeignKey
from app.db.database import Base, BigIntId
from app.utils.time import utcnow

COMMENT_STATUS_PENDING = "pending"
COMMENT_STATUS_APPROVED = "approved"
COMMENT_STATUS_SPAM = "spam"
COMMENT_STATUSES = (COMMENT_STATUS_PENDING, COMMENT_STATUS_APPROVED, COMMENT_STATUS_SPAM)


class Comment(Base):
    __tablename__ = "comments"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    post_id = Column(BigIntId, ForeignKey('posts.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = Column(BigIntId, ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    parent_comment_id = Column(BigIntId, ForeignKey('comments.id', ondelete='CASCADE'), nullable=True)
    body = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default=COMMENT_STATUS_PENDING)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
