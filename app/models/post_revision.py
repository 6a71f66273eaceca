"""
文章修订记录模型（只追加，不修改）
"""
from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey
from app.db.database import Base, BigIntId
from app.utils.time import utcnow


class PostRevision(Base):
    __tablename__ = "post_revisions"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    post_id = Column(BigIntId, ForeignKey('posts.id', ondelete='CASCADE'), nullable=False, index=True)
    editor_id = Column(BigIntId, ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    body_snapshot = Column(Text, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
