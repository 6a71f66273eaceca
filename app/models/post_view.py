"""
文章浏览记录模型（只追加的事件日志）
"""
from sqlalchemy import Column, TIMESTAMP, ForeignKey
from app.db.database import Base, BigIntId
from app.utils.time import utcnow


class PostView(Base):
    __tablename__ = "post_views"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    post_id = Column(BigIntId, ForeignKey('posts.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = Column(BigIntId, ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    viewed_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, index=True)
