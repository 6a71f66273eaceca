"""
媒体模型
"""
from sqlalchemy import Column, String, Integer, JSON, TIMESTAMP, ForeignKey, func
from app.db.database import Base, BigIntId

MEDIA_SUBTYPE_FEATURED = "featured"
MEDIA_SUBTYPE_SECONDARY = "secondary"


class Media(Base):
    __tablename__ = "media"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    post_id = Column(BigIntId, ForeignKey('posts.id', ondelete='CASCADE'), nullable=False, index=True)
    type = Column(String(50), nullable=False)  # image, video
    subtype = Column(String(50), nullable=True)  # featured, secondary, gallery
    url = Column(String(1024), nullable=False)
    alt_text = Column(String(255), nullable=True)
    meta = Column("metadata", JSON, nullable=True)  # 宽高、文件大小等
    order = Column("order", Integer, nullable=False, default=0)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
