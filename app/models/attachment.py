"""
附件模型（头像、logo、pdf等，与文章无关）
"""
from sqlalchemy import Column, String, JSON, TIMESTAMP, ForeignKey
from app.db.database import Base, BigIntId
from app.utils.time import utcnow


class Attachment(Base):
    __tablename__ = "attachments"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    user_id = Column(BigIntId, ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    type = Column(String(255), nullable=False)
    url = Column(String(1024), nullable=False)
    meta = Column("metadata", JSON, nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
