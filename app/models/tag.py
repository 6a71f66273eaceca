"""
标签模型
"""
from sqlalchemy import Column, String, TIMESTAMP, func
from app.db.database import Base, BigIntId


class Tag(Base):
    __tablename__ = "tags"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False)
    slug = Column(String(255), unique=True, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
