"""
分类模型
"""
from sqlalchemy import Column, String, TIMESTAMP, Text, func
from app.db.database import Base, BigIntId


class Category(Base):
    __tablename__ = "categories"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False)
    slug = Column(String(255), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
