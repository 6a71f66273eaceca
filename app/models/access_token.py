"""
访问Token模型
"""
from sqlalchemy import Column, String, TIMESTAMP, ForeignKey
from app.db.database import Base, BigIntId
from app.utils.time import utcnow


class AccessToken(Base):
    __tablename__ = "access_tokens"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    user_id = Column(BigIntId, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    jti = Column(String(64), unique=True, nullable=False)  # JWT中的token标识
    name = Column(String(64), nullable=False, default="api")
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    last_used_at = Column(TIMESTAMP(timezone=True), nullable=True)
