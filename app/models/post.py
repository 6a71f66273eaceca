"""
文章模型及其多对多关联表
"""
from sqlalchemy import Column, String, Text, TIMESTAMP, ForeignKey, Table, func
from app.db.database import Base, BigIntId

# 文章状态
POST_STATUS_DRAFT = "draft"
POST_STATUS_PUBLISHED = "published"
POST_STATUS_ARCHIVED = "archived"
POST_STATUSES = (POST_STATUS_DRAFT, POST_STATUS_PUBLISHED, POST_STATUS_ARCHIVED)


# 文章-分类关联表（联合主键保证同一对关系只有一行）
post_category = Table(
    "post_category",
    Base.metadata,
    Column("post_id", BigIntId, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", BigIntId, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
)

# 文章-标签关联表
post_tag = Table(
    "post_tag",
    Base.metadata,
    Column("post_id", BigIntId, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", BigIntId, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Post(Base):
    __tablename__ = "posts"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    user_id = Column(BigIntId, ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False)
    body = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default=POST_STATUS_DRAFT)
    published_at = Column(TIMESTAMP(timezone=True), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
