"""
用户模型
"""
from sqlalchemy import Column, String, TIMESTAMP, func
from app.db.database import Base, BigIntId

# 角色
ROLE_ADMIN = "admin"
ROLE_EDITOR = "editor"
ROLE_AUTHOR = "author"
ROLE_VIEWER = "viewer"
ROLES = (ROLE_ADMIN, ROLE_EDITOR, ROLE_AUTHOR, ROLE_VIEWER)
WRITER_ROLES = (ROLE_ADMIN, ROLE_EDITOR, ROLE_AUTHOR)


class User(Base):
    __tablename__ = "users"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    fname = Column(String(30), nullable=False)
    lname = Column(String(30), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password = Column(String(255), nullable=False)  # 密码哈希
    role = Column(String(20), nullable=False, default=ROLE_VIEWER)
    number = Column(String(20), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    @property
    def full_name(self) -> str:
        return f"{self.fname} {self.lname}".strip()

    def has_role(self, *roles: str) -> bool:
        """角色比较不区分大小写"""
        current = (self.role or "").lower()
        return current in {role.lower() for role in roles}
