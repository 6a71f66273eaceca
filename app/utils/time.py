"""
时间工具函数
"""
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """当前UTC时间（带时区）"""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    统一转换为带时区的UTC时间

    SQLite 读回的时间不带时区，按UTC处理
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
