"""
通用Schema模型
"""
from math import ceil
from pydantic import BaseModel
from typing import TypeVar, Optional

T = TypeVar('T')


class ResponseModel(BaseModel):
    """标准响应模型"""
    code: int = 200
    message: Optional[str] = None
    data: Optional[T] = None


class PaginationModel(BaseModel):
    """分页模型"""
    page: int
    limit: int
    total: int
    totalPages: int


def build_pagination(page: int, limit: int, total: int) -> PaginationModel:
    """根据总数构建分页信息"""
    return PaginationModel(
        page=page,
        limit=limit,
        total=total,
        totalPages=ceil(total / limit) if total > 0 else 0
    )
