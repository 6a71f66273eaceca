"""
分类与标签Schema模型
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class CategoryCreate(BaseModel):
    """创建/重命名分类请求模型"""
    name: str = Field(..., min_length=1, max_length=255, description="分类名称")
    description: Optional[str] = Field(None, description="分类描述")


class CategoryResponse(BaseModel):
    """分类响应模型"""
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    postsCount: int = 0
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class TagCreate(BaseModel):
    """创建/重命名标签请求模型"""
    name: str = Field(..., min_length=1, max_length=255, description="标签名称")


class TagResponse(BaseModel):
    """标签响应模型"""
    id: int
    name: str
    slug: str
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class CategoryIdsRequest(BaseModel):
    """文章-分类关联操作请求模型"""
    categoryIds: List[int] = Field(..., description="分类ID列表")


class TagIdsRequest(BaseModel):
    """文章-标签关联操作请求模型"""
    tagIds: List[int] = Field(..., description="标签ID列表")
