"""
媒体Schema模型
"""
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime


class MediaItem(BaseModel):
    """批量创建中的单个媒体"""
    type: str = Field(..., min_length=1, max_length=50, description="媒体类型：image|video")
    subtype: Optional[str] = Field(None, max_length=50, description="子类型：featured|secondary|gallery")
    url: str = Field(..., min_length=1, max_length=1024, pattern=r"^https?://", description="媒体URL")
    altText: Optional[str] = Field(None, max_length=255, description="替代文本")
    metadata: Optional[Dict[str, Any]] = Field(None, description="附加信息")
    order: Optional[int] = Field(None, description="排序值，不传则追加到末尾")


class MediaCreate(MediaItem):
    """创建媒体请求模型"""
    postId: int = Field(..., description="文章ID")


class MediaUpdate(BaseModel):
    """更新媒体请求模型"""
    type: Optional[str] = Field(None, min_length=1, max_length=50)
    subtype: Optional[str] = Field(None, max_length=50)
    url: Optional[str] = Field(None, min_length=1, max_length=1024, pattern=r"^https?://")
    altText: Optional[str] = Field(None, max_length=255)
    metadata: Optional[Dict[str, Any]] = None
    order: Optional[int] = None


class MediaBatchCreate(BaseModel):
    """批量创建媒体请求模型"""
    postId: int = Field(..., description="文章ID")
    items: List[MediaItem] = Field(..., min_length=1, description="媒体列表")


class MediaOrderItem(BaseModel):
    """排序项"""
    id: int
    order: int


class MediaOrderUpdate(BaseModel):
    """批量调整排序请求模型"""
    mediaItems: List[MediaOrderItem] = Field(..., min_length=1, description="媒体ID与新排序值")


class MediaResponse(BaseModel):
    """媒体响应模型"""
    id: int
    postId: int
    type: str
    subtype: Optional[str] = None
    url: str
    altText: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    order: int
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
