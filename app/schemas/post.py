"""
文章Schema模型
"""
from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime

from app.schemas.user import AuthorInfo
from app.schemas.taxonomy import CategoryResponse, TagResponse
from app.schemas.media import MediaResponse

PostStatusLiteral = Literal["draft", "published", "archived"]


class PostCreate(BaseModel):
    """创建文章请求模型"""
    title: str = Field(..., min_length=1, max_length=255, description="文章标题")
    body: str = Field(..., min_length=1, description="文章正文")
    status: PostStatusLiteral = Field(..., description="文章状态：draft|published|archived")
    publishedAt: Optional[datetime] = Field(None, description="发布时间")
    categories: Optional[List[int]] = Field(None, description="分类ID列表")
    tags: Optional[List[int]] = Field(None, description="标签ID列表")


class PostUpdate(BaseModel):
    """更新文章请求模型"""
    title: Optional[str] = Field(None, min_length=1, max_length=255, description="文章标题")
    body: Optional[str] = Field(None, min_length=1, description="文章正文")
    status: Optional[PostStatusLiteral] = Field(None, description="文章状态")
    publishedAt: Optional[datetime] = Field(None, description="发布时间")
    categories: Optional[List[int]] = Field(None, description="分类ID列表，传入则整体替换")
    tags: Optional[List[int]] = Field(None, description="标签ID列表，传入则整体替换")


class PostResponse(BaseModel):
    """文章响应模型（包含关联信息）"""
    id: int
    title: str
    slug: str
    body: str
    status: str
    publishedAt: Optional[datetime] = None
    userId: Optional[int] = None
    user: Optional[AuthorInfo] = None
    categories: List[CategoryResponse] = []
    tags: List[TagResponse] = []
    media: List[MediaResponse] = []
    imageUrl: Optional[str] = None
    secondaryImageUrl: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class PostSummary(BaseModel):
    """文章简要信息"""
    id: int
    title: str
    slug: str
    status: str
    publishedAt: Optional[datetime] = None


class RevisionCreate(BaseModel):
    """手动保存修订请求模型"""
    postId: int = Field(..., description="文章ID")
    bodySnapshot: str = Field(..., min_length=1, description="正文快照")


class RevisionResponse(BaseModel):
    """修订记录响应模型"""
    id: int
    postId: int
    editorId: Optional[int] = None
    editor: Optional[AuthorInfo] = None
    bodySnapshot: str
    createdAt: Optional[datetime] = None
