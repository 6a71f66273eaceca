"""
附件、突发新闻、AI建议与上传Schema模型
"""
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any, Literal, Annotated
from datetime import datetime

Headline = Annotated[str, Field(max_length=500)]


class AttachmentCreate(BaseModel):
    """创建附件请求模型"""
    userId: Optional[int] = Field(None, description="所属用户ID，不传则为当前用户")
    type: str = Field(..., min_length=1, max_length=255, description="附件类型：avatar|logo|pdf")
    url: str = Field(..., min_length=1, max_length=1024, pattern=r"^https?://", description="资源URL")
    metadata: Optional[Dict[str, Any]] = Field(None, description="附加信息")


class AttachmentResponse(BaseModel):
    """附件响应模型"""
    id: int
    userId: Optional[int] = None
    type: str
    url: str
    metadata: Optional[Dict[str, Any]] = None
    createdAt: Optional[datetime] = None


class BreakingNewsSettings(BaseModel):
    """突发新闻设置"""
    useManualNews: bool = False
    manualNews: List[str] = Field(default_factory=list)
    useNewsapi: bool = True
    useNewsdata: bool = True


class BreakingNewsSettingsUpdate(BaseModel):
    """更新突发新闻设置请求模型"""
    useManualNews: bool = False
    manualNews: List[Headline] = Field(default_factory=list)
    useNewsapi: bool = True
    useNewsdata: bool = True

    def headlines(self) -> List[str]:
        return [item.strip() for item in self.manualNews if item and item.strip()]


class SuggestionRequest(BaseModel):
    """AI建议请求模型"""
    prompt: str = Field(..., description="提示内容")
    type: Literal["title", "excerpt", "content"] = Field(..., description="建议类型")


class UploadResponse(BaseModel):
    """上传结果"""
    url: str
    path: str
    size: int
    contentType: str
