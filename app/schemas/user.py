"""
用户与认证Schema模型
"""
from pydantic import BaseModel, Field, EmailStr, model_validator
from typing import Optional, Literal
from datetime import datetime

RoleLiteral = Literal["admin", "editor", "author", "viewer"]


class RegisterRequest(BaseModel):
    """读者注册请求模型"""
    fname: str = Field(..., min_length=1, max_length=30, description="名")
    lname: str = Field(..., min_length=1, max_length=30, description="姓")
    email: EmailStr = Field(..., description="邮箱")
    password: str = Field(..., min_length=8, description="密码")
    password_confirmation: str = Field(..., description="确认密码")
    number: Optional[str] = Field(None, max_length=15, description="电话")

    @model_validator(mode="after")
    def check_password_confirmation(self):
        if self.password != self.password_confirmation:
            raise ValueError("两次输入的密码不一致")
        return self


class LoginRequest(BaseModel):
    """登录请求模型"""
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserCreate(RegisterRequest):
    """管理员创建用户请求模型"""
    role: RoleLiteral = Field(..., description="角色")


class UserUpdate(BaseModel):
    """管理员更新用户请求模型"""
    fname: str = Field(..., min_length=1, max_length=30)
    lname: str = Field(..., min_length=1, max_length=30)
    email: EmailStr
    role: RoleLiteral
    number: Optional[str] = Field(None, max_length=15)
    password: Optional[str] = Field(None, min_length=8)
    password_confirmation: Optional[str] = None

    @model_validator(mode="after")
    def check_password_confirmation(self):
        if self.password and self.password != self.password_confirmation:
            raise ValueError("两次输入的密码不一致")
        return self


class ProfileUpdate(BaseModel):
    """个人资料更新请求模型"""
    fname: Optional[str] = Field(None, min_length=1, max_length=30)
    lname: Optional[str] = Field(None, min_length=1, max_length=30)
    email: Optional[EmailStr] = None
    number: Optional[str] = Field(None, max_length=15)
    current_password: Optional[str] = None
    new_password: Optional[str] = Field(None, min_length=8)
    new_password_confirmation: Optional[str] = None

    @model_validator(mode="after")
    def check_new_password(self):
        if self.new_password is not None:
            if not self.current_password:
                raise ValueError("修改密码需要提供当前密码")
            if self.new_password != self.new_password_confirmation:
                raise ValueError("两次输入的新密码不一致")
        return self


class UserResponse(BaseModel):
    """用户响应模型"""
    id: int
    name: str
    fname: str
    lname: str
    email: str
    role: str
    number: Optional[str] = None
    articleCount: int = 0
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class AuthorInfo(BaseModel):
    """作者信息"""
    id: int
    name: str
    email: Optional[str] = None


class TokenResponse(BaseModel):
    """登录/注册成功响应模型"""
    accessToken: str
    tokenType: str = "Bearer"
    user: UserResponse
