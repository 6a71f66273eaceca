"""
业务异常定义

全部继承自 HTTPException，服务层可以直接抛出，由 FastAPI 统一转换为响应。
"""
from typing import Dict, Optional
from fastapi import HTTPException, status


class AppException(HTTPException):
    """应用基础异常类"""
    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR
    message_default = "服务器内部错误"

    def __init__(self, message: Optional[str] = None, headers: Optional[Dict[str, str]] = None):
        self.message = message or self.message_default
        super().__init__(status_code=self.status_code_default, detail=self.message, headers=headers)


class NotFoundError(AppException):
    """资源不存在"""
    status_code_default = status.HTTP_404_NOT_FOUND
    message_default = "资源不存在"


class ConflictError(AppException):
    """唯一性冲突（邮箱、名称、slug等）"""
    status_code_default = status.HTTP_409_CONFLICT
    message_default = "资源冲突"


class AuthenticationFailed(AppException):
    """未认证或Token失效"""
    status_code_default = status.HTTP_401_UNAUTHORIZED
    message_default = "未认证"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class PermissionDenied(AppException):
    """权限不足"""
    status_code_default = status.HTTP_403_FORBIDDEN
    message_default = "权限不足"


class UpstreamServiceError(AppException):
    """第三方服务调用失败"""
    status_code_default = status.HTTP_502_BAD_GATEWAY
    message_default = "第三方服务调用失败"


class ServiceUnavailable(AppException):
    """依赖的服务未配置"""
    status_code_default = status.HTTP_503_SERVICE_UNAVAILABLE
    message_default = "服务未配置"


class ValidationFailed(HTTPException):
    """
    业务校验失败

    detail 与 FastAPI 请求校验错误保持同样的结构：
    [{"loc": ["body", 字段], "msg": 说明, "type": "value_error"}]
    """

    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        detail = [
            {"loc": ["body", *field.split(".")], "msg": msg, "type": "value_error"}
            for field, msg in errors.items()
        ]
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)
