"""
认证工具函数
"""
from datetime import timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from app.core.config import settings
from app.core.exceptions import AuthenticationFailed
from app.utils.time import utcnow


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    创建JWT访问token

    Token的有效期由服务端的access_tokens记录控制（最长有效期+闲置时间），
    因此默认不写入exp；只有显式传入expires_delta时才额外设置exp。

    Args:
        data: 要编码到token中的数据（sub=用户ID，jti=token标识）
        expires_delta: 可选的JWT过期时间增量

    Returns:
        str: JWT token字符串
    """
    to_encode = data.copy()

    if expires_delta:
        to_encode.update({"exp": utcnow() + expires_delta})

    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt


def verify_token(token: str, raise_on_error: bool = True) -> Optional[Dict[str, Any]]:
    """
    验证JWT token

    Args:
        token: JWT token字符串
        raise_on_error: 验证失败时是否抛出异常，False时返回None

    Returns:
        Dict: token中的payload数据，验证失败时返回None（如果raise_on_error=False）

    Raises:
        AuthenticationFailed: token无效或过期（如果raise_on_error=True）
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return payload
    except JWTError:
        if raise_on_error:
            raise AuthenticationFailed("Token无效或已过期")
        return None


def parse_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    从Authorization请求头中提取token

    Returns:
        str: token字符串；未提供请求头时返回None

    Raises:
        AuthenticationFailed: 请求头格式错误
    """
    if not authorization or authorization.strip() == "":
        return None

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthenticationFailed("认证格式错误，应为: Bearer {token}")

    return parts[1]
