"""
路由依赖
从 app.state 取容器，从 Authorization: Bearer 头解析当前用户
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from jura.container import Container
from jura.errors import Unauthorized
from jura.models.user import User

bearer_scheme = HTTPBearer(auto_error=False)


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    container: Container = Depends(get_container),
) -> User:
    """
    Raises:
        Unauthorized: 缺少 token 或 token 无效
    """
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Missing authentication token")
    return container.auth.validate_token(credentials.credentials)
