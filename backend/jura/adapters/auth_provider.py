"""
身份认证提供方适配器
注册、登录和 token 校验委托给 Supabase Auth
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

logger = logging.getLogger(__name__)


class AuthProviderError(Exception):
    """身份提供方返回的错误"""


@dataclass
class AuthIdentity:
    """身份提供方中的用户标识"""
    auth_id: str
    email: str
    access_token: Optional[str] = None


class AuthProvider(Protocol):
    def sign_up(self, email: str, password: str) -> AuthIdentity:
        ...

    def sign_in(self, email: str, password: str) -> AuthIdentity:
        ...

    def get_user(self, token: str) -> Optional[AuthIdentity]:
        ...


class SupabaseAuthProvider:
    """Supabase Auth 实现"""

    def __init__(self, client: Any):
        self.client = client

    def sign_up(self, email: str, password: str) -> AuthIdentity:
        """
        Raises:
            AuthProviderError: 注册失败
        """
        try:
            response = self.client.auth.sign_up({"email": email, "password": password})
        except Exception as e:
            raise AuthProviderError(str(e)) from e
        if response.user is None:
            raise AuthProviderError("Sign up did not return a user")
        token = response.session.access_token if response.session else None
        return AuthIdentity(auth_id=response.user.id, email=email, access_token=token)

    def sign_in(self, email: str, password: str) -> AuthIdentity:
        """
        Raises:
            AuthProviderError: 凭据错误或提供方不可用
        """
        try:
            response = self.client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            raise AuthProviderError(str(e)) from e
        if response.user is None or response.session is None:
            raise AuthProviderError("Invalid credentials")
        return AuthIdentity(
            auth_id=response.user.id,
            email=response.user.email or email,
            access_token=response.session.access_token
        )

    def get_user(self, token: str) -> Optional[AuthIdentity]:
        """token 无效时返回 None"""
        try:
            response = self.client.auth.get_user(token)
        except Exception as e:
            logger.info("[SupabaseAuthProvider] token rejected: %s", e)
            return None
        if response is None or response.user is None:
            return None
        return AuthIdentity(auth_id=response.user.id, email=response.user.email or "")
