"""
认证服务层

身份由 Supabase Auth 管理，本地 users 表只保存账号映射：
1. 注册：校验密码强度 -> 提供方注册 -> 本地用户 + 默认 Agent + 空画像
2. 登录：提供方登录 -> 查找本地用户 -> 返回 token
3. token 校验：提供方查询 -> 本地用户
"""

import logging
import re
from typing import Any, Dict, List

from jura.adapters.auth_provider import AuthProvider, AuthProviderError
from jura.db.init_db import SessionFactory
from jura.errors import AppError, Conflict, NotFound, Unauthorized, ValidationFailed
from jura.models.user import User
from jura.repositories.user_repository import UserRepository
from jura.services.agent_service import AgentService
from jura.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 8


def validate_credentials(email: str, password: str) -> None:
    """
    校验邮箱格式和密码强度（至少 8 位，包含小写字母、大写字母和数字）

    Raises:
        ValidationFailed: 带字段级错误
    """
    errors: List[Dict[str, str]] = []
    if not email or not EMAIL_PATTERN.match(email):
        errors.append({"field": "email", "message": "Invalid email address"})

    password = password or ""
    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append({"field": "password", "message": "Password must be at least 8 characters"})
    if not re.search(r"[a-z]", password):
        errors.append({"field": "password", "message": "Password must contain a lowercase letter"})
    if not re.search(r"[A-Z]", password):
        errors.append({"field": "password", "message": "Password must contain an uppercase letter"})
    if not re.search(r"\d", password):
        errors.append({"field": "password", "message": "Password must contain a digit"})

    if errors:
        raise ValidationFailed(errors=errors)


def serialize_user(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "auth_id": user.auth_id,
        "organization_id": user.organization_id,
        "created_at": user.created_at.isoformat() if user.created_at else None,
    }


class AuthService:
    """
    认证服务类

    使用示例：
        service = AuthService(session_factory, provider, agent_service, profile_service)
        user = service.sign_up("ada@example.com", "Secret123")
        result = service.sign_in("ada@example.com", "Secret123")
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        provider: AuthProvider,
        agents: AgentService,
        profiles: ProfileService
    ):
        self.session_factory = session_factory
        self.provider = provider
        self.agents = agents
        self.profiles = profiles

    def sign_up(self, email: str, password: str) -> User:
        """
        注册新用户

        Returns:
            本地 User 对象

        Raises:
            ValidationFailed: 邮箱或密码不合法
            Conflict: 邮箱已注册
            AppError: 提供方拒绝注册（400）
        """
        validate_credentials(email, password)

        with self.session_factory() as session:
            if UserRepository(session).get_by_email(email) is not None:
                raise Conflict("User with this email already exists")

        try:
            identity = self.provider.sign_up(email, password)
        except AuthProviderError as e:
            logger.warning("[AuthService] provider sign up failed for %s: %s", email, e)
            raise AppError(str(e) or "Sign up failed", status_code=400)

        with self.session_factory() as session:
            repo = UserRepository(session)
            existing = repo.get_by_auth_id(identity.auth_id)
            if existing is not None:
                return existing
            user = repo.create(email=email, auth_id=identity.auth_id)

        self.agents.create_default(user.id)
        self.profiles.ensure(user)
        logger.info("[AuthService] signed up user=%s", user.id)
        return user

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        """
        登录

        Returns:
            {"token": access_token, "user": User}

        Raises:
            Unauthorized: 凭据错误
            NotFound: 提供方有账号但本地没有用户
        """
        try:
            identity = self.provider.sign_in(email, password)
        except AuthProviderError as e:
            logger.info("[AuthService] sign in rejected for %s: %s", email, e)
            raise Unauthorized(str(e) or "Sign in failed")

        with self.session_factory() as session:
            user = UserRepository(session).get_by_auth_id(identity.auth_id)
        if user is None:
            raise NotFound("User profile not found")
        return {"token": identity.access_token, "user": user}

    def validate_token(self, token: str) -> User:
        """
        Raises:
            Unauthorized: token 缺失、无效，或没有对应的本地用户
        """
        if not token:
            raise Unauthorized("Missing authentication token")
        identity = self.provider.get_user(token)
        if identity is None:
            raise Unauthorized("Invalid or expired token")
        with self.session_factory() as session:
            user = UserRepository(session).get_by_auth_id(identity.auth_id)
        if user is None:
            raise Unauthorized("User not found")
        return user
