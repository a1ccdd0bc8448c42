"""
画像服务层

职业画像的读取和编辑，每次写入都重新计算完整度分数
"""

import logging
from typing import Any, Dict, Optional

from jura.db.init_db import SessionFactory
from jura.errors import NotFound
from jura.models.base import new_id
from jura.models.profile import BASICS_FIELDS, LIST_SECTIONS, Profile
from jura.models.user import User
from jura.repositories.profile_repository import ProfileRepository
from jura.repositories.user_repository import UserRepository
from jura.services.profile_completeness import ProfileCompletenessService

logger = logging.getLogger(__name__)

ROLE_FIELDS = (
    "title", "company", "location", "start_date", "end_date",
    "current", "description", "highlights",
)


class ProfileService:
    """
    画像服务类

    同一画像的并发编辑没有加锁，后写入者覆盖先写入者
    """

    def __init__(self, session_factory: SessionFactory, completeness: ProfileCompletenessService):
        self.session_factory = session_factory
        self.completeness = completeness

    def _save(self, repo: ProfileRepository, profile: Profile) -> Profile:
        profile.completeness_score = self.completeness.calculate(profile).score
        return repo.save(profile)

    def _load_or_create(self, repo: ProfileRepository, session, user_id: str) -> Profile:
        profile = repo.get_by_user(user_id)
        if profile is None:
            user = UserRepository(session).get_by_id(user_id)
            if user is None:
                raise NotFound("User not found")
            profile = repo.create(user_id, email=user.email or "")
            logger.info("[ProfileService] created profile for user=%s", user_id)
        return profile

    def ensure(self, user: User) -> Profile:
        """
        确保用户有画像，不存在则创建空画像（basics.email 取自账号）

        Args:
            user: 用户对象

        Returns:
            Profile 对象
        """
        with self.session_factory() as session:
            repo = ProfileRepository(session)
            profile = repo.get_by_user(user.id)
            if profile is None:
                profile = repo.create(user.id, email=user.email or "")
                profile = self._save(repo, profile)
            return profile

    def get(self, user_id: str) -> Profile:
        """获取画像，不存在时按账号信息创建"""
        with self.session_factory() as session:
            return self._load_or_create(ProfileRepository(session), session, user_id)

    def update(self, user_id: str, changes: Dict[str, Any]) -> Profile:
        """
        更新画像

        basics 和 preferences 按键合并；summary 以及给出的列表字段整体替换

        Args:
            user_id: 用户 ID
            changes: 部分画像字段

        Returns:
            更新后的 Profile
        """
        with self.session_factory() as session:
            repo = ProfileRepository(session)
            profile = self._load_or_create(repo, session, user_id)

            if changes.get("basics") is not None:
                basics = dict(profile.basics or {})
                for key, value in changes["basics"].items():
                    if key in BASICS_FIELDS:
                        basics[key] = value
                profile.basics = basics

            if changes.get("preferences") is not None:
                profile.preferences = {**(profile.preferences or {}), **changes["preferences"]}

            if "summary" in changes:
                profile.summary = changes["summary"]

            for section in LIST_SECTIONS:
                if changes.get(section) is not None:
                    setattr(profile, section, list(changes[section]))

            return self._save(repo, profile)

    def add_role(self, user_id: str, role: Dict[str, Any]) -> Profile:
        """
        追加一段工作经历，自动分配 role id

        Returns:
            更新后的 Profile
        """
        with self.session_factory() as session:
            repo = ProfileRepository(session)
            profile = self._load_or_create(repo, session, user_id)
            new_role = {key: role[key] for key in ROLE_FIELDS if key in role}
            new_role["id"] = new_id()
            new_role.setdefault("highlights", [])
            profile.roles = [*(profile.roles or []), new_role]
            return self._save(repo, profile)

    def update_role(self, user_id: str, role_id: str, changes: Dict[str, Any]) -> Profile:
        """
        Raises:
            NotFound: role 不存在
        """
        with self.session_factory() as session:
            repo = ProfileRepository(session)
            profile = self._load_or_create(repo, session, user_id)
            roles = [dict(role) for role in (profile.roles or [])]
            target = self._find_role(roles, role_id)
            if target is None:
                raise NotFound("Role not found")
            for key in ROLE_FIELDS:
                if key in changes:
                    target[key] = changes[key]
            profile.roles = roles
            return self._save(repo, profile)

    def delete_role(self, user_id: str, role_id: str) -> Profile:
        """
        Raises:
            NotFound: role 不存在
        """
        with self.session_factory() as session:
            repo = ProfileRepository(session)
            profile = self._load_or_create(repo, session, user_id)
            roles = [role for role in (profile.roles or []) if role.get("id") != role_id]
            if len(roles) == len(profile.roles or []):
                raise NotFound("Role not found")
            profile.roles = roles
            return self._save(repo, profile)

    @staticmethod
    def _find_role(roles, role_id: str) -> Optional[Dict[str, Any]]:
        for role in roles:
            if role.get("id") == role_id:
                return role
        return None
