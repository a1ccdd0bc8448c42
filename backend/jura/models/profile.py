"""
用户画像域模型 - 职业画像表
每个用户一份画像，嵌套结构以 JSON 列存储
"""

from typing import Any, Dict, List, Optional

from sqlmodel import Field, Column, JSON

from .base import TimestampModel, new_id

# basics 中允许出现的键
BASICS_FIELDS = ("email", "phone", "name", "location", "linkedin", "github", "website")

# 可整体替换的列表字段
LIST_SECTIONS = (
    "roles", "projects", "education", "certifications",
    "achievements", "skills", "languages", "evidence",
)


class Profile(TimestampModel, table=True):
    """
    职业画像表

    roles 元素结构:
        {id, title, company, location, start_date, end_date, current, description, highlights}
    languages 元素结构:
        {language, proficiency}
    """
    __tablename__ = "profiles"

    id: str = Field(default_factory=new_id, primary_key=True)

    user_id: str = Field(foreign_key="users.id", unique=True, index=True, nullable=False)

    # {email, phone, name, location, linkedin, github, website}
    basics: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))

    summary: Optional[str] = Field(default=None)

    roles: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    projects: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    education: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    certifications: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    achievements: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    skills: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    languages: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))

    # {looking_for_work, preferred_roles, preferred_locations, remote_only, salary_expectation}
    preferences: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))

    # 字段来源证据 [{field_path, source, confidence}]
    evidence: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))

    completeness_score: int = Field(default=0, nullable=False)

    def to_dict(self) -> Dict[str, Any]:
        """导出为普通字典（API 响应和 Agent 工具使用）"""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "basics": dict(self.basics or {}),
            "summary": self.summary,
            "roles": list(self.roles or []),
            "projects": list(self.projects or []),
            "education": list(self.education or []),
            "certifications": list(self.certifications or []),
            "achievements": list(self.achievements or []),
            "skills": list(self.skills or []),
            "languages": list(self.languages or []),
            "preferences": dict(self.preferences or {}),
            "evidence": list(self.evidence or []),
            "completeness_score": self.completeness_score,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
