"""
画像完整度评分
对画像做 13 项等权布尔检查，得出 0-100 的确定性分数
"""

from dataclasses import dataclass, field
from typing import Any, Callable, List, Tuple

from jura.models.profile import Profile


def _present(value: Any) -> bool:
    return bool(value and str(value).strip())


def _basics(profile: Profile, key: str) -> Any:
    return (profile.basics or {}).get(key)


# (字段路径, 检查函数)；顺序决定 missing_fields 的顺序
CHECKS: List[Tuple[str, Callable[[Profile], bool]]] = [
    ("basics.email", lambda p: _present(_basics(p, "email"))),
    ("basics.phone", lambda p: _present(_basics(p, "phone"))),
    ("basics.name", lambda p: _present(_basics(p, "name"))),
    ("basics.location", lambda p: _present(_basics(p, "location"))),
    ("basics.linkedin", lambda p: _present(_basics(p, "linkedin"))),
    (
        "basics.github or basics.website",
        lambda p: _present(_basics(p, "github")) or _present(_basics(p, "website")),
    ),
    ("summary", lambda p: _present(p.summary)),
    ("roles", lambda p: len(p.roles or []) > 0),
    ("skills", lambda p: len(p.skills or []) > 0),
    ("education", lambda p: len(p.education or []) > 0),
    ("projects", lambda p: len(p.projects or []) > 0),
    ("certifications", lambda p: len(p.certifications or []) > 0),
    ("languages", lambda p: len(p.languages or []) > 0),
]


@dataclass
class CompletenessResult:
    score: int
    missing_fields: List[str] = field(default_factory=list)


class ProfileCompletenessService:
    """所有检查项等权：score = round(100 * 完成项 / 总项)"""

    def calculate(self, profile: Profile) -> CompletenessResult:
        missing = [path for path, check in CHECKS if not check(profile)]
        completed = len(CHECKS) - len(missing)
        score = int(100 * completed / len(CHECKS) + 0.5)
        return CompletenessResult(score=score, missing_fields=missing)
