"""测试画像完整度评分"""

from jura.models.profile import Profile
from jura.services.profile_completeness import CHECKS, ProfileCompletenessService


def make_profile(**fields) -> Profile:
    return Profile(user_id="user-1", **fields)


class TestProfileCompletenessService:

    def setup_method(self):
        self.service = ProfileCompletenessService()

    def test_thirteen_checks_in_order(self):
        assert [name for name, _ in CHECKS] == [
            "basics.email",
            "basics.phone",
            "basics.name",
            "basics.location",
            "basics.linkedin",
            "basics.github or basics.website",
            "summary",
            "roles",
            "skills",
            "education",
            "projects",
            "certifications",
            "languages",
        ]

    def test_empty_profile_scores_zero(self):
        result = self.service.calculate(make_profile())
        assert result.score == 0
        assert len(result.missing_fields) == 13

    def test_email_only_rounds_to_eight(self):
        result = self.service.calculate(make_profile(basics={"email": "ada@example.com"}))
        # 100 / 13 = 7.69
        assert result.score == 8
        assert "basics.email" not in result.missing_fields

    def test_website_satisfies_github_or_website(self):
        result = self.service.calculate(make_profile(basics={"website": "https://ada.dev"}))
        assert "basics.github or basics.website" not in result.missing_fields

    def test_github_satisfies_github_or_website(self):
        result = self.service.calculate(make_profile(basics={"github": "https://github.com/ada"}))
        assert "basics.github or basics.website" not in result.missing_fields
        assert result.score == 8

    def test_blank_summary_is_missing(self):
        result = self.service.calculate(make_profile(summary="   "))
        assert "summary" in result.missing_fields

    def test_complete_profile_scores_hundred(self):
        profile = make_profile(
            basics={
                "email": "ada@example.com",
                "phone": "+44 20 0000 0000",
                "name": "Ada Lovelace",
                "location": "London",
                "linkedin": "https://linkedin.com/in/ada",
                "github": "https://github.com/ada",
            },
            summary="Engineer and analyst.",
            roles=[{"id": "r1", "title": "Analyst"}],
            skills=["Python"],
            education=[{"school": "Home"}],
            projects=[{"name": "Engine"}],
            certifications=[{"name": "Maths"}],
            languages=[{"language": "English", "proficiency": "native"}],
        )
        result = self.service.calculate(profile)
        assert result.score == 100
        assert result.missing_fields == []

    def test_half_rounds_up(self):
        # 完成 7 项：700 / 13 = 53.85
        profile = make_profile(
            basics={
                "email": "a@b.co",
                "phone": "1",
                "name": "A",
                "location": "L",
                "linkedin": "li",
                "github": "gh",
            },
            summary="s",
        )
        assert self.service.calculate(profile).score == 54
