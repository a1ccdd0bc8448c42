"""
测试认证服务层
"""

import pytest

from jura.adapters.auth_provider import AuthProviderError
from jura.errors import AppError, Conflict, NotFound, Unauthorized, ValidationFailed
from jura.services.auth_service import serialize_user, validate_credentials

PASSWORD = "Secret123"


class TestValidateCredentials:

    def test_valid(self):
        validate_credentials("ada@example.com", PASSWORD)

    @pytest.mark.parametrize("password", ["Short1", "alllower123", "ALLUPPER123", "NoDigitsHere"])
    def test_weak_passwords(self, password):
        with pytest.raises(ValidationFailed) as exc_info:
            validate_credentials("ada@example.com", password)
        assert all(error["field"] == "password" for error in exc_info.value.errors)

    def test_invalid_email(self):
        with pytest.raises(ValidationFailed) as exc_info:
            validate_credentials("not-an-email", PASSWORD)
        assert exc_info.value.errors == [{"field": "email", "message": "Invalid email address"}]


class TestAuthService:

    @pytest.fixture(autouse=True)
    def setup(self, container, mock_auth_provider):
        self.container = container
        self.service = container.auth
        self.provider = mock_auth_provider

    def test_sign_up_provisions_agent_and_profile(self):
        user = self.service.sign_up("grace@example.com", PASSWORD)

        assert user.auth_id == "auth-grace@example.com"
        default = self.container.agents.get_default(user.id)
        assert default.name == "Career Assistant"
        assert self.container.profiles.get(user.id).basics["email"] == "grace@example.com"

    def test_duplicate_email(self):
        self.service.sign_up("grace@example.com", PASSWORD)
        with pytest.raises(Conflict):
            self.service.sign_up("grace@example.com", PASSWORD)
        assert self.provider.sign_up.call_count == 1

    def test_weak_password_never_reaches_provider(self):
        with pytest.raises(ValidationFailed):
            self.service.sign_up("grace@example.com", "weak")
        self.provider.sign_up.assert_not_called()

    def test_provider_rejection(self):
        self.provider.sign_up.side_effect = AuthProviderError("Signups disabled")
        with pytest.raises(AppError) as exc_info:
            self.service.sign_up("grace@example.com", PASSWORD)
        assert exc_info.value.status_code == 400

    def test_sign_in_returns_token(self):
        user = self.service.sign_up("grace@example.com", PASSWORD)

        result = self.service.sign_in("grace@example.com", PASSWORD)

        assert result["token"] == "token-auth-grace@example.com"
        assert result["user"].id == user.id

    def test_sign_in_bad_credentials(self):
        self.provider.sign_in.side_effect = AuthProviderError("Invalid login credentials")
        with pytest.raises(Unauthorized):
            self.service.sign_in("grace@example.com", "Wrong1234")

    def test_sign_in_without_local_user(self):
        with pytest.raises(NotFound):
            self.service.sign_in("ghost@example.com", PASSWORD)

    def test_validate_token(self):
        user = self.service.sign_up("grace@example.com", PASSWORD)
        assert self.service.validate_token("token-auth-grace@example.com").id == user.id

    @pytest.mark.parametrize("token", ["", "garbage", "token-auth-ghost@example.com"])
    def test_invalid_tokens(self, token):
        with pytest.raises(Unauthorized):
            self.service.validate_token(token)

    def test_serialize_user(self, test_user):
        body = serialize_user(test_user)
        assert body["email"] == "ada@example.com"
        assert set(body) == {"id", "email", "auth_id", "organization_id", "created_at"}
