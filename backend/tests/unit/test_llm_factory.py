"""测试 LLM 工厂模块"""

import json
import pytest
from unittest.mock import patch

from jura.agent.llm_factory import (
    GeminiProvider,
    LLMFactory,
    OpenAICompatibleProvider,
)


class TestLLMFactory:
    """测试 LLMFactory 类"""

    @pytest.fixture(autouse=True)
    def setup(self, tmp_path):
        """每个测试方法前写入临时配置文件"""
        self.tmp_path = tmp_path
        self.test_config = {
            "active_model": "openrouter",
            "providers": {
                "openrouter": {
                    "kind": "openai_compatible",
                    "base_url": "https://openrouter.ai/api/v1",
                    "model_name": "openai/gpt-4o-mini",
                    "env_key_map": "OPENROUTER_API_KEY",
                    "temperature": 0.2,
                    "default_headers": {"X-Title": "Jura"}
                },
                "gemini": {
                    "kind": "gemini",
                    "model_name": "gemini-2.5-flash",
                    "env_key_map": "GEMINI_API_KEY",
                    "temperature": 0.7
                },
                "openai_compatible": {
                    "base_url": "https://api.openai.com/v1",
                    "model_name": "gpt-4o",
                    "env_key_map": "OPENAI_API_KEY"
                }
            }
        }
        self.config_path = self.write_config(self.test_config)
        self.factory = LLMFactory(self.config_path)

    def write_config(self, config, name="llm_config.json") -> str:
        path = self.tmp_path / name
        path.write_text(json.dumps(config), encoding="utf-8")
        return str(path)

    def test_load_config_success(self):
        """测试成功加载配置文件"""
        assert self.factory._load_config() == self.test_config

    def test_load_config_file_not_found(self):
        """测试配置文件不存在时的错误处理"""
        factory = LLMFactory(str(self.tmp_path / "missing.json"))
        with pytest.raises(FileNotFoundError) as exc_info:
            factory._load_config()
        assert "配置文件不存在" in str(exc_info.value)

    def test_load_config_invalid_json(self):
        """测试 JSON 格式错误时的处理"""
        path = self.tmp_path / "invalid.json"
        path.write_text("{invalid json}", encoding="utf-8")

        with pytest.raises(json.JSONDecodeError):
            LLMFactory(str(path))._load_config()

    def test_get_active_model_config_success(self):
        config = self.factory.get_active_model_config()
        assert config["model_name"] == "openai/gpt-4o-mini"

    def test_provider_override_wins(self):
        """测试 LLM_PROVIDER 覆盖 active_model"""
        factory = LLMFactory(self.config_path, provider_override="gemini")
        assert factory.get_active_model_name() == "gemini"

    def test_missing_active_model(self):
        factory = LLMFactory(self.write_config({"providers": {}}, "no_active.json"))
        with pytest.raises(ValueError) as exc_info:
            factory.get_active_model_name()
        assert "active_model" in str(exc_info.value)

    def test_missing_providers(self):
        factory = LLMFactory(self.write_config({"active_model": "x"}, "no_providers.json"))
        with pytest.raises(ValueError) as exc_info:
            factory.get_active_model_config()
        assert "providers" in str(exc_info.value)

    def test_model_not_found(self):
        factory = LLMFactory(self.config_path, provider_override="nonexistent")
        with pytest.raises(ValueError) as exc_info:
            factory.get_active_model_config()
        assert "nonexistent" in str(exc_info.value)

    def test_get_api_key_success(self):
        with patch.dict("os.environ", {"OPENROUTER_API_KEY": "sk-test"}):
            assert self.factory._get_api_key("OPENROUTER_API_KEY") == "sk-test"

    def test_get_api_key_not_set(self):
        with patch.dict("os.environ", {}, clear=True):
            with pytest.raises(ValueError) as exc_info:
                self.factory._get_api_key("OPENROUTER_API_KEY")
        assert "OPENROUTER_API_KEY" in str(exc_info.value)

    def test_get_api_key_empty(self):
        with patch.dict("os.environ", {"OPENROUTER_API_KEY": ""}):
            with pytest.raises(ValueError):
                self.factory._get_api_key("OPENROUTER_API_KEY")

    @patch("jura.agent.llm_factory.ChatOpenAI")
    def test_create_llm_openai_compatible(self, mock_chat_openai):
        """测试 kind=openai_compatible 使用 ChatOpenAI 并传递 headers"""
        with patch.dict("os.environ", {"OPENROUTER_API_KEY": "sk-test"}):
            llm = self.factory.create_llm()

        mock_chat_openai.assert_called_once_with(
            api_key="sk-test",
            base_url="https://openrouter.ai/api/v1",
            model="openai/gpt-4o-mini",
            temperature=0.2,
            default_headers={"X-Title": "Jura"}
        )
        assert llm is mock_chat_openai.return_value

    @patch("jura.agent.llm_factory.ChatGoogleGenerativeAI")
    def test_create_llm_gemini(self, mock_chat_google):
        with patch.dict("os.environ", {"GEMINI_API_KEY": "g-test"}):
            self.factory.create_llm("gemini")

        mock_chat_google.assert_called_once_with(
            google_api_key="g-test",
            model="gemini-2.5-flash",
            temperature=0.7
        )

    def test_kind_defaults_to_provider_name(self):
        """测试未配置 kind 时按提供方名称选择实现"""
        with patch.dict("os.environ", {"OPENAI_API_KEY": "sk-test"}):
            provider = self.factory.create_provider("openai_compatible")
        assert isinstance(provider, OpenAICompatibleProvider)
        assert provider.temperature == 0.7

    def test_create_provider_gemini(self):
        with patch.dict("os.environ", {"GEMINI_API_KEY": "g-test"}):
            provider = self.factory.create_provider("gemini")
        assert isinstance(provider, GeminiProvider)
        assert provider.model_name == "gemini-2.5-flash"

    @patch("jura.agent.llm_factory.ChatGoogleGenerativeAI")
    def test_gemini_ignores_openai_only_options(self, mock_chat_google):
        config = {
            "active_model": "g",
            "providers": {
                "g": {
                    "kind": "gemini",
                    "model_name": "gemini-2.5-flash",
                    "env_key_map": "GEMINI_API_KEY",
                    "base_url": "https://example.invalid/v1",
                    "default_headers": {"X-Title": "Jura"}
                }
            }
        }
        factory = LLMFactory(self.write_config(config, "gemini_extra.json"))

        with patch.dict("os.environ", {"GEMINI_API_KEY": "g-test"}):
            provider = factory.create_provider()
            provider.chat_model()

        assert not hasattr(provider, "base_url")
        mock_chat_google.assert_called_once_with(
            google_api_key="g-test",
            model="gemini-2.5-flash",
            temperature=0.7
        )

    def test_missing_env_key_map(self):
        config = {"active_model": "m", "providers": {"m": {"kind": "gemini", "model_name": "x"}}}
        factory = LLMFactory(self.write_config(config, "no_env.json"))
        with pytest.raises(ValueError) as exc_info:
            factory.create_llm()
        assert "env_key_map" in str(exc_info.value)

    def test_missing_model_name(self):
        config = {"active_model": "m", "providers": {"m": {"kind": "gemini", "env_key_map": "GEMINI_API_KEY"}}}
        factory = LLMFactory(self.write_config(config, "no_model.json"))
        with patch.dict("os.environ", {"GEMINI_API_KEY": "g-test"}):
            with pytest.raises(ValueError) as exc_info:
                factory.create_llm()
        assert "model_name" in str(exc_info.value)

    def test_unsupported_kind(self):
        config = {"active_model": "m", "providers": {"m": {"kind": "llama_cpp", "env_key_map": "K", "model_name": "x"}}}
        factory = LLMFactory(self.write_config(config, "bad_kind.json"))
        with pytest.raises(NotImplementedError) as exc_info:
            factory.create_llm()
        assert "llama_cpp" in str(exc_info.value)

    def test_default_config_path(self):
        """测试默认使用 backend/llm_config.json"""
        assert LLMFactory().config_path.endswith("llm_config.json")
