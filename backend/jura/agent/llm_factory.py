"""LLM 工厂模块

根据配置文件创建 LLM 提供方 (ChatProvider) 和对应的 LangChain 聊天模型。
遵循安全协议：从不读取 .env 文件，只从系统环境变量获取密钥。

每个提供方是实现了 ChatProvider 能力接口的独立类，
工厂通过配置中的 kind 字段在 PROVIDER_KINDS 策略表中选择实现。
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_openai import ChatOpenAI
from langchain_google_genai import ChatGoogleGenerativeAI

logger = logging.getLogger(__name__)


class ChatProvider(Protocol):
    """LLM 提供方能力接口"""

    name: str
    model_name: str

    def chat_model(self, temperature: Optional[float] = None) -> BaseChatModel:
        """创建支持 bind_tools / invoke / stream 的聊天模型"""
        ...


class GeminiProvider:
    """Google Gemini"""

    kind = "gemini"

    def __init__(
        self,
        name: str,
        api_key: str,
        model_name: str,
        temperature: float = 0.7,
        **_: Any
    ):
        # Gemini SDK 不支持 base_url / default_headers，配置中出现时忽略
        self.name = name
        self.api_key = api_key
        self.model_name = model_name
        self.temperature = temperature

    def chat_model(self, temperature: Optional[float] = None) -> BaseChatModel:
        return ChatGoogleGenerativeAI(
            google_api_key=self.api_key,
            model=self.model_name,
            temperature=self.temperature if temperature is None else temperature
        )


class OpenAICompatibleProvider:
    """OpenAI 兼容接口（OpenAI 官方、OpenRouter、Moonshot 等）"""

    kind = "openai_compatible"

    def __init__(
        self,
        name: str,
        api_key: str,
        model_name: str,
        temperature: float = 0.7,
        base_url: Optional[str] = None,
        default_headers: Optional[Dict[str, str]] = None
    ):
        self.name = name
        self.api_key = api_key
        self.model_name = model_name
        self.temperature = temperature
        self.base_url = base_url
        self.default_headers = default_headers

    def chat_model(self, temperature: Optional[float] = None) -> BaseChatModel:
        kwargs: Dict[str, Any] = {
            "api_key": self.api_key,
            "base_url": self.base_url,
            "model": self.model_name,
            "temperature": self.temperature if temperature is None else temperature,
        }
        if self.default_headers:
            kwargs["default_headers"] = self.default_headers
        return ChatOpenAI(**kwargs)


# kind -> 提供方实现
PROVIDER_KINDS = {
    GeminiProvider.kind: GeminiProvider,
    OpenAICompatibleProvider.kind: OpenAICompatibleProvider,
}


class LLMFactory:
    """LLM 工厂类，负责按配置创建提供方"""

    def __init__(self, config_path: Optional[str] = None, provider_override: Optional[str] = None):
        """初始化工厂，加载配置文件

        Args:
            config_path: 配置文件路径，如果为 None 则使用 backend/llm_config.json
            provider_override: 覆盖配置中的 active_model（对应 LLM_PROVIDER 环境变量）
        """
        if config_path is None:
            # 默认路径：从 backend/jura/agent/llm_factory.py 到 backend/llm_config.json
            default_path = Path(__file__).parent.parent.parent / "llm_config.json"
            self.config_path = str(default_path)
        else:
            self.config_path = config_path
        self.provider_override = provider_override
        self._loaded_config = None

    def _load_config(self) -> Dict[str, Any]:
        """加载配置文件

        Returns:
            配置字典

        Raises:
            FileNotFoundError: 配置文件不存在
            json.JSONDecodeError: JSON 格式错误
        """
        if self._loaded_config is None:
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    self._loaded_config = json.load(f)
            except FileNotFoundError:
                raise FileNotFoundError(f"配置文件不存在: {self.config_path}")
            except json.JSONDecodeError as e:
                raise json.JSONDecodeError(f"JSON 格式错误: {e}", e.doc, e.pos)

        return self._loaded_config

    def get_active_model_name(self) -> str:
        """获取当前激活的提供方名称，LLM_PROVIDER 覆盖优先

        Raises:
            ValueError: 配置文件中缺少 active_model 且没有覆盖
        """
        if self.provider_override:
            return self.provider_override
        active_model = self._load_config().get("active_model")
        if not active_model:
            raise ValueError("配置文件中缺少 active_model 字段")
        return active_model

    def get_model_config(self, name: Optional[str] = None) -> Dict[str, Any]:
        """获取指定提供方（默认当前激活）的配置

        Returns:
            提供方配置字典

        Raises:
            ValueError: providers 缺失或找不到对应配置
        """
        active_model = name or self.get_active_model_name()

        # 获取 providers 配置
        providers = self._load_config().get("providers")
        if not providers:
            raise ValueError("配置文件中缺少 providers 字段")

        # 获取对应模型的配置
        model_config = providers.get(active_model)
        if not model_config:
            raise ValueError(f"providers 中找不到 '{active_model}' 的配置")

        return model_config

    def get_active_model_config(self) -> Dict[str, Any]:
        """获取当前激活的模型配置"""
        return self.get_model_config()

    def _get_api_key(self, env_key: str) -> str:
        """从系统环境变量获取 API Key

        Args:
            env_key: 环境变量名

        Returns:
            API Key 字符串

        Raises:
            ValueError: 环境变量不存在或为空
        """
        api_key = os.getenv(env_key)
        if not api_key:
            raise ValueError(f"环境变量 '{env_key}' 未设置或为空，无法初始化 LLM")

        return api_key

    def create_provider(self, name: Optional[str] = None) -> ChatProvider:
        """创建提供方实例

        Args:
            name: providers 中的键，None 表示当前激活的提供方

        Returns:
            ChatProvider 实现

        Raises:
            ValueError: 配置错误或环境变量缺失
            NotImplementedError: 不支持的提供方类型
        """
        provider_name = name or self.get_active_model_name()
        model_config = self.get_model_config(provider_name)

        kind = model_config.get("kind", provider_name)
        provider_cls = PROVIDER_KINDS.get(kind)
        if provider_cls is None:
            raise NotImplementedError(f"不支持的模型类型: {kind}")

        # 获取环境变量映射
        env_key_map = model_config.get("env_key_map")
        if not env_key_map:
            raise ValueError("模型配置中缺少 env_key_map 字段")

        # 从环境变量获取 API Key
        api_key = self._get_api_key(env_key_map)

        model_name = model_config.get("model_name")
        if not model_name:
            raise ValueError("模型配置中缺少 model_name 字段")

        provider = provider_cls(
            name=provider_name,
            api_key=api_key,
            model_name=model_name,
            temperature=model_config.get("temperature", 0.7),
            base_url=model_config.get("base_url"),
            default_headers=model_config.get("default_headers")
        )
        logger.info("[LLMFactory] provider=%s kind=%s model=%s", provider_name, kind, model_name)
        return provider

    def create_llm(self, name: Optional[str] = None) -> BaseChatModel:
        """创建并返回 LLM 实例

        Returns:
            LangChain 聊天模型 (ChatOpenAI 或 ChatGoogleGenerativeAI)
        """
        return self.create_provider(name).chat_model()
