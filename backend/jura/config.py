"""
应用配置模块
从环境变量和 .env 文件加载配置，API 密钥只通过环境变量提供
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Jura 后端配置"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # ── 数据库 ────────────────────────────────────────────────────────
    database_path: str = Field(default="database.db", alias="DATABASE_PATH")

    # ── Supabase（身份认证、文件存储、向量检索） ─────────────────────
    supabase_url: str = Field(default="", alias="SUPABASE_URL")
    supabase_anon_key: str = Field(default="", alias="SUPABASE_ANON_KEY")
    supabase_service_role_key: str = Field(default="", alias="SUPABASE_SERVICE_ROLE_KEY")
    supabase_storage_bucket: str = Field(default="documents", alias="SUPABASE_STORAGE_BUCKET")

    # ── Embedding ─────────────────────────────────────────────────────
    gemini_api_key: Optional[str] = Field(default=None, alias="GEMINI_API_KEY")
    embedding_model: str = Field(default="models/text-embedding-004", alias="EMBEDDING_MODEL")

    # ── LLM ───────────────────────────────────────────────────────────
    # None 时使用 backend/llm_config.json
    llm_config_path: Optional[str] = Field(default=None, alias="LLM_CONFIG_PATH")
    # 覆盖 llm_config.json 中的 active_model
    llm_provider: Optional[str] = Field(default=None, alias="LLM_PROVIDER")

    # ── 对话与动作 ────────────────────────────────────────────────────
    chat_timeout_seconds: float = Field(default=60.0, alias="CHAT_TIMEOUT_SECONDS")
    max_tool_rounds: int = Field(default=3, alias="MAX_TOOL_ROUNDS")
    action_ttl_seconds: float = Field(default=900.0, alias="ACTION_TTL_SECONDS")
    action_max_entries: int = Field(default=1000, alias="ACTION_MAX_ENTRIES")

    # ── 上传 ──────────────────────────────────────────────────────────
    max_upload_bytes: int = Field(default=10 * 1024 * 1024, alias="MAX_UPLOAD_BYTES")

    # ── 平台 ──────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    cors_allowed_origins: str = Field(default="*", alias="CORS_ALLOWED_ORIGINS")

    def cors_origins(self) -> list[str]:
        """解析逗号分隔的 CORS 来源列表"""
        raw = self.cors_allowed_origins.strip()
        if raw == "*":
            return ["*"]
        return [origin.strip() for origin in raw.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """获取进程级配置（首次调用时从环境读取）"""
    return Settings()
