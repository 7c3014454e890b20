"""Application settings loaded from environment variables via pydantic-settings.

Values are read from (highest priority first):

  1. **Environment variables**, e.g. ``OPENAI_API_KEY=sk-abc123``
  2. **.env file** in the working directory (local development)
  3. The field defaults below

Field ``openai_api_key`` maps to ``OPENAI_API_KEY``; pydantic-settings
matches names case-insensitively.  Tuning knobs that are not secrets
(batch size, page size, temperatures) live in ``config/config.yaml``
instead; see :mod:`techpulse.config.loader`.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """TechPulse application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Hosted model API ===
    # Empty key = "not configured"; providers report is_available() False.
    openai_api_key: str = ""
    openai_base_url: str = ""  # Custom base URL for OpenAI-compatible APIs
    openai_text_model: str = ""  # Defaults to gpt-4o-mini when empty
    openai_embedding_model: str = ""  # Defaults to text-embedding-3-small when empty

    # === Story source ===
    hacker_news_base_url: str = "https://hacker-news.firebaseio.com/v0"

    # === Storage ===
    database_path: str = "data/techpulse.db"

    # === Scheduled ingestion ===
    # Bearer token expected by GET /api/v1/cron/ingest.  Empty = every
    # request is rejected.
    cron_secret: str = ""

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"
    cors_origins: str = "*"  # Comma-separated list of allowed origins

    def get_cors_origins(self) -> list[str]:
        """Split ``cors_origins`` into a list, ignoring blanks."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]
