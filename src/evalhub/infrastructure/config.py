"""Application configuration — loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from evalhub.domain.rubric import QualityWeights


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    openai_api_key: SecretStr
    openai_backup_api_key: SecretStr | None = None
    openai_model: str = "gpt-4o-mini"
    github_token: SecretStr | None = None
    http_timeout_seconds: float = 30.0
    tree_fetch_timeout_seconds: float = 10.0
    max_commits: int = 100
    report_cache_ttl_seconds: int = 3600
    report_cache_max_size: int = 512
    # JSON object, e.g. QUALITY_WEIGHTS='{"readme_quality": 0.25, "maintenance": 0.05}'
    quality_weights: dict[str, float] = {}
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    def api_keys(self) -> list[tuple[str, str]]:
        """Ordered ``(label, key)`` credentials: primary first, then backup."""
        keys = [("primary", self.openai_api_key.get_secret_value())]
        if self.openai_backup_api_key:
            keys.append(("backup", self.openai_backup_api_key.get_secret_value()))
        return keys

    def weights(self) -> QualityWeights:
        """Aggregation weights with any ``QUALITY_WEIGHTS`` overrides applied."""
        return QualityWeights.with_overrides(self.quality_weights)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call)."""
    return Settings()  # type: ignore[call-arg]
