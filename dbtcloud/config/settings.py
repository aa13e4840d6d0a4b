from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # dbt Cloud API
    DBT_CLOUD_ACCOUNT_ID: int = 0
    DBT_CLOUD_TOKEN: str = ""
    DBT_CLOUD_HOST_URL: str = "https://cloud.getdbt.com/api"
    DBT_CLOUD_TIMEOUT: float = 30.0

    # Application
    APP_COMMIT_SHA: str = ""
    LOG_LEVEL: str = "INFO"

    # OpenTelemetry
    OTEL_EXPORTER_OTLP_ENDPOINT: str = "http://localhost:4317"
    OTEL_SERVICE_NAME: str = "dbtcloud-provider"

    def api_base_url(self) -> str:
        """Return the host URL without a trailing slash.

        Raises:
            ValueError: If ``DBT_CLOUD_HOST_URL`` is not an http(s) URL.
        """
        host = self.DBT_CLOUD_HOST_URL.strip().rstrip("/")
        if not host.startswith(("http://", "https://")):
            raise ValueError(
                f"DBT_CLOUD_HOST_URL must start with http:// or https://, got {host!r}"
            )
        return host


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton :class:`Settings` instance."""
    return Settings()
