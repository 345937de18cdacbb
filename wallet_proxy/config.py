from typing import Any, ClassVar

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from wallet_proxy.utils.exceptions import ConfigurationError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    # Upstream transaction service
    YAYA_BASE_URL: str = ""
    YAYA_API_KEY: str = ""
    YAYA_API_SECRET: SecretStr = SecretStr("")
    UPSTREAM_TIMEOUT_SECONDS: float = 10.0

    # Pagination policy
    ALLOWED_LIMITS: ClassVar[tuple[int, ...]] = (3, 5, 7, 10, 15, 20, 25, 50)
    DEFAULT_LIMIT: int = 5
    SEARCH_QUERY_MAX_LENGTH: int = 100

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    # Comma-separated list of dashboard origins allowed to call with credentials.
    CLIENT_URL: str = "http://localhost:5173"

    # Rate limiting (in-memory, one budget shared by all callers)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_WINDOW_SECONDS: int = 60
    RATE_LIMIT_REQUESTS_PER_WINDOW: int = 60

    # Application
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False
    ENV: str = "dev"

    # Observability
    METRICS_ENABLED: bool = True

    def model_post_init(self, __context: Any) -> None:
        # Runs on every Settings() instantiation (including module-level `settings = Settings()`).
        self._guardrail_signing_credentials()
        self._guardrail_pagination_policy()
        self._guardrail_positive_limits()

    def _guardrail_signing_credentials(self) -> None:
        missing: list[str] = []
        if not (self.YAYA_API_KEY or "").strip():
            missing.append("YAYA_API_KEY")
        if not self.YAYA_API_SECRET.get_secret_value().strip():
            missing.append("YAYA_API_SECRET")

        if missing:
            fields = " or ".join(missing)
            raise ConfigurationError(
                f"Missing {fields}. "
                "Set the signing credentials via environment variables or the .env file."
            )

    def _guardrail_pagination_policy(self) -> None:
        if self.DEFAULT_LIMIT not in self.ALLOWED_LIMITS:
            raise ConfigurationError(
                f"DEFAULT_LIMIT={self.DEFAULT_LIMIT} is not one of the allowed page sizes "
                f"{list(self.ALLOWED_LIMITS)}."
            )
        if self.SEARCH_QUERY_MAX_LENGTH < 1:
            raise ConfigurationError("SEARCH_QUERY_MAX_LENGTH must be positive.")

    def _guardrail_positive_limits(self) -> None:
        problems: list[str] = []
        if self.RATE_LIMIT_WINDOW_SECONDS <= 0:
            problems.append("RATE_LIMIT_WINDOW_SECONDS")
        if self.RATE_LIMIT_REQUESTS_PER_WINDOW <= 0:
            problems.append("RATE_LIMIT_REQUESTS_PER_WINDOW")
        if self.UPSTREAM_TIMEOUT_SECONDS <= 0:
            problems.append("UPSTREAM_TIMEOUT_SECONDS")
        if problems:
            raise ConfigurationError(f"Must be positive: {', '.join(problems)}.")

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in (self.CLIENT_URL or "").split(",") if o.strip()]


settings = Settings()


def get_settings() -> Settings:
    """Return the global settings instance.

    Provided as a callable for FastAPI Depends() and test mocking convenience.
    """
    return settings
