from functools import lru_cache
from typing import Annotated, Any, List
import os

from dotenv import load_dotenv
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings loaded from environment variables."""

    # API settings
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Trends Gateway"
    DEBUG: bool = False

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # CORS settings
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = ["*"]

    # Logging settings
    LOG_LEVEL: str = "INFO"
    ENABLE_STRUCTURED_LOGGING: bool = True

    # Query normalization settings
    DEFAULT_KEYWORD: str = "AI"
    ALLOWED_GEOS: Annotated[List[str], NoDecode] = ["US", "GB", "CA", "AU", "IN", "DE", "JP", "BR"]
    DEFAULT_GEO: str = "US"

    # Retry settings
    MAX_ATTEMPTS: int = 3
    RETRY_MIN_DELAY: float = 1.0  # seconds
    RETRY_MAX_DELAY: float = 3.0  # seconds

    # Degradation settings
    TRANSIENT_FAILURE_POLICY: str = "degrade"
    RATE_LIMIT_RETRY_AFTER: int = 300  # seconds
    FALLBACK_DAYS: int = 30

    # Upstream settings
    UPSTREAM_URL: str = "http://localhost:8081/api/interest-over-time"
    UPSTREAM_TIMEOUT: float = 10.0  # seconds

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("BACKEND_CORS_ORIGINS", "ALLOWED_GEOS", mode="before")
    @classmethod
    def assemble_string_list(cls, v: Any) -> List[str]:
        """Parse a list setting from a comma-separated string or a list."""
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, str):
            return [i.strip().strip("\"'") for i in v.strip("[]").split(",") if i.strip()]
        elif isinstance(v, (list, tuple, set)):
            return list(v)
        raise ValueError(v)

    @field_validator("TRANSIENT_FAILURE_POLICY")
    @classmethod
    def check_failure_policy(cls, v: str) -> str:
        """Only the degrade and surface policies exist."""
        v = v.strip().lower()
        if v not in ("degrade", "surface"):
            raise ValueError(f"Unknown transient failure policy: {v}")
        return v

    @field_validator("DEFAULT_KEYWORD")
    @classmethod
    def check_default_keyword(cls, v: str) -> str:
        """The default keyword stands in for an empty query, so it must be a usable term."""
        v = v.strip()
        if not v:
            raise ValueError("DEFAULT_KEYWORD must not be blank")
        return v

    @model_validator(mode="after")
    def check_consistency(self) -> "Settings":
        if self.DEFAULT_GEO not in self.ALLOWED_GEOS:
            raise ValueError(
                f"DEFAULT_GEO '{self.DEFAULT_GEO}' must be one of ALLOWED_GEOS {self.ALLOWED_GEOS}"
            )
        if self.MAX_ATTEMPTS < 1:
            raise ValueError("MAX_ATTEMPTS must be at least 1")
        if self.RETRY_MIN_DELAY < 0 or self.RETRY_MAX_DELAY < self.RETRY_MIN_DELAY:
            raise ValueError("RETRY_MAX_DELAY must be >= RETRY_MIN_DELAY >= 0")
        return self


def load_env_file(env_file: str = ".env") -> None:
    """
    Load environment variables from specified .env file.

    Args:
        env_file: Path to the .env file. Defaults to ".env".
    """
    env_path = os.path.join(os.getcwd(), env_file)
    if os.path.exists(env_path):
        load_dotenv(env_path)


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings with caching for efficiency.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
