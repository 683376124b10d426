from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server Configuration
    app_name: str = Field(default="CodeMove Room Server")
    app_version: str = Field(default="1.0.0")
    app_description: str = Field(
        default="Mentor/student code rooms synchronized over WebSocket"
    )
    api_key: str = Field(default="1234567890")

    # Server Host and Port
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    reload: bool = Field(default=False)

    # CORS Configuration
    cors_origins: List[str] = Field(default=["*"])
    cors_methods: List[str] = Field(default=["*"])
    cors_headers: List[str] = Field(default=["*"])
    cors_credentials: bool = Field(default=True)

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # Room Protocol Configuration
    allow_mentor_reclaim: bool = Field(default=False)
    strict_invariants: Optional[bool] = Field(default=None)
    send_timeout: float = Field(default=5.0, gt=0)
    max_code_length: int = Field(default=100_000, gt=0)

    # Catalog Configuration
    seed_catalog: bool = Field(default=True)

    # Development/Production Mode
    debug: bool = Field(default=False)
    environment: str = Field(default="development")

    @property
    def invariants_are_fatal(self) -> bool:
        """Invariant violations raise when asked to, or by default in debug mode."""
        if self.strict_invariants is None:
            return self.debug
        return self.strict_invariants


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance"""
    return settings


def reload_settings(**overrides) -> Settings:
    """Reload settings from environment variables, applying explicit overrides"""
    global settings
    settings = Settings(**overrides)
    return settings
