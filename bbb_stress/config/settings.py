"""
Configuration settings for the BigBlueButton stress test.
Uses Pydantic Settings for type-safe configuration with environment variable support.
"""

from typing import Optional, List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from enum import Enum


class ChecksumAlgorithm(str, Enum):
    """Hash algorithms accepted by the BigBlueButton API."""
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"


class BBBSettings(BaseSettings):
    """BigBlueButton server configuration."""
    model_config = SettingsConfigDict(env_prefix="BBB_", env_file=".env", extra="ignore")
    
    url: str = Field(
        default="http://localhost/bigbluebutton",
        description="Server base URL (without the trailing /api)"
    )
    secret: str = Field(default="", description="Shared secret of the server")
    checksum_algorithm: ChecksumAlgorithm = Field(
        default=ChecksumAlgorithm.SHA1,
        description="Algorithm used to sign API calls"
    )
    request_timeout: float = Field(default=30.0, description="API request timeout (seconds)")


class BrowserSettings(BaseSettings):
    """Chromium launch configuration."""
    model_config = SettingsConfigDict(env_prefix="BROWSER_", env_file=".env", extra="ignore")
    
    headless: bool = Field(default=True, description="Run Chromium headless")
    executable_path: Optional[str] = Field(
        default=None,
        description="Chrome/Chromium binary to use instead of the bundled one"
    )
    channel: Optional[str] = Field(
        default=None,
        description="Browser channel, e.g. 'chrome' or 'chrome-beta'"
    )
    extra_args: List[str] = Field(
        default_factory=list,
        description="Additional command line switches"
    )


class JoinSettings(BaseSettings):
    """Per-client join behaviour."""
    model_config = SettingsConfigDict(env_prefix="JOIN_", env_file=".env", extra="ignore")
    
    default_timeout_ms: int = Field(default=60000, ge=0, description="Wait per UI step (ms)")
    audio_retries: int = Field(default=3, ge=1, description="Attempts to find 'Listen only'")
    unmute_retries: int = Field(default=3, ge=1, description="Attempts to find the mute toggle")
    webcam_settle_seconds: float = Field(
        default=2.0,
        ge=0,
        description="Pause for the camera selection modal to populate"
    )
    max_concurrent_joins: int = Field(
        default=1,
        ge=1,
        description="Clients joining at the same time (1 = strictly sequential)"
    )
    diagnostics_dir: Optional[str] = Field(
        default=None,
        description="Save a screenshot and HTML here when a client fails to join"
    )


class Settings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    # Nested settings
    bbb: BBBSettings = Field(default_factory=BBBSettings)
    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    join: JoinSettings = Field(default_factory=JoinSettings)
    
    # Application settings
    log_level: str = Field(default="INFO", description="Logging level")
    log_to_file: bool = Field(default=True, description="Also write logs under logs/")
    
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()


# Global settings instance
settings = Settings()
