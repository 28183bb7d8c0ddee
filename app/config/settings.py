"""
Configuration management system using Pydantic Settings.
Supports environment-based configuration for different deployment environments.
"""

import os
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from typing import Optional, Dict, Any, List, Tuple
from enum import Enum

from app.models.internal_models import OCRBackend


class Environment(str, Enum):
    """Supported deployment environments"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Supported log levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class OCRSettings(BaseSettings):
    """OCR collaborator configuration"""

    backend: OCRBackend = Field(default=OCRBackend.MOCK)
    google_api_key: Optional[str] = Field(default=None, description="Google Cloud API key for Vision or Gemini")
    vision_endpoint: str = Field(default="https://vision.googleapis.com/v1/images:annotate")
    gemini_model: str = Field(default="gemini-2.0-flash")
    timeout_seconds: int = Field(default=30, ge=1, le=300)

    @field_validator('backend', mode='before')
    @classmethod
    def validate_backend(cls, v):
        """Accept backend names in any case"""
        if isinstance(v, str):
            return OCRBackend(v.lower())
        return v

    model_config = {"env_prefix": "OCR_", "extra": "ignore"}


class UploadSettings(BaseSettings):
    """Upload validation limits"""

    max_image_size_mb: int = Field(default=10, ge=1, le=50)
    max_batch_size: int = Field(default=10, ge=1, le=50)
    allowed_content_type_prefix: str = Field(default="image/", description="Declared MIME type prefix an upload must carry")

    model_config = {"env_prefix": "UPLOAD_", "extra": "ignore"}


class SecuritySettings(BaseSettings):
    """CORS configuration"""

    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: List[str] = Field(
        default_factory=lambda: ["GET", "POST"]
    )
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"])

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from environment variable or list"""
        if isinstance(v, str):
            origin_list = v.split(",")
            return [origin.strip() for origin in origin_list if origin.strip()]
        return v or ["*"]

    model_config = {"env_prefix": "SECURITY_", "extra": "ignore"}


class Settings(BaseSettings):
    """Main application settings"""

    # Application Configuration
    app_name: str = Field(default="Menu Modifier Extractor")
    app_version: str = Field(default="1.0.0")
    environment: Environment = Field(default=Environment.DEVELOPMENT)
    debug: bool = Field(default=False)

    # Server Configuration
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1, le=65535)
    reload: bool = Field(default=False)
    workers: int = Field(default=1, ge=1, le=16)

    # Logging Configuration
    log_level: LogLevel = Field(default=LogLevel.INFO)
    log_format: str = Field(default="json", description="json or text")
    log_file: Optional[str] = Field(default=None)

    # Nested Settings
    ocr: OCRSettings = Field(default_factory=OCRSettings)
    upload: UploadSettings = Field(default_factory=UploadSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)

    @field_validator('environment', mode='before')
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment setting"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def get_cors_config(self) -> Dict[str, Any]:
        """Get CORS configuration for FastAPI"""
        return {
            "allow_origins": self.security.cors_origins,
            "allow_credentials": self.security.cors_allow_credentials,
            "allow_methods": self.security.cors_allow_methods,
            "allow_headers": self.security.cors_allow_headers,
        }

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


def env_files_for(environment: Optional[str] = None) -> Tuple[str, ...]:
    """
    Env files read for an environment, lowest priority first.

    The shared `.env` is always read; `.env.<environment>` overrides it.
    Missing files are skipped.
    """
    environment = environment or os.getenv("ENVIRONMENT")
    if not environment:
        return (".env",)
    return (".env", f".env.{Environment(environment.lower()).value}")


def load_settings(environment: Optional[str] = None) -> Settings:
    """
    Build settings from the process environment and the env files.

    Nested sections are separate BaseSettings classes, so each one is
    handed the same env files explicitly.
    """
    env_files = env_files_for(environment)
    overrides: Dict[str, Any] = {}
    if environment:
        overrides["environment"] = environment

    return Settings(
        _env_file=env_files,
        ocr=OCRSettings(_env_file=env_files),
        upload=UploadSettings(_env_file=env_files),
        security=SecuritySettings(_env_file=env_files),
        **overrides,
    )


# Global settings instance
settings = load_settings()


def get_settings() -> Settings:
    """Get application settings instance"""
    return settings


def reload_settings(environment: Optional[str] = None) -> Settings:
    """Reload settings from environment and files"""
    global settings
    settings = load_settings(environment)
    return settings
