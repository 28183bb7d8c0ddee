"""
Configuration loader utility for environment-specific settings.
"""

import os
import logging
from pathlib import Path
from typing import Optional
from .settings import Settings, Environment, reload_settings

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Utility class for loading environment-specific configurations"""

    @staticmethod
    def env_file_for(environment: str) -> Path:
        env = Environment(environment.lower())
        return Path(f".env.{env.value}")

    @staticmethod
    def activate_environment(environment: Optional[str] = None) -> Settings:
        """
        Select the environment the application runs with.

        The choice is exported as ENVIRONMENT so the server process, and any
        worker or reloader process it spawns, reads the same env files; the
        global settings are reloaded for the current process.

        Args:
            environment: Target environment (development, staging, production, testing)
                        If None, uses ENVIRONMENT env var or defaults to development

        Returns:
            The reloaded global Settings instance
        """
        if environment is None:
            environment = os.getenv("ENVIRONMENT", "development")

        env_file_path = ConfigLoader.env_file_for(environment)
        if not env_file_path.exists():
            logger.warning(f"Environment file {env_file_path} not found, using default settings")

        os.environ["ENVIRONMENT"] = Environment(environment.lower()).value
        return reload_settings()

    @staticmethod
    def get_available_environments() -> list[str]:
        """Get list of available environment configurations"""
        env_files = []
        for env_file in Path(".").glob(".env.*"):
            env_name = env_file.name.replace(".env.", "")
            if env_name in {e.value for e in Environment}:
                env_files.append(env_name)
        return sorted(env_files)

    @staticmethod
    def create_sample_env_file(environment: str, output_path: Optional[str] = None) -> str:
        """
        Create a sample .env file for the specified environment.

        Args:
            environment: Target environment
            output_path: Optional custom output path

        Returns:
            Path to the created sample file
        """
        env = Environment(environment.lower())

        if output_path is None:
            output_path = f".env.{env.value}.sample"

        default_settings = Settings()

        sample_content = f"""# Sample configuration for {env.value} environment
# Copy this file to .env.{env.value} and modify as needed

# Application Configuration
APP_NAME={default_settings.app_name}
APP_VERSION={default_settings.app_version}
ENVIRONMENT={env.value}
DEBUG={'true' if env == Environment.DEVELOPMENT else 'false'}

# Server Configuration
HOST={default_settings.host}
PORT={default_settings.port}
RELOAD={'true' if env == Environment.DEVELOPMENT else 'false'}
WORKERS={1 if env == Environment.DEVELOPMENT else 4}

# Logging Configuration
LOG_LEVEL={default_settings.log_level.value}
LOG_FORMAT={default_settings.log_format}

# OCR Configuration (google_vision, gemini or mock)
OCR_BACKEND={default_settings.ocr.backend.value}
OCR_GOOGLE_API_KEY=your-google-api-key
OCR_GEMINI_MODEL={default_settings.ocr.gemini_model}
OCR_TIMEOUT_SECONDS={default_settings.ocr.timeout_seconds}

# Upload Configuration
UPLOAD_MAX_IMAGE_SIZE_MB={default_settings.upload.max_image_size_mb}
UPLOAD_MAX_BATCH_SIZE={default_settings.upload.max_batch_size}
UPLOAD_ALLOWED_CONTENT_TYPE_PREFIX={default_settings.upload.allowed_content_type_prefix}

# Security Configuration
SECURITY_CORS_ORIGINS=["*"]
"""

        with open(output_path, "w") as f:
            f.write(sample_content)

        return output_path
