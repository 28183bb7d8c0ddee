import importlib
import os

from app.config.loader import ConfigLoader
from app.config.settings import (
    Environment,
    OCRSettings,
    Settings,
    UploadSettings,
    env_files_for,
    get_settings,
    load_settings,
    reload_settings,
)
from app.models import OCRBackend

settings_module = importlib.import_module("app.config.settings")


def test_defaults():
    settings = Settings()
    assert settings.app_name == "Menu Modifier Extractor"
    assert settings.upload.max_image_size_mb == 10
    assert settings.upload.max_batch_size == 10


def test_nested_settings_read_prefixed_env(monkeypatch):
    monkeypatch.setenv("OCR_BACKEND", "Gemini")
    monkeypatch.setenv("UPLOAD_MAX_BATCH_SIZE", "3")

    assert OCRSettings().backend == OCRBackend.GEMINI
    assert UploadSettings().max_batch_size == 3


def test_environment_is_case_insensitive():
    assert Settings(environment="PRODUCTION").is_production()


def test_cors_origins_from_comma_list():
    settings = Settings(security={"cors_origins": "https://a.example, https://b.example"})
    assert settings.get_cors_config()["allow_origins"] == ["https://a.example", "https://b.example"]


def test_create_sample_env_file(tmp_path):
    output = tmp_path / "sample.env"
    path = ConfigLoader.create_sample_env_file("staging", str(output))

    content = output.read_text()
    assert path == str(output)
    assert "ENVIRONMENT=staging" in content
    assert "OCR_BACKEND=" in content


def test_missing_env_file_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    settings = load_settings("testing")
    assert settings.environment == Environment.TESTING
    assert settings.upload.max_batch_size == 10


def test_env_files_for_environment(monkeypatch):
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    assert env_files_for() == (".env",)
    assert env_files_for("Staging") == (".env", ".env.staging")


def test_environment_file_overrides_shared_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("UPLOAD_MAX_BATCH_SIZE=5\nOCR_TIMEOUT_SECONDS=12\n")
    (tmp_path / ".env.staging").write_text("UPLOAD_MAX_BATCH_SIZE=4\n")

    settings = load_settings("staging")

    assert settings.environment == Environment.STAGING
    assert settings.upload.max_batch_size == 4
    assert settings.ocr.timeout_seconds == 12


def test_activated_environment_reaches_global_settings(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    (tmp_path / ".env.production").write_text(
        "OCR_BACKEND=gemini\nUPLOAD_MAX_BATCH_SIZE=3\nLOG_LEVEL=WARNING\n"
    )
    original = settings_module.settings

    try:
        activated = ConfigLoader.activate_environment("production")

        assert os.environ["ENVIRONMENT"] == "production"
        assert get_settings() is activated
        assert get_settings().is_production()
        assert get_settings().ocr.backend == OCRBackend.GEMINI
        assert get_settings().upload.max_batch_size == 3
        assert get_settings().log_level.value == "WARNING"
    finally:
        os.environ.pop("ENVIRONMENT", None)
        settings_module.settings = original


def test_reload_settings_honours_environment_variable(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ENVIRONMENT", "staging")
    (tmp_path / ".env.staging").write_text("UPLOAD_MAX_IMAGE_SIZE_MB=2\n")
    original = settings_module.settings

    try:
        reloaded = reload_settings()
        assert reloaded.environment == Environment.STAGING
        assert reloaded.upload.max_image_size_mb == 2
    finally:
        settings_module.settings = original
