"""Application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

TEMPLATES_DIR = Path(__file__).parent / "templates"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    data_dir: Path = Path(".")
    templates_dir: Path = TEMPLATES_DIR
    host: str = "0.0.0.0"
    port: int = 8080
    debug: bool = False
    app_title: str = "FlatWiki"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="FLATWIKI_",
        env_file=".env",
        env_file_encoding="utf-8",
    )


settings = Settings()
