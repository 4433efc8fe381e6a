from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_OPENAPI_SPEC = Path(__file__).resolve().parent / "docs" / "openapi.json"

class Settings(BaseSettings):
    # App
    APP_NAME: str = "sctsinstitute-backend"
    APP_ENV: str = "development"
    PORT: int = 5000

    # Extra allowed origins, comma-separated; parsed leniently
    CORS_ORIGIN: Optional[str] = None
    CORS_MAX_AGE: int = 600

    # Uploads (relative paths resolve against the working directory)
    UPLOAD_DIR: str = "uploads"

    # Docs
    PUBLIC_BASE_URL: Optional[str] = None
    OPENAPI_SPEC_PATH: str = str(DEFAULT_OPENAPI_SPEC)

    # Diagnostics
    ENABLE_HEADER_DEBUG: bool = False
    EXPOSE_ERROR_DETAILS: bool = False

    # Mongo
    MONGO_URI: str = "mongodb://127.0.0.1:27017"
    MONGO_DATABASE: str = "sctsinstitute"

    # Security / Limits
    RATE_PUBLIC_PER_MIN: int = 120
    TRUSTED_HOSTS: list[str] = ["*"]

    # Meta
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def is_development(self) -> bool:
        return self.APP_ENV.lower() in ("dev", "development")

    @property
    def upload_root(self) -> Path:
        return (Path.cwd() / self.UPLOAD_DIR).resolve()

settings = Settings()
