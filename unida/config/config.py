from __future__ import annotations
import json
from typing import Any, Dict, List, Optional
from pathlib import Path

import yaml
from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from typing_extensions import Annotated
from pydantic import Field
from dotenv import load_dotenv

load_dotenv()


class CloudinaryConfig(BaseModel):
    """Media host credentials (https://cloudinary.com/console)"""
    cloud_name: Annotated[Optional[str], Field(default=None)]
    api_key: Annotated[Optional[str], Field(default=None)]
    api_secret: Annotated[Optional[str], Field(default=None)]
    folder: Annotated[str, Field(default="unida_papers")]
    timeout: Annotated[int, Field(default=60)]


class LoggingConfig(BaseModel):
    level: Annotated[str, Field(default="INFO")]
    log_dir: Annotated[str, Field(default="logs")]
    log_file: Annotated[str, Field(default="unida.log")]
    max_bytes: Annotated[int, Field(default=20 * 1024 * 1024)]  # 20MB
    backup_count: Annotated[int, Field(default=5)]


class Settings(BaseSettings):
    database_url: Annotated[str, Field(default="sqlite:///./unida.db")]

    jwt_secret: Annotated[str, Field(default="change-me-unida-development-secret-key")]
    jwt_algorithm: Annotated[str, Field(default="HS256")]
    token_ttl_days: Annotated[int, Field(default=30, ge=1)]

    # ALLOWED_ORIGINS=https://a.example,https://b.example (or a JSON list)
    allowed_origins: Annotated[List[str], NoDecode, Field(default=["*"])]
    host: Annotated[str, Field(default="0.0.0.0")]
    port: Annotated[int, Field(default=10000)]

    max_upload_mb: Annotated[int, Field(default=10, ge=1)]

    cloudinary: CloudinaryConfig = Field(default_factory=CloudinaryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            if value.startswith("["):
                return json.loads(value)
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        def yaml_settings() -> Dict[str, Any]:
            path = Path("settings.yaml")
            if not path.exists():
                return {}
            return yaml.safe_load(path.read_text(encoding="utf-8")) or {}

        return (
            init_settings,
            env_settings,
            dotenv_settings,
            yaml_settings,
            file_secret_settings,
        )


Config = Settings()
