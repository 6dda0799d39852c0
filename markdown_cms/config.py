from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # extras keep the numbered MARKDOWN_ROOT_DIR_<n> / MARKDOWN_ROOT_LABEL_<n> entries read from .env
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='allow')

    app_name: str = 'Markdown CMS'
    app_host: str = '0.0.0.0'
    app_port: int = 3000
    log_level: str = 'info'
    cors_origins: str = ''
    command_timeout_sec: int = Field(default=20, ge=2, le=300)

    use_mock_api: bool = False
    mock_root_dir: str = 'mock-data/filesystem'
    markdown_root_dir: str = '/'


settings = Settings()
