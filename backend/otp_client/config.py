import logging
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models.config import (
    DEFAULT_ANTI_FORGERY_HEADER,
    DEFAULT_FALLBACK_BASE_PATH,
    ClientConfig,
)


logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Identity endpoint
    # 未設定の場合は auth_fallback_base_path を利用する
    auth_api_url: Optional[str] = Field(default=None, validation_alias="AUTH_API_URL")
    auth_fallback_base_path: str = DEFAULT_FALLBACK_BASE_PATH
    # 相対パスの解決に使うオリジン (フォールバックパス利用時に必要)
    auth_site_origin: Optional[str] = Field(
        default=None, validation_alias="AUTH_SITE_ORIGIN"
    )

    # Anti-forgery token
    auth_nonce: Optional[str] = Field(default=None, validation_alias="AUTH_NONCE")
    auth_nonce_header: str = DEFAULT_ANTI_FORGERY_HEADER

    # Transport
    auth_request_timeout_seconds: float = 10.0

    # Application Configuration
    log_level: str = "INFO"

    def client_config(self) -> ClientConfig:
        """Build the ClientConfig injected into AuthClient."""
        config = ClientConfig(
            base_url=self.auth_api_url,
            anti_forgery_token=self.auth_nonce,
            fallback_base_path=self.auth_fallback_base_path,
            origin=self.auth_site_origin,
            anti_forgery_header=self.auth_nonce_header,
            timeout_seconds=self.auth_request_timeout_seconds,
        )
        if config.base_url is None and config.origin is None:
            logger.debug(
                "AUTH_API_URL と AUTH_SITE_ORIGIN が未設定です。相対パス %s を使用します。",
                config.fallback_base_path,
            )
        return config


settings = Settings()
