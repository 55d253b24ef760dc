"""Client configuration models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_FALLBACK_BASE_PATH = "/wp-json/zfl/v1"
DEFAULT_ANTI_FORGERY_HEADER = "X-WP-Nonce"


class ClientConfig(BaseModel):
    """Configuration injected into AuthClient at construction time."""

    model_config = ConfigDict(frozen=True)

    base_url: Optional[str] = Field(
        default=None, description="Base address of the identity endpoint"
    )
    anti_forgery_token: Optional[str] = Field(
        default=None, description="Token sent in the anti-forgery header"
    )
    fallback_base_path: str = Field(
        default=DEFAULT_FALLBACK_BASE_PATH,
        description="Base path used when no base_url is configured",
    )
    # 相対 URL を解決するためのオリジン (例: https://example.com)
    origin: Optional[str] = None
    anti_forgery_header: str = Field(default=DEFAULT_ANTI_FORGERY_HEADER, min_length=1)
    timeout_seconds: float = Field(default=10.0, gt=0)

    @field_validator("base_url", "anti_forgery_token", "origin", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        """Treat blank strings as not configured."""
        if isinstance(value, str) and not value.strip():
            return None
        return value
