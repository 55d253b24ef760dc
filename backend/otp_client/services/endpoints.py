"""エンドポイント URL とリクエストヘッダーを組み立てる。"""

import logging
from typing import Any, Dict, Optional

import httpx

from ..models.config import ClientConfig

logger = logging.getLogger(__name__)


class EndpointResolver:
    """論理パスを呼び出し先の URL に変換する。"""

    def __init__(self, config: ClientConfig) -> None:
        self._config = config

    def resolve(self, path: str) -> str:
        """
        論理パス (例: ``/config``) を URL に変換する。

        base_url が設定されていればそれを基点にし、無ければフォールバックの
        相対パスを返す。例外は送出しない。
        """
        path = path or ""
        base_url = self._config.base_url
        if base_url:
            base = base_url[:-1] if base_url.endswith("/") else base_url
            normalized = path if path.startswith("/") else f"/{path}"
            url = f"{base}{normalized}"
            logger.debug("resolved endpoint path=%s url=%s", path, url)
            return url

        # フォールバックは元のパスをそのまま連結する
        url = f"{self._config.fallback_base_path}{path}"
        logger.debug("resolved endpoint via fallback path=%s url=%s", path, url)
        return url


def build_headers(config: ClientConfig) -> Dict[str, str]:
    """送信ヘッダーを返す。anti-forgery トークンは設定時のみ付与する。"""
    headers = {"Content-Type": "application/json"}
    if config.anti_forgery_token:
        headers[config.anti_forgery_header] = config.anti_forgery_token
    return headers


def build_http_client(
    config: ClientConfig, transport: Optional[httpx.AsyncBaseTransport] = None
) -> httpx.AsyncClient:
    """Cookie を保持する httpx.AsyncClient を生成する。"""
    kwargs: Dict[str, Any] = {"timeout": httpx.Timeout(config.timeout_seconds)}
    if config.origin:
        kwargs["base_url"] = config.origin
    if transport is not None:
        kwargs["transport"] = transport
    return httpx.AsyncClient(**kwargs)
