"""パスワードレス (ワンタイムコード) 認証エンドポイントのクライアント。"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

import httpx
from pydantic import ValidationError

from ..config import settings
from ..models.auth import (
    ChallengeIssued,
    ChallengeOutcome,
    ChallengeRequest,
    LogoutOutcome,
    Rejected,
    RejectionBody,
    RuntimeConfig,
    Terminated,
    VerificationOutcome,
    VerificationRequest,
    Verified,
)
from ..models.config import ClientConfig
from .endpoints import EndpointResolver, build_headers, build_http_client
from .events import EventHook, log_event

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network error. Please try again."
INVALID_CHALLENGE_REQUEST_MESSAGE = "Please enter a valid email address."
INVALID_DISPLAY_NAME_MESSAGE = "Please enter a valid display name."
INVALID_VERIFICATION_REQUEST_MESSAGE = "Email and verification code are required."
INVALID_REQUEST_REASON = "invalid_request"

CONFIG_PATH = "/config"
REQUEST_AUTH_PATH = "/request-auth"
VERIFY_OTP_PATH = "/verify-otp"
LOGOUT_PATH = "/logout"

_TRANSPORT_ERRORS = (httpx.HTTPError, httpx.InvalidURL)


class AuthClientError(Exception):
    """AuthClient で発生する例外の基底。"""


class TransportError(AuthClientError):
    """応答を受け取れなかった場合 (接続不可/タイムアウト/DNS) の例外。"""


class EndpointError(AuthClientError):
    """エンドポイントが失敗ステータスを返した場合の例外。"""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"HTTP error: status {status_code}, body: {body}")
        self.status_code = status_code
        self.body = body


class MalformedResponseError(AuthClientError):
    """応答本文を JSON として解釈できない場合の例外。"""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Malformed response: status {status_code}, body: {body}")
        self.status_code = status_code
        self.body = body


@dataclass(frozen=True)
class _Operation:
    """失敗系を Rejected に畳み込む操作の定義。"""

    event_prefix: str
    success_event: str
    failure_template: str
    success_type: Type[Any]
    # error_detail の連結と reason の引き渡しを行うか
    detailed: bool = False


_CHALLENGE = _Operation(
    event_prefix="challenge",
    success_event="challenge.issued",
    failure_template="Request failed with status {status}",
    success_type=ChallengeIssued,
    detailed=True,
)
_VERIFY = _Operation(
    event_prefix="verify",
    success_event="verify.succeeded",
    failure_template="Verification failed with status {status}",
    success_type=Verified,
)
_LOGOUT = _Operation(
    event_prefix="logout",
    success_event="logout.succeeded",
    failure_template="Logout failed with status {status}",
    success_type=Terminated,
)


def _decode_body(response: httpx.Response) -> Tuple[Any, bool]:
    """本文を JSON として読み取る。空の本文は {} とみなす。"""
    if not response.content.strip():
        return {}, True
    try:
        return response.json(), True
    except ValueError:
        return None, False


class AuthClient:
    """設定取得・コード要求・コード検証・ログアウトの 4 操作を提供する。"""

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        http_client_factory: Optional[Callable[[ClientConfig], httpx.AsyncClient]] = None,
        event_hook: Optional[EventHook] = None,
    ) -> None:
        self._config = config or settings.client_config()
        self._resolver = EndpointResolver(self._config)
        if http_client is not None:
            self._http = http_client
            self._owns_http = False
        else:
            factory = http_client_factory or build_http_client
            self._http = factory(self._config)
            self._owns_http = True
        self._event_hook = event_hook or log_event

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def __aenter__(self) -> "AuthClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """自身で生成した httpx クライアントのみ閉じる。"""
        if self._owns_http:
            await self._http.aclose()

    async def fetch_config(self) -> RuntimeConfig:
        """
        実行時設定を取得する。

        Raises:
            TransportError: 応答を受け取れなかった場合
            EndpointError: 2xx 以外のステータスの場合 (本文を保持する)
            MalformedResponseError: 本文が JSON でない場合
        """
        url = self._resolver.resolve(CONFIG_PATH)
        self._emit("config.request", url=url)
        try:
            response = await self._send("GET", url)
        except _TRANSPORT_ERRORS as exc:
            logger.error("設定の取得に失敗しました url=%s error=%s", url, exc)
            self._emit("config.failed", url=url, error=exc.__class__.__name__)
            raise TransportError(f"Failed to fetch config from {url}: {exc}") from exc

        if not response.is_success:
            error_text = response.text
            logger.error(
                "設定の取得でエラー応答を受信しました status=%s body=%s",
                response.status_code,
                error_text,
            )
            self._emit(
                "config.failed",
                url=url,
                status_code=response.status_code,
                body=error_text,
            )
            raise EndpointError(response.status_code, error_text)

        try:
            data = response.json()
        except ValueError as exc:
            logger.error("設定の応答が JSON ではありません status=%s", response.status_code)
            self._emit("config.failed", url=url, status_code=response.status_code, error="malformed")
            raise MalformedResponseError(response.status_code, response.text) from exc

        self._emit("config.loaded", url=url, status_code=response.status_code)
        return data

    async def request_challenge(
        self, email: str, display_name: Optional[str] = None
    ) -> ChallengeOutcome:
        """メールアドレス宛にワンタイムコードの発行を要求する。例外は送出しない。"""
        try:
            request = ChallengeRequest(email=email, display_name=display_name)
        except ValidationError as exc:
            fields = self._emit_invalid(_CHALLENGE, exc)
            # メールアドレスの誤りを優先して伝える
            if "email" in fields:
                message = INVALID_CHALLENGE_REQUEST_MESSAGE
            else:
                message = INVALID_DISPLAY_NAME_MESSAGE
            return Rejected(message=message, reason=INVALID_REQUEST_REASON)

        return await self._call(_CHALLENGE, REQUEST_AUTH_PATH, request.to_payload())

    async def verify_challenge(self, email: str, code: str) -> VerificationOutcome:
        """ワンタイムコードを検証する。成功時のセッション Cookie は httpx が保持する。"""
        try:
            request = VerificationRequest(email=email, code=code)
        except ValidationError as exc:
            self._emit_invalid(_VERIFY, exc)
            return Rejected(
                message=INVALID_VERIFICATION_REQUEST_MESSAGE, reason=INVALID_REQUEST_REASON
            )

        return await self._call(_VERIFY, VERIFY_OTP_PATH, request.to_payload())

    async def terminate_session(self) -> LogoutOutcome:
        """セッションを終了する。例外は送出しない。"""
        return await self._call(_LOGOUT, LOGOUT_PATH, None)

    async def _send(
        self, method: str, url: str, payload: Optional[Dict[str, Any]] = None
    ) -> httpx.Response:
        kwargs: Dict[str, Any] = {"headers": build_headers(self._config)}
        if payload is not None:
            kwargs["json"] = payload
        return await self._http.request(method, url, **kwargs)

    async def _call(
        self, operation: _Operation, path: str, payload: Optional[Dict[str, Any]]
    ) -> Any:
        """
        1 回の呼び出し結果を操作ごとの結果型に畳み込む。

        - 応答なし: ネットワークエラーの Rejected
        - 2xx 以外: エンドポイントのメッセージ (無ければステータスから合成) の Rejected
        - 2xx: 本文をそのまま保持した成功バリアント
        """
        url = self._resolver.resolve(path)
        self._emit(f"{operation.event_prefix}.request", url=url)
        try:
            response = await self._send("POST", url, payload)
        except _TRANSPORT_ERRORS as exc:
            logger.warning(
                "%s の呼び出しで応答を受け取れませんでした url=%s error=%s",
                operation.event_prefix,
                url,
                exc,
            )
            self._emit(
                "transport.failed",
                operation=operation.event_prefix,
                url=url,
                error=exc.__class__.__name__,
            )
            return Rejected(message=NETWORK_ERROR_MESSAGE)
        except Exception as exc:  # noqa: BLE001
            logger.exception("%s の呼び出しで予期しないエラーが発生しました", operation.event_prefix)
            self._emit(
                "transport.failed",
                operation=operation.event_prefix,
                url=url,
                error=exc.__class__.__name__,
            )
            return Rejected(message=NETWORK_ERROR_MESSAGE)

        status_code = response.status_code
        body, parsed = _decode_body(response)

        if not response.is_success:
            return self._reject(operation, status_code, body if parsed else None)

        if not parsed:
            logger.warning(
                "%s の応答が JSON ではありません status=%s", operation.event_prefix, status_code
            )
            self._emit(
                f"{operation.event_prefix}.rejected",
                status_code=status_code,
                error="malformed",
            )
            return Rejected(
                message=f"Unexpected response from server (status {status_code}).",
                status_code=status_code,
            )

        self._emit(operation.success_event, status_code=status_code)
        return operation.success_type(payload=body)

    def _reject(self, operation: _Operation, status_code: int, body: Any) -> Rejected:
        """エラー応答本文から Rejected を組み立てる。"""
        decoded = RejectionBody.from_payload(body)
        message = decoded.message or operation.failure_template.format(status=status_code)
        reason = None
        if operation.detailed:
            if decoded.error_detail:
                message = f"{message} - {decoded.error_detail}"
            reason = decoded.reason

        self._emit(
            f"{operation.event_prefix}.rejected",
            status_code=status_code,
            message=decoded.message,
            error_type=decoded.error_type,
            error_detail=decoded.error_detail,
            reason=decoded.reason,
        )
        return Rejected(message=message, reason=reason, status_code=status_code)

    def _emit_invalid(self, operation: _Operation, exc: ValidationError) -> List[str]:
        fields = [".".join(str(part) for part in error["loc"]) for error in exc.errors()]
        self._emit("request.invalid", operation=operation.event_prefix, fields=fields)
        return fields

    def _emit(self, name: str, **fields: Any) -> None:
        """イベントフックを呼び出す。フックの失敗で操作を止めない。"""
        try:
            self._event_hook(name, fields)
        except Exception:  # noqa: BLE001
            logger.debug("event hook failed event=%s", name, exc_info=True)
