"""設定取得 → コード要求 → コード検証 → ログアウトの流れを管理する。"""

import logging
from enum import Enum
from typing import Optional

from ..models.auth import (
    ChallengeOutcome,
    LogoutOutcome,
    Rejected,
    RuntimeConfig,
    VerificationOutcome,
)
from .auth import AuthClient

logger = logging.getLogger(__name__)

NO_PENDING_CHALLENGE_MESSAGE = "Request a verification code first."
NO_PENDING_CHALLENGE_REASON = "no_pending_challenge"


class FlowStage(str, Enum):
    """ログインフローの段階。"""

    IDLE = "idle"
    CHALLENGE_SENT = "challenge_sent"
    AUTHENTICATED = "authenticated"
    LOGGED_OUT = "logged_out"


class LoginFlow:
    """AuthClient の呼び出し順序と段階を保持する。"""

    def __init__(self, client: AuthClient) -> None:
        self._client = client
        self._stage = FlowStage.IDLE
        self._pending_email: Optional[str] = None
        self._runtime_config: Optional[RuntimeConfig] = None

    @property
    def stage(self) -> FlowStage:
        return self._stage

    @property
    def pending_email(self) -> Optional[str]:
        return self._pending_email

    @property
    def runtime_config(self) -> Optional[RuntimeConfig]:
        """最後に取得した実行時設定。"""
        return self._runtime_config

    async def load_config(self) -> RuntimeConfig:
        """実行時設定を取得する。失敗時の例外はそのまま送出する。"""
        self._runtime_config = await self._client.fetch_config()
        return self._runtime_config

    async def start(self, email: str, display_name: Optional[str] = None) -> ChallengeOutcome:
        """コードを要求し、成功すればコード入力待ちに進む。"""
        outcome = await self._client.request_challenge(email, display_name)
        if outcome.success:
            self._pending_email = email
            self._stage = FlowStage.CHALLENGE_SENT
            logger.debug("login flow stage=%s", self._stage.value)
        return outcome

    async def submit_code(self, code: str) -> VerificationOutcome:
        """保留中のメールアドレスに対してコードを検証する。"""
        if self._pending_email is None:
            return Rejected(
                message=NO_PENDING_CHALLENGE_MESSAGE, reason=NO_PENDING_CHALLENGE_REASON
            )

        outcome = await self._client.verify_challenge(self._pending_email, code)
        if outcome.success:
            self._pending_email = None
            self._stage = FlowStage.AUTHENTICATED
            logger.debug("login flow stage=%s", self._stage.value)
        return outcome

    async def logout(self) -> LogoutOutcome:
        outcome = await self._client.terminate_session()
        if outcome.success:
            self._pending_email = None
            self._stage = FlowStage.LOGGED_OUT
            logger.debug("login flow stage=%s", self._stage.value)
        return outcome

    def reset(self) -> None:
        self._pending_email = None
        self._stage = FlowStage.IDLE
