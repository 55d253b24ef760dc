from __future__ import annotations

import os
from typing import Callable

from hypothesis import settings

import httpx
import pytest

from otp_client.models.config import ClientConfig
from otp_client.services.auth import AuthClient
from otp_client.services.endpoints import build_http_client
from otp_client.services.events import EventRecorder

BASE_URL = "https://auth.example.com/wp-json/zfl/v1"

_DEFAULT_MAX_EXAMPLES = int(os.getenv("HYPOTHESIS_MAX_EXAMPLES", "25"))

# 非同期テストは初回のイベントループ生成で 200ms を超えることがあるため、
# デッドラインを無効化してフレークを防ぐ。
if "HYPOTHESIS_PROFILE" not in os.environ:
    try:
        settings.register_profile(
            "ci",
            settings(
                deadline=None,
                max_examples=_DEFAULT_MAX_EXAMPLES,
            ),
        )
    except ValueError:
        # プロファイルが既に存在する場合は無視して既定プロファイルを読み込む
        pass
    settings.load_profile("ci")


def _make_auth_client(
    handler: Callable[[httpx.Request], httpx.Response],
    *,
    event_hook=None,
    **config_kwargs,
) -> AuthClient:
    """MockTransport 経由で handler に応答させる AuthClient を作成する。"""
    config_kwargs.setdefault("base_url", BASE_URL)
    config = ClientConfig(**config_kwargs)
    transport = httpx.MockTransport(handler)
    return AuthClient(
        config,
        http_client_factory=lambda cfg: build_http_client(cfg, transport=transport),
        event_hook=event_hook,
    )


@pytest.fixture
def make_client() -> Callable[..., AuthClient]:
    """MockTransport を使う AuthClient のファクトリを返す。"""
    return _make_auth_client


@pytest.fixture
def recorder() -> EventRecorder:
    """テストごとに空のイベントレコーダーを用意する。"""
    return EventRecorder()
