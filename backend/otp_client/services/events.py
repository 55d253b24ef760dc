"""認証フローの判断点ごとに発行されるイベントのフック。"""

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

EventHook = Callable[[str, Dict[str, Any]], None]

_WARNING_SUFFIXES = (".rejected", ".failed", ".invalid")


def log_event(name: str, fields: Dict[str, Any]) -> None:
    """既定のフック。イベントを logging へ出力する。"""
    level = logging.WARNING if name.endswith(_WARNING_SUFFIXES) else logging.DEBUG
    logger.log(level, "auth event=%s fields=%s", name, fields, extra={"auth_event": name})


class EventRecorder:
    """イベントを保持し、名前ごとの件数を数えるレコーダー。"""

    def __init__(self, forward: Optional[EventHook] = None) -> None:
        self._counts: Dict[str, int] = defaultdict(int)
        self._events: List[Tuple[str, Dict[str, Any]]] = []
        self._forward = forward

    def __call__(self, name: str, fields: Dict[str, Any]) -> None:
        self._counts[name] += 1
        self._events.append((name, dict(fields)))
        if self._forward is not None:
            self._forward(name, fields)

    @property
    def events(self) -> List[Tuple[str, Dict[str, Any]]]:
        """記録済みイベントを発行順に返す。"""
        return list(self._events)

    def names(self) -> List[str]:
        return [name for name, _ in self._events]

    def count(self, name: str) -> int:
        """指定イベントの件数を返す（存在しなければ 0）。"""
        return self._counts.get(name, 0)

    def last(self, name: str) -> Optional[Dict[str, Any]]:
        """指定イベントの最後のフィールドを返す。"""
        for event_name, fields in reversed(self._events):
            if event_name == name:
                return fields
        return None

    def clear(self) -> None:
        self._counts.clear()
        self._events.clear()
