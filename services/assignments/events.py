"""Внутрипроцессный канал событий об изменении связей."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from typing import Any

from .dto import EventType

logger = logging.getLogger(__name__)

Listener = Callable[[EventType, Any], None]


class AssignmentEvents:
    """Синхронная рассылка событий подписчикам в порядке подписки.

    Исключение одного подписчика логируется и не мешает остальным.
    Отписка во время рассылки безопасна: отписанный слушатель больше
    не вызывается, в том числе в текущем цикле.
    """

    def __init__(self) -> None:
        self._listeners: dict[int, Listener] = {}
        self._tokens = itertools.count()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        token = next(self._tokens)
        self._listeners[token] = listener

        def unsubscribe() -> None:
            self._listeners.pop(token, None)

        return unsubscribe

    def notify(self, event: EventType | str, data: Any = None) -> None:
        event = EventType(event)
        for token, listener in list(self._listeners.items()):
            if token not in self._listeners:
                continue
            try:
                listener(event, data)
            except Exception:  # noqa: BLE001
                logger.exception("Подписчик %r упал на событии %s", listener, event.value)

    def __len__(self) -> int:
        return len(self._listeners)


__all__ = ["AssignmentEvents", "Listener"]
