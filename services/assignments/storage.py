"""Долговременное key-value хранилище коллекций поверх peewee."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any

from peewee import PeeweeException

from database.db import db
from database.models import StoredCollection

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """База данных недоступна: прочитать сохранённую коллекцию нельзя."""


class CollectionStorage:
    """Читает и пишет JSON-коллекции целиком, по одному ключу на коллекцию.

    Отсутствующая или повреждённая коллекция читается как ``None``.
    Сбой базы при чтении поднимает :class:`StorageError`, чтобы вызывающий
    код не принял его за пустую коллекцию. Запись возвращает ``False``,
    а в базе остаётся последняя успешно сохранённая версия.
    """

    def load(self, key: str) -> list[Any] | None:
        try:
            row = StoredCollection.get_or_none(StoredCollection.key == key)
        except PeeweeException as exc:
            logger.exception("Не удалось прочитать коллекцию %s", key)
            raise StorageError(f"Коллекция {key} недоступна: {exc}") from exc
        if row is None:
            return None
        try:
            data = json.loads(row.payload)
        except (TypeError, ValueError):
            logger.warning("Повреждённые данные в коллекции %s, считаем пустой", key)
            return None
        if not isinstance(data, list):
            logger.warning("Коллекция %s хранит %s вместо списка", key, type(data).__name__)
            return None
        return data

    def store(self, key: str, records: list[Any]) -> bool:
        try:
            payload = json.dumps(records, ensure_ascii=False)
        except (TypeError, ValueError):
            logger.exception("Не удалось сериализовать коллекцию %s", key)
            return False
        try:
            with db.atomic():
                row = StoredCollection.get_or_none(StoredCollection.key == key)
                if row is None:
                    StoredCollection.create(key=key, payload=payload)
                else:
                    row.payload = payload
                    row.updated_at = datetime.utcnow()
                    row.save()
        except PeeweeException:
            logger.exception("Не удалось сохранить коллекцию %s", key)
            return False
        return True


__all__ = ["CollectionStorage", "StorageError"]
