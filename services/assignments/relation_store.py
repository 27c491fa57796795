"""Хранилище трёх наборов связей проект/клиент/консультант."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from services.validators import normalize_id
from utils.time_utils import utc_now_iso

from .dto import (
    CLIENT_CONSULTANTS,
    PROJECT_CLIENTS,
    PROJECT_CONSULTANTS,
    Edge,
    MutationStatus,
    RelationKind,
)
from .events import AssignmentEvents
from .storage import CollectionStorage, StorageError

logger = logging.getLogger(__name__)


class RelationSet:
    """Набор уникальных пар (a_id, b_id) одной связи.

    Каждая успешная запись переписывает коллекцию целиком и отправляет
    ровно одно событие типа ``kind.event``.
    """

    def __init__(
        self,
        kind: RelationKind,
        storage: CollectionStorage,
        events: AssignmentEvents,
    ) -> None:
        self.kind = kind
        self._storage = storage
        self._events = events

    # ─────────────────────────── чтение ───────────────────────────

    def get_all(self) -> list[Edge]:
        """Все связи набора. При недоступной базе возвращает пустой список."""
        try:
            return self.load_edges()
        except StorageError:
            return []

    def load_edges(self) -> list[Edge]:
        """Как :meth:`get_all`, но сбой чтения базы пробрасывается.

        Raises:
            StorageError: База недоступна.
        """
        records = self._storage.load(self.kind.storage_key)
        if not records:
            return []
        edges: list[Edge] = []
        seen: set[tuple[str, str]] = set()
        for record in records:
            try:
                edge = Edge.from_record(self.kind, record)
            except ValueError:
                logger.warning("Пропущена некорректная запись в %s: %r", self.kind.name, record)
                continue
            if edge.pair in seen:
                continue
            seen.add(edge.pair)
            edges.append(edge)
        return edges

    def contains(self, a_id: str | int, b_id: str | int) -> bool:
        pair = (normalize_id(a_id), normalize_id(b_id))
        return any(edge.pair == pair for edge in self.get_all())

    def b_by_a(self, a_id: str | int) -> list[str]:
        a_id = normalize_id(a_id)
        return [edge.b_id for edge in self.get_all() if edge.a_id == a_id]

    def a_by_b(self, b_id: str | int) -> list[str]:
        b_id = normalize_id(b_id)
        return [edge.a_id for edge in self.get_all() if edge.b_id == b_id]

    def available_b_by_a(self, a_id: str | int, all_b: Iterable[str | int]) -> list[str]:
        """Кандидаты из ``all_b``, ещё не связанные с ``a_id``."""
        linked = set(self.b_by_a(a_id))
        result: list[str] = []
        for b_id in all_b:
            b_id = normalize_id(b_id)
            if b_id not in linked and b_id not in result:
                result.append(b_id)
        return result

    # ─────────────────────────── запись ───────────────────────────

    def save(self, edges: Iterable[Edge]) -> bool:
        edges = list(edges)
        records = [edge.to_record(self.kind) for edge in edges]
        if not self._storage.store(self.kind.storage_key, records):
            logger.warning("Набор %s не сохранён, действует прежнее состояние", self.kind.name)
            return False
        self._events.notify(self.kind.event, edges)
        return True

    def insert(self, a_id: str | int, b_id: str | int) -> tuple[MutationStatus, Edge | None]:
        a_id, b_id = normalize_id(a_id), normalize_id(b_id)
        try:
            existing = self.load_edges()
        except StorageError:
            return MutationStatus.FAILED, None
        for edge in existing:
            if edge.pair == (a_id, b_id):
                return MutationStatus.EXISTS, edge
        edge = Edge(a_id=a_id, b_id=b_id, created_at=utc_now_iso())
        if not self.save([*existing, edge]):
            return MutationStatus.FAILED, None
        return MutationStatus.CREATED, edge

    def add(self, a_id: str | int, b_id: str | int) -> bool:
        status, _ = self.insert(a_id, b_id)
        return status is MutationStatus.CREATED

    def remove(self, a_id: str | int, b_id: str | int) -> MutationStatus:
        pair = (normalize_id(a_id), normalize_id(b_id))
        return self.remove_where(lambda edge: edge.pair == pair)

    def remove_where(self, predicate: Callable[[Edge], bool]) -> MutationStatus:
        """Удалить все связи, подходящие под условие, одной записью."""
        try:
            existing = self.load_edges()
        except StorageError:
            return MutationStatus.FAILED
        kept = [edge for edge in existing if not predicate(edge)]
        if len(kept) == len(existing):
            return MutationStatus.ABSENT
        if not self.save(kept):
            return MutationStatus.FAILED
        return MutationStatus.REMOVED


class RelationStore:
    """Три набора связей с общим хранилищем и каналом событий."""

    def __init__(
        self,
        storage: CollectionStorage | None = None,
        events: AssignmentEvents | None = None,
    ) -> None:
        self.storage = storage or CollectionStorage()
        self.events = events or AssignmentEvents()
        self.project_consultants = RelationSet(PROJECT_CONSULTANTS, self.storage, self.events)
        self.project_clients = RelationSet(PROJECT_CLIENTS, self.storage, self.events)
        self.client_consultants = RelationSet(CLIENT_CONSULTANTS, self.storage, self.events)


__all__ = ["RelationSet", "RelationStore"]
