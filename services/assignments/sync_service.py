"""Сверка локальных назначений клиент-консультант с сервером."""

from __future__ import annotations

import logging

from infrastructure.assignments_gateway import AssignmentsGateway, GatewayError
from services.validators import normalize_id
from utils.time_utils import utc_now_iso

from .assignment_service import AssignmentService
from .dto import Edge, SyncResult, SyncStatus
from .storage import StorageError

logger = logging.getLogger(__name__)


def merge_remote_edges(remote: list[Edge], local: list[Edge]) -> tuple[list[Edge], int]:
    """Сервер главный для всех пар, которые он знает.

    Результат: удалённые связи в исходном порядке (повторы пар отброшены),
    затем локальные связи, чьих пар на сервере нет. Пары сравниваются
    только по идентификаторам, ``created_at`` не учитывается.

    Returns:
        tuple: Итоговый список и число сохранённых локальных связей.
    """
    merged: list[Edge] = []
    seen: set[tuple[str, str]] = set()
    for edge in remote:
        if edge.pair in seen:
            continue
        seen.add(edge.pair)
        merged.append(edge)
    local_only = 0
    for edge in local:
        if edge.pair in seen:
            continue
        seen.add(edge.pair)
        merged.append(edge)
        local_only += 1
    return merged, local_only


class ClientConsultantSyncService:
    """Оркестратор синхронизации назначений клиент-консультант."""

    def __init__(self, assignments: AssignmentService, gateway: AssignmentsGateway) -> None:
        self._assignments = assignments
        self._gateway = gateway

    # ─────────────────────────── публичные методы ───────────────────────────

    async def sync_from_remote(self) -> SyncResult:
        """Подтянуть назначения с сервера и слить с локальными.

        Любая ошибка получения данных оставляет локальное состояние
        нетронутым и не пробрасывается наружу.
        """
        relation = self._assignments.store.client_consultants
        try:
            records = await self._gateway.fetch_client_consultants()
            remote = self._parse_records(records)
        except GatewayError as exc:
            logger.warning("Не удалось получить назначения с сервера: %s", exc)
            return SyncResult(SyncStatus.UNAVAILABLE, error=str(exc))

        try:
            local = relation.load_edges()
        except StorageError:
            return SyncResult(SyncStatus.STORAGE_FAILED, remote_count=len(remote))

        merged, local_only = merge_remote_edges(remote, local)
        if not relation.save(merged):
            return SyncResult(SyncStatus.STORAGE_FAILED, remote_count=len(remote))

        logger.info(
            "Синхронизировано назначений: %s с сервера, %s только локальных",
            len(remote),
            local_only,
        )
        return SyncResult(SyncStatus.MERGED, remote_count=len(remote), local_only_count=local_only)

    async def assign_via_api(self, client_id: str | int, consultant_id: str | int) -> bool:
        """Назначить консультанта клиенту на сервере и локально.

        При недоступном сервере назначение сохраняется только локально.
        Отказ сервера (неуспешный статус) локальное состояние не меняет.
        """
        clid, cid = normalize_id(client_id), normalize_id(consultant_id)
        try:
            accepted = await self._gateway.assign_consultant_to_client(clid, cid)
        except GatewayError as exc:
            logger.warning("Сервер недоступен, назначение только локально: %s", exc)
            return bool(self._assignments.assign_consultant_to_client(clid, cid))
        if not accepted:
            return False
        result = self._assignments.assign_consultant_to_client(clid, cid)
        # Уже назначенная локально пара тоже считается успехом
        return not result.failed

    # ─────────────────────────── внутренние методы ──────────────────────────

    def _parse_records(self, records: list) -> list[Edge]:
        kind = self._assignments.store.client_consultants.kind
        edges: list[Edge] = []
        for record in records:
            try:
                edge = Edge.from_record(kind, record)
            except ValueError as exc:
                raise GatewayError(f"Некорректная запись назначения: {record!r}") from exc
            if not edge.created_at:
                edge = Edge(edge.a_id, edge.b_id, utc_now_iso())
            edges.append(edge)
        return edges


__all__ = ["ClientConsultantSyncService", "merge_remote_edges"]
