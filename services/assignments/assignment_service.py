"""Назначения между проектами, клиентами и консультантами.

Назначение делается один раз и видно со всех сторон: консультант,
добавленный в проект, автоматически связывается со всеми клиентами
проекта, и наоборот. Распространение идёт ровно на один уровень.
Снятие назначения удаляет только запрошенную связь; каскад выполняется
лишь при удалении сущности целиком (``cleanup_*``).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from services.validators import normalize_id, normalize_ids

from .dto import (
    AssignmentResult,
    ClientRelationships,
    ConsultantRelationships,
    Edge,
    EventType,
    MutationStatus,
    ProjectRelationships,
)
from .events import Listener
from .relation_store import RelationSet, RelationStore

logger = logging.getLogger(__name__)


class AssignmentService:
    """Фасад над :class:`RelationStore` с правилами распространения связей."""

    def __init__(self, store: RelationStore | None = None) -> None:
        self.store = store or RelationStore()

    # ─────────────────────────── события ───────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self.store.events.subscribe(listener)

    def notify(self, event: EventType | str, data: Any = None) -> None:
        self.store.events.notify(event, data)

    def refresh_all(self) -> None:
        self.notify(EventType.REFRESH_ALL)

    # ─────────────────────── проект ↔ консультант ───────────────────────

    def assign_consultant_to_project(
        self,
        project_id: str | int,
        consultant_id: str | int,
        auto_sync: bool = True,
        notify: bool = True,
    ) -> AssignmentResult:
        pid, cid = normalize_id(project_id), normalize_id(consultant_id)
        status, edge = self.store.project_consultants.insert(pid, cid)
        if status is not MutationStatus.CREATED:
            return AssignmentResult(status, edge)

        propagated: list[Edge] = []
        if auto_sync:
            for client_id in self.store.project_clients.b_by_a(pid):
                result = self.assign_consultant_to_client(client_id, cid, notify=False)
                if result.created:
                    propagated.append(result.edge)
        logger.info(
            "Консультант %s назначен на проект %s, новых связей с клиентами: %s",
            cid,
            pid,
            len(propagated),
        )
        if notify:
            self.refresh_all()
        return AssignmentResult(status, edge, tuple(propagated))

    def remove_consultant_from_project(
        self, project_id: str | int, consultant_id: str | int
    ) -> MutationStatus:
        status = self.store.project_consultants.remove(project_id, consultant_id)
        if status is MutationStatus.REMOVED:
            logger.info("Консультант %s снят с проекта %s", consultant_id, project_id)
        self.refresh_all()
        return status

    def consultants_for_project(self, project_id: str | int) -> list[str]:
        return self.store.project_consultants.b_by_a(project_id)

    def projects_for_consultant(self, consultant_id: str | int) -> list[str]:
        return self.store.project_consultants.a_by_b(consultant_id)

    def available_consultants_for_project(
        self, project_id: str | int, all_consultant_ids: Iterable[str | int]
    ) -> list[str]:
        return self.store.project_consultants.available_b_by_a(project_id, all_consultant_ids)

    # ─────────────────────── проект ↔ клиент ───────────────────────

    def assign_client_to_project(
        self,
        project_id: str | int,
        client_id: str | int,
        auto_sync: bool = True,
        notify: bool = True,
    ) -> AssignmentResult:
        pid, clid = normalize_id(project_id), normalize_id(client_id)
        status, edge = self.store.project_clients.insert(pid, clid)
        if status is not MutationStatus.CREATED:
            return AssignmentResult(status, edge)

        propagated: list[Edge] = []
        if auto_sync:
            for consultant_id in self.store.project_consultants.b_by_a(pid):
                result = self.assign_consultant_to_client(clid, consultant_id, notify=False)
                if result.created:
                    propagated.append(result.edge)
        logger.info(
            "Клиент %s добавлен в проект %s, новых связей с консультантами: %s",
            clid,
            pid,
            len(propagated),
        )
        if notify:
            self.refresh_all()
        return AssignmentResult(status, edge, tuple(propagated))

    def remove_client_from_project(
        self, project_id: str | int, client_id: str | int
    ) -> MutationStatus:
        status = self.store.project_clients.remove(project_id, client_id)
        if status is MutationStatus.REMOVED:
            logger.info("Клиент %s убран из проекта %s", client_id, project_id)
        self.refresh_all()
        return status

    def clients_for_project(self, project_id: str | int) -> list[str]:
        return self.store.project_clients.b_by_a(project_id)

    def projects_for_client(self, client_id: str | int) -> list[str]:
        return self.store.project_clients.a_by_b(client_id)

    def available_clients_for_project(
        self, project_id: str | int, all_client_ids: Iterable[str | int]
    ) -> list[str]:
        return self.store.project_clients.available_b_by_a(project_id, all_client_ids)

    # ─────────────────────── клиент ↔ консультант ───────────────────────

    def assign_consultant_to_client(
        self,
        client_id: str | int,
        consultant_id: str | int,
        notify: bool = True,
    ) -> AssignmentResult:
        """Конечный тип связи: дальше ничего не распространяется."""
        status, edge = self.store.client_consultants.insert(client_id, consultant_id)
        if status is MutationStatus.CREATED and notify:
            self.refresh_all()
        return AssignmentResult(status, edge)

    def remove_consultant_from_client(
        self, client_id: str | int, consultant_id: str | int
    ) -> MutationStatus:
        status = self.store.client_consultants.remove(client_id, consultant_id)
        self.refresh_all()
        return status

    def consultants_for_client(self, client_id: str | int) -> list[str]:
        return self.store.client_consultants.b_by_a(client_id)

    def clients_for_consultant(self, consultant_id: str | int) -> list[str]:
        return self.store.client_consultants.a_by_b(consultant_id)

    def available_consultants_for_client(
        self, client_id: str | int, all_consultant_ids: Iterable[str | int]
    ) -> list[str]:
        return self.store.client_consultants.available_b_by_a(client_id, all_consultant_ids)

    # ─────────────────────── массовые операции ───────────────────────

    def setup_project_assignments(
        self,
        project_id: str | int,
        consultant_ids: Iterable[str | int],
        client_ids: Iterable[str | int],
    ) -> bool:
        """Полностью связать проект, его консультантов и клиентов.

        Подписчики получают одно событие ``refresh-all`` в конце,
        независимо от числа записанных связей.

        Returns:
            bool: ``False``, если хотя бы одна запись не удалась.
        """
        pid = normalize_id(project_id)
        consultants = normalize_ids(consultant_ids)
        clients = normalize_ids(client_ids)

        results: list[AssignmentResult] = []
        for cid in consultants:
            results.append(
                self.assign_consultant_to_project(pid, cid, auto_sync=False, notify=False)
            )
        for clid in clients:
            results.append(
                self.assign_client_to_project(pid, clid, auto_sync=False, notify=False)
            )
        for clid in clients:
            for cid in consultants:
                results.append(self.assign_consultant_to_client(clid, cid, notify=False))

        self.refresh_all()
        failed = sum(1 for result in results if result.failed)
        if failed:
            logger.warning("Настройка проекта %s: не сохранено связей: %s", pid, failed)
        else:
            logger.info(
                "Проект %s: %s консультантов, %s клиентов связаны",
                pid,
                len(consultants),
                len(clients),
            )
        return not failed

    # ─────────────────────── каскадная очистка ───────────────────────

    def cleanup_project_assignments(self, project_id: str | int) -> bool:
        pid = normalize_id(project_id)
        ok = self._remove_mentions(
            (self.store.project_consultants, lambda e: e.a_id == pid),
            (self.store.project_clients, lambda e: e.a_id == pid),
        )
        self.refresh_all()
        return ok

    def cleanup_consultant_assignments(self, consultant_id: str | int) -> bool:
        cid = normalize_id(consultant_id)
        ok = self._remove_mentions(
            (self.store.project_consultants, lambda e: e.b_id == cid),
            (self.store.client_consultants, lambda e: e.b_id == cid),
        )
        self.refresh_all()
        return ok

    def cleanup_client_assignments(self, client_id: str | int) -> bool:
        clid = normalize_id(client_id)
        ok = self._remove_mentions(
            (self.store.project_clients, lambda e: e.b_id == clid),
            (self.store.client_consultants, lambda e: e.a_id == clid),
        )
        self.refresh_all()
        return ok

    @staticmethod
    def _remove_mentions(
        *targets: tuple[RelationSet, Callable[[Edge], bool]],
    ) -> bool:
        ok = True
        for relation, predicate in targets:
            if relation.remove_where(predicate) is MutationStatus.FAILED:
                ok = False
        return ok

    # ─────────────────────────── сводки ───────────────────────────

    def project_relationships(self, project_id: str | int) -> ProjectRelationships:
        return ProjectRelationships(
            consultant_ids=self.consultants_for_project(project_id),
            client_ids=self.clients_for_project(project_id),
        )

    def consultant_relationships(self, consultant_id: str | int) -> ConsultantRelationships:
        return ConsultantRelationships(
            project_ids=self.projects_for_consultant(consultant_id),
            client_ids=self.clients_for_consultant(consultant_id),
        )

    def client_relationships(self, client_id: str | int) -> ClientRelationships:
        return ClientRelationships(
            project_ids=self.projects_for_client(client_id),
            consultant_ids=self.consultants_for_client(client_id),
        )


__all__ = ["AssignmentService"]
