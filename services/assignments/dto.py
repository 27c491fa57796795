"""DTO и типы результатов для связей проект/клиент/консультант."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from services.validators import normalize_id

__all__ = [
    "RelationKind",
    "PROJECT_CONSULTANTS",
    "PROJECT_CLIENTS",
    "CLIENT_CONSULTANTS",
    "EventType",
    "Edge",
    "MutationStatus",
    "AssignmentResult",
    "SyncStatus",
    "SyncResult",
    "ProjectRelationships",
    "ConsultantRelationships",
    "ClientRelationships",
]


class EventType(str, Enum):
    PROJECT_CONSULTANT = "project-consultant"
    PROJECT_CLIENT = "project-client"
    CLIENT_CONSULTANT = "client-consultant"
    REFRESH_ALL = "refresh-all"


@dataclass(frozen=True, slots=True)
class RelationKind:
    """Описание набора связей: ключ хранения, имена полей и тип события."""

    name: str
    storage_key: str
    a_field: str
    b_field: str
    event: EventType


PROJECT_CONSULTANTS = RelationKind(
    name="project_consultants",
    storage_key="timely_project_consultants",
    a_field="projectId",
    b_field="consultantId",
    event=EventType.PROJECT_CONSULTANT,
)
PROJECT_CLIENTS = RelationKind(
    name="project_clients",
    storage_key="timely_project_clients",
    a_field="projectId",
    b_field="clientId",
    event=EventType.PROJECT_CLIENT,
)
CLIENT_CONSULTANTS = RelationKind(
    name="client_consultants",
    storage_key="timely_client_consultants_local",
    a_field="clientId",
    b_field="consultantId",
    event=EventType.CLIENT_CONSULTANT,
)


@dataclass(frozen=True, slots=True)
class Edge:
    """Связь (a_id, b_id). Идентичность определяется только парой."""

    a_id: str
    b_id: str
    created_at: str = ""

    @property
    def pair(self) -> tuple[str, str]:
        return (self.a_id, self.b_id)

    def to_record(self, kind: RelationKind) -> dict[str, str]:
        return {
            kind.a_field: self.a_id,
            kind.b_field: self.b_id,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_record(cls, kind: RelationKind, record: Mapping[str, Any]) -> "Edge":
        """Собрать связь из записи хранилища или ответа API.

        Raises:
            ValueError: В записи нет одного из идентификаторов.
        """
        if not isinstance(record, Mapping):
            raise ValueError(f"Ожидался объект, получено: {type(record).__name__}")
        a_id = normalize_id(record.get(kind.a_field))
        b_id = normalize_id(record.get(kind.b_field))
        created = record.get("createdAt") or ""
        return cls(a_id=a_id, b_id=b_id, created_at=str(created))


class MutationStatus(str, Enum):
    CREATED = "created"
    EXISTS = "exists"
    REMOVED = "removed"
    ABSENT = "absent"
    FAILED = "failed"


@dataclass(frozen=True)
class AssignmentResult:
    """Итог операции назначения.

    ``propagated`` содержит только новые производные связи клиент-консультант.
    В булевом контексте результат истинен, если основная связь создана.
    """

    status: MutationStatus
    edge: Edge | None = None
    propagated: tuple[Edge, ...] = ()

    @property
    def created(self) -> bool:
        return self.status is MutationStatus.CREATED

    @property
    def already_assigned(self) -> bool:
        return self.status is MutationStatus.EXISTS

    @property
    def failed(self) -> bool:
        return self.status is MutationStatus.FAILED

    def __bool__(self) -> bool:
        return self.created


class SyncStatus(str, Enum):
    MERGED = "merged"
    UNAVAILABLE = "unavailable"
    STORAGE_FAILED = "storage_failed"


@dataclass(frozen=True)
class SyncResult:
    status: SyncStatus
    remote_count: int = 0
    local_only_count: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is SyncStatus.MERGED

    def __bool__(self) -> bool:
        return self.ok


@dataclass(frozen=True)
class ProjectRelationships:
    consultant_ids: list[str] = field(default_factory=list)
    client_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ConsultantRelationships:
    project_ids: list[str] = field(default_factory=list)
    client_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ClientRelationships:
    project_ids: list[str] = field(default_factory=list)
    consultant_ids: list[str] = field(default_factory=list)
