"""Подмодуль сервисов назначений проект/клиент/консультант."""

from .assignment_service import AssignmentService
from .dto import (
    AssignmentResult,
    Edge,
    EventType,
    MutationStatus,
    SyncResult,
    SyncStatus,
)
from .events import AssignmentEvents
from .relation_store import RelationSet, RelationStore
from .storage import CollectionStorage, StorageError
from .sync_service import ClientConsultantSyncService

__all__ = [
    "AssignmentService",
    "AssignmentEvents",
    "AssignmentResult",
    "ClientConsultantSyncService",
    "CollectionStorage",
    "Edge",
    "EventType",
    "MutationStatus",
    "RelationSet",
    "RelationStore",
    "StorageError",
    "SyncResult",
    "SyncStatus",
]
