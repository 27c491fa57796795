"""Контекст приложения и управление зависимостями."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, ClassVar

from config import Settings, get_settings
from infrastructure.assignments_gateway import AssignmentsGateway
from services.assignments import (
    AssignmentService,
    ClientConsultantSyncService,
    RelationStore,
)

DependencyName = str


class AppContext:
    """Контекст приложения с ленивым созданием зависимостей.

    Один экземпляр :class:`AssignmentService` на контекст: все
    представления получают его отсюда, а не из глобального состояния.
    """

    _DEPENDENCY_NAMES: ClassVar[set[str]] = {
        "relation_store",
        "assignment_service",
        "assignments_gateway",
        "sync_service",
    }

    def __init__(
        self,
        settings: Settings,
        *,
        relation_store_factory: Callable[[], RelationStore],
        assignments_gateway_factory: Callable[[Settings], AssignmentsGateway],
        overrides: dict[str, Any] | None = None,
        instances: dict[str, Any] | None = None,
    ) -> None:
        self._settings = settings
        self._relation_store_factory = relation_store_factory
        self._assignments_gateway_factory = assignments_gateway_factory
        self._overrides: dict[str, Any] = dict(overrides or {})
        self._instances: dict[str, Any] = dict(instances or {})

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def relation_store(self) -> RelationStore:
        return self._get_dependency("relation_store", self._relation_store_factory)

    @property
    def assignment_service(self) -> AssignmentService:
        return self._get_dependency(
            "assignment_service",
            lambda: AssignmentService(self.relation_store),
        )

    @property
    def assignments_gateway(self) -> AssignmentsGateway:
        return self._get_dependency(
            "assignments_gateway",
            lambda: self._assignments_gateway_factory(self._settings),
        )

    @property
    def sync_service(self) -> ClientConsultantSyncService:
        return self._get_dependency(
            "sync_service",
            lambda: ClientConsultantSyncService(
                self.assignment_service, self.assignments_gateway
            ),
        )

    def override(self, **deps: Any) -> "AppContext":
        """Создать новый контекст с переопределёнными зависимостями."""

        override_args = dict(deps)
        new_settings = override_args.pop("settings", self._settings)

        unknown = set(override_args) - self._DEPENDENCY_NAMES
        if unknown:
            names = ", ".join(sorted(unknown))
            raise ValueError(f"Неизвестные зависимости для переопределения: {names}")

        overrides = dict(self._overrides)
        overrides.update(override_args)
        if new_settings is self._settings:
            instances = {
                key: value
                for key, value in self._instances.items()
                if key not in override_args
            }
        else:
            instances = {}
        return AppContext(
            settings=new_settings,
            relation_store_factory=self._relation_store_factory,
            assignments_gateway_factory=self._assignments_gateway_factory,
            overrides=overrides,
            instances=instances,
        )

    def _get_dependency(
        self, name: DependencyName, factory: Callable[[], Any]
    ) -> Any:
        if name in self._overrides:
            return self._overrides[name]
        if name not in self._instances:
            self._instances[name] = factory()
        return self._instances[name]


_app_context: AppContext | None = None


def _build_default_context() -> AppContext:
    return AppContext(
        settings=get_settings(),
        relation_store_factory=RelationStore,
        assignments_gateway_factory=lambda settings: AssignmentsGateway(settings),
    )


def get_app_context() -> AppContext:
    """Получить (или создать) синглтон контекста приложения."""

    global _app_context
    if _app_context is None:
        _app_context = _build_default_context()
    return _app_context


def reset_app_context() -> None:
    """Сбросить контекст (для тестов и повторной инициализации)."""

    global _app_context
    _app_context = None


__all__ = ["AppContext", "get_app_context", "reset_app_context"]
