"""Сервисный модуль для управления проектами."""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation

from peewee import ModelSelect

from core.app_context import get_app_context
from database.models import Project, ProjectStatus, db
from services.assignments import AssignmentService
from services.query_utils import apply_search, next_identifier
from services.validators import normalize_id, validate_choice

logger = logging.getLogger(__name__)

PROJECT_ALLOWED_FIELDS = {"name", "description", "status", "start_date", "end_date", "budget"}


def get_all_projects() -> ModelSelect:
    return Project.active()


def get_project(project_id: str | int) -> Project | None:
    return Project.get_or_none(
        (Project.project_id == normalize_id(project_id)) & (Project.is_deleted == False)
    )


def build_project_query(
    search_text: str = "", status: ProjectStatus | str | None = None
) -> ModelSelect:
    query = Project.active()
    if status:
        query = query.where(Project.status == validate_choice(status, ProjectStatus))
    return apply_search(query, [Project.name, Project.description], search_text)


def _parse_budget(value) -> Decimal:
    try:
        budget = Decimal(str(value).replace(" ", "").replace(",", "."))
    except InvalidOperation:
        raise ValueError(f"Неверный бюджет: {value!r}") from None
    if budget < 0:
        raise ValueError("Бюджет не может быть отрицательным")
    return budget


def _clean(data: dict, current: Project | None = None) -> dict:
    clean_data = {
        k: v for k, v in data.items() if k in PROJECT_ALLOWED_FIELDS and v not in ("", None)
    }
    if "status" in clean_data:
        clean_data["status"] = validate_choice(clean_data["status"], ProjectStatus)
    if "budget" in clean_data:
        clean_data["budget"] = _parse_budget(clean_data["budget"])

    start: date | None = clean_data.get("start_date", current.start_date if current else None)
    end: date | None = clean_data.get("end_date", current.end_date if current else None)
    if start and end and end < start:
        raise ValueError("Дата окончания проекта раньше даты начала")
    return clean_data


def add_project(project_id: str | int | None = None, **kwargs) -> Project:
    clean_data = _clean(kwargs)
    if not clean_data.get("name"):
        logger.warning("❌ Попытка создать проект без названия")
        raise ValueError("Поле 'name' обязательно для проекта")
    with db.atomic():
        ident = (
            normalize_id(project_id) if project_id is not None else next_identifier(Project.project_id)
        )
        if Project.get_or_none(Project.project_id == ident):
            raise ValueError(f"Проект с id={ident} уже существует")
        project = Project.create(project_id=ident, **clean_data)
    logger.info("✅ Проект %s создан", ident)
    return project


def update_project(project: Project, **kwargs) -> Project:
    updates = _clean(kwargs, current=project)
    if not updates:
        return project
    logger.info("✏️ Обновление проекта #%s: %s", project.project_id, updates)
    for k, v in updates.items():
        setattr(project, k, v)
    project.save()
    return project


def delete_project(
    project_id: str | int, assignments: AssignmentService | None = None
) -> bool:
    """Помечает проект удалённым и очищает его связи.

    Записи часов по проекту сохраняются как есть.
    """
    assignments = assignments or get_app_context().assignment_service
    ident = normalize_id(project_id)
    with db.atomic():
        updated = (
            Project.update(is_deleted=True)
            .where((Project.project_id == ident) & (Project.is_deleted == False))
            .execute()
        )
    if not updated:
        logger.warning("❗ Проект с id=%s не найден для удаления", ident)
    assignments.cleanup_project_assignments(ident)
    return bool(updated)


def restore_project(project_id: str | int) -> bool:
    project = Project.get_or_none(Project.project_id == normalize_id(project_id))
    if project is None:
        logger.warning("❗ Проект с id=%s не найден для восстановления", project_id)
        return False
    project.is_deleted = False
    project.save()
    logger.info("✅ Проект %s восстановлен", project.project_id)
    return True


def create_project_with_team(
    consultant_ids: list[str | int],
    client_ids: list[str | int],
    assignments: AssignmentService | None = None,
    **kwargs,
) -> Project:
    """Создать проект и сразу связать его с консультантами и клиентами."""
    assignments = assignments or get_app_context().assignment_service
    project = add_project(**kwargs)
    assignments.setup_project_assignments(project.project_id, consultant_ids, client_ids)
    return project
