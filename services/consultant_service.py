import logging
from typing import Iterable

from peewee import ModelSelect

from core.app_context import get_app_context
from database.models import Consultant, ConsultantStatus, db
from services.assignments import AssignmentService
from services.hours_service import delete_hours_for_consultants
from services.query_utils import apply_search, next_identifier
from services.validators import normalize_email, normalize_id, validate_choice

logger = logging.getLogger(__name__)

CONSULTANT_ALLOWED_FIELDS = {"first_name", "last_name", "email", "phone", "role", "status"}


def get_all_consultants() -> ModelSelect:
    return Consultant.active()


def get_consultant(consultant_id: str | int) -> Consultant | None:
    return Consultant.get_or_none(
        (Consultant.consultant_id == normalize_id(consultant_id))
        & (Consultant.is_deleted == False)
    )


def get_active_consultants() -> ModelSelect:
    """Консультанты, которых можно назначать (статус ``active``)."""
    return Consultant.active().where(Consultant.status == ConsultantStatus.ACTIVE.value)


def build_consultant_query(search_text: str = "", show_deleted: bool = False) -> ModelSelect:
    query = Consultant.select() if show_deleted else Consultant.active()
    return apply_search(
        query,
        [Consultant.first_name, Consultant.last_name, Consultant.email, Consultant.role],
        search_text,
    )


def _clean(data: dict) -> dict:
    clean_data = {
        k: v for k, v in data.items() if k in CONSULTANT_ALLOWED_FIELDS and v not in ("", None)
    }
    if "status" in clean_data:
        clean_data["status"] = validate_choice(clean_data["status"], ConsultantStatus)
    if "email" in clean_data:
        clean_data["email"] = normalize_email(clean_data["email"])
    return clean_data


def add_consultant(consultant_id: str | int | None = None, **kwargs) -> Consultant:
    clean_data = _clean(kwargs)
    if not clean_data.get("first_name"):
        raise ValueError("Поле 'first_name' обязательно для консультанта")
    with db.atomic():
        ident = (
            normalize_id(consultant_id)
            if consultant_id is not None
            else next_identifier(Consultant.consultant_id)
        )
        if Consultant.get_or_none(Consultant.consultant_id == ident):
            raise ValueError(f"Консультант с id={ident} уже существует")
        consultant = Consultant.create(consultant_id=ident, **clean_data)
    logger.info("✅ Консультант %s создан", ident)
    return consultant


def update_consultant(consultant: Consultant, **kwargs) -> Consultant:
    # None не перезаписывает обязательные поля
    updates = _clean(kwargs)
    if not updates:
        return consultant
    for k, v in updates.items():
        setattr(consultant, k, v)
    consultant.save()
    logger.info("✏️ Обновление консультанта #%s: %s", consultant.consultant_id, updates)
    return consultant


def delete_consultant(
    consultant_id: str | int, assignments: AssignmentService | None = None
) -> bool:
    """Удаляет консультанта одной логической операцией.

    Запись помечается удалённой, его записи часов удаляются, связи с
    проектами и клиентами очищаются. Очистка выполняется всегда.
    """
    return delete_consultants([consultant_id], assignments) > 0


def delete_consultants(
    consultant_ids: Iterable[str | int], assignments: AssignmentService | None = None
) -> int:
    assignments = assignments or get_app_context().assignment_service
    ids = [normalize_id(cid) for cid in consultant_ids]
    if not ids:
        return 0
    with db.atomic():
        updated = (
            Consultant.update(is_deleted=True)
            .where(Consultant.consultant_id.in_(ids) & (Consultant.is_deleted == False))
            .execute()
        )
        logs = delete_hours_for_consultants(ids)
    logger.info("🗑 Удалено консультантов: %s, записей часов: %s", updated, logs)
    for ident in ids:
        assignments.cleanup_consultant_assignments(ident)
    return updated


def restore_consultant(consultant_id: str | int) -> bool:
    """Снять пометку удаления. Связи и записи часов не восстанавливаются."""
    updated = (
        Consultant.update(is_deleted=False)
        .where(Consultant.consultant_id == normalize_id(consultant_id))
        .execute()
    )
    if not updated:
        logger.warning("❗ Консультант с id=%s не найден для восстановления", consultant_id)
    return bool(updated)
