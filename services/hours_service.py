"""Учёт отработанных часов консультантов по проектам."""

import logging
from datetime import date
from typing import Iterable

from peewee import fn

from database.models import ApprovalStatus, HoursLog, db
from services.query_utils import next_identifier
from services.validators import normalize_id, validate_choice, validate_hours

logger = logging.getLogger(__name__)


def log_hours(
    consultant_id: str | int,
    project_id: str | int,
    hours: float | int | str,
    log_date: date | None = None,
    description: str | None = None,
) -> HoursLog:
    """Записать часы. Существование проекта и консультанта не проверяется."""
    data = {
        "consultant_id": normalize_id(consultant_id),
        "project_id": normalize_id(project_id),
        "hours": validate_hours(hours),
        "date": log_date or date.today(),
        "description": description or None,
    }
    with db.atomic():
        entry = HoursLog.create(log_id=next_identifier(HoursLog.log_id), **data)
    logger.info(
        "⏱ %sч для консультанта %s по проекту %s",
        entry.hours,
        entry.consultant_id,
        entry.project_id,
    )
    return entry


def get_hours_for_project(project_id: str | int) -> list[HoursLog]:
    return list(
        HoursLog.select()
        .where(HoursLog.project_id == normalize_id(project_id))
        .order_by(HoursLog.date.desc(), HoursLog.id.desc())
    )


def get_hours_for_consultant(consultant_id: str | int) -> list[HoursLog]:
    return list(
        HoursLog.select()
        .where(HoursLog.consultant_id == normalize_id(consultant_id))
        .order_by(HoursLog.date.desc(), HoursLog.id.desc())
    )


def get_all_hours(status: ApprovalStatus | str | None = None) -> list[HoursLog]:
    query = HoursLog.select()
    if status is not None:
        query = query.where(HoursLog.approval_status == validate_choice(status, ApprovalStatus))
    return list(query.order_by(HoursLog.date.desc(), HoursLog.id.desc()))


def total_hours(
    *, project_id: str | int | None = None, consultant_id: str | int | None = None
) -> float:
    query = HoursLog.select(fn.COALESCE(fn.SUM(HoursLog.hours), 0))
    if project_id is not None:
        query = query.where(HoursLog.project_id == normalize_id(project_id))
    if consultant_id is not None:
        query = query.where(HoursLog.consultant_id == normalize_id(consultant_id))
    return float(query.scalar() or 0)


def set_approval_status(log_id: str | int, status: ApprovalStatus | str) -> HoursLog | None:
    entry = HoursLog.get_or_none(HoursLog.log_id == normalize_id(log_id))
    if entry is None:
        logger.warning("❗ Запись часов %s не найдена", log_id)
        return None
    entry.approval_status = validate_choice(status, ApprovalStatus)
    entry.save(only=[HoursLog.approval_status])
    return entry


def delete_hours_log(log_id: str | int) -> bool:
    deleted = HoursLog.delete().where(HoursLog.log_id == normalize_id(log_id)).execute()
    if not deleted:
        logger.warning("❗ Запись часов %s не найдена для удаления", log_id)
    return bool(deleted)


def delete_hours_for_consultants(consultant_ids: Iterable[str | int]) -> int:
    """Удалить все записи часов указанных консультантов."""
    ids = [normalize_id(cid) for cid in consultant_ids]
    if not ids:
        return 0
    return HoursLog.delete().where(HoursLog.consultant_id.in_(ids)).execute()
