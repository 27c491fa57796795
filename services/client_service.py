"""Сервисный модуль для управления клиентами."""

import logging
from peewee import ModelSelect

from core.app_context import get_app_context
from database.models import Client, ClientClassification, ClientStatus, db
from services.assignments import AssignmentService
from services.query_utils import apply_search, next_identifier
from services.validators import normalize_email, normalize_id, validate_choice

logger = logging.getLogger(__name__)

CLIENT_ALLOWED_FIELDS = {
    "first_name",
    "last_name",
    "email",
    "phone",
    "status",
    "classification",
    "note",
}


# ──────────────────────────── Получение ─────────────────────────────


def get_all_clients() -> ModelSelect:
    """Вернуть выборку всех активных клиентов."""
    return Client.active()


def get_client(customer_id: str | int) -> Client | None:
    """Получить активного клиента по идентификатору."""
    return Client.get_or_none(
        (Client.customer_id == normalize_id(customer_id)) & (Client.is_deleted == False)
    )


def build_client_query(search_text: str = "", show_deleted: bool = False) -> ModelSelect:
    query = Client.select() if show_deleted else Client.active()
    return apply_search(
        query,
        [Client.first_name, Client.last_name, Client.email, Client.phone, Client.note],
        search_text,
    )


# ──────────────────────────── Добавление ─────────────────────────────


def _clean(data: dict) -> dict:
    clean_data = {
        key: value
        for key, value in data.items()
        if key in CLIENT_ALLOWED_FIELDS and value not in ("", None)
    }
    if "status" in clean_data:
        clean_data["status"] = validate_choice(clean_data["status"], ClientStatus)
    if "classification" in clean_data:
        clean_data["classification"] = validate_choice(
            clean_data["classification"], ClientClassification
        )
    if "email" in clean_data:
        clean_data["email"] = normalize_email(clean_data["email"])
    return clean_data


def add_client(customer_id: str | int | None = None, **kwargs) -> Client:
    """Создать и вернуть нового клиента."""
    clean_data = _clean(kwargs)
    if not clean_data.get("first_name"):
        logger.warning("❌ Попытка создать клиента без имени")
        raise ValueError("Поле 'first_name' обязательно для клиента")

    with db.atomic():
        ident = normalize_id(customer_id) if customer_id is not None else next_identifier(Client.customer_id)
        if Client.get_or_none(Client.customer_id == ident):
            raise ValueError(f"Клиент с id={ident} уже существует")
        client = Client.create(customer_id=ident, **clean_data)
    logger.info("✅ Клиент %s создан", ident)
    return client


# ──────────────────────────── Обновление ─────────────────────────────


def update_client(client: Client, **kwargs) -> Client:
    """Обновить данные клиента."""
    updates = _clean(kwargs)
    if not updates:
        return client

    logger.info("✏️ Обновление клиента #%s: %s", client.customer_id, updates)
    for k, v in updates.items():
        setattr(client, k, v)
    client.save()
    return client


# ──────────────────────────── Удаление ─────────────────────────────


def delete_client(
    customer_id: str | int, assignments: AssignmentService | None = None
) -> bool:
    """Удаляет клиента и все его связи с проектами и консультантами.

    Запись остаётся в истории с пометкой ``is_deleted``.
    """
    assignments = assignments or get_app_context().assignment_service
    ident = normalize_id(customer_id)
    with db.atomic():
        updated = (
            Client.update(is_deleted=True)
            .where((Client.customer_id == ident) & (Client.is_deleted == False))
            .execute()
        )
    if not updated:
        logger.warning("❗ Клиент с id=%s не найден для удаления", ident)
    # Очистка связей выполняется всегда, даже если записи уже нет
    assignments.cleanup_client_assignments(ident)
    return bool(updated)


def restore_client(customer_id: str | int) -> bool:
    """Снимает пометку удаления с клиента. Связи не восстанавливаются."""
    client = Client.get_or_none(Client.customer_id == normalize_id(customer_id))
    if client:
        client.is_deleted = False
        client.save()
        logger.info("✅ Клиент %s восстановлен", client.customer_id)
        return True
    logger.warning("❗ Клиент с id=%s не найден для восстановления", customer_id)
    return False
