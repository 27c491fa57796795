"""Валидаторы и нормализаторы входных данных."""

import re
from enum import Enum
from typing import Iterable, TypeVar

_E = TypeVar("_E", bound=Enum)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_id(value: str | int) -> str:
    """Привести идентификатор сущности к каноническому виду.

    Идентификаторы в системе непрозрачные строки. Числа приводятся к
    строке, пробелы по краям отбрасываются. Остальные проверки делаются
    только на границе, дальше сравнения идут без приведений.

    Args:
        value: Идентификатор из UI, API или хранилища.

    Returns:
        str: Канонический идентификатор.

    Raises:
        ValueError: Пустое значение, ``None`` или ``bool``.
    """
    if value is None or isinstance(value, bool):
        raise ValueError(f"Недопустимый идентификатор: {value!r}")
    if isinstance(value, int):
        return str(value)
    if not isinstance(value, str):
        raise ValueError(f"Недопустимый тип идентификатора: {type(value).__name__}")
    text = value.strip()
    if not text:
        raise ValueError("Идентификатор не может быть пустым")
    return text


def normalize_ids(values: Iterable[str | int]) -> list[str]:
    """Нормализует список идентификаторов, сохраняя порядок и убирая повторы."""
    result: list[str] = []
    seen: set[str] = set()
    for value in values:
        ident = normalize_id(value)
        if ident not in seen:
            seen.add(ident)
            result.append(ident)
    return result


def id_sort_key(ident: str) -> tuple[int, int, str]:
    """Ключ сортировки: числовые ID по значению, остальные по строке."""
    if ident.isascii() and ident.isdigit():
        return (0, int(ident), ident)
    return (1, 0, ident)


def validate_choice(value: str | _E, enum_cls: type[_E]) -> str:
    """Проверяет, что значение входит в перечисление, и возвращает строку."""
    if isinstance(value, enum_cls):
        return value.value
    text = str(value or "").strip().lower()
    allowed = {item.value for item in enum_cls}
    if text not in allowed:
        raise ValueError(
            f"Недопустимое значение '{value}', ожидается одно из: {', '.join(sorted(allowed))}"
        )
    return text


def validate_hours(value: str | int | float) -> float:
    """Количество часов: неотрицательное число."""
    try:
        hours = float(str(value).replace(",", "."))
    except (TypeError, ValueError):
        raise ValueError(f"Неверное количество часов: {value!r}") from None
    if hours != hours or hours < 0:
        raise ValueError(f"Количество часов не может быть отрицательным: {value!r}")
    return hours


def normalize_email(email: str | None) -> str | None:
    if not email:
        return None
    text = email.strip().lower()
    if not _EMAIL_RE.match(text):
        raise ValueError(f"Неверный формат email: {email}")
    return text
