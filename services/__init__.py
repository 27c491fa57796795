"""Прикладные сервисы Timely CRM.

Подмодули импортируются напрямую, например:
    from services.assignments import AssignmentService
    from services import hours_service
"""

__all__: list[str] = []
