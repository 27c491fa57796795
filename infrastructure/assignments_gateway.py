"""Адаптер к удалённому API назначений клиент-консультант."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from config import Settings

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Удалённые данные недоступны: сеть, таймаут, статус или формат ответа."""


@dataclass
class AssignmentsGateway:
    """Тонкая асинхронная обёртка над ``/client-consultants``."""

    settings: Settings
    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.settings.api_base_url,
            timeout=self.settings.api_timeout,
            transport=self.transport,
            headers={"Accept": "application/json"},
        )

    async def fetch_client_consultants(
        self,
        client_id: str | None = None,
        consultant_id: str | None = None,
    ) -> list[dict[str, Any]]:
        """Прочитать назначения. Ответ: ``{"data": [...]}``.

        Raises:
            GatewayError: Любой сбой запроса или неожиданный ответ.
        """
        params = {}
        if client_id:
            params["clientId"] = client_id
        if consultant_id:
            params["consultantId"] = consultant_id

        try:
            async with self._client() as client:
                response = await client.get("/client-consultants", params=params)
        except httpx.TimeoutException as exc:
            raise GatewayError(f"Таймаут запроса назначений: {exc}") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise GatewayError(f"Ошибка сети: {exc}") from exc

        if not response.is_success:
            raise GatewayError(f"Неуспешный статус ответа: {response.status_code}")

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            raise GatewayError(f"Неожиданный тип ответа: {content_type or 'не указан'}")

        try:
            body = response.json()
        except ValueError as exc:
            raise GatewayError("Ответ не является корректным JSON") from exc

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, list):
            raise GatewayError("В ответе нет списка 'data'")
        # Копия списка, чтобы вызывающий код не зависел от объекта ответа
        return list(data)

    async def assign_consultant_to_client(
        self, client_id: str, consultant_id: str, performed_by: str | None = None
    ) -> bool:
        """Создать назначение на сервере.

        Returns:
            bool: ``True`` при успешном статусе ответа.

        Raises:
            GatewayError: Сервер недоступен.
        """
        payload = {
            "clientId": client_id,
            "consultantId": consultant_id,
            "performedBy": performed_by or self.settings.performed_by,
        }
        try:
            async with self._client() as client:
                response = await client.post("/client-consultants/assign", json=payload)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise GatewayError(f"Ошибка сети: {exc}") from exc
        if not response.is_success:
            logger.warning(
                "Сервер отклонил назначение %s → %s: %s",
                consultant_id,
                client_id,
                response.status_code,
            )
        return response.is_success


__all__ = ["AssignmentsGateway", "GatewayError"]
