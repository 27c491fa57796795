import httpx
import pytest

from config import Settings
from infrastructure.assignments_gateway import AssignmentsGateway
from services.assignments import ClientConsultantSyncService
from services.client_service import add_client
from services.consultant_service import add_consultant
from services.project_service import add_project


@pytest.fixture
def make_team(in_memory_db):
    """Создаёт проект, консультанта и клиента с заданными идентификаторами."""

    def _make_team(project_id="P1", consultant_id="C1", client_id="X1"):
        project = add_project(project_id=project_id, name=f"Project {project_id}")
        consultant = add_consultant(consultant_id=consultant_id, first_name=f"Cons {consultant_id}")
        client = add_client(customer_id=client_id, first_name=f"Client {client_id}")
        return project, consultant, client

    return _make_team


@pytest.fixture
def api_settings(tmp_path):
    return Settings(
        database_url="sqlite:///:memory:",
        log_dir=str(tmp_path),
        api_base_url="http://timely.test/api",
        api_timeout=2.0,
    )


@pytest.fixture
def make_sync_service(assignments, api_settings):
    """Сервис синхронизации поверх ``httpx.MockTransport`` с заданным обработчиком."""

    def _make(handler):
        gateway = AssignmentsGateway(api_settings, transport=httpx.MockTransport(handler))
        return ClientConsultantSyncService(assignments, gateway)

    return _make
