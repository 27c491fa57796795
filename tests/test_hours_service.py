from datetime import date

import pytest

from database.models import ApprovalStatus
from services.hours_service import (
    delete_hours_for_consultants,
    delete_hours_log,
    get_all_hours,
    get_hours_for_consultant,
    get_hours_for_project,
    log_hours,
    set_approval_status,
    total_hours,
)

pytestmark = pytest.mark.usefixtures("in_memory_db")


def test_log_hours_defaults():
    entry = log_hours(1, "P1", "2,5", description="")

    assert entry.log_id == "1"
    assert entry.consultant_id == "1"
    assert entry.hours == 2.5
    assert entry.date == date.today()
    assert entry.description is None
    assert entry.approval_status == ApprovalStatus.PENDING.value


@pytest.mark.parametrize("hours", [-1, "abc", float("nan")])
def test_log_hours_rejects_invalid_hours(hours):
    with pytest.raises(ValueError):
        log_hours("C1", "P1", hours)


def test_hours_are_ordered_newest_first():
    log_hours("C1", "P1", 1, log_date=date(2024, 1, 1))
    log_hours("C1", "P1", 2, log_date=date(2024, 2, 1))
    log_hours("C2", "P2", 3, log_date=date(2024, 3, 1))

    assert [h.hours for h in get_hours_for_project("P1")] == [2.0, 1.0]
    assert [h.project_id for h in get_hours_for_consultant("C1")] == ["P1", "P1"]
    assert [h.hours for h in get_all_hours()] == [3.0, 2.0, 1.0]


def test_totals():
    log_hours("C1", "P1", 1.5)
    log_hours("C1", "P2", 2)
    log_hours("C2", "P1", 4)

    assert total_hours() == 7.5
    assert total_hours(project_id="P1") == 5.5
    assert total_hours(consultant_id="C1") == 3.5
    assert total_hours(project_id="P1", consultant_id="C1") == 1.5
    assert total_hours(project_id="nope") == 0.0


def test_approval_status_transitions():
    entry = log_hours("C1", "P1", 8)

    updated = set_approval_status(entry.log_id, "Approved")
    assert updated.approval_status == "approved"
    assert [h.log_id for h in get_all_hours(ApprovalStatus.APPROVED)] == [entry.log_id]
    assert get_all_hours("pending") == []

    with pytest.raises(ValueError):
        set_approval_status(entry.log_id, "maybe")
    assert set_approval_status("404", "denied") is None


def test_delete_hours():
    first = log_hours("C1", "P1", 1)
    log_hours("C1", "P2", 1)
    log_hours("C2", "P1", 1)

    assert delete_hours_log(first.log_id) is True
    assert delete_hours_log(first.log_id) is False
    assert delete_hours_for_consultants(["C1"]) == 1
    assert delete_hours_for_consultants([]) == 0
    assert [h.consultant_id for h in get_all_hours()] == ["C2"]
