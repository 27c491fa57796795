import pytest

from services.assignments import EventType, MutationStatus


def _pairs(edges):
    return sorted(edge.pair for edge in edges)


def _refresh_count(events):
    return sum(1 for event, _ in events if event is EventType.REFRESH_ALL)


def test_assign_consultant_links_existing_project_clients(assignments):
    assignments.assign_client_to_project("P1", "X1")
    assignments.assign_client_to_project("P1", "X2")

    result = assignments.assign_consultant_to_project("P1", "C1")

    assert result.created
    assert _pairs(result.propagated) == [("X1", "C1"), ("X2", "C1")]
    assert _pairs(assignments.store.client_consultants.get_all()) == [("X1", "C1"), ("X2", "C1")]


def test_assign_client_links_existing_project_consultants(assignments):
    assignments.assign_consultant_to_project("P1", "C1")
    assignments.assign_consultant_to_project("P1", "C2")

    result = assignments.assign_client_to_project("P1", "X1")

    assert result.created
    assert _pairs(result.propagated) == [("X1", "C1"), ("X1", "C2")]
    assert assignments.consultants_for_client("X1") == ["C1", "C2"]


def test_propagation_is_one_level_only(assignments):
    assignments.assign_client_to_project("P1", "X1")
    # X1 уже в другом проекте со своим консультантом
    assignments.assign_client_to_project("P2", "X1")
    assignments.assign_consultant_to_project("P2", "C9")
    project_clients_before = _pairs(assignments.store.project_clients.get_all())
    project_consultants_before = _pairs(assignments.store.project_consultants.get_all())

    result = assignments.assign_consultant_to_project("P1", "C1")

    assert _pairs(result.propagated) == [("X1", "C1")]
    assert _pairs(assignments.store.project_clients.get_all()) == project_clients_before
    assert _pairs(assignments.store.project_consultants.get_all()) == sorted(
        project_consultants_before + [("P1", "C1")]
    )
    assert _pairs(assignments.store.client_consultants.get_all()) == [("X1", "C1"), ("X1", "C9")]


def test_repeated_assignment_is_idempotent(assignments, recorded_events):
    assignments.assign_client_to_project("P1", "X1")
    first = assignments.assign_consultant_to_project("P1", "C1")
    snapshot = (
        assignments.store.project_consultants.get_all(),
        assignments.store.client_consultants.get_all(),
    )
    recorded_events.clear()

    second = assignments.assign_consultant_to_project("P1", "C1")

    assert first.created and not second
    assert second.already_assigned
    assert second.propagated == ()
    assert (
        assignments.store.project_consultants.get_all(),
        assignments.store.client_consultants.get_all(),
    ) == snapshot
    assert recorded_events == []


def test_existing_top_edge_skips_propagation(assignments):
    assignments.assign_consultant_to_project("P1", "C1")
    # клиент добавлен без распространения, связи X1-C1 нет
    assignments.assign_client_to_project("P1", "X1", auto_sync=False)

    result = assignments.assign_consultant_to_project("P1", "C1")

    assert result.status is MutationStatus.EXISTS
    assert assignments.store.client_consultants.get_all() == []


def test_auto_sync_disabled_creates_only_top_edge(assignments):
    assignments.assign_client_to_project("P1", "X1")

    result = assignments.assign_consultant_to_project("P1", "C1", auto_sync=False)

    assert result.created
    assert result.propagated == ()
    assert assignments.store.client_consultants.get_all() == []


def test_propagation_skips_already_linked_pairs(assignments):
    assignments.assign_consultant_to_client("X1", "C1")
    assignments.assign_client_to_project("P1", "X1")

    result = assignments.assign_consultant_to_project("P1", "C1")

    assert result.created
    assert result.propagated == ()
    assert _pairs(assignments.store.client_consultants.get_all()) == [("X1", "C1")]


def test_assignment_emits_single_refresh_all(assignments, recorded_events):
    assignments.assign_client_to_project("P1", "X1")
    assignments.assign_client_to_project("P1", "X2")
    recorded_events.clear()

    assignments.assign_consultant_to_project("P1", "C1")

    assert _refresh_count(recorded_events) == 1
    assert recorded_events[-1][0] is EventType.REFRESH_ALL
    kinds = [event for event, _ in recorded_events]
    assert kinds.count(EventType.PROJECT_CONSULTANT) == 1
    assert kinds.count(EventType.CLIENT_CONSULTANT) == 2


def test_assign_consultant_to_client_notify_flag(assignments, recorded_events):
    assignments.assign_consultant_to_client("X1", "C1", notify=False)
    assert _refresh_count(recorded_events) == 0

    assignments.assign_consultant_to_client("X1", "C2")
    assert _refresh_count(recorded_events) == 1

    assert not assignments.assign_consultant_to_client("X1", "C2")
    assert _refresh_count(recorded_events) == 1


def test_removal_is_not_cascaded(assignments):
    assignments.assign_client_to_project("P1", "X1")
    assignments.assign_consultant_to_project("P1", "C1")

    status = assignments.remove_consultant_from_project("P1", "C1")

    assert status is MutationStatus.REMOVED
    assert assignments.consultants_for_project("P1") == []
    assert _pairs(assignments.store.client_consultants.get_all()) == [("X1", "C1")]
    assert assignments.clients_for_project("P1") == ["X1"]


def test_remove_client_from_project_keeps_client_consultant_edges(assignments):
    assignments.assign_consultant_to_project("P1", "C1")
    assignments.assign_client_to_project("P1", "X1")

    assignments.remove_client_from_project("P1", "X1")

    assert assignments.clients_for_project("P1") == []
    assert assignments.consultants_for_client("X1") == ["C1"]


def test_remove_consultant_from_client(assignments, recorded_events):
    assignments.assign_consultant_to_client("X1", "C1")
    recorded_events.clear()

    assert assignments.remove_consultant_from_client("X1", "C1") is MutationStatus.REMOVED
    assert assignments.remove_consultant_from_client("X1", "C1") is MutationStatus.ABSENT
    assert assignments.consultants_for_client("X1") == []
    assert _refresh_count(recorded_events) == 2


def test_setup_project_assignments_builds_full_mesh(assignments, recorded_events):
    ok = assignments.setup_project_assignments("P", ["C1", "C2"], ["X1", "X2"])

    assert ok is True
    assert _pairs(assignments.store.project_consultants.get_all()) == [("P", "C1"), ("P", "C2")]
    assert _pairs(assignments.store.project_clients.get_all()) == [("P", "X1"), ("P", "X2")]
    assert _pairs(assignments.store.client_consultants.get_all()) == [
        ("X1", "C1"),
        ("X1", "C2"),
        ("X2", "C1"),
        ("X2", "C2"),
    ]
    assert _refresh_count(recorded_events) == 1
    assert recorded_events[-1][0] is EventType.REFRESH_ALL


def test_setup_project_assignments_is_repeatable(assignments, recorded_events):
    assignments.setup_project_assignments("P", ["C1"], ["X1"])
    assignments.setup_project_assignments("P", ["C1", "C1"], ["X1"])

    assert len(assignments.store.client_consultants.get_all()) == 1
    assert _refresh_count(recorded_events) == 2


def test_cleanup_project_assignments(assignments, recorded_events):
    assignments.setup_project_assignments("P1", ["C1"], ["X1"])
    assignments.setup_project_assignments("P2", ["C1"], ["X2"])
    recorded_events.clear()

    assert assignments.cleanup_project_assignments("P1") is True

    assert assignments.projects_for_consultant("C1") == ["P2"]
    assert assignments.projects_for_client("X1") == []
    # связи клиент-консультант не относятся к проекту напрямую
    assert assignments.consultants_for_client("X1") == ["C1"]
    assert _refresh_count(recorded_events) == 1

    recorded_events.clear()
    assignments.cleanup_project_assignments("P1")
    assert [event for event, _ in recorded_events] == [EventType.REFRESH_ALL]


def test_cleanup_consultant_assignments(assignments):
    assignments.setup_project_assignments("P1", ["C1", "C2"], ["X1"])

    assignments.cleanup_consultant_assignments("C1")

    assert assignments.consultants_for_project("P1") == ["C2"]
    assert assignments.consultants_for_client("X1") == ["C2"]
    assert assignments.clients_for_project("P1") == ["X1"]


def test_cleanup_client_assignments(assignments):
    assignments.setup_project_assignments("P1", ["C1"], ["X1", "X2"])

    assignments.cleanup_client_assignments("X1")

    assert assignments.clients_for_project("P1") == ["X2"]
    assert assignments.clients_for_consultant("C1") == ["X2"]
    assert assignments.consultants_for_project("P1") == ["C1"]


def test_relationship_summaries(assignments):
    assignments.setup_project_assignments("P1", ["C1"], ["X1"])
    assignments.assign_client_to_project("P2", "X1")

    project = assignments.project_relationships("P1")
    client = assignments.client_relationships("X1")
    consultant = assignments.consultant_relationships("C1")

    assert project.consultant_ids == ["C1"] and project.client_ids == ["X1"]
    assert client.project_ids == ["P1", "P2"] and client.consultant_ids == ["C1"]
    assert consultant.project_ids == ["P1"] and consultant.client_ids == ["X1"]


def test_available_candidates(assignments):
    assignments.assign_consultant_to_project("P1", "C1")
    assignments.assign_client_to_project("P1", "X1")

    assert assignments.available_consultants_for_project("P1", ["C1", "C2"]) == ["C2"]
    assert assignments.available_clients_for_project("P1", ["X1", "X2"]) == ["X2"]
    assert assignments.available_consultants_for_client("X1", ["C1", "C3"]) == ["C3"]


def test_invalid_identifier_raises(assignments):
    with pytest.raises(ValueError):
        assignments.assign_consultant_to_project("", "C1")
    with pytest.raises(ValueError):
        assignments.assign_client_to_project("P1", None)


def test_refresh_all_broadcasts(assignments, recorded_events):
    assignments.refresh_all()
    assert recorded_events == [(EventType.REFRESH_ALL, None)]
