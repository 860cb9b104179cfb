"""Tests for RelocationEngine - end-to-end relocation against an in-memory tree."""

import pytest

from slnmove.errors import (
    ContainerCreationError,
    DuplicateReferenceError,
    GraphLoadError,
    MovedProjectMissingError,
    MoveError,
    ProjectNotFoundError,
)
from slnmove.graph import NodeKind, ProjectIdentity, ReferenceDescriptor, load_graph
from slnmove.relocation import RelocationEngine, RelocationState
from tests.core.graph_test_helpers import (
    make_host,
    project_ref,
    refs_string,
    scenario_host,
    strong_ref,
)


class TestRelocateScenarios:
    """Relocation scenarios from a caller's point of view."""

    def test_creates_folder_moves_and_rebinds(self):
        host = scenario_host()
        engine = RelocationEngine(host)

        result = engine.relocate("L", "Libs")

        assert host.container_names() == ["Libs"]
        assert host.folder_of("L") == "Libs"
        assert refs_string(host, "A") == "L"
        assert refs_string(host, "B") == "L"
        assert [str(h) for h in result.rebound] == ["A", "B"]
        assert result.failures == {}
        assert result.ok
        assert result.new_handle.kind == NodeKind.PROJECT
        assert engine.state == RelocationState.REBOUND

    def test_referrer_with_different_descriptor_is_rebound(self):
        host = make_host(
            {
                "L": [],
                "A": [ReferenceDescriptor.from_path("..\\L\\bin\\L.dll")],
                "B": [strong_ref("L")],
            }
        )

        result = RelocationEngine(host).relocate("L", "Libs")

        assert ProjectIdentity("A") in [c.holder for c in result.captured]
        assert ProjectIdentity("A") in result.rebound
        assert refs_string(host, "A") == "L"

    def test_reuses_existing_folder(self):
        host = make_host(
            {"C": [], "L": [], "A": [project_ref("L")]},
            folders={"Libs": ["C"]},
        )

        RelocationEngine(host).relocate("L", "Libs")

        assert host.container_names() == ["Libs"]
        assert host.children_of("Libs") == ["C", "L"]
        assert "create_grouping_container" not in host.calls

    def test_stale_duplicate_fails_only_that_holder(self):
        # A's strong-name reference survives the move, B's project reference does not.
        host = make_host({"L": [], "A": [strong_ref("L")], "B": [project_ref("L")]})

        result = RelocationEngine(host).relocate("L", "Libs")

        assert isinstance(result.failures[ProjectIdentity("A")], DuplicateReferenceError)
        assert result.rebound == [ProjectIdentity("B")]
        assert host.references_of("A") == [strong_ref("L")]
        assert not result.ok

    def test_relocating_twice_keeps_one_folder(self, engine, scenario):
        engine.relocate("L", "Libs")
        second = engine.relocate("L", "Libs")

        assert scenario.container_names() == ["Libs"]
        assert scenario.children_of("Libs") == ["L"]
        assert second.ok
        assert [m.operation for m in second.mutations][0] == "move_project"

    def test_no_referrers(self):
        host = make_host({"L": [], "A": []})

        result = RelocationEngine(host).relocate("L", "Libs")

        assert host.folder_of("L") == "Libs"
        assert result.captured == []
        assert result.ok
        assert "add_reference" not in host.calls


class TestRelocateProperties:
    """Invariants that hold for every relocation."""

    @pytest.mark.parametrize(
        "projects",
        [
            {"L": [], "A": [project_ref("L")]},
            {"L": [], "A": [strong_ref("L")], "B": [project_ref("L")]},
            {"L": [project_ref("M")], "M": [], "A": [project_ref("L"), project_ref("M")]},
        ],
    )
    def test_each_holder_has_one_edge_or_a_duplicate_failure(self, projects):
        host = make_host(projects)
        before = {name: host.references_of(name) for name in projects}

        result = RelocationEngine(host).relocate("L", "Libs")

        for edge in result.captured:
            name = str(edge.holder)
            edges_to_target = [r for r in host.references_of(name) if r.matches("L")]
            if edge.holder in result.failures:
                assert isinstance(result.failures[edge.holder], DuplicateReferenceError)
                assert host.references_of(name) == before[name]
            else:
                assert len(edges_to_target) == 1

    def test_moved_project_keeps_its_own_references(self):
        host = make_host({"M": [], "L": [project_ref("M")], "A": [project_ref("L")]})
        RelocationEngine(host).relocate("L", "Libs")
        assert refs_string(host, "L") == "M"

    def test_mutations_recorded_in_order(self):
        result = RelocationEngine(scenario_host()).relocate("L", "Libs")

        operations = [m.operation for m in result.mutations]
        assert operations == [
            "create_container",
            "move_project",
            "add_reference",
            "add_reference",
        ]
        assert [m.irreversible for m in result.mutations] == [False, True, False, False]

    def test_to_dict(self):
        host = make_host({"L": [], "A": [strong_ref("L")], "B": [project_ref("L")]})
        data = RelocationEngine(host).relocate("L", "Libs").to_dict()

        assert data["target"] == "L"
        assert data["container"] == "Libs"
        assert data["rebound"] == ["B"]
        assert data["failures"]["A"]["error"] == "DuplicateReferenceError"
        assert [c["holder"] for c in data["captured"]] == ["A", "B"]


class TestRelocateFailures:
    """Fatal failures and where they leave the tree."""

    def test_unknown_project(self):
        host = scenario_host()
        engine = RelocationEngine(host)

        with pytest.raises(ProjectNotFoundError):
            engine.relocate("Missing", "Libs")

        assert host.container_names() == []
        assert engine.state == RelocationState.IDLE

    def test_unreadable_project_file_changes_nothing(self):
        host = scenario_host(unreadable={"B"})
        engine = RelocationEngine(host)

        with pytest.raises(GraphLoadError) as exc_info:
            engine.relocate("L", "Libs")

        assert not exc_info.value.may_be_detached
        assert "B" in exc_info.value.reason
        mutations = {"create_grouping_container", "move_into_container", "add_reference"}
        assert mutations.isdisjoint(host.calls)
        assert host.folder_of("L") is None
        assert engine.state == RelocationState.IDLE

    def test_container_refused_moves_nothing(self):
        host = scenario_host(read_only=True)
        engine = RelocationEngine(host)

        with pytest.raises(ContainerCreationError) as exc_info:
            engine.relocate("L", "Libs")

        assert not exc_info.value.may_be_detached
        assert "move_into_container" not in host.calls
        assert refs_string(host, "A") == "L"
        assert engine.state == RelocationState.REFERRERS_CAPTURED

    def test_rejected_move_skips_rebind(self):
        host = scenario_host(reject_moves={"L"})
        engine = RelocationEngine(host)

        with pytest.raises(MoveError) as exc_info:
            engine.relocate("L", "Libs")

        assert exc_info.value.may_be_detached
        assert "add_reference" not in host.calls
        assert engine.state == RelocationState.ABORTED

    def test_project_file_vanished_during_move(self):
        host = scenario_host(missing_files={"L"})
        engine = RelocationEngine(host)

        with pytest.raises(MovedProjectMissingError) as exc_info:
            engine.relocate("L", "Libs")

        assert isinstance(exc_info.value, MoveError)
        assert not host.has_project("L")
        assert "add_reference" not in host.calls
        assert engine.state == RelocationState.ABORTED


class TestRelocateIn:
    """Tests for relocate_in() with a caller-supplied graph."""

    def test_uses_given_graph(self):
        host = scenario_host()
        graph = load_graph(host)

        result = RelocationEngine(host).relocate_in(graph, "L", "Libs")

        assert result.ok
        assert graph.mutation_log.last().operation == "add_reference"
        assert host.calls.count("list_projects") == 2
