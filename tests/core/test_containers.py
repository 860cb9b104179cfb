"""Tests for ContainerLocator."""

import pytest

from slnmove.errors import ContainerCreationError
from slnmove.graph import NodeKind, load_graph
from slnmove.relocation import ContainerLocator
from tests.core.graph_test_helpers import make_host


class TestResolve:
    """Tests for ContainerLocator.resolve()."""

    def test_creates_missing_container(self):
        host = make_host({"A": []})
        graph = load_graph(host)

        handle = ContainerLocator(host).resolve(graph, "Libs")

        assert handle.kind == NodeKind.CONTAINER
        assert host.container_names() == ["Libs"]
        entry = graph.mutation_log.last()
        assert entry.operation == "create_container"
        assert entry.target_id == "Libs"

    def test_reuses_existing_container(self):
        host = make_host({"A": [], "C": []}, folders={"Libs": ["C"]})
        graph = load_graph(host)

        handle = ContainerLocator(host).resolve(graph, "Libs")

        assert handle.kind == NodeKind.CONTAINER
        assert host.container_names() == ["Libs"]
        assert "create_grouping_container" not in host.calls
        assert len(graph.mutation_log) == 0

    def test_idempotent(self):
        host = make_host({"A": []})
        graph = load_graph(host)
        locator = ContainerLocator(host)

        first = locator.resolve(graph, "Libs")
        second = locator.resolve(graph, "Libs")

        assert first == second
        assert host.container_names() == ["Libs"]
        assert host.calls.count("create_grouping_container") == 1

    def test_exact_name_match_only(self):
        host = make_host({"A": []}, folders={"libs": [], "Libs2": []})
        graph = load_graph(host)

        ContainerLocator(host).resolve(graph, "Libs")

        assert sorted(host.container_names()) == ["Libs", "Libs2", "libs"]

    def test_top_level_project_with_same_name(self):
        host = make_host({"Libs": [], "A": []})
        graph = load_graph(host)

        with pytest.raises(ContainerCreationError, match="project"):
            ContainerLocator(host).resolve(graph, "Libs")
        assert host.container_names() == []

    def test_host_refuses_creation(self):
        host = make_host({"A": []}, read_only=True)
        graph = load_graph(host)

        with pytest.raises(ContainerCreationError, match="read-only"):
            ContainerLocator(host).resolve(graph, "Libs")
        assert host.calls.count("create_grouping_container") == 1
