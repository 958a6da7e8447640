"""
Tests for the service dependency graph.

Tests cover:
- Graph model (symmetry, self loops, index access)
- Building the graph from HTTP, RPC and DB records
"""

from dataclasses import FrozenInstanceError

import pytest

from chaosmeta.services.dependency_graph import (
    DependencyGraph,
    DependencyGraphBuilder,
    ServiceDependency,
    build_dependency_graph,
)
from chaosmeta.services.systemdata import (
    DatabaseOperation,
    ServiceEndpoint,
    SystemData,
    resolve_system_data,
)


@pytest.fixture
def chain_view(registry):
    """A calls B over HTTP, B queries C, and A also calls itself."""
    registry.register_system_data("hs", SystemData(
        system_name="hs",
        http_endpoints={
            "A": [
                ServiceEndpoint(service_name="A", route="/b", server_address="B", span_name="GET /b"),
                ServiceEndpoint(service_name="A", route="/self", server_address="A"),
            ],
        },
        database_operations={
            "B": [DatabaseOperation(service_name="B", db_table="t", operation="SELECT", server_address="C")],
        },
    ))
    return resolve_system_data(registry, "hs")


# =============================================================================
# Model Tests
# =============================================================================

class TestDependencyGraph:
    """Tests for the DependencyGraph model."""

    def test_add_edge_is_symmetric(self):
        graph = DependencyGraph()
        assert graph.add_edge("a", "b")

        assert graph.has_edge("a", "b")
        assert graph.has_edge("b", "a")

    def test_self_loop_rejected(self):
        graph = DependencyGraph()
        assert not graph.add_edge("a", "a")
        assert graph.dependencies_of("a") == []
        assert graph.edge_count == 0

    def test_empty_names_rejected(self):
        graph = DependencyGraph()
        assert not graph.add_edge("a", "")
        assert not graph.add_edge("", "a")
        assert graph.list_services() == []

    def test_duplicate_edges_collapse(self):
        graph = DependencyGraph()
        graph.add_edge("a", "b")
        graph.add_edge("b", "a")

        assert graph.edge_count == 2
        assert graph.count_dependencies("a") == 1

    def test_pair_at(self):
        graph = DependencyGraph()
        graph.add_edge("a", "c")
        graph.add_edge("a", "b")

        assert graph.pair_at("a", 0) == "b"
        assert graph.pair_at("a", 1) == "c"
        assert graph.pair_at("a", 2) is None
        assert graph.pair_at("a", -1) is None
        assert graph.pair_at("unknown", 0) is None

    def test_all_service_pairs_sorted(self):
        graph = DependencyGraph()
        graph.add_edge("b", "c")
        graph.add_edge("a", "b")

        assert graph.all_service_pairs() == [
            ServiceDependency("a", "b"),
            ServiceDependency("b", "a"),
            ServiceDependency("b", "c"),
            ServiceDependency("c", "b"),
        ]
        assert graph.service_pair_at(2) == ("b", "c")
        assert graph.service_pair_at(4) is None

    def test_to_dict(self):
        graph = DependencyGraph(system="hs")
        graph.add_edge("a", "b")

        data = graph.to_dict()

        assert data["system"] == "hs"
        assert data["adjacency"] == {"a": ["b"], "b": ["a"]}
        assert data["edge_count"] == 2
        assert ServiceDependency("a", "b").to_dict() == {"source_service": "a", "target_service": "b"}


# =============================================================================
# Builder Tests
# =============================================================================

class TestDependencyGraphBuilder:
    """Tests for building graphs from system data."""

    def test_chain(self, chain_view):
        graph = build_dependency_graph(chain_view)

        assert graph.dependencies_of("A") == ["B"]
        assert graph.dependencies_of("B") == ["A", "C"]
        assert graph.dependencies_of("C") == ["B"]
        assert graph.system == "hs"

    def test_symmetry_holds_for_every_edge(self, populated_registry):
        graph = build_dependency_graph(resolve_system_data(populated_registry))

        for service in graph.list_services():
            assert service not in graph.dependencies_of(service)
            for dependency in graph.dependencies_of(service):
                assert service in graph.dependencies_of(dependency)

    def test_includes_all_record_kinds(self, populated_registry):
        graph = build_dependency_graph(resolve_system_data(populated_registry, "otel-demo"))

        assert graph.dependencies_of("frontend") == ["cart", "checkout"]
        assert graph.dependencies_of("cart") == ["frontend", "valkey-cart"]
        assert graph.dependencies_of("checkout") == ["frontend", "payment"]

    def test_exclude_rpc(self, populated_registry):
        builder = DependencyGraphBuilder(include_rpc=False)
        graph = builder.build(resolve_system_data(populated_registry, "otel-demo"))

        assert graph.dependencies_of("frontend") == ["cart"]
        assert graph.dependencies_of("checkout") == []

    def test_exclude_database(self, populated_registry):
        builder = DependencyGraphBuilder(include_database=False)
        graph = builder.build(resolve_system_data(populated_registry))

        assert "mysql" not in graph.list_services()
        assert graph.dependencies_of("ts-travel-service") == [
            "ts-basic-service",
            "ts-route-service",
            "ts-seat-service",
        ]

    def test_built_graph_is_frozen(self, chain_view):
        """Graphs handed out by the builder cannot be extended."""
        graph = build_dependency_graph(chain_view)

        assert graph.frozen
        with pytest.raises(FrozenInstanceError):
            graph.add_edge("A", "C")
        assert graph.dependencies_of("A") == ["B"]

    def test_freeze(self):
        graph = DependencyGraph()
        assert not graph.frozen
        assert graph.freeze() is graph
        with pytest.raises(FrozenInstanceError):
            graph.add_edge("a", "b")
