"""
Dependency Graph Builder.

Derives the symmetric service-to-service graph from a system's HTTP, RPC
and database records. Every record whose server address is set and differs
from the owning service contributes one edge and its mirror.
"""

import time
from typing import Iterable, Iterator, Tuple

import structlog

from chaosmeta.services.dependency_graph.models import DependencyGraph
from chaosmeta.services.systemdata.view import SystemDataView

logger = structlog.get_logger()


class DependencyGraphBuilder:
    """
    Builds a DependencyGraph from a SystemDataView.

    The builder:
    1. Lists every service known to the view
    2. Walks each service's HTTP, RPC and DB records
    3. Adds service <-> server address for valid, distinct addresses
    4. Freezes the graph so the cached copy cannot be extended
    """

    def __init__(self, include_rpc: bool = True, include_database: bool = True):
        self.include_rpc = include_rpc
        self.include_database = include_database

    def build(self, view: SystemDataView) -> DependencyGraph:
        started = time.perf_counter()
        graph = DependencyGraph(system=view.system.value)

        for service, address in self._iter_calls(view):
            graph.add_edge(service, address)

        logger.debug(
            "Dependency graph built",
            system=view.system.value,
            services=len(graph.list_services()),
            edges=graph.edge_count,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return graph.freeze()

    def _iter_calls(self, view: SystemDataView) -> Iterator[Tuple[str, str]]:
        for service in view.get_all_services():
            records: Iterable = view.get_http_endpoints_by_service(service)
            if self.include_rpc:
                records = [*records, *view.get_rpc_operations_by_service(service)]
            if self.include_database:
                records = [*records, *view.get_database_operations_by_service(service)]

            for record in records:
                address = record.server_address
                if address and address != service:
                    yield service, address


def build_dependency_graph(view: SystemDataView) -> DependencyGraph:
    """Build the graph over all three record kinds."""
    return DependencyGraphBuilder().build(view)
