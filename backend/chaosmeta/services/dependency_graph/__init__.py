"""
Service Dependency Graph.

Symmetric service-to-service adjacency derived from traced HTTP, RPC and
database calls, used to pick network fault targets.
"""

from chaosmeta.services.dependency_graph.models import DependencyGraph, ServiceDependency
from chaosmeta.services.dependency_graph.builder import (
    DependencyGraphBuilder,
    build_dependency_graph,
)

__all__ = [
    "DependencyGraph",
    "ServiceDependency",
    "DependencyGraphBuilder",
    "build_dependency_graph",
]
