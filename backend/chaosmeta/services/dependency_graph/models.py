"""
Data models for the service dependency graph.

The graph is symmetric: an edge A -> B is always accompanied by B -> A,
because fault-target selection treats "A calls B" and "B is called by A"
as equally actionable. Self loops are never stored.
"""

from dataclasses import FrozenInstanceError, dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple


@dataclass(frozen=True, order=True)
class ServiceDependency:
    """A directed (source, target) pair read off the dependency graph."""
    source_service: str
    target_service: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "source_service": self.source_service,
            "target_service": self.target_service,
        }


@dataclass
class DependencyGraph:
    """
    Adjacency map of service -> services it has an edge to.

    Reads return sorted copies so that index-based selection is stable
    between runs. Built graphs are frozen before they are cached and shared.
    """
    system: Optional[str] = None
    _adjacency: Dict[str, Set[str]] = field(default_factory=dict)
    _frozen: bool = field(default=False, repr=False)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "DependencyGraph":
        """Reject further edges. Returns self."""
        self._frozen = True
        return self

    def add_edge(self, source: str, target: str) -> bool:
        """
        Add source <-> target. Returns False for self loops and empty names.

        Raises:
            FrozenInstanceError: if the graph has been frozen
        """
        if self._frozen:
            raise FrozenInstanceError("cannot add edges to a frozen dependency graph")
        if not source or not target or source == target:
            return False
        self._adjacency.setdefault(source, set()).add(target)
        self._adjacency.setdefault(target, set()).add(source)
        return True

    def has_edge(self, source: str, target: str) -> bool:
        return target in self._adjacency.get(source, ())

    def dependencies_of(self, service: str) -> List[str]:
        """All services the given service has an edge to, sorted."""
        return sorted(self._adjacency.get(service, ()))

    def count_dependencies(self, service: str) -> int:
        return len(self._adjacency.get(service, ()))

    def pair_at(self, service: str, index: int) -> Optional[str]:
        """
        Return the index-th dependency of a service, or None.

        Exists so that experiment generation can deterministically pick the
        Nth target of a source.
        """
        dependencies = self.dependencies_of(service)
        if index < 0 or index >= len(dependencies):
            return None
        return dependencies[index]

    def all_service_pairs(self) -> List[ServiceDependency]:
        """Every directed edge, sorted by (source, target)."""
        return [
            ServiceDependency(source, target)
            for source in sorted(self._adjacency)
            for target in sorted(self._adjacency[source])
        ]

    def service_pair_at(self, index: int) -> Optional[Tuple[str, str]]:
        pairs = self.all_service_pairs()
        if index < 0 or index >= len(pairs):
            return None
        pair = pairs[index]
        return pair.source_service, pair.target_service

    def list_services(self) -> List[str]:
        """Services with at least one dependency, sorted."""
        return sorted(s for s, targets in self._adjacency.items() if targets)

    @property
    def edge_count(self) -> int:
        return sum(len(targets) for targets in self._adjacency.values())

    def to_dict(self) -> Dict[str, Any]:
        """Convert graph to dictionary for serialization."""
        return {
            "system": self.system,
            "adjacency": {s: self.dependencies_of(s) for s in sorted(self._adjacency)},
            "service_count": len(self._adjacency),
            "edge_count": self.edge_count,
        }
