"""
Resource Lookup.

Builds and caches, per target system, the views used to pick fault
targets: injectable HTTP endpoints, network call-pairs, DNS pairs,
database operations and the service dependency graph. Also fronts the
cluster inventory cache so both share one invalidation point.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache
from typing import Callable, Collection, Dict, Iterable, List, Optional, Tuple, TypeVar, Union

import structlog

from chaosmeta.config import settings
from chaosmeta.errors import PartialPreloadError
from chaosmeta.services.cache import SingleFlightCache
from chaosmeta.services.dependency_graph import DependencyGraph, DependencyGraphBuilder
from chaosmeta.services.inventory import BaseInventoryClient, ContainerInfo, InventoryCache
from chaosmeta.services.registry import ProviderRegistry
from chaosmeta.services.registry import registry as default_registry
from chaosmeta.services.resource_lookup.aggregations import (
    build_database_operations,
    build_dns_pairs,
    build_http_endpoints,
    build_network_pairs,
)
from chaosmeta.services.resource_lookup.models import (
    AppDatabaseOperation,
    AppEndpoint,
    DNSPair,
    NetworkPair,
    ViewKind,
)
from chaosmeta.services.systemdata import SystemDataView, resolve_system_data
from chaosmeta.services.systems import SystemType

logger = structlog.get_logger()

T = TypeVar("T")

SystemArg = Optional[Union[str, SystemType]]


class ResourceLookup:
    """
    Cached, system-scoped read-models for fault target selection.

    Every accessor takes an optional explicit ``system``; without it the
    current system of the registry's selector is used. Returned tuples are
    shared with the cache and must not be mutated.
    """

    def __init__(
        self,
        registry: Optional[ProviderRegistry] = None,
        inventory_client: Optional[BaseInventoryClient] = None,
        non_injectable_addresses: Optional[Collection[str]] = None,
        database_systems: Optional[Collection[str]] = None,
        max_workers: Optional[int] = None,
    ):
        self.registry = registry or default_registry
        self.inventory = InventoryCache(inventory_client)
        self.non_injectable_addresses = frozenset(
            settings.NON_INJECTABLE_ADDRESSES if non_injectable_addresses is None else non_injectable_addresses
        )
        self.database_systems = frozenset(
            settings.DATABASE_SYSTEM_ALLOWLIST if database_systems is None else database_systems
        )
        self.max_workers = max_workers or settings.PRELOAD_MAX_WORKERS
        self.graph_builder = DependencyGraphBuilder()
        self._views: SingleFlightCache[Tuple[SystemType, ViewKind], object] = SingleFlightCache("views")

    # ------------------------------------------------------------------
    # System resolution
    # ------------------------------------------------------------------

    def resolve_system(self, system: SystemArg = None) -> SystemType:
        return self.registry.system_config.resolve(system)

    def system_data(self, system: SystemArg = None) -> SystemDataView:
        """Resolve the SystemDataView. Raises ProviderNotRegisteredError."""
        return resolve_system_data(self.registry, system)

    def get_all_services(self, system: SystemArg = None) -> List[str]:
        return self.system_data(system).get_all_services()

    # ------------------------------------------------------------------
    # Cached views
    # ------------------------------------------------------------------

    def _view(self, kind: ViewKind, system: SystemArg, build: Callable[[SystemDataView], T]) -> T:
        resolved = self.resolve_system(system)

        def builder() -> T:
            started = time.perf_counter()
            value = build(self.system_data(resolved))
            logger.debug(
                "View built",
                view=kind.value,
                system=resolved.value,
                size=len(value) if hasattr(value, "__len__") else None,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            return value

        return self._views.get_or_build((resolved, kind), builder)

    def get_all_http_endpoints(self, system: SystemArg = None) -> Tuple[AppEndpoint, ...]:
        """Injectable HTTP endpoints sorted by (app, route)."""
        return self._view(
            ViewKind.HTTP_ENDPOINTS,
            system,
            lambda view: build_http_endpoints(view, self.non_injectable_addresses),
        )

    def get_all_network_pairs(self, system: SystemArg = None) -> Tuple[NetworkPair, ...]:
        """Source -> target pairs over HTTP, RPC and DB calls."""
        return self._view(ViewKind.NETWORK_PAIRS, system, build_network_pairs)

    def get_all_dns_pairs(self, system: SystemArg = None) -> Tuple[DNSPair, ...]:
        """Source -> target pairs over HTTP and DB calls only."""
        return self._view(ViewKind.DNS_PAIRS, system, build_dns_pairs)

    def get_all_database_operations(self, system: SystemArg = None) -> Tuple[AppDatabaseOperation, ...]:
        return self._view(
            ViewKind.DATABASE_OPERATIONS,
            system,
            lambda view: build_database_operations(view, self.database_systems),
        )

    def get_dependency_graph(self, system: SystemArg = None) -> DependencyGraph:
        return self._view(ViewKind.DEPENDENCY_GRAPH, system, self.graph_builder.build)

    def dependencies_of(self, service: str, system: SystemArg = None) -> List[str]:
        return self.get_dependency_graph(system).dependencies_of(service)

    def is_warm(self, kind: ViewKind, system: SystemArg = None) -> bool:
        """Whether a view is currently cached for the system."""
        return self._views.contains((self.resolve_system(system), kind))

    def warm_views(self, system: SystemArg = None) -> List[ViewKind]:
        resolved = self.resolve_system(system)
        return [kind for kind in ViewKind if self._views.contains((resolved, kind))]

    # ------------------------------------------------------------------
    # Cluster inventory
    # ------------------------------------------------------------------

    def get_all_app_labels(self, namespace: str, key: Optional[str] = None) -> Tuple[str, ...]:
        return self.inventory.get_labels(namespace, key or settings.DEFAULT_LABEL_KEY)

    def get_all_containers(self, namespace: str) -> Tuple[ContainerInfo, ...]:
        return self.inventory.get_containers(namespace)

    def get_containers_by_service(self, namespace: str, service_name: str) -> List[str]:
        return self.inventory.get_containers_by_service(namespace, service_name)

    def get_pods_by_service(self, namespace: str, service_name: str) -> List[str]:
        return self.inventory.get_pods_by_service(namespace, service_name)

    def get_containers_and_pods_by_services(
        self,
        namespace: str,
        service_names: Iterable[str],
    ) -> Tuple[List[str], List[str]]:
        return self.inventory.get_containers_and_pods_by_services(namespace, service_names)

    # ------------------------------------------------------------------
    # Preload / invalidate
    # ------------------------------------------------------------------

    def preload_caches(
        self,
        namespace: str,
        label_key: Optional[str] = None,
        system: SystemArg = None,
    ) -> None:
        """
        Build every view and the inventory entries concurrently.

        All tasks run to completion; a failing task never cancels or rolls
        back another. If any failed, raises PartialPreloadError naming the
        first failed task (in submission order) and chaining its exception.
        """
        resolved = self.resolve_system(system)
        tasks: Dict[str, Callable[[], object]] = {
            "app_labels": lambda: self.get_all_app_labels(namespace, label_key),
            "http_endpoints": lambda: self.get_all_http_endpoints(resolved),
            "network_pairs": lambda: self.get_all_network_pairs(resolved),
            "dns_pairs": lambda: self.get_all_dns_pairs(resolved),
            "database_operations": lambda: self.get_all_database_operations(resolved),
            "dependency_graph": lambda: self.get_dependency_graph(resolved),
            "containers": lambda: self.get_all_containers(namespace),
        }

        started = time.perf_counter()
        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="preload") as pool:
            futures = {name: pool.submit(task) for name, task in tasks.items()}

        failures: Dict[str, BaseException] = {}
        warm: List[str] = []
        for name, future in futures.items():
            error = future.exception()
            if error is None:
                warm.append(name)
            else:
                failures[name] = error
                logger.warning(
                    "Preload task failed",
                    task=name,
                    system=resolved.value,
                    namespace=namespace,
                    error=str(error),
                )

        logger.info(
            "Cache preload finished",
            system=resolved.value,
            namespace=namespace,
            warm=len(warm),
            failed=len(failures),
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )

        if failures:
            error = PartialPreloadError(failures, warm)
            raise error from failures[error.first_task]

    def invalidate_cache(self) -> None:
        """Clear every cached view and the inventory cache."""
        self._views.invalidate()
        self.inventory.invalidate()
        logger.info("Resource caches invalidated")


@lru_cache()
def get_resource_lookup() -> ResourceLookup:
    """Get the process-wide ResourceLookup."""
    return ResourceLookup()
