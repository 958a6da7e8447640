"""
SystemData View.

A read-only facade over the providers registered for one system. Resolve
it once with ``resolve_system_data`` and pass the view around instead of
re-reading the current system on every call.
"""

from typing import Dict, List, Optional, Union

import structlog

from chaosmeta.errors import ProviderNotRegisteredError
from chaosmeta.services.registry.providers import (
    DatabaseOperationProvider,
    DataKind,
    MetadataProvider,
    RPCOperationProvider,
    ServiceEndpointProvider,
)
from chaosmeta.services.registry.registry import ProviderRegistry
from chaosmeta.services.registry.registry import registry as default_registry
from chaosmeta.services.systemdata.models import (
    DatabaseOperation,
    RPCOperation,
    ServiceEndpoint,
)
from chaosmeta.services.systems import SystemType

logger = structlog.get_logger()


class SystemDataView:
    """Typed accessors over one system's provider set."""

    def __init__(self, system: SystemType, providers: Dict[DataKind, MetadataProvider]):
        self.system = system
        self._http: Optional[ServiceEndpointProvider] = providers.get(DataKind.HTTP_ENDPOINTS)
        self._rpc: Optional[RPCOperationProvider] = providers.get(DataKind.RPC_OPERATIONS)
        self._db: Optional[DatabaseOperationProvider] = providers.get(DataKind.DATABASE_OPERATIONS)
        self._providers = providers

    def __repr__(self) -> str:
        kinds = ",".join(sorted(k.value for k in self._providers))
        return f"SystemDataView(system={self.system.value}, kinds={kinds})"

    def get_all_services(self) -> List[str]:
        """Sorted, deduplicated union of every provider's service names."""
        names = set()
        for provider in self._providers.values():
            names.update(provider.get_service_names())
        return sorted(names)

    def get_http_endpoints_by_service(self, service_name: str) -> List[ServiceEndpoint]:
        if self._http is None:
            return []
        return list(self._http.get_endpoints_by_service(service_name) or [])

    def get_rpc_operations_by_service(self, service_name: str) -> List[RPCOperation]:
        if self._rpc is None:
            return []
        return list(self._rpc.get_operations_by_service(service_name) or [])

    def get_database_operations_by_service(self, service_name: str) -> List[DatabaseOperation]:
        if self._db is None:
            return []
        return list(self._db.get_operations_by_service(service_name) or [])

    def get_all_database_services(self) -> List[str]:
        """Services that perform at least one database operation."""
        return [s for s in self.get_all_services() if self.get_database_operations_by_service(s)]

    def get_all_rpc_services(self) -> List[str]:
        """Services that issue or serve at least one RPC."""
        return [s for s in self.get_all_services() if self.get_rpc_operations_by_service(s)]

    def get_client_rpc_operations(self) -> List[RPCOperation]:
        """Client-side RPC operations across every service."""
        return [
            op
            for service in self.get_all_services()
            for op in self.get_rpc_operations_by_service(service)
            if op.is_client
        ]

    def get_database_operations_by_db_system(self, db_system: str) -> List[DatabaseOperation]:
        return [
            op
            for service in self.get_all_services()
            for op in self.get_database_operations_by_service(service)
            if op.db_system == db_system
        ]


def resolve_system_data(
    registry: Optional[ProviderRegistry] = None,
    system: Optional[Union[str, SystemType]] = None,
) -> SystemDataView:
    """
    Resolve the view for the given (or current) system.

    Kinds without a provider read as empty; a system with no provider at
    all is an error.

    Raises:
        ProviderNotRegisteredError: if the system has no providers
    """
    registry = registry or default_registry
    resolved = registry.system_config.resolve(system)
    providers = registry.providers_for(resolved)
    if not providers:
        raise ProviderNotRegisteredError(resolved.value)
    if len(providers) < len(DataKind):
        logger.debug(
            "Partial provider set",
            system=resolved.value,
            missing=[k.value for k in DataKind if k not in providers],
        )
    return SystemDataView(resolved, providers)
