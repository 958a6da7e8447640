"""
Provider interfaces.

A provider is a narrow read-only view over one record kind for one target
system. Each system supplies one implementation per DataKind.
"""

import enum
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Optional, Type

if TYPE_CHECKING:
    from chaosmeta.services.systemdata.models import (
        DatabaseOperation,
        RPCOperation,
        ServiceEndpoint,
    )


class DataKind(str, enum.Enum):
    """Record kinds a provider can serve."""
    HTTP_ENDPOINTS = "http_endpoints"
    RPC_OPERATIONS = "rpc_operations"
    DATABASE_OPERATIONS = "database_operations"


class MetadataProvider(ABC):
    """Base interface shared by every provider."""

    kind: DataKind

    @abstractmethod
    def get_service_names(self) -> List[str]:
        """Return every service name this provider knows about."""
        pass


class ServiceEndpointProvider(MetadataProvider):
    """Provides HTTP endpoint records."""

    kind = DataKind.HTTP_ENDPOINTS

    @abstractmethod
    def get_endpoints_by_service(self, service_name: str) -> List["ServiceEndpoint"]:
        pass


class RPCOperationProvider(MetadataProvider):
    """Provides RPC operation records."""

    kind = DataKind.RPC_OPERATIONS

    @abstractmethod
    def get_operations_by_service(self, service_name: str) -> List["RPCOperation"]:
        pass


class DatabaseOperationProvider(MetadataProvider):
    """Provides database operation records."""

    kind = DataKind.DATABASE_OPERATIONS

    @abstractmethod
    def get_operations_by_service(self, service_name: str) -> List["DatabaseOperation"]:
        pass


PROVIDER_INTERFACES: Dict[DataKind, Type[MetadataProvider]] = {
    DataKind.HTTP_ENDPOINTS: ServiceEndpointProvider,
    DataKind.RPC_OPERATIONS: RPCOperationProvider,
    DataKind.DATABASE_OPERATIONS: DatabaseOperationProvider,
}


class _MappingBacked:
    """Shared storage for the in-memory providers."""

    def __init__(self, records: Mapping[str, Iterable], services: Optional[Iterable[str]] = None):
        self._records = {name: tuple(items) for name, items in records.items()}
        names = set(services) if services is not None else set(self._records)
        self._services = sorted(names)

    def get_service_names(self) -> List[str]:
        return list(self._services)

    def _lookup(self, service_name: str) -> list:
        return list(self._records.get(service_name, ()))


class InMemoryServiceEndpointProvider(_MappingBacked, ServiceEndpointProvider):
    """HTTP endpoints held in a service -> records mapping."""

    def get_endpoints_by_service(self, service_name: str) -> List["ServiceEndpoint"]:
        return self._lookup(service_name)


class InMemoryRPCOperationProvider(_MappingBacked, RPCOperationProvider):
    """RPC operations held in a service -> records mapping."""

    def get_operations_by_service(self, service_name: str) -> List["RPCOperation"]:
        return self._lookup(service_name)


class InMemoryDatabaseOperationProvider(_MappingBacked, DatabaseOperationProvider):
    """Database operations held in a service -> records mapping."""

    def get_operations_by_service(self, service_name: str) -> List["DatabaseOperation"]:
        return self._lookup(service_name)
