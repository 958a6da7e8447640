"""
Provider Registry.

Pluggable per-system data providers, one per (system, data kind),
resolved against the current system at lookup time.
"""

from chaosmeta.services.registry.providers import (
    DataKind,
    MetadataProvider,
    ServiceEndpointProvider,
    RPCOperationProvider,
    DatabaseOperationProvider,
    InMemoryServiceEndpointProvider,
    InMemoryRPCOperationProvider,
    InMemoryDatabaseOperationProvider,
)
from chaosmeta.services.registry.registry import ProviderRegistry, registry

__all__ = [
    # Interfaces
    "DataKind",
    "MetadataProvider",
    "ServiceEndpointProvider",
    "RPCOperationProvider",
    "DatabaseOperationProvider",
    # In-memory providers
    "InMemoryServiceEndpointProvider",
    "InMemoryRPCOperationProvider",
    "InMemoryDatabaseOperationProvider",
    # Registry
    "ProviderRegistry",
    "registry",
]
