"""
Resource Lookup.

Cached per-system views used to pick fault-injection targets:
- injectable HTTP endpoints
- network call-pairs (HTTP, RPC, DB)
- DNS pairs (HTTP, DB)
- database operations
- the service dependency graph
"""

from chaosmeta.services.resource_lookup.models import (
    OperationType,
    ViewKind,
    AppEndpoint,
    NetworkPair,
    DNSPair,
    AppDatabaseOperation,
    DNS_OPERATION_TYPES,
)
from chaosmeta.services.resource_lookup.aggregations import (
    build_http_endpoints,
    build_network_pairs,
    build_dns_pairs,
    build_database_operations,
    grpc_only_pairs,
    is_grpc_route,
)
from chaosmeta.services.resource_lookup.lookup import ResourceLookup, get_resource_lookup

__all__ = [
    # Models
    "OperationType",
    "ViewKind",
    "AppEndpoint",
    "NetworkPair",
    "DNSPair",
    "AppDatabaseOperation",
    "DNS_OPERATION_TYPES",
    # Builders
    "build_http_endpoints",
    "build_network_pairs",
    "build_dns_pairs",
    "build_database_operations",
    "grpc_only_pairs",
    "is_grpc_route",
    # Lookup
    "ResourceLookup",
    "get_resource_lookup",
]
