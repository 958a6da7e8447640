"""
Derived read-models used to pick fault-injection targets.

All models are frozen so cached views can be shared between callers.
"""

import enum
from dataclasses import dataclass
from typing import Any, Dict, Tuple


class OperationType(str, enum.Enum):
    """Record kinds that contribute to a network pair."""
    HTTP = "http"
    RPC = "rpc"
    DB = "db"


class ViewKind(str, enum.Enum):
    """Cached views built per system."""
    HTTP_ENDPOINTS = "http_endpoints"
    NETWORK_PAIRS = "network_pairs"
    DNS_PAIRS = "dns_pairs"
    DATABASE_OPERATIONS = "database_operations"
    DEPENDENCY_GRAPH = "dependency_graph"


# Operation types DNS-level faults can affect. RPC clients in the reference
# systems resolve their transport outside the path DNS chaos intercepts.
DNS_OPERATION_TYPES = frozenset({OperationType.HTTP, OperationType.DB})


@dataclass(frozen=True, order=True)
class AppEndpoint:
    """One injectable HTTP endpoint of an app."""
    app_name: str
    route: str
    method: str = ""
    server_address: str = ""
    server_port: str = ""
    span_name: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "app_name": self.app_name,
            "route": self.route,
            "method": self.method,
            "server_address": self.server_address,
            "server_port": self.server_port,
            "span_name": self.span_name,
        }


@dataclass(frozen=True)
class NetworkPair:
    """
    A directed source -> target relationship observed in traces.

    span_names and operation_types are sorted and unique.
    """
    source_service: str
    target_service: str
    span_names: Tuple[str, ...] = ()
    operation_types: Tuple[OperationType, ...] = ()

    @property
    def key(self) -> Tuple[str, str]:
        return self.source_service, self.target_service

    def has_operation(self, operation_type: OperationType) -> bool:
        return operation_type in self.operation_types

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source_service": self.source_service,
            "target_service": self.target_service,
            "span_names": list(self.span_names),
            "operation_types": [t.value for t in self.operation_types],
        }


@dataclass(frozen=True)
class DNSPair(NetworkPair):
    """A network pair restricted to HTTP and DB contributions."""

    @property
    def app_name(self) -> str:
        return self.source_service

    @property
    def domain(self) -> str:
        return self.target_service


@dataclass(frozen=True, order=True)
class AppDatabaseOperation:
    """One (app, database, table, operation) combination."""
    app_name: str
    db_name: str
    table_name: str
    operation_type: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "app_name": self.app_name,
            "db_name": self.db_name,
            "table_name": self.table_name,
            "operation_type": self.operation_type,
        }
