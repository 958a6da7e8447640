"""
Traced interaction records and the per-system data bundle.

The offline trace analyzers emit three record kinds per service: HTTP
calls, RPC calls and database operations. A SystemData bundle groups all
of them for one target system.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ServiceEndpoint(BaseModel):
    """One observed HTTP call."""
    model_config = ConfigDict(frozen=True)

    service_name: str = Field(description="Service that issued the call")
    request_method: str = ""
    route: str = ""
    response_status: str = ""
    server_address: str = Field(default="", description="Callee host, usually a service name")
    server_port: str = ""
    span_name: str = ""


class RPCOperation(BaseModel):
    """One observed RPC call (gRPC, Thrift, ...)."""
    model_config = ConfigDict(frozen=True)

    service_name: str
    rpc_system: str = ""
    rpc_service: str = ""
    rpc_method: str = ""
    status_code: str = ""
    server_address: str = ""
    server_port: str = ""
    span_name: str = ""
    span_kind: str = ""

    @property
    def is_client(self) -> bool:
        return self.span_kind.lower() == "client"


class DatabaseOperation(BaseModel):
    """One observed database operation."""
    model_config = ConfigDict(frozen=True)

    service_name: str
    db_name: str = ""
    db_table: str = ""
    operation: str = ""
    db_system: str = ""
    server_address: str = ""
    server_port: str = ""
    span_name: str = ""


class SystemData(BaseModel):
    """
    All interaction records for one target system.

    Maps service name to each record kind. ``all_services`` lists every
    known service (callers and callees); when omitted it is derived from
    the record maps.
    """
    system_name: str
    http_endpoints: Dict[str, List[ServiceEndpoint]] = Field(default_factory=dict)
    rpc_operations: Dict[str, List[RPCOperation]] = Field(default_factory=dict)
    database_operations: Dict[str, List[DatabaseOperation]] = Field(default_factory=dict)
    all_services: Optional[List[str]] = None

    def model_post_init(self, __context) -> None:
        if self.all_services is None:
            names = set(self.http_endpoints) | set(self.rpc_operations) | set(self.database_operations)
            self.all_services = sorted(names)
        else:
            self.all_services = sorted(set(self.all_services))

    def get_all_services(self) -> List[str]:
        return list(self.all_services or [])

    def get_http_endpoints_by_service(self, service_name: str) -> List[ServiceEndpoint]:
        return list(self.http_endpoints.get(service_name, []))

    def get_rpc_operations_by_service(self, service_name: str) -> List[RPCOperation]:
        return list(self.rpc_operations.get(service_name, []))

    def get_database_operations_by_service(self, service_name: str) -> List[DatabaseOperation]:
        return list(self.database_operations.get(service_name, []))
