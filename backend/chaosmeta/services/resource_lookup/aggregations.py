"""
View builders.

Pure functions from a SystemDataView to one derived view. Each result is a
tuple, sorted and deduplicated, so it can be cached and shared as-is.
"""

from typing import Collection, Dict, FrozenSet, Iterable, Iterator, List, Optional, Set, Tuple, Type

from chaosmeta.services.resource_lookup.models import (
    DNS_OPERATION_TYPES,
    AppDatabaseOperation,
    AppEndpoint,
    DNSPair,
    NetworkPair,
    OperationType,
)
from chaosmeta.services.systemdata.view import SystemDataView


def build_http_endpoints(
    view: SystemDataView,
    non_injectable_addresses: Collection[str] = (),
) -> Tuple[AppEndpoint, ...]:
    """
    Flatten every service's HTTP endpoints.

    Endpoints aimed at a non-injectable address (message brokers and other
    infrastructure) and endpoints without a route are dropped.
    """
    denylist = set(non_injectable_addresses)
    endpoints: Set[AppEndpoint] = set()

    for service in view.get_all_services():
        for endpoint in view.get_http_endpoints_by_service(service):
            if endpoint.server_address in denylist:
                continue
            if not endpoint.route:
                continue
            endpoints.add(AppEndpoint(
                app_name=service,
                route=endpoint.route,
                method=endpoint.request_method,
                server_address=endpoint.server_address,
                server_port=endpoint.server_port,
                span_name=endpoint.span_name,
            ))

    # Sorted by (app, route) first; the remaining fields break ties
    return tuple(sorted(endpoints))


def _iter_calls(
    view: SystemDataView,
    operation_types: FrozenSet[OperationType],
) -> Iterator[Tuple[str, str, str, OperationType]]:
    """Yield (source, target, span_name, type) for every valid outbound call."""
    for service in view.get_all_services():
        batches: List[Tuple[OperationType, Iterable]] = []
        if OperationType.HTTP in operation_types:
            batches.append((OperationType.HTTP, view.get_http_endpoints_by_service(service)))
        if OperationType.RPC in operation_types:
            batches.append((OperationType.RPC, view.get_rpc_operations_by_service(service)))
        if OperationType.DB in operation_types:
            batches.append((OperationType.DB, view.get_database_operations_by_service(service)))

        for operation_type, records in batches:
            for record in records:
                target = record.server_address
                if not target or target == service:
                    continue
                yield service, target, record.span_name, operation_type


def _aggregate_pairs(
    calls: Iterable[Tuple[str, str, str, OperationType]],
    pair_class: Type[NetworkPair],
) -> Tuple[NetworkPair, ...]:
    span_names: Dict[Tuple[str, str], Set[str]] = {}
    tags: Dict[Tuple[str, str], Set[OperationType]] = {}

    for source, target, span_name, operation_type in calls:
        key = (source, target)
        span_names.setdefault(key, set())
        tags.setdefault(key, set()).add(operation_type)
        if span_name:
            span_names[key].add(span_name)

    return tuple(
        pair_class(
            source_service=source,
            target_service=target,
            span_names=tuple(sorted(span_names[(source, target)])),
            operation_types=tuple(sorted(tags[(source, target)], key=lambda t: t.value)),
        )
        for source, target in sorted(span_names)
    )


def build_network_pairs(view: SystemDataView) -> Tuple[NetworkPair, ...]:
    """Aggregate HTTP, RPC and DB calls into (source, target) pairs."""
    return _aggregate_pairs(_iter_calls(view, frozenset(OperationType)), NetworkPair)


def is_grpc_route(route: str) -> bool:
    """
    Whether a route looks like a gRPC method path.

    gRPC routes have the form ``/package.Service/Method``: a dot in the first
    path segment, e.g. ``/oteldemo.CartService/AddItem``.
    """
    if len(route) < 3 or not route.startswith("/"):
        return False
    return "." in route[1:].split("/", 1)[0]


def grpc_only_pairs(view: SystemDataView) -> Set[Tuple[str, str]]:
    """
    (source, target) pairs reached by client RPCs and no plain HTTP route.

    Trace analyzers also record gRPC calls as HTTP endpoints whose route is
    the method path, so HTTP records alone do not prove a DNS-resolvable call.
    """
    rpc_pairs = {
        (op.service_name, op.server_address)
        for op in view.get_client_rpc_operations()
        if op.server_address and op.server_address != op.service_name
    }
    http_pairs = {
        (service, endpoint.server_address)
        for service in view.get_all_services()
        for endpoint in view.get_http_endpoints_by_service(service)
        if endpoint.route and not is_grpc_route(endpoint.route)
    }
    return rpc_pairs - http_pairs


def build_dns_pairs(view: SystemDataView) -> Tuple[DNSPair, ...]:
    """
    Aggregate HTTP and DB calls only; RPC edges are not DNS-injectable.

    HTTP contributions on gRPC-only pairs are dropped as well. DB
    contributions on the same pair are kept.
    """
    grpc_only = grpc_only_pairs(view)
    calls = (
        call
        for call in _iter_calls(view, DNS_OPERATION_TYPES)
        if not (call[3] is OperationType.HTTP and (call[0], call[1]) in grpc_only)
    )
    return _aggregate_pairs(calls, DNSPair)


def build_database_operations(
    view: SystemDataView,
    db_systems: Optional[Collection[str]] = None,
) -> Tuple[AppDatabaseOperation, ...]:
    """
    Flatten every service's database operations.

    When db_systems is non-empty only operations on those database systems
    are kept.
    """
    allowed = set(db_systems or ())
    operations: Set[AppDatabaseOperation] = set()

    for service in view.get_all_services():
        for op in view.get_database_operations_by_service(service):
            if allowed and op.db_system not in allowed:
                continue
            operations.add(AppDatabaseOperation(
                app_name=service,
                db_name=op.db_name,
                table_name=op.db_table,
                operation_type=op.operation,
            ))

    return tuple(sorted(operations))
