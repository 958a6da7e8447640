"""Pytest configuration and fixtures."""
import pytest
from unittest.mock import MagicMock

from chaosmeta.services.inventory import BaseInventoryClient
from chaosmeta.services.registry import ProviderRegistry
from chaosmeta.services.resource_lookup import ResourceLookup
from chaosmeta.services.systemdata import (
    DatabaseOperation,
    RPCOperation,
    ServiceEndpoint,
    SystemData,
)
from chaosmeta.services.systems import SystemConfig, SystemType


@pytest.fixture
def system_config():
    """Fresh selector starting on TrainTicket."""
    return SystemConfig(SystemType.TRAIN_TICKET)


@pytest.fixture
def registry(system_config):
    """Empty registry bound to the fresh selector."""
    return ProviderRegistry(system_config=system_config, duplicate_policy="override")


@pytest.fixture
def ts_data():
    """TrainTicket-like data: HTTP and DB only, one broker endpoint."""
    route_ep = ServiceEndpoint(
        service_name="ts-travel-service",
        request_method="GET",
        route="/api/v1/routeservice/routes/{routeId}",
        response_status="200",
        server_address="ts-route-service",
        server_port="11178",
        span_name="GET /api/v1/routeservice/routes/{routeId}",
    )
    return SystemData(
        system_name="ts",
        http_endpoints={
            "ts-travel-service": [
                route_ep,
                route_ep,
                ServiceEndpoint(
                    service_name="ts-travel-service",
                    request_method="POST",
                    route="/api/v1/seatservice/seats",
                    response_status="200",
                    server_address="ts-seat-service",
                    server_port="18898",
                    span_name="POST /api/v1/seatservice/seats",
                ),
                ServiceEndpoint(
                    service_name="ts-travel-service",
                    request_method="GET",
                    route="",
                    server_address="ts-basic-service",
                    span_name="GET",
                ),
            ],
            "ts-order-service": [
                ServiceEndpoint(
                    service_name="ts-order-service",
                    request_method="POST",
                    route="/api/v1/orderservice/order",
                    server_address="ts-rabbitmq",
                    server_port="5672",
                    span_name="publish",
                ),
            ],
            "ts-route-service": [
                ServiceEndpoint(
                    service_name="ts-route-service",
                    request_method="GET",
                    route="/api/v1/routeservice/welcome",
                    server_address="ts-route-service",
                    span_name="GET /api/v1/routeservice/welcome",
                ),
            ],
        },
        database_operations={
            "ts-travel-service": [
                DatabaseOperation(
                    service_name="ts-travel-service",
                    db_name="ts",
                    db_table="trip",
                    operation="SELECT",
                    db_system="mysql",
                    server_address="mysql",
                    server_port="3306",
                    span_name="SELECT ts.trip",
                ),
            ],
            "ts-order-service": [
                DatabaseOperation(
                    service_name="ts-order-service",
                    db_name="ts",
                    db_table="orders",
                    operation="INSERT",
                    db_system="mysql",
                    server_address="mysql",
                    server_port="3306",
                    span_name="INSERT ts.orders",
                ),
                DatabaseOperation(
                    service_name="ts-order-service",
                    db_name="0",
                    db_table="",
                    operation="GET",
                    db_system="redis",
                    server_address="redis",
                    server_port="6379",
                    span_name="",
                ),
            ],
        },
        all_services=[
            "ts-travel-service",
            "ts-order-service",
            "ts-route-service",
            "ts-seat-service",
            "ts-basic-service",
        ],
    )


@pytest.fixture
def otel_data():
    """OpenTelemetry-demo-like data with gRPC calls."""
    return SystemData(
        system_name="otel-demo",
        http_endpoints={
            "frontend": [
                ServiceEndpoint(
                    service_name="frontend",
                    request_method="GET",
                    route="/api/cart",
                    server_address="cart",
                    server_port="8080",
                    span_name="GET /api/cart",
                ),
            ],
        },
        rpc_operations={
            "frontend": [
                RPCOperation(
                    service_name="frontend",
                    rpc_system="grpc",
                    rpc_service="oteldemo.CheckoutService",
                    rpc_method="PlaceOrder",
                    status_code="0",
                    server_address="checkout",
                    server_port="8080",
                    span_name="oteldemo.CheckoutService/PlaceOrder",
                    span_kind="Client",
                ),
            ],
            "checkout": [
                RPCOperation(
                    service_name="checkout",
                    rpc_system="grpc",
                    rpc_service="oteldemo.PaymentService",
                    rpc_method="Charge",
                    status_code="0",
                    server_address="payment",
                    server_port="8080",
                    span_name="oteldemo.PaymentService/Charge",
                    span_kind="Client",
                ),
                RPCOperation(
                    service_name="checkout",
                    rpc_system="grpc",
                    rpc_service="oteldemo.CheckoutService",
                    rpc_method="PlaceOrder",
                    status_code="0",
                    server_address="",
                    span_name="oteldemo.CheckoutService/PlaceOrder",
                    span_kind="Server",
                ),
            ],
        },
        database_operations={
            "cart": [
                DatabaseOperation(
                    service_name="cart",
                    db_name="0",
                    db_table="",
                    operation="HGET",
                    db_system="redis",
                    server_address="valkey-cart",
                    server_port="6379",
                    span_name="HGET",
                ),
            ],
        },
    )


@pytest.fixture
def populated_registry(registry, ts_data, otel_data):
    """Registry with TrainTicket and OpenTelemetry demo data."""
    registry.register_system_data(SystemType.TRAIN_TICKET, ts_data)
    registry.register_system_data(SystemType.OTEL_DEMO, otel_data)
    return registry


@pytest.fixture
def inventory_client():
    """Mock cluster inventory client."""
    client = MagicMock(spec=BaseInventoryClient)
    client.get_labels.return_value = ["ts-route-service", "ts-order-service", "ts-route-service"]
    client.get_containers_with_app_label.return_value = [
        {"pod_name": "ts-order-service-7d9-abc", "app_label": "ts-order-service", "container_name": "ts-order-service"},
        {"pod_name": "ts-order-service-7d9-abc", "app_label": "ts-order-service", "container_name": "istio-proxy"},
        {"pod_name": "ts-route-service-5f4-xyz", "app_label": "ts-route-service", "container_name": "ts-route-service"},
        {"pod_name": "unlabelled-0", "app_label": "", "container_name": "sidecar"},
    ]
    return client


@pytest.fixture
def lookup(populated_registry, inventory_client):
    """ResourceLookup over the populated registry and mock inventory."""
    return ResourceLookup(
        registry=populated_registry,
        inventory_client=inventory_client,
        non_injectable_addresses=["ts-rabbitmq"],
        database_systems=[],
        max_workers=4,
    )
