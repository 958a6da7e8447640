"""
System metadata: traced interaction records and the per-system view.
"""

from chaosmeta.services.systemdata.models import (
    ServiceEndpoint,
    RPCOperation,
    DatabaseOperation,
    SystemData,
)
from chaosmeta.services.systemdata.view import SystemDataView, resolve_system_data
from chaosmeta.services.systemdata.loader import load_system_data, register_directory

__all__ = [
    # Records
    "ServiceEndpoint",
    "RPCOperation",
    "DatabaseOperation",
    "SystemData",
    # View
    "SystemDataView",
    "resolve_system_data",
    # Loader
    "load_system_data",
    "register_directory",
]
