"""
Target system selection.

Defines the known target systems and the process-wide selector of the
system every metadata accessor reads by default.
"""

from chaosmeta.services.systems.models import (
    SystemType,
    SYSTEM_DISPLAY_NAMES,
    all_system_types,
    is_system,
    parse_system_type,
    namespace_for,
    extract_namespace_prefix,
    system_for_namespace,
)
from chaosmeta.services.systems.selector import (
    SystemConfig,
    system_config,
    set_current_system,
    get_current_system,
)

__all__ = [
    # Models
    "SystemType",
    "SYSTEM_DISPLAY_NAMES",
    "all_system_types",
    "is_system",
    "parse_system_type",
    "namespace_for",
    "extract_namespace_prefix",
    "system_for_namespace",
    # Selector
    "SystemConfig",
    "system_config",
    "set_current_system",
    "get_current_system",
]
