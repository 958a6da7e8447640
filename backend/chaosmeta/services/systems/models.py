"""
Target system identifiers.

Each reference application that supplies traced interaction records is a
SystemType. Deployments of a system live in numbered namespaces such as
``ts0`` or ``otel-demo3``.
"""

import enum
import re
from typing import Dict, List, Union

from chaosmeta.errors import ConfigurationError


class SystemType(str, enum.Enum):
    """Known target systems."""
    TRAIN_TICKET = "ts"
    OTEL_DEMO = "otel-demo"
    MEDIA_MICROSERVICES = "media"
    HOTEL_RESERVATION = "hs"
    SOCIAL_NETWORK = "sn"
    ONLINE_BOUTIQUE = "ob"
    SOCK_SHOP = "sockshop"
    TEA_STORE = "teastore"

    def __str__(self) -> str:
        return self.value


SYSTEM_DISPLAY_NAMES: Dict[SystemType, str] = {
    SystemType.TRAIN_TICKET: "TrainTicket",
    SystemType.OTEL_DEMO: "OpenTelemetry Demo",
    SystemType.MEDIA_MICROSERVICES: "Media Microservices",
    SystemType.HOTEL_RESERVATION: "Hotel Reservation",
    SystemType.SOCIAL_NETWORK: "Social Network",
    SystemType.ONLINE_BOUTIQUE: "Online Boutique",
    SystemType.SOCK_SHOP: "Sock Shop",
    SystemType.TEA_STORE: "TeaStore",
}

_NAMESPACE_PREFIX = re.compile(r"^([a-zA-Z][a-zA-Z-]*?)(\d+)$")


def all_system_types() -> List[SystemType]:
    """Return every known system type in declaration order."""
    return list(SystemType)


def is_system(value: Union[str, SystemType]) -> bool:
    """Check whether a value names a known system."""
    try:
        SystemType(value)
    except ValueError:
        return False
    return True


def parse_system_type(value: Union[str, SystemType]) -> SystemType:
    """
    Parse a string into a SystemType.

    Raises:
        ConfigurationError: if the value is not a known system
    """
    try:
        return SystemType(value)
    except ValueError:
        valid = ", ".join(s.value for s in SystemType)
        raise ConfigurationError(
            f"invalid system type: {value}, valid types are: {valid}"
        ) from None


def namespace_for(system: Union[str, SystemType], index: int) -> str:
    """Build the namespace name of the Nth deployment of a system."""
    system = parse_system_type(system)
    if index < 0:
        raise ConfigurationError(f"namespace index must be non-negative, got {index}")
    return f"{system.value}{index}"


def extract_namespace_prefix(namespace: str) -> str:
    """
    Strip the deployment index from a namespace: ``ts12`` -> ``ts``.

    Raises:
        ConfigurationError: if the namespace has no trailing index
    """
    match = _NAMESPACE_PREFIX.match(namespace or "")
    if not match:
        raise ConfigurationError(f"failed to extract prefix from namespace {namespace!r}")
    return match.group(1)


def system_for_namespace(namespace: str) -> SystemType:
    """Resolve the system a namespace belongs to."""
    return parse_system_type(extract_namespace_prefix(namespace))
