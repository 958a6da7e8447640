"""
Provider Registry.

Holds one provider per (system, data kind). Lookups without an explicit
system resolve the current system from the selector at call time.
"""

from typing import TYPE_CHECKING, Dict, List, Optional, Union

import structlog

from chaosmeta.config import settings
from chaosmeta.errors import (
    ConfigurationError,
    DuplicateProviderError,
    ProviderNotRegisteredError,
)
from chaosmeta.services.concurrency import ReadWriteLock
from chaosmeta.services.registry.providers import (
    PROVIDER_INTERFACES,
    DataKind,
    InMemoryDatabaseOperationProvider,
    InMemoryRPCOperationProvider,
    InMemoryServiceEndpointProvider,
    MetadataProvider,
)
from chaosmeta.services.systems import SystemConfig, SystemType, parse_system_type
from chaosmeta.services.systems import system_config as default_system_config

if TYPE_CHECKING:
    from chaosmeta.services.systemdata.models import SystemData

logger = structlog.get_logger()

DUPLICATE_POLICIES = ("override", "reject")


class ProviderRegistry:
    """
    Registry of per-system data providers.

    Re-registering (system, kind) replaces the previous provider under the
    "override" policy and raises DuplicateProviderError under "reject".
    Providers are never merged.
    """

    def __init__(
        self,
        system_config: Optional[SystemConfig] = None,
        duplicate_policy: Optional[str] = None,
    ):
        self.system_config = system_config or default_system_config
        self.duplicate_policy = duplicate_policy or settings.DUPLICATE_PROVIDER_POLICY
        if self.duplicate_policy not in DUPLICATE_POLICIES:
            raise ConfigurationError(
                f"invalid duplicate provider policy: {self.duplicate_policy}, "
                f"valid policies are: {', '.join(DUPLICATE_POLICIES)}"
            )
        self._lock = ReadWriteLock()
        self._providers: Dict[DataKind, Dict[SystemType, MetadataProvider]] = {
            kind: {} for kind in DataKind
        }

    def register(
        self,
        system: Union[str, SystemType],
        kind: Union[str, DataKind],
        provider: MetadataProvider,
    ) -> None:
        """Register a provider for (system, kind)."""
        system = parse_system_type(system)
        kind = _parse_kind(kind)
        interface = PROVIDER_INTERFACES[kind]
        if not isinstance(provider, interface):
            raise ConfigurationError(
                f"provider {type(provider).__name__} does not implement {interface.__name__}"
            )

        with self._lock.write_lock():
            replaced = system in self._providers[kind]
            if replaced and self.duplicate_policy == "reject":
                raise DuplicateProviderError(system.value, kind.value)
            self._providers[kind][system] = provider

        if replaced:
            logger.warning(
                "Provider replaced",
                system=system.value,
                kind=kind.value,
                provider=type(provider).__name__,
            )
        else:
            logger.info(
                "Provider registered",
                system=system.value,
                kind=kind.value,
                provider=type(provider).__name__,
            )

    def register_system_data(self, system: Union[str, SystemType], data: "SystemData") -> None:
        """Register in-memory providers for every record kind in a SystemData bundle."""
        services = data.get_all_services()
        self.register(
            system,
            DataKind.HTTP_ENDPOINTS,
            InMemoryServiceEndpointProvider(data.http_endpoints, services),
        )
        self.register(
            system,
            DataKind.RPC_OPERATIONS,
            InMemoryRPCOperationProvider(data.rpc_operations, services),
        )
        self.register(
            system,
            DataKind.DATABASE_OPERATIONS,
            InMemoryDatabaseOperationProvider(data.database_operations, services),
        )

    def get(
        self,
        kind: Union[str, DataKind],
        system: Optional[Union[str, SystemType]] = None,
    ) -> MetadataProvider:
        """
        Return the provider for kind on the given (or current) system.

        Raises:
            ProviderNotRegisteredError: if nothing is registered
        """
        kind = _parse_kind(kind)
        system = self.system_config.resolve(system)
        with self._lock.read_lock():
            provider = self._providers[kind].get(system)
        if provider is None:
            raise ProviderNotRegisteredError(system.value, kind.value)
        return provider

    def has(
        self,
        kind: Union[str, DataKind],
        system: Optional[Union[str, SystemType]] = None,
    ) -> bool:
        kind = _parse_kind(kind)
        system = self.system_config.resolve(system)
        with self._lock.read_lock():
            return system in self._providers[kind]

    def providers_for(self, system: Optional[Union[str, SystemType]] = None) -> Dict[DataKind, MetadataProvider]:
        """Snapshot of every provider registered for a system."""
        system = self.system_config.resolve(system)
        with self._lock.read_lock():
            return {
                kind: by_system[system]
                for kind, by_system in self._providers.items()
                if system in by_system
            }

    def registered_systems(self) -> List[SystemType]:
        with self._lock.read_lock():
            systems = {s for by_system in self._providers.values() for s in by_system}
        return sorted(systems, key=lambda s: s.value)

    def unregister(self, system: Union[str, SystemType]) -> None:
        """Remove every provider of a system."""
        system = parse_system_type(system)
        with self._lock.write_lock():
            for by_system in self._providers.values():
                by_system.pop(system, None)

    def clear(self) -> None:
        """Remove all registered providers."""
        with self._lock.write_lock():
            for by_system in self._providers.values():
                by_system.clear()


def _parse_kind(kind: Union[str, DataKind]) -> DataKind:
    try:
        return DataKind(kind)
    except ValueError:
        valid = ", ".join(k.value for k in DataKind)
        raise ConfigurationError(f"invalid data kind: {kind}, valid kinds are: {valid}") from None


registry = ProviderRegistry()
