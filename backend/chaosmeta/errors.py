"""
Error taxonomy for the metadata registry.

CATEGORIES:
- ConfigurationError: unknown system identifier, bad namespace, bad setting
- ProviderNotRegisteredError: lookup before registration for a system
- DuplicateProviderError: re-registration under the "reject" policy
- UpstreamUnavailableError: the cluster inventory call failed
- PartialPreloadError: one or more concurrent preload tasks failed
"""

from typing import Dict, List, Optional


class ChaosMetaError(Exception):
    """Base class for all registry and lookup errors."""


class ConfigurationError(ChaosMetaError):
    """Invalid system identifier, namespace or setting."""


class ProviderNotRegisteredError(ChaosMetaError):
    """No provider is registered for the (system, kind) being looked up."""

    def __init__(self, system: str, kind: Optional[str] = None):
        self.system = system
        self.kind = kind
        if kind:
            message = f"no {kind} provider registered for system: {system}"
        else:
            message = f"no providers registered for system: {system}"
        super().__init__(message)


class DuplicateProviderError(ChaosMetaError):
    """A provider already exists for (system, kind) and overrides are rejected."""

    def __init__(self, system: str, kind: str):
        self.system = system
        self.kind = kind
        super().__init__(f"{kind} provider already registered for system: {system}")


class UpstreamUnavailableError(ChaosMetaError):
    """The cluster inventory collaborator could not be reached or failed."""

    def __init__(self, operation: str, namespace: str, key: Optional[str] = None):
        self.operation = operation
        self.namespace = namespace
        self.key = key
        context = f"namespace={namespace}"
        if key is not None:
            context += f", key={key}"
        super().__init__(f"{operation} failed ({context})")


class PartialPreloadError(ChaosMetaError):
    """
    One or more preload tasks failed.

    The message names the first failed task and ``__cause__`` carries its
    exception. ``failures`` holds every failed task; ``warm`` lists the tasks
    whose cache slots were populated, so callers can check what is usable.
    """

    def __init__(self, failures: Dict[str, BaseException], warm: List[str]):
        self.failures = failures
        self.warm = warm
        self.first_task = next(iter(failures))
        first_error = failures[self.first_task]
        super().__init__(
            f"cache preloading encountered errors: {self.first_task}: {first_error}"
        )
