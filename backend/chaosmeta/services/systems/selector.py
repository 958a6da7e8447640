"""Process-wide selector of the current target system."""
from typing import Optional, Union

import structlog

from chaosmeta.config import settings
from chaosmeta.services.concurrency import ReadWriteLock
from chaosmeta.services.systems.models import SystemType, parse_system_type

logger = structlog.get_logger()


class SystemConfig:
    """
    Holds the current SystemType.

    Exactly one system is current at any time. Writers replace it
    atomically; readers take the shared side of a read/write lock.
    """

    def __init__(self, initial: Optional[Union[str, SystemType]] = None):
        self._lock = ReadWriteLock()
        self._current = parse_system_type(initial or settings.DEFAULT_SYSTEM)

    def set_current_system(self, system: Union[str, SystemType]) -> SystemType:
        """Validate and select a system. Raises ConfigurationError if unknown."""
        parsed = parse_system_type(system)
        with self._lock.write_lock():
            previous = self._current
            self._current = parsed
        if previous != parsed:
            logger.info("Current system changed", previous=previous.value, current=parsed.value)
        return parsed

    def get_current_system(self) -> SystemType:
        with self._lock.read_lock():
            return self._current

    def resolve(self, system: Optional[Union[str, SystemType]] = None) -> SystemType:
        """Return an explicitly requested system, or the current one."""
        if system is None:
            return self.get_current_system()
        return parse_system_type(system)


system_config = SystemConfig()


def set_current_system(system: Union[str, SystemType]) -> SystemType:
    """Select the current system on the process-wide selector."""
    return system_config.set_current_system(system)


def get_current_system() -> SystemType:
    """Return the current system of the process-wide selector."""
    return system_config.get_current_system()
