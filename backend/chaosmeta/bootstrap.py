"""Process start-up: logging, system selection and provider registration."""
from typing import Optional, Union

import structlog

from chaosmeta.config import settings
from chaosmeta.logging_config import configure_logging
from chaosmeta.services.registry import registry
from chaosmeta.services.resource_lookup import ResourceLookup, get_resource_lookup
from chaosmeta.services.systemdata import register_directory
from chaosmeta.services.systems import SystemType, set_current_system

logger = structlog.get_logger()


def bootstrap(
    system: Optional[Union[str, SystemType]] = None,
    data_dir: Optional[str] = None,
    configure_logs: bool = True,
) -> ResourceLookup:
    """
    Prepare the process-wide registry and return the default lookup.

    Args:
        system: Target system to select; defaults to DEFAULT_SYSTEM
        data_dir: Directory of <system>.json dumps; defaults to SYSTEM_DATA_DIR
        configure_logs: Whether to configure structlog

    Raises:
        ConfigurationError: on an unknown system or unreadable data
    """
    if configure_logs:
        configure_logging()

    selected = set_current_system(system or settings.DEFAULT_SYSTEM)

    directory = data_dir if data_dir is not None else settings.SYSTEM_DATA_DIR
    if directory:
        registered = register_directory(directory, registry)
        logger.info(
            "Registered system data",
            systems=[s.value for s in registered],
            directory=directory,
        )

    logger.info("Bootstrap complete", app=settings.APP_NAME, version=settings.APP_VERSION, system=selected.value)
    return get_resource_lookup()
