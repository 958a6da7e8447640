"""Load analyzer dumps and register them as providers."""
import json
from pathlib import Path
from typing import List, Optional, Union

import structlog
from pydantic import ValidationError

from chaosmeta.errors import ConfigurationError
from chaosmeta.services.registry.registry import ProviderRegistry
from chaosmeta.services.registry.registry import registry as default_registry
from chaosmeta.services.systemdata.models import SystemData
from chaosmeta.services.systems import SystemType, is_system, parse_system_type

logger = structlog.get_logger()


def load_system_data(path: Union[str, Path]) -> SystemData:
    """
    Read a SystemData JSON dump.

    The file holds ``system_name`` plus the three service -> records maps
    and, optionally, ``all_services``.
    """
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return SystemData.model_validate(raw)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        raise ConfigurationError(f"invalid system data file {path}: {e}") from e


def register_directory(
    directory: Union[str, Path],
    registry: Optional[ProviderRegistry] = None,
) -> List[SystemType]:
    """
    Register every ``<system>.json`` in a directory.

    Files whose stem is not a known system are skipped.
    """
    registry = registry or default_registry
    directory = Path(directory)
    if not directory.is_dir():
        raise ConfigurationError(f"system data directory not found: {directory}")

    registered = []
    for path in sorted(directory.glob("*.json")):
        if not is_system(path.stem):
            logger.warning("Skipping unknown system data file", path=str(path))
            continue
        system = parse_system_type(path.stem)
        data = load_system_data(path)
        registry.register_system_data(system, data)
        registered.append(system)
        logger.info(
            "System data registered",
            system=system.value,
            services=len(data.get_all_services()),
            path=str(path),
        )
    return registered
