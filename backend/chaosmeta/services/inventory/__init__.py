"""
Cluster inventory: pod label values and containers per namespace.
"""

from chaosmeta.services.inventory.models import ContainerInfo
from chaosmeta.services.inventory.client import BaseInventoryClient, KubernetesInventoryClient
from chaosmeta.services.inventory.cache import InventoryCache

__all__ = [
    "ContainerInfo",
    "BaseInventoryClient",
    "KubernetesInventoryClient",
    "InventoryCache",
]
