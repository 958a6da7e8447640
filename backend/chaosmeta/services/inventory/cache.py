"""
Label/Container inventory cache.

Thin cache over the cluster inventory client. Label values are keyed by
(namespace prefix, label key), so all numbered deployments of one system
share an entry. Containers are keyed by the full namespace because pod
names differ between deployments.
"""

from typing import Iterable, List, Optional, Tuple

import structlog

from chaosmeta.errors import ChaosMetaError, UpstreamUnavailableError
from chaosmeta.services.cache import SingleFlightCache
from chaosmeta.services.inventory.client import BaseInventoryClient, KubernetesInventoryClient
from chaosmeta.services.inventory.models import ContainerInfo
from chaosmeta.services.systems import extract_namespace_prefix

logger = structlog.get_logger()


class InventoryCache:
    """Caches pod label values per namespace prefix and containers per namespace."""

    def __init__(self, client: Optional[BaseInventoryClient] = None):
        self._client = client
        self._labels: SingleFlightCache[Tuple[str, str], Tuple[str, ...]] = SingleFlightCache("app_labels")
        self._containers: SingleFlightCache[str, Tuple[ContainerInfo, ...]] = SingleFlightCache("containers")

    @property
    def client(self) -> BaseInventoryClient:
        if self._client is None:
            self._client = KubernetesInventoryClient()
        return self._client

    def get_labels(self, namespace: str, key: str) -> Tuple[str, ...]:
        """
        Sorted pod label values for a namespace.

        Empty results are returned but not cached.
        """
        prefix = extract_namespace_prefix(namespace)

        def fetch() -> Tuple[str, ...]:
            labels = self._call("get_labels", namespace, key, lambda: self.client.get_labels(namespace, key))
            logger.debug("Fetched labels", namespace=namespace, key=key, count=len(labels))
            return tuple(sorted(set(labels)))

        return self._labels.get_or_build((prefix, key), fetch, should_store=lambda labels: len(labels) > 0)

    def get_containers(self, namespace: str) -> Tuple[ContainerInfo, ...]:
        """Containers with a non-empty app label, sorted by (app label, container, pod)."""
        # Rejects malformed namespaces before any upstream call
        extract_namespace_prefix(namespace)

        def fetch() -> Tuple[ContainerInfo, ...]:
            raw = self._call(
                "get_containers_with_app_label",
                namespace,
                None,
                lambda: self.client.get_containers_with_app_label(namespace),
            )
            containers = {
                ContainerInfo(
                    app_label=c.get("app_label", ""),
                    container_name=c.get("container_name", ""),
                    pod_name=c.get("pod_name", ""),
                )
                for c in raw
                if c.get("app_label")
            }
            return tuple(sorted(containers))

        return self._containers.get_or_build(namespace, fetch)

    def get_containers_by_service(self, namespace: str, service_name: str) -> List[str]:
        return sorted({
            c.container_name for c in self.get_containers(namespace) if c.app_label == service_name
        })

    def get_pods_by_service(self, namespace: str, service_name: str) -> List[str]:
        return sorted({
            c.pod_name for c in self.get_containers(namespace) if c.app_label == service_name
        })

    def get_containers_and_pods_by_services(
        self,
        namespace: str,
        service_names: Iterable[str],
    ) -> Tuple[List[str], List[str]]:
        """Containers and pods belonging to any of the given services."""
        services = set(service_names)
        matched = [c for c in self.get_containers(namespace) if c.app_label in services]
        containers = sorted({c.container_name for c in matched})
        pods = sorted({c.pod_name for c in matched})
        return containers, pods

    def invalidate(self) -> None:
        self._labels.invalidate()
        self._containers.invalidate()

    @staticmethod
    def _call(operation: str, namespace: str, key: Optional[str], fn):
        try:
            return fn()
        except ChaosMetaError:
            raise
        except Exception as e:
            logger.error("Inventory call failed", operation=operation, namespace=namespace, error=str(e))
            raise UpstreamUnavailableError(operation, namespace, key) from e
