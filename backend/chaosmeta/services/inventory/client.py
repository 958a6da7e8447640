"""Cluster inventory client for pod labels and containers."""
import structlog
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException
from tenacity import Retrying, retry_if_exception, stop_after_attempt, wait_exponential
from urllib3.exceptions import HTTPError

from chaosmeta.config import settings
from chaosmeta.errors import UpstreamUnavailableError

logger = structlog.get_logger()

TRANSIENT_STATUS_CODES = {429, 500, 502, 503, 504}


class BaseInventoryClient(ABC):
    """Abstract base class for cluster inventory clients."""

    @abstractmethod
    def get_labels(self, namespace: str, key: str) -> List[str]:
        """Get the sorted, unique values of a pod label in a namespace."""
        pass

    @abstractmethod
    def get_containers_with_app_label(self, namespace: str) -> List[Dict[str, str]]:
        """
        Get every container in a namespace.

        Each entry has ``pod_name``, ``app_label`` and ``container_name``.
        """
        pass


def _is_transient(error: BaseException) -> bool:
    if isinstance(error, ApiException):
        return error.status in TRANSIENT_STATUS_CODES
    return isinstance(error, HTTPError)


class KubernetesInventoryClient(BaseInventoryClient):
    """Inventory client backed by the Kubernetes core API."""

    def __init__(
        self,
        core_v1: Optional[client.CoreV1Api] = None,
        kubeconfig_path: Optional[str] = None,
        app_label_key: Optional[str] = None,
        request_timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
    ):
        self._core_v1 = core_v1
        self.kubeconfig_path = kubeconfig_path if kubeconfig_path is not None else settings.KUBECONFIG_PATH
        self.app_label_key = app_label_key or settings.APP_LABEL_KEY
        self.request_timeout = request_timeout or settings.INVENTORY_REQUEST_TIMEOUT_SECONDS
        self.max_retries = max_retries or settings.INVENTORY_MAX_RETRIES

    @property
    def core_v1(self) -> client.CoreV1Api:
        if self._core_v1 is None:
            self._load_config()
            self._core_v1 = client.CoreV1Api()
        return self._core_v1

    def _load_config(self) -> None:
        if self.kubeconfig_path:
            config.load_kube_config(config_file=self.kubeconfig_path)
            logger.info("Loaded Kubernetes config", path=self.kubeconfig_path)
            return
        try:
            config.load_incluster_config()
            logger.info("Loaded in-cluster Kubernetes config")
        except ConfigException:
            config.load_kube_config()
            logger.info("Loaded local Kubernetes config")

    def _list_pods(self, namespace: str):
        retrying = Retrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
            retry=retry_if_exception(_is_transient),
            reraise=True,
        )
        return retrying(
            self.core_v1.list_namespaced_pod,
            namespace=namespace,
            _request_timeout=self.request_timeout,
        )

    def get_labels(self, namespace: str, key: str) -> List[str]:
        try:
            pods = self._list_pods(namespace)
        except (ApiException, ConfigException, HTTPError) as e:
            logger.error("Failed to list pods", namespace=namespace, key=key, error=str(e))
            raise UpstreamUnavailableError("get_labels", namespace, key) from e

        values = {
            pod.metadata.labels[key]
            for pod in pods.items
            if pod.metadata.labels and key in pod.metadata.labels
        }
        return sorted(values)

    def get_containers_with_app_label(self, namespace: str) -> List[Dict[str, str]]:
        try:
            pods = self._list_pods(namespace)
        except (ApiException, ConfigException, HTTPError) as e:
            logger.error("Failed to list pods", namespace=namespace, error=str(e))
            raise UpstreamUnavailableError("get_containers_with_app_label", namespace) from e

        result = []
        for pod in pods.items:
            labels = pod.metadata.labels or {}
            app_label = labels.get(self.app_label_key, "")
            for container in pod.spec.containers or []:
                result.append({
                    "pod_name": pod.metadata.name,
                    "app_label": app_label,
                    "container_name": container.name,
                })
        return result
