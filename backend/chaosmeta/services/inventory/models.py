"""Cluster inventory models."""
from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True, order=True)
class ContainerInfo:
    """A container together with its pod and the app label of that pod."""
    app_label: str
    container_name: str
    pod_name: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "pod_name": self.pod_name,
            "app_label": self.app_label,
            "container_name": self.container_name,
        }
