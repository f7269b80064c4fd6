"""
Service Registry for Resource Manager resource types

This module provides a registry pattern for mapping resource kinds
to the provider namespace, URL path and api-version used to address them.
This keeps the transport free of per-service constants and makes it
easier to add new resource types.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class ResourceType:
    """Where a resource type lives under a resource group"""

    namespace: Optional[str]
    path: Tuple[str, ...]
    api_version: str


class ServiceRegistry:
    """Registry for Resource Manager resource types"""

    def __init__(self):
        # Registry pattern: Map resource kinds to their addressing information
        self._service_registry: Dict[str, ResourceType] = {
            "resources.resourcegroups": ResourceType(None, ("resourcegroups",), "2021-04-01"),
            "storage.accounts": ResourceType("Microsoft.Storage", ("storageAccounts",), "2017-10-01"),
            "containerregistry.registries": ResourceType(
                "Microsoft.ContainerRegistry", ("registries",), "2017-10-01"
            ),
            "containerregistry.webhooks": ResourceType(
                "Microsoft.ContainerRegistry", ("registries", "webhooks"), "2017-10-01"
            ),
            "customerinsights.hubs": ResourceType("Microsoft.CustomerInsights", ("hubs",), "2017-04-26"),
        }

    def get(self, kind: str) -> ResourceType:
        """
        Get the resource type registered for a given kind.

        Args:
            kind: The resource kind (e.g., "containerregistry.registries")

        Returns:
            The ResourceType describing namespace, path and api-version

        Raises:
            ValueError: If the kind is not supported
        """
        resource_type = self._service_registry.get(kind)
        if resource_type:
            return resource_type
        else:
            supported = ", ".join(self._service_registry.keys())
            raise ValueError(
                f"Unsupported kind: {kind}. "
                f"Supported kinds: {supported}"
            )

    def get_supported_kinds(self) -> list:
        """Get list of all supported resource kinds"""
        return list(self._service_registry.keys())

    def is_supported(self, kind: str) -> bool:
        """Check if a resource kind is supported"""
        return kind in self._service_registry


RESOURCE_GROUPS = "resources.resourcegroups"
STORAGE_ACCOUNTS = "storage.accounts"
REGISTRIES = "containerregistry.registries"
WEBHOOKS = "containerregistry.webhooks"
HUBS = "customerinsights.hubs"
