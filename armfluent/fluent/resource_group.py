from __future__ import annotations
import logging
from typing import Dict, List, Optional

from ..models import ResourceGroupInner
from ..services.arm_client import ArmClient
from ..services.service_registry import RESOURCE_GROUPS

logger = logging.getLogger(__name__)


class ResourceGroup:
    def __init__(self, client: ArmClient, inner: ResourceGroupInner):
        self.client = client
        self.inner = inner

    @property
    def id(self) -> Optional[str]:
        return self.inner.id

    @property
    def name(self) -> Optional[str]:
        return self.inner.name

    @property
    def region(self) -> Optional[str]:
        return self.inner.location

    @property
    def tags(self) -> Dict[str, str]:
        return dict(self.inner.tags or {})

    @property
    def provisioning_state(self) -> Optional[str]:
        return self.inner.properties.provisioning_state if self.inner.properties else None


class ResourceGroups:
    def __init__(self, client: ArmClient):
        self.client = client

    @property
    def _api_version(self) -> str:
        return self.client.api_version(RESOURCE_GROUPS)

    def _wrap(self, data) -> ResourceGroup:
        return ResourceGroup(self.client, ResourceGroupInner.model_validate(data or {}))

    def create(self, name: str, region: str, tags: Optional[Dict[str, str]] = None) -> ResourceGroup:
        body = ResourceGroupInner(location=region, tags=tags).to_body()
        logger.info("Creating resource group '%s' in '%s'", name, region)
        url = self.client.resource_url(name, RESOURCE_GROUPS)
        return self._wrap(self.client.put(url, self._api_version, body))

    def get(self, name: str) -> ResourceGroup:
        return self._wrap(self.client.get(self.client.resource_url(name, RESOURCE_GROUPS), self._api_version))

    def contains(self, name: str) -> bool:
        return self.client.head(self.client.resource_url(name, RESOURCE_GROUPS), self._api_version) == 204

    def list(self) -> List[ResourceGroup]:
        url = self.client.resource_url(None, RESOURCE_GROUPS)
        return [self._wrap(item) for item in self.client.list(url, self._api_version)]

    def delete(self, name: str) -> None:
        logger.info("Deleting resource group '%s'", name)
        self.client.delete(self.client.resource_url(name, RESOURCE_GROUPS), self._api_version)
