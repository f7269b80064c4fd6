from __future__ import annotations
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from ..models import Resource
from ..services.arm_client import ArmClient
from ..services.utils import resource_group_from_id

InnerT = TypeVar("InnerT", bound=Resource)
HandleT = TypeVar("HandleT", bound="GroupableResource")


class GroupableResource(Generic[InnerT]):
    """Client-side snapshot of a resource that lives in a resource group."""

    kind = ""
    inner_cls: Type[Resource] = Resource

    def __init__(self, client: ArmClient, inner: InnerT):
        self.client = client
        self.inner = inner

    @classmethod
    def from_response(cls, client: ArmClient, data: Optional[Dict[str, Any]]):
        return cls(client, cls.inner_cls.model_validate(data or {}))

    @property
    def id(self) -> Optional[str]:
        return self.inner.id

    @property
    def name(self) -> Optional[str]:
        return self.inner.name

    @property
    def type(self) -> Optional[str]:
        return self.inner.type

    @property
    def region(self) -> Optional[str]:
        return self.inner.location

    @property
    def tags(self) -> Dict[str, str]:
        return dict(self.inner.tags or {})

    @property
    def resource_group_name(self) -> Optional[str]:
        return resource_group_from_id(self.id)

    def _url(self, action: Optional[str] = None) -> str:
        return self.client.resource_url(self.resource_group_name, self.kind, self.name, action=action)

    @property
    def api_version(self) -> str:
        return self.client.api_version(self.kind)

    def refresh(self):
        """Re-read the resource; raises NotFoundError if it was deleted."""
        self.inner = self.inner_cls.model_validate(self.client.get(self._url(), self.api_version) or {})
        return self

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"


class GroupableResources(Generic[HandleT]):
    """Collection-level operations for one resource kind."""

    resource_cls: Type[GroupableResource] = GroupableResource

    def __init__(self, client: ArmClient):
        self.client = client

    @property
    def kind(self) -> str:
        return self.resource_cls.kind

    def _wrap(self, data: Optional[Dict[str, Any]]) -> HandleT:
        return self.resource_cls.from_response(self.client, data)

    def get_by_resource_group(self, resource_group: str, name: str) -> HandleT:
        url = self.client.resource_url(resource_group, self.kind, name)
        return self._wrap(self.client.get(url, self.client.api_version(self.kind)))

    def list_by_resource_group(self, resource_group: str) -> List[HandleT]:
        url = self.client.resource_url(resource_group, self.kind)
        return [self._wrap(item) for item in self.client.list(url, self.client.api_version(self.kind))]

    def delete_by_resource_group(self, resource_group: str, name: str) -> None:
        url = self.client.resource_url(resource_group, self.kind, name)
        self.client.delete(url, self.client.api_version(self.kind))
