from __future__ import annotations
import logging
from typing import Optional

from ..models import HubBillingInfoFormat, HubInner, HubProperties
from ..services.service_registry import HUBS
from ..services.validator import PayloadValidator
from .resource import GroupableResource, GroupableResources
from .stages import (
    Appliable,
    Creatable,
    DefinitionWithGroup,
    DefinitionWithRegion,
    DefinitionWithTags,
    Draft,
    ResourceRequest,
    UpdateDraft,
    UpdateWithTags,
)

logger = logging.getLogger(__name__)


class Hub(GroupableResource[HubInner]):
    """A customer-insights hub."""

    kind = HUBS
    inner_cls = HubInner

    @property
    def _properties(self) -> HubProperties:
        return self.inner.properties or HubProperties()

    @property
    def api_endpoint(self) -> Optional[str]:
        return self._properties.api_endpoint

    @property
    def web_endpoint(self) -> Optional[str]:
        return self._properties.web_endpoint

    @property
    def provisioning_state(self) -> Optional[str]:
        return self._properties.provisioning_state

    @property
    def tenant_features(self) -> Optional[int]:
        return self._properties.tenant_features

    @property
    def hub_billing_info(self) -> Optional[HubBillingInfoFormat]:
        return self._properties.hub_billing_info

    def update(self) -> "HubUpdate":
        return HubUpdate(HubUpdateDraft(self))


def _billing(sku_name: Optional[str], min_units: Optional[int], max_units: Optional[int]) -> HubBillingInfoFormat:
    return HubBillingInfoFormat(sku_name=sku_name, min_units=min_units, max_units=max_units)


class HubDraft(Draft):
    kind = HUBS

    def __init__(self, client, name: str):
        super().__init__(client, name)
        self.tenant_features: Optional[int] = None
        self.billing: Optional[HubBillingInfoFormat] = None

    def check(self):
        return PayloadValidator.validate_hub(self)

    def to_request(self) -> ResourceRequest:
        params = HubInner(
            location=self.region,
            tags=dict(self.tags) or None,
            properties=HubProperties(tenant_features=self.tenant_features, hub_billing_info=self.billing),
        )
        return ResourceRequest(self.kind, self.resource_group, self.name, params.to_body())

    def submit(self, request: ResourceRequest) -> Hub:
        self.ensure_resource_group()
        url = self.client.resource_url(request.resource_group, self.kind, request.name)
        api_version = self.client.api_version(self.kind)
        data = self.client.put(url, api_version, request.body) or self.client.get(url, api_version)
        return Hub.from_response(self.client, data)


class HubWithCreate(Creatable, DefinitionWithTags):
    def with_tenant_features(self, tenant_features: int) -> "HubWithCreate":
        self._draft.tenant_features = tenant_features
        return self

    def with_billing_info(
        self, sku_name: str, min_units: Optional[int] = None, max_units: Optional[int] = None
    ) -> "HubWithCreate":
        self._draft.billing = _billing(sku_name, min_units, max_units)
        return self


class HubWithGroup(DefinitionWithGroup):
    next_stage = HubWithCreate


class HubBlank(DefinitionWithRegion):
    next_stage = HubWithGroup


class HubUpdateDraft(UpdateDraft):
    kind = HUBS

    def __init__(self, resource: Hub):
        super().__init__(resource)
        self.tenant_features: Optional[int] = None
        self.billing: Optional[HubBillingInfoFormat] = None

    def check(self):
        return PayloadValidator.validate_hub_update(self)

    def to_request(self) -> ResourceRequest:
        params = HubInner(
            tags=self.tags,
            properties=HubProperties(tenant_features=self.tenant_features, hub_billing_info=self.billing),
        )
        return ResourceRequest(
            self.kind, self.resource.resource_group_name, self.name, params.to_body(), method="PATCH"
        )

    def submit(self, request: ResourceRequest) -> Hub:
        hub = self.resource
        data = self.client.patch(hub._url(), hub.api_version, request.body)
        hub.inner = HubInner.model_validate(data) if data else hub.refresh().inner
        return hub


class HubUpdate(Appliable, UpdateWithTags):
    def with_tenant_features(self, tenant_features: int) -> "HubUpdate":
        self._draft.tenant_features = tenant_features
        return self

    def with_billing_info(
        self, sku_name: str, min_units: Optional[int] = None, max_units: Optional[int] = None
    ) -> "HubUpdate":
        self._draft.billing = _billing(sku_name, min_units, max_units)
        return self


class Hubs(GroupableResources[Hub]):
    resource_cls = Hub

    def define(self, name: str) -> HubBlank:
        return HubBlank(HubDraft(self.client, name))
