from __future__ import annotations
import logging
from typing import Optional

from ..models import (
    AccessTier,
    CustomDomain,
    Encryption,
    EncryptionService,
    EncryptionServices,
    Endpoints,
    Identity,
    IPRule,
    NetworkRuleSet,
    StorageAccountCreateParameters,
    StorageAccountInner,
    StorageAccountProperties,
    StorageAccountUpdateParameters,
    StorageKind,
    StorageSku,
    StorageSkuName,
    VirtualNetworkRule,
)
from ..services.service_registry import STORAGE_ACCOUNTS
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

# the API requires both; these match what the portal picks for a general purpose account
DEFAULT_SKU = StorageSkuName.STANDARD_GRS
DEFAULT_KIND = StorageKind.STORAGE


def _encryption(enabled: bool) -> Encryption:
    service = EncryptionService(enabled=enabled)
    return Encryption(services=EncryptionServices(blob=service, file=service))


class StorageAccount(GroupableResource[StorageAccountInner]):
    kind = STORAGE_ACCOUNTS
    inner_cls = StorageAccountInner

    @property
    def _properties(self) -> StorageAccountProperties:
        return self.inner.properties or StorageAccountProperties()

    @property
    def sku(self) -> Optional[StorageSkuName]:
        return self.inner.sku.name if self.inner.sku else None

    @property
    def account_kind(self) -> Optional[StorageKind]:
        return self.inner.kind

    @property
    def access_tier(self) -> Optional[AccessTier]:
        return self._properties.access_tier

    @property
    def custom_domain(self) -> Optional[CustomDomain]:
        return self._properties.custom_domain

    @property
    def encryption(self) -> Optional[Encryption]:
        return self._properties.encryption

    @property
    def https_traffic_only(self) -> bool:
        return bool(self._properties.enable_https_traffic_only)

    @property
    def network_rule_set(self) -> Optional[NetworkRuleSet]:
        return self._properties.network_rule_set

    @property
    def primary_endpoints(self) -> Optional[Endpoints]:
        return self._properties.primary_endpoints

    @property
    def provisioning_state(self) -> Optional[str]:
        return self._properties.provisioning_state

    @property
    def system_assigned_identity_principal_id(self) -> Optional[str]:
        return self.inner.identity.principal_id if self.inner.identity else None

    def update(self) -> "StorageAccountUpdate":
        return StorageAccountUpdate(StorageAccountUpdateDraft(self))


# -------------------- Definition --------------------

class StorageAccountDraft(Draft):
    kind = STORAGE_ACCOUNTS

    def __init__(self, client, name: str):
        super().__init__(client, name)
        self.sku: Optional[StorageSkuName] = None
        self.account_kind: Optional[StorageKind] = None
        self.access_tier: Optional[AccessTier] = None
        self.custom_domain: Optional[CustomDomain] = None
        self.encryption: Optional[bool] = None
        self.https_only: Optional[bool] = None
        self.identity = False

    @property
    def is_blob_storage(self) -> bool:
        return self.account_kind == StorageKind.BLOB_STORAGE

    def check(self):
        return PayloadValidator.validate_storage_account(self)

    def to_request(self) -> ResourceRequest:
        params = StorageAccountCreateParameters(
            sku=StorageSku(name=self.sku or DEFAULT_SKU),
            kind=self.account_kind or DEFAULT_KIND,
            location=self.region,
            tags=dict(self.tags) or None,
            identity=Identity() if self.identity else None,
            properties=StorageAccountProperties(
                custom_domain=self.custom_domain,
                encryption=_encryption(True) if self.encryption else None,
                access_tier=self.access_tier,
                enable_https_traffic_only=self.https_only,
            ),
        )
        return ResourceRequest(self.kind, self.resource_group, self.name, params.to_body())

    def submit(self, request: ResourceRequest) -> StorageAccount:
        self.ensure_resource_group()
        url = self.client.resource_url(request.resource_group, self.kind, request.name)
        api_version = self.client.api_version(self.kind)
        # creation is accepted with an empty 202 body; read the account back in that case
        data = self.client.put(url, api_version, request.body) or self.client.get(url, api_version)
        return StorageAccount.from_response(self.client, data)


class StorageAccountWithCreate(Creatable, DefinitionWithTags):
    def with_sku(self, sku: StorageSkuName) -> "StorageAccountWithCreate":
        self._draft.sku = StorageSkuName(sku)
        return self

    def with_general_purpose_account_kind(self) -> "StorageAccountWithCreate":
        self._draft.set_once("account_kind", StorageKind.STORAGE)
        return self

    def with_general_purpose_account_kind_v2(self) -> "StorageAccountWithCreate":
        self._draft.set_once("account_kind", StorageKind.STORAGE_V2)
        return self

    def with_blob_storage_account_kind(self) -> "StorageAccountWithCreateAndAccessTier":
        self._draft.set_once("account_kind", StorageKind.BLOB_STORAGE)
        return StorageAccountWithCreateAndAccessTier(self._draft)

    def with_custom_domain(self, name: str, use_sub_domain: bool = False) -> "StorageAccountWithCreate":
        self._draft.custom_domain = CustomDomain(name=name, use_sub_domain=use_sub_domain)
        return self

    def with_encryption(self) -> "StorageAccountWithCreate":
        self._draft.encryption = True
        return self

    def with_only_https_traffic(self) -> "StorageAccountWithCreate":
        self._draft.https_only = True
        return self

    def with_https_and_http_traffic(self) -> "StorageAccountWithCreate":
        self._draft.https_only = False
        return self

    def with_system_assigned_identity(self) -> "StorageAccountWithCreate":
        self._draft.identity = True
        return self


class StorageAccountWithCreateAndAccessTier(StorageAccountWithCreate):
    def with_access_tier(self, tier: AccessTier) -> "StorageAccountWithCreateAndAccessTier":
        self._draft.access_tier = AccessTier(tier)
        return self


class StorageAccountWithGroup(DefinitionWithGroup):
    next_stage = StorageAccountWithCreate


class StorageAccountBlank(DefinitionWithRegion):
    next_stage = StorageAccountWithGroup


# -------------------- Update --------------------

class StorageAccountUpdateDraft(UpdateDraft):
    kind = STORAGE_ACCOUNTS

    def __init__(self, resource: StorageAccount):
        super().__init__(resource)
        self.sku: Optional[StorageSkuName] = None
        self.access_tier: Optional[AccessTier] = None
        self.custom_domain: Optional[CustomDomain] = None
        self.encryption: Optional[bool] = None
        self.https_only: Optional[bool] = None
        self.identity = False
        self.network_rule_set: Optional[NetworkRuleSet] = None
        self.network_rules_are_new = False
        self.default_action_chosen = False

    @property
    def is_blob_storage(self) -> bool:
        return self.resource.account_kind == StorageKind.BLOB_STORAGE

    def network_rules_for_update(self) -> NetworkRuleSet:
        if self.network_rule_set is None:
            existing = self.resource.network_rule_set
            self.network_rule_set = existing.model_copy(deep=True) if existing else NetworkRuleSet()
            self.network_rules_are_new = existing is None
        return self.network_rule_set

    def set_default_action(self, action: str) -> None:
        self.network_rules_for_update().default_action = action
        self.default_action_chosen = True

    def network_rules_for_restriction(self) -> NetworkRuleSet:
        """Rule set to add an IP or subnet rule to; a new set denies everything else unless told otherwise"""
        rules = self.network_rules_for_update()
        if self.network_rules_are_new and not self.default_action_chosen:
            rules.default_action = "Deny"
        return rules

    def check(self):
        return PayloadValidator.validate_storage_account_update(self)

    def to_request(self) -> ResourceRequest:
        params = StorageAccountUpdateParameters(
            sku=StorageSku(name=self.sku) if self.sku else None,
            tags=self.tags,
            identity=Identity() if self.identity else None,
            properties=StorageAccountProperties(
                custom_domain=self.custom_domain,
                encryption=_encryption(self.encryption) if self.encryption is not None else None,
                access_tier=self.access_tier,
                enable_https_traffic_only=self.https_only,
                network_rule_set=self.network_rule_set,
            ),
        )
        return ResourceRequest(
            self.kind, self.resource.resource_group_name, self.name, params.to_body(), method="PATCH"
        )

    def submit(self, request: ResourceRequest) -> StorageAccount:
        resource = self.resource
        data = self.client.patch(resource._url(), resource.api_version, request.body)
        resource.inner = StorageAccountInner.model_validate(data) if data else resource.refresh().inner
        return resource


class StorageAccountUpdate(Appliable, UpdateWithTags):
    def with_sku(self, sku: StorageSkuName) -> "StorageAccountUpdate":
        self._draft.sku = StorageSkuName(sku)
        return self

    def with_access_tier(self, tier: AccessTier) -> "StorageAccountUpdate":
        self._draft.access_tier = AccessTier(tier)
        return self

    def with_custom_domain(self, name: str, use_sub_domain: bool = False) -> "StorageAccountUpdate":
        self._draft.custom_domain = CustomDomain(name=name, use_sub_domain=use_sub_domain)
        return self

    def with_encryption(self) -> "StorageAccountUpdate":
        self._draft.encryption = True
        return self

    def without_encryption(self) -> "StorageAccountUpdate":
        self._draft.encryption = False
        return self

    def with_only_https_traffic(self) -> "StorageAccountUpdate":
        self._draft.https_only = True
        return self

    def with_https_and_http_traffic(self) -> "StorageAccountUpdate":
        self._draft.https_only = False
        return self

    def with_system_assigned_identity(self) -> "StorageAccountUpdate":
        self._draft.identity = True
        return self

    def with_access_from_all_networks(self) -> "StorageAccountUpdate":
        self._draft.set_default_action("Allow")
        return self

    def with_access_from_selected_networks(self) -> "StorageAccountUpdate":
        self._draft.set_default_action("Deny")
        return self

    def with_access_from_ip_address(self, ip_address_or_range: str) -> "StorageAccountUpdate":
        rules = self._draft.network_rules_for_restriction()
        if all(rule.ip_address_or_range != ip_address_or_range for rule in rules.ip_rules):
            rules.ip_rules.append(IPRule(ip_address_or_range=ip_address_or_range))
        return self

    def with_access_from_networks_subnet(self, subnet_id: str) -> "StorageAccountUpdate":
        rules = self._draft.network_rules_for_restriction()
        if all(rule.virtual_network_resource_id.lower() != subnet_id.lower() for rule in rules.virtual_network_rules):
            rules.virtual_network_rules.append(VirtualNetworkRule(virtual_network_resource_id=subnet_id))
        return self


class StorageAccounts(GroupableResources[StorageAccount]):
    resource_cls = StorageAccount

    def define(self, name: str) -> StorageAccountBlank:
        return StorageAccountBlank(StorageAccountDraft(self.client, name))
