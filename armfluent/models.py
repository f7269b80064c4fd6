from __future__ import annotations
from datetime import datetime
from enum import Enum
from typing import List, Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field


class ArmModel(BaseModel):
    """Base for every request/response body exchanged with Resource Manager.

    Fields carry the JSON property name as their alias. Server-populated
    fields are declared with ``exclude=True`` so they are parsed from
    responses but never written back.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_body(self) -> Dict[str, Any]:
        """
        Serialize to a request body holding only the fields that were set.

        Returns:
            Dict keyed by JSON property names. ``None`` values and nested
            models that serialize to nothing are left out; ``False`` and
            empty maps are kept.
        """
        body = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        for name, field in type(self).model_fields.items():
            value = getattr(self, name)
            key = field.alias or name
            if isinstance(value, ArmModel) and key in body:
                nested = value.to_body()
                if nested:
                    body[key] = nested
                else:
                    del body[key]
        return body


class AzureCreds(BaseModel):
    clientId: str
    clientSecret: str
    subscriptionId: str
    tenantId: str


class Resource(ArmModel):
    id: Optional[str] = Field(default=None, exclude=True)
    name: Optional[str] = Field(default=None, exclude=True)
    type: Optional[str] = Field(default=None, exclude=True)
    location: Optional[str] = None
    tags: Optional[Dict[str, str]] = None


# -------------------- Resource groups --------------------

class ResourceGroupProperties(ArmModel):
    provisioning_state: Optional[str] = Field(default=None, alias="provisioningState", exclude=True)


class ResourceGroupInner(Resource):
    properties: Optional[ResourceGroupProperties] = None


# -------------------- Container registry --------------------

class SkuName(str, Enum):
    CLASSIC = "Classic"
    BASIC = "Basic"
    STANDARD = "Standard"
    PREMIUM = "Premium"

    @property
    def is_managed(self) -> bool:
        return self is not SkuName.CLASSIC


class Sku(ArmModel):
    name: SkuName
    tier: Optional[str] = Field(default=None, exclude=True)


class StorageAccountReference(ArmModel):
    id: str


class RegistryProperties(ArmModel):
    login_server: Optional[str] = Field(default=None, alias="loginServer", exclude=True)
    creation_date: Optional[datetime] = Field(default=None, alias="creationDate", exclude=True)
    provisioning_state: Optional[str] = Field(default=None, alias="provisioningState", exclude=True)
    admin_user_enabled: Optional[bool] = Field(default=None, alias="adminUserEnabled")
    storage_account: Optional[StorageAccountReference] = Field(default=None, alias="storageAccount")


class RegistryInner(Resource):
    sku: Optional[Sku] = None
    properties: Optional[RegistryProperties] = None


class RegistryUpdateParameters(ArmModel):
    tags: Optional[Dict[str, str]] = None
    sku: Optional[Sku] = None
    properties: RegistryProperties = Field(default_factory=RegistryProperties)


class AccessKeyType(str, Enum):
    PASSWORD = "password"
    PASSWORD2 = "password2"


class RegistryPassword(ArmModel):
    name: Optional[AccessKeyType] = None
    value: Optional[str] = None


class RegistryCredentials(ArmModel):
    username: Optional[str] = None
    passwords: List[RegistryPassword] = Field(default_factory=list)

    def access_key(self, key_type: AccessKeyType) -> Optional[str]:
        for password in self.passwords:
            if password.name == key_type:
                return password.value
        return None


class RegistryUsage(ArmModel):
    name: Optional[str] = None
    limit: Optional[int] = None
    current_value: Optional[int] = Field(default=None, alias="currentValue")
    unit: Optional[str] = None


# -------------------- Webhooks --------------------

class WebhookAction(str, Enum):
    PUSH = "push"
    DELETE = "delete"
    QUARANTINE = "quarantine"


class WebhookStatus(str, Enum):
    ENABLED = "enabled"
    DISABLED = "disabled"


class WebhookProperties(ArmModel):
    service_uri: Optional[str] = Field(default=None, alias="serviceUri")
    custom_headers: Optional[Dict[str, str]] = Field(default=None, alias="customHeaders")
    status: Optional[WebhookStatus] = None
    scope: Optional[str] = None
    actions: Optional[List[WebhookAction]] = None
    provisioning_state: Optional[str] = Field(default=None, alias="provisioningState", exclude=True)


class WebhookInner(Resource):
    properties: Optional[WebhookProperties] = None


class WebhookCreateParameters(ArmModel):
    location: str
    tags: Optional[Dict[str, str]] = None
    properties: WebhookProperties


class WebhookUpdateParameters(ArmModel):
    tags: Optional[Dict[str, str]] = None
    properties: WebhookProperties = Field(default_factory=WebhookProperties)


class EventInfo(ArmModel):
    id: Optional[str] = None


# -------------------- Storage --------------------

class StorageSkuName(str, Enum):
    STANDARD_LRS = "Standard_LRS"
    STANDARD_GRS = "Standard_GRS"
    STANDARD_RAGRS = "Standard_RAGRS"
    STANDARD_ZRS = "Standard_ZRS"
    PREMIUM_LRS = "Premium_LRS"


class StorageKind(str, Enum):
    STORAGE = "Storage"
    STORAGE_V2 = "StorageV2"
    BLOB_STORAGE = "BlobStorage"


class AccessTier(str, Enum):
    HOT = "Hot"
    COOL = "Cool"


class StorageSku(ArmModel):
    name: StorageSkuName
    tier: Optional[str] = Field(default=None, exclude=True)


class CustomDomain(ArmModel):
    name: str
    use_sub_domain: Optional[bool] = Field(default=None, alias="useSubDomain")


class EncryptionService(ArmModel):
    enabled: Optional[bool] = None
    last_enabled_time: Optional[datetime] = Field(default=None, alias="lastEnabledTime", exclude=True)


class EncryptionServices(ArmModel):
    blob: Optional[EncryptionService] = None
    file: Optional[EncryptionService] = None
    table: Optional[EncryptionService] = Field(default=None, exclude=True)
    queue: Optional[EncryptionService] = Field(default=None, exclude=True)


class KeyVaultProperties(ArmModel):
    key_name: Optional[str] = Field(default=None, alias="keyname")
    key_version: Optional[str] = Field(default=None, alias="keyversion")
    key_vault_uri: Optional[str] = Field(default=None, alias="keyvaulturi")


class Encryption(ArmModel):
    services: Optional[EncryptionServices] = None
    key_source: str = Field(default="Microsoft.Storage", alias="keySource")
    key_vault_properties: Optional[KeyVaultProperties] = Field(default=None, alias="keyvaultproperties")


class Identity(ArmModel):
    principal_id: Optional[str] = Field(default=None, alias="principalId", exclude=True)
    tenant_id: Optional[str] = Field(default=None, alias="tenantId", exclude=True)
    type: str = "SystemAssigned"


class IPRule(ArmModel):
    ip_address_or_range: str = Field(alias="value")
    action: str = "Allow"


class VirtualNetworkRule(ArmModel):
    virtual_network_resource_id: str = Field(alias="id")
    action: str = "Allow"
    state: Optional[str] = Field(default=None, exclude=True)


class NetworkRuleSet(ArmModel):
    bypass: Optional[str] = None
    virtual_network_rules: List[VirtualNetworkRule] = Field(default_factory=list, alias="virtualNetworkRules")
    ip_rules: List[IPRule] = Field(default_factory=list, alias="ipRules")
    default_action: str = Field(default="Allow", alias="defaultAction")


class Endpoints(ArmModel):
    blob: Optional[str] = None
    queue: Optional[str] = None
    table: Optional[str] = None
    file: Optional[str] = None


class StorageAccountProperties(ArmModel):
    provisioning_state: Optional[str] = Field(default=None, alias="provisioningState", exclude=True)
    primary_endpoints: Optional[Endpoints] = Field(default=None, alias="primaryEndpoints", exclude=True)
    creation_time: Optional[datetime] = Field(default=None, alias="creationTime", exclude=True)
    custom_domain: Optional[CustomDomain] = Field(default=None, alias="customDomain")
    encryption: Optional[Encryption] = None
    access_tier: Optional[AccessTier] = Field(default=None, alias="accessTier")
    enable_https_traffic_only: Optional[bool] = Field(default=None, alias="supportsHttpsTrafficOnly")
    network_rule_set: Optional[NetworkRuleSet] = Field(default=None, alias="networkAcls")


class StorageAccountInner(Resource):
    sku: Optional[StorageSku] = None
    kind: Optional[StorageKind] = None
    identity: Optional[Identity] = None
    properties: Optional[StorageAccountProperties] = None


class StorageAccountCreateParameters(ArmModel):
    sku: StorageSku
    kind: StorageKind
    location: str
    tags: Optional[Dict[str, str]] = None
    identity: Optional[Identity] = None
    properties: StorageAccountProperties = Field(default_factory=StorageAccountProperties)


class StorageAccountUpdateParameters(ArmModel):
    """The parameters that can be provided when updating the storage account properties."""

    sku: Optional[StorageSku] = None
    tags: Optional[Dict[str, str]] = None
    identity: Optional[Identity] = None
    properties: StorageAccountProperties = Field(default_factory=StorageAccountProperties)


# -------------------- Customer insights --------------------

class HubBillingInfoFormat(ArmModel):
    sku_name: Optional[str] = Field(default=None, alias="skuName")
    min_units: Optional[int] = Field(default=None, alias="minUnits")
    max_units: Optional[int] = Field(default=None, alias="maxUnits")


class HubProperties(ArmModel):
    api_endpoint: Optional[str] = Field(default=None, alias="apiEndpoint", exclude=True)
    web_endpoint: Optional[str] = Field(default=None, alias="webEndpoint", exclude=True)
    provisioning_state: Optional[str] = Field(default=None, alias="provisioningState", exclude=True)
    tenant_features: Optional[int] = Field(default=None, alias="tenantFeatures")
    hub_billing_info: Optional[HubBillingInfoFormat] = Field(default=None, alias="hubBillingInfo")


class HubInner(Resource):
    """Hub resource."""

    properties: Optional[HubProperties] = None
