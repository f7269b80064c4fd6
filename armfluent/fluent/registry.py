"""
Container registries.

Definition stages (each call returns the next stage):

    RegistryBlank.with_region
      -> RegistryWithGroup.with_existing_resource_group / with_new_resource_group
      -> RegistryWithSku.with_classic_sku       -> RegistryWithStorageAccount -> RegistryWithCreate
                        .with_basic_sku / with_standard_sku / with_premium_sku -> RegistryWithCreate
      -> RegistryWithCreate: admin user, webhooks, tags, create()

Only the Classic tier stores images in a caller-supplied storage account,
so only with_classic_sku() leads through RegistryWithStorageAccount.
"""

from __future__ import annotations
import copy
import logging
from concurrent.futures import Future
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional, Union

from ..models import (
    AccessKeyType,
    RegistryCredentials,
    RegistryInner,
    RegistryProperties,
    RegistryUpdateParameters,
    RegistryUsage,
    Sku,
    SkuName,
    StorageAccountReference,
)
from ..services.naming import normalize_region
from ..services.service_registry import REGISTRIES
from ..services.utils import name_from_id
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
    Stage,
    UpdateDraft,
    UpdateWithTags,
)
from .storage import StorageAccount, StorageAccountDraft, StorageAccountWithCreate
from .webhook import (
    WebhookBlank,
    WebhookDraft,
    WebhookOperations,
    WebhookUpdate,
    WebhookUpdateDraft,
)

logger = logging.getLogger(__name__)


class Registry(GroupableResource[RegistryInner]):
    """Client-side representation of an Azure container registry."""

    kind = REGISTRIES
    inner_cls = RegistryInner

    @property
    def _properties(self) -> RegistryProperties:
        return self.inner.properties or RegistryProperties()

    @property
    def sku(self) -> Optional[SkuName]:
        return self.inner.sku.name if self.inner.sku else None

    @property
    def login_server_url(self) -> Optional[str]:
        return self._properties.login_server

    @property
    def creation_date(self) -> Optional[datetime]:
        return self._properties.creation_date

    @property
    def admin_user_enabled(self) -> bool:
        return bool(self._properties.admin_user_enabled)

    @property
    def storage_account_id(self) -> Optional[str]:
        """None for the managed tiers"""
        storage = self._properties.storage_account
        return storage.id if storage else None

    @property
    def storage_account_name(self) -> Optional[str]:
        return name_from_id(self.storage_account_id) if self.storage_account_id else None

    @property
    def webhooks(self) -> WebhookOperations:
        return WebhookOperations(self.client, self.resource_group_name, self.name)

    def get_credentials(self) -> RegistryCredentials:
        data = self.client.post(self._url(action="listCredentials"), self.api_version)
        return RegistryCredentials.model_validate(data or {})

    def get_credentials_async(self) -> Future:
        return self.client.submit(self.get_credentials)

    def regenerate_credential(self, key_type: AccessKeyType) -> RegistryCredentials:
        """
        Regenerate one of the admin user passwords.

        Args:
            key_type: which password to regenerate

        Returns:
            The credentials after regeneration
        """
        body = {"name": AccessKeyType(key_type).value}
        data = self.client.post(self._url(action="regenerateCredential"), self.api_version, body)
        return RegistryCredentials.model_validate(data or {})

    def regenerate_credential_async(self, key_type: AccessKeyType) -> Future:
        return self.client.submit(self.regenerate_credential, key_type)

    def list_quota_usages(self) -> List[RegistryUsage]:
        data = self.client.get(self._url(action="listUsages"), self.api_version) or {}
        return [RegistryUsage.model_validate(item) for item in data.get("value", [])]

    def list_quota_usages_async(self) -> Future:
        return self.client.submit(self.list_quota_usages)

    def update(self) -> "RegistryUpdate":
        return RegistryUpdate(RegistryUpdateDraft(self))


# -------------------- Definition --------------------

@dataclass
class StorageAccountChoice:
    id: Optional[str] = None
    known_region: Optional[str] = None
    draft: Optional[StorageAccountDraft] = None

    @property
    def region(self) -> Optional[str]:
        if self.draft is not None:
            return self.draft.region
        return self.known_region

    def __str__(self) -> str:
        return self.id or (self.draft.name if self.draft else "")


class RegistryDraft(Draft):
    kind = REGISTRIES

    def __init__(self, client, name: str):
        super().__init__(client, name)
        self.sku: Optional[SkuName] = None
        self.storage_account: Optional[StorageAccountChoice] = None
        self.admin_user_enabled: Optional[bool] = None
        self.webhooks: List[WebhookDraft] = []

    def check(self):
        return PayloadValidator.validate_registry(self)

    def to_request(self) -> ResourceRequest:
        choice = self.storage_account
        storage_ref = StorageAccountReference(id=choice.id) if choice and choice.id else None
        params = RegistryInner(
            location=self.region,
            tags=dict(self.tags) or None,
            sku=Sku(name=self.sku),
            properties=RegistryProperties(
                admin_user_enabled=self.admin_user_enabled,
                storage_account=storage_ref,
            ),
        )
        request = ResourceRequest(self.kind, self.resource_group, self.name, params.to_body())
        if choice and choice.draft:
            request.dependencies.append(choice.draft.to_request())
        request.children.extend(webhook.to_request() for webhook in self.webhooks)
        return request

    def submit(self, request: ResourceRequest) -> Registry:
        self.ensure_resource_group()
        body = copy.deepcopy(request.body)
        choice = self.storage_account
        if choice and choice.draft:
            account = choice.draft.submit(request.dependencies[0])
            body.setdefault("properties", {})["storageAccount"] = {"id": account.id}

        url = self.client.resource_url(request.resource_group, self.kind, request.name)
        api_version = self.client.api_version(self.kind)
        data = self.client.put(url, api_version, body) or self.client.get(url, api_version)
        registry = Registry.from_response(self.client, data)

        for webhook, child in zip(self.webhooks, request.children):
            logger.info("Creating webhook '%s' on registry '%s'", child.name, request.name)
            webhook.submit(child)
        return registry


class RegistryWithCreate(Creatable, DefinitionWithTags):
    def with_registry_name_as_admin_user(self) -> "RegistryWithCreate":
        self._draft.admin_user_enabled = True
        return self

    def define_webhook(self, name: str) -> WebhookBlank:
        """Begin the definition of a webhook; attach() returns to this stage."""
        return WebhookBlank(WebhookDraft(self._draft.client, name, self._draft), self)


class RegistryWithStorageAccount(Stage):
    def with_existing_storage_account(self, storage_account: Union[str, StorageAccount]) -> RegistryWithCreate:
        """
        Use an existing storage account, given as a resource id or a StorageAccount.

        The account must be in the registry's region; that is checked on create()
        whenever the account's region is known.
        """
        if isinstance(storage_account, str):
            choice = StorageAccountChoice(id=storage_account)
        else:
            choice = StorageAccountChoice(
                id=storage_account.id, known_region=normalize_region(storage_account.region)
            )
        self._draft.set_once("storage_account", choice)
        return RegistryWithCreate(self._draft)

    def with_new_storage_account(self, storage_account: Union[str, StorageAccountWithCreate]) -> RegistryWithCreate:
        """
        Create a storage account together with the registry.

        A name creates a default account in the registry's region and group;
        a storage account definition is created as defined.
        """
        if isinstance(storage_account, str):
            draft = StorageAccountDraft(self._draft.client, storage_account)
            draft.region = self._draft.region
            draft.resource_group = self._draft.resource_group
        else:
            draft = storage_account._draft
        self._draft.set_once("storage_account", StorageAccountChoice(draft=draft))
        return RegistryWithCreate(self._draft)


class RegistryWithSku(Stage):
    def _select(self, sku: SkuName) -> None:
        self._draft.set_once("sku", sku, "SKU")

    def with_classic_sku(self) -> RegistryWithStorageAccount:
        self._select(SkuName.CLASSIC)
        return RegistryWithStorageAccount(self._draft)

    def with_basic_sku(self) -> RegistryWithCreate:
        self._select(SkuName.BASIC)
        return RegistryWithCreate(self._draft)

    def with_standard_sku(self) -> RegistryWithCreate:
        self._select(SkuName.STANDARD)
        return RegistryWithCreate(self._draft)

    def with_premium_sku(self) -> RegistryWithCreate:
        self._select(SkuName.PREMIUM)
        return RegistryWithCreate(self._draft)


class RegistryWithGroup(DefinitionWithGroup):
    next_stage = RegistryWithSku


class RegistryBlank(DefinitionWithRegion):
    next_stage = RegistryWithGroup


# -------------------- Update --------------------

class RegistryUpdateDraft(UpdateDraft):
    kind = REGISTRIES

    def __init__(self, resource: Registry):
        super().__init__(resource)
        self.sku: Optional[SkuName] = None
        self.admin_user_enabled: Optional[bool] = None
        self.webhooks: List[WebhookDraft] = []
        self.webhook_updates: List[WebhookUpdateDraft] = []
        self.webhooks_to_remove: List[str] = []

    @property
    def region(self) -> Optional[str]:
        return self.resource.region

    @property
    def resource_group(self) -> Optional[str]:
        return self.resource.resource_group_name

    def check(self):
        return PayloadValidator.validate_registry_update(self)

    def to_request(self) -> ResourceRequest:
        params = RegistryUpdateParameters(
            tags=self.tags,
            sku=Sku(name=self.sku) if self.sku else None,
            properties=RegistryProperties(admin_user_enabled=self.admin_user_enabled),
        )
        request = ResourceRequest(
            self.kind, self.resource_group, self.name, params.to_body(), method="PATCH"
        )
        request.children.extend(webhook.to_request() for webhook in self.webhooks)
        request.children.extend(webhook.to_request() for webhook in self.webhook_updates)
        return request

    def submit(self, request: ResourceRequest) -> Registry:
        registry = self.resource
        if request.body:
            data = self.client.patch(registry._url(), registry.api_version, request.body)
            registry.inner = RegistryInner.model_validate(data) if data else registry.refresh().inner
        else:
            # nothing to patch on the registry itself, but it must still exist
            registry.refresh()

        children: List[Any] = [*self.webhooks, *self.webhook_updates]
        for webhook, child in zip(children, request.children):
            webhook.submit(child)
        for name in self.webhooks_to_remove:
            logger.info("Removing webhook '%s' from registry '%s'", name, registry.name)
            registry.webhooks.delete(name)
        return registry


class RegistryUpdate(Appliable, UpdateWithTags):
    def with_registry_name_as_admin_user(self) -> "RegistryUpdate":
        self._draft.admin_user_enabled = True
        return self

    def without_registry_name_as_admin_user(self) -> "RegistryUpdate":
        self._draft.admin_user_enabled = False
        return self

    def with_basic_sku(self) -> "RegistryUpdate":
        self._draft.sku = SkuName.BASIC
        return self

    def with_standard_sku(self) -> "RegistryUpdate":
        self._draft.sku = SkuName.STANDARD
        return self

    def with_premium_sku(self) -> "RegistryUpdate":
        self._draft.sku = SkuName.PREMIUM
        return self

    def define_webhook(self, name: str) -> WebhookBlank:
        return WebhookBlank(WebhookDraft(self._draft.client, name, self._draft), self)

    def update_webhook(self, name: str) -> WebhookUpdate:
        return WebhookUpdate(WebhookUpdateDraft(self._draft.client, name, self._draft), self)

    def without_webhook(self, name: str) -> "RegistryUpdate":
        if name not in self._draft.webhooks_to_remove:
            self._draft.webhooks_to_remove.append(name)
        return self


class Registries(GroupableResources[Registry]):
    resource_cls = Registry

    def define(self, name: str) -> RegistryBlank:
        return RegistryBlank(RegistryDraft(self.client, name))
