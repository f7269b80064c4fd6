"""
Registry webhooks, defined inline while defining or updating a registry.

A webhook definition is parameterized by the parent stage it returns to:
``attach()`` (definition) and ``parent()`` (update) hand back exactly the
registry stage that started the child, with the child queued on the
registry's draft. Nothing is sent until the registry itself is created or
updated.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, List, Mapping, Optional

from ..errors import ValidationError
from ..models import (
    EventInfo,
    WebhookAction,
    WebhookCreateParameters,
    WebhookInner,
    WebhookProperties,
    WebhookStatus,
    WebhookUpdateParameters,
)
from ..services.arm_client import ArmClient
from ..services.service_registry import WEBHOOKS
from ..services.utils import parse_resource_id
from ..services.validator import PayloadValidator
from .resource import GroupableResource
from .stages import BaseDraft, ResourceRequest, Stage

logger = logging.getLogger(__name__)


def _status(enabled: Optional[bool]) -> Optional[WebhookStatus]:
    if enabled is None:
        return None
    return WebhookStatus.ENABLED if enabled else WebhookStatus.DISABLED


class Webhook(GroupableResource[WebhookInner]):
    kind = WEBHOOKS
    inner_cls = WebhookInner

    @property
    def registry_name(self) -> Optional[str]:
        return parse_resource_id(self.id).get("registries")

    @property
    def _properties(self) -> WebhookProperties:
        return self.inner.properties or WebhookProperties()

    @property
    def actions(self) -> List[WebhookAction]:
        return list(self._properties.actions or [])

    @property
    def scope(self) -> Optional[str]:
        return self._properties.scope

    @property
    def is_enabled(self) -> bool:
        return self._properties.status == WebhookStatus.ENABLED

    @property
    def provisioning_state(self) -> Optional[str]:
        return self._properties.provisioning_state

    def _url(self, action: Optional[str] = None) -> str:
        return self.client.resource_url(
            self.resource_group_name, self.kind, self.registry_name, self.name, action=action
        )

    def ping(self) -> Optional[str]:
        """Trigger a ping event; returns the id of the event"""
        data = self.client.post(self._url(action="ping"), self.api_version)
        return EventInfo.model_validate(data or {}).id


class WebhookOperations:
    """Entry point to manage the webhooks of one registry."""

    def __init__(self, client: ArmClient, resource_group: str, registry_name: str):
        self.client = client
        self.resource_group = resource_group
        self.registry_name = registry_name

    @property
    def _api_version(self) -> str:
        return self.client.api_version(WEBHOOKS)

    def _url(self, *name: str) -> str:
        return self.client.resource_url(self.resource_group, WEBHOOKS, self.registry_name, *name)

    def list(self) -> List[Webhook]:
        return [Webhook.from_response(self.client, item) for item in self.client.list(self._url(), self._api_version)]

    def get(self, name: str) -> Webhook:
        return Webhook.from_response(self.client, self.client.get(self._url(name), self._api_version))

    def delete(self, name: str) -> None:
        self.client.delete(self._url(name), self._api_version)


# -------------------- Drafts --------------------

class WebhookDraft(BaseDraft):
    kind = WEBHOOKS

    def __init__(self, client: ArmClient, name: str, parent: Any):
        super().__init__(client)
        self.name = name
        self.parent = parent
        self.actions: List[WebhookAction] = []
        self.service_uri: Optional[str] = None
        self.custom_headers: Dict[str, str] = {}
        self.scope: Optional[str] = None
        self.enabled: Optional[bool] = None
        self.tags: Dict[str, str] = {}

    def check(self):
        return PayloadValidator.validate_webhook(self)

    def to_request(self) -> ResourceRequest:
        params = WebhookCreateParameters(
            location=self.parent.region,
            tags=dict(self.tags) or None,
            properties=WebhookProperties(
                service_uri=self.service_uri,
                custom_headers=dict(self.custom_headers) or None,
                status=_status(self.enabled),
                scope=self.scope,
                actions=list(self.actions),
            ),
        )
        return ResourceRequest(self.kind, self.parent.resource_group, self.name, params.to_body())

    def submit(self, request: ResourceRequest) -> Webhook:
        url = self.client.resource_url(request.resource_group, self.kind, self.parent.name, request.name)
        api_version = self.client.api_version(self.kind)
        data = self.client.put(url, api_version, request.body) or self.client.get(url, api_version)
        return Webhook.from_response(self.client, data)


class WebhookUpdateDraft(BaseDraft):
    kind = WEBHOOKS

    def __init__(self, client: ArmClient, name: str, parent: Any):
        super().__init__(client)
        self.name = name
        self.parent = parent
        self.actions: Optional[List[WebhookAction]] = None
        self.service_uri: Optional[str] = None
        self.custom_headers: Optional[Dict[str, str]] = None
        self.scope: Optional[str] = None
        self.enabled: Optional[bool] = None
        self.tags: Optional[Dict[str, str]] = None

    def check(self):
        return PayloadValidator.validate_webhook_update(self)

    def to_request(self) -> ResourceRequest:
        params = WebhookUpdateParameters(
            tags=self.tags,
            properties=WebhookProperties(
                service_uri=self.service_uri,
                custom_headers=self.custom_headers,
                status=_status(self.enabled),
                scope=self.scope,
                actions=self.actions,
            ),
        )
        return ResourceRequest(
            self.kind, self.parent.resource_group, self.name, params.to_body(), method="PATCH"
        )

    def submit(self, request: ResourceRequest) -> Webhook:
        url = self.client.resource_url(request.resource_group, self.kind, self.parent.name, request.name)
        api_version = self.client.api_version(self.kind)
        data = self.client.patch(url, api_version, request.body) or self.client.get(url, api_version)
        return Webhook.from_response(self.client, data)


# -------------------- Stages --------------------

class ChildStage(Stage):
    def __init__(self, draft: BaseDraft, parent: Stage):
        super().__init__(draft)
        self._parent = parent


class WebhookWithAttach(ChildStage):
    def with_custom_header(self, name: str, value: str) -> "WebhookWithAttach":
        self._draft.custom_headers[name] = value
        return self

    def with_custom_headers(self, headers: Mapping[str, str]) -> "WebhookWithAttach":
        self._draft.custom_headers = dict(headers)
        return self

    def with_repositories_scope(self, scope: str) -> "WebhookWithAttach":
        self._draft.scope = scope
        return self

    def enabled(self, enabled: bool) -> "WebhookWithAttach":
        self._draft.enabled = enabled
        return self

    def with_tag(self, key: str, value: str) -> "WebhookWithAttach":
        self._draft.tags[key] = value
        return self

    def with_tags(self, tags: Mapping[str, str]) -> "WebhookWithAttach":
        self._draft.tags = dict(tags)
        return self

    def attach(self):
        """Finish the webhook and return to the registry stage that started it"""
        self._draft.validate()
        pending = self._draft.parent.webhooks
        if all(webhook is not self._draft for webhook in pending):
            pending.append(self._draft)
        return self._parent


class WebhookWithServiceUri(ChildStage):
    def with_service_uri(self, service_uri: str) -> WebhookWithAttach:
        self._draft.service_uri = service_uri
        return WebhookWithAttach(self._draft, self._parent)


class WebhookBlank(ChildStage):
    def with_trigger_when(self, *actions: WebhookAction) -> WebhookWithServiceUri:
        if not actions:
            raise ValidationError([f"At least one trigger action is required for webhook '{self._draft.name}'"], ["actions"])
        self._draft.actions = [WebhookAction(action) for action in actions]
        return WebhookWithServiceUri(self._draft, self._parent)


class WebhookUpdate(ChildStage):
    def with_trigger_when(self, *actions: WebhookAction) -> "WebhookUpdate":
        self._draft.actions = [WebhookAction(action) for action in actions]
        return self

    def with_service_uri(self, service_uri: str) -> "WebhookUpdate":
        self._draft.service_uri = service_uri
        return self

    def with_custom_header(self, name: str, value: str) -> "WebhookUpdate":
        # the set sent replaces the stored headers
        if self._draft.custom_headers is None:
            self._draft.custom_headers = {}
        self._draft.custom_headers[name] = value
        return self

    def with_repositories_scope(self, scope: str) -> "WebhookUpdate":
        self._draft.scope = scope
        return self

    def enabled(self, enabled: bool) -> "WebhookUpdate":
        self._draft.enabled = enabled
        return self

    def with_tags(self, tags: Mapping[str, str]) -> "WebhookUpdate":
        self._draft.tags = dict(tags)
        return self

    def parent(self):
        """Finish the webhook update and return to the registry update"""
        self._draft.validate()
        pending = self._draft.parent.webhook_updates
        if all(webhook is not self._draft for webhook in pending):
            pending.append(self._draft)
        return self._parent
