"""
Building blocks shared by every staged definition and update.

A definition is a chain of stage objects that all point at one mutable
Draft. Each stage exposes only the calls legal at that point and returns
the next stage, so

    registries.define("myacr1").with_region("eastus").with_existing_resource_group("rg1")
        .with_standard_sku().with_tag("env", "prod").create()

can only reach create() once region, group and SKU are set. Python does not
enforce this statically, so the terminal call also re-validates the Draft
and reports every missing or inconsistent field in one ValidationError.

Builders are meant for a single caller and carry no locking.
"""

from __future__ import annotations
import logging
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Type

from ..errors import ValidationError
from ..services.arm_client import ArmClient
from ..services.naming import is_known_region, normalize_region, safe_name

logger = logging.getLogger(__name__)


@dataclass
class ResourceRequest:
    """What a terminal operation hands to the transport"""

    kind: str
    resource_group: str
    name: str
    body: Dict[str, Any]
    method: str = "PUT"
    dependencies: List["ResourceRequest"] = field(default_factory=list)
    children: List["ResourceRequest"] = field(default_factory=list)


class BaseDraft:
    """Accumulated, not yet submitted, description of a change to one resource."""

    kind = ""

    def __init__(self, client: ArmClient):
        self.client = client

    def check(self) -> Dict[str, Any]:
        raise NotImplementedError

    def to_request(self) -> ResourceRequest:
        raise NotImplementedError

    def submit(self, request: ResourceRequest) -> Any:
        raise NotImplementedError

    def validate(self) -> None:
        report = self.check()
        for warning in report.get("warnings", []):
            logger.warning(warning)
        if not report["valid"]:
            raise ValidationError(report["errors"], report.get("missing"))

    def validated_request(self) -> ResourceRequest:
        self.validate()
        return self.to_request()


class Draft(BaseDraft):
    """Definition of a new resource that lives in a resource group."""

    def __init__(self, client: ArmClient, name: str):
        super().__init__(client)
        self.name = name
        self.region: Optional[str] = None
        self.resource_group: Optional[str] = None
        self.new_resource_group = False
        self.tags: Dict[str, str] = {}

    def set_once(self, attr: str, value: Any, label: Optional[str] = None) -> None:
        label = label or attr.replace("_", " ")
        if getattr(self, attr) is not None:
            raise ValidationError(
                [f"{label} of '{self.name}' is already set to '{getattr(self, attr)}'"]
            )
        setattr(self, attr, value)

    def ensure_resource_group(self) -> None:
        if not self.new_resource_group:
            return
        from .resource_group import ResourceGroups

        ResourceGroups(self.client).create(self.resource_group, self.region)


class UpdateDraft(BaseDraft):
    """Pending changes to an existing resource; nothing is required."""

    def __init__(self, resource: Any):
        super().__init__(resource.client)
        self.resource = resource
        self.tags: Optional[Dict[str, str]] = None

    @property
    def name(self) -> str:
        return self.resource.name

    def tags_for_update(self) -> Dict[str, str]:
        if self.tags is None:
            self.tags = dict(self.resource.tags or {})
        return self.tags


class Stage:
    def __init__(self, draft: BaseDraft):
        self._draft = draft


# -------------------- Definition stages --------------------

class DefinitionWithRegion(Stage):
    next_stage: Type[Stage] = Stage

    def with_region(self, region: str):
        """
        Record the region the resource is deployed to.

        Raises:
            ValidationError: empty or unknown region, or region already chosen
        """
        normalized = normalize_region(region)
        if not normalized:
            raise ValidationError(["region must not be empty"], ["region"])
        if not is_known_region(normalized):
            raise ValidationError([f"'{region}' is not a recognized Azure region"])
        self._draft.set_once("region", normalized)
        return self.next_stage(self._draft)


class DefinitionWithGroup(Stage):
    next_stage: Type[Stage] = Stage

    def with_existing_resource_group(self, group: Any):
        name = group if isinstance(group, str) else getattr(group, "name", None)
        if not name:
            raise ValidationError(["resource group name must not be empty"], ["resource_group"])
        self._draft.set_once("resource_group", name)
        return self.next_stage(self._draft)

    def with_new_resource_group(self, name: Optional[str] = None):
        """Create the group (in the resource's region) right before the resource itself."""
        name = name or f"rg-{safe_name(self._draft.name)}"
        self._draft.set_once("resource_group", name)
        self._draft.new_resource_group = True
        return self.next_stage(self._draft)


class DefinitionWithTags(Stage):
    def with_tags(self, tags: Mapping[str, str]):
        self._draft.tags = dict(tags)
        return self

    def with_tag(self, key: str, value: str):
        self._draft.tags[key] = value
        return self


class Creatable(Stage):
    def preview(self) -> ResourceRequest:
        """Validate and return the request create() would send, without sending it"""
        return self._draft.validated_request()

    def create(self):
        request = self.preview()
        logger.info("Creating %s '%s' in '%s'", request.kind, request.name, request.resource_group)
        return self._draft.submit(request)

    def create_async(self) -> Future:
        # validation errors are raised here, before anything is queued
        request = self.preview()
        logger.info("Queueing creation of %s '%s'", request.kind, request.name)
        return self._draft.client.submit(self._draft.submit, request)


# -------------------- Update stages --------------------

class UpdateWithTags(Stage):
    def with_tags(self, tags: Mapping[str, str]):
        self._draft.tags = dict(tags)
        return self

    def with_tag(self, key: str, value: str):
        self._draft.tags_for_update()[key] = value
        return self

    def without_tag(self, key: str):
        self._draft.tags_for_update().pop(key, None)
        return self


class Appliable(Stage):
    def preview(self) -> ResourceRequest:
        return self._draft.validated_request()

    def apply(self):
        request = self.preview()
        logger.info("Updating %s '%s' in '%s'", request.kind, request.name, request.resource_group)
        return self._draft.submit(request)

    def apply_async(self) -> Future:
        request = self.preview()
        return self._draft.client.submit(self._draft.submit, request)
