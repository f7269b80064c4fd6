"""Tests for the service registry, naming helpers, id parsing and the payload validator."""

import logging
from types import SimpleNamespace

import pytest

from armfluent.fluent.storage import StorageAccountDraft, StorageAccounts
from armfluent.models import AccessTier, StorageKind
from armfluent.services.naming import is_known_region, normalize_region, safe_name
from armfluent.services.service_registry import HUBS, WEBHOOKS, ServiceRegistry
from armfluent.services.utils import name_from_id, parse_resource_id, resource_group_from_id
from armfluent.services.validator import PayloadValidator


class TestServiceRegistry:
    def setup_method(self):
        self.registry = ServiceRegistry()

    def test_get(self):
        webhooks = self.registry.get(WEBHOOKS)
        assert webhooks.namespace == "Microsoft.ContainerRegistry"
        assert webhooks.path == ("registries", "webhooks")
        assert self.registry.get(HUBS).api_version == "2017-04-26"

    def test_unsupported_kind(self):
        assert not self.registry.is_supported("web.sites")
        with pytest.raises(ValueError, match="Supported kinds"):
            self.registry.get("web.sites")

    def test_supported_kinds(self):
        assert len(self.registry.get_supported_kinds()) == 5
        assert all(self.registry.is_supported(kind) for kind in self.registry.get_supported_kinds())


class TestNaming:
    @pytest.mark.parametrize("region", ["East US", "east-us", "EASTUS", " eastus ", "east_us"])
    def test_normalize_region(self, region):
        assert normalize_region(region) == "eastus"
        assert is_known_region(region)

    def test_unknown_region(self):
        assert not is_known_region("moon-base-1")
        assert normalize_region(None) == ""

    def test_safe_name(self):
        assert safe_name("my registry!") == "my-registry"
        assert len(safe_name("a" * 100)) == 63


class TestResourceIds:
    ID = (
        "/subscriptions/sub1/resourceGroups/Rg1/providers/Microsoft.ContainerRegistry"
        "/registries/myacr1/webhooks/hook1"
    )

    def test_parse(self):
        parsed = parse_resource_id(self.ID)
        assert parsed == {
            "subscriptions": "sub1",
            "resourcegroups": "Rg1",
            "namespace": "Microsoft.ContainerRegistry",
            "registries": "myacr1",
            "webhooks": "hook1",
        }

    def test_helpers(self):
        assert resource_group_from_id(self.ID) == "Rg1"
        assert resource_group_from_id("/subscriptions/sub1/resourcegroups/rg2") == "rg2"
        assert name_from_id(self.ID) == "hook1"
        assert name_from_id(None) is None
        assert resource_group_from_id(None) is None


class TestPayloadValidator:
    def _draft(self, **overrides):
        values = dict(
            name="appdata2024", region="eastus", resource_group="rg1",
            access_tier=None, is_blob_storage=False,
        )
        values.update(overrides)
        return SimpleNamespace(**values)

    def test_valid_storage_account(self):
        report = PayloadValidator.validate_storage_account(self._draft())
        assert report == {"valid": True, "errors": [], "warnings": [], "missing": []}

    def test_missing_fields_are_all_reported(self):
        report = PayloadValidator.validate_storage_account(self._draft(region=None, resource_group=None))
        assert not report["valid"]
        assert report["missing"] == ["region", "resource_group"]
        assert len(report["errors"]) == 2

    def test_common_and_short_names_warn(self):
        report = PayloadValidator.validate_storage_account(self._draft(name="data"))
        assert report["valid"]
        assert len(report["warnings"]) == 2
        assert "very common name" in report["warnings"][1]

    def test_access_tier_on_blob_storage(self):
        report = PayloadValidator.validate_storage_account(
            self._draft(access_tier=AccessTier.HOT, is_blob_storage=True)
        )
        assert report["valid"]

    def test_webhook_requires_actions_and_uri(self):
        webhook = SimpleNamespace(name="hook1", actions=[], service_uri=None)
        report = PayloadValidator.validate_webhook(webhook)
        assert report["missing"] == ["actions", "service_uri"]

    def test_webhook_uri_scheme(self):
        webhook = SimpleNamespace(name="hookone", actions=["push"], service_uri="ftp://example.com/hook")
        report = PayloadValidator.validate_webhook(webhook)
        assert not report["valid"]
        assert "service URI" in report["errors"][0]

    def test_hub_billing_bounds(self):
        hub = SimpleNamespace(
            name="salesHub", region="eastus", resource_group="rg1",
            billing=SimpleNamespace(min_units=-1, max_units=3),
        )
        report = PayloadValidator.validate_hub(hub)
        assert report["errors"] == ["Hub 'salesHub': min_units must not be negative."]


def test_warnings_are_logged_on_create(fake_client, caplog):
    stage = (
        StorageAccounts(fake_client).define("backup")
        .with_region("eastus")
        .with_existing_resource_group("rg1")
    )

    with caplog.at_level(logging.WARNING, logger="armfluent"):
        stage.create()

    assert any("very common name" in record.getMessage() for record in caplog.records)
    assert fake_client.methods() == ["PUT"]


def test_draft_defaults_to_general_purpose(fake_client):
    draft = StorageAccountDraft(fake_client, "appdata2024")
    assert draft.account_kind is None
    assert not draft.is_blob_storage
    draft.account_kind = StorageKind.BLOB_STORAGE
    assert draft.is_blob_storage
