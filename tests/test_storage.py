"""Tests for storage account definitions and updates."""

import pytest

from armfluent.errors import ValidationError
from armfluent.fluent.storage import (
    StorageAccount,
    StorageAccounts,
    StorageAccountWithCreate,
    StorageAccountWithCreateAndAccessTier,
)
from armfluent.models import AccessTier, StorageKind, StorageSkuName

ACCOUNT_PATH = "/resourceGroups/rg1/providers/Microsoft.Storage/storageAccounts/appdata2024"


class TestStorageAccountDefinition:
    @pytest.fixture(autouse=True)
    def setup(self, fake_client):
        self.client = fake_client
        self.accounts = StorageAccounts(fake_client)

    def _with_create(self, name="appdata2024"):
        return self.accounts.define(name).with_region("eastus").with_existing_resource_group("rg1")

    def test_defaults_are_applied(self):
        request = self._with_create().preview()

        assert request.body == {
            "sku": {"name": "Standard_GRS"},
            "kind": "Storage",
            "location": "eastus",
        }

    def test_all_options(self):
        request = (
            self._with_create()
            .with_sku(StorageSkuName.STANDARD_LRS)
            .with_general_purpose_account_kind_v2()
            .with_custom_domain("static.example.com", use_sub_domain=True)
            .with_encryption()
            .with_only_https_traffic()
            .with_system_assigned_identity()
            .with_tag("env", "prod")
            .preview()
        )

        assert request.body == {
            "sku": {"name": "Standard_LRS"},
            "kind": "StorageV2",
            "location": "eastus",
            "tags": {"env": "prod"},
            "identity": {"type": "SystemAssigned"},
            "properties": {
                "customDomain": {"name": "static.example.com", "useSubDomain": True},
                "encryption": {
                    "services": {"blob": {"enabled": True}, "file": {"enabled": True}},
                    "keySource": "Microsoft.Storage",
                },
                "supportsHttpsTrafficOnly": True,
            },
        }

    def test_http_allowed_is_sent_as_false(self):
        request = self._with_create().with_https_and_http_traffic().preview()
        assert request.body["properties"] == {"supportsHttpsTrafficOnly": False}

    def test_blob_storage_unlocks_access_tier(self):
        stage = self._with_create().with_blob_storage_account_kind()
        assert isinstance(stage, StorageAccountWithCreateAndAccessTier)

        request = stage.with_access_tier(AccessTier.COOL).preview()

        assert request.body["kind"] == "BlobStorage"
        assert request.body["properties"] == {"accessTier": "Cool"}

    def test_general_purpose_stage_has_no_access_tier(self):
        stage = self._with_create().with_general_purpose_account_kind()
        assert isinstance(stage, StorageAccountWithCreate)
        assert not hasattr(stage, "with_access_tier")

    def test_account_kind_is_chosen_once(self):
        stage = self._with_create().with_general_purpose_account_kind()
        with pytest.raises(ValidationError):
            stage.with_blob_storage_account_kind()

    def test_invalid_name(self):
        with pytest.raises(ValidationError, match="lowercase letters and numbers"):
            self._with_create("App_Data").create()
        assert self.client.calls == []

    def test_create_reads_back_when_accepted_without_body(self):
        self.client.respond("PUT", ACCOUNT_PATH, lambda body: None)
        self.client.respond(
            "GET", ACCOUNT_PATH,
            {"id": ACCOUNT_PATH, "name": "appdata2024", "location": "eastus",
             "sku": {"name": "Standard_GRS", "tier": "Standard"}, "kind": "Storage",
             "properties": {"provisioningState": "Creating"}},
        )

        account = self._with_create().create()

        assert self.client.methods() == ["PUT", "GET"]
        assert account.provisioning_state == "Creating"
        assert account.sku == StorageSkuName.STANDARD_GRS


class TestStorageAccountUpdate:
    @pytest.fixture(autouse=True)
    def setup(self, fake_client):
        self.client = fake_client
        self.account = StorageAccount.from_response(
            fake_client,
            {
                "id": f"/subscriptions/{fake_client.subscription_id}{ACCOUNT_PATH}",
                "name": "appdata2024",
                "location": "eastus",
                "kind": "StorageV2",
                "sku": {"name": "Standard_LRS"},
                "properties": {
                    "supportsHttpsTrafficOnly": True,
                    "networkAcls": {
                        "defaultAction": "Allow",
                        "ipRules": [{"value": "10.0.0.1", "action": "Allow"}],
                        "virtualNetworkRules": [],
                    },
                    "primaryEndpoints": {"blob": "https://appdata2024.blob.core.windows.net/"},
                },
            },
        )

    def test_handle_properties(self):
        assert self.account.https_traffic_only is True
        assert self.account.account_kind == StorageKind.STORAGE_V2
        assert self.account.primary_endpoints.blob.startswith("https://appdata2024")

    def test_patch_body_holds_only_changes(self):
        self.account.update().with_https_and_http_traffic().without_encryption().apply()

        patch = self.client.calls_for("PATCH")[0]
        assert patch.url == self.client.url(ACCOUNT_PATH)
        assert patch.body == {
            "properties": {
                "supportsHttpsTrafficOnly": False,
                "encryption": {
                    "services": {"blob": {"enabled": False}, "file": {"enabled": False}},
                    "keySource": "Microsoft.Storage",
                },
            }
        }

    def test_network_rules_extend_existing(self):
        request = (
            self.account.update()
            .with_access_from_selected_networks()
            .with_access_from_ip_address("10.0.0.1")
            .with_access_from_ip_address("10.0.0.2")
            .preview()
        )

        assert request.body["properties"]["networkAcls"] == {
            "defaultAction": "Deny",
            "ipRules": [{"value": "10.0.0.1", "action": "Allow"}, {"value": "10.0.0.2", "action": "Allow"}],
            "virtualNetworkRules": [],
        }
        # the handle keeps its own copy until apply()
        assert self.account.network_rule_set.default_action == "Allow"

    def test_access_tier_requires_blob_storage(self):
        with pytest.raises(ValidationError, match="BlobStorage"):
            self.account.update().with_access_tier(AccessTier.HOT).apply()

    def test_sku_and_tags(self):
        request = self.account.update().with_sku(StorageSkuName.STANDARD_ZRS).with_tag("env", "prod").preview()
        assert request.method == "PATCH"
        assert request.body == {"sku": {"name": "Standard_ZRS"}, "tags": {"env": "prod"}}


class TestNetworkRulesOnOpenAccount:
    """An account that has never had network rules."""

    @pytest.fixture(autouse=True)
    def setup(self, fake_client):
        self.client = fake_client
        self.account = StorageAccount.from_response(
            fake_client,
            {
                "id": f"/subscriptions/{fake_client.subscription_id}{ACCOUNT_PATH}",
                "name": "appdata2024",
                "location": "eastus",
                "properties": {},
            },
        )

    def test_ip_rule_denies_other_traffic(self):
        self.account.update().with_access_from_ip_address("10.0.0.5").apply()

        patch = self.client.calls_for("PATCH")[0]
        assert patch.body["properties"]["networkAcls"] == {
            "defaultAction": "Deny",
            "ipRules": [{"value": "10.0.0.5", "action": "Allow"}],
            "virtualNetworkRules": [],
        }

    def test_subnet_rule_denies_other_traffic(self):
        request = self.account.update().with_access_from_networks_subnet("/subnets/a").preview()
        assert request.body["properties"]["networkAcls"]["defaultAction"] == "Deny"

    def test_explicit_all_networks_is_kept(self):
        request = (
            self.account.update()
            .with_access_from_all_networks()
            .with_access_from_ip_address("10.0.0.5")
            .preview()
        )
        assert request.body["properties"]["networkAcls"]["defaultAction"] == "Allow"


class TestStorageAccountsCollection:
    def test_list_follows_next_link(self, fake_client):
        next_link = fake_client.url("/resourceGroups/rg1/providers/Microsoft.Storage/storageAccounts?page=2")
        fake_client.respond(
            "GET", "/resourceGroups/rg1/providers/Microsoft.Storage/storageAccounts",
            {"value": [{"id": ACCOUNT_PATH, "name": "appdata2024"}], "nextLink": next_link},
        )
        fake_client.responses[("GET", next_link)] = {"value": [{"id": "x/other", "name": "other"}]}

        accounts = StorageAccounts(fake_client).list_by_resource_group("rg1")

        assert [a.name for a in accounts] == ["appdata2024", "other"]
        assert fake_client.calls[1].api_version is None
