"""Tests for AzureManager, settings and the resource group collection."""

from unittest.mock import patch

import pytest

from armfluent.config import Settings, get_settings
from armfluent.errors import NotFoundError, ValidationError
from armfluent.fluent.registry import Registries
from armfluent.manager import AzureManager
from armfluent.models import AzureCreds
from armfluent.services.arm_client import ArmClient

CREDS = AzureCreds(clientId="cid", clientSecret="secret", subscriptionId="sub1", tenantId="tenant1")


class TestAuthenticate:
    def test_missing_credentials_are_listed(self):
        with pytest.raises(ValidationError) as exc:
            AzureManager.authenticate(settings=Settings(client_id="cid", tenant_id="tenant1"))

        assert exc.value.missing == ["ARM_CLIENT_SECRET", "ARM_SUBSCRIPTION_ID"]
        assert "ARM_CLIENT_SECRET" in str(exc.value)

    def test_explicit_credentials(self):
        settings = Settings(management_url="https://management.usgovcloudapi.net", timeout=5, max_workers=2)

        with AzureManager.authenticate(CREDS, settings=settings) as azure:
            assert azure.subscription_id == "sub1"
            assert azure.client.management_url == "https://management.usgovcloudapi.net"
            assert azure.client.timeout == 5
            assert azure.client.max_workers == 2
            assert isinstance(azure.registries, Registries)

    def test_credentials_from_settings(self):
        settings = Settings(client_id="cid", client_secret="secret", tenant_id="tenant1", subscription_id="sub9")
        azure = AzureManager.authenticate(settings=settings)
        assert azure.subscription_id == "sub9"
        azure.close()

    def test_context_manager_closes_client(self):
        with patch.object(ArmClient, "close") as close:
            with AzureManager.authenticate(CREDS, settings=Settings()):
                pass
        close.assert_called_once()


class TestSettings:
    def test_get_settings_reads_environment(self, monkeypatch):
        monkeypatch.setenv("ARM_CLIENT_ID", "env-client")
        monkeypatch.setenv("ARM_SUBSCRIPTION_ID", "env-sub")
        monkeypatch.setenv("ARM_MANAGEMENT_URL", "https://management.example.com/")
        monkeypatch.setenv("ARM_HTTP_TIMEOUT", "12.5")
        monkeypatch.setenv("ARM_MAX_WORKERS", "8")
        monkeypatch.setenv("AZURE_LOCATION", "westeurope")

        settings = get_settings()

        assert settings.client_id == "env-client"
        assert settings.subscription_id == "env-sub"
        assert settings.management_url == "https://management.example.com"
        assert settings.timeout == 12.5
        assert settings.max_workers == 8
        assert settings.default_location == "westeurope"

    def test_creds_require_all_variables(self):
        assert Settings(client_id="cid").creds() is None
        creds = Settings(client_id="cid", client_secret="s", tenant_id="t", subscription_id="sub").creds()
        assert creds.subscriptionId == "sub"


class TestResourceGroups:
    @pytest.fixture(autouse=True)
    def setup(self, fake_client):
        self.client = fake_client
        self.azure = AzureManager(fake_client)

    def test_create(self):
        group = self.azure.resource_groups.create("rg1", "eastus", tags={"env": "dev"})

        put = self.client.calls[0]
        assert put.method == "PUT"
        assert put.url == self.client.url("/resourcegroups/rg1")
        assert put.api_version == "2021-04-01"
        assert put.body == {"location": "eastus", "tags": {"env": "dev"}}
        assert group.name == "rg1"
        assert group.region == "eastus"

    def test_contains(self):
        self.client.respond("HEAD", "/resourcegroups/missing", 404)

        assert self.azure.resource_groups.contains("rg1")
        assert not self.azure.resource_groups.contains("missing")

    def test_get_missing_group(self):
        self.client.respond("GET", "/resourcegroups/gone", NotFoundError("gone", status_code=404))
        with pytest.raises(NotFoundError):
            self.azure.resource_groups.get("gone")

    def test_list_and_delete(self):
        self.client.respond(
            "GET", "/resourcegroups",
            {"value": [{"name": "rg1", "location": "eastus", "properties": {"provisioningState": "Succeeded"}}]},
        )

        groups = self.azure.resource_groups.list()
        self.azure.resource_groups.delete("rg1")

        assert [g.provisioning_state for g in groups] == ["Succeeded"]
        assert self.client.calls[-1].method == "DELETE"
        assert self.client.calls[-1].url == self.client.url("/resourcegroups/rg1")
