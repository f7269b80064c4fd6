from __future__ import annotations
import logging
from typing import Optional

from .config import Settings, get_settings
from .errors import ValidationError
from .models import AzureCreds
from .services.arm_client import ArmClient
from .fluent.hub import Hubs
from .fluent.registry import Registries
from .fluent.resource_group import ResourceGroups
from .fluent.storage import StorageAccounts

logger = logging.getLogger(__name__)


class AzureManager:
    """
    Entry point to the fluent resource collections of one subscription.

    Usage:
        with AzureManager.authenticate() as azure:
            registry = (
                azure.registries.define("myregistry")
                .with_region("eastus")
                .with_existing_resource_group("rg1")
                .with_standard_sku()
                .create()
            )
    """

    def __init__(self, client: ArmClient):
        self.client = client
        self.resource_groups = ResourceGroups(client)
        self.storage_accounts = StorageAccounts(client)
        self.registries = Registries(client)
        self.hubs = Hubs(client)

    @property
    def subscription_id(self) -> str:
        return self.client.subscription_id

    @classmethod
    def authenticate(cls, creds: Optional[AzureCreds] = None, settings: Optional[Settings] = None) -> "AzureManager":
        """
        Build a manager from explicit credentials, falling back to ARM_* environment variables.

        Raises:
            ValidationError: no credentials given and some ARM_* variables are unset
        """
        settings = settings or get_settings()
        if creds is None:
            missing = settings.missing_credentials()
            if missing:
                raise ValidationError(
                    [f"Missing Azure credentials: {', '.join(missing)}"], missing
                )
            creds = settings.creds()

        logger.debug("Authenticating subscription %s", creds.subscriptionId)
        client = ArmClient(
            creds,
            management_url=settings.management_url,
            authority_url=settings.authority_url,
            timeout=settings.timeout,
            max_workers=settings.max_workers,
        )
        return cls(client)

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "AzureManager":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
