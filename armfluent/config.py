from __future__ import annotations
import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from .models import AzureCreds

load_dotenv()

CREDENTIAL_VARIABLES = {
    "client_id": "ARM_CLIENT_ID",
    "client_secret": "ARM_CLIENT_SECRET",
    "tenant_id": "ARM_TENANT_ID",
    "subscription_id": "ARM_SUBSCRIPTION_ID",
}


class Settings(BaseModel):
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    tenant_id: Optional[str] = None
    subscription_id: Optional[str] = None
    management_url: str = "https://management.azure.com"
    authority_url: str = "https://login.microsoftonline.com"
    default_location: str = "eastus"
    timeout: float = 60.0
    max_workers: int = 4
    log_level: str = "WARNING"

    def missing_credentials(self) -> list:
        """Environment variable names of the credentials that are not set"""
        return [env for field, env in CREDENTIAL_VARIABLES.items() if not getattr(self, field)]

    def creds(self) -> Optional[AzureCreds]:
        if self.missing_credentials():
            return None
        return AzureCreds(
            clientId=self.client_id,
            clientSecret=self.client_secret,
            tenantId=self.tenant_id,
            subscriptionId=self.subscription_id,
        )


def get_settings() -> Settings:
    """
    Read settings from the process environment (and the .env file loaded at import).
    """
    values = {field: os.getenv(env) for field, env in CREDENTIAL_VARIABLES.items()}
    values["management_url"] = os.getenv("ARM_MANAGEMENT_URL", "https://management.azure.com").rstrip("/")
    values["authority_url"] = os.getenv("ARM_AUTHORITY_URL", "https://login.microsoftonline.com").rstrip("/")
    values["default_location"] = os.getenv("AZURE_LOCATION", "eastus")
    values["timeout"] = float(os.getenv("ARM_HTTP_TIMEOUT", "60"))
    values["max_workers"] = int(os.getenv("ARM_MAX_WORKERS", "4"))
    values["log_level"] = os.getenv("ARM_LOG_LEVEL", "WARNING")
    return Settings(**values)


def configure_logging(level: Optional[str] = None) -> None:
    """Attach a console handler for applications that do not configure logging themselves."""
    level = level or get_settings().log_level
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        level=getattr(logging, level.upper(), logging.WARNING),
    )
