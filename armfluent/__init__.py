"""Fluent, staged builders for Azure Resource Manager resources."""

import logging

from .errors import ArmError, NotFoundError, RemoteError, ValidationError
from .manager import AzureManager
from .models import (
    AccessKeyType,
    AccessTier,
    AzureCreds,
    SkuName,
    StorageKind,
    StorageSkuName,
    WebhookAction,
)
from .services.arm_client import ArmClient

__version__ = "0.3.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AccessKeyType",
    "AccessTier",
    "ArmClient",
    "ArmError",
    "AzureCreds",
    "AzureManager",
    "NotFoundError",
    "RemoteError",
    "SkuName",
    "StorageKind",
    "StorageSkuName",
    "ValidationError",
    "WebhookAction",
    "__version__",
]
