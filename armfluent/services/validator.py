"""
Validation service for resource definitions and updates
Checks, before anything is sent, for the issues that would make Resource
Manager reject the request: missing required settings, invalid names and
settings that contradict each other.
"""

from typing import Dict, Any, List
from urllib.parse import urlparse

from .naming import HUB_NAME, REGISTRY_NAME, STORAGE_ACCOUNT_NAME, WEBHOOK_NAME


class PayloadValidator:
    """Validates drafts and returns errors/warnings"""

    # Common storage account names that are likely taken
    COMMON_STORAGE_NAMES = [
        "test", "storage", "mystorage", "teststorage", "stor", "data",
        "files", "blob", "container", "backup", "archive"
    ]

    @staticmethod
    def _report(errors: List[str], warnings: List[str], missing: List[str]) -> Dict[str, Any]:
        return {
            "valid": len(errors) == 0,
            "errors": errors,
            "warnings": warnings,
            "missing": missing,
        }

    @staticmethod
    def _check_required(draft, fields: Dict[str, str], errors: List[str], missing: List[str]) -> None:
        for attr, label in fields.items():
            if getattr(draft, attr, None) is None:
                missing.append(attr)
                errors.append(f"{label} is required for '{draft.name}'")

    @staticmethod
    def _check_groupable(draft, errors: List[str], missing: List[str]) -> None:
        PayloadValidator._check_required(
            draft, {"region": "Region", "resource_group": "Resource group"}, errors, missing
        )

    @staticmethod
    def _check_service_uri(uri: str, name: str, errors: List[str]) -> None:
        parsed = urlparse(uri or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            errors.append(
                f"Webhook '{name}' service URI '{uri}' is not a valid http(s) URL."
            )

    @staticmethod
    def validate_storage_account(draft) -> Dict[str, Any]:
        """
        Validate a storage account definition

        Returns:
            {
                "valid": bool,
                "errors": List[str],
                "warnings": List[str],
                "missing": List[str]
            }
        """
        errors: List[str] = []
        warnings: List[str] = []
        missing: List[str] = []

        PayloadValidator._check_groupable(draft, errors, missing)

        storage_name = draft.name or ""
        storage_name_lower = storage_name.lower()

        # Check if name is too short or too common
        if 3 <= len(storage_name_lower) < 8:
            warnings.append(
                f"Storage account '{storage_name}' is very short. "
                f"Short names are more likely to be taken globally. "
                f"Consider using a longer, more unique name."
            )

        if storage_name_lower in PayloadValidator.COMMON_STORAGE_NAMES:
            warnings.append(
                f"Storage account '{storage_name}' uses a very common name. "
                f"This name is likely already taken globally. "
                f"Storage account names must be globally unique across all Azure."
            )

        if not STORAGE_ACCOUNT_NAME.match(storage_name):
            errors.append(
                f"Storage account '{storage_name}' is invalid. "
                f"Storage account names must be 3-24 characters, lowercase letters and numbers only."
            )

        if draft.access_tier is not None and not draft.is_blob_storage:
            errors.append(
                f"Storage account '{storage_name}': an access tier can only be set on a BlobStorage account."
            )

        return PayloadValidator._report(errors, warnings, missing)

    @staticmethod
    def validate_storage_account_update(draft) -> Dict[str, Any]:
        errors: List[str] = []
        if draft.access_tier is not None and not draft.is_blob_storage:
            errors.append(
                f"Storage account '{draft.name}': an access tier can only be set on a BlobStorage account."
            )
        return PayloadValidator._report(errors, [], [])

    @staticmethod
    def validate_webhook(draft) -> Dict[str, Any]:
        errors: List[str] = []
        missing: List[str] = []

        if not WEBHOOK_NAME.match(draft.name or ""):
            errors.append(
                f"Webhook '{draft.name}' is invalid. "
                f"Webhook names must be 5-50 characters, letters and numbers only."
            )
        if not draft.actions:
            missing.append("actions")
            errors.append(f"At least one trigger action is required for webhook '{draft.name}'")
        if draft.service_uri is None:
            missing.append("service_uri")
            errors.append(f"Service URI is required for webhook '{draft.name}'")
        else:
            PayloadValidator._check_service_uri(draft.service_uri, draft.name, errors)

        return PayloadValidator._report(errors, [], missing)

    @staticmethod
    def validate_webhook_update(draft) -> Dict[str, Any]:
        errors: List[str] = []
        if draft.actions is not None and not draft.actions:
            errors.append(f"Webhook '{draft.name}' must keep at least one trigger action.")
        if draft.service_uri is not None:
            PayloadValidator._check_service_uri(draft.service_uri, draft.name, errors)
        return PayloadValidator._report(errors, [], [])

    @staticmethod
    def validate_registry(draft) -> Dict[str, Any]:
        """
        Validate a container registry definition, including the storage
        account and webhooks it brings along.
        """
        errors: List[str] = []
        warnings: List[str] = []
        missing: List[str] = []

        PayloadValidator._check_groupable(draft, errors, missing)
        PayloadValidator._check_required(draft, {"sku": "SKU"}, errors, missing)

        if not REGISTRY_NAME.match(draft.name or ""):
            errors.append(
                f"Registry '{draft.name}' is invalid. "
                f"Registry names must be 5-50 characters, letters and numbers only."
            )

        storage = draft.storage_account
        if draft.sku is not None and not draft.sku.is_managed and storage is None:
            missing.append("storage_account")
            errors.append(f"A Classic registry needs a storage account: '{draft.name}'")
        if draft.sku is not None and draft.sku.is_managed and storage is not None:
            errors.append(f"Registry '{draft.name}': only a Classic registry takes a storage account.")

        if storage is not None:
            if storage.draft is not None:
                report = PayloadValidator.validate_storage_account(storage.draft)
                errors.extend(report["errors"])
                warnings.extend(report["warnings"])
            storage_region = storage.region
            if storage_region and draft.region and storage_region != draft.region:
                errors.append(
                    f"Storage account for registry '{draft.name}' is in '{storage_region}' "
                    f"but the registry is in '{draft.region}'. They must be in the same region."
                )

        # Check for duplicate webhook names
        names = [w.name for w in draft.webhooks]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            errors.append(
                f"Duplicate webhook names found: {', '.join(duplicates)}. "
                f"Each webhook must have a unique name."
            )
        for webhook in draft.webhooks:
            errors.extend(PayloadValidator.validate_webhook(webhook)["errors"])

        return PayloadValidator._report(errors, warnings, missing)

    @staticmethod
    def validate_registry_update(draft) -> Dict[str, Any]:
        errors: List[str] = []
        for webhook in draft.webhooks:
            errors.extend(PayloadValidator.validate_webhook(webhook)["errors"])
        for webhook in draft.webhook_updates:
            errors.extend(PayloadValidator.validate_webhook_update(webhook)["errors"])

        touched = [w.name for w in draft.webhooks] + [w.name for w in draft.webhook_updates]
        duplicates = sorted({n for n in touched if touched.count(n) > 1})
        if duplicates:
            errors.append(
                f"Duplicate webhook names found: {', '.join(duplicates)}. "
                f"Each webhook can be defined or updated only once per update."
            )
        for name in draft.webhooks_to_remove:
            if name in touched:
                errors.append(f"Webhook '{name}' cannot be both removed and defined/updated.")
        return PayloadValidator._report(errors, [], [])

    @staticmethod
    def _check_billing(draft, errors: List[str]) -> None:
        billing = draft.billing
        if billing is None:
            return
        for attr in ("min_units", "max_units"):
            value = getattr(billing, attr)
            if value is not None and value < 0:
                errors.append(f"Hub '{draft.name}': {attr} must not be negative.")
        if billing.min_units is not None and billing.max_units is not None and billing.min_units > billing.max_units:
            errors.append(
                f"Hub '{draft.name}': minimum units ({billing.min_units}) exceed "
                f"maximum units ({billing.max_units})."
            )

    @staticmethod
    def validate_hub(draft) -> Dict[str, Any]:
        errors: List[str] = []
        missing: List[str] = []

        PayloadValidator._check_groupable(draft, errors, missing)
        if not HUB_NAME.match(draft.name or ""):
            errors.append(
                f"Hub '{draft.name}' is invalid. "
                f"Hub names must start with a letter and contain at most 64 letters and numbers."
            )
        PayloadValidator._check_billing(draft, errors)
        return PayloadValidator._report(errors, [], missing)

    @staticmethod
    def validate_hub_update(draft) -> Dict[str, Any]:
        errors: List[str] = []
        PayloadValidator._check_billing(draft, errors)
        return PayloadValidator._report(errors, [], [])
