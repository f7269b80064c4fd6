import re

KNOWN_REGIONS = frozenset({
    "eastus", "eastus2", "westus", "westus2", "westus3", "centralus",
    "northcentralus", "southcentralus", "westcentralus",
    "canadacentral", "canadaeast", "brazilsouth", "mexicocentral",
    "northeurope", "westeurope", "uksouth", "ukwest", "francecentral",
    "germanywestcentral", "switzerlandnorth", "norwayeast", "swedencentral",
    "polandcentral", "italynorth", "spaincentral",
    "eastasia", "southeastasia", "japaneast", "japanwest",
    "koreacentral", "koreasouth", "australiaeast", "australiasoutheast",
    "australiacentral", "centralindia", "southindia", "westindia",
    "uaenorth", "qatarcentral", "israelcentral", "southafricanorth",
})

REGISTRY_NAME = re.compile(r"^[a-zA-Z0-9]{5,50}$")
WEBHOOK_NAME = REGISTRY_NAME
STORAGE_ACCOUNT_NAME = re.compile(r"^[a-z0-9]{3,24}$")
HUB_NAME = re.compile(r"^[a-zA-Z][a-zA-Z0-9]{0,63}$")


def safe_name(name: str) -> str:
    return re.sub(r"[^a-zA-Z0-9-]", "-", str(name))[:63].strip("-")


def normalize_region(region: str) -> str:
    # "East US" / "east-us" / "EASTUS" all mean eastus
    return re.sub(r"[\s_-]", "", str(region or "")).lower()


def is_known_region(region: str) -> bool:
    return normalize_region(region) in KNOWN_REGIONS
