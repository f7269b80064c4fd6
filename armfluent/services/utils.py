from __future__ import annotations
from typing import Dict, Optional


def parse_resource_id(resource_id: Optional[str]) -> Dict[str, str]:
    """Split '/subscriptions/s/resourceGroups/rg/providers/ns/type/name' into a lower-cased key map."""
    parts = [p for p in (resource_id or "").split("/") if p]
    parsed: Dict[str, str] = {}
    if "providers" in parts:
        idx = parts.index("providers")
        if idx + 1 < len(parts):
            parsed["namespace"] = parts[idx + 1]
        head, tail = parts[:idx], parts[idx + 2:]
    else:
        head, tail = parts, []
    for key, value in zip(head[::2], head[1::2]):
        parsed[key.lower()] = value
    for key, value in zip(tail[::2], tail[1::2]):
        parsed[key] = value
    return parsed


def resource_group_from_id(resource_id: Optional[str]) -> Optional[str]:
    return parse_resource_id(resource_id).get("resourcegroups")


def name_from_id(resource_id: Optional[str]) -> Optional[str]:
    parts = [p for p in (resource_id or "").split("/") if p]
    return parts[-1] if parts else None
