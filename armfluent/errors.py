"""
Error taxonomy for the fluent resource builders.

Local problems are reported as ValidationError before any request is sent.
Anything Resource Manager (or the network) reports comes back as RemoteError,
with NotFoundError singled out for resources that no longer exist.
"""

from __future__ import annotations
from typing import Iterable, List, Optional

import requests


class ArmError(Exception):
    """Base class for every error raised by armfluent"""


class ValidationError(ArmError, ValueError):
    """A definition or update failed local validation."""

    def __init__(self, errors: Iterable[str], missing: Optional[Iterable[str]] = None):
        self.errors: List[str] = list(errors)
        self.missing: List[str] = list(missing or [])
        super().__init__("; ".join(self.errors) or "validation failed")


class RemoteError(ArmError):
    """Failure reported by Resource Manager or by the HTTP layer underneath it."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        response: Optional[requests.Response] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.code = code
        self.response = response
        prefix = f"[{status_code}] " if status_code is not None else ""
        suffix = f" ({code})" if code else ""
        super().__init__(f"{prefix}{message}{suffix}")

    @classmethod
    def from_response(cls, response: requests.Response) -> "RemoteError":
        code = None
        message = response.text or response.reason or "request failed"
        try:
            payload = response.json()
        except ValueError:
            payload = None
        error = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(error, dict):
            code = error.get("code") or None
            message = error.get("message") or message

        error_cls = NotFoundError if response.status_code == 404 else cls
        return error_cls(message, status_code=response.status_code, code=code, response=response)


class NotFoundError(RemoteError):
    """The target resource does not exist (HTTP 404)."""
