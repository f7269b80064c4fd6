# armfluent/services/arm_client.py
from __future__ import annotations
import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, Iterator, Optional

import requests

from ..errors import RemoteError
from ..models import AzureCreds
from .service_registry import ServiceRegistry, RESOURCE_GROUPS

logger = logging.getLogger(__name__)

DEFAULT_MANAGEMENT_URL = "https://management.azure.com"
DEFAULT_AUTHORITY_URL = "https://login.microsoftonline.com"
TOKEN_REFRESH_MARGIN = 60


class ArmClient:
    """
    Thin Resource Manager transport: bearer token, REST verbs, paging and futures.

    Every call is attempted exactly once. HTTP failures surface as RemoteError
    (NotFoundError for 404) with the service's error code and message.
    """

    def __init__(
        self,
        creds: AzureCreds,
        management_url: str = DEFAULT_MANAGEMENT_URL,
        authority_url: str = DEFAULT_AUTHORITY_URL,
        timeout: float = 60.0,
        max_workers: int = 4,
        session: Optional[requests.Session] = None,
    ):
        self.creds = creds
        self.management_url = management_url.rstrip("/")
        self.authority_url = authority_url.rstrip("/")
        self.timeout = timeout
        self.max_workers = max_workers
        self.session = session or requests.Session()
        self.registry = ServiceRegistry()
        self._token: Optional[str] = None
        self._token_expires_at = 0.0
        self._executor: Optional[ThreadPoolExecutor] = None
        self._lock = threading.Lock()
        self._token_lock = threading.Lock()

    @property
    def subscription_id(self) -> str:
        return self.creds.subscriptionId

    # -------------------- Auth --------------------

    def _get_azure_token(self) -> str:
        """Get Azure AD access token for Resource Manager API"""
        with self._token_lock:
            if self._token and time.time() < self._token_expires_at:
                return self._token

            url = f"{self.authority_url}/{self.creds.tenantId}/oauth2/v2.0/token"
            data = {
                "client_id": self.creds.clientId,
                "client_secret": self.creds.clientSecret,
                "scope": f"{self.management_url}/.default",
                "grant_type": "client_credentials",
            }
            try:
                response = self.session.post(url, data=data, timeout=self.timeout)
            except requests.RequestException as e:
                raise RemoteError(f"Token request failed: {e}") from e
            if response.status_code >= 400:
                raise RemoteError.from_response(response)

            payload = response.json()
            self._token = payload["access_token"]
            expires_in = float(payload.get("expires_in", 3600))
            self._token_expires_at = time.time() + max(expires_in - TOKEN_REFRESH_MARGIN, 0)
            logger.debug("Acquired management token for tenant %s", self.creds.tenantId)
            return self._token

    # -------------------- URLs --------------------

    def api_version(self, kind: str) -> str:
        return self.registry.get(kind).api_version

    def resource_url(self, resource_group: Optional[str], kind: str, *names: str, action: Optional[str] = None) -> str:
        """
        Build the URL of a resource, of a collection, or of an action on a resource.

        Args:
            resource_group: Resource group name (the group's own name for resource groups)
            kind: Registered resource kind
            names: Names for the path segments of the kind, parent first. Fewer names
                than segments addresses the collection of the last segment.
            action: Optional trailing action (e.g., "listCredentials")

        Returns:
            Absolute URL without query string
        """
        resource_type = self.registry.get(kind)
        base = f"{self.management_url}/subscriptions/{self.subscription_id}"
        if kind == RESOURCE_GROUPS:
            url = f"{base}/resourcegroups"
            if resource_group:
                url = f"{url}/{resource_group}"
        else:
            url = f"{base}/resourceGroups/{resource_group}/providers/{resource_type.namespace}"
            for idx, segment in enumerate(resource_type.path):
                url = f"{url}/{segment}"
                if idx < len(names):
                    url = f"{url}/{names[idx]}"
                else:
                    break
        if action:
            url = f"{url}/{action}"
        return url

    # -------------------- HTTP --------------------

    def _send(self, method: str, url: str, api_version: Optional[str], body: Optional[Dict[str, Any]]) -> requests.Response:
        headers = {
            "Authorization": f"Bearer {self._get_azure_token()}",
            "Content-Type": "application/json",
        }
        params = {"api-version": api_version} if api_version else None
        try:
            response = self.session.request(
                method, url, params=params, json=body, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise RemoteError(f"{method} {url} failed: {e}") from e

        logger.debug("%s %s -> %s", method, url, response.status_code)
        return response

    def request(self, method: str, url: str, api_version: Optional[str], body: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        response = self._send(method, url, api_version, body)
        if response.status_code >= 400:
            raise RemoteError.from_response(response)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RemoteError(
                f"{method} {url} returned a non-JSON body", status_code=response.status_code, response=response
            ) from e

    def get(self, url: str, api_version: str) -> Optional[Dict[str, Any]]:
        return self.request("GET", url, api_version)

    def put(self, url: str, api_version: str, body: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self.request("PUT", url, api_version, body)

    def patch(self, url: str, api_version: str, body: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self.request("PATCH", url, api_version, body)

    def post(self, url: str, api_version: str, body: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        return self.request("POST", url, api_version, body)

    def delete(self, url: str, api_version: str) -> None:
        self.request("DELETE", url, api_version)

    def head(self, url: str, api_version: str) -> int:
        response = self._send("HEAD", url, api_version, None)
        if response.status_code >= 400 and response.status_code != 404:
            raise RemoteError.from_response(response)
        return response.status_code

    def list(self, url: str, api_version: str) -> Iterator[Dict[str, Any]]:
        """Yield the items of a collection, following nextLink across pages"""
        next_url: Optional[str] = url
        version: Optional[str] = api_version
        while next_url:
            page = self.request("GET", next_url, version) or {}
            for item in page.get("value", []):
                yield item
            next_url = page.get("nextLink")
            # nextLink already carries its query string
            version = None

    # -------------------- Async --------------------

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.max_workers, thread_name_prefix="armfluent"
                )
            executor = self._executor
        return executor.submit(fn, *args, **kwargs)

    def close(self) -> None:
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)
        self.session.close()
