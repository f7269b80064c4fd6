"""Shared fixtures: an ArmClient that records calls instead of talking to Azure."""

import copy
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from armfluent.models import AzureCreds
from armfluent.services.arm_client import ArmClient

SUBSCRIPTION = "00000000-0000-0000-0000-000000000000"


@dataclass
class Call:
    method: str
    url: str
    api_version: Optional[str]
    body: Optional[Dict[str, Any]]


class FakeArmClient(ArmClient):
    """
    Records every request. Responses are looked up by (method, url); PUT and
    PATCH without a canned response echo the body back with id and name.
    """

    def __init__(self):
        super().__init__(
            AzureCreds(clientId="client", clientSecret="secret", subscriptionId=SUBSCRIPTION, tenantId="tenant"),
            session=MagicMock(),
        )
        self.calls: List[Call] = []
        self.responses: Dict[tuple, Any] = {}

    def url(self, path: str) -> str:
        return f"{self.management_url}/subscriptions/{SUBSCRIPTION}{path}"

    def respond(self, method: str, path: str, response: Any) -> None:
        self.responses[(method, self.url(path))] = response

    def request(self, method, url, api_version, body=None):
        self.calls.append(Call(method, url, api_version, copy.deepcopy(body)))
        response = self.responses.get((method, url))
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(body)
        if response is not None:
            return copy.deepcopy(response)
        if method in ("PUT", "PATCH"):
            resource_id = url[len(self.management_url):]
            return {**copy.deepcopy(body or {}), "id": resource_id, "name": resource_id.rsplit("/", 1)[-1]}
        return None

    def head(self, url, api_version):
        self.calls.append(Call("HEAD", url, api_version, None))
        return self.responses.get(("HEAD", url), 204)

    def methods(self) -> List[str]:
        return [call.method for call in self.calls]

    def calls_for(self, method: str) -> List[Call]:
        return [call for call in self.calls if call.method == method]


@pytest.fixture
def fake_client():
    client = FakeArmClient()
    yield client
    client.close()


def resource_id(resource_group: str, provider_path: str) -> str:
    return f"/subscriptions/{SUBSCRIPTION}/resourceGroups/{resource_group}/providers/{provider_path}"
