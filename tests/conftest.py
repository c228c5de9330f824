"""
Shared fixtures for the Kontent CSV sync tests
"""
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

import httpx
import pytest

from kontent_sync.core.settings import Environment, KontentSettings
from kontent_sync.services.sync.models import RunContext


HEADER = "default,zh-HK,zh-TW,ko-KR,ja-JP,es-MX"
LANGUAGES = ["default", "zh-HK", "zh-TW", "ko-KR", "ja-JP", "es-MX"]
BASE_URL = "https://manage.kontent.test/v2/projects"
DEV_PROJECT = "dev-project"
PROD_PROJECT = "prod-project"


@pytest.fixture
def anyio_backend():
    return "asyncio"


# ============================================================================
# Fake Kontent Management API
# ============================================================================

class FakeKontent:
    """
    In-memory Kontent project served through httpx.MockTransport.

    Records every call as (method, path relative to the project) and lets
    tests inject failures per codename / language.
    """

    def __init__(self, project_id: str = DEV_PROJECT):
        self.project_id = project_id
        self.items: Dict[str, Dict[str, Any]] = {}
        self.variants: Dict[Tuple[str, str], List[Dict[str, Any]]] = {}
        self.review: Set[Tuple[str, str]] = set()
        self.published: Set[Tuple[str, str]] = set()
        self.calls: List[Tuple[str, str]] = []
        self.workflows: List[Dict[str, Any]] = [
            {
                "id": "wf-default",
                "name": "Default",
                "codename": "default",
                "steps": [
                    {"id": "step-draft", "name": "Draft", "codename": "draft"},
                    {"id": "step-review", "name": "Review", "codename": "review"},
                ],
            }
        ]
        self.types: List[Dict[str, Any]] = []

        # failure injection
        self.lookup_errors: Set[str] = set()
        self.lookup_transport_errors: Set[str] = set()
        self.create_errors: Dict[str, str] = {}
        self.variant_errors: Set[Tuple[str, str]] = set()
        self.publish_errors: Set[Tuple[str, str]] = set()

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def add_item(self, codename: str, name: str = "Existing") -> Dict[str, Any]:
        item = {"id": f"item-{len(self.items) + 1}", "name": name, "codename": codename}
        self.items[codename] = item
        return item

    def calls_to(self, method: str, fragment: str = "") -> List[str]:
        return [path for m, path in self.calls if m == method and fragment in path]

    def _codename_of(self, item_id: str) -> Optional[str]:
        for codename, item in self.items.items():
            if item["id"] == item_id:
                return codename
        return None

    def handler(self, request: httpx.Request) -> httpx.Response:
        prefix = f"/v2/projects/{self.project_id}/"
        path = request.url.path
        assert path.startswith(prefix), f"Unexpected project path {path}"
        assert request.headers["Authorization"].startswith("Bearer ")
        path = path[len(prefix):]
        self.calls.append((request.method, path))
        parts = path.split("/")

        if request.method == "GET" and parts[:2] == ["items", "codename"]:
            codename = parts[2]
            if codename in self.lookup_transport_errors:
                raise httpx.ConnectError("connection reset", request=request)
            if codename in self.lookup_errors:
                return httpx.Response(500, json={"message": "Internal error", "error_code": 0})
            if codename in self.items:
                return httpx.Response(200, json=self.items[codename])
            return httpx.Response(404, json={"message": f"The requested content item '{codename}' was not found."})

        if request.method == "POST" and parts == ["items"]:
            body = json.loads(request.content)
            codename = body["codename"]
            if codename in self.create_errors:
                return httpx.Response(400, json={
                    "message": "The provided request body is invalid.",
                    "error_code": 5,
                    "validation_errors": [{"message": self.create_errors[codename], "path": "name"}],
                })
            item = self.add_item(codename, body["name"])
            item["type"] = body["type"]
            return httpx.Response(201, json=item)

        if request.method == "PUT" and len(parts) >= 5 and parts[0] == "items" and parts[2:4] == ["variants", "codename"]:
            item_id, language = parts[1], parts[4]
            key = (self._codename_of(item_id), language)
            action = parts[5] if len(parts) > 5 else None

            if action is None:
                if key in self.variant_errors:
                    return httpx.Response(400, json={"message": f"Variant {language} rejected"})
                self.variants[key] = json.loads(request.content)["elements"]
                return httpx.Response(200, json={"item": {"id": item_id}, "language": {"codename": language}})
            if action == "change-workflow":
                body = json.loads(request.content)
                assert body["step_identifier"]["id"] == "step-review"
                self.review.add(key)
                return httpx.Response(204)
            if action == "publish":
                if key in self.publish_errors:
                    return httpx.Response(400, json={"message": f"Cannot publish {language}"})
                self.published.add(key)
                return httpx.Response(204)

        if request.method == "GET" and parts == ["workflows"]:
            return httpx.Response(200, json=self.workflows)

        if request.method == "GET" and parts == ["types"]:
            return httpx.Response(200, json={"types": self.types, "pagination": {"continuation_token": None}})

        return httpx.Response(404, json={"message": f"No route {request.method} {path}"})


@pytest.fixture
def fake_kontent() -> FakeKontent:
    return FakeKontent(DEV_PROJECT)


@pytest.fixture
def fake_kontent_prod() -> FakeKontent:
    return FakeKontent(PROD_PROJECT)


# ============================================================================
# Settings / run context
# ============================================================================

@pytest.fixture
def kontent_settings() -> KontentSettings:
    return KontentSettings(
        kontent_dev_project_id=DEV_PROJECT,
        kontent_dev_management_api_key="dev-key",
        kontent_dev_base_url=BASE_URL,
        kontent_prod_project_id=PROD_PROJECT,
        kontent_prod_management_api_key="prod-key",
        kontent_prod_base_url=BASE_URL,
        content_type_codename="partner_list",
    )


@pytest.fixture
def dev_context(kontent_settings) -> RunContext:
    return RunContext.from_settings(Environment.DEV, "partner_list", kontent_settings)


@pytest.fixture
def prod_context(kontent_settings) -> RunContext:
    return RunContext.from_settings(Environment.PROD, "partner_list", kontent_settings)


# ============================================================================
# CSV files
# ============================================================================

@pytest.fixture
def write_csv(tmp_path):
    """Write CSV text to a temporary file and return its path"""
    def _write(content: str, name: str = "upload.csv") -> str:
        path = Path(tmp_path) / name
        path.write_text(content, encoding="utf-8")
        return str(path)
    return _write
