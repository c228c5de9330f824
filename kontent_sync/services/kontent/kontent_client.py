import httpx
from typing import Dict, Any, List, Optional, Type
import logging

from kontent_sync.core.exceptions import (
    KontentApiException,
    ItemLookupError,
    ItemCreateError,
    VariantError,
    WorkflowError,
    WorkflowLookupError,
    PublishError,
)
from kontent_sync.services.sync.models import RunContext

logger = logging.getLogger(__name__)

DEFAULT_WORKFLOW = "default"
REVIEW_STEP = "review"


class KontentClient:
    """
    Kontent.ai Management API v2 HTTP client bound to one run.

    Use as async context manager: the underlying httpx client is opened on
    entry and closed on exit. Requests are never retried.
    """

    def __init__(
        self,
        context: RunContext,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.context = context
        self.timeout = timeout
        self.transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        """Async context manager entry"""
        self._client = httpx.AsyncClient(
            base_url=self.context.project_url,
            headers=self._get_headers(),
            timeout=self.timeout,
            transport=self.transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def find_item(self, codename: str) -> Optional[Dict[str, Any]]:
        """
        Look up a content item by codename

        Returns:
            The item, or None when Kontent answers 404

        Raises:
            ItemLookupError: Transport failure or any other non-2xx answer
        """
        response = await self._request("GET", f"items/codename/{codename}", ItemLookupError)
        if response.status_code == 404:
            logger.info(f"Kontent item '{codename}' not found")
            return None
        message = f"Error finding content item '{codename}'"
        self._raise_for_status(response, ItemLookupError, message)
        return self._parse_object(response, ItemLookupError, message, required="id")

    async def create_item(self, name: str, codename: str, content_type: str) -> Dict[str, Any]:
        """
        Create a content item

        Returns:
            The created item (with its 'id')
        """
        payload = {
            "name": name,
            "codename": codename,
            "type": {"codename": content_type},
        }
        response = await self._request("POST", "items", ItemCreateError, json=payload)
        message = f"Error creating content item '{codename}'"
        self._raise_for_status(response, ItemCreateError, message)
        return self._parse_object(response, ItemCreateError, message, required="id")

    async def upsert_variant(self, item_id: str, locale_id: str, elements: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Create or update the language variant of an item"""
        response = await self._request(
            "PUT",
            f"items/{item_id}/variants/codename/{locale_id}",
            VariantError,
            json={"elements": elements},
        )
        self._raise_for_status(response, VariantError, f"Error adding language variant '{locale_id}' to item {item_id}")
        return self._json_or_empty(response)

    async def fetch_review_step_id(self) -> str:
        """
        Id of the 'review' step of the 'default' workflow

        Raises:
            WorkflowLookupError: Workflows cannot be listed, or the workflow/step is missing
        """
        response = await self._request("GET", "workflows", WorkflowLookupError)
        message = "Error listing workflows"
        self._raise_for_status(response, WorkflowLookupError, message)

        workflows = self._parse_json(response, WorkflowLookupError, message)
        if isinstance(workflows, dict):
            workflows = workflows.get("workflows", [])
        if not isinstance(workflows, list):
            raise self._malformed(response, WorkflowLookupError, message, "expected a list of workflows")

        workflow = next((w for w in workflows if self._is_named(w, DEFAULT_WORKFLOW)), None)
        if workflow is None:
            raise WorkflowLookupError(f"Workflow '{DEFAULT_WORKFLOW}' not found")

        steps = workflow.get("steps")
        if not isinstance(steps, list):
            steps = []
        step = next((s for s in steps if self._is_named(s, REVIEW_STEP)), None)
        if step is None:
            raise WorkflowLookupError(f"Step '{REVIEW_STEP}' not found in workflow '{DEFAULT_WORKFLOW}'")
        if not step.get("id"):
            raise self._malformed(response, WorkflowLookupError, message, f"step '{REVIEW_STEP}' has no id")

        return step["id"]

    async def transition_to_review(self, item_id: str, locale_id: str, step_id: str) -> None:
        """Move a language variant to the review step of the default workflow"""
        payload = {
            "workflow_identifier": {"codename": DEFAULT_WORKFLOW},
            "step_identifier": {"id": step_id},
        }
        response = await self._request(
            "PUT",
            f"items/{item_id}/variants/codename/{locale_id}/change-workflow",
            WorkflowError,
            json=payload,
        )
        self._raise_for_status(response, WorkflowError, f"Error moving variant '{locale_id}' of item {item_id} to review")

    async def publish_variant(self, item_id: str, locale_id: str) -> None:
        """Publish a language variant"""
        response = await self._request(
            "PUT",
            f"items/{item_id}/variants/codename/{locale_id}/publish",
            PublishError,
        )
        self._raise_for_status(response, PublishError, f"Error publishing variant '{locale_id}' of item {item_id}")

    async def list_content_types(self) -> List[Dict[str, Any]]:
        """All content types of the project"""
        response = await self._request("GET", "types", KontentApiException)
        message = "Error listing content types"
        self._raise_for_status(response, KontentApiException, message)
        data = self._parse_json(response, KontentApiException, message)
        if isinstance(data, dict):
            data = data.get("types", [])
        if not isinstance(data, list):
            raise self._malformed(response, KontentApiException, message, "expected a list of content types")
        return data

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": f"Bearer {self.context.api_key}",
        }

    async def _request(
        self,
        method: str,
        path: str,
        error_class: Type[KontentApiException],
        **kwargs
    ) -> httpx.Response:
        """Send one request, turning transport failures into error_class"""
        if self._client is None:
            raise RuntimeError("Client not initialized. Use async context manager.")

        logger.info(f"Kontent {method} {path}")
        try:
            return await self._client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"Kontent {method} {path} failed: {type(e).__name__}: {e}")
            raise error_class(f"Kontent request {method} {path} failed: {e}", details={"path": path})

    def _raise_for_status(
        self,
        response: httpx.Response,
        error_class: Type[KontentApiException],
        message: str
    ) -> None:
        if response.is_success:
            return

        payload = self._json_or_empty(response)
        logger.error(f"{message}: HTTP {response.status_code} {payload or response.text}")
        raise error_class(
            f"{message}: HTTP {response.status_code}",
            remote_status=response.status_code,
            payload=payload,
            details={"path": response.request.url.path},
        )

    def _parse_json(
        self,
        response: httpx.Response,
        error_class: Type[KontentApiException],
        message: str
    ) -> Any:
        """Decode a 2xx body, raising error_class when it is not JSON"""
        try:
            return response.json()
        except ValueError:
            raise self._malformed(response, error_class, message, "response body is not JSON")

    def _parse_object(
        self,
        response: httpx.Response,
        error_class: Type[KontentApiException],
        message: str,
        required: str
    ) -> Dict[str, Any]:
        """Decode a 2xx body that must be a JSON object holding the `required` key"""
        data = self._parse_json(response, error_class, message)
        if not isinstance(data, dict):
            raise self._malformed(response, error_class, message, "expected a JSON object")
        if not data.get(required):
            raise self._malformed(response, error_class, message, f"'{required}' missing from response")
        return data

    @staticmethod
    def _malformed(
        response: httpx.Response,
        error_class: Type[KontentApiException],
        message: str,
        problem: str
    ) -> KontentApiException:
        logger.error(f"{message}: unexpected HTTP {response.status_code} response, {problem}: {response.text[:200]}")
        return error_class(
            f"{message}: unexpected response ({problem})",
            remote_status=response.status_code,
            details={"path": response.request.url.path},
        )

    @staticmethod
    def _json_or_empty(response: httpx.Response) -> Dict[str, Any]:
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _is_named(entry: Dict[str, Any], name: str) -> bool:
        if not isinstance(entry, dict):
            return False
        return any(
            str(entry.get(key, "")).lower() == name
            for key in ("name", "codename")
        )
