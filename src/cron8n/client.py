"""
n8n REST API client.

Thin synchronous wrapper over /api/v1 built on httpx. Every failure surfaces
as ApiError: non-2xx responses carry the status code and the server's
`message` when it sends one, transport failures carry no status.
"""

import logging
from typing import Any

import httpx

from .config import AuthCredentials
from .constants import API_PREFIX, DEFAULT_TIMEOUT
from .errors import ApiError
from .validation import ParseResult
from .workflow.models import Node, Tag, Workflow, WorkflowPage

logger = logging.getLogger(__name__)


def _unwrap(result: ParseResult, what: str):
    if not result.success:
        raise ApiError(f"Unexpected {what} in API response: {result.error}")
    return result.value


class N8nClient:
    """
    Client for one n8n instance.

    Args:
        credentials: Base URL, auth mode and secret
        timeout: Request timeout in seconds
        transport: Optional httpx transport (tests pass httpx.MockTransport)
    """

    def __init__(
        self,
        credentials: AuthCredentials,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        self.credentials = credentials
        self.base_url = credentials.base_url.rstrip("/") + API_PREFIX
        self._http = httpx.Client(
            base_url=self.base_url,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
                **credentials.auth_headers(),
            },
            timeout=timeout,
            transport=transport,
        )

    def close(self):
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _request(self, method: str, path: str, *, params=None, json: Any = None) -> Any:
        logger.debug("%s %s%s params=%s", method, self.base_url, path, params)
        try:
            response = self._http.request(method, path, params=params, json=json)
        except httpx.HTTPError as e:
            raise ApiError(f"Request failed: {e}") from e

        if response.status_code >= 400:
            message = f"API request failed with status {response.status_code}"
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and isinstance(body.get("message"), str) and body["message"]:
                message = body["message"]
            raise ApiError(message, status_code=response.status_code)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"Request failed: invalid JSON response ({e})") from e

    def test_connection(self) -> bool:
        """True if GET /workflows?limit=1 succeeds."""
        try:
            self._request("GET", "/workflows", params={"limit": 1})
        except ApiError as e:
            logger.debug("Connection test failed: %s", e)
            return False
        return True

    # Workflows

    def list_workflows(
        self,
        active: bool | None = None,
        tags: list[str] | None = None,
        limit: int | None = None,
        cursor: str | None = None,
    ) -> list[Workflow]:
        """
        List workflows, following nextCursor until the server stops sending one.

        A positive limit disables pagination: exactly one request is made.
        """
        workflows: list[Workflow] = []
        while True:
            params: list[tuple[str, str]] = []
            if limit:
                params.append(("limit", str(limit)))
            if cursor:
                params.append(("cursor", cursor))
            if active is not None:
                params.append(("active", "true" if active else "false"))
            for tag in tags or []:
                params.append(("tags", tag))

            page = _unwrap(WorkflowPage.parse(self._request("GET", "/workflows", params=params)), "workflow list")
            workflows.extend(page.data)
            cursor = page.next_cursor

            if limit or not cursor:
                return workflows

    def get_workflow(self, workflow_id: str) -> Workflow:
        return _unwrap(Workflow.parse(self._request("GET", f"/workflows/{workflow_id}")), "workflow")

    def create_workflow(
        self,
        name: str,
        nodes: list[Node],
        connections: dict,
        settings: dict | None = None,
    ) -> Workflow:
        """Create a workflow. `active` is read-only on create; activate separately."""
        body = {
            "name": name,
            "nodes": [n.to_dict() for n in nodes],
            "connections": connections,
            "settings": settings or {},
        }
        return _unwrap(Workflow.parse(self._request("POST", "/workflows", json=body)), "workflow")

    def update_workflow(
        self,
        workflow_id: str,
        name: str,
        nodes: list[Node],
        connections: dict,
        settings: dict | None = None,
    ) -> Workflow:
        body = {
            "name": name,
            "nodes": [n.to_dict() for n in nodes],
            "connections": connections,
            "settings": settings or {},
        }
        return _unwrap(Workflow.parse(self._request("PUT", f"/workflows/{workflow_id}", json=body)), "workflow")

    def delete_workflow(self, workflow_id: str):
        self._request("DELETE", f"/workflows/{workflow_id}")

    def activate_workflow(self, workflow_id: str) -> Workflow:
        return _unwrap(Workflow.parse(self._request("POST", f"/workflows/{workflow_id}/activate")), "workflow")

    def deactivate_workflow(self, workflow_id: str) -> Workflow:
        return _unwrap(Workflow.parse(self._request("POST", f"/workflows/{workflow_id}/deactivate")), "workflow")

    # Tags

    def list_tags(self) -> list[Tag]:
        payload = self._request("GET", "/tags")
        raw = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(raw, list):
            raise ApiError("Unexpected tag list in API response: missing 'data' list")
        return [_unwrap(Tag.parse(item), "tag") for item in raw]

    def create_tag(self, name: str) -> Tag:
        return _unwrap(Tag.parse(self._request("POST", "/tags", json={"name": name})), "tag")

    def get_or_create_tag(self, name: str) -> Tag:
        existing = next((t for t in self.list_tags() if t.name == name), None)
        return existing or self.create_tag(name)

    def set_workflow_tags(self, workflow_id: str, tag_ids: list[str]):
        self._request("PUT", f"/workflows/{workflow_id}/tags", json=[{"id": tag_id} for tag_id in tag_ids])

    def add_tags_to_workflow(self, workflow_id: str, tag_names: list[str]) -> list[str]:
        """
        Ensure the named tags exist and are attached to a workflow.

        Lists tags once, creates only the missing ones, then sets the union of
        the workflow's current tag ids and the new ones (current first).
        Returns the tag ids that were set.
        """
        by_name = {t.name: t for t in self.list_tags()}
        new_ids = []
        for name in tag_names:
            tag = by_name.get(name)
            if tag is None:
                tag = self.create_tag(name)
                by_name[name] = tag
            new_ids.append(tag.id)

        workflow = self.get_workflow(workflow_id)
        tag_ids = list(dict.fromkeys([t.id for t in workflow.tags] + new_ids))
        self.set_workflow_tags(workflow_id, tag_ids)
        return tag_ids
