"""Tests for the n8n API client using httpx.MockTransport."""

import httpx
import pytest
from conftest import BASE_URL, remote_workflow

from cron8n.client import N8nClient
from cron8n.config import AuthCredentials, AuthMode
from cron8n.errors import ApiError
from cron8n.workflow.templates import build_workflow


def make_client(handler, mode=AuthMode.API_KEY) -> N8nClient:
    credentials = AuthCredentials(base_url=BASE_URL + "/", auth_mode=mode, secret="s3cret")
    return N8nClient(credentials, transport=httpx.MockTransport(handler))


class TestRequests:
    """Tests for request construction and error mapping."""

    def test_api_key_header(self):
        """Test API-key mode sends X-N8N-API-KEY and no Authorization header."""
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"data": []})

        with make_client(handler) as client:
            client.list_workflows()

        assert seen[0].headers["X-N8N-API-KEY"] == "s3cret"
        assert "Authorization" not in seen[0].headers
        assert str(seen[0].url).startswith("https://n8n.example.com/api/v1/workflows")

    def test_bearer_header(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"data": []})

        with make_client(handler, AuthMode.BEARER_TOKEN) as client:
            client.list_workflows()

        assert seen[0].headers["Authorization"] == "Bearer s3cret"
        assert "X-N8N-API-KEY" not in seen[0].headers

    def test_error_uses_server_message(self):
        with make_client(lambda r: httpx.Response(401, json={"message": "unauthorized"})) as client:
            with pytest.raises(ApiError) as exc_info:
                client.get_workflow("1")

        assert exc_info.value.message == "unauthorized"
        assert exc_info.value.status_code == 401

    def test_error_without_json_body(self):
        with make_client(lambda r: httpx.Response(500, text="<html>boom</html>")) as client:
            with pytest.raises(ApiError) as exc_info:
                client.get_workflow("1")

        assert exc_info.value.message == "API request failed with status 500"
        assert exc_info.value.status_code == 500

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        with make_client(handler) as client:
            with pytest.raises(ApiError, match="Request failed") as exc_info:
                client.get_workflow("1")

        assert exc_info.value.status_code is None

    def test_malformed_workflow_response(self):
        with make_client(lambda r: httpx.Response(200, json={"name": 1})) as client:
            with pytest.raises(ApiError, match="Unexpected workflow"):
                client.get_workflow("1")


class TestConnection:
    """Tests for test_connection."""

    def test_success(self, client):
        assert client.test_connection() is True

    def test_api_error_is_false(self):
        with make_client(lambda r: httpx.Response(403, json={"message": "forbidden"})) as client:
            assert client.test_connection() is False

    def test_network_error_is_false(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out")

        with make_client(handler) as client:
            assert client.test_connection() is False


class TestListWorkflows:
    """Tests for pagination."""

    def test_follows_cursor(self, client, fake_n8n):
        """Test two pages give two calls and concatenated results."""
        fake_n8n.page_size = 2
        for i in range(3):
            fake_n8n.add_workflow(remote_workflow(name=f"wf{i}"))

        workflows = client.list_workflows()

        assert [w.name for w in workflows] == ["wf0", "wf1", "wf2"]
        assert len(fake_n8n.calls("GET", "/workflows")) == 2

    def test_limit_disables_pagination(self, client, fake_n8n):
        """Test an explicit limit makes exactly one call even with a next cursor."""
        for i in range(3):
            fake_n8n.add_workflow(remote_workflow(name=f"wf{i}"))

        workflows = client.list_workflows(limit=1)

        assert [w.name for w in workflows] == ["wf0"]
        assert len(fake_n8n.calls("GET", "/workflows")) == 1

    def test_zero_limit_is_ignored(self, client, fake_n8n):
        """Test limit=0 is not sent and pagination still runs."""
        fake_n8n.page_size = 2
        for i in range(3):
            fake_n8n.add_workflow(remote_workflow(name=f"wf{i}"))

        workflows = client.list_workflows(limit=0)

        assert len(workflows) == 3
        requests = fake_n8n.calls("GET", "/workflows")
        assert len(requests) == 2
        assert "limit" not in requests[0].url.params

    def test_filters_sent_as_params(self, client, fake_n8n):
        fake_n8n.add_workflow(remote_workflow(name="on", active=True))
        fake_n8n.add_workflow(remote_workflow(name="off"))

        workflows = client.list_workflows(active=True, tags=["a", "b"])

        request = fake_n8n.calls("GET", "/workflows")[0]
        assert request.url.params.get("active") == "true"
        assert request.url.params.get_list("tags") == ["a", "b"]
        assert workflows == []


class TestWorkflowCrud:
    """Tests for workflow endpoints."""

    def test_create_sends_payload_without_active(self, client, fake_n8n):
        local = build_workflow("cron-only", "Job", "0 * * * *", "UTC")

        created = client.create_workflow(local.name, local.nodes, local.connections, local.settings)

        assert created.id in fake_n8n.workflows
        request = fake_n8n.calls("POST", "/workflows")[0]
        assert b'"active"' not in request.content

    def test_update_get_delete(self, client, fake_n8n):
        stored = fake_n8n.add_workflow(remote_workflow())
        local = build_workflow("cron-only", "Renamed", "0 * * * *", "UTC")

        updated = client.update_workflow(stored["id"], local.name, local.nodes, local.connections)

        assert updated.name == "Renamed"
        assert client.get_workflow(stored["id"]).name == "Renamed"
        client.delete_workflow(stored["id"])
        assert stored["id"] not in fake_n8n.workflows

    def test_activate_and_deactivate(self, client, fake_n8n):
        stored = fake_n8n.add_workflow(remote_workflow())

        assert client.activate_workflow(stored["id"]).active is True
        assert client.deactivate_workflow(stored["id"]).active is False


class TestTags:
    """Tests for tag reconciliation."""

    def test_get_or_create_tag(self, client, fake_n8n):
        existing = fake_n8n.add_tag("existing")

        assert client.get_or_create_tag("existing").id == existing["id"]
        created = client.get_or_create_tag("fresh")
        assert created.name == "fresh"
        assert len(fake_n8n.tags) == 2

    def test_add_tags_lists_once_and_unions(self, client, fake_n8n):
        """Test existing tags are kept and only missing ones created."""
        keep = fake_n8n.add_tag("team:data")
        managed = fake_n8n.add_tag("managed-by:cron8n")
        stored = fake_n8n.add_workflow(remote_workflow(tags=[keep]))

        tag_ids = client.add_tags_to_workflow(stored["id"], ["managed-by:cron8n", "cron8n:job"])

        assert len(fake_n8n.calls("GET", "/tags")) == 1
        assert len(fake_n8n.calls("POST", "/tags")) == 1
        assert tag_ids[:2] == [keep["id"], managed["id"]]
        assert len(tag_ids) == 3
        assert [t["name"] for t in fake_n8n.workflows[stored["id"]]["tags"]] == [
            "team:data",
            "managed-by:cron8n",
            "cron8n:job",
        ]

    def test_add_tags_is_idempotent(self, client, fake_n8n):
        stored = fake_n8n.add_workflow(remote_workflow())

        first = client.add_tags_to_workflow(stored["id"], ["a", "b"])
        second = client.add_tags_to_workflow(stored["id"], ["a", "b"])

        assert first == second
        assert len(fake_n8n.tags) == 2

    def test_tag_list_without_data(self):
        with make_client(lambda r: httpx.Response(200, json=[])) as client:
            with pytest.raises(ApiError):
                client.list_tags()
