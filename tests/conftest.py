"""Shared pytest fixtures for cron8n tests."""

import json

import httpx
import pytest
from typer.testing import CliRunner

from cron8n.client import N8nClient
from cron8n.config import AuthCredentials, AuthMode, CredentialStore
from cron8n.manifest import ManifestStore
from cron8n.registry import Registry

BASE_URL = "https://n8n.example.com"
API_KEY = "n8n_api_test_secret_1234"


class FakeN8n:
    """
    In-memory n8n REST API for httpx.MockTransport.

    Implements the /api/v1 endpoints cron8n uses. Set `fail[(method, path)]`
    to (status, body) to make a route return an error.
    """

    def __init__(self):
        self.workflows: dict[str, dict] = {}
        self.tags: dict[str, dict] = {}
        self.requests: list[httpx.Request] = []
        self.fail: dict[tuple[str, str], tuple[int, dict]] = {}
        self.page_size = 100
        self._next_id = 100

    def _new_id(self) -> str:
        self._next_id += 1
        return str(self._next_id)

    def add_workflow(self, workflow: dict) -> dict:
        stored = {"active": False, "connections": {}, "settings": {}, "tags": [], **workflow}
        stored.setdefault("id", self._new_id())
        self.workflows[stored["id"]] = stored
        return stored

    def add_tag(self, name: str) -> dict:
        tag = {"id": f"tag-{self._new_id()}", "name": name}
        self.tags[tag["id"]] = tag
        return tag

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == "/api/v1" + path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api/v1")
        if (request.method, path) in self.fail:
            status, body = self.fail[(request.method, path)]
            return httpx.Response(status, json=body)

        body = json.loads(request.content) if request.content else None
        parts = path.strip("/").split("/")

        if parts == ["tags"]:
            if request.method == "GET":
                return httpx.Response(200, json={"data": list(self.tags.values()), "nextCursor": None})
            return httpx.Response(200, json=self.add_tag(body["name"]))

        if parts == ["workflows"]:
            if request.method == "GET":
                return self._list_workflows(request)
            return httpx.Response(200, json=self.add_workflow({**body, "active": False}))

        if parts[0] == "workflows" and len(parts) >= 2:
            workflow = self.workflows.get(parts[1])
            if workflow is None:
                return httpx.Response(404, json={"message": "Workflow not found"})

            action = parts[2] if len(parts) > 2 else None
            if action is None and request.method == "GET":
                return httpx.Response(200, json=workflow)
            if action is None and request.method == "PUT":
                workflow.update(body)
                return httpx.Response(200, json=workflow)
            if action is None and request.method == "DELETE":
                return httpx.Response(200, json=self.workflows.pop(parts[1]))
            if action == "activate":
                workflow["active"] = True
                return httpx.Response(200, json=workflow)
            if action == "deactivate":
                workflow["active"] = False
                return httpx.Response(200, json=workflow)
            if action == "tags":
                workflow["tags"] = [self.tags[item["id"]] for item in body]
                return httpx.Response(200, json=workflow["tags"])

        return httpx.Response(404, json={"message": f"No route for {request.method} {path}"})

    def _list_workflows(self, request: httpx.Request) -> httpx.Response:
        items = list(self.workflows.values())
        active = request.url.params.get("active")
        if active is not None:
            items = [w for w in items if w["active"] == (active == "true")]
        for tag in request.url.params.get_list("tags"):
            items = [w for w in items if tag in [t["name"] for t in w["tags"]]]

        size = int(request.url.params.get("limit", self.page_size))
        start = int(request.url.params.get("cursor", 0))
        page = items[start : start + size]
        next_cursor = str(start + size) if start + size < len(items) else None
        return httpx.Response(200, json={"data": page, "nextCursor": next_cursor})


def schedule_node(cron="0 9 * * 1-5", timezone="Europe/London", name="Schedule Trigger") -> dict:
    """Schedule Trigger node in the rule.interval layout."""
    parameters = {"rule": {"interval": [{"field": "cronExpression", "expression": cron}]}}
    if timezone:
        parameters["options"] = {"timezone": timezone}
    return {
        "id": "trigger",
        "name": name,
        "type": "n8n-nodes-base.scheduleTrigger",
        "typeVersion": 1.2,
        "position": [250, 300],
        "parameters": parameters,
    }


def remote_workflow(name="Daily Report", nodes=None, tags=None, **extra) -> dict:
    """A workflow document as the n8n API returns it."""
    if nodes is None:
        nodes = [
            schedule_node(),
            {
                "id": "action",
                "name": "Send Report",
                "type": "n8n-nodes-base.httpRequest",
                "typeVersion": 4.2,
                "position": [500, 300],
                "parameters": {"url": "https://example.com/report"},
                "notes": "kept on round-trip",
            },
        ]
    return {"name": name, "nodes": nodes, "connections": {}, "settings": {}, "tags": tags or [], **extra}


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def home(tmp_path, monkeypatch):
    """Isolated cron8n home directory; environment overrides cleared."""
    home_dir = tmp_path / "home"
    monkeypatch.setenv("CRON8N_HOME", str(home_dir))
    for name in ("CRON8N_TIMEZONE", "CRON8N_UI_PORT", "CRON8N_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return home_dir


@pytest.fixture
def project(tmp_path, monkeypatch):
    """Project directory, also made the working directory."""
    project_dir = (tmp_path / "project").resolve()
    project_dir.mkdir()
    monkeypatch.chdir(project_dir)
    return project_dir


@pytest.fixture
def store(project):
    return ManifestStore(project)


@pytest.fixture
def registry(home):
    return Registry(home)


@pytest.fixture
def credential_store(home):
    return CredentialStore(home)


@pytest.fixture
def credentials():
    return AuthCredentials(base_url=BASE_URL, auth_mode=AuthMode.API_KEY, secret=API_KEY)


@pytest.fixture
def fake_n8n():
    return FakeN8n()


@pytest.fixture
def client(fake_n8n, credentials):
    """N8nClient talking to the fake server."""
    with N8nClient(credentials, transport=fake_n8n.transport()) as n8n_client:
        yield n8n_client


@pytest.fixture
def logged_in(credential_store, credentials):
    """Stored credentials, as after `cron8n auth login`."""
    credential_store.save_auth(credentials)
    return credentials


@pytest.fixture
def cli_client(monkeypatch, fake_n8n):
    """Route every client the CLI builds to the fake server."""
    monkeypatch.setattr(
        "cron8n.cli.make_client",
        lambda creds: N8nClient(creds, transport=fake_n8n.transport()),
    )
    return fake_n8n
