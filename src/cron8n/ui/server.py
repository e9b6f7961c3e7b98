"""
Local web UI - FastAPI app over the actions layer.

Usage:

    cron8n ui --port 3847

Every route is a sync `def`, so FastAPI runs it in its threadpool and one
request's file and HTTP I/O completes before the response is sent.
Cron8nError is mapped to {"error", "hint"} JSON with a status by category.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel

from .. import __version__
from ..actions import archive_workflow, create_workflow, deploy_workflow, edit_workflow, set_workflow_active
from ..client import N8nClient
from ..config import AuthCredentials, CredentialStore, normalize_base_url, parse_auth_mode
from ..constants import DEFAULT_TEMPLATE, DEFAULT_TIMEZONE, DEFAULT_UI_HOST, DEFAULT_UI_PORT
from ..cron import CRON_PRESETS, TIMEZONE_OPTIONS, parse_cron
from ..errors import ApiError, AuthError, Cron8nError, FileError, ValidationError
from ..manifest import ManifestStore
from ..registry import Registry
from ..workflow.templates import template_choices
from .page import render_page

logger = logging.getLogger(__name__)

ClientFactory = Callable[[AuthCredentials], N8nClient]

ERROR_STATUS: dict[type[Cron8nError], int] = {
    ValidationError: 400,
    AuthError: 401,
    FileError: 404,
    ApiError: 502,
}


def error_status(error: Cron8nError) -> int:
    for error_type, status in ERROR_STATUS.items():
        if isinstance(error, error_type):
            return status
    return 500


class AuthRequest(BaseModel):
    baseUrl: str
    authMode: str
    secret: str


class CreateWorkflowRequest(BaseModel):
    name: str
    cronExpression: str
    timezone: str = DEFAULT_TIMEZONE
    template: str = DEFAULT_TEMPLATE
    shellCommand: str | None = None


class UpdateWorkflowRequest(BaseModel):
    name: str | None = None
    cronExpression: str | None = None
    timezone: str | None = None
    shellCommand: str | None = None


class DeployRequest(BaseModel):
    activate: bool = False


class ActivateRequest(BaseModel):
    active: bool


class ValidateCronRequest(BaseModel):
    expression: str
    timezone: str = DEFAULT_TIMEZONE


def create_app(
    project_path: Path,
    credentials: CredentialStore,
    registry: Registry,
    client_factory: ClientFactory | None = None,
) -> FastAPI:
    """
    Build the UI app for one project.

    Args:
        project_path: Project whose workflows/ directory is served
        credentials: Credential store (login/logout write through it)
        registry: Cross-project registry
        client_factory: Builds an API client from credentials (tests inject a mock transport)
    """
    app = FastAPI(title="cron8n", version=__version__, docs_url=None, redoc_url=None)
    store = ManifestStore(project_path)
    make_client: ClientFactory = client_factory or (lambda creds: N8nClient(creds))

    @app.exception_handler(Cron8nError)
    async def handle_cron8n_error(request: Request, exc: Cron8nError):
        return JSONResponse(exc.to_dict(), status_code=error_status(exc))

    def require_manifest(slug: str):
        if not store.exists(slug):
            raise FileError("Workflow not found", f"No manifest for {slug!r} in {store.workflows_dir}")

    # Page

    @app.get("/", response_class=HTMLResponse)
    def index():
        return render_page()

    # Auth

    @app.get("/api/auth")
    def get_auth():
        auth = credentials.get_auth()
        return {
            "authenticated": auth is not None,
            "baseUrl": auth.base_url if auth else None,
            "authMode": auth.auth_mode.value if auth else None,
        }

    @app.post("/api/auth")
    def login(body: AuthRequest):
        if not body.secret.strip():
            raise ValidationError("Secret is required")
        auth = AuthCredentials(
            base_url=normalize_base_url(body.baseUrl),
            auth_mode=parse_auth_mode(body.authMode),
            secret=body.secret.strip(),
        )
        with make_client(auth) as client:
            if not client.test_connection():
                raise ValidationError("Connection failed. Check your credentials.")
        credentials.save_auth(auth)
        return {"success": True, "baseUrl": auth.base_url}

    @app.delete("/api/auth")
    def logout():
        credentials.clear_auth()
        return {"success": True}

    # Workflows

    @app.get("/api/workflows")
    def list_workflows():
        remote_active: dict[str, bool] = {}
        auth = credentials.get_auth()
        if auth is not None:
            try:
                with make_client(auth) as client:
                    remote_active = {w.id: w.active for w in client.list_workflows() if w.id}
            except ApiError as e:
                logger.warning("Could not fetch remote status: %s", e.message)

        items = []
        for manifest in store.load_all():
            if not store.workflow_exists(manifest.slug):
                continue
            try:
                workflow = store.load_workflow(manifest.slug)
            except FileError as e:
                logger.warning("Skipping %s: %s", manifest.slug, e.hint or e.message)
                continue
            if manifest.last_deployed_workflow_id in remote_active:
                workflow.active = remote_active[manifest.last_deployed_workflow_id]
            items.append({"manifest": manifest.to_dict(), "workflow": workflow.to_dict()})

        return {"workflows": items, "authenticated": auth is not None}

    @app.post("/api/workflows")
    def create(body: CreateWorkflowRequest):
        result = create_workflow(
            store,
            registry,
            name=body.name,
            cron_expression=body.cronExpression,
            timezone=body.timezone,
            template=body.template,
            shell_command=body.shellCommand or None,
        )
        return {
            "success": True,
            "slug": result.manifest.slug,
            "manifest": result.manifest.to_dict(),
            "workflow": result.workflow.to_dict(),
        }

    @app.get("/api/workflows/{slug}")
    def get_workflow(slug: str):
        require_manifest(slug)
        return {
            "manifest": store.load(slug).to_dict(),
            "workflow": store.load_workflow(slug).to_dict(),
        }

    @app.put("/api/workflows/{slug}")
    def update(slug: str, body: UpdateWorkflowRequest):
        require_manifest(slug)
        result = edit_workflow(
            store,
            slug,
            name=body.name or None,
            cron_expression=body.cronExpression or None,
            timezone=body.timezone or None,
            shell_command=body.shellCommand or None,
        )
        return {
            "success": True,
            "changes": result.changes,
            "needsRedeploy": result.needs_redeploy,
            "manifest": result.manifest.to_dict(),
            "workflow": store.load_workflow(slug).to_dict(),
        }

    @app.delete("/api/workflows/{slug}")
    def archive(slug: str):
        require_manifest(slug)
        auth = credentials.get_auth()
        client = make_client(auth) if auth is not None else None
        try:
            result = archive_workflow(store, registry, slug, client=client)
        finally:
            if client is not None:
                client.close()
        return {"success": True, "archived": True, "remoteAction": result.remote_action, "warnings": result.warnings}

    @app.post("/api/workflows/{slug}/deploy")
    def deploy(slug: str, body: DeployRequest | None = None):
        auth = credentials.require_auth()
        require_manifest(slug)
        with make_client(auth) as client:
            result = deploy_workflow(client, store, registry, slug, activate=bool(body and body.activate))
        return {
            "success": True,
            "workflowId": result.workflow_id,
            "created": result.created,
            "active": result.workflow.active,
            "manifest": result.manifest.to_dict(),
        }

    @app.post("/api/workflows/{slug}/activate")
    def activate(slug: str, body: ActivateRequest):
        auth = credentials.require_auth()
        require_manifest(slug)
        with make_client(auth) as client:
            result = set_workflow_active(client, store, slug, body.active)
        return {"success": True, "active": result.workflow.active}

    # Reference data

    @app.get("/api/templates")
    def templates():
        return {
            "templates": [
                {"value": c["value"], "name": c["title"], "description": c["description"]}
                for c in template_choices()
            ]
        }

    @app.get("/api/cron-presets")
    def cron_presets():
        return {"presets": [p.to_dict() for p in CRON_PRESETS]}

    @app.get("/api/timezones")
    def timezones():
        return {"timezones": list(TIMEZONE_OPTIONS)}

    @app.post("/api/validate-cron")
    def validate_cron(body: ValidateCronRequest):
        return parse_cron(body.expression, body.timezone).to_dict()

    return app


def serve(app: FastAPI, host: str = DEFAULT_UI_HOST, port: int = DEFAULT_UI_PORT):
    """Run the app under uvicorn until interrupted."""
    import uvicorn

    uvicorn.run(app, host=host, port=port, log_level="warning")
