"""
Deploy action - push a local workflow to n8n.

Steps run strictly in order: create/update, tag, activate (optional),
record the deployment in the manifest, update the registry. A failure
partway leaves earlier steps committed.
"""

import logging
from dataclasses import dataclass, field

from ..client import N8nClient
from ..errors import ApiError, FileError
from ..manifest import Manifest, ManifestStore, create_tags
from ..registry import Registry
from ..workflow.models import Workflow

logger = logging.getLogger(__name__)


@dataclass
class DeployPlan:
    """What a deploy would do (dry run)."""

    slug: str
    operation: str  # "CREATE" or "UPDATE"
    name: str
    activate: bool
    tags: list[str] = field(default_factory=list)
    workflow_id: str | None = None

    def to_dict(self) -> dict:
        return {
            "slug": self.slug,
            "operation": self.operation,
            "workflowId": self.workflow_id,
            "name": self.name,
            "activate": self.activate,
            "tags": self.tags,
        }


@dataclass
class DeployResult:
    """Result of a deploy."""

    manifest: Manifest
    workflow: Workflow
    created: bool
    activated: bool = False
    tags: list[str] = field(default_factory=list)

    @property
    def workflow_id(self) -> str:
        return self.workflow.id or ""


def _load_local_workflow(store: ManifestStore, slug: str) -> Workflow:
    if not store.workflow_exists(slug):
        raise FileError(
            f"Workflow file not found: {store.workflow_path(slug)}",
            "Make sure the workflow JSON file exists",
        )
    return store.load_workflow(slug)


def plan_deploy(store: ManifestStore, slug: str, activate: bool = False) -> DeployPlan:
    manifest = store.load(slug)
    workflow = _load_local_workflow(store, slug)
    return DeployPlan(
        slug=slug,
        operation="UPDATE" if manifest.is_deployed else "CREATE",
        workflow_id=manifest.last_deployed_workflow_id,
        name=workflow.name,
        activate=activate,
        tags=list(manifest.tags),
    )


def deploy_workflow(
    client: N8nClient,
    store: ManifestStore,
    registry: Registry,
    slug: str,
    activate: bool = False,
) -> DeployResult:
    """
    Create or update the remote workflow for a slug.

    Args:
        client: API client
        store: Manifest store of the workflow's project
        registry: Cross-project registry
        slug: Workflow slug
        activate: Activate after deploying

    Returns:
        DeployResult with the remote workflow as returned by the last call
    """
    manifest = store.load(slug)
    local = _load_local_workflow(store, slug)

    created = not manifest.is_deployed
    if created:
        logger.info("Creating workflow %s", slug)
        remote = client.create_workflow(local.name, local.nodes, local.connections, local.settings)
    else:
        logger.info("Updating workflow %s (%s)", slug, manifest.last_deployed_workflow_id)
        remote = client.update_workflow(
            manifest.last_deployed_workflow_id, local.name, local.nodes, local.connections, local.settings
        )

    if not remote.id:
        raise ApiError("Server response did not include a workflow id")

    tags = create_tags(manifest.slug)
    client.add_tags_to_workflow(remote.id, tags)

    if activate:
        remote = client.activate_workflow(remote.id)

    manifest = store.update_deployment(slug, remote.id)
    registry.update_workflow_id(slug, store.project_path, remote.id)

    return DeployResult(manifest=manifest, workflow=remote, created=created, activated=activate, tags=tags)
