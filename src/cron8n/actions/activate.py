"""Activate/deactivate actions."""

from dataclasses import dataclass

from ..client import N8nClient
from ..errors import ValidationError
from ..manifest import Manifest, ManifestStore
from ..workflow.models import Workflow


@dataclass
class ActivateResult:
    workflow: Workflow
    manifest: Manifest | None = None


def resolve_workflow_id(store: ManifestStore, slug_or_id: str) -> tuple[str, Manifest | None]:
    """A local slug resolves to its deployed id; anything else is taken as a remote id."""
    if not store.exists(slug_or_id):
        return slug_or_id, None

    manifest = store.load(slug_or_id)
    if not manifest.last_deployed_workflow_id:
        raise ValidationError(
            f'Workflow "{slug_or_id}" is not deployed yet',
            f"Deploy first with: cron8n cron deploy {slug_or_id}",
        )
    return manifest.last_deployed_workflow_id, manifest


def set_workflow_active(client: N8nClient, store: ManifestStore, slug_or_id: str, active: bool) -> ActivateResult:
    workflow_id, manifest = resolve_workflow_id(store, slug_or_id)
    if active:
        workflow = client.activate_workflow(workflow_id)
    else:
        workflow = client.deactivate_workflow(workflow_id)
    return ActivateResult(workflow=workflow, manifest=manifest)
