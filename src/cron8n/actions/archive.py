"""Archive action - retire a workflow remotely and move its files aside."""

import logging
from dataclasses import dataclass, field

from ..client import N8nClient
from ..errors import ApiError
from ..manifest import ArchiveLocation, Manifest, ManifestStore
from ..registry import Registry

logger = logging.getLogger(__name__)


@dataclass
class ArchiveResult:
    """Result of archiving a workflow."""

    manifest: Manifest
    remote_action: str | None = None  # "deleted", "deactivated" or None
    location: ArchiveLocation | None = None
    registry_removed: bool = False
    warnings: list[str] = field(default_factory=list)


def archive_workflow(
    store: ManifestStore,
    registry: Registry,
    slug: str,
    client: N8nClient | None = None,
    delete_remote: bool = False,
    keep_local: bool = False,
) -> ArchiveResult:
    """
    Archive a workflow.

    The remote workflow (if deployed) is deactivated, or deleted with
    delete_remote. Remote failures are reported as warnings and do not stop
    the local archive. Unless keep_local, the file pair moves to
    workflows/archived/ and the registry entry is removed.
    """
    manifest = store.load(slug)
    result = ArchiveResult(manifest=manifest)

    workflow_id = manifest.last_deployed_workflow_id
    if workflow_id and client is None:
        result.warnings.append("Not authenticated; remote workflow left unchanged")
    elif workflow_id:
        try:
            if delete_remote:
                client.delete_workflow(workflow_id)
                result.remote_action = "deleted"
            else:
                client.deactivate_workflow(workflow_id)
                result.remote_action = "deactivated"
        except ApiError as e:
            logger.warning("Could not modify remote workflow %s: %s", workflow_id, e.message)
            result.warnings.append(f"Could not modify remote workflow (may already be deleted): {e.message}")

    if not keep_local:
        result.location = store.archive(slug, manifest)
        result.registry_removed = registry.remove(slug, store.project_path)

    return result
