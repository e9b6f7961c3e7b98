"""Import action - bring an existing n8n cron workflow under management."""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from ..client import N8nClient
from ..constants import DEFAULT_IMPORT_CRON, DEFAULT_TIMEZONE
from ..cron import iso_timestamp
from ..errors import ValidationError
from ..manifest import Manifest, ManifestStore
from ..registry import Registry
from ..slug import is_valid_slug
from ..workflow.discover import get_cron_nodes, is_managed, suggest_slug
from ..workflow.models import Workflow


@dataclass
class ImportResult:
    """Result of an import."""

    manifest: Manifest
    workflow: Workflow
    workflow_path: Path
    manifest_path: Path
    cron_node_count: int = 1


def import_workflow(
    client: N8nClient,
    store: ManifestStore,
    registry: Registry,
    workflow_id: str,
    slug: str | None = None,
    force: bool = False,
    choose_slug: Callable[[str], str] | None = None,
) -> ImportResult:
    """
    Import a remote workflow into the project.

    Args:
        client: API client
        store: Manifest store of the target project
        registry: Cross-project registry
        workflow_id: Remote workflow id
        slug: Explicit slug (default: suggested from the workflow name)
        force: Import even if already managed, overwrite existing files
        choose_slug: Called with the rejected slug when it is invalid or taken;
            returns a replacement (the CLI prompts here)

    Returns:
        ImportResult; the manifest is marked as deployed to workflow_id
    """
    remote = client.get_workflow(workflow_id)

    if is_managed(remote) and not force:
        raise ValidationError("This workflow is already managed by cron8n", "Use --force to import anyway")

    cron_nodes = get_cron_nodes(remote)
    if not cron_nodes:
        raise ValidationError(
            "This workflow has no cron trigger nodes",
            "Only workflows with cron/schedule triggers can be imported",
        )

    slug = slug or suggest_slug(remote.name)
    if choose_slug is not None and (not is_valid_slug(slug) or (store.exists(slug) and not force)):
        slug = choose_slug(slug)

    if not is_valid_slug(slug):
        raise ValidationError(f"Invalid slug: {slug!r}", "Use lowercase letters, numbers, and single hyphens")
    if store.exists(slug) and not force:
        raise ValidationError(f'Slug "{slug}" already exists', "Use --slug to pick another or --force to overwrite")

    primary = cron_nodes[0]
    manifest = Manifest.create(
        slug,
        remote.name,
        "cron-only",
        primary.cron_expression or DEFAULT_IMPORT_CRON,
        primary.timezone or DEFAULT_TIMEZONE,
    )
    manifest.last_deployed_workflow_id = remote.id or workflow_id
    manifest.last_deployed_at = iso_timestamp()

    local = Workflow(
        name=remote.name,
        active=remote.active,
        nodes=remote.nodes,
        connections=remote.connections,
        settings=remote.settings,
    )

    store.save_workflow(slug, local)
    store.save(manifest)
    registry.upsert(slug, store.project_path, store.manifest_path(slug), workflow_id=manifest.last_deployed_workflow_id)

    return ImportResult(
        manifest=manifest,
        workflow=local,
        workflow_path=store.workflow_path(slug),
        manifest_path=store.manifest_path(slug),
        cron_node_count=len(cron_nodes),
    )
