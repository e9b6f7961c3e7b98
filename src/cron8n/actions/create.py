"""Create action - new workflow from a template."""

from dataclasses import dataclass
from pathlib import Path

from ..cron import CronInfo, validate_cron
from ..errors import ValidationError
from ..manifest import Manifest, ManifestStore
from ..registry import Registry
from ..slug import create_slug, is_valid_slug
from ..workflow.models import Workflow
from ..workflow.templates import build_workflow, get_template


@dataclass
class CreateResult:
    """Result of creating a workflow."""

    manifest: Manifest
    workflow: Workflow
    workflow_path: Path
    manifest_path: Path
    cron: CronInfo


def check_new_slug(store: ManifestStore, slug: str):
    """Raise ValidationError unless slug is well-formed and unused in the project."""
    if not is_valid_slug(slug):
        raise ValidationError(
            f"Invalid slug: {slug!r}",
            "Use lowercase letters, numbers, and single hyphens",
        )
    if store.exists(slug):
        raise ValidationError(f'Slug "{slug}" already exists', "Choose another name or pass --slug")


def create_workflow(
    store: ManifestStore,
    registry: Registry,
    name: str,
    cron_expression: str,
    timezone: str,
    template: str,
    shell_command: str | None = None,
    slug: str | None = None,
) -> CreateResult:
    """
    Create a workflow file, its manifest and a registry entry.

    Args:
        store: Manifest store of the target project
        registry: Cross-project registry
        name: Display name (also the workflow name in n8n)
        cron_expression: 5-field cron expression
        timezone: IANA timezone name
        template: Template key (cron-only, shell-command, http-request, webhook-call)
        shell_command: Command for the shell-command template
        slug: Explicit slug (default: derived from name)

    Returns:
        CreateResult with the written paths and the next runs
    """
    name = name.strip() if name else ""
    if not name:
        raise ValidationError("Workflow name is required")

    cron = validate_cron(cron_expression, timezone)
    get_template(template)

    slug = slug or create_slug(name)
    check_new_slug(store, slug)

    workflow = build_workflow(template, name, cron_expression, timezone, shell_command)
    manifest = Manifest.create(slug, name, template, cron_expression, timezone)

    store.save_workflow(slug, workflow)
    store.save(manifest)
    registry.upsert(slug, store.project_path, store.manifest_path(slug))

    return CreateResult(
        manifest=manifest,
        workflow=workflow,
        workflow_path=store.workflow_path(slug),
        manifest_path=store.manifest_path(slug),
        cron=cron,
    )
