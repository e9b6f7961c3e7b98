"""Edit action - change name, schedule or shell command of a local workflow."""

import logging
from dataclasses import dataclass, field

from ..constants import EXECUTE_COMMAND_TYPE
from ..cron import iso_timestamp, validate_cron
from ..errors import ValidationError
from ..manifest import Manifest, ManifestStore
from ..workflow.discover import extract_cron_expression, extract_timezone, is_cron_node
from ..workflow.models import Workflow
from ..workflow.templates import set_schedule, set_shell_command

logger = logging.getLogger(__name__)


@dataclass
class CurrentValues:
    """Editable values as currently stored."""

    name: str
    cron_expression: str
    timezone: str
    shell_command: str | None = None


@dataclass
class EditResult:
    """Result of an edit."""

    manifest: Manifest
    changes: dict[str, str] = field(default_factory=dict)
    schedule_written: bool = True

    @property
    def changed(self) -> bool:
        return bool(self.changes)

    @property
    def needs_redeploy(self) -> bool:
        return self.changed and self.manifest.is_deployed


def current_values(manifest: Manifest, workflow: Workflow) -> CurrentValues:
    """Read the values an edit starts from (trigger node first, manifest as fallback)."""
    trigger = next((n for n in workflow.nodes if is_cron_node(n)), None)
    command_node = next((n for n in workflow.nodes if n.type == EXECUTE_COMMAND_TYPE), None)
    command = command_node.parameters.get("command") if command_node else None
    return CurrentValues(
        name=manifest.name,
        cron_expression=(extract_cron_expression(trigger) if trigger else None) or manifest.cron_expression,
        timezone=(extract_timezone(trigger) if trigger else None) or manifest.timezone,
        shell_command=command if isinstance(command, str) else ("" if command_node else None),
    )


def edit_workflow(
    store: ManifestStore,
    slug: str,
    name: str | None = None,
    cron_expression: str | None = None,
    timezone: str | None = None,
    shell_command: str | None = None,
) -> EditResult:
    """
    Apply edits to a workflow and its manifest.

    Values equal to the current ones are not changes. Nothing is written
    when there are no changes.
    """
    manifest = store.load(slug)
    workflow = store.load_workflow(slug)
    current = current_values(manifest, workflow)

    new_cron = cron_expression if cron_expression and cron_expression != current.cron_expression else None
    new_tz = timezone if timezone and timezone != current.timezone else None
    if new_cron or new_tz:
        validate_cron(new_cron or current.cron_expression, new_tz or current.timezone)

    changes: dict[str, str] = {}
    schedule_written = True

    if name is not None:
        name = name.strip()
        if not name:
            raise ValidationError("Workflow name is required")
        if name != manifest.name:
            manifest.name = name
            workflow.name = name
            changes["name"] = name

    if new_cron or new_tz:
        manifest.cron_expression = new_cron or current.cron_expression
        manifest.timezone = new_tz or current.timezone
        schedule_written = set_schedule(workflow, manifest.cron_expression, manifest.timezone)
        if new_cron:
            changes["cronExpression"] = new_cron
        if new_tz:
            changes["timezone"] = new_tz

    if shell_command and shell_command != current.shell_command:
        if current.shell_command is None:
            raise ValidationError(
                f'Workflow "{slug}" has no Execute Command node',
                "--shell-command only applies to shell-command workflows",
            )
        set_shell_command(workflow, shell_command)
        changes["shellCommand"] = shell_command

    if not changes:
        return EditResult(manifest=manifest)

    manifest.updated_at = iso_timestamp()
    store.save_workflow(slug, workflow)
    store.save(manifest)
    logger.debug("Edited %s: %s", slug, ", ".join(changes))

    return EditResult(manifest=manifest, changes=changes, schedule_written=schedule_written)
