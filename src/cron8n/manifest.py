"""
Local workflow state via manifest files.

Each managed workflow is a pair of files in <project>/workflows/:
- <slug>.json: the n8n workflow definition
- <slug>.cron8n.json: the manifest (schedule, template origin, deployment state)

Archived pairs move to workflows/archived/<slug>.<timestamp>.{json,cron8n.json}.
"""

from __future__ import annotations

import json
import logging
import shutil
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from .constants import ARCHIVE_DIR, MANAGED_TAG, MANIFEST_SUFFIX, SLUG_TAG_PREFIX, WORKFLOW_SUFFIX, WORKFLOWS_DIR
from .cron import archive_timestamp, iso_timestamp
from .errors import FileError
from .validation import ParseResult, optional_str, require_str, require_str_list
from .workflow.models import Workflow

logger = logging.getLogger(__name__)


def create_tags(slug: str) -> list[str]:
    """Management tags for a slug."""
    return [MANAGED_TAG, f"{SLUG_TAG_PREFIX}{slug}"]


@dataclass
class Manifest:
    """Local record of one managed workflow."""

    slug: str
    name: str
    created_at: str
    template: str
    cron_expression: str
    timezone: str
    tags: list[str] = field(default_factory=list)
    updated_at: str | None = None
    last_deployed_workflow_id: str | None = None
    last_deployed_at: str | None = None

    @classmethod
    def create(cls, slug: str, name: str, template: str, cron_expression: str, timezone: str) -> Manifest:
        now = iso_timestamp()
        return cls(
            slug=slug,
            name=name,
            created_at=now,
            updated_at=now,
            template=template,
            cron_expression=cron_expression,
            timezone=timezone,
            tags=create_tags(slug),
        )

    @property
    def is_deployed(self) -> bool:
        return self.last_deployed_workflow_id is not None

    def to_dict(self) -> dict:
        data = {
            "slug": self.slug,
            "name": self.name,
            "createdAt": self.created_at,
            "template": self.template,
            "cronExpression": self.cron_expression,
            "timezone": self.timezone,
            "tags": list(self.tags),
        }
        optional = {
            "updatedAt": self.updated_at,
            "lastDeployedWorkflowId": self.last_deployed_workflow_id,
            "lastDeployedAt": self.last_deployed_at,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data

    @classmethod
    def _fields_from_dict(cls, data: dict, errors: list[str]) -> dict:
        return {
            "slug": require_str(data, "slug", errors),
            "name": require_str(data, "name", errors),
            "created_at": require_str(data, "createdAt", errors),
            "template": require_str(data, "template", errors),
            "cron_expression": require_str(data, "cronExpression", errors),
            "timezone": require_str(data, "timezone", errors),
            "tags": require_str_list(data, "tags", errors),
            "updated_at": optional_str(data, "updatedAt", errors),
            "last_deployed_workflow_id": optional_str(data, "lastDeployedWorkflowId", errors),
            "last_deployed_at": optional_str(data, "lastDeployedAt", errors),
        }


@dataclass
class ArchivedManifest(Manifest):
    """A manifest moved to workflows/archived/."""

    archived_at: str = ""
    archived_from: str = ""

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["archivedAt"] = self.archived_at
        data["archivedFrom"] = self.archived_from
        return data


def parse_manifest(data) -> ParseResult[Manifest]:
    """Validate a manifest document. Never raises."""
    if not isinstance(data, dict):
        return ParseResult.fail("manifest must be an object")
    errors: list[str] = []
    fields = Manifest._fields_from_dict(data, errors)
    if errors:
        return ParseResult.fail(*errors)
    return ParseResult.ok(Manifest(**fields))


def parse_archived_manifest(data) -> ParseResult[ArchivedManifest]:
    if not isinstance(data, dict):
        return ParseResult.fail("manifest must be an object")
    errors: list[str] = []
    fields = Manifest._fields_from_dict(data, errors)
    fields["archived_at"] = require_str(data, "archivedAt", errors)
    fields["archived_from"] = require_str(data, "archivedFrom", errors)
    if errors:
        return ParseResult.fail(*errors)
    return ParseResult.ok(ArchivedManifest(**fields))


def read_json(path: Path):
    """Read a JSON file, converting every failure into FileError."""
    try:
        with open(path) as f:
            return json.load(f)
    except FileNotFoundError:
        raise FileError(f"File not found: {path}") from None
    except json.JSONDecodeError:
        raise FileError(f"Invalid JSON in file: {path}") from None
    except OSError as e:
        raise FileError(f"Failed to read file: {path}", str(e)) from None


def write_json(path: Path, data):
    """Write JSON (indent 2), creating parent directories."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
    except OSError as e:
        raise FileError(f"Failed to write file: {path}", str(e)) from None


@dataclass
class ArchiveLocation:
    """Where archive() put the files."""

    manifest_path: Path
    workflow_path: Path | None = None


class ManifestStore:
    """
    Manifest and workflow files of one project.

    Layout: <project>/workflows/<slug>.json + <slug>.cron8n.json
    """

    def __init__(self, project_path: Path):
        self.project_path = project_path
        self.workflows_dir = project_path / WORKFLOWS_DIR
        self.archive_dir = self.workflows_dir / ARCHIVE_DIR

    def manifest_path(self, slug: str) -> Path:
        return self.workflows_dir / f"{slug}{MANIFEST_SUFFIX}"

    def workflow_path(self, slug: str) -> Path:
        return self.workflows_dir / f"{slug}{WORKFLOW_SUFFIX}"

    def exists(self, slug: str) -> bool:
        return self.manifest_path(slug).exists()

    def load(self, slug: str) -> Manifest:
        """Load one manifest. Missing, unreadable or invalid files raise FileError."""
        path = self.manifest_path(slug)
        if not path.exists():
            raise FileError(
                f'Workflow "{slug}" not found',
                f"Make sure the workflow exists in ./{WORKFLOWS_DIR}/{slug}{MANIFEST_SUFFIX}",
            )
        result = parse_manifest(read_json(path))
        if not result.success:
            raise FileError(f"Invalid manifest: {path}", result.error)
        return result.value

    def save(self, manifest: Manifest):
        """Overwrite the manifest file."""
        write_json(self.manifest_path(manifest.slug), manifest.to_dict())

    def update_deployment(self, slug: str, workflow_id: str) -> Manifest:
        """Record a successful deploy."""
        manifest = self.load(slug)
        now = iso_timestamp()
        manifest.last_deployed_workflow_id = workflow_id
        manifest.last_deployed_at = now
        manifest.updated_at = now
        self.save(manifest)
        return manifest

    def list_slugs(self) -> list[str]:
        """Slugs of all manifests in workflows/ (sorted)."""
        if not self.workflows_dir.is_dir():
            return []
        return sorted(
            p.name[: -len(MANIFEST_SUFFIX)]
            for p in self.workflows_dir.iterdir()
            if p.is_file() and p.name.endswith(MANIFEST_SUFFIX)
        )

    def load_all(self) -> list[Manifest]:
        """Load every manifest, skipping the ones that fail to load."""
        manifests = []
        for slug in self.list_slugs():
            try:
                manifests.append(self.load(slug))
            except FileError as e:
                logger.warning("Skipping manifest %s: %s", slug, e.hint or e.message)
        return manifests

    def workflow_exists(self, slug: str) -> bool:
        return self.workflow_path(slug).exists()

    def load_workflow(self, slug: str) -> Workflow:
        path = self.workflow_path(slug)
        result = Workflow.parse(read_json(path))
        if not result.success:
            raise FileError(f"Invalid workflow file: {path}", result.error)
        return result.value

    def save_workflow(self, slug: str, workflow: Workflow):
        write_json(self.workflow_path(slug), workflow.to_dict())

    def archive(self, slug: str, manifest: Manifest, now: datetime | None = None) -> ArchiveLocation:
        """
        Move a workflow pair into workflows/archived/.

        The archived manifest is written before the original is deleted, so a
        crash in between leaves both copies on disk.
        """
        stamp = archive_timestamp(now)
        manifest_path = self.manifest_path(slug)
        location = ArchiveLocation(manifest_path=self.archive_dir / f"{slug}.{stamp}{MANIFEST_SUFFIX}")

        workflow_path = self.workflow_path(slug)
        if workflow_path.exists():
            location.workflow_path = self.archive_dir / f"{slug}.{stamp}{WORKFLOW_SUFFIX}"
            self.archive_dir.mkdir(parents=True, exist_ok=True)
            try:
                shutil.move(workflow_path, location.workflow_path)
            except OSError as e:
                raise FileError(f"Failed to move file: {workflow_path} -> {location.workflow_path}", str(e)) from None

        archived = ArchivedManifest(
            **{k: v for k, v in vars(manifest).items() if k in Manifest.__dataclass_fields__},
            archived_at=iso_timestamp(now),
            archived_from=str(manifest_path),
        )
        write_json(location.manifest_path, archived.to_dict())
        manifest_path.unlink(missing_ok=True)
        return location

    def load_archived(self) -> list[ArchivedManifest]:
        """All archived manifests, newest first; invalid files are skipped."""
        if not self.archive_dir.is_dir():
            return []
        archived = []
        for path in self.archive_dir.glob(f"*{MANIFEST_SUFFIX}"):
            try:
                result = parse_archived_manifest(read_json(path))
            except FileError as e:
                logger.warning("Skipping archived manifest %s: %s", path.name, e.message)
                continue
            if result.success:
                archived.append(result.value)
            else:
                logger.warning("Skipping archived manifest %s: %s", path.name, result.error)
        return sorted(archived, key=lambda m: m.archived_at, reverse=True)


def resolve_manifest(slug_or_path: str, cwd: Path) -> tuple[Manifest, Path]:
    """
    Resolve a slug or a file path to (manifest, project path).

    Accepts a slug (looked up under cwd), a path to <slug>.cron8n.json, or a
    path to <slug>.json. For paths the project is the grandparent directory.
    """
    if "/" in slug_or_path or "\\" in slug_or_path:
        path = (cwd / slug_or_path).resolve()
        project = path.parent.parent

        if path.name.endswith(MANIFEST_SUFFIX):
            result = parse_manifest(read_json(path))
            if not result.success:
                raise FileError(f"Invalid manifest: {path}", result.error)
            return result.value, project

        if path.suffix == WORKFLOW_SUFFIX:
            return ManifestStore(project).load(path.stem), project

    return ManifestStore(cwd).load(slug_or_path), cwd
