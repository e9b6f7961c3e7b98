"""
Cross-project registry of managed workflows (~/.cron8n/registry.json).

The registry is a convenience index that can be rebuilt from manifests, so a
missing or corrupt file loads as empty instead of failing. Every operation
loads the whole document, mutates it and writes it back.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from .constants import REGISTRY_FILE
from .cron import iso_timestamp
from .validation import ParseResult, optional_str, require_str

logger = logging.getLogger(__name__)


@dataclass
class RegistryEntry:
    """Pointer from (slug, project) to a manifest and its remote workflow."""

    slug: str
    project_path: str
    manifest_path: str
    workflow_id: str | None = None
    last_synced_at: str | None = None

    def to_dict(self) -> dict:
        data = {
            "slug": self.slug,
            "projectPath": self.project_path,
            "manifestPath": self.manifest_path,
        }
        if self.workflow_id is not None:
            data["workflowId"] = self.workflow_id
        if self.last_synced_at is not None:
            data["lastSyncedAt"] = self.last_synced_at
        return data

    @classmethod
    def parse(cls, data) -> ParseResult["RegistryEntry"]:
        if not isinstance(data, dict):
            return ParseResult.fail("registry entry must be an object")
        errors: list[str] = []
        entry = cls(
            slug=require_str(data, "slug", errors),
            project_path=require_str(data, "projectPath", errors),
            manifest_path=require_str(data, "manifestPath", errors),
            workflow_id=optional_str(data, "workflowId", errors),
            last_synced_at=optional_str(data, "lastSyncedAt", errors),
        )
        if errors:
            return ParseResult.fail(*errors)
        return ParseResult.ok(entry)

    def matches(self, slug: str, project_path: str) -> bool:
        return self.slug == slug and self.project_path == project_path


def parse_registry(data) -> ParseResult[list[RegistryEntry]]:
    """Parse a {"workflows": [...]} document. Any invalid entry fails the whole document."""
    if not isinstance(data, dict) or not isinstance(data.get("workflows"), list):
        return ParseResult.fail("registry must be an object with a 'workflows' list")

    entries = []
    for i, item in enumerate(data["workflows"]):
        result = RegistryEntry.parse(item)
        if not result.success:
            return ParseResult.fail(f"workflows[{i}]: {result.error}")
        entries.append(result.value)
    return ParseResult.ok(entries)


class Registry:
    """
    Registry store rooted at a directory.

    Identity of an entry is the pair (slug, project_path).
    """

    def __init__(self, root: Path):
        self.root = root
        self.path = root / REGISTRY_FILE

    def load(self) -> list[RegistryEntry]:
        """Load all entries; missing or corrupt files read as an empty registry."""
        if not self.path.exists():
            return []

        try:
            with open(self.path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Registry %s is unreadable, starting fresh: %s", self.path, e)
            return []

        result = parse_registry(data)
        if not result.success:
            logger.warning("Registry %s is invalid, starting fresh: %s", self.path, result.error)
            return []
        return result.value

    def save(self, entries: list[RegistryEntry]):
        self.root.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump({"workflows": [e.to_dict() for e in entries]}, f, indent=2)

    def upsert(
        self,
        slug: str,
        project_path: str | Path,
        manifest_path: str | Path,
        workflow_id: str | None = None,
    ) -> RegistryEntry:
        """Replace the entry with the same identity in place, or append a new one."""
        entries = self.load()
        entry = RegistryEntry(
            slug=slug,
            project_path=str(project_path),
            manifest_path=str(manifest_path),
            workflow_id=workflow_id,
            last_synced_at=iso_timestamp(),
        )

        for i, existing in enumerate(entries):
            if existing.matches(slug, entry.project_path):
                entries[i] = entry
                break
        else:
            entries.append(entry)

        self.save(entries)
        return entry

    def update_workflow_id(self, slug: str, project_path: str | Path, workflow_id: str) -> bool:
        """
        Set the remote workflow id on an existing entry.

        Unlike upsert this never creates an entry: when no entry matches,
        nothing is written and False is returned.
        """
        entries = self.load()
        for entry in entries:
            if entry.matches(slug, str(project_path)):
                entry.workflow_id = workflow_id
                entry.last_synced_at = iso_timestamp()
                self.save(entries)
                return True
        return False

    def remove(self, slug: str, project_path: str | Path) -> bool:
        """Remove an entry. Returns True only if something was removed."""
        entries = self.load()
        remaining = [e for e in entries if not e.matches(slug, str(project_path))]
        if len(remaining) == len(entries):
            return False
        self.save(remaining)
        return True

    def all_entries(self) -> list[RegistryEntry]:
        return self.load()

    def entries_by_project(self, project_path: str | Path) -> list[RegistryEntry]:
        return [e for e in self.load() if e.project_path == str(project_path)]

    def get(self, slug: str, project_path: str | Path) -> RegistryEntry | None:
        return next((e for e in self.load() if e.matches(slug, str(project_path))), None)

    def get_by_workflow_id(self, workflow_id: str) -> RegistryEntry | None:
        """First entry pointing at the remote workflow id."""
        return next((e for e in self.load() if e.workflow_id == workflow_id), None)
