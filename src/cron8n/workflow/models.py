"""
Typed n8n workflow documents.

Workflows are DATA STRUCTURES: the same shape is stored in
workflows/<slug>.json and exchanged with the n8n REST API. Node keys that
cron8n does not model (notes, disabled, webhookId, ...) are kept in `extra`
so an imported workflow round-trips without losing them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..validation import ParseResult, as_dict

_NODE_KEYS = {"id", "name", "type", "typeVersion", "position", "parameters", "credentials"}


def _as_id(value: Any) -> str | None:
    # older n8n versions return numeric ids
    if isinstance(value, bool):
        return None
    if isinstance(value, int | str):
        return str(value)
    return None


@dataclass
class Tag:
    id: str
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}

    @classmethod
    def parse(cls, data: Any) -> ParseResult[Tag]:
        data = as_dict(data)
        tag_id = _as_id(data.get("id"))
        name = data.get("name")
        if tag_id is None or not isinstance(name, str):
            return ParseResult.fail("tag must have an 'id' and a string 'name'")
        return ParseResult.ok(cls(id=tag_id, name=name))


@dataclass
class Node:
    """A single workflow node."""

    name: str
    type: str
    id: str | None = None
    type_version: float = 1
    position: list[float] = field(default_factory=lambda: [0, 0])
    parameters: dict = field(default_factory=dict)
    credentials: dict | None = None
    extra: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        data = {}
        if self.id is not None:
            data["id"] = self.id
        data.update(
            {
                "name": self.name,
                "type": self.type,
                "typeVersion": self.type_version,
                "position": list(self.position),
                "parameters": self.parameters,
            }
        )
        if self.credentials is not None:
            data["credentials"] = self.credentials
        data.update(self.extra)
        return data

    @classmethod
    def parse(cls, data: Any) -> ParseResult[Node]:
        if not isinstance(data, dict):
            return ParseResult.fail("node must be an object")

        errors = []
        name = data.get("name")
        node_type = data.get("type")
        if not isinstance(name, str):
            errors.append("node 'name' must be a string")
        if not isinstance(node_type, str):
            errors.append("node 'type' must be a string")

        type_version = data.get("typeVersion", 1)
        if isinstance(type_version, bool) or not isinstance(type_version, int | float):
            errors.append("node 'typeVersion' must be a number")

        position = data.get("position", [0, 0])
        if not isinstance(position, list) or not all(isinstance(p, int | float) for p in position):
            errors.append("node 'position' must be a list of numbers")

        parameters = data.get("parameters", {})
        if not isinstance(parameters, dict):
            errors.append("node 'parameters' must be an object")

        credentials = data.get("credentials")
        if credentials is not None and not isinstance(credentials, dict):
            errors.append("node 'credentials' must be an object")

        if errors:
            return ParseResult.fail(*errors)

        return ParseResult.ok(
            cls(
                id=_as_id(data.get("id")),
                name=name,
                type=node_type,
                type_version=type_version,
                position=list(position),
                parameters=parameters,
                credentials=credentials,
                extra={k: v for k, v in data.items() if k not in _NODE_KEYS},
            )
        )


@dataclass
class Workflow:
    """
    An n8n workflow.

    `id`, `tags`, `created_at` and `updated_at` are only set on documents
    that came from the server.
    """

    name: str
    nodes: list[Node] = field(default_factory=list)
    connections: dict = field(default_factory=dict)
    settings: dict = field(default_factory=dict)
    active: bool = False
    id: str | None = None
    tags: list[Tag] = field(default_factory=list)
    created_at: str | None = None
    updated_at: str | None = None

    def to_payload(self) -> dict:
        """Body accepted by POST/PUT /workflows (server-managed fields excluded)."""
        return {
            "name": self.name,
            "nodes": [n.to_dict() for n in self.nodes],
            "connections": self.connections,
            "settings": self.settings,
        }

    def to_dict(self) -> dict:
        data = {"id": self.id} if self.id is not None else {}
        data.update(self.to_payload())
        data["active"] = self.active
        if self.tags:
            data["tags"] = [t.to_dict() for t in self.tags]
        if self.created_at is not None:
            data["createdAt"] = self.created_at
        if self.updated_at is not None:
            data["updatedAt"] = self.updated_at
        return data

    @classmethod
    def parse(cls, data: Any) -> ParseResult[Workflow]:
        if not isinstance(data, dict):
            return ParseResult.fail("workflow must be an object")

        errors = []
        name = data.get("name")
        if not isinstance(name, str):
            errors.append("'name' must be a string")

        raw_nodes = data.get("nodes", [])
        nodes = []
        if not isinstance(raw_nodes, list):
            errors.append("'nodes' must be a list")
        else:
            for i, raw in enumerate(raw_nodes):
                result = Node.parse(raw)
                if result.success:
                    nodes.append(result.value)
                else:
                    errors.append(f"nodes[{i}]: {result.error}")

        tags = []
        for raw in data.get("tags") or []:
            result = Tag.parse(raw)
            if result.success:
                tags.append(result.value)
            else:
                errors.append(result.error)

        connections = data.get("connections", {})
        settings = data.get("settings") or {}
        if not isinstance(connections, dict):
            errors.append("'connections' must be an object")
        if not isinstance(settings, dict):
            errors.append("'settings' must be an object")

        if errors:
            return ParseResult.fail(*errors)

        return ParseResult.ok(
            cls(
                id=_as_id(data.get("id")),
                name=name,
                active=bool(data.get("active", False)),
                nodes=nodes,
                connections=connections,
                settings=settings,
                tags=tags,
                created_at=data.get("createdAt") if isinstance(data.get("createdAt"), str) else None,
                updated_at=data.get("updatedAt") if isinstance(data.get("updatedAt"), str) else None,
            )
        )

    @property
    def tag_names(self) -> list[str]:
        return [t.name for t in self.tags]


@dataclass
class WorkflowPage:
    """One page of GET /workflows."""

    data: list[Workflow]
    next_cursor: str | None = None

    @classmethod
    def parse(cls, payload: Any) -> ParseResult[WorkflowPage]:
        payload = as_dict(payload)
        raw = payload.get("data")
        if not isinstance(raw, list):
            return ParseResult.fail("workflow list response must have a 'data' list")

        workflows = []
        for i, item in enumerate(raw):
            result = Workflow.parse(item)
            if not result.success:
                return ParseResult.fail(f"data[{i}]: {result.error}")
            workflows.append(result.value)

        cursor = payload.get("nextCursor")
        return ParseResult.ok(cls(data=workflows, next_cursor=cursor if isinstance(cursor, str) and cursor else None))
