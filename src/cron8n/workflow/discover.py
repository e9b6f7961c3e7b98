"""
Workflow discovery - classify remote workflows by trigger type and management tags.

A workflow is a cron workflow when at least one node type matches a known
schedule trigger. It is managed when it carries the managed-by tag; its
slug tag links it back to a local manifest.
"""

from collections.abc import Callable
from dataclasses import dataclass, field

from ..constants import CRON_NODE_TYPES, MANAGED_TAG, SLUG_TAG_PREFIX
from ..slug import create_slug
from .models import Node, Workflow


@dataclass
class CronNodeInfo:
    node_name: str
    node_type: str
    cron_expression: str | None = None
    timezone: str | None = None

    def to_dict(self) -> dict:
        return {
            "nodeName": self.node_name,
            "nodeType": self.node_type,
            "cronExpression": self.cron_expression,
            "timezone": self.timezone,
        }


@dataclass
class WorkflowCronInfo:
    """Cron and management summary of one workflow."""

    workflow_id: str
    workflow_name: str
    active: bool
    cron_nodes: list[CronNodeInfo] = field(default_factory=list)
    is_managed: bool = False
    managed_slug: str | None = None
    tags: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "workflowId": self.workflow_id,
            "workflowName": self.workflow_name,
            "active": self.active,
            "cronNodes": [n.to_dict() for n in self.cron_nodes],
            "isManaged": self.is_managed,
            "managedSlug": self.managed_slug,
            "tags": self.tags,
        }


@dataclass
class WorkflowGroups:
    managed: list[WorkflowCronInfo] = field(default_factory=list)
    unmanaged: list[WorkflowCronInfo] = field(default_factory=list)


def is_cron_node(node: Node) -> bool:
    """Case-insensitive substring match, in either direction, against known trigger types."""
    node_type = node.type.lower()
    if not node_type:
        return False
    return any(node_type in known.lower() or known.lower() in node_type for known in CRON_NODE_TYPES)


def _from_rule_interval(parameters: dict) -> str | None:
    rule = parameters.get("rule")
    if not isinstance(rule, dict):
        return None
    interval = rule.get("interval")
    if not isinstance(interval, list) or not interval or not isinstance(interval[0], dict):
        return None
    first = interval[0]
    expression = first.get("expression")
    if first.get("field") == "cronExpression" and isinstance(expression, str) and expression:
        return expression
    return None


def _from_flat_field(parameters: dict) -> str | None:
    expression = parameters.get("cronExpression")
    return expression if isinstance(expression, str) and expression else None


def _from_trigger_times(parameters: dict) -> str | None:
    trigger_times = parameters.get("triggerTimes")
    if not isinstance(trigger_times, dict):
        return None
    items = trigger_times.get("item")
    if not isinstance(items, list) or not items or not isinstance(items[0], dict):
        return None
    expression = items[0].get("cronExpression")
    return expression if isinstance(expression, str) and expression else None


# Tried in order; the first hit wins
CRON_EXTRACTORS: tuple[Callable[[dict], str | None], ...] = (
    _from_rule_interval,
    _from_flat_field,
    _from_trigger_times,
)


def has_rule_interval_schedule(node: Node) -> bool:
    """True if the node stores its schedule in rule.interval[0] (the shape cron8n writes)."""
    return isinstance(node.parameters, dict) and _from_rule_interval(node.parameters) is not None


def extract_cron_expression(node: Node) -> str | None:
    parameters = node.parameters if isinstance(node.parameters, dict) else {}
    for extractor in CRON_EXTRACTORS:
        if expression := extractor(parameters):
            return expression
    return None


def extract_timezone(node: Node) -> str | None:
    parameters = node.parameters if isinstance(node.parameters, dict) else {}
    options = parameters.get("options")
    if isinstance(options, dict) and isinstance(options.get("timezone"), str) and options["timezone"]:
        return options["timezone"]
    timezone = parameters.get("timezone")
    return timezone if isinstance(timezone, str) and timezone else None


def get_cron_nodes(workflow: Workflow) -> list[CronNodeInfo]:
    return [
        CronNodeInfo(
            node_name=node.name,
            node_type=node.type,
            cron_expression=extract_cron_expression(node),
            timezone=extract_timezone(node),
        )
        for node in workflow.nodes
        if is_cron_node(node)
    ]


def has_cron_trigger(workflow: Workflow) -> bool:
    return any(is_cron_node(node) for node in workflow.nodes)


def is_managed(workflow: Workflow) -> bool:
    return MANAGED_TAG in workflow.tag_names


def get_managed_slug(workflow: Workflow) -> str | None:
    """Slug from the first cron8n:<slug> tag, or None if the tag is missing."""
    for name in workflow.tag_names:
        if name.startswith(SLUG_TAG_PREFIX):
            return name[len(SLUG_TAG_PREFIX) :]
    return None


def analyze_workflow(workflow: Workflow) -> WorkflowCronInfo:
    managed = is_managed(workflow)
    return WorkflowCronInfo(
        workflow_id=workflow.id or "",
        workflow_name=workflow.name,
        active=workflow.active,
        cron_nodes=get_cron_nodes(workflow),
        is_managed=managed,
        managed_slug=get_managed_slug(workflow) if managed else None,
        tags=workflow.tag_names,
    )


def filter_cron_workflows(workflows: list[Workflow]) -> list[Workflow]:
    return [w for w in workflows if has_cron_trigger(w)]


def group_workflows(workflows: list[Workflow]) -> WorkflowGroups:
    """Keep cron workflows only and split them into managed and unmanaged."""
    groups = WorkflowGroups()
    for workflow in filter_cron_workflows(workflows):
        info = analyze_workflow(workflow)
        (groups.managed if info.is_managed else groups.unmanaged).append(info)
    return groups


def suggest_slug(workflow_name: str) -> str:
    """Suggest a slug for an unmanaged workflow. Collisions are the caller's problem."""
    return create_slug(workflow_name)
