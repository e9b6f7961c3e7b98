"""
Workflow templates - canned two-node graphs (schedule trigger + one action).

Every template produces an inactive workflow whose trigger stores the
schedule in the rule/interval shape with options.timezone.
"""

import copy
import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..constants import EXECUTE_COMMAND_TYPE, HTTP_REQUEST_TYPE, NOOP_TYPE, SCHEDULE_TRIGGER_TYPE
from ..errors import ValidationError
from .discover import has_rule_interval_schedule, is_cron_node
from .models import Node, Workflow

logger = logging.getLogger(__name__)

TRIGGER_NODE_NAME = "Schedule Trigger"
DEFAULT_SHELL_COMMAND = 'echo "Hello from cron8n! Time: $(date)"'


def schedule_parameters(cron_expression: str, timezone: str) -> dict:
    return {
        "rule": {"interval": [{"field": "cronExpression", "expression": cron_expression}]},
        "options": {"timezone": timezone},
    }


def create_trigger_node(cron_expression: str, timezone: str) -> Node:
    return Node(
        id="cron-trigger",
        name=TRIGGER_NODE_NAME,
        type=SCHEDULE_TRIGGER_TYPE,
        type_version=1.2,
        position=[250, 300],
        parameters=schedule_parameters(cron_expression, timezone),
    )


def _noop_node(shell_command: str | None = None) -> Node:
    return Node(id="no-op", name="No Operation", type=NOOP_TYPE, type_version=1, position=[500, 300])


def _execute_command_node(shell_command: str | None = None) -> Node:
    return Node(
        id="execute-command",
        name="Execute Command",
        type=EXECUTE_COMMAND_TYPE,
        type_version=1,
        position=[500, 300],
        parameters={"command": shell_command or DEFAULT_SHELL_COMMAND},
    )


def _http_request_node(shell_command: str | None = None) -> Node:
    return Node(
        id="http-request",
        name="HTTP Request",
        type=HTTP_REQUEST_TYPE,
        type_version=4.2,
        position=[500, 300],
        parameters={"method": "GET", "url": "https://api.example.com/endpoint", "options": {}},
    )


def _webhook_call_node(shell_command: str | None = None) -> Node:
    return Node(
        id="webhook-call",
        name="Webhook Call",
        type=HTTP_REQUEST_TYPE,
        type_version=4.2,
        position=[500, 300],
        parameters={
            "method": "POST",
            "url": "https://example.com/webhook",
            "sendBody": True,
            "bodyParameters": {
                "parameters": [
                    {"name": "event", "value": "cron_triggered"},
                    {"name": "timestamp", "value": "={{ $now.toISO() }}"},
                ]
            },
            "options": {},
        },
    )


@dataclass(frozen=True)
class Template:
    """A workflow archetype."""

    key: str
    name: str
    description: str
    action: Callable[[str | None], Node]

    def build(self, workflow_name: str, cron_expression: str, timezone: str, shell_command: str | None = None):
        trigger = create_trigger_node(cron_expression, timezone)
        action = self.action(shell_command)
        return Workflow(
            name=workflow_name,
            active=False,
            nodes=[trigger, action],
            connections={trigger.name: {"main": [[{"node": action.name, "type": "main", "index": 0}]]}},
            settings={"executionOrder": "v1"},
        )


TEMPLATES: dict[str, Template] = {
    t.key: t
    for t in (
        Template(
            "cron-only",
            "Cron Only",
            "A simple workflow with just a cron trigger (useful as a starting point)",
            _noop_node,
        ),
        Template(
            "shell-command",
            "Shell Command",
            "Cron trigger that executes a shell command on the n8n server",
            _execute_command_node,
        ),
        Template(
            "http-request",
            "HTTP Request",
            "Cron trigger with an HTTP request (call an API on schedule)",
            _http_request_node,
        ),
        Template(
            "webhook-call",
            "Webhook Call",
            "Cron trigger that calls an external webhook",
            _webhook_call_node,
        ),
    )
}


def template_names() -> list[str]:
    return list(TEMPLATES)


def get_template(name: str) -> Template:
    """Look up a template, raising ValidationError for unknown names."""
    template = TEMPLATES.get(name)
    if template is None:
        raise ValidationError(f"Unknown template: {name}", f"Available templates: {', '.join(TEMPLATES)}")
    return template


def template_choices() -> list[dict]:
    """Templates as {value, title, description} for prompts and the UI."""
    return [{"value": t.key, "title": t.name, "description": t.description} for t in TEMPLATES.values()]


def build_workflow(
    template: str,
    name: str,
    cron_expression: str,
    timezone: str,
    shell_command: str | None = None,
) -> Workflow:
    """Build a new inactive workflow from a template."""
    return get_template(template).build(name, cron_expression, timezone, shell_command)


def set_schedule(workflow: Workflow, cron_expression: str, timezone: str) -> bool:
    """
    Write a new schedule into the first schedule trigger of a workflow.

    Only triggers already using the rule/interval shape are rewritten; legacy
    shapes are left untouched. Returns True if a node was updated.
    """
    node = next((n for n in workflow.nodes if is_cron_node(n)), None)
    if node is None:
        return False

    if not has_rule_interval_schedule(node):
        logger.warning("Trigger node %r uses a legacy schedule shape, leaving it unchanged", node.name)
        return False

    parameters = copy.deepcopy(node.parameters)
    parameters["rule"]["interval"][0]["expression"] = cron_expression
    options = parameters.get("options")
    parameters["options"] = {**options, "timezone": timezone} if isinstance(options, dict) else {"timezone": timezone}
    node.parameters = parameters
    return True


def set_shell_command(workflow: Workflow, command: str) -> bool:
    """Update the command of the first Execute Command node. Returns True if one was found."""
    node = next((n for n in workflow.nodes if n.type == EXECUTE_COMMAND_TYPE), None)
    if node is None:
        return False
    node.parameters = {**node.parameters, "command": command}
    return True
