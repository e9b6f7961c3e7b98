"""
Workflow layer - n8n workflow documents, templates and discovery.

Workflows are DATA STRUCTURES. Nothing here talks to the server or the
filesystem - that's the client's and the manifest store's job.
"""

from .discover import (
    CronNodeInfo,
    WorkflowCronInfo,
    WorkflowGroups,
    analyze_workflow,
    extract_cron_expression,
    extract_timezone,
    filter_cron_workflows,
    get_cron_nodes,
    get_managed_slug,
    group_workflows,
    has_cron_trigger,
    is_cron_node,
    is_managed,
    suggest_slug,
)
from .models import Node, Tag, Workflow, WorkflowPage
from .templates import (
    TEMPLATES,
    Template,
    build_workflow,
    get_template,
    set_schedule,
    set_shell_command,
    template_choices,
    template_names,
)

__all__ = [
    "Node",
    "Tag",
    "Workflow",
    "WorkflowPage",
    "CronNodeInfo",
    "WorkflowCronInfo",
    "WorkflowGroups",
    "analyze_workflow",
    "extract_cron_expression",
    "extract_timezone",
    "filter_cron_workflows",
    "get_cron_nodes",
    "get_managed_slug",
    "group_workflows",
    "has_cron_trigger",
    "is_cron_node",
    "is_managed",
    "suggest_slug",
    "TEMPLATES",
    "Template",
    "build_workflow",
    "get_template",
    "set_schedule",
    "set_shell_command",
    "template_choices",
    "template_names",
]
