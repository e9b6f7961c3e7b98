"""
Actions layer - Pure Python functions for managing cron workflows.

All functions are CLI-agnostic: stores and the API client are passed in,
typed results come back, and Cron8nError subclasses are raised on failure.
The CLI and the web UI are thin wrappers around these.
"""

from .activate import ActivateResult, resolve_workflow_id, set_workflow_active
from .archive import ArchiveResult, archive_workflow
from .create import CreateResult, check_new_slug, create_workflow
from .deploy import DeployPlan, DeployResult, deploy_workflow, plan_deploy
from .edit import CurrentValues, EditResult, current_values, edit_workflow
from .importer import ImportResult, import_workflow

__all__ = [
    "create_workflow",
    "check_new_slug",
    "CreateResult",
    "edit_workflow",
    "current_values",
    "CurrentValues",
    "EditResult",
    "deploy_workflow",
    "plan_deploy",
    "DeployPlan",
    "DeployResult",
    "import_workflow",
    "ImportResult",
    "archive_workflow",
    "ArchiveResult",
    "set_workflow_active",
    "resolve_workflow_id",
    "ActivateResult",
]
