"""
cron8n - Manage n8n cron-triggered workflows from local files

Keeps scheduled workflows as JSON in a project's workflows/ folder:
- Templated workflow generation (schedule trigger + one action)
- Cron validation with next-run previews
- Deploy, tag, activate and archive against the n8n REST API
- Discovery of managed/unmanaged cron workflows on the server
- Local web UI for the same operations
"""

__version__ = "1.0.0"
__package_name__ = "cron8n"
__short_name__ = "cron8n"
