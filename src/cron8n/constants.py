"""
Centralized constants for cron8n.

File layout, tag names and node type identifiers live here so the
manifest store, discovery and the API client agree on them.
"""

# Project layout
WORKFLOWS_DIR = "workflows"
ARCHIVE_DIR = "archived"
WORKFLOW_SUFFIX = ".json"
MANIFEST_SUFFIX = ".cron8n.json"

# Home directory (~/.cron8n) files
HOME_DIR_NAME = ".cron8n"
CREDENTIALS_FILE = "config.json"
REGISTRY_FILE = "registry.json"
SETTINGS_FILE = "settings.yaml"

# Management tags - the only link between a remote workflow and a local manifest
MANAGED_TAG = "managed-by:cron8n"
SLUG_TAG_PREFIX = "cron8n:"

# Node types recognized as schedule triggers (matched by substring, see discover.py)
CRON_NODE_TYPES = (
    "n8n-nodes-base.cron",
    "n8n-nodes-base.scheduleTrigger",
    "n8n-nodes-base.schedule",
)

SCHEDULE_TRIGGER_TYPE = "n8n-nodes-base.scheduleTrigger"
EXECUTE_COMMAND_TYPE = "n8n-nodes-base.executeCommand"
HTTP_REQUEST_TYPE = "n8n-nodes-base.httpRequest"
NOOP_TYPE = "n8n-nodes-base.noOp"

# REST API
API_PREFIX = "/api/v1"
API_KEY_HEADER = "X-N8N-API-KEY"
DEFAULT_TIMEOUT = 30.0

# Defaults
DEFAULT_TIMEZONE = "Europe/Istanbul"
DEFAULT_TEMPLATE = "cron-only"
DEFAULT_IMPORT_CRON = "0 * * * *"
DEFAULT_UI_HOST = "127.0.0.1"
DEFAULT_UI_PORT = 3847
