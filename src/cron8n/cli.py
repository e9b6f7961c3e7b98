"""
CLI module - Command line interface for cron8n

Entry point for the `cron8n` command using Typer.
"""

import functools
import json
import logging
import threading
import webbrowser
from pathlib import Path
from typing import Annotated

import click
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .actions import (
    archive_workflow,
    create_workflow,
    current_values,
    deploy_workflow,
    edit_workflow,
    import_workflow,
    plan_deploy,
    set_workflow_active,
)
from .client import N8nClient
from .config import (
    AppConfig,
    AuthCredentials,
    AuthMode,
    CredentialStore,
    get_home_dir,
    load_config,
    normalize_base_url,
    parse_auth_mode,
)
from .constants import DEFAULT_TIMEZONE
from .cron import CRON_PRESETS, CronInfo, format_date, get_preset, parse_cron
from .errors import AuthError, Cron8nError, ValidationError
from .manifest import Manifest, ManifestStore, resolve_manifest
from .registry import Registry
from .slug import create_slug, is_valid_slug
from .ui import create_app, serve
from .workflow import analyze_workflow, filter_cron_workflows, group_workflows, suggest_slug, template_names
from .workflow.templates import DEFAULT_SHELL_COMMAND

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)
app = typer.Typer(
    name="cron8n",
    help="cron8n - manage n8n cron workflows as local JSON files.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# =============================================================================
# Composition root
# =============================================================================


def get_settings() -> AppConfig:
    return load_config()


def get_credentials() -> CredentialStore:
    return CredentialStore(get_home_dir())


def get_registry() -> Registry:
    return Registry(get_home_dir())


def get_store(project: Path | None = None) -> ManifestStore:
    """Manifest store for a project (default: current directory)."""
    return ManifestStore(project or Path.cwd())


def make_client(credentials: AuthCredentials) -> N8nClient:
    return N8nClient(credentials, timeout=get_settings().api.timeout)


def get_client() -> N8nClient:
    """API client for the stored credentials. Raises AuthError when not logged in."""
    return make_client(get_credentials().require_auth())


def handle_errors(func):
    """Print Cron8nError (and anything unexpected) as a one-line error and exit 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (typer.Exit, typer.Abort, click.ClickException):
            raise
        except Cron8nError as e:
            err_console.print(f"[red]✖ {e.kind}:[/red] {e.message}", highlight=False)
            if e.hint:
                err_console.print(f"  [dim]{e.hint}[/dim]", highlight=False)
            raise typer.Exit(1) from None
        except Exception as e:
            logger.debug("Unexpected error", exc_info=True)
            err_console.print(f"[red]✖ Error:[/red] {e}", highlight=False)
            raise typer.Exit(1) from None

    return wrapper


def print_json(data):
    typer.echo(json.dumps(data, indent=2))


def print_next_runs(info: CronInfo, limit: int = 5):
    console.print("[bold]Next runs:[/bold]")
    for run in info.next_runs[:limit]:
        console.print(f"  {format_date(run)}", highlight=False)


# Global options callback for version and logging
def version_callback(value: bool):
    if value:
        console.print(f"cron8n version {__version__}")
        raise typer.Exit()


@app.callback()
@handle_errors
def main(
    version: Annotated[
        bool, typer.Option("--version", "-v", callback=version_callback, is_eager=True, help="Show version")
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", help="Enable debug logging")] = False,
):
    """cron8n - manage n8n cron workflows as local JSON files."""
    settings = get_settings()
    level = logging.DEBUG if verbose else getattr(logging, str(settings.logging.level).upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


# =============================================================================
# Auth Command Group
# =============================================================================

auth_app = typer.Typer(name="auth", help="Manage n8n credentials", no_args_is_help=True)
app.add_typer(auth_app)


@auth_app.command("login")
@handle_errors
def auth_login(
    base_url: Annotated[str | None, typer.Option("--base-url", "-u", help="n8n base URL")] = None,
    mode: Annotated[str | None, typer.Option("--mode", "-m", help="Auth mode: apiKey or bearerToken")] = None,
    secret: Annotated[str | None, typer.Option("--secret", "-s", help="API key or bearer token")] = None,
):
    """
    Store n8n credentials after testing the connection.

    Missing values are prompted for.

    [bold]Examples:[/bold]

        cron8n auth login

        cron8n auth login -u https://n8n.example.com -m apiKey -s n8n_api_xxx
    """
    if base_url is None:
        base_url = typer.prompt("n8n base URL")
    base_url = normalize_base_url(base_url)

    if mode is None:
        mode = typer.prompt(
            "Auth mode",
            type=click.Choice([m.value for m in AuthMode]),
            default=AuthMode.API_KEY.value,
        )
    auth_mode = parse_auth_mode(mode)

    if secret is None:
        label = "API key" if auth_mode == AuthMode.API_KEY else "Bearer token"
        secret = typer.prompt(label, hide_input=True)
    secret = secret.strip()
    if not secret:
        raise ValidationError("Secret is required")

    credentials = AuthCredentials(base_url=base_url, auth_mode=auth_mode, secret=secret)
    with make_client(credentials) as client:
        if not client.test_connection():
            raise AuthError(
                "Connection failed. Check your credentials.",
                "Verify the base URL and that the API key is enabled in n8n",
            )

    get_credentials().save_auth(credentials)
    console.print(f"[green]✓[/green] Authenticated to {base_url}", highlight=False)


@auth_app.command("status")
@handle_errors
def auth_status(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
):
    """Show stored credentials and test the connection."""
    auth = get_credentials().get_auth()
    if auth is None:
        if json_output:
            print_json({"authenticated": False})
        else:
            console.print("[yellow]Not authenticated[/yellow]")
            console.print("Run [cyan]cron8n auth login[/cyan] to authenticate")
        return

    with make_client(auth) as client:
        connected = client.test_connection()

    if json_output:
        print_json(
            {
                "authenticated": True,
                "baseUrl": auth.base_url,
                "authMode": auth.auth_mode.value,
                "secret": auth.masked_secret(),
                "connectionValid": connected,
            }
        )
        return

    table = Table(title="n8n Connection")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Base URL", auth.base_url)
    table.add_row("Auth Mode", auth.auth_mode.value)
    table.add_row("Secret", auth.masked_secret())
    table.add_row("Connection", "[green]OK[/green]" if connected else "[red]Failed[/red]")
    console.print(table)


@auth_app.command("logout")
@handle_errors
def auth_logout():
    """Remove stored credentials."""
    get_credentials().clear_auth()
    console.print("[green]✓[/green] Logged out")


# =============================================================================
# Cron Command Group
# =============================================================================

cron_app = typer.Typer(name="cron", help="Create, deploy and inspect cron workflows", no_args_is_help=True)
app.add_typer(cron_app)

JsonOption = Annotated[bool, typer.Option("--json", help="Output as JSON")]


def prompt_cron() -> str:
    """Pick a preset or type a custom expression until it parses."""
    for preset in CRON_PRESETS:
        console.print(f"  [cyan]{preset.name:<13}[/cyan] {preset.expression:<12} [dim]{preset.description}[/dim]")
    choice = typer.prompt(
        "Schedule",
        type=click.Choice([p.name for p in CRON_PRESETS] + ["custom"]),
        default="hourly",
    )
    if choice != "custom":
        return get_preset(choice).expression

    while True:
        expression = typer.prompt("Cron expression")
        info = parse_cron(expression)
        if info.is_valid:
            return expression
        console.print(f"[red]Invalid:[/red] {info.error}", highlight=False)


@cron_app.command("new")
@handle_errors
def cron_new(
    name: Annotated[str | None, typer.Option("--name", "-n", help="Workflow name")] = None,
    cron: Annotated[str | None, typer.Option("--cron", "-c", help="Cron expression (5 fields)")] = None,
    timezone: Annotated[str | None, typer.Option("--timezone", "-t", help="IANA timezone")] = None,
    template: Annotated[str | None, typer.Option("--template", help="Workflow template")] = None,
    shell_command: Annotated[
        str | None, typer.Option("--shell-command", help="Command for the shell-command template")
    ] = None,
    slug: Annotated[str | None, typer.Option("--slug", help="Slug (default: derived from the name)")] = None,
):
    """
    Create a new cron workflow in ./workflows.

    [bold]Examples:[/bold]

        cron8n cron new

        cron8n cron new -n "Nightly backup" -c "0 2 * * *" --template shell-command --shell-command ./backup.sh
    """
    settings = get_settings()
    store = get_store()

    if name is None:
        name = typer.prompt("Workflow name")
    if not name.strip():
        raise ValidationError("Workflow name is required")

    if cron is None:
        cron = prompt_cron()
    if timezone is None:
        timezone = typer.prompt("Timezone", default=settings.defaults.timezone)
    if template is None:
        template = typer.prompt(
            "Template",
            type=click.Choice(template_names()),
            default=settings.defaults.template,
        )
    if template == "shell-command" and shell_command is None:
        shell_command = typer.prompt("Shell command", default=DEFAULT_SHELL_COMMAND)

    if slug is None:
        slug = create_slug(name)
        while not is_valid_slug(slug) or store.exists(slug):
            console.print(f'[yellow]Slug "{slug}" is invalid or already exists[/yellow]', highlight=False)
            slug = typer.prompt("Slug")

    result = create_workflow(
        store,
        get_registry(),
        name=name,
        cron_expression=cron,
        timezone=timezone,
        template=template,
        shell_command=shell_command,
        slug=slug,
    )

    console.print(f"[green]✓[/green] Created [bold]{result.manifest.slug}[/bold]")
    console.print(f"  Workflow: {result.workflow_path}", highlight=False)
    console.print(f"  Manifest: {result.manifest_path}", highlight=False)
    print_next_runs(result.cron, limit=3)
    console.print(f"\nDeploy with: [cyan]cron8n cron deploy {result.manifest.slug}[/cyan]")


@cron_app.command("edit")
@handle_errors
def cron_edit(
    slug: Annotated[str, typer.Argument(help="Workflow slug")],
    name: Annotated[str | None, typer.Option("--name", "-n", help="New name")] = None,
    cron: Annotated[str | None, typer.Option("--cron", "-c", help="New cron expression")] = None,
    timezone: Annotated[str | None, typer.Option("--timezone", "-t", help="New timezone")] = None,
    shell_command: Annotated[str | None, typer.Option("--shell-command", help="New shell command")] = None,
):
    """
    Edit a local workflow. Without options an interactive menu is shown.

    [bold]Examples:[/bold]

        cron8n cron edit nightly-backup --cron "30 3 * * *"

        cron8n cron edit nightly-backup
    """
    store = get_store()

    if name is None and cron is None and timezone is None and shell_command is None:
        current = current_values(store.load(slug), store.load_workflow(slug))
        fields = ["name", "cron", "timezone"]
        if current.shell_command is not None:
            fields.append("shell-command")

        while True:
            console.print(
                f"\n  name: {name or current.name}\n"
                f"  cron: {cron or current.cron_expression}\n"
                f"  timezone: {timezone or current.timezone}",
                highlight=False,
            )
            if current.shell_command is not None:
                console.print(f"  shell-command: {shell_command or current.shell_command}", highlight=False)

            choice = typer.prompt("Edit", type=click.Choice(fields + ["done"]), default="done")
            if choice == "done":
                break
            if choice == "name":
                name = typer.prompt("Name", default=name or current.name)
            elif choice == "cron":
                cron = typer.prompt("Cron expression", default=cron or current.cron_expression)
                info = parse_cron(cron, timezone or current.timezone)
                if not info.is_valid:
                    console.print(f"[red]Invalid:[/red] {info.error}", highlight=False)
                    cron = None
            elif choice == "timezone":
                timezone = typer.prompt("Timezone", default=timezone or current.timezone)
            else:
                shell_command = typer.prompt("Shell command", default=shell_command or current.shell_command)

    result = edit_workflow(store, slug, name=name, cron_expression=cron, timezone=timezone, shell_command=shell_command)

    if not result.changed:
        console.print("[yellow]No changes[/yellow]")
        return

    console.print(f"[green]✓[/green] Updated [bold]{slug}[/bold]")
    for key, value in result.changes.items():
        console.print(f"  {key}: {value}", highlight=False)
    if not result.schedule_written:
        console.print("[yellow]Warning:[/yellow] schedule node uses an unsupported layout; only the manifest changed")
    if result.needs_redeploy:
        console.print(f"\nRun [cyan]cron8n cron deploy {slug}[/cyan] to update n8n")


@cron_app.command("deploy")
@handle_errors
def cron_deploy(
    target: Annotated[str, typer.Argument(help="Slug or path to the workflow/manifest file")],
    activate: Annotated[bool, typer.Option("--activate/--no-activate", help="Activate after deploying")] = False,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Show what would be done without calling n8n")] = False,
):
    """
    Deploy a workflow to n8n (create on first deploy, update afterwards).

    [bold]Examples:[/bold]

        cron8n cron deploy nightly-backup --activate

        cron8n cron deploy ./workflows/nightly-backup.cron8n.json --dry-run
    """
    manifest, project = resolve_manifest(target, Path.cwd())
    store = get_store(project)

    if dry_run:
        plan = plan_deploy(store, manifest.slug, activate)
        table = Table(title=f"Deploy plan: {plan.slug}")
        table.add_column("Property", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("Operation", plan.operation)
        table.add_row("Workflow ID", plan.workflow_id or "-")
        table.add_row("Name", plan.name)
        table.add_row("Activate", "Yes" if plan.activate else "No")
        table.add_row("Tags", ", ".join(plan.tags))
        console.print(table)
        console.print("[dim]Dry run - nothing was sent[/dim]")
        return

    with get_client() as client:
        result = deploy_workflow(client, store, get_registry(), manifest.slug, activate=activate)

    verb = "Created" if result.created else "Updated"
    console.print(f"[green]✓[/green] {verb} [bold]{manifest.slug}[/bold] (id {result.workflow_id})", highlight=False)
    console.print(f"  Tags: {', '.join(result.tags)}", highlight=False)
    console.print(f"  Active: {'yes' if result.workflow.active else 'no'}")


def _status(workflow_id: str | None) -> str:
    return f"[green]deployed[/green] ({workflow_id})" if workflow_id else "[yellow]local[/yellow]"


@cron_app.command("list")
@handle_errors
def cron_list(
    remote: Annotated[bool, typer.Option("--remote", "-r", help="List cron workflows on the n8n server")] = False,
    managed: Annotated[bool, typer.Option("--managed", help="Remote: only workflows managed by cron8n")] = False,
    unmanaged: Annotated[bool, typer.Option("--unmanaged", help="Remote: only unmanaged workflows")] = False,
    archived: Annotated[bool, typer.Option("--archived", help="List archived local workflows")] = False,
    json_output: JsonOption = False,
    all_projects: Annotated[bool, typer.Option("--all", "-a", help="List registry entries of all projects")] = False,
):
    """
    List workflows (local by default).

    [bold]Examples:[/bold]

        cron8n cron list

        cron8n cron list --remote --unmanaged

        cron8n cron list --all --json
    """
    if remote or managed or unmanaged:
        with get_client() as client:
            workflows = filter_cron_workflows(client.list_workflows())
        groups = group_workflows(workflows)
        if managed and not unmanaged:
            infos = groups.managed
        elif unmanaged and not managed:
            infos = groups.unmanaged
        else:
            infos = groups.managed + groups.unmanaged

        if json_output:
            print_json([info.to_dict() for info in infos])
            return
        if not infos:
            console.print("No cron workflows found")
            return

        table = Table(title="Remote cron workflows")
        table.add_column("ID", style="dim")
        table.add_column("Name", style="cyan")
        table.add_column("Cron")
        table.add_column("Active")
        table.add_column("Managed")
        for info in infos:
            crons = ", ".join(n.cron_expression or "?" for n in info.cron_nodes)
            table.add_row(
                info.workflow_id,
                info.workflow_name,
                crons,
                "[green]yes[/green]" if info.active else "no",
                info.managed_slug or ("yes" if info.is_managed else "[dim]no[/dim]"),
            )
        console.print(table)
        return

    if all_projects:
        entries = get_registry().all_entries()
        if json_output:
            print_json([e.to_dict() for e in entries])
            return
        if not entries:
            console.print("Registry is empty")
            return

        table = Table(title="All projects")
        table.add_column("Slug", style="cyan")
        table.add_column("Project")
        table.add_column("Status")
        table.add_column("Last Synced", style="dim")
        for entry in entries:
            table.add_row(entry.slug, entry.project_path, _status(entry.workflow_id), entry.last_synced_at or "-")
        console.print(table)
        return

    store = get_store()

    if archived:
        manifests = store.load_archived()
        if json_output:
            print_json([m.to_dict() for m in manifests])
            return
        if not manifests:
            console.print("No archived workflows")
            return

        table = Table(title="Archived workflows")
        table.add_column("Slug", style="cyan")
        table.add_column("Name")
        table.add_column("Cron")
        table.add_column("Archived At", style="dim")
        for m in manifests:
            table.add_row(m.slug, m.name, m.cron_expression, m.archived_at)
        console.print(table)
        return

    manifests = store.load_all()
    if json_output:
        print_json([m.to_dict() for m in manifests])
        return
    if not manifests:
        console.print(f"No workflows in {store.workflows_dir}")
        console.print("Create one with [cyan]cron8n cron new[/cyan]")
        return

    table = Table(title=f"Workflows in {store.project_path.name}")
    table.add_column("Slug", style="cyan")
    table.add_column("Name")
    table.add_column("Cron")
    table.add_column("Timezone", style="dim")
    table.add_column("Status")
    for m in manifests:
        table.add_row(m.slug, m.name, m.cron_expression, m.timezone, _status(m.last_deployed_workflow_id))
    console.print(table)


def _show_local(manifest: Manifest, store: ManifestStore, json_output: bool):
    info = parse_cron(manifest.cron_expression, manifest.timezone)
    nodes = None
    if store.workflow_exists(manifest.slug):
        nodes = [{"name": n.name, "type": n.type} for n in store.load_workflow(manifest.slug).nodes]

    if json_output:
        print_json({"manifest": manifest.to_dict(), "nodes": nodes, "nextRuns": info.to_dict()["nextRuns"]})
        return

    table = Table(title=f"Local workflow: {manifest.slug}")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Name", manifest.name)
    table.add_row("Template", manifest.template)
    table.add_row("Cron", manifest.cron_expression)
    table.add_row("Timezone", manifest.timezone)
    table.add_row("Tags", ", ".join(manifest.tags))
    table.add_row("Status", _status(manifest.last_deployed_workflow_id))
    if nodes is None:
        table.add_row("Nodes", "[red]workflow file missing[/red]")
    else:
        table.add_row("Nodes", ", ".join(n["name"] for n in nodes))
    console.print(table)
    if info.is_valid:
        print_next_runs(info)


@cron_app.command("inspect")
@handle_errors
def cron_inspect(
    target: Annotated[str, typer.Argument(help="Local slug, workflow file path, or remote workflow id")],
    local: Annotated[bool, typer.Option("--local", "-l", help="Only inspect the local files")] = False,
    json_output: JsonOption = False,
):
    """
    Show a workflow's schedule triggers, nodes and upcoming runs.

    A local slug is inspected remotely under its deployed id, or locally
    while it has not been deployed yet.

    [bold]Examples:[/bold]

        cron8n cron inspect 1042

        cron8n cron inspect nightly-backup

        cron8n cron inspect nightly-backup --local
    """
    store = get_store()
    is_path = "/" in target or "\\" in target

    if local:
        if not is_path and not store.exists(target):
            raise ValidationError("Local workflow not found", f"No manifest for {target!r} in {store.workflows_dir}")
        manifest, project = resolve_manifest(target, Path.cwd())
        _show_local(manifest, get_store(project), json_output)
        return

    if is_path or store.exists(target):
        manifest, project = resolve_manifest(target, Path.cwd())
        if not manifest.last_deployed_workflow_id:
            _show_local(manifest, get_store(project), json_output)
            return
        target = manifest.last_deployed_workflow_id

    with get_client() as client:
        workflow = client.get_workflow(target)

    analysis = analyze_workflow(workflow)
    cron_nodes = []
    for node in analysis.cron_nodes:
        data = node.to_dict()
        data["nextRuns"] = []
        if node.cron_expression:
            data["nextRuns"] = parse_cron(node.cron_expression, node.timezone or DEFAULT_TIMEZONE).to_dict()["nextRuns"]
        cron_nodes.append(data)

    if json_output:
        data = analysis.to_dict()
        data["cronNodes"] = cron_nodes
        data["suggestedSlug"] = suggest_slug(workflow.name)
        data["nodes"] = [{"name": n.name, "type": n.type} for n in workflow.nodes]
        print_json(data)
        return

    table = Table(title=f"Workflow {analysis.workflow_id}")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Name", analysis.workflow_name)
    table.add_row("Active", "yes" if analysis.active else "no")
    table.add_row("Managed", analysis.managed_slug or ("yes" if analysis.is_managed else "no"))
    table.add_row("Tags", ", ".join(analysis.tags) or "-")
    table.add_row("Nodes", str(len(workflow.nodes)))
    table.add_row("Suggested Slug", suggest_slug(workflow.name))
    console.print(table)

    if not cron_nodes:
        console.print("[yellow]No cron trigger nodes[/yellow]")
    for node in cron_nodes:
        console.print(
            f"\n[bold]{node['nodeName']}[/bold] ({node['nodeType']}): "
            f"{node['cronExpression'] or '?'} {node['timezone'] or ''}",
            highlight=False,
        )
        for run in node["nextRuns"][:3]:
            console.print(f"  {run}", highlight=False)

    if not analysis.is_managed and cron_nodes:
        console.print(f"\nImport with: [cyan]cron8n cron import {analysis.workflow_id}[/cyan]")


@cron_app.command("import")
@handle_errors
def cron_import(
    workflow_id: Annotated[str, typer.Argument(help="Remote workflow id")],
    slug: Annotated[str | None, typer.Option("--slug", help="Slug (default: derived from the name)")] = None,
    force: Annotated[bool, typer.Option("--force", "-f", help="Import even if already managed")] = False,
):
    """
    Import an existing n8n cron workflow into ./workflows.

    [bold]Examples:[/bold]

        cron8n cron import 1042 --slug legacy-report
    """

    def choose_slug(rejected: str) -> str:
        console.print(f'[yellow]Slug "{rejected}" is invalid or already exists[/yellow]', highlight=False)
        return typer.prompt("Slug")

    with get_client() as client:
        result = import_workflow(
            client, get_store(), get_registry(), workflow_id, slug=slug, force=force, choose_slug=choose_slug
        )

    console.print(f"[green]✓[/green] Imported [bold]{result.manifest.slug}[/bold]")
    console.print(f"  Workflow: {result.workflow_path}", highlight=False)
    console.print(f"  Manifest: {result.manifest_path}", highlight=False)
    console.print(f"  Cron: {result.manifest.cron_expression} ({result.manifest.timezone})", highlight=False)
    if result.cron_node_count > 1:
        console.print(f"[yellow]Note:[/yellow] {result.cron_node_count} cron nodes; only the first is tracked")
    console.print(f"\nRedeploy to add management tags: [cyan]cron8n cron deploy {result.manifest.slug}[/cyan]")


@cron_app.command("validate")
@handle_errors
def cron_validate(
    expression: Annotated[str | None, typer.Argument(help="Cron expression (quote it)")] = None,
    timezone: Annotated[str | None, typer.Option("--timezone", "-t", help="IANA timezone")] = None,
    count: Annotated[int, typer.Option("--count", "-n", help="Number of next runs to show")] = 5,
    json_output: JsonOption = False,
):
    """
    Validate a cron expression and show its next runs.

    [bold]Examples:[/bold]

        cron8n cron validate "*/15 * * * *"

        cron8n cron validate "0 9 * * 1-5" -t Europe/London --json
    """
    if expression is None:
        expression = typer.prompt("Cron expression")
    info = parse_cron(expression, timezone or get_settings().defaults.timezone, count)

    if json_output:
        print_json(info.to_dict())
    elif info.is_valid:
        console.print(f"[green]✓[/green] Valid: {expression}", highlight=False)
        print_next_runs(info, limit=count)
    else:
        console.print(f"[red]✖[/red] Invalid: {expression}", highlight=False)
        console.print(f"  {info.error}", highlight=False)

    if not info.is_valid:
        raise typer.Exit(1)


def _set_active(target: str, active: bool, json_output: bool):
    with get_client() as client:
        result = set_workflow_active(client, get_store(), target, active)

    workflow = result.workflow
    if json_output:
        print_json({"id": workflow.id, "name": workflow.name, "active": workflow.active})
        return
    verb = "Activated" if active else "Deactivated"
    console.print(f"[green]✓[/green] {verb} {workflow.name} ({workflow.id})", highlight=False)


@cron_app.command("activate")
@handle_errors
def cron_activate(
    target: Annotated[str, typer.Argument(help="Slug or remote workflow id")],
    json_output: JsonOption = False,
):
    """Activate a deployed workflow."""
    _set_active(target, True, json_output)


@cron_app.command("deactivate")
@handle_errors
def cron_deactivate(
    target: Annotated[str, typer.Argument(help="Slug or remote workflow id")],
    json_output: JsonOption = False,
):
    """Deactivate a deployed workflow."""
    _set_active(target, False, json_output)


@cron_app.command("archive")
@handle_errors
def cron_archive(
    slug: Annotated[str, typer.Argument(help="Workflow slug")],
    delete_remote: Annotated[
        bool, typer.Option("--delete-remote", help="Delete the remote workflow instead of deactivating it")
    ] = False,
    keep_local: Annotated[bool, typer.Option("--keep-local", help="Leave the local files in place")] = False,
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation")] = False,
):
    """
    Archive a workflow: deactivate (or delete) it in n8n and move its files to workflows/archived.

    [bold]Examples:[/bold]

        cron8n cron archive nightly-backup

        cron8n cron archive nightly-backup --delete-remote --force
    """
    store = get_store()
    manifest = store.load(slug)

    if not force:
        question = f'Archive "{slug}"?'
        if manifest.is_deployed:
            question += " The remote workflow will be " + ("deleted." if delete_remote else "deactivated.")
        if not typer.confirm(question):
            console.print("Cancelled")
            raise typer.Exit()

    auth = get_credentials().get_auth()
    client = make_client(auth) if auth is not None else None
    try:
        result = archive_workflow(
            store, get_registry(), slug, client=client, delete_remote=delete_remote, keep_local=keep_local
        )
    finally:
        if client is not None:
            client.close()

    for warning in result.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}", highlight=False)
    if result.remote_action:
        console.print(f"  Remote workflow {result.remote_action}")
    if result.location:
        console.print(f"[green]✓[/green] Archived [bold]{slug}[/bold] to {result.location.manifest_path}", highlight=False)
    else:
        console.print(f"[green]✓[/green] Local files of [bold]{slug}[/bold] kept")


# =============================================================================
# Web UI
# =============================================================================


@app.command()
@handle_errors
def ui(
    port: Annotated[int | None, typer.Option("--port", "-p", help="Port to listen on")] = None,
    host: Annotated[str | None, typer.Option("--host", help="Interface to bind")] = None,
    no_browser: Annotated[bool, typer.Option("--no-browser", help="Do not open a browser")] = False,
):
    """
    Start the local web UI for the current project.

    [bold]Examples:[/bold]

        cron8n ui

        cron8n ui --port 8080 --no-browser
    """
    settings = get_settings()
    host = host or settings.ui.host
    port = port or settings.ui.port

    project = Path.cwd()
    get_store(project).workflows_dir.mkdir(parents=True, exist_ok=True)
    web_app = create_app(project, get_credentials(), get_registry(), client_factory=make_client)

    url = f"http://{host}:{port}"
    console.print(f"[bold]cron8n UI[/bold] running at [cyan]{url}[/cyan]")
    console.print("[dim]Press Ctrl+C to stop[/dim]")

    if settings.ui.open_browser and not no_browser:
        threading.Timer(1.0, webbrowser.open, (url,)).start()

    serve(web_app, host=host, port=port)


def main_cli():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main_cli()
