"""Command-line interface for the hierarchy engine."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from lifegroup_hierarchy.aggregation.progress import member_progress, cohort_stats_from_progress
from lifegroup_hierarchy.hierarchy.closure import resolve_closure
from lifegroup_hierarchy.hierarchy.graph import OrgGraph
from lifegroup_hierarchy.models import ROLE_LABELS, Role
from lifegroup_hierarchy.models.errors import HierarchyValidationError
from lifegroup_hierarchy.orchestration.hierarchical import HierarchyOrchestrator, OrchestrationConfig
from lifegroup_hierarchy.utils.reporting_window import format_week_range

from .config import settings
from .snapshot import Snapshot, load_snapshot

app = typer.Typer(
    name="lifegroup-hierarchy",
    help="Lifegroup Hierarchy - closure, visibility and roll-ups for a volunteer organization",
    add_completion=False,
)

console = Console()

SnapshotArg = typer.Argument(..., exists=True, dir_okay=False, help="Snapshot file (.yaml or .json)")
PrincipalOpt = typer.Option(..., "--principal", "-p", help="Identity id to act as")


def setup_logging(verbose: bool = False):
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler()]
    )


def _load(path: Path) -> Snapshot:
    try:
        return load_snapshot(path)
    except HierarchyValidationError as e:
        console.print(f"[red]❌ Invalid snapshot: {e}[/red]")
        raise typer.Exit(code=2)


def _parse_now(now: Optional[str]) -> Optional[datetime]:
    if now is None:
        return None
    try:
        return datetime.fromisoformat(now)
    except ValueError:
        console.print(f"[red]❌ --now must be an ISO timestamp, got {now!r}[/red]")
        raise typer.Exit(code=2)


def _principal(snapshot: Snapshot, principal_id: str):
    try:
        return snapshot.find_identity(principal_id)
    except HierarchyValidationError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(code=2)


@app.callback()
def main_callback(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    setup_logging(verbose)


@app.command()
def version():
    """Show version information."""
    from lifegroup_hierarchy import __version__

    console.print(Panel.fit(
        f"[bold blue]Lifegroup Hierarchy[/bold blue]\n"
        f"Version: [green]{__version__}[/green]",
        title="Version Info"
    ))


@app.command()
def closure(snapshot_path: Path = SnapshotArg, principal_id: str = PrincipalOpt):
    """List the identities a principal may see."""
    snapshot = _load(snapshot_path)
    principal = _principal(snapshot, principal_id)
    graph = OrgGraph.build(snapshot.identities)
    result = resolve_closure(principal, graph)

    table = Table(title=f"Closure of {principal.display_name} ({ROLE_LABELS[principal.role]})")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Role")
    table.add_column("Reports to")
    for identity_id in result.sorted_ids():
        identity = graph.get(identity_id)
        table.add_row(identity.id, identity.display_name, ROLE_LABELS[identity.role], identity.superior_id or "-")

    console.print(table)
    console.print(f"[bold]{result.size}[/bold] visible identities")
    for warning in result.warnings:
        console.print(f"[yellow]⚠️  {warning.message}[/yellow]")


@app.command()
def progress(snapshot_path: Path = SnapshotArg, principal_id: str = PrincipalOpt):
    """Show discipleship progress of the members a principal may see."""
    snapshot = _load(snapshot_path)
    principal = _principal(snapshot, principal_id)
    result = resolve_closure(principal, snapshot.identities)

    scope = result.including_principal()
    members = [
        i for i in snapshot.identities
        if i.id in scope and i.role == Role.MEMBER and (i.is_active or i.id == principal.id)
    ]
    rows, _ = member_progress(members, snapshot.tracks)

    table = Table(title="Discipleship progress")
    table.add_column("Member")
    table.add_column("Progress", justify="right")
    table.add_column("Done", justify="right")
    table.add_column("In progress", justify="right")
    for row in rows:
        table.add_row(
            row.member.display_name,
            f"{row.progress.percent}%",
            str(row.progress.completed_count),
            str(row.progress.in_progress_count),
        )
    console.print(table)

    stats = cohort_stats_from_progress([row.progress for row in rows])
    console.print(Panel.fit(
        f"Members: {stats.total_members}\n"
        f"Completed: [green]{stats.completed_count}[/green]  "
        f"In progress: [yellow]{stats.in_progress_count}[/yellow]  "
        f"Not started: [red]{stats.not_started_count}[/red]\n"
        f"Average: {stats.average_percent}%  In-progress steps: {stats.total_in_progress_steps}",
        title="Cohort"
    ))


@app.command()
def reports(
    snapshot_path: Path = SnapshotArg,
    principal_id: str = PrincipalOpt,
    now: Optional[str] = typer.Option(None, "--now", help="Evaluate at this ISO timestamp"),
):
    """Show pending and received weekly reports for the current week."""
    snapshot = _load(snapshot_path)
    principal = _principal(snapshot, principal_id)
    moment = _parse_now(now) or datetime.now(settings.get_tzinfo())

    orchestrator = HierarchyOrchestrator(OrchestrationConfig.from_settings(settings))
    result = orchestrator.run(
        principal,
        snapshot.identities,
        reports=snapshot.weekly_reports,
        now=moment,
    )
    weekly = result.weekly

    console.print(Panel.fit(
        f"Week: {format_week_range(moment)}\n"
        f"Deadline: {weekly.deadline.strftime('%d/%m/%Y %H:%M')} "
        f"({'[red]passed[/red]' if weekly.deadline_passed else '[green]open[/green]'})\n"
        f"Received: {weekly.received_count}  Pending: {weekly.pending_count}  "
        f"Present: {weekly.total_present}",
        title="Weekly reports"
    ))
    for pending in weekly.pending:
        console.print(f"[yellow]⏳ {pending.leader.display_name}[/yellow]")
    for received in weekly.received:
        console.print(
            f"[green]✅ {received.leader.display_name}[/green] "
            f"({received.report.submitted_at.strftime('%d/%m/%Y %H:%M')})"
        )


@app.command()
def check(snapshot_path: Path = SnapshotArg):
    """Report data-integrity problems in the hierarchy; exit 1 when any."""
    snapshot = _load(snapshot_path)
    graph = OrgGraph.build(snapshot.identities)

    if not graph.warnings:
        console.print(f"[green]✅ {len(graph)} identities, no integrity problems[/green]")
        return

    table = Table(title="Integrity warnings")
    table.add_column("Issue", no_wrap=True)
    table.add_column("Identity", no_wrap=True)
    table.add_column("Details")
    for warning in graph.warnings:
        table.add_row(warning.issue.value, warning.identity_id or "-", warning.message)
    console.print(table)
    raise typer.Exit(code=1)


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
