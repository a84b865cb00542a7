"""
Command-line entry point for eni-status.

This module is the only error boundary: it turns EniStatusError into a
printed message and a non-zero exit code. The listing, counting and
cleanup work lives in the detection and cleanup modules.
"""

import logging
import sys
from typing import Dict, Optional

import click
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .cleanup import cleanup_enis
from .detection import list_network_interfaces, status_counts
from .exceptions import DeletionFailedError, EniStatusError
from .logging_config import LOG_ENV_VAR, setup_logging
from .models import DeletionOutcome, InterfaceStatus
from .session import create_ec2_client, create_session

logger = logging.getLogger(__name__)

console = Console()

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


def build_status_table(counts: Dict[InterfaceStatus, int]) -> Table:
    """One row per observed status, sorted by name, plus a total when there is more than one."""
    table = Table(box=box.SIMPLE, show_edge=False)
    table.add_column("count", justify="right", style="green")
    table.add_column("status", style="cyan")
    for status, count in sorted(counts.items(), key=lambda item: item[0].value):
        table.add_row(str(count), status.value)
    if len(counts) > 1:
        table.add_section()
        table.add_row(str(sum(counts.values())), "total", style="bold")
    return table


def print_outcome(outcome: DeletionOutcome) -> None:
    eni_id = escape(outcome.eni_id)
    if not outcome.succeeded:
        console.print(f"[red]Failed to delete {eni_id}:[/red] {escape(str(outcome.error))}", soft_wrap=True)
    elif outcome.dry_run:
        console.print(f"[yellow]Would delete {eni_id}[/yellow]", soft_wrap=True)
    else:
        console.print(f"[green]Deleted {eni_id}[/green]", soft_wrap=True)


def print_skipped(error: Exception) -> None:
    console.print(f"[red]Skipped available ENI:[/red] {escape(str(error))}", soft_wrap=True)


def run(delete: bool = False,
        profile: Optional[str] = None,
        region: Optional[str] = None,
        dry_run: bool = False) -> None:
    """
    Lists and summarizes ENIs, then deletes the available ones if asked.

    Raises:
        ApiError: If listing fails
        ConfigurationError: If no region or credentials could be resolved
        DeletionFailedError: If any available ENI could not be deleted
    """
    session = create_session(profile=profile, region=region)
    ec2 = create_ec2_client(session)

    interfaces = list_network_interfaces(ec2)
    logger.debug("Listed %d network interfaces", len(interfaces))
    console.print(build_status_table(status_counts(interfaces)))

    if delete:
        result = cleanup_enis(ec2, interfaces, dry_run=dry_run,
                              on_outcome=print_outcome, on_skipped=print_skipped)
        if not result.success:
            raise DeletionFailedError(result)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-d", "--delete", is_flag=True, help='Delete "available" ENIs.')
@click.option("-p", "--profile", default=None,
              help="AWS profile to use. Overrides the standard AWS profile handling.")
@click.option("-r", "--region", default=None,
              help="AWS region to target. Overrides the standard AWS region handling.")
@click.option("--dry-run", is_flag=True,
              help="With --delete, only check that the deletes would be permitted.")
@click.version_option(__version__, prog_name="eni-status")
def main(delete: bool, profile: Optional[str], region: Optional[str], dry_run: bool):
    """Summarize the status of every AWS Elastic Network Interface (ENI).

    Optionally, delete every ENI with a status of "available".

    Set the ENI_STATUS_LOG environment variable to adjust logging,
    for example ENI_STATUS_LOG=debug eni-status
    """
    setup_logging()
    if dry_run and not delete:
        logger.warning("--dry-run has no effect without --delete")
    try:
        run(delete=delete, profile=profile, region=region, dry_run=dry_run)
    except EniStatusError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}", soft_wrap=True)
        if e.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape(e.hint)}")
        else:
            console.print(f"[yellow]Hint:[/yellow] rerun with {LOG_ENV_VAR}=debug for request details")
        sys.exit(EXIT_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation interrupted by user.[/yellow]")
        sys.exit(EXIT_INTERRUPTED)
