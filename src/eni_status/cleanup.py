"""
Module for deleting the available ENIs in an AWS account.
"""

import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import ApiError, MissingIdentifierError
from .models import CleanupResult, DeletionOutcome, InterfaceStatus, NetworkInterface

logger = logging.getLogger(__name__)

DELETE_OPERATION = "DeleteNetworkInterface"
DRY_RUN_OK = "DryRunOperation"

OutcomeCallback = Callable[[DeletionOutcome], None]
SkipCallback = Callable[[Exception], None]


def select_available(interfaces: Iterable[NetworkInterface]):
    """
    Splits the available ENIs into deletable ids and filtering errors.

    Returns:
        A tuple of (ids to delete, MissingIdentifierError per ENI without an id)
    """
    ids: List[str] = []
    errors: List[Exception] = []
    for eni in interfaces:
        if eni.status_key is not InterfaceStatus.AVAILABLE:
            continue
        if not eni.id:
            logger.error("Ignoring available ENI which has no network_interface_id.")
            errors.append(MissingIdentifierError())
            continue
        logger.debug("Delete candidate %s", eni.describe())
        ids.append(eni.id)
    return ids, errors


async def _delete_one(pool: ThreadPoolExecutor, ec2, eni_id: str, dry_run: bool,
                      on_outcome: Optional[OutcomeCallback]) -> DeletionOutcome:
    kwargs = {"NetworkInterfaceId": eni_id}
    if dry_run:
        kwargs["DryRun"] = True
    loop = asyncio.get_running_loop()
    try:
        await loop.run_in_executor(pool, functools.partial(ec2.delete_network_interface, **kwargs))
        outcome = DeletionOutcome(eni_id, dry_run=dry_run)
    except (ClientError, BotoCoreError) as e:
        error = ApiError(DELETE_OPERATION, e, resource_id=eni_id)
        if dry_run and error.code == DRY_RUN_OK:
            outcome = DeletionOutcome(eni_id, dry_run=True)
        else:
            logger.error("Delete failed for %s: %s", eni_id, e)
            outcome = DeletionOutcome(eni_id, error=error, dry_run=dry_run)
    if on_outcome is not None:
        on_outcome(outcome)
    return outcome


async def delete_available(ec2,
                           interfaces: Iterable[NetworkInterface],
                           dry_run: bool = False,
                           on_outcome: Optional[OutcomeCallback] = None,
                           on_skipped: Optional[SkipCallback] = None) -> CleanupResult:
    """
    Attempts to delete every available ENI concurrently.

    Every delete is issued at once, each on its own worker thread, and all
    of them are awaited, so one failure never stops the others. A failed
    delete is recorded in the result rather than raised.

    Args:
        ec2: A boto3 EC2 client
        interfaces: The full interface list; only available ones are touched
        dry_run: Send DryRun=True and treat DryRunOperation as success
        on_outcome: Called with each outcome as soon as its delete finishes
        on_skipped: Called with each MissingIdentifierError before any delete is sent

    Returns:
        Results of the cleanup operation
    """
    ids, errors = select_available(interfaces)
    if on_skipped is not None:
        for error in errors:
            on_skipped(error)
    if not ids:
        return CleanupResult(outcomes=[], errors=errors)

    logger.debug("Deleting %d available ENIs", len(ids))
    # One thread per delete: the default executor would cap the fan-out
    with ThreadPoolExecutor(max_workers=len(ids), thread_name_prefix="eni-delete") as pool:
        outcomes = await asyncio.gather(
            *(_delete_one(pool, ec2, eni_id, dry_run, on_outcome) for eni_id in ids)
        )
    return CleanupResult(outcomes=list(outcomes), errors=errors)


def cleanup_enis(ec2,
                 interfaces: Iterable[NetworkInterface],
                 dry_run: bool = False,
                 on_outcome: Optional[OutcomeCallback] = None,
                 on_skipped: Optional[SkipCallback] = None) -> CleanupResult:
    """Runs delete_available on a fresh event loop."""
    return asyncio.run(delete_available(
        ec2, interfaces, dry_run=dry_run, on_outcome=on_outcome, on_skipped=on_skipped,
    ))
