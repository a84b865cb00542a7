"""
Module for running ENI cleanup during Pulumi resource destruction.
"""

import shlex
import sys
from typing import List, Optional

import pulumi
import pulumi_command as command

DEFAULT_REGIONS = ["us-east-1"]


def default_regions() -> List[str]:
    """Regions from the stack's `regions` config, else aws:region, else us-east-1."""
    regions = pulumi.Config().get_object("regions")
    if regions:
        return list(regions)
    aws_region = pulumi.Config("aws").get("region")
    if aws_region:
        return [aws_region]
    return list(DEFAULT_REGIONS)


def build_cleanup_command(region: str,
                          profile: Optional[str] = None,
                          dry_run: bool = False,
                          executable: Optional[str] = None) -> str:
    """
    Renders the eni-status invocation that deletes available ENIs in one region.

    Args:
        region: AWS region to clean
        profile: Optional AWS profile to use
        dry_run: Only check that the deletes would be permitted
        executable: Python interpreter with eni-status installed, defaults to this one

    Returns:
        A shell-quoted command line
    """
    argv = [executable or sys.executable, "-m", "eni_status", "--delete", "--region", region]
    if profile:
        argv += ["--profile", profile]
    if dry_run:
        argv.append("--dry-run")
    return " ".join(shlex.quote(arg) for arg in argv)


def _generate_cleanup_script(regions: List[str],
                             profile: Optional[str] = None,
                             dry_run: bool = False,
                             executable: Optional[str] = None) -> str:
    """
    Generates a bash script that runs the cleanup for each region in turn.
    A failing region does not stop the others; the script exits 1 if any failed.
    """
    lines = [
        "#!/bin/bash",
        "failed=0",
        f"echo {shlex.quote('Starting ENI cleanup for regions: ' + ', '.join(regions))}",
    ]
    for region in regions:
        lines += [
            f"echo {shlex.quote('Scanning region: ' + region + ' for available ENIs')}",
            f"if ! {build_cleanup_command(region, profile, dry_run, executable)}; then",
            f"    echo {shlex.quote('ENI cleanup failed in ' + region)} >&2",
            "    failed=1",
            "fi",
        ]
    lines += [
        'echo "ENI cleanup completed"',
        "exit $failed",
    ]
    return "\n".join(lines) + "\n"


def register_eni_cleanup_handler(
    name: str,
    resource: pulumi.Resource,
    regions: List[str],
    profile: Optional[str] = None,
    log_output: bool = True,
    dry_run: bool = False,
    trigger_on_replace: bool = True
) -> command.local.Command:
    """
    Registers an ENI cleanup handler that runs during resource destruction.
    The handler is a local command, parented to the resource, whose delete
    step runs eni-status --delete for every region.

    Args:
        name: Name prefix for the handler resource
        resource: The Pulumi resource to attach the handler to
        regions: List of AWS regions to clean
        profile: Optional AWS profile to use
        log_output: Whether the command's output appears in the Pulumi log
        dry_run: Whether to run in dry-run mode without making changes
        trigger_on_replace: Re-run the cleanup when the resource is replaced.
            Must be False when the resource is a component that has not
            finished registering, such as the handler's own parent component

    Returns:
        The command resource that will perform the cleanup
    """
    cleanup_script = _generate_cleanup_script(regions, profile=profile, dry_run=dry_run)

    return command.local.Command(f"{name}-eni-cleanup",
        create="echo 'ENI cleanup handler attached'",
        delete=cleanup_script,
        interpreter=["/bin/bash", "-c"],
        logging="stdoutAndStderr" if log_output else "none",
        triggers=[resource.urn] if trigger_on_replace else None,
        opts=pulumi.ResourceOptions(
            parent=resource,
            delete_before_replace=True,
        )
    )


class ENICleanupOptions:
    """Options for the ENI cleanup handler."""

    def __init__(self,
                 regions: Optional[List[str]] = None,
                 profile: Optional[str] = None,
                 disable_cleanup: bool = False,
                 log_output: bool = True,
                 dry_run: bool = False):
        self.regions = regions
        self.profile = profile
        self.disable_cleanup = disable_cleanup
        self.log_output = log_output
        self.dry_run = dry_run


def attach_eni_cleanup_handler(name: str,
                               resource: pulumi.Resource,
                               options: Optional[ENICleanupOptions] = None,
                               trigger_on_replace: bool = True) -> Optional[command.local.Command]:
    """
    Attaches an ENI cleanup handler to an existing resource.
    Available ENIs are deleted when the resource is destroyed.

    Returns:
        The handler, or None when cleanup is disabled
    """
    if options is None:
        options = ENICleanupOptions()
    if options.disable_cleanup:
        return None
    return register_eni_cleanup_handler(
        name,
        resource,
        options.regions or default_regions(),
        profile=options.profile,
        log_output=options.log_output,
        dry_run=options.dry_run,
        trigger_on_replace=trigger_on_replace,
    )


class ENICleanupComponent(pulumi.ComponentResource):
    """
    Parent component whose destruction triggers ENI cleanup.
    Resources that leave ENIs behind should be created as its children.
    """

    def __init__(self, name: str,
                 args: Optional[ENICleanupOptions] = None,
                 opts: Optional[pulumi.ResourceOptions] = None):
        super().__init__('eni-status:cleanup:ENICleanupComponent', name, None, opts)

        # A trigger on our own URN would make the child depend on its parent
        self.cleanup_command = attach_eni_cleanup_handler(name, self, args, trigger_on_replace=False)

        self.register_outputs({})
