"""
Module for resolving the AWS session and EC2 client.
"""

import logging
from typing import Optional

import boto3
from botocore.exceptions import NoRegionError, ProfileNotFound

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class RegionConfig:
    """Profile and region a run was resolved against."""

    def __init__(self, region: Optional[str], profile: Optional[str] = None):
        self.region = region
        self.profile = profile

    def __repr__(self) -> str:
        return f"RegionConfig(region={self.region!r}, profile={self.profile!r})"


def create_session(profile: Optional[str] = None,
                   region: Optional[str] = None) -> boto3.Session:
    """
    Creates a boto3 session using the standard credential and region chain.

    Args:
        profile: Optional AWS profile, overrides AWS_PROFILE and the default profile
        region: Optional AWS region, overrides AWS_REGION and the profile's region

    Returns:
        The configured session

    Raises:
        ConfigurationError: If the named profile does not exist
    """
    try:
        session = boto3.Session(profile_name=profile, region_name=region)
    except ProfileNotFound as e:
        raise ConfigurationError(str(e), hint="Check the profile names in ~/.aws/config") from e
    logger.debug("Resolved %r", region_config(session))
    return session


def region_config(session: boto3.Session) -> RegionConfig:
    return RegionConfig(region=session.region_name, profile=session.profile_name)


def create_ec2_client(session: boto3.Session):
    """
    Creates the EC2 client for the session's region.

    Raises:
        ConfigurationError: If no region could be resolved
    """
    try:
        return session.client("ec2")
    except NoRegionError as e:
        raise ConfigurationError(
            "AWS region not configured",
            hint="Pass --region, set AWS_REGION, or run 'aws configure set region <name>'",
        ) from e
