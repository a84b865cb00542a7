"""
Module for listing the ENIs in an AWS account and summarizing them by status.
"""

import logging
from collections import Counter
from typing import Dict, Iterable, List

from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from .exceptions import ApiError, ConfigurationError
from .models import InterfaceStatus, NetworkInterface

logger = logging.getLogger(__name__)

DESCRIBE_OPERATION = "DescribeNetworkInterfaces"


def list_network_interfaces(ec2) -> List[NetworkInterface]:
    """
    Lists every network interface visible to the client's account and region.
    Pages are requested one after another until a response has no NextToken.

    Args:
        ec2: A boto3 EC2 client

    Returns:
        All interfaces, in no particular order

    Raises:
        ApiError: If any page request fails
        ConfigurationError: If no credentials could be found
    """
    interfaces = []
    token = None
    while True:
        kwargs = {}
        if token:
            kwargs["NextToken"] = token
        try:
            resp = ec2.describe_network_interfaces(**kwargs)
        except NoCredentialsError as e:
            raise ConfigurationError(
                "AWS credentials not found",
                hint="Pass --profile, set AWS_PROFILE, or run 'aws configure'",
            ) from e
        except (ClientError, BotoCoreError) as e:
            raise ApiError(DESCRIBE_OPERATION, e) from e
        page = resp.get("NetworkInterfaces", [])
        logger.debug("%s returned %d interfaces", DESCRIBE_OPERATION, len(page))
        interfaces.extend(NetworkInterface.from_api(item) for item in page)
        token = resp.get("NextToken")
        if not token:
            break
    return interfaces


def status_counts(interfaces: Iterable[NetworkInterface]) -> Dict[InterfaceStatus, int]:
    """
    Counts interfaces per status. Statuses with no interfaces are left out.
    """
    return dict(Counter(eni.status_key for eni in interfaces))
