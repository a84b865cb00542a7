"""
Process-wide logging setup for the eni-status CLI.
"""

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_ENV_VAR = "ENI_STATUS_LOG"
DEFAULT_LEVEL = "WARNING"


def resolve_level(value: Optional[str]) -> int:
    """Turns a level name such as 'debug' into a logging level, falling back to WARNING."""
    if not value:
        return logging.WARNING
    level = logging.getLevelName(value.strip().upper())
    if isinstance(level, int):
        return level
    return logging.WARNING


def setup_logging(level: Optional[str] = None) -> int:
    """
    Configures the root logger once at process start.

    Args:
        level: A level name; defaults to the ENI_STATUS_LOG environment variable

    Returns:
        The numeric level applied
    """
    if level is None:
        level = os.environ.get(LOG_ENV_VAR, DEFAULT_LEVEL)
    numeric = resolve_level(level)
    logging.basicConfig(
        level=numeric,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # botocore only logs request/response traces when asked for DEBUG
    botocore_level = logging.DEBUG if numeric <= logging.DEBUG else logging.WARNING
    logging.getLogger("botocore").setLevel(botocore_level)
    logging.getLogger("boto3").setLevel(botocore_level)
    return numeric
