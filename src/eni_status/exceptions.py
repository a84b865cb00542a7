"""
Exception hierarchy for eni-status.

Raw botocore exceptions are caught where the AWS call is made and
re-raised as one of these, so the CLI can render them without a traceback.
"""

from typing import Optional

from botocore.exceptions import ClientError


class EniStatusError(Exception):
    """Base exception for all eni-status errors."""

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.hint = hint


class ApiError(EniStatusError):
    """A DescribeNetworkInterfaces or DeleteNetworkInterface call failed."""

    def __init__(self, operation: str, cause: Exception, resource_id: Optional[str] = None):
        target = f" for {resource_id}" if resource_id else ""
        super().__init__(f"{operation} failed{target}: {cause}")
        self.operation = operation
        self.cause = cause
        self.resource_id = resource_id

    @property
    def code(self) -> Optional[str]:
        """The AWS error code, when the failure came back from the service."""
        if isinstance(self.cause, ClientError):
            return self.cause.response.get("Error", {}).get("Code")
        return None


class MissingIdentifierError(EniStatusError):
    """An available ENI came back without a NetworkInterfaceId."""

    def __init__(self, message: str = "available ENI has no network_interface_id"):
        super().__init__(message)


class ConfigurationError(EniStatusError):
    """No AWS region or credentials could be resolved."""


class DeletionFailedError(EniStatusError):
    """At least one available ENI could not be deleted."""

    def __init__(self, result):
        parts = []
        if result.failure_count:
            parts.append(f"{result.failure_count} delete(s) failed")
        if result.skipped_count:
            parts.append(f"{result.skipped_count} ENI(s) had no id")
        summary = ", ".join(parts) or "deletion failed"
        super().__init__(f"deleting available ENIs: {summary}; last error: {result.last_error}")
        self.result = result
