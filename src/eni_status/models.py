"""
Data types shared by the ENI listing, aggregation and cleanup modules.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


class InterfaceStatus(Enum):
    """Status of a network interface as used for aggregation."""

    ASSOCIATED = "associated"
    ATTACHING = "attaching"
    AVAILABLE = "available"
    DETACHING = "detaching"
    IN_USE = "in-use"
    UNKNOWN = "unknown"
    NONE = "none"

    @classmethod
    def classify(cls, raw: Optional[str]) -> "InterfaceStatus":
        """
        Map a raw API status onto the closed set of known statuses.

        Args:
            raw: The status string returned by EC2, or None when absent

        Returns:
            NONE for a missing status, UNKNOWN for any value EC2 may add
            later, otherwise the matching member
        """
        if raw is None:
            return cls.NONE
        for status in _KNOWN_STATUSES:
            if status.value == raw:
                return status
        return cls.UNKNOWN


_KNOWN_STATUSES = (
    InterfaceStatus.ASSOCIATED,
    InterfaceStatus.ATTACHING,
    InterfaceStatus.AVAILABLE,
    InterfaceStatus.DETACHING,
    InterfaceStatus.IN_USE,
)


@dataclass(frozen=True)
class NetworkInterface:
    """An Elastic Network Interface as returned by DescribeNetworkInterfaces."""

    id: Optional[str] = None
    status: Optional[str] = None
    vpc_id: Optional[str] = None
    subnet_id: Optional[str] = None
    availability_zone: Optional[str] = None
    description: Optional[str] = None
    interface_type: Optional[str] = None

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "NetworkInterface":
        return cls(
            id=item.get("NetworkInterfaceId"),
            status=item.get("Status"),
            vpc_id=item.get("VpcId"),
            subnet_id=item.get("SubnetId"),
            availability_zone=item.get("AvailabilityZone"),
            description=item.get("Description"),
            interface_type=item.get("InterfaceType"),
        )

    @property
    def status_key(self) -> InterfaceStatus:
        return InterfaceStatus.classify(self.status)

    def describe(self) -> str:
        """One-line summary for logs."""
        return (f"{self.id} ({self.interface_type or 'interface'}, vpc={self.vpc_id}, "
                f"subnet={self.subnet_id}, az={self.availability_zone}): {self.description or ''}")


class DeletionOutcome:
    """Result of one delete attempt."""

    def __init__(self, eni_id: str, error: Optional[Exception] = None, dry_run: bool = False):
        self.eni_id = eni_id
        self.error = error
        self.dry_run = dry_run

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def __repr__(self) -> str:
        state = "ok" if self.succeeded else f"error={self.error!r}"
        return f"DeletionOutcome({self.eni_id!r}, {state})"


class CleanupResult:
    """Results of the cleanup operation."""

    def __init__(self,
                 outcomes: Optional[List[DeletionOutcome]] = None,
                 errors: Optional[List[Exception]] = None):
        self.outcomes = outcomes or []
        # Filtering errors raised before any delete was issued
        self.errors = errors or []

    @property
    def cleaned_enis(self) -> List[str]:
        return [o.eni_id for o in self.outcomes if o.succeeded]

    @property
    def failed_enis(self) -> List[str]:
        return [o.eni_id for o in self.outcomes if not o.succeeded]

    @property
    def success_count(self) -> int:
        return len(self.cleaned_enis)

    @property
    def failure_count(self) -> int:
        return len(self.failed_enis)

    @property
    def skipped_count(self) -> int:
        return len(self.errors)

    @property
    def success(self) -> bool:
        return self.failure_count == 0 and self.skipped_count == 0

    @property
    def last_error(self) -> Optional[Exception]:
        """The last error observed, delete failures taking precedence."""
        for outcome in reversed(self.outcomes):
            if outcome.error is not None:
                return outcome.error
        if self.errors:
            return self.errors[-1]
        return None
