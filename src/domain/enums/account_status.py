"""Account lifecycle status.

Accounts are never hard-deleted. Deletion and suspension are status
transitions so the audit trail keeps pointing at a real row.
"""

from enum import Enum


class AccountStatus(str, Enum):
    """Account lifecycle status."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    DELETED = "deleted"
