from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime

from mes_admin.errors import AlreadyDeletedError, NotDeletedError


@dataclass(frozen=True, slots=True)
class SoftDeletePolicy:
    """Defines the soft-delete lifecycle shared by every catalog entity.

    Semantics (intentionally centralized):
    - A record is live when deleted_at is None, soft-deleted otherwise.
    - Delete is only allowed from the live state.
    - Restore is only allowed from the soft-deleted state.
    - Only live records take part in uniqueness checks.

    ``resource`` is the human-readable name used in error messages.
    """

    resource: str

    @staticmethod
    def is_deleted(deleted_at: datetime | None) -> bool:
        return deleted_at is not None

    def ensure_deletable(self, *, deleted_at: datetime | None) -> None:
        if self.is_deleted(deleted_at):
            raise AlreadyDeletedError(f"{self.resource} is already deleted")

    def ensure_restorable(self, *, deleted_at: datetime | None) -> None:
        if not self.is_deleted(deleted_at):
            raise NotDeletedError(f"{self.resource} is not deleted")

    @staticmethod
    def sqlalchemy_live_predicate(*, deleted_col):
        """Build a SQLAlchemy predicate selecting live rows.

        Kept here so repositories can translate the policy into SQL without
        redefining what "live" means.
        """
        return deleted_col.is_(None)

    @staticmethod
    def sqlalchemy_deleted_predicate(*, deleted_col):
        return deleted_col.isnot(None)


def total_pages(total: int, limit: int) -> int:
    """Number of pages needed to show ``total`` items, ``limit`` per page."""
    return math.ceil(total / limit) if limit else 0
