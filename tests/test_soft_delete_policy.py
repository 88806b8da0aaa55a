from datetime import datetime, timezone

import pytest

from mes_admin.domain.soft_delete import SoftDeletePolicy, total_pages
from mes_admin.errors import AlreadyDeletedError, ErrorKind, NotDeletedError

policy = SoftDeletePolicy(resource="Application")
DELETED_AT = datetime(2026, 1, 1, tzinfo=timezone.utc)


def test_live_record_is_deletable():
    policy.ensure_deletable(deleted_at=None)


def test_deleted_record_is_not_deletable():
    with pytest.raises(AlreadyDeletedError) as exc_info:
        policy.ensure_deletable(deleted_at=DELETED_AT)
    assert str(exc_info.value) == "Application is already deleted"
    assert exc_info.value.kind is ErrorKind.ALREADY_DELETED


def test_deleted_record_is_restorable():
    policy.ensure_restorable(deleted_at=DELETED_AT)


def test_live_record_is_not_restorable():
    with pytest.raises(NotDeletedError) as exc_info:
        policy.ensure_restorable(deleted_at=None)
    assert str(exc_info.value) == "Application is not deleted"


@pytest.mark.parametrize(
    "total,limit,expected",
    [(0, 10, 0), (1, 10, 1), (10, 10, 1), (25, 10, 3), (100, 100, 1), (101, 100, 2)],
)
def test_total_pages(total: int, limit: int, expected: int):
    assert total_pages(total, limit) == expected
