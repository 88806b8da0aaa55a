import logging
from typing import TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from mes_admin.errors import DuplicateResourceError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


def commit_and_refresh(db: Session, instance: ModelT, *, duplicate_message: str) -> ModelT:
    """Commit the pending unit of work and reload ``instance``.

    The live-row unique indexes are the final arbiter when two requests race
    past the service-level duplicate checks; such a rejection is rolled back
    and surfaced as a DuplicateResourceError.
    """
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Write rejected by unique index: %s", exc.orig)
        raise DuplicateResourceError(duplicate_message) from exc
    db.refresh(instance)
    return instance


def paginate(query: Query, *order_by, page: int, limit: int) -> tuple[list, int]:
    """Return one page of ``query`` together with the unpaginated total."""
    total = query.order_by(None).count()
    skip = (page - 1) * limit
    items = query.order_by(*order_by).offset(skip).limit(limit).all()
    return items, total
