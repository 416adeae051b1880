"""Tag registry: (name, color) -> Tag, created on first use.

The unique constraint on (name, color) is the authority. Inserts are issued as
"insert, ignore on conflict" and the row is then read back, so two writers
resolving the same new pair both end up with the single stored row.
"""

import logging
from typing import Iterable, Optional

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models import Tag, generate_uuid
from ..schemas import TagIn

logger = logging.getLogger("recipeshare.tags")

TAG_SEARCH_LIMIT = 50


def _find(db: Session, name: str, color: str) -> Optional[Tag]:
    return db.query(Tag).filter(Tag.name == name, Tag.color == color).first()


def _insert_ignoring_conflict(db: Session, name: str, color: str) -> None:
    values = {"id": generate_uuid(), "name": name, "color": color}
    dialect = db.get_bind().dialect.name

    if dialect == "postgresql":
        stmt = pg_insert(Tag).values(**values).on_conflict_do_nothing(
            index_elements=["name", "color"]
        )
        db.execute(stmt)
    elif dialect == "sqlite":
        stmt = sqlite_insert(Tag).values(**values).on_conflict_do_nothing(
            index_elements=["name", "color"]
        )
        db.execute(stmt)
    else:
        try:
            with db.begin_nested():
                db.add(Tag(**values))
        except IntegrityError:
            logger.debug(f"Tag ({name}, {color}) created concurrently; reusing it")


def resolve_tag(db: Session, name: str, color: str) -> Tag:
    """Return the Tag for (name, color), creating it if needed. Idempotent."""
    tag = _find(db, name, color)
    if tag is not None:
        return tag

    _insert_ignoring_conflict(db, name, color)
    tag = _find(db, name, color)
    logger.info(f"Resolved new tag ({name}, {color}) -> {tag.id}")
    return tag


def resolve_tags(db: Session, inputs: Iterable[TagIn]) -> list[Tag]:
    """Resolve every input once; repeated pairs collapse to one Tag."""
    tags: list[Tag] = []
    seen: set[tuple[str, str]] = set()
    for t in inputs:
        key = (t.name, t.color)
        if key in seen:
            continue
        seen.add(key)
        tags.append(resolve_tag(db, t.name, t.color))
    return tags


def search_tags(db: Session, q: str = "", limit: int = TAG_SEARCH_LIMIT) -> list[Tag]:
    """Tags whose name contains ``q`` (case-insensitive), for the tag picker."""
    query = db.query(Tag)
    q = (q or "").strip()
    if q:
        query = query.filter(Tag.name.icontains(q, autoescape=True))
    return query.order_by(Tag.name, Tag.color).limit(limit).all()
