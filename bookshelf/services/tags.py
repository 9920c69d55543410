"""
Tags Service

Owner-scoped CRUD for tags. Every lookup carries `Tag.user_id == user_id`
in its WHERE clause, so another user's tag is indistinguishable from a
missing one (NotFoundError).

Name uniqueness is per owner: checked up front for a clear error, and the
UNIQUE(user_id, name) constraint turns a concurrent duplicate into the same
ConflictError.
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookshelf.database import execute, query_all, query_one
from bookshelf.exceptions import ConflictError, NotFoundError
from bookshelf.models import DEFAULT_TAG_COLOR, Tag
from bookshelf.schemas import TagCreate, TagResponse, TagUpdate

logger = logging.getLogger(__name__)


class TagService:
    """Tag operations for one request's database session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def list_tags(self, user_id: int) -> list[TagResponse]:
        """Return the user's tags ordered by name."""
        stmt = select(Tag).where(Tag.user_id == user_id).order_by(Tag.name, Tag.id)
        return [TagResponse.model_validate(tag) for tag in query_all(self.db, stmt)]

    def create(self, user_id: int, data: TagCreate) -> TagResponse:
        """
        Create a tag for the user.

        Raises:
            ConflictError: If the user already has a tag with this name
        """
        if self._name_taken(user_id, data.name):
            raise ConflictError("Tag already exists")

        tag = Tag(
            user_id=user_id,
            name=data.name,
            color=data.color or DEFAULT_TAG_COLOR,
        )
        self.db.add(tag)
        self._commit("Tag already exists")
        self.db.refresh(tag)

        logger.info(f"Tag {tag.id} created for user {user_id}")
        return TagResponse.model_validate(tag)

    def update(self, user_id: int, tag_id: int, data: TagUpdate) -> TagResponse:
        """
        Rename and/or recolour a tag.

        Raises:
            NotFoundError: If the tag does not exist or is not the user's
            ConflictError: If the new name belongs to another of the user's tags
        """
        tag = self._get_owned(user_id, tag_id)
        changes = data.model_dump(exclude_unset=True)

        if "name" in changes and self._name_taken(user_id, changes["name"], exclude_id=tag_id):
            raise ConflictError("Tag name already exists")

        for field, value in changes.items():
            setattr(tag, field, value)

        self._commit("Tag name already exists")
        self.db.refresh(tag)

        logger.info(f"Tag {tag_id} updated for user {user_id}")
        return TagResponse.model_validate(tag)

    def delete(self, user_id: int, tag_id: int) -> None:
        """
        Delete a tag; its book links go with it (ON DELETE CASCADE).

        Raises:
            NotFoundError: If the tag does not exist or is not the user's
        """
        result = execute(
            self.db,
            delete(Tag).where(Tag.id == tag_id, Tag.user_id == user_id),
        )
        if result.rows_affected == 0:
            self.db.rollback()
            raise NotFoundError("Tag not found")

        self.db.commit()
        logger.info(f"Tag {tag_id} deleted for user {user_id}")

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------
    def _get_owned(self, user_id: int, tag_id: int) -> Tag:
        stmt = select(Tag).where(Tag.id == tag_id, Tag.user_id == user_id)
        tag = query_one(self.db, stmt)
        if tag is None:
            raise NotFoundError("Tag not found")
        return tag

    def _name_taken(self, user_id: int, name: str, exclude_id: int | None = None) -> bool:
        stmt = select(Tag.id).where(Tag.user_id == user_id, Tag.name == name)
        if exclude_id is not None:
            stmt = stmt.where(Tag.id != exclude_id)
        return query_one(self.db, stmt) is not None

    def _commit(self, conflict_detail: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Tag uniqueness race: {e.orig}")
            raise ConflictError(conflict_detail) from e
