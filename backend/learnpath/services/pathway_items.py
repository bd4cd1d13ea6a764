"""Pathway item ordering and mutation engine.

A pathway's items are an ordered list of ``{type, content, completed}``
entries. New items go to the head; indices are zero based. The list
transforms below are pure and return a new list, leaving the input
untouched when they raise ``OutOfRange``.
"""

from typing import Any

from sqlalchemy.orm import Session

from learnpath.db import transaction
from learnpath.errors import NotFound, OutOfRange, ValidationError
from learnpath.models.enums import Action, ContentType
from learnpath.repositories import content_repositories, pathway_repository
from learnpath.services.access_policy import AccessPolicy, access_policy
from learnpath.services.containment import ContainmentManager, containment_manager
from learnpath.services.identity import Identity
from learnpath.services.locks import lock_key, resource_locks
from learnpath.utils import get_logger

logger = get_logger(__name__)

Item = dict[str, Any]


# ==================== Pure list transforms ====================


def check_index(items: list[Item], index: int) -> None:
    if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < len(items):
        raise OutOfRange(f"Index {index} out of range for {len(items)} items")


def insert_head(items: list[Item], item: Item) -> list[Item]:
    return [item, *items]


def toggle_at(items: list[Item], index: int) -> list[Item]:
    check_index(items, index)
    toggled = dict(items[index], completed=not items[index].get("completed", False))
    return [*items[:index], toggled, *items[index + 1 :]]


def move(items: list[Item], from_index: int, to_index: int) -> list[Item]:
    """Remove the item at ``from_index`` and reinsert it at ``to_index``.

    ``to_index`` is interpreted against the list after removal, which has
    the same valid range as the original.
    """
    check_index(items, from_index)
    check_index(items, to_index)
    result = list(items)
    item = result.pop(from_index)
    result.insert(to_index, item)
    return result


def remove_at(items: list[Item], index: int) -> list[Item]:
    check_index(items, index)
    return [*items[:index], *items[index + 1 :]]


def parse_content_type(tag: str) -> ContentType:
    try:
        return ContentType(tag)
    except ValueError as e:
        allowed = ", ".join(t.value for t in ContentType)
        raise ValidationError(f"Invalid item type '{tag}', expected one of: {allowed}") from e


# ==================== Persistence ====================


class PathwayItemService:
    """Applies item transforms to stored pathways under write access."""

    def __init__(
        self,
        policy: AccessPolicy = access_policy,
        containment: ContainmentManager = containment_manager,
    ):
        self.policy = policy
        self.containment = containment

    def add_item(self, db: Session, identity: Identity | None, pathway_id: str, type: str, content: str) -> list[Item]:
        """Insert a new, uncompleted item at the head of the pathway."""
        content_type = parse_content_type(type)
        if not content:
            raise ValidationError("Item content id is required")
        item = {"type": content_type.value, "content": content, "completed": False}
        items = self._apply(
            db,
            identity,
            pathway_id,
            lambda current: insert_head(current, item),
            check=lambda: self._require_content(db, content_type, content),
        )
        logger.info(f"Added {content_type.value} {content} to pathway {pathway_id}")
        return items

    def toggle_completed(self, db: Session, identity: Identity | None, pathway_id: str, index: int) -> list[Item]:
        items = self._apply(db, identity, pathway_id, lambda current: toggle_at(current, index))
        logger.info(f"Toggled item {index} of pathway {pathway_id}")
        return items

    def reorder_item(
        self,
        db: Session,
        identity: Identity | None,
        pathway_id: str,
        from_index: int,
        to_index: int,
    ) -> list[Item]:
        items = self._apply(db, identity, pathway_id, lambda current: move(current, from_index, to_index))
        logger.info(f"Moved item {from_index} to {to_index} in pathway {pathway_id}")
        return items

    def remove_item(self, db: Session, identity: Identity | None, pathway_id: str, index: int) -> list[Item]:
        items = self._apply(db, identity, pathway_id, lambda current: remove_at(current, index))
        logger.info(f"Removed item {index} from pathway {pathway_id}")
        return items

    def _apply(self, db: Session, identity: Identity | None, pathway_id: str, transform, check=None) -> list[Item]:
        with resource_locks.hold(lock_key("pathway", pathway_id)), transaction(db):
            pathway = self.containment.load_pathway(db, pathway_id)
            self.policy.require(db, identity, pathway, Action.write)
            if check is not None:
                check()
            items = transform(list(pathway.items or []))
            pathway_repository.update(db, pathway, {"items": items})
        return list(pathway.items)

    def _require_content(self, db: Session, content_type: ContentType, content_id: str) -> None:
        if not content_repositories[content_type].exists(db, content_id):
            raise NotFound(f"{content_type.value} not found")

    def populate(self, db: Session, items: list[Item]) -> list[Item]:
        """Items with their content records attached under ``content``.

        Items whose content no longer resolves keep the bare id.
        """
        populated = []
        for item in items:
            repo = content_repositories.get(ContentType(item["type"]))
            record = repo.get_by_id(db, item["content"]) if repo else None
            entry = dict(item)
            if record is not None:
                entry["content"] = {c.name: getattr(record, c.name) for c in record.__table__.columns}
            populated.append(entry)
        return populated


pathway_item_service = PathwayItemService()
