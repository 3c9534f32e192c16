"""Structural operations on the component tree.

All functions work on the root sequence of a page (``PageDocument.components``)
and address nodes by id; paths are never cached because they change whenever
siblings are reordered.

Every operation is total: unknown ids, parents that cannot hold children and
out-of-range indices turn into logged no-ops instead of exceptions. Indices
are clamped to ``[0, len(siblings)]`` and ``None`` means "append".
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Set, Tuple

from .ids import new_id
from .model import ComponentInstance, EventBinding

logger = logging.getLogger(__name__)

Roots = List[ComponentInstance]

DROP_SIDES = ("before", "after")


@dataclass(frozen=True)
class Location:
    """Where an instance sits: its parent (None for the page root) and index."""

    parent: Optional[ComponentInstance]
    siblings: List[ComponentInstance]
    index: int

    @property
    def parent_id(self) -> Optional[str]:
        return self.parent.id if self.parent is not None else None

    @property
    def node(self) -> ComponentInstance:
        return self.siblings[self.index]


@dataclass(frozen=True)
class DropIntent:
    """High-level drop target reported by the drag-and-drop layer.

    Exactly one of ``container_id`` / ``sibling_id`` is normally set; neither
    means "the canvas root". ``side`` only matters for sibling drops.
    """

    container_id: Optional[str] = None
    sibling_id: Optional[str] = None
    side: str = "after"


def iter_instances(roots: Iterable[ComponentInstance]) -> Iterator[ComponentInstance]:
    for root in roots:
        yield from root.walk()


def find(roots: Roots, instance_id: str) -> Optional[ComponentInstance]:
    """Depth-first, pre-order lookup. O(size of tree)."""
    for node in iter_instances(roots):
        if node.id == instance_id:
            return node
    return None


def find_location(roots: Roots, instance_id: str) -> Optional[Location]:
    return _find_location(roots, None, instance_id)


def _find_location(
    siblings: List[ComponentInstance], parent: Optional[ComponentInstance], instance_id: str
) -> Optional[Location]:
    for index, node in enumerate(siblings):
        if node.id == instance_id:
            return Location(parent=parent, siblings=siblings, index=index)
        if node.children:
            found = _find_location(node.children, node, instance_id)
            if found is not None:
                return found
    return None


def find_path(roots: Roots, instance_id: str) -> List[str]:
    """Ids from the outermost ancestor down to ``instance_id``; [] if absent."""
    path: List[str] = []
    if _find_path(roots, instance_id, path):
        return path
    return []


def _find_path(siblings: List[ComponentInstance], instance_id: str, path: List[str]) -> bool:
    for node in siblings:
        if node.id == instance_id:
            path.append(node.id)
            return True
        if node.children:
            path.append(node.id)
            if _find_path(node.children, instance_id, path):
                return True
            path.pop()
    return False


def contains(instance: ComponentInstance, instance_id: str) -> bool:
    """True if ``instance_id`` is ``instance`` itself or one of its descendants."""
    return any(node.id == instance_id for node in instance.walk())


def collect_ids(instance: ComponentInstance) -> List[str]:
    return [node.id for node in instance.walk()]


def all_ids(roots: Roots) -> Set[str]:
    return {node.id for node in iter_instances(roots)}


def clamp_index(index: Optional[int], length: int) -> int:
    if index is None:
        return length
    return max(0, min(index, length))


def clone_binding(binding: EventBinding) -> EventBinding:
    # target_component is copied as-is: clones keep pointing at the original tree.
    return EventBinding(
        id=new_id(),
        event_type=binding.event_type,
        action=binding.action,
        target_component=binding.target_component,
        payload=copy.deepcopy(binding.payload),
    )


def clone(instance: ComponentInstance) -> ComponentInstance:
    """Materialize an independent subtree: a deep copy with fresh ids at every level."""
    return ComponentInstance(
        id=new_id(),
        type=instance.type,
        props=copy.deepcopy(instance.props),
        style=copy.deepcopy(instance.style),
        children=[clone(child) for child in instance.children]
        if instance.children is not None
        else None,
        events=[clone_binding(b) for b in instance.events],
        hidden=instance.hidden,
    )


materialize_subtree = clone


def insert(
    roots: Roots,
    instance: ComponentInstance,
    parent_id: Optional[str] = None,
    index: Optional[int] = None,
) -> bool:
    """Insert ``instance`` under ``parent_id`` (page root when None).

    Returns False, leaving the tree untouched, when the parent is missing or
    cannot hold children, or when any id in ``instance`` is already in the tree.
    """
    if parent_id is not None:
        parent = find(roots, parent_id)
        if parent is None:
            logger.debug("insert: parent %s not found", parent_id)
            return False
        if parent.children is None:
            logger.debug("insert: parent %s (%s) does not allow children", parent_id, parent.type)
            return False
        siblings = parent.children
    else:
        siblings = roots

    clash = all_ids(roots).intersection(collect_ids(instance))
    if clash:
        logger.debug("insert: ids already in the tree: %s", sorted(clash))
        return False

    siblings.insert(clamp_index(index, len(siblings)), instance)
    return True


def remove(roots: Roots, instance_id: str) -> Optional[ComponentInstance]:
    """Detach the first pre-order match and its subtree; return it (None if absent)."""
    loc = find_location(roots, instance_id)
    if loc is None:
        logger.debug("remove: %s not found", instance_id)
        return None
    return loc.siblings.pop(loc.index)


def move(
    roots: Roots,
    instance_id: str,
    new_parent_id: Optional[str],
    index: Optional[int] = None,
) -> Optional[str]:
    """Relocate a subtree by cloning it and deleting the original.

    The moved instance and every descendant get fresh ids, so bindings that
    targeted the old ids go stale. ``index`` is measured after the original
    has been removed. Returns the new root id, or None when the move is
    rejected (unknown id, bad destination, or a move into its own subtree).
    """
    loc = find_location(roots, instance_id)
    if loc is None:
        logger.debug("move: %s not found", instance_id)
        return None
    source = loc.node

    parent: Optional[ComponentInstance] = None
    if new_parent_id is not None:
        if contains(source, new_parent_id):
            logger.debug("move: %s cannot move into its own subtree (%s)", instance_id, new_parent_id)
            return None
        parent = find(roots, new_parent_id)
        if parent is None or parent.children is None:
            logger.debug("move: destination %s cannot hold children", new_parent_id)
            return None

    moved = clone(source)
    loc.siblings.pop(loc.index)
    destination = parent.children if parent is not None else roots
    destination.insert(clamp_index(index, len(destination)), moved)  # type: ignore[union-attr]
    return moved.id


def duplicate(roots: Roots, instance_id: str) -> Optional[str]:
    """Insert a fresh clone right after the original; return the clone's id."""
    loc = find_location(roots, instance_id)
    if loc is None:
        logger.debug("duplicate: %s not found", instance_id)
        return None
    cloned = clone(loc.node)
    loc.siblings.insert(loc.index + 1, cloned)
    return cloned.id


def resolve_drop(
    roots: Roots, intent: DropIntent, moving_id: Optional[str] = None
) -> Optional[Tuple[Optional[str], Optional[int]]]:
    """Translate a drop intent into ``(parent_id, index)``.

    When ``moving_id`` is the instance being dragged, sibling indices are
    corrected for its removal from the same sequence. Returns None when the
    intent points at nothing usable.
    """
    if intent.container_id is not None:
        container = find(roots, intent.container_id)
        if container is None or container.children is None:
            logger.debug("drop: %s is not a container", intent.container_id)
            return None
        return container.id, None

    if intent.sibling_id is not None:
        if intent.side not in DROP_SIDES:
            logger.debug("drop: unknown side %r", intent.side)
            return None
        loc = find_location(roots, intent.sibling_id)
        if loc is None:
            logger.debug("drop: sibling %s not found", intent.sibling_id)
            return None
        index = loc.index + (1 if intent.side == "after" else 0)
        if moving_id is not None:
            for i, node in enumerate(loc.siblings):
                if node.id == moving_id and i < index:
                    index -= 1
                    break
        return loc.parent_id, index

    return None, None
