"""
Parent/child property relationships.

A child property references exactly one parent through ``parent_id``; a
parent never stores its children and is only discovered by reverse lookup.
Reservations on one side of a relationship block the calendar of the other
side, but children of the same parent do not block each other.
"""
import asyncio
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional
from uuid import uuid4

from ..utils.logger import get_logger
from ..utils.models import BLOCKED, MANUAL_SOURCE, Property, Reservation, Platform

_UNSET = object()


class PropertyRelationResolver:
    """
    Resolves the related property ids of a focal property.

    Only completed lookups are cached, against the id they were made for:
    asking again for that id returns the cached set without touching the
    data source, and a lookup for a new id replaces it. Concurrent calls for
    the same id share one in-flight lookup. Lookup failures are logged,
    reported as "no related properties" and never cached.
    """

    def __init__(self, data_source, logger=None):
        self.data_source = data_source
        self.logger = logger or get_logger("property_relations")
        self._cached_id = _UNSET
        self._related: FrozenSet[str] = frozenset()
        self._latest_id = _UNSET
        self._in_flight: Dict[Optional[str], asyncio.Future] = {}
        self.property: Optional[Property] = None

    async def resolve(self, property_id: Optional[str]) -> FrozenSet[str]:
        if property_id == self._cached_id:
            return self._related

        self._latest_id = property_id
        lookup = self._in_flight.get(property_id)
        if lookup is None:
            lookup = asyncio.ensure_future(self._lookup(property_id))
            self._in_flight[property_id] = lookup
            lookup.add_done_callback(lambda _, pid=property_id: self._in_flight.pop(pid, None))

        related, prop, ok = await asyncio.shield(lookup)

        # An older lookup finishing late must not replace a newer id's result.
        if ok and self._latest_id == property_id:
            self._cached_id = property_id
            self._related = related
            self.property = prop
        return related

    async def _lookup(self, property_id: Optional[str]):
        if not property_id:
            return frozenset(), None, True

        try:
            prop = await self.data_source.fetch_property_by_id(property_id)
            if prop is None:
                return frozenset(), None, True

            if prop.is_parent:
                child_ids = await self.data_source.fetch_child_property_ids(property_id)
                related = frozenset(child_ids)
            elif prop.is_child and prop.parent_id:
                # Siblings are deliberately left out.
                related = frozenset([prop.parent_id])
            else:
                related = frozenset()

            self.logger.debug("Resolved related properties",
                              property_id=property_id, related=sorted(related))
            return related, prop, True
        except Exception as e:
            self.logger.error("Error fetching related properties",
                              property_id=property_id, error=str(e))
            return frozenset(), None, False


@dataclass
class PropertyRelationships:
    """Relationship maps built in one pass over a property list."""
    parent_to_children: Dict[str, List[str]] = field(default_factory=dict)
    child_to_parent: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_properties(cls, properties: Iterable[Property]) -> "PropertyRelationships":
        relationships = cls()
        properties = list(properties)

        for prop in properties:
            if prop.is_parent:
                relationships.parent_to_children.setdefault(prop.id, [])

        for prop in properties:
            if prop.is_child and prop.parent_id:
                children = relationships.parent_to_children.setdefault(prop.parent_id, [])
                if prop.id not in children:
                    children.append(prop.id)
                relationships.child_to_parent[prop.id] = prop.parent_id

        return relationships

    def get_related_properties(self, property_id: str) -> List[str]:
        if property_id in self.parent_to_children:
            return list(self.parent_to_children[property_id])
        parent_id = self.child_to_parent.get(property_id)
        return [parent_id] if parent_id else []

    @classmethod
    def for_property(cls, prop: Property, child_ids: Iterable[str] = ()) -> "PropertyRelationships":
        """Maps covering a single property and its direct relations."""
        relationships = cls()
        if prop.is_parent:
            relationships.parent_to_children[prop.id] = list(child_ids)
        elif prop.is_child and prop.parent_id:
            relationships.child_to_parent[prop.id] = prop.parent_id
        return relationships


def generate_related_property_blocks(
    source: Reservation,
    relationships: PropertyRelationships,
    id_factory: Callable[[], str] = lambda: str(uuid4()),
) -> List[Reservation]:
    """
    Blocks a real reservation projects onto related properties.

    A reservation on a parent blocks every child; a reservation on a child
    blocks the parent only.
    """
    def block(property_id: str, note: str) -> Reservation:
        return Reservation(
            id=id_factory(),
            property_id=property_id,
            start_date=source.start_date,
            end_date=source.end_date,
            status=BLOCKED,
            platform=Platform.MANUAL,
            source=MANUAL_SOURCE,
            notes=note,
            is_blocking=True,
            source_reservation_id=source.id,
        )

    blocks = [
        block(child_id, "Blocked by parent reservation")
        for child_id in relationships.parent_to_children.get(source.property_id, [])
    ]

    parent_id = relationships.child_to_parent.get(source.property_id)
    if parent_id:
        blocks.append(block(parent_id, "Blocked by child reservation"))

    return blocks
