"""
core/ecs.py - Entity-Component-System

Entities are ints. Components are any object, stored by type.
Query by component types to get matching entities.

    w = World()
    e = w.spawn(Name("ship"), GeneralPose3())
    w.insert(e, Velocity(...))

    for eid, name, vel in w.query(Name, Velocity):
        ...

Every insert is recorded as a change of that component type until
``clear_trackers()`` is called (once per frame by the App), which is how
systems react to "component added or replaced this frame".

Parent/child relations are stored as ``Parent`` / ``Children`` components
and are kept consistent by ``set_parent`` / ``remove_parent`` /
``despawn_recursive``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator


@dataclass
class Parent:
    entity: int


@dataclass
class Children:
    entities: list[int] = field(default_factory=list)

    def __iter__(self):
        return iter(self.entities)

    def __len__(self):
        return len(self.entities)


class World:
    def __init__(self):
        self._next_id = 0
        self._alive: set[int] = set()
        self._stores: dict[type, dict[int, Any]] = {}
        self._changed: dict[type, list[int]] = {}
        self._resources: dict[type, Any] = {}

    # -- Entities --

    def spawn(self, *components: Any) -> int:
        self._next_id += 1
        eid = self._next_id
        self._alive.add(eid)
        self.insert(eid, *components)
        return eid

    def alive(self, eid: int) -> bool:
        return eid in self._alive

    def entities(self) -> list[int]:
        return sorted(self._alive)

    def __len__(self) -> int:
        return len(self._alive)

    def despawn_recursive(self, eid: int):
        """Remove an entity with all of its descendants."""
        if eid not in self._alive:
            return
        self.remove_parent(eid)
        for entity in self.descendants(eid) + [eid]:
            for store in self._stores.values():
                store.pop(entity, None)
            self._alive.discard(entity)

    # -- Components --

    def insert(self, eid: int, *components: Any):
        if eid not in self._alive:
            raise KeyError(f"World: entity {eid} does not exist")
        for comp in components:
            t = type(comp)
            self._stores.setdefault(t, {})[eid] = comp
            self._changed.setdefault(t, []).append(eid)

    def get(self, eid: int, comp_type: type) -> Any | None:
        return self._stores.get(comp_type, {}).get(eid)

    def has(self, eid: int, comp_type: type) -> bool:
        return eid in self._stores.get(comp_type, {})

    def components_of(self, eid: int) -> list[Any]:
        return [store[eid] for store in self._stores.values() if eid in store]

    def remove(self, eid: int, comp_type: type) -> Any | None:
        store = self._stores.get(comp_type)
        if store is None:
            return None
        return store.pop(eid, None)

    # -- Queries --

    def query(self, *types: type) -> Iterator[tuple]:
        """Yield (eid, comp1, comp2, ...) for entities that have ALL types.

        The result is lazy; collect it before spawning or despawning.
        """
        if not types:
            return
        # Iterate over the smallest bucket
        buckets = [self._stores.get(t, {}) for t in types]
        smallest = min(buckets, key=len)
        for eid in smallest:
            if all(eid in b for b in buckets):
                yield (eid, *(b[eid] for b in buckets))

    def changed(self, comp_type: type) -> list[int]:
        """Entities whose component of comp_type was inserted since the last clear_trackers()."""
        seen: set[int] = set()
        result = []
        store = self._stores.get(comp_type, {})
        for eid in self._changed.get(comp_type, []):
            if eid in store and eid not in seen:
                seen.add(eid)
                result.append(eid)
        return result

    def clear_trackers(self):
        self._changed.clear()

    # -- Hierarchy --

    def set_parent(self, child: int, parent: int):
        self.remove_parent(child)
        self.insert(child, Parent(parent))
        children = self.get(parent, Children)
        if children is None:
            self.insert(parent, Children([child]))
        else:
            children.entities.append(child)

    def remove_parent(self, child: int):
        """Detach child from its parent's Children list and drop its Parent."""
        parent = self.remove(child, Parent)
        if parent is None:
            return
        children = self.get(parent.entity, Children)
        if children is not None and child in children.entities:
            children.entities.remove(child)

    def parent_of(self, eid: int) -> int | None:
        parent = self.get(eid, Parent)
        return parent.entity if parent is not None else None

    def children_of(self, eid: int) -> list[int]:
        children = self.get(eid, Children)
        return list(children.entities) if children is not None else []

    def descendants(self, eid: int) -> list[int]:
        result = []
        stack = self.children_of(eid)
        while stack:
            entity = stack.pop()
            result.append(entity)
            stack.extend(self.children_of(entity))
        return result

    def ancestors(self, eid: int) -> Iterator[int]:
        """Yield eid's parent, grandparent, ... up to the root."""
        parent = self.parent_of(eid)
        while parent is not None:
            yield parent
            parent = self.parent_of(parent)

    # -- Resources --

    def insert_resource(self, resource: Any):
        self._resources[type(resource)] = resource

    def resource(self, res_type: type) -> Any:
        try:
            return self._resources[res_type]
        except KeyError:
            raise KeyError(f"World: resource {res_type.__name__} is not registered") from None

    def get_resource(self, res_type: type) -> Any | None:
        return self._resources.get(res_type)
