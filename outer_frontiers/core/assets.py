"""Typed asset storage addressed by handles.

An ``Assets[T]`` store owns loaded resources (meshes, scenes). Code that
uses a resource keeps a ``Handle`` to it; ``Handle.id`` is the stable
asset identity used as a dictionary key (e.g. by the collider cache).
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Generic, Iterator, TypeVar

T = TypeVar("T")

AssetId = int

_asset_ids = itertools.count(1)


@dataclass(frozen=True)
class Handle(Generic[T]):
    id: AssetId
    path: str = field(default="", compare=False)

    def __repr__(self):
        if self.path:
            return f"Handle({self.id}, {self.path!r})"
        return f"Handle({self.id})"


class Assets(Generic[T]):
    def __init__(self):
        self._items: dict[AssetId, T] = {}

    def add(self, asset: T, path: str = "") -> Handle[T]:
        handle = Handle(next(_asset_ids), path)
        self._items[handle.id] = asset
        return handle

    def get(self, handle: Handle[T] | AssetId) -> T | None:
        return self._items.get(_asset_id(handle))

    def remove(self, handle: Handle[T] | AssetId) -> T | None:
        return self._items.pop(_asset_id(handle), None)

    def __contains__(self, handle: Handle[T] | AssetId) -> bool:
        return _asset_id(handle) in self._items

    def __len__(self) -> int:
        return len(self._items)

    def items(self) -> Iterator[tuple[AssetId, T]]:
        """Iterate (asset id, asset) pairs in load order."""
        return iter(list(self._items.items()))


def _asset_id(handle: Handle | AssetId) -> AssetId:
    return handle.id if isinstance(handle, Handle) else handle
