"""Components shared by scene assets and the game world.

The local transform of an entity is stored directly as a
``GeneralPose3`` component.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from outer_frontiers.core.assets import Handle
from outer_frontiers.core.ecs import World
from outer_frontiers.geombase import GeneralPose3


class Name(str):
    """Human readable entity name."""

    def __repr__(self):
        return f"Name({str.__repr__(self)})"


@dataclass(frozen=True)
class Mesh3d:
    """Entity renders (and owns geometry of) the referenced mesh."""
    handle: Handle


@dataclass(frozen=True)
class SceneRoot:
    """Entity is an instance of the referenced scene asset."""
    handle: Handle


@dataclass
class Velocity:
    linvel: np.ndarray = field(default_factory=lambda: np.zeros(3))
    angvel: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self):
        self.linvel = np.asarray(self.linvel, dtype=np.float64)
        self.angvel = np.asarray(self.angvel, dtype=np.float64)


def global_pose(world: World, eid: int) -> GeneralPose3:
    """World-space pose of an entity: local poses composed from the root down."""
    pose = world.get(eid, GeneralPose3) or GeneralPose3.identity()
    for ancestor in world.ancestors(eid):
        parent_pose = world.get(ancestor, GeneralPose3)
        if parent_pose is not None:
            pose = parent_pose * pose
    return pose
