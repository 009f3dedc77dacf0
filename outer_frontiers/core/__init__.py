"""Core runtime: ECS world, events and the frame-stepped App."""

from outer_frontiers.core.ecs import World, Parent, Children
from outer_frontiers.core.event import Event
from outer_frontiers.core.assets import Assets, AssetId, Handle
from outer_frontiers.core.app import App, GameStates, Stage, State, Time, Plugin

__all__ = [
    "World",
    "Parent",
    "Children",
    "Event",
    "Assets",
    "AssetId",
    "Handle",
    "App",
    "GameStates",
    "Stage",
    "State",
    "Time",
    "Plugin",
]
