"""Initial game scene: the station and the ships, with weapons on their barrels."""

from __future__ import annotations

from pathlib import Path

from outer_frontiers.assets.models import Models
from outer_frontiers.assets.plugin import AssetsPlugin
from outer_frontiers.assets.server import AssetServer
from outer_frontiers.core.app import App, GameStates
from outer_frontiers.core.ecs import World
from outer_frontiers.geombase import GeneralPose3
from outer_frontiers.scene.components import Name, SceneRoot, Velocity
from outer_frontiers.settings import GameSettings
from outer_frontiers.weapon.projectile import RigidBody
from outer_frontiers.weapon.systems import WeaponPlugin
from outer_frontiers.weapon.weapon import Weapon, mount_weapons


class Player:
    """Marker of the player's spaceship."""


def setup(world: World):
    models = world.resource(Models)
    settings = world.get_resource(GameSettings) or GameSettings()

    world.spawn(
        SceneRoot(models.zenith_station),
        GeneralPose3.translation(0.0, 0.0, -200.0),
        Name("Zenith station"),
    )

    world.spawn(
        SceneRoot(models.praetor),
        GeneralPose3.translation(5.0, 5.0, -20.0),
        Player(),
        RigidBody.DYNAMIC,
        Velocity(),
        mount_weapons(settings.weapon.rate_for("Praetor")),
        Name("Praetor"),
    )

    world.spawn(
        SceneRoot(models.infiltrator),
        GeneralPose3.translation(-5.0, 5.0, -20.0),
        RigidBody.DYNAMIC,
        mount_weapons(settings.weapon.rate_for("Infiltrator")),
        Name("Infiltrator"),
    )

    world.spawn(
        SceneRoot(models.dragoon),
        GeneralPose3.translation(0.0, 5.0, 150.0),
        Name("Dragoon"),
    )


def player_fire(world: World) -> int:
    """Latch fire on every weapon of the player's ship. Returns the number of weapons latched.

    Called by input handling once per frame while the fire key is held.
    """
    count = 0
    for player, _ in list(world.query(Player)):
        for entity in world.descendants(player):
            weapon = world.get(entity, Weapon)
            if weapon is not None:
                weapon.fire()
                count += 1
    return count


class GamePlugin:
    def build(self, app: App):
        on_enter_next = app.on_enter(GameStates.NEXT)
        on_enter_next += setup


def create_app(project_path: str | Path = ".") -> App:
    """App with settings of the project at project_path and all game plugins added.

    The host drives it with ``app.update(dt)``.
    """
    project_path = Path(project_path)
    settings = GameSettings.load(project_path)

    app = App()
    app.world.insert_resource(settings)
    app.add_plugin(AssetsPlugin(AssetServer(project_path / settings.assets_root), Models))
    app.add_plugin(WeaponPlugin())
    app.add_plugin(GamePlugin())
    return app
