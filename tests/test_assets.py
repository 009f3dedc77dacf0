"""Asset loading and the full startup sequence of the game."""

import numpy as np
import pytest

from outer_frontiers.assets import AssetLoadError, AssetServer, Models, asset_paths, split_label
from outer_frontiers.colliders import Collider, ModelColliders
from outer_frontiers.core import GameStates
from outer_frontiers.game import Player, create_app, player_fire
from outer_frontiers.geombase import GeneralPose3
from outer_frontiers.scene import Name, SceneAssets, SceneInstance, Velocity
from outer_frontiers.settings import GameSettings, ProjectileSettings
from outer_frontiers.weapon import Weapon


def test_model_paths():
    assert asset_paths(Models) == {
        "zenith_station": "models/zenith_station.glb#Scene0",
        "praetor": "models/praetor.glb#Scene0",
        "infiltrator": "models/infiltrator.glb#Scene0",
        "dragoon": "models/dragoon.glb#Scene0",
    }


def test_split_label():
    assert split_label("models/praetor.glb#Scene0") == ("models/praetor.glb", "Scene0")
    assert split_label("models/praetor.glb") == ("models/praetor.glb", "")


class TestAssetServer:
    def test_load_scene(self, project_dir):
        server = AssetServer(project_dir / "assets")
        handle = server.load("models/praetor.glb#Scene0")

        scene = server.scenes.get(handle)
        assert scene.find("body_hull") is not None
        assert len(server.meshes) == 2
        assert handle.path == "models/praetor.glb#Scene0"

    def test_same_path_same_handle(self, project_dir):
        server = AssetServer(project_dir / "assets")
        assert server.load("models/praetor.glb#Scene0") == server.load("models/praetor.glb#Scene0")
        assert len(server.scenes) == 1

    def test_handle_of_loaded_path(self, project_dir):
        server = AssetServer(project_dir / "assets")
        assert server.handle_of("models/praetor.glb#Scene0") is None

        handle = server.load("models/praetor.glb#Scene0")
        assert server.handle_of("models/praetor.glb#Scene0") == handle
        assert server.handle_of("models/dragoon.glb#Scene0") is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(AssetLoadError):
            AssetServer(tmp_path).load("models/missing.glb#Scene0")

    @pytest.mark.parametrize("path", [
        "models/praetor.glb#Mesh0",
        "models/praetor.glb#Scene7",
        "models/praetor.gltf#Scene0",
    ])
    def test_bad_paths(self, project_dir, path):
        with pytest.raises(AssetLoadError):
            AssetServer(project_dir / "assets").load(path)

    def test_corrupt_file(self, tmp_path):
        (tmp_path / "models").mkdir()
        (tmp_path / "models" / "broken.glb").write_bytes(b"not a glb file")
        with pytest.raises(AssetLoadError, match="broken.glb"):
            AssetServer(tmp_path).load("models/broken.glb#Scene0")


def ship_named(world, name):
    return next(eid for eid, n in world.query(Name) if n == name)


class TestGameStartup:
    def test_first_frame(self, project_dir):
        app = create_app(project_dir)
        app.update(1.0 / 60.0)
        world = app.world

        assert app.state is GameStates.NEXT
        assert isinstance(world.resource(Models), Models)

        # colliders were built for every model and hulls stripped
        assert len(world.resource(ModelColliders)) == 4
        for _, scene in world.resource(SceneAssets).items():
            assert scene.find("body_hull") is None

        # every instance got its collider in the frame it was spawned
        for name in ["Zenith station", "Praetor", "Infiltrator", "Dragoon"]:
            ship = ship_named(world, name)
            assert world.has(ship, SceneInstance)
            collider = world.get(ship, Collider)
            assert len(collider.shape) == 1
            assert collider.contains_point([0.54, 0.0, 0.0])

        # no hull node made it into the game world
        assert all(n != "body_hull" for _, n in world.query(Name))

    def test_weapons_mounted_per_ship(self, project_dir):
        app = create_app(project_dir)
        app.update(1.0 / 60.0)
        world = app.world

        rates = {}
        for eid, weapon in world.query(Weapon):
            ship = list(world.ancestors(eid))[-1]
            rates[str(world.get(ship, Name))] = weapon.rate_of_fire
        assert rates == pytest.approx({"Praetor": 7.0, "Infiltrator": 3.5})

    def test_player_fires(self, project_dir):
        app = create_app(project_dir)
        app.update(1.0 / 60.0)
        world = app.world

        praetor = ship_named(world, "Praetor")
        assert world.has(praetor, Player)
        world.get(praetor, Velocity).linvel[:] = [0.0, 0.0, -10.0]

        assert player_fire(world) == 1
        app.update(1.0 / 60.0)

        shots = [eid for eid, n in world.query(Name) if n == "Projectile"]
        assert len(shots) == 1
        np.testing.assert_array_almost_equal(world.get(shots[0], GeneralPose3).lin, [5.0, 5.0, -22.0])
        np.testing.assert_array_almost_equal(world.get(shots[0], Velocity).linvel, [0.0, 0.0, -110.0])

    def test_settings_are_used(self, project_dir):
        GameSettings(projectile=ProjectileSettings(speed=40.0)).save(project_dir)
        app = create_app(project_dir)
        app.update(1.0 / 60.0)
        player_fire(app.world)
        app.update(1.0 / 60.0)

        (shot,) = [eid for eid, n in app.world.query(Name) if n == "Projectile"]
        np.testing.assert_array_almost_equal(app.world.get(shot, Velocity).linvel, [0.0, 0.0, -40.0])
