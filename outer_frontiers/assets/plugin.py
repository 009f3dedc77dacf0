"""Loading state and asset plugin wiring."""

from __future__ import annotations

from outer_frontiers import log
from outer_frontiers.assets.models import load_collection
from outer_frontiers.assets.server import AssetLoadError, AssetServer
from outer_frontiers.colliders.model_colliders import (
    ModelColliders,
    extract_model_colliders_system,
    set_model_collider,
)
from outer_frontiers.core.app import App, GameStates, Stage, State
from outer_frontiers.core.ecs import World
from outer_frontiers.scene.spawner import scene_spawner


class LoadingState:
    """
    Loads asset collections when ``loading`` is entered, inserts each filled
    collection as a world resource and continues to ``continue_to``.

    Loading is synchronous, so the transition happens at the start of the
    next frame.
    """

    def __init__(self, server: AssetServer, loading: GameStates = GameStates.ASSET_LOADING,
                 continue_to: GameStates = GameStates.NEXT):
        self.server = server
        self.loading = loading
        self.continue_to = continue_to
        self.collections: list[type] = []

    def load_collection(self, collection_type: type) -> "LoadingState":
        self.collections.append(collection_type)
        return self

    def __call__(self, world: World):
        for collection_type in self.collections:
            try:
                world.insert_resource(load_collection(collection_type, self.server))
            except AssetLoadError as e:
                log.error(e, f"LoadingState: {collection_type.__name__}")
                raise
        log.info(f"LoadingState: {len(self.collections)} collections loaded, continue to {self.continue_to.name}")
        world.resource(State).set(self.continue_to)

    def build(self, app: App):
        on_enter_loading = app.on_enter(self.loading)
        on_enter_loading += self


class AssetsPlugin:
    """
    Registers asset storages, the loading state, collider synthesis (on
    exit of the loading state), the scene spawner and collider attachment.
    """

    def __init__(self, server: AssetServer, *collections: type):
        self.server = server
        self.collections = collections

    def build(self, app: App):
        world = app.world
        world.insert_resource(self.server)
        world.insert_resource(self.server.scenes)
        world.insert_resource(self.server.meshes)
        world.insert_resource(ModelColliders())

        loading = LoadingState(self.server)
        for collection_type in self.collections:
            loading.load_collection(collection_type)
        app.add_plugin(loading)

        on_exit_loading = app.on_exit(GameStates.ASSET_LOADING)
        on_exit_loading += extract_model_colliders_system

        app.add_system(Stage.SCENE_SPAWNER, scene_spawner)
        # Scene instances appear in SceneSpawner, so colliders are set in the same frame
        app.add_system(Stage.POST_UPDATE, set_model_collider)
