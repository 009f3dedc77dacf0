"""
Game settings: project-level configuration for weapons, projectiles and colliders.

Settings are saved to project_settings/game.json:

    {
      "assets_root": "assets",
      "weapon": {"rate_of_fire": 20.0, "ship_rates": {"Praetor": 7.0, "Infiltrator": 3.5}},
      "projectile": {"speed": 100.0, "lifetime": 10.0, "radius": 0.1, "half_length_factor": 8.0},
      "colliders": {"skip_degenerate_hulls": false}
    }

Missing keys fall back to defaults. Values are validated where they are
used (a Weapon rejects a non-positive rate of fire when it is built).
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path

from outer_frontiers import log

SETTINGS_DIR = "project_settings"
SETTINGS_FILE = "game.json"


@dataclass
class WeaponSettings:
    """Default weapon parameters.

    - rate_of_fire: shots per second while the trigger stays latched
    - ship_rates: rate of fire of the weapons mounted on a named ship
    """

    rate_of_fire: float = 20.0
    ship_rates: dict = field(default_factory=lambda: {"Praetor": 7.0, "Infiltrator": 3.5})

    def rate_for(self, ship: str) -> float:
        return self.ship_rates.get(ship, self.rate_of_fire)

    def to_dict(self) -> dict:
        return asdict(self)

    @staticmethod
    def from_dict(data: dict) -> "WeaponSettings":
        defaults = WeaponSettings()
        return WeaponSettings(
            rate_of_fire=float(data.get("rate_of_fire", defaults.rate_of_fire)),
            ship_rates={str(k): float(v) for k, v in data.get("ship_rates", defaults.ship_rates).items()},
        )


@dataclass
class ProjectileSettings:
    """Projectile prototype parameters.

    - speed: muzzle speed along the weapon's forward direction, m/s
    - lifetime: seconds before a projectile despawns
    - radius: capsule radius
    - half_length_factor: capsule half length in radii
    """

    speed: float = 100.0
    lifetime: float = 10.0
    radius: float = 0.1
    half_length_factor: float = 8.0

    def to_dict(self) -> dict:
        return asdict(self)

    @staticmethod
    def from_dict(data: dict) -> "ProjectileSettings":
        return ProjectileSettings(
            speed=float(data.get("speed", 100.0)),
            lifetime=float(data.get("lifetime", 10.0)),
            radius=float(data.get("radius", 0.1)),
            half_length_factor=float(data.get("half_length_factor", 8.0)),
        )


@dataclass
class ColliderSettings:
    """Collider synthesis policy.

    - skip_degenerate_hulls: log and skip hull meshes that cannot form a
      convex shape instead of aborting synthesis
    """

    skip_degenerate_hulls: bool = False

    def to_dict(self) -> dict:
        return asdict(self)

    @staticmethod
    def from_dict(data: dict) -> "ColliderSettings":
        return ColliderSettings(skip_degenerate_hulls=bool(data.get("skip_degenerate_hulls", False)))


@dataclass
class GameSettings:
    assets_root: str = "assets"
    weapon: WeaponSettings = field(default_factory=WeaponSettings)
    projectile: ProjectileSettings = field(default_factory=ProjectileSettings)
    colliders: ColliderSettings = field(default_factory=ColliderSettings)

    def to_dict(self) -> dict:
        return {
            "assets_root": self.assets_root,
            "weapon": self.weapon.to_dict(),
            "projectile": self.projectile.to_dict(),
            "colliders": self.colliders.to_dict(),
        }

    @staticmethod
    def from_dict(data: dict) -> "GameSettings":
        return GameSettings(
            assets_root=data.get("assets_root", "assets"),
            weapon=WeaponSettings.from_dict(data.get("weapon", {})),
            projectile=ProjectileSettings.from_dict(data.get("projectile", {})),
            colliders=ColliderSettings.from_dict(data.get("colliders", {})),
        )

    @staticmethod
    def settings_path(project_path: Path) -> Path:
        return Path(project_path) / SETTINGS_DIR / SETTINGS_FILE

    @staticmethod
    def load(project_path: Path) -> "GameSettings":
        """Load settings of a project; defaults when the file is missing or unreadable."""
        path = GameSettings.settings_path(project_path)
        if not path.exists():
            return GameSettings()

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            settings = GameSettings.from_dict(data)
            log.info(f"GameSettings: Loaded from {path}")
            return settings
        except (OSError, ValueError, TypeError, AttributeError) as e:
            log.warn(f"GameSettings: Failed to load settings from {path}: {e}")
            return GameSettings()

    def save(self, project_path: Path) -> Path:
        path = GameSettings.settings_path(project_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
        log.info(f"GameSettings: Saved to {path}")
        return path
