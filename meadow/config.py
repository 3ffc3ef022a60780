"""
Centralized configuration for the meadow scene.

Every constant the scene is built from lives here, grouped by concern.
Automatically converts to dict for printing and scene descriptions.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field

from meadow.primitives import (
    CLOUD_WHITE,
    GRASS_GREEN,
    ORNAMENT_BLUE,
    ORNAMENT_CYAN,
    ORNAMENT_RED,
    ORNAMENT_WHITE,
    SKY_BLUE,
    SUNLIGHT,
    TRUNK_BROWN,
    WHITE,
)

RGBA = tuple[float, float, float, float]
Vec3 = tuple[float, float, float]


@dataclass
class GroundConfig:
    """Ground plane: one flat box with the tiled grass texture."""

    scale: Vec3 = (100.0, 0.1, 100.0)
    color: RGBA = WHITE  # Multiplied with the texture when it loads


@dataclass
class CloudConfig:
    """Cloud clusters and their drift."""

    count: int = 15
    height_range: tuple[int, int] = (15, 20)
    bump_range: tuple[int, int] = (2, 5)  # Bumps per cloud (each bump has a base)
    spread: int = 60  # Cluster origin drawn from [-spread, spread] on x and z
    bump_spacing: float = 2.0  # x offset between consecutive bumps
    color: RGBA = CLOUD_WHITE

    # Bump scale, drawn as random_int(lo, hi) / 10
    scale_x_deciles: tuple[int, int] = (7, 13)
    scale_z_deciles: tuple[int, int] = (8, 12)
    scale_y_deciles: tuple[int, int] = (5, 15)
    base_scale_y: float = -0.1  # Flattened, inverted lobe under each bump

    # Drift
    wrap_limit: float = 60.0  # x > limit wraps to -limit
    base_speed: float = 0.002  # Speed of the first cloud (units per frame)
    speed_step: float = 0.0005  # Added per cloud index


@dataclass
class TreeConfig:
    """Ordinary trees: trunk cylinder + textured leaf cone."""

    count: int = 200
    trunk_color: RGBA = TRUNK_BROWN
    trunk_scale: Vec3 = (0.3, 2.0, 0.3)
    trunk_height: float = 2.0  # y of the trunk center
    leaf_color: RGBA = WHITE  # Multiplied with the foliage texture
    leaf_scale: Vec3 = (1.0, 2.0, 1.0)
    leaf_offset: float = 2.0  # Leaves sit this far above the trunk center

    # Rejection sampling: first draw from [-spawn_range, spawn_range], redraws
    # from the narrower [-resample_range, resample_range].
    spawn_range: int = 70
    resample_range: int = 50
    exclusion_radius: float = 15.0  # Keep clear of the windmill at the origin


@dataclass
class OrnamentConfig:
    """Ornaments scattered over the decorated tree."""

    count: int = 200
    palette: tuple[RGBA, ...] = (
        ORNAMENT_RED,
        ORNAMENT_BLUE,
        ORNAMENT_CYAN,
        ORNAMENT_WHITE,
    )
    y_scale: float = 5.0  # Ornament height drawn from [0, y_scale)
    spread: float = 3.2  # x extent, in cross-section diameters
    depth_step: float = 0.01  # z search step toward the cone surface
    scale: float = 0.05
    lift: float = 1.0  # Added to y


@dataclass
class AssetConfig:
    """External files. Paths are relative to root unless absolute."""

    enabled: bool = True
    root: str = "."
    ground_texture: str = "textures/highGrass.jpg"
    leaf_texture: str = "textures/leaves.jpg"
    sky_texture: str = "sky3.jpg"
    model_obj: str = "textures/windmill_001.obj"
    model_mtl: str = "textures/windmill_001.mtl"
    model_yaw: float = -math.pi / 2

    # Texture tiling, independent per axis
    ground_repeat: tuple[float, float] = (10.0, 10.0)
    leaf_repeat: tuple[float, float] = (2.0, 2.0)

    cache_dir: str = ".cache/meadow"  # Decoded PNG textures land here
    max_workers: int = 4


@dataclass
class CameraConfig:
    """Perspective camera and orbit target (Y-up world coordinates)."""

    fov: float = 45.0
    near: float = 0.1
    far: float = 200.0
    position: Vec3 = (0.0, 10.0, 50.0)
    target: Vec3 = (0.0, 1.0, 0.0)


@dataclass
class LightingConfig:
    """Ambient, hemisphere and directional lights."""

    ambient_color: RGBA = WHITE
    ambient_intensity: float = 0.4

    sky_color: RGBA = SKY_BLUE
    ground_color: RGBA = GRASS_GREEN
    hemisphere_intensity: float = 1.0

    sun_color: RGBA = SUNLIGHT
    sun_intensity: float = 5.0
    sun_position: Vec3 = (5.0, 5.0, 5.0)
    fill_intensity: float = 1.0
    fill_position: Vec3 = (-5.0, 1.0, 5.0)

    # MuJoCo light colors saturate at 1.0; intensities are scaled by this
    intensity_scale: float = 0.2


@dataclass
class ViewerConfig:
    """Frame loop and offscreen render settings."""

    frame_rate: int = 60
    render_width: int = 960
    render_height: int = 540


@dataclass
class Config:
    """Complete scene configuration."""

    ground: GroundConfig = field(default_factory=GroundConfig)
    clouds: CloudConfig = field(default_factory=CloudConfig)
    trees: TreeConfig = field(default_factory=TreeConfig)
    ornaments: OrnamentConfig = field(default_factory=OrnamentConfig)
    assets: AssetConfig = field(default_factory=AssetConfig)
    camera: CameraConfig = field(default_factory=CameraConfig)
    lighting: LightingConfig = field(default_factory=LightingConfig)
    viewer: ViewerConfig = field(default_factory=ViewerConfig)
    seed: int | None = None  # None = fresh entropy every run

    def to_dict(self) -> dict:
        """Nested dict of every section, plus the seed."""
        return {
            "ground": asdict(self.ground),
            "clouds": asdict(self.clouds),
            "trees": asdict(self.trees),
            "ornaments": asdict(self.ornaments),
            "assets": asdict(self.assets),
            "camera": asdict(self.camera),
            "lighting": asdict(self.lighting),
            "viewer": asdict(self.viewer),
            "seed": self.seed,
        }

    @classmethod
    def for_smoketest(cls) -> Config:
        """Small scene with no external assets. Builds in well under a second."""
        return cls(
            clouds=CloudConfig(count=3),
            trees=TreeConfig(count=10),
            ornaments=OrnamentConfig(count=20),
            assets=AssetConfig(enabled=False),
            viewer=ViewerConfig(render_width=160, render_height=120),
            seed=0,
        )
