"""Stage dressing: lights, sky and camera for the meadow.

Injected into the MjSpec before compilation, next to the scene geometry.
MuJoCo has no hemisphere light, so it is approximated with a sky-colored
light shining down and a ground-colored light shining up. Ambient light
rides on the headlight with its diffuse and specular parts switched off.

Usage:
    prepare_stage(spec, config, assets)   # before spec.compile()
    cam = make_camera(config.camera)      # free camera for mujoco.Renderer
"""

from __future__ import annotations

import mujoco
import numpy as np

from meadow.assets import SKY, LoadedAssets
from meadow.config import CameraConfig, Config, LightingConfig
from meadow.primitives import y_up_to_z_up


def light_rgb(color, intensity: float, scale: float) -> list[float]:
    """Light color scaled by intensity, clipped to MuJoCo's [0, 1] range."""
    rgb = np.asarray(color[:3], dtype=np.float64) * intensity * scale
    return np.clip(rgb, 0.0, 1.0).tolist()


def _add_directional_light(spec, name: str, pos, direction, diffuse) -> None:
    light = spec.worldbody.add_light()
    light.name = name
    light.pos = list(pos)
    light.dir = list(direction)
    light.diffuse = diffuse
    light.specular = [0.1, 0.1, 0.1]
    light.castshadow = False
    # Older MuJoCo releases flag directional lights with a bool
    if hasattr(mujoco, "mjtLightType"):
        light.type = mujoco.mjtLightType.mjLIGHT_DIRECTIONAL
    else:
        light.directional = True


def prepare_lights(spec, cfg: LightingConfig) -> None:
    """Ambient, hemisphere (as two lights), sun and fill."""
    ambient = light_rgb(cfg.ambient_color, cfg.ambient_intensity, 1.0)
    spec.visual.headlight.ambient = ambient
    spec.visual.headlight.diffuse = [0.0, 0.0, 0.0]
    spec.visual.headlight.specular = [0.0, 0.0, 0.0]

    s = cfg.intensity_scale
    _add_directional_light(
        spec,
        "hemisphere_sky",
        (0.0, 0.0, 50.0),
        (0.0, 0.0, -1.0),
        light_rgb(cfg.sky_color, cfg.hemisphere_intensity, s),
    )
    _add_directional_light(
        spec,
        "hemisphere_ground",
        (0.0, 0.0, -50.0),
        (0.0, 0.0, 1.0),
        light_rgb(cfg.ground_color, cfg.hemisphere_intensity * 0.5, s),
    )

    # Directional lights shine from their position toward the origin
    for name, position, intensity in (
        ("sun", cfg.sun_position, cfg.sun_intensity),
        ("fill", cfg.fill_position, cfg.fill_intensity),
    ):
        pos = y_up_to_z_up(position)
        _add_directional_light(
            spec,
            name,
            pos,
            -pos / np.linalg.norm(pos),
            light_rgb(cfg.sun_color, intensity, s),
        )


def prepare_camera(spec, cfg: CameraConfig, width: int, height: int) -> None:
    """Field of view, clip planes and offscreen buffer size.

    MuJoCo clip planes are relative to the model extent, so the extent is
    pinned to the far plane.
    """
    spec.visual.global_.fovy = cfg.fov
    spec.stat.extent = cfg.far
    spec.visual.map.znear = cfg.near / cfg.far
    spec.visual.map.zfar = 1.0
    spec.visual.global_.offwidth = max(spec.visual.global_.offwidth, width)
    spec.visual.global_.offheight = max(spec.visual.global_.offheight, height)


def prepare_sky(spec, assets: LoadedAssets) -> bool:
    """Add the skybox texture if the sky image loaded. Returns True if added."""
    sky = assets.textures.get(SKY)
    if sky is None:
        return False
    tex = spec.add_texture()
    tex.name = SKY
    tex.type = mujoco.mjtTexture.mjTEXTURE_SKYBOX
    tex.file = sky.path
    return True


def prepare_stage(spec, config: Config, assets: LoadedAssets) -> None:
    """Inject lights, sky and camera settings into an MjSpec."""
    prepare_lights(spec, config.lighting)
    prepare_camera(
        spec, config.camera, config.viewer.render_width, config.viewer.render_height
    )
    prepare_sky(spec, assets)


# ---------------------------------------------------------------------------
# Camera
# ---------------------------------------------------------------------------


def orbit_camera(position, target) -> tuple[np.ndarray, float, float, float]:
    """Convert a Y-up camera position + orbit target to MuJoCo free-camera terms.

    Returns:
        (lookat, distance, azimuth_deg, elevation_deg) in Z-up coordinates.
    """
    eye = y_up_to_z_up(position)
    lookat = y_up_to_z_up(target)
    forward = lookat - eye
    distance = float(np.linalg.norm(forward))
    fx, fy, fz = forward / distance
    azimuth = float(np.degrees(np.arctan2(fy, fx)))
    elevation = float(np.degrees(np.arcsin(fz)))
    return lookat, distance, azimuth, elevation


def configure_camera(cam: mujoco.MjvCamera, cfg: CameraConfig) -> mujoco.MjvCamera:
    """Point a free camera (viewer or offscreen) at the configured target."""
    lookat, distance, azimuth, elevation = orbit_camera(cfg.position, cfg.target)
    cam.type = mujoco.mjtCamera.mjCAMERA_FREE
    cam.lookat[:] = lookat
    cam.distance = distance
    cam.azimuth = azimuth
    cam.elevation = elevation
    return cam


def make_camera(cfg: CameraConfig) -> mujoco.MjvCamera:
    return configure_camera(mujoco.MjvCamera(), cfg)
