"""Launch the interactive MuJoCo viewer on a freshly populated meadow.

Controls:
    Space:  pause / resume cloud drift
    Mouse:  orbit, pan and zoom (MuJoCo viewer defaults)
    Q/Esc:  quit (handled by MuJoCo viewer)
"""

from __future__ import annotations

import time

import mujoco
import mujoco.viewer

from meadow.composer import describe_world
from meadow.config import Config
from meadow.scene import build_scene
from meadow.stage import configure_camera

# GLFW key codes (passed through unchanged by MuJoCo)
KEY_SPACE = 32


def run_view(config: Config | None = None):
    """Open the viewer and drift clouds once per frame until the window closes."""
    if config is None:
        config = Config()

    print("Building scene...")
    scene = build_scene(config)
    print(describe_world(scene.world, seed=config.seed))
    print()
    print("Controls: Space=pause/resume clouds")

    paused = False

    def on_key(keycode):
        nonlocal paused
        if keycode == KEY_SPACE:
            paused = not paused

    period = 1.0 / config.viewer.frame_rate

    with mujoco.viewer.launch_passive(
        scene.model, scene.data, key_callback=on_key
    ) as viewer:
        configure_camera(viewer.cam, config.camera)
        while viewer.is_running():
            frame_start = time.time()
            if not paused:
                scene.step()

            viewer.sync()
            elapsed = time.time() - frame_start
            remaining = period - elapsed
            if remaining > 0:
                time.sleep(remaining)
