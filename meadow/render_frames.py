"""Render the meadow offscreen, one PNG per frame, optionally as a GIF.

Usage:
    uv run python -m meadow.render_frames                     # 120 frames to renders/
    uv run python -m meadow.render_frames --frames 30 --gif   # plus renders/meadow.gif
    uv run python -m meadow.render_frames --seed 42 --every 10
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import mujoco
from PIL import Image

from meadow.composer import describe_world
from meadow.config import Config
from meadow.scene import Scene, build_scene
from meadow.stage import make_camera

log = logging.getLogger(__name__)


def render_frame(scene: Scene, renderer: mujoco.Renderer, cam: mujoco.MjvCamera):
    """Current scene state as an (H, W, 3) uint8 array."""
    renderer.update_scene(scene.data, cam)
    return renderer.render().copy()


def render_frames(
    config: Config,
    n_frames: int,
    out_dir: Path,
    every: int = 1,
    gif: bool = False,
) -> list[Path]:
    """Step the scene n_frames times, saving every ``every``-th frame.

    Returns the written PNG paths (and the GIF path last, if requested).
    """
    out_dir.mkdir(parents=True, exist_ok=True)
    scene = build_scene(config)
    print(describe_world(scene.world, seed=config.seed))

    width, height = config.viewer.render_width, config.viewer.render_height
    cam = make_camera(config.camera)
    written: list[Path] = []
    images: list[Image.Image] = []

    with mujoco.Renderer(scene.model, height=height, width=width) as renderer:
        for i in range(n_frames):
            scene.step()
            if i % every:
                continue
            img = Image.fromarray(render_frame(scene, renderer, cam))
            path = out_dir / f"frame_{i:05d}.png"
            img.save(path)
            written.append(path)
            if gif:
                images.append(img)

    if gif and images:
        gif_path = out_dir / "meadow.gif"
        frame_ms = int(1000 * every / config.viewer.frame_rate)
        images[0].save(
            gif_path,
            save_all=True,
            append_images=images[1:],
            duration=max(frame_ms, 20),
            loop=0,
        )
        written.append(gif_path)

    log.info("Wrote %d files to %s", len(written), out_dir)
    return written


def main():
    parser = argparse.ArgumentParser(description="Render meadow frames offscreen")
    parser.add_argument("--frames", type=int, default=120, help="Frames to simulate")
    parser.add_argument("--every", type=int, default=1, help="Save every Nth frame")
    parser.add_argument("--seed", type=int, default=None, help="Scene seed")
    parser.add_argument("--out", type=str, default="renders", help="Output directory")
    parser.add_argument("--gif", action="store_true", help="Also write an animated GIF")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    config = Config(seed=args.seed)
    paths = render_frames(config, args.frames, Path(args.out), args.every, args.gif)
    print(f"Saved {len(paths)} files to {args.out}/")


if __name__ == "__main__":
    main()
