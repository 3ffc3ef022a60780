"""Asynchronous loading of external assets: textures, sky and the windmill.

Loads run on a small thread pool while the scene is being populated. Each
load reports back through a completion callback; a load that fails is
logged and simply leaves its asset out of the scene.

Usage:
    loader = AssetLoader(config.assets).start()
    world = populate(config)          # does not wait for assets
    assets = loader.collect()         # waits for outstanding loads
    assets.textures.get("ground")     # TextureAsset or None
    assets.model                      # ModelAsset or None
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path

import numpy as np
import trimesh
from trimesh.resolvers import FilePathResolver
from PIL import Image

from meadow.config import AssetConfig
from meadow.primitives import WHITE, y_up_to_z_up

log = logging.getLogger(__name__)

GROUND = "ground"
LEAVES = "leaves"
SKY = "sky"


@dataclass(frozen=True)
class TextureAsset:
    """A decoded texture, re-encoded as PNG for MuJoCo."""

    role: str
    path: str
    width: int
    height: int


@dataclass(frozen=True)
class MeshPart:
    """One material group of the imported model (Z-up vertices)."""

    vertices: np.ndarray
    faces: np.ndarray
    rgba: tuple[float, float, float, float]


@dataclass(frozen=True)
class ModelAsset:
    name: str
    parts: tuple[MeshPart, ...]
    yaw: float = 0.0


@dataclass
class LoadedAssets:
    """Whatever finished loading. Missing entries mean the load failed."""

    textures: dict[str, TextureAsset] = field(default_factory=dict)
    model: ModelAsset | None = None


def resolve_path(root: str, path: str) -> Path:
    p = Path(path)
    return p if p.is_absolute() else Path(root) / p


def load_texture(role: str, source: Path, cache_dir: Path) -> TextureAsset:
    """Decode any Pillow-readable image and write it out as RGB PNG."""
    with Image.open(source) as img:
        rgb = img.convert("RGB")
    if role == SKY:
        # Skybox faces must be square; keep the middle of wide panoramas
        side = min(rgb.width, rgb.height)
        left = (rgb.width - side) // 2
        top = (rgb.height - side) // 2
        rgb = rgb.crop((left, top, left + side, top + side))
    cache_dir.mkdir(parents=True, exist_ok=True)
    out = cache_dir / f"{role}.png"
    rgb.save(out)
    log.info("Loaded %s texture %s (%dx%d)", role, source, rgb.width, rgb.height)
    return TextureAsset(
        role=role, path=str(out.resolve()), width=rgb.width, height=rgb.height
    )


def _part_rgba(mesh: trimesh.Trimesh) -> tuple[float, float, float, float]:
    """Main color of a mesh's material, falling back to its vertex colors."""
    material = getattr(mesh.visual, "material", None)
    color = getattr(material, "main_color", None)
    if color is None:
        color = getattr(mesh.visual, "main_color", None)
    if color is None:
        return WHITE
    rgba = np.asarray(color, dtype=np.float64)[:4] / 255.0
    return tuple(float(c) for c in rgba)


def load_model(obj_path: Path, mtl_path: Path, yaw: float = 0.0) -> ModelAsset:
    """Load an OBJ model with its companion MTL file.

    The material file is required: without it the model is not loaded at
    all. Vertices are converted from the file's Y-up frame to Z-up.
    """
    if not mtl_path.is_file():
        raise FileNotFoundError(f"material file not found: {mtl_path}")
    if not obj_path.is_file():
        raise FileNotFoundError(f"model file not found: {obj_path}")

    resolver = FilePathResolver(str(mtl_path.parent))
    scene = trimesh.load(str(obj_path), force="scene", resolver=resolver)

    parts: list[MeshPart] = []
    for mesh in scene.dump(concatenate=False):
        if not isinstance(mesh, trimesh.Trimesh) or len(mesh.faces) == 0:
            continue
        parts.append(
            MeshPart(
                vertices=y_up_to_z_up(mesh.vertices),
                faces=np.asarray(mesh.faces, dtype=np.int32),
                rgba=_part_rgba(mesh),
            )
        )
    if not parts:
        raise ValueError(f"no triangle meshes in {obj_path}")

    log.info("Loaded model %s (%d parts)", obj_path.name, len(parts))
    return ModelAsset(name=obj_path.stem, parts=tuple(parts), yaw=yaw)


class AssetLoader:
    """Runs asset loads on worker threads and keeps whatever succeeds."""

    def __init__(self, cfg: AssetConfig):
        self.cfg = cfg
        self._executor: ThreadPoolExecutor | None = None
        self._lock = threading.Lock()
        self._loaded = LoadedAssets()
        self._submitted = 0

    def start(self) -> AssetLoader:
        """Submit every configured load. Returns self for chaining."""
        if not self.cfg.enabled:
            log.info("Asset loading disabled")
            return self

        cfg = self.cfg
        cache = resolve_path(cfg.root, cfg.cache_dir)
        self._executor = ThreadPoolExecutor(
            max_workers=cfg.max_workers, thread_name_prefix="meadow-assets"
        )
        for role, rel in (
            (GROUND, cfg.ground_texture),
            (LEAVES, cfg.leaf_texture),
            (SKY, cfg.sky_texture),
        ):
            self._submit(role, load_texture, role, resolve_path(cfg.root, rel), cache)
        self._submit(
            "model",
            load_model,
            resolve_path(cfg.root, cfg.model_obj),
            resolve_path(cfg.root, cfg.model_mtl),
            cfg.model_yaw,
        )
        return self

    def _submit(self, label: str, fn, *args) -> None:
        future = self._executor.submit(fn, *args)
        self._submitted += 1
        future.add_done_callback(partial(self._on_done, label))

    def _on_done(self, label: str, future: Future) -> None:
        """Completion callback: record the asset, or log and drop it."""
        exc = future.exception()
        if exc is not None:
            log.warning("Asset '%s' not loaded: %s", label, exc)
            return
        result = future.result()
        with self._lock:
            if isinstance(result, TextureAsset):
                self._loaded.textures[result.role] = result
            else:
                self._loaded.model = result

    def collect(self) -> LoadedAssets:
        """Wait for outstanding loads and return what succeeded."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        with self._lock:
            log.info(
                "Assets ready: %d of %d loaded",
                len(self._loaded.textures) + (self._loaded.model is not None),
                self._submitted,
            )
            return self._loaded
