"""Scene composer — maps the populated world onto a MuJoCo model.

Two-phase workflow:
  1. **Build time** — SceneComposer.prepare_spec(spec, world, assets, config)
     adds textures, materials, meshes and one geom per placed object to an
     MjSpec. Static objects hang off the world body; cloud lobes each get a
     mocap body so they can move without recompiling.
  2. **Runtime** — SceneComposer(model, data, world).apply() copies the
     lobes' current positions into data.mocap_pos and runs mj_forward.

Naming convention:
    Geoms:        <shape>_<index>          (PlacedObject.name)
    Mocap bodies: <shape>_<index>_body
    Meshes:       mesh_0, mesh_1, ...      (shared by identical shape + scale)

Every geom is visual only (contype = conaffinity = 0).

Usage:
    spec = mujoco.MjSpec()
    SceneComposer.prepare_spec(spec, world, assets, config)
    model = spec.compile()
    data = mujoco.MjData(model)

    composer = SceneComposer(model, data, world)
    drift_clouds(world.clouds, config.clouds.wrap_limit)
    composer.apply()
"""

from __future__ import annotations

from dataclasses import dataclass

import mujoco
import numpy as np

from meadow.assets import GROUND, LEAVES, LoadedAssets, ModelAsset, TextureAsset
from meadow.config import Config
from meadow.meshes import MESH_SHAPES, scaled_mesh
from meadow.primitives import Shape, euler_to_quat, y_up_scale_to_z_up, y_up_to_z_up
from meadow.world import PlacedObject, World


def body_name(obj: PlacedObject) -> str:
    return f"{obj.name}_body"


@dataclass
class _MocapSlot:
    """A placed object driven through a mocap body."""

    obj: PlacedObject
    mocap_id: int


class _MeshRegistry:
    """Adds each distinct (geometry, scale) mesh to the MjSpec once."""

    def __init__(self, spec):
        self.spec = spec
        self._names: dict[tuple, str] = {}
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def get(self, obj: PlacedObject) -> str:
        scale = tuple(float(s) for s in obj.scale)
        key = (obj.geometry, scale)
        name = self._names.get(key)
        if name is None:
            verts, faces, texcoords = scaled_mesh(obj.geometry, scale)
            name = self.add(verts, faces, texcoords)
            self._names[key] = name
        return name

    def add(self, verts: np.ndarray, faces: np.ndarray, texcoords=None) -> str:
        mesh = self.spec.add_mesh()
        mesh.name = f"mesh_{self._count}"
        self._count += 1
        mesh.uservert = np.asarray(verts, dtype=np.float64).ravel().tolist()
        mesh.userface = np.asarray(faces, dtype=np.int32).ravel().tolist()
        if texcoords is not None:
            mesh.usertexcoord = np.asarray(texcoords, dtype=np.float64).ravel().tolist()
        return mesh.name


def _add_textured_material(spec, texture: TextureAsset, repeat) -> None:
    tex = spec.add_texture()
    tex.name = texture.role
    tex.type = mujoco.mjtTexture.mjTEXTURE_2D
    tex.file = texture.path

    mat = spec.add_material()
    mat.name = texture.role
    textures = [""] * int(mujoco.mjtTextureRole.mjNTEXROLE)
    textures[int(mujoco.mjtTextureRole.mjTEXROLE_RGB)] = texture.role
    mat.textures = textures
    mat.texrepeat = [float(repeat[0]), float(repeat[1])]


def _visual_only(geom) -> None:
    geom.contype = 0
    geom.conaffinity = 0


class SceneComposer:
    """Writes the world into an MjSpec, then keeps cloud mocap bodies in sync."""

    def __init__(self, model: mujoco.MjModel, data: mujoco.MjData, world: World):
        self.model = model
        self.data = data
        self.world = world
        self._slots: list[_MocapSlot] = []
        self._discover_slots()

    @staticmethod
    def prepare_spec(
        spec,
        world: World,
        assets: LoadedAssets,
        config: Config,
    ) -> None:
        """Add every placed object (and the imported model, if any) to an MjSpec.

        Texture roles whose image failed to load fall back to the object's
        flat color.
        """
        repeats = {
            GROUND: config.assets.ground_repeat,
            LEAVES: config.assets.leaf_repeat,
        }
        materials: set[str] = set()
        for role, repeat in repeats.items():
            texture = assets.textures.get(role)
            if texture is not None:
                _add_textured_material(spec, texture, repeat)
                materials.add(role)

        meshes = _MeshRegistry(spec)
        animated = {id(lobe) for lobe in world.cloud_lobes}

        for obj in world.objects:
            pos = y_up_to_z_up(obj.pos)
            if id(obj) in animated:
                body = spec.worldbody.add_body()
                body.name = body_name(obj)
                body.mocap = True
                body.pos = pos.tolist()
                geom = body.add_geom()
                geom.pos = [0.0, 0.0, 0.0]
            else:
                geom = spec.worldbody.add_geom()
                geom.pos = pos.tolist()

            geom.name = obj.name
            geom.rgba = list(obj.rgba)
            if obj.texture in materials:
                geom.material = obj.texture
            _visual_only(geom)
            _set_shape(geom, obj, meshes)

        if assets.model is not None:
            _add_model(spec, assets.model, meshes)

    @property
    def num_animated(self) -> int:
        return len(self._slots)

    def _discover_slots(self):
        """Find the mocap body of every cloud lobe."""
        for lobe in self.world.cloud_lobes:
            name = body_name(lobe)
            body_id = mujoco.mj_name2id(self.model, mujoco.mjtObj.mjOBJ_BODY, name)
            if body_id < 0:
                raise ValueError(f"Model has no mocap body '{name}'")
            mocap_id = int(self.model.body_mocapid[body_id])
            if mocap_id < 0:
                raise ValueError(f"Body '{name}' is not a mocap body")
            self._slots.append(_MocapSlot(lobe, mocap_id))

    # -------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------

    def apply(self):
        """Write animated object positions into mocap slots, then run kinematics."""
        for slot in self._slots:
            self.data.mocap_pos[slot.mocap_id] = y_up_to_z_up(slot.obj.pos)
        mujoco.mj_forward(self.model, self.data)


def _set_shape(geom, obj: PlacedObject, meshes: _MeshRegistry) -> None:
    """Geom type and size for one placed object (sizes become half extents)."""
    size = np.asarray(obj.geometry.size, dtype=np.float64)
    scale = np.abs(obj.scale)
    shape = obj.geometry.shape

    if shape == Shape.BOX:
        geom.type = mujoco.mjtGeom.mjGEOM_BOX
        geom.size = y_up_scale_to_z_up(size * scale / 2).tolist()
    elif shape == Shape.CYLINDER:
        geom.type = mujoco.mjtGeom.mjGEOM_CYLINDER
        radius = size[0] * max(scale[0], scale[2])
        geom.size = [radius, size[1] * scale[1] / 2, 0.0]
    elif shape in MESH_SHAPES:
        geom.type = mujoco.mjtGeom.mjGEOM_MESH
        geom.meshname = meshes.get(obj)
    else:
        raise ValueError(f"Unsupported shape {shape}")


def _add_model(spec, model: ModelAsset, meshes: _MeshRegistry) -> None:
    """Imported model: one body at the origin, rotated by the model's yaw."""
    body = spec.worldbody.add_body()
    body.name = model.name
    body.quat = euler_to_quat(0.0, 0.0, model.yaw).tolist()
    for i, part in enumerate(model.parts):
        geom = body.add_geom()
        geom.name = f"{model.name}_part{i}"
        geom.type = mujoco.mjtGeom.mjGEOM_MESH
        geom.meshname = meshes.add(part.vertices, part.faces)
        geom.rgba = list(part.rgba)
        _visual_only(geom)


# ---------------------------------------------------------------------------
# Scene description & identity
# ---------------------------------------------------------------------------


def scene_id(seed: int) -> str:
    """Short hex identifier for a scene seed (6 chars)."""
    return f"{seed & 0xFFFFFF:06x}"


def _fmt_pos(obj: PlacedObject) -> str:
    return f"({obj.x:+.1f}, {obj.y:+.1f}, {obj.z:+.1f})"


def describe_world(world: World, seed: int | None = None) -> str:
    """Multi-line textual description of a populated world.

    Example output:
        Scene #00002a (seed=42)  851 objects
          ground: box at (+0.0, +0.0, +0.0) scale (100, 0.1, 100)
          clouds: 15 (48 lobes)
            [0] 3 bumps at (-12.0, +17.0, +41.0) speed 0.0020
          trees: 200
          centerpiece: tree at (+22.0, +2.0, -9.0) with 200 ornaments
    """
    lines = []

    if seed is not None:
        header = f"Scene #{scene_id(seed)} (seed={seed})  {len(world.objects)} objects"
    else:
        header = f"Scene  {len(world.objects)} objects"
    lines.append(header)

    if world.ground is not None:
        sx, sy, sz = world.ground.scale
        lines.append(
            f"  ground: {world.ground.geometry.shape.value} at {_fmt_pos(world.ground)}"
            f" scale ({sx:g}, {sy:g}, {sz:g})"
        )

    lines.append(f"  clouds: {len(world.clouds)} ({len(world.cloud_lobes)} lobes)")
    for i, cloud in enumerate(world.clouds):
        first = cloud.lobes[0]
        lines.append(
            f"    [{i}] {cloud.bump_count} bumps at {_fmt_pos(first)}"
            f" speed {cloud.speed:.4f}"
        )

    lines.append(f"  trees: {len(world.trees)}")
    if world.centerpiece is not None:
        trunk = world.centerpiece.tree.trunk
        lines.append(
            f"  centerpiece: tree at {_fmt_pos(trunk)}"
            f" with {len(world.centerpiece.ornaments)} ornaments"
        )

    return "\n".join(lines)
