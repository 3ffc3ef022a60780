"""Shared fixtures: tiny on-disk assets written under pytest tmp dirs."""

import pytest
from PIL import Image

# Unit cube stretched to 2 along Y, outward-facing triangles, one red material
CUBE_OBJ = """\
mtllib {mtl}
v 0 0 0
v 1 0 0
v 1 2 0
v 0 2 0
v 0 0 1
v 1 0 1
v 1 2 1
v 0 2 1
vt 0 0
vt 1 0
vt 1 1
vt 0 1
usemtl red
f 1/1 4/4 3/3
f 1/1 3/3 2/2
f 5/1 6/2 7/3
f 5/1 7/3 8/4
f 1/1 2/2 6/3
f 1/1 6/3 5/4
f 4/1 8/2 7/3
f 4/1 7/3 3/4
f 1/1 5/2 8/3
f 1/1 8/3 4/4
f 2/1 3/2 7/3
f 2/1 7/3 6/4
"""

CUBE_MTL = """\
newmtl red
Ka 0 0 0
Kd 1 0 0
Ks 0 0 0
d 1
"""


def _write_image(path, size=(16, 8), color=(40, 160, 40)):
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color).save(path)
    return path


def _write_model(root, name="windmill_001"):
    textures = root / "textures"
    textures.mkdir(parents=True, exist_ok=True)
    obj = textures / f"{name}.obj"
    mtl = textures / f"{name}.mtl"
    obj.write_text(CUBE_OBJ.format(mtl=mtl.name))
    mtl.write_text(CUBE_MTL)
    return obj, mtl


@pytest.fixture(scope="session")
def write_image():
    """Writer for a solid-color RGB image: write_image(path, size, color)."""
    return _write_image


@pytest.fixture(scope="session")
def write_model():
    """Writer for the cube OBJ + MTL under <root>/textures: returns (obj, mtl)."""
    return _write_model
