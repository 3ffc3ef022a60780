"""Tests for asset loading: textures via Pillow, the OBJ model via trimesh.

Every test writes its own tiny assets under tmp_path.
"""

import logging

import numpy as np
import pytest
from PIL import Image

from meadow.assets import (
    GROUND,
    LEAVES,
    SKY,
    AssetLoader,
    load_model,
    load_texture,
)
from meadow.config import AssetConfig


def _config(root, **overrides) -> AssetConfig:
    return AssetConfig(root=str(root), cache_dir=str(root / "cache"), **overrides)


# ---------------------------------------------------------------------------
# Textures
# ---------------------------------------------------------------------------


class TestTextures:
    def test_jpeg_becomes_png(self, tmp_path, write_image):
        source = write_image(tmp_path / "grass.jpg")
        tex = load_texture(GROUND, source, tmp_path / "cache")
        assert tex.role == GROUND
        assert tex.path.endswith("ground.png")
        assert (tex.width, tex.height) == (16, 8)
        with Image.open(tex.path) as img:
            assert img.format == "PNG"
            assert img.mode == "RGB"

    def test_rgba_source_is_flattened(self, tmp_path):
        source = tmp_path / "leaves.png"
        Image.new("RGBA", (4, 4), (10, 20, 30, 128)).save(source)
        tex = load_texture(LEAVES, source, tmp_path / "cache")
        with Image.open(tex.path) as img:
            assert img.mode == "RGB"

    def test_sky_is_cropped_square(self, tmp_path, write_image):
        source = write_image(tmp_path / "sky3.jpg", size=(32, 12))
        tex = load_texture(SKY, source, tmp_path / "cache")
        assert (tex.width, tex.height) == (12, 12)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_texture(GROUND, tmp_path / "nope.jpg", tmp_path / "cache")


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------


class TestModel:
    def test_loads_obj_with_material(self, tmp_path, write_model):
        obj, mtl = write_model(tmp_path)
        model = load_model(obj, mtl, yaw=-np.pi / 2)
        assert model.name == "windmill_001"
        assert model.yaw == pytest.approx(-np.pi / 2)
        assert len(model.parts) >= 1
        assert sum(len(p.faces) for p in model.parts) == 12

    def test_material_color(self, tmp_path, write_model):
        obj, mtl = write_model(tmp_path)
        model = load_model(obj, mtl)
        for part in model.parts:
            r, g, b, a = part.rgba
            assert all(0.0 <= c <= 1.0 for c in part.rgba)
            assert r > g and r > b

    def test_vertices_converted_to_z_up(self, tmp_path, write_model):
        obj, mtl = write_model(tmp_path)
        model = load_model(obj, mtl)
        verts = np.vstack([p.vertices for p in model.parts])
        # Cube is 2 tall along file Y, 1 deep along file Z
        assert verts[:, 2].min() == pytest.approx(0.0)
        assert verts[:, 2].max() == pytest.approx(2.0)
        assert verts[:, 1].min() == pytest.approx(-1.0)
        assert verts[:, 1].max() == pytest.approx(0.0)

    def test_missing_material_means_no_model(self, tmp_path, write_model):
        obj, mtl = write_model(tmp_path)
        mtl.unlink()
        with pytest.raises(FileNotFoundError):
            load_model(obj, mtl)


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


class TestAssetLoader:
    def test_disabled_loads_nothing(self, tmp_path):
        assets = AssetLoader(_config(tmp_path, enabled=False)).start().collect()
        assert assets.textures == {}
        assert assets.model is None

    def test_missing_assets_never_raise(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING, logger="meadow.assets"):
            assets = AssetLoader(_config(tmp_path)).start().collect()
        assert assets.textures == {}
        assert assets.model is None
        warnings = [
            r
            for r in caplog.records
            if r.name == "meadow.assets" and r.levelno == logging.WARNING
        ]
        assert len(warnings) == 4

    def test_loads_everything_present(self, tmp_path, write_image, write_model):
        write_image(tmp_path / "textures" / "highGrass.jpg")
        write_image(tmp_path / "textures" / "leaves.jpg")
        write_image(tmp_path / "sky3.jpg", size=(20, 10))
        write_model(tmp_path)

        assets = AssetLoader(_config(tmp_path)).start().collect()
        assert set(assets.textures) == {GROUND, LEAVES, SKY}
        assert assets.model is not None
        assert assets.model.yaw == pytest.approx(-np.pi / 2)

    def test_partial_failure_keeps_the_rest(self, tmp_path, write_image, write_model):
        write_image(tmp_path / "textures" / "highGrass.jpg")
        obj, mtl = write_model(tmp_path)
        mtl.unlink()

        assets = AssetLoader(_config(tmp_path)).start().collect()
        assert set(assets.textures) == {GROUND}
        assert assets.model is None

    def test_collect_before_start(self, tmp_path):
        assets = AssetLoader(_config(tmp_path)).collect()
        assert assets.textures == {}
