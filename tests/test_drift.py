"""Tests for per-frame cloud drift."""

import pytest

from meadow.config import CloudConfig
from meadow.drift import cloud_speed, drift_clouds
from meadow.primitives import CLOUD_WHITE, HEMISPHERE_GEOMETRY
from meadow.world import Cloud, World


def _cloud_at(x: float, speed: float, lobes: int = 2) -> Cloud:
    world = World()
    cloud = Cloud(speed=speed)
    for _ in range(lobes):
        cloud.lobes.append(world.make_instance(HEMISPHERE_GEOMETRY, CLOUD_WHITE, (x, 17, 3)))
    return cloud


class TestCloudSpeed:
    def test_first_cloud(self):
        assert cloud_speed(0, CloudConfig()) == pytest.approx(0.002)

    def test_gradient(self):
        cfg = CloudConfig()
        assert cloud_speed(1, cfg) == pytest.approx(0.0025)
        assert cloud_speed(14, cfg) == pytest.approx(0.009)


class TestDrift:
    def test_moves_by_speed(self):
        cloud = _cloud_at(10.0, 0.5)
        drift_clouds([cloud], 60.0)
        assert all(lobe.x == pytest.approx(10.5) for lobe in cloud.lobes)

    def test_only_x_changes(self):
        cloud = _cloud_at(0.0, 0.25)
        drift_clouds([cloud], 60.0)
        for lobe in cloud.lobes:
            assert (lobe.y, lobe.z) == (17.0, 3.0)

    @pytest.mark.parametrize("speed", [0.002, 0.009, 1.0])
    def test_wraps_past_limit(self, speed):
        cloud = _cloud_at(61.0, speed)
        drift_clouds([cloud], 60.0)
        assert all(lobe.x == -60.0 for lobe in cloud.lobes)

    def test_at_limit_still_moves(self):
        cloud = _cloud_at(60.0, 0.5)
        drift_clouds([cloud], 60.0)
        assert cloud.lobes[0].x == pytest.approx(60.5)
        drift_clouds([cloud], 60.0)
        assert cloud.lobes[0].x == -60.0

    def test_each_cloud_uses_its_own_speed(self):
        slow = _cloud_at(0.0, 0.002)
        fast = _cloud_at(0.0, 0.009)
        for _ in range(100):
            drift_clouds([slow, fast], 60.0)
        assert slow.lobes[0].x == pytest.approx(0.2)
        assert fast.lobes[0].x == pytest.approx(0.9)
