"""Per-frame cloud drift.

Clouds slide along +x and wrap from +limit back to -limit. Each cloud has
its own speed, set from its creation index, so later clouds move faster.
"""

from __future__ import annotations

from meadow.config import CloudConfig
from meadow.world import Cloud


def cloud_speed(index: int, cfg: CloudConfig) -> float:
    """Drift speed (units per frame) for the cloud created at ``index``."""
    return cfg.speed_step * index + cfg.base_speed


def drift_clouds(clouds: list[Cloud], wrap_limit: float) -> None:
    """Advance every cloud lobe by one frame.

    A lobe past +wrap_limit jumps to -wrap_limit; that jump is the lobe's
    whole move for the frame.
    """
    for cloud in clouds:
        for lobe in cloud.lobes:
            if lobe.pos[0] > wrap_limit:
                lobe.pos[0] = -wrap_limit
            else:
                lobe.pos[0] += cloud.speed
