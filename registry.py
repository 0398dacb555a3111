"""Registry of live double pendulums.

An arena keyed by stable integer handles. Handles increase monotonically
and are never reused, even across reset_all(), so a stale handle can
never alias a newer pendulum.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from simulation import DoublePendulum, PendulumTraits, SimulationConfig

logger = logging.getLogger(__name__)

# Bulk spawn count bound to the "spawn many" input
DEFAULT_SPAWN_MANY = 10


class SimulationRegistry:
    """Owns the authoritative set of live pendulums.

    Random angles and colors come from an injected numpy Generator so a
    fixed seed reproduces the same pendulums.
    """

    def __init__(self, config: SimulationConfig | None = None,
                 rng: np.random.Generator | None = None):
        self.config = config if config is not None else SimulationConfig()
        self.rng = rng if rng is not None else np.random.default_rng()
        self._pendulums: dict[int, DoublePendulum] = {}
        self._next_handle = 0

    # -- creation --

    def spawn_one(self) -> DoublePendulum:
        """Create one pendulum at rest with random angles in [0, 2pi)."""
        inner_angle, outer_angle = self.rng.uniform(0.0, 2 * math.pi, size=2)
        red, green, blue = self.rng.random(3)
        return self.add(
            float(inner_angle), float(outer_angle),
            traits=PendulumTraits(
                mass=self.config.spawn_mass,
                color=(float(red), float(green), float(blue)),
            ),
        )

    def spawn_many(self, n: int = DEFAULT_SPAWN_MANY) -> list[DoublePendulum]:
        """Spawn n pendulums; used for bulk stress spawning."""
        if n < 0:
            raise ValueError(f"cannot spawn a negative count, got {n!r}")
        spawned = [self.spawn_one() for _ in range(n)]
        logger.info("Spawned %d pendulums (%d live)", n, len(self))
        return spawned

    def add(self, inner_angle, outer_angle, inner_length=None,
            outer_length=None, traits=None) -> DoublePendulum:
        """Insert a pendulum with explicit initial angles.

        Lengths default to config.spawn_length. Raises InvalidPendulumError
        for non-positive lengths or masses.
        """
        if inner_length is None:
            inner_length = self.config.spawn_length
        if outer_length is None:
            outer_length = self.config.spawn_length
        handle = self._next_handle
        pendulum = DoublePendulum.create(
            inner_angle, outer_angle,
            inner_length=inner_length,
            outer_length=outer_length,
            traits=traits,
            trail_capacity=self.config.trail_capacity,
            handle=handle,
        )
        self._next_handle += 1
        self._pendulums[handle] = pendulum
        logger.debug(
            "Spawned pendulum %d (theta1=%.3f, theta2=%.3f)",
            handle, inner_angle, outer_angle,
        )
        return pendulum

    # -- removal --

    def reset_all(self) -> int:
        """Remove every pendulum. Returns how many were removed."""
        removed = len(self._pendulums)
        self._pendulums.clear()
        logger.info("Reset: removed %d pendulums", removed)
        return removed

    # -- access --

    def for_each(self, fn):
        """Call fn(pendulum) for every live pendulum in insertion order."""
        for pendulum in list(self._pendulums.values()):
            fn(pendulum)

    def get(self, handle: int) -> DoublePendulum | None:
        return self._pendulums.get(handle)

    def handles(self) -> list[int]:
        return list(self._pendulums)

    def __iter__(self):
        return iter(list(self._pendulums.values()))

    def __len__(self):
        return len(self._pendulums)

    def __contains__(self, handle):
        return handle in self._pendulums
