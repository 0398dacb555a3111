"""Simulation runner: fixed-step scheduling, input commands, render pass.

The render loop reports elapsed real time through advance(); the physics
consumes it in whole steps of config.dt so the simulation rate stays
independent of the display rate. The trail timer is fed the same real
time but fires on its own period.
"""

from __future__ import annotations

import logging
from typing import Protocol

import numpy as np

from registry import DEFAULT_SPAWN_MANY, SimulationRegistry
from simulation import SimulationConfig, integrate
from trail import TrailSampler

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    """Drawing surface the render pass calls out to."""

    def draw_segment(self, start_pos: tuple, end_pos: tuple, color: tuple) -> None:
        """Draw one straight rod from start_pos to end_pos."""
        ...

    def draw_path(self, positions: list, color: tuple) -> None:
        """Draw positions (oldest first) as one connected path."""
        ...


class FixedTimestep:
    """Accumulator that turns variable frame times into fixed steps.

    At most max_steps are returned per call; any remaining backlog is
    dropped so a stalled frame cannot snowball into ever longer frames.
    """

    def __init__(self, dt, max_steps=8):
        if not dt > 0:
            raise ValueError(f"dt must be positive, got {dt!r}")
        self.dt = dt
        self.max_steps = max_steps
        self.accumulator = 0.0
        self.dropped_time = 0.0

    def advance(self, elapsed) -> int:
        """Add elapsed time and return how many whole steps are due."""
        if elapsed < 0:
            raise ValueError(f"elapsed time cannot be negative, got {elapsed!r}")
        self.accumulator += elapsed
        steps = int(self.accumulator // self.dt)
        if steps > self.max_steps:
            dropped = (steps - self.max_steps) * self.dt
            self.dropped_time += dropped
            logger.debug(
                "Physics behind by %d steps, dropping %.4f s",
                steps - self.max_steps, dropped,
            )
            steps = self.max_steps
            self.accumulator -= dropped
        self.accumulator -= steps * self.dt
        return steps

    @property
    def alpha(self) -> float:
        """Fraction of a step left in the accumulator."""
        return self.accumulator / self.dt


class SimulationRunner:
    """Ties the registry, integrator and trail sampler to one clock."""

    def __init__(self, config: SimulationConfig | None = None,
                 seed: int | None = None,
                 registry: SimulationRegistry | None = None):
        self.config = (config if config is not None else SimulationConfig()).validate()
        if registry is None:
            registry = SimulationRegistry(self.config, np.random.default_rng(seed))
        self.registry = registry
        self.clock = FixedTimestep(self.config.dt, self.config.max_steps_per_frame)
        self.sampler = TrailSampler(self.config.trail_period)
        self.sim_time = 0.0
        self.steps_run = 0
        self.degenerate_steps = 0

    # -- ticking --

    def step(self):
        """Run exactly one physics step on every live pendulum."""
        self.degenerate_steps += integrate(self.registry, self.config.dt, self.config)
        self.steps_run += 1
        self.sim_time += self.config.dt

    def advance(self, elapsed) -> int:
        """Consume elapsed real time: fixed physics steps, then trail sampling.

        Returns the number of physics steps run.
        """
        steps = self.clock.advance(elapsed)
        for _ in range(steps):
            self.step()
        self.sampler.advance(elapsed, self.registry)
        return steps

    # -- input commands --

    def reset(self):
        self.registry.reset_all()

    def spawn_one(self):
        pendulum = self.registry.spawn_one()
        logger.info("Spawned pendulum %d (%d live)", pendulum.handle, len(self.registry))
        return pendulum

    def spawn_many(self, n=DEFAULT_SPAWN_MANY):
        return self.registry.spawn_many(n)

    def toggle_trails(self):
        return self.config.toggle_trails()

    def toggle_pendulum_draw(self):
        return self.config.toggle_pendulum_draw()

    def toggle_damping(self):
        return self.config.toggle_damping()

    # -- rendering --

    def render(self, renderer: Renderer):
        """Draw every pendulum, honoring the draw toggles."""
        for pendulum in self.registry:
            color = pendulum.traits.color
            if self.config.draw_trails and len(pendulum.trail) > 1:
                renderer.draw_path(pendulum.trail.snapshot(), color)
            if self.config.draw_pendulums:
                renderer.draw_segment(
                    pendulum.inner.start_pos, pendulum.inner.end_pos, color,
                )
                renderer.draw_segment(
                    pendulum.outer.start_pos, pendulum.outer.end_pos, color,
                )
