"""Double pendulum physics engine.

Holds the per-pendulum state model, the simulation configuration, and the
explicit fixed-step integrator that advances every live pendulum. Angles
are measured from the downward vertical and are never wrapped.

A high-accuracy SciPy reference solver and an energy function are kept
alongside for diagnostics; the live loop only uses step_pendulum().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np
from scipy.integrate import solve_ivp

from trail import TrailBuffer

logger = logging.getLogger(__name__)

# Below this magnitude the shared denominator is treated as singular
DEGENERATE_EPSILON = 1e-12


class InvalidPendulumError(ValueError):
    """Raised when a pendulum is built with a non-positive length or mass."""


class ConfigError(ValueError):
    """Raised when SimulationConfig holds unusable values."""


@dataclass
class SimulationConfig:
    """Physics constants plus the three runtime toggles.

    The toggles are flipped by input events between frames and read every
    tick; nothing else in the config changes after startup.
    """

    gravity: float = 9.8
    dt: float = 1.0 / 64.0
    damping_coefficient: float = 0.1
    trail_period: float = 0.06
    trail_capacity: int = 100
    spawn_length: float = 10.0
    spawn_mass: float = 1.0
    max_steps_per_frame: int = 8

    draw_trails: bool = True
    draw_pendulums: bool = False
    damping_enabled: bool = False

    def validate(self):
        """Raise ConfigError if any constant is out of range."""
        for name in ("dt", "trail_period", "spawn_length", "spawn_mass"):
            value = getattr(self, name)
            if not value > 0:
                raise ConfigError(f"{name} must be positive, got {value!r}")
        if self.trail_capacity < 1:
            raise ConfigError(
                f"trail_capacity must be at least 1, got {self.trail_capacity!r}"
            )
        if self.max_steps_per_frame < 1:
            raise ConfigError(
                "max_steps_per_frame must be at least 1, "
                f"got {self.max_steps_per_frame!r}"
            )
        if self.damping_coefficient < 0:
            raise ConfigError(
                "damping_coefficient must be non-negative, "
                f"got {self.damping_coefficient!r}"
            )
        return self

    def toggle_trails(self) -> bool:
        self.draw_trails = not self.draw_trails
        logger.info("Trail drawing %s", "on" if self.draw_trails else "off")
        return self.draw_trails

    def toggle_pendulum_draw(self) -> bool:
        self.draw_pendulums = not self.draw_pendulums
        logger.info("Pendulum drawing %s", "on" if self.draw_pendulums else "off")
        return self.draw_pendulums

    def toggle_damping(self) -> bool:
        self.damping_enabled = not self.damping_enabled
        logger.info("Damping %s", "on" if self.damping_enabled else "off")
        return self.damping_enabled


@dataclass
class PendulumSegment:
    """One rigid link. Positions are (x, y) with y pointing up."""

    length: float
    angle: float
    angular_velocity: float = 0.0
    angular_acceleration: float = 0.0
    start_pos: tuple = (0.0, 0.0)
    end_pos: tuple = (0.0, 0.0)

    def __post_init__(self):
        if not self.length > 0:
            raise InvalidPendulumError(
                f"segment length must be positive, got {self.length!r}"
            )


@dataclass(frozen=True)
class PendulumTraits:
    """Mass and display color shared by both segments.

    ``outer_mass`` defaults to ``mass``; the color is opaque to the physics.
    """

    mass: float = 1.0
    color: tuple = (1.0, 1.0, 1.0)
    outer_mass: float | None = None

    def __post_init__(self):
        for value in (self.mass, self.outer_mass):
            if value is not None and not value > 0:
                raise InvalidPendulumError(
                    f"pendulum mass must be positive, got {value!r}"
                )

    @property
    def m1(self) -> float:
        return self.mass

    @property
    def m2(self) -> float:
        return self.mass if self.outer_mass is None else self.outer_mass


@dataclass
class DoublePendulum:
    """A chained pair of segments plus its traits and tip trail."""

    inner: PendulumSegment
    outer: PendulumSegment
    traits: PendulumTraits = field(default_factory=PendulumTraits)
    trail: TrailBuffer = field(default_factory=TrailBuffer)
    handle: int = -1
    degenerate_ticks: int = 0

    @classmethod
    def create(cls, inner_angle, outer_angle, inner_length=10.0,
               outer_length=10.0, traits=None, trail_capacity=100,
               handle=-1):
        """Build a pendulum at rest with positions matching its angles."""
        pendulum = cls(
            inner=PendulumSegment(length=inner_length, angle=inner_angle),
            outer=PendulumSegment(length=outer_length, angle=outer_angle),
            traits=traits if traits is not None else PendulumTraits(),
            trail=TrailBuffer(trail_capacity),
            handle=handle,
        )
        update_positions(pendulum)
        return pendulum

    @property
    def tip(self) -> tuple:
        """Outer end position, the point traced by the trail."""
        return self.outer.end_pos

    @property
    def state(self) -> tuple:
        """(theta1, theta2, omega1, omega2)."""
        return (
            self.inner.angle, self.outer.angle,
            self.inner.angular_velocity, self.outer.angular_velocity,
        )


def segment_offset(angle, length):
    """Vector from a segment's start to its end for the given angle."""
    return (float(length * np.sin(angle)), float(-length * np.cos(angle)))


def update_positions(pendulum):
    """Recompute both segments' positions from the current angles."""
    inner, outer = pendulum.inner, pendulum.outer
    inner.start_pos = (0.0, 0.0)
    inner.end_pos = segment_offset(inner.angle, inner.length)
    dx, dy = segment_offset(outer.angle, outer.length)
    outer.start_pos = inner.end_pos
    outer.end_pos = (outer.start_pos[0] + dx, outer.start_pos[1] + dy)


def angular_accelerations(state, m1, m2, l1, l2, g, damping=0.0):
    """Angular accelerations (alpha1, alpha2) of a double pendulum.

    Args:
        state: (theta1, theta2, omega1, omega2).
        m1, m2: Inner and outer point masses.
        l1, l2: Rod lengths.
        g: Gravitational acceleration.
        damping: Linear damping coefficient; each alpha loses damping * omega.

    Returns:
        (alpha1, alpha2) as floats, or None if the shared denominator is
        singular or either result is non-finite.
    """
    a1, a2, v1, v2 = (np.float64(x) for x in state)

    with np.errstate(all="ignore"):
        delta = a1 - a2
        sin_delta = np.sin(delta)
        cos_delta = np.cos(delta)
        common = 2 * m1 + m2 - m2 * np.cos(2 * a1 - 2 * a2)
        denom1 = l1 * common
        denom2 = l2 * common
        if not (np.isfinite(common)
                and abs(denom1) >= DEGENERATE_EPSILON
                and abs(denom2) >= DEGENERATE_EPSILON):
            return None

        alpha1 = (
            -g * (2 * m1 + m2) * np.sin(a1)
            - m2 * g * np.sin(a1 - 2 * a2)
            - 2 * sin_delta * m2 * (v2**2 * l2 + v1**2 * l1 * cos_delta)
        ) / denom1

        alpha2 = (
            2 * sin_delta * (
                v1**2 * l1 * (m1 + m2)
                + g * (m1 + m2) * np.cos(a1)
                + v2**2 * l2 * m2 * cos_delta
            )
        ) / denom2

        alpha1 = alpha1 - damping * v1
        alpha2 = alpha2 - damping * v2

    if not (np.isfinite(alpha1) and np.isfinite(alpha2)):
        return None
    return float(alpha1), float(alpha2)


def step_pendulum(pendulum, dt, config, damping_enabled=None):
    """Advance one pendulum by a single explicit step of size dt.

    Both accelerations come from the pre-step state. The inner segment is
    fully updated before the outer one so the outer start is the fresh
    inner end. Returns False (state untouched) on a degenerate tick.
    """
    if damping_enabled is None:
        damping_enabled = config.damping_enabled
    inner, outer = pendulum.inner, pendulum.outer
    damping = config.damping_coefficient if damping_enabled else 0.0

    accel = angular_accelerations(
        pendulum.state,
        pendulum.traits.m1, pendulum.traits.m2,
        inner.length, outer.length,
        config.gravity, damping,
    )
    if accel is None:
        pendulum.degenerate_ticks += 1
        logger.debug(
            "Pendulum %d degenerate (theta1=%r, theta2=%r), tick skipped",
            pendulum.handle, inner.angle, outer.angle,
        )
        return False

    inner.angular_acceleration, outer.angular_acceleration = accel

    inner.angular_velocity += inner.angular_acceleration * dt
    inner.angle += inner.angular_velocity * dt
    inner.start_pos = (0.0, 0.0)
    inner.end_pos = segment_offset(inner.angle, inner.length)

    outer.angular_velocity += outer.angular_acceleration * dt
    outer.angle += outer.angular_velocity * dt
    dx, dy = segment_offset(outer.angle, outer.length)
    outer.start_pos = inner.end_pos
    outer.end_pos = (outer.start_pos[0] + dx, outer.start_pos[1] + dy)
    return True


def integrate(pendulums, dt, config, damping_enabled=None):
    """Advance every pendulum by one step. Returns the degenerate count."""
    degenerate = 0
    for pendulum in pendulums:
        if not step_pendulum(pendulum, dt, config, damping_enabled):
            degenerate += 1
    return degenerate


def total_energy(pendulum, config):
    """Total mechanical energy (T + V), potential measured from the pivot."""
    theta1, theta2, omega1, omega2 = pendulum.state
    m1, m2 = pendulum.traits.m1, pendulum.traits.m2
    l1, l2 = pendulum.inner.length, pendulum.outer.length
    g = config.gravity

    T = (
        0.5 * (m1 + m2) * l1**2 * omega1**2
        + 0.5 * m2 * l2**2 * omega2**2
        + m2 * l1 * l2 * omega1 * omega2 * np.cos(theta1 - theta2)
    )
    V = -(m1 + m2) * g * l1 * np.cos(theta1) - m2 * g * l2 * np.cos(theta2)

    return float(T + V)


def reference_trajectory(pendulum, config, t_end, dt, damping_enabled=None):
    """Integrate the pendulum's equations with DOP853 at tight tolerance.

    Does not mutate the pendulum. Used to measure how far the explicit
    integrator drifts from the true solution.

    Returns:
        t_array: 1D array of sample times at uniform dt spacing
        state_array: 2D array of shape (len(t_array), 4)
    """
    if damping_enabled is None:
        damping_enabled = config.damping_enabled
    damping = config.damping_coefficient if damping_enabled else 0.0
    m1, m2 = pendulum.traits.m1, pendulum.traits.m2
    l1, l2 = pendulum.inner.length, pendulum.outer.length

    def rhs(t, y):
        accel = angular_accelerations(y, m1, m2, l1, l2, config.gravity, damping)
        if accel is None:
            raise FloatingPointError("degenerate state in reference solve")
        return [y[2], y[3], accel[0], accel[1]]

    t_eval = np.arange(0, t_end + dt / 2, dt)
    sol = solve_ivp(
        fun=rhs,
        t_span=(0, t_eval[-1]),
        y0=list(pendulum.state),
        method="DOP853",
        t_eval=t_eval,
        rtol=1e-12,
        atol=1e-12,
    )
    return sol.t, sol.y.T
