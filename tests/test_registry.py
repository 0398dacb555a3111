"""Tests for registry.py: spawning, handles, reset, iteration order."""

import math

import numpy as np
import pytest

from registry import SimulationRegistry
from simulation import InvalidPendulumError, SimulationConfig


def _registry(seed=0, **config_kwargs):
    return SimulationRegistry(
        SimulationConfig(**config_kwargs), np.random.default_rng(seed),
    )


class TestSpawn:

    def test_spawn_one_invariants(self):
        registry = _registry()
        pendulum = registry.spawn_one()

        assert len(registry) == 1
        for segment in (pendulum.inner, pendulum.outer):
            assert 0.0 <= segment.angle < 2 * math.pi
            assert segment.angular_velocity == 0.0
            assert segment.angular_acceleration == 0.0
            assert segment.length == 10.0
        assert len(pendulum.trail) == 0
        assert pendulum.trail.capacity == 100
        assert pendulum.traits.mass == 1.0
        assert pendulum.outer.start_pos == pendulum.inner.end_pos
        assert all(0.0 <= c < 1.0 for c in pendulum.traits.color)

    def test_spawn_uses_config_length(self):
        registry = _registry(spawn_length=3.5)
        pendulum = registry.spawn_one()
        assert pendulum.inner.length == pendulum.outer.length == 3.5

    def test_spawn_many(self):
        registry = _registry()
        spawned = registry.spawn_many(10)
        assert len(spawned) == 10
        assert len(registry) == 10

    def test_spawn_many_default_is_ten(self):
        registry = _registry()
        registry.spawn_many()
        assert len(registry) == 10

    def test_spawn_many_negative(self):
        with pytest.raises(ValueError):
            _registry().spawn_many(-1)

    def test_same_seed_same_pendulums(self):
        a = _registry(seed=7).spawn_many(5)
        b = _registry(seed=7).spawn_many(5)
        assert [p.state for p in a] == [p.state for p in b]
        assert [p.traits.color for p in a] == [p.traits.color for p in b]

    def test_different_seed_different_angles(self):
        a = _registry(seed=1).spawn_one()
        b = _registry(seed=2).spawn_one()
        assert a.state != b.state


class TestHandles:

    def test_unique_increasing(self):
        registry = _registry()
        handles = [p.handle for p in registry.spawn_many(5)]
        assert handles == [0, 1, 2, 3, 4]
        assert registry.handles() == handles

    def test_not_reused_after_reset(self):
        registry = _registry()
        registry.spawn_many(3)
        registry.reset_all()
        assert registry.spawn_one().handle == 3

    def test_get_and_contains(self):
        registry = _registry()
        pendulum = registry.spawn_one()
        assert registry.get(pendulum.handle) is pendulum
        assert pendulum.handle in registry
        assert registry.get(99) is None
        assert 99 not in registry


class TestReset:

    def test_reset_scenario(self):
        registry = _registry()
        registry.spawn_many(10)
        assert registry.reset_all() == 10
        assert list(registry) == []
        seen = []
        registry.for_each(seen.append)
        assert seen == []

    def test_reset_empty(self):
        assert _registry().reset_all() == 0


class TestIteration:

    def test_for_each_insertion_order(self):
        registry = _registry()
        spawned = registry.spawn_many(4)
        seen = []
        registry.for_each(lambda p: seen.append(p.handle))
        assert seen == [p.handle for p in spawned]

    def test_iter_matches_for_each(self):
        registry = _registry()
        registry.spawn_many(3)
        assert [p.handle for p in registry] == registry.handles()


class TestAdd:

    def test_explicit_angles(self):
        registry = _registry()
        pendulum = registry.add(0.1, 0.2)
        assert pendulum.state == (0.1, 0.2, 0.0, 0.0)

    def test_invalid_length_rejected(self):
        registry = _registry()
        with pytest.raises(InvalidPendulumError):
            registry.add(0.1, 0.2, inner_length=0.0)
        assert len(registry) == 0
        assert registry.spawn_one().handle == 0
