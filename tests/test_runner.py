"""Tests for runner.py: fixed-step accumulator, commands, render gating."""

import pytest

from runner import FixedTimestep, SimulationRunner
from simulation import ConfigError, SimulationConfig, angular_accelerations


class RecordingRenderer:
    """Renderer that records calls instead of drawing."""

    def __init__(self):
        self.segments = []
        self.paths = []

    def draw_segment(self, start_pos, end_pos, color):
        self.segments.append((start_pos, end_pos, color))

    def draw_path(self, positions, color):
        self.paths.append((list(positions), color))


class TestFixedTimestep:

    def test_whole_steps(self):
        clock = FixedTimestep(0.25)
        assert clock.advance(0.625) == 2
        assert clock.accumulator == pytest.approx(0.125)
        assert clock.advance(0.125) == 1
        assert clock.accumulator == pytest.approx(0.0)

    def test_short_frames_accumulate(self):
        clock = FixedTimestep(0.25)
        assert clock.advance(0.125) == 0
        assert clock.alpha == pytest.approx(0.5)
        assert clock.advance(0.125) == 1

    def test_backlog_capped(self):
        clock = FixedTimestep(0.25, max_steps=8)
        assert clock.advance(10.0) == 8
        assert clock.dropped_time == pytest.approx(8.0)
        assert clock.accumulator == pytest.approx(0.0)

    def test_invalid(self):
        with pytest.raises(ValueError):
            FixedTimestep(0.0)
        with pytest.raises(ValueError):
            FixedTimestep(0.25).advance(-1.0)


class TestRunnerTicking:

    def test_advance_runs_fixed_steps(self):
        runner = SimulationRunner(SimulationConfig(dt=1 / 64), seed=0)
        runner.spawn_one()
        assert runner.advance(3 / 64) == 3
        assert runner.steps_run == 3
        assert runner.sim_time == pytest.approx(3 / 64)

    def test_chaining_for_all_pendulums(self):
        runner = SimulationRunner(seed=3)
        runner.spawn_many(10)
        for _ in range(100):
            runner.advance(1 / 60)
            for p in runner.registry:
                assert p.outer.start_pos == p.inner.end_pos

    def test_trail_bound_through_runner(self):
        runner = SimulationRunner(SimulationConfig(trail_period=1 / 16), seed=0)
        runner.spawn_many(2)
        for _ in range(300):
            runner.advance(1 / 16)
        assert all(len(p.trail) == 100 for p in runner.registry)

    def test_sampling_ignores_draw_toggle(self):
        runner = SimulationRunner(SimulationConfig(trail_period=1 / 16), seed=0)
        runner.spawn_one()
        runner.toggle_trails()
        assert runner.config.draw_trails is False
        runner.advance(1 / 16)
        assert all(len(p.trail) == 1 for p in runner.registry)

    def test_seeded_runs_identical(self):
        tips = []
        for _ in range(2):
            runner = SimulationRunner(seed=11)
            runner.spawn_many(3)
            for _ in range(120):
                runner.advance(1 / 60)
            tips.append([p.tip for p in runner.registry])
        assert tips[0] == tips[1]

    def test_damping_toggle_read_each_tick(self):
        runner = SimulationRunner(seed=5)
        p = runner.spawn_one()
        runner.step()
        assert runner.toggle_damping() is True

        state = p.state
        undamped = angular_accelerations(state, 1.0, 1.0, 10.0, 10.0, 9.8)
        runner.step()
        assert p.inner.angular_acceleration == pytest.approx(undamped[0] - 0.1 * state[2])
        assert p.outer.angular_acceleration == pytest.approx(undamped[1] - 0.1 * state[3])


class TestRunnerCommands:

    def test_reset_scenario(self):
        runner = SimulationRunner(seed=0)
        runner.spawn_many(10)
        runner.reset()
        assert len(runner.registry) == 0
        runner.advance(0.5)

    def test_spawn_one_and_many(self):
        runner = SimulationRunner(seed=0)
        runner.spawn_one()
        runner.spawn_many()
        assert len(runner.registry) == 11

    def test_invalid_config_rejected(self):
        with pytest.raises(ConfigError):
            SimulationRunner(SimulationConfig(dt=-0.01))


class TestRender:

    def test_default_draws_trails_only(self):
        runner = SimulationRunner(SimulationConfig(trail_period=1 / 16), seed=0)
        runner.spawn_many(3)
        runner.advance(1 / 16)
        runner.advance(1 / 16)

        renderer = RecordingRenderer()
        runner.render(renderer)
        assert len(renderer.paths) == 3
        assert renderer.segments == []
        positions, color = renderer.paths[0]
        first = next(iter(runner.registry))
        assert positions == first.trail.snapshot()
        assert color == first.traits.color

    def test_single_point_trail_not_drawn(self):
        runner = SimulationRunner(SimulationConfig(trail_period=1 / 16), seed=0)
        runner.spawn_one()
        runner.advance(1 / 16)
        renderer = RecordingRenderer()
        runner.render(renderer)
        assert renderer.paths == []

    def test_pendulum_toggle_draws_two_segments_each(self):
        runner = SimulationRunner(seed=0)
        runner.spawn_many(4)
        runner.toggle_pendulum_draw()
        runner.toggle_trails()

        renderer = RecordingRenderer()
        runner.render(renderer)
        assert renderer.paths == []
        assert len(renderer.segments) == 8
        p = next(iter(runner.registry))
        assert renderer.segments[0] == (p.inner.start_pos, p.inner.end_pos, p.traits.color)
        assert renderer.segments[1] == (p.outer.start_pos, p.outer.end_pos, p.traits.color)

    def test_nothing_drawn_after_reset(self):
        runner = SimulationRunner(seed=0)
        runner.spawn_many(2)
        runner.toggle_pendulum_draw()
        runner.reset()
        renderer = RecordingRenderer()
        runner.render(renderer)
        assert renderer.segments == [] and renderer.paths == []
