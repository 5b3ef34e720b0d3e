"""Tests for the scheduler, trajectory recorder and simulation runner."""

import numpy as np
import pytest

from agentic_engine.analysis.recorder import TrajectoryRecorder
from agentic_engine.core.parameters import EngineParameters
from agentic_engine.core.system import assemble_system
from agentic_engine.errors import DegenerateInputError
from agentic_engine.simulation.runner import SimulationRunner, simulate
from agentic_engine.simulation.scheduler import Scheduler


# --------------------------------------------------------------------------- #
# Recorder                                                                     #
# --------------------------------------------------------------------------- #


def test_recorder_fifo_bound(make_point):
    recorder = TrajectoryRecorder(max_records=3)
    for i in range(5):
        recorder.record(make_point(float(i)))
    assert len(recorder) == 3
    assert recorder.times() == [2.0, 3.0, 4.0]
    assert recorder[-1].time == 4.0


def test_recorder_rejects_out_of_order_points(make_point):
    recorder = TrajectoryRecorder()
    recorder.record(make_point(1.0))
    with pytest.raises(ValueError):
        recorder.record(make_point(0.5))


def test_recorder_series(make_point):
    recorder = TrajectoryRecorder()
    for i in range(3):
        recorder.record(make_point(float(i), consensus=0.1 * i))
    series = recorder.metric_series()
    assert series["consensus"] == pytest.approx([0.0, 0.1, 0.2])
    assert set(series) >= {"consensus", "polarization", "entropy", "xi"}
    assert recorder.agent_series("agent-0001")["position"][0] == [0.1, 0.1]
    with pytest.raises(KeyError):
        recorder.agent_series("agent-9999")
    assert len(recorder.to_dicts()) == 3
    recorder.clear()
    assert len(recorder) == 0


def test_recorder_validation():
    with pytest.raises(ValueError):
        TrajectoryRecorder(max_records=0)


# --------------------------------------------------------------------------- #
# Scheduler                                                                    #
# --------------------------------------------------------------------------- #


def test_scheduler_requires_initialise(params, rng):
    scheduler = Scheduler(params, rng)
    with pytest.raises(RuntimeError):
        scheduler.tick()


def test_scheduler_hooks_see_before_and_after(params, rng):
    system = assemble_system(4, "ring", "continuous", rng, params)
    seen = []
    scheduler = Scheduler(
        params,
        rng,
        pre_step_hooks=[lambda s, p: seen.append(("pre", p.time))],
    )
    scheduler.register_post_hook(lambda s, p: seen.append(("post", p.time)))
    initial = scheduler.initialise(system)
    assert initial.time == 0.0
    point = scheduler.tick(0.5)
    assert point.time == pytest.approx(0.5)
    assert seen == [("pre", 0.0), ("post", 0.5)]
    assert scheduler.system is system


# --------------------------------------------------------------------------- #
# Runner                                                                       #
# --------------------------------------------------------------------------- #


def test_zero_steps_yields_initial_point_only(params, rng):
    system = assemble_system(5, "ring", "continuous", rng, params)
    result = simulate(system, 0, rng=rng, params=params)
    assert len(result.trajectory) == 1
    assert result.trajectory[0].time == 0.0
    assert not result.chaos_indicators.sufficient_history
    assert system.step_count == 0


def test_negative_steps_rejected(params, rng):
    system = assemble_system(5, "ring", "continuous", rng, params)
    with pytest.raises(DegenerateInputError):
        simulate(system, -1, rng=rng, params=params)
    with pytest.raises(DegenerateInputError):
        simulate(system, 10, dt=-0.01, rng=rng, params=params)


def test_run_records_every_step(params, rng):
    system = assemble_system(6, "small-world", "continuous", rng, params)
    result = SimulationRunner(params, rng).run(system, steps=120, dt=0.01)
    assert len(result.trajectory) == 121
    times = [p.time for p in result.trajectory]
    assert times == sorted(times)
    assert times[-1] == pytest.approx(1.2)
    assert result.final_state == result.trajectory[-1].metrics
    assert result.chaos_indicators.sufficient_history
    assert result.system_id == system.id
    assert result.to_dict()["n_points"] == 121


def test_noise_free_run_converges(rng):
    params = EngineParameters(noise_scale=0.0, repulsion_strength=0.0)
    system = assemble_system(8, "complete", "continuous", rng, params)
    result = simulate(system, 400, rng=rng, params=params)
    assert result.converged
    assert result.final_state.consensus > result.trajectory[0].metrics.consensus
    assert 0.0 <= result.convergence_time <= result.trajectory[-1].time


def test_runs_continue_from_current_time(params, rng):
    system = assemble_system(4, "ring", "continuous", rng, params)
    runner = SimulationRunner(params, rng)
    runner.run(system, 10)
    second = runner.run(system, 10)
    assert second.trajectory[0].time == pytest.approx(0.10)
    assert system.step_count == 20


def test_extra_hooks_run_each_step(params, rng):
    calls = []
    system = assemble_system(3, "ring", "continuous", rng, params)
    runner = SimulationRunner(params, rng, extra_hooks=[lambda s, p: calls.append(p.time)])
    runner.run(system, 5)
    assert len(calls) == 5


def test_runner_default_rng_is_seeded():
    params = EngineParameters(seed=11)
    a = assemble_system(5, "ring", "continuous", np.random.default_rng(1), params)
    b = assemble_system(5, "ring", "continuous", np.random.default_rng(1), params)
    ra = SimulationRunner(params).run(a, 30)
    rb = SimulationRunner(params).run(b, 30)
    assert ra.final_state == rb.final_state
