"""Tests for the online emergent-behaviour detector."""

import pytest

from agentic_engine.systems.emergence import (
    BehaviorType,
    DetectorThresholds,
    EmergenceDetector,
    count_local_maxima,
    detect_emergent_behaviors,
)


def test_count_local_maxima():
    assert count_local_maxima([0.0, 1.0, 0.0, 1.0, 0.0]) == 2
    assert count_local_maxima([1.0, 1.0, 1.0]) == 0, "Plateaus are not peaks"
    assert count_local_maxima([0.0, 1.0]) == 0


def test_synchronization_on_upward_crossing(make_point):
    trajectory = [make_point(0.01 * i, consensus=0.5) for i in range(10)]
    trajectory.append(make_point(0.10, consensus=0.95))
    behaviors = detect_emergent_behaviors(trajectory)
    assert [b.type for b in behaviors] == [BehaviorType.SYNCHRONIZATION]
    sync = behaviors[0]
    assert sync.start_time == pytest.approx(0.10)
    assert sync.magnitude == pytest.approx(0.95)
    assert sync.agents == ("agent-0000", "agent-0001")


def test_no_detection_before_minimum_history(make_point):
    trajectory = [make_point(0.0, consensus=0.5), make_point(0.01, consensus=0.95)]
    trajectory += [make_point(0.01 * i, consensus=0.95) for i in range(2, 15)]
    assert detect_emergent_behaviors(trajectory) == []


def test_polarization_jump(make_point):
    trajectory = [make_point(0.01 * i, polarization=0.4) for i in range(10)]
    trajectory.append(make_point(0.10, polarization=0.8))
    behaviors = detect_emergent_behaviors(trajectory)
    assert [b.type for b in behaviors] == [BehaviorType.POLARIZATION]


def test_gradual_polarization_is_not_a_jump(make_point):
    trajectory = [make_point(0.01 * i, polarization=0.6) for i in range(10)]
    trajectory.append(make_point(0.10, polarization=0.8))
    assert detect_emergent_behaviors(trajectory) == []


def test_oscillation_detected_once_within_cooldown(make_point):
    trajectory = [
        make_point(0.01 * i, consensus=0.5 if i % 2 == 0 else 0.6) for i in range(40)
    ]
    behaviors = detect_emergent_behaviors(trajectory)
    oscillations = [b for b in behaviors if b.type is BehaviorType.OSCILLATION]
    assert len(oscillations) == 1, "Cooldown suppresses repeat reports"
    # Needs more than `window` points of history
    assert oscillations[0].start_time == pytest.approx(0.20)
    assert oscillations[0].magnitude >= 3 / 20


def test_oscillation_reported_again_after_cooldown(make_point):
    trajectory = [
        make_point(0.1 * i, consensus=0.5 if i % 2 == 0 else 0.6) for i in range(40)
    ]
    oscillations = [
        b for b in detect_emergent_behaviors(trajectory)
        if b.type is BehaviorType.OSCILLATION
    ]
    assert len(oscillations) > 1


def test_detector_is_incremental(make_point):
    detector = EmergenceDetector()
    trajectory = []
    for i in range(10):
        trajectory.append(make_point(0.01 * i, consensus=0.5))
        assert detector.observe(trajectory) == []
    trajectory.append(make_point(0.10, consensus=0.95))
    found = detector.observe(trajectory)
    assert len(found) == 1
    assert detector.behaviors == found
    detector.reset()
    assert detector.behaviors == []


def test_threshold_validation():
    with pytest.raises(ValueError):
        DetectorThresholds(polarization_low=0.8, polarization_high=0.7)
    with pytest.raises(ValueError):
        DetectorThresholds(min_points=1)
    with pytest.raises(ValueError):
        DetectorThresholds(sync_consensus=1.5)
