"""Systems: online emergent-behaviour detection."""
from .emergence import (
    BehaviorType,
    DetectorThresholds,
    EmergenceDetector,
    EmergentBehavior,
    count_local_maxima,
    detect_emergent_behaviors,
)

__all__ = [
    "BehaviorType",
    "DetectorThresholds",
    "EmergenceDetector",
    "EmergentBehavior",
    "count_local_maxima",
    "detect_emergent_behaviors",
]
