"""STILL / MOVING classification of resolved intervals."""
from __future__ import annotations

from floorplay.interpolate import shortest_arc
from floorplay.types import MOVING, STILL, Bracket, Interval, Sample


def canonical_motion(label: str) -> str:
    """Only an explicit STILL is STILL; any other label moves."""
    return STILL if label.strip().upper() == STILL else MOVING


class MotionClassifier:
    """Position-delta threshold test, vetoed by a non-STILL label on ``a``.

    A MOVING (or unrecognised) label always classifies MOVING. A STILL label
    only holds while the positions agree, so a sample marked STILL that is
    followed by a move starts a MOVING interval.
    """

    def __init__(self, angle_epsilon: float = 0.5, radius_epsilon: float = 0.002) -> None:
        self.angle_epsilon = angle_epsilon
        self.radius_epsilon = radius_epsilon

    def classify(self, a: Sample, b: Sample) -> str:
        if a.motion_label and a.motion_label.strip():
            if canonical_motion(a.motion_label) == MOVING:
                return MOVING

        if (
            a.angle_deg is None or b.angle_deg is None
            or a.radius_factor is None or b.radius_factor is None
        ):
            return MOVING

        angle_delta = abs(shortest_arc(a.angle_deg, b.angle_deg))
        radius_delta = abs(b.radius_factor - a.radius_factor)
        if angle_delta <= self.angle_epsilon and radius_delta <= self.radius_epsilon:
            return STILL
        return MOVING

    def interval_for(self, bracket: Bracket) -> Interval:
        return Interval(bracket.t_a, bracket.t_b, self.classify(bracket.a, bracket.b))
