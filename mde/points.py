"""Sample points with several ordinates and their split into graph trails."""

import math
from dataclasses import dataclass, field


@dataclass
class MultiPoint:
    """One abscissa and every ordinate the relation has there."""

    x: float
    ys: list = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.ys)


def segment_boundaries(points, max_jump: float) -> list:
    """Indices where a new segment starts, plus ``len(points)`` at the end.

    A segment breaks where the ordinate count changes or any ordinate jumps
    by more than *max_jump* between neighbours.
    """
    starts = [0]
    for i in range(1, len(points)):
        prev, cur = points[i - 1], points[i]
        if len(prev) != len(cur):
            starts.append(i)
            continue
        if any(abs(a - b) > max_jump for a, b in zip(prev.ys, cur.ys)):
            starts.append(i)
    starts.append(len(points))
    return starts


def graph_trails(points, max_jump: float) -> list:
    """Continuous polylines, one per ordinate branch of each segment.

    Trails with fewer than two points are dropped.
    """
    trails = []
    starts = segment_boundaries(points, max_jump)
    for begin, end in zip(starts, starts[1:]):
        if begin >= end or not len(points[begin]):
            continue
        for branch in range(len(points[begin])):
            trail = [(p.x, p.ys[branch]) for p in points[begin:end]
                     if math.isfinite(p.ys[branch])]
            if len(trail) >= 2:
                trails.append(trail)
    return trails
