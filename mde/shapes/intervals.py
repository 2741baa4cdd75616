"""Monotone intervals of a sampled or analysed function.

A function is described as a chain of :class:`IntervalEndpoint` values; each
adjacent pair bounds an :class:`IntervalDescription` that increases,
decreases or stays constant.
"""

import math
from dataclasses import dataclass

from mde.features import fmt_num

DEAD_BAND = 1.0e-3
MIN_INTERVAL_LENGTH = DEAD_BAND ** 0.25

BOUNDARY = "boundary point"
LOCAL_MAX = "local maximum"
LOCAL_MIN = "local minimum"
INFLECTION = "inflection point"
ASYMPTOTE = "vertical asymptote"
UNDEFINED = "undefined"


@dataclass
class IntervalEndpoint:
    x: float
    left_y: float
    right_y: float
    kind: str = BOUNDARY

    @property
    def is_discontinuity(self) -> bool:
        if math.isnan(self.left_y) or math.isnan(self.right_y):
            return False
        return self.left_y != self.right_y

    def node(self) -> dict:
        out = {"X": fmt_num(self.x, 3), "type": self.kind}
        if self.is_discontinuity:
            out["discontinuity"] = "true"
            out["leftY"] = fmt_num(self.left_y, 3)
            out["rightY"] = fmt_num(self.right_y, 3)
        else:
            out["Y"] = fmt_num(self.left_y, 3)
        return out


@dataclass
class IntervalDescription:
    left: IntervalEndpoint
    right: IntervalEndpoint
    trend: str = None

    @property
    def direction(self) -> str:
        if self.trend is not None:
            return self.trend
        dx = self.right.x - self.left.x
        dydx = (self.right.left_y - self.left.right_y) / dx if dx else math.nan
        if dydx > DEAD_BAND:
            return "increases"
        if dydx < -DEAD_BAND:
            return "decreases"
        return "remains constant"

    def node(self) -> dict:
        return {
            "left": fmt_num(self.left.x, 3),
            "right": fmt_num(self.right.x, 3),
            "direction": self.direction,
        }


def _step(p0, p1) -> int:
    dx = p1[0] - p0[0]
    if dx == 0.0:
        return 0
    slope = (p1[1] - p0[1]) / dx
    if slope > DEAD_BAND:
        return 1
    if slope < -DEAD_BAND:
        return -1
    return 0


def label_endpoints(endpoints) -> list:
    """Name each interior endpoint by the directions on either side."""
    for i in range(1, len(endpoints) - 1):
        if endpoints[i].kind == ASYMPTOTE:
            continue
        before = IntervalDescription(endpoints[i - 1], endpoints[i]).direction
        after = IntervalDescription(endpoints[i], endpoints[i + 1]).direction
        if before == "increases" and after == "decreases":
            endpoints[i].kind = LOCAL_MAX
        elif before == "decreases" and after == "increases":
            endpoints[i].kind = LOCAL_MIN
        elif "remains constant" in (before, after):
            endpoints[i].kind = UNDEFINED
        else:
            endpoints[i].kind = INFLECTION
    return endpoints


def find_endpoints(trail) -> list:
    """Endpoints of one continuous trail of ``(x, y)`` samples.

    A new endpoint is placed wherever the direction of travel changes;
    endpoints closer than ``MIN_INTERVAL_LENGTH`` are merged.
    """
    if not trail:
        return []
    first, last = trail[0], trail[-1]
    endpoints = [IntervalEndpoint(first[0], first[1], first[1])]
    previous = None
    for i in range(1, len(trail)):
        step = _step(trail[i - 1], trail[i])
        if previous is not None and step != previous:
            x, y = trail[i - 1]
            if x - endpoints[-1].x >= MIN_INTERVAL_LENGTH:
                endpoints.append(IntervalEndpoint(x, y, y))
        previous = step
    if last[0] - endpoints[-1].x < MIN_INTERVAL_LENGTH and len(endpoints) > 1:
        endpoints.pop()
    endpoints.append(IntervalEndpoint(last[0], last[1], last[1]))
    return label_endpoints(endpoints)


def function_analysis_node(endpoints, trends=None) -> dict:
    pairs = list(zip(endpoints, endpoints[1:]))
    trends = trends or [None] * len(pairs)
    return {
        "NumEndpoints": str(len(endpoints)),
        "IntervalEndpoint": [e.node() for e in endpoints],
        "IntervalDescription": [IntervalDescription(a, b, t).node()
                                for (a, b), t in zip(pairs, trends)],
    }
