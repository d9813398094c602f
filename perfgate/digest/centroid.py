from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Centroid:
    """A weighted cluster of observations in the T-Digest."""

    mean: float
    weight: float
