from __future__ import annotations

import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Iterable

import msgspec
import numpy as np

from .centroid import Centroid
from .digest_config import DigestConfig


@dataclass(slots=True)
class TDigest:
    """T-Digest for streaming quantile estimation over non-negative values."""

    _config: DigestConfig = field(default_factory=DigestConfig.from_env)
    _centroids: list[Centroid] = field(default_factory=list, init=False)
    _unmerged: list[tuple[float, float]] = field(default_factory=list, init=False)
    _total_weight: float = field(default=0.0, init=False)
    _min: float = field(default=float("inf"), init=False)
    _max: float = field(default=float("-inf"), init=False)

    @property
    def delta(self) -> float:
        """Compression parameter."""
        return self._config.tdigest_delta

    @property
    def max_unmerged(self) -> int:
        """Max unmerged points before compression."""
        return self._config.tdigest_max_unmerged

    @property
    def min(self) -> float | None:
        return self._min if self._total_weight > 0 else None

    @property
    def max(self) -> float | None:
        return self._max if self._total_weight > 0 else None

    def add(self, value: float, weight: float = 1.0) -> bool:
        """
        Add a value to the digest. Negative, non-finite and non-numeric
        values are ignored and reported by returning False.
        """
        if weight <= 0:
            raise ValueError(f"Weight must be positive, got {weight}")

        if isinstance(value, bool) or not isinstance(value, Real):
            return False

        value = float(value)
        if not math.isfinite(value) or value < 0:
            return False

        self._unmerged.append((value, weight))
        self._total_weight += weight
        self._min = min(self._min, value)
        self._max = max(self._max, value)

        if len(self._unmerged) >= self.max_unmerged:
            self._compress()

        return True

    push = add

    def add_batch(self, values: Iterable[float]) -> None:
        """Add multiple values efficiently."""
        for value in values:
            self.add(value)

    def _collect_points(self) -> list[tuple[float, float]]:
        points = [(centroid.mean, centroid.weight) for centroid in self._centroids]
        points.extend(self._unmerged)
        return points

    def _compress(self) -> None:
        """Compress unmerged points into centroids."""
        if not self._unmerged:
            return

        points = self._collect_points()
        points.sort(key=lambda entry: entry[0])
        total_weight = sum(weight for _, weight in points)

        new_centroids: list[Centroid] = []
        current_mean, current_weight = points[0]
        cumulative_weight = current_weight

        for mean, weight in points[1:]:
            quantile = cumulative_weight / total_weight
            limit = self._k_inverse(self._k(quantile) + 1.0) - quantile
            max_weight = total_weight * limit

            if current_weight + weight <= max_weight:
                new_weight = current_weight + weight
                current_mean = (
                    current_mean * current_weight + mean * weight
                ) / new_weight
                current_weight = new_weight
            else:
                new_centroids.append(Centroid(current_mean, current_weight))
                current_mean = mean
                current_weight = weight

            cumulative_weight += weight

        new_centroids.append(Centroid(current_mean, current_weight))
        self._centroids = new_centroids
        self._unmerged.clear()
        self._total_weight = total_weight

    def _k(self, quantile: float) -> float:
        """Scaling function k(q) = δ/2 * (arcsin(2q-1)/π + 0.5)."""
        return (self.delta / 2.0) * (np.arcsin(2.0 * quantile - 1.0) / np.pi + 0.5)

    def _k_inverse(self, scaled: float) -> float:
        """Inverse scaling function."""
        scaled = min(scaled, self.delta / 2.0)
        return 0.5 * (np.sin((scaled / (self.delta / 2.0) - 0.5) * np.pi) + 1.0)

    def _clamp(self, value: float) -> float:
        return max(self._min, min(self._max, value))

    def quantile(self, quantile: float) -> float | None:
        """
        Get the value at quantile q (0 <= q <= 1), or None while the digest
        holds no observations.

        Estimates interpolate linearly between centroid midpoints and
        towards the observed min and max at the tails, so they never leave
        the observed range and never decrease as q grows.
        """
        if quantile < 0.0 or quantile > 1.0:
            raise ValueError(f"Quantile must be in [0, 1], got {quantile}")

        self._compress()

        if not self._centroids:
            return None

        if quantile == 0.0:
            return self._min
        if quantile == 1.0:
            return self._max

        target_weight = quantile * self._total_weight

        first_centroid = self._centroids[0]
        if target_weight < first_centroid.weight / 2.0:
            ratio = target_weight / (first_centroid.weight / 2.0)
            return self._clamp(
                self._min + ratio * (first_centroid.mean - self._min)
            )

        cumulative_weight = 0.0
        for previous_centroid, centroid in zip(self._centroids, self._centroids[1:]):
            midpoint_previous = cumulative_weight + previous_centroid.weight / 2.0
            midpoint_current = (
                cumulative_weight + previous_centroid.weight + centroid.weight / 2.0
            )

            if target_weight < midpoint_current:
                ratio = (target_weight - midpoint_previous) / max(
                    midpoint_current - midpoint_previous, 1e-10
                )
                return self._clamp(
                    previous_centroid.mean
                    + ratio * (centroid.mean - previous_centroid.mean)
                )

            cumulative_weight += previous_centroid.weight

        last_centroid = self._centroids[-1]
        tail_start = self._total_weight - last_centroid.weight / 2.0
        ratio = (target_weight - tail_start) / max(last_centroid.weight / 2.0, 1e-10)
        return self._clamp(last_centroid.mean + ratio * (self._max - last_centroid.mean))

    def p90(self) -> float | None:
        """90th percentile."""
        return self.quantile(0.90)

    def p95(self) -> float | None:
        """95th percentile."""
        return self.quantile(0.95)

    def p99(self) -> float | None:
        """99th percentile."""
        return self.quantile(0.99)

    def count(self) -> float:
        """Total weight (count if weights are 1)."""
        return self._total_weight

    def centroid_count(self) -> int:
        self._compress()
        return len(self._centroids)

    def merge(self, other: "TDigest") -> "TDigest":
        """Merge another digest into this one."""
        self._compress()
        other._compress()

        combined_points = self._collect_points()
        combined_points.extend(other._collect_points())

        if not combined_points:
            return self

        self._centroids = []
        self._unmerged = combined_points
        self._total_weight = sum(weight for _, weight in combined_points)
        self._min = min(self._min, other._min)
        self._max = max(self._max, other._max)
        self._compress()
        return self

    @classmethod
    def merged(
        cls,
        digests: Iterable["TDigest"],
        config: DigestConfig | None = None,
    ) -> "TDigest":
        """Build a new digest holding the union of the given digests."""
        combined = cls(_config=config or DigestConfig.from_env())
        for digest in digests:
            combined.merge(digest)

        return combined

    def to_bytes(self) -> bytes:
        """Serialize for transfer between ingestion workers."""
        self._compress()
        payload = {
            "centroids": [
                (centroid.mean, centroid.weight) for centroid in self._centroids
            ],
            "total_weight": self._total_weight,
            "min": self._min if self._min != float("inf") else None,
            "max": self._max if self._max != float("-inf") else None,
        }
        return msgspec.msgpack.encode(payload)

    @classmethod
    def from_bytes(cls, data: bytes, config: DigestConfig | None = None) -> "TDigest":
        """Deserialize a digest produced by to_bytes()."""
        parsed = msgspec.msgpack.decode(data)
        digest = cls(_config=config or DigestConfig.from_env())
        digest._centroids = [
            Centroid(mean=mean, weight=weight)
            for mean, weight in parsed.get("centroids", [])
        ]
        digest._total_weight = parsed.get("total_weight", 0.0)
        digest._min = (
            parsed.get("min") if parsed.get("min") is not None else float("inf")
        )
        digest._max = (
            parsed.get("max") if parsed.get("max") is not None else float("-inf")
        )
        return digest
