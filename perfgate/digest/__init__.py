from .centroid import Centroid
from .digest_config import DigestConfig
from .tdigest import TDigest

__all__ = [
    "Centroid",
    "DigestConfig",
    "TDigest",
]
