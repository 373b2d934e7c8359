from .evolution_service import EvolutionService
from .shift_scorer import compute_biggest_shift
from .signal_extractor import extract_signals
from .snapshot_locator import SnapshotLocator
from .url_normalization import UrlNormalizer, WaybackUrlNormalizer

__all__ = [
    "EvolutionService",
    "SnapshotLocator",
    "UrlNormalizer",
    "WaybackUrlNormalizer",
    "compute_biggest_shift",
    "extract_signals",
]
