"""Global enums shared by the analytics contexts."""

from enum import Enum


class LevelOrigin(str, Enum):
    """Where a merged-book level came from."""
    DIRECT = "DIRECT"        # resting order on the token's own book
    SYNTHETIC = "SYNTHETIC"  # derived from the complement's opposite side


class LiquidityTier(str, Enum):
    """Ordered best → worst."""
    EXCELLENT = "excellent"
    GOOD = "good"
    MODERATE = "moderate"
    POOR = "poor"
    ILLIQUID = "illiquid"


class EfficiencyRating(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    EXPLOITABLE = "exploitable"


class BookView(str, Enum):
    RAW = "raw"
    MERGED = "merged"
