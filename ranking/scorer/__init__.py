"""
Scorer Module - engagement scoring

Components:
- popularity_score: plays + 3*likes, no decay
- trending_score: popularity with half-life decay on age
"""

from .scorer import (
    LIKE_WEIGHT,
    MIN_AGE_DAYS,
    engagement,
    popularity_score,
    age_in_days,
    decay_factor,
    trending_score,
)


__all__ = [
    "LIKE_WEIGHT",
    "MIN_AGE_DAYS",
    "engagement",
    "popularity_score",
    "age_in_days",
    "decay_factor",
    "trending_score",
]
