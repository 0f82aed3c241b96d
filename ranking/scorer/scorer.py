"""
Scorer - Engagement Scoring

Pure functions turning engagement counters and age into the popularity and
trending scores used by the classifiers.
"""
from datetime import datetime

from utils.clock import whole_hours_between


# Each like is worth three plays
LIKE_WEIGHT = 3

# Age floor so a brand new item still gets a finite decay
MIN_AGE_DAYS = 0.01


def engagement(item) -> int:
    """plays + 3*likes"""
    return item.play_count + LIKE_WEIGHT * item.like_count


def popularity_score(item) -> int:
    """
    Undecayed engagement score used by the Popular classifier.

    Args:
        item: Anything exposing play_count and like_count

    Returns:
        plays + 3*likes
    """
    return engagement(item)


def age_in_days(item, now: datetime) -> float:
    """Age in days at whole-hour granularity, never below MIN_AGE_DAYS."""
    hours = whole_hours_between(item.created_at, now)
    return max(MIN_AGE_DAYS, hours / 24.0)


def decay_factor(age_days: float, half_life_days: float) -> float:
    """Exponential decay that halves every half_life_days."""
    return 0.5 ** (age_days / half_life_days)


def trending_score(item, now: datetime, half_life_days: float) -> float:
    """
    Engagement with exponential recency decay.

        score = (plays + 3*likes) * 0.5 ** (age_days / half_life_days)

    An item without created_at is treated as created now, so it gets the
    base score with no decay credit.

    Args:
        item: Anything exposing play_count, like_count and created_at
        now: Reference time for the whole request
        half_life_days: Days for the score to halve

    Returns:
        Decayed score
    """
    return engagement(item) * decay_factor(age_in_days(item, now), half_life_days)
