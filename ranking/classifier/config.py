"""
Configuration for content classification.

Contains:
- Window sizes for New, Popular and Trending
- Engagement floors
- Page size ceilings per category
- Style registry (genre plus tag aliases) for style browsing
- CategoryPolicy bundling all of the above for one content type
"""
from dataclasses import dataclass
from typing import Tuple

from constants import TargetType


# ============================================
# WINDOWS (days)
# ============================================

NEW_WINDOW_DAYS = 60
POPULAR_WINDOW_DAYS = 60        # engagement lookback
POPULAR_MAX_AGE_DAYS = 90       # never popular past this age
POPULAR_WIDEN_CAP_DAYS = 365    # fallback widening stops here
TRENDING_POOL_DAYS = 21
TRENDING_HALF_LIFE_DAYS = 2.5


# ============================================
# FLOORS
# ============================================

POPULAR_MIN_PLAYS = 50
POPULAR_MIN_LIKES = 5
POPULAR_MIN_SCORE = 80          # plays + 3*likes

TRENDING_MIN_PLAYS = 10
TRENDING_MIN_LIKES = 2


# ============================================
# PAGE SIZES
# ============================================

DEFAULT_MAX_PAGE_SIZE = 100
BUNDLE_MAX_PAGE_SIZE = 200


@dataclass(frozen=True)
class CategoryPolicy:
    """Every tunable that drives ranking for one content category."""
    target_type: TargetType
    new_window_days: int = NEW_WINDOW_DAYS
    popular_window_days: int = POPULAR_WINDOW_DAYS
    popular_max_age_days: int = POPULAR_MAX_AGE_DAYS
    popular_widen_cap_days: int = POPULAR_WIDEN_CAP_DAYS
    popular_min_plays: int = POPULAR_MIN_PLAYS
    popular_min_likes: int = POPULAR_MIN_LIKES
    popular_min_score: int = POPULAR_MIN_SCORE
    trending_pool_days: int = TRENDING_POOL_DAYS
    trending_half_life_days: float = TRENDING_HALF_LIFE_DAYS
    trending_min_plays: int = TRENDING_MIN_PLAYS
    trending_min_likes: int = TRENDING_MIN_LIKES
    max_page_size: int = DEFAULT_MAX_PAGE_SIZE


POLICIES = {
    TargetType.TRACK: CategoryPolicy(TargetType.TRACK),
    TargetType.BUNDLE: CategoryPolicy(TargetType.BUNDLE, max_page_size=BUNDLE_MAX_PAGE_SIZE),
    TargetType.KIT: CategoryPolicy(TargetType.KIT),
}


def get_policy(target_type: TargetType) -> CategoryPolicy:
    """Policy for a content category."""
    return POLICIES[target_type]


def widening_windows(start_days: int, cap_days: int = POPULAR_WIDEN_CAP_DAYS) -> list[int]:
    """
    Successive Popular evaluation windows.

    Doubles from start_days until cap_days is reached; the cap is always the
    last entry. 60 gives [60, 120, 240, 365].
    """
    days = max(1, start_days)
    windows = [min(days, cap_days)]
    while days < cap_days:
        days = min(days * 2, cap_days)
        windows.append(days)
    return windows


# ============================================
# STYLES
# ============================================

STYLE_MAX_PAGE_SIZE = 200


@dataclass(frozen=True)
class StyleDef:
    """A browsable style: the genre it maps to and tag aliases that also count."""
    genre: str
    aliases: Tuple[str, ...] = ()


STYLES = {
    "uk-drill": StyleDef("uk drill", ("ukdrill", "uk drill", "uk")),
    "ny-drill": StyleDef("ny drill", ("nydrill", "ny drill", "new york drill", "ny")),
    "chicago-drill": StyleDef("chicago drill", ("chicagodrill", "chicago", "chi")),
    "dutch-drill": StyleDef("dutch drill", ("dutchdrill", "dutch", "nl")),
    "french-drill": StyleDef("french drill", ("frenchdrill", "fr", "france")),
    "afro-drill": StyleDef("afro drill", ("afrodrill", "afro")),
    "canadian-drill": StyleDef("canadian drill", ("canadiandrill", "canada", "ca")),
    "australian-drill": StyleDef("australian drill", ("aussi drill", "australia", "au", "australiandrill")),
    "irish-drill": StyleDef("irish drill", ("irishdrill", "ireland", "ie")),
    "german-drill": StyleDef("german drill", ("germandrill", "germany", "de")),
    "spanish-drill": StyleDef("spanish drill", ("spanishdrill", "spain", "es")),
    "italian-drill": StyleDef("italian drill", ("italiandrill", "italy", "it")),
    "brazilian-drill": StyleDef("brazilian drill", ("braziliandrill", "brazil", "br")),
}


def normalize_style(slug) -> str:
    """'UK-Drill ' -> 'uk drill'"""
    if not isinstance(slug, str):
        return ""
    return " ".join(slug.replace("-", " ").split()).lower()


def resolve_style(slug) -> StyleDef:
    """
    Registry entry for a style slug.

    Slugs are matched after normalization, so 'UK Drill' and 'uk-drill'
    resolve alike. Unregistered slugs become a bare genre with no aliases.
    """
    genre = normalize_style(slug)
    return STYLES.get(genre.replace(" ", "-"), StyleDef(genre))
