"""
SAW (Simple Additive Weighting) priority ranking for study recommendations.

Each category is a cost criterion: the lower the score, the higher the cost and
the sooner the student should study it. Weak level-1 results amplify the cost
(up to 1.5x) because they point at a gap in the foundations.
"""
import math
from typing import Dict, List, Optional

from engine import (
    ADVANCED_SCORE_MIN,
    CATEGORIES,
    DEFAULT_WEIGHTS,
    FOUNDATION_FACTOR,
    FOUNDATION_RATE_MIN,
    PRIORITY_COLORS,
    PRIORITY_THRESHOLDS,
)
from tryout.labels import DEFAULT_LOCALE, format_category_name, priority_label, recommendation_text


def as_number(value) -> float:
    """Numbers pass through; None, NaN, bools and anything else read as 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)) and not math.isnan(value):
        return value
    return 0


def tier_counts(difficulty_stats: Optional[Dict], level: int) -> tuple:
    """(correct, total) for one difficulty level. JSONB round-trips turn int keys into strings."""
    if not isinstance(difficulty_stats, dict):
        return 0, 0
    tier = difficulty_stats.get(level)
    if tier is None:
        tier = difficulty_stats.get(str(level))
    if not isinstance(tier, dict):
        return 0, 0
    return as_number(tier.get("correct")), as_number(tier.get("total"))


def _rate(difficulty_stats: Optional[Dict], level: int, empty: float = 0.0) -> float:
    correct, total = tier_counts(difficulty_stats, level)
    return correct / total if total > 0 else empty


def determine_cefr(difficulty_stats: Optional[Dict]) -> str:
    """
    Estimate a CEFR level from accuracy per difficulty tier (1≈A1/A2, 2≈B1/B2, 3≈C1/C2).
    Branches are tried top-down; a tier without questions counts as rate 0.
    """
    if not difficulty_stats:
        return "A1"

    l1_rate = _rate(difficulty_stats, 1)
    l2_rate = _rate(difficulty_stats, 2)
    l3_rate = _rate(difficulty_stats, 3)
    _, l2_total = tier_counts(difficulty_stats, 2)

    if l3_rate >= 0.7 and l2_rate >= 0.8:
        return "C1/C2"
    if l3_rate >= 0.3 or l2_rate >= 0.7:
        return "B2"
    if l2_rate >= 0.4 or (l1_rate >= 0.9 and l2_total == 0):
        return "B1"
    if l1_rate >= 0.6:
        return "A2"
    return "A1"


def get_enhanced_recommendation(category: str, score: float, difficulty_stats: Optional[Dict],
                                locale: str = DEFAULT_LOCALE) -> str:
    """Guidance text. No level-1 data counts as a solid foundation here (unlike determine_cefr)."""
    l1_rate = _rate(difficulty_stats, 1, empty=1.0)

    if l1_rate < FOUNDATION_RATE_MIN:
        return recommendation_text("foundation", category, locale)
    if score < ADVANCED_SCORE_MIN:
        return recommendation_text("intermediate", category, locale)
    return recommendation_text("advanced", category, locale)


def priority_level(priority_score: float) -> str:
    """critical / high / medium / low."""
    for level, threshold in PRIORITY_THRESHOLDS.items():
        if priority_score >= threshold:
            return level
    return "low"


def get_priority_color(priority_score: float) -> str:
    return PRIORITY_COLORS[priority_level(priority_score)]


def get_priority_label(priority_score: float, locale: str = DEFAULT_LOCALE) -> str:
    return priority_label(priority_level(priority_score), locale)


def _ordered_categories(category_scores: Dict) -> List[str]:
    known = [cat for cat in CATEGORIES if cat in category_scores]
    extra = [cat for cat in category_scores if cat not in CATEGORIES and cat != "total"]
    return known + extra


def calculate_saw_priority(category_scores: Dict, weights: Optional[Dict] = None,
                           locale: str = DEFAULT_LOCALE) -> List[Dict]:
    """
    Rank categories by learning priority.

    Args:
        category_scores: Output of calculate_category_scores (the "total" entry is ignored).
            A bare number per category is read as a flat score with no difficulty data.
        weights: {category: weight}; replaces DEFAULT_WEIGHTS entirely when given
        locale: Display language for category names, labels and guidance

    Returns:
        Recommendations sorted by priorityScore, highest first. Ties keep
        grammar, vocab, reading, cloze order.
    """
    if not isinstance(category_scores, dict):
        return []
    weights = DEFAULT_WEIGHTS if weights is None else weights

    priorities = []
    for category in _ordered_categories(category_scores):
        data = category_scores[category]
        if isinstance(data, dict):
            score = as_number(data.get("score"))
            difficulty_stats = data.get("difficultyStats")
        else:
            score = as_number(data)
            difficulty_stats = None

        raw_cost = (100 - score) / 100

        l1_correct, l1_total = tier_counts(difficulty_stats, 1)
        l1_error_rate = (l1_total - l1_correct) / l1_total if l1_total > 0 else 0
        foundation_multiplier = 1 + l1_error_rate * FOUNDATION_FACTOR

        weight = as_number(weights.get(category)) if isinstance(weights, dict) else 0
        priority_score = raw_cost * weight * foundation_multiplier

        priorities.append({
            "category": format_category_name(category, locale),
            "categoryKey": category,
            "rawScore": score,
            "priorityScore": math.floor(priority_score * 1000 + 0.5) / 1000,
            "color": get_priority_color(priority_score),
            "label": get_priority_label(priority_score, locale),
            "recommendation": get_enhanced_recommendation(category, score, difficulty_stats, locale),
            "cefrLevel": determine_cefr(difficulty_stats),
        })

    # sorted() is stable
    return sorted(priorities, key=lambda p: p["priorityScore"], reverse=True)
