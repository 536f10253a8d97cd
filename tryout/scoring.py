"""
Category Scorer: weighted per-category scores and per-difficulty accuracy from raw exam answers.
Unknown categories are dropped silently; missing weight/difficulty default to 1.
"""
import math
from typing import Dict, List, Optional

from engine import CATEGORIES, CATEGORY_ALIASES, DIFFICULTY_LEVELS


def round_half_up(value: float) -> int:
    """Round like Math.round: .5 goes up."""
    return int(math.floor(value + 0.5))


def category_key(category) -> Optional[str]:
    """Map a bank category ("Grammar", "Vocabulary", ...) to its canonical key, or None."""
    if not isinstance(category, str):
        return None
    return CATEGORY_ALIASES.get(category.strip().lower())


def parse_difficulty(raw) -> int:
    """Difficulty level 1-3; anything else reads as 1."""
    try:
        level = int(raw)
    except (TypeError, ValueError):
        return 1
    return level if level in DIFFICULTY_LEVELS else 1


def parse_weight(raw) -> float:
    """Positive point value; ints, floats and numeric strings ("2", "2.0"). Anything else reads as 1."""
    try:
        weight = float(raw)
    except (TypeError, ValueError):
        return 1
    if not math.isfinite(weight) or weight <= 0:
        return 1
    return int(weight) if weight.is_integer() else weight


def empty_difficulty_stats() -> Dict[int, Dict[str, int]]:
    return {level: {"correct": 0, "total": 0} for level in DIFFICULTY_LEVELS}


def calculate_category_scores(questions: List[Dict], answers: Dict) -> Dict:
    """
    Aggregate answered questions into weighted category scores.

    Args:
        questions: Question rows. Keys used: id, category, difficulty, weight, correct_answer
        answers: {question_id: chosen letter}; unanswered questions are absent

    Returns:
        {grammar: {score, difficultyStats}, vocab: ..., reading: ..., cloze: ..., total: int}
    """
    answers = answers or {}
    category_stats = {
        cat: {"earnedPoints": 0, "maxPoints": 0, "difficultyStats": empty_difficulty_stats()}
        for cat in CATEGORIES
    }

    for question in questions or []:
        if not isinstance(question, dict):
            continue
        stats = category_stats.get(category_key(question.get("category")))
        if stats is None:
            continue

        weight = parse_weight(question.get("weight"))
        tier = stats["difficultyStats"][parse_difficulty(question.get("difficulty"))]
        stats["maxPoints"] += weight
        tier["total"] += 1

        chosen = answers.get(question.get("id"))
        if chosen is not None and chosen == question.get("correct_answer"):
            stats["earnedPoints"] += weight
            tier["correct"] += 1

    results = {}
    total_earned = 0
    total_max = 0
    for cat, stats in category_stats.items():
        score = round_half_up(stats["earnedPoints"] / stats["maxPoints"] * 100) if stats["maxPoints"] > 0 else 0
        results[cat] = {"score": score, "difficultyStats": stats["difficultyStats"]}
        total_earned += stats["earnedPoints"]
        total_max += stats["maxPoints"]

    results["total"] = round_half_up(total_earned / total_max * 100) if total_max > 0 else 0
    return results
