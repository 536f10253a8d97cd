"""Exam packages: which questions a package draws from the bank and how long it runs."""
import logging
from typing import Dict, List, Optional

from engine import DEFAULT_PACKAGE_LIMIT, EXAM_DURATION_SECONDS, PACKAGES, PRACTICE_PACKAGE
from tryout.scoring import category_key

logger = logging.getLogger(__name__)


def _in_category(questions: List[Dict], key: str) -> List[Dict]:
    return [q for q in questions if category_key(q.get("category")) == key]


def select_package_questions(questions: List[Dict], package_id: Optional[str],
                             category: Optional[str] = None) -> List[Dict]:
    """
    Pick the questions for a package, keeping bank order.

    Args:
        questions: Question rows from the bank
        package_id: Package id (see engine.PACKAGES); unknown ids get the first 50 questions
        category: Target category for the practice package ("Grammar", "vocab", ...)
    """
    questions = list(questions or [])
    package = PACKAGES.get(package_id)
    if package is None:
        return questions[:DEFAULT_PACKAGE_LIMIT]

    categories, limit, _ = package
    if package_id == PRACTICE_PACKAGE:
        if not category:
            return questions
        target = category_key(category)
        if target is None:
            logger.warning("Unknown practice category %r", category)
            return []
        return _in_category(questions, target)[:limit]

    selected = []
    for key in categories:
        selected.extend(_in_category(questions, key)[:limit])
    logger.info("Package %s: selected %d of %d questions", package_id, len(selected), len(questions))
    return selected


def get_package_duration(package_id: Optional[str]) -> int:
    """Exam length in seconds."""
    package = PACKAGES.get(package_id)
    return package[2] if package else EXAM_DURATION_SECONDS


def exam_type_for(package_id: Optional[str]) -> str:
    return "practice" if package_id == PRACTICE_PACKAGE else "tryout"


def practice_target(recommendations: List[Dict]) -> Optional[str]:
    """Category key of the weakest area (first ranked recommendation)."""
    if not recommendations:
        return None
    return recommendations[0].get("categoryKey")
