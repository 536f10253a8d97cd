"""
Score an exam and print the SAW learning-priority recommendations.

Run: python score_result.py --questions questions.json --answers answers.json [--locale en]
     python score_result.py --user <user_id>        (latest stored result)
"""
import argparse
import json
import logging
import sys
from pathlib import Path

from db import get_latest_result
from engine import CATEGORIES
from tryout.labels import format_category_name, resolve_locale
from tryout.packages import practice_target
from tryout.reports import score_band_text
from tryout.saw import as_number, calculate_saw_priority
from tryout.scoring import calculate_category_scores
from tryout.session import result_from_row

logger = logging.getLogger(__name__)


def _load_json(path: str):
    with Path(path).open("r", encoding="utf-8") as f:
        return json.load(f)


def load_scores(args) -> dict:
    if args.user:
        row = get_latest_result(args.user)
        if row is None:
            raise LookupError(f"No exam results for user {args.user}")
        return result_from_row(row)["scores"]
    return calculate_category_scores(_load_json(args.questions), _load_json(args.answers))


def print_report(scores: dict, recommendations: list[dict], locale: str):
    total = as_number(scores.get("total"))
    print()
    print("=" * 60)
    print(f"TOTAL SCORE: {total}/100  ({score_band_text(total, locale)})")
    print("=" * 60)
    for cat in CATEGORIES:
        data = scores.get(cat)
        score = as_number(data.get("score") if isinstance(data, dict) else data)
        print(f"  {format_category_name(cat, locale):<24} {score:>3}")
    print()
    print("Learning priorities (SAW):")
    print("-" * 60)
    for i, rec in enumerate(recommendations, start=1):
        print(f"  {i}. {rec['category']:<24} priority={rec['priorityScore']:.3f}  {rec['label']}  CEFR {rec['cefrLevel']}")
        print(f"     {rec['recommendation']}")
    weakest = practice_target(recommendations)
    if weakest:
        print()
        print(f"Suggested practice: {format_category_name(weakest, locale)}")
    print()


def main():
    parser = argparse.ArgumentParser(description="Score an exam and rank study priorities (SAW).")
    parser.add_argument("--questions", help="JSON file with the exam's question rows")
    parser.add_argument("--answers", help="JSON file mapping question id -> chosen letter")
    parser.add_argument("--user", help="Use the latest stored result of this user instead of files")
    parser.add_argument("--weights", help='JSON object of category weights, e.g. \'{"grammar": 0.4, ...}\'')
    parser.add_argument("--locale", default=None, help="Display language: id (default) or en")
    parser.add_argument("--json", action="store_true", help="Print scores and recommendations as JSON")
    args = parser.parse_args()

    if not args.user and not (args.questions and args.answers):
        parser.error("give --questions and --answers, or --user")

    locale = resolve_locale(args.locale)
    try:
        weights = json.loads(args.weights) if args.weights else None
        scores = load_scores(args)
    except (OSError, ValueError, LookupError) as e:
        logger.error("Could not load exam: %s", e)
        sys.exit(1)

    recommendations = calculate_saw_priority(scores, weights=weights, locale=locale)
    if args.json:
        print(json.dumps({"scores": scores, "recommendations": recommendations}, indent=2, ensure_ascii=False))
    else:
        print_report(scores, recommendations, locale)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    main()
