"""
Run a package exam end to end from an answers file: draw the package's questions from the bank,
record the answers in a timed session, store the result and print the learning priorities.

Run: python run_exam.py --package comprehensive_test --answers answers.json --user <user_id>
     python run_exam.py --package practice --category Grammar --answers answers.json --user <user_id>
"""
import argparse
import json
import logging
import sys
from pathlib import Path

from db import create_audit_log, get_questions, save_exam_result
from engine import PACKAGES
from score_result import print_report
from tryout.labels import resolve_locale
from tryout.packages import get_package_duration, select_package_questions
from tryout.saw import calculate_saw_priority
from tryout.session import ExamSession

logger = logging.getLogger(__name__)


def load_answers(path: Path) -> dict:
    """{question_id: letter} from a JSON file."""
    with path.open("r", encoding="utf-8") as f:
        answers = json.load(f)
    if not isinstance(answers, dict):
        raise ValueError(f"{path} must hold a JSON object of question id -> letter")
    return answers


def run_exam(package_id: str, answers: dict, user_id: str, category: str | None = None,
             locale: str | None = None, weights: dict | None = None):
    """
    Take one exam and store it.

    Returns:
        (exam_results row, SAW recommendations)
    """
    questions = select_package_questions(get_questions(), package_id, category)
    if not questions:
        raise LookupError(f"No questions available for package {package_id}")

    session = ExamSession(questions, duration=get_package_duration(package_id))
    session.start()
    refused = [qid for qid, letter in answers.items() if not session.set_answer(qid, letter)]
    if refused:
        logger.warning("%d answers were not part of this exam or invalid", len(refused))
    row = session.to_result_row(user_id, package_id)

    saved = save_exam_result(row)
    saved_rows = getattr(saved, "data", None) or []
    target_id = saved_rows[0].get("id") if saved_rows else None
    create_audit_log(
        "SUBMIT_EXAM",
        f"User {user_id} submitted {package_id}: {session.answered_count}/{session.total_questions} answered, "
        f"total {row['score_total']}",
        target_id=target_id,
    )

    recommendations = calculate_saw_priority(row["category_scores"], weights=weights, locale=resolve_locale(locale))
    return row, recommendations


def main(argv=None):
    parser = argparse.ArgumentParser(description="Take a package exam from an answers file and store the result.")
    parser.add_argument("--package", required=True, help=f"Package id: {', '.join(PACKAGES)}")
    parser.add_argument("--answers", required=True, help="JSON file mapping question id -> chosen letter")
    parser.add_argument("--user", required=True, help="User id the result is stored for")
    parser.add_argument("--category", default=None, help="Target category for the practice package")
    parser.add_argument("--weights", help='JSON object of category weights, e.g. \'{"grammar": 0.4, ...}\'')
    parser.add_argument("--locale", default=None, help="Display language: id (default) or en")
    args = parser.parse_args(argv)

    locale = resolve_locale(args.locale)
    try:
        weights = json.loads(args.weights) if args.weights else None
        row, recommendations = run_exam(args.package, load_answers(Path(args.answers)), args.user,
                                        category=args.category, locale=locale, weights=weights)
    except Exception as e:
        logger.error("Exam run failed: %s", e)
        sys.exit(1)

    print(f"Saved {row['exam_type']} result for user {row['user_id']} ({len(row['answers'])} answers)")
    print_report(dict(row["category_scores"], total=row["score_total"]), recommendations, locale)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    main()
