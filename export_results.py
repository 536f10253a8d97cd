"""
Export stored exam results to CSV and print the admin summary.

Run: python export_results.py [--out output/exam_results.csv] [--user <user_id>] [--limit 500]
"""
import argparse
import logging
import sys
from pathlib import Path

from db import create_audit_log, get_exam_results
from engine import CATEGORIES
from tryout.labels import format_category_name, resolve_locale
from tryout.reports import results_to_csv, summarize_results

logger = logging.getLogger(__name__)

DEFAULT_OUT = Path("output") / "exam_results.csv"


def main():
    parser = argparse.ArgumentParser(description="Export exam results to CSV.")
    parser.add_argument("--out", default=str(DEFAULT_OUT), help=f"CSV path (default {DEFAULT_OUT})")
    parser.add_argument("--user", default=None, help="Only this user's results")
    parser.add_argument("--limit", type=int, default=None, help="Max results to export")
    parser.add_argument("--locale", default=None, help="Display language: id (default) or en")
    args = parser.parse_args()
    locale = resolve_locale(args.locale)

    try:
        rows = get_exam_results(args.user, limit=args.limit)
    except Exception as e:
        logger.error("Could not load exam results: %s", e)
        sys.exit(1)

    summary = summarize_results(rows)
    if summary is None:
        print("No exam results found.")
        return

    out = Path(args.out)
    results_to_csv(rows, out)
    create_audit_log("EXPORT_RESULTS", f"Exported {len(rows)} exam results to {out.name}")

    print(f"Exams: {summary['total_exams']}  Students: {summary['total_students']}  Average: {summary['average_score']}")
    for cat in CATEGORIES:
        print(f"  {format_category_name(cat, locale):<24} {summary['category_averages'][cat]:>3}")
    print(f"Saved CSV to {out}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    main()
