"""Ingest .jsonl question rows: normalize category/difficulty/weight/answer; bulk UPSERT into questions."""
import json
import argparse
import logging
import sys
from pathlib import Path
from uuid import uuid5, NAMESPACE_DNS

from db import create_audit_log, get_supabase, upsert_questions_bulk
from engine import ANSWER_LETTERS, BANK_CATEGORIES
from tryout.scoring import category_key, parse_difficulty, parse_weight

logger = logging.getLogger(__name__)

DEFAULT_JSONL = Path(__file__).resolve().parent / "questions.jsonl"


def parse_line(line: str) -> dict | None:
    """Parse one JSONL line into a questions row. Returns None if invalid/skip."""
    line = line.strip()
    if not line:
        return None
    try:
        raw = json.loads(line)
    except json.JSONDecodeError:
        return None
    if not isinstance(raw, dict):
        return None

    key = category_key(raw.get("category"))
    if key is None:
        logger.warning("Skipping question with unknown category %r", raw.get("category"))
        return None
    text = (raw.get("question_text") or raw.get("text") or "").strip()
    if not text:
        return None
    options = raw.get("options")
    if not isinstance(options, dict) or len(options) < 2:
        return None
    options = {letter: options[letter] for letter in ANSWER_LETTERS if letter in options}
    correct = str(raw.get("correct_answer") or "").strip().upper()
    if correct not in options:
        return None

    uid = raw.get("id") or str(uuid5(NAMESPACE_DNS, f"{key}:{text}"))
    return {
        "id": uid,
        "category": BANK_CATEGORIES[key],
        "question_text": text,
        "options": options,
        "correct_answer": correct,
        "difficulty": parse_difficulty(raw.get("difficulty")),
        "weight": parse_weight(raw.get("weight")),
    }


def load_and_transform(path: Path):
    """Read JSONL and yield transformed question rows."""
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            row = parse_line(line)
            if row:
                yield row


def run_import(jsonl_path: Path | None = None, chunk_size: int = 200, dry_run: bool = False):
    path = jsonl_path or DEFAULT_JSONL
    if not path.exists():
        raise FileNotFoundError(f"JSONL not found: {path}")
    rows = list(load_and_transform(path))
    if dry_run:
        print(f"Dry run: would upsert {len(rows)} questions from {path}")
        if rows:
            print("Sample row:", rows[0])
        return rows

    upsert_questions_bulk(get_supabase(), rows, chunk_size=chunk_size)
    create_audit_log("CREATE_QUESTION", f"Imported {len(rows)} questions from {path.name}")
    print(f"Upserted {len(rows)} questions from {path}")
    return rows


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    parser = argparse.ArgumentParser(description="Import question JSONL into Supabase questions.")
    parser.add_argument(
        "jsonl",
        nargs="?",
        default=None,
        help=f"Path to .jsonl (default: {DEFAULT_JSONL})",
    )
    parser.add_argument("--chunk-size", type=int, default=200, help="Upsert chunk size (default 200)")
    parser.add_argument("--dry-run", action="store_true", help="Parse only, do not upsert")
    args = parser.parse_args()
    try:
        run_import(jsonl_path=Path(args.jsonl) if args.jsonl else None, chunk_size=args.chunk_size, dry_run=args.dry_run)
    except Exception as e:
        logger.error("Import failed: %s", e)
        sys.exit(1)
