"""Admin reports over stored exam results: summary statistics, score bands, CSV export."""
import logging
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from engine import CATEGORIES, SCORE_BANDS
from tryout.labels import DEFAULT_LOCALE, score_band_label
from tryout.scoring import round_half_up

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["id", "user_id", "exam_type", "created_at", "score_total"] + [f"score_{cat}" for cat in CATEGORIES]


def category_score(row: Dict, category: str) -> float:
    """Score of one category in a result row: category_scores (number or {score}), else legacy score_<key>."""
    value = (row.get("category_scores") or {}).get(category)
    if isinstance(value, dict):
        value = value.get("score")
    if value is None:
        value = row.get(f"score_{category}")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


def results_frame(rows: List[Dict]) -> pd.DataFrame:
    """One line per result with flat score columns."""
    records = []
    for row in rows or []:
        record = {
            "id": row.get("id"),
            "user_id": row.get("user_id"),
            "exam_type": row.get("exam_type"),
            "created_at": row.get("created_at"),
            "score_total": row.get("score_total") or 0,
        }
        for cat in CATEGORIES:
            record[f"score_{cat}"] = category_score(row, cat)
        records.append(record)
    return pd.DataFrame.from_records(records, columns=CSV_COLUMNS)


def summarize_results(rows: List[Dict]) -> Optional[Dict]:
    """
    Dashboard numbers for a list of exam_results rows.

    Returns:
        {total_exams, total_students, average_score, category_averages} or None when there are no rows
    """
    df = results_frame(rows)
    if df.empty:
        return None
    return {
        "total_exams": len(df),
        "total_students": int(df["user_id"].nunique()),
        "average_score": round_half_up(float(df["score_total"].mean())),
        "category_averages": {cat: round_half_up(float(df[f"score_{cat}"].mean())) for cat in CATEGORIES},
    }


def score_band(score: float) -> str:
    for minimum, band in SCORE_BANDS:
        if score >= minimum:
            return band
    return SCORE_BANDS[-1][1]


def score_band_text(score: float, locale: str = DEFAULT_LOCALE) -> str:
    return score_band_label(score_band(score), locale)


def results_to_csv(rows: List[Dict], path: Optional[Path] = None) -> str:
    """CSV text of the results; also written to path when given."""
    text = results_frame(rows).to_csv(index=False)
    if path is not None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        logger.info("Wrote %d results to %s", len(rows or []), path)
    return text
