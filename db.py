"""Supabase access for questions, exam results and audit logs. Client is cached per process."""
import logging
import os
from functools import lru_cache
from uuid import UUID

from dotenv import load_dotenv
from supabase import create_client, Client

load_dotenv()

logger = logging.getLogger(__name__)


def _env_client() -> Client:
    url = os.environ.get("SUPABASE_URL")
    key = os.environ.get("SUPABASE_KEY")
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set")
    return create_client(url, key)


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    return _env_client()


def upsert_questions_bulk(client: Client, rows: list[dict], chunk_size: int = 200):
    """Bulk upsert into questions. Rows must include 'id'. Dedupes by id so no chunk has duplicates (avoids Postgres ON CONFLICT error)."""
    n_before = len(rows)
    by_id = {r["id"]: r for r in rows}
    rows = list(by_id.values())
    if len(rows) < n_before:
        logger.info("Deduped questions by id: %d -> %d", n_before, len(rows))
    n_chunks = (len(rows) + chunk_size - 1) // chunk_size
    for i in range(0, len(rows), chunk_size):
        chunk = rows[i : i + chunk_size]
        logger.info("Upserting chunk %d/%d (%d rows)", i // chunk_size + 1, n_chunks, len(chunk))
        client.table("questions").upsert(chunk, on_conflict="id").execute()


# --- Questions ---

def get_questions(category: str | None = None, limit: int | None = None) -> list[dict]:
    """Question bank rows, newest first. category uses the bank spelling ("Grammar", "Vocabulary", ...)."""
    q = get_supabase().table("questions").select("*")
    if category:
        q = q.eq("category", category)
    q = q.order("created_at", desc=True)
    if limit:
        q = q.limit(limit)
    return q.execute().data or []


def get_question_counts() -> dict:
    """Returns {category: count} for the bank (for dashboards)."""
    rows = get_supabase().table("questions").select("category").execute().data or []
    counts: dict = {}
    for row in rows:
        cat = row.get("category") or "(blank)"
        counts[cat] = counts.get(cat, 0) + 1
    return counts


# --- Exam results ---

def save_exam_result(row: dict):
    logger.info("Saving %s result for user %s (total=%s)", row.get("exam_type"), row.get("user_id"), row.get("score_total"))
    return get_supabase().table("exam_results").insert(row).execute()


def get_exam_results(user_id: UUID | str | None = None, limit: int | None = None) -> list[dict]:
    """Exam results with the student's profile, newest first."""
    q = (
        get_supabase()
        .table("exam_results")
        .select("*, profiles(full_name, school)")
        .order("created_at", desc=True)
    )
    if user_id is not None:
        q = q.eq("user_id", str(user_id))
    if limit:
        q = q.limit(limit)
    return q.execute().data or []


def get_latest_result(user_id: UUID | str) -> dict | None:
    rows = get_exam_results(user_id, limit=1)
    return rows[0] if rows else None


# --- Audit logs ---

def create_audit_log(action: str, description: str, target_id: UUID | str | None = None):
    row = {"action": action, "description": description}
    if target_id is not None:
        row["target_id"] = str(target_id)
    return get_supabase().table("audit_logs").insert(row).execute()
