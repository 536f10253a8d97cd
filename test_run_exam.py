"""End-to-end exam run from an answers file (Supabase mocked)."""
import json
from unittest import mock

import pytest

import run_exam

BANK = [
    {"id": "g1", "category": "Grammar", "difficulty": 1, "weight": 1, "correct_answer": "A"},
    {"id": "g2", "category": "Grammar", "difficulty": 2, "weight": 3, "correct_answer": "B"},
    {"id": "v1", "category": "Vocabulary", "difficulty": 1, "weight": 1, "correct_answer": "C"},
]


@pytest.fixture
def db_calls():
    saved = mock.Mock(data=[{"id": "res-1"}])
    with mock.patch.object(run_exam, "get_questions", return_value=BANK), \
            mock.patch.object(run_exam, "save_exam_result", return_value=saved) as save, \
            mock.patch.object(run_exam, "create_audit_log") as audit:
        yield save, audit


def test_run_exam_stores_result_and_ranks(db_calls):
    save, audit = db_calls
    answers = {"g1": "A", "g2": "C", "v1": "C", "unknown": "A"}

    row, recommendations = run_exam.run_exam("grammar_basic", answers, "user-1", locale="en")

    # v1 is not in a grammar package
    assert row["answers"] == {"g1": "A", "g2": "C"}
    assert row["exam_type"] == "tryout"
    assert row["score_total"] == 25
    assert row["category_scores"]["grammar"]["score"] == 25
    save.assert_called_once_with(row)
    assert audit.call_args.args[0] == "SUBMIT_EXAM"
    assert audit.call_args.kwargs["target_id"] == "res-1"

    assert [r["categoryKey"] for r in recommendations] == ["cloze", "reading", "vocab", "grammar"]
    assert recommendations[-1]["priorityScore"] == 0.188


def test_practice_package_is_stored_as_practice(db_calls):
    row, _ = run_exam.run_exam("practice", {"v1": "C"}, "user-2", category="vocab")
    assert row["exam_type"] == "practice"
    assert row["category_scores"]["vocab"]["score"] == 100


def test_empty_selection_is_an_error(db_calls):
    save, _ = db_calls
    with pytest.raises(LookupError):
        run_exam.run_exam("practice", {}, "user-3", category="Listening")
    save.assert_not_called()


def test_main_prints_ranking(db_calls, tmp_path, capsys):
    path = tmp_path / "answers.json"
    path.write_text(json.dumps({"g1": "A", "v1": "C"}), encoding="utf-8")

    run_exam.main(["--package", "comprehensive_test", "--answers", str(path), "--user", "user-4",
                   "--locale", "en"])

    out = capsys.readouterr().out
    assert "Saved tryout result for user user-4 (2 answers)" in out
    assert "TOTAL SCORE: 40/100" in out
    assert "Learning priorities (SAW):" in out


def test_main_rejects_answers_that_are_not_an_object(db_calls, tmp_path):
    path = tmp_path / "answers.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        run_exam.main(["--package", "practice", "--answers", str(path), "--user", "user-5"])
    assert exc.value.code == 1
