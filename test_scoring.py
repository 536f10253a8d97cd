"""Category scorer: weighted scores, difficulty tallies, silent drops."""
from tryout.scoring import calculate_category_scores, category_key, parse_difficulty, parse_weight, round_half_up


def make_question(qid, category="Grammar", difficulty=1, weight=1, correct="A"):
    return {"id": qid, "category": category, "difficulty": difficulty, "weight": weight, "correct_answer": correct}


def test_all_correct_single_category():
    questions = [make_question(f"g{i}") for i in range(10)]
    answers = {q["id"]: "A" for q in questions}

    result = calculate_category_scores(questions, answers)

    assert result["grammar"]["score"] == 100
    assert result["total"] == 100
    assert result["grammar"]["difficultyStats"][1] == {"correct": 10, "total": 10}
    assert result["vocab"]["score"] == 0


def test_no_answers_scores_zero_everywhere():
    questions = [make_question("g1"), make_question("v1", "Vocabulary"), make_question("r1", "Reading"),
                 make_question("r2", "Reading"), make_question("c1", "Cloze")]

    result = calculate_category_scores(questions, {})

    for cat in ("grammar", "vocab", "reading", "cloze"):
        assert result[cat]["score"] == 0
    assert result["total"] == 0


def test_mixed_weights():
    questions = [make_question("g1", weight=1), make_question("g2", weight=3)]
    result = calculate_category_scores(questions, {"g1": "B", "g2": "A"})
    assert result["grammar"]["score"] == 75


def test_unknown_category_is_dropped():
    questions = [make_question("g1"), make_question("l1", "Listening", weight=5)]
    result = calculate_category_scores(questions, {"g1": "A", "l1": "A"})

    assert set(result) == {"grammar", "vocab", "reading", "cloze", "total"}
    assert result["grammar"]["score"] == 100
    assert result["total"] == 100
    assert sum(result[c]["difficultyStats"][1]["total"] for c in ("grammar", "vocab", "reading", "cloze")) == 1


def test_category_case_and_vocabulary_alias():
    assert category_key("GRAMMAR") == "grammar"
    assert category_key(" Vocabulary ") == "vocab"
    assert category_key("vocab") == "vocab"
    assert category_key("Listening") is None
    assert category_key(None) is None


def test_missing_weight_and_difficulty_default_to_one():
    questions = [{"id": "r1", "category": "Reading", "correct_answer": "C"},
                 {"id": "r2", "category": "Reading", "correct_answer": "D", "weight": 0, "difficulty": None}]
    result = calculate_category_scores(questions, {"r1": "C"})

    assert result["reading"]["score"] == 50
    assert result["reading"]["difficultyStats"][1] == {"correct": 1, "total": 2}


def test_difficulty_tiers_are_tallied_separately():
    questions = [make_question("c1", "Cloze", difficulty=1), make_question("c2", "Cloze", difficulty=2),
                 make_question("c3", "Cloze", difficulty="3"), make_question("c4", "Cloze", difficulty=3)]
    result = calculate_category_scores(questions, {"c1": "A", "c3": "A", "c4": "E"})

    stats = result["cloze"]["difficultyStats"]
    assert stats[1] == {"correct": 1, "total": 1}
    assert stats[2] == {"correct": 0, "total": 1}
    assert stats[3] == {"correct": 1, "total": 2}


def test_out_of_range_difficulty_counts_as_level_one():
    result = calculate_category_scores([make_question("g1", difficulty=7)], {"g1": "A"})
    assert result["grammar"]["difficultyStats"][1] == {"correct": 1, "total": 1}


def test_unanswered_question_without_key_is_not_correct():
    questions = [{"id": "g1", "category": "Grammar"}]
    result = calculate_category_scores(questions, {})
    assert result["grammar"]["score"] == 0


def test_total_is_weighted_across_categories():
    questions = [make_question("g1", weight=2), make_question("v1", "Vocabulary", weight=1),
                 make_question("v2", "Vocabulary", weight=1)]
    result = calculate_category_scores(questions, {"g1": "A", "v1": "A"})

    assert result["grammar"]["score"] == 100
    assert result["vocab"]["score"] == 50
    assert result["total"] == 75


def test_rounding_is_half_up():
    assert round_half_up(12.5) == 13
    assert round_half_up(0.5) == 1
    assert round_half_up(2.4999) == 2
    # 1/8 = 12.5%
    questions = [make_question(f"g{i}") for i in range(8)]
    result = calculate_category_scores(questions, {"g0": "A"})
    assert result["grammar"]["score"] == 13


def test_scores_stay_in_range_and_tallies_are_consistent():
    questions = [make_question(f"q{i}", cat, difficulty=(i % 3) + 1, weight=(i % 4) + 1)
                 for i, cat in enumerate(["Grammar", "Vocabulary", "Reading", "Cloze"] * 6)]
    answers = {q["id"]: ("A" if i % 2 else "B") for i, q in enumerate(questions)}

    result = calculate_category_scores(questions, answers)
    for cat in ("grammar", "vocab", "reading", "cloze"):
        assert 0 <= result[cat]["score"] <= 100
        for tier in result[cat]["difficultyStats"].values():
            assert 0 <= tier["correct"] <= tier["total"]
    assert 0 <= result["total"] <= 100


def test_malformed_input_does_not_raise():
    result = calculate_category_scores([None, "x", {"category": 5}, {}], None)
    assert result["total"] == 0
    assert calculate_category_scores(None, {})["total"] == 0


def test_numeric_string_weight_is_parsed():
    questions = [make_question("g1", weight="2.0"), make_question("g2", weight=1)]
    result = calculate_category_scores(questions, {"g1": "A"})
    assert result["grammar"]["score"] == 67


def test_weight_and_difficulty_parsers():
    assert parse_weight("2.0") == 2
    assert isinstance(parse_weight("2.0"), int)
    assert parse_weight(1.5) == 1.5
    assert parse_weight(float("inf")) == 1
    assert parse_weight(-2) == 1
    assert parse_weight(None) == 1
    assert parse_difficulty("3") == 3
    assert parse_difficulty(0) == 1
    assert parse_difficulty("hard") == 1
