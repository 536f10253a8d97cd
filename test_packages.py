"""Package selection, durations and practice targeting."""
from tryout.packages import exam_type_for, get_package_duration, practice_target, select_package_questions


def bank(per_category=40):
    rows = []
    for cat in ("Grammar", "Vocabulary", "Reading", "Cloze"):
        rows.extend({"id": f"{cat[0]}{i}", "category": cat} for i in range(per_category))
    return rows


def test_single_category_packages():
    questions = bank()
    grammar = select_package_questions(questions, "grammar_basic")
    assert len(grammar) == 20
    assert {q["category"] for q in grammar} == {"Grammar"}
    assert grammar[0]["id"] == "G0"

    assert len(select_package_questions(questions, "vocabulary_intermediate")) == 30
    assert len(select_package_questions(questions, "reading_comprehension")) == 25
    assert len(select_package_questions(questions, "cloze_advanced")) == 20


def test_comprehensive_test_takes_twelve_per_category_in_order():
    selected = select_package_questions(bank(), "comprehensive_test")
    assert len(selected) == 48
    assert [q["category"] for q in selected[::12]] == ["Grammar", "Vocabulary", "Reading", "Cloze"]


def test_practice_package():
    questions = bank()
    selected = select_package_questions(questions, "practice", category="Reading")
    assert len(selected) == 15
    assert {q["category"] for q in selected} == {"Reading"}
    assert len(select_package_questions(questions, "practice", category="vocab")) == 15
    assert select_package_questions(questions, "practice") == questions
    assert select_package_questions(questions, "practice", category="Listening") == []


def test_unknown_package_takes_first_fifty():
    questions = bank()
    assert select_package_questions(questions, None) == questions[:50]
    assert select_package_questions(questions, "grammar_practice") == questions[:50]


def test_small_bank():
    assert len(select_package_questions(bank(5), "comprehensive_test")) == 20
    assert select_package_questions([], "grammar_basic") == []


def test_durations():
    assert get_package_duration("grammar_basic") == 1800
    assert get_package_duration("vocabulary_intermediate") == 2700
    assert get_package_duration("reading_comprehension") == 3600
    assert get_package_duration("cloze_advanced") == 2700
    assert get_package_duration("comprehensive_test") == 5400
    assert get_package_duration("practice") == 900
    assert get_package_duration("unknown") == 3600


def test_exam_type_and_practice_target():
    assert exam_type_for("practice") == "practice"
    assert exam_type_for("comprehensive_test") == "tryout"
    assert practice_target([{"categoryKey": "cloze"}, {"categoryKey": "grammar"}]) == "cloze"
    assert practice_target([]) is None
