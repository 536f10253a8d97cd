"""Pure exam constants: categories, SAW weights, priority thresholds, CEFR cut-offs, packages. No I/O."""
# Priority = ((100 - score) / 100) * weight * (1 + level1_error_rate * 0.5)

# Canonical category keys, in the order the ranker processes them
CATEGORIES = ("grammar", "vocab", "reading", "cloze")

# Lowercased bank category -> canonical key
CATEGORY_ALIASES = {
    "grammar": "grammar",
    "vocab": "vocab",
    "vocabulary": "vocab",
    "reading": "reading",
    "cloze": "cloze",
}

# Bank spelling of each category (questions table)
BANK_CATEGORIES = {
    "grammar": "Grammar",
    "vocab": "Vocabulary",
    "reading": "Reading",
    "cloze": "Cloze",
}

DIFFICULTY_LEVELS = (1, 2, 3)
ANSWER_LETTERS = ("A", "B", "C", "D", "E")

DEFAULT_WEIGHTS = {
    "cloze": 0.30,
    "grammar": 0.25,
    "reading": 0.25,
    "vocab": 0.20,
}

FOUNDATION_FACTOR = 0.5

# Checked top-down, first match wins
PRIORITY_THRESHOLDS = {
    "critical": 0.25,
    "high": 0.20,
    "medium": 0.15,
}

PRIORITY_COLORS = {
    "critical": "#ef4444",
    "high": "#f97316",
    "medium": "#eab308",
    "low": "#22c55e",
}

# Recommendation text branches
FOUNDATION_RATE_MIN = 0.7
ADVANCED_SCORE_MIN = 80

# Result score bands
SCORE_BANDS = (
    (80, "very_good"),
    (60, "good"),
    (0, "needs_improvement"),
)

# Packages: id -> (category keys, per-category limit, duration seconds)
PACKAGES = {
    "grammar_basic": (("grammar",), 20, 1800),
    "vocabulary_intermediate": (("vocab",), 30, 2700),
    "reading_comprehension": (("reading",), 25, 3600),
    "cloze_advanced": (("cloze",), 20, 2700),
    "comprehensive_test": (CATEGORIES, 12, 5400),
    "practice": ((), 15, 900),
}
PRACTICE_PACKAGE = "practice"
DEFAULT_PACKAGE_LIMIT = 50
EXAM_DURATION_SECONDS = 3600

# Timer colouring
TIME_CRITICAL_SECONDS = 300
TIME_WARNING_SECONDS = 600
