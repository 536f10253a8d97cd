"""Display strings per locale. Scoring works on canonical keys only; these tables turn them into text."""
import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "id"

CATEGORY_NAMES = {
    "id": {
        "grammar": "Tata Bahasa",
        "vocab": "Kosakata",
        "reading": "Pemahaman Bacaan",
        "cloze": "Tes Rumpang",
    },
    "en": {
        "grammar": "Grammar",
        "vocab": "Vocabulary",
        "reading": "Reading Comprehension",
        "cloze": "Cloze Test",
    },
}

PRIORITY_LABELS = {
    "id": {
        "critical": "Prioritas Kritis",
        "high": "Prioritas Tinggi",
        "medium": "Prioritas Sedang",
        "low": "Prioritas Rendah",
    },
    "en": {
        "critical": "Critical Priority",
        "high": "High Priority",
        "medium": "Medium Priority",
        "low": "Low Priority",
    },
}

# {category} is filled with the display name
RECOMMENDATIONS = {
    "id": {
        "foundation": "Fokus kembali pada konsep dasar {category}. Fondasi Anda di level A1/A2 masih perlu diperkuat.",
        "intermediate": "Tingkatkan pemahaman konteks dan variasi soal untuk {category} level Menengah (B1/B2).",
        "advanced": "Pertahankan performa! Fokus pada detail halus dan pengecualian aturan untuk mencapai level Advanced (C1/C2).",
    },
    "en": {
        "foundation": "Go back to the basic concepts of {category}. Your A1/A2 foundation still needs strengthening.",
        "intermediate": "Improve your grasp of context and question variety for {category} at the Intermediate level (B1/B2).",
        "advanced": "Keep it up! Focus on fine details and rule exceptions to reach the Advanced level (C1/C2).",
    },
}

SCORE_BAND_LABELS = {
    "id": {
        "very_good": "Sangat Baik",
        "good": "Baik",
        "needs_improvement": "Perlu Peningkatan",
    },
    "en": {
        "very_good": "Very Good",
        "good": "Good",
        "needs_improvement": "Needs Improvement",
    },
}


def resolve_locale(locale: str | None = None) -> str:
    """Pick a supported locale: explicit value, then TRYOUT_LOCALE, then the default."""
    candidate = (locale or os.environ.get("TRYOUT_LOCALE") or DEFAULT_LOCALE).strip().lower()
    if candidate not in CATEGORY_NAMES:
        logger.warning("Unsupported locale %r, falling back to %r", candidate, DEFAULT_LOCALE)
        return DEFAULT_LOCALE
    return candidate


def format_category_name(category: str, locale: str = DEFAULT_LOCALE) -> str:
    """Display name for a category key; unknown keys are shown as-is."""
    return CATEGORY_NAMES.get(locale, CATEGORY_NAMES[DEFAULT_LOCALE]).get(category, category)


def priority_label(level: str, locale: str = DEFAULT_LOCALE) -> str:
    return PRIORITY_LABELS.get(locale, PRIORITY_LABELS[DEFAULT_LOCALE])[level]


def recommendation_text(kind: str, category: str, locale: str = DEFAULT_LOCALE) -> str:
    template = RECOMMENDATIONS.get(locale, RECOMMENDATIONS[DEFAULT_LOCALE])[kind]
    return template.format(category=format_category_name(category, locale))


def score_band_label(band: str, locale: str = DEFAULT_LOCALE) -> str:
    return SCORE_BAND_LABELS.get(locale, SCORE_BAND_LABELS[DEFAULT_LOCALE])[band]
