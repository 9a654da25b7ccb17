"""
Category keyword table and its compiled matcher.

The table is static configuration shipped with the package. Declaration
order matters: when two categories reach the same score, the one
declared first wins.
"""

import re
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Mapping, Sequence, Tuple

DEFAULT_CATEGORY = "default"

CATEGORY_KEYWORDS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "technology": (
        "machine learning", "artificial intelligence", "ai", "ml", "programming", "software",
        "computer", "algorithm", "data science", "python", "javascript", "web development",
        "blockchain", "cryptocurrency", "cloud computing", "cybersecurity", "automation",
        "robotics", "iot", "internet of things", "neural network", "deep learning",
        "api", "database", "framework", "coding", "tech", "digital", "app", "mobile",
    ),
    "science": (
        "physics", "chemistry", "biology", "research", "experiment", "scientific",
        "study", "theory", "hypothesis", "analysis", "genetics", "evolution",
        "quantum", "molecular", "climate", "environment", "ecology", "astronomy",
        "geology", "mathematics", "statistics", "laboratory", "discovery",
    ),
    "business": (
        "business", "marketing", "finance", "management", "strategy", "startup",
        "entrepreneur", "investment", "market", "economy", "sales", "customer",
        "revenue", "profit", "company", "corporate", "leadership", "team",
        "project management", "agile", "productivity", "innovation", "growth",
    ),
    "health": (
        "health", "medical", "medicine", "healthcare", "wellness", "fitness",
        "nutrition", "diet", "exercise", "mental health", "therapy", "treatment",
        "disease", "prevention", "symptoms", "diagnosis", "pharmaceutical",
        "hospital", "patient", "doctor", "nurse", "surgery", "recovery",
    ),
    "education": (
        "education", "learning", "teaching", "school", "university", "student",
        "curriculum", "academic", "knowledge", "skill", "training", "course",
        "degree", "certification", "pedagogy", "classroom", "online learning",
        "e-learning", "tutorial", "lesson", "study", "research",
    ),
    "creative": (
        "art", "design", "creative", "music", "writing", "literature", "poetry",
        "painting", "photography", "film", "movie", "theater", "dance",
        "sculpture", "graphic design", "ux", "ui", "visual", "aesthetic",
        "storytelling", "creativity", "inspiration", "culture", "entertainment",
    ),
    "lifestyle": (
        "lifestyle", "travel", "food", "cooking", "recipe", "culture", "tradition",
        "hobby", "entertainment", "sports", "game", "leisure", "fashion",
        "home", "family", "relationship", "personal development", "mindfulness",
        "meditation", "philosophy", "spirituality", "community", "social",
    ),
})

# Renderer palette, carried into node tables. Never used for classification.
CATEGORY_COLORS: Mapping[str, str] = MappingProxyType({
    "technology": "#4F46E5",  # Indigo
    "science": "#059669",     # Emerald
    "business": "#D97706",    # Amber
    "creative": "#7C3AED",    # Violet
    "health": "#DC2626",      # Red
    "education": "#0891B2",   # Cyan
    "lifestyle": "#EA580C",   # Orange
    DEFAULT_CATEGORY: "#6B7280",  # Gray
})


def _keyword_pattern(keyword: str) -> "re.Pattern":
    # Lookarounds mirror \b but still anchor keywords that start or end
    # with a non-word character. ASCII word characters only, so accented
    # letters act as boundaries.
    return re.compile(
        r"(?<!\w)" + re.escape(keyword.lower()) + r"(?!\w)",
        re.IGNORECASE | re.ASCII,
    )


def as_keywords(keywords) -> Tuple[str, ...]:
    """Normalise a keyword list. A bare string is one keyword, not characters."""
    if isinstance(keywords, str):
        return (keywords,)
    return tuple(keywords)


class CategoryMatcher:
    """
    Compiled keyword table.

    Every keyword is compiled once into a word-bounded pattern, so
    scoring a corpus is just a pass of ``findall`` per keyword. A keyword
    only matches as a standalone word or phrase: ``"ai"`` does not match
    inside ``"air"``.

    Usage:
        matcher = CategoryMatcher(CATEGORY_KEYWORDS)
        matcher.score("deep learning for climate research")
    """

    def __init__(self, table: Mapping[str, Sequence[str]]):
        self._table = tuple(
            (category, tuple(_keyword_pattern(k) for k in as_keywords(keywords) if k))
            for category, keywords in table.items()
        )

    @property
    def categories(self) -> Tuple[str, ...]:
        """Category names in declaration order."""
        return tuple(category for category, _ in self._table)

    def score(self, corpus: str) -> Dict[str, int]:
        """
        Score a corpus against every category.

        Each non-overlapping occurrence of a keyword is worth one point,
        whatever the keyword length.

        Args:
            corpus: Lowercased topic text.

        Returns:
            Mapping of category -> score, in declaration order.
        """
        scores = {}
        for category, patterns in self._table:
            scores[category] = sum(len(p.findall(corpus)) for p in patterns) if corpus else 0
        return scores

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"CategoryMatcher(categories={list(self.categories)})"


@lru_cache(maxsize=1)
def get_default_matcher() -> CategoryMatcher:
    """Matcher for the built-in table, compiled on first use."""
    return CategoryMatcher(CATEGORY_KEYWORDS)
