"""Configuration for the topic clustering engine."""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Sequence

from .categories import CATEGORY_KEYWORDS, DEFAULT_CATEGORY, as_keywords


@dataclass
class Config:
    """Configuration settings for classification and graph assembly."""

    # Classification settings
    default_category: str = DEFAULT_CATEGORY  # Label when no category matches
    min_score: int = 1  # Best score must reach this to beat the default
    categories: Optional[Mapping[str, Sequence[str]]] = None  # None = built-in table

    # Graph settings
    default_strength: float = 1  # Strength for edges that carry none

    # File processing
    batch_size: int = 256  # Records per batch

    def __post_init__(self):
        """Validate thresholds and freeze the keyword table."""
        if self.min_score < 1:
            raise ValueError(f"min_score must be at least 1, got {self.min_score}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")

        if self.categories is None:
            self.categories = CATEGORY_KEYWORDS
        elif self.categories is not CATEGORY_KEYWORDS:
            if self.default_category in self.categories:
                raise ValueError(
                    f"'{self.default_category}' is reserved for unclassified topics"
                )
            self.categories = MappingProxyType({
                str(name): tuple(k.lower() for k in as_keywords(keywords))
                for name, keywords in self.categories.items()
            })

    @property
    def uses_builtin_table(self) -> bool:
        """Whether the shipped keyword table is in use."""
        return self.categories is CATEGORY_KEYWORDS
