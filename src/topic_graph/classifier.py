"""
Topic Classifier
================

Keyword-scoring classifier that assigns each topic to one semantic
category (technology, science, business, ...) or to the default
category when nothing matches.
"""

import json
import logging
from collections import Counter
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from tqdm import tqdm

from .categories import CategoryMatcher, get_default_matcher
from .config import Config
from .text import prepare_topic_text, get_topic_id

logger = logging.getLogger(__name__)


class TopicClassifier:
    """
    Keyword-table topic classifier.

    A topic's name, description, subtopics and questions are joined into
    one lowercase corpus and scored against every category's keyword
    phrases. The highest score wins; on equal scores the category
    declared first keeps the lead. A topic that matches no keyword at
    all lands in the default category.

    The classifier holds no per-call state and can be shared between
    threads.

    Usage:
        classifier = TopicClassifier()
        clusters = classifier.classify(topics)
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize classifier.

        Args:
            config: Optional configuration. Uses defaults if not provided.
        """
        self.config = config or Config()
        if self.config.uses_builtin_table:
            self.matcher = get_default_matcher()
        else:
            self.matcher = CategoryMatcher(self.config.categories)

    def score(self, record: Any) -> Dict[str, int]:
        """
        Score one topic against every category.

        Args:
            record: Topic dictionary or object.

        Returns:
            Mapping of category -> score, in table order.
        """
        return self.matcher.score(prepare_topic_text(record))

    def classify_topic(self, record: Any) -> str:
        """
        Pick the category for a single topic.

        Args:
            record: Topic dictionary or object.

        Returns:
            Category name, or the default category.
        """
        max_score = 0
        best = self.config.default_category

        for category, score in self.score(record).items():
            # Strict improvement only: earlier categories win ties
            if score > max_score:
                max_score = score
                best = category

        if max_score < self.config.min_score:
            return self.config.default_category
        return best

    def classify(self, topics: Iterable[Any]) -> Dict[Any, str]:
        """
        Classify a collection of topics.

        Args:
            topics: Topic dictionaries or objects.

        Returns:
            Mapping of topic id -> category name.
        """
        clusters = {r['id']: r['cluster'] for r in self.classify_batch(list(topics))}

        if clusters:
            logger.debug(f"Classified {len(clusters)} topics: {dict(Counter(clusters.values()))}")
        return clusters

    def classify_batch(self, records: List[Any]) -> List[Dict[str, Any]]:
        """
        Classify a batch of topics, keeping one result per record.

        Unlike classify(), repeated ids are not collapsed.

        Args:
            records: List of topic dictionaries or objects.

        Returns:
            List of {"id", "cluster"} results, in input order.
        """
        return [
            {'id': get_topic_id(record), 'cluster': self.classify_topic(record)}
            for record in records
        ]

    def classify_file(
        self,
        input_path: Path,
        output_path: Path,
        show_progress: bool = True
    ) -> int:
        """
        Classify all topics in an NDJSON file.

        Writes one ``{"id": ..., "cluster": ...}`` line per topic.

        Args:
            input_path: Path to input NDJSON file.
            output_path: Path to output NDJSON file.
            show_progress: Whether to show progress bar.

        Returns:
            Number of topics processed.
        """
        # Count lines for progress bar
        if show_progress:
            with open(input_path) as f:
                total = sum(1 for _ in f)
        else:
            total = None

        batch: List[Dict[str, Any]] = []
        processed = 0
        skipped = 0

        with open(input_path) as fin, open(output_path, 'w') as fout:
            iterator = tqdm(fin, total=total, desc="Classifying") if show_progress else fin

            for line_no, line in enumerate(iterator, start=1):
                if not line.strip():
                    continue
                try:
                    batch.append(json.loads(line))
                except json.JSONDecodeError as e:
                    skipped += 1
                    logger.warning(f"Skipping line {line_no} of {input_path}: {e}")
                    continue

                if len(batch) >= self.config.batch_size:
                    processed += self._write_batch(batch, fout)
                    batch = []

            # Final batch
            if batch:
                processed += self._write_batch(batch, fout)

        if skipped:
            logger.info(f"Skipped {skipped} undecodable lines")
        return processed

    def _write_batch(self, batch: List[Dict[str, Any]], fout) -> int:
        results = self.classify_batch(batch)
        fout.write(''.join(json.dumps(result) + '\n' for result in results))
        return len(results)


def classify_topics(topics: Iterable[Any], config: Optional[Config] = None) -> Dict[Any, str]:
    """Classify topics with a throwaway classifier."""
    return TopicClassifier(config).classify(topics)
