"""
Topic Graph
===========

Keyword-based clustering of explored topics into semantic categories,
and assembly of the resulting knowledge graph for visualization.

Usage:
    from topic_graph import TopicClassifier, assemble

    classifier = TopicClassifier()
    clusters = classifier.classify(topics)
    payload = assemble(topics, edges, clusters)
    payload.to_dict()
"""

from .categories import CATEGORY_COLORS, CATEGORY_KEYWORDS, DEFAULT_CATEGORY
from .classifier import TopicClassifier, classify_topics
from .config import Config
from .graph import Edge, GraphPayload, assemble, build_knowledge_graph

__version__ = "1.0.0"
__all__ = [
    "TopicClassifier",
    "Config",
    "Edge",
    "GraphPayload",
    "assemble",
    "build_knowledge_graph",
    "classify_topics",
    "CATEGORY_COLORS",
    "CATEGORY_KEYWORDS",
    "DEFAULT_CATEGORY",
]
