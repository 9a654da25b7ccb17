"""
Knowledge graph assembly.

Combines topics, exploration edges and a cluster assignment into the
payload consumed by graph renderers::

    {
        "topics": [...],
        "connections": [{"from": ..., "to": ..., "strength": 1}, ...],
        "clusters": {topic_id: category, ...},
        "stats": {
            "totalTopics": 2,
            "totalConnections": 1,
            "clusterDistribution": {"technology": 1, "business": 1}
        }
    }
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pandas as pd

from .categories import CATEGORY_COLORS, DEFAULT_CATEGORY
from .classifier import TopicClassifier
from .config import Config
from .text import get_field, get_parent_topic_id, get_topic_id, get_topic_name, has_field

logger = logging.getLogger(__name__)

# Accepted (source, target) key pairs for edge records, in lookup order
_EDGE_KEYS = (
    ('from', 'to'),
    ('from_topic_id', 'to_topic_id'),
    ('source', 'target'),
)

NODE_COLUMNS = ['id', 'name', 'cluster', 'color', 'parent_topic_id']


@dataclass(frozen=True)
class Edge:
    """A directed exploration path between two topics."""

    source: Any
    target: Any
    strength: float = 1

    @classmethod
    def from_record(cls, record: Any, default_strength: float = 1) -> "Edge":
        """
        Project an edge record to ``(source, target, strength)``.

        Accepts dicts or attribute-style records with ``from``/``to``,
        ``from_topic_id``/``to_topic_id`` or ``source``/``target``
        fields. Other fields are dropped. A None record projects to an
        edge with no endpoints.
        """
        if isinstance(record, Edge):
            return record

        source = target = None
        for source_key, target_key in _EDGE_KEYS:
            if has_field(record, source_key) or has_field(record, target_key):
                source = get_field(record, source_key)
                target = get_field(record, target_key)
                break

        strength = get_field(record, 'strength')
        if strength is None:
            strength = default_strength
        return cls(source=source, target=target, strength=strength)

    def to_dict(self) -> Dict[str, Any]:
        return {'from': self.source, 'to': self.target, 'strength': self.strength}


def normalize_edges(edges: Iterable[Any], default_strength: float = 1) -> List[Edge]:
    """Project explicit edge records, keeping their order."""
    return [Edge.from_record(e, default_strength) for e in edges]


def derive_edges(topics: Iterable[Any], default_strength: float = 1) -> List[Edge]:
    """
    Build parent -> child edges from topics' parent references.

    Used when no explicit exploration-path table is available. Topics
    without a parent contribute nothing.
    """
    edges = []
    for record in topics:
        parent = get_parent_topic_id(record)
        if parent is not None:
            edges.append(Edge(source=parent, target=get_topic_id(record), strength=default_strength))
    return edges


def cluster_statistics(cluster_assignment: Dict[Any, str]) -> Dict[str, int]:
    """
    Count topics per category.

    Categories appear in the order they are first seen; categories
    without topics are absent.
    """
    stats: Dict[str, int] = {}
    for category in cluster_assignment.values():
        stats[category] = stats.get(category, 0) + 1
    return stats


@dataclass
class GraphPayload:
    """Topics, connections, cluster assignment and per-cluster counts."""

    topics: List[Any] = field(default_factory=list)
    connections: List[Edge] = field(default_factory=list)
    clusters: Dict[Any, str] = field(default_factory=dict)
    cluster_distribution: Dict[str, int] = field(default_factory=dict)

    @property
    def total_topics(self) -> int:
        return len(self.topics)

    @property
    def total_connections(self) -> int:
        return len(self.connections)

    def to_dict(self, include_success: bool = False) -> Dict[str, Any]:
        """
        Serialize to the renderer JSON shape.

        Args:
            include_success: Prepend ``"success": True`` as HTTP handlers do.
        """
        payload: Dict[str, Any] = {'success': True} if include_success else {}
        payload.update({
            'topics': list(self.topics),
            'connections': [e.to_dict() for e in self.connections],
            'clusters': dict(self.clusters),
            'stats': {
                'totalTopics': self.total_topics,
                'totalConnections': self.total_connections,
                'clusterDistribution': dict(self.cluster_distribution),
            },
        })
        return payload

    def ranked_distribution(self) -> List[Tuple[str, int, float]]:
        """
        Categories ranked by topic count, largest first.

        Returns:
            List of (category, count, share of all topics).
        """
        total = self.total_topics
        ranked = sorted(self.cluster_distribution.items(), key=lambda kv: kv[1], reverse=True)
        return [(name, count, count / total if total else 0.0) for name, count in ranked]

    def resolved_connections(self) -> List[Edge]:
        """Connections whose endpoints are both among the topics."""
        ids = {get_topic_id(t) for t in self.topics}
        return [e for e in self.connections if e.source in ids and e.target in ids]

    def to_frame(self, default_category: Optional[str] = None) -> pd.DataFrame:
        """
        Tabulate graph nodes.

        Args:
            default_category: Cluster label for topics missing from the
                assignment. Defaults to None (left empty).

        Returns:
            DataFrame with columns id, name, cluster, color,
            parent_topic_id. Clusters outside the palette get the
            default colour.
        """
        rows = []
        for record in self.topics:
            topic_id = get_topic_id(record)
            cluster = self.clusters.get(topic_id, default_category)
            rows.append({
                'id': topic_id,
                'name': get_topic_name(record),
                'cluster': cluster,
                'color': CATEGORY_COLORS.get(cluster, CATEGORY_COLORS[DEFAULT_CATEGORY]),
                'parent_topic_id': get_parent_topic_id(record),
            })
        return pd.DataFrame(rows, columns=NODE_COLUMNS)


def assemble(
    topics: Iterable[Any],
    edges: Optional[Iterable[Any]],
    cluster_assignment: Dict[Any, str],
    config: Optional[Config] = None,
) -> GraphPayload:
    """
    Assemble the graph payload.

    Args:
        topics: Topic records, passed through as supplied.
        edges: Explicit edge records, or None to derive edges from the
            topics' parent references. An empty sequence is an explicit
            empty edge set.
        cluster_assignment: Mapping of topic id -> category.
        config: Optional configuration (edge default strength).

    Returns:
        GraphPayload. Dangling edge endpoints are not checked here.
    """
    config = config or Config()
    topics = list(topics)

    if edges is None:
        connections = derive_edges(topics, config.default_strength)
    else:
        connections = normalize_edges(edges, config.default_strength)

    payload = GraphPayload(
        topics=topics,
        connections=connections,
        clusters=dict(cluster_assignment),
        cluster_distribution=cluster_statistics(cluster_assignment),
    )
    logger.debug(
        f"Assembled graph: {payload.total_topics} topics, "
        f"{payload.total_connections} connections, "
        f"{len(payload.cluster_distribution)} clusters"
    )
    return payload


def build_knowledge_graph(
    topics: Iterable[Any],
    edges: Optional[Iterable[Any]] = None,
    classifier: Optional[TopicClassifier] = None,
) -> GraphPayload:
    """
    Classify topics and assemble their graph in one call.

    Args:
        topics: Topic records.
        edges: Explicit edge records, or None to derive from parents.
        classifier: Classifier to use. A default one if not provided.

    Returns:
        GraphPayload.
    """
    classifier = classifier or TopicClassifier()
    topics = list(topics)
    clusters = classifier.classify(topics)
    return assemble(topics, edges, clusters, classifier.config)
