"""Command-line interface for the topic clustering engine."""

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, List

from .classifier import TopicClassifier
from .config import Config
from .graph import build_knowledge_graph

logger = logging.getLogger(__name__)


def load_records(path: Path) -> List[Any]:
    """
    Load records from a JSON array file or an NDJSON file.

    Raises:
        ValueError: If the file is neither.
    """
    with open(path) as f:
        content = f.read()

    stripped = content.lstrip()
    if stripped.startswith('['):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON array in {path}: {e}") from e

    records = []
    for line_no, line in enumerate(content.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            records.append(json.loads(line))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON on line {line_no} of {path}: {e}") from e
    return records


def _check_input(path: Path):
    if not path.exists():
        print(f"Error: Input file not found: {path}", file=sys.stderr)
        sys.exit(1)


def run_classify(args) -> int:
    """Classify an NDJSON topics file into id/cluster lines."""
    _check_input(args.input)
    args.output.parent.mkdir(parents=True, exist_ok=True)

    config = Config(min_score=args.min_score, batch_size=args.batch_size)
    classifier = TopicClassifier(config=config)

    print(f"Classifying: {args.input}")
    start = time.time()

    count = classifier.classify_file(
        args.input,
        args.output,
        show_progress=not args.quiet
    )

    elapsed = time.time() - start
    rate = count / elapsed if elapsed > 0 else 0

    print(f"\nCompleted: {count:,} topics in {elapsed:.1f}s ({rate:,.0f} topics/s)")
    print(f"Output: {args.output}")
    return 0


def run_graph(args) -> int:
    """Build the knowledge graph payload for a set of topics."""
    _check_input(args.topics)
    if args.edges is not None:
        _check_input(args.edges)

    topics = load_records(args.topics)
    edges = load_records(args.edges) if args.edges is not None else None
    logger.info(f"Loaded {len(topics)} topics from {args.topics}")
    if edges is None:
        logger.info("No edges file given, deriving connections from parent topics")

    classifier = TopicClassifier(config=Config(min_score=args.min_score))
    payload = build_knowledge_graph(topics, edges, classifier)

    args.output.parent.mkdir(parents=True, exist_ok=True)
    with open(args.output, 'w') as f:
        json.dump(payload.to_dict(include_success=True), f, indent=2, default=str)

    if args.nodes_csv:
        args.nodes_csv.parent.mkdir(parents=True, exist_ok=True)
        payload.to_frame(classifier.config.default_category).to_csv(args.nodes_csv, index=False)
        logger.info(f"Wrote node table to {args.nodes_csv}")

    print(f"Topics: {payload.total_topics:,}  Connections: {payload.total_connections:,}")
    for category, count, share in payload.ranked_distribution():
        print(f"  {category:<12} {count:>6,}  {share:6.1%}")
    print(f"Output: {args.output}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="topic-graph",
        description="Cluster explored topics and build their knowledge graph",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Classify an NDJSON file of topics
  topic-graph classify topics.ndjson clusters.ndjson

  # Build a graph with explicit exploration paths
  topic-graph graph topics.ndjson graph.json --edges paths.ndjson

  # Derive edges from parent topics and export a node table
  topic-graph graph topics.json graph.json --nodes-csv nodes.csv
"""
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    classify = subparsers.add_parser("classify", help="Assign a cluster to every topic")
    classify.add_argument("input", type=Path, help="Input NDJSON file with topic records")
    classify.add_argument("output", type=Path, help="Output NDJSON file for cluster assignments")
    classify.add_argument(
        "--min-score",
        type=int,
        default=1,
        help="Minimum keyword score for a category to win (default: 1)"
    )
    classify.add_argument(
        "--batch-size",
        type=int,
        default=256,
        help="Batch size for processing (default: 256)"
    )
    classify.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress progress bar"
    )
    classify.set_defaults(func=run_classify)

    graph = subparsers.add_parser("graph", help="Build the knowledge graph JSON payload")
    graph.add_argument("topics", type=Path, help="Topics file (JSON array or NDJSON)")
    graph.add_argument("output", type=Path, help="Output JSON file for the graph payload")
    graph.add_argument(
        "--edges",
        type=Path,
        default=None,
        help="Exploration paths file (JSON array or NDJSON). "
             "Without it, edges are derived from parent topics"
    )
    graph.add_argument(
        "--nodes-csv",
        type=Path,
        default=None,
        help="Also write a CSV table of nodes and their clusters"
    )
    graph.add_argument(
        "--min-score",
        type=int,
        default=1,
        help="Minimum keyword score for a category to win (default: 1)"
    )
    graph.set_defaults(func=run_graph)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Setup logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    try:
        return args.func(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
