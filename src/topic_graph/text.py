"""Field access and corpus building for topic records."""

from typing import Any, List, Optional

# Records arrive either camelCased (API payloads) or snake_cased (stored rows)
_PARENT_FIELDS = ('parentTopicId', 'parent_topic_id')


def get_field(record: Any, name: str) -> Any:
    """Read a field from a dict or an attribute-style record."""
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def has_field(record: Any, name: str) -> bool:
    """Whether a dict or attribute-style record carries a field."""
    if isinstance(record, dict):
        return name in record
    return record is not None and hasattr(record, name)


def sanitize_text(value: Any) -> str:
    """
    Coerce a field value to text.

    - None becomes an empty string
    - Non-strings are converted with str()

    Whitespace and punctuation are left untouched: keyword phrases are
    matched against the text as written.
    """
    if value is None:
        return ""

    if not isinstance(value, str):
        value = str(value)

    return value


def sanitize_list(value: Any) -> List[str]:
    """Coerce a sequence field (subtopics, questions) to a list of text."""
    if value is None:
        return []

    if isinstance(value, str):
        return [value]

    try:
        return [sanitize_text(v) for v in value]
    except TypeError:
        # Not iterable: a lone scalar
        return [sanitize_text(value)]


def prepare_topic_text(record: Any) -> str:
    """
    Build the lowercase search corpus for a topic.

    Combines name, description, subtopics and questions, in that
    order, separated by single spaces.

    Args:
        record: Topic dictionary or object

    Returns:
        Lowercased corpus string
    """
    parts = [
        sanitize_text(get_field(record, 'name')),
        sanitize_text(get_field(record, 'description')),
        ' '.join(sanitize_list(get_field(record, 'subtopics'))),
        ' '.join(sanitize_list(get_field(record, 'questions'))),
    ]
    return ' '.join(parts).lower()


def get_topic_id(record: Any) -> Any:
    """Extract the topic identifier, as supplied by the caller."""
    return get_field(record, 'id')


def get_topic_name(record: Any) -> str:
    """Extract the topic name."""
    return sanitize_text(get_field(record, 'name'))


def get_parent_topic_id(record: Any) -> Optional[Any]:
    """
    Extract the parent topic reference.

    Returns None when the field is absent, null or an empty string.
    """
    for name in _PARENT_FIELDS:
        value = get_field(record, name)
        if value is not None and value != '':
            return value
    return None
