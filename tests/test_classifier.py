"""Tests for the topic classifier."""

import json
from types import SimpleNamespace

import pytest
from topic_graph import TopicClassifier, Config, DEFAULT_CATEGORY, classify_topics
from topic_graph.categories import CATEGORY_KEYWORDS, CategoryMatcher, get_default_matcher


def topic(id, name="", description="", subtopics=None, questions=None, **extra):
    return {
        "id": id,
        "name": name,
        "description": description,
        "subtopics": subtopics or [],
        "questions": questions or [],
        **extra,
    }


class TestTopicClassifier:
    """Test the main classifier functionality."""

    @pytest.fixture
    def classifier(self):
        return TopicClassifier()

    def test_empty_input(self, classifier):
        assert classifier.classify([]) == {}

    def test_single_category_wins(self, classifier):
        result = classifier.classify([topic("t1", "Quantum chemistry")])
        assert result == {"t1": "science"}

    def test_no_keywords_gives_default(self, classifier):
        result = classifier.classify([topic("t1", "Xyzzy", "plugh")])
        assert result == {"t1": DEFAULT_CATEGORY}

    def test_word_boundary(self, classifier):
        """'ai' must not match inside 'airplane'."""
        record = topic("t1", "airplane safety")
        assert classifier.score(record)["technology"] == 0
        assert classifier.classify_topic(record) == DEFAULT_CATEGORY

    def test_short_keyword_standalone(self, classifier):
        assert classifier.classify_topic(topic("t1", "AI ethics")) == "technology"

    def test_tie_goes_to_earlier_category(self, classifier):
        """science and business both score 1: science is declared first."""
        record = topic("t1", "Physics", "marketing")
        scores = classifier.score(record)
        assert scores["science"] == 1
        assert scores["business"] == 1
        assert classifier.classify_topic(record) == "science"

    def test_shared_keyword_tie(self, classifier):
        """'study' belongs to science and education."""
        assert classifier.classify_topic(topic("t1", "study")) == "science"

    def test_tie_independent_of_input_order(self, classifier):
        a = topic("a", "Physics", "marketing")
        b = topic("b", "Marketing", "physics")
        assert classifier.classify([a, b]) == {"a": "science", "b": "science"}
        assert classifier.classify([b, a]) == {"b": "science", "a": "science"}

    def test_occurrences_each_count(self, classifier):
        record = topic("t1", "python", "python python", subtopics=["physics", "biology"])
        scores = classifier.score(record)
        assert scores["technology"] == 3
        assert scores["science"] == 2
        assert classifier.classify_topic(record) == "technology"

    def test_phrase_keywords(self, classifier):
        record = topic("a", "Machine Learning", subtopics=["neural network", "deep learning"])
        scores = classifier.score(record)
        assert scores["technology"] == 3
        # 'learning' also counts inside both phrases
        assert scores["education"] == 2
        assert classifier.classify_topic(record) == "technology"

    def test_hyphenated_keyword(self, classifier):
        record = topic("t1", "E-Learning platforms")
        assert classifier.score(record)["education"] == 2
        assert classifier.classify_topic(record) == "education"

    def test_questions_are_scored(self, classifier):
        record = topic("t1", "Xyzzy", questions=["How does meditation help?"])
        assert classifier.classify_topic(record) == "lifestyle"

    def test_case_insensitive(self, classifier):
        assert classifier.classify_topic(topic("t1", "CYBERSECURITY")) == "technology"

    def test_malformed_fields(self, classifier):
        record = {"id": 7, "name": None, "description": None, "subtopics": None, "questions": None}
        assert classifier.classify([record]) == {7: DEFAULT_CATEGORY}

    def test_missing_fields(self, classifier):
        assert classifier.classify([{"id": 1}]) == {1: DEFAULT_CATEGORY}

    def test_bare_string_subtopics(self, classifier):
        record = {"id": 1, "name": "Xyzzy", "subtopics": "robotics"}
        assert classifier.classify_topic(record) == "technology"

    def test_attribute_records(self, classifier):
        record = SimpleNamespace(id=3, name="Nutrition", description="", subtopics=[], questions=[])
        assert classifier.classify([record]) == {3: "health"}

    def test_idempotent(self, classifier):
        topics = [
            topic("a", "Machine Learning"),
            topic("b", "Travel", "food and cooking"),
            topic("c", "Nothing here"),
        ]
        assert classifier.classify(topics) == classifier.classify(topics)

    def test_does_not_mutate_input(self, classifier):
        record = topic("a", "Machine Learning", subtopics=["Deep Learning"])
        snapshot = dict(record, subtopics=list(record["subtopics"]))
        classifier.classify([record])
        assert record == snapshot

    def test_min_score(self):
        classifier = TopicClassifier(Config(min_score=2))
        assert classifier.classify_topic(topic("t1", "python")) == DEFAULT_CATEGORY
        assert classifier.classify_topic(topic("t1", "python software")) == "technology"

    def test_custom_table(self):
        classifier = TopicClassifier(Config(categories={"space": ["Rocket", "orbit"]}))
        assert classifier.classify_topic(topic("t1", "rocket orbit")) == "space"
        assert classifier.classify_topic(topic("t1", "python")) == DEFAULT_CATEGORY

    def test_classify_topics_helper(self):
        assert classify_topics([topic("t1", "Genetics")]) == {"t1": "science"}

    def test_accented_letters_are_boundaries(self, classifier):
        """Only ASCII letters extend a word."""
        assert classifier.classify_topic(topic("t1", "ai\u00e9")) == "technology"
        assert classifier.classify_topic(topic("t1", "\u00e9ai")) == "technology"

    def test_classify_batch_keeps_every_record(self, classifier):
        records = [topic("a", "Python"), topic("a", "Cooking"), topic("b", "Xyzzy")]
        assert classifier.classify_batch(records) == [
            {"id": "a", "cluster": "technology"},
            {"id": "a", "cluster": "lifestyle"},
            {"id": "b", "cluster": DEFAULT_CATEGORY},
        ]
        # The mapping keeps the last assignment for a repeated id
        assert classifier.classify(records) == {"a": "lifestyle", "b": DEFAULT_CATEGORY}


class TestClassifyFile:
    """Test NDJSON file classification."""

    def test_classify_file(self, tmp_path):
        input_path = tmp_path / "topics.ndjson"
        output_path = tmp_path / "clusters.ndjson"
        input_path.write_text(
            '{"id": "a", "name": "Software design"}\n'
            'not json\n'
            '\n'
            '{"id": "b", "name": "Yoga", "description": "fitness"}\n'
        )

        classifier = TopicClassifier(Config(batch_size=1))
        count = classifier.classify_file(input_path, output_path, show_progress=False)

        assert count == 2
        lines = output_path.read_text().splitlines()
        assert lines == [
            '{"id": "a", "cluster": "technology"}',
            '{"id": "b", "cluster": "health"}',
        ]

    def test_partial_final_batch(self, tmp_path):
        input_path = tmp_path / "topics.ndjson"
        output_path = tmp_path / "clusters.ndjson"
        names = ["Python", "Physics", "Python", "Cooking", "Xyzzy"]
        input_path.write_text("".join(f'{{"id": 1, "name": "{n}"}}\n' for n in names))

        classifier = TopicClassifier(Config(batch_size=2))
        count = classifier.classify_file(input_path, output_path, show_progress=False)

        assert count == 5
        clusters = [json.loads(line)["cluster"] for line in output_path.read_text().splitlines()]
        assert clusters == ["technology", "science", "technology", "lifestyle", DEFAULT_CATEGORY]


class TestCategoryMatcher:
    """Test the compiled keyword table."""

    def test_default_matcher_is_shared(self):
        assert get_default_matcher() is get_default_matcher()

    def test_table_order(self):
        assert get_default_matcher().categories == (
            "technology", "science", "business", "health",
            "education", "creative", "lifestyle",
        )
        assert len(get_default_matcher()) == len(CATEGORY_KEYWORDS)

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            CATEGORY_KEYWORDS["technology"] = ("x",)

    def test_empty_corpus(self):
        scores = CategoryMatcher({"a": ["x"], "b": ["y"]}).score("")
        assert scores == {"a": 0, "b": 0}

    def test_non_overlapping(self):
        assert CategoryMatcher({"a": ["ab ab"]}).score("ab ab ab")["a"] == 1

    def test_bare_string_keyword(self):
        matcher = CategoryMatcher({"space": "rocket"})
        assert matcher.score("a r o")["space"] == 0
        assert matcher.score("rocket")["space"] == 1

    def test_keyword_with_regex_characters(self):
        matcher = CategoryMatcher({"lang": ["c++", "c#"]})
        assert matcher.score("c++ and c# but not c")["lang"] == 2


class TestConfig:
    """Test configuration."""

    def test_default_config(self):
        config = Config()

        assert config.default_category == "default"
        assert config.min_score == 1
        assert config.batch_size == 256
        assert config.default_strength == 1
        assert config.uses_builtin_table

    def test_custom_config(self):
        config = Config(min_score=3, batch_size=128)

        assert config.min_score == 3
        assert config.batch_size == 128

    def test_rejects_zero_min_score(self):
        with pytest.raises(ValueError):
            Config(min_score=0)

    def test_rejects_zero_batch_size(self):
        with pytest.raises(ValueError):
            Config(batch_size=0)

    def test_rejects_default_as_category(self):
        with pytest.raises(ValueError):
            Config(categories={"default": ["x"]})

    def test_bare_string_keyword_list(self):
        config = Config(categories={"space": "Rocket"})
        assert config.categories == {"space": ("rocket",)}

        classifier = TopicClassifier(config)
        assert classifier.classify_topic(topic("t1", "a r o")) == DEFAULT_CATEGORY
        assert classifier.classify_topic(topic("t1", "rocket")) == "space"

    def test_custom_table_is_frozen(self):
        config = Config(categories={"space": ["Rocket"]})
        assert config.categories == {"space": ("rocket",)}
        assert not config.uses_builtin_table
        with pytest.raises(TypeError):
            config.categories["other"] = ("x",)
