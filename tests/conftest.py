"""
Pytest configuration and shared fixtures for the LDA topic service tests.

This module provides reusable fixtures for testing the corpus building,
training, persistence and prediction pipeline.
"""

from typing import List, Tuple

import numpy as np
import pytest


# =============================================================================
# Test Helpers
# =============================================================================

def make_fake_topic_model(
    topics: List[Tuple[List[int], List[float]]],
    distribution: List[float],
    vocab_size: int,
):
    """
    Build an in-memory TopicModel with fixed topics and a fixed query distribution.

    Args:
        topics: (term_indices, weights) per topic, returned by describe_topics
        distribution: Topic distribution returned for every document
        vocab_size: Reported vocabulary size

    Returns:
        TopicModel instance
    """
    from lda_service.src.interfaces import TopicModel

    class FakeTopicModel(TopicModel):
        def __init__(self):
            self.queried_corpora = []

        @property
        def n_topics(self) -> int:
            return len(topics)

        @property
        def vocab_size(self) -> int:
            return vocab_size

        def describe_topics(self, max_terms_per_topic):
            return [
                (list(indices[:max_terms_per_topic]), list(weights[:max_terms_per_topic]))
                for indices, weights in topics
            ]

        def topic_distributions(self, corpus):
            self.queried_corpora.append(corpus)
            return [(doc_id, np.asarray(distribution, dtype=float)) for doc_id in corpus.doc_ids()]

    return FakeTopicModel()


# =============================================================================
# Sample Data Fixtures
# =============================================================================

@pytest.fixture
def scenario_documents() -> List[str]:
    """Three short documents where only 'bird' and 'fish' survive tokenization."""
    return ["cat dog bird", "dog bird fish", "fish cat bird"]


@pytest.fixture
def sample_documents() -> List[str]:
    """Two well-separated clusters of documents for end-to-end training tests."""
    return [
        # Astronomy cluster
        "planet orbit telescope galaxy planet stars orbit",
        "telescope observed galaxy stars nebula planet",
        "galaxy nebula stars telescope orbit comet",
        "comet orbit planet stars galaxy telescope",
        "nebula comet galaxy planet telescope stars",
        "stars planet orbit comet nebula galaxy",
        # Cooking cluster
        "recipe flour butter oven bake sugar recipe",
        "butter sugar flour whisk oven recipe",
        "bake bread flour butter oven dough",
        "dough knead bread flour oven bake",
        "sugar butter whisk recipe bake bread",
        "bread dough oven flour sugar knead",
        # Shared filler so the stopword rule has something to drop
        "today today today today today planet recipe",
        "today today today stars bread",
    ]


@pytest.fixture
def sample_params():
    """Small, fast LDA parameters for tests."""
    from lda_service.src.config import AlgorithmParams

    return AlgorithmParams(num_topics=2, max_iterations=30, seed=7, terms_per_topic=5)


@pytest.fixture
def trained_bundle(sample_documents, sample_params):
    """Bundle trained with the real scikit-learn backend on sample_documents."""
    from lda_service.src.algorithm import LDAAlgorithm

    return LDAAlgorithm(sample_params).train(sample_documents)


@pytest.fixture
def fake_topic_model_factory():
    """Factory fixture returning make_fake_topic_model."""
    return make_fake_topic_model


@pytest.fixture
def fruit_bundle(fake_topic_model_factory):
    """
    Bundle over a four-term vocabulary with a fake model.

    Topic 0 favours apple/mango, topic 1 favours peach/plum.
    """
    from lda_service.src.corpus_builder import build_corpus
    from lda_service.src.model_bundle import LDAModelBundle
    from lda_service.src.models import Vocabulary

    vocabulary = Vocabulary(("apple", "mango", "peach", "plum"))
    corpus, _ = build_corpus(["apple mango", "peach plum"], vocabulary=vocabulary)
    model = fake_topic_model_factory(
        topics=[([0, 1, 2, 3], [0.4, 0.4, 0.1, 0.1]), ([3, 2, 0, 1], [0.5, 0.3, 0.1, 0.1])],
        distribution=[0.2, 0.8],
        vocab_size=4,
    )
    return LDAModelBundle(model=model, corpus=corpus, vocabulary=vocabulary)


# =============================================================================
# CSV / AWS Fixtures
# =============================================================================

@pytest.fixture
def sample_csv_content() -> str:
    """CSV with one blank-text row that connectors must skip."""
    return """doc_id,text,category
d1,"Planets orbit distant stars inside every galaxy",space
d2,"Bake bread with flour butter and sugar",cooking
d3,,empty
d4,"Telescope images of a bright comet",space
"""


@pytest.fixture
def temp_csv_file(tmp_path, sample_csv_content) -> str:
    """Write sample_csv_content to a temporary CSV file."""
    path = tmp_path / "documents.csv"
    path.write_text(sample_csv_content)
    return str(path)


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake AWS credentials so boto3 never reaches real AWS under moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    for key in ("LDA_CONFIG_PATH", "LDA_STORAGE_DIR", "LDA_S3_BUCKET"):
        monkeypatch.delenv(key, raising=False)
    yield
