"""
Predictor - dominant topic and ranked topic terms for a query text.

Steps:
    1. Trim the query and vectorize it with the bundle's training vocabulary
    2. Infer the query's topic distribution with the trained model
    3. Pick the best topic (argmax, lowest index wins ties)
    4. Describe every topic by its top terms, mapped back to strings
    5. Return the best topic's terms plus the full topic -> terms mapping

An empty or all-out-of-vocabulary query is not an error: it becomes an empty
vector and whatever distribution the model infers for it.
"""

import logging
from typing import Dict, List, Sequence, Tuple

import numpy as np

from lda_service.src.corpus_builder import build_corpus
from lda_service.src.exceptions import ConsistencyError
from lda_service.src.model_bundle import LDAModelBundle
from lda_service.src.models import Prediction, TopicTerm, Vocabulary

logger = logging.getLogger(__name__)

DEFAULT_TERMS_PER_TOPIC = 10


def select_topic(distribution: Sequence[float]) -> int:
    """
    Index of the largest topic weight; the lowest index wins ties.

    Raises:
        ConsistencyError: If the distribution is empty
    """
    weights = np.asarray(distribution, dtype=np.float64)
    if weights.size == 0:
        raise ConsistencyError("Cannot select a topic from an empty distribution")
    # np.argmax returns the first maximal index
    return int(np.argmax(weights))


def rank_topic_terms(
    term_indices: Sequence[int],
    weights: Sequence[float],
    vocabulary: Vocabulary,
) -> List[TopicTerm]:
    """
    Map term indices to strings and sort by weight descending, term ascending.

    Raises:
        ConsistencyError: If an index is outside the vocabulary
    """
    terms = []
    for index, weight in zip(term_indices, weights):
        try:
            term = vocabulary.term_at(int(index))
        except IndexError as e:
            raise ConsistencyError(f"Topic term index {index} is not in the training vocabulary") from e
        terms.append(TopicTerm(term, float(weight)))
    return sorted(terms, key=lambda t: (-t.weight, t.term))


def describe_topics(bundle: LDAModelBundle, terms_per_topic: int) -> Dict[int, List[TopicTerm]]:
    """Ranked terms of every topic, keyed by topic index."""
    described = bundle.model.describe_topics(terms_per_topic)
    return {
        topic_index: rank_topic_terms(term_indices, weights, bundle.vocabulary)
        for topic_index, (term_indices, weights) in enumerate(described)
    }


def infer_distribution(bundle: LDAModelBundle, query_text: str) -> np.ndarray:
    """Topic distribution of a single query in the bundle's vocabulary space."""
    text = (query_text or "").strip()
    corpus, _ = build_corpus([text], vocabulary=bundle.vocabulary)

    query_vector = corpus.documents[0].vector
    logger.debug(f"Query vectorized: {query_vector.nnz} of {query_vector.size} terms populated")

    distributions: List[Tuple[int, np.ndarray]] = bundle.model.topic_distributions(corpus)
    if not distributions:
        raise ConsistencyError("Topic model returned no distribution for the query")
    _, distribution = distributions[0]
    return np.asarray(distribution, dtype=np.float64)


def predict(
    bundle: LDAModelBundle,
    query_text: str,
    terms_per_topic: int = DEFAULT_TERMS_PER_TOPIC,
) -> Prediction:
    """
    Predict the best-matching topic for ``query_text``.

    Args:
        bundle: Trained model with its vocabulary and corpus
        query_text: Raw query text
        terms_per_topic: Number of ranked terms per topic

    Returns:
        Prediction with the best topic's terms and all topics' terms

    Raises:
        ConsistencyError: If the selected topic has no term description
    """
    distribution = infer_distribution(bundle, query_text)
    topic_index = select_topic(distribution)
    topics = describe_topics(bundle, terms_per_topic)

    if topic_index not in topics:
        raise ConsistencyError(
            f"Cannot find topic {topic_index} among {len(topics)} described topics"
        )

    logger.debug(f"Predicted topic {topic_index} (weight={distribution[topic_index]:.4f})")
    return Prediction(
        topic_index=topic_index,
        best=topics[topic_index],
        topics=topics,
        distribution=distribution,
    )
