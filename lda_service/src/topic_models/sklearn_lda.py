"""
SklearnLDATrainer / SklearnLDAModel - LDA backed by scikit-learn.

Design:
    - Sparse count vectors in -> fitted LatentDirichletAllocation
    - Batch variational Bayes with a fixed random_state, so fitting is
      reproducible for a given corpus and seed
    - Topic-term weights are the rows of ``components_`` normalized to sum 1
    - Query corpora must live in the training vocabulary space; a dimension
      mismatch is a ConsistencyError, never a silent reshape
"""

import logging
from typing import List, Optional, Tuple

import numpy as np
from sklearn.decomposition import LatentDirichletAllocation

from lda_service.src.config import AlgorithmParams
from lda_service.src.exceptions import ConsistencyError, TrainingPreconditionError
from lda_service.src.interfaces import TopicModel, TopicModelTrainer
from lda_service.src.models import Corpus

logger = logging.getLogger(__name__)


class SklearnLDAModel(TopicModel):
    """
    Fitted scikit-learn LDA exposed through the TopicModel interface.

    Args:
        estimator: A fitted LatentDirichletAllocation
    """

    def __init__(self, estimator: LatentDirichletAllocation):
        self.estimator = estimator

    @property
    def n_topics(self) -> int:
        return int(self.estimator.n_components)

    @property
    def vocab_size(self) -> int:
        return int(self.estimator.components_.shape[1])

    def topic_term_matrix(self) -> np.ndarray:
        """(n_topics, vocab_size) matrix of per-topic term weights, rows summing to 1."""
        components = np.asarray(self.estimator.components_, dtype=np.float64)
        totals = components.sum(axis=1, keepdims=True)
        totals[totals == 0] = 1.0
        return components / totals

    def describe_topics(self, max_terms_per_topic: int) -> List[Tuple[List[int], List[float]]]:
        matrix = self.topic_term_matrix()
        term_ids = np.arange(matrix.shape[1])

        described = []
        for row in matrix:
            # Weight descending, then lower term index first
            order = np.lexsort((term_ids, -row))[:max_terms_per_topic]
            described.append(
                ([int(i) for i in order], [float(row[i]) for i in order])
            )
        return described

    def topic_distributions(self, corpus: Corpus) -> List[Tuple[int, np.ndarray]]:
        if len(corpus) == 0:
            return []

        dimension = corpus.dimension()
        if dimension != self.vocab_size:
            raise ConsistencyError(
                f"Corpus dimension {dimension} does not match model vocabulary size {self.vocab_size}"
            )

        distributions = self.estimator.transform(corpus.to_csr_matrix(self.vocab_size))
        pairs = sorted(zip(corpus.doc_ids(), distributions), key=lambda pair: pair[0])
        return [(doc_id, np.asarray(row, dtype=np.float64)) for doc_id, row in pairs]


class SklearnLDATrainer(TopicModelTrainer):
    """
    Fits LatentDirichletAllocation on a vectorized corpus.

    Args:
        learning_method: "batch" (default, deterministic) or "online"
        n_jobs: Passed through to scikit-learn for E-step parallelism
    """

    def __init__(self, learning_method: str = "batch", n_jobs: Optional[int] = None):
        self.learning_method = learning_method
        self.n_jobs = n_jobs

    def fit(self, corpus: Corpus, params: AlgorithmParams) -> SklearnLDAModel:
        matrix = corpus.to_csr_matrix()
        if matrix.shape[0] == 0 or matrix.shape[1] == 0:
            raise TrainingPreconditionError(
                f"Cannot fit LDA on a {matrix.shape[0]}x{matrix.shape[1]} document-term matrix"
            )

        estimator = LatentDirichletAllocation(
            n_components=params.num_topics,
            max_iter=params.max_iterations,
            doc_topic_prior=params.resolved_doc_concentration,
            topic_word_prior=params.resolved_topic_concentration,
            learning_method=self.learning_method,
            random_state=params.seed,
            n_jobs=self.n_jobs,
        )

        logger.info(
            f"Fitting LDA: {matrix.shape[0]} docs, {matrix.shape[1]} terms, "
            f"{params.num_topics} topics, max_iter={params.max_iterations}, seed={params.seed}"
        )
        estimator.fit(matrix)
        logger.info(f"LDA fit complete after {estimator.n_iter_} iterations")

        return SklearnLDAModel(estimator)
