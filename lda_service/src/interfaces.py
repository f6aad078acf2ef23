"""
Abstract interfaces for the LDA topic service.

These interfaces enable:
    - TopicModelTrainer / TopicModel: Swappable LDA estimation backends
    - DocumentSource: Swappable training data sources (CSV, S3)
    - ArtifactStore: Swappable persistence for trained model bundles

Design Philosophy:
    - The service owns tokenization, vocabulary and vectorization; the topic
      model only ever sees sparse count vectors
    - Dependency injection for testing and flexibility
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Tuple

import numpy as np

from lda_service.src.config import AlgorithmParams
from lda_service.src.models import Corpus, TextDocument


class TopicModel(ABC):
    """
    A fitted topic model over a fixed vocabulary space.

    Contract: topic indices are the dense range [0, n_topics) and term
    indices refer to the vocabulary the training corpus was vectorized with.
    """

    @property
    @abstractmethod
    def n_topics(self) -> int:
        """Number of topics fixed at training time."""
        pass

    @property
    @abstractmethod
    def vocab_size(self) -> int:
        """Dimension of the term space the model was fitted on."""
        pass

    @abstractmethod
    def describe_topics(self, max_terms_per_topic: int) -> List[Tuple[List[int], List[float]]]:
        """
        Describe every topic by its highest-weighted terms.

        Args:
            max_terms_per_topic: Maximum number of terms returned per topic

        Returns:
            One (term_indices, weights) pair per topic, in topic index order,
            sorted by weight descending
        """
        pass

    @abstractmethod
    def topic_distributions(self, corpus: Corpus) -> List[Tuple[int, np.ndarray]]:
        """
        Infer topic membership for already-vectorized documents.

        Args:
            corpus: Documents vectorized in this model's vocabulary space

        Returns:
            (doc_id, distribution over topics) pairs sorted by doc_id
        """
        pass


class TopicModelTrainer(ABC):
    """
    Fitting capability for topic models.

    Implementations:
        - SklearnLDATrainer: scikit-learn LatentDirichletAllocation
    """

    @abstractmethod
    def fit(self, corpus: Corpus, params: AlgorithmParams) -> TopicModel:
        """
        Fit a topic model on a vectorized corpus.

        Args:
            corpus: Non-empty training corpus
            params: num_topics, max_iterations, concentrations and seed

        Returns:
            The fitted TopicModel
        """
        pass


class DocumentSource(ABC):
    """
    Abstract interface for training document sources.

    Implementations:
        - LocalCSVConnector: For local files
        - S3CSVConnector: For CSV objects in S3
    """

    @abstractmethod
    def fetch_documents(self) -> List[TextDocument]:
        """
        Fetch all training documents in source order.

        Returns:
            List of TextDocument records
        """
        pass

    def close(self) -> None:
        """
        Clean up resources.

        Default implementation is a no-op.
        """
        pass


# Written last by every save; its presence marks a complete bundle
MANIFEST_NAME = "manifest.json"


class ArtifactStore(ABC):
    """
    Byte-level storage for the artifacts of one model bundle.

    Implementations must make ``write_artifacts`` all-or-nothing from a
    reader's perspective and must raise PersistenceError rather than return
    a partial set from ``read_artifacts``.
    """

    @abstractmethod
    def write_artifacts(self, model_id: str, artifacts: Dict[str, bytes]) -> None:
        """Store every artifact under ``model_id``, replacing a previous bundle."""
        pass

    @abstractmethod
    def read_artifacts(self, model_id: str, names: Iterable[str]) -> Dict[str, bytes]:
        """Read the named artifacts stored under ``model_id``."""
        pass

    @abstractmethod
    def exists(self, model_id: str) -> bool:
        """Whether a complete bundle is stored under ``model_id``."""
        pass
