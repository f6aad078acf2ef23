"""
LDA Topic Service

This package turns free-text corpora into bag-of-words vectors, fits LDA
topic models over them and predicts the dominant topic of new text.

Core modules:
    - models: Data classes (Vocabulary, DocumentVector, Corpus, Prediction, ...)
    - interfaces: Abstract interfaces (TopicModel, TopicModelTrainer, DocumentSource, ArtifactStore)
    - corpus_builder: Tokenize -> vocabulary -> vectorize
    - algorithm: LDAAlgorithm train/predict entry points
    - model_bundle: Atomic save/load of model + corpus + vocabulary
"""

from lda_service.src.models import (
    TextDocument,
    Vocabulary,
    DocumentVector,
    CorpusDocument,
    Corpus,
    TopicTerm,
    Prediction,
)
from lda_service.src.interfaces import TopicModel, TopicModelTrainer, DocumentSource, ArtifactStore
from lda_service.src.config import AlgorithmParams
from lda_service.src.exceptions import (
    LDAServiceError,
    ConsistencyError,
    PersistenceError,
    TrainingPreconditionError,
)

__all__ = [
    "TextDocument",
    "Vocabulary",
    "DocumentVector",
    "CorpusDocument",
    "Corpus",
    "TopicTerm",
    "Prediction",
    "TopicModel",
    "TopicModelTrainer",
    "DocumentSource",
    "ArtifactStore",
    "AlgorithmParams",
    "LDAServiceError",
    "ConsistencyError",
    "PersistenceError",
    "TrainingPreconditionError",
]
