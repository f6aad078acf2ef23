"""
LDAAlgorithm - training and prediction entry points.

This class ties the corpus builder, the injected TopicModelTrainer and the
predictor together:
    train(texts)            -> LDAModelBundle
    predict(bundle, query)  -> Prediction

Training is one-shot: it either returns a complete bundle or raises.
"""

import logging
from typing import Optional, Sequence

from lda_service.src.config import AlgorithmParams
from lda_service.src.corpus_builder import build_corpus
from lda_service.src.exceptions import TrainingPreconditionError
from lda_service.src.interfaces import TopicModelTrainer
from lda_service.src.model_bundle import LDAModelBundle
from lda_service.src.models import Prediction
from lda_service.src.predictor import predict
from lda_service.src.topic_models.sklearn_lda import SklearnLDATrainer

logger = logging.getLogger(__name__)


class LDAAlgorithm:
    """
    Train LDA bundles and predict topics for queries.

    Args:
        params: Training/prediction parameters
        trainer: TopicModelTrainer implementation (default SklearnLDATrainer)
        max_workers: Thread count for corpus building (None = sequential)
    """

    def __init__(
        self,
        params: Optional[AlgorithmParams] = None,
        trainer: Optional[TopicModelTrainer] = None,
        max_workers: Optional[int] = None,
    ):
        self.params = params or AlgorithmParams()
        self.trainer = trainer or SklearnLDATrainer()
        self.max_workers = max_workers

    def train(
        self,
        texts: Sequence[str],
        source_ids: Optional[Sequence[Optional[str]]] = None,
    ) -> LDAModelBundle:
        """
        Build the training corpus and fit the topic model.

        Args:
            texts: Raw training documents
            source_ids: Optional source record identifiers aligned with ``texts``,
                        kept on the corpus documents

        Returns:
            LDAModelBundle holding model, corpus and vocabulary

        Raises:
            TrainingPreconditionError: If there are no documents, or no
                                       document contributes a vocabulary term
        """
        if not texts:
            raise TrainingPreconditionError(
                "Training corpus is empty. Check that the document source "
                "returns documents with a non-empty text field."
            )

        logger.info(f"Building training corpus from {len(texts)} documents")
        corpus, vocabulary = build_corpus(texts, max_workers=self.max_workers, source_ids=source_ids)

        if len(vocabulary) == 0:
            raise TrainingPreconditionError(
                f"Vocabulary is empty after tokenizing {len(texts)} documents; "
                "no document contains an eligible term"
            )

        model = self.trainer.fit(corpus, self.params)
        return LDAModelBundle(model=model, corpus=corpus, vocabulary=vocabulary, params=self.params)

    def predict(self, bundle: LDAModelBundle, query_text: str) -> Prediction:
        """Predict the best-matching topic for ``query_text``."""
        return predict(bundle, query_text, terms_per_topic=self.params.terms_per_topic)
