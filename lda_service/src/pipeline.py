"""
TopicPipeline - end-to-end training and serving for LDA bundles.

Training:   DocumentSource -> LDAAlgorithm.train -> LDAModelBundle.save
Prediction: LDAModelBundle.load (cached per model id) -> LDAAlgorithm.predict

Loaded bundles are read-only, so one cached bundle can serve any number of
queries.
"""

import logging
from typing import Any, Dict, Optional

from lda_service.src.algorithm import LDAAlgorithm
from lda_service.src.config import AlgorithmParams, merge_config
from lda_service.src.interfaces import ArtifactStore, DocumentSource, TopicModelTrainer
from lda_service.src.model_bundle import LDAModelBundle
from lda_service.src.models import Prediction
from lda_service.src.storage import create_store

logger = logging.getLogger(__name__)


class TopicPipeline:
    """
    Train, persist and query LDA topic models.

    Usage:
        pipeline = TopicPipeline(config)
        pipeline.train(LocalCSVConnector("docs.csv"), model_id="news-v1")
        prediction = pipeline.predict("news-v1", "central bank raises rates")

    Args:
        config: Configuration dict (see lda_service.src.config)
        store: ArtifactStore; built from config["storage"] if None
        trainer: TopicModelTrainer; SklearnLDATrainer if None
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        store: Optional[ArtifactStore] = None,
        trainer: Optional[TopicModelTrainer] = None,
    ):
        self.config = merge_config(config)
        self.params = AlgorithmParams.from_config(self.config)
        self.store = store or create_store(self.config["storage"])
        self.algorithm = LDAAlgorithm(
            self.params,
            trainer=trainer,
            max_workers=self.config["corpus"].get("max_workers"),
        )
        self._bundles: Dict[str, LDAModelBundle] = {}

    def train(self, source: DocumentSource, model_id: str) -> LDAModelBundle:
        """
        Fetch documents, train a bundle and save it under ``model_id``.

        Raises:
            TrainingPreconditionError: If the source yields nothing trainable
            PersistenceError: If the bundle cannot be saved
        """
        logger.info(f"Starting training run for model {model_id}")
        try:
            documents = source.fetch_documents()
        finally:
            source.close()

        with_ids = sum(document.source_id is not None for document in documents)
        logger.info(f"Fetched {len(documents)} documents ({with_ids} with source ids)")

        bundle = self.algorithm.train(
            [document.text for document in documents],
            source_ids=[document.source_id for document in documents],
        )
        bundle.save(self.store, model_id)
        self._bundles[model_id] = bundle

        logger.info(f"Training run for model {model_id} completed")
        return bundle

    def get_bundle(self, model_id: str) -> LDAModelBundle:
        """Return the bundle for ``model_id``, loading it on first use."""
        if model_id not in self._bundles:
            self._bundles[model_id] = LDAModelBundle.load(self.store, model_id)
        return self._bundles[model_id]

    def predict(self, model_id: str, query_text: str) -> Prediction:
        """Predict the best-matching topic of ``query_text`` under ``model_id``."""
        return self.algorithm.predict(self.get_bundle(model_id), query_text)
