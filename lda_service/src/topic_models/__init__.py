"""
Topic model implementations for the LDA topic service.

Available models:
    - SklearnLDATrainer / SklearnLDAModel: scikit-learn LatentDirichletAllocation
"""

from lda_service.src.topic_models.sklearn_lda import SklearnLDAModel, SklearnLDATrainer

__all__ = ["SklearnLDAModel", "SklearnLDATrainer"]
