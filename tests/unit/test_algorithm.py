"""
Unit tests for LDAAlgorithm.

The trainer is mocked so these tests exercise corpus building, the training
preconditions and prediction wiring without fitting a real model.
"""

from unittest.mock import MagicMock

import pytest


class TestTrainPreconditions:
    """Training must refuse inputs it cannot fit."""

    def test_empty_input_raises(self):
        from lda_service.src.algorithm import LDAAlgorithm
        from lda_service.src.exceptions import TrainingPreconditionError

        trainer = MagicMock()

        with pytest.raises(TrainingPreconditionError, match="empty"):
            LDAAlgorithm(trainer=trainer).train([])
        trainer.fit.assert_not_called()

    def test_no_eligible_terms_raises(self):
        """Documents made only of short or non-alphabetic tokens give an empty vocabulary."""
        from lda_service.src.algorithm import LDAAlgorithm
        from lda_service.src.exceptions import TrainingPreconditionError

        trainer = MagicMock()

        with pytest.raises(TrainingPreconditionError, match="Vocabulary is empty"):
            LDAAlgorithm(trainer=trainer).train(["a b c", "one two 12345", ""])
        trainer.fit.assert_not_called()

    def test_precondition_error_is_service_error(self):
        from lda_service.src.exceptions import LDAServiceError, TrainingPreconditionError

        assert issubclass(TrainingPreconditionError, LDAServiceError)


class TestTrain:
    """Tests for the happy path with an injected trainer."""

    def test_trainer_receives_corpus_and_params(self, scenario_documents, fake_topic_model_factory):
        from lda_service.src.algorithm import LDAAlgorithm
        from lda_service.src.config import AlgorithmParams

        params = AlgorithmParams(num_topics=1, seed=3)
        model = fake_topic_model_factory(topics=[([0, 1], [0.6, 0.4])], distribution=[1.0], vocab_size=2)
        trainer = MagicMock()
        trainer.fit.return_value = model

        bundle = LDAAlgorithm(params, trainer=trainer).train(scenario_documents)

        corpus, passed_params = trainer.fit.call_args.args
        assert passed_params is params
        assert corpus.doc_ids() == [0, 1, 2]
        assert bundle.model is model
        assert bundle.params is params
        assert list(bundle.vocabulary) == ["bird", "fish"]

    def test_parallel_corpus_matches_sequential(self, sample_documents, fake_topic_model_factory):
        from lda_service.src.algorithm import LDAAlgorithm

        def make_trainer():
            trainer = MagicMock()
            trainer.fit.return_value = fake_topic_model_factory(
                topics=[([0], [1.0])], distribution=[1.0], vocab_size=18
            )
            return trainer

        sequential = LDAAlgorithm(trainer=make_trainer()).train(sample_documents)
        parallel = LDAAlgorithm(trainer=make_trainer(), max_workers=4).train(sample_documents)

        assert parallel.vocabulary == sequential.vocabulary
        assert parallel.corpus.vectors() == sequential.corpus.vectors()


class TestPredict:
    """Tests for LDAAlgorithm.predict."""

    def test_uses_configured_terms_per_topic(self, fruit_bundle):
        from lda_service.src.algorithm import LDAAlgorithm
        from lda_service.src.config import AlgorithmParams

        algorithm = LDAAlgorithm(AlgorithmParams(num_topics=2, terms_per_topic=2), trainer=MagicMock())

        prediction = algorithm.predict(fruit_bundle, "plum peach")

        assert prediction.topic_index == 1
        assert [t.term for t in prediction.best] == ["plum", "peach"]
        assert all(len(terms) == 2 for terms in prediction.topics.values())
