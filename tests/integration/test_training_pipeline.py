"""
End-to-end tests: raw text -> corpus -> scikit-learn LDA -> bundle -> prediction.

These tests fit real models on small corpora, so they run in a few seconds.

Run:
    pytest tests/integration/test_training_pipeline.py -v
"""

import numpy as np
import pytest


class TestScenario:
    """The three-document scenario with a two-term vocabulary."""

    def test_vocabulary_and_vectors(self, scenario_documents):
        from lda_service.src.corpus_builder import build_corpus

        corpus, vocabulary = build_corpus(scenario_documents)

        assert list(vocabulary) == ["bird", "fish"]
        assert [v.as_dict() for _, v in corpus.vectors()] == [
            {0: 1.0},
            {0: 1.0, 1: 1.0},
            {0: 1.0, 1: 1.0},
        ]

    def test_train_and_predict(self, scenario_documents):
        from lda_service.src.algorithm import LDAAlgorithm
        from lda_service.src.config import AlgorithmParams

        algorithm = LDAAlgorithm(AlgorithmParams(num_topics=2, max_iterations=10, seed=1))
        bundle = algorithm.train(scenario_documents)

        prediction = algorithm.predict(bundle, "fish fish bird")

        assert prediction.topic_index == int(np.argmax(prediction.distribution))
        assert {t.term for t in prediction.best} == {"bird", "fish"}
        assert sorted(prediction.topics) == [0, 1]


class TestTwoClusterCorpus:
    """Training on two well-separated document clusters."""

    def test_dominant_term_is_dropped_as_stopword(self, trained_bundle):
        assert "today" not in trained_bundle.vocabulary
        assert len(trained_bundle.vocabulary) == 18
        assert "telescope" in trained_bundle.vocabulary

    def test_topics_separate_the_clusters(self, trained_bundle):
        """One topic's top terms come from astronomy, the other's from cooking."""
        from lda_service.src.predictor import describe_topics

        astronomy = {"planet", "orbit", "telescope", "galaxy", "stars", "nebula", "comet", "observed"}
        topics = describe_topics(trained_bundle, 3)

        top_sets = [{t.term for t in terms} for terms in topics.values()]
        assert sum(terms <= astronomy for terms in top_sets) == 1
        assert sum(not (terms & astronomy) for terms in top_sets) == 1

    def test_queries_route_to_different_topics(self, trained_bundle):
        from lda_service.src.predictor import predict

        space = predict(trained_bundle, "telescope galaxy nebula comet")
        kitchen = predict(trained_bundle, "flour butter oven dough")

        assert space.topic_index != kitchen.topic_index

    def test_training_document_predicts_its_own_topic(self, trained_bundle, sample_documents):
        """Querying with a training document's text reproduces its training-time argmax."""
        from lda_service.src.predictor import predict

        distributions = dict(trained_bundle.model.topic_distributions(trained_bundle.corpus))

        for doc_id in (0, 6):
            prediction = predict(trained_bundle, sample_documents[doc_id])
            assert prediction.topic_index == int(np.argmax(distributions[doc_id]))
            assert np.allclose(prediction.distribution, distributions[doc_id])

    def test_out_of_vocabulary_query_still_predicts(self, trained_bundle):
        from lda_service.src.predictor import predict

        prediction = predict(trained_bundle, "completely unrelated words")

        assert 0 <= prediction.topic_index < 2
        assert prediction.distribution.sum() == pytest.approx(1.0)

    def test_same_seed_reproduces_model(self, sample_documents, sample_params, trained_bundle):
        from lda_service.src.algorithm import LDAAlgorithm

        again = LDAAlgorithm(sample_params).train(sample_documents)

        assert np.allclose(
            again.model.topic_term_matrix(), trained_bundle.model.topic_term_matrix()
        )


class TestPersistedPipeline:
    """Train, save, reload in a new pipeline and predict."""

    def test_local_round_trip(self, tmp_path, sample_documents):
        from lda_service.src.interfaces import DocumentSource
        from lda_service.src.models import TextDocument
        from lda_service.src.pipeline import TopicPipeline

        class ListSource(DocumentSource):
            def fetch_documents(self):
                return [TextDocument(text=text) for text in sample_documents]

        config = {
            "lda": {"num_topics": 2, "max_iterations": 30, "seed": 7},
            "storage": {"base_dir": str(tmp_path)},
        }
        TopicPipeline(config).train(ListSource(), "clusters")

        prediction = TopicPipeline(config).predict("clusters", "bake bread with sugar")

        assert prediction.to_dict()["topic_index"] == prediction.topic_index
        assert "bread" in {t.term for terms in prediction.topics.values() for t in terms}
