"""
LDAModelBundle - a trained topic model together with the space it lives in.

The model's term indices mean nothing without the vocabulary that produced
the training vectors, and the corpus is needed to map document ids back to
text. The three are therefore saved and loaded as one unit.

Artifacts per model id:
    - model.joblib      Pickled TopicModel (joblib)
    - corpus.json       doc_id, source_id, raw text and sparse vector per document
    - vocabulary.json   Ordered term list (index = position)
    - manifest.json     Artifact checksums + params, written last
"""

import hashlib
import io
import json
import logging
import pickle
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List

import joblib

from lda_service.src.config import AlgorithmParams
from lda_service.src.exceptions import ConsistencyError, PersistenceError
from lda_service.src.interfaces import MANIFEST_NAME, ArtifactStore, TopicModel
from lda_service.src.models import Corpus, CorpusDocument, DocumentVector, Vocabulary

logger = logging.getLogger(__name__)

MODEL_ARTIFACT = "model.joblib"
CORPUS_ARTIFACT = "corpus.json"
VOCABULARY_ARTIFACT = "vocabulary.json"
BUNDLE_ARTIFACTS = (MODEL_ARTIFACT, CORPUS_ARTIFACT, VOCABULARY_ARTIFACT)

FORMAT_VERSION = 1


def _sha256(payload: bytes) -> str:
    return hashlib.sha256(payload).hexdigest()


def corpus_to_records(corpus: Corpus) -> List[Dict[str, Any]]:
    return [
        {
            "doc_id": document.doc_id,
            "source_id": document.source_id,
            "text": document.text,
            "size": document.vector.size,
            "indices": list(document.vector.indices),
            "values": list(document.vector.values),
        }
        for document in corpus
    ]


def corpus_from_records(records: List[Dict[str, Any]]) -> Corpus:
    return Corpus(
        documents=[
            CorpusDocument(
                doc_id=int(record["doc_id"]),
                text=record["text"],
                vector=DocumentVector(
                    size=int(record["size"]),
                    indices=tuple(record["indices"]),
                    values=tuple(record["values"]),
                ),
                source_id=record.get("source_id"),
            )
            for record in records
        ]
    )


@dataclass
class LDAModelBundle:
    """
    Trained model + training corpus (with text) + vocabulary.

    Attributes:
        model: Fitted TopicModel
        corpus: Vectorized training corpus including raw text
        vocabulary: Vocabulary the corpus was vectorized with
        params: Parameters the model was trained with
    """

    model: TopicModel
    corpus: Corpus
    vocabulary: Vocabulary
    params: AlgorithmParams = field(default_factory=AlgorithmParams)

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """
        Check that model, corpus and vocabulary share one vector space.

        Raises:
            ConsistencyError: On any dimension mismatch
        """
        vocab_size = len(self.vocabulary)
        if self.model.vocab_size != vocab_size:
            raise ConsistencyError(
                f"Model vocabulary size {self.model.vocab_size} != vocabulary size {vocab_size}"
            )
        try:
            dimension = self.corpus.dimension()
        except ValueError as e:
            raise ConsistencyError(str(e)) from e
        if dimension is not None and dimension != vocab_size:
            raise ConsistencyError(
                f"Corpus vector dimension {dimension} != vocabulary size {vocab_size}"
            )

    def to_artifacts(self) -> Dict[str, bytes]:
        """Serialize the bundle; manifest.json is the last entry."""
        model_buffer = io.BytesIO()
        joblib.dump(self.model, model_buffer)

        artifacts = {
            MODEL_ARTIFACT: model_buffer.getvalue(),
            CORPUS_ARTIFACT: json.dumps(corpus_to_records(self.corpus)).encode("utf-8"),
            VOCABULARY_ARTIFACT: json.dumps({"terms": list(self.vocabulary.terms)}).encode("utf-8"),
        }

        manifest = {
            "format_version": FORMAT_VERSION,
            "created_at": datetime.now(timezone.utc).isoformat(),
            "artifacts": {name: _sha256(payload) for name, payload in artifacts.items()},
            "params": self.params.to_dict(),
            "n_documents": len(self.corpus),
            "vocab_size": len(self.vocabulary),
            "n_topics": self.model.n_topics,
        }
        artifacts[MANIFEST_NAME] = json.dumps(manifest, indent=2).encode("utf-8")
        return artifacts

    def save(self, store: ArtifactStore, model_id: str) -> bool:
        """
        Save all artifacts under ``model_id``.

        Returns:
            True on success

        Raises:
            PersistenceError: If the store cannot write the bundle
        """
        try:
            artifacts = self.to_artifacts()
        except (pickle.PicklingError, TypeError, ValueError) as e:
            raise PersistenceError(f"Failed to serialize bundle: {e}", model_id) from e

        store.write_artifacts(model_id, artifacts)
        logger.info(
            f"Saved model bundle {model_id}: {len(self.corpus)} docs, "
            f"{len(self.vocabulary)} terms, {self.model.n_topics} topics"
        )
        return True

    @classmethod
    def load(cls, store: ArtifactStore, model_id: str) -> "LDAModelBundle":
        """
        Load a complete bundle saved under ``model_id``.

        Raises:
            PersistenceError: If the manifest or any artifact is missing or
                              corrupt, or the pieces do not fit together
        """
        manifest_bytes = store.read_artifacts(model_id, [MANIFEST_NAME])[MANIFEST_NAME]
        try:
            manifest = json.loads(manifest_bytes.decode("utf-8"))
            checksums = dict(manifest["artifacts"])
        except (ValueError, KeyError, TypeError) as e:
            raise PersistenceError(f"Unreadable manifest: {e}", model_id) from e

        missing = [name for name in BUNDLE_ARTIFACTS if name not in checksums]
        if missing:
            raise PersistenceError(f"Manifest lists no {missing}", model_id)

        artifacts = store.read_artifacts(model_id, BUNDLE_ARTIFACTS)
        for name, payload in artifacts.items():
            if _sha256(payload) != checksums[name]:
                raise PersistenceError(f"Checksum mismatch for {name}", model_id)

        try:
            model = joblib.load(io.BytesIO(artifacts[MODEL_ARTIFACT]))
            corpus = corpus_from_records(json.loads(artifacts[CORPUS_ARTIFACT].decode("utf-8")))
            vocabulary = Vocabulary(tuple(json.loads(artifacts[VOCABULARY_ARTIFACT].decode("utf-8"))["terms"]))
            params = AlgorithmParams(**manifest.get("params", {}))
        except (pickle.UnpicklingError, EOFError, ValueError, KeyError, TypeError) as e:
            raise PersistenceError(f"Failed to deserialize bundle: {e}", model_id) from e

        if not isinstance(model, TopicModel):
            raise PersistenceError(f"{MODEL_ARTIFACT} does not hold a TopicModel", model_id)

        try:
            bundle = cls(model=model, corpus=corpus, vocabulary=vocabulary, params=params)
        except ConsistencyError as e:
            raise PersistenceError(f"Inconsistent bundle: {e}", model_id) from e

        logger.info(
            f"Loaded model bundle {model_id}: {len(corpus)} docs, "
            f"{len(vocabulary)} terms, {model.n_topics} topics"
        )
        return bundle
