"""
Data models for the LDA topic service.

These dataclasses define the contract between pipeline components.

Design Philosophy:
    - Raw text in -> sparse count vectors -> topic distributions out
    - Vocabulary and vectors are immutable once built (no shared mutable state
      between documents or between concurrent queries)
    - Vectors carry their dimension explicitly so a query vector can be checked
      against the space a model was trained in
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, NamedTuple, Optional, Tuple

import numpy as np
from scipy import sparse


@dataclass
class TextDocument:
    """
    Single raw training record.

    Attributes:
        text: Free text of the document
        source_id: Identifier from the originating data source (optional;
                   stored on the corpus document, corpus ids stay positional)
    """

    text: str
    source_id: Optional[str] = None


@dataclass(frozen=True)
class Vocabulary:
    """
    Ordered, duplicate-free mapping term -> index.

    Index i is the position of the term in ``terms``, so indices always form
    the dense range [0, len(terms)).
    """

    terms: Tuple[str, ...] = ()
    _index: Dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        terms = tuple(self.terms)
        index: Dict[str, int] = {}
        for position, term in enumerate(terms):
            if term in index:
                raise ValueError(f"Duplicate vocabulary term: {term!r}")
            index[term] = position
        object.__setattr__(self, "terms", terms)
        object.__setattr__(self, "_index", index)

    def __len__(self) -> int:
        return len(self.terms)

    def __contains__(self, term: object) -> bool:
        return term in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self.terms)

    @property
    def size(self) -> int:
        return len(self.terms)

    def index_of(self, term: str) -> Optional[int]:
        """Return the index of ``term`` or None when it is out of vocabulary."""
        return self._index.get(term)

    def term_at(self, index: int) -> str:
        if not 0 <= index < len(self.terms):
            raise IndexError(f"Vocabulary index {index} out of range [0, {len(self.terms)})")
        return self.terms[index]

    def as_dict(self) -> Dict[str, int]:
        return dict(self._index)

    def inverse(self) -> Dict[int, str]:
        return dict(enumerate(self.terms))


@dataclass(frozen=True)
class DocumentVector:
    """
    Sparse count vector over a vocabulary.

    Attributes:
        size: Dimension of the vector (the vocabulary size)
        indices: Populated indices, strictly increasing, each in [0, size)
        values: Non-negative counts aligned with ``indices``
    """

    size: int
    indices: Tuple[int, ...] = ()
    values: Tuple[float, ...] = ()

    def __post_init__(self):
        indices = tuple(int(i) for i in self.indices)
        values = tuple(float(v) for v in self.values)

        if self.size < 0:
            raise ValueError(f"Vector size must be non-negative, got {self.size}")
        if len(indices) != len(values):
            raise ValueError(
                f"indices and values differ in length ({len(indices)} != {len(values)})"
            )
        for previous, current in zip(indices, indices[1:]):
            if current <= previous:
                raise ValueError("Vector indices must be strictly increasing")
        if indices and (indices[0] < 0 or indices[-1] >= self.size):
            raise ValueError(f"Vector index out of range [0, {self.size})")
        if any(v < 0 for v in values):
            raise ValueError("Vector values must be non-negative")

        object.__setattr__(self, "indices", indices)
        object.__setattr__(self, "values", values)

    @classmethod
    def from_counts(cls, size: int, counts: Mapping[int, float]) -> "DocumentVector":
        ordered = sorted(counts.items())
        return cls(
            size=size,
            indices=tuple(i for i, _ in ordered),
            values=tuple(v for _, v in ordered),
        )

    @property
    def nnz(self) -> int:
        return len(self.indices)

    def as_dict(self) -> Dict[int, float]:
        return dict(zip(self.indices, self.values))

    def to_dense(self) -> np.ndarray:
        dense = np.zeros(self.size, dtype=np.float64)
        if self.indices:
            dense[list(self.indices)] = self.values
        return dense


@dataclass(frozen=True)
class CorpusDocument:
    """
    One vectorized document with its positional id and the raw text it came from.

    ``source_id`` is the identifier of the originating record, when the
    document source provides one.
    """

    doc_id: int
    text: str
    vector: DocumentVector
    source_id: Optional[str] = None


@dataclass
class Corpus:
    """
    Ordered collection of vectorized documents.

    Ids are assigned 0..n-1 in input order by the corpus builder.
    """

    documents: List[CorpusDocument] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.documents)

    def __iter__(self) -> Iterator[CorpusDocument]:
        return iter(self.documents)

    def doc_ids(self) -> List[int]:
        return [d.doc_id for d in self.documents]

    def vectors(self) -> List[Tuple[int, DocumentVector]]:
        """Return (doc_id, vector) pairs in corpus order."""
        return [(d.doc_id, d.vector) for d in self.documents]

    def text_for(self, doc_id: int) -> str:
        """
        Look up the raw text of a document by id.

        Raises:
            KeyError: If no document carries ``doc_id``
        """
        for document in self.documents:
            if document.doc_id == doc_id:
                return document.text
        raise KeyError(f"No document with id {doc_id}")

    def source_id_for(self, doc_id: int) -> Optional[str]:
        """Source record identifier of a document, or None if the source gave none."""
        for document in self.documents:
            if document.doc_id == doc_id:
                return document.source_id
        raise KeyError(f"No document with id {doc_id}")

    def dimension(self) -> Optional[int]:
        """
        Shared vector dimension of the corpus, or None for an empty corpus.

        Raises:
            ValueError: If documents disagree on their dimension
        """
        sizes = {d.vector.size for d in self.documents}
        if not sizes:
            return None
        if len(sizes) > 1:
            raise ValueError(f"Corpus vectors have mixed dimensions: {sorted(sizes)}")
        return sizes.pop()

    def to_csr_matrix(self, n_features: Optional[int] = None) -> sparse.csr_matrix:
        """
        Stack the document vectors into a (n_docs, n_features) CSR matrix.

        Args:
            n_features: Column count. Defaults to the corpus dimension.
        """
        if n_features is None:
            n_features = self.dimension() or 0

        indptr = [0]
        indices: List[int] = []
        data: List[float] = []
        for document in self.documents:
            indices.extend(document.vector.indices)
            data.extend(document.vector.values)
            indptr.append(len(indices))

        return sparse.csr_matrix(
            (
                np.asarray(data, dtype=np.float64),
                np.asarray(indices, dtype=np.int64),
                np.asarray(indptr, dtype=np.int64),
            ),
            shape=(len(self.documents), n_features),
        )


class TopicTerm(NamedTuple):
    """A vocabulary term and its weight within a topic."""

    term: str
    weight: float


@dataclass
class Prediction:
    """
    Result of predicting the dominant topic for one query.

    Attributes:
        topic_index: Index of the best-matching topic
        best: Ranked terms of the best-matching topic
        topics: topic index -> ranked terms, for every topic of the model
        distribution: Topic membership weights inferred for the query
    """

    topic_index: int
    best: List[TopicTerm]
    topics: Dict[int, List[TopicTerm]]
    distribution: np.ndarray

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable view of the prediction."""
        return {
            "topic_index": self.topic_index,
            "topic": [{"term": t.term, "weight": t.weight} for t in self.best],
            "topics": {
                str(index): [{"term": t.term, "weight": t.weight} for t in terms]
                for index, terms in sorted(self.topics.items())
            },
            "distribution": [float(w) for w in self.distribution],
        }
