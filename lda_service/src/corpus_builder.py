"""
CorpusBuilder - raw documents -> (Corpus, Vocabulary).

Stages:
    1. Tokenize every document (per-document, parallelizable)
    2. Reduce term counts into one vocabulary (single synchronization point)
    3. Vectorize every document against that vocabulary (parallelizable)
    4. Tag vectors with sequential ids matching input order

The same builder serves training corpora and single-document queries. A query
passes the training vocabulary in, so its vector lives in the space the model
was fitted on; stage 2 is skipped in that case.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

from lda_service.src.models import Corpus, CorpusDocument, Vocabulary
from lda_service.src.text_processing import tokenize
from lda_service.src.vectorizer import vectorize
from lda_service.src.vocabulary import build_vocabulary

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def _ordered_map(func: Callable[[T], R], items: Sequence[T], max_workers: Optional[int]) -> List[R]:
    """Apply ``func`` to every item, preserving input order."""
    if not max_workers or max_workers <= 1 or len(items) <= 1:
        return [func(item) for item in items]
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        return list(pool.map(func, items))


def build_corpus(
    documents: Sequence[str],
    vocabulary: Optional[Vocabulary] = None,
    max_workers: Optional[int] = None,
    source_ids: Optional[Sequence[Optional[str]]] = None,
) -> Tuple[Corpus, Vocabulary]:
    """
    Build a vectorized corpus from raw documents.

    Args:
        documents: Raw document texts; ids are assigned by position
        vocabulary: Existing vocabulary to vectorize against. If None, a new
                    vocabulary is built from ``documents``.
        max_workers: Thread count for the per-document stages (None or 1
                     runs sequentially)
        source_ids: Optional source record identifiers aligned with
                    ``documents``

    Returns:
        Tuple of (Corpus, Vocabulary used for vectorization)

    Raises:
        ValueError: If ``source_ids`` and ``documents`` differ in length
    """
    if source_ids is None:
        source_ids = [None] * len(documents)
    elif len(source_ids) != len(documents):
        raise ValueError(
            f"Got {len(source_ids)} source ids for {len(documents)} documents"
        )

    texts = ["" if text is None else str(text) for text in documents]
    tokenized = _ordered_map(tokenize, texts, max_workers)

    if vocabulary is None:
        vocabulary = build_vocabulary(tokenized)

    vectors = _ordered_map(lambda tokens: vectorize(tokens, vocabulary), tokenized, max_workers)

    corpus = Corpus(
        documents=[
            CorpusDocument(doc_id=doc_id, text=text, vector=vector, source_id=source_id)
            for doc_id, (text, vector, source_id) in enumerate(zip(texts, vectors, source_ids))
        ]
    )

    logger.debug(
        f"Built corpus: {len(corpus)} documents over {len(vocabulary)} terms"
    )
    return corpus, vocabulary
