"""
Vocabulary construction with frequency-rank stopword pruning.

Design:
    - Term counts are a map-then-merge reduce: one Counter per document,
      merged into a corpus-wide Counter
    - Terms are ranked by count descending, ties broken by term ascending
    - The top floor(n_distinct / STOPWORD_DIVISOR) terms are dropped entirely
    - Remaining terms get indices 0..N-1 in ranked order
"""

import logging
from collections import Counter
from typing import Iterable, List, Sequence, Tuple

from lda_service.src.models import Vocabulary

logger = logging.getLogger(__name__)

# Drop the most frequent decile of distinct terms
STOPWORD_DIVISOR = 10


def count_terms(tokens: Sequence[str]) -> Counter:
    """Count term occurrences within one tokenized document."""
    return Counter(tokens)


def merge_term_counts(partials: Iterable[Counter]) -> Counter:
    """Merge per-document term counts into corpus-wide counts."""
    total: Counter = Counter()
    for partial in partials:
        total.update(partial)
    return total


def rank_terms(term_counts: Counter) -> List[Tuple[str, int]]:
    """Sort (term, count) pairs by count descending, then term ascending."""
    return sorted(term_counts.items(), key=lambda item: (-item[1], item[0]))


def build_vocabulary_from_counts(term_counts: Counter) -> Vocabulary:
    """
    Build the vocabulary from already-aggregated term counts.

    Args:
        term_counts: Corpus-wide term -> occurrence count

    Returns:
        Vocabulary of the retained terms in ranked order (may be empty)
    """
    ranked = rank_terms(term_counts)
    num_stopwords = len(ranked) // STOPWORD_DIVISOR
    stopwords = [term for term, _ in ranked[:num_stopwords]]
    vocabulary = Vocabulary(tuple(term for term, _ in ranked[num_stopwords:]))

    logger.info(
        f"Vocabulary built: {len(ranked)} distinct terms, "
        f"{num_stopwords} stopwords dropped, {len(vocabulary)} retained"
    )
    if stopwords:
        logger.debug(f"Stopwords dropped: {stopwords}")

    return vocabulary


def build_vocabulary(tokenized_documents: Iterable[Sequence[str]]) -> Vocabulary:
    """
    Build the vocabulary of a tokenized corpus.

    Args:
        tokenized_documents: Terms of every document

    Returns:
        Vocabulary with dense indices [0, size)
    """
    return build_vocabulary_from_counts(
        merge_term_counts(count_terms(tokens) for tokens in tokenized_documents)
    )
