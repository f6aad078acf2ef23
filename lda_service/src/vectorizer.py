"""
Bag-of-words vectorization against a fixed vocabulary.
"""

from collections import Counter
from typing import Sequence

from lda_service.src.models import DocumentVector, Vocabulary


def vectorize(tokens: Sequence[str], vocabulary: Vocabulary) -> DocumentVector:
    """
    Count in-vocabulary terms of one document.

    Out-of-vocabulary tokens are dropped silently.

    Args:
        tokens: Tokenized document
        vocabulary: Vocabulary defining the vector space

    Returns:
        DocumentVector of dimension len(vocabulary)
    """
    counts = Counter()
    for token in tokens:
        index = vocabulary.index_of(token)
        if index is not None:
            counts[index] += 1.0
    return DocumentVector.from_counts(len(vocabulary), counts)
