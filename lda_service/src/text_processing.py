"""
Tokenizer for raw documents.

Rules:
    - lowercase the whole text
    - split on runs of whitespace
    - keep tokens longer than MIN_TERM_LENGTH - 1 characters that are made
      only of alphabetic (Unicode letter) characters
    - keep order and duplicates (counted later by the vectorizer)
"""

from typing import List

# Terms must be strictly longer than 3 characters
MIN_TERM_LENGTH = 4


def is_eligible_term(token: str) -> bool:
    """Whether a lowercased token may become a vocabulary term."""
    return len(token) >= MIN_TERM_LENGTH and token.isalpha()


def tokenize(text: str) -> List[str]:
    """
    Turn a raw document into its sequence of eligible terms.

    Args:
        text: Raw document text. None is treated as empty.

    Returns:
        Lowercased terms in document order (may be empty)
    """
    if not text:
        return []
    return [token for token in str(text).lower().split() if is_eligible_term(token)]
