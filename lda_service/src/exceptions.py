"""
Error taxonomy for the LDA topic service.

Empty or malformed query text is NOT an error: it vectorizes to an empty
document and flows through prediction normally.
"""


class LDAServiceError(Exception):
    """Base class for all errors raised by the service."""


class TrainingPreconditionError(LDAServiceError):
    """Raised when a training corpus cannot be fitted (empty input, empty vocabulary)."""


class ConsistencyError(LDAServiceError):
    """Raised when model, vocabulary and query vectors disagree with each other."""


class PersistenceError(LDAServiceError):
    """Raised when a model bundle cannot be saved or loaded in full."""

    def __init__(self, message: str, model_id: str = None):
        self.model_id = model_id
        if model_id is not None:
            message = f"[{model_id}] {message}"
        super().__init__(message)
