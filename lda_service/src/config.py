"""
Configuration for the LDA topic service.

Configuration is a nested dict loaded from YAML and deep-merged over
DEFAULT_CONFIG, so a config file only needs the keys it changes:

    lda:
      num_topics: 10
      max_iterations: 20
      doc_concentration: null     # null or negative = automatic (1 / num_topics)
      topic_concentration: null   # null or negative = automatic (1 / num_topics)
      seed: 13457
      terms_per_topic: 10
    corpus:
      max_workers: null
    storage:
      backend: local              # "local" or "s3"
      base_dir: models
      bucket: null
      prefix: lda-models
    source:
      text_column: text
      id_column: null
"""

import copy
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

logger = logging.getLogger(__name__)

# Fixed seed so repeated training runs on the same corpus agree
DEFAULT_SEED = 13457

DEFAULT_CONFIG: Dict[str, Any] = {
    "lda": {
        "num_topics": 10,
        "max_iterations": 20,
        "doc_concentration": None,
        "topic_concentration": None,
        "seed": DEFAULT_SEED,
        "terms_per_topic": 10,
    },
    "corpus": {
        "max_workers": None,
    },
    "storage": {
        "backend": "local",
        "base_dir": "models",
        "bucket": None,
        "prefix": "lda-models",
    },
    "source": {
        "text_column": "text",
        "id_column": None,
    },
}


def merge_config(overrides: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Merge provided config with defaults (one level of nesting)."""
    merged = copy.deepcopy(DEFAULT_CONFIG)
    for key, value in (overrides or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load a YAML config file and merge it over the defaults.

    Args:
        path: YAML file path. If None, defaults are returned.

    Returns:
        Complete configuration dict

    Raises:
        FileNotFoundError: If ``path`` does not exist
        ValueError: If the file does not hold a mapping
    """
    if path is None:
        logger.info("No config file given, using defaults")
        return merge_config(None)

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        loaded = yaml.safe_load(f) or {}

    if not isinstance(loaded, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")

    logger.info(f"Loaded config from: {path}")
    return merge_config(loaded)


def _resolve_concentration(value: Optional[float]) -> Optional[float]:
    if value is None or value < 0:
        return None
    return float(value)


@dataclass(frozen=True)
class AlgorithmParams:
    """
    LDA training and prediction parameters.

    Attributes:
        num_topics: Number of topics (> 0)
        max_iterations: Maximum fitting iterations (> 0)
        doc_concentration: Document-topic Dirichlet prior; None or negative
                           means automatic
        topic_concentration: Topic-term Dirichlet prior; None or negative
                             means automatic
        seed: Random seed for fitting
        terms_per_topic: Number of ranked terms reported per topic (> 0)
    """

    num_topics: int = 10
    max_iterations: int = 20
    doc_concentration: Optional[float] = None
    topic_concentration: Optional[float] = None
    seed: int = DEFAULT_SEED
    terms_per_topic: int = 10

    def __post_init__(self):
        if self.num_topics <= 0:
            raise ValueError(f"num_topics must be > 0, got {self.num_topics}")
        if self.max_iterations <= 0:
            raise ValueError(f"max_iterations must be > 0, got {self.max_iterations}")
        if self.terms_per_topic <= 0:
            raise ValueError(f"terms_per_topic must be > 0, got {self.terms_per_topic}")
        for name in ("doc_concentration", "topic_concentration"):
            if getattr(self, name) == 0:
                raise ValueError(f"{name} must be positive, or negative/null for automatic")

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "AlgorithmParams":
        """Build params from the ``lda`` section of a config dict."""
        lda_config = {**DEFAULT_CONFIG["lda"], **config.get("lda", {})}
        return cls(
            num_topics=int(lda_config["num_topics"]),
            max_iterations=int(lda_config["max_iterations"]),
            doc_concentration=lda_config["doc_concentration"],
            topic_concentration=lda_config["topic_concentration"],
            seed=int(lda_config["seed"]),
            terms_per_topic=int(lda_config["terms_per_topic"]),
        )

    @property
    def resolved_doc_concentration(self) -> Optional[float]:
        return _resolve_concentration(self.doc_concentration)

    @property
    def resolved_topic_concentration(self) -> Optional[float]:
        return _resolve_concentration(self.topic_concentration)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
