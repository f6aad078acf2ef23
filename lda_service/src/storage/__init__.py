"""
Artifact stores for trained model bundles.

Available stores:
    - LocalArtifactStore: Directory per model id on the local filesystem
    - S3ArtifactStore: Prefix per model id in an S3 bucket
"""

from typing import Any, Dict

from lda_service.src.interfaces import ArtifactStore
from lda_service.src.storage.local_store import LocalArtifactStore
from lda_service.src.storage.s3_store import S3ArtifactStore


def create_store(storage_config: Dict[str, Any]) -> ArtifactStore:
    """
    Build the artifact store named by the ``storage`` config section.

    Raises:
        ValueError: On an unknown backend or a missing S3 bucket
    """
    backend = storage_config.get("backend", "local")
    if backend == "local":
        return LocalArtifactStore(storage_config.get("base_dir", "models"))
    if backend == "s3":
        bucket = storage_config.get("bucket")
        if not bucket:
            raise ValueError("storage.bucket is required for the s3 backend")
        return S3ArtifactStore(bucket, prefix=storage_config.get("prefix", "lda-models"))
    raise ValueError(f"Unknown storage backend: {backend!r}")


__all__ = ["LocalArtifactStore", "S3ArtifactStore", "create_store"]
