"""
S3ArtifactStore - model bundles as objects in an S3 bucket.

Layout:
    s3://{bucket}/{prefix}/{model_id}/manifest.json
    s3://{bucket}/{prefix}/{model_id}/<artifact objects>

S3 has no multi-object transaction, so completeness is carried by the
manifest: the old manifest is deleted before any artifact is overwritten and
the new one is uploaded last. A bundle without a manifest does not exist.
"""

import logging
from typing import Dict, Iterable, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from lda_service.src.exceptions import PersistenceError
from lda_service.src.interfaces import MANIFEST_NAME, ArtifactStore

logger = logging.getLogger(__name__)


class S3ArtifactStore(ArtifactStore):
    """
    S3-backed artifact store.

    Args:
        bucket: S3 bucket name
        prefix: Key prefix under which model ids are stored
        client: Optional pre-built boto3 S3 client
    """

    def __init__(self, bucket: str, prefix: str = "lda-models", client=None):
        self.bucket = bucket
        self.prefix = prefix.strip("/")
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client("s3")
        return self._client

    def _key(self, model_id: str, name: str) -> str:
        if not model_id or "/" in model_id:
            raise PersistenceError(f"Invalid model id: {model_id!r}", model_id)
        if self.prefix:
            return f"{self.prefix}/{model_id}/{name}"
        return f"{model_id}/{name}"

    def write_artifacts(self, model_id: str, artifacts: Dict[str, bytes]) -> None:
        manifest_key = self._key(model_id, MANIFEST_NAME)
        ordered = [name for name in artifacts if name != MANIFEST_NAME]
        if MANIFEST_NAME in artifacts:
            ordered.append(MANIFEST_NAME)

        try:
            self.client.delete_object(Bucket=self.bucket, Key=manifest_key)
            for name in ordered:
                self.client.put_object(
                    Bucket=self.bucket,
                    Key=self._key(model_id, name),
                    Body=artifacts[name],
                )
        except (ClientError, BotoCoreError) as e:
            raise PersistenceError(
                f"Failed to upload artifacts to s3://{self.bucket}/{self.prefix}: {e}", model_id
            ) from e

        logger.info(f"Uploaded {len(ordered)} artifacts to s3://{self.bucket}/{self._key(model_id, '')}")

    def read_artifacts(self, model_id: str, names: Iterable[str]) -> Dict[str, bytes]:
        artifacts = {}
        for name in names:
            key = self._key(model_id, name)
            try:
                response = self.client.get_object(Bucket=self.bucket, Key=key)
                artifacts[name] = response["Body"].read()
            except ClientError as e:
                error_code = e.response.get("Error", {}).get("Code", "")
                if error_code in ("404", "NoSuchKey"):
                    raise PersistenceError(f"Missing artifact: s3://{self.bucket}/{key}", model_id) from e
                raise PersistenceError(f"Failed to download s3://{self.bucket}/{key}: {e}", model_id) from e
            except BotoCoreError as e:
                raise PersistenceError(f"Failed to download s3://{self.bucket}/{key}: {e}", model_id) from e

        logger.info(f"Downloaded {len(artifacts)} artifacts for model {model_id}")
        return artifacts

    def exists(self, model_id: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket, Key=self._key(model_id, MANIFEST_NAME))
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "")
            if error_code in ("404", "NoSuchKey", "NotFound"):
                return False
            raise PersistenceError(f"Failed to check bundle in s3://{self.bucket}: {e}", model_id) from e
        return True
