"""
S3CSVConnector - CSV document source stored in S3.

Reads the object once on first fetch and parses it exactly like
LocalCSVConnector.
"""

import logging
from io import BytesIO
from typing import List, Optional

import boto3
import pandas as pd

from lda_service.src.connectors.local_csv import documents_from_frame
from lda_service.src.interfaces import DocumentSource
from lda_service.src.models import TextDocument

logger = logging.getLogger(__name__)


class S3CSVConnector(DocumentSource):
    """
    Document source backed by a CSV object in S3.

    Args:
        bucket: S3 bucket name
        key: Object key of the CSV file
        text_column: Column holding document text
        id_column: Optional column holding a document identifier
        client: Optional pre-built boto3 S3 client

    Raises (on fetch):
        botocore.exceptions.ClientError: On S3 errors (including NoSuchKey)
    """

    def __init__(
        self,
        bucket: str,
        key: str,
        text_column: str = "text",
        id_column: Optional[str] = None,
        client=None,
    ):
        self.bucket = bucket
        self.key = key
        self.text_column = text_column
        self.id_column = id_column
        self._client = client
        self._df: Optional[pd.DataFrame] = None

    def _load(self) -> pd.DataFrame:
        if self._df is None:
            s3 = self._client or boto3.client("s3")
            response = s3.get_object(Bucket=self.bucket, Key=self.key)
            self._df = pd.read_csv(BytesIO(response["Body"].read()))
            logger.info(f"Downloaded CSV with {len(self._df)} rows from s3://{self.bucket}/{self.key}")
        return self._df

    def fetch_documents(self) -> List[TextDocument]:
        return documents_from_frame(
            self._load(),
            text_column=self.text_column,
            id_column=self.id_column,
            source_name=f"s3://{self.bucket}/{self.key}",
        )

    def close(self) -> None:
        self._df = None
