"""
Document source implementations for the LDA topic service.

Available connectors:
    - LocalCSVConnector: Local CSV files
    - S3CSVConnector: CSV objects in S3
"""

from lda_service.src.connectors.local_csv import LocalCSVConnector
from lda_service.src.connectors.s3_connector import S3CSVConnector

__all__ = ["LocalCSVConnector", "S3CSVConnector"]
