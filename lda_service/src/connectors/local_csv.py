"""
LocalCSVConnector - CSV document source for local files.

Design:
    - Simple pandas-based CSV reading
    - One row = one document; the text column is configurable
    - Rows with missing or blank text are skipped (logged), everything else
      is returned in file order
"""

import logging
from typing import List, Optional

import pandas as pd

from lda_service.src.interfaces import DocumentSource
from lda_service.src.models import TextDocument

logger = logging.getLogger(__name__)


def documents_from_frame(
    df: pd.DataFrame,
    text_column: str = "text",
    id_column: Optional[str] = None,
    source_name: str = "frame",
) -> List[TextDocument]:
    """
    Convert DataFrame rows into TextDocuments.

    Args:
        df: Frame holding one document per row
        text_column: Column with the document text
        id_column: Optional column with a source identifier
        source_name: Used in log and error messages

    Returns:
        TextDocuments in row order, skipping rows without text

    Raises:
        ValueError: If a named column is missing
    """
    for column in (text_column, id_column):
        if column is not None and column not in df.columns:
            raise ValueError(f"Column '{column}' not found in {source_name}")

    documents = []
    skipped = 0
    for _, row in df.iterrows():
        text = row[text_column]
        if pd.isna(text) or not str(text).strip():
            skipped += 1
            continue
        source_id = None
        if id_column is not None and not pd.isna(row[id_column]):
            source_id = str(row[id_column])
        documents.append(TextDocument(text=str(text), source_id=source_id))

    if skipped:
        logger.warning(f"Skipped {skipped} rows without text in {source_name}")
    logger.info(f"Loaded {len(documents)} documents from {source_name}")
    return documents


class LocalCSVConnector(DocumentSource):
    """
    Local CSV document source.

    Args:
        csv_path: Path to the CSV file
        text_column: Column holding document text (default: "text")
        id_column: Optional column holding a document identifier
    """

    def __init__(self, csv_path: str, text_column: str = "text", id_column: Optional[str] = None):
        """
        Raises:
            FileNotFoundError: If CSV file does not exist
        """
        self.csv_path = csv_path
        self.text_column = text_column
        self.id_column = id_column

        try:
            self._df = pd.read_csv(csv_path)
        except FileNotFoundError:
            raise FileNotFoundError(f"CSV file not found: {csv_path}")

        logger.info(f"Loaded CSV with {len(self._df)} rows from {csv_path}")

    def fetch_documents(self) -> List[TextDocument]:
        return documents_from_frame(
            self._df,
            text_column=self.text_column,
            id_column=self.id_column,
            source_name=self.csv_path,
        )
