"""
LDA Topic Service CLI

Subcommands:
    train    Build a corpus from a CSV (local or S3), fit LDA, save the bundle
    predict  Load a saved bundle and print the best topic for a query as JSON

Usage:
    lda-topics train --csv data/docs.csv --model-id news-v1
    lda-topics train --s3-bucket my-bucket --s3-key corpora/docs.csv --model-id news-v1
    lda-topics predict --model-id news-v1 --text "central bank raises rates"

Environment Variables:
    LDA_CONFIG_PATH: YAML config file (overridden by --config)
    LDA_STORAGE_DIR: Local storage directory (overrides storage.base_dir)
    LDA_S3_BUCKET: Store bundles in this S3 bucket instead of locally
    LOG_LEVEL: Logging level (default: INFO)
"""

import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError
from dotenv import load_dotenv

from lda_service.src.config import load_config
from lda_service.src.connectors import LocalCSVConnector, S3CSVConnector
from lda_service.src.exceptions import LDAServiceError
from lda_service.src.pipeline import TopicPipeline

logger = logging.getLogger(__name__)


def setup_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or os.environ.get("LOG_LEVEL", "INFO")).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def resolve_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load config from --config or LDA_CONFIG_PATH, then apply storage env overrides."""
    config = load_config(config_path or os.environ.get("LDA_CONFIG_PATH"))

    storage_dir = os.environ.get("LDA_STORAGE_DIR")
    if storage_dir:
        config["storage"]["backend"] = "local"
        config["storage"]["base_dir"] = storage_dir

    bucket = os.environ.get("LDA_S3_BUCKET")
    if bucket:
        config["storage"]["backend"] = "s3"
        config["storage"]["bucket"] = bucket

    return config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lda-topics",
        description="Train LDA topic models and predict topics for text.",
    )
    parser.add_argument("--config", "-c", help="YAML config file")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, ...)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    train = subparsers.add_parser("train", help="Train and save a model bundle")
    source = train.add_mutually_exclusive_group(required=True)
    source.add_argument("--csv", help="Local CSV file with one document per row")
    source.add_argument("--s3-key", help="Key of a CSV object in --s3-bucket")
    train.add_argument("--s3-bucket", help="Bucket holding --s3-key")
    train.add_argument("--model-id", "-m", required=True, help="Identifier to save the bundle under")
    train.add_argument("--text-column", help="CSV column holding document text")
    train.add_argument("--id-column", help="CSV column holding a document identifier")

    predict = subparsers.add_parser("predict", help="Predict the best topic for a text")
    predict.add_argument("--model-id", "-m", required=True, help="Identifier of a saved bundle")
    predict.add_argument("--text", "-t", required=True, help="Query text")

    return parser


def run_train(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    text_column = args.text_column or config["source"]["text_column"]
    id_column = args.id_column or config["source"]["id_column"]

    if args.csv:
        source = LocalCSVConnector(args.csv, text_column=text_column, id_column=id_column)
    else:
        if not args.s3_bucket:
            logger.error("--s3-bucket is required with --s3-key")
            return 2
        source = S3CSVConnector(args.s3_bucket, args.s3_key, text_column=text_column, id_column=id_column)

    bundle = TopicPipeline(config).train(source, args.model_id)
    print(json.dumps({
        "model_id": args.model_id,
        "n_documents": len(bundle.corpus),
        "vocab_size": len(bundle.vocabulary),
        "n_topics": bundle.model.n_topics,
    }))
    return 0


def run_predict(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    prediction = TopicPipeline(config).predict(args.model_id, args.text)
    print(json.dumps(prediction.to_dict(), indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        config = resolve_config(args.config)
        if args.command == "train":
            return run_train(args, config)
        return run_predict(args, config)
    except (LDAServiceError, FileNotFoundError, ValueError, ClientError, BotoCoreError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
