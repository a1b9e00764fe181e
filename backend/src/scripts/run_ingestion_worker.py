#!/usr/bin/env python3
"""
Theme Park Wait Times - Ingestion Worker
Polls ThemeParks.wiki for the configured resort and stores ride wait times.

Runs one ingestion immediately, then on an adaptive interval (15 minutes while
rides operate, 30 minutes while the parks are closed), and serves /health for
liveness probes.

Usage:
    python -m scripts.run_ingestion_worker
    python -m scripts.run_ingestion_worker --once
    python -m scripts.run_ingestion_worker --no-health
"""

import argparse
import signal
import sys
import threading
from pathlib import Path

# Add src to path
backend_src = Path(__file__).parent.parent
sys.path.insert(0, str(backend_src.absolute()))

from api.app import create_app
from api.server import start_health_server
from collector.themeparks_wiki_client import ThemeParksWikiClient
from database.connection import db
from database.document_store import DocumentStore
from processor.ingestion_pipeline import IngestionPipeline
from scheduler.adaptive_scheduler import AdaptiveScheduler
from utils.config import (
    THEMEPARKS_API_URL, THEMEPARKS_API_KEY, RESORT_NAME, HEALTH_PORT,
    ConfigurationError
)
from utils.logger import logger


def build_pipeline() -> IngestionPipeline:
    """Wire the API client and the document store into a pipeline."""
    if not THEMEPARKS_API_URL:
        raise ConfigurationError("THEMEPARKS_API_URL is not set")

    if not db.test_connection():
        raise ConfigurationError("Database connection failed")
    db.create_tables()
    client = ThemeParksWikiClient(base_url=THEMEPARKS_API_URL, api_key=THEMEPARKS_API_KEY)
    store = DocumentStore(db.get_engine())
    return IngestionPipeline(client, store, resort_name=RESORT_NAME)


def run_once(pipeline: IngestionPipeline) -> int:
    """Single run for cron-style usage. Returns the process exit code."""
    try:
        result = pipeline.run_once()
    except Exception as e:
        logger.error(f"Ingestion run failed: {e}", exc_info=True)
        return 1

    logger.info(
        f"Ingestion run finished: {len(result.parks)} parks, "
        f"{result.operating_count} operating, persisted={result.persisted}"
    )
    return 0


def run_forever(pipeline: IngestionPipeline, serve_health: bool, port: int) -> int:
    """Start the scheduler (and health server) and block until SIGINT/SIGTERM."""
    shutdown = threading.Event()

    def _signal_handler(signum, frame):
        logger.info(f"Received signal {signum}, initiating shutdown")
        shutdown.set()

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    scheduler = AdaptiveScheduler(pipeline)

    health_server = None
    if serve_health:
        health_server = start_health_server(create_app(scheduler.liveness), port)

    scheduler.start(run_immediately=True)
    try:
        shutdown.wait()
    finally:
        scheduler.stop()
        if health_server is not None:
            health_server.stop()
        pipeline.client.close()
        logger.info("Ingestion worker terminated")
    return 0


def main(argv=None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description='Collect theme park ride wait times')
    parser.add_argument('--once', action='store_true', help='Run a single ingestion and exit')
    parser.add_argument('--no-health', action='store_true', help='Do not serve the health endpoint')
    parser.add_argument('--port', type=int, default=HEALTH_PORT, help='Health server port')
    args = parser.parse_args(argv)

    try:
        pipeline = build_pipeline()
    except ConfigurationError as e:
        logger.error(f"{e}. Exiting.")
        return 1

    if args.once:
        return run_once(pipeline)
    return run_forever(pipeline, serve_health=not args.no_health, port=args.port)


if __name__ == '__main__':
    sys.exit(main())
