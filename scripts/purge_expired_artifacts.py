#!/usr/bin/env python3
"""
Delete expired PKCS12 bundles from the export directory.

Meant to run from cron next to the API, e.g. every ten minutes:

    */10 * * * * cd /srv/p12-converter && python3 scripts/purge_expired_artifacts.py
"""

import argparse
import logging
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "backend-fastapi"))

from config import settings
from services.artifact_store import ArtifactStore
from utils.logging_utils import configure_logging

logger = logging.getLogger("purge_expired_artifacts")

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Remove PKCS12 artifacts older than the TTL")
    parser.add_argument("--export-dir", default=settings.EXPORT_DIR, help="export root holding the tmp/ directory")
    parser.add_argument("--ttl", type=int, default=settings.ARTIFACT_TTL_SECONDS, help="time-to-live in seconds")
    args = parser.parse_args(argv)

    configure_logging(settings.LOG_LEVEL)
    store = ArtifactStore(export_dir=args.export_dir, ttl_seconds=args.ttl)
    removed = store.purge_expired()
    logger.info(f"Removed {removed} expired artifacts, {store.count_artifacts()} remaining")
    return 0

if __name__ == "__main__":
    sys.exit(main())
