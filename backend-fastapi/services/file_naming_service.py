# services/file_naming_service.py
"""
File naming service for staged PKCS#12 artifacts.
"""

import itertools
import logging
import re
import secrets

logger = logging.getLogger(__name__)

ARTIFACT_EXTENSION = ".p12"

# <epoch seconds>-<6 digit counter><8 hex chars>.p12
ARTIFACT_NAME_PATTERN = re.compile(r"^(\d+)-(\d{6}[0-9a-f]{8})\.p12$")

_counter = itertools.count()

def generate_artifact_filename(created_at: float) -> str:
    """
    Build an artifact filename from the creation time.

    The seconds timestamp is followed by a per-process counter and a random
    suffix, so requests within the same second in this or another worker
    process get distinct names.
    """
    sequence = next(_counter) % 1_000_000
    filename = f"{int(created_at)}-{sequence:06d}{secrets.token_hex(4)}{ARTIFACT_EXTENSION}"
    logger.debug(f"Generated artifact filename: {filename}")
    return filename

def is_artifact_filename(filename: str) -> bool:
    return bool(ARTIFACT_NAME_PATTERN.match(filename))
