# certificates/analyzer.py
# Turns bundle contents into the display summary returned to callers

import logging
from typing import Any, Dict, List

from cryptography import x509

from .extractors.certificate import extract_certificate_metadata
from .extractors.private_key import extract_private_key_metadata
from .types import BundleContents

logger = logging.getLogger(__name__)

def summarize_chain(chain: List[x509.Certificate]) -> List[Dict[str, Any]]:
    summaries = []
    for position, ca_cert in enumerate(chain, start=1):
        metadata = extract_certificate_metadata(ca_cert)
        metadata["chain_position"] = position
        summaries.append(metadata)
    return summaries

def summarize_bundle_contents(contents: BundleContents) -> Dict[str, Any]:
    """
    Build the {certificate, private_key, ca_chain} summary of a bundle

    The friendly name stored in the bundle is reported alongside, as are
    counts that let a caller check the bundle holds one key pair plus chain.
    """
    logger.debug("=== BUNDLE SUMMARY ===")

    summary = {
        "friendly_name": contents.friendly_name,
        "certificate": extract_certificate_metadata(contents.certificate),
        "private_key": extract_private_key_metadata(contents.private_key),
        "ca_chain": summarize_chain(contents.ca_chain),
        "ca_count": len(contents.ca_chain),
    }

    logger.info(
        f"Bundle summary: subject={summary['certificate']['subject']}, "
        f"key={summary['private_key']['algorithm']}, CA certs={summary['ca_count']}"
    )
    return summary
