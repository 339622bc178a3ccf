# services/bundle_introspector.py
"""
Bundle Introspector Service

Opens a PKCS#12 bundle with its passphrase and recovers the certificate,
private key and CA chain. Every failure is reported with the same message so
callers cannot tell a wrong passphrase from a damaged envelope.
"""

import logging

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.serialization import pkcs12

from certificates.exceptions import CryptoFailure
from certificates.types import BundleContents, MaterialKind, Passphrase, Pkcs12Bundle
from services.debug_utils import log_function_call

logger = logging.getLogger(__name__)

EXTRACTION_ERROR = "Could not extract the certificate, key or CA data from the PKCS12 bundle"


class BundleIntrospector:
    """Service to open PKCS#12 bundles"""

    @log_function_call()
    def open(self, bundle: Pkcs12Bundle, passphrase: Passphrase) -> BundleContents:
        """
        Recover the contents of a bundle

        Raises:
            CryptoFailure: wrong passphrase, corrupt envelope, or a bundle that
                does not hold exactly one certificate and one private key
        """
        logger.debug(f"Opening PKCS#12 bundle ({bundle.size} bytes)")

        try:
            loaded = pkcs12.load_pkcs12(bundle.data, passphrase.encode())
        except (ValueError, TypeError, UnsupportedAlgorithm):
            logger.info("PKCS#12 bundle could not be opened")
            raise CryptoFailure(MaterialKind.BUNDLE.field_name, EXTRACTION_ERROR)

        if loaded.key is None or loaded.cert is None:
            logger.info("PKCS#12 bundle does not hold a certificate and key pair")
            raise CryptoFailure(MaterialKind.BUNDLE.field_name, EXTRACTION_ERROR)

        friendly_name = loaded.cert.friendly_name
        contents = BundleContents(
            certificate=loaded.cert.certificate,
            private_key=loaded.key,
            ca_chain=[ca.certificate for ca in loaded.additional_certs],
            friendly_name=friendly_name.decode("utf-8", errors="replace") if friendly_name else None,
        )

        logger.info(f"PKCS#12 bundle opened: {len(contents.ca_chain)} CA certs")
        return contents


# Global instance
bundle_introspector = BundleIntrospector()
