# services/bundle_assembler.py
"""
Bundle Assembler Service

Builds password-protected PKCS#12 bundles from a certificate, its private key
and an optional CA chain. Envelope cryptography is done by the cryptography
library; this service owns parameter defaults and input checks.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, cast

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import dsa, ec, ed448, ed25519, rsa
from cryptography.hazmat.primitives.serialization import PrivateFormat, pkcs12
from cryptography.hazmat.primitives.serialization.pkcs12 import PBES, PKCS12PrivateKeyTypes

from config import settings
from certificates.exceptions import CryptoFailure
from certificates.types import Passphrase, Pkcs12Bundle
from certificates.validation import validate_private_key_certificate_match
from services.debug_utils import log_function_call

logger = logging.getLogger(__name__)


class Pkcs12Cipher(str, Enum):
    """Encryption schemes for the key and certificate bags"""
    LEGACY = "legacy"   # PBES1 SHA1 + 3DES, SHA1 MAC; readable by old importers
    AES256 = "aes256"   # PBES2 SHA256 + AES-256-CBC, SHA256 MAC


CIPHER_SCHEMES = {
    Pkcs12Cipher.LEGACY: (PBES.PBESv1SHA1And3KeyTripleDESCBC, hashes.SHA1),
    Pkcs12Cipher.AES256: (PBES.PBESv2SHA256AndAES256CBC, hashes.SHA256),
}

SUPPORTED_KEY_TYPES = (
    rsa.RSAPrivateKey,
    dsa.DSAPrivateKey,
    ec.EllipticCurvePrivateKey,
    ed25519.Ed25519PrivateKey,
    ed448.Ed448PrivateKey,
)


@dataclass(frozen=True)
class Pkcs12Options:
    """
    Envelope parameters; a friendly_name of None means the certificate filename

    mac_iterations is range-checked only. The cryptography library picks the
    MAC iteration count itself, so values other than 1 are logged and ignored.
    """
    key_cipher: Pkcs12Cipher = Pkcs12Cipher.LEGACY
    cert_cipher: Pkcs12Cipher = Pkcs12Cipher.LEGACY
    kdf_iterations: int = 2048
    mac_iterations: int = 1
    friendly_name: Optional[str] = None

    @classmethod
    def from_settings(cls) -> "Pkcs12Options":
        cipher = Pkcs12Cipher(settings.PKCS12_CIPHER.lower())
        return cls(
            key_cipher=cipher,
            cert_cipher=cipher,
            kdf_iterations=settings.PKCS12_KDF_ITERATIONS,
            mac_iterations=settings.PKCS12_MAC_ITERATIONS,
        )

    def with_friendly_name(self, name: Optional[str]) -> "Pkcs12Options":
        if self.friendly_name is not None:
            return self
        return replace(self, friendly_name=name or None)


class BundleAssembler:
    """Service to assemble PKCS#12 bundles"""

    def __init__(self, default_options: Optional[Pkcs12Options] = None):
        self.default_options = default_options or Pkcs12Options()

    @log_function_call()
    def assemble(
        self,
        certificate: x509.Certificate,
        private_key,
        chain: List[x509.Certificate],
        passphrase: Passphrase,
        options: Optional[Pkcs12Options] = None,
    ) -> Pkcs12Bundle:
        """
        Create a PKCS#12 bundle

        Args:
            certificate: Leaf certificate
            private_key: Private key matching the certificate
            chain: CA certificates in issuer-to-root order, may be empty
            passphrase: Bundle passphrase
            options: Envelope parameters, defaults to the service defaults

        Returns:
            Pkcs12Bundle holding the DER envelope

        Raises:
            CryptoFailure: the inputs cannot form a bundle
        """
        options = options or self.default_options
        logger.debug(f"Assembling PKCS#12 bundle: {len(chain)} CA certs, options={options}")

        self._check_options(options)
        validated_key = self._check_key(private_key, certificate)

        cipher, mac_hash = CIPHER_SCHEMES[options.key_cipher]
        encryption = (
            PrivateFormat.PKCS12.encryption_builder()
            .kdf_rounds(options.kdf_iterations)
            .key_cert_algorithm(cipher)
            .hmac_hash(mac_hash())
            .build(passphrase.encode())
        )
        name = options.friendly_name.encode("utf-8") if options.friendly_name else None

        try:
            p12_data = pkcs12.serialize_key_and_certificates(
                name=name,
                key=validated_key,
                cert=certificate,
                cas=chain or None,
                encryption_algorithm=encryption,
            )
        except (ValueError, TypeError) as e:
            logger.error(f"PKCS#12 creation rejected by cryptography: {e}")
            raise CryptoFailure(None, "Error generating the PKCS12 structure")

        logger.info(f"Created PKCS#12 bundle ({len(p12_data)} bytes)")
        return Pkcs12Bundle(data=p12_data, source_name=options.friendly_name or "")

    # ===== HELPER METHODS =====

    def _check_options(self, options: Pkcs12Options):
        if options.key_cipher != options.cert_cipher:
            raise CryptoFailure(
                None,
                "Key and certificate encryption must use the same scheme "
                f"(got {options.key_cipher.value} and {options.cert_cipher.value})"
            )
        if options.kdf_iterations < 1 or options.mac_iterations < 1:
            raise CryptoFailure(None, "PKCS12 iteration counts must be at least 1")
        if options.mac_iterations != 1:
            logger.warning(
                f"mac_iterations={options.mac_iterations} is not applied, "
                "the MAC iteration count is chosen by the cryptography library"
            )

    def _check_key(self, private_key, certificate: x509.Certificate) -> PKCS12PrivateKeyTypes:
        """Validate key type is supported by PKCS#12 and matches the certificate"""
        if not isinstance(private_key, SUPPORTED_KEY_TYPES):
            raise CryptoFailure(
                "keyfile",
                f"Private key type {type(private_key).__name__} is not supported for PKCS12 bundles"
            )

        match = validate_private_key_certificate_match(private_key, certificate)
        if not match.is_valid:
            logger.info(f"Key/certificate mismatch: {match.error}")
            raise CryptoFailure("keyfile", "The private key does not match the certificate")

        return cast(PKCS12PrivateKeyTypes, private_key)


# Global instance
bundle_assembler = BundleAssembler(Pkcs12Options.from_settings())
